from django.test import SimpleTestCase

from apps.catalog.services.media import (
    build_media,
    build_swatches,
    image_for_color,
    infer_media_type,
    is_placeholder,
    resolve_display_media,
    swatch_for,
)
from apps.catalog.services.records import MediaRecord

GENERAL_1 = MediaRecord(url='https://cdn.example.com/1.jpg')
GENERAL_2 = MediaRecord(url='https://cdn.example.com/2.mp4', type='video')
RED = MediaRecord(url='https://cdn.example.com/red.jpg', color='Red')
BLUE = MediaRecord(url='https://cdn.example.com/blue.jpg', color='Blue')
RED_VIDEO = MediaRecord(url='https://cdn.example.com/red.mp4', type='video', color='Red')


class ResolveDisplayMediaTests(SimpleTestCase):
    def test_colour_without_tagged_media_shows_general_items(self):
        media = [GENERAL_1, GENERAL_2]
        self.assertEqual(resolve_display_media(media, 'Red'), [GENERAL_1, GENERAL_2])

    def test_all_colours_shows_every_item_in_order(self):
        media = [RED, GENERAL_1, BLUE]
        self.assertEqual(resolve_display_media(media, ''), [RED, GENERAL_1, BLUE])

    def test_tagged_colour_shows_only_its_items(self):
        media = [GENERAL_1, RED, BLUE, RED_VIDEO]
        self.assertEqual(resolve_display_media(media, 'Red'), [RED, RED_VIDEO])

    def test_colour_with_no_general_items_is_empty(self):
        self.assertEqual(resolve_display_media([RED], 'Blue'), [])

    def test_input_is_not_modified(self):
        media = [GENERAL_1, RED]
        resolve_display_media(media, 'Red')
        self.assertEqual(media, [GENERAL_1, RED])


class ImageForColorTests(SimpleTestCase):
    def test_prefers_tagged_image(self):
        self.assertEqual(image_for_color([GENERAL_1, RED_VIDEO, RED], 'Red'), RED.url)

    def test_falls_back_to_first_image(self):
        self.assertEqual(image_for_color([GENERAL_2, GENERAL_1], 'Blue'), GENERAL_1.url)

    def test_no_images_gives_empty_string(self):
        self.assertEqual(image_for_color([GENERAL_2], ''), '')


class InferenceTests(SimpleTestCase):
    def test_video_extensions(self):
        for url in ['a.mp4', 'b.MOV', 'c.avi?x=1', 'https://cdn.example.com/d.webm']:
            with self.subTest(url=url):
                self.assertEqual(infer_media_type(url), 'video')

    def test_legacy_video_upload_path(self):
        self.assertEqual(infer_media_type('https://res.cloudinary.com/demo/video/upload/v1/clip'), 'video')

    def test_everything_else_is_image(self):
        self.assertEqual(infer_media_type('https://cdn.example.com/frame.jpg'), 'image')
        self.assertEqual(infer_media_type(''), 'image')

    def test_placeholder_hosts(self):
        self.assertTrue(is_placeholder('https://picsum.photos/300/200?random=1'))
        self.assertTrue(is_placeholder('https://fastly.picsum.photos/id/1/300'))
        self.assertFalse(is_placeholder('https://cdn.example.com/picsum.photos.jpg'))


class SwatchTests(SimpleTestCase):
    def test_known_names(self):
        self.assertEqual(swatch_for('Red'), '#dc2626')
        self.assertEqual(swatch_for(' gold '), '#d4af37')

    def test_hex_tokens_pass_through(self):
        self.assertEqual(swatch_for('#ABCDEF'), '#abcdef')

    def test_unknown_gives_default(self):
        self.assertEqual(swatch_for('Teal'), '#6b7280')
        self.assertEqual(swatch_for('#zzzzzz'), '#6b7280')

    def test_existing_swatches_are_kept(self):
        swatches = build_swatches(['Red', 'Sea'], {'Sea': '#0e7490'})
        self.assertEqual(swatches, {'Red': '#dc2626', 'Sea': '#0e7490'})


class BuildMediaTests(SimpleTestCase):
    def test_urls_first_then_uploads_with_queued_colours(self):
        media = build_media(
            url_entries=[
                {'url': ' https://cdn.example.com/a.jpg ', 'color': 'Red'},
                {'url': ''},
                {'url': 'https://picsum.photos/300/200'},
                {'url': 'https://cdn.example.com/b.mp4'},
            ],
            uploaded=[
                {'url': '/media/uploads/c.jpg', 'type': 'image'},
                {'url': '/media/uploads/d.mp4', 'type': 'video'},
            ],
            queued_colors=['Blue'],
        )
        self.assertEqual(media, [
            MediaRecord(url='https://cdn.example.com/a.jpg', type='image', color='Red'),
            MediaRecord(url='https://cdn.example.com/b.mp4', type='video'),
            MediaRecord(url='/media/uploads/c.jpg', type='image', color='Blue'),
            MediaRecord(url='/media/uploads/d.mp4', type='video'),
        ])

    def test_custom_placeholder_hosts(self):
        media = build_media(
            url_entries=[{'url': 'https://placehold.co/600x400'}, {'url': 'https://picsum.photos/1'}],
            placeholder_hosts=['placehold.co'],
        )
        self.assertEqual([item.url for item in media], ['https://picsum.photos/1'])

    def test_upload_index_keeps_colours_after_failed_files(self):
        media = build_media(
            uploaded=[{'url': '/media/uploads/e.jpg', 'type': 'image', 'index': 2}],
            queued_colors=['Red', 'Blue', 'Gold'],
        )
        self.assertEqual(media, [MediaRecord(url='/media/uploads/e.jpg', type='image', color='Gold')])
