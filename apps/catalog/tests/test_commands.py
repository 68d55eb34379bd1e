import json
import os
import tempfile
from io import StringIO

from django.core.cache import cache
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from apps.catalog.models import Category, Product


class SeedCatalogCommandTests(TestCase):
    def setUp(self):
        cache.clear()

    def test_seed_creates_categories_and_products(self):
        out = StringIO()
        call_command('seed_catalog', stdout=out)

        self.assertEqual(Category.objects.count(), 3)
        self.assertEqual(Product.objects.count(), 6)
        self.assertIn('6 new products', out.getvalue())

        frame = Product.objects.get(name='Ayatul Kursi Gold Frame')
        self.assertEqual(frame.category_id, 'islamic-art')
        self.assertEqual(frame.price, 2500)
        self.assertEqual(frame.variants.count(), 3)
        self.assertEqual(frame.swatches, {'Gold': '#d4af37', 'Black': '#000000'})

    def test_seed_is_idempotent(self):
        call_command('seed_catalog', stdout=StringIO())
        out = StringIO()
        call_command('seed_catalog', stdout=out)

        self.assertEqual(Category.objects.count(), 3)
        self.assertEqual(Product.objects.count(), 6)
        self.assertIn('0 new products', out.getvalue())

    def test_reset_recreates_everything(self):
        call_command('seed_catalog', stdout=StringIO())
        Product.objects.filter(name='Ocean Resin Clock').update(name='Renamed Clock')

        call_command('seed_catalog', '--reset', stdout=StringIO())

        self.assertEqual(Product.objects.count(), 6)
        self.assertFalse(Product.objects.filter(name='Renamed Clock').exists())


class BackfillCatalogMediaCommandTests(TestCase):
    def setUp(self):
        cache.clear()
        call_command('seed_catalog', stdout=StringIO())
        self.product = Product.objects.get(name='Amethyst Geode Wall Art')
        self.product.media.filter(url__endswith='.mp4').update(media_type='image')

    def test_nothing_to_do_after_seeding_other_products(self):
        self.product.media.filter(url__endswith='.mp4').update(media_type='video')
        out = StringIO()
        call_command('backfill_catalog_media', stdout=out)
        self.assertIn('Nothing to back-fill', out.getvalue())

    def test_dry_run_reports_without_saving(self):
        out = StringIO()
        call_command('backfill_catalog_media', '--dry-run', stdout=out)

        self.assertIn(self.product.slug, out.getvalue())
        self.assertIn('Would update 1 products', out.getvalue())
        self.assertEqual(
            self.product.media.get(url__endswith='.mp4').media_type,
            'image',
        )

    def test_backfill_saves_and_reads_legacy_images(self):
        handle, path = tempfile.mkstemp(suffix='.json')
        self.addCleanup(os.remove, path)
        with os.fdopen(handle, 'w', encoding='utf-8') as fh:
            json.dump({self.product.slug: ['https://cdn.example.com/legacy.jpg']}, fh)

        out = StringIO()
        call_command('backfill_catalog_media', '--legacy-images', path, stdout=out)

        self.assertIn('Updated 1 products', out.getvalue())
        urls = list(self.product.media.values_list('url', 'media_type'))
        self.assertIn(('https://cdn.example.com/legacy.jpg', 'image'), urls)
        self.assertEqual(self.product.media.get(url__endswith='.mp4').media_type, 'video')

    def test_unreadable_legacy_file(self):
        with self.assertRaises(CommandError):
            call_command('backfill_catalog_media', '--legacy-images', '/nonexistent/legacy.json', stdout=StringIO())
