from decimal import Decimal

from django.test import SimpleTestCase

from apps.catalog.services.records import CategoryRecord, MediaRecord, ProductRecord
from apps.catalog.services.variants import resolve_variants
from .helpers import created, make_category, make_product


class RecordRoundTripTests(SimpleTestCase):
    def test_product_survives_serialization(self):
        variants = resolve_variants([
            {'name': 'Small', 'dimensions': '12 inch', 'price': '2500'},
            {'name': 'Large', 'dimensions': '24 inch', 'price': '6800.50'},
        ]).variants
        product = make_product(
            'Ayatul Kursi Frame',
            category='islamic-art',
            collection='Ayatul Kursi Wall Art',
            price='2500',
            id=7,
            slug='ayatul-kursi-frame',
            old_price=Decimal('3000'),
            colors=('Gold', 'Black'),
            swatches={'Gold': '#d4af37', 'Black': '#000000'},
            media=(
                MediaRecord(url='https://cdn.example.com/gold.jpg', color='Gold'),
                MediaRecord(url='https://cdn.example.com/spin.mp4', type='video'),
            ),
            variants=variants,
            features=('Hand finished',),
            rating=Decimal('4.5'),
            review_count=12,
            featured=True,
            created_at=created(3),
        )

        data = product.to_dict()
        self.assertEqual(data['oldPrice'], 3000)
        self.assertEqual(data['variants'][1]['price'], 6800.5)
        self.assertNotIn('color', data['media'][1])
        self.assertEqual(ProductRecord.from_dict(data), product)

    def test_category_survives_serialization(self):
        category = make_category(
            'Home Decor',
            'home-decor',
            ['Clocks', 'Geode Wall Art'],
            image='https://cdn.example.com/home.jpg',
            collection_images={'Clocks': 'https://cdn.example.com/clocks.jpg'},
            id=3,
            sort_order=2,
            product_count=5,
        )
        data = category.to_dict()
        self.assertEqual(data['collectionImages'], {'Clocks': 'https://cdn.example.com/clocks.jpg'})
        self.assertEqual(CategoryRecord.from_dict(data), category)

    def test_media_without_colour_is_general(self):
        self.assertTrue(MediaRecord(url='x.jpg').is_general)
        self.assertFalse(MediaRecord(url='x.jpg', color='Red').is_general)
