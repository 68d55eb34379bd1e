"""
Creates sample categories and products for local development.
Run with: python manage.py seed_catalog [--reset]
"""
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.catalog.exceptions import CatalogError
from apps.catalog.models import Category, Product
from apps.catalog.persistence import category_records, save_category_record, save_product_record
from apps.catalog.services import build_category, build_product

IMAGE_HOST = 'https://cdn.artstop.example'

CATEGORIES = [
    {
        'name': 'Islamic Art',
        'description': 'Islamic calligraphy and art pieces',
        'collections': [
            'Asma-ul-Husna Frames',
            'Ayatul Kursi Wall Art',
            '4 Quls Calligraphy',
            'Bismillah Nameplates',
        ],
    },
    {
        'name': 'Home Decor',
        'description': 'Home decoration items and wall art',
        'collections': ['Resin Nameplates', 'Geode Wall Art', 'Clocks'],
    },
    {
        'name': 'Gifts',
        'description': 'Gifts for all occasions',
        'collections': ['Wedding Gifts', 'Housewarming Gifts', 'Corporate Gifts'],
    },
]

PRODUCTS = [
    {
        'name': 'Ayatul Kursi Gold Frame',
        'category': 'islamic-art',
        'collection': 'Ayatul Kursi Wall Art',
        'description': 'Hand-finished Ayatul Kursi calligraphy on a gold-leaf frame.',
        'colors': ['Gold', 'Black'],
        'variants': [
            {'name': 'Small', 'dimensions': '12 x 12 inch', 'price': '2500'},
            {'name': 'Medium', 'dimensions': '18 x 18 inch', 'price': '4200'},
            {'name': 'Large', 'dimensions': '24 x 24 inch', 'price': '6800'},
        ],
        'media': ['gold', 'black', None],
        'featured': True,
    },
    {
        'name': 'Bismillah Resin Nameplate',
        'category': 'islamic-art',
        'collection': 'Bismillah Nameplates',
        'colors': ['White', 'Navy'],
        'variants': [
            {'name': 'Standard', 'dimensions': '10 inch', 'price': '1800'},
            {'name': 'Large', 'dimensions': '16 inch', 'price': '3100'},
        ],
        'media': [None, 'navy'],
    },
    {
        'name': 'Amethyst Geode Wall Art',
        'category': 'home-decor',
        'collection': 'Geode Wall Art',
        'colors': ['Purple', 'Silver'],
        'price': '9500',
        'media': ['purple', 'silver', 'video'],
        'featured': True,
    },
    {
        'name': 'Ocean Resin Clock',
        'category': 'home-decor',
        'collection': 'Clocks',
        'colors': ['Blue'],
        'variants': [
            {'name': 'Round', 'dimensions': '12 inch', 'price': '5200'},
            {'name': 'Round', 'dimensions': '18 inch', 'price': '7400'},
        ],
        'media': ['blue'],
    },
    {
        'name': 'Couple Name Keepsake',
        'category': 'gifts',
        'collection': 'Wedding Gifts',
        'colors': [],
        'price': '2200',
        'media': [None],
    },
    {
        'name': 'Engraved Desk Plaque',
        'category': 'gifts',
        'collection': 'Corporate Gifts',
        'colors': ['Brown'],
        'price': '12500',
        'media': ['brown', None],
    },
]


def _media_entries(slug, tags):
    entries = []
    for index, tag in enumerate(tags, start=1):
        if tag == 'video':
            entries.append({'url': f'{IMAGE_HOST}/products/{slug}/{index}.mp4'})
            continue
        entry = {'url': f'{IMAGE_HOST}/products/{slug}/{index}.jpg'}
        if tag:
            entry['color'] = tag.title()
        entries.append(entry)
    return entries


class Command(BaseCommand):
    help = 'Creates sample categories and products'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Delete all products and categories first',
        )

    def handle(self, *args, **options):
        with transaction.atomic():
            if options['reset']:
                deleted, _ = Product.objects.all().delete()
                Category.objects.all().delete()
                self.stdout.write(f"Deleted {deleted} existing rows")

            self.stdout.write("Creating categories...")
            for index, data in enumerate(CATEGORIES):
                form = {
                    **data,
                    'image': f"{IMAGE_HOST}/categories/{data['name'].lower().replace(' ', '-')}.jpg",
                    'sortOrder': index,
                }
                try:
                    record = build_category(form)
                except CatalogError as exc:
                    raise CommandError(f"{data['name']}: {exc.message}")
                instance = Category.objects.filter(slug=record.slug).first()
                save_category_record(record, instance=instance)

            self.stdout.write("Creating products...")
            created = 0
            for data in PRODUCTS:
                if Product.objects.filter(name=data['name']).exists():
                    continue
                form = {
                    **data,
                    'hasVariants': bool(data.get('variants')),
                    'mediaUrls': _media_entries(data['category'], data['media']),
                    'media': [],
                }
                try:
                    built = build_product(form, category_records())
                except CatalogError as exc:
                    raise CommandError(f"{data['name']}: {exc.message}")
                save_product_record(built.product, category_record=built.category)
                created += 1

        self.stdout.write(self.style.SUCCESS(f"Done: {len(CATEGORIES)} categories, {created} new products"))
