"""
One-time back-fill of media types, swatches and legacy image lists.

Legacy images come from a JSON file mapping product slug to a list of image
URLs, e.g. exported from the old ``images`` field:

    {"ayatul-kursi-gold-frame": ["https://.../1.jpg", "https://.../2.jpg"]}
"""
import json

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.catalog.persistence import backfill_products


class Command(BaseCommand):
    help = 'Back-fills media types, swatches and legacy product images'

    def add_arguments(self, parser):
        parser.add_argument(
            '--legacy-images',
            help='JSON file mapping product slug to a list of image URLs',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show which products would change without saving',
        )

    def handle(self, *args, **options):
        legacy = {}
        if options['legacy_images']:
            try:
                with open(options['legacy_images'], encoding='utf-8') as fh:
                    legacy = json.load(fh)
            except (OSError, ValueError) as exc:
                raise CommandError(f"Cannot read {options['legacy_images']}: {exc}")
            if not isinstance(legacy, dict):
                raise CommandError('Legacy images file must contain a JSON object')

        changed = backfill_products(
            legacy_images=legacy,
            placeholder_hosts=settings.CATALOG_PLACEHOLDER_HOSTS,
            dry_run=options['dry_run'],
        )

        if not changed:
            self.stdout.write("Nothing to back-fill")
            return
        for slug in changed:
            self.stdout.write(f"  {slug}")
        verb = 'Would update' if options['dry_run'] else 'Updated'
        self.stdout.write(self.style.SUCCESS(f"{verb} {len(changed)} products"))
