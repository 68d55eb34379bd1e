"""
Saves validated catalog records and loads records for the read path.

Only records that already passed ``services.builder`` are written here.
"""

import logging

from django.conf import settings
from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.db.models import Prefetch

from .exceptions import CatalogValidationError, UploadFailure
from .models import Category, MediaUpload, Product, ProductMedia, Variant
from .services.backfill import backfill_product, needs_backfill
from .services.builder import rename_collection
from .services.media import DEFAULT_PLACEHOLDER_HOSTS

logger = logging.getLogger(__name__)

CATEGORY_CACHE_KEY = 'catalog:categories'


def invalidate_category_cache():
    cache.delete(CATEGORY_CACHE_KEY)


def category_records(active_only=False):
    """All categories as records, cached until a category or product changes."""
    records = cache.get(CATEGORY_CACHE_KEY)
    if records is None:
        records = [category.to_record() for category in Category.objects.all()]
        cache.set(CATEGORY_CACHE_KEY, records, getattr(settings, 'CATALOG_CACHE_TIMEOUT', 600))
    if active_only:
        return [record for record in records if record.is_active]
    return records


def product_queryset():
    return Product.objects.prefetch_related(
        Prefetch('variants', queryset=Variant.objects.order_by('display_order', 'id')),
        Prefetch('media', queryset=ProductMedia.objects.order_by('display_order', 'id')),
    )


def product_records(queryset=None):
    queryset = product_queryset() if queryset is None else queryset
    return [product.to_record() for product in queryset]


def save_category_record(record, instance=None):
    """
    Create or update a category. A slug change is carried over to the
    category's products in the same transaction.
    """
    duplicates = Category.objects.filter(slug=record.slug)
    if instance is not None:
        duplicates = duplicates.exclude(pk=instance.pk)
    if duplicates.exists():
        raise CatalogValidationError('A category with this slug already exists.', field='slug')

    with transaction.atomic():
        category = instance or Category()
        old_slug = category.slug if category.pk else None
        category.apply_record(record)
        try:
            category.save()
        except IntegrityError as exc:
            raise CatalogValidationError('A category with this name already exists.', field='name') from exc
        if old_slug and old_slug != category.slug:
            moved = Product.objects.filter(category_id=old_slug).update(category_id=category.slug)
            logger.info("Category slug %s -> %s, moved %d products", old_slug, category.slug, moved)
    return category


def rename_category_collection(category, old, new):
    """Rename a collection and move every product that uses it."""
    record = rename_collection(category.to_record(), old, new)
    new = new.strip()
    with transaction.atomic():
        category.apply_record(record)
        category.save()
        moved = Product.objects.filter(
            category_id=category.slug, collection=old
        ).update(collection=new)
    logger.info("Collection %r renamed to %r in %s (%d products)", old, new, category.slug, moved)
    return category


def save_product_record(record, instance=None, category_record=None):
    """
    Create or update a product, replacing its variants and media.

    ``category_record`` is the category returned by the builder when the
    submit introduced a new collection.
    """
    with transaction.atomic():
        if category_record is not None:
            category = Category.objects.select_for_update().get(slug=category_record.slug)
            category.collections = list(category_record.collections)
            category.collection_images = dict(category_record.collection_images)
            category.save()

        product = instance or Product()
        product.apply_record(record)
        product.save()

        product.variants.all().delete()
        Variant.objects.bulk_create([
            Variant(
                product=product,
                name=variant.name,
                value=variant.value,
                price=variant.price,
                dimensions=variant.dimensions,
                label=variant.label,
                display_order=index,
            )
            for index, variant in enumerate(record.variants)
        ])

        product.media.all().delete()
        ProductMedia.objects.bulk_create([
            ProductMedia(
                product=product,
                url=item.url,
                media_type=item.type,
                color=item.color or '',
                display_order=index,
            )
            for index, item in enumerate(record.media)
        ])

    logger.info(
        "Saved product %s (%d variants, %d media)",
        product.slug, len(record.variants), len(record.media)
    )
    return product


def store_uploads(files, build_url=None):
    """
    Store uploaded files and return ``[{id, url, type, index}]`` in submission
    order, where ``index`` is the file's position in ``files``.

    Files that cannot be stored are logged and left out. UploadFailure is
    raised only when every file failed.
    """
    results = []
    failed = []
    for index, upload_file in enumerate(files):
        name = getattr(upload_file, 'name', '') or ''
        content_type = getattr(upload_file, 'content_type', '') or ''
        if content_type.startswith('video/'):
            field = 'video'
        elif content_type.startswith('image/'):
            field = 'image'
        else:
            logger.warning("Rejected upload %s: unsupported content type %r", name, content_type)
            failed.append(name)
            continue

        try:
            with transaction.atomic():
                upload = MediaUpload.objects.create(original_name=name[:255], **{field: upload_file})
        except (OSError, ValueError) as exc:
            logger.warning("Upload of %s failed: %s", name, exc, exc_info=exc)
            failed.append(name)
            continue

        url = upload.file.url
        results.append({
            'id': upload.pk,
            'url': build_url(url) if build_url else url,
            'type': upload.media_type,
            'index': index,
        })

    if failed and not results:
        raise UploadFailure('None of the files could be uploaded.', failed=failed)
    return results


def discard_uploads(results):
    """Delete uploads returned by ``store_uploads``, files included."""
    ids = [result['id'] for result in results if result.get('id')]
    for upload in MediaUpload.objects.filter(pk__in=ids):
        for stored in (upload.image, upload.video):
            if stored:
                stored.delete(save=False)
        upload.delete()
    if ids:
        logger.info("Discarded %d uploads from a rejected submit", len(ids))


def backfill_products(queryset=None, legacy_images=None, placeholder_hosts=DEFAULT_PLACEHOLDER_HOSTS, dry_run=False):
    """
    Correct stored media types, add legacy image URLs and fill in missing
    swatches. ``legacy_images`` maps product slug to a list of image URLs.

    Returns the slugs of the products that changed.
    """
    legacy_images = legacy_images or {}
    queryset = product_queryset() if queryset is None else queryset
    changed = []
    for product in queryset:
        record = product.to_record()
        updated = backfill_product(record, legacy_images.get(product.slug, ()), placeholder_hosts)
        if not needs_backfill(record, updated):
            continue
        changed.append(product.slug)
        if dry_run:
            continue
        save_product_record(updated, instance=product)
    logger.info("Back-filled %d products%s", len(changed), ' (dry run)' if dry_run else '')
    return changed
