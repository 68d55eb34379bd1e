"""
One-time back-fill for products saved before media types and swatches were
stored explicitly.

Rows created before the ``type`` column existed defaulted to ``image``, so a
stored image whose URL looks like a video is corrected here. Nothing on the
read path calls these functions.
"""

from typing import Iterable, List, Sequence

from .media import (
    DEFAULT_PLACEHOLDER_HOSTS,
    build_swatches,
    coerce_legacy_media,
    infer_media_type,
    is_placeholder,
)
from .records import MEDIA_IMAGE, MEDIA_VIDEO, MediaRecord, ProductRecord


def backfill_media_types(media: Sequence[MediaRecord]) -> List[MediaRecord]:
    fixed = []
    for item in media:
        if item.type == MEDIA_IMAGE and infer_media_type(item.url) == MEDIA_VIDEO:
            item = MediaRecord(url=item.url, type=MEDIA_VIDEO, color=item.color)
        fixed.append(item)
    return fixed


def legacy_image_media(
    urls: Iterable[str],
    existing: Sequence[MediaRecord] = (),
    placeholder_hosts: Iterable[str] = DEFAULT_PLACEHOLDER_HOSTS,
) -> List[MediaRecord]:
    """
    Media items for a legacy ``images`` URL list. Blank, placeholder and
    already-present URLs are skipped.
    """
    placeholder_hosts = tuple(placeholder_hosts)
    seen = {item.url for item in existing}
    media = []
    for url in urls:
        url = (url or '').strip()
        if not url or url in seen or is_placeholder(url, placeholder_hosts):
            continue
        seen.add(url)
        media.append(coerce_legacy_media(url))
    return media


def backfill_product(
    product: ProductRecord,
    legacy_images: Iterable[str] = (),
    placeholder_hosts: Iterable[str] = DEFAULT_PLACEHOLDER_HOSTS,
) -> ProductRecord:
    """Return ``product`` with corrected media types, legacy images and swatches."""
    media = backfill_media_types(product.media)
    media.extend(legacy_image_media(legacy_images, media, placeholder_hosts))
    return product.with_changes(
        media=tuple(media),
        swatches=build_swatches(product.colors, product.swatches),
    )


def needs_backfill(product: ProductRecord, backfilled: ProductRecord) -> bool:
    return product.media != backfilled.media or product.swatches != backfilled.swatches
