"""
Pure catalog logic. These functions work on the records in ``records`` and
never query the database, so repeated calls with the same input are safe to
cache.
"""

from .identifiers import is_valid_slug, normalize, unique_identifier
from .records import CategoryRecord, MediaRecord, ProductRecord, VariantRecord
from .variants import (
    VariantResolution,
    clean_price,
    format_price,
    parse_price,
    price_for_selection,
    resolve_variants,
    select_variant,
)
from .media import (
    ALL_COLORS,
    attach_upload_colors,
    build_media,
    image_for_color,
    infer_media_type,
    resolve_display_media,
    swatch_for,
)
from .facets import (
    PRICE_BANDS,
    CatalogPage,
    FacetCounts,
    FilterSpec,
    query,
    related_products,
)
from .builder import (
    BuiltProduct,
    add_collection,
    build_category,
    build_product,
    remove_collection,
    rename_collection,
)
from .backfill import backfill_product, needs_backfill

__all__ = [
    'normalize',
    'is_valid_slug',
    'unique_identifier',
    'CategoryRecord',
    'MediaRecord',
    'ProductRecord',
    'VariantRecord',
    'VariantResolution',
    'clean_price',
    'format_price',
    'parse_price',
    'price_for_selection',
    'resolve_variants',
    'select_variant',
    'ALL_COLORS',
    'attach_upload_colors',
    'build_media',
    'image_for_color',
    'infer_media_type',
    'resolve_display_media',
    'swatch_for',
    'PRICE_BANDS',
    'CatalogPage',
    'FacetCounts',
    'FilterSpec',
    'query',
    'related_products',
    'BuiltProduct',
    'add_collection',
    'build_category',
    'build_product',
    'remove_collection',
    'rename_collection',
    'backfill_product',
    'needs_backfill',
]
