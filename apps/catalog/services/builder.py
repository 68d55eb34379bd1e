"""
Write path for the admin create/edit forms.

Turns raw form state into validated records. Nothing here touches the
database: callers persist the result only after every check has passed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from apps.catalog.exceptions import CatalogValidationError

from .identifiers import is_valid_slug, normalize
from .media import DEFAULT_PLACEHOLDER_HOSTS, build_media, build_swatches, coerce_legacy_media
from .records import MEDIA_IMAGE, CategoryRecord, MediaRecord, ProductRecord
from .variants import clean_price, resolve_variants

logger = logging.getLogger(__name__)

MODE_EXISTING = 'existing'
MODE_NEW = 'new'


@dataclass(frozen=True)
class BuiltProduct:
    product: ProductRecord
    # set when the submit created a new collection on the category
    category: Optional[CategoryRecord] = None


def _text(value) -> str:
    return str(value or '').strip()


def _int(value, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _unique(values: Iterable[Any]) -> List[str]:
    result = []
    for value in values or ():
        text = _text(value)
        if text and text not in result:
            result.append(text)
    return result


def _list_of(form: Mapping[str, Any], key: str, item_types, field: Optional[str] = None) -> list:
    """``form[key]`` as a list; anything but a list of ``item_types`` is rejected."""
    value = form.get(key)
    if value is None or value == '':
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, item_types) for item in value):
        raise CatalogValidationError(f"Invalid {key}: expected a list.", field=field or key)
    return list(value)


def _mapping_of(form: Mapping[str, Any], key: str) -> dict:
    value = form.get(key)
    if value is None or value == '':
        return {}
    if not isinstance(value, Mapping):
        raise CatalogValidationError(f"Invalid {key}: expected an object.", field=key)
    return dict(value)


def prune_collection_images(collections: Sequence[str], images: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Keep only image entries whose key is a declared collection."""
    return {
        name: _text(url)
        for name, url in (images or {}).items()
        if name in collections and _text(url)
    }


def _find_category(categories: Sequence[CategoryRecord], slug: str) -> Optional[CategoryRecord]:
    for category in categories:
        if category.slug == slug:
            return category
    return None


def _queued_colors(queued: Sequence[Any]) -> List[Optional[str]]:
    colors = []
    for item in queued:
        if isinstance(item, Mapping):
            colors.append(item.get('color') or None)
        else:
            colors.append(item or None)
    return colors


def add_collection(category: CategoryRecord, name: str, media: Sequence[MediaRecord] = ()) -> CategoryRecord:
    """
    Append a collection to ``category``. Its image is the first image in
    ``media``, or the first media item when there are only videos.
    """
    name = _text(name)
    if not name:
        raise CatalogValidationError('Enter a new collection name.', field='collection')
    if category.has_collection(name):
        return category

    images = dict(category.collection_images)
    cover = next((item.url for item in media if item.type == MEDIA_IMAGE), None)
    if cover is None and media:
        cover = media[0].url
    if cover:
        images[name] = cover
    return category.with_changes(
        collections=category.collections + (name,),
        collection_images=images,
    )


def rename_collection(category: CategoryRecord, old: str, new: str) -> CategoryRecord:
    new = _text(new)
    if not category.has_collection(old):
        raise CatalogValidationError(f"Unknown collection: {old}", field='collection')
    if not new:
        raise CatalogValidationError('Enter a collection name.', field='collection')
    if new != old and category.has_collection(new):
        raise CatalogValidationError(f"Collection already exists: {new}", field='collection')

    collections = tuple(new if name == old else name for name in category.collections)
    images = {}
    for name, url in category.collection_images.items():
        images[new if name == old else name] = url
    return category.with_changes(collections=collections, collection_images=images)


def remove_collection(category: CategoryRecord, name: str) -> CategoryRecord:
    collections = tuple(c for c in category.collections if c != name)
    return category.with_changes(
        collections=collections,
        collection_images=prune_collection_images(collections, category.collection_images),
    )


def build_category(form: Mapping[str, Any], category_id: Optional[int] = None) -> CategoryRecord:
    """
    Validate category form state.

    The slug is derived from the name unless an explicit slug is given, in
    which case it must already be in normalized form.
    """
    name = _text(form.get('name'))
    if not name:
        raise CatalogValidationError('Please provide a category name.', field='name')

    slug = _text(form.get('slug'))
    if slug:
        if not is_valid_slug(slug):
            raise CatalogValidationError(
                'Slug must contain only lowercase letters, numbers, and hyphens.', field='slug'
            )
    else:
        slug = normalize(name)
        if not slug:
            raise CatalogValidationError('Please provide a category slug.', field='slug')

    image = _text(form.get('image'))
    if not image:
        raise CatalogValidationError('Please provide a category image URL.', field='image')

    collections = tuple(_unique(_list_of(form, 'collections', str)))
    return CategoryRecord(
        id=category_id,
        name=name,
        slug=slug,
        image=image,
        description=_text(form.get('description')),
        collections=collections,
        collection_images=prune_collection_images(collections, _mapping_of(form, 'collectionImages')),
        is_active=bool(form.get('isActive', True)),
        sort_order=_int(form.get('sortOrder')),
    )


def build_product(
    form: Mapping[str, Any],
    categories: Sequence[CategoryRecord],
    uploaded: Sequence[Mapping[str, Any]] = (),
    product_id: Optional[int] = None,
    placeholder_hosts: Iterable[str] = DEFAULT_PLACEHOLDER_HOSTS,
) -> BuiltProduct:
    """
    Validate product form state and build the record to persist.

    Args:
        form: raw form state (name, category, mode, collection, price,
            hasVariants, variants, colors, media, mediaUrls, mediaFiles, ...)
        categories: current categories, used to check the collection
        uploaded: upload results for ``mediaFiles``, in submission order
        product_id: set when editing an existing product

    Raises:
        CatalogValidationError: missing name, category, collection or media,
            or a media colour that is not one of the product's colours
        NoValidVariants, InvalidPrice: see ``resolve_variants``
    """
    name = _text(form.get('name'))
    if not name:
        raise CatalogValidationError('Please provide a product name.', field='name')

    slug = _text(form.get('category'))
    if not slug:
        raise CatalogValidationError('Please choose a category.', field='category')
    category = _find_category(categories, slug)
    if category is None:
        raise CatalogValidationError(f"Unknown category: {slug}", field='category')

    mode = form.get('mode') or MODE_EXISTING
    if mode == MODE_NEW:
        collection = _text(form.get('newCollection') or form.get('collection'))
        if not collection:
            raise CatalogValidationError('Enter a new collection name.', field='collection')
    else:
        collection = _text(form.get('collection'))
        if not collection:
            raise CatalogValidationError('Select an existing collection.', field='collection')
        if not category.has_collection(collection):
            raise CatalogValidationError(
                f"Collection '{collection}' does not belong to {category.name}.", field='collection'
            )

    resolution = resolve_variants(
        _list_of(form, 'variants', Mapping),
        base_price=form.get('price'),
        has_variants=bool(form.get('hasVariants')),
    )

    colors = _unique(_list_of(form, 'colors', str))

    media = [coerce_legacy_media(item) for item in _list_of(form, 'media', (Mapping, str))]
    media = [item for item in media if item.url]
    media.extend(build_media(
        _list_of(form, 'mediaUrls', Mapping, field='media'),
        uploaded,
        _queued_colors(_list_of(form, 'mediaFiles', (Mapping, str, type(None)), field='media')),
        placeholder_hosts,
    ))
    if not media:
        raise CatalogValidationError(
            'Please upload at least one image or video, or add a valid URL.', field='media'
        )
    stray = sorted({item.color for item in media if item.color and item.color not in colors})
    if stray:
        raise CatalogValidationError(
            f"Media is tagged with colors the product does not offer: {', '.join(stray)}", field='media'
        )

    old_price = clean_price(form.get('oldPrice'))
    product = ProductRecord(
        id=product_id,
        name=name,
        category=category.slug,
        collection=collection,
        price=resolution.base_price,
        old_price=old_price,
        description=_text(form.get('description')),
        colors=tuple(colors),
        swatches=build_swatches(colors, _mapping_of(form, 'swatches')),
        media=tuple(media),
        variants=resolution.variants,
        features=tuple(_unique(_list_of(form, 'features', str))),
        in_stock=bool(form.get('inStock', True)),
        featured=bool(form.get('featured', False)),
        is_active=bool(form.get('isActive', True)),
    )

    updated_category = None
    if not category.has_collection(collection):
        updated_category = add_collection(category, collection, product.media)
        logger.info("New collection %r added to category %s", collection, category.slug)

    return BuiltProduct(product=product, category=updated_category)
