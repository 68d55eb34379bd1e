"""
Catalog facet engine: filters, sorts and paginates product records and
computes per-facet counts for the storefront listing.

Facet counts answer "how many products would match if I also picked this
option": each facet's counts are computed with every other active filter
applied and that one facet relaxed.
"""

import math
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .records import CategoryRecord, ProductRecord
from .variants import parse_price

SORT_NEWEST = 'newest'
SORT_PRICE_LOW = 'price-low'
SORT_PRICE_HIGH = 'price-high'
SORT_RATING = 'rating'
SORT_NAME = 'name'
SORT_KEYS = (SORT_NEWEST, SORT_PRICE_LOW, SORT_PRICE_HIGH, SORT_RATING, SORT_NAME)

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100

FACET_CATEGORY = 'category'
FACET_COLLECTION = 'collection'
FACET_PRICE = 'price'

_TRUE_VALUES = ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class PriceBand:
    key: str
    minimum: Optional[Decimal]
    maximum: Optional[Decimal]

    def contains(self, price: Decimal) -> bool:
        return _within(price, self.minimum, self.maximum)


# Storefront price filter options, in display order.
PRICE_BANDS = (
    PriceBand('0-3000', Decimal('0'), Decimal('3000')),
    PriceBand('3000-6000', Decimal('3000'), Decimal('6000')),
    PriceBand('6000-10000', Decimal('6000'), Decimal('10000')),
    PriceBand('10000', Decimal('10000'), None),
)


def parse_price_band(token) -> Tuple[Optional[Decimal], Optional[Decimal]]:
    """
    Parse a band token such as ``"3000-6000"`` or ``"10000"`` (open ended).

    ``"all"``, blanks and garbage give ``(None, None)``.
    """
    text = str(token or '').strip()
    if not text or text == 'all':
        return None, None
    low, _, high = text.partition('-')
    return parse_price(low), parse_price(high)


def _within(price: Decimal, minimum: Optional[Decimal], maximum: Optional[Decimal]) -> bool:
    if minimum is not None and maximum is not None and minimum > maximum:
        return False
    if minimum is not None and price < minimum:
        return False
    if maximum is not None and price > maximum:
        return False
    return True


def _param_values(params, key) -> List[str]:
    if hasattr(params, 'getlist'):
        raw = params.getlist(key)
    else:
        raw = params.get(key)
        if raw is None:
            raw = []
        elif isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
            raw = [raw]
    return [str(v).strip() for v in raw if v is not None and str(v).strip()]


def _param(params, key, default=''):
    values = _param_values(params, key)
    return values[-1] if values else default


def _positive_int(value, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default


@dataclass(frozen=True)
class FilterSpec:
    category_slugs: FrozenSet[str] = frozenset()
    collection_names: FrozenSet[str] = frozenset()
    price_min: Optional[Decimal] = None
    price_max: Optional[Decimal] = None
    search_text: str = ''
    sort_key: str = SORT_NEWEST
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    in_stock: bool = False
    featured: bool = False

    def relaxed(self, facet: str) -> 'FilterSpec':
        """The same filter with one facet switched off."""
        if facet == FACET_CATEGORY:
            return replace(self, category_slugs=frozenset())
        if facet == FACET_COLLECTION:
            return replace(self, collection_names=frozenset())
        if facet == FACET_PRICE:
            return replace(self, price_min=None, price_max=None)
        raise ValueError(f"Unknown facet: {facet}")

    @property
    def has_empty_price_range(self) -> bool:
        return (
            self.price_min is not None
            and self.price_max is not None
            and self.price_min > self.price_max
        )

    @classmethod
    def from_params(cls, params, default_page_size: int = DEFAULT_PAGE_SIZE,
                    max_page_size: int = MAX_PAGE_SIZE) -> 'FilterSpec':
        """
        Build a filter from listing query parameters.

        Accepts a Django ``QueryDict`` or a plain mapping. ``category`` may be
        repeated or comma separated; ``collection`` may be repeated.
        Unparseable numbers are ignored rather than rejected.
        """
        categories = set()
        for value in _param_values(params, 'category'):
            categories.update(part.strip() for part in value.split(',') if part.strip())

        price_min, price_max = parse_price_band(_param(params, 'priceRange'))
        explicit_min = parse_price(_param(params, 'minPrice'))
        explicit_max = parse_price(_param(params, 'maxPrice'))
        if explicit_min is not None:
            price_min = explicit_min
        if explicit_max is not None:
            price_max = explicit_max

        sort_key = _param(params, 'sort', SORT_NEWEST)
        if sort_key == 'price':
            # older clients send sort=price&order=asc|desc
            desc = _param(params, 'order', 'asc') == 'desc'
            sort_key = SORT_PRICE_HIGH if desc else SORT_PRICE_LOW
        if sort_key not in SORT_KEYS:
            sort_key = SORT_NEWEST

        page_size = min(_positive_int(_param(params, 'limit'), default_page_size), max_page_size)

        return cls(
            category_slugs=frozenset(categories),
            collection_names=frozenset(_param_values(params, 'collection')),
            price_min=price_min,
            price_max=price_max,
            search_text=_param(params, 'search'),
            sort_key=sort_key,
            page=_positive_int(_param(params, 'page'), 1),
            page_size=page_size,
            in_stock=_param(params, 'inStock').lower() in _TRUE_VALUES,
            featured=_param(params, 'featured').lower() in _TRUE_VALUES,
        )

    def to_dict(self) -> dict:
        return {
            'category': sorted(self.category_slugs),
            'collection': sorted(self.collection_names),
            'minPrice': str(self.price_min) if self.price_min is not None else None,
            'maxPrice': str(self.price_max) if self.price_max is not None else None,
            'search': self.search_text,
            'sort': self.sort_key,
            'page': self.page,
            'limit': self.page_size,
            'inStock': self.in_stock,
            'featured': self.featured,
        }


@dataclass(frozen=True)
class FacetCounts:
    categories: Dict[str, int] = field(default_factory=dict)
    collections: Dict[str, int] = field(default_factory=dict)
    price_bands: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            'categories': dict(self.categories),
            'collections': dict(self.collections),
            'priceBands': dict(self.price_bands),
        }


@dataclass(frozen=True)
class CatalogPage:
    items: Tuple[ProductRecord, ...]
    total_count: int
    page: int
    page_size: int
    facet_counts: FacetCounts = field(default_factory=FacetCounts)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def prev_page(self) -> Optional[int]:
        """The page before this one, capped at the last page."""
        if self.page <= 1 or not self.total_pages:
            return None
        return min(self.page - 1, self.total_pages)

    @property
    def has_prev(self) -> bool:
        return self.prev_page is not None

    def pagination(self) -> dict:
        return {
            'totalItems': self.total_count,
            'totalPages': self.total_pages,
            'currentPage': self.page,
            'hasNext': self.has_next,
            'hasPrev': self.has_prev,
            'nextPage': self.page + 1 if self.has_next else None,
            'prevPage': self.prev_page,
        }


def effective_price(product: ProductRecord) -> Decimal:
    """The price a listing sorts and filters on."""
    if product.price is not None:
        return product.price
    if product.variants:
        return min(variant.price for variant in product.variants)
    return Decimal('0')


def _matches_search(product: ProductRecord, needle: str) -> bool:
    if not needle:
        return True
    return needle in product.name.casefold() or needle in (product.description or '').casefold()


def matches(product: ProductRecord, spec: FilterSpec) -> bool:
    if spec.category_slugs and product.category not in spec.category_slugs:
        return False
    if spec.collection_names and product.collection not in spec.collection_names:
        return False
    if not _within(effective_price(product), spec.price_min, spec.price_max):
        return False
    if spec.in_stock and not product.in_stock:
        return False
    if spec.featured and not product.featured:
        return False
    return _matches_search(product, spec.search_text.strip().casefold())


def filter_products(products: Iterable[ProductRecord], spec: FilterSpec) -> List[ProductRecord]:
    return [product for product in products if matches(product, spec)]


def _created_key(product: ProductRecord) -> float:
    # products without a timestamp sort as the oldest
    return product.created_at.timestamp() if product.created_at else float('-inf')


def sort_products(products: Sequence[ProductRecord], sort_key: str = SORT_NEWEST) -> List[ProductRecord]:
    """
    Sort a copy of ``products``. Every ordering is stable, so products that
    tie keep their input order and pagination stays deterministic.
    """
    if sort_key == SORT_PRICE_LOW:
        return sorted(products, key=effective_price)
    if sort_key == SORT_PRICE_HIGH:
        return sorted(products, key=effective_price, reverse=True)
    if sort_key == SORT_RATING:
        return sorted(products, key=lambda p: p.rating, reverse=True)
    if sort_key == SORT_NAME:
        return sorted(products, key=lambda p: p.name.casefold())
    return sorted(products, key=_created_key, reverse=True)


def paginate(items: Sequence, page: int, page_size: int) -> list:
    """1-based slice; pages past the end are empty."""
    page = max(page, 1)
    page_size = max(page_size, 1)
    start = (page - 1) * page_size
    return list(items[start:start + page_size])


def collections_in_scope(categories: Sequence[CategoryRecord], category_slugs: FrozenSet[str] = frozenset()) -> List[str]:
    """
    Collections offered as filter options: those of the selected categories,
    or of every category when none is selected. Category order, no repeats.
    """
    seen = []
    for category in categories:
        if category_slugs and category.slug not in category_slugs:
            continue
        for name in category.collections:
            if name not in seen:
                seen.append(name)
    return seen


def facet_counts(products: Sequence[ProductRecord], categories: Sequence[CategoryRecord], spec: FilterSpec) -> FacetCounts:
    without_category = filter_products(products, spec.relaxed(FACET_CATEGORY))
    category_counts = {category.slug: 0 for category in categories}
    for product in without_category:
        if product.category in category_counts:
            category_counts[product.category] += 1

    without_collection = filter_products(products, spec.relaxed(FACET_COLLECTION))
    collection_counts = {name: 0 for name in collections_in_scope(categories, spec.category_slugs)}
    for product in without_collection:
        if product.collection in collection_counts:
            collection_counts[product.collection] += 1

    without_price = filter_products(products, spec.relaxed(FACET_PRICE))
    band_counts = {
        band.key: sum(1 for product in without_price if band.contains(effective_price(product)))
        for band in PRICE_BANDS
    }

    return FacetCounts(
        categories=category_counts,
        collections=collection_counts,
        price_bands=band_counts,
    )


def query(products: Sequence[ProductRecord], categories: Sequence[CategoryRecord],
          spec: Optional[FilterSpec] = None) -> CatalogPage:
    """
    Filter, sort and paginate ``products`` and count facet options.

    ``total_count`` counts every match, not just the current page. An
    inverted price range (min > max) matches nothing.
    """
    spec = spec or FilterSpec()
    page = max(spec.page, 1)
    page_size = max(spec.page_size, 1)
    matched = sort_products(filter_products(products, spec), spec.sort_key)
    return CatalogPage(
        items=tuple(paginate(matched, page, page_size)),
        total_count=len(matched),
        page=page,
        page_size=page_size,
        facet_counts=facet_counts(products, categories, spec),
    )


def related_products(products: Sequence[ProductRecord], product: ProductRecord, limit: int = 4) -> List[ProductRecord]:
    """Other active products from the same category and collection."""
    related = [
        other for other in products
        if other.is_active
        and other.category == product.category
        and other.collection == product.collection
        and other is not product
        and (product.id is None or other.id != product.id)
    ]
    return related[:limit]
