"""
Plain value records passed between the catalog services.

The services never touch the ORM; models convert themselves into these
records with ``to_record()``. ``to_dict()`` / ``from_dict()`` use the
camelCase keys of the JSON API.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Tuple

MEDIA_IMAGE = 'image'
MEDIA_VIDEO = 'video'
MEDIA_TYPES = (MEDIA_IMAGE, MEDIA_VIDEO)


def _decimal(value, default=None) -> Optional[Decimal]:
    if value is None or value == '':
        return default
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _number(value: Optional[Decimal]):
    """Render a Decimal as an int when integral, float otherwise."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _datetime(value) -> Optional[datetime]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace('Z', '+00:00'))


@dataclass(frozen=True)
class MediaRecord:
    url: str
    type: str = MEDIA_IMAGE
    color: Optional[str] = None

    @property
    def is_general(self) -> bool:
        return not self.color

    def to_dict(self) -> Dict[str, Any]:
        data = {'url': self.url, 'type': self.type}
        if self.color:
            data['color'] = self.color
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MediaRecord':
        return cls(
            url=data['url'],
            type=data.get('type') or MEDIA_IMAGE,
            color=data.get('color') or None,
        )


@dataclass(frozen=True)
class VariantRecord:
    name: str
    value: str
    price: Decimal
    dimensions: str = ''
    label: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'value': self.value,
            'price': _number(self.price),
            'dimensions': self.dimensions,
            'label': self.label,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'VariantRecord':
        return cls(
            name=data['name'],
            value=data['value'],
            price=_decimal(data['price']),
            dimensions=data.get('dimensions') or '',
            label=data.get('label') or '',
        )


@dataclass(frozen=True)
class CategoryRecord:
    name: str
    slug: str
    image: str = ''
    description: str = ''
    collections: Tuple[str, ...] = ()
    collection_images: Dict[str, str] = field(default_factory=dict)
    id: Optional[int] = None
    is_active: bool = True
    sort_order: int = 0
    product_count: int = 0

    def has_collection(self, name: str) -> bool:
        return name in self.collections

    def with_changes(self, **changes) -> 'CategoryRecord':
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'image': self.image,
            'description': self.description,
            'collections': list(self.collections),
            'collectionImages': dict(self.collection_images),
            'isActive': self.is_active,
            'sortOrder': self.sort_order,
            'productCount': self.product_count,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CategoryRecord':
        return cls(
            id=data.get('id'),
            name=data['name'],
            slug=data['slug'],
            image=data.get('image') or '',
            description=data.get('description') or '',
            collections=tuple(data.get('collections') or ()),
            collection_images=dict(data.get('collectionImages') or {}),
            is_active=data.get('isActive', True),
            sort_order=data.get('sortOrder', 0),
            product_count=data.get('productCount', 0),
        )


@dataclass(frozen=True)
class ProductRecord:
    name: str
    category: str
    collection: str
    price: Decimal
    description: str = ''
    colors: Tuple[str, ...] = ()
    media: Tuple[MediaRecord, ...] = ()
    variants: Tuple[VariantRecord, ...] = ()
    in_stock: bool = True
    featured: bool = False
    id: Optional[int] = None
    slug: str = ''
    old_price: Optional[Decimal] = None
    rating: Decimal = Decimal('0')
    review_count: int = 0
    features: Tuple[str, ...] = ()
    swatches: Dict[str, str] = field(default_factory=dict)
    is_active: bool = True
    created_at: Optional[datetime] = None

    @property
    def has_variants(self) -> bool:
        return bool(self.variants)

    def with_changes(self, **changes) -> 'ProductRecord':
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'category': self.category,
            'collection': self.collection,
            'price': _number(self.price),
            'oldPrice': _number(self.old_price),
            'description': self.description,
            'colors': list(self.colors),
            'swatches': dict(self.swatches),
            'media': [item.to_dict() for item in self.media],
            'variants': [variant.to_dict() for variant in self.variants],
            'features': list(self.features),
            'rating': _number(self.rating),
            'reviewCount': self.review_count,
            'inStock': self.in_stock,
            'featured': self.featured,
            'isActive': self.is_active,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ProductRecord':
        return cls(
            id=data.get('id'),
            name=data['name'],
            slug=data.get('slug') or '',
            category=data['category'],
            collection=data['collection'],
            price=_decimal(data['price']),
            old_price=_decimal(data.get('oldPrice')),
            description=data.get('description') or '',
            colors=tuple(data.get('colors') or ()),
            swatches=dict(data.get('swatches') or {}),
            media=tuple(MediaRecord.from_dict(item) for item in data.get('media') or ()),
            variants=tuple(VariantRecord.from_dict(v) for v in data.get('variants') or ()),
            features=tuple(data.get('features') or ()),
            rating=_decimal(data.get('rating'), Decimal('0')),
            review_count=data.get('reviewCount') or 0,
            in_stock=data.get('inStock', True),
            featured=data.get('featured', False),
            is_active=data.get('isActive', True),
            created_at=_datetime(data.get('createdAt')),
        )
