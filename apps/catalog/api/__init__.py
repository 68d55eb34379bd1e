from .serializers import (
    CategorySerializer,
    MediaSerializer,
    ProductDetailSerializer,
    ProductListSerializer,
    ProductWriteSerializer,
    VariantSerializer,
)

__all__ = [
    'CategorySerializer',
    'MediaSerializer',
    'ProductDetailSerializer',
    'ProductListSerializer',
    'ProductWriteSerializer',
    'VariantSerializer',
]
