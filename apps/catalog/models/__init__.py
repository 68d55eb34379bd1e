"""
Catalog models for a made-to-order art and decor store.

Model Hierarchy:
- Category: top-level grouping that owns named collections
- Product: a piece in one category/collection, with a base price and colours
- Variant: a size option of a product with its own price
- ProductMedia: gallery image or video, optionally tagged with a colour
- MediaUpload: files uploaded through the admin, referenced by URL
"""

from .category import Category
from .product import Product
from .variant import Variant
from .media import ProductMedia, MediaUpload

__all__ = [
    'Category',
    'Product',
    'Variant',
    'ProductMedia',
    'MediaUpload',
]
