"""Shared record builders for catalog tests."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from apps.catalog.services.records import CategoryRecord, MediaRecord, ProductRecord

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_product(name, category='gifts', collection='Wedding Gifts', price='1000', **kwargs):
    kwargs.setdefault('media', (MediaRecord(url=f'https://cdn.example.com/{name}.jpg'),))
    return ProductRecord(
        name=name,
        category=category,
        collection=collection,
        price=Decimal(price),
        **kwargs
    )


def make_category(name, slug, collections=(), **kwargs):
    return CategoryRecord(name=name, slug=slug, collections=tuple(collections), **kwargs)


def created(days):
    return BASE_TIME + timedelta(days=days)
