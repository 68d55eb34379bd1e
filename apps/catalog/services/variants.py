"""
Turns raw size/price form rows into canonical variant records and derives
the product's base price.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from apps.catalog.exceptions import InvalidPrice, NoValidVariants

from .identifiers import normalize, unique_identifier
from .records import ProductRecord, VariantRecord

logger = logging.getLogger(__name__)

# Prices are stored as DecimalField(max_digits=10, decimal_places=2).
CENTS = Decimal('0.01')
MAX_PRICE = Decimal('99999999.99')


@dataclass(frozen=True)
class VariantResolution:
    variants: Tuple[VariantRecord, ...]
    base_price: Decimal


def parse_price(raw) -> Optional[Decimal]:
    """
    Parse a price typed into a form.

    Returns None for blank, non-numeric and non-finite input. Negative values
    are returned as-is; rejecting them is the caller's decision.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None
    if not value.is_finite():
        return None
    return value


def clean_price(raw) -> Optional[Decimal]:
    """
    Parse a price and round it to cents. None when it is missing, negative or
    too large to store.
    """
    value = parse_price(raw)
    if value is None or value < 0 or value > MAX_PRICE:
        return None
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_price(value: Decimal) -> str:
    """Shortest decimal text for a price: 2000, 2000.5, 0.25."""
    text = format(value.normalize(), 'f')
    return '0' if text in ('-0', '') else text


def build_label(name: str, dimensions: str, price: Decimal) -> str:
    if dimensions:
        return f"{name}: {dimensions} - {format_price(price)}"
    return f"{name} - {format_price(price)}"


def _build_variant(index: int, row: Mapping[str, Any]) -> Optional[VariantRecord]:
    raw_name = row.get('name') or ''
    raw_dimensions = row.get('dimensions') or ''
    name = str(raw_name).strip() or f"Variant {index + 1}"
    value = normalize(f"{raw_name or 'variant'}-{raw_dimensions or index + 1}")
    price = clean_price(row.get('price'))
    dimensions = str(raw_dimensions).strip()

    if not name or not value:
        logger.info("Dropping variant row %d: no usable name or value", index + 1)
        return None
    if price is None:
        logger.info("Dropping variant row %d: invalid price %r", index + 1, row.get('price'))
        return None

    return VariantRecord(
        name=name,
        value=value,
        price=price,
        dimensions=dimensions,
        label=build_label(name, dimensions, price),
    )


def resolve_variants(
    rows: Sequence[Mapping[str, Any]],
    base_price=None,
    has_variants: bool = True,
) -> VariantResolution:
    """
    Build the persisted variant set and the product base price.

    Args:
        rows: raw form rows with ``name``, ``dimensions`` and ``price``
        base_price: the product-level price as typed, may be blank
        has_variants: whether the form asked for variants at all

    Raises:
        NoValidVariants: variants were requested but every row was invalid
        InvalidPrice: neither the explicit price nor the variants give a price
    """
    variants: List[VariantRecord] = []
    if has_variants:
        taken = set()
        for index, row in enumerate(rows or ()):
            variant = _build_variant(index, row)
            if variant is None:
                continue
            value = unique_identifier(variant.value, taken)
            if value != variant.value:
                variant = VariantRecord(
                    name=variant.name,
                    value=value,
                    price=variant.price,
                    dimensions=variant.dimensions,
                    label=variant.label,
                )
            taken.add(value)
            variants.append(variant)

        if not variants:
            raise NoValidVariants('Enter name, dimensions and a valid price for variants.')

    explicit = clean_price(base_price)
    if explicit is not None:
        price = explicit
    elif variants:
        price = min(variant.price for variant in variants)
    else:
        raise InvalidPrice()

    return VariantResolution(variants=tuple(variants), base_price=price)


def select_variant(variants: Sequence[VariantRecord], value: str = '') -> Optional[VariantRecord]:
    """The variant matching ``value``, else the first one, else None."""
    for variant in variants:
        if variant.value == value:
            return variant
    return variants[0] if variants else None


def price_for_selection(product: ProductRecord, value: str = '') -> Tuple[Decimal, str]:
    """
    Price and label the storefront shows for a size selection.

    Falls back to the product's own price when it has no variants.
    """
    variant = select_variant(product.variants, value)
    if variant is None:
        return product.price, product.name
    return variant.price, variant.label
