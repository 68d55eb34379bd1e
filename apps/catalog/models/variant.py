from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.catalog.services.records import VariantRecord
from apps.catalog.services.variants import build_label


class Variant(models.Model):
    """
    A purchasable size of a product with its own price.
    ``value`` is the normalized identifier the storefront selects by.
    """
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        related_name='variants',
        verbose_name='Product'
    )
    name = models.CharField(
        max_length=100,
        verbose_name='Name'
    )
    value = models.SlugField(
        max_length=150,
        verbose_name='Value'
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Price'
    )
    dimensions = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Dimensions'
    )
    label = models.CharField(
        max_length=255,
        blank=True,
        verbose_name='Label'
    )
    display_order = models.PositiveIntegerField(
        default=0,
        verbose_name='Display order'
    )

    class Meta:
        ordering = ['display_order', 'id']
        unique_together = ['product', 'value']
        verbose_name = 'Variant'
        verbose_name_plural = 'Variants'

    def __str__(self):
        return self.label or self.name

    def save(self, *args, **kwargs):
        self.label = build_label(self.name, self.dimensions, Decimal(str(self.price)))
        super().save(*args, **kwargs)

    def to_record(self):
        return VariantRecord(
            name=self.name,
            value=self.value,
            price=self.price,
            dimensions=self.dimensions,
            label=self.label,
        )
