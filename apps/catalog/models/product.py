from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from simple_history.models import HistoricalRecords

from apps.catalog.services.identifiers import normalize, unique_identifier
from apps.catalog.services.records import ProductRecord


class Product(models.Model):
    """
    A made-to-order piece. Belongs to one category (by slug) and one of that
    category's collections. Size options live in ``variants``; images and
    videos, optionally tagged with a colour, live in ``media``.
    """
    name = models.CharField(
        max_length=200,
        verbose_name='Name'
    )
    slug = models.SlugField(
        max_length=220,
        unique=True,
        verbose_name='Slug'
    )
    category = models.ForeignKey(
        'catalog.Category',
        to_field='slug',
        db_column='category',
        on_delete=models.PROTECT,
        related_name='products',
        verbose_name='Category'
    )
    collection = models.CharField(
        max_length=200,
        verbose_name='Collection'
    )
    description = models.TextField(
        blank=True,
        max_length=2000,
        verbose_name='Description'
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Base price',
        help_text='Lowest variant price when left blank in the admin form'
    )
    old_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name='Old price',
        help_text='"Was" price to show a discount'
    )
    colors = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Colors'
    )
    swatches = models.JSONField(
        default=dict,
        blank=True,
        verbose_name='Swatches',
        help_text='Color -> hex swatch'
    )
    features = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Features'
    )
    rating = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('5'))],
        verbose_name='Rating'
    )
    review_count = models.PositiveIntegerField(
        default=0,
        verbose_name='Reviews'
    )
    in_stock = models.BooleanField(
        default=True,
        verbose_name='In stock'
    )
    featured = models.BooleanField(
        default=False,
        verbose_name='Featured'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='Active'
    )
    views = models.PositiveIntegerField(
        default=0,
        verbose_name='Views'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Created at'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated at'
    )

    history = HistoricalRecords()

    class Meta:
        ordering = ['-created_at', '-id']
        verbose_name = 'Product'
        verbose_name_plural = 'Products'
        indexes = [
            models.Index(fields=['category', 'collection'], name='catalog_prod_cat_coll_idx'),
            models.Index(fields=['featured', 'is_active'], name='catalog_prod_featured_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            base_slug = normalize(self.name) or 'product'
            taken = Product.objects.filter(
                slug__startswith=base_slug
            ).exclude(pk=self.pk).values_list('slug', flat=True)
            self.slug = unique_identifier(base_slug, taken)
        super().save(*args, **kwargs)

    @property
    def variant_count(self):
        return self.variants.count()

    @property
    def media_count(self):
        return self.media.count()

    def to_record(self):
        """
        Snapshot as a ProductRecord. Prefetch ``variants`` and ``media`` when
        converting many products.
        """
        return ProductRecord(
            id=self.pk,
            name=self.name,
            slug=self.slug,
            category=self.category_id,
            collection=self.collection,
            price=self.price,
            old_price=self.old_price,
            description=self.description,
            colors=tuple(self.colors or ()),
            swatches=dict(self.swatches or {}),
            media=tuple(item.to_record() for item in self.media.all()),
            variants=tuple(variant.to_record() for variant in self.variants.all()),
            features=tuple(self.features or ()),
            rating=self.rating,
            review_count=self.review_count,
            in_stock=self.in_stock,
            featured=self.featured,
            is_active=self.is_active,
            created_at=self.created_at,
        )

    def apply_record(self, record):
        """Copy scalar fields from a record; variants and media are replaced separately."""
        self.name = record.name
        if record.slug:
            self.slug = record.slug
        self.category_id = record.category
        self.collection = record.collection
        self.price = record.price
        self.old_price = record.old_price
        self.description = record.description
        self.colors = list(record.colors)
        self.swatches = dict(record.swatches)
        self.features = list(record.features)
        self.in_stock = record.in_stock
        self.featured = record.featured
        self.is_active = record.is_active
