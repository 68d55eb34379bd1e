from django.db import models

from apps.catalog.services.builder import prune_collection_images
from apps.catalog.services.identifiers import normalize, unique_identifier
from apps.catalog.services.records import CategoryRecord


class Category(models.Model):
    """
    Top-level catalog grouping, e.g. "Islamic Art".
    Collections are plain names scoped to the category, e.g.
    "Ayatul Kursi Wall Art", each with an optional cover image.
    """
    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name='Name'
    )
    slug = models.SlugField(
        max_length=100,
        unique=True,
        verbose_name='Slug'
    )
    image = models.URLField(
        max_length=500,
        verbose_name='Image URL'
    )
    description = models.TextField(
        blank=True,
        verbose_name='Description'
    )
    collections = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Collections',
        help_text='Ordered list of collection names'
    )
    collection_images = models.JSONField(
        default=dict,
        blank=True,
        verbose_name='Collection images',
        help_text='Collection name -> image URL'
    )
    product_count = models.PositiveIntegerField(
        default=0,
        verbose_name='Product count'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='Active'
    )
    display_order = models.PositiveIntegerField(
        default=0,
        verbose_name='Display order'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['display_order', 'name']
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            base_slug = normalize(self.name)
            taken = Category.objects.filter(
                slug__startswith=base_slug
            ).exclude(pk=self.pk).values_list('slug', flat=True)
            self.slug = unique_identifier(base_slug, taken)
        self.collections = list(dict.fromkeys(
            name.strip() for name in self.collections or [] if name and name.strip()
        ))
        self.collection_images = prune_collection_images(self.collections, self.collection_images)
        super().save(*args, **kwargs)

    def update_product_count(self):
        self.product_count = self.products.filter(is_active=True).count()
        Category.objects.filter(pk=self.pk).update(product_count=self.product_count)
        return self.product_count

    def to_record(self):
        return CategoryRecord(
            id=self.pk,
            name=self.name,
            slug=self.slug,
            image=self.image,
            description=self.description,
            collections=tuple(self.collections or ()),
            collection_images=dict(self.collection_images or {}),
            is_active=self.is_active,
            sort_order=self.display_order,
            product_count=self.product_count,
        )

    def apply_record(self, record):
        self.name = record.name
        self.slug = record.slug
        self.image = record.image
        self.description = record.description
        self.collections = list(record.collections)
        self.collection_images = dict(record.collection_images)
        self.is_active = record.is_active
        self.display_order = record.sort_order
