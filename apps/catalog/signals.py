"""
Django signals for the catalog app.
Keeps category product counts current and drops the cached category list
whenever categories or products change.
"""

from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from .models import Category, Product
from .persistence import invalidate_category_cache


@receiver(pre_save, sender=Product)
def remember_previous_category(sender, instance, **kwargs):
    """Remember the category a product is moving away from."""
    if not instance.pk:
        instance._previous_category = None
        return
    instance._previous_category = Product.objects.filter(
        pk=instance.pk
    ).values_list('category_id', flat=True).first()


@receiver(post_save, sender=Product)
@receiver(post_delete, sender=Product)
def refresh_category_counts(sender, instance, **kwargs):
    slugs = {instance.category_id, getattr(instance, '_previous_category', None)}
    slugs.discard(None)
    for category in Category.objects.filter(slug__in=slugs):
        category.update_product_count()
    invalidate_category_cache()


@receiver(post_save, sender=Category)
@receiver(post_delete, sender=Category)
def drop_category_cache(sender, instance, **kwargs):
    invalidate_category_cache()
