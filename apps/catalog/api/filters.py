from django_filters import rest_framework as filters

from apps.catalog.models import Category, Product


class CategoryFilter(filters.FilterSet):
    """Filter for categories (staff see inactive ones too)."""

    isActive = filters.BooleanFilter(field_name='is_active')
    has_collection = filters.CharFilter(method='filter_has_collection')

    class Meta:
        model = Category
        fields = ['isActive']

    def filter_has_collection(self, queryset, name, value):
        """
        Keep categories that declare the given collection name.
        Example: ?has_collection=Ayatul Kursi Wall Art
        """
        matching = [c.pk for c in queryset if value in (c.collections or [])]
        return queryset.filter(pk__in=matching)


class ProductFilter(filters.FilterSet):
    """
    Database-level flags applied before the facet engine runs.

    Category, collection, price, search and sort are facet-engine parameters
    and are not handled here.
    """

    inStock = filters.BooleanFilter(field_name='in_stock')
    featured = filters.BooleanFilter(field_name='featured')
    isActive = filters.BooleanFilter(field_name='is_active')

    class Meta:
        model = Product
        fields = ['inStock', 'featured', 'isActive']
