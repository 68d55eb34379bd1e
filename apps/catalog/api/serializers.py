from rest_framework import serializers

from apps.catalog.exceptions import CatalogError
from apps.catalog.models import Category, Product, ProductMedia, Variant
from apps.catalog.services.builder import build_category, build_product


def raise_catalog_error(exc: CatalogError):
    """Re-raise a catalog error as a DRF validation error keyed by field."""
    raise serializers.ValidationError({
        exc.field or 'non_field_errors': [exc.message],
        'kind': [exc.kind],
    })


# =============================================================================
# Variant / Media Serializers
# =============================================================================

class VariantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Variant
        fields = ['name', 'value', 'price', 'dimensions', 'label']


class MediaSerializer(serializers.ModelSerializer):
    type = serializers.CharField(source='media_type', read_only=True)
    color = serializers.SerializerMethodField()

    class Meta:
        model = ProductMedia
        fields = ['url', 'type', 'color']

    def get_color(self, obj):
        return obj.color or None


# =============================================================================
# Category Serializers
# =============================================================================

class CategorySerializer(serializers.ModelSerializer):
    """
    Reads use the model; writes go through ``build_category`` so the API
    applies the same rules as the admin form.
    """
    collectionImages = serializers.JSONField(source='collection_images', required=False)
    productCount = serializers.IntegerField(source='product_count', read_only=True)
    isActive = serializers.BooleanField(source='is_active', required=False)
    sortOrder = serializers.IntegerField(source='display_order', required=False)

    class Meta:
        model = Category
        fields = [
            'id', 'name', 'slug', 'image', 'description',
            'collections', 'collectionImages', 'productCount',
            'isActive', 'sortOrder',
        ]
        # uniqueness and slug format are checked by build_category
        extra_kwargs = {
            'name': {'validators': []},
            'slug': {'validators': [], 'required': False, 'allow_blank': True},
            'image': {'required': False, 'allow_blank': True},
        }

    def validate(self, attrs):
        form = dict(self.initial_data)
        if self.instance is not None and self.partial:
            form = {**self.instance.to_record().to_dict(), **form}
        try:
            record = build_category(form, category_id=getattr(self.instance, 'pk', None))
        except CatalogError as exc:
            raise_catalog_error(exc)
        return {'record': record}

    def save(self, **kwargs):
        from apps.catalog.persistence import save_category_record

        try:
            self.instance = save_category_record(self.validated_data['record'], instance=self.instance)
        except CatalogError as exc:
            raise_catalog_error(exc)
        return self.instance


# =============================================================================
# Product Serializers
# =============================================================================

class ProductListSerializer(serializers.ModelSerializer):
    """Listing card: enough to render price, label and thumbnail."""
    category = serializers.CharField(source='category_id', read_only=True)
    oldPrice = serializers.DecimalField(source='old_price', max_digits=10, decimal_places=2, read_only=True)
    reviewCount = serializers.IntegerField(source='review_count', read_only=True)
    inStock = serializers.BooleanField(source='in_stock', read_only=True)
    media = MediaSerializer(many=True, read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'slug', 'category', 'collection', 'price', 'oldPrice',
            'rating', 'reviewCount', 'inStock', 'featured', 'colors', 'media',
        ]


class ProductDetailSerializer(ProductListSerializer):
    variants = VariantSerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta(ProductListSerializer.Meta):
        fields = ProductListSerializer.Meta.fields + [
            'description', 'swatches', 'features', 'variants', 'createdAt',
        ]


class ProductWriteSerializer(serializers.Serializer):
    """
    Accepts the product shape used by the storefront API and runs it through
    ``build_product``. ``hasVariants`` defaults to whether variants were sent.
    """
    def to_internal_value(self, data):
        if not hasattr(data, 'get'):
            raise serializers.ValidationError({'non_field_errors': ['Expected an object.']})
        form = dict(data)
        if self.instance is not None and self.partial:
            form = {**self.instance.to_record().to_dict(), **form}
        form.setdefault('hasVariants', bool(form.get('variants')))
        return form

    def validate(self, attrs):
        from apps.catalog.persistence import category_records

        try:
            built = build_product(
                attrs,
                category_records(),
                product_id=getattr(self.instance, 'pk', None),
                placeholder_hosts=self.context.get('placeholder_hosts', ('picsum.photos',)),
            )
        except CatalogError as exc:
            raise_catalog_error(exc)
        return {'built': built}

    def save(self, **kwargs):
        from apps.catalog.persistence import save_product_record

        built = self.validated_data['built']
        self.instance = save_product_record(
            built.product,
            instance=self.instance,
            category_record=built.category,
        )
        return self.instance

    def to_representation(self, instance):
        return ProductDetailSerializer(instance, context=self.context).data
