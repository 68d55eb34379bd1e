from django.conf import settings
from django.contrib import admin
from django.utils.html import format_html
from import_export import resources, fields
from import_export.admin import ImportExportModelAdmin
from import_export.widgets import ForeignKeyWidget
from adminsortable2.admin import SortableAdminMixin, SortableAdminBase, SortableInlineAdminMixin
from simple_history.admin import SimpleHistoryAdmin

from .models import Category, MediaUpload, Product, ProductMedia, Variant
from .persistence import backfill_products, product_queryset


# =============================================================================
# Import/Export Resources
# =============================================================================

class CategoryResource(resources.ModelResource):
    """Resource for importing/exporting categories."""

    class Meta:
        model = Category
        import_id_fields = ['slug']
        fields = (
            'slug', 'name', 'image', 'description', 'collections',
            'collection_images', 'is_active', 'display_order'
        )
        export_order = fields


class ProductResource(resources.ModelResource):
    """Resource for importing/exporting products (without variants and media)."""

    category = fields.Field(
        column_name='category',
        attribute='category',
        widget=ForeignKeyWidget(Category, 'slug')
    )

    class Meta:
        model = Product
        import_id_fields = ['slug']
        fields = (
            'slug', 'name', 'category', 'collection', 'price', 'old_price',
            'description', 'colors', 'in_stock', 'featured', 'is_active'
        )
        export_order = fields


# =============================================================================
# Inlines
# =============================================================================

class VariantInline(SortableInlineAdminMixin, admin.TabularInline):
    model = Variant
    extra = 0
    fields = ['name', 'dimensions', 'price', 'value', 'label', 'display_order']
    readonly_fields = ['label']


class ProductMediaInline(SortableInlineAdminMixin, admin.TabularInline):
    model = ProductMedia
    extra = 0
    fields = ['url', 'media_type', 'color', 'display_order', 'preview']
    readonly_fields = ['preview']

    def preview(self, obj):
        if obj.pk and obj.media_type == 'image':
            return format_html(
                '<img src="{}" style="max-height: 50px; max-width: 100px;" />',
                obj.url
            )
        return '-'
    preview.short_description = 'Preview'


# =============================================================================
# Model Admins
# =============================================================================

@admin.register(Category)
class CategoryAdmin(SortableAdminMixin, ImportExportModelAdmin):
    resource_class = CategoryResource
    list_display = ['name', 'slug', 'collection_count', 'product_count', 'is_active', 'display_order']
    list_filter = ['is_active']
    search_fields = ['name', 'slug', 'description']
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ['product_count', 'created_at', 'updated_at']

    def collection_count(self, obj):
        return len(obj.collections or [])
    collection_count.short_description = 'Collections'


@admin.register(Product)
class ProductAdmin(SortableAdminBase, ImportExportModelAdmin, SimpleHistoryAdmin):
    resource_class = ProductResource
    list_display = [
        'name', 'category', 'collection', 'price', 'variant_count',
        'media_count', 'swatch_preview', 'in_stock', 'featured', 'is_active'
    ]
    list_filter = ['category', 'in_stock', 'featured', 'is_active', 'created_at']
    list_editable = ['in_stock', 'featured']
    search_fields = ['name', 'slug', 'collection', 'description']
    prepopulated_fields = {'slug': ('name',)}
    autocomplete_fields = ['category']
    readonly_fields = ['variant_count', 'media_count', 'views', 'created_at', 'updated_at']
    inlines = [VariantInline, ProductMediaInline]
    list_per_page = 50

    fieldsets = (
        (None, {
            'fields': ('name', 'slug', 'category', 'collection', 'description', 'is_active')
        }),
        ('Pricing', {
            'fields': ('price', 'old_price')
        }),
        ('Colors', {
            'fields': ('colors', 'swatches')
        }),
        ('Storefront', {
            'fields': ('features', 'in_stock', 'featured', 'rating', 'review_count')
        }),
        ('Info', {
            'fields': ('variant_count', 'media_count', 'views', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['backfill_media', 'mark_in_stock', 'mark_out_of_stock']

    def swatch_preview(self, obj):
        swatches = obj.swatches or {}
        if not swatches:
            return '-'
        return format_html(
            ''.join(
                '<span title="{}" style="display: inline-block; width: 14px; height: 14px; '
                'background-color: {}; border: 1px solid #ccc; border-radius: 3px;"></span>'
                for _ in swatches
            ),
            *[part for name, hex_value in swatches.items() for part in (name, hex_value)]
        )
    swatch_preview.short_description = 'Swatches'

    @admin.action(description='Back-fill media types and swatches')
    def backfill_media(self, request, queryset):
        queryset = product_queryset().filter(pk__in=queryset.values('pk'))
        changed = backfill_products(queryset, placeholder_hosts=settings.CATALOG_PLACEHOLDER_HOSTS)
        self.message_user(request, f'{len(changed)} products updated.')

    @admin.action(description='Mark as in stock')
    def mark_in_stock(self, request, queryset):
        count = queryset.update(in_stock=True)
        self.message_user(request, f'{count} products updated.')

    @admin.action(description='Mark as out of stock')
    def mark_out_of_stock(self, request, queryset):
        count = queryset.update(in_stock=False)
        self.message_user(request, f'{count} products updated.')


@admin.register(MediaUpload)
class MediaUploadAdmin(admin.ModelAdmin):
    list_display = ['original_name', 'media_type', 'thumbnail_preview', 'uploaded_at']
    readonly_fields = ['thumbnail_preview', 'uploaded_at']
    search_fields = ['original_name']

    def thumbnail_preview(self, obj):
        if obj.image:
            return format_html(
                '<img src="{}" style="max-height: 50px; max-width: 100px;" />',
                obj.thumbnail.url
            )
        return '-'
    thumbnail_preview.short_description = 'Preview'
