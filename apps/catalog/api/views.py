import logging

from django.conf import settings
from django.db.models import F, ProtectedError
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, permissions, serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.catalog.exceptions import CatalogError, UploadFailure
from apps.catalog.models import Category, Product
from apps.catalog.persistence import (
    category_records,
    product_queryset,
    rename_category_collection,
    store_uploads,
)
from apps.catalog.services import (
    FilterSpec,
    image_for_color,
    price_for_selection,
    query,
    related_products,
    resolve_display_media,
)
from .filters import CategoryFilter, ProductFilter
from .serializers import (
    CategorySerializer,
    ProductDetailSerializer,
    ProductListSerializer,
    ProductWriteSerializer,
    raise_catalog_error,
)

logger = logging.getLogger(__name__)


class IsStaffOrReadOnly(permissions.BasePermission):
    """Anyone may read; only staff may write."""

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return bool(request.user and request.user.is_staff)


def _is_staff(request):
    return bool(request.user and request.user.is_staff)


class CategoryViewSet(viewsets.ModelViewSet):
    """
    API endpoint for categories.

    list: Categories in display order (active only for visitors)
    retrieve: One category by slug
    create/update: Validated like the admin category form
    rename_collection: Rename a collection and move its products
    """
    queryset = Category.objects.all()
    serializer_class = CategorySerializer
    permission_classes = [IsStaffOrReadOnly]
    lookup_field = 'slug'
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = CategoryFilter
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'display_order', 'product_count']
    ordering = ['display_order', 'name']

    def get_queryset(self):
        queryset = super().get_queryset()
        if not _is_staff(self.request):
            queryset = queryset.filter(is_active=True)
        return queryset

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        serializer = self.get_serializer(queryset, many=True)
        return Response({'categories': serializer.data})

    def retrieve(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object())
        return Response({'category': serializer.data})

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            raise serializers.ValidationError({
                'non_field_errors': ['Move or delete the products in this category first.'],
            })

    @action(detail=True, methods=['post'], url_path='rename-collection')
    def rename_collection(self, request, slug=None):
        """
        Rename one of the category's collections.
        Body: {"old": "...", "new": "..."}
        """
        category = self.get_object()
        try:
            category = rename_category_collection(
                category,
                request.data.get('old') or '',
                request.data.get('new') or '',
            )
        except CatalogError as exc:
            raise_catalog_error(exc)
        return Response({'category': self.get_serializer(category).data})


class ProductViewSet(viewsets.ModelViewSet):
    """
    API endpoint for products.

    list: Filtered, sorted, paginated listing with facet counts
    retrieve: Product by id or slug, with related products
    featured: Featured products that are in stock
    media: Gallery for one colour (?color=)
    price: Price and label for one size (?variant=)
    """
    queryset = Product.objects.all()
    permission_classes = [IsStaffOrReadOnly]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductFilter
    lookup_value_regex = '[^/]+'

    def get_serializer_class(self):
        if self.action == 'list':
            return ProductListSerializer
        elif self.action in ('retrieve', 'featured'):
            return ProductDetailSerializer
        return ProductWriteSerializer

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['placeholder_hosts'] = settings.CATALOG_PLACEHOLDER_HOSTS
        return context

    def get_queryset(self):
        queryset = product_queryset().select_related('category')
        if not _is_staff(self.request):
            queryset = queryset.filter(is_active=True)
        return queryset

    def get_object(self):
        """Look products up by numeric id or by slug."""
        identifier = self.kwargs['pk']
        lookup = {'pk': identifier} if identifier.isdigit() else {'slug': identifier}
        obj = get_object_or_404(self.get_queryset(), **lookup)
        self.check_object_permissions(self.request, obj)
        return obj

    def list(self, request, *args, **kwargs):
        products = list(self.filter_queryset(self.get_queryset()))
        spec = FilterSpec.from_params(
            request.query_params,
            default_page_size=settings.CATALOG_PAGE_SIZE,
            max_page_size=settings.CATALOG_MAX_PAGE_SIZE,
        )
        page = query(
            [product.to_record() for product in products],
            category_records(active_only=True),
            spec,
        )
        by_id = {product.pk: product for product in products}
        serializer = self.get_serializer([by_id[item.id] for item in page.items], many=True)
        return Response({
            'products': serializer.data,
            'pagination': page.pagination(),
            'facets': page.facet_counts.to_dict(),
            'filters': spec.to_dict(),
        })

    def retrieve(self, request, *args, **kwargs):
        product = self.get_object()
        Product.objects.filter(pk=product.pk).update(views=F('views') + 1)

        candidates = self.get_queryset().filter(
            category_id=product.category_id,
            collection=product.collection,
        ).exclude(pk=product.pk)
        by_id = {other.pk: other for other in candidates}
        related = related_products(
            [other.to_record() for other in by_id.values()],
            product.to_record(),
        )
        context = self.get_serializer_context()
        return Response({
            'product': ProductDetailSerializer(product, context=context).data,
            'relatedProducts': ProductListSerializer(
                [by_id[item.id] for item in related], many=True, context=context
            ).data,
            'category': {
                'name': product.category.name,
                'slug': product.category.slug,
            },
        })

    @action(detail=False, methods=['get'])
    def featured(self, request):
        """
        Featured, in-stock products, newest first.
        Example: /api/products/featured/?limit=8
        """
        try:
            limit = max(1, min(int(request.query_params.get('limit', 8)), settings.CATALOG_MAX_PAGE_SIZE))
        except ValueError:
            limit = 8
        queryset = self.get_queryset().filter(featured=True, in_stock=True)[:limit]
        serializer = self.get_serializer(queryset, many=True)
        return Response({'products': serializer.data})

    @action(detail=True, methods=['get'])
    def media(self, request, pk=None):
        """
        Gallery for the selected colour. An empty or missing ``color`` shows
        every item. Example: /api/products/ayatul-kursi/media/?color=Gold
        """
        record = self.get_object().to_record()
        color = request.query_params.get('color', '')
        items = resolve_display_media(record.media, color)
        return Response({
            'color': color,
            'image': image_for_color(record.media, color),
            'media': [item.to_dict() for item in items],
        })

    @action(detail=True, methods=['get'])
    def price(self, request, pk=None):
        """
        Price shown for a size selection.
        Example: /api/products/12/price/?variant=large-24-inch
        """
        record = self.get_object().to_record()
        value = request.query_params.get('variant', '')
        price, label = price_for_selection(record, value)
        return Response({
            'variant': value,
            'price': price,
            'label': label,
        })


class MediaUploadView(APIView):
    """
    Upload product images and videos.

    Accepts multipart ``files`` (or ``images``). Returns ``{"images": [{id, url, type, index}]}``
    for the files that were stored. Files that fail are logged and skipped.
    """
    permission_classes = [permissions.IsAdminUser]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request):
        files = request.FILES.getlist('files') or request.FILES.getlist('images')
        if not files:
            return Response(
                {'error': 'No files provided.', 'kind': 'validation_error'},
                status=status.HTTP_400_BAD_REQUEST
            )
        try:
            images = store_uploads(files, build_url=request.build_absolute_uri)
        except UploadFailure as exc:
            logger.warning("Upload rejected: %s (%s)", exc.message, ', '.join(exc.failed))
            return Response(
                {**exc.as_dict(), 'failed': exc.failed},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response({'images': images}, status=status.HTTP_201_CREATED)
