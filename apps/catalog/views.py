import json
import logging

from django.conf import settings
from django.contrib.admin.views.decorators import staff_member_required
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_protect
from django.views.decorators.http import require_http_methods

from .exceptions import CatalogError, UploadFailure
from .models import Category, Product
from .persistence import (
    category_records,
    discard_uploads,
    rename_category_collection,
    save_category_record,
    save_product_record,
    store_uploads,
)
from .services import PRICE_BANDS, build_category, build_product
from .services.media import SWATCHES

logger = logging.getLogger(__name__)


def _read_form(request):
    """
    Form state arrives as a JSON body, or as a ``form`` JSON field next to
    uploaded ``mediaFiles`` in a multipart request.
    """
    if request.content_type == 'application/json':
        raw = request.body or b'{}'
    else:
        raw = request.POST.get('form') or '{}'
    form = json.loads(raw)
    if not isinstance(form, dict):
        raise ValueError('Form state must be a JSON object')
    return form


def _error_response(exc, form):
    return JsonResponse({'status': 'error', **exc.as_dict(), 'form': form}, status=400)


def _invalid_json():
    return JsonResponse({'status': 'error', 'message': 'Invalid JSON'}, status=400)


# =============================================================================
# Form options
# =============================================================================

@staff_member_required
@require_http_methods(["GET"])
def form_options(request):
    """Categories, colour names and price bands for the admin forms."""
    return JsonResponse({
        'status': 'ok',
        'categories': [record.to_dict() for record in category_records()],
        'colors': [name.title() for name in SWATCHES],
        'priceBands': [band.key for band in PRICE_BANDS],
    })


# =============================================================================
# Products
# =============================================================================

@staff_member_required
@require_http_methods(["POST"])
@csrf_protect
def product_save(request, product_id=None):
    """
    Create (no ``product_id``) or edit a product from raw form state.

    Uploaded ``mediaFiles`` are stored first; files that fail are dropped
    and the rest keep their queued colours. A rejected submit deletes the
    files it stored.
    """
    try:
        form = _read_form(request)
    except ValueError:
        return _invalid_json()

    instance = get_object_or_404(Product, pk=product_id) if product_id else None

    uploaded = []
    files = request.FILES.getlist('mediaFiles')
    if files:
        try:
            uploaded = store_uploads(files, build_url=request.build_absolute_uri)
        except UploadFailure as exc:
            logger.warning("All %d uploads failed for product form: %s", len(files), ', '.join(exc.failed))

    try:
        built = build_product(
            form,
            category_records(),
            uploaded=uploaded,
            product_id=product_id,
            placeholder_hosts=settings.CATALOG_PLACEHOLDER_HOSTS,
        )
        product = save_product_record(built.product, instance=instance, category_record=built.category)
    except CatalogError as exc:
        logger.info("Rejected product form (%s): %s", exc.kind, exc.message)
        discard_uploads(uploaded)
        return _error_response(exc, form)

    product.refresh_from_db()
    return JsonResponse({
        'status': 'ok',
        'product': product.to_record().to_dict(),
        'category': built.category.to_dict() if built.category else None,
    }, status=200 if instance else 201)


# =============================================================================
# Categories
# =============================================================================

@staff_member_required
@require_http_methods(["POST"])
@csrf_protect
def category_save(request, category_id=None):
    """Create (no ``category_id``) or edit a category from raw form state."""
    try:
        form = _read_form(request)
    except ValueError:
        return _invalid_json()

    instance = get_object_or_404(Category, pk=category_id) if category_id else None
    try:
        record = build_category(form, category_id=category_id)
        category = save_category_record(record, instance=instance)
    except CatalogError as exc:
        logger.info("Rejected category form (%s): %s", exc.kind, exc.message)
        return _error_response(exc, form)

    return JsonResponse({
        'status': 'ok',
        'category': category.to_record().to_dict(),
    }, status=200 if instance else 201)


@staff_member_required
@require_http_methods(["POST"])
@csrf_protect
def collection_rename(request, category_id):
    """Rename a collection. Body: {"old": "...", "new": "..."}"""
    try:
        form = _read_form(request)
    except ValueError:
        return _invalid_json()

    category = get_object_or_404(Category, pk=category_id)
    try:
        category = rename_category_collection(category, form.get('old') or '', form.get('new') or '')
    except CatalogError as exc:
        return _error_response(exc, form)

    return JsonResponse({
        'status': 'ok',
        'category': category.to_record().to_dict(),
    })
