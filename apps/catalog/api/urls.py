from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import CategoryViewSet, MediaUploadView, ProductViewSet

router = DefaultRouter()
router.register(r'categories', CategoryViewSet, basename='category')
router.register(r'products', ProductViewSet, basename='product')

urlpatterns = [
    path('upload/images/', MediaUploadView.as_view(), name='upload-images'),
    path('', include(router.urls)),
]
