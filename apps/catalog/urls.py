from django.urls import path
from . import views

app_name = 'catalog'

urlpatterns = [
    # Options for the admin forms
    path('admin/form-options/', views.form_options, name='form_options'),

    # Products
    path('admin/products/', views.product_save, name='product_create'),
    path('admin/products/<int:product_id>/', views.product_save, name='product_edit'),

    # Categories and collections
    path('admin/categories/', views.category_save, name='category_create'),
    path('admin/categories/<int:category_id>/', views.category_save, name='category_edit'),
    path('admin/categories/<int:category_id>/rename-collection/', views.collection_rename, name='collection_rename'),
]
