# Generated manually

from decimal import Decimal

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import imagekit.models.fields
import simple_history.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True, verbose_name='Name')),
                ('slug', models.SlugField(max_length=100, unique=True, verbose_name='Slug')),
                ('image', models.URLField(max_length=500, verbose_name='Image URL')),
                ('description', models.TextField(blank=True, verbose_name='Description')),
                ('collections', models.JSONField(blank=True, default=list, help_text='Ordered list of collection names', verbose_name='Collections')),
                ('collection_images', models.JSONField(blank=True, default=dict, help_text='Collection name -> image URL', verbose_name='Collection images')),
                ('product_count', models.PositiveIntegerField(default=0, verbose_name='Product count')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('display_order', models.PositiveIntegerField(default=0, verbose_name='Display order')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Category',
                'verbose_name_plural': 'Categories',
                'ordering': ['display_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='MediaUpload',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('image', imagekit.models.fields.ProcessedImageField(blank=True, null=True, upload_to='uploads/images/%Y/%m/', verbose_name='Image')),
                ('video', models.FileField(blank=True, null=True, upload_to='uploads/videos/%Y/%m/', verbose_name='Video')),
                ('original_name', models.CharField(blank=True, max_length=255, verbose_name='Original file name')),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Upload',
                'verbose_name_plural': 'Uploads',
                'ordering': ['-uploaded_at'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('slug', models.SlugField(max_length=220, unique=True, verbose_name='Slug')),
                ('collection', models.CharField(max_length=200, verbose_name='Collection')),
                ('description', models.TextField(blank=True, max_length=2000, verbose_name='Description')),
                ('price', models.DecimalField(decimal_places=2, help_text='Lowest variant price when left blank in the admin form', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Base price')),
                ('old_price', models.DecimalField(blank=True, decimal_places=2, help_text='"Was" price to show a discount', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Old price')),
                ('colors', models.JSONField(blank=True, default=list, verbose_name='Colors')),
                ('swatches', models.JSONField(blank=True, default=dict, help_text='Color -> hex swatch', verbose_name='Swatches')),
                ('features', models.JSONField(blank=True, default=list, verbose_name='Features')),
                ('rating', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=3, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('5'))], verbose_name='Rating')),
                ('review_count', models.PositiveIntegerField(default=0, verbose_name='Reviews')),
                ('in_stock', models.BooleanField(default=True, verbose_name='In stock')),
                ('featured', models.BooleanField(default=False, verbose_name='Featured')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('views', models.PositiveIntegerField(default=0, verbose_name='Views')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('category', models.ForeignKey(db_column='category', on_delete=django.db.models.deletion.PROTECT, related_name='products', to='catalog.category', to_field='slug', verbose_name='Category')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['category', 'collection'], name='catalog_prod_cat_coll_idx'),
                    models.Index(fields=['featured', 'is_active'], name='catalog_prod_featured_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='HistoricalProduct',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('slug', models.SlugField(max_length=220, verbose_name='Slug')),
                ('collection', models.CharField(max_length=200, verbose_name='Collection')),
                ('description', models.TextField(blank=True, max_length=2000, verbose_name='Description')),
                ('price', models.DecimalField(decimal_places=2, help_text='Lowest variant price when left blank in the admin form', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Base price')),
                ('old_price', models.DecimalField(blank=True, decimal_places=2, help_text='"Was" price to show a discount', max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Old price')),
                ('colors', models.JSONField(blank=True, default=list, verbose_name='Colors')),
                ('swatches', models.JSONField(blank=True, default=dict, help_text='Color -> hex swatch', verbose_name='Swatches')),
                ('features', models.JSONField(blank=True, default=list, verbose_name='Features')),
                ('rating', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=3, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('5'))], verbose_name='Rating')),
                ('review_count', models.PositiveIntegerField(default=0, verbose_name='Reviews')),
                ('in_stock', models.BooleanField(default=True, verbose_name='In stock')),
                ('featured', models.BooleanField(default=False, verbose_name='Featured')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
                ('views', models.PositiveIntegerField(default=0, verbose_name='Views')),
                ('created_at', models.DateTimeField(blank=True, editable=False, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(blank=True, editable=False, verbose_name='Updated at')),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('category', models.ForeignKey(blank=True, db_column='category', db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='catalog.category', to_field='slug', verbose_name='Category')),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'historical Product',
                'verbose_name_plural': 'historical Products',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='ProductMedia',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('url', models.URLField(max_length=500, verbose_name='URL')),
                ('media_type', models.CharField(choices=[('image', 'Image'), ('video', 'Video')], default='image', max_length=10, verbose_name='Type')),
                ('color', models.CharField(blank=True, help_text='Leave blank for general media', max_length=50, verbose_name='Color')),
                ('display_order', models.PositiveIntegerField(default=0, verbose_name='Display order')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='media', to='catalog.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Product media',
                'verbose_name_plural': 'Product media',
                'ordering': ['display_order', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Variant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('value', models.SlugField(max_length=150, verbose_name='Value')),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Price')),
                ('dimensions', models.CharField(blank=True, max_length=100, verbose_name='Dimensions')),
                ('label', models.CharField(blank=True, max_length=255, verbose_name='Label')),
                ('display_order', models.PositiveIntegerField(default=0, verbose_name='Display order')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='variants', to='catalog.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Variant',
                'verbose_name_plural': 'Variants',
                'ordering': ['display_order', 'id'],
                'unique_together': {('product', 'value')},
            },
        ),
    ]
