from django.db import models
from imagekit.models import ImageSpecField, ProcessedImageField
from imagekit.processors import ResizeToFill, ResizeToFit

from apps.catalog.services.records import MEDIA_IMAGE, MEDIA_VIDEO, MediaRecord


class ProductMedia(models.Model):
    """
    An image or video shown in a product gallery.
    Media without a colour is "general" and shows for every colour.
    """
    TYPE_CHOICES = [
        (MEDIA_IMAGE, 'Image'),
        (MEDIA_VIDEO, 'Video'),
    ]

    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.CASCADE,
        related_name='media',
        verbose_name='Product'
    )
    url = models.URLField(
        max_length=500,
        verbose_name='URL'
    )
    media_type = models.CharField(
        max_length=10,
        choices=TYPE_CHOICES,
        default=MEDIA_IMAGE,
        verbose_name='Type'
    )
    color = models.CharField(
        max_length=50,
        blank=True,
        verbose_name='Color',
        help_text='Leave blank for general media'
    )
    display_order = models.PositiveIntegerField(
        default=0,
        verbose_name='Display order'
    )

    class Meta:
        ordering = ['display_order', 'id']
        verbose_name = 'Product media'
        verbose_name_plural = 'Product media'

    def __str__(self):
        return f"{self.product} - {self.get_media_type_display()} {self.display_order}"

    def to_record(self):
        return MediaRecord(
            url=self.url,
            type=self.media_type,
            color=self.color or None,
        )


class MediaUpload(models.Model):
    """
    A file uploaded through the admin. Images are resized on save, videos
    are stored as-is. Products reference uploads by URL.
    """
    image = ProcessedImageField(
        upload_to='uploads/images/%Y/%m/',
        processors=[ResizeToFit(1600, 1600)],
        format='JPEG',
        options={'quality': 85},
        blank=True,
        null=True,
        verbose_name='Image'
    )
    thumbnail = ImageSpecField(
        source='image',
        processors=[ResizeToFill(300, 300)],
        format='JPEG',
        options={'quality': 70}
    )
    video = models.FileField(
        upload_to='uploads/videos/%Y/%m/',
        blank=True,
        null=True,
        verbose_name='Video'
    )
    original_name = models.CharField(
        max_length=255,
        blank=True,
        verbose_name='Original file name'
    )
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-uploaded_at']
        verbose_name = 'Upload'
        verbose_name_plural = 'Uploads'

    def __str__(self):
        return self.original_name or f"Upload {self.pk}"

    @property
    def media_type(self):
        return MEDIA_VIDEO if self.video else MEDIA_IMAGE

    @property
    def file(self):
        return self.video if self.video else self.image
