from django.conf import settings
from django.db import models
from imagekit.models import ImageSpecField, ProcessedImageField
from imagekit.processors import ResizeToFill, ResizeToFit


class MediaAsset(models.Model):
    """Uploaded image, resized on save, with a generated thumbnail."""
    PURPOSE_CHOICES = [
        ('catalog', 'Catálogo'),
        ('collection', 'Colección'),
        ('showroom', 'Showroom'),
        ('media', 'Biblioteca'),
    ]

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='media_assets',
        verbose_name='Propietario'
    )
    image = ProcessedImageField(
        upload_to='uploads/%Y/%m/',
        processors=[ResizeToFit(1600, 1600)],
        format='JPEG',
        options={'quality': 85},
        verbose_name='Imagen'
    )
    thumbnail = ImageSpecField(
        source='image',
        processors=[ResizeToFill(300, 300)],
        format='JPEG',
        options={'quality': 70}
    )
    purpose = models.CharField(
        max_length=20,
        choices=PURPOSE_CHOICES,
        default='media',
        verbose_name='Uso'
    )
    original_name = models.CharField(
        max_length=255,
        blank=True,
        verbose_name='Nombre original'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Subido en'
    )

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Archivo multimedia'
        verbose_name_plural = 'Archivos multimedia'

    def __str__(self):
        return self.original_name or self.image.name
