from django.conf import settings
from django.db import models
from simple_history.models import HistoricalRecords


class CollectionItem(models.Model):
    """
    A catalog instrument owned (or wished for) by a user, with the
    personal data of that particular unit.
    """
    STATUS_CHOICES = [
        ('active', 'En colección'),
        ('sold', 'Vendido'),
        ('wishlist', 'Lista de deseos'),
        ('repair', 'En reparación'),
    ]

    CONDITION_CHOICES = [
        ('new', 'Nuevo'),
        ('excellent', 'Excelente'),
        ('good', 'Bueno'),
        ('fair', 'Aceptable'),
        ('poor', 'Malo'),
        ('for_parts', 'Para piezas'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='collection_items',
        verbose_name='Usuario'
    )
    instrument = models.ForeignKey(
        'catalog.Instrument',
        on_delete=models.PROTECT,
        related_name='collection_items',
        verbose_name='Instrumento'
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default='active',
        verbose_name='Estado'
    )
    condition = models.CharField(
        max_length=20,
        choices=CONDITION_CHOICES,
        default='good',
        verbose_name='Condición'
    )
    serial_number = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Número de serie'
    )

    # Acquisition
    acquisition_date = models.DateField(
        null=True,
        blank=True,
        verbose_name='Fecha de adquisición'
    )
    acquisition_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Precio de adquisición'
    )
    acquisition_currency = models.CharField(
        max_length=3,
        default='EUR',
        verbose_name='Moneda'
    )
    acquisition_seller = models.CharField(
        max_length=150,
        blank=True,
        verbose_name='Vendedor'
    )
    acquisition_source = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Origen',
        help_text='Ej: Reverb, eBay, tienda'
    )

    # Sale
    sale_date = models.DateField(
        null=True,
        blank=True,
        verbose_name='Fecha de venta'
    )
    sale_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Precio de venta'
    )
    sale_buyer = models.CharField(
        max_length=150,
        blank=True,
        verbose_name='Comprador'
    )

    custom_notes = models.TextField(
        blank=True,
        verbose_name='Notas'
    )
    images = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Imágenes propias',
        help_text='Lista de {url, type}'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-pk']
        verbose_name = 'Elemento de colección'
        verbose_name_plural = 'Elementos de colección'
        indexes = [
            models.Index(fields=['user', 'status'], name='collection_user_status_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.instrument}"

    def instrument_summary(self):
        instrument = self.instrument
        return {
            'id': instrument.pk,
            'brand': instrument.brand,
            'model': instrument.model,
            'type': instrument.type,
            'variant_label': instrument.variant_label,
            'generic_images': list(instrument.generic_images or []),
        }

    def to_dict(self):
        return {
            'id': self.pk,
            'instrument': self.instrument_summary(),
            'status': self.status,
            'condition': self.condition,
            'serial_number': self.serial_number,
            'acquisition': {
                'date': self.acquisition_date.isoformat() if self.acquisition_date else None,
                'price': str(self.acquisition_price) if self.acquisition_price is not None else None,
                'currency': self.acquisition_currency,
                'seller': self.acquisition_seller,
                'source': self.acquisition_source,
            },
            'sale': {
                'date': self.sale_date.isoformat() if self.sale_date else None,
                'price': str(self.sale_price) if self.sale_price is not None else None,
                'buyer': self.sale_buyer,
            },
            'custom_notes': self.custom_notes,
            'images': self.images,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class Showroom(models.Model):
    """
    Curated, shareable display of part of a user's collection.
    """
    THEME_CHOICES = [
        ('minimal', 'Minimalista'),
        ('dark', 'Oscuro'),
        ('glass', 'Cristal'),
        ('boutique', 'Boutique'),
    ]

    STATUS_CHOICES = [
        ('draft', 'Borrador'),
        ('published', 'Publicado'),
        ('archived', 'Archivado'),
    ]

    VISIBILITY_CHOICES = [
        ('public', 'Público'),
        ('private', 'Privado'),
        ('unlisted', 'No listado'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='showrooms',
        verbose_name='Propietario'
    )
    name = models.CharField(
        max_length=150,
        verbose_name='Nombre'
    )
    slug = models.SlugField(
        max_length=180,
        unique=True,
        verbose_name='Slug'
    )
    cover_image = models.URLField(
        blank=True,
        verbose_name='Imagen de portada'
    )
    description = models.TextField(
        blank=True,
        verbose_name='Descripción'
    )
    theme = models.CharField(
        max_length=20,
        choices=THEME_CHOICES,
        default='minimal',
        verbose_name='Tema'
    )
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default='draft',
        verbose_name='Estado'
    )
    visibility = models.CharField(
        max_length=20,
        choices=VISIBILITY_CHOICES,
        default='public',
        verbose_name='Visibilidad'
    )
    kiosk_enabled = models.BooleanField(
        default=True,
        verbose_name='Modo kiosco'
    )

    # Privacy
    show_prices = models.BooleanField(default=False, verbose_name='Mostrar precios')
    show_serial_numbers = models.BooleanField(default=False, verbose_name='Mostrar números de serie')
    show_acquisition_date = models.BooleanField(default=False, verbose_name='Mostrar fecha de adquisición')
    show_status = models.BooleanField(default=False, verbose_name='Mostrar estado')

    # Stats
    views = models.PositiveIntegerField(default=0, verbose_name='Visitas')
    likes = models.PositiveIntegerField(default=0, verbose_name='Me gusta')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    history = HistoricalRecords()

    class Meta:
        ordering = ['-created_at', '-pk']
        verbose_name = 'Showroom'
        verbose_name_plural = 'Showrooms'

    def __str__(self):
        return self.name

    @property
    def is_publicly_visible(self):
        return self.status == 'published' and self.visibility in ('public', 'unlisted')


class ShowroomItem(models.Model):
    """Collection item placed in a showroom, in display order."""
    showroom = models.ForeignKey(
        Showroom,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name='Showroom'
    )
    collection_item = models.ForeignKey(
        CollectionItem,
        on_delete=models.CASCADE,
        related_name='showroom_entries',
        verbose_name='Elemento de colección'
    )
    public_note = models.TextField(
        blank=True,
        verbose_name='Nota pública'
    )
    placard_text = models.TextField(
        blank=True,
        verbose_name='Texto de cartela'
    )
    attribution = models.CharField(
        max_length=200,
        blank=True,
        verbose_name='Atribución',
        help_text='Ej: "Prestado por Carlos R."'
    )
    display_order = models.PositiveIntegerField(
        default=0,
        db_index=True,
        verbose_name='Orden'
    )

    class Meta:
        ordering = ['display_order', 'pk']
        verbose_name = 'Elemento de showroom'
        verbose_name_plural = 'Elementos de showroom'
        constraints = [
            models.UniqueConstraint(
                fields=['showroom', 'collection_item'],
                name='unique_showroom_collection_item'
            ),
        ]

    def __str__(self):
        return f"{self.showroom} - {self.collection_item.instrument}"
