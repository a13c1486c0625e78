from django.conf import settings
from django.db import models
from simple_history.models import HistoricalRecords


class Instrument(models.Model):
    """
    Shared catalog record describing an instrument model.

    A record with a ``parent`` is a variant: it only stores what differs
    from its base model and is merged with the parent when displayed
    (see ``apps.catalog.services.inheritance``).
    """
    STATUS_DRAFT = 'draft'
    STATUS_PENDING = 'pending'
    STATUS_PUBLISHED = 'published'
    STATUS_REJECTED = 'rejected'

    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Borrador'),
        (STATUS_PENDING, 'Pendiente de revisión'),
        (STATUS_PUBLISHED, 'Publicado'),
        (STATUS_REJECTED, 'Rechazado'),
    ]

    type = models.CharField(
        max_length=100,
        verbose_name='Tipo',
        help_text='Ej: synthesizer, drum_machine'
    )
    subtype = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Subtipo',
        help_text='Ej: analog, digital, eurorack'
    )
    brand = models.CharField(
        max_length=150,
        verbose_name='Marca'
    )
    model = models.CharField(
        max_length=150,
        verbose_name='Modelo'
    )
    version = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name='Versión'
    )
    years = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Años',
        help_text='Lista de años o rangos, ej: ["1982", "1983-1985"]'
    )
    description = models.TextField(
        blank=True,
        verbose_name='Descripción'
    )

    # Dynamic data, kept as ordered lists of plain objects
    specs = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Especificaciones',
        help_text='Lista de {category, label, value}'
    )
    websites = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Sitios web',
        help_text='Lista de {url, is_primary}'
    )
    generic_images = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Imágenes genéricas'
    )
    documents = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Documentos',
        help_text='Lista de {title, url, type}'
    )

    # Variant inheritance
    parent = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='variants',
        verbose_name='Modelo base'
    )
    variant_label = models.CharField(
        max_length=150,
        blank=True,
        verbose_name='Etiqueta de variante'
    )
    excluded_images = models.JSONField(
        default=list,
        blank=True,
        verbose_name='Imágenes excluidas',
        help_text='Imágenes del modelo base que esta variante no hereda'
    )
    is_base_model = models.BooleanField(
        default=False,
        verbose_name='Es modelo base'
    )

    # Market value
    original_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Precio original'
    )
    original_currency = models.CharField(
        max_length=3,
        blank=True,
        verbose_name='Moneda original'
    )
    original_year = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name='Año de lanzamiento'
    )
    market_value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Valor de mercado'
    )
    market_min = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Mínimo de mercado'
    )
    market_max = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Máximo de mercado'
    )
    market_currency = models.CharField(
        max_length=3,
        blank=True,
        default='EUR',
        verbose_name='Moneda de mercado'
    )
    market_updated_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name='Valor actualizado en'
    )
    market_source = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Fuente del valor'
    )
    reverb_url = models.URLField(
        blank=True,
        verbose_name='URL de Reverb'
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PUBLISHED,
        verbose_name='Estado'
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_instruments',
        verbose_name='Creado por'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Creado en'
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Actualizado en'
    )

    history = HistoricalRecords()

    class Meta:
        ordering = ['brand', 'model']
        verbose_name = 'Instrumento'
        verbose_name_plural = 'Instrumentos'
        constraints = [
            models.UniqueConstraint(
                fields=['brand', 'model', 'version'],
                name='unique_instrument_brand_model_version'
            ),
        ]
        indexes = [
            models.Index(fields=['status', 'market_updated_at'], name='instrument_status_market_idx'),
        ]

    def __str__(self):
        name = f"{self.brand} {self.model}"
        if self.variant_label:
            name = f"{name} ({self.variant_label})"
        return name

    @property
    def is_variant(self):
        return self.parent_id is not None

    @property
    def market_query(self):
        """Search string used against marketplaces."""
        return f"{self.brand} {self.model}".strip()

    @property
    def primary_image(self):
        return self.generic_images[0] if self.generic_images else None

    def to_record(self):
        """
        Plain-data view of this record, the input shape of the merge resolver.
        """
        return {
            'id': self.pk,
            'parent': self.parent_id,
            'type': self.type,
            'subtype': self.subtype,
            'brand': self.brand,
            'model': self.model,
            'version': self.version,
            'years': list(self.years or []),
            'description': self.description,
            'specs': [dict(s) for s in self.specs or [] if isinstance(s, dict)],
            'websites': [dict(w) for w in self.websites or [] if isinstance(w, dict)],
            'generic_images': list(self.generic_images or []),
            'documents': [dict(d) for d in self.documents or [] if isinstance(d, dict)],
            'variant_label': self.variant_label,
            'excluded_images': list(self.excluded_images or []),
            'is_base_model': self.is_base_model,
            'original_price': self.original_price,
            'original_currency': self.original_currency,
            'original_year': self.original_year,
            'market_value': self.market_value,
            'market_min': self.market_min,
            'market_max': self.market_max,
            'market_currency': self.market_currency,
            'market_updated_at': self.market_updated_at,
            'market_source': self.market_source,
            'reverb_url': self.reverb_url,
            'status': self.status,
            'created_by': self.created_by_id,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }
