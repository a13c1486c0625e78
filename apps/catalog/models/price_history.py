from django.db import models


class PriceHistory(models.Model):
    """
    Market value snapshots for instruments.
    Created automatically whenever an instrument's market value changes.
    """
    instrument = models.ForeignKey(
        'catalog.Instrument',
        on_delete=models.CASCADE,
        related_name='price_history',
        verbose_name='Instrumento'
    )
    source = models.CharField(
        max_length=100,
        blank=True,
        verbose_name='Fuente',
        help_text='Plataforma o proceso que produjo el valor'
    )
    previous_value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Valor anterior'
    )
    value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Valor'
    )
    min_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Precio mínimo'
    )
    max_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Precio máximo'
    )
    currency = models.CharField(
        max_length=3,
        default='EUR',
        verbose_name='Moneda'
    )
    listing_count = models.PositiveIntegerField(
        default=0,
        verbose_name='Anuncios analizados'
    )
    recorded_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Registrado en'
    )
    notes = models.TextField(
        blank=True,
        verbose_name='Observaciones'
    )

    class Meta:
        ordering = ['-recorded_at']
        verbose_name = 'Histórico de valor'
        verbose_name_plural = 'Histórico de valores'

    def __str__(self):
        return f"{self.instrument} - {self.source or 'manual'}: {self.previous_value} → {self.value}"

    @property
    def price_difference(self):
        if self.previous_value is None or self.value is None:
            return None
        return self.value - self.previous_value

    @property
    def percentage_change(self):
        if self.previous_value is None or self.previous_value == 0:
            return None
        diff = self.price_difference
        if diff is None:
            return None
        return (diff / self.previous_value) * 100
