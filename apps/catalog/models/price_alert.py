from django.conf import settings
from django.db import models


class PriceAlert(models.Model):
    """
    Saved marketplace search. Checked periodically; the owner is notified
    when listings at or under the target price show up.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='price_alerts',
        verbose_name='Usuario'
    )
    instrument = models.ForeignKey(
        'catalog.Instrument',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='price_alerts',
        verbose_name='Instrumento'
    )
    query = models.CharField(
        max_length=255,
        verbose_name='Búsqueda'
    )
    target_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        verbose_name='Precio objetivo'
    )
    currency = models.CharField(
        max_length=3,
        default='EUR',
        verbose_name='Moneda'
    )
    is_active = models.BooleanField(
        default=True,
        verbose_name='Activa'
    )
    last_checked = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name='Última comprobación'
    )
    trigger_count = models.PositiveIntegerField(
        default=0,
        verbose_name='Ejecuciones'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Alerta de precio'
        verbose_name_plural = 'Alertas de precio'

    def __str__(self):
        return f"{self.user} - {self.query}"
