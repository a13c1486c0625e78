from django.conf import settings
from django.db import models


class Notification(models.Model):
    """In-app notification shown in the user's dashboard."""
    TYPE_CHOICES = [
        ('follow', 'Nuevo seguidor'),
        ('comment', 'Comentario'),
        ('reply', 'Respuesta'),
        ('like', 'Me gusta'),
        ('system', 'Sistema'),
        ('maintenance', 'Mantenimiento'),
        ('price_alert', 'Alerta de precio'),
        ('wishlist_match', 'Coincidencia de lista de deseos'),
        ('contact_request', 'Solicitud de contacto'),
        ('contact_reply', 'Respuesta de contacto'),
        ('metadata_alert', 'Alerta de catálogo'),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications',
        verbose_name='Usuario'
    )
    type = models.CharField(
        max_length=30,
        choices=TYPE_CHOICES,
        verbose_name='Tipo'
    )
    data = models.JSONField(
        default=dict,
        blank=True,
        verbose_name='Datos'
    )
    read = models.BooleanField(
        default=False,
        verbose_name='Leída'
    )
    created_at = models.DateTimeField(
        auto_now_add=True,
        verbose_name='Creada en'
    )

    class Meta:
        ordering = ['-created_at', '-pk']
        verbose_name = 'Notificación'
        verbose_name_plural = 'Notificaciones'
        indexes = [
            models.Index(fields=['user', 'read'], name='notification_user_read_idx'),
        ]

    def __str__(self):
        return f"{self.user} - {self.get_type_display()}"

    def to_dict(self):
        return {
            'id': self.pk,
            'type': self.type,
            'data': self.data,
            'read': self.read,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }


class PushSubscription(models.Model):
    """Browser Web Push subscription, unique per endpoint."""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='push_subscriptions',
        verbose_name='Usuario'
    )
    endpoint = models.URLField(
        max_length=500,
        unique=True,
        verbose_name='Endpoint'
    )
    subscription = models.JSONField(
        verbose_name='Suscripción',
        help_text='Objeto {endpoint, keys: {p256dh, auth}} del navegador'
    )
    user_agent = models.CharField(
        max_length=255,
        blank=True,
        default='Unknown',
        verbose_name='Navegador'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-updated_at']
        verbose_name = 'Suscripción push'
        verbose_name_plural = 'Suscripciones push'

    def __str__(self):
        return f"{self.user} - {self.endpoint[:60]}"
