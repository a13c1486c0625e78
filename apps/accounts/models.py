from django.contrib.auth.models import AbstractUser
from django.db import models

from apps.core.context import (
    EDITOR_ROLES,
    ROLE_ADMIN,
    ROLE_EDITOR,
    ROLE_NORMAL,
    ROLE_SUPEREDITOR,
)


class User(AbstractUser):
    """
    Collector account.
    The role decides who may edit the shared catalog and who moderates it.
    """
    ROLE_CHOICES = [
        (ROLE_NORMAL, 'Usuario'),
        (ROLE_EDITOR, 'Editor'),
        (ROLE_SUPEREDITOR, 'Supereditor'),
        (ROLE_ADMIN, 'Administrador'),
    ]

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=ROLE_NORMAL,
        verbose_name='Rol'
    )
    bio = models.TextField(
        max_length=500,
        blank=True,
        verbose_name='Biografía'
    )
    location = models.CharField(
        max_length=255,
        blank=True,
        verbose_name='Ubicación'
    )
    website = models.URLField(
        blank=True,
        verbose_name='Sitio web'
    )

    class Meta:
        ordering = ['username']
        verbose_name = 'Usuario'
        verbose_name_plural = 'Usuarios'

    def __str__(self):
        return self.get_full_name() or self.username

    @property
    def is_catalog_editor(self):
        return self.role in EDITOR_ROLES
