import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('follow', 'Nuevo seguidor'), ('comment', 'Comentario'), ('reply', 'Respuesta'), ('like', 'Me gusta'), ('system', 'Sistema'), ('maintenance', 'Mantenimiento'), ('price_alert', 'Alerta de precio'), ('wishlist_match', 'Coincidencia de lista de deseos'), ('contact_request', 'Solicitud de contacto'), ('contact_reply', 'Respuesta de contacto'), ('metadata_alert', 'Alerta de catálogo')], max_length=30, verbose_name='Tipo')),
                ('data', models.JSONField(blank=True, default=dict, verbose_name='Datos')),
                ('read', models.BooleanField(default=False, verbose_name='Leída')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Creada en')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to=settings.AUTH_USER_MODEL, verbose_name='Usuario')),
            ],
            options={
                'verbose_name': 'Notificación',
                'verbose_name_plural': 'Notificaciones',
                'ordering': ['-created_at', '-pk'],
                'indexes': [models.Index(fields=['user', 'read'], name='notification_user_read_idx')],
            },
        ),
        migrations.CreateModel(
            name='PushSubscription',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('endpoint', models.URLField(max_length=500, unique=True, verbose_name='Endpoint')),
                ('subscription', models.JSONField(help_text='Objeto {endpoint, keys: {p256dh, auth}} del navegador', verbose_name='Suscripción')),
                ('user_agent', models.CharField(blank=True, default='Unknown', max_length=255, verbose_name='Navegador')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='push_subscriptions', to=settings.AUTH_USER_MODEL, verbose_name='Usuario')),
            ],
            options={
                'verbose_name': 'Suscripción push',
                'verbose_name_plural': 'Suscripciones push',
                'ordering': ['-updated_at'],
            },
        ),
    ]
