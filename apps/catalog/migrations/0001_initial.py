import django.db.models.deletion
import imagekit.models.fields
import simple_history.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Instrument',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(help_text='Ej: synthesizer, drum_machine', max_length=100, verbose_name='Tipo')),
                ('subtype', models.CharField(blank=True, help_text='Ej: analog, digital, eurorack', max_length=100, verbose_name='Subtipo')),
                ('brand', models.CharField(max_length=150, verbose_name='Marca')),
                ('model', models.CharField(max_length=150, verbose_name='Modelo')),
                ('version', models.CharField(blank=True, default='', max_length=100, verbose_name='Versión')),
                ('years', models.JSONField(blank=True, default=list, help_text='Lista de años o rangos, ej: ["1982", "1983-1985"]', verbose_name='Años')),
                ('description', models.TextField(blank=True, verbose_name='Descripción')),
                ('specs', models.JSONField(blank=True, default=list, help_text='Lista de {category, label, value}', verbose_name='Especificaciones')),
                ('websites', models.JSONField(blank=True, default=list, help_text='Lista de {url, is_primary}', verbose_name='Sitios web')),
                ('generic_images', models.JSONField(blank=True, default=list, verbose_name='Imágenes genéricas')),
                ('documents', models.JSONField(blank=True, default=list, help_text='Lista de {title, url, type}', verbose_name='Documentos')),
                ('variant_label', models.CharField(blank=True, max_length=150, verbose_name='Etiqueta de variante')),
                ('excluded_images', models.JSONField(blank=True, default=list, help_text='Imágenes del modelo base que esta variante no hereda', verbose_name='Imágenes excluidas')),
                ('is_base_model', models.BooleanField(default=False, verbose_name='Es modelo base')),
                ('original_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Precio original')),
                ('original_currency', models.CharField(blank=True, max_length=3, verbose_name='Moneda original')),
                ('original_year', models.PositiveIntegerField(blank=True, null=True, verbose_name='Año de lanzamiento')),
                ('market_value', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Valor de mercado')),
                ('market_min', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Mínimo de mercado')),
                ('market_max', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Máximo de mercado')),
                ('market_currency', models.CharField(blank=True, default='EUR', max_length=3, verbose_name='Moneda de mercado')),
                ('market_updated_at', models.DateTimeField(blank=True, null=True, verbose_name='Valor actualizado en')),
                ('market_source', models.CharField(blank=True, max_length=100, verbose_name='Fuente del valor')),
                ('reverb_url', models.URLField(blank=True, verbose_name='URL de Reverb')),
                ('status', models.CharField(choices=[('draft', 'Borrador'), ('pending', 'Pendiente de revisión'), ('published', 'Publicado'), ('rejected', 'Rechazado')], default='published', max_length=20, verbose_name='Estado')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Creado en')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Actualizado en')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_instruments', to=settings.AUTH_USER_MODEL, verbose_name='Creado por')),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='variants', to='catalog.instrument', verbose_name='Modelo base')),
            ],
            options={
                'verbose_name': 'Instrumento',
                'verbose_name_plural': 'Instrumentos',
                'ordering': ['brand', 'model'],
                'indexes': [models.Index(fields=['status', 'market_updated_at'], name='instrument_status_market_idx')],
                'constraints': [models.UniqueConstraint(fields=('brand', 'model', 'version'), name='unique_instrument_brand_model_version')],
            },
        ),
        migrations.CreateModel(
            name='HistoricalInstrument',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('type', models.CharField(help_text='Ej: synthesizer, drum_machine', max_length=100, verbose_name='Tipo')),
                ('subtype', models.CharField(blank=True, help_text='Ej: analog, digital, eurorack', max_length=100, verbose_name='Subtipo')),
                ('brand', models.CharField(max_length=150, verbose_name='Marca')),
                ('model', models.CharField(max_length=150, verbose_name='Modelo')),
                ('version', models.CharField(blank=True, default='', max_length=100, verbose_name='Versión')),
                ('years', models.JSONField(blank=True, default=list, help_text='Lista de años o rangos, ej: ["1982", "1983-1985"]', verbose_name='Años')),
                ('description', models.TextField(blank=True, verbose_name='Descripción')),
                ('specs', models.JSONField(blank=True, default=list, help_text='Lista de {category, label, value}', verbose_name='Especificaciones')),
                ('websites', models.JSONField(blank=True, default=list, help_text='Lista de {url, is_primary}', verbose_name='Sitios web')),
                ('generic_images', models.JSONField(blank=True, default=list, verbose_name='Imágenes genéricas')),
                ('documents', models.JSONField(blank=True, default=list, help_text='Lista de {title, url, type}', verbose_name='Documentos')),
                ('variant_label', models.CharField(blank=True, max_length=150, verbose_name='Etiqueta de variante')),
                ('excluded_images', models.JSONField(blank=True, default=list, help_text='Imágenes del modelo base que esta variante no hereda', verbose_name='Imágenes excluidas')),
                ('is_base_model', models.BooleanField(default=False, verbose_name='Es modelo base')),
                ('original_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Precio original')),
                ('original_currency', models.CharField(blank=True, max_length=3, verbose_name='Moneda original')),
                ('original_year', models.PositiveIntegerField(blank=True, null=True, verbose_name='Año de lanzamiento')),
                ('market_value', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Valor de mercado')),
                ('market_min', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Mínimo de mercado')),
                ('market_max', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Máximo de mercado')),
                ('market_currency', models.CharField(blank=True, default='EUR', max_length=3, verbose_name='Moneda de mercado')),
                ('market_updated_at', models.DateTimeField(blank=True, null=True, verbose_name='Valor actualizado en')),
                ('market_source', models.CharField(blank=True, max_length=100, verbose_name='Fuente del valor')),
                ('reverb_url', models.URLField(blank=True, verbose_name='URL de Reverb')),
                ('status', models.CharField(choices=[('draft', 'Borrador'), ('pending', 'Pendiente de revisión'), ('published', 'Publicado'), ('rejected', 'Rechazado')], default='published', max_length=20, verbose_name='Estado')),
                ('created_at', models.DateTimeField(blank=True, editable=False, verbose_name='Creado en')),
                ('updated_at', models.DateTimeField(blank=True, editable=False, verbose_name='Actualizado en')),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('created_by', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Creado por')),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('parent', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to='catalog.instrument', verbose_name='Modelo base')),
            ],
            options={
                'verbose_name': 'historical Instrumento',
                'verbose_name_plural': 'historical Instrumentos',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='MediaAsset',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('image', imagekit.models.fields.ProcessedImageField(upload_to='uploads/%Y/%m/', verbose_name='Imagen')),
                ('purpose', models.CharField(choices=[('catalog', 'Catálogo'), ('collection', 'Colección'), ('showroom', 'Showroom'), ('media', 'Biblioteca')], default='media', max_length=20, verbose_name='Uso')),
                ('original_name', models.CharField(blank=True, max_length=255, verbose_name='Nombre original')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Subido en')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='media_assets', to=settings.AUTH_USER_MODEL, verbose_name='Propietario')),
            ],
            options={
                'verbose_name': 'Archivo multimedia',
                'verbose_name_plural': 'Archivos multimedia',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='PriceAlert',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('query', models.CharField(max_length=255, verbose_name='Búsqueda')),
                ('target_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Precio objetivo')),
                ('currency', models.CharField(default='EUR', max_length=3, verbose_name='Moneda')),
                ('is_active', models.BooleanField(default=True, verbose_name='Activa')),
                ('last_checked', models.DateTimeField(blank=True, null=True, verbose_name='Última comprobación')),
                ('trigger_count', models.PositiveIntegerField(default=0, verbose_name='Ejecuciones')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('instrument', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='price_alerts', to='catalog.instrument', verbose_name='Instrumento')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='price_alerts', to=settings.AUTH_USER_MODEL, verbose_name='Usuario')),
            ],
            options={
                'verbose_name': 'Alerta de precio',
                'verbose_name_plural': 'Alertas de precio',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='PriceHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('source', models.CharField(blank=True, help_text='Plataforma o proceso que produjo el valor', max_length=100, verbose_name='Fuente')),
                ('previous_value', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Valor anterior')),
                ('value', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Valor')),
                ('min_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Precio mínimo')),
                ('max_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Precio máximo')),
                ('currency', models.CharField(default='EUR', max_length=3, verbose_name='Moneda')),
                ('listing_count', models.PositiveIntegerField(default=0, verbose_name='Anuncios analizados')),
                ('recorded_at', models.DateTimeField(auto_now_add=True, verbose_name='Registrado en')),
                ('notes', models.TextField(blank=True, verbose_name='Observaciones')),
                ('instrument', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='price_history', to='catalog.instrument', verbose_name='Instrumento')),
            ],
            options={
                'verbose_name': 'Histórico de valor',
                'verbose_name_plural': 'Histórico de valores',
                'ordering': ['-recorded_at'],
            },
        ),
    ]
