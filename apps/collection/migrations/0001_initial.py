import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='CollectionItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('active', 'En colección'), ('sold', 'Vendido'), ('wishlist', 'Lista de deseos'), ('repair', 'En reparación')], default='active', max_length=20, verbose_name='Estado')),
                ('condition', models.CharField(choices=[('new', 'Nuevo'), ('excellent', 'Excelente'), ('good', 'Bueno'), ('fair', 'Aceptable'), ('poor', 'Malo'), ('for_parts', 'Para piezas')], default='good', max_length=20, verbose_name='Condición')),
                ('serial_number', models.CharField(blank=True, max_length=100, verbose_name='Número de serie')),
                ('acquisition_date', models.DateField(blank=True, null=True, verbose_name='Fecha de adquisición')),
                ('acquisition_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Precio de adquisición')),
                ('acquisition_currency', models.CharField(default='EUR', max_length=3, verbose_name='Moneda')),
                ('acquisition_seller', models.CharField(blank=True, max_length=150, verbose_name='Vendedor')),
                ('acquisition_source', models.CharField(blank=True, help_text='Ej: Reverb, eBay, tienda', max_length=100, verbose_name='Origen')),
                ('sale_date', models.DateField(blank=True, null=True, verbose_name='Fecha de venta')),
                ('sale_price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name='Precio de venta')),
                ('sale_buyer', models.CharField(blank=True, max_length=150, verbose_name='Comprador')),
                ('custom_notes', models.TextField(blank=True, verbose_name='Notas')),
                ('images', models.JSONField(blank=True, default=list, help_text='Lista de {url, type}', verbose_name='Imágenes propias')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('instrument', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='collection_items', to='catalog.instrument', verbose_name='Instrumento')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='collection_items', to=settings.AUTH_USER_MODEL, verbose_name='Usuario')),
            ],
            options={
                'verbose_name': 'Elemento de colección',
                'verbose_name_plural': 'Elementos de colección',
                'ordering': ['-created_at', '-pk'],
                'indexes': [models.Index(fields=['user', 'status'], name='collection_user_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='Showroom',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150, verbose_name='Nombre')),
                ('slug', models.SlugField(max_length=180, unique=True, verbose_name='Slug')),
                ('cover_image', models.URLField(blank=True, verbose_name='Imagen de portada')),
                ('description', models.TextField(blank=True, verbose_name='Descripción')),
                ('theme', models.CharField(choices=[('minimal', 'Minimalista'), ('dark', 'Oscuro'), ('glass', 'Cristal'), ('boutique', 'Boutique')], default='minimal', max_length=20, verbose_name='Tema')),
                ('status', models.CharField(choices=[('draft', 'Borrador'), ('published', 'Publicado'), ('archived', 'Archivado')], default='draft', max_length=20, verbose_name='Estado')),
                ('visibility', models.CharField(choices=[('public', 'Público'), ('private', 'Privado'), ('unlisted', 'No listado')], default='public', max_length=20, verbose_name='Visibilidad')),
                ('kiosk_enabled', models.BooleanField(default=True, verbose_name='Modo kiosco')),
                ('show_prices', models.BooleanField(default=False, verbose_name='Mostrar precios')),
                ('show_serial_numbers', models.BooleanField(default=False, verbose_name='Mostrar números de serie')),
                ('show_acquisition_date', models.BooleanField(default=False, verbose_name='Mostrar fecha de adquisición')),
                ('show_status', models.BooleanField(default=False, verbose_name='Mostrar estado')),
                ('views', models.PositiveIntegerField(default=0, verbose_name='Visitas')),
                ('likes', models.PositiveIntegerField(default=0, verbose_name='Me gusta')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='showrooms', to=settings.AUTH_USER_MODEL, verbose_name='Propietario')),
            ],
            options={
                'verbose_name': 'Showroom',
                'verbose_name_plural': 'Showrooms',
                'ordering': ['-created_at', '-pk'],
            },
        ),
        migrations.CreateModel(
            name='HistoricalShowroom',
            fields=[
                ('id', models.BigIntegerField(auto_created=True, blank=True, db_index=True, verbose_name='ID')),
                ('name', models.CharField(max_length=150, verbose_name='Nombre')),
                ('slug', models.SlugField(max_length=180, verbose_name='Slug')),
                ('cover_image', models.URLField(blank=True, verbose_name='Imagen de portada')),
                ('description', models.TextField(blank=True, verbose_name='Descripción')),
                ('theme', models.CharField(choices=[('minimal', 'Minimalista'), ('dark', 'Oscuro'), ('glass', 'Cristal'), ('boutique', 'Boutique')], default='minimal', max_length=20, verbose_name='Tema')),
                ('status', models.CharField(choices=[('draft', 'Borrador'), ('published', 'Publicado'), ('archived', 'Archivado')], default='draft', max_length=20, verbose_name='Estado')),
                ('visibility', models.CharField(choices=[('public', 'Público'), ('private', 'Privado'), ('unlisted', 'No listado')], default='public', max_length=20, verbose_name='Visibilidad')),
                ('kiosk_enabled', models.BooleanField(default=True, verbose_name='Modo kiosco')),
                ('show_prices', models.BooleanField(default=False, verbose_name='Mostrar precios')),
                ('show_serial_numbers', models.BooleanField(default=False, verbose_name='Mostrar números de serie')),
                ('show_acquisition_date', models.BooleanField(default=False, verbose_name='Mostrar fecha de adquisición')),
                ('show_status', models.BooleanField(default=False, verbose_name='Mostrar estado')),
                ('views', models.PositiveIntegerField(default=0, verbose_name='Visitas')),
                ('likes', models.PositiveIntegerField(default=0, verbose_name='Me gusta')),
                ('created_at', models.DateTimeField(blank=True, editable=False)),
                ('updated_at', models.DateTimeField(blank=True, editable=False)),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('user', models.ForeignKey(blank=True, db_constraint=False, null=True, on_delete=django.db.models.deletion.DO_NOTHING, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Propietario')),
            ],
            options={
                'verbose_name': 'historical Showroom',
                'verbose_name_plural': 'historical Showrooms',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name='ShowroomItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('public_note', models.TextField(blank=True, verbose_name='Nota pública')),
                ('placard_text', models.TextField(blank=True, verbose_name='Texto de cartela')),
                ('attribution', models.CharField(blank=True, help_text='Ej: "Prestado por Carlos R."', max_length=200, verbose_name='Atribución')),
                ('display_order', models.PositiveIntegerField(db_index=True, default=0, verbose_name='Orden')),
                ('collection_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='showroom_entries', to='collection.collectionitem', verbose_name='Elemento de colección')),
                ('showroom', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='collection.showroom', verbose_name='Showroom')),
            ],
            options={
                'verbose_name': 'Elemento de showroom',
                'verbose_name_plural': 'Elementos de showroom',
                'ordering': ['display_order', 'pk'],
                'constraints': [models.UniqueConstraint(fields=('showroom', 'collection_item'), name='unique_showroom_collection_item')],
            },
        ),
    ]
