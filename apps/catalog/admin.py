from django.contrib import admin
from django.utils.html import format_html
from import_export import resources, fields
from import_export.admin import ImportExportModelAdmin
from import_export.widgets import ForeignKeyWidget, JSONWidget
from simple_history.admin import SimpleHistoryAdmin

from apps.notifications.services import create_notification
from .models import (
    Instrument,
    PriceHistory,
    PriceAlert,
    MediaAsset,
)


# =============================================================================
# Import/Export Resources
# =============================================================================

class InstrumentResource(resources.ModelResource):
    """Resource for importing/exporting catalog instruments."""

    parent_id = fields.Field(
        column_name='parent_id',
        attribute='parent',
        widget=ForeignKeyWidget(Instrument, 'pk')
    )
    specs = fields.Field(column_name='specs', attribute='specs', widget=JSONWidget())
    websites = fields.Field(column_name='websites', attribute='websites', widget=JSONWidget())
    generic_images = fields.Field(
        column_name='generic_images', attribute='generic_images', widget=JSONWidget()
    )
    years = fields.Field(column_name='years', attribute='years', widget=JSONWidget())

    class Meta:
        model = Instrument
        import_id_fields = ['brand', 'model', 'version']
        fields = (
            'brand', 'model', 'version', 'type', 'subtype', 'years',
            'description', 'specs', 'websites', 'generic_images',
            'parent_id', 'variant_label', 'is_base_model',
            'original_price', 'original_currency', 'original_year',
            'market_value', 'market_currency', 'reverb_url', 'status'
        )
        export_order = fields


# =============================================================================
# Inlines
# =============================================================================

class VariantInline(admin.TabularInline):
    model = Instrument
    fk_name = 'parent'
    extra = 0
    fields = ['brand', 'model', 'variant_label', 'status']
    readonly_fields = ['brand', 'model', 'variant_label', 'status']
    show_change_link = True
    can_delete = False
    verbose_name = 'Variante'
    verbose_name_plural = 'Variantes'

    def has_add_permission(self, request, obj=None):
        return False


class PriceHistoryInline(admin.TabularInline):
    model = PriceHistory
    extra = 0
    fields = ['recorded_at', 'source', 'previous_value', 'value', 'min_price', 'max_price', 'listing_count']
    readonly_fields = fields
    can_delete = False
    max_num = 0


# =============================================================================
# Model Admins
# =============================================================================

@admin.register(Instrument)
class InstrumentAdmin(ImportExportModelAdmin, SimpleHistoryAdmin):
    resource_class = InstrumentResource
    list_display = [
        'brand', 'model', 'version', 'variant_label', 'type', 'parent',
        'status_badge', 'market_value', 'market_updated_at', 'image_preview'
    ]
    list_filter = ['status', 'type', 'is_base_model', 'market_currency']
    search_fields = ['brand', 'model', 'variant_label', 'description']
    autocomplete_fields = ['parent']
    raw_id_fields = ['created_by']
    readonly_fields = [
        'market_min', 'market_max', 'market_updated_at', 'market_source',
        'created_by', 'created_at', 'updated_at'
    ]
    inlines = [VariantInline, PriceHistoryInline]
    list_per_page = 50

    fieldsets = (
        (None, {
            'fields': ('type', 'subtype', 'brand', 'model', 'version', 'years', 'status')
        }),
        ('Contenido', {
            'fields': ('description', 'specs', 'websites', 'generic_images', 'documents')
        }),
        ('Variante', {
            'fields': ('parent', 'variant_label', 'excluded_images', 'is_base_model')
        }),
        ('Valor de mercado', {
            'fields': (
                'original_price', 'original_currency', 'original_year',
                'market_value', 'market_min', 'market_max', 'market_currency',
                'market_updated_at', 'market_source', 'reverb_url'
            ),
            'classes': ('collapse',)
        }),
        ('Información', {
            'fields': ('created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['publish_instruments', 'reject_instruments']

    STATUS_COLORS = {
        Instrument.STATUS_DRAFT: 'gray',
        Instrument.STATUS_PENDING: 'orange',
        Instrument.STATUS_PUBLISHED: 'green',
        Instrument.STATUS_REJECTED: 'red',
    }

    def status_badge(self, obj):
        return format_html(
            '<span style="color: {};">{}</span>',
            self.STATUS_COLORS.get(obj.status, 'black'),
            obj.get_status_display()
        )
    status_badge.short_description = 'Estado'

    def image_preview(self, obj):
        img = obj.primary_image
        if img:
            return format_html('<img src="{}" style="max-height: 40px; max-width: 60px;" />', img)
        return '-'
    image_preview.short_description = 'Imagen'

    def save_model(self, request, obj, form, change):
        if not change and obj.created_by_id is None:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)

    def _moderate(self, request, queryset, new_status, message):
        count = 0
        for instrument in queryset.exclude(status=new_status).select_related('created_by'):
            instrument.status = new_status
            instrument.save(update_fields=['status', 'updated_at'])
            if instrument.created_by_id:
                create_notification(instrument.created_by, 'system', {
                    'instrument_id': instrument.pk,
                    'instrument': str(instrument),
                    'status': new_status,
                    'message': message,
                })
            count += 1
        return count

    @admin.action(description='Publicar instrumentos seleccionados')
    def publish_instruments(self, request, queryset):
        count = self._moderate(
            request, queryset, Instrument.STATUS_PUBLISHED, 'Tu instrumento ha sido aprobado y publicado'
        )
        self.message_user(request, f'{count} instrumentos publicados.')

    @admin.action(description='Rechazar instrumentos seleccionados')
    def reject_instruments(self, request, queryset):
        count = self._moderate(
            request, queryset, Instrument.STATUS_REJECTED, 'Tu instrumento ha sido rechazado'
        )
        self.message_user(request, f'{count} instrumentos rechazados.')


@admin.register(PriceHistory)
class PriceHistoryAdmin(admin.ModelAdmin):
    list_display = [
        'instrument', 'source', 'previous_value', 'value',
        'price_diff_display', 'listing_count', 'recorded_at'
    ]
    list_filter = ['source', 'currency', 'recorded_at']
    search_fields = ['instrument__brand', 'instrument__model']
    readonly_fields = [
        'instrument', 'source', 'previous_value', 'value', 'min_price',
        'max_price', 'currency', 'listing_count', 'recorded_at', 'notes',
        'price_difference', 'percentage_change'
    ]
    date_hierarchy = 'recorded_at'

    def price_diff_display(self, obj):
        diff = obj.price_difference
        if diff is None:
            return '-'
        amount = f'{diff:.2f} {obj.currency}'
        if diff > 0:
            return format_html('<span style="color: green;">+{}</span>', amount)
        elif diff < 0:
            return format_html('<span style="color: red;">{}</span>', amount)
        return amount
    price_diff_display.short_description = 'Diferencia'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PriceAlert)
class PriceAlertAdmin(admin.ModelAdmin):
    list_display = ['query', 'user', 'instrument', 'target_price', 'currency', 'is_active', 'last_checked', 'trigger_count']
    list_filter = ['is_active', 'currency']
    search_fields = ['query', 'user__username']
    raw_id_fields = ['user', 'instrument']
    readonly_fields = ['last_checked', 'trigger_count', 'created_at', 'updated_at']


@admin.register(MediaAsset)
class MediaAssetAdmin(admin.ModelAdmin):
    list_display = ['original_name', 'owner', 'purpose', 'thumbnail_preview', 'created_at']
    list_filter = ['purpose', 'created_at']
    search_fields = ['original_name', 'owner__username']
    raw_id_fields = ['owner']
    readonly_fields = ['thumbnail_preview', 'created_at']

    def thumbnail_preview(self, obj):
        if obj.image:
            return format_html(
                '<img src="{}" style="max-height: 50px; max-width: 100px;" />',
                obj.thumbnail.url
            )
        return '-'
    thumbnail_preview.short_description = 'Vista previa'


# =============================================================================
# Admin Site Configuration
# =============================================================================

admin.site.site_header = 'Instrument Collector'
admin.site.site_title = 'Instrument Collector'
admin.site.index_title = 'Panel de administración'
