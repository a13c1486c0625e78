from adminsortable2.admin import SortableAdminBase, SortableInlineAdminMixin
from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from .models import CollectionItem, Showroom, ShowroomItem


# =============================================================================
# Inlines
# =============================================================================

class ShowroomItemInline(SortableInlineAdminMixin, admin.TabularInline):
    model = ShowroomItem
    extra = 0
    raw_id_fields = ['collection_item']
    fields = ['collection_item', 'placard_text', 'attribution', 'display_order']


# =============================================================================
# Model Admins
# =============================================================================

@admin.register(CollectionItem)
class CollectionItemAdmin(admin.ModelAdmin):
    list_display = [
        'instrument', 'user', 'status', 'condition', 'serial_number',
        'acquisition_date', 'acquisition_price', 'acquisition_currency'
    ]
    list_filter = ['status', 'condition', 'acquisition_currency']
    search_fields = ['instrument__brand', 'instrument__model', 'serial_number', 'user__username']
    raw_id_fields = ['user', 'instrument']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'acquisition_date'

    fieldsets = (
        (None, {
            'fields': ('user', 'instrument', 'status', 'condition', 'serial_number')
        }),
        ('Adquisición', {
            'fields': (
                'acquisition_date', 'acquisition_price', 'acquisition_currency',
                'acquisition_seller', 'acquisition_source'
            )
        }),
        ('Venta', {
            'fields': ('sale_date', 'sale_price', 'sale_buyer'),
            'classes': ('collapse',)
        }),
        ('Notas', {
            'fields': ('custom_notes', 'images', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(Showroom)
class ShowroomAdmin(SortableAdminBase, SimpleHistoryAdmin):
    list_display = ['name', 'user', 'slug', 'status', 'visibility', 'theme', 'views', 'likes']
    list_filter = ['status', 'visibility', 'theme']
    search_fields = ['name', 'slug', 'user__username']
    raw_id_fields = ['user']
    readonly_fields = ['views', 'likes', 'created_at', 'updated_at']
    inlines = [ShowroomItemInline]

    fieldsets = (
        (None, {
            'fields': ('user', 'name', 'slug', 'description', 'cover_image')
        }),
        ('Presentación', {
            'fields': ('theme', 'status', 'visibility', 'kiosk_enabled')
        }),
        ('Privacidad', {
            'fields': ('show_prices', 'show_serial_numbers', 'show_acquisition_date', 'show_status')
        }),
        ('Estadísticas', {
            'fields': ('views', 'likes', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
