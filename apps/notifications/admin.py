from django.contrib import admin

from .models import Notification, PushSubscription


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ['user', 'type', 'read', 'created_at']
    list_filter = ['type', 'read', 'created_at']
    search_fields = ['user__username', 'user__email']
    readonly_fields = ['created_at']
    actions = ['mark_as_read']

    @admin.action(description='Marcar como leídas')
    def mark_as_read(self, request, queryset):
        updated = queryset.update(read=True)
        self.message_user(request, f'{updated} notificación(es) marcada(s) como leída(s).')


@admin.register(PushSubscription)
class PushSubscriptionAdmin(admin.ModelAdmin):
    list_display = ['user', 'endpoint', 'user_agent', 'updated_at']
    search_fields = ['user__username', 'endpoint']
    readonly_fields = ['created_at', 'updated_at']
