from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from apps.core.context import ROLE_ADMIN, ROLE_EDITOR, ROLE_NORMAL

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'first_name', 'last_name', 'role', 'is_active', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff']
    list_editable = ['role']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Perfil', {
            'fields': ('role', 'bio', 'location', 'website')
        }),
    )
    actions = ['promote_to_editor', 'demote_to_normal']

    @admin.action(description='Promover a editor')
    def promote_to_editor(self, request, queryset):
        count = queryset.update(role=ROLE_EDITOR)
        self.message_user(request, f'{count} usuarios promovidos a editor.')

    @admin.action(description='Quitar privilegios de edición')
    def demote_to_normal(self, request, queryset):
        count = queryset.exclude(role=ROLE_ADMIN).update(role=ROLE_NORMAL)
        self.message_user(request, f'{count} usuarios actualizados.')
