from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, Shop


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for back-office accounts (email login, no first/last name)."""

    list_display = ['email', 'username', 'role', 'is_active', 'created_at', 'last_login']
    list_filter = ['role', 'is_active', 'is_staff']
    search_fields = ['email', 'username']
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'username', 'password')
        }),
        ('Permissions', {
            'fields': ('role', 'is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create Admin', {
            'classes': ('wide',),
            'fields': ('email', 'username', 'role', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']
    filter_horizontal = ['groups', 'user_permissions']


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    list_display = ['name', 'phone', 'email', 'established']
    readonly_fields = ['created_at', 'updated_at']

    def has_add_permission(self, request):
        # Single shop profile
        return not Shop.objects.exists()
