from django.contrib import admin
from .models import MenuItem


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'price', 'is_active', 'updated_at']
    list_filter = ['category', 'is_active']
    search_fields = ['name', 'category', 'description']
    readonly_fields = ['id', 'created_at', 'updated_at']
    list_editable = ['is_active']
