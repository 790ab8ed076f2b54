from django.conf import settings
from django.contrib import admin
from django.utils.html import format_html_join

from infrastructure.container import container

from .models import Category, Product


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'product_count', 'created_at')
    search_fields = ('name',)
    readonly_fields = ('created_at',)

    def product_count(self, obj):
        return obj.products.count()
    product_count.short_description = "Products"


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('title', 'price', 'prev_price', 'unit_count', 'is_listed', 'show_discount', 'created_at')
    list_filter = ('is_listed', 'show_discount', 'categories', 'created_at')
    search_fields = ('title', 'description')
    filter_horizontal = ('categories',)
    # The gallery is only changed through the API so orphaned files get deleted
    readonly_fields = ('images', 'image_preview', 'prev_price', 'created_at', 'updated_at')

    fieldsets = (
        ('Basic Information', {
            'fields': ('title', 'description', 'categories')
        }),
        ('Pricing & Inventory', {
            'fields': ('price', 'prev_price', 'show_discount', 'unit_count')
        }),
        ('Status & Visibility', {
            'fields': ('is_listed',)
        }),
        ('Gallery', {
            'fields': ('images', 'image_preview'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    def image_preview(self, obj):
        if not obj.images:
            return "No Images"
        marker = settings.CATALOG["UPLOADS_PATH_MARKER"]
        return format_html_join(
            '',
            '<img src="{}" width="100" height="100" style="margin-right:4px" />',
            ((ref if marker in ref else f"{marker}{ref}",) for ref in obj.images if isinstance(ref, str)),
        )
    image_preview.short_description = "Preview"

    # Galleries of deleted products are collected after commit
    def delete_model(self, request, obj):
        orphans = list(obj.images or [])
        super().delete_model(request, obj)
        container.garbage_collector().schedule(orphans)

    def delete_queryset(self, request, queryset):
        orphans = [ref for images in queryset.values_list("images", flat=True) for ref in images or []]
        super().delete_queryset(request, queryset)
        container.garbage_collector().schedule(orphans)
