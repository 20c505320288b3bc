"""Django admin for the document library."""
from django.contrib import admin

from library.models import Category, File


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "color", "file_count")
    search_fields = ("name", "description")
    prepopulated_fields = {"slug": ("name",)}

    @admin.display(description="Files")
    def file_count(self, obj):
        return obj.files.count()


@admin.register(File)
class FileAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "is_pinned", "created_by", "updated_at")
    list_filter = ("is_pinned", "category")
    search_fields = ("name", "description")
    list_select_related = ("category", "created_by")
    raw_id_fields = ("created_by",)
    readonly_fields = ("created_at", "updated_at")
    actions = ["pin_files", "unpin_files"]

    @admin.action(description="Pin selected files")
    def pin_files(self, request, queryset):
        queryset.update(is_pinned=True)

    @admin.action(description="Unpin selected files")
    def unpin_files(self, request, queryset):
        queryset.update(is_pinned=False)
