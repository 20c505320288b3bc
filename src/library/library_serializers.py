"""DRF Serializers for the document library."""
from rest_framework import serializers

from library.models import Category, File


class CategorySerializer(serializers.ModelSerializer):
    file_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Category
        fields = ["id", "name", "slug", "description", "color", "file_count", "created_at"]
        read_only_fields = ["id", "slug", "created_at"]


class FileSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = File
        fields = [
            "id", "name", "category", "category_name", "spreadsheet_url",
            "description", "file_size", "is_pinned",
            "created_by", "created_by_name", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_by", "created_at", "updated_at"]

    def get_created_by_name(self, obj):
        if obj.created_by_id is None:
            return None
        return obj.created_by.display_name
