"""API views for the document library."""
from __future__ import annotations

import logging

from django.db.models import Count
from rest_framework import permissions, viewsets

from api.v1.pagination import StandardResultsSetPagination
from api.v1.permissions import IsOwnerOrPrivileged, IsPrivilegedOrReadOnly
from library.library_serializers import CategorySerializer, FileSerializer
from library.models import Category, File

logger = logging.getLogger("library")


class CategoryViewSet(viewsets.ModelViewSet):
    """Library categories. Public read, super administrators write."""
    serializer_class = CategorySerializer
    permission_classes = [IsPrivilegedOrReadOnly]
    search_fields = ["name", "description"]
    ordering_fields = ["name", "created_at"]
    queryset = Category.objects.annotate(file_count=Count("files")).order_by("name")


class FileViewSet(viewsets.ModelViewSet):
    """
    Library files.

    Anyone reads; authenticated users add files and manage their own;
    super administrators manage every file.
    """
    serializer_class = FileSerializer
    permission_classes = [IsOwnerOrPrivileged]
    pagination_class = StandardResultsSetPagination
    filterset_fields = ["category", "is_pinned"]
    search_fields = ["name", "description"]
    ordering_fields = ["name", "updated_at", "created_at", "is_pinned"]
    owner_field = "created_by"
    queryset = File.objects.select_related("category", "created_by")

    def perform_create(self, serializer):
        file = serializer.save(created_by=self.request.user)
        logger.info("Library file created id=%s by user=%s", file.id, self.request.user.id)

    def perform_destroy(self, instance):
        logger.info("Library file deleted id=%s by user=%s", instance.id, self.request.user.id)
        instance.delete()
