"""Models for the shared spreadsheet library."""
from django.conf import settings
from django.db import models
from django.utils.text import slugify

from core.models import TimeStampedModel


class Category(TimeStampedModel):
    """Grouping of library files (e.g. "Reports", "Targets")."""

    name = models.CharField("name", max_length=100, unique=True)
    slug = models.SlugField("slug", max_length=120, unique=True, blank=True)
    description = models.TextField("description", blank=True)
    color = models.CharField("color", max_length=20, blank=True, default="")

    class Meta:
        verbose_name = "category"
        verbose_name_plural = "categories"
        ordering = ["name"]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = slugify(self.name)[:120]
        super().save(*args, **kwargs)


class File(TimeStampedModel):
    """Link to a shared spreadsheet, optionally pinned to the top of the list."""

    name = models.CharField("name", max_length=255)
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="files",
        verbose_name="category",
    )
    spreadsheet_url = models.URLField("spreadsheet URL", max_length=1000)
    description = models.TextField("description", blank=True)
    file_size = models.PositiveBigIntegerField("size (bytes)", null=True, blank=True)
    is_pinned = models.BooleanField("pinned", default=False)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="library_files",
        verbose_name="created by",
    )

    class Meta:
        verbose_name = "file"
        verbose_name_plural = "files"
        ordering = ["-is_pinned", "-updated_at"]
        indexes = [
            models.Index(fields=["category"], name="library_file_category_idx"),
            models.Index(fields=["created_by"], name="library_file_created_by_idx"),
            models.Index(fields=["is_pinned"], name="library_file_pinned_idx"),
            models.Index(fields=["-updated_at"], name="library_file_updated_idx"),
        ]

    def __str__(self):
        return self.name
