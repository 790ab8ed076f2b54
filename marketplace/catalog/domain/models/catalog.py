from django.core.validators import MinValueValidator
from django.db import models

from .category import Category


class Product(models.Model):
    # Basic Information
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")

    # Pricing (prev_price keeps the value price had before its last change)
    price = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)]
    )
    prev_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    show_discount = models.BooleanField(default=False)

    # Inventory and Visibility
    unit_count = models.PositiveIntegerField(default=0)
    is_listed = models.BooleanField(default=False)

    # Gallery: stored file names in display order
    images = models.JSONField(default=list, blank=True)

    categories = models.ManyToManyField(Category, blank=True, related_name="products")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        app_label = "marketplace"
        indexes = [
            models.Index(fields=["is_listed", "-created_at"], name="marketplace_is_list_8f3a2c_idx"),
        ]

    def __str__(self):
        return self.title
