import logging

from django.http import QueryDict
from rest_framework import serializers

from marketplace.catalog.domain.models.catalog import Product
from marketplace.catalog.domain.services.image_reconciler import ImageSetReconciler

from .category_serializers import MinimalCategorySerializer


logger = logging.getLogger(__name__)

KEEP_FIELD = "unchangedImgs"


def normalize_keep_list(data, field_name: str = KEEP_FIELD) -> list:
    """
    Read the images a client wants to retain as a list of strings.

    Multipart bodies may repeat the field or send it once; JSON bodies may
    send a string or a list. Missing means nothing is retained.
    """
    if isinstance(data, QueryDict):
        values = data.getlist(field_name)
    else:
        values = data.get(field_name) if hasattr(data, "get") else None

    if values is None:
        return []
    if isinstance(values, str):
        return [values]
    if isinstance(values, (list, tuple)):
        return [value for value in values if isinstance(value, str)]

    logger.debug(f"Ignoring {field_name} of unexpected type {type(values).__name__}")
    return []


class ProductSerializer(serializers.ModelSerializer):
    """Product payload with camelCase keys and images in client-path form"""

    prevPrice = serializers.DecimalField(source="prev_price", max_digits=10, decimal_places=2, read_only=True)
    showDiscount = serializers.BooleanField(source="show_discount", read_only=True)
    unitCount = serializers.IntegerField(source="unit_count", read_only=True)
    isListed = serializers.BooleanField(source="is_listed", read_only=True)
    images = serializers.SerializerMethodField()
    categories = MinimalCategorySerializer(many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "title",
            "price",
            "prevPrice",
            "showDiscount",
            "description",
            "unitCount",
            "isListed",
            "images",
            "categories",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields

    def get_images(self, obj) -> list[str]:
        reconciler = self.context.get("reconciler") or ImageSetReconciler()
        return [reconciler.client_path(ref) for ref in obj.images or [] if isinstance(ref, str)]


class ProductWriteSerializer(serializers.Serializer):
    """Writable product fields; output keys are the model field names"""

    title = serializers.CharField(max_length=200, trim_whitespace=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True)
    showDiscount = serializers.BooleanField(source="show_discount", required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    unitCount = serializers.IntegerField(source="unit_count", min_value=0, required=False)
    isListed = serializers.BooleanField(source="is_listed", required=False)
    categoryIds = serializers.ListField(
        source="category_ids", child=serializers.IntegerField(min_value=1), required=False, allow_empty=True
    )


class ProductCreateSerializer(ProductWriteSerializer):
    """Multipart create body. The image files travel separately in ``images``."""


class ProductUpdateSerializer(ProductWriteSerializer):
    """JSON update body: the product id plus any subset of the writable fields"""

    id = serializers.IntegerField(min_value=1)
    title = serializers.CharField(max_length=200, trim_whitespace=True, required=False)

    def validate(self, attrs):
        if len(attrs) == 1:
            raise serializers.ValidationError("Provide at least one field to update.")
        return attrs


# ===== Response Serializers (documentation only) =====


class ErrorEnvelopeSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=["fail", "error"])
    code = serializers.CharField(help_text="Error code identifier")
    detail = serializers.JSONField(help_text="Human-readable message or field errors")


class ProductEnvelopeSerializer(serializers.Serializer):
    status = serializers.CharField(default="success")
    data = ProductSerializer()


class ProductListEnvelopeSerializer(serializers.Serializer):
    status = serializers.CharField(default="success")
    data = ProductSerializer(many=True)
