from .category_serializers import MinimalCategorySerializer
from .product_serializers import (
    ErrorEnvelopeSerializer,
    ProductCreateSerializer,
    ProductEnvelopeSerializer,
    ProductListEnvelopeSerializer,
    ProductSerializer,
    ProductUpdateSerializer,
    normalize_keep_list,
)


__all__ = [
    "MinimalCategorySerializer",
    "ErrorEnvelopeSerializer",
    "ProductCreateSerializer",
    "ProductEnvelopeSerializer",
    "ProductListEnvelopeSerializer",
    "ProductSerializer",
    "ProductUpdateSerializer",
    "normalize_keep_list",
]
