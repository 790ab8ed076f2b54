import logging

from django.conf import settings
from drf_spectacular.utils import OpenApiResponse, extend_schema, inline_serializer
from rest_framework import serializers, status, viewsets
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.catalog.api.serializers import (
    ErrorEnvelopeSerializer,
    ProductCreateSerializer,
    ProductEnvelopeSerializer,
    ProductListEnvelopeSerializer,
    ProductSerializer,
    ProductUpdateSerializer,
    normalize_keep_list,
)
from marketplace.catalog.domain.services import ErrorCodes, ProductImageService, ServiceResult
from marketplace.permissions import IsCatalogEditorOrReadOnly

logger = logging.getLogger(__name__)


# Service error code -> HTTP status
ERROR_STATUS = {
    ErrorCodes.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.PRODUCT_NOT_FOUND: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.UPLOAD_REJECTED: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    ErrorCodes.UPLOAD_FAILED: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCodes.DATABASE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCodes.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(code: str, detail, http_status: int = None) -> Response:
    """Failure envelope: ``fail`` for client errors, ``error`` for server errors."""
    if http_status is None:
        http_status = ERROR_STATUS.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    outcome = "fail" if http_status < 500 else "error"
    return Response({"status": outcome, "code": code, "detail": detail}, status=http_status)


def result_error_response(result: ServiceResult, http_status: int = None) -> Response:
    return error_response(result.error, result.error_detail, http_status)


def success_response(data, http_status: int = status.HTTP_200_OK) -> Response:
    return Response({"status": "success", "data": data}, status=http_status)


PRODUCT_ERRORS = {
    400: OpenApiResponse(response=ErrorEnvelopeSerializer, description="Invalid data or unknown product"),
    401: OpenApiResponse(description="Authentication required"),
    403: OpenApiResponse(description="Catalog editor role required"),
    500: OpenApiResponse(response=ErrorEnvelopeSerializer, description="Internal server error"),
}


class ProductViewSet(viewsets.ViewSet):
    """
    Product catalog endpoints. Reads are public, writes need a catalog editor.
    """

    permission_classes = [IsCatalogEditorOrReadOnly]
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_service(self) -> ProductImageService:
        return container.product_image_service()

    def render_product(self, product):
        return ProductSerializer(product, context={"request": self.request}).data

    def uploaded_files(self, request):
        field_name = getattr(settings, "CATALOG", {}).get("UPLOAD_FIELD_NAME", "images")
        return request.FILES.getlist(field_name)

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        responses={
            200: ProductListEnvelopeSerializer,
            500: OpenApiResponse(response=ErrorEnvelopeSerializer, description="Internal server error"),
        },
        tags=["Catalog - Products"],
    )
    def list(self, request):
        result = self.get_service().list_products()
        if not result.ok:
            return result_error_response(result)

        serializer = ProductSerializer(result.value, many=True, context={"request": request})
        return success_response(serializer.data)

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product details",
        responses={
            200: ProductEnvelopeSerializer,
            404: OpenApiResponse(response=ErrorEnvelopeSerializer, description="Product not found"),
            500: OpenApiResponse(response=ErrorEnvelopeSerializer, description="Internal server error"),
        },
        tags=["Catalog - Products"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_product(pk)
        if not result.ok:
            if result.error == ErrorCodes.PRODUCT_NOT_FOUND:
                return result_error_response(result, status.HTTP_404_NOT_FOUND)
            return result_error_response(result)

        return success_response(self.render_product(result.value))

    @extend_schema(
        operation_id="products_create",
        summary="Create a product with its images",
        description="Multipart form. Image files go in the `images` field, in display order.",
        request={
            "multipart/form-data": inline_serializer(
                name="ProductCreateMultipart",
                fields={
                    "title": serializers.CharField(),
                    "price": serializers.DecimalField(max_digits=10, decimal_places=2, required=False),
                    "showDiscount": serializers.BooleanField(required=False),
                    "description": serializers.CharField(required=False),
                    "unitCount": serializers.IntegerField(required=False),
                    "isListed": serializers.BooleanField(required=False),
                    "images": serializers.ListField(child=serializers.ImageField(), required=False),
                },
            )
        },
        responses={
            201: ProductEnvelopeSerializer,
            413: OpenApiResponse(response=ErrorEnvelopeSerializer, description="Image extension rejected"),
            **PRODUCT_ERRORS,
        },
        tags=["Catalog - Products"],
    )
    def create(self, request):
        serializer = ProductCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(ErrorCodes.VALIDATION_ERROR, serializer.errors)

        result = self.get_service().create_product(serializer.validated_data, self.uploaded_files(request))
        if not result.ok:
            return result_error_response(result)

        return success_response(self.render_product(result.value), status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="products_update",
        summary="Update product fields and categories",
        description=(
            "JSON body with the product `id` and any writable field. `categoryIds`, when present, "
            "replaces every category of the product. Changing `price` moves the old price to `prevPrice`."
        ),
        request=ProductUpdateSerializer,
        responses={200: ProductEnvelopeSerializer, **PRODUCT_ERRORS},
        tags=["Catalog - Products"],
    )
    def update_product(self, request):
        serializer = ProductUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response(ErrorCodes.VALIDATION_ERROR, serializer.errors)

        data = dict(serializer.validated_data)
        product_id = data.pop("id")

        result = self.get_service().update_product(product_id, data)
        if not result.ok:
            return result_error_response(result)

        return success_response(self.render_product(result.value))

    @extend_schema(
        operation_id="products_update_images",
        summary="Replace a product's gallery",
        description=(
            "Multipart form. `unchangedImgs` lists the current images to keep, as returned in `images` "
            "(`/uploads/<name>`), once or repeated. New files in `images` are placed first. "
            "Current images not kept are deleted from storage."
        ),
        request={
            "multipart/form-data": inline_serializer(
                name="ProductImagesMultipart",
                fields={
                    "unchangedImgs": serializers.ListField(child=serializers.CharField(), required=False),
                    "images": serializers.ListField(child=serializers.ImageField(), required=False),
                },
            )
        },
        responses={
            200: ProductEnvelopeSerializer,
            413: OpenApiResponse(response=ErrorEnvelopeSerializer, description="Image extension rejected"),
            **PRODUCT_ERRORS,
        },
        tags=["Catalog - Products"],
    )
    def update_images(self, request, pk=None):
        keep = normalize_keep_list(request.data)

        result = self.get_service().update_product_images(pk, keep, self.uploaded_files(request))
        if not result.ok:
            return result_error_response(result)

        return success_response(self.render_product(result.value))

    @extend_schema(
        operation_id="products_destroy",
        summary="Delete a product and its images",
        responses={204: None, **PRODUCT_ERRORS},
        tags=["Catalog - Products"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_product(pk)
        if not result.ok:
            return result_error_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)
