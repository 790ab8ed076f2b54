from django.urls import path

from .api.views import prometheus_metrics
from .catalog.api.views.product_views import ProductViewSet

app_name = "marketplace"

urlpatterns = [
    # Product routes (manual routing, the collection also takes PATCH)
    path(
        "products",
        ProductViewSet.as_view({"get": "list", "post": "create", "patch": "update_product"}),
        name="product-list",
    ),
    path(
        "products/<int:pk>",
        ProductViewSet.as_view({"get": "retrieve", "delete": "destroy"}),
        name="product-detail",
    ),
    path(
        "products/<int:pk>/image",
        ProductViewSet.as_view({"patch": "update_images"}),
        name="product-images",
    ),
    # Prometheus metrics endpoint
    path("metrics/", prometheus_metrics.marketplace_prometheus_metrics, name="marketplace-metrics"),
]
