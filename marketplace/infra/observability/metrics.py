from prometheus_client import Counter


# Upload Metrics
image_uploads_total = Counter(
    "catalog_image_uploads_total",
    "Product image upload batches by outcome",
    ["status"],
)

# Garbage Collection Metrics
image_gc_deletions_total = Counter(
    "catalog_image_gc_deletions_total",
    "Orphaned image deletion attempts by outcome",
    ["status"],
)

# Product Write Metrics
product_writes_total = Counter(
    "catalog_product_writes_total",
    "Product create/update/delete operations by outcome",
    ["operation", "status"],
)
