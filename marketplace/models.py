from marketplace.catalog.domain.models import Category, Product


__all__ = [
    "Category",
    "Product",
]
