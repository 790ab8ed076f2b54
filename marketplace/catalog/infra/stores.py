"""
Django ORM access for products and categories.

Services go through these stores instead of the model managers so they can
be exercised with a MagicMock in unit tests.
"""

from typing import Any, Dict, Iterable, List, Optional

from marketplace.models import Category, Product


class ProductStore:
    def find(self, product_id) -> Optional[Product]:
        return Product.objects.filter(pk=product_id).first()

    def find_with_categories(self, product_id) -> Optional[Product]:
        return Product.objects.prefetch_related("categories").filter(pk=product_id).first()

    def find_all(self, with_categories: bool = True) -> List[Product]:
        queryset = Product.objects.all()
        if with_categories:
            queryset = queryset.prefetch_related("categories")
        return list(queryset)

    def create(self, fields: Dict[str, Any]) -> Product:
        return Product.objects.create(**fields)

    def update(self, product: Product, fields: Dict[str, Any]) -> Product:
        for name, value in fields.items():
            setattr(product, name, value)
        product.save(update_fields=[*fields.keys(), "updated_at"])
        return product

    def delete(self, product: Product) -> None:
        product.delete()

    def set_categories(self, product: Product, categories: Iterable[Category]) -> None:
        product.categories.set(list(categories))


class CategoryStore:
    def find_by_ids(self, ids: Iterable[int]) -> List[Category]:
        return list(Category.objects.filter(pk__in=list(ids)))
