import logging
from typing import Iterable, List, Optional

from marketplace.models import Category

logger = logging.getLogger(__name__)


class ProductCategoryLinker:
    """Turns client supplied category ids into the categories to attach to a product."""

    def __init__(self, category_store):
        self.category_store = category_store

    def resolve(self, category_ids: Optional[Iterable[int]]) -> List[Category]:
        """
        Look up the categories for ``category_ids``.

        None or an empty list resolves to no categories. Ids without a matching
        category are dropped.
        """
        if not category_ids:
            return []

        wanted = list(dict.fromkeys(category_ids))
        categories = list(self.category_store.find_by_ids(wanted))

        found = {category.id for category in categories}
        missing = [category_id for category_id in wanted if category_id not in found]
        if missing:
            logger.debug(f"Dropping unknown category ids: {missing}")

        return categories
