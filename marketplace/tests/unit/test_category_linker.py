from unittest.mock import MagicMock

import pytest

from marketplace.catalog.domain.services.category_linker import ProductCategoryLinker


@pytest.fixture
def category_store():
    return MagicMock()


@pytest.fixture
def linker(category_store):
    return ProductCategoryLinker(category_store=category_store)


def category(pk):
    return MagicMock(id=pk, name=f"Category {pk}")


@pytest.mark.unit
class TestProductCategoryLinker:
    @pytest.mark.parametrize("ids", [None, []])
    def test_no_ids_resolves_to_no_categories(self, linker, category_store, ids):
        assert linker.resolve(ids) == []
        category_store.find_by_ids.assert_not_called()

    def test_returns_matching_categories(self, linker, category_store):
        first, second = category(1), category(2)
        category_store.find_by_ids.return_value = [first, second]

        assert linker.resolve([1, 2]) == [first, second]
        category_store.find_by_ids.assert_called_once_with([1, 2])

    def test_unknown_ids_are_dropped(self, linker, category_store):
        known = category(1)
        category_store.find_by_ids.return_value = [known]

        assert linker.resolve([1, 999]) == [known]

    def test_repeated_ids_are_looked_up_once(self, linker, category_store):
        category_store.find_by_ids.return_value = []

        linker.resolve([3, 3, 4])

        category_store.find_by_ids.assert_called_once_with([3, 4])
