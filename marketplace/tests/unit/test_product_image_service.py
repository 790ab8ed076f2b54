from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest
from django.db import DatabaseError

from infrastructure.uploads import DecoderInternalError, ExtensionRejected, UnknownUploadError
from marketplace.catalog.domain.services import ErrorCodes, ImageSetReconciler, ProductImageService


@pytest.fixture(autouse=True)
def no_db_transaction():
    with patch("marketplace.catalog.domain.services.product_image_service.transaction") as mock_transaction:
        yield mock_transaction


@pytest.fixture
def product_store():
    return MagicMock()


@pytest.fixture
def upload_decoder():
    decoder = MagicMock()
    decoder.decode.return_value = []
    return decoder


@pytest.fixture
def category_linker():
    return MagicMock()


@pytest.fixture
def garbage_collector():
    return MagicMock()


@pytest.fixture
def service(product_store, upload_decoder, category_linker, garbage_collector):
    return ProductImageService(
        product_store=product_store,
        upload_decoder=upload_decoder,
        reconciler=ImageSetReconciler(marker="/uploads/", allowed_suffixes=("png", "jpg", "jpeg")),
        category_linker=category_linker,
        garbage_collector=garbage_collector,
    )


def make_product(pk=1, images=None, price=Decimal("10.00")):
    product = MagicMock(id=pk, price=price)
    product.images = list(images or [])
    return product


@pytest.mark.unit
class TestCreateProduct:
    def test_blank_title_is_rejected_before_any_upload(self, service, upload_decoder, product_store):
        result = service.create_product({"title": "   "}, files=[MagicMock()])

        assert result.ok is False
        assert result.error == ErrorCodes.INVALID_INPUT
        upload_decoder.decode.assert_not_called()
        product_store.create.assert_not_called()

    def test_gallery_is_the_uploads_in_order(self, service, upload_decoder, product_store):
        files = [MagicMock(), MagicMock()]
        upload_decoder.decode.return_value = ["b.png", "a.jpg"]
        created = make_product(pk=7)
        product_store.create.return_value = created
        product_store.find_with_categories.return_value = created

        result = service.create_product({"title": "Lamp", "price": Decimal("20.00")}, files)

        assert result.ok is True
        assert result.value is created
        upload_decoder.decode.assert_called_once_with(files)
        fields = product_store.create.call_args.args[0]
        assert fields["images"] == ["b.png", "a.jpg"]
        assert fields["title"] == "Lamp"
        assert fields["show_discount"] is False
        assert fields["unit_count"] == 0
        assert fields["is_listed"] is False

    def test_categories_are_linked_when_given(self, service, product_store, category_linker):
        created = make_product()
        product_store.create.return_value = created
        product_store.find_with_categories.return_value = created
        category_linker.resolve.return_value = ["cat"]

        service.create_product({"title": "Lamp", "category_ids": [1]})

        category_linker.resolve.assert_called_once_with([1])
        product_store.set_categories.assert_called_once_with(created, ["cat"])

    @pytest.mark.parametrize(
        "error, code",
        [
            (ExtensionRejected("x.exe", [".png"]), ErrorCodes.UPLOAD_REJECTED),
            (DecoderInternalError("too many files"), ErrorCodes.UPLOAD_FAILED),
            (UnknownUploadError("disk full"), ErrorCodes.UPLOAD_FAILED),
        ],
    )
    def test_upload_errors_are_mapped(self, service, upload_decoder, product_store, error, code):
        upload_decoder.decode.side_effect = error

        result = service.create_product({"title": "Lamp"}, files=[MagicMock()])

        assert result.error == code
        product_store.create.assert_not_called()

    def test_decoder_returning_a_tuple_is_accepted(self, service, upload_decoder, product_store):
        upload_decoder.decode.return_value = ("a.png", "b.jpg")
        created = make_product()
        product_store.create.return_value = created
        product_store.find_with_categories.return_value = created

        result = service.create_product({"title": "Lamp"}, files=[MagicMock(), MagicMock()])

        assert result.ok is True
        assert product_store.create.call_args.args[0]["images"] == ["a.png", "b.jpg"]

    def test_database_failure_is_reported(self, service, upload_decoder, product_store):
        upload_decoder.decode.return_value = ["a.png"]
        product_store.create.side_effect = DatabaseError("locked")

        result = service.create_product({"title": "Lamp"}, files=[MagicMock()])

        assert result.error == ErrorCodes.DATABASE_ERROR


@pytest.mark.unit
class TestUpdateProduct:
    def test_requires_a_field(self, service, product_store):
        result = service.update_product(1, {})

        assert result.error == ErrorCodes.INVALID_INPUT
        product_store.find.assert_not_called()

    def test_unknown_product(self, service, product_store):
        product_store.find.return_value = None

        result = service.update_product(99, {"title": "New"})

        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND

    def test_price_change_moves_old_price_to_prev_price(self, service, product_store):
        product = make_product(price=Decimal("10.00"))
        product_store.find.return_value = product

        service.update_product(1, {"price": Decimal("8.00")})

        product_store.update.assert_called_once_with(product, {"price": Decimal("8.00"), "prev_price": Decimal("10.00")})

    def test_same_price_keeps_prev_price(self, service, product_store):
        product = make_product(price=Decimal("10.00"))
        product_store.find.return_value = product

        service.update_product(1, {"price": Decimal("10.00"), "title": "Same"})

        fields = product_store.update.call_args.args[1]
        assert "prev_price" not in fields

    def test_category_ids_replace_categories(self, service, product_store, category_linker):
        product = make_product()
        product_store.find.return_value = product
        category_linker.resolve.return_value = []

        result = service.update_product(1, {"category_ids": []})

        assert result.ok is True
        category_linker.resolve.assert_called_once_with([])
        product_store.set_categories.assert_called_once_with(product, [])

    def test_categories_untouched_without_category_ids(self, service, product_store):
        product_store.find.return_value = make_product()

        service.update_product(1, {"unit_count": 3})

        product_store.set_categories.assert_not_called()

    def test_gallery_is_never_written(self, service, product_store):
        product_store.find.return_value = make_product(images=["a.png"])

        service.update_product(1, {"title": "x", "images": []})

        fields = product_store.update.call_args.args[1]
        assert "images" not in fields


@pytest.mark.unit
class TestUpdateProductImages:
    def test_unknown_product_uploads_nothing(self, service, product_store, upload_decoder):
        product_store.find.return_value = None

        result = service.update_product_images(5, ["/uploads/a.jpg"], files=[MagicMock()])

        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND
        upload_decoder.decode.assert_not_called()

    def test_persists_gallery_and_schedules_orphans(self, service, product_store, upload_decoder, garbage_collector):
        product = make_product(images=["/uploads/a.jpg", "/uploads/b.png"])
        product_store.find.return_value = product
        product_store.find_with_categories.return_value = product
        upload_decoder.decode.return_value = ["c.jpg"]

        result = service.update_product_images(1, ["/uploads/a.jpg"], files=[MagicMock()])

        assert result.ok is True
        product_store.update.assert_called_once_with(product, {"images": ["c.jpg", "a.jpg"]})
        garbage_collector.schedule.assert_called_once_with(["/uploads/b.png"])

    def test_rejected_upload_leaves_gallery_alone(self, service, product_store, upload_decoder, garbage_collector):
        product_store.find.return_value = make_product(images=["a.png"])
        upload_decoder.decode.side_effect = ExtensionRejected("x.gif", [".png"])

        result = service.update_product_images(1, [], files=[MagicMock()])

        assert result.error == ErrorCodes.UPLOAD_REJECTED
        product_store.update.assert_not_called()
        garbage_collector.schedule.assert_not_called()

    def test_database_failure_deletes_nothing(self, service, product_store, upload_decoder, garbage_collector):
        product_store.find.return_value = make_product(images=["a.png"])
        product_store.update.side_effect = DatabaseError("deadlock")
        upload_decoder.decode.return_value = ["b.png"]

        result = service.update_product_images(1, [], files=[MagicMock()])

        assert result.error == ErrorCodes.DATABASE_ERROR
        garbage_collector.schedule.assert_not_called()


@pytest.mark.unit
class TestDeleteProduct:
    def test_orphans_whole_gallery(self, service, product_store, garbage_collector):
        product = make_product(images=["a.png", "/uploads/b.jpg"])
        product_store.find.return_value = product

        result = service.delete_product(1)

        assert result.ok is True
        product_store.delete.assert_called_once_with(product)
        garbage_collector.schedule.assert_called_once_with(["a.png", "/uploads/b.jpg"])

    def test_unknown_product(self, service, product_store, garbage_collector):
        product_store.find.return_value = None

        result = service.delete_product(1)

        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND
        garbage_collector.schedule.assert_not_called()


@pytest.mark.unit
class TestReads:
    def test_get_unknown_product(self, service, product_store):
        product_store.find_with_categories.return_value = None

        result = service.get_product(3)

        assert result.error == ErrorCodes.PRODUCT_NOT_FOUND

    def test_list_products_prefetches_categories(self, service, product_store):
        product_store.find_all.return_value = ["p"]

        result = service.list_products()

        assert result.value == ["p"]
        product_store.find_all.assert_called_once_with(with_categories=True)
