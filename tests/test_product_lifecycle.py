"""Tests for product lifecycle rules and product commits."""

from uuid import uuid4

import pytest

from onboarding_wizard.domain.identifiers import is_uuid_v4
from onboarding_wizard.domain.products import Product, UploadedFile
from onboarding_wizard.domain.validation import validate_products
from onboarding_wizard.errors import (
    EntityValidationError,
    ProductNotFoundError,
    RequestFormatError,
)
from onboarding_wizard.services.products import (
    ProductLifecycle,
    next_display_order,
    parse_products,
)
from tests.conftest import photo_payload, product_payload

NEW_PRODUCT = {
    "name": "Logo Design",
    "description": "A custom logo with three revision rounds.",
    "price": 250,
}


def _product(**overrides: object) -> Product:
    return Product.model_validate(product_payload(**overrides))


def test_create_assigns_generated_fields(lifecycle: ProductLifecycle) -> None:
    product = lifecycle.create([], NEW_PRODUCT)

    assert is_uuid_v4(product.id)
    assert product.display_order == 0
    assert product.created_at == product.updated_at
    assert product.created_at.startswith("2025-11-20T10:30:01")
    assert product.photos == []


def test_create_ignores_client_supplied_generated_fields(
    lifecycle: ProductLifecycle,
) -> None:
    product = lifecycle.create(
        [],
        {
            **NEW_PRODUCT,
            "id": "client-id",
            "displayOrder": 9,
            "createdAt": "2020-01-01T00:00:00Z",
        },
    )

    assert product.id != "client-id"
    assert product.display_order == 0
    assert product.created_at != "2020-01-01T00:00:00Z"


def test_three_products_round_trip(lifecycle: ProductLifecycle) -> None:
    products: list[Product] = []
    for index in range(3):
        products.append(
            lifecycle.create(products, {**NEW_PRODUCT, "name": f"Product {index}"})
        )

    stored = [product.to_payload() for product in products]
    result = validate_products(stored)

    assert result.ok
    assert result.value is not None
    assert [product.id for product in result.value] == [p.id for p in products]
    assert [product.display_order for product in result.value] == [0, 1, 2]
    assert [product.created_at for product in result.value] == [
        p.created_at for p in products
    ]


def test_create_rejects_seventh_product(lifecycle: ProductLifecycle) -> None:
    existing = [_product(displayOrder=index) for index in range(6)]

    with pytest.raises(EntityValidationError, match="Maximum 6 products allowed"):
        lifecycle.create(existing, NEW_PRODUCT)


def test_create_rejects_invalid_input(lifecycle: ProductLifecycle) -> None:
    with pytest.raises(EntityValidationError) as exc_info:
        lifecycle.create([], {**NEW_PRODUCT, "name": "ab", "price": 19.999})

    assert [violation.field for violation in exc_info.value.violations] == [
        "name",
        "price",
    ]
    assert exc_info.value.headline == "Product name must be at least 3 characters"


def test_update_preserves_identity_and_refreshes_timestamp(
    lifecycle: ProductLifecycle,
) -> None:
    original = _product(displayOrder=3)

    updated = lifecycle.update(
        original,
        {"name": "Renamed Service", "id": str(uuid4()), "displayOrder": 0},
    )

    assert updated.name == "Renamed Service"
    assert updated.id == original.id
    assert updated.display_order == 3
    assert updated.created_at == original.created_at
    assert updated.updated_at != original.updated_at


def test_update_rejection_leaves_product_unchanged(
    lifecycle: ProductLifecycle,
) -> None:
    original = _product()

    with pytest.raises(EntityValidationError):
        lifecycle.update(original, {"description": "short"})

    assert original.description == product_payload()["description"]


def test_add_photo_enforces_photo_limit(lifecycle: ProductLifecycle) -> None:
    product = _product(photos=[photo_payload() for _ in range(5)])
    photo = UploadedFile.model_validate(photo_payload())

    with pytest.raises(EntityValidationError, match="Maximum 5 photos per product"):
        lifecycle.add_photo(product, photo)


def test_add_and_remove_photo(lifecycle: ProductLifecycle) -> None:
    photo = UploadedFile.model_validate(photo_payload())

    with_photo = lifecycle.add_photo(_product(), photo)
    without_photo = lifecycle.remove_photo(with_photo, photo.id)

    assert [item.id for item in with_photo.photos] == [photo.id]
    assert without_photo.photos == []
    assert lifecycle.remove_photo(without_photo, photo.id) is without_photo


def test_remove_keeps_remaining_display_orders(lifecycle: ProductLifecycle) -> None:
    products = [_product(displayOrder=index) for index in range(3)]

    remaining = lifecycle.remove(products, products[1].id)

    assert [product.display_order for product in remaining] == [0, 2]
    assert next_display_order(remaining) == 3
    assert next_display_order([]) == 0


def test_parse_products_raises_on_invalid_payload() -> None:
    with pytest.raises(EntityValidationError):
        parse_products([{"name": "ab"}])


def test_product_service_adds_product_to_session(
    container, session_repository
) -> None:
    session = session_repository.create_session(current_step=11)

    product = container.product_service.add_product(str(session.id), NEW_PRODUCT)

    stored = session_repository.sessions[session.id]
    assert stored.current_step == 11
    assert stored.form_data["products"] == [product.to_payload()]


def test_product_service_updates_product(container, session_repository) -> None:
    existing = product_payload()
    session = session_repository.create_session({"products": [existing]})

    updated = container.product_service.update_product(
        str(session.id), existing["id"], {"price": 99.5}
    )

    stored = session_repository.sessions[session.id].form_data["products"]
    assert updated.price == 99.5
    assert stored[0]["price"] == 99.5
    assert stored[0]["createdAt"] == existing["createdAt"]


def test_product_service_update_unknown_product(
    container, session_repository
) -> None:
    session = session_repository.create_session({"products": []})

    with pytest.raises(ProductNotFoundError):
        container.product_service.update_product(
            str(session.id), str(uuid4()), {"price": 10}
        )


def test_product_service_rejects_non_mapping_payload(
    container, session_repository
) -> None:
    session = session_repository.create_session()

    with pytest.raises(RequestFormatError):
        container.product_service.add_product(str(session.id), ["name"])


def test_product_service_removes_product_and_photos(
    container, session_repository, photo_storage
) -> None:
    kept = product_payload(displayOrder=0)
    removed = product_payload(displayOrder=1)
    session = session_repository.create_session({"products": [kept, removed]})
    photo_storage.files[f"{session.id}/products/{removed['id']}/a.jpg"] = b"a"
    photo_storage.files[f"{session.id}/products/{removed['id']}/b.png"] = b"b"

    first = container.product_service.remove_product(str(session.id), removed["id"])
    second = container.product_service.remove_product(str(session.id), removed["id"])

    stored = session_repository.sessions[session.id].form_data["products"]
    assert [product["id"] for product in stored] == [kept["id"]]
    assert stored[0]["displayOrder"] == 0
    assert first.removed == 2
    assert second.removed == 0
    assert second.success
    assert photo_storage.files == {}
