"""Lifecycle rules for products embedded in onboarding form data."""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from onboarding_wizard import limits
from onboarding_wizard.domain.identifiers import require_uuid_v4
from onboarding_wizard.domain.products import (
    EDITABLE_PRODUCT_FIELDS,
    Product,
    UploadedFile,
)
from onboarding_wizard.domain.sessions import OnboardingSession
from onboarding_wizard.domain.validation import (
    validate_product,
    validate_product_input,
    validate_products,
)
from onboarding_wizard.errors import (
    EntityValidationError,
    ProductNotFoundError,
    RequestFormatError,
    Violation,
)
from onboarding_wizard.services.photos import PhotoDeletion, PhotoService
from onboarding_wizard.services.sessions import SessionService


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def _new_id() -> str:
    return str(uuid4())


@dataclass
class ProductLifecycle:
    """Assigns ids, ordering and timestamps; never persists anything."""

    clock: Callable[[], datetime] = field(default=_utc_now)
    id_factory: Callable[[], str] = field(default=_new_id)

    def create(
        self, existing: Sequence[Product], payload: Mapping[str, object]
    ) -> Product:
        """Build a new product from client fields.

        Generated fields in the payload (id, displayOrder, timestamps) are
        ignored. The collection limit is checked against existing products.
        """
        result = validate_product_input(payload)
        if not result.ok:
            raise EntityValidationError(result.violations)
        if len(existing) >= limits.MAX_PRODUCTS_PER_SESSION:
            raise EntityValidationError(
                [
                    Violation(
                        "products",
                        f"Maximum {limits.MAX_PRODUCTS_PER_SESSION} products allowed",
                        "too_many_products",
                    )
                ]
            )
        timestamp = self._timestamp()
        return self._validated(
            {
                **result.value.to_payload(),
                "id": self.id_factory(),
                "displayOrder": next_display_order(existing),
                "createdAt": timestamp,
                "updatedAt": timestamp,
            }
        )

    def update(self, existing: Product, patch: Mapping[str, object]) -> Product:
        """Apply client edits, keeping id, createdAt and displayOrder."""
        merged = existing.to_payload()
        for key in EDITABLE_PRODUCT_FIELDS:
            if key in patch:
                merged[key] = patch[key]
        merged["updatedAt"] = self._timestamp()
        return self._validated(merged)

    def add_photo(self, product: Product, photo: UploadedFile) -> Product:
        """Attach an uploaded photo, replacing any photo with the same id."""
        photos = [item for item in product.photos if item.id != photo.id]
        photos.append(photo)
        return self.update(product, {"photos": [item.to_payload() for item in photos]})

    def remove_photo(self, product: Product, photo_id: str) -> Product:
        """Drop a photo reference; a missing photo leaves the product unchanged."""
        if all(item.id != photo_id for item in product.photos):
            return product
        photos = [item.to_payload() for item in product.photos if item.id != photo_id]
        return self.update(product, {"photos": photos})

    def remove(self, products: Sequence[Product], product_id: str) -> list[Product]:
        """Return the collection without a product; other orders are untouched."""
        return [product for product in products if product.id != product_id]

    def _timestamp(self) -> str:
        return self.clock().isoformat()

    @staticmethod
    def _validated(payload: dict[str, object]) -> Product:
        result = validate_product(payload)
        if not result.ok:
            raise EntityValidationError(result.violations)
        return result.value


def next_display_order(products: Sequence[Product]) -> int:
    """Return max existing displayOrder + 1, or 0 for an empty collection."""
    if not products:
        return 0
    return max(product.display_order for product in products) + 1


def parse_products(payload: object) -> list[Product]:
    """Parse a stored products payload, raising on any violation."""
    result = validate_products(payload)
    if not result.ok:
        raise EntityValidationError(result.violations)
    return result.value


@dataclass
class ProductService:
    """Commits product edits to a session's form data.

    Every change rewrites the whole products collection through the session
    store, so the usual validation and last-write-wins rules apply.
    """

    sessions: SessionService
    photos: PhotoService
    lifecycle: ProductLifecycle = field(default_factory=ProductLifecycle)

    def add_product(self, session_id: object, payload: object) -> Product:
        """Create a product at the end of the session's collection."""
        session = self.sessions.load(session_id)
        products = parse_products(session.form_data.get("products", []))
        product = self.lifecycle.create(products, _require_mapping(payload))
        self._commit(session, [*products, product])
        return product

    def update_product(
        self, session_id: object, product_id: object, patch: object
    ) -> Product:
        """Apply client edits to one product."""
        parsed_product = require_uuid_v4("product", product_id)
        changes = _require_mapping(patch)
        session = self.sessions.load(session_id)
        products = parse_products(session.form_data.get("products", []))
        current = _find_product(products, parsed_product)
        if current is None:
            raise ProductNotFoundError(parsed_product)
        updated = self.lifecycle.update(current, changes)
        self._commit(
            session,
            [updated if product is current else product for product in products],
        )
        return updated

    def remove_product(self, session_id: object, product_id: object) -> PhotoDeletion:
        """Remove a product and its stored photos; absent products are fine."""
        parsed_product = require_uuid_v4("product", product_id)
        session = self.sessions.load(session_id)
        products = parse_products(session.form_data.get("products", []))
        current = _find_product(products, parsed_product)
        if current is not None:
            self._commit(session, self.lifecycle.remove(products, current.id))
        return self.photos.delete_product_photos(session.id, parsed_product)

    def _commit(self, session: OnboardingSession, products: list[Product]) -> None:
        self.sessions.update(
            session.id,
            session.current_step,
            {"products": [product.to_payload() for product in products]},
        )


def _require_mapping(payload: object) -> Mapping[str, object]:
    if not isinstance(payload, Mapping):
        raise RequestFormatError("Product payload must be an object")
    return payload


def _find_product(products: Sequence[Product], product_id: UUID) -> Product | None:
    for product in products:
        if UUID(product.id) == product_id:
            return product
    return None
