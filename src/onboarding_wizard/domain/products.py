"""Product and uploaded photo entities embedded in onboarding form data."""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from onboarding_wizard import limits
from onboarding_wizard.domain.identifiers import is_uuid_v4

_HTTP_URL = TypeAdapter(HttpUrl)
TOO_MANY_PHOTOS_MESSAGE = f"Maximum {limits.MAX_PHOTOS_PER_PRODUCT} photos per product"


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _uuid(kind: str):
    def check(value: str) -> str:
        if not is_uuid_v4(value):
            raise PydanticCustomError("invalid_id", f"Invalid {kind} ID format")
        return value

    return AfterValidator(check)


def _timestamp(message: str):
    def check(value: str) -> str:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise PydanticCustomError("invalid_timestamp", message) from None
        if parsed.tzinfo is None:
            raise PydanticCustomError("invalid_timestamp", message)
        return value

    return AfterValidator(check)


def _trimmed_text(label: str, min_length: int, max_length: int):
    def check(value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise PydanticCustomError("empty", f"{label} cannot be empty")
        if len(trimmed) < min_length:
            raise PydanticCustomError(
                "too_short", f"{label} must be at least {min_length} characters"
            )
        if len(trimmed) > max_length:
            raise PydanticCustomError(
                "too_long", f"{label} cannot exceed {max_length} characters"
            )
        return trimmed

    return AfterValidator(check)


def _check_file_name(value: str) -> str:
    if not value:
        raise PydanticCustomError("empty", "File name is required")
    if len(value) > limits.MAX_FILE_NAME_LENGTH:
        raise PydanticCustomError(
            "too_long",
            f"File name is too long (max {limits.MAX_FILE_NAME_LENGTH} characters)",
        )
    return value


def _check_file_size(value: object) -> object:
    if not _is_number(value):
        raise PydanticCustomError("invalid_type", "File size must be a number")
    if isinstance(value, float) and not value.is_integer():
        raise PydanticCustomError("not_integer", "File size must be an integer")
    if value <= 0:
        raise PydanticCustomError("not_positive", "File size must be positive")
    if value > limits.MAX_PHOTO_FILE_SIZE_BYTES:
        raise PydanticCustomError("too_large", "File size cannot exceed 10 MB")
    return int(value)


def _check_mime_type(value: str) -> str:
    if value not in limits.ALLOWED_PHOTO_MIME_TYPES:
        raise PydanticCustomError(
            "unsupported_type", "Only JPEG, PNG, and WebP images are supported"
        )
    return value


def _check_url(value: str) -> str:
    try:
        _HTTP_URL.validate_python(value)
    except ValidationError:
        raise PydanticCustomError("invalid_url", "Invalid photo URL") from None
    return value


def _check_dimension(value: object) -> object:
    if value is None:
        return None
    if not _is_number(value) or (isinstance(value, float) and not value.is_integer()):
        raise PydanticCustomError("not_integer", "Dimension must be an integer")
    if value <= 0:
        raise PydanticCustomError("not_positive", "Dimension must be positive")
    return int(value)


def _check_price(value: object) -> object:
    if value is None:
        return None
    if not _is_number(value):
        raise PydanticCustomError("invalid_type", "Price must be a number")
    amount = Decimal(value) if isinstance(value, int) else Decimal(str(value))
    if not amount.is_finite():
        raise PydanticCustomError("invalid_type", "Price must be a number")
    if amount <= 0:
        raise PydanticCustomError("not_positive", "Price must be a positive number")
    cents = amount.scaleb(limits.PRODUCT_PRICE_DECIMAL_PLACES)
    if cents != cents.to_integral_value():
        raise PydanticCustomError(
            "too_precise", "Price cannot have more than 2 decimal places"
        )
    try:
        float(value)
    except OverflowError:
        raise PydanticCustomError("too_large", "Price is too large") from None
    return value


def _check_display_order(value: object) -> object:
    if not _is_number(value) or (isinstance(value, float) and not value.is_integer()):
        raise PydanticCustomError("not_integer", "Display order must be an integer")
    if value < 0:
        raise PydanticCustomError("negative", "Display order must be non-negative")
    return int(value)


def _check_photo_count(value: list) -> list:
    if len(value) > limits.MAX_PHOTOS_PER_PRODUCT:
        raise PydanticCustomError("too_many_photos", TOO_MANY_PHOTOS_MESSAGE)
    return value


ProductName = Annotated[
    str,
    _trimmed_text(
        "Product name",
        limits.PRODUCT_NAME_MIN_LENGTH,
        limits.PRODUCT_NAME_MAX_LENGTH,
    ),
]
ProductDescription = Annotated[
    str,
    _trimmed_text(
        "Description",
        limits.PRODUCT_DESCRIPTION_MIN_LENGTH,
        limits.PRODUCT_DESCRIPTION_MAX_LENGTH,
    ),
]
Price = Annotated[float | None, BeforeValidator(_check_price)]
Dimension = Annotated[int | None, BeforeValidator(_check_dimension)]


class _Entity(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_payload(self) -> dict[str, object]:
        """Return the camelCase JSON payload stored in form data."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UploadedFile(_Entity):
    """Metadata for a photo already stored in object storage."""

    id: Annotated[str, _uuid("photo")]
    file_name: Annotated[str, AfterValidator(_check_file_name)]
    file_size: Annotated[int, BeforeValidator(_check_file_size)]
    mime_type: Annotated[str, AfterValidator(_check_mime_type)]
    url: Annotated[str, AfterValidator(_check_url)]
    width: Dimension = None
    height: Dimension = None
    uploaded_at: Annotated[str, _timestamp("Invalid upload timestamp")]


PhotoList = Annotated[list[UploadedFile], AfterValidator(_check_photo_count)]


class ProductInput(_Entity):
    """Client-editable product fields, before ids and timestamps exist."""

    name: ProductName
    description: ProductDescription
    price: Price = None
    photos: PhotoList = Field(default_factory=list)


class Product(_Entity):
    """A product or service the client wants on their website."""

    id: Annotated[str, _uuid("product")]
    name: ProductName
    description: ProductDescription
    price: Price = None
    photos: PhotoList = Field(default_factory=list)
    display_order: Annotated[int, BeforeValidator(_check_display_order)]
    created_at: Annotated[str, _timestamp("Invalid creation timestamp")]
    updated_at: Annotated[str, _timestamp("Invalid update timestamp")]


EDITABLE_PRODUCT_FIELDS = ("name", "description", "price", "photos")
