"""Schema validators for structured onboarding form data.

Every validator is total: malformed input produces violations instead of
exceptions. Violations inside one entity follow the schema's field order and
collection-level violations always come after element-level ones, so the
first violation is the most specific message to show a user.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError

from onboarding_wizard import limits
from onboarding_wizard.domain.identifiers import parse_uuid_v4
from onboarding_wizard.domain.products import (
    TOO_MANY_PHOTOS_MESSAGE,
    Product,
    ProductInput,
    UploadedFile,
)
from onboarding_wizard.domain.sessions import STRUCTURED_FIELDS, FormDataEnvelope
from onboarding_wizard.errors import Violation

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_HEX_COLOR = re.compile(r"#?([0-9a-fA-F]{6})")


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Either a normalized value or the ordered violations that reject it."""

    value: T | None = None
    violations: list[Violation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Return True when the candidate passed every constraint."""
        return not self.violations


def _path(prefix: str, *parts: object) -> str:
    segments = [prefix] if prefix else []
    segments.extend(str(part) for part in parts)
    return ".".join(segments)


def _validate_model(
    model: type[M], candidate: object, prefix: str
) -> ValidationResult[M]:
    try:
        return ValidationResult(value=model.model_validate(candidate))
    except ValidationError as exc:
        return ValidationResult(
            violations=[
                Violation(
                    field=_path(prefix, *error["loc"]),
                    message=error["msg"],
                    code=error["type"],
                )
                for error in exc.errors()
            ]
        )


def validate_uploaded_file(
    candidate: object, prefix: str = ""
) -> ValidationResult[UploadedFile]:
    """Validate photo metadata against the upload constraints."""
    return _validate_model(UploadedFile, candidate, prefix)


def validate_product(candidate: object, prefix: str = "") -> ValidationResult[Product]:
    """Validate a complete product entity."""
    return _with_photo_limit(
        _validate_model(Product, candidate, prefix), candidate, prefix
    )


def validate_product_input(
    candidate: object, prefix: str = ""
) -> ValidationResult[ProductInput]:
    """Validate client-editable product fields before lifecycle assignment."""
    return _with_photo_limit(
        _validate_model(ProductInput, candidate, prefix), candidate, prefix
    )


def _with_photo_limit(
    result: ValidationResult[M], candidate: object, prefix: str
) -> ValidationResult[M]:
    """Add the photo count violation when photo elements failed first.

    The count check on the model only runs once every photo is valid, so an
    oversized list with bad elements needs the aggregate added here.
    """
    if result.ok or not isinstance(candidate, Mapping):
        return result
    photos = candidate.get("photos")
    if not isinstance(photos, list) or len(photos) <= limits.MAX_PHOTOS_PER_PRODUCT:
        return result
    path = _path(prefix, "photos")
    if any(violation.field == path for violation in result.violations):
        return result
    element_positions = [
        index
        for index, violation in enumerate(result.violations)
        if violation.field.startswith(f"{path}.")
    ]
    if not element_positions:
        return result
    violations = list(result.violations)
    violations.insert(
        element_positions[-1] + 1,
        Violation(path, TOO_MANY_PHOTOS_MESSAGE, "too_many_photos"),
    )
    return ValidationResult(violations=violations)


def validate_products(
    candidate: object, prefix: str = "products"
) -> ValidationResult[list[Product]]:
    """Validate a full products collection, elements first, then the aggregate."""
    if not isinstance(candidate, list):
        return ValidationResult(
            violations=[Violation(prefix, "Products must be a list", "invalid_type")]
        )

    violations: list[Violation] = []
    products: list[Product] = []
    for index, item in enumerate(candidate):
        result = validate_product(item, _path(prefix, index))
        violations.extend(result.violations)
        if result.value is not None:
            products.append(result.value)

    if len(candidate) > limits.MAX_PRODUCTS_PER_SESSION:
        violations.append(
            Violation(
                prefix,
                f"Maximum {limits.MAX_PRODUCTS_PER_SESSION} products allowed",
                "too_many_products",
            )
        )
    for product_id in _duplicates(
        _canonical_id(item.get("id"))
        for item in candidate
        if isinstance(item, Mapping)
    ):
        violations.append(
            Violation(prefix, f"Duplicate product ID: {product_id}", "duplicate_id")
        )

    if violations:
        return ValidationResult(violations=violations)
    return ValidationResult(value=products)


def validate_business_photos(
    candidate: object, prefix: str = "businessPhotos"
) -> ValidationResult[list[UploadedFile]]:
    """Validate the business photo gallery uploaded on the assets step."""
    if not isinstance(candidate, list):
        return ValidationResult(
            violations=[
                Violation(prefix, "Business photos must be a list", "invalid_type")
            ]
        )

    violations: list[Violation] = []
    photos: list[UploadedFile] = []
    for index, item in enumerate(candidate):
        result = validate_uploaded_file(item, _path(prefix, index))
        violations.extend(result.violations)
        if result.value is not None:
            photos.append(result.value)

    if len(candidate) > limits.MAX_BUSINESS_PHOTOS:
        violations.append(
            Violation(
                prefix,
                f"Please upload no more than {limits.MAX_BUSINESS_PHOTOS} "
                "business photos",
                "too_many_photos",
            )
        )
    total_size = sum(photo.file_size for photo in photos)
    if total_size > limits.MAX_BUSINESS_PHOTOS_TOTAL_BYTES:
        violations.append(
            Violation(
                prefix,
                "Total size of business photos cannot exceed 300MB",
                "too_large",
            )
        )

    if violations:
        return ValidationResult(violations=violations)
    return ValidationResult(value=photos)


def validate_language_addons(
    candidate: object, prefix: str = "additionalLanguages"
) -> ValidationResult[list[str]]:
    """Validate add-on language codes, normalized to lowercase ISO 639-1."""
    if not isinstance(candidate, list):
        return ValidationResult(
            violations=[Violation(prefix, "Languages must be a list", "invalid_type")]
        )

    violations: list[Violation] = []
    codes: list[str] = []
    for index, item in enumerate(candidate):
        path = _path(prefix, index)
        if not isinstance(item, str):
            violations.append(
                Violation(path, "Language code must be a string", "invalid_type")
            )
            continue
        code = item.strip().lower()
        if code in limits.BASE_PACKAGE_LANGUAGES:
            violations.append(
                Violation(
                    path,
                    "English and Italian are already included in the base package",
                    "base_language",
                )
            )
        elif code not in limits.ADD_ON_LANGUAGES:
            violations.append(
                Violation(path, "Invalid language code selected", "invalid_language")
            )
        else:
            codes.append(code)

    for code in _duplicates(codes):
        violations.append(
            Violation(prefix, f"Language {code} selected more than once", "duplicate")
        )

    if violations:
        return ValidationResult(violations=violations)
    return ValidationResult(value=codes)


def validate_color_palette(
    candidate: object, prefix: str = "colorPalette"
) -> ValidationResult[list[str]]:
    """Validate palette colours ordered background, primary, secondary, accent."""
    if not isinstance(candidate, list):
        return ValidationResult(
            violations=[
                Violation(prefix, "Color palette must be a list", "invalid_type")
            ]
        )

    violations: list[Violation] = []
    colors: list[str] = []
    for index, item in enumerate(candidate):
        match = _HEX_COLOR.fullmatch(item.strip()) if isinstance(item, str) else None
        if match is None:
            violations.append(
                Violation(
                    _path(prefix, index),
                    "Color must be a hex value like #1a2b3c",
                    "invalid_color",
                )
            )
            continue
        colors.append(f"#{match.group(1).lower()}")

    if len(candidate) < limits.MIN_PALETTE_COLORS:
        violations.append(
            Violation(prefix, "Please select a color palette", "too_few_colors")
        )
    elif len(candidate) > limits.MAX_PALETTE_COLORS:
        violations.append(
            Violation(
                prefix,
                f"Color palette cannot exceed {limits.MAX_PALETTE_COLORS} colors",
                "too_many_colors",
            )
        )

    if violations:
        return ValidationResult(violations=violations)
    return ValidationResult(value=colors)


Validator = Callable[[object, str], ValidationResult]

_FIELD_VALIDATORS: dict[str, Validator] = {
    "colorPalette": validate_color_palette,
    "products": validate_products,
    "businessPhotos": validate_business_photos,
    "additionalLanguages": validate_language_addons,
}


def validate_form_data(candidate: object) -> ValidationResult[FormDataEnvelope]:
    """Validate the structured fields of a form data mapping.

    Fields are checked in step order so multi-field failures are reported
    deterministically. Unknown fields are carried through untouched.
    """
    if not isinstance(candidate, Mapping):
        return ValidationResult(
            violations=[
                Violation("formData", "Form data must be an object", "invalid_type")
            ]
        )

    violations: list[Violation] = []
    values: dict[str, object] = {}
    for key, attribute in STRUCTURED_FIELDS.items():
        if key not in candidate:
            continue
        result = _FIELD_VALIDATORS[key](candidate[key], key)
        violations.extend(result.violations)
        values[attribute] = result.value

    if violations:
        return ValidationResult(violations=violations)
    extra = {
        key: value for key, value in candidate.items() if key not in STRUCTURED_FIELDS
    }
    return ValidationResult(value=FormDataEnvelope(extra=extra, **values))


def _duplicates(values) -> list[object]:
    seen: set[object] = set()
    repeated: list[object] = []
    for value in values:
        if not isinstance(value, str):
            continue
        if value in seen and value not in repeated:
            repeated.append(value)
        seen.add(value)
    return repeated


def _canonical_id(value: object) -> object:
    parsed = parse_uuid_v4(value)
    return str(parsed) if parsed is not None else value
