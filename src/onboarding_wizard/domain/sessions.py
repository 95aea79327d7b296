"""Domain models for onboarding sessions."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from onboarding_wizard.domain.products import Product, UploadedFile

# Form data keys with a schema, mapped to their envelope attribute.
STRUCTURED_FIELDS = {
    "colorPalette": "color_palette",
    "products": "products",
    "businessPhotos": "business_photos",
    "additionalLanguages": "additional_languages",
}


@dataclass(frozen=True)
class FormDataEnvelope:
    """Validated form data split into typed structured fields and free fields.

    A structured attribute set to None means the key was absent, which is
    different from an empty list.
    """

    color_palette: list[str] | None = None
    products: list[Product] | None = None
    business_photos: list[UploadedFile] | None = None
    additional_languages: list[str] | None = None
    extra: dict[str, object] = field(default_factory=dict)

    def to_form_data(self) -> dict[str, object]:
        """Return the JSON document stored in the session's form_data column."""
        data = dict(self.extra)
        for key, attribute in STRUCTURED_FIELDS.items():
            value = getattr(self, attribute)
            if value is not None:
                data[key] = [_to_payload(item) for item in value]
        return data


@dataclass(frozen=True)
class OnboardingSession:
    """Persisted, evolving record of one client's onboarding progress."""

    id: UUID
    current_step: int
    form_data: dict[str, object]
    last_activity: datetime | None = None
    updated_at: datetime | None = None
    created_at: datetime | None = None
    expires_at: datetime | None = None
    email: str | None = None
    locale: str | None = None


@dataclass(frozen=True)
class SaveResult:
    """Outcome of a committed session write."""

    session_id: UUID
    last_saved: datetime


def _to_payload(item: object) -> object:
    if isinstance(item, Product | UploadedFile):
        return item.to_payload()
    return item
