"""Photo lifecycle gateway for product photos in object storage."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from onboarding_wizard.domain.identifiers import require_uuid_v4
from onboarding_wizard.domain.products import UploadedFile
from onboarding_wizard.domain.validation import validate_uploaded_file
from onboarding_wizard.errors import EntityValidationError

logger = logging.getLogger(__name__)

_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/webp": "webp"}


class PhotoStorage(Protocol):
    """Object storage interface for product photos."""

    def upload_photo(  # noqa: PLR0913
        self,
        session_id: UUID,
        product_id: UUID,
        photo_id: UUID,
        extension: str,
        content: bytes,
        content_type: str,
    ) -> str:
        """Store a new photo without overwriting and return its public URL."""

    def delete_photo(self, session_id: UUID, product_id: UUID, photo_id: UUID) -> bool:
        """Delete a photo, returning False when it was not stored."""

    def delete_product_photos(self, session_id: UUID, product_id: UUID) -> int:
        """Delete every photo of a product and return how many were removed."""


@dataclass(frozen=True)
class PhotoDeletion:
    """Outcome of a photo deletion; success is True even for absent photos."""

    removed: int
    success: bool = True


@dataclass
class PhotoService:
    """Uploads and deletes product photos.

    Deletion is idempotent: a photo that is already gone is reported as a
    successful delete so client retries never fail. Removing the photo from
    the product's photos list is a separate session patch.
    """

    storage: PhotoStorage
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC))

    def delete_photo(
        self, session_id: object, product_id: object, photo_id: object
    ) -> PhotoDeletion:
        """Delete one product photo."""
        parsed_session = require_uuid_v4("session", session_id)
        parsed_product = require_uuid_v4("product", product_id)
        parsed_photo = require_uuid_v4("photo", photo_id)
        removed = self.storage.delete_photo(
            parsed_session, parsed_product, parsed_photo
        )
        if not removed:
            logger.warning(
                "Photo not found in storage, treating delete as done",
                extra={
                    "session_id": str(parsed_session),
                    "photo_id": str(parsed_photo),
                },
            )
        return PhotoDeletion(removed=int(removed))

    def delete_product_photos(
        self, session_id: object, product_id: object
    ) -> PhotoDeletion:
        """Delete every photo stored for a product."""
        parsed_session = require_uuid_v4("session", session_id)
        parsed_product = require_uuid_v4("product", product_id)
        removed = self.storage.delete_product_photos(parsed_session, parsed_product)
        return PhotoDeletion(removed=removed)

    def upload_photo(  # noqa: PLR0913
        self,
        session_id: object,
        product_id: object,
        file_name: str,
        content_type: str,
        content: bytes,
        width: int | None = None,
        height: int | None = None,
    ) -> UploadedFile:
        """Validate and store a photo, returning its metadata.

        Type and size are checked before anything reaches storage.
        """
        parsed_session = require_uuid_v4("session", session_id)
        parsed_product = require_uuid_v4("product", product_id)
        photo_id = uuid4()
        candidate = {
            "id": str(photo_id),
            "fileName": file_name,
            "fileSize": len(content),
            "mimeType": content_type,
            "width": width,
            "height": height,
            "uploadedAt": self.clock().isoformat(),
        }
        pending = [
            violation
            for violation in validate_uploaded_file(candidate).violations
            if violation.field != "url"
        ]
        if pending:
            raise EntityValidationError(pending)

        url = self.storage.upload_photo(
            parsed_session,
            parsed_product,
            photo_id,
            _EXTENSIONS[content_type],
            content,
            content_type,
        )
        result = validate_uploaded_file({**candidate, "url": url})
        if not result.ok:
            raise EntityValidationError(result.violations)
        return result.value
