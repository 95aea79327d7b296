"""Supabase Storage implementation for product photos."""

from dataclasses import dataclass
from uuid import UUID

import httpx
from storage3.utils import StorageException
from supabase import Client

from onboarding_wizard.errors import StoreError
from onboarding_wizard.services.photos import PhotoStorage


@dataclass
class SupabasePhotoStorage(PhotoStorage):
    """Stores photos under <session>/products/<product>/<photo>.<ext>."""

    client: Client
    bucket: str = "onboarding-photos"

    def upload_photo(  # noqa: PLR0913
        self,
        session_id: UUID,
        product_id: UUID,
        photo_id: UUID,
        extension: str,
        content: bytes,
        content_type: str,
    ) -> str:
        """Upload a photo without overwriting and return its public URL."""
        path = f"{_product_folder(session_id, product_id)}/{photo_id}.{extension}"
        bucket = self.client.storage.from_(self.bucket)
        try:
            bucket.upload(
                path,
                content,
                file_options={"content-type": content_type, "upsert": "false"},
            )
            return bucket.get_public_url(path)
        except (StorageException, httpx.HTTPError) as exc:
            raise StoreError("Failed to upload photo") from exc

    def delete_photo(self, session_id: UUID, product_id: UUID, photo_id: UUID) -> bool:
        """Delete a photo; return False when no stored file matches it."""
        folder = _product_folder(session_id, product_id)
        names = [
            name
            for name in self._list_names(folder)
            if name.startswith(str(photo_id))
        ]
        if not names:
            return False
        self._remove([f"{folder}/{name}" for name in names])
        return True

    def delete_product_photos(self, session_id: UUID, product_id: UUID) -> int:
        """Delete every file in a product's folder."""
        folder = _product_folder(session_id, product_id)
        names = self._list_names(folder)
        if names:
            self._remove([f"{folder}/{name}" for name in names])
        return len(names)

    def _list_names(self, folder: str) -> list[str]:
        try:
            files = self.client.storage.from_(self.bucket).list(folder)
        except (StorageException, httpx.HTTPError) as exc:
            raise StoreError("Failed to locate photo") from exc
        return [str(item["name"]) for item in files or [] if item.get("name")]

    def _remove(self, paths: list[str]) -> None:
        try:
            self.client.storage.from_(self.bucket).remove(paths)
        except (StorageException, httpx.HTTPError) as exc:
            raise StoreError("Failed to delete photo") from exc


def _product_folder(session_id: UUID, product_id: UUID) -> str:
    return f"{session_id}/products/{product_id}"
