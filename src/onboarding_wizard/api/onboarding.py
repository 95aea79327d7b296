"""Onboarding session, product and photo endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Body, File, Request, UploadFile, status

from onboarding_wizard import limits
from onboarding_wizard.api.models import (
    DeletionResponse,
    SessionResponse,
    UpdateSessionRequest,
    UpdateSessionResponse,
)

if TYPE_CHECKING:
    from onboarding_wizard.containers import AppContainer

router = APIRouter(prefix="/api/onboarding", tags=["onboarding"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/sessions/{session_id}")
async def get_session(session_id: str, request: Request) -> dict[str, object]:
    """Return the stored session so the wizard can resume."""
    session = _container(request).session_service.load(session_id)
    return SessionResponse.from_session(session).model_dump(by_alias=True)


@router.patch("/sessions/{session_id}")
async def update_session(
    session_id: str, body: UpdateSessionRequest, request: Request
) -> dict[str, object]:
    """Autosave a form-data patch and the current step."""
    result = _container(request).session_service.update(
        session_id, body.current_step, body.form_data
    )
    return UpdateSessionResponse.from_result(result).model_dump(by_alias=True)


@router.post("/sessions/{session_id}/products", status_code=status.HTTP_201_CREATED)
async def create_product(
    session_id: str,
    request: Request,
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    """Add a product to the session."""
    product = _container(request).product_service.add_product(session_id, payload)
    return product.to_payload()


@router.patch("/sessions/{session_id}/products/{product_id}")
async def update_product(
    session_id: str,
    product_id: str,
    request: Request,
    payload: dict[str, object] = Body(...),
) -> dict[str, object]:
    """Edit a product's name, description, price or photos."""
    product = _container(request).product_service.update_product(
        session_id, product_id, payload
    )
    return product.to_payload()


@router.delete("/sessions/{session_id}/products/{product_id}")
async def delete_product(
    session_id: str, product_id: str, request: Request
) -> dict[str, object]:
    """Remove a product and its stored photos."""
    deletion = _container(request).product_service.remove_product(
        session_id, product_id
    )
    return DeletionResponse(removed=deletion.removed).model_dump(by_alias=True)


@router.post(
    "/sessions/{session_id}/products/{product_id}/photos",
    status_code=status.HTTP_201_CREATED,
)
async def upload_product_photo(
    session_id: str,
    product_id: str,
    request: Request,
    file: UploadFile = File(...),
) -> dict[str, object]:
    """Store a product photo and return its metadata."""
    content = await file.read(limits.MAX_PHOTO_FILE_SIZE_BYTES + 1)
    photo = _container(request).photo_service.upload_photo(
        session_id,
        product_id,
        file_name=file.filename or "",
        content_type=file.content_type or "",
        content=content,
    )
    return photo.to_payload()


@router.delete("/sessions/{session_id}/products/{product_id}/photos/{photo_id}")
async def delete_product_photo(
    session_id: str, product_id: str, photo_id: str, request: Request
) -> dict[str, object]:
    """Delete a product photo; deleting a missing photo also succeeds."""
    deletion = _container(request).photo_service.delete_photo(
        session_id, product_id, photo_id
    )
    return DeletionResponse(
        success=deletion.success, removed=deletion.removed
    ).model_dump(by_alias=True)
