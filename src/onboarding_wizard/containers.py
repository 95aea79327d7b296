"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from onboarding_wizard.adapters.supabase_photo_storage import SupabasePhotoStorage
from onboarding_wizard.adapters.supabase_session_repository import (
    SupabaseSessionRepository,
)
from onboarding_wizard.config import Settings
from onboarding_wizard.services.photos import PhotoService
from onboarding_wizard.services.products import ProductService
from onboarding_wizard.services.sessions import SessionService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_service: SessionService
    photo_service: PhotoService
    product_service: ProductService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    session_repository = SupabaseSessionRepository(
        supabase_client, table_name=resolved_settings.sessions_table
    )
    photo_storage = SupabasePhotoStorage(
        supabase_client, bucket=resolved_settings.photo_bucket
    )
    session_service = SessionService(session_repository)
    photo_service = PhotoService(photo_storage)
    return AppContainer(
        settings=resolved_settings,
        session_service=session_service,
        photo_service=photo_service,
        product_service=ProductService(session_service, photo_service),
    )
