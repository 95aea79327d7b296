"""Supabase-backed onboarding session repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

import httpx
from postgrest.exceptions import APIError
from supabase import Client

from onboarding_wizard.domain.sessions import OnboardingSession
from onboarding_wizard.errors import StoreError
from onboarding_wizard.services.sessions import SessionRepository

_COLUMNS = (
    "id, email, current_step, form_data, last_activity, updated_at, "
    "created_at, expires_at, locale"
)


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for onboarding sessions."""

    client: Client
    table_name: str = "onboarding_sessions"

    def get_session(self, session_id: UUID) -> OnboardingSession | None:
        """Return a session by id, if present."""
        try:
            response = (
                self.client.table(self.table_name)
                .select(_COLUMNS)
                .eq("id", str(session_id))
                .limit(1)
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise StoreError("Failed to load session") from exc
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def replace_session(
        self, session_id: UUID, current_step: int, form_data: dict[str, object]
    ) -> datetime | None:
        """Replace step and form data, stamping activity timestamps."""
        now = datetime.now(tz=UTC)
        try:
            response = (
                self.client.table(self.table_name)
                .update(
                    {
                        "form_data": form_data,
                        "current_step": current_step,
                        "last_activity": now.isoformat(),
                        "updated_at": now.isoformat(),
                    }
                )
                .eq("id", str(session_id))
                .execute()
            )
        except (APIError, httpx.HTTPError) as exc:
            raise StoreError("Failed to update session") from exc
        if not response.data:
            return None
        return _parse_timestamp(response.data[0].get("updated_at")) or now


def _parse_session(row: dict[str, object]) -> OnboardingSession:
    """Parse an onboarding_sessions row into a domain model."""
    form_data = row.get("form_data")
    return OnboardingSession(
        id=UUID(str(row["id"])),
        current_step=int(row.get("current_step") or 0),
        form_data=dict(form_data) if isinstance(form_data, dict) else {},
        last_activity=_parse_timestamp(row.get("last_activity")),
        updated_at=_parse_timestamp(row.get("updated_at")),
        created_at=_parse_timestamp(row.get("created_at")),
        expires_at=_parse_timestamp(row.get("expires_at")),
        email=row.get("email"),
        locale=row.get("locale"),
    )


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None
