"""Session store gateway for onboarding form state."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from onboarding_wizard.domain.identifiers import require_uuid_v4
from onboarding_wizard.domain.sessions import OnboardingSession, SaveResult
from onboarding_wizard.errors import SessionNotFoundError
from onboarding_wizard.services.form_state import (
    check_step_index,
    merge_patch,
    validate_patch,
)

logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for onboarding sessions."""

    def get_session(self, session_id: UUID) -> OnboardingSession | None:
        """Return a session by id, if present."""

    def replace_session(
        self, session_id: UUID, current_step: int, form_data: dict[str, object]
    ) -> datetime | None:
        """Replace step and form data, returning the stored updated_at.

        Returns None when no session has the given id. Implementations stamp
        updated_at and last_activity themselves.
        """


@dataclass
class SessionService:
    """Validates, merges and commits onboarding session writes.

    Writes are last-write-wins; the returned last_saved timestamp lets a
    client notice that someone else saved after it did.
    """

    repository: SessionRepository

    def load(self, session_id: object) -> OnboardingSession:
        """Return the stored session for a well-formed id."""
        parsed_id = require_uuid_v4("session", session_id)
        session = self.repository.get_session(parsed_id)
        if session is None:
            raise SessionNotFoundError(parsed_id)
        return session

    def save(
        self, session_id: object, current_step: object, form_data: object
    ) -> SaveResult:
        """Replace the whole form document and step of a session."""
        parsed_id = require_uuid_v4("session", session_id)
        step = check_step_index(current_step)
        document = validate_patch(form_data).to_form_data()
        return self._commit(parsed_id, step, document)

    def update(
        self, session_id: object, current_step: object, form_data_patch: object
    ) -> SaveResult:
        """Validate a patch, merge it into the stored session and commit it."""
        parsed_id = require_uuid_v4("session", session_id)
        step = check_step_index(current_step)
        patch = validate_patch(form_data_patch)
        session = self.load(parsed_id)
        merged = merge_patch(session, step, patch)
        return self._commit(parsed_id, merged.current_step, merged.form_data)

    def _commit(
        self, session_id: UUID, current_step: int, form_data: dict[str, object]
    ) -> SaveResult:
        last_saved = self.repository.replace_session(
            session_id, current_step, form_data
        )
        if last_saved is None:
            raise SessionNotFoundError(session_id)
        logger.info(
            "Saved onboarding session",
            extra={"session_id": str(session_id), "current_step": current_step},
        )
        return SaveResult(session_id=session_id, last_saved=last_saved)
