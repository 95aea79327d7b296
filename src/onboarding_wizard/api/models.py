"""Request and response models for the onboarding API."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from onboarding_wizard.domain import steps
from onboarding_wizard.domain.sessions import OnboardingSession, SaveResult


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UpdateSessionRequest(_CamelModel):
    """Autosave payload; fields are checked by the session service."""

    form_data: object = Field(default_factory=dict)
    current_step: object = None


class UpdateSessionResponse(_CamelModel):
    """Result of a committed autosave."""

    session_id: str
    last_saved: str
    success: bool = True

    @classmethod
    def from_result(cls, result: SaveResult) -> "UpdateSessionResponse":
        """Build the response from a save result."""
        return cls(
            session_id=str(result.session_id),
            last_saved=format_timestamp(result.last_saved),
        )


class StepProgress(_CamelModel):
    """Where the session sits in the step catalogue."""

    current_step: int
    next_step: int | None
    previous_step: int | None
    percent_complete: int
    estimated_minutes: int


class SessionResponse(_CamelModel):
    """Stored session document as returned to the wizard."""

    id: str
    current_step: int
    form_data: dict[str, object]
    last_activity: str | None = None
    updated_at: str | None = None
    created_at: str | None = None
    expires_at: str | None = None
    email: str | None = None
    locale: str | None = None
    progress: StepProgress

    @classmethod
    def from_session(cls, session: OnboardingSession) -> "SessionResponse":
        """Build the response from a stored session."""
        form_data = session.form_data
        return cls(
            id=str(session.id),
            current_step=session.current_step,
            form_data=form_data,
            last_activity=_optional_timestamp(session.last_activity),
            updated_at=_optional_timestamp(session.updated_at),
            created_at=_optional_timestamp(session.created_at),
            expires_at=_optional_timestamp(session.expires_at),
            email=session.email,
            locale=session.locale,
            progress=StepProgress(
                current_step=session.current_step,
                next_step=steps.next_step(session.current_step, form_data),
                previous_step=steps.previous_step(session.current_step, form_data),
                percent_complete=steps.progress_percent(
                    session.current_step, form_data
                ),
                estimated_minutes=steps.estimated_minutes(form_data),
            ),
        )


class DeletionResponse(_CamelModel):
    """Result of an idempotent delete."""

    success: bool = True
    removed: int = 0


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as UTC ISO-8601 with milliseconds and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    text = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def _optional_timestamp(value: datetime | None) -> str | None:
    return format_timestamp(value) if value is not None else None
