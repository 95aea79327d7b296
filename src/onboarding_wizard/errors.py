"""Error taxonomy for onboarding session and photo operations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Violation:
    """A single failed constraint, addressed by a dotted field path."""

    field: str
    message: str
    code: str

    def to_dict(self) -> dict[str, str]:
        """Return the JSON shape used in error responses."""
        return {"field": self.field, "message": self.message, "code": self.code}


class OnboardingError(Exception):
    """Base class for errors surfaced to onboarding callers."""

    code = "onboarding_error"


class IdentifierFormatError(OnboardingError):
    """Raised when a session, product or photo id is not a version-4 UUID."""

    code = "invalid_identifier"

    def __init__(self, kind: str, value: object) -> None:
        self.kind = kind
        self.value = value
        super().__init__(f"Invalid {kind} ID format")


class RequestFormatError(OnboardingError):
    """Raised when a request body does not have the expected shape."""

    code = "invalid_request"


class EntityValidationError(OnboardingError):
    """Raised when form data fails one or more structural constraints."""

    code = "validation_failed"

    def __init__(self, violations: list[Violation]) -> None:
        if not violations:
            raise ValueError("EntityValidationError requires at least one violation")
        self.violations = list(violations)
        super().__init__(self.violations[0].message)

    @property
    def headline(self) -> str:
        """Return the message of the first violation."""
        return self.violations[0].message


class SessionNotFoundError(OnboardingError):
    """Raised when the addressed session does not exist in the store."""

    code = "session_not_found"

    def __init__(self, session_id: object) -> None:
        self.session_id = session_id
        super().__init__("Session not found")


class StoreError(OnboardingError):
    """Raised when the session store or photo storage backend fails."""

    code = "store_error"


class ProductNotFoundError(OnboardingError):
    """Raised when a product id is not part of the session's form data."""

    code = "product_not_found"

    def __init__(self, product_id: object) -> None:
        self.product_id = product_id
        super().__init__("Product not found")
