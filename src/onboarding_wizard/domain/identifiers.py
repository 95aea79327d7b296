"""Identifier format rules for sessions, products and photos."""

import re
from uuid import UUID

from onboarding_wizard.errors import IdentifierFormatError

_UUID_V4_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
    re.IGNORECASE,
)


def is_uuid_v4(value: object) -> bool:
    """Return True when value is a string shaped like a version-4 UUID."""
    return isinstance(value, str) and _UUID_V4_PATTERN.fullmatch(value) is not None


def parse_uuid_v4(value: object) -> UUID | None:
    """Parse a version-4 UUID string, returning None for any other shape."""
    if not is_uuid_v4(value):
        return None
    return UUID(str(value))


def require_uuid_v4(kind: str, value: object) -> UUID:
    """Parse a session, product or photo id, raising on a malformed shape."""
    if isinstance(value, UUID):
        value = str(value)
    parsed = parse_uuid_v4(value)
    if parsed is None:
        raise IdentifierFormatError(kind, value)
    return parsed
