"""Tests for merging form-data patches into session state."""

from uuid import uuid4

import pytest

from onboarding_wizard.domain.sessions import OnboardingSession
from onboarding_wizard.errors import EntityValidationError, RequestFormatError
from onboarding_wizard.services.form_state import apply_patch, check_step_index
from tests.conftest import product_payload


def _session(form_data: dict[str, object]) -> OnboardingSession:
    return OnboardingSession(id=uuid4(), current_step=3, form_data=form_data)


def test_apply_patch_merges_fields() -> None:
    session = _session({"businessName": "Acme", "industry": "retail"})

    patched = apply_patch(session, 4, {"industry": "design", "email": "a@b.co"})

    assert patched.current_step == 4
    assert patched.form_data == {
        "businessName": "Acme",
        "industry": "design",
        "email": "a@b.co",
    }
    assert session.form_data["industry"] == "retail"


def test_apply_patch_replaces_products_wholesale() -> None:
    first = product_payload(displayOrder=0)
    second = product_payload(displayOrder=1)
    session = _session({"products": [first, second]})

    patched = apply_patch(session, 11, {"products": [second]})

    assert [product["id"] for product in patched.form_data["products"]] == [
        second["id"]
    ]


def test_apply_patch_keeps_empty_products_list() -> None:
    session = _session({"products": [product_payload()]})

    patched = apply_patch(session, 11, {"products": []})

    assert patched.form_data["products"] == []


def test_apply_patch_step_may_move_backwards() -> None:
    patched = apply_patch(_session({}), 1, {})

    assert patched.current_step == 1


def test_rejected_patch_changes_nothing() -> None:
    session = _session({"businessName": "Acme"})

    with pytest.raises(EntityValidationError) as exc_info:
        apply_patch(
            session,
            5,
            {"businessName": "Other", "products": [product_payload(name="ab")]},
        )

    assert exc_info.value.violations[0].field == "products.0.name"
    assert session.form_data == {"businessName": "Acme"}
    assert session.current_step == 3


def test_patch_must_be_mapping() -> None:
    with pytest.raises(RequestFormatError):
        apply_patch(_session({}), 1, "products")


@pytest.mark.parametrize("step", [-1, "3", True, None, 2.0])
def test_step_index_must_be_non_negative_integer(step: object) -> None:
    with pytest.raises(RequestFormatError):
        check_step_index(step)


def test_step_index_accepts_zero() -> None:
    assert check_step_index(0) == 0
