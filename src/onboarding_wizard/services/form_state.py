"""Merging of incremental form-data patches into session state."""

from collections.abc import Mapping
from dataclasses import replace

from onboarding_wizard.domain.sessions import FormDataEnvelope, OnboardingSession
from onboarding_wizard.domain.validation import validate_form_data
from onboarding_wizard.errors import EntityValidationError, RequestFormatError


def check_step_index(step_index: object) -> int:
    """Return the step index if it is a non-negative integer."""
    if isinstance(step_index, bool) or not isinstance(step_index, int):
        raise RequestFormatError("currentStep must be an integer")
    if step_index < 0:
        raise RequestFormatError("currentStep must be non-negative")
    return step_index


def validate_patch(form_data_patch: object) -> FormDataEnvelope:
    """Validate every structured field in a patch, all or nothing."""
    if not isinstance(form_data_patch, Mapping):
        raise RequestFormatError("formData must be an object")
    result = validate_form_data(form_data_patch)
    if not result.ok:
        raise EntityValidationError(result.violations)
    return result.value


def merge_patch(
    session: OnboardingSession, step_index: int, patch: FormDataEnvelope
) -> OnboardingSession:
    """Merge an already validated patch.

    Fields in the patch replace stored fields wholesale, including structured
    collections; fields absent from the patch are kept as stored.
    """
    form_data = dict(session.form_data)
    form_data.update(patch.to_form_data())
    return replace(session, current_step=step_index, form_data=form_data)


def apply_patch(
    session: OnboardingSession, step_index: object, form_data_patch: object
) -> OnboardingSession:
    """Validate and merge a patch; a rejected patch leaves the session unchanged."""
    step = check_step_index(step_index)
    return merge_patch(session, step, validate_patch(form_data_patch))
