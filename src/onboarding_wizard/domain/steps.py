"""Fixed onboarding step catalogue and navigation helpers."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass

FormData = Mapping[str, object]


@dataclass(frozen=True)
class StepConfig:
    """Static description of one onboarding step."""

    number: int
    title: str
    estimated_minutes: int
    is_optional: bool = False
    skip_when: Callable[[FormData], bool] | None = None

    def is_skipped(self, form_data: FormData) -> bool:
        """Return True when the form data makes this step unnecessary."""
        return self.skip_when is not None and self.skip_when(form_data)


def _skip_visual_inspiration(form_data: FormData) -> bool:
    return form_data.get("designStyle") == "minimalist" and not form_data.get(
        "websiteReferences"
    )


STEPS: tuple[StepConfig, ...] = (
    StepConfig(1, "Welcome", 2),
    StepConfig(2, "Email Verification", 1),
    StepConfig(3, "Business Basics", 3),
    StepConfig(4, "Brand Definition", 4),
    StepConfig(5, "Customer Profile", 3),
    StepConfig(6, "Customer Needs", 4),
    StepConfig(
        7,
        "Visual Inspiration",
        3,
        is_optional=True,
        skip_when=_skip_visual_inspiration,
    ),
    StepConfig(8, "Design Style", 2),
    StepConfig(9, "Image Style", 2),
    StepConfig(10, "Color Palette", 2),
    StepConfig(11, "Products & Services", 4),
    StepConfig(12, "Business Assets", 3, is_optional=True),
    StepConfig(13, "Language Add-ons", 2, is_optional=True),
    StepConfig(14, "Payment", 3),
)

FIRST_STEP = STEPS[0].number
LAST_STEP = STEPS[-1].number
_BY_NUMBER = {step.number: step for step in STEPS}


def get_step(number: int) -> StepConfig | None:
    """Return the catalogue entry for a step number, if it exists."""
    return _BY_NUMBER.get(number)


def active_steps(form_data: FormData) -> list[StepConfig]:
    """Return the steps the user still has to go through."""
    return [step for step in STEPS if not step.is_skipped(form_data)]


def next_step(current: int, form_data: FormData) -> int | None:
    """Return the next non-skipped step, or None after the last one."""
    for step in STEPS:
        if step.number > current and not step.is_skipped(form_data):
            return step.number
    return None


def previous_step(current: int, form_data: FormData) -> int | None:
    """Return the previous non-skipped step, or None before the first one."""
    for step in reversed(STEPS):
        if step.number < current and not step.is_skipped(form_data):
            return step.number
    return None


def progress_percent(current: int, form_data: FormData) -> int:
    """Return the share of active steps completed before the current one."""
    steps = active_steps(form_data)
    completed = sum(1 for step in steps if step.number < current)
    return round(completed / len(steps) * 100)


def estimated_minutes(form_data: FormData) -> int:
    """Return the total estimated minutes across active steps."""
    return sum(step.estimated_minutes for step in active_steps(form_data))
