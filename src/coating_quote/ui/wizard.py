"""
Quote wizard steps.

Step completion is derived from the per-field validators, so the form never
re-states a rule of its own.
"""
from dataclasses import dataclass
from typing import Any

from ..services.validation_service import validate_fields


@dataclass(frozen=True)
class WizardStep:
    number: int
    name: str
    fields: tuple[str, ...]


STEPS = (
    WizardStep(1, "Dimensions", ("length_mm", "width_mm", "height_mm")),
    WizardStep(2, "Material", ("material",)),
    WizardStep(3, "Surface Prep", ("prep_level",)),
    WizardStep(4, "Details", ("color", "quantity", "turnaround_days", "is_rush")),
)


def step_errors(raw: Any, step: WizardStep) -> dict[str, str]:
    return validate_fields(raw, step.fields)


def completed_steps(raw: Any) -> set[int]:
    """Numbers of the steps whose fields all pass validation."""
    return {step.number for step in STEPS if not step_errors(raw, step)}


def can_open_step(raw: Any, number: int, current: int) -> bool:
    """Going back is always allowed; going forward needs every earlier step complete."""
    if number <= current:
        return True
    done = completed_steps(raw)
    return all(n in done for n in range(1, number))
