"""Per-step validity checks over the draft state.

Each step maps to a set of field checks. A step is valid when none of its
fields report an error; the Welcome and Launch steps have no fields and are
always valid. Validation never raises: failures are reported as return
values so the host can mark the offending fields.
"""

import re

from .draft import DraftState, Other, resolve_choice
from .steps import STEP_COUNT, WizardStep

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _is_blank(value: str) -> bool:
    return not value or not value.strip()


def is_valid_email(value: str) -> bool:
    """Check an address against the local@domain.tld pattern."""
    return EMAIL_PATTERN.fullmatch(value) is not None


def _personal_errors(draft: DraftState) -> dict[str, str]:
    errors: dict[str, str] = {}

    if _is_blank(draft.full_name):
        errors["full_name"] = "Full name is required"

    if _is_blank(draft.email):
        errors["email"] = "Email address is required"
    elif not is_valid_email(draft.email):
        errors["email"] = "Enter a valid email address"

    if draft.role is None or (
        not isinstance(draft.role, Other) and _is_blank(resolve_choice(draft.role))
    ):
        errors["role"] = "Select your role"
    elif _is_blank(resolve_choice(draft.role)):
        errors["custom_role"] = "Please specify your role"

    return errors


def _organization_errors(draft: DraftState) -> dict[str, str]:
    errors: dict[str, str] = {}

    if _is_blank(draft.company_name):
        errors["company_name"] = "Company name is required"

    if draft.industry is None or (
        not isinstance(draft.industry, Other)
        and _is_blank(resolve_choice(draft.industry))
    ):
        errors["industry"] = "Select your industry"
    elif _is_blank(resolve_choice(draft.industry)):
        errors["custom_industry"] = "Please specify your industry"

    if _is_blank(draft.team_size):
        errors["team_size"] = "Select your team size"

    return errors


def _strategy_errors(draft: DraftState) -> dict[str, str]:
    errors: dict[str, str] = {}

    if _is_blank(draft.pipeline_template):
        errors["pipeline_template"] = "Choose a pipeline template"
    if not draft.lead_sources:
        errors["lead_sources"] = "Pick at least one lead source"

    return errors


_STEP_CHECKS = {
    WizardStep.PERSONAL: _personal_errors,
    WizardStep.ORGANIZATION: _organization_errors,
    WizardStep.STRATEGY: _strategy_errors,
}


def field_errors(step: int, draft: DraftState) -> dict[str, str]:
    """
    Collect field-level errors for a step.

    Args:
        step: Step index
        draft: Current draft snapshot

    Returns:
        Mapping of draft field name to error message (empty when valid)
    """
    check = _STEP_CHECKS.get(step)
    if check is None:
        return {}
    return check(draft)


def is_valid(step: int, draft: DraftState) -> bool:
    """Return True if the draft satisfies every requirement of the step."""
    if not 0 <= step < STEP_COUNT:
        return False
    return not field_errors(step, draft)
