"""Ordered wizard steps."""

from enum import IntEnum


class WizardStep(IntEnum):
    """Wizard steps in display order."""

    WELCOME = 0
    PERSONAL = 1
    ORGANIZATION = 2
    STRATEGY = 3
    LAUNCH = 4

    @property
    def title(self) -> str:
        return STEP_DETAILS[self][0]

    @property
    def description(self) -> str:
        return STEP_DETAILS[self][1]


STEP_DETAILS: dict[WizardStep, tuple[str, str]] = {
    WizardStep.WELCOME: ("Welcome", "Welcome to LeadQ.ai"),
    WizardStep.PERSONAL: ("Personal", "Tell us about yourself"),
    WizardStep.ORGANIZATION: ("Organization", "Your workplace"),
    WizardStep.STRATEGY: ("Strategy", "CRM Configuration"),
    WizardStep.LAUNCH: ("Launch", "Final setup"),
}

STEP_COUNT = len(WizardStep)

# Steps offering the "skip" affordance
SKIPPABLE_STEPS = frozenset(
    {WizardStep.PERSONAL, WizardStep.ORGANIZATION, WizardStep.STRATEGY}
)
