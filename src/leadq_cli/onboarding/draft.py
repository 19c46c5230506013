"""In-memory draft state collected by the setup wizard."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from .templates import DEFAULT_TEMPLATE, get_template

# Option value that switches a select field to free text
OTHER = "other"


class Known(BaseModel):
    """A value picked from a fixed option list."""

    kind: Literal["known"] = "known"
    value: str


class Other(BaseModel):
    """The "other" option, carrying the user's own wording."""

    kind: Literal["other"] = "other"
    custom_text: str = ""


Choice = Annotated[Union[Known, Other], Field(discriminator="kind")]


def choice_from_form(value: str, custom: str = "") -> Optional[Union[Known, Other]]:
    """Build a choice from a select value and its companion free-text field."""
    if not value:
        return None
    if value == OTHER:
        return Other(custom_text=custom)
    return Known(value=value)


def resolve_choice(choice: Optional[Union[Known, Other]]) -> str:
    """Return the authoritative text of a choice."""
    if choice is None:
        return ""
    if isinstance(choice, Other):
        return choice.custom_text
    return choice.value


def _default_stages() -> list[str]:
    return list(get_template(DEFAULT_TEMPLATE)["stages"])


class DraftState(BaseModel):
    """Working record edited step by step; discarded if the wizard is abandoned."""

    # Identity
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    role: Optional[Choice] = None

    # Organization
    company_name: str = ""
    company_website: str = ""
    company_address: str = ""
    company_intro: str = ""
    industry: Optional[Choice] = None
    team_size: str = ""

    # Strategy
    pipeline_template: str = DEFAULT_TEMPLATE
    stages: list[str] = Field(default_factory=_default_stages)
    lead_sources: set[str] = Field(default_factory=set)

    # Team
    team_invites: list[str] = Field(default_factory=lambda: [""])
    communication_preference: str = "email"

    def set_role(self, value: str, custom: str = "") -> None:
        self.role = choice_from_form(value, custom)

    def set_industry(self, value: str, custom: str = "") -> None:
        self.industry = choice_from_form(value, custom)
