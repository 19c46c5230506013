"""Pipeline templates and selectable option sets for the setup wizard."""

import copy
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .draft import DraftState

DEFAULT_TEMPLATE = "sales"

# Pipeline templates, in display order
TEMPLATES: dict[str, dict[str, Any]] = {
    "sales": {
        "name": "Standard Sales",
        "stages": ["Lead", "Discovery", "Proposal", "Negotiation", "Closed"],
    },
    "saas": {
        "name": "SaaS Subscription",
        "stages": ["Trial", "Engagement", "Activation", "Expansion", "Renewal"],
    },
    "realestate": {
        "name": "Real Estate",
        "stages": ["Inquiry", "Viewing", "Offer", "Closing", "Handover"],
    },
    "recruitment": {
        "name": "Recruitment",
        "stages": ["Applied", "Screening", "Interview", "Offer", "Hired"],
    },
}

LEAD_SOURCES: dict[str, str] = {
    "linkedin": "LinkedIn",
    "website": "Website CMS",
    "email": "Email Outreach",
    "referral": "Referrals",
    "manual": "Manual Entry",
}

ROLES: list[tuple[str, str]] = [
    ("executive", "Executive / C-Level"),
    ("manager", "Manager / Team Lead"),
    ("professional", "Professional / Specialist"),
    ("entrepreneur", "Entrepreneur / Founder"),
    ("freelancer", "Freelancer / Consultant"),
    ("student", "Student / Learner"),
    ("creative", "Creative / Designer"),
    ("sales", "Sales / Business Development"),
    ("support", "Customer Support / Service"),
    ("other", "Other"),
]

INDUSTRIES: list[tuple[str, str]] = [
    ("technology", "Technology & Software"),
    ("finance", "Finance & Banking"),
    ("healthcare", "Healthcare & Medical"),
    ("education", "Education & Training"),
    ("retail", "Retail & E-Commerce"),
    ("marketing", "Marketing & Advertising"),
    ("consulting", "Consulting & Services"),
    ("manufacturing", "Manufacturing & Industrial"),
    ("media", "Media & Entertainment"),
    ("nonprofit", "Non-Profit & Government"),
    ("realestate", "Real Estate & Construction"),
    ("legal", "Legal & Compliance"),
    ("other", "Other"),
]

TEAM_SIZES: list[tuple[str, str]] = [
    ("solo", "Just me"),
    ("2-10", "2-10 people"),
    ("11-50", "11-50 people"),
    ("51-200", "51-200 people"),
    ("201-500", "201-500 people"),
    ("500+", "500+ people"),
]

COMMUNICATION_PREFERENCES: list[tuple[str, str]] = [
    ("email", "Email"),
    ("phone", "Phone"),
    ("chat", "In-app chat"),
]


def get_template(name: str) -> dict[str, Any]:
    """
    Get pipeline template by id.

    Args:
        name: Template id (sales, saas, realestate, recruitment)

    Returns:
        Copy of the template definition

    Raises:
        KeyError: If template id doesn't exist
    """
    if name not in TEMPLATES:
        available = ", ".join(TEMPLATES.keys())
        raise KeyError(
            f"Template '{name}' not found. Available templates: {available}"
        )

    return copy.deepcopy(TEMPLATES[name])


def list_templates() -> list[tuple[str, str, list[str]]]:
    """
    Get list of available templates.

    Returns:
        List of tuples (id, name, stages)
    """
    return [
        (key, template["name"], list(template["stages"]))
        for key, template in TEMPLATES.items()
    ]


def select_template(draft: "DraftState", name: str) -> list[str]:
    """
    Apply a pipeline template to the draft.

    The draft's stage list is replaced in full by the template's stages;
    stages edited by hand before the call are discarded.

    Args:
        draft: Draft being edited
        name: Template id

    Returns:
        The new stage list

    Raises:
        KeyError: If template id doesn't exist
    """
    template = get_template(name)
    draft.pipeline_template = name
    draft.stages = list(template["stages"])
    return draft.stages


def get_lead_source(source_id: str) -> str:
    """Return the display label of a lead source, raising KeyError if unknown."""
    if source_id not in LEAD_SOURCES:
        available = ", ".join(LEAD_SOURCES.keys())
        raise KeyError(
            f"Lead source '{source_id}' not found. Available sources: {available}"
        )
    return LEAD_SOURCES[source_id]


def toggle_lead_source(draft: "DraftState", source_id: str) -> bool:
    """
    Add a lead source to the draft if absent, remove it if present.

    Returns:
        True if the source is selected after the call
    """
    get_lead_source(source_id)

    if source_id in draft.lead_sources:
        draft.lead_sources.discard(source_id)
        return False

    draft.lead_sources.add(source_id)
    return True


def option_label(options: list[tuple[str, str]], value: str) -> str:
    """Look up the label for an option value, falling back to the value itself."""
    for key, label in options:
        if key == value:
            return label
    return value
