"""Assembly of the persisted setup record from the flat draft state."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .draft import DraftState, resolve_choice
from .templates import LEAD_SOURCES


class RecordModel(BaseModel):
    """Base for record sections; serialised with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProfileRecord(RecordModel):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""


class CompanyRecord(RecordModel):
    name: str = ""
    website: str = ""
    address: str = ""
    intro: str = ""
    industry: str = ""
    team_size: str = ""


class PreferencesRecord(RecordModel):
    role: str = ""
    communication_preference: str = ""


class CrmRecord(RecordModel):
    pipeline: str = ""
    stages: list[str] = Field(default_factory=list)
    lead_sources: list[str] = Field(default_factory=list)


class PersistedRecord(RecordModel):
    """The single document written once the wizard completes."""

    profile: ProfileRecord
    company: CompanyRecord
    preferences: PreferencesRecord
    crm: CrmRecord
    team: list[str] = Field(default_factory=list)
    completed_at: str


def format_timestamp(moment: datetime) -> str:
    """Render a moment as an ISO-8601 UTC string with millisecond precision."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _ordered_sources(selected: set[str]) -> list[str]:
    known = [source_id for source_id in LEAD_SOURCES if source_id in selected]
    extra = sorted(selected - LEAD_SOURCES.keys())
    return known + extra


def assemble(draft: DraftState, now: Optional[datetime] = None) -> PersistedRecord:
    """
    Build the persisted record from a draft.

    No validation happens here; callers only assemble drafts that passed the
    strategy step. A sparse draft produces a sparse record, not an error.

    Args:
        draft: Completed draft state
        now: Completion time (defaults to the current UTC time)

    Returns:
        Assembled record stamped with its completion time
    """
    moment = now or datetime.now(timezone.utc)

    return PersistedRecord(
        profile=ProfileRecord(
            full_name=draft.full_name,
            email=draft.email,
            phone=draft.phone,
            location=draft.location,
        ),
        company=CompanyRecord(
            name=draft.company_name,
            website=draft.company_website,
            address=draft.company_address,
            intro=draft.company_intro,
            industry=resolve_choice(draft.industry),
            team_size=draft.team_size,
        ),
        preferences=PreferencesRecord(
            role=resolve_choice(draft.role),
            communication_preference=draft.communication_preference,
        ),
        crm=CrmRecord(
            pipeline=draft.pipeline_template,
            stages=list(draft.stages),
            lead_sources=_ordered_sources(draft.lead_sources),
        ),
        team=[invite for invite in draft.team_invites if invite.strip()],
        completed_at=format_timestamp(moment),
    )


def serialize_record(record: PersistedRecord) -> str:
    """Serialise a record to the JSON document stored under the record key."""
    return record.model_dump_json(by_alias=True)


def parse_record(payload: str) -> PersistedRecord:
    """Parse a stored JSON document back into a record."""
    return PersistedRecord.model_validate_json(payload)
