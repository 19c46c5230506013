"""
Onboarding system for LeadQ first-run setup.

This module provides the step-sequencing state machine that collects a new
user's profile, organization and CRM strategy, assembles them into a single
record and writes it to a key-value store, plus an interactive terminal
wizard driving it.
"""

from .assembler import PersistedRecord, assemble, parse_record, serialize_record
from .controller import StepSequenceController, WizardPhase
from .draft import DraftState, Known, Other, choice_from_form, resolve_choice
from .steps import STEP_COUNT, WizardStep
from .storage import (
    ONBOARDING_COMPLETE_KEY,
    RECORD_KEY,
    JsonFileStore,
    MemoryStore,
    PersistenceGateway,
    RedisStore,
    StorageError,
    create_store,
    load_record,
    mark_onboarding_complete,
    needs_onboarding,
    reset_onboarding,
    update_record_section,
)
from .templates import (
    LEAD_SOURCES,
    TEMPLATES,
    get_template,
    list_templates,
    select_template,
    toggle_lead_source,
)
from .validation import field_errors, is_valid, is_valid_email
from .wizard import OnboardingWizard

__all__ = [
    "DraftState",
    "JsonFileStore",
    "Known",
    "LEAD_SOURCES",
    "MemoryStore",
    "ONBOARDING_COMPLETE_KEY",
    "OnboardingWizard",
    "Other",
    "PersistedRecord",
    "PersistenceGateway",
    "RECORD_KEY",
    "RedisStore",
    "STEP_COUNT",
    "StepSequenceController",
    "StorageError",
    "TEMPLATES",
    "WizardPhase",
    "WizardStep",
    "assemble",
    "choice_from_form",
    "create_store",
    "field_errors",
    "get_template",
    "is_valid",
    "is_valid_email",
    "list_templates",
    "load_record",
    "mark_onboarding_complete",
    "needs_onboarding",
    "parse_record",
    "reset_onboarding",
    "resolve_choice",
    "select_template",
    "serialize_record",
    "toggle_lead_source",
    "update_record_section",
]
