"""Step sequencing for the setup wizard.

The controller owns the current step position and gates navigation with the
per-step validity checks. Leaving the Strategy step is the terminal
transition: instead of a plain index increment the draft is assembled and
written to the store, and only a successful write moves the wizard onto the
Launch step.

While that write is in flight the controller sits in a transient
``SUBMITTING`` phase and refuses every navigation call.
"""

import asyncio
import inspect
import logging
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Optional, Union

from .assembler import PersistedRecord, assemble, serialize_record
from .draft import DraftState
from .steps import SKIPPABLE_STEPS, STEP_COUNT, WizardStep
from .storage import RECORD_KEY, PersistenceGateway, StorageError
from .validation import field_errors, is_valid

logger = logging.getLogger(__name__)


class WizardPhase(str, Enum):
    """Controller phase, orthogonal to the step index."""

    EDITING = "editing"
    SUBMITTING = "submitting"
    COMPLETED = "completed"


class StepSequenceController:
    """Navigation state machine over the wizard steps."""

    def __init__(
        self,
        draft: DraftState,
        store: PersistenceGateway,
        on_complete: Optional[Callable[[], Union[None, Awaitable[None]]]] = None,
        on_error: Optional[Callable[[str], Union[None, Awaitable[None]]]] = None,
        record_key: str = RECORD_KEY,
        skip_requires_validation: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            draft: Draft owned by this wizard instance
            store: Store receiving the assembled record
            on_complete: Called once after the record is written (may be async)
            on_error: Called with a message when the write fails (may be async)
            record_key: Key the record is written under
            skip_requires_validation: Gate "skip" with the step's validity check
            clock: Source of the completion timestamp (defaults to now)
        """
        self.draft = draft
        self.store = store
        self.on_complete = on_complete
        self.on_error = on_error
        self.record_key = record_key
        self.skip_requires_validation = skip_requires_validation
        self._clock = clock

        self.current_index = int(WizardStep.WELCOME)
        self.phase = WizardPhase.EDITING
        self.record: Optional[PersistedRecord] = None
        self.last_error: Optional[str] = None

    @property
    def current_step(self) -> WizardStep:
        return WizardStep(self.current_index)

    @property
    def is_submitting(self) -> bool:
        return self.phase is WizardPhase.SUBMITTING

    @property
    def is_complete(self) -> bool:
        return self.phase is WizardPhase.COMPLETED

    @property
    def can_advance(self) -> bool:
        return (
            self.phase is WizardPhase.EDITING
            and self.current_index < WizardStep.LAUNCH
            and is_valid(self.current_index, self.draft)
        )

    @property
    def can_skip(self) -> bool:
        if self.phase is not WizardPhase.EDITING:
            return False
        if self.current_index not in SKIPPABLE_STEPS:
            return False
        return not self.skip_requires_validation or is_valid(
            self.current_index, self.draft
        )

    @property
    def progress_percent(self) -> int:
        return int(self.current_index / (STEP_COUNT - 1) * 100)

    def current_errors(self) -> dict[str, str]:
        """Field errors blocking the current step."""
        return field_errors(self.current_index, self.draft)

    def _blocked_reason(self) -> Optional[str]:
        if self.phase is WizardPhase.SUBMITTING:
            return "Setup is being saved, please wait"
        if self.phase is WizardPhase.COMPLETED:
            return "Setup is already complete"
        return None

    async def advance(self) -> tuple[bool, str]:
        """
        Move to the next step if the current one is valid.

        Returns:
            Tuple of (moved, message)
        """
        blocked = self._blocked_reason()
        if blocked:
            return False, blocked

        if not is_valid(self.current_index, self.draft):
            logger.debug(
                f"Advance refused on step {self.current_step.title}: "
                f"{sorted(self.current_errors())}"
            )
            return False, "Please complete the required fields"

        return await self._move_forward()

    async def skip(self) -> tuple[bool, str]:
        """
        Skip the current step (Personal, Organization and Strategy only).

        When ``skip_requires_validation`` is set, skipping is gated exactly
        like advancing.
        """
        blocked = self._blocked_reason()
        if blocked:
            return False, blocked

        if self.current_index not in SKIPPABLE_STEPS:
            return False, f"The {self.current_step.title} step cannot be skipped"

        if self.skip_requires_validation and not is_valid(
            self.current_index, self.draft
        ):
            return False, "Please complete the required fields"

        logger.debug(f"Skipping step {self.current_step.title}")
        return await self._move_forward()

    def retreat(self) -> bool:
        """Go back one step. Entered data is kept."""
        if self.phase is not WizardPhase.EDITING or self.current_index == 0:
            return False

        self.current_index -= 1
        logger.debug(f"Moved back to step {self.current_step.title}")
        return True

    def jump_to(self, index: int) -> bool:
        """Revisit an earlier step; forward jumps are rejected."""
        if self.phase is not WizardPhase.EDITING:
            return False
        if not 0 <= index < self.current_index:
            return False

        self.current_index = int(index)
        logger.debug(f"Jumped back to step {self.current_step.title}")
        return True

    async def _move_forward(self) -> tuple[bool, str]:
        if self.current_index == WizardStep.STRATEGY:
            return await self._submit()

        self.current_index += 1
        logger.debug(f"Advanced to step {self.current_step.title}")
        return True, f"Moved to {self.current_step.title}"

    async def _submit(self) -> tuple[bool, str]:
        self.phase = WizardPhase.SUBMITTING
        logger.info(f"Saving setup record under '{self.record_key}'")

        try:
            now = self._clock() if self._clock else None
            record = assemble(self.draft, now=now)
            payload = serialize_record(record)
            stored = await self.store.set(self.record_key, payload)
            if not stored:
                raise StorageError(f"Store rejected the write to '{self.record_key}'")
        except (StorageError, OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to complete setup: {e}")
            return await self._fail(f"Failed to complete setup: {e}")
        except Exception as e:
            logger.exception("Unexpected error while saving the setup record")
            return await self._fail(f"Failed to complete setup: {e}")
        except asyncio.CancelledError:
            self.phase = WizardPhase.EDITING
            raise

        self.record = record
        self.last_error = None
        self.current_index = int(WizardStep.LAUNCH)
        self.phase = WizardPhase.COMPLETED
        logger.info("Setup record saved")

        if self.on_complete:
            await _notify(self.on_complete())
        return True, "Your LeadQ.ai environment is ready"

    async def _fail(self, message: str) -> tuple[bool, str]:
        """Return to editing on the Strategy step and report the failure."""
        self.phase = WizardPhase.EDITING
        self.last_error = message
        if self.on_error:
            await _notify(self.on_error(message))
        return False, message


async def _notify(result: Any) -> None:
    # Callbacks may be plain functions or coroutine functions
    if inspect.isawaitable(result):
        await result
