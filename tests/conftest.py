"""Shared pytest fixtures for LeadQ CLI tests.

Fixtures are organized by category:
- Drafts: empty and fully valid draft states
- Stores: in-memory, failing, slow and mocked Redis stores
- Configuration: temporary config files for CLI tests
"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock

import pytest
import toml
from redis.asyncio import Redis

from leadq_cli.onboarding import (
    DraftState,
    Known,
    MemoryStore,
    StorageError,
    select_template,
    toggle_lead_source,
)


# =============================================================================
# Drafts
# =============================================================================


@pytest.fixture
def empty_draft() -> DraftState:
    """A draft exactly as the wizard creates it on mount."""
    return DraftState()


@pytest.fixture
def valid_draft() -> DraftState:
    """
    Draft satisfying every step's requirements.

    Example:
        def test_something(valid_draft):
            assert is_valid(WizardStep.STRATEGY, valid_draft)
    """
    draft = DraftState(
        full_name="Jane Doe",
        email="jane@example.com",
        phone="+1 555 000 0000",
        location="San Francisco, CA",
        role=Known(value="manager"),
        company_name="Acme Corp",
        company_website="https://acme.example",
        company_address="1 Main St",
        company_intro="We sell anvils.",
        industry=Known(value="technology"),
        team_size="11-50",
        team_invites=["a@x.com", "", "  ", "b@y.com"],
    )
    select_template(draft, "saas")
    toggle_lead_source(draft, "linkedin")
    toggle_lead_source(draft, "referral")
    return draft


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed completion time."""
    return datetime(2026, 1, 15, 10, 30, 45, 123000, tzinfo=timezone.utc)


# =============================================================================
# Stores
# =============================================================================


class RecordingStore(MemoryStore):
    """Memory store counting every write."""

    def __init__(self) -> None:
        super().__init__()
        self.set_calls: list[tuple[str, str]] = []

    async def set(self, key: str, value: str) -> bool:
        self.set_calls.append((key, value))
        return await super().set(key, value)


class FailingStore(MemoryStore):
    """Store whose writes fail until ``fail`` is cleared."""

    def __init__(self, reject: bool = False) -> None:
        super().__init__()
        self.fail = True
        self.reject = reject
        self.attempts = 0

    async def set(self, key: str, value: str) -> bool:
        self.attempts += 1
        if self.fail:
            if self.reject:
                return False
            raise StorageError("quota exceeded")
        return await super().set(key, value)


class SlowStore(MemoryStore):
    """Store whose writes block until ``release`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.release = asyncio.Event()
        self.started = asyncio.Event()

    async def set(self, key: str, value: str) -> bool:
        self.started.set()
        await self.release.wait()
        return await super().set(key, value)


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def rejecting_store() -> FailingStore:
    """Store whose writes return False instead of raising."""
    return FailingStore(reject=True)


@pytest.fixture
def slow_store() -> SlowStore:
    return SlowStore()


@pytest.fixture
def mock_redis() -> AsyncMock:
    """
    Mock Redis client backed by a dictionary.

    Returns:
        AsyncMock supporting get/set/delete/aclose
    """
    mock = AsyncMock(spec=Redis)
    storage: Dict[str, Any] = {}

    async def mock_get(key: str) -> Optional[str]:
        return storage.get(key)

    async def mock_set(key: str, value: Any, **kwargs) -> bool:
        storage[key] = value
        return True

    async def mock_delete(*keys: str) -> int:
        count = 0
        for key in keys:
            if key in storage:
                del storage[key]
                count += 1
        return count

    mock.get.side_effect = mock_get
    mock.set.side_effect = mock_set
    mock.delete.side_effect = mock_delete
    mock._storage = storage

    return mock


# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Config file pointing the file store into a temporary directory."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        toml.dumps(
            {
                "storage": {
                    "backend": "file",
                    "path": str(tmp_path / "store.json"),
                },
                "logging": {"level": "WARNING"},
            }
        ),
        encoding="utf-8",
    )
    return config_path
