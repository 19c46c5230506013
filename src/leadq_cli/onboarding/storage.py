"""Key-value persistence for the setup record and the completion flag."""

import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

import aiofiles
import redis.asyncio as aioredis
from redis.exceptions import RedisError

from .assembler import PersistedRecord, parse_record

logger = logging.getLogger(__name__)

RECORD_KEY = "leadq_user_data"
ONBOARDING_COMPLETE_KEY = "leadq_onboarding_complete"

# Record sections editable after setup, and the keys each one accepts
EDITABLE_SECTIONS: dict[str, tuple[str, ...]] = {
    "profile": ("fullName", "email", "phone", "location"),
    "company": ("name", "website", "address", "intro"),
}


class StorageError(Exception):
    """Raised when a store cannot complete a read or write."""


class PersistenceGateway(Protocol):
    """String key-value store used by the wizard and its host."""

    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> bool: ...

    async def remove(self, key: str) -> bool: ...


class MemoryStore:
    """Dictionary-backed store, scoped to the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    async def remove(self, key: str) -> bool:
        self.data.pop(key, None)
        return True


class JsonFileStore:
    """
    Store keeping all keys in one JSON object on disk.

    Every write rewrites the whole file; there is no locking between
    processes.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    async def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            async with aiofiles.open(self.path, mode="r", encoding="utf-8") as f:
                content = await f.read()
        except OSError as e:
            raise StorageError(f"Cannot read store file {self.path}: {e}") from e

        if not content.strip():
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageError(f"Store file {self.path} is corrupt: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"Store file {self.path} does not hold a JSON object")
        return data

    async def _dump(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(self.path, mode="w", encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=2, ensure_ascii=False))
        except OSError as e:
            raise StorageError(f"Cannot write store file {self.path}: {e}") from e

    async def get(self, key: str) -> Optional[str]:
        data = await self._load()
        return data.get(key)

    async def set(self, key: str, value: str) -> bool:
        data = await self._load()
        data[key] = value
        await self._dump(data)
        logger.debug(f"JsonFileStore: wrote '{key}' to {self.path}")
        return True

    async def remove(self, key: str) -> bool:
        data = await self._load()
        if key in data:
            del data[key]
            await self._dump(data)
        return True


class RedisStore:
    """Store backed by a Redis server."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        db: int = 0,
        timeout: float = 5.0,
        client: Optional[aioredis.Redis] = None,
    ) -> None:
        self.client = client or aioredis.Redis(
            host=host,
            port=port,
            db=db,
            socket_connect_timeout=timeout,
            socket_timeout=timeout,
            decode_responses=True,
        )

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self.client.get(key)
        except (RedisError, OSError) as e:
            raise StorageError(f"Redis read failed for '{key}': {e}") from e

    async def set(self, key: str, value: str) -> bool:
        try:
            return bool(await self.client.set(key, value))
        except (RedisError, OSError) as e:
            raise StorageError(f"Redis write failed for '{key}': {e}") from e

    async def remove(self, key: str) -> bool:
        try:
            await self.client.delete(key)
        except (RedisError, OSError) as e:
            raise StorageError(f"Redis delete failed for '{key}': {e}") from e
        return True

    async def close(self) -> None:
        await self.client.aclose()


def create_store(config: Any) -> PersistenceGateway:
    """
    Create the store selected by the storage configuration.

    Args:
        config: StorageConfig section of the settings

    Returns:
        Store instance for the configured backend
    """
    if config.backend == "memory":
        return MemoryStore()
    if config.backend == "redis":
        logger.info(f"Using Redis store at {config.redis_host}:{config.redis_port}")
        return RedisStore(
            host=config.redis_host,
            port=config.redis_port,
            db=config.redis_db,
            timeout=config.connection_timeout,
        )
    path = Path(config.path).expanduser()
    logger.info(f"Using file store at {path}")
    return JsonFileStore(path)


async def needs_onboarding(
    store: PersistenceGateway, flag_key: str = ONBOARDING_COMPLETE_KEY
) -> bool:
    """Return True if the completion flag has not been set yet."""
    return not await store.get(flag_key)


async def mark_onboarding_complete(
    store: PersistenceGateway, flag_key: str = ONBOARDING_COMPLETE_KEY
) -> bool:
    return await store.set(flag_key, "true")


async def reset_onboarding(
    store: PersistenceGateway,
    record_key: str = RECORD_KEY,
    flag_key: str = ONBOARDING_COMPLETE_KEY,
) -> bool:
    """Remove the saved record and the completion flag."""
    removed_record = await store.remove(record_key)
    removed_flag = await store.remove(flag_key)
    logger.info("Onboarding data cleared")
    return removed_record and removed_flag


async def load_record(
    store: PersistenceGateway, record_key: str = RECORD_KEY
) -> Optional[PersistedRecord]:
    """Load the saved record, or None if setup has not been completed."""
    payload = await store.get(record_key)
    if not payload:
        return None
    return parse_record(payload)


async def update_record_section(
    store: PersistenceGateway,
    section: str,
    values: dict[str, str],
    record_key: str = RECORD_KEY,
) -> bool:
    """
    Update the profile or company section of the saved record.

    Only the named section changes; every other key of the stored document,
    completedAt included, is written back as it was read.

    Args:
        store: Store holding the record
        section: "profile" or "company"
        values: camelCase field values to set
        record_key: Key of the record

    Returns:
        Result of the store write

    Raises:
        ValueError: If the section or one of the fields is not editable
        StorageError: If the stored document cannot be decoded
    """
    if section not in EDITABLE_SECTIONS:
        available = ", ".join(EDITABLE_SECTIONS.keys())
        raise ValueError(f"Section '{section}' is not editable. Editable: {available}")

    unknown = set(values) - set(EDITABLE_SECTIONS[section])
    if unknown:
        raise ValueError(
            f"Unknown {section} fields: {', '.join(sorted(unknown))}"
        )

    payload = await store.get(record_key)
    try:
        document: dict[str, Any] = json.loads(payload) if payload else {}
    except json.JSONDecodeError as e:
        raise StorageError(f"Stored record is not valid JSON: {e}") from e

    current = document.get(section) or {}
    document[section] = {**current, **values}

    return await store.set(record_key, json.dumps(document))
