"""Session Registry: maps a live session id to its transcript file.

Two implementations behind one protocol:

- ``InMemorySessionRegistry``: a dict; entries are lost on restart.
- ``RedisSessionRegistry``: JSON values under ``chatsurvey:session:<id>`` with
  an optional TTL, so a restart does not orphan in-flight participants.

The registry is built once at startup (``create_session_registry``) and
reaches routes through the ``get_session_registry`` dependency.
"""

import json
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import redis.asyncio as redis
import structlog

from chatsurvey.domain.transcript import FileRef

logger = structlog.get_logger(__name__)

KEY_PREFIX = "chatsurvey:session:"


@dataclass(frozen=True)
class SessionEntry:
    file_ref: FileRef
    started_at: str

    def to_json(self) -> str:
        return json.dumps(
            {
                "survey_type": self.file_ref.survey_type,
                "filename": self.file_ref.filename,
                "started_at": self.started_at,
            }
        )

    @classmethod
    def from_json(cls, raw: str) -> "SessionEntry":
        data = json.loads(raw)
        return cls(
            file_ref=FileRef(survey_type=data["survey_type"], filename=data["filename"]),
            started_at=data["started_at"],
        )


@runtime_checkable
class SessionRegistry(Protocol):
    async def register(self, session_id: str, entry: SessionEntry) -> None: ...

    async def lookup(self, session_id: str) -> SessionEntry | None: ...

    async def evict(self, session_id: str) -> None: ...

    async def close(self) -> None: ...


class InMemorySessionRegistry:
    def __init__(self) -> None:
        self._entries: dict[str, SessionEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def register(self, session_id: str, entry: SessionEntry) -> None:
        self._entries[session_id] = entry

    async def lookup(self, session_id: str) -> SessionEntry | None:
        return self._entries.get(session_id)

    async def evict(self, session_id: str) -> None:
        self._entries.pop(session_id, None)

    async def close(self) -> None:
        self._entries.clear()


class RedisSessionRegistry:
    """Registry backed by Redis string keys.

    Args:
        client: ``redis.asyncio.Redis`` created with ``decode_responses=True``
        ttl_seconds: idle expiry, renewed on every lookup; 0 keeps entries forever
    """

    def __init__(self, client: redis.Redis, ttl_seconds: int = 0):
        self._redis = client
        self._ttl = ttl_seconds

    @classmethod
    async def from_url(cls, url: str, ttl_seconds: int = 0) -> "RedisSessionRegistry":
        client = redis.from_url(url, encoding="utf-8", decode_responses=True)
        # Verify connectivity
        await client.ping()
        return cls(client, ttl_seconds)

    async def register(self, session_id: str, entry: SessionEntry) -> None:
        await self._redis.set(f"{KEY_PREFIX}{session_id}", entry.to_json(), ex=self._ttl or None)

    async def lookup(self, session_id: str) -> SessionEntry | None:
        key = f"{KEY_PREFIX}{session_id}"
        if self._ttl:
            raw = await self._redis.getex(key, ex=self._ttl)
        else:
            raw = await self._redis.get(key)
        if raw is None:
            return None
        try:
            return SessionEntry.from_json(raw)
        except (ValueError, KeyError) as e:
            logger.warning("session_entry_unreadable", session_id=session_id, error=str(e))
            return None

    async def evict(self, session_id: str) -> None:
        await self._redis.delete(f"{KEY_PREFIX}{session_id}")

    async def close(self) -> None:
        await self._redis.aclose()


async def create_session_registry(url: str = "", ttl_seconds: int = 0) -> SessionRegistry:
    """Redis when ``url`` is set, otherwise process memory."""
    if url:
        registry = await RedisSessionRegistry.from_url(url, ttl_seconds)
        logger.info("session_registry_ready", backend="redis", ttl_seconds=ttl_seconds)
        return registry
    logger.info("session_registry_ready", backend="memory")
    return InMemorySessionRegistry()


__all__ = [
    "InMemorySessionRegistry",
    "RedisSessionRegistry",
    "SessionEntry",
    "SessionRegistry",
    "create_session_registry",
]
