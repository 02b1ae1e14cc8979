"""
Form draft store.

Keeps a partially filled form per user and form name, with the time of
the last write, so that observers can resume a card. A draft older than
the configured expiry is reset the next time it is read.

Drafts live in Redis when available and fall back to process memory when
Redis is disabled or unreachable.
"""

import json
import time
from typing import Any, Callable, Dict, Optional

import redis
from redis.exceptions import RedisError

from obsdesk.config import settings
from obsdesk.core.errors import ServerError
from obsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)

KEY_PREFIX = "obsdesk:draft:"


class MemoryDraftBackend:
    """Drafts kept in a dictionary, for a single process or tests."""

    def __init__(self):
        self._drafts: Dict[str, Dict[str, Any]] = {}

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        draft = self._drafts.get(key)
        if draft is None:
            return None
        return {"data": dict(draft["data"]), "last_updated": draft["last_updated"]}

    def save(self, key: str, draft: Dict[str, Any]) -> None:
        self._drafts[key] = {"data": dict(draft["data"]), "last_updated": draft["last_updated"]}


class RedisDraftBackend:
    """
    Drafts kept in Redis as JSON strings.

    Expiry is enforced by FormDraftStore, not by Redis TTLs, so that an
    expired draft is observably reset rather than silently missing.
    """

    def __init__(self, client: Optional[redis.Redis] = None):
        self.client = client or redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            password=settings.REDIS_PASSWORD if settings.REDIS_PASSWORD else None,
            db=settings.REDIS_DB,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5
        )

    def ping(self) -> None:
        self.client.ping()

    def load(self, key: str) -> Optional[Dict[str, Any]]:
        try:
            value = self.client.get(KEY_PREFIX + key)
            if not value:
                return None
            return json.loads(value)
        except (RedisError, json.JSONDecodeError) as e:
            logger.error(f"Draft GET error for key '{key}': {e}")
            raise ServerError("Draft storage is unavailable")

    def save(self, key: str, draft: Dict[str, Any]) -> None:
        try:
            self.client.set(KEY_PREFIX + key, json.dumps(draft, default=str))
        except RedisError as e:
            logger.error(f"Draft SET error for key '{key}': {e}")
            raise ServerError("Draft storage is unavailable")


class FormDraftStore:
    """
    Keyed draft store with merge, replace and lazy expiry.

    Args:
        backend: MemoryDraftBackend or RedisDraftBackend
        expiry_hours: Reset drafts not written for this long (None: never)
        clock: Returns the current Unix time; injectable for tests
    """

    def __init__(
        self,
        backend=None,
        expiry_hours: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend or MemoryDraftBackend()
        self.expiry_hours = expiry_hours
        self.clock = clock

    @staticmethod
    def draft_key(user_id: int, form: str) -> str:
        return f"{user_id}:{form}"

    def _write(self, key: str, data: Dict[str, Any]) -> Dict[str, Any]:
        draft = {"data": data, "last_updated": self.clock()}
        self.backend.save(key, draft)
        return draft

    def get(self, key: str) -> Dict[str, Any]:
        """
        Current draft, reset first if it has expired.

        Returns:
            {"data": {...}, "last_updated": float or None}
        """
        self.check_and_reset_if_expired(key)
        draft = self.backend.load(key)
        if draft is None:
            return {"data": {}, "last_updated": None}
        return draft

    def update_field(self, key: str, field: str, value: Any) -> Dict[str, Any]:
        """Set one field, keeping the others."""
        return self.update_fields(key, {field: value})

    def update_fields(self, key: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Merge fields into the draft."""
        current = self.backend.load(key)
        data = dict(current["data"]) if current else {}
        data.update(fields)
        return self._write(key, data)

    def set(self, key: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Replace the whole draft."""
        return self._write(key, dict(data))

    def reset(self, key: str, initial_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Back to the initial (empty) draft."""
        return self._write(key, dict(initial_data or {}))

    def check_and_reset_if_expired(self, key: str, expiry_hours: Optional[float] = None) -> bool:
        """
        Reset the draft if it was last written more than the expiry ago.

        Args:
            key: Draft key
            expiry_hours: Overrides the store's expiry for this check

        Returns:
            True only if a reset happened. Without a configured expiry, or
            without a stored draft, nothing is ever reset.
        """
        configured = expiry_hours or self.expiry_hours
        if not configured:
            return False

        draft = self.backend.load(key)
        if draft is None:
            return False

        if self.clock() - draft["last_updated"] > configured * 3600:
            self.reset(key)
            logger.debug(f"Draft {key} expired and was reset")
            return True
        return False


def create_draft_store() -> FormDraftStore:
    """
    Build the application draft store from settings.

    Falls back to memory when Redis is disabled or unreachable.
    """
    backend = None
    if settings.DRAFT_STORE_BACKEND == "redis":
        try:
            redis_backend = RedisDraftBackend()
            redis_backend.ping()
            backend = redis_backend
            logger.info(f"✓ Draft store using Redis: {settings.REDIS_HOST}:{settings.REDIS_PORT}")
        except (RedisError, ConnectionError) as e:
            logger.warning(f"⚠️  Redis unavailable for drafts: {e}. Using in-memory drafts.")
    if backend is None:
        backend = MemoryDraftBackend()
    return FormDraftStore(backend=backend, expiry_hours=settings.DRAFT_EXPIRY_HOURS)
