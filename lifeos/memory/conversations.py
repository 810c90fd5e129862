"""
Provider-agnostic conversation memory with debounced durable persistence.

The in-process cache is authoritative for the life of the process: reads
never touch the durable store. Each ``save`` (re)starts a per-conversation
quiet-period timer; when it fires, the whole still-alive cache is serialised
and written in one go. A burst of saves during a multi-round tool turn
therefore costs a single write. On cold start ``rehydrate`` loads the last
snapshot once.

Scaling ceiling: every write serialises every live conversation. That is fine
for a personal assistant with a handful of chats, not for thousands.

Concurrent turns on the same conversation id are not serialised; the later
``save`` wins.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Callable, MutableMapping, Protocol, Sequence

from pydantic import ValidationError

from ..constants import MAX_HISTORY, MEMORY_DEBOUNCE_SECONDS, MEMORY_TTL_SECONDS
from ..models import ConversationEntry, MemoryMessage
from .stores import MemoryStore

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]


def _now_ms() -> int:
    return int(time.time() * 1000)


def _loop_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class ConversationMemory:
    """Bounded, TTL-expiring per-conversation history."""

    def __init__(
        self,
        store: MemoryStore | None = None,
        *,
        max_history: int = MAX_HISTORY,
        ttl_seconds: float = MEMORY_TTL_SECONDS,
        debounce_seconds: float = MEMORY_DEBOUNCE_SECONDS,
        clock: Callable[[], int] = _now_ms,
        scheduler: Scheduler = _loop_scheduler,
        cache: MutableMapping[str, ConversationEntry] | None = None,
    ) -> None:
        self._store = store
        self._max_history = max_history
        self._ttl_ms = int(ttl_seconds * 1000)
        self._debounce = debounce_seconds
        self._clock = clock
        self._scheduler = scheduler
        self._cache: MutableMapping[str, ConversationEntry] = cache if cache is not None else {}
        self._timers: dict[str, TimerHandle] = {}
        self._writes: set[asyncio.Task] = set()
        self._write_lock = asyncio.Lock()
        self._rehydrated = False

    def _expired(self, entry: ConversationEntry, now: int) -> bool:
        return now - entry.last_active > self._ttl_ms

    # ── Core API ────────────────────────────────────────────────────────────────

    def get(self, conversation_id: str) -> list[MemoryMessage]:
        """History for ``conversation_id``; [] when absent or expired (expired entries are evicted)."""
        entry = self._cache.get(conversation_id)
        if entry is None:
            return []
        if self._expired(entry, self._clock()):
            logger.debug("Conversation %s expired; evicting", conversation_id)
            self.evict(conversation_id)
            return []
        return list(entry.messages)

    def save(self, conversation_id: str, messages: Sequence[MemoryMessage | dict]) -> None:
        """Store the last ``max_history`` messages and schedule a debounced durable write."""
        normalised = [
            m if isinstance(m, MemoryMessage) else MemoryMessage.model_validate(m)
            for m in messages
        ]
        trimmed = normalised[-self._max_history:] if self._max_history > 0 else []
        self._cache[conversation_id] = ConversationEntry(
            messages=trimmed, last_active=self._clock()
        )
        self._schedule_persist(conversation_id)

    def evict(self, conversation_id: str) -> None:
        self._cache.pop(conversation_id, None)

    def conversation_ids(self) -> list[str]:
        return list(self._cache)

    def snapshot(self) -> dict[str, dict]:
        """Every still-alive entry, in the durable JSON shape."""
        now = self._clock()
        return {
            cid: entry.model_dump(by_alias=True)
            for cid, entry in self._cache.items()
            if not self._expired(entry, now)
        }

    # ── Cold start ──────────────────────────────────────────────────────────────

    async def rehydrate(self) -> int:
        """
        Load the durable snapshot into the cache, once per process.
        Returns the number of conversations loaded. Never raises: a missing or
        failing store leaves the cache as it is.
        """
        if self._rehydrated or self._store is None:
            return 0
        self._rehydrated = True

        try:
            blob = await self._store.read()
        except Exception as e:
            logger.warning("Could not load conversation memory: %s", e)
            return 0
        if not blob:
            return 0

        try:
            data = json.loads(blob)
        except ValueError as e:
            logger.warning("Conversation memory snapshot is not valid JSON: %s", e)
            return 0
        if not isinstance(data, dict):
            logger.warning("Conversation memory snapshot has unexpected shape: %s", type(data).__name__)
            return 0

        now = self._clock()
        loaded = 0
        for cid, raw in data.items():
            try:
                entry = ConversationEntry.model_validate(raw)
            except ValidationError as e:
                logger.warning("Skipping corrupt conversation %s: %s", cid, e)
                continue
            if self._expired(entry, now):
                continue
            current = self._cache.get(cid)
            if current is not None and current.last_active >= entry.last_active:
                continue
            entry.messages = entry.messages[-self._max_history:]
            self._cache[cid] = entry
            loaded += 1

        logger.info("Loaded %d conversations from durable memory", loaded)
        return loaded

    # ── Persistence ─────────────────────────────────────────────────────────────

    def _schedule_persist(self, conversation_id: str) -> None:
        if self._store is None:
            return
        pending = self._timers.pop(conversation_id, None)
        if pending is not None:
            pending.cancel()
        self._timers[conversation_id] = self._scheduler(
            self._debounce, lambda: self._on_quiet(conversation_id)
        )

    def _on_quiet(self, conversation_id: str) -> None:
        self._timers.pop(conversation_id, None)
        task = asyncio.ensure_future(self._persist())
        self._writes.add(task)
        task.add_done_callback(self._writes.discard)

    async def _persist(self) -> None:
        # Writes are serialized; each one snapshots after the previous landed
        async with self._write_lock:
            data = self.snapshot()
            try:
                await self._store.write(json.dumps(data, indent=2))
            except Exception as e:
                # The cache stays authoritative; only the durable copy is stale.
                logger.warning("Conversation memory persist failed: %s", e)
                return
        logger.debug("Persisted %d conversations", len(data))

    @property
    def pending_conversations(self) -> list[str]:
        """Conversation ids with a durable write still waiting for quiet."""
        return list(self._timers)

    async def join(self) -> None:
        """Wait for durable writes that have already started."""
        if self._writes:
            await asyncio.gather(*list(self._writes), return_exceptions=True)

    async def flush(self) -> None:
        """Cancel pending timers and write now. Called on shutdown."""
        had_pending = bool(self._timers)
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        if self._store is not None and had_pending:
            await self._persist()
        await self.join()
