"""
Optimistic synchronization protocol.

A command is applied to the entity store and written to the local cache
immediately; its remote call then runs as an asyncio task. Remote calls
for the same entity run one at a time in issue order. On failure the
command's change is reverted and the error is placed in the shared
last-error slot until explicitly cleared.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set

from agency.client.cache import LocalCache
from agency.client.store import EntityStore, PendingCreate, Revert, rebase
from agency.core.exceptions import RemotePersistenceError, SessionExpiredError
from agency.core.logging import get_logger
from agency.schemas.common import EntityId, normalize_id

logger = get_logger(__name__)


@dataclass(eq=False)
class OptimisticCommand:
    """
    One mutation of one entity.

    apply performs the local change and returns its Revert. persist performs
    the remote call (None for local-only collections); its result is passed
    to confirm.
    """
    collection: str
    entity_id: EntityId
    apply: Callable[[], Optional[Revert]]
    persist: Optional[Callable[[], Awaitable[Any]]] = None
    confirm: Optional[Callable[[Any], None]] = None
    revert: Optional[Revert] = None
    failure_message: str = "Failed to save changes"
    is_create: bool = False
    status: str = field(default="new", init=False)
    pending: Optional[PendingCreate] = field(default=None, init=False)


class SyncProtocol:
    """Runs optimistic commands against the store, the local cache and the remote store."""

    def __init__(
        self,
        store: EntityStore,
        cache: LocalCache,
        on_session_expired: Optional[Callable[[], None]] = None,
    ):
        self.store = store
        self.cache = cache
        self.on_session_expired = on_session_expired
        self.last_error: Optional[str] = None
        self._locks: Dict[tuple, asyncio.Lock] = {}
        self._outstanding: Dict[tuple, List[OptimisticCommand]] = {}
        self._tasks: Set[asyncio.Task] = set()

    def clear_error(self) -> None:
        self.last_error = None

    def write_cache(self, collection: str) -> None:
        self.cache.write_collection(collection, self.store.snapshot(collection))

    def _key(self, command: OptimisticCommand) -> tuple:
        """Commands against a pending create share its temporary id as key."""
        pending = self.store.pending_for(command.collection, command.entity_id)
        entity_key = pending.temp_id if pending else self.store.resolve_id(command.collection, command.entity_id)
        return command.collection, entity_key

    def execute(self, command: OptimisticCommand) -> Optional["asyncio.Task[bool]"]:
        """
        Apply a command locally and schedule its remote call.

        Validation errors raised by apply propagate before anything changes.

        Returns:
            The task running the remote call, or None for local-only commands
        """
        revert = command.apply()
        if command.revert is None:
            command.revert = revert
        # The create this command is queued behind, or its own for a create
        command.pending = self.store.pending_for(command.collection, command.entity_id)
        self.write_cache(command.collection)

        if command.persist is None:
            command.status = "done"
            return None

        key = self._key(command)
        self._outstanding.setdefault(key, []).append(command)
        command.status = "queued"
        task = asyncio.get_running_loop().create_task(self._run(key, command))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, key: tuple, command: OptimisticCommand) -> bool:
        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            try:
                if not command.is_create and command.pending is not None and command.pending.failed:
                    self._drop(command)
                    return False

                command.status = "running"
                try:
                    result = await command.persist()
                except RemotePersistenceError as e:
                    self._fail(key, command, e)
                    if isinstance(e, SessionExpiredError) and self.on_session_expired:
                        self.on_session_expired()
                    return False

                if command.confirm is not None and result is not None:
                    command.confirm(result)
                    self.write_cache(command.collection)
                command.status = "done"
                return True
            finally:
                self._outstanding[key].remove(command)
                if not self._outstanding[key]:
                    del self._outstanding[key]
                    self._locks.pop(key, None)
                    self.store.retire_pending(*key)

    def _drop(self, command: OptimisticCommand) -> None:
        """
        Skip a change whose create failed.

        The failed create already removed the record, so there is nothing
        left to revert locally; reverting a queued delete would bring the
        record back.
        """
        command.status = "dropped"
        self.last_error = f"{command.failure_message}: record was not created"
        logger.warning(
            "Dropping change queued behind a failed create",
            extra={"collection": command.collection, "entity_id": normalize_id(command.entity_id)},
        )

    def _fail(self, key: tuple, command: OptimisticCommand, error: RemotePersistenceError) -> None:
        command.status = "failed"
        if command.is_create and command.pending is not None:
            command.pending.failed = True
            self.store.discard_pending(command.pending)

        if command.revert is not None:
            queued = self._outstanding.get(key, [])
            later_commands = queued[queued.index(command) + 1:] if command in queued else []
            for later in later_commands:
                if later.revert is not None:
                    rebase(command.revert, later.revert)
            command.revert()
        self.write_cache(command.collection)

        self.last_error = f"{command.failure_message}: {error.message}"
        logger.warning(
            "Remote persistence failed, change reverted",
            extra={
                "collection": command.collection,
                "entity_id": normalize_id(command.entity_id),
                "status_code": error.status_code,
                "error": error.message,
            },
        )

    async def drain(self) -> None:
        """Wait for every in-flight remote call."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
