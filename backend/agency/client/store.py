"""
Entity store: the in-memory collections every surface reads from.

Writes return the Revert for exactly the change they made: a patch restores
only the fields it touched on that one entity, a removal puts the record
back at its old position. Reverts of other mutations are never affected.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Set, Tuple, Type

from pydantic import BaseModel, ValidationError

from agency.core.exceptions import InvalidInputError, NotFoundError
from agency.core.logging import get_logger
from agency.schemas.account import AccountResponse
from agency.schemas.common import EntityId, normalize_id, same_id
from agency.schemas.project import ProjectResponse
from agency.schemas.proposal import ProposalResponse
from agency.schemas.records import Expense, Message, TeamMember

logger = get_logger(__name__)

COLLECTIONS: Dict[str, Type[BaseModel]] = {
    "projects": ProjectResponse,
    "accounts": AccountResponse,
    "proposals": ProposalResponse,
    "expenses": Expense,
    "messages": Message,
    "team_members": TeamMember,
}

# Collections with no remote counterpart
LOCAL_ONLY_COLLECTIONS = ("expenses", "messages", "team_members")

Listener = Callable[[str], None]


class Revert:
    """Undo handle for one store change. Runs at most once."""

    def __init__(self, undo: Callable[[], None]):
        self._undo = undo
        self.done = False

    def __call__(self) -> None:
        if self.done:
            return
        self.done = True
        self._undo()


class FieldRevert(Revert):
    """Restores the previous values of the fields a patch changed."""

    def __init__(self, store: "EntityStore", collection: str, entity_id: EntityId, previous: Dict[str, Any]):
        self.collection = collection
        self.entity_id = entity_id
        self.previous = previous
        super().__init__(lambda: store._restore_fields(collection, entity_id, self.previous))


class RemovalRevert(Revert):
    """Re-inserts a removed record at its old position."""

    def __init__(self, store: "EntityStore", collection: str, record: BaseModel, position: int):
        self.collection = collection
        self.record = record
        self.position = position
        super().__init__(lambda: store._reinsert(collection, self.record, self.position))


def rebase(earlier: Revert, later: Revert) -> None:
    """
    Hand an earlier change's restore values to a later pending change.

    Used when the earlier change failed while a later change to the same
    fields is still in flight: the later change keeps its value on screen,
    and if it fails too it must restore the state from before both.
    """
    if not isinstance(earlier, FieldRevert):
        return
    if isinstance(later, FieldRevert):
        for field in list(earlier.previous):
            if field in later.previous:
                later.previous[field] = earlier.previous.pop(field)
    elif isinstance(later, RemovalRevert):
        later.record = later.record.model_copy(update=earlier.previous)
        earlier.previous.clear()


@dataclass(eq=False)
class PendingCreate:
    """A create not yet acknowledged by the remote store."""
    collection: str
    temp_id: str
    submitted: BaseModel
    canonical_id: Optional[str] = None
    failed: bool = False

    @property
    def confirmed(self) -> bool:
        return self.canonical_id is not None

    def matches(self, entity_id: EntityId) -> bool:
        return same_id(self.temp_id, entity_id) or same_id(self.canonical_id, entity_id)


class EntityStore:
    """Single source of truth for entity collections."""

    def __init__(self):
        self._collections: Dict[str, List[BaseModel]] = {name: [] for name in COLLECTIONS}
        self._listeners: List[Listener] = []
        self._pending: List[PendingCreate] = []
        self._aliases: Dict[Tuple[str, str], str] = {}
        self._acknowledged: Dict[str, Set[str]] = {name: set() for name in COLLECTIONS}
        self._last_temp_id = 0

    # Reads

    def all(self, collection: str) -> Tuple[BaseModel, ...]:
        return tuple(self._records(collection))

    def get(self, collection: str, entity_id: EntityId) -> Optional[BaseModel]:
        index = self.index_of(collection, entity_id)
        return self._records(collection)[index] if index >= 0 else None

    def index_of(self, collection: str, entity_id: EntityId) -> int:
        """Position of an entity, following temporary/canonical id aliases."""
        records = self._records(collection)
        candidates = [entity_id]
        pending = self.pending_for(collection, entity_id)
        if pending:
            candidates = [pending.temp_id, pending.canonical_id]
        elif self._alias(collection, entity_id):
            candidates = [self._alias(collection, entity_id), entity_id]
        for candidate in candidates:
            for index, record in enumerate(records):
                if same_id(record.id, candidate):
                    return index
        return -1

    def snapshot(self, collection: str) -> List[Dict[str, Any]]:
        """JSON-ready copy of a collection, as written to the local cache."""
        return [record.model_dump(mode="json") for record in self._records(collection)]

    def _records(self, collection: str) -> List[BaseModel]:
        if collection not in self._collections:
            raise InvalidInputError(f"Unknown collection: {collection}")
        return self._collections[collection]

    # Listeners

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener(collection) after every change; returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def _notify(self, collection: str) -> None:
        for listener in list(self._listeners):
            listener(collection)

    # Writes

    def build(self, collection: str, data: Dict[str, Any]) -> BaseModel:
        """Validate raw data into the collection's record type."""
        model = COLLECTIONS[collection]
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise InvalidInputError(f"Invalid {collection} record", details=e.errors(include_url=False))

    def load(self, collection: str, records: List[BaseModel]) -> None:
        """Replace a whole collection (initial load and reconciliation)."""
        self._records(collection)[:] = list(records)
        present = {normalize_id(record.id) for record in records}
        self._aliases = {
            key: canonical for key, canonical in self._aliases.items()
            if key[0] != collection or canonical in present
        }
        self._notify(collection)

    def insert(self, collection: str, record: BaseModel, position: Optional[int] = None) -> Revert:
        records = self._records(collection)
        if self.index_of(collection, record.id) >= 0:
            raise InvalidInputError(f"Duplicate id {normalize_id(record.id)} in {collection}")
        if position is None:
            records.append(record)
        else:
            records.insert(position, record)
        self._notify(collection)
        entity_id = record.id
        return Revert(lambda: self._discard(collection, entity_id))

    def patch(self, collection: str, entity_id: EntityId, changes: Dict[str, Any]) -> FieldRevert:
        """Apply field changes to one entity; validation happens before anything changes."""
        index = self.index_of(collection, entity_id)
        if index < 0:
            raise NotFoundError(f"No {collection} record with id {normalize_id(entity_id)}")
        records = self._records(collection)
        current = records[index]
        unknown = set(changes) - set(type(current).model_fields)
        if unknown or "id" in changes:
            raise InvalidInputError(f"Cannot change fields: {sorted(unknown | ({'id'} & set(changes)))}")

        updated = self.build(collection, {**current.model_dump(), **changes})
        previous = {field: getattr(current, field) for field in changes}
        records[index] = updated
        self._notify(collection)
        return FieldRevert(self, collection, current.id, previous)

    def remove(self, collection: str, entity_id: EntityId) -> RemovalRevert:
        index = self.index_of(collection, entity_id)
        if index < 0:
            raise NotFoundError(f"No {collection} record with id {normalize_id(entity_id)}")
        record = self._records(collection).pop(index)
        self._notify(collection)
        return RemovalRevert(self, collection, record, index)

    def replace(self, collection: str, entity_id: EntityId, record: BaseModel) -> Revert:
        """Swap an entity for another in place, keeping its position."""
        index = self.index_of(collection, entity_id)
        if index < 0:
            raise NotFoundError(f"No {collection} record with id {normalize_id(entity_id)}")
        records = self._records(collection)
        old = records[index]
        records[index] = record
        self._notify(collection)
        new_id = record.id
        return Revert(lambda: self._swap_back(collection, new_id, old))

    def _discard(self, collection: str, entity_id: EntityId) -> None:
        index = self.index_of(collection, entity_id)
        if index >= 0:
            self._records(collection).pop(index)
            self._notify(collection)

    def _restore_fields(self, collection: str, entity_id: EntityId, previous: Dict[str, Any]) -> None:
        index = self.index_of(collection, entity_id)
        if index < 0 or not previous:
            return
        records = self._records(collection)
        records[index] = records[index].model_copy(update=previous)
        self._notify(collection)

    def _reinsert(self, collection: str, record: BaseModel, position: int) -> None:
        if self.index_of(collection, record.id) >= 0:
            return
        records = self._records(collection)
        records.insert(min(position, len(records)), record)
        self._notify(collection)

    def _swap_back(self, collection: str, entity_id: EntityId, old: BaseModel) -> None:
        index = self.index_of(collection, entity_id)
        if index >= 0:
            self._records(collection)[index] = old
            self._notify(collection)

    # Pending creates

    def new_temp_id(self) -> int:
        """Client-assigned id: creation time in milliseconds, strictly increasing."""
        self._last_temp_id = max(int(time.time() * 1000), self._last_temp_id + 1)
        return self._last_temp_id

    def track_pending(self, collection: str, record: BaseModel) -> PendingCreate:
        pending = PendingCreate(collection=collection, temp_id=normalize_id(record.id), submitted=record)
        self._pending.append(pending)
        return pending

    def pending_for(self, collection: str, entity_id: EntityId) -> Optional[PendingCreate]:
        """The newest live create matching an id; a failed one only when nothing replaced it."""
        matches = [p for p in self._pending if p.collection == collection and p.matches(entity_id)]
        live = [p for p in matches if not p.failed]
        candidates = live or matches
        return candidates[-1] if candidates else None

    def discard_pending(self, pending: PendingCreate) -> None:
        if pending in self._pending:
            self._pending.remove(pending)

    def retire_pending(self, collection: str, temp_id: EntityId) -> None:
        """
        Forget settled creates for a temporary id once nothing is queued on it.

        A server-assigned id stays reachable through the temporary one until
        the next full load of the collection.
        """
        for pending in [p for p in self._pending if p.collection == collection and same_id(p.temp_id, temp_id)]:
            if not (pending.confirmed or pending.failed):
                continue
            if pending.confirmed and pending.canonical_id != pending.temp_id:
                self._aliases[(collection, pending.temp_id)] = pending.canonical_id
            self._pending.remove(pending)

    def pending_count(self) -> int:
        return len(self._pending)

    def acknowledge(self, collection: str, ids: Iterable[EntityId], replace: bool = False) -> None:
        """Record ids the remote store holds; a full fetch replaces the set."""
        known = {normalize_id(entity_id) for entity_id in ids}
        if replace:
            self._acknowledged[collection] = known
        else:
            self._acknowledged[collection] |= known

    def acknowledged(self, collection: str) -> FrozenSet[str]:
        return frozenset(self._acknowledged[collection])

    def _alias(self, collection: str, entity_id: EntityId) -> Optional[str]:
        return self._aliases.get((collection, normalize_id(entity_id)))

    def resolve_id(self, collection: str, entity_id: EntityId) -> str:
        """Canonical id of an entity, or its own id when it has no confirmed alias."""
        pending = self.pending_for(collection, entity_id)
        if pending and pending.confirmed:
            return pending.canonical_id
        return self._alias(collection, entity_id) or normalize_id(entity_id)

    def confirm_create(self, collection: str, temp_id: EntityId, canonical: BaseModel) -> None:
        """
        Replace an optimistic placeholder with the remote store's record.

        Fields edited locally since the create was submitted keep their local
        value; the edits are still queued for the remote store.
        """
        pending = self.pending_for(collection, temp_id)
        if pending is None:
            raise NotFoundError(f"No pending create for {normalize_id(temp_id)}")
        pending.canonical_id = normalize_id(canonical.id)
        self.acknowledge(collection, [canonical.id])

        current = self.get(collection, pending.temp_id)
        if current is None:
            return
        local_edits = {
            field: getattr(current, field)
            for field in type(current).model_fields
            if field != "id" and getattr(current, field) != getattr(pending.submitted, field, None)
        }
        if local_edits:
            canonical = canonical.model_copy(update=local_edits)
        index = self.index_of(collection, pending.temp_id)
        self._records(collection)[index] = canonical
        self._notify(collection)
        logger.debug(
            "Create confirmed",
            extra={"collection": collection, "temp_id": pending.temp_id, "id": pending.canonical_id},
        )
