"""
Reconciliation of a fetched remote collection with the collection in memory.
"""

from typing import Iterable, List, Optional, TypeVar

from pydantic import BaseModel

from agency.schemas.common import EntityId, is_empty, normalize_id

RecordT = TypeVar("RecordT", bound=BaseModel)


def merge_record(local: RecordT, remote: RecordT) -> RecordT:
    """
    Remote record as base; fields the remote leaves unset or empty keep the
    local value when the local one is non-empty.
    """
    preserved = {}
    for name in type(remote).model_fields:
        if not is_empty(getattr(remote, name)):
            continue
        local_value = getattr(local, name, None)
        if not is_empty(local_value):
            preserved[name] = local_value
    return remote.model_copy(update=preserved) if preserved else remote


def merge_collection(
    local: Iterable[RecordT],
    remote: Iterable[RecordT],
    seed: Optional[RecordT] = None,
    acknowledged: Iterable[EntityId] = (),
) -> List[RecordT]:
    """
    Merge a remote fetch into the local collection.

    Every remote record is kept (merged with its local counterpart), records
    known only locally are appended unless the remote store had already
    acknowledged them (then they were deleted remotely), and identifiers are
    compared by string form so no entity appears twice. When a seed record is
    given it is present exactly once: where it already is, or at the front.

    Args:
        local: Records currently in memory
        remote: Records freshly fetched from the remote store
        seed: Showcase record that must always be present
        acknowledged: Ids the remote store is known to have held

    Returns:
        The merged collection
    """
    local = list(local)
    local_by_id = {}
    for record in local:
        local_by_id.setdefault(normalize_id(record.id), record)

    gone = {normalize_id(entity_id) for entity_id in acknowledged}
    if seed is not None:
        gone.discard(normalize_id(seed.id))
    merged: List[RecordT] = []
    seen = set()
    for record in remote:
        key = normalize_id(record.id)
        if key in seen:
            continue
        seen.add(key)
        counterpart = local_by_id.get(key)
        merged.append(merge_record(counterpart, record) if counterpart is not None else record)

    for record in local:
        key = normalize_id(record.id)
        if key in seen or key in gone:
            continue
        seen.add(key)
        merged.append(record)

    if seed is not None and normalize_id(seed.id) not in seen:
        merged.insert(0, seed)
    return merged
