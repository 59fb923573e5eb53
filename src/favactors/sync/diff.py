"""Compute change batches between two snapshots of a sorted view."""

from __future__ import annotations

from bisect import bisect_left
from typing import Hashable, List, Sequence, Tuple

from .changes import Change

# (identity key, comparable row state)
SnapshotEntry = Tuple[Hashable, Hashable]


def _stable_indices(sequence: Sequence[int]) -> set[int]:
    """Return the positions in *sequence* that form a longest increasing subsequence."""

    if not sequence:
        return set()
    tails: List[int] = []
    tail_positions: List[int] = []
    previous: List[int] = [-1] * len(sequence)
    for position, value in enumerate(sequence):
        slot = bisect_left(tails, value)
        if slot == len(tails):
            tails.append(value)
            tail_positions.append(position)
        else:
            tails[slot] = value
            tail_positions[slot] = position
        previous[position] = tail_positions[slot - 1] if slot > 0 else -1

    stable: set[int] = set()
    cursor = tail_positions[-1]
    while cursor != -1:
        stable.add(cursor)
        cursor = previous[cursor]
    return stable


def diff_snapshots(old: Sequence[SnapshotEntry], new: Sequence[SnapshotEntry]) -> List[Change]:
    """Describe how *old* became *new* as deletes, inserts, moves and updates.

    Positions follow the batch convention: deletes, updates and move sources
    index into *old*; inserts and move destinations index into *new*. Records
    that kept their relative order are never reported as moved, so the move
    set is minimal.
    """

    old_lookup = {key: index for index, (key, _state) in enumerate(old)}
    new_lookup = {key: index for index, (key, _state) in enumerate(new)}

    changes: List[Change] = []
    for index, (key, _state) in enumerate(old):
        if key not in new_lookup:
            changes.append(Change.delete(index))
    for index, (key, _state) in enumerate(new):
        if key not in old_lookup:
            changes.append(Change.insert(index))

    # Surviving records in old order, mapped to their new positions.
    survivors = [(index, key) for index, (key, _state) in enumerate(old) if key in new_lookup]
    targets = [new_lookup[key] for _index, key in survivors]
    stable = _stable_indices(targets)

    updates: List[Change] = []
    for position, (old_index, key) in enumerate(survivors):
        new_index = new_lookup[key]
        if position not in stable:
            changes.append(Change.move(old_index, new_index))
        elif old[old_index][1] != new[new_index][1]:
            updates.append(Change.update(old_index))
    changes.extend(updates)
    return changes
