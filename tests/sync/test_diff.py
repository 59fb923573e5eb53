from favactors.sync.changes import Change, ChangeKind
from favactors.sync.diff import diff_snapshots


def _snapshot(*names):
    return [(name, (name, None)) for name in names]


def _apply(old_keys, new_keys, changes):
    """Replay *changes* the way the synchronizer does and return the keys."""
    removed = sorted(
        (c.old_position for c in changes if c.kind in (ChangeKind.DELETE, ChangeKind.MOVE)),
        reverse=True,
    )
    inserted = sorted(c.new_position for c in changes if c.kind in (ChangeKind.INSERT, ChangeKind.MOVE))
    rows = list(old_keys)
    for row in removed:
        del rows[row]
    for row in inserted:
        rows.insert(row, new_keys[row])
    return rows


def test_identical_snapshots_produce_no_changes():
    assert diff_snapshots(_snapshot("Anna", "Zed"), _snapshot("Anna", "Zed")) == []


def test_insert_lands_at_its_sorted_position():
    changes = diff_snapshots(_snapshot("Anna", "Zed"), _snapshot("Anna", "Mia", "Zed"))
    assert changes == [Change.insert(1)]


def test_delete_reports_the_old_position():
    changes = diff_snapshots(_snapshot("Anna", "Mia", "Zed"), _snapshot("Mia", "Zed"))
    assert changes == [Change.delete(0)]


def test_state_change_without_reordering_is_an_update():
    old = [(1, ("Anna", None)), (2, ("Zed", None))]
    new = [(1, ("Anna", "/anna.jpg")), (2, ("Zed", None))]
    assert diff_snapshots(old, new) == [Change.update(0)]


def test_rename_across_neighbours_is_a_single_move():
    old = [(1, ("Anna", None)), (2, ("Mia", None)), (3, ("Zed", None))]
    new = [(2, ("Mia", None)), (3, ("Zed", None)), (1, ("Zoe", None))]
    assert diff_snapshots(old, new) == [Change.move(0, 2)]


def test_mixed_batch_replays_to_the_new_order():
    old_keys = ["a", "b", "c", "d", "e"]
    new_keys = ["e", "b", "x", "d", "a"]
    changes = diff_snapshots(_snapshot(*old_keys), _snapshot(*new_keys))

    kinds = {c.kind for c in changes}
    assert ChangeKind.DELETE in kinds and ChangeKind.INSERT in kinds
    assert _apply(old_keys, new_keys, changes) == new_keys


def test_moves_are_minimal():
    old_keys = ["a", "b", "c", "d"]
    new_keys = ["d", "a", "b", "c"]
    changes = diff_snapshots(_snapshot(*old_keys), _snapshot(*new_keys))
    assert changes == [Change.move(3, 0)]
