import itertools

import pytest

from favactors.errors import ChangePreconditionError, SyncInvariantError
from favactors.sync.changes import Change, ChangeKind
from favactors.sync.synchronizer import BatchPlan, ListSynchronizer


class RecordingList:
    """In-memory visual list that records every operation."""

    def __init__(self, items=()):
        self.items = list(items)
        self.ops = []

    def row_count(self):
        return len(self.items)

    def item_at(self, row):
        return self.items[row]

    def begin_updates(self):
        self.ops.append(("begin",))

    def end_updates(self):
        self.ops.append(("end",))

    def insert_row(self, row, item):
        self.ops.append(("insert", row))
        self.items.insert(row, item)

    def remove_row(self, row):
        self.ops.append(("remove", row))
        del self.items[row]

    def move_row(self, source, destination):
        self.ops.append(("move", source, destination))
        self.items.insert(destination, self.items.pop(source))

    def reload_row(self, row, item):
        self.ops.append(("reload", row))
        self.items[row] = item

    def reset(self, items):
        self.ops.append(("reset",))
        self.items = list(items)


class Row:
    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return f"Row({self.name!r})"


def _rows(*names):
    return [Row(name) for name in names]


def _send(sync, changes):
    sync.will_change_content()
    for change in changes:
        sync.did_change_object(change.kind, change.old_position, change.new_position)
    sync.did_change_content()


@pytest.fixture
def setup():
    anna, zed = _rows("Anna", "Zed")
    view = [anna, zed]
    target = RecordingList()
    sync = ListSynchronizer(target, lambda: view)
    sync.reset()
    return view, target, sync


def test_reset_copies_the_view(setup):
    view, target, _sync = setup
    assert target.items == view


def test_insert_between_existing_rows(setup):
    view, target, sync = setup
    mia = Row("Mia")
    view.insert(1, mia)

    _send(sync, [Change.insert(1)])

    assert [row.name for row in target.items] == ["Anna", "Mia", "Zed"]
    assert target.ops[-3:] == [("begin",), ("insert", 1), ("end",)]
    assert sync.batches_applied == 1


def test_delete_keeps_remaining_order(setup):
    view, target, sync = setup
    mia = Row("Mia")
    view.insert(1, mia)
    _send(sync, [Change.insert(1)])

    del view[0]
    _send(sync, [Change.delete(0)])

    assert [row.name for row in target.items] == ["Mia", "Zed"]
    assert target.items[0] is mia


def test_single_move_is_applied_as_a_move():
    a, b, c = _rows("a", "b", "c")
    view = [a, b, c]
    target = RecordingList(view)
    sync = ListSynchronizer(target, lambda: view)

    view[:] = [b, c, a]
    _send(sync, [Change.move(0, 2)])

    assert target.items == [b, c, a]
    assert ("move", 0, 2) in target.ops


def test_update_reloads_the_surviving_row_at_its_new_position():
    a, b, c = _rows("a", "b", "c")
    view = [a, b, c]
    target = RecordingList(view)
    sync = ListSynchronizer(target, lambda: view)

    x = Row("x")
    view[:] = [x, a, b, c]
    _send(sync, [Change.update(1), Change.insert(0)])

    assert target.items == [x, a, b, c]
    assert ("reload", 2) in target.ops


def test_batch_result_does_not_depend_on_notification_order():
    a, b, c, d, e = _rows("a", "b", "c", "d", "e")
    x = Row("x")
    old = [a, b, c, d, e]
    new = [e, b, x, d, a]
    changes = [
        Change.delete(2),
        Change.insert(2),
        Change.move(0, 4),
        Change.move(4, 0),
        Change.update(1),
    ]

    for ordering in itertools.permutations(changes):
        view = list(old)
        target = RecordingList(view)
        sync = ListSynchronizer(target, lambda: view)
        view[:] = new
        _send(sync, list(ordering))
        assert target.items == new


def test_out_of_bounds_position_raises_and_resumes_updates():
    view = _rows("a")
    target = RecordingList(view)
    sync = ListSynchronizer(target, lambda: view)

    with pytest.raises(SyncInvariantError):
        _send(sync, [Change.delete(3)])

    assert target.ops[-1] == ("end",)
    assert not sync.in_transaction


def test_count_mismatch_raises():
    view = _rows("a", "b")
    target = RecordingList(view)
    sync = ListSynchronizer(target, lambda: view)

    view.append(Row("c"))
    with pytest.raises(SyncInvariantError):
        _send(sync, [])


def test_duplicate_positions_raise():
    view = _rows("a", "b")
    target = RecordingList(view)
    sync = ListSynchronizer(target, lambda: view)

    with pytest.raises(SyncInvariantError):
        BatchPlan.build([Change.delete(0), Change.move(0, 1)], old_count=2, new_count=1)

    del view[0]
    with pytest.raises(SyncInvariantError):
        _send(sync, [Change.delete(0), Change.delete(0)])


def test_batch_that_does_not_describe_the_view_is_rejected():
    a, b = _rows("a", "b")
    view = [a, b]
    target = RecordingList(view)
    sync = ListSynchronizer(target, lambda: view)

    view[:] = [b, a]
    with pytest.raises(SyncInvariantError):
        _send(sync, [Change.update(0)])


def test_malformed_notification_aborts_the_batch():
    view = _rows("a")
    target = RecordingList(view)
    sync = ListSynchronizer(target, lambda: view)

    sync.will_change_content()
    with pytest.raises(ChangePreconditionError):
        sync.did_change_object(ChangeKind.INSERT, 0, None)

    assert not sync.in_transaction
    assert target.ops == [("begin",), ("end",)]


def test_notifications_outside_a_batch_raise():
    view = _rows("a")
    sync = ListSynchronizer(RecordingList(view), lambda: view)

    with pytest.raises(SyncInvariantError):
        sync.did_change_object(ChangeKind.DELETE, 0)
    with pytest.raises(SyncInvariantError):
        sync.did_change_content()

    sync.will_change_content()
    with pytest.raises(SyncInvariantError):
        sync.will_change_content()
