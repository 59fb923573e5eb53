import pytest

from favactors.errors import ChangePreconditionError
from favactors.sync.changes import Change, ChangeKind


def test_factories_set_the_right_positions():
    assert Change.insert(2) == Change(ChangeKind.INSERT, None, 2)
    assert Change.delete(1) == Change(ChangeKind.DELETE, 1, None)
    assert Change.update(0) == Change(ChangeKind.UPDATE, 0, None)
    assert Change.move(3, 0) == Change(ChangeKind.MOVE, 3, 0)


@pytest.mark.parametrize(
    "kind, old, new",
    [
        (ChangeKind.INSERT, None, None),
        (ChangeKind.INSERT, 1, 2),
        (ChangeKind.DELETE, None, None),
        (ChangeKind.DELETE, 0, 1),
        (ChangeKind.UPDATE, None, 0),
        (ChangeKind.MOVE, 1, None),
        (ChangeKind.MOVE, None, 1),
    ],
)
def test_positions_must_match_the_kind(kind, old, new):
    with pytest.raises(ChangePreconditionError):
        Change(kind, old, new)


@pytest.mark.parametrize("bad", [-1, 1.5, True, "2"])
def test_positions_must_be_non_negative_ints(bad):
    with pytest.raises(ChangePreconditionError):
        Change.delete(bad)
