"""
Unit tests for the move validator and the model mutation path.
"""

import random

import pytest

from hanoikit.puzzle.game_core import (
    Disk, ErrorCode, IllegalMove, check_invariants, top_of,
)
from hanoikit.puzzle.initialization import create_session, place_canonical
from hanoikit.puzzle.placement import (
    apply_move, can_move, require_legal, valid_targets, validate_move,
)


@pytest.fixture
def session():
    s = create_session(3)
    place_canonical(s)
    return s


# ============================================================================
# can_move / validate_move
# ============================================================================

class TestValidateMove:
    """Rejections and acceptances of the legality predicate."""

    def test_top_disk_to_empty_tower(self, session):
        left, middle = session.tower(0), session.tower(1)
        assert can_move(top_of(left), left, middle)

    def test_same_tower(self, session):
        left = session.tower(0)
        assert validate_move(top_of(left), left, left) == ErrorCode.SAME_TOWER

    def test_empty_source(self, session):
        middle, right = session.tower(1), session.tower(2)
        assert validate_move(Disk(size=1), middle, right) == ErrorCode.EMPTY_SOURCE

    def test_not_top_disk(self, session):
        left, right = session.tower(0), session.tower(2)
        bottom = left.disks[0]
        assert validate_move(bottom, left, right) == ErrorCode.NOT_TOP_DISK
        assert not can_move(bottom, left, right)

    def test_larger_on_smaller(self, session):
        apply_move(session, 0, 2)  # disk 1 -> right
        left, right = session.tower(0), session.tower(2)
        assert validate_move(top_of(left), left, right) == ErrorCode.LARGER_ON_SMALLER

    def test_require_legal_raises_with_code(self, session):
        left = session.tower(0)
        with pytest.raises(IllegalMove) as info:
            require_legal(top_of(left), left, left)
        assert info.value.error == ErrorCode.SAME_TOWER


def test_valid_targets(session):
    disk = top_of(session.tower(0))
    assert valid_targets(session, disk, 0) == [1, 2]

    apply_move(session, 0, 2)
    disk2 = top_of(session.tower(0))
    assert valid_targets(session, disk2, 0) == [1]


# ============================================================================
# apply_move
# ============================================================================

def test_apply_move_counts_and_records(session):
    result = apply_move(session, 0, 1)
    assert result.success
    assert result.disk.size == 1
    assert str(result.record) == "0->1"
    assert session.moves == 1
    assert session.layout() == [[3, 2], [1], []]


def test_rejected_move_leaves_session_untouched(session):
    apply_move(session, 0, 1)
    before = session.layout()
    result = apply_move(session, 0, 1)
    assert not result.success
    assert result.error == ErrorCode.LARGER_ON_SMALLER
    assert session.layout() == before
    assert session.moves == 1


def test_unknown_tower(session):
    result = apply_move(session, 0, 5)
    assert result.error == ErrorCode.UNKNOWN_TOWER
    assert session.moves == 0


# ============================================================================
# Property: random legal play never breaks the invariants
# ============================================================================

@pytest.mark.parametrize("seed", range(10))
def test_random_legal_moves_preserve_invariants(seed):
    """Any sequence of accepted moves keeps every tower strictly descending"""
    rng = random.Random(seed)
    for num_disks in range(3, 8):
        session = create_session(num_disks)
        place_canonical(session)
        accepted = 0
        for _ in range(200):
            a, b = rng.randrange(3), rng.randrange(3)
            before = session.moves
            result = apply_move(session, a, b)
            if result.success:
                accepted += 1
                assert session.moves == before + 1
            else:
                assert session.moves == before
            check_invariants(session)
            assert sum(len(t) for t in session.towers) == num_disks
        assert session.moves == accepted
