"""
Move legality and the single model mutation path.
"""

from typing import List, Optional

from hanoikit.puzzle.game_core import (
    Disk, Tower, PuzzleSession, MoveRecord, MoveResult, ErrorCode,
    IllegalMove, top_of, push, pop,
)


def validate_move(disk: Optional[Disk], from_tower: Tower, to_tower: Tower) -> ErrorCode:
    """
    Check a move and give the reason it fails.

    Args:
        disk: the disk to move
        from_tower: tower currently holding the disk
        to_tower: destination tower

    Returns:
        ErrorCode.OK if the move is legal
    """
    if from_tower is to_tower or from_tower.tower_id == to_tower.tower_id:
        return ErrorCode.SAME_TOWER

    top = top_of(from_tower)
    if top is None:
        return ErrorCode.EMPTY_SOURCE
    if disk is None or top is not disk:
        return ErrorCode.NOT_TOP_DISK

    target_top = top_of(to_tower)
    if target_top is not None and disk.size >= target_top.size:
        return ErrorCode.LARGER_ON_SMALLER

    return ErrorCode.OK


def can_move(disk: Optional[Disk], from_tower: Tower, to_tower: Tower) -> bool:
    """The one legality predicate used by every mutation path"""
    return validate_move(disk, from_tower, to_tower) == ErrorCode.OK


def require_legal(disk: Optional[Disk], from_tower: Tower, to_tower: Tower) -> None:
    """Raise IllegalMove instead of returning a code"""
    error = validate_move(disk, from_tower, to_tower)
    if error != ErrorCode.OK:
        raise IllegalMove(error, f"Illegal move {from_tower.tower_id}->{to_tower.tower_id}: {error.value}")


def valid_targets(session: PuzzleSession, disk: Disk, origin: int) -> List[int]:
    """Towers other than origin that would accept the disk"""
    from_tower = session.tower(origin)
    return [
        t.tower_id for t in session.towers
        if t.tower_id != origin and can_move(disk, from_tower, t)
    ]


def _resolve_towers(session: PuzzleSession, from_id: int, to_id: int):
    try:
        return session.tower(from_id), session.tower(to_id)
    except KeyError:
        return None, None


def apply_move(session: PuzzleSession, from_id: int, to_id: int) -> MoveResult:
    """
    Move the top disk of one tower onto another.

    Illegal attempts are reported in the result and leave the session untouched.

    Args:
        session: puzzle session
        from_id: source tower id
        to_id: destination tower id

    Returns:
        MoveResult
    """
    from_tower, to_tower = _resolve_towers(session, from_id, to_id)
    if from_tower is None:
        return MoveResult(
            success=False,
            error=ErrorCode.UNKNOWN_TOWER,
            message=f"Unknown tower in move {from_id}->{to_id}"
        )

    disk = top_of(from_tower)
    error = validate_move(disk, from_tower, to_tower)
    if error != ErrorCode.OK:
        return MoveResult(
            success=False,
            error=error,
            disk=disk,
            message=f"Illegal move {from_id}->{to_id}: {error.value}"
        )

    moved = pop(from_tower)
    push(to_tower, moved)

    record = MoveRecord(from_tower.tower_id, to_tower.tower_id)
    session.moves += 1
    session.history.append(record)

    return MoveResult(
        success=True,
        error=ErrorCode.OK,
        record=record,
        disk=moved,
        message=f"Moved disk {moved.size} {record}"
    )
