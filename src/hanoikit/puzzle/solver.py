"""
Optimal solution generator.
"""

from typing import Iterator, List

from hanoikit.puzzle.game_core import MoveRecord, TowerId


def min_moves(num_disks: int) -> int:
    """Proven minimum number of moves"""
    return 2 ** num_disks - 1


def iter_solution(n: int, from_tower: int, to_tower: int, aux_tower: int) -> Iterator[MoveRecord]:
    """Yield the optimal moves lazily; memory stays O(n)"""
    if n < 1:
        return
    if n == 1:
        yield MoveRecord(from_tower, to_tower)
        return
    yield from iter_solution(n - 1, from_tower, aux_tower, to_tower)
    yield MoveRecord(from_tower, to_tower)
    yield from iter_solution(n - 1, aux_tower, to_tower, from_tower)


def generate_solution(n: int,
                      from_tower: int = TowerId.LEFT,
                      to_tower: int = TowerId.RIGHT,
                      aux_tower: int = TowerId.MIDDLE) -> List[MoveRecord]:
    """
    Optimal move list for n disks.

    Moves n-1 disks to the auxiliary tower, the largest to the target, then
    the n-1 disks onto it. Always 2^n - 1 moves.
    """
    if len({int(from_tower), int(to_tower), int(aux_tower)}) != 3:
        raise ValueError("from_tower, to_tower and aux_tower must be distinct")
    return list(iter_solution(n, int(from_tower), int(to_tower), int(aux_tower)))
