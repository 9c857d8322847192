"""
Initial layouts - canonical stacks, shuffled tower positions and
pre-scrambled distributions.
"""

import random
from typing import Dict, List, Optional

from hanoikit.puzzle.game_core import (
    Disk, GameMode, PuzzleSession, Tower, TowerId, Vec3, push, pop, top_of, check_invariants,
)
from hanoikit.puzzle.geometry import default_positions


def create_session(num_disks: int, mode: GameMode = GameMode.NORMAL,
                   positions: Optional[Dict[int, Vec3]] = None) -> PuzzleSession:
    """Empty session with fresh towers and disks"""
    session = PuzzleSession(num_disks=num_disks, mode=mode)
    session.tower_positions = {k: v.copy() for k, v in (positions or default_positions()).items()}
    return session


def place_canonical(session: PuzzleSession) -> None:
    """All disks on the left tower, largest at the bottom"""
    tower = session.tower(TowerId.LEFT)
    for disk in session.disks:
        push(tower, disk)


def _accepts(tower: Tower, disk: Disk) -> bool:
    top = top_of(tower)
    return top is None or disk.size < top.size


def _clear(session: PuzzleSession) -> None:
    for tower in session.towers:
        while tower.disks:
            pop(tower)


def place_prescrambled(session: PuzzleSession, rng: random.Random) -> None:
    """
    Spread the disks over all three towers.

    A random tower is drawn each round; one of the unplaced disks smaller than
    its top (any disk when empty) is placed on it. Rounds where the drawn tower
    accepts nothing are skipped. Tops only shrink, so once the largest unplaced
    disk fits on no tower the draw is stuck for good; it then starts over from
    empty towers.

    Args:
        session: session whose disks are all unplaced
        rng: random source owned by the caller
    """
    available: List[Disk] = sorted(session.disks, key=lambda d: d.size, reverse=True)

    while available:
        if not any(_accepts(t, available[0]) for t in session.towers):
            _clear(session)
            available = sorted(session.disks, key=lambda d: d.size, reverse=True)
            continue
        tower = session.towers[rng.randrange(len(session.towers))]
        valid = [d for d in available if _accepts(tower, d)]
        if not valid:
            continue
        chosen = valid[rng.randrange(len(valid))]
        available.remove(chosen)
        push(tower, chosen)

    check_invariants(session)


def shuffle_positions(positions: Dict[int, Vec3], rng: random.Random) -> Dict[int, Vec3]:
    """
    Uniform permutation of tower drawing positions.

    Tower ids stay attached to the same logical tower; only coordinates move.
    """
    slots = [positions[i].copy() for i in sorted(positions)]
    # Fisher-Yates
    for i in range(len(slots) - 1, 0, -1):
        j = rng.randint(0, i)
        slots[i], slots[j] = slots[j], slots[i]
    return {tower_id: slots[k] for k, tower_id in enumerate(sorted(positions))}
