"""
Tower puzzle - core data structures and model operations.

Towers hold stacks of disks (index 0 is the bottom). Every accepted mutation
keeps each stack strictly decreasing in size from bottom to top.
"""

from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum, IntEnum

import numpy as np


NUM_TOWERS = 3
MIN_DISKS = 3
MAX_DISKS = 7


class TowerId(IntEnum):
    """Logical tower identities. Drawing position never changes these."""
    LEFT = 0
    MIDDLE = 1
    RIGHT = 2


GOAL_TOWER = TowerId.RIGHT


class GameMode(Enum):
    """Game modes"""
    NORMAL = "normal"
    TIMED = "timed"
    SHUFFLED = "shuffled"
    PRESCRAMBLED = "prescrambled"


class GameStatus(Enum):
    """Terminal flag of a session"""
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST_TIMEOUT = "lost_timeout"


class ErrorCode(Enum):
    """Error codes"""
    OK = "OK"
    SAME_TOWER = "SameTower"
    EMPTY_SOURCE = "EmptySource"
    NOT_TOP_DISK = "NotTopDisk"
    LARGER_ON_SMALLER = "LargerOnSmaller"
    UNKNOWN_TOWER = "UnknownTower"
    NO_TARGET = "NoTarget"
    NOTHING_HELD = "NothingHeld"
    GAME_OVER = "GameOver"
    PLAYBACK_ACTIVE = "PlaybackActive"


class PuzzleError(Exception):
    """Base class for model errors."""


class InvariantViolation(PuzzleError):
    """An impossible model mutation was attempted."""


class EmptyTower(PuzzleError):
    """A disk was requested from a tower that holds none."""


class IllegalMove(PuzzleError):
    """A move breaks the puzzle rules."""

    def __init__(self, error: "ErrorCode", message: str = ""):
        super().__init__(message or error.value)
        self.error = error


@dataclass
class Vec3:
    """3D point in scene units"""
    x: float
    y: float
    z: float

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=float)

    def copy(self) -> "Vec3":
        return Vec3(self.x, self.y, self.z)

    @staticmethod
    def from_list(lst) -> "Vec3":
        return Vec3(float(lst[0]), float(lst[1]), float(lst[2]))


@dataclass(eq=False)
class Disk:
    """A disk. Compared by identity; ``size`` is fixed after creation."""
    size: int
    tower: Optional[int] = None  # None while in transit

    def __setattr__(self, name, value):
        if name == "size" and "size" in self.__dict__:
            raise AttributeError("disk size cannot change after creation")
        super().__setattr__(name, value)

    def __repr__(self) -> str:
        return f"Disk(size={self.size}, tower={self.tower})"


@dataclass
class Tower:
    """A peg holding a stack of disks, bottom first"""
    tower_id: int
    disks: List[Disk] = field(default_factory=list)

    def sizes(self) -> List[int]:
        return [d.size for d in self.disks]

    def is_empty(self) -> bool:
        return not self.disks

    def __len__(self) -> int:
        return len(self.disks)


@dataclass(frozen=True)
class MoveRecord:
    """One move between towers"""
    from_tower: int
    to_tower: int

    def to_dict(self) -> Dict[str, int]:
        return {"from_tower": int(self.from_tower), "to_tower": int(self.to_tower)}

    def __str__(self) -> str:
        return f"{int(self.from_tower)}->{int(self.to_tower)}"


@dataclass
class MoveResult:
    """Outcome of a move attempt"""
    success: bool
    error: ErrorCode
    record: Optional[MoveRecord] = None
    disk: Optional[Disk] = None
    message: str = ""


@dataclass
class PuzzleSession:
    """State of one game. Owns its towers and disks exclusively."""
    num_disks: int
    mode: GameMode = GameMode.NORMAL
    towers: List[Tower] = field(default_factory=list)
    disks: List[Disk] = field(default_factory=list)  # largest first
    moves: int = 0
    timer: int = 0  # elapsed, or remaining when time_limit is set
    time_limit: Optional[int] = None
    status: GameStatus = GameStatus.IN_PROGRESS
    tower_positions: Dict[int, Vec3] = field(default_factory=dict)
    assisted: bool = False
    generation: int = 0
    history: List[MoveRecord] = field(default_factory=list)

    def __post_init__(self):
        if self.num_disks < 1:
            raise ValueError("num_disks must be a positive integer")
        if not self.towers:
            self.towers = create_towers()
        if not self.disks:
            self.disks = create_disks(self.num_disks)

    @property
    def is_over(self) -> bool:
        return self.status != GameStatus.IN_PROGRESS

    @property
    def countdown(self) -> bool:
        return self.time_limit is not None

    def tower(self, tower_id: int) -> Tower:
        """Look up a tower by logical id"""
        if not isinstance(tower_id, (int, np.integer)) or not 0 <= tower_id < len(self.towers):
            raise KeyError(f"Unknown tower {tower_id}")
        return self.towers[int(tower_id)]

    def disk(self, size: int) -> Optional[Disk]:
        for d in self.disks:
            if d.size == size:
                return d
        return None

    def top_disks(self) -> List[Disk]:
        """Disks that can be picked: the top of each non-empty tower"""
        return [t.disks[-1] for t in self.towers if t.disks]

    def layout(self) -> List[List[int]]:
        """Disk sizes per tower, bottom to top"""
        return [t.sizes() for t in self.towers]

    def to_dict(self) -> Dict:
        return {
            "num_disks": self.num_disks,
            "mode": self.mode.value,
            "towers": self.layout(),
            "moves": self.moves,
            "timer": self.timer,
            "time_limit": self.time_limit,
            "status": self.status.value,
            "tower_positions": {int(k): list(v.to_tuple()) for k, v in self.tower_positions.items()},
            "assisted": self.assisted,
        }


def create_towers() -> List[Tower]:
    return [Tower(tower_id=int(t)) for t in TowerId]


def create_disks(num_disks: int) -> List[Disk]:
    """Disks ordered largest first, unplaced"""
    return [Disk(size=size) for size in range(num_disks, 0, -1)]


def top_of(tower: Tower) -> Optional[Disk]:
    """Disk at the top of the stack, or None"""
    if not tower.disks:
        return None
    return tower.disks[-1]


def push(tower: Tower, disk: Disk) -> None:
    """Put a disk on top. Callers validate first; this only guards the invariant."""
    top = top_of(tower)
    if top is not None and disk.size >= top.size:
        raise InvariantViolation(
            f"Cannot put disk {disk.size} on disk {top.size} (tower {tower.tower_id})"
        )
    if disk.tower is not None:
        raise InvariantViolation(f"Disk {disk.size} still belongs to tower {disk.tower}")
    tower.disks.append(disk)
    disk.tower = tower.tower_id


def pop(tower: Tower) -> Disk:
    """Remove the top disk and detach it"""
    if not tower.disks:
        raise EmptyTower(f"Tower {tower.tower_id} has no disks")
    disk = tower.disks.pop()
    disk.tower = None
    return disk


def is_complete(tower: Tower, expected_count: int) -> bool:
    """True iff the tower holds the whole puzzle in solved order"""
    if len(tower.disks) != expected_count:
        return False
    for i, disk in enumerate(tower.disks):
        if disk.size != expected_count - i:
            return False
    return True


def is_descending(tower: Tower) -> bool:
    return all(a.size > b.size for a, b in zip(tower.disks, tower.disks[1:]))


def check_invariants(session: PuzzleSession) -> None:
    """Raise InvariantViolation if any tower or disk membership is inconsistent"""
    seen = set()
    for tower in session.towers:
        if not is_descending(tower):
            raise InvariantViolation(f"Tower {tower.tower_id} is out of order: {tower.sizes()}")
        for disk in tower.disks:
            if id(disk) in seen:
                raise InvariantViolation(f"Disk {disk.size} is on more than one tower")
            if disk.tower != tower.tower_id:
                raise InvariantViolation(
                    f"Disk {disk.size} thinks it is on {disk.tower}, found on {tower.tower_id}"
                )
            seen.add(id(disk))
    for disk in session.disks:
        if id(disk) not in seen and disk.tower is not None:
            raise InvariantViolation(f"Disk {disk.size} points at tower {disk.tower} but is not stacked")
