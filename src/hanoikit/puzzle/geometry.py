"""
Scene geometry for towers and disks.

Positions are plain coordinates handed to the presentation layer. Legality is
always computed on logical tower ids; these helpers only answer "which disk
is under this point" and "which tower is nearest".
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from hanoikit.puzzle.game_core import Disk, PuzzleSession, Vec3


DEFAULT_TOWER_POSITIONS: Tuple[Tuple[float, float, float], ...] = (
    (-10.0, 0.0, 0.0),
    (0.0, 0.0, 0.0),
    (10.0, 0.0, 0.0),
)


def default_positions() -> Dict[int, Vec3]:
    return {i: Vec3.from_list(p) for i, p in enumerate(DEFAULT_TOWER_POSITIONS)}


def disk_y(index: int, disk_height: float, base_height: float) -> float:
    """Height of the disk centre at stack index (0 is the bottom)"""
    return base_height / 2 + disk_height / 2 + index * disk_height


def disk_radius(size: int, total: int, min_radius: float, max_radius: float) -> float:
    """Outer radius grows linearly with size"""
    return min_radius + (size / total) * (max_radius - min_radius)


class StackGeometry:
    """Resolves scene points against the session's towers and disks."""

    def __init__(self, disk_height: float = 0.8, base_height: float = 1.0,
                 min_radius: float = 1.5, max_radius: float = 5.0):
        self.disk_height = disk_height
        self.base_height = base_height
        self.min_radius = min_radius
        self.max_radius = max_radius

    def disk_position(self, session: PuzzleSession, disk: Disk) -> Optional[Vec3]:
        """Resting position of a stacked disk, None while in transit"""
        if disk.tower is None:
            return None
        tower = session.tower(disk.tower)
        index = tower.disks.index(disk)
        base = session.tower_positions[tower.tower_id]
        return Vec3(base.x, disk_y(index, self.disk_height, self.base_height), base.z)

    def radius(self, session: PuzzleSession, disk: Disk) -> float:
        return disk_radius(disk.size, session.num_disks, self.min_radius, self.max_radius)

    def disk_at(self, session: PuzzleSession, point: Vec3,
                candidates: Iterable[Disk]) -> Optional[Disk]:
        """
        Topmost candidate disk whose body contains the point.

        Only the candidates are considered, so buried disks are never returned.
        """
        p = point.to_array()
        hits: List[Tuple[float, Disk]] = []
        for disk in candidates:
            centre = self.disk_position(session, disk)
            if centre is None:
                continue
            c = centre.to_array()
            horizontal = np.hypot(p[0] - c[0], p[2] - c[2])
            if horizontal <= self.radius(session, disk) and abs(p[1] - c[1]) <= self.disk_height / 2:
                hits.append((c[1], disk))
        if not hits:
            return None
        hits.sort(key=lambda h: h[0], reverse=True)
        return hits[0][1]

    def nearest_tower(self, session: PuzzleSession, position: Vec3,
                      threshold: float) -> Optional[int]:
        """Closest tower in the horizontal plane, None beyond the threshold"""
        ids: Sequence[int] = sorted(session.tower_positions)
        if not ids:
            return None
        bases = np.array([[session.tower_positions[i].x, session.tower_positions[i].z] for i in ids])
        here = np.array([position.x, position.z])
        distances = np.linalg.norm(bases - here, axis=1)
        best = int(np.argmin(distances))
        if distances[best] >= threshold:
            return None
        return int(ids[best])
