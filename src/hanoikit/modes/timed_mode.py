"""
Timed mode: canonical start, lost when the countdown reaches zero.
"""

import random
from typing import Dict, Optional

from hanoikit.core.base import BaseMode
from hanoikit.core.registry import register_mode
from hanoikit.puzzle.game_core import GameMode, PuzzleSession, Vec3
from hanoikit.puzzle.initialization import create_session, place_canonical


@register_mode("timed")
class TimedMode(BaseMode):
    """Canonical start with a countdown of ``time_per_disk`` units per disk."""

    mode = GameMode.TIMED

    def time_limit(self, num_disks: int) -> Optional[int]:
        return num_disks * self.timer_config.time_per_disk

    def initialize(self, num_disks: int, rng: random.Random,
                   positions: Dict[int, Vec3]) -> PuzzleSession:
        session = create_session(num_disks, self.mode, positions)
        place_canonical(session)
        session.time_limit = self.time_limit(num_disks)
        session.timer = session.time_limit
        return session
