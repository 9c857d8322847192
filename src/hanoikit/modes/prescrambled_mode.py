"""
Pre-scrambled mode: disks start spread across all three towers.
"""

import random
from typing import Dict

from hanoikit.core.base import BaseMode
from hanoikit.core.registry import register_mode
from hanoikit.puzzle.game_core import GOAL_TOWER, GameMode, PuzzleSession, Vec3, is_complete
from hanoikit.puzzle.initialization import create_session, place_prescrambled


@register_mode("prescrambled")
class PreScrambledMode(BaseMode):
    """Random legal distribution; the goal is still the full right tower."""

    mode = GameMode.PRESCRAMBLED

    def initialize(self, num_disks: int, rng: random.Random,
                   positions: Dict[int, Vec3]) -> PuzzleSession:
        while True:
            session = create_session(num_disks, self.mode, positions)
            place_prescrambled(session, rng)
            # a draw that is already solved is not a puzzle
            if not is_complete(session.tower(GOAL_TOWER), num_disks):
                return session
