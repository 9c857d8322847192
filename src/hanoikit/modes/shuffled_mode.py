"""
Shuffled mode: canonical start, tower positions randomly permuted.

Only where the towers are drawn changes. Tower ids, and so every legality
check and the goal tower, stay the same.
"""

import random
from typing import Dict

from hanoikit.core.base import BaseMode
from hanoikit.core.registry import register_mode
from hanoikit.puzzle.game_core import GameMode, PuzzleSession, Vec3
from hanoikit.puzzle.initialization import create_session, place_canonical, shuffle_positions


@register_mode("shuffled")
class ShuffledMode(BaseMode):

    mode = GameMode.SHUFFLED

    def initialize(self, num_disks: int, rng: random.Random,
                   positions: Dict[int, Vec3]) -> PuzzleSession:
        session = create_session(num_disks, self.mode, shuffle_positions(positions, rng))
        place_canonical(session)
        return session
