"""
Normal mode: every disk starts on the left tower and only a win ends the game.
"""

import random
from typing import Dict

from hanoikit.core.base import BaseMode
from hanoikit.core.registry import register_mode
from hanoikit.puzzle.game_core import GameMode, PuzzleSession, Vec3
from hanoikit.puzzle.initialization import create_session, place_canonical


@register_mode("normal")
class NormalMode(BaseMode):
    """Canonical start with an elapsed clock."""

    mode = GameMode.NORMAL

    def initialize(self, num_disks: int, rng: random.Random,
                   positions: Dict[int, Vec3]) -> PuzzleSession:
        session = create_session(num_disks, self.mode, positions)
        place_canonical(session)
        return session

    @classmethod
    def best_score_eligible(cls) -> bool:
        return True
