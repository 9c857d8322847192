"""
hanoikit: an engine for the disk-transfer puzzle.

The model and move rules live in ``hanoikit.puzzle``; ``GameController``
runs a session with its modes, timers and solution playback.
"""

__version__ = "0.1.0"

from hanoikit.core.config import Config, load_config
from hanoikit.controller.game_controller import GameController
from hanoikit.environment.hanoi_env import HanoiEnvironment

__all__ = [
    "Config",
    "load_config",
    "GameController",
    "HanoiEnvironment",
    "__version__",
]
