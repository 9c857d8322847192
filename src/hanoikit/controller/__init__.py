"""
Session control: lifecycle and clocks, pointer interaction and solution playback.
"""

from hanoikit.controller.timers import ManualScheduler, RealTimeScheduler, TimerHandle
from hanoikit.controller.interaction import InteractionController, InteractionState, DragState, DropResult
from hanoikit.controller.playback import SolutionPlayback
from hanoikit.controller.game_controller import GameController

__all__ = [
    "ManualScheduler",
    "RealTimeScheduler",
    "TimerHandle",
    "InteractionController",
    "InteractionState",
    "DragState",
    "DropResult",
    "SolutionPlayback",
    "GameController",
]
