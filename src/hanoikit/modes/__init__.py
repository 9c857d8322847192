"""
Game mode implementations for hanoikit.

This package contains the registered game modes:
- NormalMode: canonical start, elapsed clock, win only
- TimedMode: canonical start against a countdown
- ShuffledMode: canonical start with tower positions permuted
- PreScrambledMode: disks spread over all towers before play
"""

# Normal imports to ensure proper mode registration
from hanoikit.modes.normal_mode import NormalMode
from hanoikit.modes.timed_mode import TimedMode
from hanoikit.modes.shuffled_mode import ShuffledMode
from hanoikit.modes.prescrambled_mode import PreScrambledMode

__all__ = [
    "NormalMode",
    "TimedMode",
    "ShuffledMode",
    "PreScrambledMode",
]
