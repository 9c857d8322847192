"""
Environment implementations for hanoikit.
"""

from hanoikit.environment.hanoi_env import HanoiEnvironment

__all__ = [
    "HanoiEnvironment",
]
