"""
Shared fixtures for the hanoikit test suite.
"""

import random

import pytest

from hanoikit.core.base import GameEventListener
from hanoikit.core.config import Config, GameConfig
from hanoikit.controller.game_controller import GameController
from hanoikit.controller.timers import ManualScheduler
from hanoikit.evaluation.scoring import ScoreStore


class RecordingListener(GameEventListener):
    """Keeps every notification as (name, args)."""

    def __init__(self):
        self.events = []

    def _record(self, name, *args):
        self.events.append((name, args))

    def on_model_changed(self, event):
        self._record("on_model_changed", event)

    def on_invalid_attempt(self, disk, attempted_tower):
        self._record("on_invalid_attempt", disk, attempted_tower)

    def on_game_over(self, result):
        self._record("on_game_over", result)

    def on_tick(self, value):
        self._record("on_tick", value)

    def on_targets_changed(self, targets):
        self._record("on_targets_changed", targets)

    def on_solution_complete(self, total_moves):
        self._record("on_solution_complete", total_moves)

    def named(self, name):
        return [args for n, args in self.events if n == name]

    def clear(self):
        self.events = []


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_controller(scheduler, listener):
    """Build a controller on the manual scheduler with the recording listener."""
    def _make(num_disks=3, mode="normal", seed=0, store=None, **config_groups):
        config = Config(game=GameConfig(num_disks=num_disks, mode=mode, seed=seed), **config_groups)
        controller = GameController(
            config,
            scheduler=scheduler,
            score_store=store or ScoreStore(),
            listeners=[listener],
            rng=random.Random(seed),
        )
        listener.clear()
        return controller
    return _make
