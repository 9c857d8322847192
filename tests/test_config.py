"""
Tests for configuration loading and validation.
"""

import pytest
import yaml

from hanoikit.core.config import (
    Config, GameConfig, InteractionConfig, LayoutConfig, PlaybackConfig, ThemeConfig,
    TimerConfig, create_default_config, load_config, validate_config,
)
from hanoikit.puzzle.game_core import GameMode


# ============================================================================
# Defaults and field validation
# ============================================================================

def test_defaults():
    config = Config()
    assert config.game.num_disks == 4
    assert config.game.mode == GameMode.NORMAL
    assert config.timer.time_per_disk == 20
    assert config.interaction.proximity_threshold == 8.0
    assert config.layout.tower_positions[0] == (-10.0, 0.0, 0.0)
    assert config.theme.disk_shape == "torus"


def test_mode_accepts_string():
    assert GameConfig(mode="prescrambled").mode == GameMode.PRESCRAMBLED


@pytest.mark.parametrize("factory", [
    lambda: GameConfig(num_disks=2),
    lambda: GameConfig(num_disks=8),
    lambda: GameConfig(mode="zen"),
    lambda: GameConfig(seed="x"),
    lambda: TimerConfig(tick_interval=0),
    lambda: TimerConfig(time_per_disk=-1),
    lambda: PlaybackConfig(step_delay=0),
    lambda: InteractionConfig(proximity_threshold=0),
    lambda: InteractionConfig(drag_lift=-1),
    lambda: LayoutConfig(tower_positions=((0, 0, 0), (1, 0, 0))),
    lambda: LayoutConfig(min_radius=3, max_radius=2),
    lambda: ThemeConfig(tower="gothic"),
    lambda: ThemeConfig(disk_shape="cube"),
])
def test_invalid_values_raise(factory):
    with pytest.raises(ValueError):
        factory()


# ============================================================================
# YAML round trip
# ============================================================================

def test_create_and_load(tmp_path):
    path = tmp_path / "config.yaml"
    created = create_default_config(str(path), mode="timed", num_disks=5)
    loaded = load_config(str(path))
    assert loaded.game.mode == GameMode.TIMED
    assert loaded.game.num_disks == 5
    assert loaded.to_dict() == created.to_dict()


def test_partial_file_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"game": {"num_disks": 6}, "playback": {"step_delay": 0.25}}))
    config = load_config(str(path))
    assert config.game.num_disks == 6
    assert config.playback.step_delay == 0.25
    assert config.timer.tick_interval == 1.0


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "nope.yaml"))


def test_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_unknown_key(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"game": {"disks": 4}}))
    with pytest.raises(ValueError):
        load_config(str(path))


def test_bad_value_in_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.dump({"timer": {"time_per_disk": 0}}))
    with pytest.raises(ValueError):
        load_config(str(path))


# ============================================================================
# validate_config
# ============================================================================

def test_default_config_has_no_errors(tmp_path):
    config = Config()
    config.runner.best_score_path = str(tmp_path / "best.json")
    assert validate_config(config) == []


def test_overlapping_towers_warn():
    config = Config(
        layout=LayoutConfig(tower_positions=((0, 0, 0), (5, 0, 0), (20, 0, 0))),
    )
    issues = validate_config(config)
    assert any("proximity_threshold" in issue for issue in issues)


def test_duplicate_towers_error():
    config = Config(
        layout=LayoutConfig(tower_positions=((0, 0, 0), (0, 0, 0), (20, 0, 0))),
    )
    assert any(issue.startswith("ERROR") for issue in validate_config(config))


def test_missing_experiment_name():
    config = Config()
    config.runner.experiment_name = ""
    assert "ERROR: Experiment name is required" in validate_config(config)
