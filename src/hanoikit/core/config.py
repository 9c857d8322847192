"""
Configuration management for hanoikit.

This module handles loading and validation of YAML configuration files and
provides typed configuration objects.
"""

import os
import yaml
from typing import Any, Dict, Optional, List, Tuple
from dataclasses import dataclass, field
from pathlib import Path

from hanoikit.puzzle.game_core import GameMode, MIN_DISKS, MAX_DISKS
from hanoikit.puzzle.geometry import DEFAULT_TOWER_POSITIONS


TOWER_THEMES = ("default", "japanese", "futuristic", "ancient", "crystal")
DISK_THEMES = ("default", "metallic", "candy", "neon", "gem")
DISK_SHAPES = ("torus", "ring", "cylinder", "star", "custom")


@dataclass
class GameConfig:
    """Session setup."""
    num_disks: int = 4
    mode: GameMode = GameMode.NORMAL
    seed: Optional[int] = None

    def __post_init__(self):
        if isinstance(self.mode, str):
            self.mode = GameMode(self.mode)
        if not isinstance(self.num_disks, int) or not MIN_DISKS <= self.num_disks <= MAX_DISKS:
            raise ValueError(f"num_disks must be an integer in [{MIN_DISKS}, {MAX_DISKS}]")
        if self.seed is not None and not isinstance(self.seed, int):
            raise ValueError("seed must be an integer")


@dataclass
class TimerConfig:
    """Clock settings. One tick is one time unit."""
    tick_interval: float = 1.0
    time_per_disk: int = 20

    def __post_init__(self):
        if not isinstance(self.tick_interval, (float, int)) or self.tick_interval <= 0:
            raise ValueError("tick_interval must be a positive number")
        if not isinstance(self.time_per_disk, int) or self.time_per_disk <= 0:
            raise ValueError("time_per_disk must be a positive integer")


@dataclass
class PlaybackConfig:
    """Automatic solution playback."""
    step_delay: float = 1.0

    def __post_init__(self):
        if not isinstance(self.step_delay, (float, int)) or self.step_delay <= 0:
            raise ValueError("step_delay must be a positive number")


@dataclass
class InteractionConfig:
    """Pointer interaction."""
    proximity_threshold: float = 8.0
    drag_lift: float = 2.0

    def __post_init__(self):
        if not isinstance(self.proximity_threshold, (float, int)) or self.proximity_threshold <= 0:
            raise ValueError("proximity_threshold must be a positive number")
        if not isinstance(self.drag_lift, (float, int)) or self.drag_lift < 0:
            raise ValueError("drag_lift must be a non-negative number")


@dataclass
class LayoutConfig:
    """Scene geometry handed to the presentation layer."""
    tower_positions: Tuple[Tuple[float, float, float], ...] = DEFAULT_TOWER_POSITIONS
    disk_height: float = 0.8
    base_height: float = 1.0
    min_radius: float = 1.5
    max_radius: float = 5.0

    def __post_init__(self):
        if not isinstance(self.tower_positions, (tuple, list)) or len(self.tower_positions) != 3:
            raise ValueError("tower_positions must hold exactly 3 positions")
        for pos in self.tower_positions:
            if not isinstance(pos, (tuple, list)) or len(pos) != 3:
                raise ValueError("each tower position must be a tuple of 3 floats")
        self.tower_positions = tuple(tuple(float(c) for c in pos) for pos in self.tower_positions)
        if not isinstance(self.disk_height, (float, int)) or self.disk_height <= 0:
            raise ValueError("disk_height must be a positive number")
        if not isinstance(self.base_height, (float, int)) or self.base_height < 0:
            raise ValueError("base_height must be a non-negative number")
        if not isinstance(self.min_radius, (float, int)) or self.min_radius <= 0:
            raise ValueError("min_radius must be a positive number")
        if not isinstance(self.max_radius, (float, int)) or self.max_radius < self.min_radius:
            raise ValueError("max_radius must be at least min_radius")


@dataclass
class ThemeConfig:
    """Visual theme. Pure data, the game logic never looks at it."""
    tower: str = "default"
    disk: str = "default"
    disk_shape: str = "torus"

    def __post_init__(self):
        if self.tower not in TOWER_THEMES:
            raise ValueError(f"tower theme must be one of {TOWER_THEMES}, got '{self.tower}'")
        if self.disk not in DISK_THEMES:
            raise ValueError(f"disk theme must be one of {DISK_THEMES}, got '{self.disk}'")
        if self.disk_shape not in DISK_SHAPES:
            raise ValueError(f"disk_shape must be one of {DISK_SHAPES}, got '{self.disk_shape}'")

    def to_dict(self) -> Dict[str, str]:
        return {"tower": self.tower, "disk": self.disk, "disk_shape": self.disk_shape}


@dataclass
class RunnerConfig:
    """Where sessions write their logs and scores."""
    experiment_name: str = "hanoi"
    log_dir: str = "logs"
    best_score_path: str = "best_scores.json"
    results_path: str = "session_results.csv"
    save_images: bool = False

    def __post_init__(self):
        # Directory creation is deferred to the logger to avoid side effects on import
        pass


@dataclass
class Config:
    """Main configuration object."""
    game: GameConfig = field(default_factory=GameConfig)
    timer: TimerConfig = field(default_factory=TimerConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    theme: ThemeConfig = field(default_factory=ThemeConfig)
    runner: RunnerConfig = field(default_factory=RunnerConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        return cls(
            game=GameConfig(**data.get("game", {})),
            timer=TimerConfig(**data.get("timer", {})),
            playback=PlaybackConfig(**data.get("playback", {})),
            interaction=InteractionConfig(**data.get("interaction", {})),
            layout=LayoutConfig(**data.get("layout", {})),
            theme=ThemeConfig(**data.get("theme", {})),
            runner=RunnerConfig(**data.get("runner", {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Config to dictionary."""
        game = dict(self.game.__dict__)
        game["mode"] = self.game.mode.value
        layout = dict(self.layout.__dict__)
        layout["tower_positions"] = [list(p) for p in self.layout.tower_positions]
        return {
            "game": game,
            "timer": {**self.timer.__dict__},
            "playback": {**self.playback.__dict__},
            "interaction": {**self.interaction.__dict__},
            "layout": layout,
            "theme": self.theme.to_dict(),
            "runner": {**self.runner.__dict__},
        }


def load_config(config_path: str) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Config object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is malformed
        ValueError: If fields are missing or invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML config: {e}")

    if not data:
        raise ValueError("Configuration file is empty")

    try:
        return Config.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Error creating config from data: {e}")


def create_default_config(output_path: str = "config.yaml", mode: str = "normal",
                          num_disks: int = 4) -> Config:
    """
    Create a default configuration file.

    Args:
        output_path: Path where to save the default config
        mode: Game mode written into the file
        num_disks: Difficulty written into the file

    Returns:
        Default Config object
    """
    config = Config(game=GameConfig(num_disks=num_disks, mode=GameMode(mode)))

    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2)

    return config


def validate_config(config: Config) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration to validate

    Returns:
        List of validation messages
    """
    issues = []

    if not config.runner.experiment_name:
        issues.append("ERROR: Experiment name is required")

    positions = config.layout.tower_positions
    if len(set(positions)) != len(positions):
        issues.append("ERROR: tower_positions must be distinct")

    # Towers closer than the drop radius make the nearest tower ambiguous
    xs = sorted(p[0] for p in positions)
    min_gap = min(b - a for a, b in zip(xs, xs[1:]))
    if min_gap < config.interaction.proximity_threshold:
        issues.append(
            f"WARNING: towers are {min_gap:.1f} apart, closer than proximity_threshold "
            f"{config.interaction.proximity_threshold}"
        )

    if config.playback.step_delay < config.timer.tick_interval / 10:
        issues.append("WARNING: playback step_delay is much shorter than the timer tick")

    best_dir = os.path.dirname(os.path.abspath(config.runner.best_score_path))
    if not os.path.isdir(best_dir):
        issues.append(f"WARNING: best score directory does not exist: {best_dir}")

    return issues
