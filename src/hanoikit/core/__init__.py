"""
Core modules for hanoikit.

This package contains the fundamental components:
- Base classes for game modes and environments
- Events and results exchanged with the presentation layer
- Configuration management
- Registry for component discovery
"""

from hanoikit.core.base import (
    BaseMode,
    BaseEnvironment,
    GameEventListener,
    ModelChangedEvent,
    ChangeKind,
    GameResult,
)

from hanoikit.core.config import Config, load_config, create_default_config, validate_config, GameConfig, TimerConfig, PlaybackConfig, InteractionConfig, LayoutConfig, ThemeConfig, RunnerConfig

from hanoikit.core.registry import register_mode, register_environment, MODE_REGISTRY, ENVIRONMENT_REGISTRY

__all__ = [
    "BaseMode",
    "BaseEnvironment",
    "GameEventListener",
    "ModelChangedEvent",
    "ChangeKind",
    "GameResult",
    "Config",
    "load_config",
    "create_default_config",
    "validate_config",
    "GameConfig",
    "TimerConfig",
    "PlaybackConfig",
    "InteractionConfig",
    "LayoutConfig",
    "ThemeConfig",
    "RunnerConfig",
    "register_mode",
    "register_environment",
    "MODE_REGISTRY",
    "ENVIRONMENT_REGISTRY",
]
