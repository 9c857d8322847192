"""
Base classes and interfaces for hanoikit.

This module defines the data exchanged with the presentation layer (events,
results, observations) and the abstractions for game modes and environments.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional, Union, TYPE_CHECKING
from dataclasses import dataclass, field
from enum import Enum
import random
from PIL import Image
from abc import ABC, abstractmethod

from hanoikit.puzzle.game_core import Disk, GameMode, GameStatus, PuzzleSession, Vec3
if TYPE_CHECKING:
    from hanoikit.core.config import TimerConfig


class ChangeKind(Enum):
    """What caused a model change."""
    MOVE: str = "move"
    RESET: str = "reset"
    MODE_CHANGE: str = "mode_change"
    DIFFICULTY_CHANGE: str = "difficulty_change"
    SOLUTION_START: str = "solution_start"


@dataclass
class ModelChangedEvent:
    """Enough data for the presentation layer to animate or redraw."""
    kind: ChangeKind
    moves: int
    disk: Optional[Disk] = None
    from_tower: Optional[int] = None
    to_tower: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "moves": self.moves,
            "disk": self.disk.size if self.disk else None,
            "from_tower": self.from_tower,
            "to_tower": self.to_tower,
        }


@dataclass
class GameResult:
    """Final stats of a finished session."""
    outcome: GameStatus
    mode: GameMode
    num_disks: int
    moves: int
    time: int
    optimal_moves: int
    assisted: bool = False
    new_best: bool = False

    @property
    def won(self) -> bool:
        return self.outcome == GameStatus.WON

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        return {
            "outcome": self.outcome.value,
            "mode": self.mode.value,
            "num_disks": self.num_disks,
            "moves": self.moves,
            "time": self.time,
            "optimal_moves": self.optimal_moves,
            "assisted": self.assisted,
            "new_best": self.new_best,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "GameResult":
        return GameResult(
            outcome=GameStatus(data["outcome"]),
            mode=GameMode(data["mode"]),
            num_disks=int(data["num_disks"]),
            moves=int(data["moves"]),
            time=int(data["time"]),
            optimal_moves=int(data["optimal_moves"]),
            assisted=bool(data.get("assisted", False)),
            new_best=bool(data.get("new_best", False)),
        )


@dataclass
class Action:
    """Represents an action to be executed in the environment."""
    action_type: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert action to dictionary representation."""
        return {
            "action_type": self.action_type,
            "parameters": self.parameters,
        }


@dataclass
class State:
    """Represents the state of the environment at a given time."""
    step: int
    session: Dict[str, Any]
    time_stamp: float
    metadata: Optional[Dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to dictionary representation."""
        return {
            "step": self.step,
            "session": self.session,
            "time_stamp": self.time_stamp,
            "metadata": self.metadata,
        }


@dataclass
class Observation:
    """Observation data provided to the caller."""
    image: Optional[Image.Image]
    state: State
    description: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert observation to dictionary (excluding images)."""
        return {
            "state": self.state.to_dict(),
            "description": self.description,
        }


class GameEventListener:
    """
    Receiver of state-change notifications.

    Every method is a no-op so listeners override only what they need.
    """

    def on_model_changed(self, event: ModelChangedEvent) -> None:
        pass

    def on_invalid_attempt(self, disk: Disk, attempted_tower: Optional[int]) -> None:
        pass

    def on_game_over(self, result: GameResult) -> None:
        pass

    def on_tick(self, value: int) -> None:
        pass

    def on_targets_changed(self, targets: List[int]) -> None:
        pass

    def on_solution_complete(self, total_moves: int) -> None:
        pass


class BaseMode(ABC):
    """Base class for game modes."""

    mode: GameMode = GameMode.NORMAL

    def __init__(self, timer_config: TimerConfig):
        self.timer_config: TimerConfig = timer_config

    @abstractmethod
    def initialize(self, num_disks: int, rng: random.Random,
                   positions: Dict[int, Vec3]) -> PuzzleSession:
        """Build a fresh session with this mode's starting layout."""
        pass

    def time_limit(self, num_disks: int) -> Optional[int]:
        """Countdown length, or None when the mode has no time bound."""
        return None

    @classmethod
    def best_score_eligible(cls) -> bool:
        """Whether an unassisted win in this mode competes for best score."""
        return False


class BaseEnvironment(ABC):
    """Base class for environments driven by named tool calls."""

    def __init__(self, config):
        self.config = config

    @abstractmethod
    def reset(self) -> Observation:
        """Reset environment to initial state."""
        pass

    @abstractmethod
    def step(self, action: Action) -> Observation:
        """Execute action and return new observation."""
        pass

    @abstractmethod
    def render(self) -> Union[Image.Image, Dict[str, Image.Image]]:
        """Render the current environment state."""
        pass

    @abstractmethod
    def get_tool_schemas(self) -> List[Dict[str, Any]]:
        """Get JSON schemas for tool functions."""
        pass

    @abstractmethod
    def execute_tool_call(self, tool_name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Execute a tool call."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Clean up environment resources."""
        pass
