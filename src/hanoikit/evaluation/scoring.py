"""
Best scores and persisted preferences.

Only plain data crosses this boundary; the game logic never touches the file.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from hanoikit.core.base import GameResult
from hanoikit.core.registry import MODE_REGISTRY
from hanoikit.puzzle.game_core import GameStatus

# registers the built-in modes
import hanoikit.modes  # noqa: F401


@dataclass
class Score:
    """A finished game worth remembering."""
    disks: int
    moves: int
    time: int

    def to_dict(self) -> Dict[str, int]:
        return {"disks": self.disks, "moves": self.moves, "time": self.time}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Score":
        return Score(disks=int(data["disks"]), moves=int(data["moves"]), time=int(data["time"]))

    @staticmethod
    def from_result(result: GameResult) -> "Score":
        return Score(disks=result.num_disks, moves=result.moves, time=result.time)


def is_better_score(candidate: Score, best: Optional[Score]) -> bool:
    """
    More disks always wins; then fewer moves; then less time.

    Each field is compared only when the previous ones tie.
    """
    if best is None:
        return True
    if candidate.disks != best.disks:
        return candidate.disks > best.disks
    if candidate.moves != best.moves:
        return candidate.moves < best.moves
    return candidate.time < best.time


def is_score_eligible(result: GameResult) -> bool:
    """Only unassisted wins in a mode that allows it compete for best score"""
    if result.outcome != GameStatus.WON or result.assisted:
        return False
    mode_cls = MODE_REGISTRY.get(result.mode.value)
    return mode_cls is not None and mode_cls.best_score_eligible()


class ScoreStore:
    """
    Best score per difficulty plus the last-used theme, kept in a JSON file.

    With ``path=None`` nothing is written to disk.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self.scores: Dict[int, Score] = {}
        self.theme: Optional[Dict[str, str]] = None
        self.load()

    def load(self) -> None:
        if not self.path or not self.path.exists():
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            scores = {
                int(k): Score.from_dict(v) for k, v in data.get("best_scores", {}).items()
            }
            theme = data.get("theme")
            if theme is not None and not isinstance(theme, dict):
                raise TypeError(f"theme must be a mapping, got {type(theme).__name__}")
        except (OSError, json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
            print(f"Could not read score file {self.path}: {e}. Starting empty.")
            return
        self.scores = scores
        self.theme = theme

    def save(self) -> None:
        if not self.path:
            return
        if self.path.parent and not self.path.parent.exists():
            os.makedirs(self.path.parent, exist_ok=True)
        data = {
            "best_scores": {str(k): v.to_dict() for k, v in sorted(self.scores.items())},
            "theme": self.theme,
        }
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def get(self, num_disks: int) -> Optional[Score]:
        return self.scores.get(num_disks)

    def best_overall(self) -> Optional[Score]:
        best = None
        for score in self.scores.values():
            if is_better_score(score, best):
                best = score
        return best

    def submit(self, result: GameResult) -> bool:
        """Record the result if it is eligible and beats the stored best"""
        if not is_score_eligible(result):
            return False
        candidate = Score.from_result(result)
        if not is_better_score(candidate, self.get(candidate.disks)):
            return False
        self.scores[candidate.disks] = candidate
        self.save()
        return True

    def save_theme(self, theme: Dict[str, str]) -> None:
        self.theme = dict(theme)
        self.save()
