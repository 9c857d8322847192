"""
User-friendly display utilities for hanoikit.
"""

from typing import Any, Dict, List, Optional
from datetime import datetime

from hanoikit.core.base import ChangeKind, GameEventListener, GameResult, ModelChangedEvent
from hanoikit.puzzle.game_core import Disk, GameStatus, PuzzleSession


def format_time(seconds: int) -> str:
    """mm:ss, minutes zero-padded to two digits"""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


def render_text(session: PuzzleSession) -> str:
    """Plain-text picture of the three stacks, top row first"""
    width = 2 * session.num_disks + 1
    height = session.num_disks
    rows = []
    for level in range(height - 1, -1, -1):
        cells = []
        for tower in session.towers:
            if level < len(tower.disks):
                size = tower.disks[level].size
                cells.append(("=" * (2 * size - 1)).center(width))
            else:
                cells.append("|".center(width))
        rows.append(" ".join(cells))
    rows.append(" ".join(f"[{t.tower_id}]".center(width) for t in session.towers))
    return "\n".join(rows)


class StatusDisplay:
    """Handles status display for different operations."""

    @staticmethod
    def print_header(title: str, width: int = 60):
        """Print a formatted header."""
        print("\n" + "=" * width)
        print(f"{title:^{width}}")
        print("=" * width)

    @staticmethod
    def print_section(title: str, width: int = 60):
        """Print a section header."""
        print(f"\n📋 {title}")
        print("-" * width)

    @staticmethod
    def print_config(config_dict: Dict[str, Any], title: str = "Configuration"):
        """Print configuration in a nice format."""
        StatusDisplay.print_section(title)
        for key, value in config_dict.items():
            print(f"  {key:<20} : {value}")

    @staticmethod
    def print_status(message: str, status: str = "info"):
        """Print a status message with appropriate emoji."""
        icons = {
            "info": "ℹ️",
            "success": "✅",
            "warning": "⚠️",
            "error": "❌",
            "loading": "⏳",
            "processing": "🔄"
        }
        icon = icons.get(status, "ℹ️")
        timestamp = datetime.now().strftime("%H:%M:%S")
        print(f"{icon} [{timestamp}] {message}")

    @staticmethod
    def print_results(results: Dict[str, Any], title: str = "Results"):
        """Print results in a nice format."""
        StatusDisplay.print_section(title)
        for key, value in results.items():
            if isinstance(value, bool):
                icon = "✅" if value else "❌"
                print(f"  {key:<20} : {icon} {value}")
            elif isinstance(value, float):
                print(f"  {key:<20} : {value:.3f}")
            else:
                print(f"  {key:<20} : {value}")

    @staticmethod
    def print_board(session: PuzzleSession):
        print(render_text(session))

    @staticmethod
    def print_hud(session: PuzzleSession, elapsed: int, best: Optional[Dict[str, int]] = None):
        """One-line moves / clock / best-score summary"""
        if session.countdown:
            clock = f"⏱️ {format_time(session.timer)} left"
        else:
            clock = f"⏱️ {format_time(elapsed)}"
        line = f"🎯 Moves: {session.moves} | {clock}"
        if best:
            line += f" | 🏆 Best: {best['moves']} moves in {format_time(best['time'])}"
        print(line)


class LiveLogger:
    """Live logging with real-time updates."""

    def __init__(self, verbose: bool = True):
        self.verbose = verbose

    def log_result(self, message: str, success: bool = True):
        if self.verbose:
            StatusDisplay.print_status(message, "success" if success else "error")

    def log_info(self, message: str):
        if self.verbose:
            StatusDisplay.print_status(message, "info")

    def log_warning(self, message: str):
        if self.verbose:
            StatusDisplay.print_status(message, "warning")

    def log_error(self, message: str):
        if self.verbose:
            StatusDisplay.print_status(message, "error")


class ConsoleListener(GameEventListener):
    """Prints controller events through a LiveLogger."""

    def __init__(self, logger: Optional[LiveLogger] = None, show_ticks: bool = False):
        self.logger = logger or LiveLogger()
        self.show_ticks = show_ticks

    def on_model_changed(self, event: ModelChangedEvent) -> None:
        if event.kind == ChangeKind.MOVE:
            self.logger.log_info(
                f"Move {event.moves}: disk {event.disk.size} {event.from_tower} -> {event.to_tower}"
            )
        else:
            self.logger.log_info(f"Session {event.kind.value}")

    def on_invalid_attempt(self, disk: Disk, attempted_tower: Optional[int]) -> None:
        where = "nowhere" if attempted_tower is None else f"tower {attempted_tower}"
        self.logger.log_warning(f"Disk {disk.size} cannot go to {where}")

    def on_tick(self, value: int) -> None:
        if self.show_ticks:
            self.logger.log_info(f"Clock {format_time(value)}")

    def on_targets_changed(self, targets: List[int]) -> None:
        if targets:
            self.logger.log_info(f"Valid targets: {targets}")

    def on_solution_complete(self, total_moves: int) -> None:
        self.logger.log_result(f"Solution finished in {total_moves} moves")

    def on_game_over(self, result: GameResult) -> None:
        if result.outcome == GameStatus.WON:
            message = f"Solved in {result.moves} moves ({format_time(result.time)}), optimal is {result.optimal_moves}"
            if result.new_best:
                message += " 🏆 new best!"
            self.logger.log_result(message)
        else:
            self.logger.log_result(f"Time is up after {result.moves} moves", success=False)
