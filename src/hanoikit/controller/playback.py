"""
Timed playback of a move list.
"""

from typing import TYPE_CHECKING, List, Optional

from hanoikit.controller.timers import TimerHandle
from hanoikit.puzzle.game_core import InvariantViolation, MoveRecord

if TYPE_CHECKING:
    from hanoikit.controller.game_controller import GameController


class SolutionPlayback:
    """
    Applies one move per tick through the controller's move path.

    At most one playback runs at a time; ``start`` cancels the previous one.
    """

    def __init__(self, controller: "GameController", step_delay: float = 1.0):
        self.controller = controller
        self.step_delay = step_delay
        self.moves: List[MoveRecord] = []
        self.index = 0
        self._handle: Optional[TimerHandle] = None
        self._generation: Optional[int] = None

    @property
    def is_active(self) -> bool:
        return self._handle is not None and self._handle.active

    @property
    def remaining(self) -> int:
        return max(0, len(self.moves) - self.index)

    def start(self, moves: List[MoveRecord]) -> None:
        self.cancel()
        self.moves = list(moves)
        self.index = 0
        self._generation = self.controller.session.generation
        if not self.moves:
            self._complete()
            return
        self._handle = self.controller.scheduler.call_every(self.step_delay, self.step)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def step(self) -> None:
        """Apply the next move; a rejected move means the move list is wrong"""
        if not self.is_active:
            return
        session = self.controller.session
        if session is None or session.generation != self._generation:
            self.cancel()
            return
        if self.index >= len(self.moves):
            self._complete()
            return

        record = self.moves[self.index]
        result = self.controller.apply_move(record.from_tower, record.to_tower, automated=True)
        if not result.success:
            self.cancel()
            raise InvariantViolation(
                f"Playback move {self.index + 1} ({record}) rejected: {result.error.value}"
            )
        self.index += 1

        if self.index >= len(self.moves):
            self._complete()

    def _complete(self) -> None:
        self.cancel()
        self.controller.emit("on_solution_complete", len(self.moves))
