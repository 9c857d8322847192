"""
Game mode controller.

Owns the current session, its timers and the solution playback. Every
session change is a hard cutover: timers and playback of the old session are
cancelled before the new one is built.
"""

import random
from typing import Dict, List, Optional, Union

from hanoikit.core.base import (
    BaseMode, ChangeKind, GameEventListener, GameResult, ModelChangedEvent,
)
from hanoikit.core.config import Config, ThemeConfig
from hanoikit.core.registry import MODE_REGISTRY
from hanoikit.controller.interaction import InteractionController, InteractionState
from hanoikit.controller.playback import SolutionPlayback
from hanoikit.controller.timers import ManualScheduler, TimerHandle
from hanoikit.evaluation.scoring import Score, ScoreStore
from hanoikit.puzzle import placement
from hanoikit.puzzle.game_core import (
    GOAL_TOWER, MAX_DISKS, MIN_DISKS, ErrorCode, GameMode, GameStatus,
    MoveRecord, MoveResult, PuzzleSession, Vec3, is_complete,
)
from hanoikit.puzzle.geometry import StackGeometry
from hanoikit.puzzle.initialization import create_session, place_canonical
from hanoikit.puzzle.solver import generate_solution, min_moves

# registers the built-in modes
import hanoikit.modes  # noqa: F401


class GameController:
    """Entry point for configuring and playing a session."""

    def __init__(self, config: Optional[Config] = None,
                 scheduler: Optional[ManualScheduler] = None,
                 score_store: Optional[ScoreStore] = None,
                 listeners: Optional[List[GameEventListener]] = None,
                 rng: Optional[random.Random] = None):
        self.config: Config = config or Config()
        self.scheduler = scheduler or ManualScheduler()
        self.score_store = score_store or ScoreStore()
        self.listeners: List[GameEventListener] = list(listeners or [])
        self.rng = rng or random.Random(self.config.game.seed)

        layout = self.config.layout
        self.geometry = StackGeometry(
            disk_height=layout.disk_height,
            base_height=layout.base_height,
            min_radius=layout.min_radius,
            max_radius=layout.max_radius,
        )
        self.base_positions: Dict[int, Vec3] = {
            i: Vec3.from_list(p) for i, p in enumerate(layout.tower_positions)
        }

        self.num_disks: int = self.config.game.num_disks
        self.mode: GameMode = self.config.game.mode
        self.session: Optional[PuzzleSession] = None
        self.last_result: Optional[GameResult] = None
        self._timer: Optional[TimerHandle] = None
        self._generation = 0

        self.playback = SolutionPlayback(self, self.config.playback.step_delay)
        self.interaction = InteractionController(self, self.geometry, self.config.interaction)

        self.new_game()

    # ------------------------------------------------------------------ #
    # Listeners
    # ------------------------------------------------------------------ #
    def add_listener(self, listener: GameEventListener) -> None:
        self.listeners.append(listener)

    def remove_listener(self, listener: GameEventListener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    def emit(self, event: str, *args) -> None:
        for listener in list(self.listeners):
            getattr(listener, event)(*args)

    # ------------------------------------------------------------------ #
    # Session lifecycle
    # ------------------------------------------------------------------ #
    def _mode_handler(self, mode: GameMode) -> BaseMode:
        mode_cls = MODE_REGISTRY.get(mode.value)
        if mode_cls is None:
            raise ValueError(f"Unknown game mode: {mode.value}")
        return mode_cls(self.config.timer)

    @property
    def best_score(self) -> Optional[Score]:
        return self.score_store.get(self.num_disks)

    def new_game(self, num_disks: Optional[int] = None,
                 mode: Optional[Union[GameMode, str]] = None,
                 kind: ChangeKind = ChangeKind.RESET) -> PuzzleSession:
        """
        Discard the current session and build a new one.

        Args:
            num_disks: new difficulty, keeps the current one if None
            mode: new mode, keeps the current one if None
            kind: reported in the model-changed event

        Returns:
            the new session
        """
        if isinstance(mode, str):
            mode = GameMode(mode)
        num_disks = self.num_disks if num_disks is None else num_disks
        mode = self.mode if mode is None else mode
        if not isinstance(num_disks, int) or not MIN_DISKS <= num_disks <= MAX_DISKS:
            raise ValueError(f"num_disks must be an integer in [{MIN_DISKS}, {MAX_DISKS}]")
        handler = self._mode_handler(mode)

        self.stop_all()
        self.num_disks = num_disks
        self.mode = mode
        self.last_result = None

        session = handler.initialize(num_disks, self.rng, self.base_positions)
        self._install(session)

        if session.countdown:
            self._start_timer()

        self.emit("on_model_changed", ModelChangedEvent(kind=kind, moves=0))
        return session

    def reset(self) -> PuzzleSession:
        return self.new_game(kind=ChangeKind.RESET)

    def set_mode(self, mode: Union[GameMode, str]) -> PuzzleSession:
        return self.new_game(mode=mode, kind=ChangeKind.MODE_CHANGE)

    def set_difficulty(self, num_disks: int) -> PuzzleSession:
        return self.new_game(num_disks=num_disks, kind=ChangeKind.DIFFICULTY_CHANGE)

    def _install(self, session: PuzzleSession) -> None:
        self._generation += 1
        session.generation = self._generation
        self.session = session
        self.interaction.reset()

    def stop_all(self) -> None:
        """Cancel timers, playback and any drag in flight"""
        self.interaction.cancel()
        self.playback.cancel()
        self._cancel_timer()

    # ------------------------------------------------------------------ #
    # Clock
    # ------------------------------------------------------------------ #
    def _start_timer(self) -> None:
        self._cancel_timer()
        generation = self.session.generation
        self._timer = self.scheduler.call_every(
            self.config.timer.tick_interval, lambda: self.tick(generation)
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @property
    def timer_running(self) -> bool:
        return self._timer is not None and self._timer.active

    def start_clock(self) -> None:
        """Start the elapsed clock on first interaction; countdowns start at creation"""
        if self.session is None or self.session.is_over or self.session.countdown:
            return
        if self.session.assisted or self.timer_running:
            return
        self._start_timer()

    def tick(self, generation: Optional[int] = None) -> None:
        """
        Advance the session clock by one unit.

        Ticks from a replaced session or after the game ended are ignored.
        """
        session = self.session
        if session is None or session.is_over:
            return
        if generation is not None and generation != session.generation:
            return

        if session.countdown:
            session.timer = max(0, session.timer - 1)
            self.emit("on_tick", session.timer)
            if session.timer == 0:
                self._finish(GameStatus.LOST_TIMEOUT)
        else:
            session.timer += 1
            self.emit("on_tick", session.timer)

    @property
    def elapsed(self) -> int:
        session = self.session
        if session is None:
            return 0
        if session.countdown:
            return session.time_limit - session.timer
        return session.timer

    # ------------------------------------------------------------------ #
    # Moves
    # ------------------------------------------------------------------ #
    def apply_move(self, from_tower: int, to_tower: int, automated: bool = False) -> MoveResult:
        """
        Shared path for manual and automated moves.

        Manual moves are refused while a solution is playing; the playback
        passes ``automated=True``.
        """
        session = self.session
        if session is None or session.is_over:
            return MoveResult(success=False, error=ErrorCode.GAME_OVER, message="Game is over")
        if not automated and self.playback.is_active:
            return MoveResult(success=False, error=ErrorCode.PLAYBACK_ACTIVE, message="Solution is playing")

        result = placement.apply_move(session, from_tower, to_tower)
        if not result.success:
            return result

        self.emit("on_model_changed", ModelChangedEvent(
            kind=ChangeKind.MOVE,
            moves=session.moves,
            disk=result.disk,
            from_tower=result.record.from_tower,
            to_tower=result.record.to_tower,
        ))
        self.check_win()
        return result

    def check_win(self) -> bool:
        session = self.session
        if session is None or session.is_over:
            return False
        if is_complete(session.tower(GOAL_TOWER), session.num_disks):
            self._finish(GameStatus.WON)
            return True
        return False

    def _finish(self, outcome: GameStatus) -> None:
        session = self.session
        session.status = outcome
        self._cancel_timer()
        # a drop being resolved finishes on its own
        if self.interaction.state == InteractionState.DRAGGING:
            self.interaction.cancel()

        result = GameResult(
            outcome=outcome,
            mode=session.mode,
            num_disks=session.num_disks,
            moves=session.moves,
            time=self.elapsed,
            optimal_moves=min_moves(session.num_disks),
            assisted=session.assisted,
        )
        result.new_best = self.score_store.submit(result)
        self.last_result = result
        self.emit("on_game_over", result)

    # ------------------------------------------------------------------ #
    # Solution
    # ------------------------------------------------------------------ #
    def show_solution(self) -> List[MoveRecord]:
        """
        Restart from the canonical layout and play the optimal solution.

        Tower positions of the current session are kept. The replay goes
        through ``apply_move`` one move per playback tick.
        """
        positions = self.session.tower_positions if self.session else self.base_positions

        self.stop_all()
        session = create_session(self.num_disks, self.mode, positions)
        place_canonical(session)
        session.assisted = True
        self.last_result = None
        self._install(session)

        moves = generate_solution(self.num_disks)
        self.emit("on_model_changed", ModelChangedEvent(kind=ChangeKind.SOLUTION_START, moves=0))
        self.playback.start(moves)
        return moves

    # ------------------------------------------------------------------ #
    # Preferences
    # ------------------------------------------------------------------ #
    def set_theme(self, theme: ThemeConfig) -> None:
        """Remember the theme; the session is not touched"""
        self.config.theme = theme
        self.score_store.save_theme(theme.to_dict())

    # ------------------------------------------------------------------ #
    # Reporting
    # ------------------------------------------------------------------ #
    def snapshot(self) -> Dict:
        data = self.session.to_dict() if self.session else {}
        best = self.best_score
        data.update({
            "elapsed": self.elapsed,
            "optimal_moves": min_moves(self.num_disks),
            "best_score": best.to_dict() if best else None,
            "playback_active": self.playback.is_active,
            "interaction": self.interaction.state.value,
        })
        return data
