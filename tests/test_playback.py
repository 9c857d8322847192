"""
Tests for the automatic solution playback.
"""

from hanoikit.core.base import ChangeKind
from hanoikit.core.config import PlaybackConfig
from hanoikit.puzzle.game_core import ErrorCode, GameStatus


def test_solution_plays_one_move_per_step(make_controller, scheduler, listener):
    controller = make_controller(num_disks=3)
    moves = controller.show_solution()
    assert len(moves) == 7
    assert controller.session.layout() == [[3, 2, 1], [], []]
    assert controller.playback.is_active

    scheduler.advance(1)
    assert controller.session.moves == 1
    assert controller.session.layout() == [[3, 2], [], [1]]

    scheduler.advance(6)
    assert controller.session.layout() == [[], [], [3, 2, 1]]
    assert controller.session.status == GameStatus.WON
    assert not controller.playback.is_active
    assert listener.named("on_solution_complete") == [(7,)]


def test_solution_restarts_from_canonical_layout(make_controller, scheduler):
    controller = make_controller()
    controller.apply_move(0, 2)
    controller.apply_move(0, 1)
    controller.show_solution()
    assert controller.session.layout() == [[3, 2, 1], [], []]
    assert controller.session.moves == 0
    assert controller.session.assisted


def test_solution_start_event(make_controller, listener):
    controller = make_controller()
    controller.show_solution()
    kinds = [e.kind for (e,) in listener.named("on_model_changed")]
    assert kinds == [ChangeKind.SOLUTION_START]


def test_assisted_win_is_not_a_best_score(make_controller, scheduler):
    controller = make_controller()
    controller.show_solution()
    scheduler.advance(7)
    assert controller.last_result.won
    assert controller.last_result.assisted
    assert not controller.last_result.new_best
    assert controller.best_score is None


def test_assisted_session_runs_no_clock(make_controller, scheduler):
    controller = make_controller(mode="timed")
    controller.show_solution()
    assert not controller.timer_running
    scheduler.advance(7)
    assert controller.session.status == GameStatus.WON


def test_manual_moves_refused_during_playback(make_controller, scheduler):
    controller = make_controller()
    controller.show_solution()
    result = controller.apply_move(0, 1)
    assert result.error == ErrorCode.PLAYBACK_ACTIVE
    assert controller.session.moves == 0

    scheduler.advance(7)
    assert controller.session.status == GameStatus.WON


def test_reset_cancels_playback(make_controller, scheduler, listener):
    controller = make_controller()
    controller.show_solution()
    scheduler.advance(2)
    controller.reset()
    assert not controller.playback.is_active

    scheduler.advance(10)
    assert controller.session.moves == 0
    assert controller.session.layout() == [[3, 2, 1], [], []]
    assert listener.named("on_solution_complete") == []


def test_restarting_solution_replaces_playback(make_controller, scheduler, listener):
    controller = make_controller()
    controller.show_solution()
    scheduler.advance(3)
    controller.show_solution()
    assert controller.session.moves == 0
    scheduler.advance(7)
    assert controller.session.moves == 7
    assert listener.named("on_solution_complete") == [(7,)]


def test_stale_step_is_ignored(make_controller, scheduler):
    """A step belonging to a replaced session never touches the new one"""
    controller = make_controller()
    controller.show_solution()
    playback = controller.playback
    controller.session.generation += 1
    playback.step()
    assert not playback.is_active
    assert controller.session.moves == 0


def test_solution_after_game_over(make_controller, scheduler):
    controller = make_controller(mode="timed")
    scheduler.advance(60)
    assert controller.session.status == GameStatus.LOST_TIMEOUT
    controller.show_solution()
    scheduler.advance(7)
    assert controller.session.status == GameStatus.WON


def test_step_delay_from_config(make_controller, scheduler):
    controller = make_controller(playback=PlaybackConfig(step_delay=0.5))
    controller.show_solution()
    scheduler.advance(1.5)
    assert controller.session.moves == 3


def test_solution_keeps_shuffled_positions(make_controller):
    controller = make_controller(mode="shuffled", seed=3)
    positions = dict(controller.session.tower_positions)
    controller.show_solution()
    assert controller.session.tower_positions == positions
