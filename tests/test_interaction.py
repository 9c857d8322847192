"""
Tests for pick, drag and drop of disks.
"""

import pytest

from hanoikit.controller.interaction import InteractionState
from hanoikit.puzzle.game_core import ErrorCode, GameStatus, Vec3


# Default layout: towers at x = -10, 0, 10. With three disks the top disk of
# a full stack sits at y = 2.5.
LEFT_TOP = Vec3(-10.0, 2.5, 0.0)
LEFT_BOTTOM = Vec3(-10.0, 0.9, 0.0)


def drag_to(controller, x, pointer=1, start=LEFT_TOP):
    """Pick at start, move to x on the ground plane, release"""
    interaction = controller.interaction
    disk = interaction.pick(pointer, start)
    assert disk is not None
    interaction.move(pointer, Vec3(x, 0.0, 0.0))
    return interaction.release(pointer)


# ============================================================================
# Picking
# ============================================================================

class TestPick:

    def test_pick_top_disk(self, make_controller):
        controller = make_controller()
        disk = controller.interaction.pick(1, LEFT_TOP)
        assert disk.size == 1
        assert controller.interaction.state == InteractionState.DRAGGING
        assert controller.interaction.held_disk is disk

    def test_buried_disk_cannot_be_picked(self, make_controller):
        controller = make_controller()
        assert controller.interaction.pick(1, LEFT_BOTTOM) is None
        assert controller.interaction.state == InteractionState.IDLE

    def test_empty_space(self, make_controller):
        controller = make_controller()
        assert controller.interaction.pick(1, Vec3(0.0, 2.5, 0.0)) is None

    def test_second_pick_ignored_while_holding(self, make_controller):
        controller = make_controller()
        controller.interaction.pick(1, LEFT_TOP)
        assert controller.interaction.pick(2, LEFT_TOP) is None
        assert controller.interaction.drag.pointer_id == 1

    def test_pick_starts_elapsed_clock(self, make_controller, scheduler):
        controller = make_controller()
        assert not controller.timer_running
        controller.interaction.pick(1, LEFT_BOTTOM)
        assert controller.timer_running
        scheduler.advance(2)
        assert controller.session.timer == 2

    def test_pick_ignored_after_game_over(self, make_controller):
        controller = make_controller()
        controller.session.status = GameStatus.LOST_TIMEOUT
        assert controller.interaction.pick(1, LEFT_TOP) is None

    def test_pick_ignored_during_playback(self, make_controller):
        controller = make_controller()
        controller.show_solution()
        assert controller.interaction.pick(1, LEFT_TOP) is None


# ============================================================================
# Dragging
# ============================================================================

def test_drag_lifts_disk_and_follows_pointer(make_controller):
    controller = make_controller()
    interaction = controller.interaction
    interaction.pick(1, LEFT_TOP)
    interaction.move(1, Vec3(-3.0, 0.0, 1.5))
    assert interaction.drag.position.to_tuple() == pytest.approx((-3.0, 4.5, 1.5))


def test_held_disk_stays_in_its_tower(make_controller):
    controller = make_controller()
    controller.interaction.pick(1, LEFT_TOP)
    assert controller.session.layout() == [[3, 2, 1], [], []]


def test_targets_changed_only_when_different(make_controller, listener):
    controller = make_controller()
    interaction = controller.interaction
    interaction.pick(1, LEFT_TOP)
    assert interaction.move(1, Vec3(-5.0, 0.0, 0.0)) == [1, 2]
    interaction.move(1, Vec3(-2.0, 0.0, 0.0))
    assert listener.named("on_targets_changed") == [([1, 2],)]


def test_move_from_other_pointer_ignored(make_controller):
    controller = make_controller()
    controller.interaction.pick(1, LEFT_TOP)
    assert controller.interaction.move(2, Vec3(0.0, 0.0, 0.0)) is None
    assert controller.interaction.release(2) is None
    assert controller.interaction.state == InteractionState.DRAGGING


# ============================================================================
# Dropping
# ============================================================================

class TestRelease:

    def test_drop_on_empty_tower(self, make_controller, listener):
        controller = make_controller()
        drop = drag_to(controller, 9.0)
        assert drop.accepted
        assert drop.target_tower == 2
        assert drop.position.to_tuple() == pytest.approx((10.0, 0.9, 0.0))
        assert controller.session.layout() == [[3, 2], [], [1]]
        assert controller.session.moves == 1
        assert controller.interaction.state == InteractionState.IDLE
        assert listener.named("on_invalid_attempt") == []
        assert listener.named("on_targets_changed")[-1] == ([],)

    def test_drop_far_from_every_tower_rolls_back(self, make_controller, listener):
        controller = make_controller()
        drop = drag_to(controller, 30.0)
        assert not drop.accepted
        assert drop.error == ErrorCode.NO_TARGET
        assert drop.target_tower is None
        assert drop.position.to_tuple() == pytest.approx(LEFT_TOP.to_tuple())
        assert controller.session.moves == 0
        invalid = listener.named("on_invalid_attempt")
        assert len(invalid) == 1
        assert invalid[0][0].size == 1
        assert invalid[0][1] is None

    def test_threshold_is_exclusive(self, make_controller):
        controller = make_controller()
        drop = drag_to(controller, 18.0)
        assert drop.error == ErrorCode.NO_TARGET

    def test_drop_on_origin_tower(self, make_controller, listener):
        controller = make_controller()
        drop = drag_to(controller, -9.0)
        assert drop.error == ErrorCode.SAME_TOWER
        assert controller.session.moves == 0
        assert listener.named("on_invalid_attempt")[0][1] == 0

    def test_larger_on_smaller_rolls_back(self, make_controller, listener):
        controller = make_controller()
        controller.apply_move(0, 2)
        listener.clear()

        middle = Vec3(-10.0, 1.7, 0.0)
        drop = drag_to(controller, 10.0, start=middle)
        assert not drop.accepted
        assert drop.error == ErrorCode.LARGER_ON_SMALLER
        assert drop.move is not None
        assert drop.position.to_tuple() == pytest.approx(middle.to_tuple())
        assert controller.session.layout() == [[3, 2], [], [1]]
        assert controller.session.moves == 1
        assert listener.named("on_invalid_attempt")[0][1] == 2
        assert listener.named("on_model_changed") == []

    def test_release_without_pick(self, make_controller):
        controller = make_controller()
        assert controller.interaction.release(1) is None

    def test_cancel_restores_without_event(self, make_controller, listener):
        controller = make_controller()
        controller.interaction.pick(1, LEFT_TOP)
        controller.interaction.cancel()
        assert controller.interaction.state == InteractionState.IDLE
        assert listener.named("on_invalid_attempt") == []

    def test_reset_drops_held_disk(self, make_controller):
        controller = make_controller()
        controller.interaction.pick(1, LEFT_TOP)
        controller.reset()
        assert controller.interaction.held_disk is None
        assert controller.interaction.release(1) is None


@pytest.mark.parametrize("x", [-1.0, 0.0, 3.9])
def test_drop_snaps_to_nearest_tower(make_controller, x):
    controller = make_controller()
    drop = drag_to(controller, x)
    assert drop.accepted
    assert drop.target_tower == 1


def test_full_game_by_dragging(make_controller, listener):
    """Seven drags solve three disks"""
    controller = make_controller()
    xs = {0: -10.0, 1: 0.0, 2: 10.0}
    for a, b in [(0, 2), (0, 1), (2, 1), (0, 2), (1, 0), (1, 2), (0, 2)]:
        tower = controller.session.tower(a)
        top = tower.disks[-1]
        start = controller.geometry.disk_position(controller.session, top)
        drop = drag_to(controller, xs[b], start=start)
        assert drop.accepted, drop.message
    assert controller.session.status == GameStatus.WON
    assert len(listener.named("on_game_over")) == 1
