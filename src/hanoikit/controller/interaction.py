"""
Pointer interaction: pick, drag and drop of top disks.

IDLE -> SELECTING -> DRAGGING -> RESOLVING -> IDLE. A held disk stays in its
tower's stack until the drop resolves, so the move validator sees the same
model a direct move would.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Hashable, List, Optional

from hanoikit.core.config import InteractionConfig
from hanoikit.puzzle.game_core import Disk, ErrorCode, MoveResult, Vec3
from hanoikit.puzzle.geometry import StackGeometry
from hanoikit.puzzle.placement import valid_targets

if TYPE_CHECKING:
    from hanoikit.controller.game_controller import GameController


class InteractionState(Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    DRAGGING = "dragging"
    RESOLVING = "resolving"


@dataclass
class DragState:
    """The disk being dragged and where to put it back"""
    pointer_id: Hashable
    disk: Disk
    origin_tower: int
    origin_position: Vec3
    position: Vec3
    targets: Optional[List[int]] = None


@dataclass
class DropResult:
    """How a release resolved"""
    accepted: bool
    error: ErrorCode
    disk: Disk
    origin_tower: int
    target_tower: Optional[int]
    position: Vec3
    move: Optional[MoveResult] = None
    message: str = ""


class InteractionController:
    """
    Turns pick/move/release signals into validated moves.

    Screen-space hit testing belongs to the scene object, which answers
    ``disk_at``, ``disk_position`` and ``nearest_tower`` for the session.
    """

    def __init__(self, controller: "GameController", scene: StackGeometry,
                 config: Optional[InteractionConfig] = None):
        self.controller = controller
        self.scene = scene
        self.config = config or InteractionConfig()
        self._state = InteractionState.IDLE
        self._drag: Optional[DragState] = None

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def drag(self) -> Optional[DragState]:
        return self._drag

    @property
    def held_disk(self) -> Optional[Disk]:
        return self._drag.disk if self._drag else None

    def pick(self, pointer_id: Hashable, point: Vec3) -> Optional[Disk]:
        """
        Try to grab the top disk under the point.

        Ignored while another disk is held, after the game ended, or while a
        solution is playing.
        """
        if self._state != InteractionState.IDLE:
            return None
        session = self.controller.session
        if session is None or session.is_over or self.controller.playback.is_active:
            return None

        self.controller.start_clock()
        self._state = InteractionState.SELECTING

        disk = self.scene.disk_at(session, point, session.top_disks())
        if disk is None:
            self._state = InteractionState.IDLE
            return None

        origin = self.scene.disk_position(session, disk)
        self._drag = DragState(
            pointer_id=pointer_id,
            disk=disk,
            origin_tower=disk.tower,
            origin_position=origin.copy(),
            position=origin.copy(),
        )
        self._state = InteractionState.DRAGGING
        return disk

    def move(self, pointer_id: Hashable, point: Vec3) -> Optional[List[int]]:
        """
        Follow the pointer and refresh the valid drop targets.

        Returns:
            towers that would accept the held disk, or None if nothing is held
        """
        drag = self._drag
        if self._state != InteractionState.DRAGGING or drag is None or drag.pointer_id != pointer_id:
            return None

        drag.position = Vec3(point.x, drag.origin_position.y + self.config.drag_lift, point.z)

        targets = valid_targets(self.controller.session, drag.disk, drag.origin_tower)
        if targets != drag.targets:
            drag.targets = targets
            self.controller.emit("on_targets_changed", list(targets))
        return targets

    def release(self, pointer_id: Hashable) -> Optional[DropResult]:
        """Drop the held disk on the nearest tower, or put it back"""
        drag = self._drag
        if self._state != InteractionState.DRAGGING or drag is None or drag.pointer_id != pointer_id:
            return None

        self._state = InteractionState.RESOLVING
        session = self.controller.session
        target = self.scene.nearest_tower(session, drag.position, self.config.proximity_threshold)

        if target is None:
            result = self._rollback(drag, None, ErrorCode.NO_TARGET, "No tower within reach")
        elif target == drag.origin_tower:
            result = self._rollback(drag, target, ErrorCode.SAME_TOWER, "Dropped on its own tower")
        else:
            move = self.controller.apply_move(drag.origin_tower, target)
            if move.success:
                result = DropResult(
                    accepted=True,
                    error=ErrorCode.OK,
                    disk=drag.disk,
                    origin_tower=drag.origin_tower,
                    target_tower=target,
                    position=self.scene.disk_position(session, drag.disk),
                    move=move,
                    message=move.message,
                )
            else:
                result = self._rollback(drag, target, move.error, move.message)
                result.move = move

        self._finish_drag(drag)
        return result

    def cancel(self) -> None:
        """Put back any held disk without reporting an attempt"""
        if self._drag is not None:
            self._drag.position = self._drag.origin_position.copy()
            self._finish_drag(self._drag)
        self._state = InteractionState.IDLE

    def reset(self) -> None:
        self._drag = None
        self._state = InteractionState.IDLE

    def _rollback(self, drag: DragState, target: Optional[int],
                  error: ErrorCode, message: str) -> DropResult:
        drag.position = drag.origin_position.copy()
        self.controller.emit("on_invalid_attempt", drag.disk, target)
        return DropResult(
            accepted=False,
            error=error,
            disk=drag.disk,
            origin_tower=drag.origin_tower,
            target_tower=target,
            position=drag.origin_position.copy(),
            message=message,
        )

    def _finish_drag(self, drag: DragState) -> None:
        if drag.targets:
            self.controller.emit("on_targets_changed", [])
        self._drag = None
        self._state = InteractionState.IDLE
