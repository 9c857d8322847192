"""
Tool-call environment around the game controller.

Each named tool maps onto a controller or interaction call, so a scripted
agent or a test can play a session step by step. Time only passes through
the ``tick`` tool.
"""

from __future__ import annotations

import random
from typing import Any, Dict, List, Optional

from PIL import Image

from hanoikit.core import BaseEnvironment, Config, register_environment
from hanoikit.core.base import Action, GameEventListener, GameResult, Observation, State
from hanoikit.controller.game_controller import GameController
from hanoikit.controller.timers import ManualScheduler
from hanoikit.evaluation.scoring import ScoreStore
from hanoikit.puzzle.game_core import Disk, GameMode, Vec3
from hanoikit.puzzle.solver import min_moves
from hanoikit.utils.visualizer import render_session


class _EventRecorder(GameEventListener):
    """Collects notifications raised while a tool runs."""

    def __init__(self):
        self.events: List[Dict[str, Any]] = []

    def drain(self) -> List[Dict[str, Any]]:
        events, self.events = self.events, []
        return events

    def on_model_changed(self, event) -> None:
        self.events.append({"event": "model_changed", **event.to_dict()})

    def on_invalid_attempt(self, disk: Disk, attempted_tower: Optional[int]) -> None:
        self.events.append({"event": "invalid_attempt", "disk": disk.size, "tower": attempted_tower})

    def on_game_over(self, result: GameResult) -> None:
        self.events.append({"event": "game_over", **result.to_dict()})

    def on_targets_changed(self, targets: List[int]) -> None:
        self.events.append({"event": "targets_changed", "targets": list(targets)})

    def on_solution_complete(self, total_moves: int) -> None:
        self.events.append({"event": "solution_complete", "total_moves": total_moves})


def _point(x: float, y: float, z: float = 0.0) -> Vec3:
    return Vec3(float(x), float(y), float(z))


@register_environment("hanoi")
class HanoiEnvironment(BaseEnvironment):
    """Drives a GameController from named tool calls."""

    def __init__(self, config: Optional[Config] = None, render_images: bool = False,
                 score_store: Optional[ScoreStore] = None):
        super().__init__(config or Config())
        self.config: Config
        self.render_images = render_images
        self.step_count: int = 0
        self.current_state: Optional[State] = None
        self.scheduler = ManualScheduler()
        self.recorder = _EventRecorder()
        self.controller = GameController(
            self.config,
            scheduler=self.scheduler,
            score_store=score_store,
            listeners=[self.recorder],
            rng=random.Random(self.config.game.seed),
        )
        self.recorder.drain()
        self._tool_handlers = {
            "state": self._tool_state,
            "pick": self._tool_pick,
            "move": self._tool_move,
            "release": self._tool_release,
            "move_disk": self._tool_move_disk,
            "reset": self._tool_reset,
            "solve": self._tool_solve,
            "tick": self._tool_tick,
        }

    # ------------------------------------------------------------------ #
    # BaseEnvironment API
    # ------------------------------------------------------------------ #
    def reset(self) -> Observation:
        """Start a fresh session with the configured mode and difficulty."""
        self.step_count = 0
        self.controller.reset()
        self.recorder.drain()
        self.current_state = self._get_current_state()
        return self._create_observation()

    def step(self, action: Action) -> Observation:
        """Execute an action (tool call) and return new observation."""
        self.step_count += 1
        tool_result = self.execute_tool_call(action.action_type, action.parameters)
        self.current_state = self._get_current_state(
            metadata={
                "tool_call": action.to_dict(),
                "tool_result": tool_result,
            }
        )
        return self._create_observation()

    def render(self) -> Image.Image:
        """Render current session to a PIL image."""
        return render_session(
            self.controller.session,
            drag=self.controller.interaction.drag,
            geometry=self.controller.geometry,
            theme=self.config.theme,
        )

    def get_tool_schemas(self) -> List[Dict[str, Any]]:
        """Return JSON schemas for the exposed tools."""
        def build_schema(name: str, desc: str, properties: Dict[str, Any], required: List[str]) -> Dict[str, Any]:
            return {
                "type": "function",
                "function": {
                    "name": name,
                    "description": desc,
                    "parameters": {
                        "type": "object",
                        "properties": properties,
                        "required": required,
                    },
                },
            }

        point = {
            "x": {"type": "number", "description": "Scene x coordinate."},
            "y": {"type": "number", "description": "Scene y coordinate (height)."},
            "z": {"type": "number", "description": "Scene z coordinate.", "default": 0.0},
        }
        return [
            build_schema("state", "Show towers, move count, clock and status.", {}, []),
            build_schema(
                "pick",
                "Grab the top disk under a scene point. Only the top disk of a tower can be picked.",
                point,
                ["x", "y"],
            ),
            build_schema("move", "Drag the held disk to a scene point.", point, ["x", "y"]),
            build_schema(
                "release",
                "Drop the held disk on the nearest tower; illegal drops put the disk back.",
                {},
                [],
            ),
            build_schema(
                "move_disk",
                "Move the top disk from one tower to another (0 = left, 1 = middle, 2 = right).",
                {
                    "from_tower": {"type": "integer", "description": "Source tower id."},
                    "to_tower": {"type": "integer", "description": "Destination tower id."},
                },
                ["from_tower", "to_tower"],
            ),
            build_schema(
                "reset",
                "Start a new session, optionally with a new difficulty or mode.",
                {
                    "num_disks": {"type": "integer", "description": "Number of disks (3-7)."},
                    "mode": {"type": "string", "enum": [m.value for m in GameMode]},
                },
                [],
            ),
            build_schema("solve", "Restart and play the optimal solution automatically.", {}, []),
            build_schema(
                "tick",
                "Let time pass; fires due clock ticks and playback steps.",
                {"seconds": {"type": "number", "description": "Seconds to advance."}},
                ["seconds"],
            ),
        ]

    def execute_tool_call(self, tool_name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
        """Dispatch tool calls."""
        handler = self._tool_handlers.get(tool_name)
        if not handler:
            return {"status": "error", "message": f"Unknown tool '{tool_name}'"}
        try:
            result = handler(**arguments)
        except (TypeError, ValueError) as exc:
            self.recorder.drain()
            return {"status": "error", "message": f"Tool '{tool_name}' failed: {exc}"}
        result["events"] = self.recorder.drain()
        return result

    def close(self) -> None:
        """Stop every timer of the session."""
        self.controller.stop_all()
        self.scheduler.cancel_all()

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _get_current_state(self, metadata: Optional[Dict[str, Any]] = None) -> State:
        meta = {
            "mode": self.controller.mode.value,
            "num_disks": self.controller.num_disks,
        }
        if metadata:
            meta.update(metadata)
        return State(
            step=self.step_count,
            session=self.controller.snapshot(),
            time_stamp=self.scheduler.now(),
            metadata=meta,
        )

    def _create_observation(self) -> Observation:
        image = self.render() if self.render_images else None
        return Observation(image=image, state=self.current_state, description=self._get_state_description())

    def _get_state_description(self) -> str:
        """Textual description of the session."""
        session = self.controller.session
        if not self.current_state or session is None:
            return "Puzzle not initialized."

        lines = [
            f"Mode: {session.mode.value}, disks: {session.num_disks}",
            "Towers (bottom to top): " + ", ".join(
                f"T{t.tower_id}={t.sizes()}" for t in session.towers
            ),
            f"Moves: {session.moves} (optimal {min_moves(session.num_disks)})",
        ]
        if session.countdown:
            lines.append(f"Time left: {session.timer}")
        else:
            lines.append(f"Elapsed: {session.timer}")
        held = self.controller.interaction.held_disk
        if held is not None:
            lines.append(f"Holding disk {held.size}")

        tool_call = self.current_state.metadata.get("tool_call") if self.current_state.metadata else None
        tool_res = self.current_state.metadata.get("tool_result") if self.current_state.metadata else None
        if tool_call and tool_res:
            lines.append(
                f"Last tool: {tool_call.get('action_type')} with {tool_call.get('parameters')}, "
                f"result: {tool_res.get('status')} - {tool_res.get('message')}"
            )
        if session.is_over:
            lines.append(f"Game over: {session.status.value}")
        return "\n".join(lines)

    # ------------------------------------------------------------------ #
    # Tool implementations
    # ------------------------------------------------------------------ #
    def _tool_state(self) -> Dict[str, Any]:
        return {"status": "success", "message": "State retrieved", "state": self.controller.snapshot()}

    def _tool_pick(self, x: float, y: float, z: float = 0.0) -> Dict[str, Any]:
        disk = self.controller.interaction.pick("agent", _point(x, y, z))
        if disk is None:
            return {"status": "error", "message": "No pickable disk at that point"}
        return {"status": "success", "message": f"Picked disk {disk.size} from tower {disk.tower}", "disk": disk.size}

    def _tool_move(self, x: float, y: float, z: float = 0.0) -> Dict[str, Any]:
        targets = self.controller.interaction.move("agent", _point(x, y, z))
        if targets is None:
            return {"status": "error", "message": "No disk is held"}
        return {"status": "success", "message": "Disk moved", "targets": targets}

    def _tool_release(self) -> Dict[str, Any]:
        drop = self.controller.interaction.release("agent")
        if drop is None:
            return {"status": "error", "message": "No disk is held", "error": "NothingHeld"}
        if drop.accepted:
            return {"status": "success", "message": drop.message, "tower": drop.target_tower}
        return {"status": "error", "message": drop.message, "error": drop.error.value}

    def _tool_move_disk(self, from_tower: int, to_tower: int) -> Dict[str, Any]:
        self.controller.start_clock()
        result = self.controller.apply_move(int(from_tower), int(to_tower))
        if result.success:
            return {"status": "success", "message": result.message, "moves": self.controller.session.moves}
        return {"status": "error", "message": result.message, "error": result.error.value}

    def _tool_reset(self, num_disks: Optional[int] = None, mode: Optional[str] = None) -> Dict[str, Any]:
        self.controller.new_game(num_disks=num_disks, mode=mode)
        return {"status": "success", "message": "Session reset", "state": self.controller.snapshot()}

    def _tool_solve(self) -> Dict[str, Any]:
        moves = self.controller.show_solution()
        return {
            "status": "success",
            "message": f"Playing {len(moves)} moves",
            "moves": [str(m) for m in moves],
        }

    def _tool_tick(self, seconds: float) -> Dict[str, Any]:
        fired = self.scheduler.advance(float(seconds))
        return {"status": "success", "message": f"Advanced {seconds}s", "fired": fired}
