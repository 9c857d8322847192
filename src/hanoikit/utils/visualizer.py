"""
Side-view rendering of a session with matplotlib.

Towers are drawn at their scene x coordinate, disks as bars whose width
follows the disk radius. The picture is for logs and terminals; the scene
coordinates stay the ones from ``StackGeometry``.
"""

import io
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import FancyBboxPatch, Rectangle
from PIL import Image

from hanoikit.core.config import ThemeConfig
from hanoikit.puzzle.game_core import GOAL_TOWER, PuzzleSession
from hanoikit.puzzle.geometry import StackGeometry

if TYPE_CHECKING:
    from hanoikit.controller.interaction import DragState


DISK_COLORS = [
    '#FF4136',  # red
    '#FF851B',  # orange
    '#FFDC00',  # yellow
    '#2ECC40',  # green
    '#0074D9',  # blue
    '#B10DC9',  # purple
    '#F012BE',  # magenta
    '#85144B',  # maroon
]

DISK_PALETTES: Dict[str, List[str]] = {
    "default": DISK_COLORS,
    "metallic": ['#C0C0C0', '#FFD700', '#B87333', '#E5E4E2', '#CD7F32', '#4682B4', '#9ACD32', '#8B0000'],
    "candy": ['#FF77FF', '#77FFFF', '#FFFF77', '#77FF77', '#FF7777', '#7777FF', '#FFAA77', '#BB77FF'],
    "neon": ['#FF00FF', '#00FFFF', '#FFFF00', '#00FF00', '#FF0000', '#0000FF', '#FF7700', '#7700FF'],
    "gem": ['#FF0088', '#00FFBB', '#CCFF00', '#00BBFF', '#EE2200', '#3300FF', '#FF8800', '#BB00FF'],
}

# (pole, base)
TOWER_COLORS: Dict[str, Tuple[str, str]] = {
    "default": ('#8B4513', '#5C3317'),
    "japanese": ('#1A1A1A', '#4A0D00'),
    "futuristic": ('#00FFFF', '#003366'),
    "ancient": ('#C2B280', '#8B7D6B'),
    "crystal": ('#A7D8F0', '#6FA8DC'),
}

POLE_HEIGHT = 12.0
POLE_WIDTH = 0.5
BASE_WIDTH = 8.0


def get_disk_color(size: int, theme: str = "default") -> str:
    """Colour of a disk; sizes are 1-based"""
    palette = DISK_PALETTES.get(theme, DISK_COLORS)
    return palette[(size - 1) % len(palette)]


def _draw_disk(ax, x: float, y: float, radius: float, height: float, size: int, color: str,
               alpha: float = 1.0) -> None:
    ax.add_patch(FancyBboxPatch(
        (x - radius, y - height / 2),
        2 * radius, height,
        boxstyle="round,pad=0,rounding_size=0.3",
        facecolor=color, edgecolor='black', linewidth=0.8, alpha=alpha,
    ))
    ax.text(x, y, str(size), ha='center', va='center', fontsize=7)


def draw_session(ax, session: PuzzleSession, geometry: Optional[StackGeometry] = None,
                 theme: Optional[ThemeConfig] = None, drag: Optional["DragState"] = None) -> None:
    """
    Draw towers and disks on an existing axis.

    Args:
        ax: matplotlib axis
        session: session to draw
        geometry: disk sizes and heights
        theme: colour theme
        drag: in-flight drag; the held disk is drawn at the pointer and its
            valid targets are outlined
    """
    geometry = geometry or StackGeometry()
    theme = theme or ThemeConfig()
    pole_color, base_color = TOWER_COLORS.get(theme.tower, TOWER_COLORS["default"])
    held = drag.disk if drag else None
    highlight = (drag.targets or []) if drag else []

    for tower in session.towers:
        base = session.tower_positions[tower.tower_id]
        edge = '#2ECC40' if tower.tower_id in highlight else 'black'
        ax.add_patch(Rectangle(
            (base.x - BASE_WIDTH / 2, base.y - geometry.base_height / 2),
            BASE_WIDTH, geometry.base_height,
            facecolor=base_color, edgecolor=edge, linewidth=1.5,
        ))
        ax.add_patch(Rectangle(
            (base.x - POLE_WIDTH / 2, base.y + geometry.base_height / 2),
            POLE_WIDTH, POLE_HEIGHT,
            facecolor=pole_color, edgecolor='black', linewidth=0.5,
        ))
        label = f"T{tower.tower_id}" + (" (goal)" if tower.tower_id == GOAL_TOWER else "")
        ax.text(base.x, base.y - geometry.base_height - 0.6, label, ha='center', va='top', fontsize=9)

        for disk in tower.disks:
            if disk is held:
                continue
            centre = geometry.disk_position(session, disk)
            _draw_disk(ax, centre.x, centre.y, geometry.radius(session, disk), geometry.disk_height,
                       disk.size, get_disk_color(disk.size, theme.disk))

    if held is not None:
        _draw_disk(ax, drag.position.x, drag.position.y, geometry.radius(session, held),
                   geometry.disk_height, held.size, get_disk_color(held.size, theme.disk), alpha=0.8)


def render_session(session: PuzzleSession, drag: Optional["DragState"] = None,
                   geometry: Optional[StackGeometry] = None,
                   theme: Optional[ThemeConfig] = None, title: Optional[str] = None,
                   figsize: Tuple[float, float] = (8, 4), dpi: int = 100) -> Image.Image:
    """Render the session to a PIL image"""
    fig, ax = plt.subplots(figsize=figsize)
    draw_session(ax, session, geometry, theme, drag)

    xs = [p.x for p in session.tower_positions.values()] or [0.0]
    ax.set_xlim(min(xs) - BASE_WIDTH, max(xs) + BASE_WIDTH)
    ax.set_ylim(-3, POLE_HEIGHT + 2)
    ax.set_aspect('equal')
    ax.axis('off')

    if title is None:
        title = f"{session.mode.value} | {session.num_disks} disks | moves {session.moves}"
        if session.is_over:
            title += f" | {session.status.value}"
    ax.set_title(title, fontsize=10)

    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=dpi, bbox_inches='tight')
    plt.close(fig)
    buf.seek(0)
    return Image.open(buf).convert("RGB")
