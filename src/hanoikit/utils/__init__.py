from .logger import SessionLogger
from .display import StatusDisplay, LiveLogger, ConsoleListener, format_time, render_text
from .visualizer import render_session, draw_session, get_disk_color

__all__ = [
    "SessionLogger",
    "StatusDisplay",
    "LiveLogger",
    "ConsoleListener",
    "format_time",
    "render_text",
    "render_session",
    "draw_session",
    "get_disk_color",
]
