"""
Tests for the session logger and console output helpers.
"""

import json
import os

import pandas as pd
from PIL import Image

from hanoikit.controller.game_controller import GameController
from hanoikit.controller.timers import ManualScheduler
from hanoikit.core.config import Config, GameConfig
from hanoikit.puzzle.initialization import create_session, place_canonical
from hanoikit.puzzle.placement import apply_move
from hanoikit.utils.display import ConsoleListener, StatusDisplay, format_time, render_text
from hanoikit.utils.logger import SessionLogger


SEVEN_MOVES = [(0, 2), (0, 1), (2, 1), (0, 2), (1, 0), (1, 2), (0, 2)]


def play_logged_game(logger, listeners=()):
    controller = GameController(
        Config(game=GameConfig(num_disks=3)),
        scheduler=ManualScheduler(),
        listeners=[logger, *listeners],
    )
    controller.apply_move(0, 1)
    controller.interaction.pick(1, controller.geometry.disk_position(
        controller.session, controller.session.tower(1).disks[-1]))
    controller.interaction.release(1)
    controller.apply_move(1, 0)
    for a, b in SEVEN_MOVES:
        controller.apply_move(a, b)
    return controller


# ============================================================================
# SessionLogger
# ============================================================================

def test_logger_records_events(tmp_path):
    logger = SessionLogger(str(tmp_path), "unit")
    play_logged_game(logger)

    events = [log["event"] for log in logger.logs]
    assert events[0] == "model_changed"
    assert "invalid_attempt" in events
    assert events[-1] == "game_over"
    assert [log["step"] for log in logger.logs] == list(range(1, len(logger.logs) + 1))
    assert len(logger.results) == 1
    assert logger.results[0].won


def test_save_logs_writes_json_and_summary(tmp_path):
    logger = SessionLogger(str(tmp_path), "unit")
    play_logged_game(logger)
    log_file = logger.save_logs()

    with open(log_file) as f:
        saved = json.load(f)
    assert len(saved) == len(logger.logs)

    with open(os.path.join(logger.run_dir, "summary.txt")) as f:
        summary = f.read()
    assert "Invalid Attempts: 1" in summary
    assert "GAME OVER - won in 9 moves" in summary


def test_images_saved(tmp_path):
    logger = SessionLogger(str(tmp_path), "unit", image_source=lambda: Image.new("RGB", (4, 4)))
    play_logged_game(logger)
    saved = [log for log in logger.logs if "image_path" in log]
    assert saved
    assert all(os.path.exists(log["image_path"]) for log in saved)
    assert all("image" not in log for log in logger.logs)


def test_results_table_appends(tmp_path):
    logger = SessionLogger(str(tmp_path), "unit")
    table = str(tmp_path / "results.csv")
    logger.save_results_table([{"moves": 7, "outcome": "won"}], table)
    df = logger.save_results_table([{"moves": 9, "outcome": "won"}], table)
    assert list(df["moves"]) == [7, 9]
    assert list(pd.read_csv(table)["moves"]) == [7, 9]


# ============================================================================
# Console helpers
# ============================================================================

def test_format_time():
    assert format_time(0) == "00:00"
    assert format_time(75) == "01:15"
    assert format_time(600) == "10:00"
    assert format_time(-3) == "00:00"


def test_render_text():
    session = create_session(3)
    place_canonical(session)
    apply_move(session, 0, 2)
    lines = render_text(session).splitlines()
    assert len(lines) == 4
    assert lines[-1].split() == ["[0]", "[1]", "[2]"]
    assert lines[-2].split() == ["=====", "|", "="]
    assert lines[0].split() == ["|", "|", "|"]


def test_console_listener_prints(tmp_path, capsys):
    logger = SessionLogger(str(tmp_path), "unit")
    play_logged_game(logger, listeners=[ConsoleListener()])
    out = capsys.readouterr().out
    assert "Move 1: disk 1 0 -> 1" in out
    assert "cannot go to" in out
    assert "Solved in 9 moves" in out


def test_print_hud(capsys):
    session = create_session(3)
    place_canonical(session)
    StatusDisplay.print_hud(session, 65, best={"moves": 7, "time": 12})
    out = capsys.readouterr().out
    assert "Moves: 0" in out
    assert "01:05" in out
    assert "Best: 7 moves in 00:12" in out
