"""
Command-line interface for hanoikit.

Play a session from the terminal, watch the optimal solution, manage YAML
configuration files and inspect stored best scores.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from hanoikit.core.config import (
    DISK_SHAPES, DISK_THEMES, TOWER_THEMES,
    Config, GameConfig, PlaybackConfig, ThemeConfig, load_config, validate_config,
)
from hanoikit.core.registry import MODE_REGISTRY
from hanoikit.controller.game_controller import GameController
from hanoikit.controller.timers import RealTimeScheduler
from hanoikit.evaluation.metrics import MetricsCalculator
from hanoikit.evaluation.scoring import ScoreStore
from hanoikit.puzzle.game_core import MAX_DISKS, MIN_DISKS, GameMode, Vec3
from hanoikit.puzzle.solver import min_moves
from hanoikit.utils.display import ConsoleListener, LiveLogger, StatusDisplay, format_time
from hanoikit.utils.logger import SessionLogger
from hanoikit.utils.visualizer import render_session

import hanoikit.modes  # noqa: F401

PLAY_HELP = """Commands:
  m <from> <to>     move the top disk between towers (0, 1, 2)
  p <x> <y> [z]     pick the top disk at a scene point
  d <x> <y> [z]     drag the held disk to a scene point
  r                 release the held disk
  s                 show the board
  solve             restart and play the optimal solution
  reset             start over
  q                 quit"""


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    modes = [m.value for m in GameMode]

    parser = argparse.ArgumentParser(
        description="hanoikit: disk-transfer puzzle engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Play four disks against the clock
  hanoikit play --mode timed --disks 4

  # Watch the optimal solution for five disks
  hanoikit solve --disks 5

  # Create and validate a configuration file
  hanoikit create-config --output config.yaml
  hanoikit validate-config config.yaml

Modes: {', '.join(modes)}
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    play_parser = subparsers.add_parser("play", help="Play a session in the terminal")
    play_parser.add_argument("--config", "-c", help="Path to configuration file")
    play_parser.add_argument("--mode", choices=modes, help="Override game mode")
    play_parser.add_argument("--disks", "-n", type=int, help=f"Override number of disks ({MIN_DISKS}-{MAX_DISKS})")
    play_parser.add_argument("--seed", type=int, help="Random seed for shuffled layouts")
    play_parser.add_argument("--log", action="store_true", help="Write a session log")
    play_parser.add_argument("--verbose", "-v", action="store_true", help="Also print clock ticks")

    solve_parser = subparsers.add_parser("solve", help="Play the optimal solution")
    solve_parser.add_argument("--config", "-c", help="Path to configuration file")
    solve_parser.add_argument("--disks", "-n", type=int, help="Override number of disks")
    solve_parser.add_argument("--step-delay", type=float, help="Seconds between moves")
    solve_parser.add_argument("--list", action="store_true", help="Only print the move list")
    solve_parser.add_argument("--render", help="Save a picture of the final board to this file")

    config_parser = subparsers.add_parser("create-config", help="Create default configuration file")
    config_parser.add_argument("--output", "-o", default="config.yaml", help="Output configuration file")
    config_parser.add_argument("--mode", choices=modes, default="normal", help="Default game mode")
    config_parser.add_argument("--disks", "-n", type=int, default=4, help="Default number of disks")
    config_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    validate_parser = subparsers.add_parser("validate-config", help="Validate configuration file")
    validate_parser.add_argument("config", help="Configuration file to validate")
    validate_parser.add_argument("--strict", action="store_true", help="Treat warnings as errors")

    list_parser = subparsers.add_parser("list-modes", help="List available game modes")
    list_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")

    scores_parser = subparsers.add_parser("scores", help="Show stored best scores")
    scores_parser.add_argument("--file", default=None, help="Best score file (default from config)")
    scores_parser.add_argument("--results", default=None, help="Results table written by play --log (default from config)")
    scores_parser.add_argument("--config", "-c", help="Path to configuration file")

    theme_parser = subparsers.add_parser("theme", help="Choose and remember the visual theme")
    theme_parser.add_argument("--tower", choices=TOWER_THEMES, default="default", help="Tower theme")
    theme_parser.add_argument("--disk", choices=DISK_THEMES, default="default", help="Disk theme")
    theme_parser.add_argument("--shape", choices=DISK_SHAPES, default="torus", help="Disk shape")
    theme_parser.add_argument("--config", "-c", help="Path to configuration file")

    return parser


def _load(args, logger: LiveLogger) -> Optional[Config]:
    config_path = getattr(args, "config", None)
    if not config_path:
        return Config()
    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.log_error(f"Failed to load config: {e}")
        return None
    for issue in validate_config(config):
        if issue.startswith("ERROR"):
            logger.log_error(issue)
            return None
        logger.log_warning(issue)
    return config


def _print_metrics(results, title: str = "Session Metrics") -> None:
    calc = MetricsCalculator()
    metrics = calc.calculate_comprehensive_metrics(results)
    StatusDisplay.print_results(metrics, title)
    print(calc.summary_table(results).to_string(index=False))


def _apply_overrides(config: Config, args) -> None:
    game = config.game
    config.game = GameConfig(
        num_disks=args.disks if getattr(args, "disks", None) is not None else game.num_disks,
        mode=getattr(args, "mode", None) or game.mode,
        seed=getattr(args, "seed", None) if getattr(args, "seed", None) is not None else game.seed,
    )


def _print_state(controller: GameController) -> None:
    StatusDisplay.print_board(controller.session)
    best = controller.best_score
    StatusDisplay.print_hud(controller.session, controller.elapsed, best.to_dict() if best else None)


def _parse_point(parts: List[str]) -> Vec3:
    coords = [float(p) for p in parts]
    if len(coords) == 2:
        coords.append(0.0)
    if len(coords) != 3:
        raise ValueError("expected x y [z]")
    return Vec3(*coords)


def play_command(args, stdin=None) -> int:
    """Execute play command."""
    logger = LiveLogger(verbose=True)
    stdin = stdin or sys.stdin

    config = _load(args, logger)
    if config is None:
        return 1
    try:
        _apply_overrides(config, args)
    except ValueError as e:
        logger.log_error(str(e))
        return 1

    scheduler = RealTimeScheduler()
    store = ScoreStore(config.runner.best_score_path)
    if store.theme and not args.config:
        try:
            config.theme = ThemeConfig(**store.theme)
        except (TypeError, ValueError) as e:
            logger.log_warning(f"Ignoring stored theme: {e}")
    listeners = [ConsoleListener(LiveLogger(verbose=True), show_ticks=args.verbose)]
    controller = GameController(config, scheduler=scheduler, score_store=store, listeners=listeners)

    session_logger = None
    if args.log:
        image_source = None
        if config.runner.save_images:
            image_source = lambda: render_session(
                controller.session, geometry=controller.geometry, theme=config.theme
            )
        session_logger = SessionLogger(config.runner.log_dir, config.runner.experiment_name,
                                       image_source=image_source)
        controller.add_listener(session_logger)

    StatusDisplay.print_header(f"{controller.mode.value.title()} mode - {controller.num_disks} disks")
    print(f"Move every disk to tower 2. Optimal: {min_moves(controller.num_disks)} moves.")
    print(PLAY_HELP)
    _print_state(controller)

    for line in stdin:
        scheduler.poll()
        parts = line.split()
        if not parts:
            continue
        cmd, rest = parts[0].lower(), parts[1:]
        interaction = controller.interaction

        try:
            if cmd in ("q", "quit", "exit"):
                break
            elif cmd == "m" and len(rest) == 2:
                controller.start_clock()
                result = controller.apply_move(int(rest[0]), int(rest[1]))
                if not result.success:
                    logger.log_warning(result.message)
            elif cmd == "p":
                disk = interaction.pick("cli", _parse_point(rest))
                if disk is None:
                    logger.log_warning("Nothing to pick there")
                else:
                    logger.log_info(f"Holding disk {disk.size}")
            elif cmd == "d":
                targets = interaction.move("cli", _parse_point(rest))
                if targets is None:
                    logger.log_warning("No disk is held")
            elif cmd == "r":
                drop = interaction.release("cli")
                if drop is None:
                    logger.log_warning("No disk is held")
                elif not drop.accepted:
                    logger.log_warning(drop.message)
            elif cmd == "s":
                pass
            elif cmd == "solve":
                controller.show_solution()
                scheduler.run_until(lambda: not controller.playback.is_active)
            elif cmd == "reset":
                controller.reset()
            else:
                print(PLAY_HELP)
                continue
        except ValueError as e:
            logger.log_warning(f"Bad input: {e}")
            continue

        _print_state(controller)

    controller.stop_all()
    if session_logger is not None:
        session_logger.save_logs()
        if session_logger.results:
            session_logger.save_results_table(
                [r.to_dict() for r in session_logger.results], config.runner.results_path
            )
            _print_metrics(session_logger.results)
    return 0


def solve_command(args) -> int:
    """Execute solve command."""
    logger = LiveLogger(verbose=True)
    config = _load(args, logger)
    if config is None:
        return 1
    try:
        _apply_overrides(config, args)
        if args.step_delay is not None:
            config.playback = PlaybackConfig(step_delay=args.step_delay)
    except ValueError as e:
        logger.log_error(str(e))
        return 1

    if args.list:
        controller = GameController(config)
        for i, move in enumerate(controller.show_solution(), 1):
            print(f"{i:4d}. {move}")
        controller.stop_all()
        return 0

    scheduler = RealTimeScheduler()
    controller = GameController(config, scheduler=scheduler, listeners=[ConsoleListener(LiveLogger())])
    StatusDisplay.print_header(f"Optimal solution - {controller.num_disks} disks")
    moves = controller.show_solution()
    logger.log_info(f"{len(moves)} moves, one every {config.playback.step_delay}s")

    finished = scheduler.run_until(lambda: not controller.playback.is_active)
    StatusDisplay.print_board(controller.session)

    if args.render:
        render_session(controller.session, geometry=controller.geometry, theme=config.theme).save(args.render)
        logger.log_result(f"Board saved to {args.render}")
    return 0 if finished else 1


def create_config_command(args) -> int:
    """Execute create-config command."""
    logger = LiveLogger(verbose=True)

    StatusDisplay.print_header("Creating Configuration File")
    if Path(args.output).exists() and not args.force:
        logger.log_error(f"Configuration file already exists: {args.output} (use --force)")
        return 1

    try:
        config = Config(game=GameConfig(num_disks=args.disks, mode=GameMode(args.mode)))
    except ValueError as e:
        logger.log_error(f"Failed to create config: {e}")
        return 1

    with open(args.output, 'w', encoding='utf-8') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2)

    logger.log_result(f"Configuration created: {args.output}")
    StatusDisplay.print_results({
        "Output File": args.output,
        "Mode": config.game.mode.value,
        "Disks": config.game.num_disks,
    }, "Configuration Summary")
    logger.log_info("Validate it with: hanoikit validate-config " + args.output)
    return 0


def validate_config_command(args) -> int:
    """Execute validate-config command."""
    logger = LiveLogger(verbose=True)

    StatusDisplay.print_header("Configuration Validation")
    if not Path(args.config).exists():
        logger.log_error(f"Configuration file not found: {args.config}")
        return 1

    try:
        config = load_config(args.config)
    except (ValueError, yaml.YAMLError) as e:
        logger.log_error(f"Failed to load config: {e}")
        return 1
    logger.log_result("Configuration loaded successfully")

    StatusDisplay.print_config({
        "Experiment": config.runner.experiment_name,
        "Mode": config.game.mode.value,
        "Disks": config.game.num_disks,
        "Theme": f"{config.theme.tower}/{config.theme.disk}/{config.theme.disk_shape}",
        "Best Scores": config.runner.best_score_path,
    }, "Configuration Overview")

    issues = validate_config(config)
    errors = [issue for issue in issues if issue.startswith("ERROR")]
    warnings = [issue for issue in issues if not issue.startswith("ERROR")]
    if args.strict and warnings:
        errors.extend(warnings)
        warnings = []

    for warning in warnings:
        logger.log_warning(warning)
    for error in errors:
        logger.log_error(error)

    StatusDisplay.print_results({
        "Valid": not errors,
        "Errors Found": len(errors),
        "Warnings Found": len(warnings),
    }, "Validation Summary")
    return 1 if errors else 0


def list_modes_command(args) -> int:
    """Execute list-modes command."""
    modes = {name: (cls.__doc__ or "").strip().splitlines()[0] if cls.__doc__ else ""
             for name, cls in sorted(MODE_REGISTRY.items())}
    if args.format == "json":
        print(json.dumps(modes, indent=2))
        return 0
    StatusDisplay.print_header("Available Modes")
    for name, doc in modes.items():
        print(f"  • {name:<14} {doc}")
    return 0


def scores_command(args) -> int:
    """Execute scores command."""
    logger = LiveLogger(verbose=True)
    config = _load(args, logger)
    if config is None:
        return 1
    path = args.file or config.runner.best_score_path
    results_path = args.results or config.runner.results_path

    store = ScoreStore(path)
    StatusDisplay.print_header("Best Scores")
    if not store.scores:
        print("  No scores recorded yet.")
    for disks, score in sorted(store.scores.items()):
        print(f"  {disks} disks: {score.moves} moves in {format_time(score.time)} "
              f"(optimal {min_moves(disks)})")

    if not Path(results_path).exists():
        return 0
    try:
        results = MetricsCalculator().load_results(results_path)
    except (OSError, KeyError, ValueError) as e:
        logger.log_error(f"Could not read results table {results_path}: {e}")
        return 1
    if results:
        _print_metrics(results, f"All Sessions ({results_path})")
    return 0


def theme_command(args) -> int:
    """Execute theme command."""
    logger = LiveLogger(verbose=True)
    config = _load(args, logger)
    if config is None:
        return 1

    controller = GameController(config, score_store=ScoreStore(config.runner.best_score_path))
    controller.set_theme(ThemeConfig(tower=args.tower, disk=args.disk, disk_shape=args.shape))
    logger.log_result(f"Theme saved to {config.runner.best_score_path}")
    StatusDisplay.print_results(controller.config.theme.to_dict(), "Theme")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    argv = sys.argv[1:] if argv is None else argv

    if not argv:
        parser.print_help()
        return 1

    args = parser.parse_args(argv)
    command_handlers = {
        "play": play_command,
        "solve": solve_command,
        "create-config": create_config_command,
        "validate-config": validate_config_command,
        "list-modes": list_modes_command,
        "scores": scores_command,
        "theme": theme_command,
    }

    handler = command_handlers.get(args.command)
    if not handler:
        parser.print_help()
        return 1
    try:
        return handler(args)
    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user")
        return 1


if __name__ == "__main__":
    sys.exit(main())
