"""
Tower puzzle model package
"""

from .game_core import (
    NUM_TOWERS, MIN_DISKS, MAX_DISKS, GOAL_TOWER,
    TowerId, GameMode, GameStatus, ErrorCode,
    PuzzleError, InvariantViolation, EmptyTower, IllegalMove,
    Vec3, Disk, Tower, MoveRecord, MoveResult, PuzzleSession,
    top_of, push, pop, is_complete, check_invariants,
)

from .placement import (
    validate_move, can_move, require_legal, valid_targets,
    apply_move,
)

from .initialization import (
    create_session, place_canonical, place_prescrambled, shuffle_positions,
)

from .geometry import StackGeometry, default_positions, disk_y, disk_radius

from .solver import generate_solution, iter_solution, min_moves

__all__ = [
    # Core types
    'NUM_TOWERS', 'MIN_DISKS', 'MAX_DISKS', 'GOAL_TOWER',
    'TowerId', 'GameMode', 'GameStatus', 'ErrorCode',
    'PuzzleError', 'InvariantViolation', 'EmptyTower', 'IllegalMove',
    'Vec3', 'Disk', 'Tower', 'MoveRecord', 'MoveResult', 'PuzzleSession',
    'top_of', 'push', 'pop', 'is_complete', 'check_invariants',
    # Moves
    'validate_move', 'can_move', 'require_legal', 'valid_targets',
    'apply_move',
    # Layouts
    'create_session', 'place_canonical', 'place_prescrambled', 'shuffle_positions',
    # Geometry
    'StackGeometry', 'default_positions', 'disk_y', 'disk_radius',
    # Solver
    'generate_solution', 'iter_solution', 'min_moves',
]
