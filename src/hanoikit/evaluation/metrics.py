"""
Metrics over finished sessions.
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, List
from collections import defaultdict

from hanoikit.core.base import GameResult


class MetricsCalculator:
    """Calculator for session metrics."""

    def __init__(self):
        self.supported_metrics = [
            "win_rate",
            "mean_moves",
            "distance_to_optimal",
            "move_efficiency",
            "mean_time",
            "win_rate_by_difficulty",
            "win_rate_by_mode",
        ]

    def calculate_win_rate(self, results: List[GameResult]) -> float:
        """
        Fraction of sessions that ended in a win.

        Args:
            results: finished sessions

        Returns:
            Win rate as float between 0 and 1
        """
        if not results:
            return 0.0
        return sum(1 for r in results if r.won) / len(results)

    def calculate_mean_moves(self, results: List[GameResult]) -> float:
        """Average move count of won sessions"""
        won = [r.moves for r in results if r.won]
        return float(np.mean(won)) if won else float('inf')

    def calculate_distance_to_optimal(self, results: List[GameResult]) -> float:
        """
        Average normalized distance from the optimal move count.

        Only won sessions count: (moves - optimal) / optimal.
        """
        distances = []
        for result in results:
            if not result.won or result.optimal_moves <= 0:
                continue
            distances.append(max(0, result.moves - result.optimal_moves) / result.optimal_moves)
        return float(np.mean(distances)) if distances else float('inf')

    def calculate_move_efficiency(self, results: List[GameResult]) -> float:
        """optimal / actual moves for won sessions; 1.0 is a perfect game"""
        ratios = [r.optimal_moves / r.moves for r in results if r.won and r.moves > 0]
        return float(np.mean(ratios)) if ratios else 0.0

    def calculate_mean_time(self, results: List[GameResult]) -> float:
        times = [r.time for r in results if r.won]
        return float(np.mean(times)) if times else float('inf')

    def calculate_win_rate_by_difficulty(self, results: List[GameResult]) -> Dict[int, float]:
        by_disks = defaultdict(list)
        for result in results:
            by_disks[result.num_disks].append(result)
        return {n: self.calculate_win_rate(rs) for n, rs in sorted(by_disks.items())}

    def calculate_win_rate_by_mode(self, results: List[GameResult]) -> Dict[str, float]:
        by_mode = defaultdict(list)
        for result in results:
            by_mode[result.mode.value].append(result)
        return {m: self.calculate_win_rate(rs) for m, rs in sorted(by_mode.items())}

    def load_results(self, table_path: str) -> List[GameResult]:
        """
        Read finished sessions back from a CSV or Excel results table.

        Args:
            table_path: ``.xlsx`` is read as Excel, anything else as CSV

        Returns:
            one GameResult per row
        """
        df = pd.read_excel(table_path) if table_path.endswith(".xlsx") else pd.read_csv(table_path)
        return [GameResult.from_dict(row) for row in df.to_dict(orient="records")]

    def to_dataframe(self, results: List[GameResult]) -> pd.DataFrame:
        """One row per session with the derived efficiency column"""
        rows = []
        for result in results:
            row = result.to_dict()
            row["efficiency"] = result.optimal_moves / result.moves if result.won and result.moves else 0.0
            rows.append(row)
        return pd.DataFrame(rows)

    def summary_table(self, results: List[GameResult], by: str = "num_disks") -> pd.DataFrame:
        """
        Aggregate sessions per difficulty or per mode.

        Args:
            results: finished sessions
            by: ``num_disks`` or ``mode``

        Returns:
            DataFrame with sessions, wins, win_rate, mean_moves, mean_time, efficiency
        """
        if by not in ("num_disks", "mode"):
            raise ValueError("by must be 'num_disks' or 'mode'")
        df = self.to_dataframe(results)
        if df.empty:
            return pd.DataFrame(columns=[by, "sessions", "wins", "win_rate", "mean_moves", "mean_time", "efficiency"])

        df["won"] = df["outcome"] == "won"
        won = df[df["won"]]
        table = df.groupby(by).agg(sessions=("won", "size"), wins=("won", "sum"))
        table["win_rate"] = table["wins"] / table["sessions"]
        table["mean_moves"] = won.groupby(by)["moves"].mean()
        table["mean_time"] = won.groupby(by)["time"].mean()
        table["efficiency"] = won.groupby(by)["efficiency"].mean()
        return table.reset_index()

    def calculate_comprehensive_metrics(self, results: List[GameResult]) -> Dict[str, Any]:
        """Every supported metric in one dictionary."""
        return {
            "total_sessions": len(results),
            "win_rate": self.calculate_win_rate(results),
            "mean_moves": self.calculate_mean_moves(results),
            "distance_to_optimal": self.calculate_distance_to_optimal(results),
            "move_efficiency": self.calculate_move_efficiency(results),
            "mean_time": self.calculate_mean_time(results),
            "win_rate_by_difficulty": self.calculate_win_rate_by_difficulty(results),
            "win_rate_by_mode": self.calculate_win_rate_by_mode(results),
        }
