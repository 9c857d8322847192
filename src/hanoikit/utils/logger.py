import os
import json
import pandas as pd
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from PIL import Image

from hanoikit.core.base import GameEventListener, GameResult, ModelChangedEvent
from hanoikit.puzzle.game_core import Disk


class SessionLogger(GameEventListener):
    """
    Records every controller event of a run.

    Attach it with ``controller.add_listener(logger)``; entries are kept in
    memory until ``save_logs`` writes them out.
    """

    def __init__(self, log_dir: str, experiment_name: str, verbose: bool = False,
                 image_source: Optional[Callable[[], Image.Image]] = None):
        """
        Initializes the logger for a run.

        Args:
            log_dir (str): The base directory for logs.
            experiment_name (str): A name for the run; a timestamp is appended.
            verbose (bool): Whether to print each entry to the console.
            image_source: Called after every model change; the returned
                picture is saved next to the entry.
        """
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.experiment_name = f"{experiment_name}_{self.timestamp}"
        self.run_dir = os.path.join(log_dir, self.experiment_name)
        self.images_dir = os.path.join(self.run_dir, "images")
        self.verbose = verbose
        self.image_source = image_source
        self.logs: List[Dict[str, Any]] = []
        self.results: List[GameResult] = []
        self._step = 0

        os.makedirs(self.run_dir, exist_ok=True)
        os.makedirs(self.images_dir, exist_ok=True)

    def log_step(self, step: int, data: Dict[str, Any]):
        """
        Logs a single entry.

        Args:
            step (int): The entry number.
            data (Dict[str, Any]): Data to log. An ``image`` value holding a PIL
                image is written to ``images/`` and replaced by its path.
        """
        log_entry = {"step": step, "timestamp": datetime.now().isoformat(), **data}

        if "image" in log_entry and isinstance(log_entry["image"], Image.Image):
            image_path = os.path.join(self.images_dir, f"step_{step}.png")
            log_entry["image"].save(image_path)
            log_entry["image_path"] = image_path
            del log_entry["image"]

            if self.verbose:
                print(f"  📷 Saved image: step_{step}.png")

        if self.verbose:
            event = data.get("event", "unknown")
            if event == "model_changed":
                print(f"🔄 Step {step}: {data.get('kind')} (moves={data.get('moves')})")
            elif event == "invalid_attempt":
                print(f"⚠️ Step {step}: disk {data.get('disk')} rejected at {data.get('tower')}")
            elif event == "game_over":
                print(f"🏁 Step {step}: {data.get('result', {}).get('outcome')}")
            elif event == "solution_complete":
                print(f"✅ Step {step}: solution played ({data.get('total_moves')} moves)")

        self.logs.append(log_entry)

    def _next(self, data: Dict[str, Any]):
        self._step += 1
        self.log_step(self._step, data)

    # ------------------------------------------------------------------ #
    # GameEventListener
    # ------------------------------------------------------------------ #
    def on_model_changed(self, event: ModelChangedEvent) -> None:
        data = {"event": "model_changed", **event.to_dict()}
        if self.image_source is not None:
            data["image"] = self.image_source()
        self._next(data)

    def on_invalid_attempt(self, disk: Disk, attempted_tower: Optional[int]) -> None:
        self._next({"event": "invalid_attempt", "disk": disk.size, "tower": attempted_tower})

    def on_game_over(self, result: GameResult) -> None:
        self.results.append(result)
        self._next({"event": "game_over", "result": result.to_dict()})

    def on_solution_complete(self, total_moves: int) -> None:
        self._next({"event": "solution_complete", "total_moves": total_moves})

    # ------------------------------------------------------------------ #
    # Output
    # ------------------------------------------------------------------ #
    def save_logs(self):
        """Saves all collected logs to a JSON file."""
        log_file = os.path.join(self.run_dir, "session_log.json")
        with open(log_file, "w") as f:
            json.dump(self.logs, f, indent=2, default=str)

        summary_file = os.path.join(self.run_dir, "summary.txt")
        self._create_summary_file(summary_file)

        if self.verbose:
            print(f"📁 Logs saved to: {log_file}")
            print(f"📋 Summary saved to: {summary_file}")
        return log_file

    def _create_summary_file(self, summary_file: str):
        """Create a human-readable summary file."""
        moves = [log for log in self.logs if log.get("event") == "model_changed" and log.get("kind") == "move"]
        invalid = [log for log in self.logs if log.get("event") == "invalid_attempt"]

        with open(summary_file, "w") as f:
            f.write(f"Session Summary: {self.experiment_name}\n")
            f.write("=" * 60 + "\n")
            f.write(f"Events: {len(self.logs)}\n")
            f.write(f"Moves: {len(moves)}\n")
            f.write(f"Invalid Attempts: {len(invalid)}\n")
            f.write(f"Games Finished: {len(self.results)}\n")
            f.write(f"Images Saved: {len([log for log in self.logs if 'image_path' in log])}\n")
            f.write("\nEvent breakdown:\n")
            f.write("-" * 30 + "\n")

            for log in self.logs:
                step = log.get("step", "?")
                event = log.get("event", "unknown")
                if event == "model_changed":
                    if log.get("kind") == "move":
                        f.write(f"Step {step}: disk {log.get('disk')} {log.get('from_tower')} -> {log.get('to_tower')}\n")
                    else:
                        f.write(f"Step {step}: {log.get('kind')}\n")
                elif event == "invalid_attempt":
                    f.write(f"Step {step}: INVALID - disk {log.get('disk')} to {log.get('tower')}\n")
                elif event == "game_over":
                    result = log.get("result", {})
                    f.write(f"Step {step}: GAME OVER - {result.get('outcome')} in {result.get('moves')} moves\n")
                elif event == "solution_complete":
                    f.write(f"Step {step}: solution complete\n")

    def save_results_table(self, rows: List[Dict[str, Any]], table_path: str):
        """
        Appends result rows to a CSV or Excel table, creating it if needed.

        Args:
            rows (List[Dict[str, Any]]): One dictionary per row.
            table_path (str): ``.xlsx`` writes Excel, anything else CSV.
        """
        results_df = pd.DataFrame(rows)
        excel = table_path.endswith(".xlsx")

        if os.path.exists(table_path):
            try:
                existing_df = pd.read_excel(table_path) if excel else pd.read_csv(table_path)
                updated_df = pd.concat([existing_df, results_df], ignore_index=True)
            except Exception as e:
                print(f"Could not read existing results table: {e}. Creating a new one.")
                updated_df = results_df
        else:
            updated_df = results_df

        if excel:
            updated_df.to_excel(table_path, index=False)
        else:
            updated_df.to_csv(table_path, index=False)
        if self.verbose:
            print(f"Results saved to {table_path}")
        return updated_df
