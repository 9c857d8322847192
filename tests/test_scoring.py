"""
Tests for best-score ordering and persistence.
"""

import json

import pytest

from hanoikit.core.base import GameResult
from hanoikit.core.registry import MODE_REGISTRY
from hanoikit.evaluation.scoring import Score, ScoreStore, is_better_score, is_score_eligible
from hanoikit.puzzle.game_core import GameMode, GameStatus


def win(num_disks=3, moves=7, time=10, mode=GameMode.NORMAL, assisted=False):
    return GameResult(
        outcome=GameStatus.WON,
        mode=mode,
        num_disks=num_disks,
        moves=moves,
        time=time,
        optimal_moves=2 ** num_disks - 1,
        assisted=assisted,
    )


# ============================================================================
# Ordering
# ============================================================================

@pytest.mark.parametrize("candidate,best,expected", [
    (Score(4, 30, 99), Score(3, 7, 1), True),     # more disks wins outright
    (Score(3, 7, 1), Score(4, 30, 99), False),
    (Score(3, 7, 50), Score(3, 9, 5), True),      # fewer moves beats time
    (Score(3, 9, 5), Score(3, 7, 50), False),
    (Score(3, 7, 5), Score(3, 7, 6), True),
    (Score(3, 7, 6), Score(3, 7, 6), False),      # ties keep the stored best
])
def test_is_better_score(candidate, best, expected):
    assert is_better_score(candidate, best) is expected


def test_anything_beats_no_score():
    assert is_better_score(Score(3, 100, 100), None)


def test_eligibility():
    assert is_score_eligible(win())
    assert not is_score_eligible(win(mode=GameMode.TIMED))
    assert not is_score_eligible(win(mode=GameMode.PRESCRAMBLED))
    assert not is_score_eligible(win(assisted=True))
    lost = win()
    lost.outcome = GameStatus.LOST_TIMEOUT
    assert not is_score_eligible(lost)


def test_eligibility_follows_mode_class():
    for name, mode_cls in MODE_REGISTRY.items():
        assert is_score_eligible(win(mode=GameMode(name))) is mode_cls.best_score_eligible()


# ============================================================================
# ScoreStore
# ============================================================================

def test_submit_keeps_best_per_difficulty():
    store = ScoreStore()
    assert store.submit(win(moves=9))
    assert store.submit(win(moves=7))
    assert not store.submit(win(moves=8))
    assert store.submit(win(num_disks=4, moves=15))
    assert store.get(3) == Score(3, 7, 10)
    assert store.get(4) == Score(4, 15, 10)
    assert store.best_overall() == Score(4, 15, 10)


def test_persists_to_json(tmp_path):
    path = tmp_path / "nested" / "best.json"
    store = ScoreStore(str(path))
    store.submit(win())
    store.save_theme({"tower": "japanese", "disk": "gem", "disk_shape": "star"})

    data = json.loads(path.read_text())
    assert data["best_scores"] == {"3": {"disks": 3, "moves": 7, "time": 10}}

    reloaded = ScoreStore(str(path))
    assert reloaded.get(3) == Score(3, 7, 10)
    assert reloaded.theme["tower"] == "japanese"


@pytest.mark.parametrize("content", [
    "{not json",
    "[]",
    '"scores"',
    '{"best_scores": []}',
    '{"best_scores": {"3": {"moves": 7}}}',
    '{"best_scores": {"three": {"disks": 3, "moves": 7, "time": 1}}}',
    '{"best_scores": {"3": {"disks": 3, "moves": "many", "time": 1}}}',
    '{"best_scores": {}, "theme": "dark"}',
])
def test_corrupt_file_starts_empty(tmp_path, capsys, content):
    path = tmp_path / "best.json"
    path.write_text(content)
    store = ScoreStore(str(path))
    assert store.scores == {}
    assert store.theme is None
    assert "Could not read score file" in capsys.readouterr().out


def test_in_memory_store_writes_nothing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    store = ScoreStore()
    store.submit(win())
    assert list(tmp_path.iterdir()) == []
