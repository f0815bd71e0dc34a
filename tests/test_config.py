from pathlib import Path

import pytest

from tictactoe import config


def test_log_file_from_env(monkeypatch, tmp_path: Path):
    monkeypatch.delenv("TTT_LOG_FILE", raising=False)
    assert config.log_file() is None
    monkeypatch.setenv("TTT_LOG_FILE", str(tmp_path / "game.log"))
    assert config.log_file() == tmp_path / "game.log"


@pytest.mark.parametrize(
    "raw,expected",
    [(None, 0.1), ("250", 0.25), ("1", 0.01), ("99999", 1.0), ("fast", 0.1)],
)
def test_poll_interval(monkeypatch, raw, expected):
    if raw is None:
        monkeypatch.delenv("TTT_POLL_MS", raising=False)
    else:
        monkeypatch.setenv("TTT_POLL_MS", raw)
    assert config.poll_interval() == pytest.approx(expected)
