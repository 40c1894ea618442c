# tests/test_launch.py
# Testuje otwieranie wyników domyślną aplikacją (tasks.launch) – Popen podmieniony.
from pathlib import Path

import pytest

from delim2xlsx.tasks import launch


@pytest.fixture
def popen_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(launch.subprocess, "Popen", lambda args: calls.append(args))
    return calls


@pytest.mark.parametrize("platform, opener", [("linux", "xdg-open"), ("darwin", "open")])
def test_open_file_uses_platform_opener(tmp_path: Path, monkeypatch, popen_calls, platform, opener):
    f = tmp_path / "a.xlsx"
    f.write_bytes(b"x")
    monkeypatch.setattr(launch.sys, "platform", platform)

    launch.open_file(f)

    assert popen_calls == [[opener, str(f)]]


def test_open_file_missing(tmp_path: Path, popen_calls):
    with pytest.raises(FileNotFoundError):
        launch.open_file(tmp_path / "nie_ma.xlsx")
    assert popen_calls == []
