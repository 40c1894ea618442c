# tests/test_cfg.py
# Testuje wczytanie środowiska do Settings (pydantic-settings).
import importlib

import pytest
from pydantic import ValidationError


def test_settings_loads(monkeypatch):
    # Ustaw zmienne zanim przeładujemy moduł
    monkeypatch.setenv("EXTENSIONS", "csv, .TXT")
    monkeypatch.setenv("SAMPLE_LINES", "5")
    monkeypatch.setenv("MAIL_TO", "a@example.com, b@example.com")
    monkeypatch.setenv("SMTP_STARTTLS", "true")

    from delim2xlsx import cfg
    importlib.reload(cfg)

    s = cfg.settings
    assert s.extension_list() == [".csv", ".txt"]
    assert s.SAMPLE_LINES == 5
    assert s.mail_recipients() == ["a@example.com", "b@example.com"]
    assert s.SMTP_STARTTLS is True
    assert s.ENCODING == "utf-8-sig"     # domyślna wartość
    assert s.MAIL_SUBJECT == "Arkusze"   # domyślna wartość

    # przywróć środowisko i ustawienia dla pozostałych testów
    monkeypatch.undo()
    importlib.reload(cfg)


def test_settings_defaults(monkeypatch):
    for name in ("EXTENSIONS", "SAMPLE_LINES", "OUTPUT_DIR", "KEEP_TEXT", "MAIL_TO"):
        monkeypatch.delenv(name, raising=False)
    from delim2xlsx.cfg import Settings

    s = Settings(_env_file=None)
    assert s.extension_list() == [".csv", ".tsv", ".txt"]
    assert s.SAMPLE_LINES == 2
    assert s.OUTPUT_DIR == ""
    assert s.KEEP_TEXT is False
    assert s.mail_recipients() == []


def test_settings_rejects_zero_sample_lines(monkeypatch):
    monkeypatch.setenv("SAMPLE_LINES", "0")
    from delim2xlsx.cfg import Settings

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
