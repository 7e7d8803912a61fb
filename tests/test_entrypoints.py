import importlib
import tomllib
from pathlib import Path

import deckquiz.__main__ as module_main

PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


def test_python_m_delegates_to_cli(monkeypatch) -> None:
    runs: list[str] = []
    monkeypatch.setattr(module_main, "main_entry", lambda: runs.append("cli"))
    module_main.main()
    assert runs == ["cli"]


def test_console_script_target_exists() -> None:
    scripts = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))["project"]["scripts"]
    module_name, _, attr = scripts["deckquiz"].partition(":")
    assert callable(getattr(importlib.import_module(module_name), attr))
