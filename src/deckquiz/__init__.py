"""Browse card-service decks and review due cards as generated quizzes."""

from __future__ import annotations

import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

__all__ = ["__version__"]


def _checkout_version() -> str | None:
    """Version declared in pyproject.toml when running from a src checkout."""
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    if not pyproject.is_file():
        return None
    with pyproject.open("rb") as handle:
        project = tomllib.load(handle).get("project", {})
    if project.get("name") != "deckquiz":
        return None
    return project.get("version")


def _installed_version() -> str:
    try:
        return version("deckquiz")
    except PackageNotFoundError:
        return "0+unknown"


__version__ = _checkout_version() or _installed_version()
