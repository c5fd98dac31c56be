"""Preflight checks run by the CLI scripts before they open the database.

Covers the interpreter, installed dependencies, the scheduling rules file
and the SQLite database location.
"""

from __future__ import annotations

import importlib.util
import os
import sys
from collections.abc import Sequence
from pathlib import Path

MIN_PYTHON = (3, 12)
REQUIRED_MODULES = ("pydantic", "pandas", "sqlalchemy", "unidecode")
INSTALL_HINT = 'Install project dependencies with `python -m pip install -e ".[dev]"`.'


def check_python(
    min_python: tuple[int, int] = MIN_PYTHON,
    python_version: tuple[int, int] | None = None,
) -> None:
    current = python_version or (sys.version_info.major, sys.version_info.minor)
    if current < min_python:
        raise RuntimeError(
            f"leaguesched needs Python {min_python[0]}.{min_python[1]}+, "
            f"this is {current[0]}.{current[1]}. {INSTALL_HINT}"
        )


def missing_modules(modules: Sequence[str] = REQUIRED_MODULES) -> list[str]:
    return sorted(mod for mod in modules if importlib.util.find_spec(mod) is None)


def check_rules_file(rules_path: str | Path | None = None) -> Path:
    """Return the rules file to use, failing if it is not there.

    ``None`` means the repository's config/rules.json.
    """
    if rules_path is None:
        from leaguesched.engine.rules import DEFAULT_RULES_PATH
        rules_path = DEFAULT_RULES_PATH
    path = Path(rules_path)
    if not path.is_file():
        raise RuntimeError(f"Rules file not found: {path}")
    return path


def check_db_path(db_path: str | Path) -> None:
    """Fail early if the SQLite file cannot be created or written."""
    if str(db_path) == ":memory:":
        return
    path = Path(db_path)
    if path.is_dir():
        raise RuntimeError(f"Database path is a directory: {path}")
    if path.exists():
        if not os.access(path, os.W_OK):
            raise RuntimeError(f"Database is not writable: {path}")
        return

    # Nearest existing parent must let us create the missing directories
    parent = path.parent.resolve()
    while not parent.exists():
        parent = parent.parent
    if not parent.is_dir() or not os.access(parent, os.W_OK):
        raise RuntimeError(f"Cannot create database under {parent}")


def validate_runtime(
    db_path: str | Path | None = None,
    rules_path: str | Path | None = None,
    check_rules: bool = False,
    required_modules: Sequence[str] = REQUIRED_MODULES,
    python_version: tuple[int, int] | None = None,
) -> None:
    """Raise RuntimeError describing the first thing that would stop a script."""
    check_python(python_version=python_version)

    missing = missing_modules(required_modules)
    if missing:
        raise RuntimeError(f"Missing required Python modules: {', '.join(missing)}. {INSTALL_HINT}")

    if check_rules:
        check_rules_file(rules_path)
    if db_path is not None:
        check_db_path(db_path)
