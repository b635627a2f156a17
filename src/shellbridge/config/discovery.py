"""Locate ``shellbridge.toml``.

Search order:

1. ``SHELLBRIDGE_CONFIG``, exclusively when set.
2. The start directory (default: cwd) and each of its parents.
3. The per-user config directory, ``$XDG_CONFIG_HOME/shellbridge``
   (``~/.config/shellbridge`` when the variable is unset).
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

CONFIG_FILENAME = "shellbridge.toml"
CONFIG_ENV_VAR = "SHELLBRIDGE_CONFIG"


def user_config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    return (Path(base) if base else Path.home() / ".config") / "shellbridge"


def candidate_paths(start: Path | None = None) -> Iterator[Path]:
    """Yield every location searched for a config file, nearest first."""
    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        yield directory / CONFIG_FILENAME
    yield user_config_dir() / CONFIG_FILENAME


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file to read, or None when there is none."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override).expanduser()
        return path if path.is_file() else None
    return next((path for path in candidate_paths(start) if path.is_file()), None)
