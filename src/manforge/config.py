"""Configuration for the ``manforge`` command with XDG paths and precedence resolution.

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.manforge/`` on macOS and Windows. Only the data directory is used,
  for crash logs (see :func:`get_data_dir`).
* **Project config** -- an optional ``./manforge.json`` holding
  :class:`~manforge.models.GenerationOptions` fields, so a repository can pin
  its section, author, footers and output directory.
* **Precedence resolution** -- :func:`resolve_options` merges CLI flags,
  environment variables, the project config and the defaults.

Example ``manforge.json``::

    {
        "section": "8",
        "author": "Jane Doe <jane@example.com>",
        "directory": "docs/man",
        "bugs": "Report bugs at https://example.com/issues"
    }
"""

from __future__ import annotations

import json
import os
import platform
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from manforge.exceptions import ConfigError
from manforge.models import GenerationOptions

_APP_NAME = "manforge"
_PROJECT_CONFIG_FILENAME = "manforge.json"

ENV_OPTIONS: dict[str, str] = {
    "MANFORGE_SECTION": "section",
    "MANFORGE_DIRECTORY": "directory",
    "MANFORGE_TEMPLATE": "template",
    "MANFORGE_AUTHOR": "author",
}
"""Environment variables and the option each one sets."""


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/manforge/`` (default ``~/.local/share/manforge/``).
    On macOS/Windows: ``~/.manforge/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Project-local config ---


def load_project_config(directory: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load project-local configuration from ``manforge.json``.

    Args:
        directory: Where to look. Defaults to the current working directory.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = (directory or Path.cwd()) / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_options(
    cli_overrides: Optional[Mapping[str, Any]] = None,
    project_dir: Optional[Path] = None,
) -> GenerationOptions:
    """Build the effective :class:`~manforge.models.GenerationOptions`.

    Precedence (high to low):
        1. CLI flags (``cli_overrides``; ``None`` values are ignored)
        2. Environment variables (see :data:`ENV_OPTIONS`)
        3. Project config (``./manforge.json``)
        4. Defaults

    Raises:
        ConfigError: If the project config is unreadable or any layer
            produces values that fail validation.
    """
    merged: dict[str, Any] = {}

    project = load_project_config(project_dir)
    if project is not None:
        merged.update(project)

    for env_var, field in ENV_OPTIONS.items():
        value = os.environ.get(env_var)
        if value:
            merged[field] = value

    if cli_overrides:
        merged.update({k: v for k, v in cli_overrides.items() if v is not None})

    try:
        return GenerationOptions.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid generation options: {exc}") from exc
