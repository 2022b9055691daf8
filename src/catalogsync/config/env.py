"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from dotenv import load_dotenv

from .errors import MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

log = getLogger(__name__)

PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parents[3]
ENV_FILENAMES: Final[tuple[str, ...]] = (".env.local", ".env")


def env_file_candidates(roots: Iterable[Path] | None = None) -> list[Path]:
    """Return existing dotenv files in load order (earlier files win)."""

    search_roots = list(roots) if roots is not None else [Path.cwd(), PROJECT_ROOT]
    seen: set[Path] = set()
    found: list[Path] = []
    for root in search_roots:
        for filename in ENV_FILENAMES:
            candidate = (root / filename).resolve()
            if candidate in seen or not candidate.is_file():
                continue
            seen.add(candidate)
            found.append(candidate)
    return found


def load_environment(roots: Iterable[Path] | None = None) -> list[Path]:
    """Layer dotenv files into ``os.environ`` without overriding existing values."""

    loaded = env_file_candidates(roots)
    for path in loaded:
        load_dotenv(path, override=False)
        log.debug("Loaded environment from %s", path)
    return loaded


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value.strip()

    if missing:
        missing_list = ", ".join(sorted(missing))
        raise MissingConfigurationError(f"Missing configuration for: {missing_list}")

    return values


def first_env_var(names: Sequence[str]) -> str | None:
    """Return the first non-blank value among ``names``."""

    for name in names:
        value = os.getenv(name)
        if value is not None and value.strip():
            return value.strip()
    return None
