"""
Build Settings
==============

Environment-driven settings for scripts that build mode graphs.

Variables (also read from a `.env` file):
- MODEGRAPH_PROFILES_PATH: JSON file of travel mode profiles
- MODEGRAPH_MAX_WORKERS: thread pool size for multi-mode builds
- MODEGRAPH_LOG_LEVEL: log level for `configure_logging`
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from modegraph.modes.registry import TravelModeRegistry


@dataclass(frozen=True)
class BuildSettings:
    profiles_path: Optional[str] = None
    max_workers: Optional[int] = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        dotenv: bool = True,
    ) -> "BuildSettings":
        """
        Read settings from `environ` (defaults to `os.environ`).

        Parameters
        ----------
        environ : Mapping, optional
            Variables to read instead of the process environment
        dotenv : bool
            Load a `.env` file into the process environment first
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        max_workers = environ.get("MODEGRAPH_MAX_WORKERS")
        if max_workers is not None:
            try:
                max_workers = int(max_workers)
            except ValueError:
                raise ValueError(
                    f"MODEGRAPH_MAX_WORKERS must be an integer, got {max_workers!r}"
                ) from None
            if max_workers < 1:
                raise ValueError("MODEGRAPH_MAX_WORKERS must be at least 1")

        return cls(
            profiles_path=environ.get("MODEGRAPH_PROFILES_PATH") or None,
            max_workers=max_workers,
            log_level=environ.get("MODEGRAPH_LOG_LEVEL", "WARNING").upper(),
        )


def load_registry(settings: Optional[BuildSettings] = None) -> TravelModeRegistry:
    """Profiles from the configured JSON file, or the built-in table."""
    settings = settings or BuildSettings.from_env()
    if settings.profiles_path:
        return TravelModeRegistry.from_json_file(settings.profiles_path)
    return TravelModeRegistry.default()


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a basic stderr handler for command-line use."""
    level = level or BuildSettings.from_env().log_level
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
