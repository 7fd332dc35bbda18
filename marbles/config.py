"""
Harness configuration and named profiles.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, validator

from .clock import DEFAULT_MAX_DISPATCHES
from .diagram import DEFAULT_TIME_UNIT
from .errors import ConfigError

LOG = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent / "configs"
PROFILES_PATH = CONFIG_DIR / "profiles.yaml"
ENV_PROFILE_VAR = "MARBLES_PROFILE"
DEFAULT_PROFILE = "default"


class HarnessConfig(BaseModel):
    """Settings for one :class:`~marbles.harness.VirtualTime` instance."""

    profile: str = DEFAULT_PROFILE
    time_unit: int = DEFAULT_TIME_UNIT
    completion_gap_significant: bool = False
    max_dispatches: Optional[int] = DEFAULT_MAX_DISPATCHES

    model_config = ConfigDict(frozen=True, extra="forbid")

    @validator("time_unit", pre=True)
    def _validate_time_unit(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError("time_unit must be a positive integer")
        return value

    @validator("max_dispatches")
    def _validate_max_dispatches(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value <= 0:
            raise ValueError("max_dispatches must be positive")
        return value

    @classmethod
    def from_profile(cls, name: str, path: Optional[Path] = None) -> "HarnessConfig":
        profiles = load_profiles(path)
        if name not in profiles:
            raise ConfigError(f"Unknown harness profile '{name}'")
        values = dict(profiles[name] or {})
        values.setdefault("profile", name)
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid harness profile '{name}': {exc}") from exc


def load_profiles(path: Optional[Path] = None) -> Dict[str, Dict[str, Any]]:
    """
    Read profile definitions from ``path`` (the bundled file by default).
    """

    target = Path(path) if path is not None else PROFILES_PATH
    try:
        with target.open("r", encoding="utf-8") as handle:
            profiles = yaml.safe_load(handle) or {}
    except FileNotFoundError:
        LOG.warning("Profile file %s not found; using built-in defaults.", target)
        return {DEFAULT_PROFILE: {}}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse profile file {target}") from exc

    if not isinstance(profiles, dict):
        raise ConfigError(f"Profile file {target} must contain a mapping")
    return profiles


def resolve_config(profile: Optional[str] = None, path: Optional[Path] = None) -> HarnessConfig:
    """
    Build the config for ``profile``, falling back to ``$MARBLES_PROFILE``.
    """

    name = profile or os.environ.get(ENV_PROFILE_VAR) or DEFAULT_PROFILE
    return HarnessConfig.from_profile(name, path)
