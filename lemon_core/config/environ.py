"""
Environment loaded from `env/<profile>.yml`.

The profile selects the YAML file and the stage selects the group
in it, like `ENV=lemon STAGE=dev`.
"""

from __future__ import annotations

__all__ = ["load_environ", "load_profile"]

import logging
import os
from typing import Any, Mapping

from ..core import YamlLoader
from ..core.exceptions import NotFoundError

_logger = logging.getLogger(__name__)


def _as_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return f"{value}"


def load_environ(
    env: Mapping[str, str] | None = None,
    profile: str | None = None,
    stage: str | None = None,
    env_path: str | None = None,
) -> dict[str, str]:
    """Merge the environment with the profile file.

    Args:
        env:
            Current environment, defaults to `os.environ`.
        profile:
            Profile name, defaults to PROFILE or ENV, else "none".
        stage:
            Stage group, defaults to STAGE or NODE_ENV, else "local".
        env_path:
            Folder of the profile files, defaults to "./env".

    Returns:
        New environment. Values starting with "!" replace the current
        ones, lists are joined with ", " and other values are only set
        when missing.
    """
    origin = dict(os.environ if env is None else env)
    profile = profile or origin.get("PROFILE") or origin.get("ENV") or "none"
    stage = stage or origin.get("STAGE") or origin.get("NODE_ENV") or "local"
    _logger.info("! PROFILE=%s STAGE=%s", profile, stage)

    file = profile if profile.endswith(".yml") else f"{profile}.yml"
    path = f"{env_path or './env'}/{file}"
    if not os.path.exists(path):
        raise NotFoundError(f"FILE NOT FOUND:{path}")
    _logger.info('! loading yml-file: "%s"', path)
    doc = YamlLoader.load(path) or {}
    source = doc.get(stage) or {}

    values: dict[str, str] = {}
    for key, value in source.items():
        if isinstance(value, str) and value.startswith("!"):
            # force to override
            values[key] = value[1:]
        elif isinstance(value, list):
            values[key] = ", ".join(_as_str(v) for v in value)
        elif key not in origin:
            values[key] = _as_str(value)
    values["STAGE"] = values.get("STAGE") or stage
    return origin | values


def load_profile(
    env: Mapping[str, str] | None = None,
    env_path: str | None = None,
) -> str:
    """Name of the AWS profile to use, from the NAME of the environment."""
    merged = load_environ(env, env_path=env_path)
    name = merged.get("NAME") or ""
    profile = name if name != "none" else ""
    if profile:
        _logger.info("! PROFILE = %s", profile)
    return profile
