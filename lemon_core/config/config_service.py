"""
Configuration read from the environment.
"""

from __future__ import annotations

__all__ = ["ConfigService", "marshal"]

import logging
import os
from importlib import metadata
from typing import Any, Callable, Literal, Mapping

from ..core import Provider

Stage = Literal["local", "dev", "prod"]


def marshal(
    obj: Any,
    filter: Callable[[str, Any], Any],
    name: str = "",
    result: list | None = None,
) -> list:
    """Flatten nested dicts and lists into dotted names.

    Args:
        obj:
            Object to flatten.
        filter:
            Called with the dotted name and the leaf value.
            None results are dropped.
        name:
            Name of the current node.
        result:
            List to append to.
    """
    result = [] if result is None else result
    if isinstance(obj, dict):
        for key, value in obj.items():
            marshal(
                value, filter, f"{name}.{key}" if name else f"{key}", result
            )
    elif isinstance(obj, list):
        for index, value in enumerate(obj):
            child = f"{name}.{index}" if name else f"{index}"
            marshal(value, filter, child, result)
    else:
        line = filter(name, obj)
        if line is not None:
            result.append(line)
    return result


class ConfigService(Provider):
    """Cached string settings from the environment."""

    base: Mapping[str, Any] | None
    package: str

    _config: dict[str, str]
    _env: Mapping[str, Any]

    def __init__(
        self,
        base: Mapping[str, Any] | None = None,
        package: str = "lemon-core",
        logger: logging.Logger | None = None,
    ):
        """Initialize.

        Args:
            base:
                Settings to load, defaults to `os.environ`.
            package:
                Distribution name reported by `get_service()`.
            logger:
                Logger to use, defaults to the module logger.
        """
        super().__init__(logger=logger)
        self.base = base
        self.package = package
        self._config = dict()
        self._env = dict()

    def hello(self) -> str:
        return "config-service"

    def init(self) -> ConfigService:
        env = self.base if self.base is not None else os.environ
        self._env = env
        pairs = marshal(dict(env), lambda key, value: (key, value))
        self._config = {key: f"{value}" for key, value in pairs if key}
        return self

    def all(self) -> dict[str, str]:
        return dict(self._config)

    def get(self, key: str) -> str | None:
        value = self._config.get(key)
        if value is None:
            value = self._env.get(key)
        return None if value is None else f"{value}"

    def get_stage(self) -> Stage:
        stage = f"{self.get('STAGE') or self.get('stage') or ''}".lower()
        if stage in ("develop", "development", "dev"):
            return "dev"
        if stage in ("production", "product", "prod"):
            return "prod"
        return "local"

    def _metadata(self) -> Any:
        try:
            return metadata.metadata(self.package)
        except metadata.PackageNotFoundError:
            self._logger.warning("! package not found = %s", self.package)
            return None

    def get_service(self) -> str:
        meta = self._metadata()
        return f"{meta['Name']}" if meta is not None else ""

    def get_version(self) -> str:
        meta = self._metadata()
        return f"{meta['Version']}" if meta is not None else ""
