import os

import yaml

from .exceptions import NotFoundError


class YamlLoader:
    @staticmethod
    def load(path: str) -> dict:
        with open(path, "r", encoding="utf-8") as file:
            return yaml.safe_load(file)

    @staticmethod
    def load_data(file: str, folder: str | None = None) -> dict:
        folder = folder or "data"
        path = os.path.join(
            folder, file if file.endswith(".yml") else f"{file}.yml"
        )
        if not os.path.exists(path):
            raise NotFoundError(f"404 NOT FOUND - data-file:{path}")
        return YamlLoader.load(path) or {}
