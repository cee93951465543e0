from ._async_helper import run_async
from ._increment import apply_increments, increment, is_number
from ._log_helper import get_logger
from ._ncall import NCall
from ._provider import Provider
from ._yaml_loader import YamlLoader
from .data_model import DataModel, DataModelField, FrozenDataModel

__all__ = [
    "DataModel",
    "DataModelField",
    "FrozenDataModel",
    "NCall",
    "Provider",
    "YamlLoader",
    "apply_increments",
    "get_logger",
    "increment",
    "is_number",
    "run_async",
]
