from ._filter import (
    AndFilter,
    BetweenCondition,
    CompiledFilter,
    ComparisonCondition,
    ExistenceCondition,
    FilterCompiler,
    NotFilter,
    OrFilter,
    StringCondition,
    compile_filter,
    match_filter,
    parse_filter,
    simplify_filter,
)
from ._models import (
    DynamoKeyType,
    DynamoOption,
    PageResult,
    QueryResult,
    ScanResult,
)
from .dummy import DummyDynamoScanService, DummyDynamoService
from .query import DynamoQueryService
from .scan import DynamoScanService
from .service import DynamoService
from .storage import DummyStorageService, DynamoStorageService, StorageService

__all__ = [
    "AndFilter",
    "BetweenCondition",
    "CompiledFilter",
    "ComparisonCondition",
    "DummyDynamoScanService",
    "DummyDynamoService",
    "DummyStorageService",
    "DynamoKeyType",
    "DynamoOption",
    "DynamoQueryService",
    "DynamoScanService",
    "DynamoService",
    "DynamoStorageService",
    "ExistenceCondition",
    "FilterCompiler",
    "NotFilter",
    "OrFilter",
    "PageResult",
    "QueryResult",
    "ScanResult",
    "StorageService",
    "StringCondition",
    "compile_filter",
    "match_filter",
    "parse_filter",
    "simplify_filter",
]
