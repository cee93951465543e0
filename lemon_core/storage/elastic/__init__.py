from ._errors import as_error, as_json, handler, parse_meta
from ._hangul import (
    as_alphabet_key_strokes,
    as_basic_jamo_sequence,
    as_choseong_sequence,
    as_jamo_sequence,
    is_hangul,
)
from ._models import (
    Elastic6Option,
    ErrorReason,
    ErrorReasonDetail,
    IndexInfo,
    ParsedVersion,
    SearchResult,
    SimpleSearchResult,
)
from ._script import UpdateConverter, prepare_update
from ._settings import DECOMPOSED_FIELD, QWERTY_FIELD, prepare_settings
from ._version import is_latest_os2, is_old_es6, is_old_es71, parse_version
from .dummy import DummyElastic6Service
from .query import Elastic6QueryService, build_query_body
from .service import Elastic6Service, RetryOptions

__all__ = [
    "DECOMPOSED_FIELD",
    "DummyElastic6Service",
    "Elastic6Option",
    "Elastic6QueryService",
    "Elastic6Service",
    "ErrorReason",
    "ErrorReasonDetail",
    "IndexInfo",
    "ParsedVersion",
    "QWERTY_FIELD",
    "RetryOptions",
    "SearchResult",
    "SimpleSearchResult",
    "UpdateConverter",
    "as_alphabet_key_strokes",
    "as_basic_jamo_sequence",
    "as_choseong_sequence",
    "as_error",
    "as_json",
    "build_query_body",
    "handler",
    "is_hangul",
    "is_latest_os2",
    "is_old_es6",
    "is_old_es71",
    "parse_meta",
    "parse_version",
    "prepare_settings",
    "prepare_update",
]
