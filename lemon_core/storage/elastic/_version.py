"""
Engine version parsing.
"""

from __future__ import annotations

__all__ = ["is_latest_os2", "is_old_es6", "is_old_es71", "parse_version"]

import re

from ._models import ParsedVersion

VERSION_PATTERN = re.compile(
    r"^(\d{1,2})(?:\.(\d+)(?:\.(\d+))?)?"
    r"(?:-([0-9A-Za-z][0-9A-Za-z.-]*))?"
    r"(?:\+([0-9A-Za-z][0-9A-Za-z.-]*))?$"
)


def parse_version(text: str | float | None) -> ParsedVersion:
    """Parse a version like "7", "6.8.1" or "1.2.3-alpha+build.001".

    Engines with major version below 6 are OpenSearch, others
    are Elasticsearch. On failure the error is set and the major
    is the leading number of the text (or 0).
    """
    text = "" if text is None else f"{text}".strip()
    match = VERSION_PATTERN.match(text)
    if match is None:
        leading = re.match(r"^\d+", text)
        return ParsedVersion(
            major=int(leading.group(0)) if leading else 0,
            error=f"@version[{text}] is invalid - fail to parse",
        )
    major = int(match.group(1))
    return ParsedVersion(
        engine="os" if major < 6 else "es",
        major=major,
        minor=int(match.group(2) or 0),
        patch=int(match.group(3) or 0),
        prerelease=match.group(4),
        build=match.group(5),
    )


def is_old_es6(parsed: ParsedVersion) -> bool:
    return parsed.engine == "es" and parsed.major < 7


def is_old_es71(parsed: ParsedVersion) -> bool:
    return parsed.engine == "es" and parsed.major == 7 and parsed.minor == 1


def is_latest_os2(parsed: ParsedVersion) -> bool:
    return parsed.engine == "os" and parsed.major >= 2
