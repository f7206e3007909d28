"""Semantic Versioning 2.0.0 validation."""

from __future__ import annotations

import re

_NUMERIC = r"0|[1-9]\d*"
_PRERELEASE_IDENTIFIER = rf"(?:{_NUMERIC}|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_BUILD_IDENTIFIER = r"[0-9a-zA-Z-]+"

SEMVER_PATTERN = re.compile(
    rf"(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_PRERELEASE_IDENTIFIER}(?:\.{_PRERELEASE_IDENTIFIER})*))?"
    rf"(?:\+(?P<build>{_BUILD_IDENTIFIER}(?:\.{_BUILD_IDENTIFIER})*))?",
    re.ASCII,
)


def is_valid_version(version: object) -> bool:
    """Return ``True`` when ``version`` is a complete ``MAJOR.MINOR.PATCH[-PRE][+BUILD]`` string."""
    if not isinstance(version, str):
        return False
    return SEMVER_PATTERN.fullmatch(version) is not None
