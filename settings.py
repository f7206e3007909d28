from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import FrozenSet, Optional


_SECRETS_ENV = "DEVICE_SECRETS"
_SECRETS_FILE_ENV = "DEVICE_SECRETS_FILE"
_SECRET_HEADER_ENV = "DEVICE_SECRET_HEADER"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_DEVICE_SECRETS = (
    "secret-ABC-123-XYZ-001",
    "secret-ABC-123-XYZ-002",
    "secret-ABC-123-XYZ-003",
)
DEFAULT_SECRET_HEADER = "x-device-shared-secret"


@dataclass(frozen=True)
class Settings:
    device_secrets: FrozenSet[str]
    secret_header: str
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _parse_secrets(lines: list[str]) -> FrozenSet[str]:
    secrets = set()
    for line in lines:
        candidate = line.strip()
        if not candidate or candidate.startswith("#"):
            continue
        secrets.add(candidate)
    return frozenset(secrets)


def _read_secrets_file(path: Optional[str]) -> Optional[FrozenSet[str]]:
    if not path:
        return None
    secrets_path = Path(path)
    if not secrets_path.is_file():
        return None
    secrets = _parse_secrets(secrets_path.read_text().splitlines())
    return secrets or None


def _read_device_secrets(default: tuple[str, ...]) -> FrozenSet[str]:
    from_file = _read_secrets_file(_read_str_env(_SECRETS_FILE_ENV, ""))
    if from_file is not None:
        return from_file

    value = os.getenv(_SECRETS_ENV)
    if value is None:
        return frozenset(default)
    secrets = _parse_secrets(value.split(","))
    return secrets or frozenset(default)


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        device_secrets=_read_device_secrets(DEFAULT_DEVICE_SECRETS),
        secret_header=_read_str_env(_SECRET_HEADER_ENV, DEFAULT_SECRET_HEADER).lower(),
        log_level=_read_log_level("INFO"),
    )
