from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_SECRET_HEADER = "x-device-shared-secret"
DEFAULT_TIMEOUT = 10.0

_BASE_URL_ENV = "API_BASE_URL"
_SECRET_ENV = "DEVICE_SECRET"
_SECRET_HEADER_ENV = "DEVICE_SECRET_HEADER"


@dataclass(frozen=True)
class CLIConfig:
    base_url: str = DEFAULT_BASE_URL
    secret: str = ""
    secret_header: str = DEFAULT_SECRET_HEADER
    timeout: float = DEFAULT_TIMEOUT


def _read_str(value: Optional[str], default: str) -> str:
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def load_config(
    base_url: Optional[str] = None,
    secret: Optional[str] = None,
    secret_header: Optional[str] = None,
) -> CLIConfig:
    url = base_url or os.getenv(_BASE_URL_ENV) or DEFAULT_BASE_URL
    if secret is None:
        secret = _read_str(os.getenv(_SECRET_ENV), "")
    if secret_header is None:
        secret_header = _read_str(os.getenv(_SECRET_HEADER_ENV), DEFAULT_SECRET_HEADER)
    return CLIConfig(
        base_url=url.rstrip("/"),
        secret=secret,
        secret_header=secret_header,
    )
