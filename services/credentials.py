"""Device shared-secret validation."""

from __future__ import annotations

from typing import FrozenSet, Iterable, Optional


class CredentialValidator:
    """Exact-match check of a device secret against a read-only allow-list."""

    def __init__(self, secrets: Iterable[str]) -> None:
        self._secrets: FrozenSet[str] = frozenset(secrets)

    def is_valid(self, secret: Optional[str]) -> bool:
        if not secret:
            return False
        return secret in self._secrets
