from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Dict, List

import httpx
import typer

from cli.config import CLIConfig


def _reading_body(firmware_version: str, temperature: Decimal, humidity: Decimal) -> bytes:
    # Numbers keep their exact Decimal text.
    return (
        f'{{"firmwareVersion": {json.dumps(firmware_version)}, '
        f'"temperature": {temperature}, "humidity": {humidity}}}'
    ).encode("utf-8")


class ApiClient:
    """Minimal HTTP client for the climate monitor service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def evaluate_reading(
        self, firmware_version: str, temperature: Decimal, humidity: Decimal
    ) -> List[Dict[str, Any]]:
        headers = {
            self._config.secret_header: self._config.secret,
            "content-type": "application/json",
        }
        body = _reading_body(firmware_version, temperature, humidity)
        try:
            response = self._client.post("/readings/evaluate", content=body, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        payload = response.json()
        if not isinstance(payload, list):
            raise typer.BadParameter("Unexpected response payload when evaluating reading.")
        return payload

    def get_health(self) -> Dict[str, Any]:
        try:
            response = self._client.get("/health")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    @staticmethod
    def _describe_problem(data: Dict[str, Any]) -> str | None:
        errors = data.get("errors") or {}
        if errors:
            return "; ".join(
                f"{field}: {' '.join(messages)}" for field, messages in errors.items()
            )
        return data.get("detail") or data.get("title")

    @classmethod
    def _handle_http_error(cls, exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = cls._describe_problem(data)
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
