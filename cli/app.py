from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_alerts, render_health


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for submitting device readings to the climate monitor service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Service base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    secret: Optional[str] = typer.Option(
        None,
        "--secret",
        "-s",
        help="Device shared secret (defaults to DEVICE_SECRET env).",
    ),
    secret_header: Optional[str] = typer.Option(
        None,
        "--secret-header",
        help="Header carrying the device secret (defaults to x-device-shared-secret).",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(
        base_url=base_url,
        secret=secret,
        secret_header=secret_header,
    )
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


def _parse_decimal(value: str) -> Decimal:
    try:
        parsed = Decimal(value.strip())
    except InvalidOperation as exc:
        raise typer.BadParameter(f"{value!r} is not a number.") from exc
    if not parsed.is_finite():
        raise typer.BadParameter(f"{value!r} is not a finite number.")
    return parsed


@app.command("evaluate")
def evaluate_command(
    ctx: typer.Context,
    firmware: str = typer.Option(..., "--firmware", "-f", help="Firmware version, e.g. 1.0.0."),
    temperature: Decimal = typer.Option(
        ..., "--temperature", "-t", parser=_parse_decimal, help="Temperature reading."
    ),
    humidity: Decimal = typer.Option(
        ..., "--humidity", "-H", parser=_parse_decimal, help="Humidity reading."
    ),
) -> None:
    """Submit a reading for evaluation and display the raised alerts."""
    state = _get_state(ctx)
    typer.echo(f"Evaluating reading against {state.config.base_url} ...")
    alerts = state.client.evaluate_reading(
        firmware_version=firmware,
        temperature=temperature,
        humidity=humidity,
    )
    render_alerts(alerts)


@app.command("health")
def health_command(ctx: typer.Context) -> None:
    """Check that the service is up."""
    state = _get_state(ctx)
    render_health(state.client.get_health())
