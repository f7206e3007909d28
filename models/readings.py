"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Tuple, Union


class AlertType(str, Enum):
    """Kinds of out-of-range findings a reading can raise."""

    humidity_out_of_range = "HumidityOutOfRange"
    temperature_out_of_range = "TemperatureOutOfRange"


@dataclass(frozen=True, slots=True)
class Reading:
    """A single sensor payload submitted by a device."""

    firmware_version: str
    temperature: Decimal
    humidity: Decimal


@dataclass(frozen=True, slots=True)
class Alert:
    alert_type: AlertType
    message: str


@dataclass(frozen=True, slots=True)
class Unauthorized:
    """The device secret was missing or not in the allow-list."""


@dataclass(frozen=True, slots=True)
class InvalidFirmware:
    """The firmware version is not a semantic version."""

    message: str


@dataclass(frozen=True, slots=True)
class Alerts:
    """The reading was accepted; ``alerts`` may be empty."""

    alerts: Tuple[Alert, ...] = ()


EvaluationOutcome = Union[Unauthorized, InvalidFirmware, Alerts]
