"""Threshold checks that turn a reading into alerts."""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Iterable, Optional, Tuple

from models.readings import Alert, AlertType, Reading

ReadingCheck = Callable[[Reading], Optional[Alert]]

HUMIDITY_RANGE = (Decimal(0), Decimal(100))
TEMPERATURE_RANGE = (Decimal(-10), Decimal(50))

HUMIDITY_MESSAGE = "Humidity sensor is out of range."
TEMPERATURE_MESSAGE = "Temperature sensor is out of range."


def range_check(
    field: str,
    lower: Decimal,
    upper: Decimal,
    alert_type: AlertType,
    message: str,
) -> ReadingCheck:
    """Build a check that alerts when ``reading.<field>`` falls outside ``[lower, upper]``."""

    def check(reading: Reading) -> Optional[Alert]:
        value = getattr(reading, field)
        if value < lower or value > upper:
            return Alert(alert_type=alert_type, message=message)
        return None

    check.__name__ = f"{field}_range_check"
    return check


DEFAULT_CHECKS: Tuple[ReadingCheck, ...] = (
    range_check(
        "humidity",
        *HUMIDITY_RANGE,
        alert_type=AlertType.humidity_out_of_range,
        message=HUMIDITY_MESSAGE,
    ),
    range_check(
        "temperature",
        *TEMPERATURE_RANGE,
        alert_type=AlertType.temperature_out_of_range,
        message=TEMPERATURE_MESSAGE,
    ),
)


class ThresholdEvaluator:
    """Runs every check in order and collects the alerts they raise."""

    def __init__(self, checks: Iterable[ReadingCheck] = DEFAULT_CHECKS) -> None:
        self.checks: Tuple[ReadingCheck, ...] = tuple(checks)

    def evaluate(self, reading: Reading) -> Tuple[Alert, ...]:
        alerts = (check(reading) for check in self.checks)
        return tuple(alert for alert in alerts if alert is not None)
