"""Orchestration of the reading evaluation pipeline."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Callable, Optional

from models.readings import Alerts, EvaluationOutcome, InvalidFirmware, Reading, Unauthorized
from services.credentials import CredentialValidator
from services.semver import is_valid_version
from services.thresholds import ThresholdEvaluator
from settings import get_settings

logger = logging.getLogger(__name__)

INVALID_FIRMWARE_MESSAGE = "The firmware value does not match semantic versioning format."


class ReadingEvaluationService:
    """Checks the device secret, then the firmware version, then the sensor thresholds.

    The credential and firmware checks short-circuit: a rejected reading never
    reaches the threshold checks. Every call is independent and side-effect free
    apart from logging, so a single instance can be shared across workers.
    """

    def __init__(
        self,
        credentials: CredentialValidator,
        thresholds: ThresholdEvaluator,
        version_validator: Callable[[str], bool] = is_valid_version,
    ) -> None:
        self.credentials = credentials
        self.thresholds = thresholds
        self.version_validator = version_validator

    def evaluate(self, secret: Optional[str], reading: Reading) -> EvaluationOutcome:
        if not self.credentials.is_valid(secret):
            logger.warning(
                "Rejected reading with unknown device secret.",
                extra={"outcome": "unauthorized"},
            )
            return Unauthorized()

        if not self.version_validator(reading.firmware_version):
            logger.warning(
                "Rejected reading with invalid firmware version.",
                extra={
                    "outcome": "invalid_firmware",
                    "firmware_version": reading.firmware_version,
                },
            )
            return InvalidFirmware(message=INVALID_FIRMWARE_MESSAGE)

        alerts = self.thresholds.evaluate(reading)
        logger.info(
            "Evaluated reading.",
            extra={
                "outcome": "alerts",
                "firmware_version": reading.firmware_version,
                "alert_count": len(alerts),
                "alert_types": [alert.alert_type.value for alert in alerts],
            },
        )
        return Alerts(alerts=alerts)


@lru_cache
def build_default_service() -> ReadingEvaluationService:
    """Factory that wires the service with the configured secret allow-list."""
    settings = get_settings()
    return ReadingEvaluationService(
        credentials=CredentialValidator(settings.device_secrets),
        thresholds=ThresholdEvaluator(),
    )
