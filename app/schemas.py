"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.readings import Alert, AlertType, Reading


class DeviceReadingRequest(BaseModel):
    """Sensor information and extra metadata sent by a device."""

    model_config = ConfigDict(populate_by_name=True)

    firmware_version: str = Field(
        ...,
        alias="firmwareVersion",
        description="Firmware version reported by the device, expected in semantic versioning format.",
    )
    temperature: Decimal = Field(..., allow_inf_nan=False, description="Temperature in degrees Celsius.")
    humidity: Decimal = Field(..., allow_inf_nan=False, description="Relative humidity in percent.")

    def to_reading(self) -> Reading:
        return Reading(
            firmware_version=self.firmware_version,
            temperature=self.temperature,
            humidity=self.humidity,
        )


class AlertResponse(BaseModel):
    """A single alert raised by an evaluated reading."""

    model_config = ConfigDict(populate_by_name=True)

    alert_type: AlertType = Field(..., alias="alertType")
    message: str

    @classmethod
    def from_alert(cls, alert: Alert) -> "AlertResponse":
        return cls(alert_type=alert.alert_type, message=alert.message)


class ProblemDetails(BaseModel):
    """RFC 7807 error body."""

    type: str
    title: str
    status: int
    detail: Optional[str] = None


class ValidationProblemDetails(ProblemDetails):
    """Problem details carrying field-level validation errors."""

    errors: Dict[str, List[str]] = Field(default_factory=dict)
