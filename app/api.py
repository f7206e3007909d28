"""HTTP route definitions for the service."""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Callable, Coroutine, List, Optional, Union

from fastapi import APIRouter, Depends, Header, Request, Response, status
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute

from app.problems import unauthorized_problem, validation_problem
from app.schemas import (
    AlertResponse,
    DeviceReadingRequest,
    ProblemDetails,
    ValidationProblemDetails,
)
from models.readings import Alerts, EvaluationOutcome, InvalidFirmware, Unauthorized
from services.evaluation import ReadingEvaluationService, build_default_service
from settings import DEFAULT_SECRET_HEADER

router = APIRouter()


class DecimalJSONRequest(Request):
    """Request whose JSON body keeps fractional numbers as ``Decimal``."""

    async def json(self) -> Any:
        if not hasattr(self, "_json"):
            body = await self.body()
            self._json = json.loads(body, parse_float=Decimal)
        return self._json


class DecimalJSONRoute(APIRoute):
    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_handler = super().get_route_handler()

        async def handler(request: Request) -> Response:
            return await original_handler(DecimalJSONRequest(request.scope, request.receive))

        return handler


def get_evaluation_service() -> ReadingEvaluationService:
    return build_default_service()


def outcome_to_response(
    outcome: EvaluationOutcome,
) -> Union[List[AlertResponse], JSONResponse]:
    if isinstance(outcome, Unauthorized):
        return unauthorized_problem()
    if isinstance(outcome, InvalidFirmware):
        return validation_problem({"FirmwareVersion": [outcome.message]})
    if isinstance(outcome, Alerts):
        return [AlertResponse.from_alert(alert) for alert in outcome.alerts]
    raise TypeError(f"Unsupported evaluation outcome: {outcome!r}")


def build_readings_router(secret_header: str = DEFAULT_SECRET_HEADER) -> APIRouter:
    """Routes for reading evaluation, with the device secret read from ``secret_header``."""
    readings_router = APIRouter(route_class=DecimalJSONRoute)

    def get_device_secret(
        secret: Optional[str] = Header(
            None,
            alias=secret_header,
            description="Shared secret identifying the device.",
        ),
    ) -> Optional[str]:
        return secret

    @readings_router.post(
        "/readings/evaluate",
        response_model=List[AlertResponse],
        responses={
            status.HTTP_400_BAD_REQUEST: {"model": ValidationProblemDetails},
            status.HTTP_401_UNAUTHORIZED: {"model": ProblemDetails},
        },
        summary="Evaluate a sensor reading from a device and return possible alerts.",
        description=(
            "Receives sensor readings (temperature, humidity) together with the device "
            "firmware version, validates the device shared secret sent in the "
            f"`{secret_header}` header and the firmware version format, and returns "
            "the alerts raised by out-of-range values. Devices that receive a firmware "
            "format error request a firmware update from another service."
        ),
    )
    def evaluate_reading(
        payload: DeviceReadingRequest,
        secret: Optional[str] = Depends(get_device_secret),
        service: ReadingEvaluationService = Depends(get_evaluation_service),
    ) -> Union[List[AlertResponse], JSONResponse]:
        outcome = service.evaluate(secret, payload.to_reading())
        return outcome_to_response(outcome)

    return readings_router


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
