from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.api import build_readings_router, router
from app.problems import validation_problem
from logging_config import configure_logging
from services.evaluation import build_default_service
from settings import get_settings

logger = logging.getLogger(__name__)


def _field_key(location: tuple) -> str:
    for part in location[1:]:
        if isinstance(part, str):
            return part[:1].upper() + part[1:]
    return "$"


def collect_validation_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        key = _field_key(tuple(error.get("loc", ())))
        errors.setdefault(key, []).append(str(error.get("msg", "Invalid value.")))
    return errors


async def request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = collect_validation_errors(exc)
    logger.warning(
        "Rejected malformed request body.",
        extra={"outcome": "malformed", "field": sorted(errors)},
    )
    return validation_problem(errors)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    build_default_service()
    try:
        yield
    finally:
        build_default_service.cache_clear()
        get_settings.cache_clear()


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(
        title="Climate Monitor",
        description="Evaluates device sensor readings and reports out-of-range alerts.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(build_readings_router(get_settings().secret_header))
    app.include_router(router)
    return app

app = create_app()
