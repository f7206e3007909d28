"""Builders for ``application/problem+json`` responses."""

from __future__ import annotations

from typing import Dict, List

from fastapi import status
from fastapi.responses import JSONResponse

from app.schemas import ProblemDetails, ValidationProblemDetails

PROBLEM_MEDIA_TYPE = "application/problem+json"

_BAD_REQUEST_TYPE = "https://tools.ietf.org/html/rfc9110#section-15.5.1"
_UNAUTHORIZED_TYPE = "https://tools.ietf.org/html/rfc9110#section-15.5.2"

VALIDATION_TITLE = "One or more validation errors occurred."
UNAUTHORIZED_DETAIL = "Device secret is not within the valid range."


def unauthorized_problem(detail: str = UNAUTHORIZED_DETAIL) -> JSONResponse:
    problem = ProblemDetails(
        type=_UNAUTHORIZED_TYPE,
        title="Unauthorized",
        status=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
    )
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
    )


def validation_problem(errors: Dict[str, List[str]]) -> JSONResponse:
    problem = ValidationProblemDetails(
        type=_BAD_REQUEST_TYPE,
        title=VALIDATION_TITLE,
        status=status.HTTP_400_BAD_REQUEST,
        errors=errors,
    )
    return JSONResponse(
        status_code=problem.status,
        content=problem.model_dump(exclude_none=True),
        media_type=PROBLEM_MEDIA_TYPE,
    )
