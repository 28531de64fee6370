from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm.exc import StaleDataError

from core.logging import logger
from labseat import (
    AlreadyConfirmedError,
    LabSeatError,
    NotFoundError,
    PackingInfeasibleError,
    RefreshDeniedError,
    ValidationError,
)
from orchestrator.exceptions import AllocationExistsError, OrchestrationError


def _error(status_code: int, detail: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail, **extra})


async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, str(exc))


async def handle_validation(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def handle_refresh_denied(request: Request, exc: RefreshDeniedError) -> JSONResponse:
    return _error(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        refresh_count=exc.refresh_count,
        max_refreshes=exc.max_refreshes,
    )


async def handle_already_confirmed(request: Request, exc: AlreadyConfirmedError) -> JSONResponse:
    selected = exc.selected_problem.as_dict() if exc.selected_problem else None
    return _error(status.HTTP_409_CONFLICT, str(exc), selected_problem=selected)


async def handle_packing_infeasible(request: Request, exc: PackingInfeasibleError) -> JSONResponse:
    return _error(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        unplaced=[team.as_dict() for team in exc.unplaced],
    )


async def handle_allocation_exists(request: Request, exc: AllocationExistsError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc), existing=exc.existing)


async def handle_orchestration(request: Request, exc: OrchestrationError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def handle_lab_seat(request: Request, exc: LabSeatError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, str(exc))


async def handle_stale_data(request: Request, exc: StaleDataError) -> JSONResponse:
    logger.warning("Concurrent update rejected for {}", request.url.path)
    return _error(status.HTTP_409_CONFLICT, "The assignment was modified concurrently, please retry")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NotFoundError, handle_not_found)
    app.add_exception_handler(ValidationError, handle_validation)
    app.add_exception_handler(RefreshDeniedError, handle_refresh_denied)
    app.add_exception_handler(AlreadyConfirmedError, handle_already_confirmed)
    app.add_exception_handler(PackingInfeasibleError, handle_packing_infeasible)
    app.add_exception_handler(LabSeatError, handle_lab_seat)
    app.add_exception_handler(AllocationExistsError, handle_allocation_exists)
    app.add_exception_handler(OrchestrationError, handle_orchestration)
    app.add_exception_handler(StaleDataError, handle_stale_data)
