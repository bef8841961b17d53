import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import InterfaceError, OperationalError

from librarium.exceptions.errors import (
    ConnectionFailure,
    ConstraintViolation,
    InvalidStateTransition,
    NotFound,
    UniqueViolation,
)

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": exc.to_dict()},
    )


async def constraint_violation_handler(request: Request, exc: ConstraintViolation):
    status_code = (
        status.HTTP_409_CONFLICT
        if isinstance(exc, UniqueViolation)
        else status.HTTP_400_BAD_REQUEST
    )
    return JSONResponse(status_code=status_code, content={"detail": exc.to_dict()})


async def invalid_state_handler(request: Request, exc: InvalidStateTransition):
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": exc.to_dict()},
    )


async def connection_failure_handler(request: Request, exc: Exception):
    logger.error(f"❌ Database unreachable while serving {request.url.path}: {exc}")
    failure = ConnectionFailure("Database is unavailable, try again later")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": failure.to_dict()},
    )


def setup_exception_handlers(app: FastAPI):
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(ConstraintViolation, constraint_violation_handler)
    app.add_exception_handler(InvalidStateTransition, invalid_state_handler)
    app.add_exception_handler(ConnectionFailure, connection_failure_handler)
    app.add_exception_handler(OperationalError, connection_failure_handler)
    app.add_exception_handler(InterfaceError, connection_failure_handler)
