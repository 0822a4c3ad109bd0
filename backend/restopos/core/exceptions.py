"""Domain exceptions and their HTTP translations.

Services raise these; the handlers registered by ``register_exception_handlers``
turn them into JSON error responses so no domain failure escapes the API
boundary as a 500.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class RestoPosError(Exception):
    """Base class for recoverable domain errors."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(RestoPosError):
    """User input failed a precondition (empty order, missing table, ...)."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY


class NotFoundError(RestoPosError):
    """An operation referenced an entity id that is no longer present."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class VersionConflictError(RestoPosError):
    """The caller acted on a stale copy of an order."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, entity_id, expected: int, current: int):
        self.entity_id = entity_id
        self.expected = expected
        self.current = current
        super().__init__(
            f"Version conflict on {entity_id}: expected {expected}, current {current}"
        )


class ExternalServiceError(RestoPosError):
    """A collaborator (AI, persistence, email, messaging) failed or timed out."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(message)


async def _handle_restopos_error(request: Request, exc: RestoPosError) -> JSONResponse:
    if isinstance(exc, NotFoundError):
        logger.warning(f"{request.method} {request.url.path}: {exc.message}")
    elif isinstance(exc, ExternalServiceError):
        logger.error(f"{exc.service} failed during {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain exception handler to the application."""
    app.add_exception_handler(RestoPosError, _handle_restopos_error)
