"""Mapping of domain errors to JSON error responses."""

from aiohttp import web

from domainnav.core.errors import (
    DomainNavError,
    EntityNotFound,
    InvalidParent,
    SlugConflict,
    UnresolvedPath,
    ValidationError,
)

_STATUS: list[tuple[type[DomainNavError], int]] = [
    (UnresolvedPath, 404),
    (EntityNotFound, 404),
    (ValidationError, 400),
    (InvalidParent, 400),
    (SlugConflict, 409),
]


def error_response(error: DomainNavError, **extra: object) -> web.Response:
    """JSON error body with the status matching the error type."""
    status = 500
    for error_type, error_status in _STATUS:
        if isinstance(error, error_type):
            status = error_status
            break
    return web.json_response({"error": str(error), **extra}, status=status)
