# app/core/errors.py
"""
Errors raised by the crud layer.

Routers let these propagate; the handlers registered in app.main turn them into
``{"detail": message}`` responses with the matching status code.
"""


class ServiceError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    """Missing or malformed input, or an inverted date range."""

    status_code = 400


class ConflictError(ServiceError):
    """Requested dates are already blocked for the car."""

    status_code = 400


class NotFoundError(ServiceError):
    status_code = 404


class AuthorizationError(ServiceError):
    status_code = 401
