from __future__ import annotations


class ApiError(Exception):
    """Base error rendered as ``{"message": ...}`` with ``status_code``."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400


class ForbiddenError(ApiError):
    status_code = 403


class NotFoundError(ApiError):
    status_code = 404


class UpstreamError(ApiError):
    status_code = 502


class ServiceUnavailableError(ApiError):
    status_code = 503
