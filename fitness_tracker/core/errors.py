"""
Errors raised by the workouts API client.
str(error) is human-readable; the store publishes it as error_message.
"""

from __future__ import annotations


class WorkoutApiError(Exception):
    """Base class for every failure the API client reports."""


class InvalidEndpoint(WorkoutApiError):
    """Request URL could not be built (e.g. empty workout id)."""

    def __init__(self, detail: str):
        super().__init__(f"Invalid endpoint: {detail}")
        self.detail = detail


class TransportFailure(WorkoutApiError):
    """Connection, DNS or timeout failure; no HTTP response was received."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Could not reach the workouts server: {str(cause) or type(cause).__name__}")
        self.cause = cause


class RequestRejected(WorkoutApiError):
    """Server answered with a status that is not success for this operation."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"Request rejected by server (HTTP {status_code})")
        self.status_code = status_code
        self.body = body


class MalformedRecord(WorkoutApiError):
    """Payload could not be decoded into a workout record."""

    def __init__(self, detail: str = "unexpected response format"):
        super().__init__(f"Malformed workout data: {detail}")
        self.detail = detail
