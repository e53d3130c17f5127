from __future__ import annotations
from typing import Any, Optional


class APIError(Exception):
    """Base class for every error raised by the SmartFile client."""


class ConfigurationError(APIError):
    """Missing or invalid credentials detected while building a client."""


class RequestError(APIError):
    """Client-side failure: transport error or retries exhausted."""

    def __init__(self, message: str, attempts: Optional[int] = None):
        super().__init__(message)
        self.attempts = attempts


class ResponseError(APIError):
    """Server answered with a non-success HTTP status."""

    def __init__(self, response: Any):
        self.response = response
        super().__init__(f"Server responded with error {self.status_code}")

    @property
    def status_code(self) -> int:
        return self.response.status_code
