"""
Errors raised by the API client.
"""
from typing import Optional


class ClientError(Exception):
    """Base error for the API client."""


class ApiError(ClientError):
    """The server answered with an error status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class AuthenticationRequired(ApiError):
    """The server rejected the token. The client has already dropped it."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(401, message or "Authentication required")
