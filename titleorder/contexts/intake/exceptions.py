"""Exceptions raised while talking to ClickUp."""

from typing import Optional


class NotAuthenticatedError(Exception):
    """No ClickUp access token has been obtained yet."""

    pass


class ClickUpAPIError(Exception):
    """
    A ClickUp request failed.

    Attributes:
        message: Error description
        endpoint: API path that was requested
        status_code: HTTP status, None for transport failures
    """

    def __init__(self, message: str, endpoint: str = "", status_code: Optional[int] = None):
        self.message = message
        self.endpoint = endpoint
        self.status_code = status_code

        parts = [message]
        if endpoint:
            parts.append(f"endpoint={endpoint}")
        if status_code is not None:
            parts.append(f"status={status_code}")

        super().__init__(" ".join(parts))
