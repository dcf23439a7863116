"""
services.errors - Exceptions raised by the service layer.

The API layer turns these into JSON error responses.
"""

from __future__ import annotations


class ServiceError(Exception):
    status_code = 400


class ValidationError(ServiceError):
    """Input failed validation; ``messages`` lists every problem found."""

    def __init__(self, messages: list[str] | str):
        if isinstance(messages, str):
            messages = [messages]
        self.messages = list(messages)
        super().__init__("; ".join(self.messages))


class NotFoundError(ServiceError):
    status_code = 404
