"""Failure kinds raised by the flow generation client."""

from __future__ import annotations

USER_MESSAGE = (
    "An error occurred while generating prompts. "
    "Please check the API configuration and try again."
)


class GenerationError(Exception):
    """Base failure; `str()` carries the detail, `user_message` is safe to show."""

    kind = "generation"
    user_message = USER_MESSAGE

    def __init__(self, detail: str, cause: BaseException | None = None):
        super().__init__(detail)
        self.detail = detail
        self.cause = cause


class ValidationError(GenerationError):
    kind = "validation"
    user_message = "Please upload at least the Start Frame."


class TransportError(GenerationError):
    kind = "transport"


class SchemaViolationError(GenerationError):
    kind = "schema"
