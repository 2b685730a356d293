"""Structured error handling — error categories, exceptions, and tool error model."""

from __future__ import annotations

from enum import Enum

import httpx
from pydantic import BaseModel


class ErrorCategory(str, Enum):
    """Categories of errors for diagnostics."""

    CONFIG_INVALID = "CONFIG_INVALID"
    URL_INVALID = "URL_INVALID"
    API_ERROR = "API_ERROR"
    EMPTY_RESULT = "EMPTY_RESULT"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    MALFORMED_METADATA = "MALFORMED_METADATA"
    UNKNOWN = "UNKNOWN"


class LinkInfoError(Exception):
    """Base class for errors raised while looking up a video."""

    category: ErrorCategory = ErrorCategory.UNKNOWN


class ConfigurationError(LinkInfoError):
    """Raised at construction when a setting has an invalid value.

    ``code`` identifies the offending setting (see ``config.ERR_*``).
    """

    category = ErrorCategory.CONFIG_INVALID

    def __init__(self, message: str, code: int) -> None:
        super().__init__(message)
        self.code = code


class ApiResponseError(LinkInfoError):
    """The metadata API answered with an explicit ``error`` payload."""

    category = ErrorCategory.API_ERROR

    def __init__(self, detail: object) -> None:
        super().__init__(f"Query response contained an error: {detail}")
        self.detail = detail


class InvalidUrlError(LinkInfoError):
    """The URL does not point at a single YouTube video."""

    category = ErrorCategory.URL_INVALID


class EmptyResultError(LinkInfoError):
    """The metadata API answered successfully but listed no videos."""

    category = ErrorCategory.EMPTY_RESULT


class TransportError(LinkInfoError):
    """The HTTP request for video data could not be completed."""

    category = ErrorCategory.TRANSPORT_FAILURE


class MalformedMetadataError(LinkInfoError):
    """A response item lacks a required field or holds an unparsable value."""

    category = ErrorCategory.MALFORMED_METADATA


class ToolError(BaseModel):
    """Structured error returned from the MCP tool."""

    error: str
    category: str
    hint: str
    retryable: bool = False


_HINTS: dict[ErrorCategory, str] = {
    ErrorCategory.CONFIG_INVALID: "Check YOUTUBE_API_KEY and the YOUTUBE_* format settings",
    ErrorCategory.URL_INVALID: "Pass a single-video youtube.com/watch, /embed or youtu.be link",
    ErrorCategory.API_ERROR: "YouTube Data API rejected the query — check the API key and quota",
    ErrorCategory.EMPTY_RESULT: "Video not found — deleted, private, or invalid ID",
    ErrorCategory.TRANSPORT_FAILURE: "Request failed — try again or check connectivity",
    ErrorCategory.MALFORMED_METADATA: "API response is missing required video fields",
}


def categorize_error(error: Exception) -> tuple[ErrorCategory, str]:
    """Map an exception to an ErrorCategory + human-readable hint."""
    if isinstance(error, LinkInfoError):
        return error.category, _HINTS.get(error.category, str(error))
    if isinstance(error, (httpx.TimeoutException, httpx.NetworkError, TimeoutError)):
        return (
            ErrorCategory.TRANSPORT_FAILURE,
            "Request timed out or connection failed — try again or check connectivity",
        )
    if isinstance(error, httpx.HTTPError):
        return ErrorCategory.TRANSPORT_FAILURE, _HINTS[ErrorCategory.TRANSPORT_FAILURE]
    return (ErrorCategory.UNKNOWN, str(error))


def make_tool_error(error: Exception) -> dict:
    """Create a serialisable ToolError dict from an exception."""
    cat, hint = categorize_error(error)
    return ToolError(
        error=str(error) or error.__class__.__name__,
        category=cat.value,
        hint=hint,
        retryable=cat == ErrorCategory.TRANSPORT_FAILURE,
    ).model_dump(mode="json")
