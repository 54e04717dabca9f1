"""Error taxonomy for place enrichment.

``EnrichmentError`` is what providers raise and what the orchestrator
records as its last error. ``AppError`` is the serializable envelope the
HTTP API returns.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .core import PlaceProvider


class ErrorCode(str, Enum):
    """Error kinds surfaced by providers and the API."""

    INVALID_QUERY = "INVALID_QUERY"
    NO_RESULTS_FOUND = "NO_RESULTS_FOUND"
    NETWORK_ERROR = "NETWORK_ERROR"
    INVALID_API_KEY = "INVALID_API_KEY"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    PHOTO_DOWNLOAD_FAILED = "PHOTO_DOWNLOAD_FAILED"
    # API-only
    VALIDATION_ERROR = "VALIDATION_ERROR"
    API_ERROR = "API_ERROR"


class AppError(BaseModel):
    """Error payload returned by the HTTP API."""

    code: ErrorCode = Field(..., description="Machine-readable error kind")
    message: str = Field(..., description="Technical description")
    user_message: str = Field(..., description="Message safe to show to users")


_USER_MESSAGES = {
    ErrorCode.INVALID_QUERY: "Please check your search and try again.",
    ErrorCode.NO_RESULTS_FOUND: "No places found. Try a different search.",
    ErrorCode.NETWORK_ERROR: "Could not reach the place service. Please try again.",
    ErrorCode.INVALID_API_KEY: "Place search is not configured correctly.",
    ErrorCode.RATE_LIMIT_EXCEEDED: "Too many searches. Please try again later.",
    ErrorCode.INVALID_RESPONSE: "The place service returned unexpected data.",
    ErrorCode.SERVICE_UNAVAILABLE: "This place service is currently unavailable.",
    ErrorCode.PHOTO_DOWNLOAD_FAILED: "The photo could not be loaded.",
}


class EnrichmentError(Exception):
    """A classified provider failure.

    ``detail`` holds the payload of the kinds that carry one: the network
    message, the unavailable provider, or the photo reference.
    Two errors are equal when both code and detail match.
    """

    def __init__(self, code: ErrorCode, detail: str | PlaceProvider | None = None) -> None:
        self.code = code
        self.detail = detail
        super().__init__(self.message)

    @classmethod
    def invalid_query(cls) -> "EnrichmentError":
        return cls(ErrorCode.INVALID_QUERY)

    @classmethod
    def no_results_found(cls) -> "EnrichmentError":
        return cls(ErrorCode.NO_RESULTS_FOUND)

    @classmethod
    def network_error(cls, detail: str) -> "EnrichmentError":
        return cls(ErrorCode.NETWORK_ERROR, detail)

    @classmethod
    def invalid_api_key(cls) -> "EnrichmentError":
        return cls(ErrorCode.INVALID_API_KEY)

    @classmethod
    def rate_limit_exceeded(cls) -> "EnrichmentError":
        return cls(ErrorCode.RATE_LIMIT_EXCEEDED)

    @classmethod
    def invalid_response(cls) -> "EnrichmentError":
        return cls(ErrorCode.INVALID_RESPONSE)

    @classmethod
    def service_unavailable(cls, provider: PlaceProvider) -> "EnrichmentError":
        return cls(ErrorCode.SERVICE_UNAVAILABLE, provider)

    @classmethod
    def photo_download_failed(cls, reference: str) -> "EnrichmentError":
        return cls(ErrorCode.PHOTO_DOWNLOAD_FAILED, reference)

    @property
    def message(self) -> str:
        """Human-readable description of the error."""
        if self.code is ErrorCode.INVALID_QUERY:
            return "The search query is invalid"
        if self.code is ErrorCode.NO_RESULTS_FOUND:
            return "No places found matching your search"
        if self.code is ErrorCode.NETWORK_ERROR:
            return f"Network error: {self.detail}"
        if self.code is ErrorCode.INVALID_API_KEY:
            return "Invalid API key configuration"
        if self.code is ErrorCode.RATE_LIMIT_EXCEEDED:
            return "API rate limit exceeded. Please try again later"
        if self.code is ErrorCode.INVALID_RESPONSE:
            return "Invalid response from service"
        if self.code is ErrorCode.SERVICE_UNAVAILABLE:
            name = self.detail.display_name if isinstance(self.detail, PlaceProvider) else self.detail
            return f"{name} is currently unavailable"
        if self.code is ErrorCode.PHOTO_DOWNLOAD_FAILED:
            return f"Failed to download photo: {self.detail}"
        return str(self.code.value)

    def to_app_error(self) -> AppError:
        return AppError(
            code=self.code,
            message=self.message,
            user_message=_USER_MESSAGES.get(self.code, "Something went wrong. Please try again."),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EnrichmentError):
            return NotImplemented
        return self.code == other.code and self.detail == other.detail

    def __hash__(self) -> int:
        return hash((self.code, self.detail))

    def __repr__(self) -> str:
        if self.detail is None:
            return f"EnrichmentError({self.code.value})"
        return f"EnrichmentError({self.code.value}, {self.detail!r})"
