"""
Shared error handling for the CRPT commissioning gateway.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    submission_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class GatewayException(Exception):
    """Base exception for gateway services."""

    status_code = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, submission_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            submission_id=submission_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(GatewayException):
    """Document failed domain rules."""

    status_code = 422

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class UnsupportedFormatError(GatewayException):
    """Document type does not map to a known document format."""

    status_code = 422

    def __init__(self, doc_type: str, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {}, doc_type=doc_type)
        super().__init__("UNSUPPORTED_FORMAT", f"Unsupported document type: {doc_type}", details)


class RateLimitError(GatewayException):
    """Request quota for the current window is exhausted."""

    status_code = 429

    def __init__(self, message: str = "Request quota exceeded", details: Optional[Dict[str, Any]] = None):
        super().__init__("RATE_LIMIT_ERROR", message, details)


class WaitInterruptedError(GatewayException):
    """Waiting for the request interval was cancelled."""

    status_code = 503

    def __init__(self, message: str = "Interrupted while waiting for the request interval", details: Optional[Dict[str, Any]] = None):
        super().__init__("WAIT_INTERRUPTED", message, details)


class TransportError(GatewayException):
    """Network or I/O failure while talking to the remote API."""

    status_code = 502

    def __init__(self, message: str = "HTTP request failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("TRANSPORT_ERROR", message, details)


class ExternalServiceError(GatewayException):
    """External service answered with a non-success status."""

    status_code = 502

    def __init__(self, service: str, message: str = "External service error", details: Optional[Dict[str, Any]] = None):
        super().__init__("EXTERNAL_SERVICE_ERROR", f"{service}: {message}", details)


class ConfigurationError(GatewayException):
    """Invalid construction parameters."""

    status_code = 500

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)
