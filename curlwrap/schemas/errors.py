"""
Error taxonomy for curlwrap.

Defines both Pydantic models for structured error communication
(returned inside a TransferResult) and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    RESPONSE_PARSE_ERROR = "RESPONSE_PARSE_ERROR"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class CurlwrapError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors back to callers without raising, so an expected
    failure such as an unreachable host can be inspected like any other value.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.TRANSPORT_FAILURE],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "CurlwrapException":
        """Convert this error model to a raisable exception."""
        return CurlwrapException(
            message=self.message,
            code=self.code,
            details=dict(self.details),
        )


class TransportError(CurlwrapError):
    """Error model for a transfer the transport could not complete."""

    code: str = Field(default=ErrorCodes.TRANSPORT_FAILURE)
    transport_code: int = Field(
        ...,
        description="Transport-specific numeric error code (libcurl numbering)",
        examples=[6],
    )

    def describe(self) -> str:
        """Return the ``"<code> - <message>"`` form kept as the client's last error."""
        return f"{self.transport_code} - {self.message}"

    def to_exception(self) -> "TransportFailure":
        return TransportFailure(
            transport_code=self.transport_code,
            message=self.message,
            details=dict(self.details),
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class CurlwrapException(Exception):
    """
    Base exception for all curlwrap errors.

    Carries structured error information and can be converted to a
    CurlwrapError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "CURLWRAP_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> CurlwrapError:
        """Convert this exception to a CurlwrapError model."""
        return CurlwrapError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class TransportFailure(CurlwrapException):
    """Raised when the transport could not complete the exchange.

    Network, DNS, TLS and timeout failures all land here. They are never
    retried by the client.
    """

    def __init__(
        self,
        transport_code: int,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.TRANSPORT_FAILURE,
            details=details,
        )
        self.transport_code = int(transport_code)

    def __str__(self) -> str:
        return f"{self.transport_code} - {self.message}"

    def to_error_model(self) -> TransportError:
        return TransportError(
            transport_code=self.transport_code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(transport_code={self.transport_code!r}, "
            f"message={self.message!r})"
        )


class ConfigurationException(CurlwrapException):
    """Raised for an unknown transport option name or a forbidden override."""

    def __init__(
        self,
        message: str,
        option: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if option:
            full_details["option"] = option
        super().__init__(
            message=message,
            code=ErrorCodes.CONFIGURATION_ERROR,
            details=full_details,
        )


class ResponseParseError(CurlwrapException):
    """Raised when a raw response does not start with a valid status line."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.RESPONSE_PARSE_ERROR,
            details=details,
        )
