"""
Exception hierarchy for sonarrapi.

Errors carry a category, a severity and troubleshooting hints so that the CLI
and callers inspecting an ApiResult can tell an authentication failure from a
missing resource or an unreachable server.
"""

import json
from enum import Enum
from typing import Any

from .logging import get_correlation_id


class ErrorCategory(Enum):
    """Categories for error classification."""

    CONFIGURATION_ERROR = "configuration_error"
    NETWORK_ERROR = "network_error"
    API_ERROR = "api_error"
    DATA_ERROR = "data_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"
    SECURITY_ERROR = "security_error"
    PERFORMANCE_ERROR = "performance_error"
    SYSTEM_ERROR = "system_error"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class SonarrApiError(Exception):
    """
    Base exception for all sonarrapi errors.

    Provides error context, categorization, and troubleshooting guidance.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        category: ErrorCategory = ErrorCategory.SYSTEM_ERROR,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        correlation_id: str | None = None,
        troubleshooting_hints: list[str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.category = category
        self.severity = severity
        # Falls back to the correlation ID of the current logging context
        self.correlation_id = correlation_id or get_correlation_id() or None
        self.troubleshooting_hints = troubleshooting_hints or []

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "correlation_id": self.correlation_id,
            "details": self.details,
            "troubleshooting_hints": self.troubleshooting_hints,
        }


class ConfigurationError(SonarrApiError):
    """Raised when required configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        **kwargs,
    ):
        hints = [
            "Set SONARR_URL and SONARR_API_KEY in the environment or a .env file",
            "The API key is listed in Sonarr under Settings > General > Security",
            "Run 'sonarrapi config-validate' to diagnose configuration issues",
        ]

        details = kwargs.setdefault("details", {})
        if config_key:
            hints.append(f"Ensure '{config_key}' is properly configured")
            details["config_key"] = config_key

        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION_ERROR,
            severity=ErrorSeverity.CRITICAL,
            troubleshooting_hints=hints,
            **kwargs,
        )


class APIError(SonarrApiError):
    """Non-success response from the Sonarr API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: str | None = None,
        method: str | None = None,
        endpoint: str | None = None,
        **kwargs,
    ):
        self.status_code = status_code
        details = kwargs.setdefault("details", {})
        details.update(
            {
                "status_code": status_code,
                "response": response,
                "method": method,
                "endpoint": endpoint,
            }
        )

        kwargs.setdefault("category", ErrorCategory.API_ERROR)
        kwargs.setdefault("severity", self._determine_severity(status_code))
        kwargs.setdefault(
            "troubleshooting_hints", self._generate_troubleshooting_hints(status_code)
        )

        super().__init__(message, **kwargs)

    @staticmethod
    def _determine_severity(status_code: int | None) -> ErrorSeverity:
        """Determine error severity based on status code."""
        if not status_code:
            return ErrorSeverity.MEDIUM

        if status_code >= 500:
            return ErrorSeverity.HIGH
        elif status_code == 429:
            return ErrorSeverity.MEDIUM
        elif status_code >= 400:
            return ErrorSeverity.LOW
        else:
            return ErrorSeverity.MEDIUM

    @staticmethod
    def _generate_troubleshooting_hints(status_code: int | None) -> list[str]:
        """Generate troubleshooting hints based on status code."""
        if status_code == 401:
            return [
                "Check that SONARR_API_KEY matches the key shown in Sonarr",
                "Regenerating the key in Sonarr invalidates the old one",
            ]
        if status_code == 403:
            return [
                "The API key was accepted but the request is not permitted",
                "Check reverse proxy authentication in front of Sonarr",
            ]
        if status_code == 404:
            return [
                "The requested resource was not found",
                "Verify the resource ID exists in Sonarr",
                "Check that SONARR_URL includes any URL base configured in Sonarr",
            ]
        if status_code and status_code >= 500:
            return [
                "Sonarr is experiencing server issues",
                "Check the Sonarr logs under System > Logs",
            ]
        return [
            "Check the request parameters against the Sonarr API documentation",
        ]


class AuthenticationError(APIError):
    """Raised when Sonarr rejects the API key (401)."""

    def __init__(self, message: str, **kwargs):
        kwargs["status_code"] = 401
        kwargs.setdefault("category", ErrorCategory.SECURITY_ERROR)
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message, **kwargs)


class AuthorizationError(APIError):
    """Raised when authorization fails (403)."""

    def __init__(self, message: str, **kwargs):
        kwargs["status_code"] = 403
        kwargs.setdefault("category", ErrorCategory.SECURITY_ERROR)
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message, **kwargs)


class NotFoundError(APIError):
    """Raised when the requested resource does not exist (404)."""

    def __init__(self, message: str, **kwargs):
        kwargs["status_code"] = 404
        super().__init__(message, **kwargs)


class ServiceUnavailableError(APIError):
    """Raised when Sonarr answers with a server error."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.EXTERNAL_SERVICE_ERROR)
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message, **kwargs)


class NetworkError(SonarrApiError):
    """Raised when the Sonarr server cannot be reached."""

    def __init__(
        self,
        message: str,
        host: str | None = None,
        timeout: float | None = None,
        **kwargs,
    ):
        details = kwargs.setdefault("details", {})
        details.update({"host": host, "timeout": timeout})

        hints = [
            "Verify SONARR_URL is correct and the server is running",
            "Check firewall and proxy settings",
        ]
        if host:
            hints.append(f"Verify that {host} is reachable from your network")

        kwargs.setdefault("category", ErrorCategory.NETWORK_ERROR)
        kwargs.setdefault("severity", ErrorSeverity.MEDIUM)
        kwargs.setdefault("troubleshooting_hints", hints)
        super().__init__(message, **kwargs)


class TimeoutError(NetworkError):
    """Raised when a request exceeds the configured timeout."""

    def __init__(
        self,
        message: str,
        timeout_duration: float | None = None,
        operation: str | None = None,
        **kwargs,
    ):
        details = kwargs.setdefault("details", {})
        details.update({"timeout_duration": timeout_duration, "operation": operation})

        hints = [
            "Try increasing HTTP_TIMEOUT",
            "Check if Sonarr is responding slowly",
        ]
        if operation:
            hints.append(f"The '{operation}' operation timed out")

        super().__init__(
            message,
            timeout=timeout_duration,
            category=ErrorCategory.PERFORMANCE_ERROR,
            troubleshooting_hints=hints,
            **kwargs,
        )


class ResponseDecodeError(SonarrApiError):
    """Raised when a successful response body is not valid JSON."""

    def __init__(
        self,
        message: str,
        content_type: str | None = None,
        body_preview: str | None = None,
        **kwargs,
    ):
        details = kwargs.setdefault("details", {})
        details.update({"content_type": content_type, "body_preview": body_preview})

        hints = [
            "SONARR_URL may point at a web page or proxy login instead of Sonarr",
            "Check that SONARR_URL does not already include /api/v3",
        ]

        super().__init__(
            message,
            category=ErrorCategory.DATA_ERROR,
            troubleshooting_hints=hints,
            **kwargs,
        )


def _extract_message(error_data: Any, status_code: int) -> str:
    """Pull a readable message out of a Sonarr error body."""
    if isinstance(error_data, dict):
        return str(error_data.get("message") or f"API error (HTTP {status_code})")
    # Validation failures come back as a list of {propertyName, errorMessage}
    if isinstance(error_data, list) and error_data:
        messages = [
            item.get("errorMessage")
            for item in error_data
            if isinstance(item, dict) and item.get("errorMessage")
        ]
        if messages:
            return "; ".join(messages)
    return f"API error (HTTP {status_code})"


def parse_api_error(
    response_text: str,
    status_code: int,
    method: str | None = None,
    endpoint: str | None = None,
) -> APIError:
    """Parse an API error response and return the matching exception."""
    try:
        error_data = json.loads(response_text)
        message = _extract_message(error_data, status_code)
    except json.JSONDecodeError:
        message = f"API error (HTTP {status_code})"

    kwargs = {
        "response": response_text,
        "method": method,
        "endpoint": endpoint,
    }

    if status_code == 401:
        return AuthenticationError(message, **kwargs)
    elif status_code == 403:
        return AuthorizationError(message, **kwargs)
    elif status_code == 404:
        return NotFoundError(message, **kwargs)
    elif status_code >= 500:
        return ServiceUnavailableError(message, status_code=status_code, **kwargs)
    else:
        return APIError(message, status_code=status_code, **kwargs)
