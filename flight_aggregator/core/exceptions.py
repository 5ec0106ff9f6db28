from fastapi import status
from typing import Any, Dict, List, Optional


class APIException(Exception):
    """
    Base exception for API errors.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        code: str = "internal_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.detail = detail
        self.code = code
        self.context = context or {}
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.detail,
                "status_code": self.status_code,
                "context": self.context
            }
        }


class ValidationException(APIException):
    """Exception raised when data validation fails."""

    def __init__(
        self,
        detail: str = "Validation error",
        code: str = "validation_error",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        merged_context = {"field": field} if field else {}
        if context:
            merged_context.update(context)

        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            code=code,
            context=merged_context
        )


class InvalidSearchRequestError(ValidationException):
    """A search request failed field validation before any vendor was called."""

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(detail=detail, code="invalid_search_request", field=field)


class IntegrationException(APIException):
    """Exception raised when an external API integration fails."""

    def __init__(
        self,
        detail: str = "External API integration error",
        code: str = "integration_error",
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(status_code=status_code, detail=detail, code=code, context=context)
        self.original_exception = original_exception

        # Add original exception info to context if available
        if original_exception and self.context is not None:
            self.context["original_error"] = str(original_exception)


class VendorError(IntegrationException):
    """Hard failure of a single vendor pipeline."""

    def __init__(
        self,
        vendor: str,
        detail: str,
        code: str = "vendor_error",
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        merged_context = {"vendor": vendor}
        if context:
            merged_context.update(context)
        super().__init__(
            detail=f"{vendor}: {detail}",
            code=code,
            status_code=status_code,
            context=merged_context,
            original_exception=original_exception
        )
        self.vendor = vendor


class VendorTransportError(VendorError):
    """Network failure or non-success HTTP status from a vendor."""

    def __init__(
        self,
        vendor: str,
        detail: str,
        upstream_status: Optional[int] = None,
        body: Optional[str] = None,
        code: str = "vendor_transport_error",
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        original_exception: Optional[Exception] = None
    ):
        context: Dict[str, Any] = {}
        if upstream_status is not None:
            context["upstream_status"] = upstream_status
        if body is not None:
            context["upstream_body"] = body
        super().__init__(
            vendor,
            detail,
            code=code,
            status_code=status_code,
            context=context,
            original_exception=original_exception
        )
        self.upstream_status = upstream_status
        self.body = body


class VendorTimeoutError(VendorTransportError):
    """A vendor call exceeded its timeout."""

    def __init__(self, vendor: str, timeout: float, original_exception: Optional[Exception] = None):
        super().__init__(
            vendor,
            f"request timed out after {timeout:g}s",
            code="vendor_timeout",
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            original_exception=original_exception
        )


class VendorAuthenticationError(VendorTransportError):
    """Token exchange with a vendor failed."""

    def __init__(
        self,
        vendor: str,
        detail: str = "authentication failed",
        upstream_status: Optional[int] = None,
        body: Optional[str] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            vendor,
            detail,
            upstream_status=upstream_status,
            body=body,
            code="vendor_authentication_error",
            original_exception=original_exception
        )


class VendorDecodeError(VendorError):
    """A vendor response could not be parsed into its expected shape."""

    def __init__(
        self,
        vendor: str,
        detail: str,
        code: str = "vendor_decode_error",
        original_exception: Optional[Exception] = None
    ):
        super().__init__(vendor, detail, code=code, original_exception=original_exception)


class OfferNormalizationError(VendorDecodeError):
    """A required numeric field of an offer could not be parsed."""

    def __init__(self, vendor: str, detail: str, original_exception: Optional[Exception] = None):
        super().__init__(
            vendor,
            detail,
            code="offer_normalization_error",
            original_exception=original_exception
        )


class AllVendorsFailedError(IntegrationException):
    """Every vendor pipeline failed under the best-effort policy."""

    def __init__(self, errors: List[VendorError]):
        super().__init__(
            detail="All flight vendors failed",
            code="all_vendors_failed",
            context={"vendors": {e.vendor: e.detail for e in errors}}
        )
        self.errors = errors


SENSITIVE_KEYS = ("api_key", "client_secret", "access_token", "auth_token")


def redact(context: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy of an error context with credential values replaced.

    Nested dictionaries are redacted too.
    """
    safe_context: Dict[str, Any] = {}
    for key, value in context.items():
        if key in SENSITIVE_KEYS:
            safe_context[key] = "[REDACTED]"
        elif isinstance(value, dict):
            safe_context[key] = redact(value)
        else:
            safe_context[key] = value
    return safe_context
