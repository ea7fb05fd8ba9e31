from typing import Any, Mapping, Optional


class ServiceValidationError(Exception):
    """Raised when input data is invalid or a precondition for a service call is not met.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers (400)
    """

    http_status = 400

    def __init__(self, message: str = "Invalid input", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class NotFoundError(ServiceValidationError):
    """Raised when a requested resource was not found. http_status is 404."""

    http_status = 404

    def __init__(self, message: str = "Not found", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message, details, code)


class ConflictError(ServiceValidationError):
    """Raised when a request conflicts with the current state of a resource.

    Used for exhausted per-plan limits such as the weekly meal swap allowance.
    http_status is 409.
    """

    http_status = 409

    def __init__(self, message: str = "Conflict", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message, details, code)


class ExternalServiceError(ServiceValidationError):
    """Raised when a third-party API (recipes, AI proxy, Instacart, pricing) fails
    and there is no mock or cached data to fall back to.

    Attributes:
        service: short upstream name, e.g. "spoonacular" or "openai-proxy"
        http_status: 502
    """

    http_status = 502

    def __init__(self, message: str = "Upstream service error", service: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message, details, code)
        self.service = service

    def to_dict(self) -> dict:
        payload = super().to_dict()
        if self.service:
            payload["service"] = self.service
        return payload


class RateLimitError(ServiceValidationError):
    """Raised when the AI request window is exhausted. http_status is 429.

    Attributes:
        retry_after: seconds until a request slot frees up
    """

    http_status = 429

    def __init__(self, message: str = "Rate limit reached", retry_after: Optional[float] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message, details, code)
        self.retry_after = retry_after
