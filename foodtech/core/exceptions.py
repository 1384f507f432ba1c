"""Exception hierarchy for the FoodTech workflow API.

Every error carries the HTTP status it maps to; the application-level
handler in ``foodtech.main`` renders it as ``{"error": message}``.
"""

from fastapi import status


class FoodTechError(Exception):
    """Base exception for the workflow API."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class ValidationError(FoodTechError):
    """Raised when input validation fails."""
    status_code = status.HTTP_400_BAD_REQUEST


class UnsupportedTypeError(ValidationError):
    """Raised when an uploaded file's MIME type is not allowed."""
    pass


class TooLargeError(ValidationError):
    """Raised when an uploaded file exceeds the size ceiling."""
    pass


class AuthenticationError(FoodTechError):
    """Raised when the bearer token is missing or invalid."""
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(FoodTechError):
    """Raised when the caller's role is not allowed."""
    status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFoundError(FoodTechError):
    """Raised when a requested resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class ResourceConflictError(FoodTechError):
    """Raised when a resource already exists."""
    status_code = status.HTTP_409_CONFLICT


class StorageError(FoodTechError):
    """Raised when an object storage or metadata write fails."""
    pass


class WorkflowError(FoodTechError):
    """Raised when a stored procedure rejects a call."""
    status_code = status.HTTP_400_BAD_REQUEST


class UpstreamError(FoodTechError):
    """Raised when the mail relay or an external webhook fails."""
    status_code = status.HTTP_502_BAD_GATEWAY


class ServiceUnavailableError(FoodTechError):
    """Raised when an optional integration is not configured."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
