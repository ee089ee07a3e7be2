"""Custom exceptions for cloudfiles_storage."""

from typing import Optional


class CloudFilesError(Exception):
    """Base exception for Cloud Files adapter errors."""
    pass


class AuthenticationError(CloudFilesError):
    """Exception raised when the identity service rejects or fails a login."""
    pass


class EndpointNotConfiguredError(CloudFilesError):
    """Exception raised when an operation needs an endpoint that was never resolved."""
    pass


class ContainerNotConfiguredError(EndpointNotConfiguredError):
    """Exception raised when no container name has been set."""
    pass


class TransportError(CloudFilesError):
    """Exception raised when an HTTP request fails or returns an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(CloudFilesError, FileNotFoundError):
    """Exception raised when the requested object does not exist."""
    pass


class MalformedResponseError(CloudFilesError, ValueError):
    """Exception raised when a response lacks an expected header or field."""
    pass


class UnsupportedOperationError(CloudFilesError, NotImplementedError):
    """Exception raised for operations the object store has no equivalent for."""
    pass
