"""
Exception hierarchy for Image Sync.

Provides a standardized exception hierarchy for consistent error handling
across the application. All exceptions inherit from ImageSyncException.
"""


class ImageSyncException(Exception):
    """Base exception for all Image Sync errors."""
    pass


class ValidationException(ImageSyncException):
    """Input validation failed."""

    def __init__(self, message: str, field: str = None):
        """
        Initialize validation exception.

        Args:
            message: Validation error message
            field: Field that failed validation (optional)
        """
        self.field = field
        if field:
            super().__init__(f"Validation failed for {field}: {message}")
        else:
            super().__init__(f"Validation failed: {message}")


class DefinitionException(ImageSyncException):
    """An image sync definition file could not be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid definition file {path}: {reason}")


class RegistryException(ImageSyncException):
    """A container engine or registry operation failed."""

    def __init__(self, image: str, operation: str, reason: str):
        """
        Initialize registry exception.

        Args:
            image: Image reference the operation was applied to
            operation: Operation name (pull, tag, push, ...)
            reason: Reason for failure
        """
        self.image = image
        self.operation = operation
        self.reason = reason
        super().__init__(f"Failed to {operation} {image}: {reason}")


class RetryExhaustedException(ImageSyncException):
    """An operation failed on every allowed attempt."""

    def __init__(self, description: str, attempts: int, last_error: str):
        """
        Initialize retry exhausted exception.

        Args:
            description: Human readable name of the retried operation
            attempts: Number of attempts made
            last_error: Error output from the final attempt
        """
        self.description = description
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"{description} failed after {attempts} attempts: {last_error}")


class ScanException(ImageSyncException):
    """Scan operation failed."""

    def __init__(self, image: str, reason: str):
        """
        Initialize scan exception.

        Args:
            image: Image reference that failed to scan
            reason: Reason for failure
        """
        self.image = image
        self.reason = reason
        super().__init__(f"Failed to scan {image}: {reason}")


class IntegrationException(ImageSyncException):
    """External integration/API failed."""

    def __init__(self, service: str, reason: str):
        """
        Initialize integration exception.

        Args:
            service: Service name that failed
            reason: Reason for failure
        """
        self.service = service
        self.reason = reason
        super().__init__(f"{service} integration failed: {reason}")


class ConfigurationException(ImageSyncException):
    """Configuration is invalid or missing."""
    pass


__all__ = [
    "ImageSyncException",
    "ValidationException",
    "DefinitionException",
    "RegistryException",
    "RetryExhaustedException",
    "ScanException",
    "IntegrationException",
    "ConfigurationException",
]
