"""Custom exception hierarchy for imob_control."""


class ImobControlError(Exception):
    """Base exception for all imob_control errors."""


class PropertyNotFoundError(ImobControlError):
    """Raised when a referenced property does not exist."""


class InvalidRecordError(ImobControlError):
    """Raised when a financial record cannot be built from the given input."""


class ConfigurationError(ImobControlError):
    """Raised when configuration is invalid or missing."""


class StorageError(ImobControlError):
    """Raised when a persistence operation fails."""


class BackupFormatError(StorageError):
    """Raised when a backup document lacks a ``properties`` array."""


class AIGatewayError(ImobControlError):
    """Raised when the generative model API cannot be reached or fails."""


class ExtractionError(AIGatewayError):
    """Raised when records cannot be extracted from a document."""
