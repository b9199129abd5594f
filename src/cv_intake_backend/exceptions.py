class UploadError(Exception):
    """Base exception for every terminal pipeline failure.

    Carries the user-facing message and the HTTP status it maps to.
    """

    status_code: int = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ClientInputError(UploadError):
    """Raised for missing fields, disallowed file types and oversize files."""


class SecurityRejection(UploadError):
    """Raised when the scanner does not report a clean verdict."""


class ConversionFailure(UploadError):
    """Raised when a non-PDF upload could not be converted."""

    status_code = 500


class StorageFailure(UploadError):
    """Raised when the normalized file could not be stored."""

    status_code = 500


class ConversionError(Exception):
    """Raised by converter adapters when the external tool fails."""


class StoreError(Exception):
    """Raised by uploader adapters when a file cannot be opened or stored."""
