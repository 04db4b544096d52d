"""
Custom exceptions for paste operations.
"""


class PasteError(Exception):
    """Base exception for paste operations."""
    pass


class PasteValidationError(PasteError):
    """Exception raised when paste input fails validation."""

    code = "invalid_input"

    def __init__(self, message: str = None):
        super().__init__(message or self.code)


class InvalidContent(PasteValidationError):
    """Content is missing, not a string, or blank."""

    code = "invalid_content"


class InvalidTTL(PasteValidationError):
    """ttl_seconds is present but not a positive integer."""

    code = "invalid_ttl_seconds"


class InvalidMaxViews(PasteValidationError):
    """max_views is present but not a positive integer."""

    code = "invalid_max_views"


class PasteNotFound(PasteError):
    """
    Exception raised when a paste cannot be served.

    Covers pastes that never existed, have expired, or have used up their
    views. Callers cannot tell these apart.
    """

    def __init__(self, paste_id: str):
        super().__init__(f"Paste {paste_id} not found")
        self.paste_id = paste_id


class StorageUnavailable(PasteError):
    """Exception raised when the storage engine call fails or times out."""
    pass
