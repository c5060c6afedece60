"""
Exception classes for lrcsync.

This module defines all custom exceptions used throughout the application.
Each exception is designed to provide clear, actionable error messages
and to distinguish between different failure modes.

Exception Hierarchy:
    LrcSyncError (base)
        ConfigError - Configuration file or argument issues (fatal)
        LyricsServiceError - Remote lyrics service issues (per file)
            TransportError - Connection failures and timeouts
            ServiceError - Non-success, non-404 HTTP status
            SchemaError - Response body does not match the expected schema
        LocalIOError - Local filesystem issues (per file)
            TagReadError - Audio tags could not be read
            LyricsWriteError - The .lrc file could not be written
            WalkError - A directory could not be listed

"Not found" has no exception class: a 404 or an empty search result is a
normal outcome.
"""

from typing import Optional


class LrcSyncError(Exception):
    """
    Base exception for all lrcsync errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch all lrcsync errors with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., file path, URL).

    Example:
        try:
            # some operation
        except LrcSyncError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: Optional[dict] = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'file_path': Audio or lyrics file involved in the error
                     - 'url': URL that caused the error
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(LrcSyncError):
    """
    Raised when there's an issue with the configuration or CLI arguments.

    This is the only CRITICAL error: it is raised before the run starts
    and stops program execution.

    Common causes:
        - config file has invalid YAML syntax
        - negative timeout, malformed lyrics service URL
        - root directory does not exist
    """
    pass


class LyricsServiceError(LrcSyncError):
    """
    Base class for failures talking to the lyrics service.

    NON-CRITICAL: the failure is scoped to the file being resolved. The
    engine reports it and moves on to the next file without retrying.
    """
    pass


class TransportError(LyricsServiceError):
    """
    Raised when the request never produced an HTTP response.

    Common causes:
        - DNS failure or refused connection
        - Read/connect timeout
        - TLS errors
    """
    pass


class ServiceError(LyricsServiceError):
    """
    Raised when the service answers with a non-success status other than 404.

    Attributes:
        status_code: HTTP status returned by the service.
    """

    def __init__(self, message: str, status_code: int, details: Optional[dict] = None) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class SchemaError(LyricsServiceError):
    """
    Raised when a success response cannot be decoded into lyrics records.

    This signals that the remote API contract changed, not a transient
    condition, and is logged separately from ServiceError.
    """
    pass


class LocalIOError(LrcSyncError):
    """Base class for local filesystem failures scoped to one file."""
    pass


class TagReadError(LocalIOError):
    """Raised when an audio file is missing or its tags cannot be parsed."""
    pass


class LyricsWriteError(LocalIOError):
    """Raised when the .lrc file next to an audio file cannot be created or written."""
    pass


class WalkError(LocalIOError):
    """Raised (or yielded) when a directory in the library cannot be listed."""
    pass
