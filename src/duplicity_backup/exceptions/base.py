"""Base exception classes for duplicity-backup.

Every error raised by the wrapper carries structured information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for the log file and notifications
"""

from typing import Any, Dict, Optional


class DuplicityBackupError(Exception):
    """Base exception for all duplicity-backup errors.

    Attributes:
        code: Machine-readable error code (e.g., "UNKNOWN_COMMAND")
        message: Human-readable error message
        details: Optional additional context
    """

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with structured information.

        Args:
            code: Machine-readable error code
            message: Human-readable error message
            details: Optional additional context
        """
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} (details: {self.details})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON log output.

        Returns:
            Dictionary with code, message, and details keys.
        """
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(DuplicityBackupError):
    """Configuration could not be read, rendered or parsed.

    Also raised when the runtime environment is incomplete, e.g. the
    duplicity binary cannot be found.
    """

    pass


class ConfigValidationError(ConfigurationError):
    """Configuration was parsed but violates a required rule."""

    pass


class CommandGenerationError(DuplicityBackupError):
    """A subcommand could not be turned into a duplicity invocation."""

    pass


class SubprocessError(DuplicityBackupError):
    """The duplicity process failed to start or exited non-zero."""

    pass


class NotificationError(DuplicityBackupError):
    """One or more notification targets could not be reached."""

    pass


class LockError(DuplicityBackupError):
    """Another run already holds the lock file."""

    def __init__(
        self, message: str, code: str = "LOCK_HELD", details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(code=code, message=message, details=details)
