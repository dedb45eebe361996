"""Exceptions for duplicity-backup.

All exceptions include structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for debugging/recovery

Usage:
    from duplicity_backup.exceptions import (
        DuplicityBackupError,
        ConfigValidationError,
        CommandGenerationError,
    )
"""

from duplicity_backup.exceptions.base import (
    CommandGenerationError,
    ConfigurationError,
    ConfigValidationError,
    DuplicityBackupError,
    LockError,
    NotificationError,
    SubprocessError,
)

__all__ = [
    "DuplicityBackupError",
    "ConfigurationError",
    "ConfigValidationError",
    "CommandGenerationError",
    "SubprocessError",
    "NotificationError",
    "LockError",
]
