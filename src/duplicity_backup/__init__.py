"""duplicity-backup - configuration based wrapper around duplicity.

This package provides:
- config: YAML configuration (templated with env lookups) and validation
- command: generation of duplicity arguments and secret environment
- runner: subprocess execution with line-by-line output logging
- notify: MonDash and Slack result notifications
- logger: Structured logging to console and per-run log files
- exceptions: Exception classes with structured error info
"""

__version__ = "1.0.0"

# Re-export commonly used items for convenience
from duplicity_backup.command import CommandGenerator, GeneratedCommand, generate_command
from duplicity_backup.config import BackupConfig, load_config
from duplicity_backup.exceptions import (
    CommandGenerationError,
    ConfigurationError,
    ConfigValidationError,
    DuplicityBackupError,
    LockError,
    NotificationError,
    SubprocessError,
)
from duplicity_backup.logger import Logger, StructuredLogger, create_logger

__all__ = [
    "__version__",
    # Command generation
    "CommandGenerator",
    "GeneratedCommand",
    "generate_command",
    # Config
    "BackupConfig",
    "load_config",
    # Logger
    "Logger",
    "StructuredLogger",
    "create_logger",
    # Exceptions
    "DuplicityBackupError",
    "ConfigurationError",
    "ConfigValidationError",
    "CommandGenerationError",
    "SubprocessError",
    "NotificationError",
    "LockError",
]
