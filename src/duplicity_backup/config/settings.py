"""Runtime settings for the duplicity-backup CLI.

Defaults for the command-line flags, overridable through environment
variables so cron jobs and containers can relocate files without
repeating flags.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_CONFIG_FILE = "~/.config/duplicity-backup.yaml"
DEFAULT_LOCK_FILE = "~/.config/duplicity-backup.lock"
DEFAULT_BINARY = "duplicity"


@dataclass
class RunSettings:
    """Locations used by a single wrapper run

    Attributes:
        config_file: YAML configuration file
        lock_file: File holding the lock for this wrapper execution
        binary: Name or path of the duplicity executable
    """

    config_file: str = DEFAULT_CONFIG_FILE
    lock_file: str = DEFAULT_LOCK_FILE
    binary: str = DEFAULT_BINARY

    @classmethod
    def from_env(
        cls,
        prefix: str = "DUPLICITY_BACKUP",
        env: Optional[Mapping[str, str]] = None,
    ) -> "RunSettings":
        """Load run settings from environment variables

        Args:
            prefix: Environment variable prefix
            env: Mapping to read instead of os.environ

        Environment variables:
            {prefix}_CONFIG_FILE: Configuration file path
            {prefix}_LOCK_FILE: Lock file path
            {prefix}_BINARY: duplicity executable
        """
        source = os.environ if env is None else env
        return cls(
            config_file=source.get(f"{prefix}_CONFIG_FILE", DEFAULT_CONFIG_FILE),
            lock_file=source.get(f"{prefix}_LOCK_FILE", DEFAULT_LOCK_FILE),
            binary=source.get(f"{prefix}_BINARY", DEFAULT_BINARY),
        )


def expand_path(value: str) -> Path:
    """Expand a leading ``~`` the way the shell would"""
    return Path(value).expanduser()
