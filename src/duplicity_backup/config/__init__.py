"""Configuration Module for duplicity-backup

Example:
    from duplicity_backup.config import load_config, RunSettings

    settings = RunSettings.from_env()
    config = load_config(expand_path(settings.config_file))
"""

from duplicity_backup.config.env_loader import EnvLoader
from duplicity_backup.config.loader import load_config, render_template
from duplicity_backup.config.model import (
    CLEANUP_NONE,
    AWSSettings,
    BackupConfig,
    CleanupSettings,
    EncryptionSettings,
    GoogleCloudSettings,
    MonDashSettings,
    NotificationSettings,
    SlackSettings,
    SwiftSettings,
)
from duplicity_backup.config.settings import RunSettings, expand_path

__all__ = [
    # Model
    "BackupConfig",
    "AWSSettings",
    "GoogleCloudSettings",
    "SwiftSettings",
    "EncryptionSettings",
    "CleanupSettings",
    "NotificationSettings",
    "SlackSettings",
    "MonDashSettings",
    "CLEANUP_NONE",
    # Loading
    "EnvLoader",
    "load_config",
    "render_template",
    # Run settings
    "RunSettings",
    "expand_path",
]
