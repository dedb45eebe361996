"""Backup configuration model

Typed, validated representation of the YAML configuration file. Field
names follow Python conventions; aliases carry the keys used in the file.
Instances are frozen once validated.
"""

import socket
from pathlib import Path
from typing import Any, FrozenSet, List, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from duplicity_backup.exceptions import ConfigValidationError

CLEANUP_NONE = "none"


def _as_str(value: Any) -> Any:
    """Render YAML scalars the way they were written (``2``, ``true``)"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return value


class _Section(BaseModel):
    """Common behaviour for every configuration block"""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @classmethod
    def _string_keys(cls) -> FrozenSet[str]:
        keys: Set[str] = set()
        for name, info in cls.model_fields.items():
            if info.annotation is str:
                keys.add(name)
                if info.alias:
                    keys.add(info.alias)
        return frozenset(keys)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Treat ``key:`` without a value like an absent key

        Numbers and booleans given for string fields are kept as text, so
        ``passphrase: 12345678`` loads.
        """
        if data is None:
            return {}
        if isinstance(data, dict):
            string_keys = cls._string_keys()
            return {
                k: _as_str(v) if k in string_keys else v
                for k, v in data.items()
                if v is not None
            }
        return data


class AWSSettings(_Section):
    access_key_id: str = ""
    secret_access_key: str = ""
    storage_class: str = Field(
        default="",
        description="Extra storage class flag passed to duplicity (e.g. --s3-use-ia)",
    )


class GoogleCloudSettings(_Section):
    access_key_id: str = ""
    secret_access_key: str = ""


class SwiftSettings(_Section):
    username: str = ""
    password: str = ""
    auth_url: str = ""
    auth_version: int = 0


class EncryptionSettings(_Section):
    """GPG options handed to duplicity

    The passphrase only ever travels through the environment.
    """

    enable: bool = False
    passphrase: str = ""
    gpg_encryption_key: str = ""
    gpg_sign_key: str = ""
    hide_key_id: bool = False
    secret_keyring: str = ""


class CleanupSettings(_Section):
    type: str = Field(
        default=CLEANUP_NONE,
        description="duplicity removal command (e.g. remove-all-but-n-full) or 'none'",
    )
    value: str = Field(default="", description="Parameter of the removal command")

    @field_validator("type")
    @classmethod
    def default_empty_type(cls, v: str) -> str:
        return v or CLEANUP_NONE


class SlackSettings(_Section):
    hook_url: str = ""
    channel: str = ""
    username: str = ""
    emoji: str = ""


class MonDashSettings(_Section):
    board_url: str = Field(default="", alias="board")
    token: str = ""
    freshness: int = Field(default=0, description="Seconds before the dashboard marks the result stale")


class NotificationSettings(_Section):
    slack: SlackSettings = Field(default_factory=SlackSettings)
    mondash: MonDashSettings = Field(default_factory=MonDashSettings)


class BackupConfig(_Section):
    """Complete wrapper configuration

    Field validation (required values, existing include/exclude file) is
    done by pydantic; cross-field rules live in ``check_rules``.
    """

    root_path: str = Field(alias="root", min_length=1, description="Directory to back up")
    hostname: str = Field(default_factory=socket.gethostname)
    destination: str = Field(alias="dest", min_length=1, description="duplicity target URL")
    ftp_password: str = ""
    aws: AWSSettings = Field(default_factory=AWSSettings)
    google_cloud: GoogleCloudSettings = Field(default_factory=GoogleCloudSettings)
    swift: SwiftSettings = Field(default_factory=SwiftSettings)
    include: List[str] = Field(default_factory=list, alias="inclist")
    exclude: List[str] = Field(default_factory=list, alias="exclist")
    inc_exc_file: str = Field(default="", alias="incexcfile")
    exclude_device_files: bool = Field(default=False, alias="excdevicefiles")
    encryption: EncryptionSettings = Field(default_factory=EncryptionSettings)
    static_options: List[str] = Field(default_factory=list)
    cleanup: CleanupSettings = Field(default_factory=CleanupSettings)
    log_directory: str = Field(alias="logdir", min_length=1, description="Directory for run logs")
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @field_validator("include", "exclude", "static_options", mode="before")
    @classmethod
    def coerce_list_items(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_as_str(item) for item in v]
        return v

    @field_validator("hostname")
    @classmethod
    def default_hostname(cls, v: str) -> str:
        return v or socket.gethostname()

    @field_validator("inc_exc_file")
    @classmethod
    def validate_inc_exc_file(cls, v: str) -> str:
        """The include/exclude list must exist when configured"""
        if v and not Path(v).exists():
            raise ValueError(f"include/exclude file '{v}' does not exist")
        return v

    def check_rules(self) -> "BackupConfig":
        """Validate rules spanning several fields

        Raises:
            ConfigValidationError: naming the first violated rule

        Returns:
            self, to allow chaining after model_validate
        """
        enc = self.encryption
        if enc.enable and enc.gpg_sign_key and not enc.passphrase:
            raise ConfigValidationError(
                "SIGN_KEY_WITHOUT_PASSPHRASE",
                "With gpg_sign_key passphrase is required",
            )

        if enc.enable and not enc.gpg_encryption_key and not enc.passphrase:
            raise ConfigValidationError(
                "ENCRYPTION_WITHOUT_KEY",
                "Encryption is enabled but no encryption key or passphrase is specified",
            )

        # Only the first two characters are inspected, so "s3+http://" and
        # "s3://" both count as S3
        scheme = self.destination[:2]
        if scheme == "s3" and not (self.aws.access_key_id and self.aws.secret_access_key):
            raise ConfigValidationError(
                "MISSING_AWS_CREDENTIALS",
                "Destination is S3 but AWS credentials are not configured",
                details={"destination": self.destination},
            )

        if scheme == "gs" and not (
            self.google_cloud.access_key_id and self.google_cloud.secret_access_key
        ):
            raise ConfigValidationError(
                "MISSING_GOOGLE_CLOUD_CREDENTIALS",
                "Destination is Google Cloud Storage but Google Cloud credentials are not configured",
                details={"destination": self.destination},
            )

        return self
