"""duplicity command generation

Turns a validated BackupConfig plus the subcommand given on the command
line into the argument vector, the secret environment entries and an
optional output filter for one duplicity invocation.

Every subcommand is described by a Recipe in COMMANDS; three builders
(full, lite, remove) assemble the argument vector from it.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from duplicity_backup.config.model import BackupConfig
from duplicity_backup.exceptions import CommandGenerationError

COMMAND_BACKUP = "backup"
COMMAND_FULL_BACKUP = "full"
COMMAND_INCR_BACKUP = "incr"
COMMAND_CLEANUP = "cleanup"
COMMAND_LIST = "list-current-files"
COMMAND_RESTORE = "restore"
COMMAND_STATUS = "status"
COMMAND_VERIFY = "verify"
COMMAND_REMOVE = "__remove_old"
COMMAND_LIST_CHANGED_FILES = "list-changed-files"

# Commands that send a notification when they finish
NOTIFY_COMMANDS = frozenset({
    COMMAND_BACKUP,
    COMMAND_REMOVE,
    COMMAND_FULL_BACKUP,
    COMMAND_INCR_BACKUP,
})

# Commands followed by removal of old backups
REMOVE_COMMANDS = frozenset({
    COMMAND_BACKUP,
    COMMAND_CLEANUP,
})

# duplicity prints "A path", "D path" or "M path" for added, deleted and
# modified files at verbosity 8
CHANGED_FILE_FILTER = re.compile(r"^[ADM] ")


class RecipeKind(Enum):
    FULL = "full"
    LITE = "lite"
    REMOVE = "remove"


class Endpoint(Enum):
    """Where the source or target positional of a full command comes from"""

    NONE = "none"
    ROOT = "root"
    DESTINATION = "destination"
    ARGUMENT = "argument"


@dataclass(frozen=True)
class Recipe:
    kind: RecipeKind
    option: str = ""
    root: Endpoint = Endpoint.NONE
    dest: Endpoint = Endpoint.NONE
    add_time: bool = False
    prefix: Tuple[str, ...] = ()
    line_filter: Optional[Pattern[str]] = None


COMMANDS: Dict[str, Recipe] = {
    # Without an option duplicity decides between full and incremental itself
    COMMAND_BACKUP: Recipe(RecipeKind.FULL, "", Endpoint.ROOT, Endpoint.DESTINATION),
    COMMAND_FULL_BACKUP: Recipe(RecipeKind.FULL, "full", Endpoint.ROOT, Endpoint.DESTINATION),
    COMMAND_INCR_BACKUP: Recipe(RecipeKind.FULL, "incr", Endpoint.ROOT, Endpoint.DESTINATION),
    COMMAND_LIST_CHANGED_FILES: Recipe(
        RecipeKind.FULL,
        "",
        Endpoint.ROOT,
        Endpoint.DESTINATION,
        prefix=("--dry-run", "--verbosity", "8"),
        line_filter=CHANGED_FILE_FILTER,
    ),
    COMMAND_CLEANUP: Recipe(RecipeKind.LITE, "cleanup"),
    COMMAND_LIST: Recipe(RecipeKind.LITE, "list-current-files"),
    COMMAND_STATUS: Recipe(RecipeKind.LITE, "collection-status"),
    COMMAND_RESTORE: Recipe(
        RecipeKind.FULL, "restore", Endpoint.DESTINATION, Endpoint.ARGUMENT, add_time=True
    ),
    COMMAND_VERIFY: Recipe(RecipeKind.FULL, "verify", Endpoint.DESTINATION, Endpoint.ROOT),
    COMMAND_REMOVE: Recipe(RecipeKind.REMOVE),
}


@dataclass
class GeneratedCommand:
    """Everything needed to run duplicity once

    Attributes:
        args: Arguments following the duplicity binary
        env: ``NAME=value`` entries to add to the process environment
        line_filter: Only output lines matching this pattern are logged
    """

    args: List[str] = field(default_factory=list)
    env: List[str] = field(default_factory=list)
    line_filter: Optional[Pattern[str]] = None


def clean_slice(values: Sequence[str]) -> List[str]:
    """Drop empty entries left by optional fragments"""
    return [v for v in values if v != ""]


class CommandGenerator:
    """Build duplicity invocations from a configuration"""

    def __init__(self, config: BackupConfig):
        self.config = config

    def generate(self, argv: Sequence[str], time: str = "") -> GeneratedCommand:
        """Generate the duplicity command for a subcommand

        Args:
            argv: Subcommand followed by its positional arguments
            time: Value for ``--time`` on commands that accept it

        Returns:
            GeneratedCommand with empty entries removed

        Raises:
            CommandGenerationError: Unknown subcommand or bad arguments
        """
        if not argv:
            raise CommandGenerationError(
                "NO_COMMAND", "no command given, please see 'help' for details what to do"
            )

        command = argv[0]
        recipe = COMMANDS.get(command)
        if recipe is None:
            raise CommandGenerationError(
                "UNKNOWN_COMMAND",
                f"did not understand command '{command}', please see 'help' for details what to do",
                details={"command": command},
            )

        if recipe.kind is RecipeKind.REMOVE:
            args, env = self._generate_remove_command()
        elif recipe.kind is RecipeKind.LITE:
            args, env = self._generate_lite_command(recipe.option, time, recipe.add_time)
        else:
            restore_file, argument = self._positional_arguments(command, recipe, argv[1:])
            args, env = self._generate_full_command(
                recipe.option,
                time,
                self._resolve(recipe.root, argument),
                self._resolve(recipe.dest, argument),
                recipe.add_time,
                restore_file,
            )

        args = list(recipe.prefix) + args
        env = env + self._generate_credential_export()

        return GeneratedCommand(
            args=clean_slice(args),
            env=clean_slice(env),
            line_filter=recipe.line_filter,
        )

    def _positional_arguments(
        self, command: str, recipe: Recipe, extra: Sequence[str]
    ) -> Tuple[str, str]:
        """Return (file to restore, target path) for commands taking arguments"""
        if Endpoint.ARGUMENT not in (recipe.root, recipe.dest):
            return "", ""

        if len(extra) == 2:
            return extra[0], extra[1]
        if len(extra) == 1:
            return "", extra[0]

        raise CommandGenerationError(
            "INVALID_RESTORE_ARGUMENTS",
            f"'{command}' needs [file-to-restore] <target-path>, see 'help' for details",
            details={"command": command, "arguments": list(extra)},
        )

    def _resolve(self, endpoint: Endpoint, argument: str) -> str:
        if endpoint is Endpoint.ROOT:
            return self.config.root_path
        if endpoint is Endpoint.DESTINATION:
            return self.config.destination
        if endpoint is Endpoint.ARGUMENT:
            return argument
        return ""

    def _time_arguments(self, time: str, add_time: bool) -> List[str]:
        if add_time and time:
            return ["--time", time]
        return []

    def _generate_full_command(
        self,
        option: str,
        time: str,
        root: str,
        dest: str,
        add_time: bool,
        restore_file: str,
    ) -> Tuple[List[str], List[str]]:
        args = [option]
        args += self.config.static_options
        args += self._time_arguments(time, add_time)
        if restore_file:
            args += ["--file-to-restore", restore_file]
        # Empty unless configured, stripped by clean_slice
        args.append(self.config.aws.storage_class)

        enc_args, env = self._generate_encryption(option)
        args += enc_args
        args += self._generate_include_exclude()
        args += [root, dest]

        return args, env

    def _generate_lite_command(
        self, option: str, time: str, add_time: bool
    ) -> Tuple[List[str], List[str]]:
        args = [option]
        args += self.config.static_options
        args += self._time_arguments(time, add_time)

        enc_args, env = self._generate_encryption(option)
        args += enc_args
        args.append(self.config.destination)

        return args, env

    def _generate_remove_command(self) -> Tuple[List[str], List[str]]:
        cleanup = self.config.cleanup
        args = [cleanup.type, cleanup.value]
        args += self.config.static_options

        enc_args, env = self._generate_encryption(cleanup.type)
        args += enc_args
        # Without --force duplicity only lists what it would delete
        args += ["--force", self.config.destination]

        return args, env

    def _generate_include_exclude(self) -> List[str]:
        """Selection arguments; duplicity applies the first matching rule"""
        config = self.config
        args: List[str] = []

        if config.exclude_device_files:
            args.append("--exclude-device-files")

        args += [f"--exclude={pattern}" for pattern in config.exclude]
        args += [f"--include={pattern}" for pattern in config.include]

        if config.inc_exc_file:
            args += ["--include-globbing-filelist", config.inc_exc_file]

        # Everything not explicitly included must be excluded, otherwise the
        # includes have no effect
        if config.include or config.inc_exc_file:
            args.append("--exclude=**")

        return args

    def _generate_encryption(self, option: str) -> Tuple[List[str], List[str]]:
        enc = self.config.encryption
        args: List[str] = []
        env: List[str] = []

        if not enc.enable:
            return ["--no-encryption"], env

        if enc.passphrase:
            env.append(f"PASSPHRASE={enc.passphrase}")

        if enc.gpg_encryption_key:
            if enc.hide_key_id:
                args.append(f"--hidden-encrypt-key={enc.gpg_encryption_key}")
            else:
                args.append(f"--encrypt-key={enc.gpg_encryption_key}")

        # duplicity rejects --sign-key on restore
        if enc.gpg_sign_key and option != COMMAND_RESTORE:
            args.append(f"--sign-key={enc.gpg_sign_key}")

        if enc.gpg_encryption_key and enc.secret_keyring:
            args.append(f"--encrypt-secret-keyring={enc.secret_keyring}")

        return args, env

    def _generate_credential_export(self) -> List[str]:
        config = self.config
        env: List[str] = []

        if config.aws.access_key_id:
            env.append(f"AWS_ACCESS_KEY_ID={config.aws.access_key_id}")
            env.append(f"AWS_SECRET_ACCESS_KEY={config.aws.secret_access_key}")

        if config.google_cloud.access_key_id:
            env.append(f"GS_ACCESS_KEY_ID={config.google_cloud.access_key_id}")
            env.append(f"GS_SECRET_ACCESS_KEY={config.google_cloud.secret_access_key}")

        if config.swift.username:
            env.append(f"SWIFT_USERNAME={config.swift.username}")
            env.append(f"SWIFT_PASSWORD={config.swift.password}")
            env.append(f"SWIFT_AUTHURL={config.swift.auth_url}")
            env.append(f"SWIFT_AUTHVERSION={config.swift.auth_version}")

        if config.ftp_password:
            env.append(f"FTP_PASSWORD={config.ftp_password}")

        return env


def generate_command(
    config: BackupConfig, argv: Sequence[str], time: str = ""
) -> GeneratedCommand:
    """Shortcut for ``CommandGenerator(config).generate(argv, time)``"""
    return CommandGenerator(config).generate(argv, time)
