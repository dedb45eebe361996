#!/usr/bin/env python3
"""duplicity-backup command line interface

Loads the configuration, takes the lock, runs the requested duplicity
command, removes old backups where configured and reports the result.

USAGE:
    duplicity-backup [options] <command> [arguments]

See HELP_TEXT or ``duplicity-backup help`` for the command list.
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence

import httpx

from duplicity_backup import __version__
from duplicity_backup.command import (
    COMMAND_REMOVE,
    NOTIFY_COMMANDS,
    REMOVE_COMMANDS,
    CommandGenerator,
)
from duplicity_backup.config import (
    CLEANUP_NONE,
    BackupConfig,
    RunSettings,
    expand_path,
    load_config,
)
from duplicity_backup.exceptions import (
    CommandGenerationError,
    ConfigurationError,
    DuplicityBackupError,
    LockError,
    NotificationError,
    SubprocessError,
)
from duplicity_backup.lock import LockFile
from duplicity_backup.logger import Logger, StructuredLogger, create_logger
from duplicity_backup.notify import NOTIFY_REQUEST_TIMEOUT, Notifier
from duplicity_backup.runner import ProcessRunner, find_binary, merge_environment

LOG_FILE_FORMAT = "duplicity-backup_%Y-%m-%d_%H-%M-%S.txt"

HELP_TEXT = """\
Usage: duplicity-backup [options] <command> [arguments]

Commands:
  backup                       Incremental backup, full backup when duplicity decides so
  full                         Force a full backup
  incr                         Force an incremental backup
  cleanup                      Remove broken or orphaned backup files
  list-current-files           List the files in the latest backup (or at --time)
  list-changed-files           Dry run listing files added (A), deleted (D) or modified (M)
  restore [file] <target>      Restore everything, or a single file, into <target>
  status                       Show the collection status of the backup destination
  verify                       Compare the backup with the local files
  help                         Show this message

After 'backup' and 'cleanup' old backups are removed according to the
'cleanup' section of the configuration unless its type is 'none'.

Options:
  -f, --config-file PATH       Configuration for this duplicity wrapper
  -l, --lock-file PATH         File to hold the lock for this wrapper execution
  -t, --time TIME              The time from which to restore or list files
  -n, --dry-run                Do a test-run without changes
  -d, --debug                  Print duplicity commands to output
      --version                Print version and exit
"""


def build_parser(settings: RunSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="duplicity-backup",
        description="Configuration based wrapper around duplicity",
        add_help=False,
    )
    parser.add_argument(
        "-f", "--config-file",
        default=settings.config_file,
        help="Configuration for this duplicity wrapper",
    )
    parser.add_argument(
        "-l", "--lock-file",
        default=settings.lock_file,
        help="File to hold the lock for this wrapper execution",
    )
    parser.add_argument(
        "-t", "--time",
        default="",
        help="The time from which to restore or list files",
    )
    parser.add_argument(
        "-n", "--dry-run",
        action="store_true",
        help="Do a test-run without changes",
    )
    parser.add_argument(
        "-d", "--debug",
        action="store_true",
        help="Print duplicity commands to output",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument("command", nargs="?", default=None)
    parser.add_argument("args", nargs="*", default=[])
    return parser


def open_run_log(config: BackupConfig, now: Optional[datetime] = None) -> StructuredLogger:
    """Create the log directory and a logger writing this run's log file

    Raises:
        OSError: If the directory or file cannot be created
    """
    log_dir = Path(config.log_directory)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / (now or datetime.now()).strftime(LOG_FILE_FORMAT)
    return create_logger(log_file=str(log_file))


class BackupRun:
    """One wrapper invocation: command, optional removal, notification"""

    def __init__(
        self,
        config: BackupConfig,
        logger: Logger,
        runner: ProcessRunner,
        notifier: Notifier,
        time: str = "",
        dry_run: bool = False,
        debug: bool = False,
    ):
        self.config = config
        self.logger = logger
        self.runner = runner
        self.notifier = notifier
        self.generator = CommandGenerator(config)
        self.time = time
        self.dry_run = dry_run
        self.debug = debug

    def run(self, argv: Sequence[str]) -> int:
        """Run a subcommand and the follow-up steps

        Returns:
            Process exit code
        """
        if not self.execute(argv):
            return 1

        command = argv[0]
        if self.config.cleanup.type != CLEANUP_NONE and command in REMOVE_COMMANDS:
            self.logger.info("++++ Starting removal of old backups")
            if not self.execute([COMMAND_REMOVE]):
                return 1

        self.send_notification(command, True)
        self.logger.info("++++ Backup finished successfully")
        return 0

    def execute(self, argv: Sequence[str]) -> bool:
        """Generate and run one duplicity command

        Failures are logged and notified, never raised.

        Returns:
            True if duplicity exited successfully
        """
        command_name = argv[0] if argv else ""

        try:
            command = self.generator.generate(argv, self.time)
        except CommandGenerationError as e:
            self.logger.error(f"[ERR] {e.message}")
            self.send_notification(command_name, False, e)
            return False

        # Ensure duplicity is talking to us
        args: List[str] = ["-v3", *command.args]
        if self.dry_run:
            args = ["--dry-run", *args]

        if self.debug:
            self.logger.info(f"[DBG] Command: {self.runner.binary} {' '.join(args)}")

        try:
            result = self.runner.run(
                args,
                env=merge_environment(command.env),
                line_filter=command.line_filter,
            )
        except SubprocessError as e:
            self.logger.error(f"[ERR] {e.message}")
            self.send_notification(command_name, False, e)
            return False

        if result.success:
            self.logger.info("[INF] Execution of duplicity command was successful.")
            return True

        self.logger.error(
            "[ERR] Execution of duplicity command was unsuccessful! (exit-code was non-zero)"
        )
        error = SubprocessError(
            "NON_ZERO_EXIT",
            f"Could not create backup: exit status {result.returncode}",
            details={"command": command_name, "returncode": result.returncode},
        )
        self.send_notification(command_name, False, error)
        return False

    def send_notification(
        self, command: str, success: bool, error: Optional[DuplicityBackupError] = None
    ) -> None:
        if command not in NOTIFY_COMMANDS:
            return

        try:
            self.notifier.notify(command, success, error)
        except NotificationError as e:
            self.logger.error(f"[ERR] Error sending notifications: {e.message}")
        else:
            self.logger.info("[INF] Notifications sent")


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = RunSettings.from_env()
    options = build_parser(settings).parse_args(argv)

    if options.version:
        print(f"duplicity-backup {__version__}")
        return 0

    if not options.command or options.command == "help":
        print(HELP_TEXT)
        return 0

    try:
        binary = find_binary(settings.binary)
    except ConfigurationError as e:
        print(e.message, file=sys.stderr)
        return 1

    config_file = expand_path(options.config_file)
    try:
        config = load_config(config_file, env_file=config_file.parent / ".env")
    except ConfigurationError as e:
        print(f"Unable to read configuration file: {e.message}", file=sys.stderr)
        return 1

    try:
        logger = open_run_log(config)
    except OSError as e:
        print(f"Unable to open logfile in {config.log_directory}: {e}", file=sys.stderr)
        return 1

    try:
        logger.info(
            f"++++ duplicity-backup {__version__} started with command '{options.command}'"
        )

        lock = LockFile(expand_path(options.lock_file))
        try:
            lock.try_lock()
        except LockError as e:
            logger.error(f"Could not acquire lock: {e.message}")
            return 1

        try:
            with httpx.Client(timeout=NOTIFY_REQUEST_TIMEOUT) as client:
                backup_run = BackupRun(
                    config,
                    logger,
                    ProcessRunner(binary, logger),
                    Notifier(config, client),
                    time=options.time,
                    dry_run=options.dry_run,
                    debug=options.debug,
                )
                return backup_run.run([options.command, *options.args])
        finally:
            lock.unlock()
    finally:
        logger.close()


if __name__ == "__main__":
    raise SystemExit(main())
