"""duplicity command generation

Usage:
    from duplicity_backup.command import CommandGenerator

    command = CommandGenerator(config).generate(["restore", "/tmp/restored"], time="3D")
"""

from duplicity_backup.command.generator import (
    CHANGED_FILE_FILTER,
    COMMAND_BACKUP,
    COMMAND_CLEANUP,
    COMMAND_FULL_BACKUP,
    COMMAND_INCR_BACKUP,
    COMMAND_LIST,
    COMMAND_LIST_CHANGED_FILES,
    COMMAND_REMOVE,
    COMMAND_RESTORE,
    COMMAND_STATUS,
    COMMAND_VERIFY,
    COMMANDS,
    NOTIFY_COMMANDS,
    REMOVE_COMMANDS,
    CommandGenerator,
    GeneratedCommand,
    Recipe,
    clean_slice,
    generate_command,
)

__all__ = [
    "CommandGenerator",
    "GeneratedCommand",
    "Recipe",
    "COMMANDS",
    "generate_command",
    "clean_slice",
    "CHANGED_FILE_FILTER",
    "NOTIFY_COMMANDS",
    "REMOVE_COMMANDS",
    "COMMAND_BACKUP",
    "COMMAND_FULL_BACKUP",
    "COMMAND_INCR_BACKUP",
    "COMMAND_CLEANUP",
    "COMMAND_LIST",
    "COMMAND_RESTORE",
    "COMMAND_STATUS",
    "COMMAND_VERIFY",
    "COMMAND_REMOVE",
    "COMMAND_LIST_CHANGED_FILES",
]
