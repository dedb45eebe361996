"""Process execution for duplicity-backup"""

from duplicity_backup.runner.environment import (
    env_list_to_map,
    env_map_to_list,
    find_binary,
    merge_environment,
)
from duplicity_backup.runner.line_writer import END_OF_STREAM, LineQueueWriter, frame_lines
from duplicity_backup.runner.process import ProcessRunner, RunResult

__all__ = [
    "ProcessRunner",
    "RunResult",
    "LineQueueWriter",
    "frame_lines",
    "END_OF_STREAM",
    "env_list_to_map",
    "env_map_to_list",
    "merge_environment",
    "find_binary",
]
