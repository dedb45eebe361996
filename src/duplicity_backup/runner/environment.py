"""Helpers for ``NAME=value`` environment lists"""

import os
import shutil
from typing import Dict, Iterable, List, Mapping, Optional

from duplicity_backup.exceptions import ConfigurationError


def env_list_to_map(entries: Iterable[str]) -> Dict[str, str]:
    """Parse ``NAME=value`` entries, skipping blanks and ``#`` comments"""
    out: Dict[str, str] = {}
    for entry in entries:
        if not entry or entry.startswith("#"):
            continue
        name, _, value = entry.partition("=")
        out[name] = value
    return out


def env_map_to_list(env: Mapping[str, str]) -> List[str]:
    return [f"{k}={v}" for k, v in env.items()]


def merge_environment(
    extra: Iterable[str], base: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Overlay generated entries on the inherited environment

    Args:
        extra: ``NAME=value`` entries from the command generator
        base: Inherited environment (default: os.environ)
    """
    env = dict(os.environ if base is None else base)
    env.update(env_list_to_map(extra))
    return env


def find_binary(name: str = "duplicity") -> str:
    """Locate an executable on $PATH

    Raises:
        ConfigurationError: If the executable cannot be found
    """
    path = shutil.which(name)
    if path is None:
        raise ConfigurationError(
            "BINARY_NOT_FOUND",
            f"Did not find {name} binary in $PATH, please install it",
            details={"binary": name},
        )
    return path
