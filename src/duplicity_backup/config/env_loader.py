"""Variables for ``env()`` lookups in the configuration template.

A ``.env`` file next to the configuration keeps secrets such as the GPG
passphrase out of the YAML file. Later sources win:

1) ``.env`` file (skipped when missing)
2) process environment
3) values passed to ``load_config(env=...)``
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values


class EnvLoader:
    """Collect template variables from a .env file and the environment.

    Example:
        variables = EnvLoader("~/.config/.env").load({"BACKUP_HOST": "nas"})
    """

    def __init__(
        self,
        env_file: Optional[Path | str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.env_file = Path(env_file).expanduser() if env_file else None
        self._environ = environ

    def _file_values(self) -> Dict[str, str]:
        if self.env_file is None or not self.env_file.is_file():
            return {}
        # KEY without "=" parses to None; it defines nothing
        return {k: v for k, v in dotenv_values(self.env_file).items() if v is not None}

    def load(self, overrides: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Merge .env file, process environment and overrides."""
        variables = self._file_values()
        variables.update(os.environ if self._environ is None else self._environ)
        if overrides:
            variables.update({k: str(v) for k, v in overrides.items()})
        return variables


__all__ = ["EnvLoader"]
