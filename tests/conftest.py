"""Shared fixtures for duplicity-backup tests"""

import copy
from typing import Any, Dict, List, Tuple

import pytest

from duplicity_backup.config import BackupConfig, load_config
from duplicity_backup.logger import Logger

SAMPLE_CONFIG = b"""---
root: /
hostname: testing
dest: s3+http://my-backup/myhost/
aws:
  access_key_id: AKIAJKCC13246798732A
  secret_access_key: Oosdkfjadgiuagbiajbgaliurtbjsbfgaldfbgdf
inclist:
    - /data
encryption:
    enable: true
    passphrase: 5pJZqnzrmFSi1wqZtcUh
static_options: ["--full-if-older-than", "7D", "--s3-use-new-style"]
cleanup:
    type: remove-all-but-n-full
    value: 2
logdir: /var/log/duplicity/
"""

SAMPLE_ENV = [
    "PASSPHRASE=5pJZqnzrmFSi1wqZtcUh",
    "AWS_ACCESS_KEY_ID=AKIAJKCC13246798732A",
    "AWS_SECRET_ACCESS_KEY=Oosdkfjadgiuagbiajbgaliurtbjsbfgaldfbgdf",
]

BASE_DATA: Dict[str, Any] = {
    "root": "/data",
    "hostname": "testing",
    "dest": "file:///backups",
    "logdir": "/var/log/duplicity",
}


def make_config(**overrides: Any) -> BackupConfig:
    """Build a validated config from BASE_DATA plus YAML-keyed overrides"""
    data = copy.deepcopy(BASE_DATA)
    data.update(overrides)
    return BackupConfig.model_validate(data).check_rules()


class ListLogger(Logger):
    """Logger collecting (level, message) tuples"""

    def __init__(self) -> None:
        self.records: List[Tuple[str, str]] = []

    def _add(self, level: str, message: str) -> None:
        self.records.append((level, message))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._add("DEBUG", message)

    def info(self, message: str, **kwargs: Any) -> None:
        self._add("INFO", message)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._add("WARNING", message)

    def error(self, message: str, **kwargs: Any) -> None:
        self._add("ERROR", message)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._add("CRITICAL", message)

    def get_session_id(self) -> str:
        return "test"

    @property
    def messages(self) -> List[str]:
        return [message for _, message in self.records]


@pytest.fixture
def sample_config() -> BackupConfig:
    return load_config(SAMPLE_CONFIG, env={})


@pytest.fixture
def list_logger() -> ListLogger:
    return ListLogger()
