"""Run result notifications

Reports the outcome of backup runs to a MonDash board and a Slack
incoming webhook. Targets without configuration are skipped; failures of
individual targets are collected into a single NotificationError.
"""

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional

import httpx

from duplicity_backup.command.generator import NOTIFY_COMMANDS
from duplicity_backup.config.model import BackupConfig
from duplicity_backup.exceptions import DuplicityBackupError, NotificationError

NOTIFY_REQUEST_TIMEOUT = 2.0


@dataclass
class MonDashResult:
    title: str
    description: str
    status: str
    freshness: int
    ignore_mad: bool = True
    hide_mad: bool = True
    hide_value: bool = True


@dataclass
class SlackMessage:
    text: str
    username: str = ""
    channel: str = ""
    icon_emoji: str = ""

    def to_payload(self) -> Dict[str, str]:
        """Optional fields are left out when empty"""
        return {k: v for k, v in asdict(self).items() if v or k == "text"}


def describe_result(success: bool, error: Optional[BaseException]) -> str:
    if success:
        return "Backup succeeded"
    if isinstance(error, DuplicityBackupError):
        return f"Backup failed: {error.message}"
    return f"Backup failed: {error}"


class Notifier:
    """Send run results to the configured targets"""

    def __init__(self, config: BackupConfig, client: Optional[httpx.Client] = None):
        self.config = config
        self._client = client

    def notify(self, command: str, success: bool, error: Optional[BaseException] = None) -> None:
        """Notify all configured targets about a finished command

        Commands outside NOTIFY_COMMANDS are ignored.

        Raises:
            NotificationError: If at least one target failed
        """
        if command not in NOTIFY_COMMANDS:
            return

        targets: List[Callable[[bool, Optional[BaseException]], None]] = [
            self.notify_mondash,
            self.notify_slack,
        ]

        errors: List[NotificationError] = []
        for target in targets:
            try:
                target(success, error)
            except NotificationError as e:
                errors.append(e)

        if not errors:
            return

        summary = "".join(f"\n- {e.code}: {e.message}" for e in errors)
        raise NotificationError(
            "NOTIFICATION_FAILED",
            f"{len(errors)} notifiers failed:{summary}",
            details={"failed": [e.code for e in errors]},
        )

    def notify_mondash(self, success: bool, error: Optional[BaseException] = None) -> None:
        mondash = self.config.notifications.mondash
        if not mondash.board_url:
            return

        hostname = self.config.hostname
        result = MonDashResult(
            title=f"duplicity-backup on {hostname}",
            description=describe_result(success, error),
            status="OK" if success else "Critical",
            freshness=mondash.freshness,
        )

        self._send(
            "MONDASH_FAILED",
            "PUT",
            f"{mondash.board_url}/duplicity-{hostname}",
            payload=asdict(result),
            headers={"Authorization": mondash.token},
        )

    def notify_slack(self, success: bool, error: Optional[BaseException] = None) -> None:
        slack = self.config.notifications.slack
        if not slack.hook_url:
            return

        message = SlackMessage(
            text=describe_result(success, error),
            username=slack.username,
            channel=slack.channel,
            icon_emoji=slack.emoji,
        )

        self._send("SLACK_FAILED", "POST", slack.hook_url, payload=message.to_payload())

    def _send(
        self,
        code: str,
        method: str,
        url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        try:
            if self._client is not None:
                response = self._client.request(method, url, json=payload, headers=headers)
            else:
                with httpx.Client(timeout=NOTIFY_REQUEST_TIMEOUT) as client:
                    response = client.request(method, url, json=payload, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NotificationError(code, f"executing request: {e}", details={"url": url}) from e

        if response.status_code != httpx.codes.OK:
            raise NotificationError(
                code,
                f"unexpected status code: {response.status_code}",
                details={"url": url},
            )
