"""
Notification Service
Tells the pushing author, via Slack, that linting failed
"""

import time
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from delint.core.errors import NotificationDeliveryError
from delint.models.push_event import PushEvent
from delint.services.lint_runner import LintOutcome
from delint.utils.logger import logger

FAILURE_COLOR = "#D94649"
FAILURE_TITLE = "Linting of TypeScript sources failed"
FOOTER_ICON = "http://images.atomist.com/rug/commit.png"


class SlackMessageClient:
    """Delivers messages to a single user through chat.postMessage"""

    def __init__(
        self,
        token: str,
        api_url: str = "https://slack.com/api",
        timeout: float = 10,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def address_user(self, message: Dict[str, Any], screen_name: str):
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                f"{self.api_url}/chat.postMessage",
                json={"channel": screen_name, **message},
                headers={"Authorization": f"Bearer {self.token}"},
            )

        if response.status_code != 200:
            raise NotificationDeliveryError(f"Slack answered {response.status_code}")
        try:
            data = response.json()
        except ValueError as e:
            raise NotificationDeliveryError(f"Slack answered with a non-JSON body: {response.text[:200]}") from e
        if not data.get("ok"):
            raise NotificationDeliveryError(f"Slack refused message: {data.get('error', 'unknown error')}")


def strip_paths(output: str, base_dir: Path) -> str:
    """Remove every occurrence of the workspace path from lint output"""
    paths = {str(base_dir), str(Path(base_dir).resolve())}
    # longest first so a resolved path is not left half-stripped
    for path in sorted(paths, key=len, reverse=True):
        output = output.replace(path, "")
    return output


def build_failure_message(push: PushEvent, outcome: LintOutcome, base_dir: Path, now: float = None) -> Dict[str, Any]:
    full_name = push.full_name
    return {
        "text": f"Linting failed after your push to `{full_name}`",
        "attachments": [{
            "color": FAILURE_COLOR,
            "fallback": FAILURE_TITLE,
            "title": FAILURE_TITLE,
            "text": f"```{strip_paths(outcome.output, base_dir)}```",
            "mrkdwn_in": ["text"],
            "footer_icon": FOOTER_ICON,
            "footer": full_name,
            "ts": int(now if now is not None else time.time()),
        }],
    }


class NotificationDispatcher:

    def __init__(self, client: Optional[SlackMessageClient]):
        self.client = client

    async def notify(self, push: PushEvent, outcome: LintOutcome, base_dir: Path) -> bool:
        """
        Send the failure report to the push author.

        Returns:
            True if a message was delivered. Skips and delivery failures return False.
        """
        if outcome.passed or not outcome.output:
            return False

        screen_name = push.author_chat_identity
        if not screen_name:
            logger.info(f"[Notify] No chat identity for push to {push.full_name}, skipping")
            return False

        if self.client is None:
            logger.info("[Notify] No chat client configured, skipping")
            return False

        message = build_failure_message(push, outcome, base_dir)
        try:
            await self.client.address_user(message, screen_name)
        except Exception as e:
            logger.warning(
                f"[Notify] Could not notify {screen_name}: {e}",
                exc_info=not isinstance(e, (NotificationDeliveryError, httpx.HTTPError)),
            )
            return False

        logger.info(f"[Notify] Sent lint failure for {push.full_name} to {screen_name}")
        return True
