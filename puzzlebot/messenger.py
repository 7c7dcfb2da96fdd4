import logging
from typing import Protocol

import httpx

from puzzlebot.errors import MessengerError

log = logging.getLogger("messenger")


class Messenger(Protocol):
    async def post(self, channel: str, text: str) -> None: ...


class SlackWebhookMessenger:
    """Posts replies to a Slack incoming webhook; does nothing without a URL."""

    def __init__(
        self,
        webhook_url: str | None,
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.webhook_url = webhook_url
        self.timeout_s = timeout_s
        self.transport = transport

    async def post(self, channel: str, text: str) -> None:
        if not self.webhook_url:
            log.debug("no webhook configured, dropping message for %s", channel)
            return

        message = {"channel": channel, "text": text}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_s, transport=self.transport) as client:
                resp = await client.post(self.webhook_url, json=message)
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise MessengerError(f"webhook post failed: {exc}") from exc
