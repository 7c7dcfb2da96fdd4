import json

import httpx
import pytest

from puzzlebot.errors import MessengerError
from puzzlebot.messenger import SlackWebhookMessenger

from conftest import run


def test_post_sends_channel_and_text():
    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, text="ok")

    messenger = SlackWebhookMessenger("https://hooks.test/T/B/X", transport=httpx.MockTransport(handler))
    run(messenger.post("C1", "hello"))

    assert bodies == [{"channel": "C1", "text": "hello"}]


def test_post_without_webhook_is_noop():
    def handler(request):
        raise AssertionError("should not be called")

    messenger = SlackWebhookMessenger(None, transport=httpx.MockTransport(handler))
    run(messenger.post("C1", "hello"))


def test_post_failure_raises_messenger_error():
    messenger = SlackWebhookMessenger(
        "https://hooks.test/T/B/X",
        transport=httpx.MockTransport(lambda request: httpx.Response(500)),
    )
    with pytest.raises(MessengerError):
        run(messenger.post("C1", "hello"))
