import json
import threading

import httpx
import pytest

from mention_bot.config import BridgeConfig
from mention_bot.errors import ReplyDeliveryError
from mention_bot.services.llm_service import ResponseGenerator

FALLBACK = "fallback: try again later"


@pytest.fixture
def bridge_config():
    return BridgeConfig(
        endpoint_url="https://llm.example.com/v1/chat/completions",
        operator_id="op-123",
        credential="sk-test",
        default_model="test-model",
        fallback_message=FALLBACK,
        request_timeout=5,
        max_workers=4,
    )


def completion_body(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_generator(config, handler):
    """ResponseGenerator backed by an httpx.MockTransport handler."""
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ResponseGenerator(config, client=client)


def reply_with(content, status=200):
    def handler(request):
        return httpx.Response(status, json=completion_body(content))
    return handler


class FakeReplier:
    def __init__(self, fail=False):
        self.posted = []
        self.fail = fail
        self.lock = threading.Lock()

    def reply_in_thread(self, channel, thread_ts, text):
        with self.lock:
            self.posted.append((channel, thread_ts, text))
        if self.fail:
            raise ReplyDeliveryError("channel_not_found", channel=channel, thread_ts=thread_ts)


class RecordingHandler:
    """MockTransport handler that records request bodies."""

    def __init__(self, response):
        self.response = response
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.response

    def payload(self, index=0):
        return json.loads(self.requests[index].content)
