"""Shared fixtures for SDK tests."""

import asyncio
import json
from typing import Optional

import pytest

from skopelink_sdk.batcher import EventBatcher
from skopelink_sdk.transport import TransportResponse


class FakeTransport:
    """Records every POST and answers from a scripted list of outcomes.

    Each outcome is a ``TransportResponse`` or an exception to raise. When
    the script runs out, requests succeed. Setting ``gate`` makes ``post``
    wait on it, so tests can act while a flush is in flight.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls: list[dict] = []
        self.gate: Optional[asyncio.Event] = None
        self.closed = False

    async def post(self, url, headers, body):
        self.calls.append({"url": url, "headers": headers, "body": body})
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.outcomes.pop(0) if self.outcomes else TransportResponse(True, 200)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def aclose(self):
        self.closed = True

    def sent_event_names(self, call_index: int = 0) -> list[str]:
        body = json.loads(self.calls[call_index]["body"])
        return [e["eventName"] for e in body["events"]]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def batcher(transport):
    b = EventBatcher(transport=transport)
    b.initialize(api_key="test_api_key", endpoint="https://api.example.com")
    return b
