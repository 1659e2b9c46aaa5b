"""Shared fixtures for the signalling relay tests."""

import asyncio
import json

import pytest

from vidimeet.server.matchmaker import Matchmaker


class RecordingHandle:
    """Stand-in send handle that keeps every frame it was given."""

    def __init__(self, name):
        self.name = name
        self.sent = []

    async def send(self, raw):
        self.sent.append(json.loads(raw))

    def types(self):
        return [f["type"] for f in self.sent]


class FakeConnection(RecordingHandle):
    """Scripted websocket: yields queued inbound frames, then closes."""

    def __init__(self, name, inbound=()):
        super().__init__(name)
        self._inbound = asyncio.Queue()
        for raw in inbound:
            self.feed(raw)

    def feed(self, raw):
        self._inbound.put_nowait(raw if isinstance(raw, str) else json.dumps(raw))

    def close(self):
        self._inbound.put_nowait(None)

    def __aiter__(self):
        return self

    async def __anext__(self):
        raw = await self._inbound.get()
        if raw is None:
            raise StopAsyncIteration
        return raw


@pytest.fixture
def mm():
    """A fresh matchmaker with no shared state."""
    return Matchmaker()


@pytest.fixture
def connect(mm):
    """Register named connections and hand back their recording handles."""

    def _connect(*names):
        handles = [RecordingHandle(n) for n in names]
        for h in handles:
            mm.connect(h.name, h)
        return handles if len(handles) > 1 else handles[0]

    return _connect


def frames_for(outbound, conn_id):
    return [o.frame for o in outbound if o.conn_id == conn_id]
