"""Pytest hooks and fixtures."""

import asyncio
import json

import pytest


class FakeConnection:
    """In-memory RpcConnection: feeds queued frames, records sent ones."""

    def __init__(self, frames=None):
        self.frames = list(frames or [])
        self.sent = []

    async def send(self, text):
        self.sent.append(text)

    async def iter_text(self):
        for frame in self.frames:
            yield frame if isinstance(frame, str) else json.dumps(frame)
            await asyncio.sleep(0)

    @property
    def responses(self):
        return [json.loads(text) for text in self.sent]


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def math_module():
    return {
        "sync_add": lambda a, b: a + b,
        "echo": lambda x, cb: cb(x),
    }


@pytest.fixture
def make_connection():
    return FakeConnection
