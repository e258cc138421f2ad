"""
Shared fixtures for the chat client tests.

FakeSocketClient stands in for socketio.AsyncClient: it records emitted
events and lets tests fire inbound events at the registered handlers.
"""

import pytest

from chat_cli import SessionController

SERVER_URL = "http://localhost:3000"


class FakeSocketClient:
    """Minimal stand-in for socketio.AsyncClient."""

    def __init__(self, connect_error=None, emit_error=None, auto_connect_event=True):
        self.handlers = {}
        self.emitted = []
        self.connect_calls = []
        self.disconnect_calls = 0
        self.connect_error = connect_error
        self.emit_error = emit_error
        self.auto_connect_event = auto_connect_event
        self.connected = False

    def on(self, event, handler=None, namespace=None):
        self.handlers[event] = handler

    async def connect(self, url, transports=None):
        self.connect_calls.append((url, transports))
        if self.connect_error:
            raise self.connect_error
        self.connected = True
        if self.auto_connect_event:
            await self.fire("connect")

    async def emit(self, event, data=None):
        if self.emit_error:
            raise self.emit_error
        self.emitted.append((event, data))

    async def disconnect(self):
        self.disconnect_calls += 1
        self.connected = False

    async def fire(self, event, *args):
        await self.handlers[event](*args)

    def emitted_names(self):
        return [name for name, _ in self.emitted]


@pytest.fixture
def fake_client():
    return FakeSocketClient()


@pytest.fixture
def controller(fake_client):
    return SessionController(
        "alice", SERVER_URL, client_factory=lambda: fake_client
    )


@pytest.fixture
def notifications(controller):
    """Record every notification the controller emits."""
    seen = []
    controller.set_on_transport_connected(lambda: seen.append(("connected",)))
    controller.set_on_welcome(lambda u, r: seen.append(("welcome", u, r)))
    controller.set_on_chat_message(lambda m: seen.append(("chat", m)))
    controller.set_on_users_list(lambda r: seen.append(("users", r)))
    controller.set_on_user_joined(lambda u: seen.append(("joined", u)))
    controller.set_on_user_left(lambda u: seen.append(("left", u)))
    controller.set_on_server_error(lambda e: seen.append(("error", e)))
    controller.set_on_disconnected(lambda r: seen.append(("disconnect", r)))
    controller.set_on_unexpected_payload(
        lambda name, reason: seen.append(("unexpected", name, reason))
    )
    return seen
