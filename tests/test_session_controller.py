"""
Tests for the SessionController

Covers the handshake, the inbound event contract, the connection state
machine and the quit/disconnect path, using a fake Socket.IO client.
"""

import pytest
from socketio.exceptions import BadNamespaceError, ConnectionError as SioConnectionError

from chat_cli import (
    ChatMessage,
    ConnectError,
    ConnectionState,
    SendError,
    SessionController,
)

from conftest import SERVER_URL, FakeSocketClient


def test_controller_can_be_instantiated(controller, fake_client):
    assert controller.username == "alice"
    assert controller.server_url == SERVER_URL
    assert controller.state is ConnectionState.DISCONNECTED
    assert controller.roster == []
    assert not controller.is_connected
    assert not controller.ever_connected


def test_controller_subscribes_to_every_inbound_event(controller, fake_client):
    for event in (
        "connect",
        "welcome",
        "chat:public",
        "users:list",
        "user_joined",
        "user_left",
        "server:error",
        "disconnect",
        "connect_error",
    ):
        assert event in fake_client.handlers


def test_invalid_username_is_rejected(fake_client):
    with pytest.raises(ValueError):
        SessionController("a b", SERVER_URL, client_factory=lambda: fake_client)


class TestHandshake:
    """Connect, hello and welcome."""

    @pytest.mark.asyncio
    async def test_connect_sends_hello_without_marking_connected(
        self, controller, fake_client, notifications
    ):
        await controller.connect()

        assert fake_client.connect_calls == [(SERVER_URL, ["websocket"])]
        assert fake_client.emitted == [("hello", {"username": "alice"})]
        assert controller.state is ConnectionState.CONNECTING
        assert controller.ever_connected
        assert notifications == [("connected",)]

    @pytest.mark.asyncio
    async def test_welcome_marks_connected_and_sets_roster(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire(
            "welcome", {"username": "alice", "connectedUsers": ["bob", "carol"]}
        )

        assert controller.state is ConnectionState.CONNECTED
        assert controller.is_connected
        assert controller.roster == ["bob", "carol"]
        assert notifications[-1] == ("welcome", "alice", ["bob", "carol"])

    @pytest.mark.asyncio
    async def test_malformed_welcome_changes_nothing(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire("welcome", {"username": "alice"})

        assert controller.state is ConnectionState.CONNECTING
        assert controller.roster == []
        assert notifications[-1][0:2] == ("unexpected", "welcome")

    @pytest.mark.asyncio
    async def test_connect_failure_raises_connect_error(self):
        fake = FakeSocketClient(connect_error=SioConnectionError("refused"))
        controller = SessionController(
            "alice", SERVER_URL, client_factory=lambda: fake
        )

        with pytest.raises(ConnectError) as exc_info:
            await controller.connect()

        assert SERVER_URL in str(exc_info.value)
        assert isinstance(exc_info.value, ConnectionError)
        assert controller.state is ConnectionState.DISCONNECTED
        assert not controller.ever_connected

    @pytest.mark.asyncio
    async def test_handshake_rejection_is_flagged(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire(
            "server:error", {"code": "USERNAME_TAKEN", "message": "taken"}
        )

        _, error = notifications[-1]
        assert error.code == "USERNAME_TAKEN"
        assert error.handshake_rejected
        assert controller.state is ConnectionState.CONNECTING

    @pytest.mark.asyncio
    async def test_handshake_codes_after_welcome_are_not_flagged(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire(
            "welcome", {"username": "alice", "connectedUsers": []}
        )
        await fake_client.fire("server:error", {"code": "HELLO_TIMEOUT"})

        _, error = notifications[-1]
        assert not error.handshake_rejected
        assert controller.is_connected


class TestInboundEvents:
    """Event contract once connected."""

    @pytest.mark.asyncio
    async def test_chat_message_is_forwarded(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire(
            "chat:public", {"username": "bob", "text": "hi", "at": 5}
        )

        assert notifications[-1] == (
            "chat",
            ChatMessage(username="bob", text="hi", sent_at_epoch_millis=5),
        )

    @pytest.mark.asyncio
    async def test_chat_message_missing_fields_does_not_touch_state(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire(
            "welcome", {"username": "alice", "connectedUsers": ["bob"]}
        )
        await fake_client.fire("chat:public", {"at": 0})

        _, message = notifications[-1]
        assert message.username is None
        assert message.text == ""
        assert controller.roster == ["bob"]
        assert controller.state is ConnectionState.CONNECTED

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"username": "bob", "text": "x", "at": float("nan")},
            {"username": "bob", "text": "x", "at": float("inf")},
            '{"username": "bob", "text": "x", "at": NaN}',
        ],
    )
    async def test_chat_message_non_finite_timestamp_is_rendered(
        self, controller, fake_client, notifications, payload
    ):
        await controller.connect()
        await fake_client.fire("chat:public", payload)

        assert notifications[-1] == (
            "chat",
            ChatMessage(username="bob", text="x", sent_at_epoch_millis=0),
        )
        assert controller.state is ConnectionState.CONNECTING

    @pytest.mark.asyncio
    async def test_users_list_replaces_roster(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire("users:list", {"users": ["bob", "carol"]})
        await fake_client.fire("users:list", {"users": ["dave"]})

        assert controller.roster == ["dave"]
        assert notifications[-1] == ("users", ["dave"])

    @pytest.mark.asyncio
    async def test_empty_users_list_empties_roster(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire("users:list", {"users": ["bob"]})
        await fake_client.fire("users:list", {"users": []})

        assert controller.roster == []
        assert notifications[-1] == ("users", [])

    @pytest.mark.asyncio
    async def test_malformed_users_list_keeps_roster(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire("users:list", {"users": ["bob"]})
        await fake_client.fire("users:list", {"users": "everyone"})

        assert controller.roster == ["bob"]
        assert notifications[-1][0:2] == ("unexpected", "users:list")

    @pytest.mark.asyncio
    async def test_join_and_leave_do_not_mutate_roster(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire("users:list", {"users": ["bob"]})
        await fake_client.fire("user_joined", {"username": "carol"})
        await fake_client.fire("user_left", {"username": "bob"})
        await fake_client.fire("user_left", {})

        assert controller.roster == ["bob"]
        assert notifications[-3:] == [
            ("joined", "carol"),
            ("left", "bob"),
            ("left", None),
        ]

    @pytest.mark.asyncio
    async def test_server_error_is_not_fatal(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire(
            "welcome", {"username": "alice", "connectedUsers": []}
        )
        await fake_client.fire("server:error", "garbage")
        await fake_client.fire(
            "server:error", {"code": "INVALID_MESSAGE", "message": "too long"}
        )

        assert notifications[-2][0:2] == ("unexpected", "server:error")
        _, error = notifications[-1]
        assert (error.code, error.message) == ("INVALID_MESSAGE", "too long")
        assert controller.is_connected

    @pytest.mark.asyncio
    async def test_transport_disconnect_marks_disconnected(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire(
            "welcome", {"username": "alice", "connectedUsers": []}
        )
        await fake_client.fire("disconnect", "io server disconnect")

        assert controller.state is ConnectionState.DISCONNECTED
        assert notifications[-1] == ("disconnect", "io server disconnect")
        assert fake_client.emitted_names() == ["hello"]

    @pytest.mark.asyncio
    async def test_transport_disconnect_without_reason(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await fake_client.fire("disconnect")

        assert notifications[-1] == ("disconnect", None)

    @pytest.mark.asyncio
    async def test_events_without_callbacks_are_handled(self, controller, fake_client):
        await controller.connect()
        await fake_client.fire("chat:public", {"text": "x"})
        await fake_client.fire("users:list", {"users": ["bob"]})
        await fake_client.fire("users:list", None)

        assert controller.roster == ["bob"]


class TestOutboundCommands:
    """Commands sent by the operator."""

    @pytest.mark.asyncio
    async def test_commands_are_emitted_in_order(self, controller, fake_client):
        await controller.connect()
        await controller.send_public_message("hello world")
        await controller.send_list_users_request()

        assert fake_client.emitted == [
            ("hello", {"username": "alice"}),
            ("chat:public", {"text": "hello world"}),
            ("command:list", {}),
        ]

    @pytest.mark.asyncio
    async def test_public_message_is_not_echoed(
        self, controller, fake_client, notifications
    ):
        await controller.connect()
        await controller.send_public_message("hi")

        assert not [n for n in notifications if n[0] == "chat"]

    @pytest.mark.asyncio
    async def test_send_before_connect_raises(self, controller):
        with pytest.raises(SendError):
            await controller.send_public_message("hi")

    @pytest.mark.asyncio
    async def test_transport_write_failure_raises_send_error(
        self, controller, fake_client
    ):
        await controller.connect()
        fake_client.emit_error = BadNamespaceError("/ is not a connected namespace.")

        with pytest.raises(SendError):
            await controller.send_list_users_request()


class TestQuitAndDisconnect:
    """Orderly termination."""

    @pytest.mark.asyncio
    async def test_quit_before_welcome_sends_once_and_disconnects_once(
        self, controller, fake_client
    ):
        await controller.connect()
        await controller.quit()
        await controller.disconnect()

        assert fake_client.emitted_names() == ["hello", "command:quit"]
        assert fake_client.disconnect_calls == 1
        assert controller.state is ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_quit_after_welcome(self, controller, fake_client):
        await controller.connect()
        await fake_client.fire(
            "welcome", {"username": "alice", "connectedUsers": []}
        )
        await controller.quit()

        assert fake_client.emitted[-1] == ("command:quit", {})
        assert fake_client.disconnect_calls == 1
        assert controller.state is ConnectionState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_quit_releases_transport_when_send_fails(
        self, controller, fake_client
    ):
        await controller.connect()
        fake_client.emit_error = BadNamespaceError("closed")

        with pytest.raises(SendError):
            await controller.quit()

        assert fake_client.disconnect_calls == 1

    @pytest.mark.asyncio
    async def test_disconnect_without_connect_is_noop(self, controller, fake_client):
        await controller.disconnect()

        assert fake_client.disconnect_calls == 0

    @pytest.mark.asyncio
    async def test_send_after_disconnect_raises(self, controller, fake_client):
        await controller.connect()
        await controller.disconnect()

        with pytest.raises(SendError):
            await controller.send_public_message("late")
