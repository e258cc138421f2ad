"""
Event Schema Definitions

This module defines the inbound events the server pushes to the client.
Payloads are decoded once, here, into one dataclass per event; the
controller then dispatches on the dataclass type.

Wire payloads (server -> client):
    welcome       {"username": str, "connectedUsers": [str]}
    chat:public   {"username": str, "text": str, "at": int}
    users:list    {"users": [str]}
    user_joined   {"username": str}
    user_left     {"username": str}
    server:error  {"code": str, "message": str}
"""

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from ..exceptions import PayloadError
from .base import BaseEvent, optional_str, payload_to_dict, string_list

# server:error codes sent when the server refuses a hello
HANDSHAKE_ERROR_CODES = frozenset(
    {"INVALID_USERNAME", "USERNAME_TAKEN", "HELLO_TIMEOUT"}
)


@dataclass
class ConnectEvent(BaseEvent):
    """Transport-level notification that the socket is open."""

    event_name = "connect"

    @classmethod
    def from_payload(cls, payload: Any = None) -> "ConnectEvent":
        """Connect carries no payload."""
        return cls()


@dataclass
class WelcomeEvent(BaseEvent):
    """
    Server acknowledgement of the handshake.

    Attributes:
        username: Username the server registered
        connected_users: Usernames connected at the time of the handshake
    """

    event_name = "welcome"

    username: str
    connected_users: List[str] = field(default_factory=list)

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "WelcomeEvent":
        """Both fields are required."""
        username = optional_str(data, "username")
        if username is None:
            raise PayloadError(cls.event_name, "missing or invalid 'username'")
        return cls(
            username=username,
            connected_users=string_list(cls.event_name, data, "connectedUsers"),
        )


@dataclass
class ChatMessage(BaseEvent):
    """
    A public chat message relayed by the server.

    Attributes:
        username: Sender's username, None if the server omitted it
        text: Message text (empty if omitted)
        sent_at_epoch_millis: Server timestamp in ms, 0 if omitted
    """

    event_name = "chat:public"

    username: Optional[str]
    text: str = ""
    sent_at_epoch_millis: int = 0

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "ChatMessage":
        """Every field is optional."""
        at = data.get("at")
        if isinstance(at, bool) or not isinstance(at, (int, float)):
            at = 0
        elif isinstance(at, float) and not math.isfinite(at):
            at = 0
        return cls(
            username=optional_str(data, "username"),
            text=optional_str(data, "text") or "",
            sent_at_epoch_millis=int(at),
        )


@dataclass
class UsersListEvent(BaseEvent):
    """
    Full list of connected users.

    Attributes:
        users: Connected usernames
    """

    event_name = "users:list"

    users: List[str] = field(default_factory=list)

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "UsersListEvent":
        """The users list is required."""
        return cls(users=string_list(cls.event_name, data, "users"))


@dataclass
class UserJoinedEvent(BaseEvent):
    """
    Another user connected.

    Attributes:
        username: The user who joined, None if omitted
    """

    event_name = "user_joined"

    username: Optional[str] = None

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "UserJoinedEvent":
        return cls(username=optional_str(data, "username"))


@dataclass
class UserLeftEvent(BaseEvent):
    """
    Another user disconnected.

    Attributes:
        username: The user who left, None if omitted
    """

    event_name = "user_left"

    username: Optional[str] = None

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "UserLeftEvent":
        return cls(username=optional_str(data, "username"))


@dataclass
class ServerError(BaseEvent):
    """
    Application error reported by the server.

    Attributes:
        code: Error code (e.g., INVALID_MESSAGE, NOT_REGISTERED)
        message: Human readable description
        handshake_rejected: Set by the controller when the error refused
                            the hello before a welcome arrived
    """

    event_name = "server:error"

    code: str = "UNKNOWN"
    message: str = ""
    handshake_rejected: bool = False

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "ServerError":
        return cls(
            code=optional_str(data, "code") or "UNKNOWN",
            message=optional_str(data, "message") or "",
        )

    @property
    def is_handshake_error(self) -> bool:
        """Check if the code is one the server uses to refuse a hello."""
        return self.code in HANDSHAKE_ERROR_CODES


@dataclass
class DisconnectEvent(BaseEvent):
    """
    Transport-level notification that the socket closed.

    Attributes:
        reason: Reason reported by the transport, if any
    """

    event_name = "disconnect"

    reason: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any = None) -> "DisconnectEvent":
        """The reason may be any object; it is kept as text."""
        if payload is None:
            return cls()
        if isinstance(payload, (bytes, bytearray)):
            return cls(reason="(binary)")
        return cls(reason=str(payload))


InboundEvent = Union[
    ConnectEvent,
    WelcomeEvent,
    ChatMessage,
    UsersListEvent,
    UserJoinedEvent,
    UserLeftEvent,
    ServerError,
    DisconnectEvent,
]

EVENT_TYPES: Dict[str, Callable[[Any], InboundEvent]] = {
    event_cls.event_name: event_cls.from_payload
    for event_cls in (
        ConnectEvent,
        WelcomeEvent,
        ChatMessage,
        UsersListEvent,
        UserJoinedEvent,
        UserLeftEvent,
        ServerError,
        DisconnectEvent,
    )
}

INBOUND_EVENT_NAMES = tuple(EVENT_TYPES)


def decode_event(event_name: str, payload: Any = None) -> InboundEvent:
    """
    Decode a raw event into its schema object.

    Args:
        event_name: Name of the inbound event
        payload: Raw payload delivered by the transport

    Returns:
        One of the InboundEvent dataclasses

    Raises:
        PayloadError: If the event is unknown or the payload is malformed
    """
    decoder = EVENT_TYPES.get(event_name)
    if decoder is None:
        raise PayloadError(event_name, "unknown event")
    return decoder(payload)


__all__ = [
    "HANDSHAKE_ERROR_CODES",
    "ConnectEvent",
    "WelcomeEvent",
    "ChatMessage",
    "UsersListEvent",
    "UserJoinedEvent",
    "UserLeftEvent",
    "ServerError",
    "DisconnectEvent",
    "InboundEvent",
    "EVENT_TYPES",
    "INBOUND_EVENT_NAMES",
    "decode_event",
    "payload_to_dict",
]
