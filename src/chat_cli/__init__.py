"""
Chat CLI Package

This package provides an interactive terminal client for a Socket.IO chat
server: the SessionController that runs the hello/welcome handshake and
tracks the roster, the event schemas exchanged with the server, and the
console loop that connects the operator to the controller.

Schemas are organized in the `schemas` subpackage by direction:
    - commands: outbound commands (hello, chat, list, quit)
    - events: inbound server events
"""

from .config import ClientConfig
from .console import ConsoleRenderer, InteractiveLoop, LineKind, classify_line
from .exceptions import ChatClientError, ConnectError, PayloadError, SendError
from .formatting import format_roster, format_timestamp
from .service import SessionController
from .session import ConnectionState, Session
from .validation import validate_username
from .schemas import (
    # Base classes
    BaseCommand,
    BaseEvent,
    # Outbound commands
    HelloCommand,
    PublicMessageCommand,
    ListUsersCommand,
    QuitCommand,
    # Inbound events
    ConnectEvent,
    WelcomeEvent,
    ChatMessage,
    UsersListEvent,
    UserJoinedEvent,
    UserLeftEvent,
    ServerError,
    DisconnectEvent,
    decode_event,
)

__all__ = [
    # Service classes
    "SessionController",
    "Session",
    "ConnectionState",
    "ClientConfig",
    # Console
    "ConsoleRenderer",
    "InteractiveLoop",
    "LineKind",
    "classify_line",
    # Helpers
    "format_roster",
    "format_timestamp",
    "validate_username",
    # Errors
    "ChatClientError",
    "ConnectError",
    "PayloadError",
    "SendError",
    # Base schema classes
    "BaseCommand",
    "BaseEvent",
    # Outbound commands
    "HelloCommand",
    "PublicMessageCommand",
    "ListUsersCommand",
    "QuitCommand",
    # Inbound events
    "ConnectEvent",
    "WelcomeEvent",
    "ChatMessage",
    "UsersListEvent",
    "UserJoinedEvent",
    "UserLeftEvent",
    "ServerError",
    "DisconnectEvent",
    "decode_event",
]
