"""
Schemas Package

This package contains the event schemas for client-server communication.
Schemas are organized by direction: outbound commands and inbound events.

The base classes (BaseCommand, BaseEvent) hold the shared payload encoding
and decoding.
"""

from .base import BaseCommand, BaseEvent
from .commands import (
    HelloCommand,
    PublicMessageCommand,
    ListUsersCommand,
    QuitCommand,
)
from .events import (
    HANDSHAKE_ERROR_CODES,
    INBOUND_EVENT_NAMES,
    ConnectEvent,
    WelcomeEvent,
    ChatMessage,
    UsersListEvent,
    UserJoinedEvent,
    UserLeftEvent,
    ServerError,
    DisconnectEvent,
    InboundEvent,
    decode_event,
)

__all__ = [
    # Base classes
    "BaseCommand",
    "BaseEvent",
    # Outbound commands
    "HelloCommand",
    "PublicMessageCommand",
    "ListUsersCommand",
    "QuitCommand",
    # Inbound events
    "HANDSHAKE_ERROR_CODES",
    "INBOUND_EVENT_NAMES",
    "ConnectEvent",
    "WelcomeEvent",
    "ChatMessage",
    "UsersListEvent",
    "UserJoinedEvent",
    "UserLeftEvent",
    "ServerError",
    "DisconnectEvent",
    "InboundEvent",
    "decode_event",
]
