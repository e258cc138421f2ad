"""
Command Schema Definitions

This module defines the outbound commands the client sends to the server.
Every command is fire-and-forget; replies arrive as independent events.
"""

from dataclasses import dataclass

from .base import BaseCommand


@dataclass
class HelloCommand(BaseCommand):
    """
    Handshake command identifying the client.

    Attributes:
        username: Username requested by the operator
    """

    event_name = "hello"

    username: str


@dataclass
class PublicMessageCommand(BaseCommand):
    """
    Chat message for every connected user.

    Attributes:
        text: The message text
    """

    event_name = "chat:public"

    text: str


@dataclass
class ListUsersCommand(BaseCommand):
    """Request for a fresh users:list event."""

    event_name = "command:list"


@dataclass
class QuitCommand(BaseCommand):
    """Announce that the client is leaving."""

    event_name = "command:quit"
