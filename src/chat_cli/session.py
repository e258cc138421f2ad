"""
Session State for the Chat Client

This module holds the locally observable state of one chat session: the
username chosen by the operator, the connection state and the roster of
connected users as last reported by the server.

All mutation happens on the event loop thread, inside the controller's
inbound event handlers.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List

logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Lifecycle state of the connection to the chat server."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass
class Session:
    """
    State of a single chat session.

    Attributes:
        username: The operator's username (fixed for the session)
        state: Current connection state
        roster: Usernames currently connected, in the order reported
        ever_connected: True once the transport connection has succeeded
    """

    username: str
    state: ConnectionState = ConnectionState.DISCONNECTED
    roster: List[str] = field(default_factory=list)
    ever_connected: bool = False

    def __setattr__(self, name, value):
        if name == "username" and "username" in self.__dict__:
            raise AttributeError("username cannot change during a session")
        super().__setattr__(name, value)

    @property
    def is_connected(self) -> bool:
        """Check if the server has acknowledged the handshake."""
        return self.state is ConnectionState.CONNECTED

    def set_state(self, state: ConnectionState) -> None:
        """
        Move to a new connection state.

        Args:
            state: The new state
        """
        if state is not self.state:
            logger.info(
                "Session state %s -> %s", self.state.value, state.value
            )
        self.state = state
        if state is ConnectionState.CONNECTED:
            self.ever_connected = True

    def replace_roster(self, users: Iterable[str]) -> List[str]:
        """
        Replace the roster with a new list of users.

        Duplicates are dropped, keeping the first occurrence.

        Args:
            users: Usernames reported by the server

        Returns:
            A copy of the new roster
        """
        self.roster = list(dict.fromkeys(users))
        logger.debug("Roster replaced: %s", self.roster)
        return list(self.roster)
