"""
Session Controller for the Chat Client

This module provides the controller that owns the Socket.IO connection to
the chat server. It performs the hello/welcome handshake, decodes every
inbound event, keeps the session state up to date and exposes the
outbound commands.

Architecture:
    - Uses a python-socketio AsyncClient for the event-based transport
    - Supports dependency injection for the transport (for testability)
    - Inbound payloads are decoded once into schema objects and dispatched
      through a table keyed by event type
    - Notifications reach the UI through registered callbacks

Usage:
    controller = SessionController("alice", "http://localhost:3000")
    controller.set_on_chat_message(print)
    await controller.connect()
    await controller.send_public_message("hi")
    await controller.quit()
"""

import logging
from typing import Any, Callable, List, Optional

import socketio
from socketio.exceptions import SocketIOError

from .exceptions import ConnectError, PayloadError, SendError
from .schemas import (
    INBOUND_EVENT_NAMES,
    BaseCommand,
    ChatMessage,
    ConnectEvent,
    DisconnectEvent,
    HelloCommand,
    ListUsersCommand,
    PublicMessageCommand,
    QuitCommand,
    ServerError,
    UserJoinedEvent,
    UserLeftEvent,
    UsersListEvent,
    WelcomeEvent,
    decode_event,
)
from .session import ConnectionState, Session
from .validation import validate_username

logger = logging.getLogger(__name__)


def default_client_factory() -> socketio.AsyncClient:
    """Create a Socket.IO client with wire-level reconnection disabled."""
    return socketio.AsyncClient(reconnection=False)


class SessionController:
    """
    Controller for one chat session.

    Attributes:
        server_url: Address of the chat server (e.g., http://localhost:3000)
        session: The session state owned by this controller
        transports: Engine.IO transports passed to connect
    """

    def __init__(
        self,
        username: str,
        server_url: str,
        client_factory: Optional[Callable[[], Any]] = None,
        transports: Optional[List[str]] = None,
    ):
        """
        Initialize the controller.

        Args:
            username: Username for the session, already entered by the operator
            server_url: Address of the chat server
            client_factory: Optional factory for the Socket.IO client
                            (for dependency injection/testing)
            transports: Engine.IO transports to use (default: websocket only)

        Raises:
            ValueError: If the username is not valid
        """
        is_valid, error = validate_username(username)
        if not is_valid:
            raise ValueError(error)

        self.server_url = server_url
        self.session = Session(username=username)
        self.transports = transports or ["websocket"]
        self._client = (client_factory or default_client_factory)()
        self._transport_open = False

        # Callbacks for UI integration
        self._on_transport_connected: Optional[Callable[[], None]] = None
        self._on_welcome: Optional[Callable[[str, List[str]], None]] = None
        self._on_chat_message: Optional[Callable[[ChatMessage], None]] = None
        self._on_users_list: Optional[Callable[[List[str]], None]] = None
        self._on_user_joined: Optional[Callable[[Optional[str]], None]] = None
        self._on_user_left: Optional[Callable[[Optional[str]], None]] = None
        self._on_server_error: Optional[Callable[[ServerError], None]] = None
        self._on_disconnected: Optional[Callable[[Optional[str]], None]] = None
        self._on_unexpected_payload: Optional[Callable[[str, str], None]] = (
            None
        )

        self._handlers = {
            ConnectEvent: self._handle_connect,
            WelcomeEvent: self._handle_welcome,
            ChatMessage: self._handle_chat_message,
            UsersListEvent: self._handle_users_list,
            UserJoinedEvent: self._handle_user_joined,
            UserLeftEvent: self._handle_user_left,
            ServerError: self._handle_server_error,
            DisconnectEvent: self._handle_disconnect,
        }
        self._register_listeners()

        logger.info("SessionController initialized for %s", server_url)

    @property
    def username(self) -> str:
        return self.session.username

    @property
    def state(self) -> ConnectionState:
        return self.session.state

    @property
    def roster(self) -> List[str]:
        """Copy of the last known roster."""
        return list(self.session.roster)

    @property
    def is_connected(self) -> bool:
        """Check if the server has acknowledged the handshake."""
        return self.session.is_connected

    @property
    def ever_connected(self) -> bool:
        """Check if the transport connection ever succeeded."""
        return self.session.ever_connected

    def _register_listeners(self) -> None:
        """Subscribe to every inbound event on the transport."""
        for event_name in INBOUND_EVENT_NAMES:
            self._client.on(event_name, handler=self._make_listener(event_name))
        self._client.on("connect_error", handler=self._on_connect_error)

    def _make_listener(self, event_name: str) -> Callable:
        async def listener(*args):
            payload = args[0] if args else None
            await self.dispatch(event_name, payload)

        return listener

    async def _on_connect_error(self, data=None) -> None:
        logger.error("Transport connect_error: %s", data)

    async def connect(self) -> None:
        """
        Establish the Socket.IO connection to the server.

        The hello command is sent from the connect event handler, so the
        welcome may arrive before this coroutine returns.

        Raises:
            ConnectError: If the connection fails
        """
        self.session.set_state(ConnectionState.CONNECTING)
        # Open before connect returns: the connect handler sends the hello
        self._transport_open = True
        try:
            logger.info("Connecting to %s...", self.server_url)
            await self._client.connect(
                self.server_url, transports=self.transports
            )
        except (SocketIOError, OSError, ValueError) as e:
            self.session.set_state(ConnectionState.DISCONNECTED)
            self._transport_open = False
            logger.error("Failed to connect to server: %s", e)
            raise ConnectError(f"Could not connect to {self.server_url}: {e}")

        self.session.ever_connected = True
        logger.info("Transport connection established")

    async def disconnect(self) -> None:
        """
        Close the transport connection.

        Only the first call releases the transport; later calls, and calls
        made when connect never succeeded, do nothing.
        """
        if not self._transport_open:
            return
        self._transport_open = False
        try:
            await self._client.disconnect()
        finally:
            self.session.set_state(ConnectionState.DISCONNECTED)
            logger.info("Disconnected from chat server")

    async def _emit(self, command: BaseCommand) -> None:
        """
        Send a command to the server.

        Raises:
            SendError: If the transport is closed or the write fails
        """
        if not self._transport_open:
            raise SendError("Not connected to a chat server")

        logger.debug("Emitting %s", command.event_name)
        try:
            await self._client.emit(command.event_name, command.to_payload())
        except (SocketIOError, OSError) as e:
            logger.error("Failed to send %s: %s", command.event_name, e)
            raise SendError(f"Could not send {command.event_name}: {e}")

    async def send_hello(self) -> None:
        """Send the handshake command with the session username."""
        logger.info("Sending hello as %s", self.username)
        await self._emit(HelloCommand(username=self.username))

    async def send_public_message(self, text: str) -> None:
        """
        Send a chat message to every connected user.

        The message is not echoed locally; it is shown when the server
        relays it back as a chat:public event.

        Args:
            text: The message text
        """
        await self._emit(PublicMessageCommand(text=text))

    async def send_list_users_request(self) -> None:
        """Ask the server for a users:list event."""
        await self._emit(ListUsersCommand())

    async def send_quit_request(self) -> None:
        """Tell the server the client is leaving."""
        logger.info("Sending quit request")
        await self._emit(QuitCommand())

    async def quit(self) -> None:
        """
        Send the quit command, then release the transport.

        The transport is released even if the quit command cannot be sent.

        Raises:
            SendError: If the quit command could not be sent
        """
        try:
            await self.send_quit_request()
        finally:
            await self.disconnect()

    def set_on_transport_connected(self, callback: Callable[[], None]) -> None:
        """
        Register callback for the transport-level connect event.

        Args:
            callback: Function called with no arguments
        """
        self._on_transport_connected = callback

    def set_on_welcome(
        self, callback: Callable[[str, List[str]], None]
    ) -> None:
        """
        Register callback for the handshake acknowledgement.

        Args:
            callback: Function that receives the username and roster
        """
        self._on_welcome = callback

    def set_on_chat_message(
        self, callback: Callable[[ChatMessage], None]
    ) -> None:
        """
        Register callback for public chat messages.

        Args:
            callback: Function that receives the ChatMessage
        """
        self._on_chat_message = callback

    def set_on_users_list(self, callback: Callable[[List[str]], None]) -> None:
        """
        Register callback for roster refreshes.

        Args:
            callback: Function that receives the new roster
        """
        self._on_users_list = callback

    def set_on_user_joined(
        self, callback: Callable[[Optional[str]], None]
    ) -> None:
        """
        Register callback for user joined notifications.

        Args:
            callback: Function that receives the username (or None)
        """
        self._on_user_joined = callback

    def set_on_user_left(
        self, callback: Callable[[Optional[str]], None]
    ) -> None:
        """
        Register callback for user left notifications.

        Args:
            callback: Function that receives the username (or None)
        """
        self._on_user_left = callback

    def set_on_server_error(
        self, callback: Callable[[ServerError], None]
    ) -> None:
        """
        Register callback for server:error events.

        Args:
            callback: Function that receives the ServerError
        """
        self._on_server_error = callback

    def set_on_disconnected(
        self, callback: Callable[[Optional[str]], None]
    ) -> None:
        """
        Register callback for the transport-level disconnect event.

        Args:
            callback: Function that receives the reason (or None)
        """
        self._on_disconnected = callback

    def set_on_unexpected_payload(
        self, callback: Callable[[str, str], None]
    ) -> None:
        """
        Register callback for payloads that failed to decode.

        Args:
            callback: Function that receives the event name and reason
        """
        self._on_unexpected_payload = callback

    async def dispatch(self, event_name: str, payload: Any = None) -> None:
        """
        Decode one inbound event and run its handler.

        Malformed payloads are logged and reported through the
        unexpected-payload callback; they never change session state.

        Args:
            event_name: Name of the inbound event
            payload: Raw payload delivered by the transport
        """
        try:
            event = decode_event(event_name, payload)
        except PayloadError as e:
            logger.warning("Ignoring %s event: %s", event_name, e.reason)
            if self._on_unexpected_payload:
                self._on_unexpected_payload(event_name, e.reason)
            return

        logger.debug("Received %s event: %s", event_name, event)
        await self._handlers[type(event)](event)

    async def _handle_connect(self, event: ConnectEvent) -> None:
        """Send the hello as soon as the transport is up."""
        if self._on_transport_connected:
            self._on_transport_connected()
        await self.send_hello()

    async def _handle_welcome(self, event: WelcomeEvent) -> None:
        """
        Handle the handshake acknowledgement.

        Marks the session connected and replaces the roster.
        """
        self.session.set_state(ConnectionState.CONNECTED)
        roster = self.session.replace_roster(event.connected_users)
        logger.info(
            "Welcome received as %s (%d users online)",
            event.username,
            len(roster),
        )
        if self._on_welcome:
            self._on_welcome(event.username, roster)

    async def _handle_chat_message(self, event: ChatMessage) -> None:
        if self._on_chat_message:
            self._on_chat_message(event)

    async def _handle_users_list(self, event: UsersListEvent) -> None:
        """Replace the roster wholesale with the reported list."""
        roster = self.session.replace_roster(event.users)
        if self._on_users_list:
            self._on_users_list(roster)

    async def _handle_user_joined(self, event: UserJoinedEvent) -> None:
        # Roster only changes on welcome and users:list
        logger.info("User %s joined", event.username)
        if self._on_user_joined:
            self._on_user_joined(event.username)

    async def _handle_user_left(self, event: UserLeftEvent) -> None:
        logger.info("User %s left", event.username)
        if self._on_user_left:
            self._on_user_left(event.username)

    async def _handle_server_error(self, event: ServerError) -> None:
        """
        Handle a server:error event.

        Errors are never fatal. A handshake error received before the
        welcome is flagged so the UI can explain the upcoming disconnect.
        """
        if not self.session.is_connected and event.is_handshake_error:
            event.handshake_rejected = True
            logger.warning(
                "Server rejected hello: [%s] %s", event.code, event.message
            )
        else:
            logger.warning("Server error: [%s] %s", event.code, event.message)

        if self._on_server_error:
            self._on_server_error(event)

    async def _handle_disconnect(self, event: DisconnectEvent) -> None:
        """Mark the session disconnected; there is no reconnection."""
        self.session.set_state(ConnectionState.DISCONNECTED)
        logger.warning("Connection closed: %s", event.reason)
        if self._on_disconnected:
            self._on_disconnected(event.reason)
