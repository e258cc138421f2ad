"""
Console Interface for the Chat Client

This module provides the terminal side of the client: the prompts shown
before connecting, the renderer that prints controller notifications, and
the interactive loop that turns operator lines into outbound commands.

The loop awaits input through aioconsole so inbound events keep being
handled on the event loop while the operator types.
"""

import logging
import sys
from enum import Enum
from typing import Awaitable, Callable, Optional, TextIO, Tuple

import aioconsole

from .config import LIST_COMMAND, QUIT_COMMAND
from .formatting import (
    format_chat_message,
    format_disconnect,
    format_server_error,
    format_unexpected_payload,
    format_user_joined,
    format_user_left,
    format_users_list,
    format_welcome,
)
from .schemas import ChatMessage, ServerError
from .service import SessionController
from .validation import validate_username

logger = logging.getLogger(__name__)


class LineKind(Enum):
    """Classification of one line typed by the operator."""

    EMPTY = "empty"
    LIST_USERS = "list_users"
    QUIT = "quit"
    MESSAGE = "message"


def classify_line(
    line: str,
    list_command: str = LIST_COMMAND,
    quit_command: str = QUIT_COMMAND,
) -> Tuple[LineKind, str]:
    """
    Classify an operator line.

    Commands match exactly (case-sensitive) after trimming surrounding
    whitespace. Any other non-empty line is chat text.

    Args:
        line: Raw line read from the operator
        list_command: Literal that requests the user list
        quit_command: Literal that ends the session

    Returns:
        tuple: (kind, text) where text is the trimmed line
    """
    text = line.strip()
    if not text:
        return LineKind.EMPTY, text
    if text == list_command:
        return LineKind.LIST_USERS, text
    if text == quit_command:
        return LineKind.QUIT, text
    return LineKind.MESSAGE, text


class ConsoleRenderer:
    """
    Prints controller notifications to the terminal.

    Errors and disconnect notices go to the error stream, everything else
    to the output stream.
    """

    def __init__(
        self, out: Optional[TextIO] = None, err: Optional[TextIO] = None
    ):
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def attach(self, controller: SessionController) -> None:
        """Register this renderer as the controller's notification sink."""
        controller.set_on_transport_connected(self.on_transport_connected)
        controller.set_on_welcome(self.on_welcome)
        controller.set_on_chat_message(self.on_chat_message)
        controller.set_on_users_list(self.on_users_list)
        controller.set_on_user_joined(self.on_user_joined)
        controller.set_on_user_left(self.on_user_left)
        controller.set_on_server_error(self.on_server_error)
        controller.set_on_disconnected(self.on_disconnected)
        controller.set_on_unexpected_payload(self.on_unexpected_payload)

    def _print(self, line: str, stream: Optional[TextIO] = None) -> None:
        stream = stream or self.out
        print(line, file=stream, flush=True)

    def on_transport_connected(self) -> None:
        self._print("→ Connection established. Sending handshake…")

    def on_welcome(self, username, roster) -> None:
        self._print(format_welcome(username, roster))

    def on_chat_message(self, message: ChatMessage) -> None:
        self._print(format_chat_message(message))

    def on_users_list(self, users) -> None:
        self._print(format_users_list(users))

    def on_user_joined(self, username) -> None:
        self._print(format_user_joined(username))

    def on_user_left(self, username) -> None:
        self._print(format_user_left(username))

    def on_server_error(self, error: ServerError) -> None:
        self._print(format_server_error(error), self.err)

    def on_disconnected(self, reason) -> None:
        self._print(format_disconnect(reason), self.err)

    def on_unexpected_payload(self, event_name: str, reason: str) -> None:
        self._print(format_unexpected_payload(event_name, reason), self.err)

    def show_banner(self, list_command: str, quit_command: str) -> None:
        self._print("———\nType a message and press Enter to send.")
        self._print(
            f"Commands: {list_command} (list users) | {quit_command} (leave)\n———"
        )


class InteractiveLoop:
    """
    Reads operator lines and forwards them to the controller.

    Attributes:
        controller: The session controller receiving the commands
        list_command: Literal that requests the user list
        quit_command: Literal that ends the session
    """

    def __init__(
        self,
        controller: SessionController,
        read_line: Optional[Callable[[], Awaitable[str]]] = None,
        list_command: str = LIST_COMMAND,
        quit_command: str = QUIT_COMMAND,
    ):
        """
        Initialize the loop.

        Args:
            controller: The session controller
            read_line: Optional coroutine function returning the next line
                       (defaults to aioconsole.ainput; for testing)
            list_command: Literal that requests the user list
            quit_command: Literal that ends the session
        """
        self.controller = controller
        self.list_command = list_command
        self.quit_command = quit_command
        self._read_line = read_line or aioconsole.ainput

    async def run(self) -> None:
        """
        Process operator lines until the quit command or end of input.

        Raises:
            SendError: If a command cannot be sent; the loop stops
        """
        while True:
            try:
                line = await self._read_line()
            except EOFError:
                logger.info("End of input, quitting")
                await self.controller.quit()
                return

            kind, text = classify_line(
                line, self.list_command, self.quit_command
            )
            if kind is LineKind.EMPTY:
                continue
            if kind is LineKind.LIST_USERS:
                await self.controller.send_list_users_request()
            elif kind is LineKind.QUIT:
                await self.controller.quit()
                return
            else:
                await self.controller.send_public_message(text)


def prompt_with_default(
    label: str,
    default: Optional[str] = None,
    input_func: Callable[[str], str] = input,
) -> str:
    """
    Ask for a value, returning the default on an empty answer.

    Args:
        label: Prompt text
        default: Value used when the operator just presses Enter
        input_func: Function used to read the answer (for testing)
    """
    suffix = f" [{default}]" if default else ""
    answer = input_func(f"{label}{suffix}: ").strip()
    return answer or (default or "")


def prompt_username(
    input_func: Callable[[str], str] = input,
    out: Optional[TextIO] = None,
) -> str:
    """
    Ask for a username until a valid one is entered.

    Args:
        input_func: Function used to read the answer (for testing)
        out: Stream for the retry notice (defaults to stdout)
    """
    out = out or sys.stdout
    while True:
        username = prompt_with_default(
            "Username (3-20, a-z0-9_-)", input_func=input_func
        )
        is_valid, error = validate_username(username)
        if is_valid:
            return username
        print(f"→ Invalid format: {error}. Try again.", file=out)
