"""
Output Formatting

Pure functions that turn decoded events into the lines shown to the
operator. Kept separate from the console so they can be tested without
a terminal.
"""

from datetime import datetime
from typing import Iterable, Optional

from .schemas import ChatMessage, ServerError

UNKNOWN_USER = "¿?"
EMPTY_ROSTER = "—"
NO_TIMESTAMP = "--:--"


def format_timestamp(sent_at_epoch_millis: Optional[int]) -> str:
    """
    Format a server timestamp as local HH:MM.

    The value is truncated to whole seconds before the local time of day
    is derived.

    Args:
        sent_at_epoch_millis: Milliseconds since the Unix epoch

    Returns:
        Two-digit zero-padded "HH:MM", or "--:--" when the timestamp is
        missing, not positive, or outside the platform's range.
    """
    if not sent_at_epoch_millis or sent_at_epoch_millis <= 0:
        return NO_TIMESTAMP
    try:
        moment = datetime.fromtimestamp(int(sent_at_epoch_millis) // 1000)
    except (OverflowError, OSError, ValueError):
        return NO_TIMESTAMP
    return f"{moment.hour:02d}:{moment.minute:02d}"


def format_username(username: Optional[str]) -> str:
    """Return the username or the unknown-user placeholder."""
    return username if username else UNKNOWN_USER


def format_roster(users: Iterable[str]) -> str:
    """Join usernames with commas, or return the empty-roster placeholder."""
    users = list(users)
    if not users:
        return EMPTY_ROSTER
    return ", ".join(users)


def format_chat_message(message: ChatMessage) -> str:
    """Format a chat message as "[HH:MM] user: text"."""
    return "[{}] {}: {}".format(
        format_timestamp(message.sent_at_epoch_millis),
        format_username(message.username),
        message.text,
    )


def format_welcome(username: str, roster: Iterable[str]) -> str:
    return '✅ Connected as "{}". Users online: {}'.format(
        username, format_roster(roster)
    )


def format_users_list(users: Iterable[str]) -> str:
    return f"👥 Online: {format_roster(users)}"


def format_user_joined(username: Optional[str]) -> str:
    return f"➕ {format_username(username)} joined"


def format_user_left(username: Optional[str]) -> str:
    return f"➖ {format_username(username)} left"


def format_server_error(error: ServerError) -> str:
    """Format a server error, noting when it refused the handshake."""
    line = f"⚠️  server:error [{error.code}] {error.message}".rstrip()
    if error.handshake_rejected:
        line += " (handshake rejected)"
    return line


def format_disconnect(reason: Optional[str]) -> str:
    if reason:
        return f"🔌 Disconnected: {reason}"
    return "🔌 Disconnected"


def format_unexpected_payload(event_name: str, reason: str) -> str:
    return f"({event_name}) unexpected payload: {reason}"
