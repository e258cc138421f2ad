"""
Client Exceptions

Errors raised by the session controller. Connection-level failures also
derive from the builtin ConnectionError so callers that only know about
socket errors still catch them.
"""


class ChatClientError(Exception):
    """Base class for all chat client errors."""


class ConnectError(ChatClientError, ConnectionError):
    """The transport connection could not be established."""


class SendError(ChatClientError, ConnectionError):
    """An outbound command could not be written to the transport."""


class PayloadError(ChatClientError, ValueError):
    """
    An inbound event payload did not have the expected shape.

    Attributes:
        event: Name of the event whose payload failed to decode
        reason: Short description of what was wrong
    """

    def __init__(self, event: str, reason: str):
        super().__init__(f"({event}) {reason}")
        self.event = event
        self.reason = reason
