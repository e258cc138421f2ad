"""
Base Schema Classes

This module provides base classes for outbound command and inbound event
schemas with common serialization and deserialization methods.

Socket.IO carries the event name separately from the payload, so commands
expose `event_name` and a payload dictionary instead of a single
{"type": ..., "data": ...} envelope.
"""

import json
from dataclasses import asdict, fields
from typing import Any, ClassVar, Dict, List, Optional, Type, TypeVar

from ..exceptions import PayloadError

T = TypeVar("T", bound="BaseEvent")


class BaseCommand:
    """
    Base class for outbound command schemas.

    Subclasses are dataclasses and set the class attribute `event_name`.
    """

    event_name: ClassVar[str] = ""

    def to_payload(self) -> Dict[str, Any]:
        """
        Convert to the payload sent with the event.

        Returns:
            Dictionary of the command's fields. Commands without fields
            produce an empty dictionary.
        """
        if hasattr(self, "__dataclass_fields__") and fields(self):
            return asdict(self)
        return {}


class BaseEvent:
    """
    Base class for inbound event schemas.

    Provides common decoding from the raw payload delivered by the
    transport, which is either a mapping or a JSON string.
    """

    event_name: ClassVar[str] = ""

    @classmethod
    def from_payload(cls: Type[T], payload: Any) -> T:
        """
        Create instance from a raw event payload.

        Args:
            payload: Mapping or JSON string received with the event

        Returns:
            Instance of the event class.

        Raises:
            PayloadError: If the payload is not a JSON object or lacks
                          required fields.
        """
        return cls._from_data(payload_to_dict(cls.event_name, payload))

    @classmethod
    def _from_data(cls: Type[T], data: Dict[str, Any]) -> T:
        """
        Create instance from a decoded payload dictionary.

        Should be overridden by subclasses for custom decoding.
        """
        return cls(**data)


def payload_to_dict(event: str, payload: Any) -> Dict[str, Any]:
    """
    Normalize a raw payload into a dictionary.

    Args:
        event: Event name, used in error messages
        payload: Mapping, JSON string, or bytes holding a JSON object

    Raises:
        PayloadError: If the payload is not a JSON object
    """
    if isinstance(payload, (bytes, bytearray)):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError:
            raise PayloadError(event, "payload is not JSON")
    if not isinstance(payload, dict):
        raise PayloadError(event, "payload is not an object")
    return payload


def optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    """Return data[key] if it is a string, otherwise None."""
    value = data.get(key)
    return value if isinstance(value, str) else None


def string_list(event: str, data: Dict[str, Any], key: str) -> List[str]:
    """
    Return the string items of the list stored under key.

    Non-string items are skipped.

    Raises:
        PayloadError: If the key is missing or does not hold a list
    """
    value = data.get(key)
    if not isinstance(value, list):
        raise PayloadError(event, f"missing or invalid '{key}'")
    return [item for item in value if isinstance(item, str)]
