"""
Client Configuration

Defaults for the interactive prompts and logging. Values can be seeded
from the environment; the operator still confirms host and port at the
prompt.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List

DEFAULT_HOST = "localhost"
DEFAULT_PORT = "3000"
DEFAULT_SCHEME = "http"
DEFAULT_LOG_FILE = "chat_client.log"
DEFAULT_LOG_LEVEL = "WARNING"

# Commands typed inline during the chat session
LIST_COMMAND = "/list"
QUIT_COMMAND = "/quit"


@dataclass
class ClientConfig:
    """
    Settings for a chat client session.

    Attributes:
        host: Server host or IP address
        port: Server port
        scheme: URL scheme used to reach the Socket.IO endpoint
        transports: Engine.IO transports the client may use
        list_command: Literal line that requests the user list
        quit_command: Literal line that ends the session
        log_file: File that receives log output
        log_level: Logging level name
    """

    host: str = DEFAULT_HOST
    port: str = DEFAULT_PORT
    scheme: str = DEFAULT_SCHEME
    transports: List[str] = field(default_factory=lambda: ["websocket"])
    list_command: str = LIST_COMMAND
    quit_command: str = QUIT_COMMAND
    log_file: str = DEFAULT_LOG_FILE
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def server_url(self) -> str:
        """Address of the server in scheme://host:port form."""
        return f"{self.scheme}://{self.host}:{self.port}"

    @property
    def log_level_value(self) -> int:
        """Numeric logging level, falling back to WARNING for unknown names."""
        level = logging.getLevelName(self.log_level.upper())
        if isinstance(level, int):
            return level
        return logging.WARNING

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Build a configuration from environment variables.

        Reads CHAT_HOST, CHAT_PORT, CHAT_SCHEME, CHAT_LOG_FILE and
        CHAT_LOG_LEVEL. Unset variables keep their defaults.
        """
        return cls(
            host=os.environ.get("CHAT_HOST", DEFAULT_HOST),
            port=os.environ.get("CHAT_PORT", DEFAULT_PORT),
            scheme=os.environ.get("CHAT_SCHEME", DEFAULT_SCHEME),
            log_file=os.environ.get("CHAT_LOG_FILE", DEFAULT_LOG_FILE),
            log_level=os.environ.get("CHAT_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        )
