#!/usr/bin/env python3
"""
Chat Client Application

Interactive command-line client for the Socket.IO chat server. Prompts for
the server address and a username, then relays typed lines to the server
while printing the events it pushes back.
"""

import asyncio
import logging
import sys
from typing import Any, Awaitable, Callable, Optional, TextIO

from .config import ClientConfig
from .console import (
    ConsoleRenderer,
    InteractiveLoop,
    prompt_username,
    prompt_with_default,
)
from .exceptions import ConnectError, SendError
from .service import SessionController

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def configure_logging(config: ClientConfig) -> None:
    """Send log output to a file so it does not interleave with the chat."""
    logging.basicConfig(
        level=config.log_level_value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler(config.log_file, mode="a")],
    )


async def run_client(
    config: ClientConfig,
    username: str,
    client_factory: Optional[Callable[[], Any]] = None,
    read_line: Optional[Callable[[], Awaitable[str]]] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """
    Run one chat session until the operator quits.

    Args:
        config: Client configuration (server address, commands)
        username: Validated username
        client_factory: Optional Socket.IO client factory (for testing)
        read_line: Optional line reader (for testing)
        out: Output stream for notifications
        err: Error stream for errors and disconnect notices

    Returns:
        Process exit code
    """
    controller = SessionController(
        username,
        config.server_url,
        client_factory=client_factory,
        transports=config.transports,
    )
    renderer = ConsoleRenderer(out, err)
    renderer.attach(controller)

    print(f"Connecting to {config.server_url} …", file=renderer.out)
    try:
        await controller.connect()
    except ConnectError as e:
        print(f"✖ {e}", file=renderer.err)
        return EXIT_FAILURE

    renderer.show_banner(config.list_command, config.quit_command)
    loop = InteractiveLoop(
        controller,
        read_line=read_line,
        list_command=config.list_command,
        quit_command=config.quit_command,
    )
    try:
        await loop.run()
    except SendError as e:
        logger.error("Send failed, ending session: %s", e)
        print(f"✖ {e}", file=renderer.err)
        return EXIT_FAILURE
    finally:
        if controller.ever_connected:
            await controller.disconnect()

    print("Goodbye.", file=renderer.out)
    return EXIT_OK


def main():
    """Main entry point for the chat client."""
    config = ClientConfig.from_env()

    configure_logging(config)
    logger.info("Starting chat client...")

    print("=== Socket.IO chat client ===")
    try:
        config.host = prompt_with_default("Server host/IP", config.host)
        config.port = prompt_with_default("Port", config.port)
        username = prompt_username()
        exit_code = asyncio.run(run_client(config, username))
    except (KeyboardInterrupt, EOFError):
        print("\nExiting...")
        sys.exit(EXIT_INTERRUPTED)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
