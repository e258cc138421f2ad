"""
Validation Utilities

Contains utility functions for validating operator input.
"""

import re
from typing import Optional, Tuple

# Username validation constants
MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 20
USERNAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")


def validate_username(username: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a username.

    Args:
        username: The username to validate

    Returns:
        tuple: (is_valid, error_message)
            - is_valid: True if username is valid, False otherwise
            - error_message: Error message if invalid, None if valid
    """
    if not username:
        return False, "Username cannot be empty"

    if len(username) < MIN_USERNAME_LENGTH:
        return (
            False,
            f"Username too short (min {MIN_USERNAME_LENGTH} characters)",
        )

    if len(username) > MAX_USERNAME_LENGTH:
        return (
            False,
            f"Username too long (max {MAX_USERNAME_LENGTH} characters)",
        )

    # ASCII letters, digits, "_" and "-"
    if not USERNAME_PATTERN.fullmatch(username):
        return (
            False,
            "Username may only contain letters, digits, '_' and '-'",
        )

    return True, None
