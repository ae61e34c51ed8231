"""
Helper utilities for the duel relay server.

Code generation and timestamp helpers used by the lobby registry and the
protocol handlers.
"""

import random
import time
from typing import Container
from .constants import LOBBY_CODE_MIN, LOBBY_CODE_MAX

def generate_lobby_code() -> str:
    """Generate a random 4-digit lobby code."""
    return str(random.randint(LOBBY_CODE_MIN, LOBBY_CODE_MAX))

def generate_unique_lobby_code(taken: Container[str]) -> str:
    """
    Generate a lobby code that is not in ``taken``.

    Collisions are resolved by drawing again. Callers must make sure the code
    space is not exhausted and must hold whatever lock guards ``taken``.

    Args:
        taken: Codes already in use

    Returns:
        A code not present in ``taken``
    """
    code = generate_lobby_code()
    while code in taken:
        code = generate_lobby_code()
    return code

def lobby_code_capacity() -> int:
    """Number of distinct lobby codes."""
    return LOBBY_CODE_MAX - LOBBY_CODE_MIN + 1

def server_timestamp() -> int:
    """Current server time in milliseconds since the epoch."""
    return int(time.time() * 1000)

def normalize_lobby_code(raw) -> str:
    """
    Normalize a client supplied lobby code.

    Clients may send the code as a number or as a string with surrounding
    whitespace.

    Returns:
        The code as a stripped string, or '' if it cannot be used
    """
    if isinstance(raw, bool):
        return ''
    if isinstance(raw, int):
        return str(raw)
    if isinstance(raw, str):
        return raw.strip()
    return ''
