"""
Configuration for the duel relay server.

Values come from the environment (and a local .env file when present).
"""

from . import settings

__all__ = ['settings']
