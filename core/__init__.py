"""Core of the translation relay.

This package contains the relay engine and its collaborators (provider chain, cache, guards,
pair graph), the shared state container and the discord.py bot built on them.
"""

from core.bot import RelayBot
from core.relay import RelayEngine
from core.shared_data import SharedData

__all__: list[str] = [
    "RelayBot",
    "RelayEngine",
    "SharedData",
]
