"""Configuration data models for the translation relay.

Each dataclass mirrors one section of the INI file. Field defaults double as the
type declaration used by the loader to coerce INI strings.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__: list[str] = [
    "Bot",
    "Cache",
    "Config",
    "General",
    "LoopGuardSettings",
    "RateLimit",
    "Storage",
    "Translation",
]


@dataclass
class General:
    DEBUG: bool = False
    VERSION: str = ""
    SCRIPT_NAME: str = ""
    LOG_FILE: str = "translation_relay.log"


@dataclass
class Bot:
    SYNC_COMMANDS: bool = True
    IGNORE_USERS: list[int] = field(default_factory=list)
    FETCH_TIMEOUT: float = 5.0


@dataclass
class Translation:
    ENGINE: list[str] = field(default_factory=lambda: ["libretranslate", "mymemory"])
    # engine name -> target tags the engine is preferred for
    QUALITY_TIERS: dict[str, list[str]] = field(default_factory=dict)
    TIMEOUT: float = 10.0
    RETRY_DELAY: float = 1.0
    SAME_LANGUAGE_POLICY: str = "skip"
    LIBRETRANSLATE_URL: str = "https://libretranslate.de/translate"
    MYMEMORY_URL: str = "https://api.mymemory.translated.net/get"


@dataclass
class Cache:
    TTL: float = 600.0
    MAX_ENTRIES: int = 1000


@dataclass
class RateLimit:
    COOLDOWN: float = 1.0
    MAX_TRACKED_KEYS: int = 5000
    BURST_MAX: int = 5
    BURST_WINDOW: float = 60.0
    BURST_DISABLED_CHANNELS: list[int] = field(default_factory=list)


@dataclass
class LoopGuardSettings:
    TTL: float = 30.0
    REACTION_TTL: float = 300.0
    SWEEP_INTERVAL: float = 60.0


@dataclass
class Storage:
    DB_PATH: str = "translation_relay.db"
    WRITE_TIMEOUT: float = 5.0


@dataclass
class Config:
    GENERAL: General = field(default_factory=General)
    BOT: Bot = field(default_factory=Bot)
    TRANSLATION: Translation = field(default_factory=Translation)
    CACHE: Cache = field(default_factory=Cache)
    RATE_LIMIT: RateLimit = field(default_factory=RateLimit)
    LOOP_GUARD: LoopGuardSettings = field(default_factory=LoopGuardSettings)
    STORAGE: Storage = field(default_factory=Storage)
