"""End-to-end tests for core.relay.RelayEngine with an in-memory chat platform."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

import pytest

from core.cache.manager import TranslationCacheManager
from core.guard.loop_guard import LoopGuard
from core.guard.rate_limiter import BurstLimiter, CooldownLimiter
from core.pairs.graph import ChannelPairGraph
from core.relay import POLICY_RELAY_ORIGINAL, RelayEngine
from core.trans.interface import EngineAttributes, Result, TransInterface, TranslateExceptionError
from core.trans.manager import TransManager
from models.message_models import InboundMessage, ReactionEvent, RelayEnvelope

if TYPE_CHECKING:
    from models.config_models import Config
    from models.status_models import RelayStatus, SweepReport
    from tests.conftest import FakeClock

GUILD: int = 1
FLAG_ES: str = "\U0001f1ea\U0001f1f8"
FLAG_JP: str = "\U0001f1ef\U0001f1f5"


class FakePlatform:
    """Chat platform double: channels are plain ids, sent messages get ids from 9001 upwards."""

    def __init__(self, channels: set[int]) -> None:
        self.channels: set[int] = channels
        self.broken_channels: set[int] = set()
        self.messages: dict[tuple[int, int], InboundMessage] = {}
        self.sent: list[tuple[int, RelayEnvelope]] = []
        self._next_id: int = 9000

    async def fetch_channel(self, channel_id: int) -> Any | None:
        return channel_id if channel_id in self.channels else None

    async def send_relay(self, channel: Any, envelope: RelayEnvelope) -> int:
        if channel in self.broken_channels:
            msg = "Missing Permissions"
            raise RuntimeError(msg)
        self._next_id += 1
        self.sent.append((channel, envelope))
        return self._next_id

    async def fetch_message(self, channel_id: int, message_id: int) -> InboundMessage | None:
        return self.messages.get((channel_id, message_id))

    @property
    def sent_channels(self) -> list[int]:
        return [channel for channel, _ in self.sent]


class DictionaryEngine(TransInterface):
    """Provider double with a fixed phrase table and source detection."""

    phrases: ClassVar[dict[tuple[str, str], str]] = {("hello", "es"): "hola", ("hello", "ja"): "こんにちは"}
    languages: ClassVar[dict[str, str]] = {"hello": "en", "hola": "es"}

    def __init__(self, *, failing: bool = False) -> None:
        super().__init__()
        self.engine_attributes = EngineAttributes(name="dictionary")
        self.failing: bool = failing
        self.calls: list[tuple[str, str, str | None]] = []

    @property
    def is_available(self) -> bool:
        return True

    @staticmethod
    def fetch_engine_name() -> str:
        return ""

    def initialize(self, config: Config) -> None:
        _ = config

    async def translation(self, content: str, tgt_lang: str, src_lang: str | None = None) -> Result:
        self.calls.append((content, tgt_lang, src_lang))
        if self.failing:
            msg = "service down"
            raise TranslateExceptionError(msg)
        return Result(
            text=self.phrases.get((content, tgt_lang), f"[{tgt_lang}] {content}"),
            detected_source_lang=None if src_lang else self.languages.get(content),
        )

    async def close(self) -> None:
        pass


class RelayHarness:
    def __init__(self, config: Config, clock: FakeClock, *, failing: bool = False) -> None:
        self.clock: FakeClock = clock
        self.platform = FakePlatform({10, 20, 30, 40})
        self.graph = ChannelPairGraph()
        self.engine = DictionaryEngine(failing=failing)
        cache = TranslationCacheManager(config, clock=clock)
        trans_manager = TransManager(config, cache)
        trans_manager.register_engine(self.engine)
        self.relay = RelayEngine(
            config,
            platform=self.platform,
            graph=self.graph,
            trans_manager=trans_manager,
            cache_manager=cache,
            loop_guard=LoopGuard(config.LOOP_GUARD.TTL, clock=clock),
            reaction_guard=LoopGuard(config.LOOP_GUARD.REACTION_TTL, name="reaction_guard", clock=clock),
            cooldown=CooldownLimiter(config.RATE_LIMIT.COOLDOWN, clock=clock),
            burst=BurstLimiter(config.RATE_LIMIT.BURST_MAX, config.RATE_LIMIT.BURST_WINDOW, clock=clock),
        )


def message(message_id: int = 100, *, channel_id: int = 10, content: str = "hello", **overrides) -> InboundMessage:
    values: dict[str, Any] = {
        "message_id": message_id,
        "author_id": 7,
        "author_name": "alice",
        "guild_id": GUILD,
        "channel_id": channel_id,
        "content": content,
    }
    values.update(overrides)
    return InboundMessage(**values)


def reaction(emoji: str, *, message_id: int = 100, user_id: int = 8, channel_id: int = 10) -> ReactionEvent:
    return ReactionEvent(message_id=message_id, user_id=user_id, guild_id=GUILD, channel_id=channel_id, emoji=emoji)


@pytest.fixture
def harness(config: Config, clock: FakeClock) -> RelayHarness:
    return RelayHarness(config, clock)


@pytest.mark.asyncio
async def test_message_is_translated_into_paired_channel(harness: RelayHarness) -> None:
    harness.graph.add_pair(GUILD, 10, 20, "en", "es")

    assert await harness.relay.handle_message(message()) == 1

    channel, envelope = harness.platform.sent[0]
    assert channel == 20
    assert envelope.description == "hola"
    assert envelope.footer == "EN → ES"
    assert envelope.author_name == "alice"
    assert harness.relay.loop_guard.seen(100)
    assert harness.relay.loop_guard.seen(9001)


@pytest.mark.asyncio
async def test_relayed_message_is_not_relayed_back(harness: RelayHarness) -> None:
    harness.graph.link(GUILD, 10, "en", 20, "es")

    assert await harness.relay.handle_message(message()) == 1
    # the platform echoes our own message back as a create event in channel 20
    echoed: InboundMessage = message(9001, channel_id=20, content="hola", author_id=99)

    assert await harness.relay.handle_message(echoed) == 0
    assert harness.platform.sent_channels == [20]


@pytest.mark.asyncio
async def test_cooldown_drops_rapid_messages(harness: RelayHarness) -> None:
    harness.graph.add_pair(GUILD, 10, 20, "en", "es")

    assert await harness.relay.handle_message(message(100)) == 1
    harness.clock.advance(0.5)
    assert await harness.relay.handle_message(message(101)) == 0
    harness.clock.advance(0.5)
    assert await harness.relay.handle_message(message(102)) == 1
    assert await harness.relay.handle_message(message(103, author_id=8)) == 1


@pytest.mark.asyncio
async def test_failing_edge_does_not_stop_siblings(harness: RelayHarness) -> None:
    harness.graph.add_pair(GUILD, 10, 20, "en", "es")
    harness.graph.add_pair(GUILD, 10, 30, "en", "ja")
    harness.graph.add_pair(GUILD, 10, 40, "en", "de")
    harness.platform.broken_channels.add(30)

    assert await harness.relay.handle_message(message()) == 2
    assert harness.platform.sent_channels == [20, 40]


@pytest.mark.asyncio
async def test_unreachable_channel_is_skipped(harness: RelayHarness) -> None:
    harness.graph.add_pair(GUILD, 10, 99, "en", "es")
    harness.graph.add_pair(GUILD, 10, 20, "en", "fr")

    assert await harness.relay.handle_message(message()) == 1
    assert harness.platform.sent_channels == [20]


@pytest.mark.asyncio
async def test_exhausted_providers_skip_every_edge(config: Config, clock: FakeClock) -> None:
    harness = RelayHarness(config, clock, failing=True)
    harness.graph.add_pair(GUILD, 10, 20, "en", "es")

    assert await harness.relay.handle_message(message()) == 0
    assert harness.platform.sent == []
    # first attempt plus one retry
    assert len(harness.engine.calls) == 2


@pytest.mark.asyncio
async def test_same_language_is_skipped_by_default(harness: RelayHarness) -> None:
    harness.graph.add_pair(GUILD, 10, 20, "auto", "es")

    assert await harness.relay.handle_message(message(content="hola")) == 0
    assert harness.platform.sent == []


@pytest.mark.asyncio
async def test_same_language_can_relay_original(config: Config, clock: FakeClock) -> None:
    config.TRANSLATION.SAME_LANGUAGE_POLICY = POLICY_RELAY_ORIGINAL
    harness = RelayHarness(config, clock)
    harness.graph.add_pair(GUILD, 10, 20, "auto", "es")

    assert await harness.relay.handle_message(message(content="hola")) == 1
    assert harness.platform.sent[0][1].description == "hola"
    assert harness.platform.sent[0][1].footer == "ES → ES"


@pytest.mark.asyncio
async def test_attachment_only_message_is_relayed_without_translation(harness: RelayHarness) -> None:
    harness.graph.add_pair(GUILD, 10, 20, "en", "es")

    sent: int = await harness.relay.handle_message(message(content="  ", attachments=["https://cdn.example/a.png"]))

    assert sent == 1
    assert harness.engine.calls == []
    envelope: RelayEnvelope = harness.platform.sent[0][1]
    assert envelope.description == ""
    assert envelope.attachments == ["https://cdn.example/a.png"]


@pytest.mark.parametrize(
    "inbound",
    [
        message(content=""),
        message(is_bot=True),
        message(guild_id=None),
        message(channel_id=30),
    ],
)
@pytest.mark.asyncio
async def test_messages_that_are_dropped(harness: RelayHarness, inbound: InboundMessage) -> None:
    harness.graph.add_pair(GUILD, 10, 20, "en", "es")

    assert await harness.relay.handle_message(inbound) == 0
    assert harness.platform.sent == []
    assert not harness.relay.loop_guard.seen(inbound.message_id)


@pytest.mark.asyncio
async def test_ignored_users_are_dropped(config: Config, clock: FakeClock) -> None:
    config.BOT.IGNORE_USERS = [7]
    harness = RelayHarness(config, clock)
    harness.graph.add_pair(GUILD, 10, 20, "en", "es")

    assert await harness.relay.handle_message(message()) == 0


@pytest.mark.asyncio
async def test_edit_of_handled_message_is_ignored(harness: RelayHarness) -> None:
    harness.graph.add_pair(GUILD, 10, 20, "en", "es")

    assert await harness.relay.handle_message(message()) == 1
    assert await harness.relay.handle_message_update(message(content="hello again")) == 0

    harness.clock.advance(31)
    assert await harness.relay.handle_message_update(message(content="hello again")) == 1
    assert harness.platform.sent[-1][1].description == "[es] hello again"


@pytest.mark.asyncio
async def test_reaction_replies_with_translation(harness: RelayHarness) -> None:
    harness.platform.messages[(10, 100)] = message()

    assert await harness.relay.handle_reaction(reaction(FLAG_ES)) is True

    channel, envelope = harness.platform.sent[0]
    assert channel == 10
    assert envelope.description == "hola"
    assert envelope.footer == "EN → ES"
    assert envelope.reply_to == 100


@pytest.mark.asyncio
async def test_reaction_translates_each_language_once(harness: RelayHarness) -> None:
    harness.platform.messages[(10, 100)] = message()

    assert await harness.relay.handle_reaction(reaction(FLAG_ES, user_id=8)) is True
    assert await harness.relay.handle_reaction(reaction(FLAG_ES, user_id=9)) is False
    assert await harness.relay.handle_reaction(reaction(FLAG_JP, user_id=9)) is True
    assert [envelope.description for _, envelope in harness.platform.sent] == ["hola", "こんにちは"]


@pytest.mark.asyncio
async def test_failed_reaction_translation_can_be_retried(config: Config, clock: FakeClock) -> None:
    harness = RelayHarness(config, clock, failing=True)
    harness.platform.messages[(10, 100)] = message()

    assert await harness.relay.handle_reaction(reaction(FLAG_ES, user_id=8)) is False

    harness.engine.failing = False
    clock.advance(60)

    assert await harness.relay.handle_reaction(reaction(FLAG_ES, user_id=9)) is True
    assert [envelope.description for _, envelope in harness.platform.sent] == ["hola"]


@pytest.mark.asyncio
async def test_reaction_on_unfetchable_message_does_not_block_language(harness: RelayHarness) -> None:
    assert await harness.relay.handle_reaction(reaction(FLAG_ES, user_id=8)) is False

    harness.platform.messages[(10, 100)] = message()

    assert await harness.relay.handle_reaction(reaction(FLAG_ES, user_id=9)) is True


@pytest.mark.asyncio
async def test_reaction_burst_limit(config: Config, clock: FakeClock) -> None:
    config.RATE_LIMIT.BURST_MAX = 2
    harness = RelayHarness(config, clock)
    for message_id in (100, 101, 102):
        harness.platform.messages[(10, message_id)] = message(message_id)

    results: list[bool] = [
        await harness.relay.handle_reaction(reaction(FLAG_ES, message_id=message_id)) for message_id in (100, 101, 102)
    ]

    assert results == [True, True, False]


@pytest.mark.asyncio
async def test_reaction_burst_limit_disabled_for_channel(config: Config, clock: FakeClock) -> None:
    config.RATE_LIMIT.BURST_MAX = 1
    config.RATE_LIMIT.BURST_DISABLED_CHANNELS = [10]
    harness = RelayHarness(config, clock)
    for message_id in (100, 101):
        harness.platform.messages[(10, message_id)] = message(message_id)

    assert await harness.relay.handle_reaction(reaction(FLAG_ES, message_id=100)) is True
    assert await harness.relay.handle_reaction(reaction(FLAG_ES, message_id=101)) is True


@pytest.mark.asyncio
async def test_reaction_ignored_cases(harness: RelayHarness) -> None:
    harness.platform.messages[(10, 100)] = message(content="hola")

    assert await harness.relay.handle_reaction(reaction("👍")) is False
    assert await harness.relay.handle_reaction(reaction(FLAG_ES, message_id=555)) is False
    # already Spanish
    assert await harness.relay.handle_reaction(reaction(FLAG_ES)) is False
    assert harness.platform.sent == []


@pytest.mark.asyncio
async def test_status_and_sweep(harness: RelayHarness) -> None:
    harness.graph.add_pair(GUILD, 10, 20, "en", "es")
    harness.graph.add_pair(2, 30, 40, "en", "fr")
    await harness.relay.handle_message(message())

    status: RelayStatus = harness.relay.status(GUILD)
    assert status.pair_count == 2
    assert status.guild_pair_count == 1
    assert status.cache_size == 1
    assert status.loop_guard_size == 2
    assert status.cooldown_keys == 1
    assert status.providers == ["dictionary"]

    harness.clock.advance(601)
    report: SweepReport = harness.relay.sweep()

    assert report.cache == 1
    assert report.loop_guard == 2
    assert report.cooldown == 1
    assert report.total == 4
    after: RelayStatus = harness.relay.status()
    assert (after.cache_size, after.loop_guard_size, after.cooldown_keys) == (0, 0, 0)
    assert after.guild_pair_count is None
