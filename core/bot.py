"""Relay bot core implementation.

This module provides the RelayBot class that extends discord.ext.commands.Bot and orchestrates
shared state creation, component lifecycle management and graceful shutdown.
"""

from __future__ import annotations

import logging
from contextlib import suppress
from typing import TYPE_CHECKING, Any

import discord
from discord.ext import commands

from core.components import (
    ComponentBase,
    MaintenanceComponent,  # noqa: F401
    PairCommandManager,  # noqa: F401
    PairStorageComponent,  # noqa: F401
    RelayEventsComponent,  # noqa: F401
    TranslationServiceComponent,  # noqa: F401
)
from core.discord_platform import DiscordPlatform
from core.shared_data import SharedData
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    from models.config_models import Config


__all__: list[str] = ["RelayBot"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class RelayBot(commands.Bot):
    """Discord bot that relays messages between paired channels.

    Attributes:
        config (Config): Bot configuration settings.
        shared_data (SharedData): Process-scoped relay state.
        attached_components (list[ComponentBase]): Attached components in load order.
    """

    def __init__(self, config: Config) -> None:
        """Initialise the bot with the given configuration.

        Args:
            config (Config): The configuration object containing bot settings.
        """
        logger.debug("Initialising %s", self.__class__.__name__)
        LoggerUtils.attach_library_logger("discord", logging.WARNING)

        self.config: Config = config
        self.shared_data: SharedData = SharedData(config)
        self._closed: bool = False
        self.attached_components: list[ComponentBase] = []

        intents: discord.Intents = discord.Intents.default()
        intents.message_content = True
        super().__init__(command_prefix=commands.when_mentioned, intents=intents)

    async def setup_hook(self) -> None:
        """Build shared data, attach the registered components and sync the slash commands."""
        logger.debug("Setting up %s", self.__class__.__name__)

        await self.shared_data.async_init(DiscordPlatform(self))

        for _component_class in ComponentBase.load_order():
            await self.attach_component(_component_class(self))

        if self.config.BOT.SYNC_COMMANDS:
            try:
                synced: list[Any] = await self.tree.sync()
            except discord.HTTPException as err:
                logger.error("Failed to sync application commands: %s", err)
            else:
                logger.info("Synced %d application commands", len(synced))

    async def attach_component(self, component: ComponentBase) -> None:
        """Attach a component to the bot.

        Args:
            component (ComponentBase): The component to attach.
        """
        logger.debug("Attaching component: %s", component.__class__.__name__)
        try:
            await self.add_cog(component)
        except discord.ClientException as err:
            logger.error("Failed to load component %s: %s", component.__class__.__name__, err)
            return

        self.attached_components.append(component)
        logger.debug("Successfully attached component: %s", component.__class__.__name__)

    async def detach_component(self, component: ComponentBase) -> None:
        """Detach a component from the bot.

        Args:
            component (ComponentBase): The component to detach.
        """
        logger.debug("Detaching component: %s", component.__class__.__name__)
        try:
            await self.remove_cog(component.qualified_name)
        except Exception as err:  # noqa: BLE001
            logger.error("Unexpected error while detaching component %s: %s", component.__class__.__name__, err)
        else:
            logger.debug("Successfully detached component: %s", component.__class__.__name__)
        finally:
            with suppress(ValueError):
                self.attached_components.remove(component)

    async def on_error(self, event_method: str, /, *args: Any, **kwargs: Any) -> None:
        """Log errors raised by event handlers instead of printing them."""
        _ = args, kwargs
        logger.exception("Event error in %s", event_method)

    async def close(self) -> None:
        """Detach the components in reverse load order, then close the connection.

        Note:
            close() may be invoked more than once during shutdown. Component teardown runs only
            the first time, while the base implementation is called every time.
        """
        if not self._closed:
            logger.info("Start shutdown sequence")
            for _component in reversed(self.attached_components):
                await self.detach_component(_component)

            self._closed = True
            logger.info("Shutdown sequence complete")
        await super().close()
