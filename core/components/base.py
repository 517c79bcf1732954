"""Base component for the Discord relay bot.

This module provides the ComponentBase class that all bot components inherit from. Components
are discord.py cogs that register themselves with their dependencies, so the bot can attach
them in dependency order and detach them in reverse.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, NamedTuple

from discord.ext import commands

from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from core.bot import RelayBot
    from core.relay import RelayEngine
    from core.shared_data import SharedData
    from core.trans.manager import TransManager
    from models.config_models import Config


__all__: list[str] = ["ComponentBase", "ComponentDependencyError", "ComponentDescriptor"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class ComponentDependencyError(Exception):
    """Raised when component dependencies are unknown or circular."""


class ComponentDescriptor(NamedTuple):
    """Descriptor for bot components, including the component class and its dependencies."""

    component: type[ComponentBase]
    depends: list[str]


class ComponentBase(commands.Cog):
    """Base class for relay bot components.

    Attributes:
        bot (RelayBot): The bot instance with shared data and configuration.
        shared (SharedData): Shared data accessible to all components.
        component_registry (ClassVar[dict[str, ComponentDescriptor]]): Registry of all components and their descriptors.
    """

    component_registry: ClassVar[dict[str, ComponentDescriptor]] = {}

    def __init_subclass__(cls, **kwargs) -> None:
        """Register subclass in the component registry and dependency mapping.

        Args:
            **kwargs: Additional keyword arguments.
        """
        super().__init_subclass__(**kwargs)
        depends: list[str] = list(getattr(cls, "depends", []))
        cls.component_registry[cls.__name__] = ComponentDescriptor(component=cls, depends=depends)

    def __init__(self, bot: RelayBot) -> None:
        """Initialize the component.

        Args:
            bot (RelayBot): The bot instance with shared data.

        Raises:
            RuntimeError: If shared data is not initialized.
        """
        self.bot: RelayBot = bot
        if bot.shared_data is None:
            msg = "Shared data is not initialized."
            raise RuntimeError(msg)
        self.shared: SharedData = bot.shared_data

    @classmethod
    def load_order(cls) -> list[type[ComponentBase]]:
        """Return the registered components ordered so every component follows its dependencies.

        Raises:
            ComponentDependencyError: If a dependency is not registered or the dependencies form a cycle.
        """
        ordered: list[type[ComponentBase]] = []
        state: dict[str, str] = {}

        def visit(name: str, chain: tuple[str, ...]) -> None:
            if state.get(name) == "done":
                return
            if state.get(name) == "visiting":
                msg = f"Circular component dependency: {' -> '.join((*chain, name))}"
                raise ComponentDependencyError(msg)
            descriptor: ComponentDescriptor | None = cls.component_registry.get(name)
            if descriptor is None:
                msg = f"Unknown component dependency '{name}' (required by {chain[-1] if chain else '-'})"
                raise ComponentDependencyError(msg)
            state[name] = "visiting"
            for dependency in descriptor.depends:
                visit(dependency, (*chain, name))
            state[name] = "done"
            ordered.append(descriptor.component)

        for name in cls.component_registry:
            visit(name, ())
        return ordered

    async def cog_load(self) -> None:
        await self.component_load()

    async def cog_unload(self) -> None:
        await self.component_teardown()

    async def component_load(self) -> None:
        """Start the services owned by this component."""

    async def component_teardown(self) -> None:
        """Stop the services owned by this component."""

    @property
    def config(self) -> Config:
        """Get the application configuration."""
        return self.shared.config

    @property
    def trans_manager(self) -> TransManager:
        """Get the translation manager."""
        return self.shared.trans_manager

    @property
    def relay(self) -> RelayEngine:
        """Get the relay engine."""
        return self.shared.relay
