"""Bot components for event handling and command processing.

This package contains the discord.py cogs that feed events into the relay engine, expose the
administrative slash commands and run the relay's services.

Modules:
- base: Base class for all components
- command: Administrative slash commands
- maintenance_component: Periodic sweep of expiring state
- relay_events: Message, edit, reaction and guild events
- storage_component: Pair store and persistence queue lifecycle
- trans_component: Translation service lifecycle
"""

from core.components.base import ComponentBase, ComponentDependencyError, ComponentDescriptor
from core.components.command import PairCommandManager
from core.components.maintenance_component import MaintenanceComponent
from core.components.relay_events import RelayEventsComponent
from core.components.storage_component import PairStorageComponent
from core.components.trans_component import TranslationServiceComponent

__all__: list[str] = [
    "ComponentBase",
    "ComponentDependencyError",
    "ComponentDescriptor",
    "MaintenanceComponent",
    "PairCommandManager",
    "PairStorageComponent",
    "RelayEventsComponent",
    "TranslationServiceComponent",
]
