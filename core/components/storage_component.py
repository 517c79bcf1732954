"""Pair storage service component: opens the sqlite store and runs the persistence queue."""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.components.base import ComponentBase
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

__all__: list[str] = ["PairStorageComponent"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class PairStorageComponent(ComponentBase):
    async def component_load(self) -> None:
        """Open the store, then start the queue that writes to it."""
        await self.shared.store.component_load()
        await self.shared.queue.component_load()
        logger.debug("'%s' component loaded", self.__class__.__name__)

    async def component_teardown(self) -> None:
        """Drain the queue before closing the store."""
        await self.shared.queue.component_teardown()
        await self.shared.store.component_teardown()
        logger.debug("'%s' component unloaded", self.__class__.__name__)
