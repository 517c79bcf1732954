"""Periodic maintenance of the relay's expiring state."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from discord.ext import tasks

from core.components.base import ComponentBase
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging

    from models.status_models import SweepReport

__all__: list[str] = ["MaintenanceComponent"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class MaintenanceComponent(ComponentBase):
    """Sweep the translation cache, both loop guards and both rate limiters on a fixed interval."""

    depends: ClassVar[list[str]] = ["RelayEventsComponent"]

    async def component_load(self) -> None:
        self.maintenance.change_interval(seconds=self.config.LOOP_GUARD.SWEEP_INTERVAL)
        self.maintenance.start()
        logger.debug("'%s' component loaded", self.__class__.__name__)

    async def component_teardown(self) -> None:
        self.maintenance.cancel()
        logger.debug("'%s' component unloaded", self.__class__.__name__)

    @tasks.loop(seconds=60)
    async def maintenance(self) -> None:
        report: SweepReport = self.relay.sweep()
        logger.debug("Maintenance sweep complete: %d entries removed", report.total)

    @maintenance.error
    async def maintenance_error(self, error: BaseException) -> None:
        logger.error("Maintenance sweep failed: %s", error)
