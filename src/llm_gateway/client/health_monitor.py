"""
Gateway connectivity monitor.

Polls the gateway's ``/health`` endpoint and exposes a tri-state
indicator: checking, connected or disconnected.
"""

import asyncio
import logging
from contextlib import suppress
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from .gateway_client import GatewayClient

logger = logging.getLogger(__name__)


class HealthState(str, Enum):
    """Connectivity states shown to the user."""
    CHECKING = "checking"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


@dataclass(frozen=True)
class HealthStatus:
    """Current state plus the time of the last successful check."""
    state: HealthState = HealthState.CHECKING
    last_checked: Optional[datetime] = None


class HealthMonitor:
    """
    Periodic gateway health poller.

    Only the monitor's own poll loop and ``retry()`` change the status.
    Overlapping checks are not serialized; the last one to finish wins.
    """

    def __init__(
        self,
        client: GatewayClient,
        interval: Optional[float] = None,
        on_change: Optional[Callable[[HealthStatus], None]] = None,
    ):
        """
        Initialize health monitor.

        Args:
            client: Gateway client used for the health request
            interval: Seconds between polls, ``settings.health_poll_interval`` if None
            on_change: Called with every new status
        """
        self._client = client
        self.interval = interval if interval is not None else client.settings.health_poll_interval
        self._on_change = on_change
        self._status = HealthStatus()
        self._task: Optional[asyncio.Task] = None

    @property
    def status(self) -> HealthStatus:
        return self._status

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _set_status(self, status: HealthStatus) -> None:
        self._status = status
        if self._on_change:
            self._on_change(status)

    async def check(self) -> HealthStatus:
        """Run one check: checking, then connected or disconnected."""
        self._set_status(HealthStatus(HealthState.CHECKING, self._status.last_checked))

        report = await self._client.ping_health()

        if report.ok:
            status = HealthStatus(HealthState.CONNECTED, datetime.now(timezone.utc))
        else:
            status = HealthStatus(HealthState.DISCONNECTED, self._status.last_checked)

        self._set_status(status)
        return status

    async def retry(self) -> HealthStatus:
        """Manual retry; same transition rule as the poll."""
        return await self.check()

    async def start(self) -> None:
        """Start polling: one check now, then one per interval."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Health monitor started, polling every {self.interval}s")

    async def stop(self) -> None:
        """Stop polling."""
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Health monitor stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.check()
            except Exception as e:
                logger.error(f"Health check failed: {e}")
            await asyncio.sleep(self.interval)
