"""
Integration tests for the gateway health monitor.
"""
import asyncio
import logging

import pytest
import httpx

from llm_gateway.client.gateway_client import GatewayClient
from llm_gateway.client.health_monitor import HealthMonitor, HealthState
from llm_gateway.client.settings import ClientSettings


GATEWAY = "gateway.test"


def make_monitor(upstream, **kwargs):
    settings = ClientSettings(origin=f"http://{GATEWAY}", health_poll_interval=30)
    http_client = httpx.AsyncClient(
        base_url=settings.origin,
        transport=httpx.MockTransport(upstream),
    )
    states = []
    monitor = HealthMonitor(
        GatewayClient(settings, http_client=http_client),
        on_change=lambda status: states.append(status.state),
        **kwargs,
    )
    return monitor, states


class TestHealthMonitor:
    """Test the checking -> connected/disconnected transitions."""

    def test_initial_state(self, upstream):
        monitor, _ = make_monitor(upstream)
        assert monitor.status.state == HealthState.CHECKING
        assert monitor.status.last_checked is None
        assert monitor.interval == 30

    @pytest.mark.asyncio
    async def test_connected(self, upstream):
        upstream.json_reply(GATEWAY, {"ok": True, "providers": ["openai"], "timestamp": "t"})
        monitor, states = make_monitor(upstream)

        status = await monitor.check()

        assert status.state == HealthState.CONNECTED
        assert status.last_checked is not None
        assert states == [HealthState.CHECKING, HealthState.CONNECTED]
        assert upstream.requests[0].url.path == "/health"

    @pytest.mark.asyncio
    async def test_ok_false_is_disconnected(self, upstream):
        upstream.json_reply(GATEWAY, {"ok": False})
        monitor, _ = make_monitor(upstream)

        status = await monitor.check()

        assert status.state == HealthState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_error_status_is_disconnected(self, upstream):
        upstream.json_reply(GATEWAY, {"ok": True}, status_code=503)
        monitor, _ = make_monitor(upstream)

        assert (await monitor.check()).state == HealthState.DISCONNECTED

    @pytest.mark.asyncio
    async def test_unreachable_keeps_last_success(self, upstream):
        upstream.json_reply(GATEWAY, {"ok": True, "providers": []})
        monitor, states = make_monitor(upstream)
        connected = await monitor.check()

        del upstream.routes[GATEWAY]
        status = await monitor.retry()

        assert status.state == HealthState.DISCONNECTED
        assert status.last_checked == connected.last_checked
        assert states[-2:] == [HealthState.CHECKING, HealthState.DISCONNECTED]

    @pytest.mark.asyncio
    async def test_polling(self, upstream):
        upstream.json_reply(GATEWAY, {"ok": True, "providers": []})
        monitor, states = make_monitor(upstream, interval=0.01)

        await monitor.start()
        assert monitor.running
        await asyncio.sleep(0.05)
        await monitor.stop()

        assert not monitor.running
        assert len(upstream.requests) >= 2
        assert HealthState.CONNECTED in states

    @pytest.mark.asyncio
    async def test_start_twice_is_single_task(self, upstream):
        upstream.json_reply(GATEWAY, {"ok": True, "providers": []})
        monitor, _ = make_monitor(upstream, interval=10)

        await monitor.start()
        task = monitor._task
        await monitor.start()

        assert monitor._task is task
        await monitor.stop()

    @pytest.mark.asyncio
    async def test_polling_survives_callback_error(self, upstream, caplog):
        upstream.json_reply(GATEWAY, {"ok": True, "providers": []})
        monitor, states = make_monitor(upstream, interval=0.01)
        calls = []

        def flaky(status):
            calls.append(status)
            if len(calls) == 1:
                raise RuntimeError("listener crashed")
            states.append(status.state)

        monitor._on_change = flaky

        with caplog.at_level(logging.ERROR, logger="llm_gateway.client.health_monitor"):
            await monitor.start()
            await asyncio.sleep(0.05)
            assert monitor.running
            await monitor.stop()

        assert "listener crashed" in caplog.text
        assert HealthState.CONNECTED in states
