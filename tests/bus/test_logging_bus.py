"""Tests for LoggingMessageBus."""

import asyncio
from unittest.mock import Mock

import pytest

from prefixbus.bus import (
    LoggingMessageBus,
    MessageBus,
    NoEndpointRegisteredError,
    create_bus,
    get_global_bus,
)
from prefixbus.config import BusConfig


@pytest.fixture
def logging_bus():
    return LoggingMessageBus(MessageBus())


class TestLoggingMessageBus:
    """Test logging around bus operations."""

    @pytest.mark.asyncio
    async def test_logs_start_and_subscriptions(self, logging_bus, log_records):
        logging_bus.broker("test").on("system ready", lambda: None)

        await logging_bus.start()

        assert logging_bus.started
        operations = [r["extra"].get("operation") for r in log_records]
        assert "subscribe" in operations
        assert "start" in operations

    @pytest.mark.asyncio
    async def test_forwards_emit_results(self, logging_bus, log_records):
        await logging_bus.start()
        logging_bus.broker("receiver").on("msg", lambda value: value * 2)

        assert await logging_bus.broker("sender").emit("msg", 21) == [42]
        await asyncio.sleep(0)

        messages = [r["message"] for r in log_records]
        assert "sender emit ['msg', 21]" in messages
        assert "calling receiver with [21]" in messages
        assert "sender emit done: [42]" in messages

    @pytest.mark.asyncio
    async def test_records_carry_structured_extras(self, logging_bus, log_records):
        await logging_bus.start()

        await logging_bus.broker("sender").emit("msg")

        emit_records = [r for r in log_records if r["extra"].get("operation") == "emit"]
        assert emit_records
        assert all(r["extra"]["broker"] == "sender" for r in emit_records)

    @pytest.mark.asyncio
    async def test_interceptors_are_logged(self, logging_bus, log_records):
        await logging_bus.start()
        receiver = Mock(return_value=None)
        logging_bus.broker("receiver").on("msg", receiver)
        logging_bus.intercept("msg", lambda message, proceed: proceed("msg", "rewritten"))

        await logging_bus.broker("sender").emit("msg", "original")

        receiver.assert_called_once_with("rewritten")
        operations = [r["extra"].get("operation") for r in log_records]
        assert "intercept" in operations
        assert "call_interceptor" in operations

    @pytest.mark.asyncio
    async def test_rpc_is_forwarded(self, logging_bus):
        await logging_bus.start()
        logging_bus.broker("p1").register("call", lambda: 42)

        assert await logging_bus.broker("p2").invoke("call", 1, 2) == 42
        assert await logging_bus.broker("p2").invoke_all("call") == [42]
        assert [await f for f in logging_bus.broker("p2").request("call")] == [42]

    @pytest.mark.asyncio
    async def test_failures_pass_through(self, logging_bus, log_records):
        await logging_bus.start()

        with pytest.raises(NoEndpointRegisteredError):
            await logging_bus.broker("p1").invoke("call")
        await asyncio.sleep(0)

        assert any("invoke failed" in r["message"] for r in log_records)

    @pytest.mark.asyncio
    async def test_arity_from_options_mapping_is_kept(self, logging_bus):
        await logging_bus.start()
        logging_bus.broker("p1").register({"message": "call", "arity": 1}, lambda *args: args)

        futures = logging_bus.broker("p2").request("call", 1, 2, 3)

        assert [await f for f in futures] == [(1,)]

    @pytest.mark.asyncio
    async def test_derived_arity_matches_plain_bus(self, logging_bus):
        await logging_bus.start()
        logging_bus.broker("p1").register("call", lambda value: value)

        assert await logging_bus.broker("p2").invoke_all("call", 1, 2, 3) == [1]

    @pytest.mark.asyncio
    async def test_broken_logging_does_not_mask_results(self, logging_bus, monkeypatch):
        broken_logger = Mock()
        broken_logger.bind.side_effect = RuntimeError("sink down")
        monkeypatch.setattr("prefixbus.bus.logging_bus.logger", broken_logger)

        await logging_bus.start()
        logging_bus.broker("receiver").on("msg", lambda: "ok")

        assert await logging_bus.broker("sender").emit("msg") == ["ok"]

    @pytest.mark.asyncio
    async def test_set_dispatcher_is_forwarded(self, logging_bus):
        await logging_bus.start()
        handler = Mock(return_value=None)
        logging_bus.broker("receiver").on("msg", handler)

        logging_bus.set_dispatcher(lambda thunk: None)
        await logging_bus.broker("sender").emit("msg")

        handler.assert_not_called()
        assert logging_bus.inner.dispatcher is not None


class TestFactory:
    """Test create_bus() and the global bus."""

    def test_plain_bus_by_default(self):
        bus = create_bus()

        assert isinstance(bus, MessageBus)
        assert not bus.started

    def test_logging_bus_when_configured(self):
        bus = create_bus(BusConfig(log_calls=True))

        assert isinstance(bus, LoggingMessageBus)
        assert isinstance(bus.inner, MessageBus)
        assert bus.config.log_calls

    def test_global_bus_is_shared(self):
        assert get_global_bus() is get_global_bus()

    def test_brokers_get_default_timeout(self):
        bus = create_bus(BusConfig(default_timeout=2.5))

        broker = bus.get_actor_handle("p1")

        assert broker.id == "p1"
        assert broker.bus is bus
        assert broker.options.timeout == 2.5
