"""Tests for configuration loading."""

import json
import sys

import pytest
from loguru import logger
from pydantic import ValidationError

from prefixbus.config import BusConfig, load_config, save_config
from prefixbus.utils import configure_logging


class TestBusConfig:
    """Test BusConfig."""

    def test_defaults(self):
        config = BusConfig()

        assert config.log_calls is False
        assert config.warn_before_start is True
        assert config.system_broker_id == "MessageBus"
        assert config.system_ready_message == "system ready"
        assert config.default_timeout is None

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("PREFIXBUS_LOG_CALLS", "true")
        monkeypatch.setenv("PREFIXBUS_DEFAULT_TIMEOUT", "1.5")

        config = BusConfig()

        assert config.log_calls is True
        assert config.default_timeout == 1.5

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            BusConfig(default_timeout=0)

    def test_log_level_is_normalized(self):
        assert BusConfig(log_level="debug").log_level == "DEBUG"


class TestLoader:
    """Test load_config() and save_config()."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = load_config(tmp_path / "missing.json")

        assert config == BusConfig()

    def test_reads_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"log_calls": True, "system_ready_message": "ready"}))

        config = load_config(path)

        assert config.log_calls is True
        assert config.system_ready_message == "ready"

    def test_invalid_file_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        assert load_config(path) == BusConfig()

    def test_invalid_values_fall_back_to_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"default_timeout": -1}))

        assert load_config(path) == BusConfig()

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "config.json"

        save_config(BusConfig(default_timeout=4, warn_before_start=False), path)
        config = load_config(path)

        assert config.default_timeout == 4
        assert config.warn_before_start is False


class TestConfigureLogging:
    """Test configure_logging()."""

    def test_writes_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "prefixbus.log"

        try:
            configure_logging(level="error", log_file=log_file)
            assert log_file.parent.exists()
        finally:
            logger.remove()
            logger.add(sys.stderr)

    def test_console_level_comes_from_config(self, capsys):
        try:
            configure_logging(config=BusConfig(log_level="error"))
            logger.warning("quiet warning")
            logger.error("loud error")

            err = capsys.readouterr().err
            assert "loud error" in err
            assert "quiet warning" not in err
        finally:
            logger.remove()
            logger.add(sys.stderr)

    def test_explicit_level_overrides_config(self, capsys):
        try:
            configure_logging(level="warning", config=BusConfig(log_level="error"))
            logger.warning("shown warning")

            assert "shown warning" in capsys.readouterr().err
        finally:
            logger.remove()
            logger.add(sys.stderr)
