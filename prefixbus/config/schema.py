"""Configuration schema using Pydantic."""

from pydantic import ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


class BusConfig(BaseSettings):
    """Root configuration for prefixbus.

    Values come from keyword arguments, ``PREFIXBUS_*`` environment
    variables or a JSON file read by ``load_config``.
    """
    log_calls: bool = False  # Wrap the bus in LoggingMessageBus
    warn_before_start: bool = True  # Warn when emitting before start()
    system_broker_id: str = "MessageBus"
    system_ready_message: str = "system ready"
    default_timeout: float | None = Field(default=None, gt=0)  # Seconds, per broker default
    log_level: str = "WARNING"

    model_config = ConfigDict(
        env_prefix="PREFIXBUS_",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()
