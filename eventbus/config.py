"""Event bus configuration: pydantic model plus YAML/.env loading."""

import os
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field

from eventbus.events.naming import TrimMode
from eventbus.settings import get_setting, load_settings

ENV_PREFIX = "EVENT_BUS_"


class BusType(str, Enum):
    RABBITMQ = "RabbitMQ"
    AZURE_SERVICE_BUS = "AzureServiceBus"


class EventBusConfig(BaseModel):
    """Settings shared by the core and transport backends.

    Frozen: prefix/suffix must not change once keys have been registered.
    """

    model_config = ConfigDict(frozen=True)

    # Used by transport backends when connecting; the core ignores it.
    connection_retry_count: int = Field(default=5, ge=0)
    default_topic_name: str = "EventBus"
    connection_string: str = ""
    subscriber_app_name: str = ""
    event_name_prefix: str = ""
    event_name_suffix: str = "IntegrationEvent"
    bus_type: BusType = BusType.RABBITMQ
    trim_mode: TrimMode = TrimMode.CHARSET
    # Backend-owned client object (connection, ServiceBusClient, ...).
    connection: Any = Field(default=None, exclude=True, repr=False)

    @property
    def delete_event_prefix(self) -> bool:
        return bool(self.event_name_prefix)

    @property
    def delete_event_suffix(self) -> bool:
        return bool(self.event_name_suffix)


_FIELDS_BY_ENV = {
    f"{ENV_PREFIX}{name.upper()}": name
    for name in EventBusConfig.model_fields
    if name != "connection"
}


def _env_overrides(env_path: Path | None) -> dict[str, str]:
    """EVENT_BUS_* values from the .env file, then the process environment."""
    env_vars: dict[str, str | None] = {}
    if env_path is not None and env_path.exists():
        env_vars.update(dotenv_values(env_path))
    env_vars.update(os.environ)
    return {
        field: value
        for key, field in _FIELDS_BY_ENV.items()
        if (value := env_vars.get(key)) is not None
    }


def load_config(
    settings: dict[str, Any] | None = None,
    env_path: Path | None = None,
) -> EventBusConfig:
    """Build EventBusConfig from the event_bus settings section and EVENT_BUS_* env vars.

    Raises pydantic.ValidationError on invalid values.
    """
    if settings is None:
        settings = load_settings()
    section = dict(get_setting(settings, "event_bus", {}) or {})
    section.update(_env_overrides(env_path))
    return EventBusConfig.model_validate(section)
