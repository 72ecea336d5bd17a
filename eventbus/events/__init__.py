"""Integration events and event-name conventions."""

from eventbus.events.models import IntegrationEvent
from eventbus.events.naming import EventNameNormalizer

__all__ = ["EventNameNormalizer", "IntegrationEvent"]
