"""JSON wire format for integration events, backed by pydantic."""

import logging

from pydantic import BaseModel, ValidationError

from eventbus.contract import TEvent
from eventbus.errors import DeserializationError
from eventbus.events.models import IntegrationEvent

logger = logging.getLogger(__name__)


class JsonEventSerializer:
    """Serialize events with wire aliases (``createdAt``); parse them back."""

    def __init__(self, by_alias: bool = True) -> None:
        self._by_alias = by_alias

    def serialize(self, event: IntegrationEvent) -> str:
        return event.model_dump_json(by_alias=self._by_alias)

    def deserialize(self, payload: str | bytes, target_type: type[TEvent]) -> TEvent:
        if not (isinstance(target_type, type) and issubclass(target_type, BaseModel)):
            raise DeserializationError(target_type, "target type is not an event model")
        try:
            return target_type.model_validate_json(payload)
        except ValidationError as e:
            logger.debug("Payload rejected by %s: %s", target_type.__name__, e)
            raise DeserializationError(target_type, str(e), cause=e) from e
