"""Event-name normalization: raw type name -> canonical event key.

The default CHARSET mode strips any leading/trailing characters that belong to
the prefix/suffix character sets (``str.lstrip``/``str.rstrip`` semantics), so
"PaymentIntegrationEvent" collapses to "Paym". Existing deployments rely on
those keys; LITERAL mode removes the affixes as whole substrings instead.
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from eventbus.config import EventBusConfig

__all__ = ["EventNameNormalizer", "TrimMode"]


class TrimMode(str, Enum):
    CHARSET = "charset"
    LITERAL = "literal"


class EventNameNormalizer:
    """Pure name mapping bound to one bus instance's prefix/suffix."""

    def __init__(
        self,
        prefix: str = "",
        suffix: str = "IntegrationEvent",
        trim_mode: TrimMode = TrimMode.CHARSET,
        subscriber_app_name: str = "",
    ) -> None:
        self._prefix = prefix or ""
        self._suffix = suffix or ""
        self._trim_mode = TrimMode(trim_mode)
        self._subscriber_app_name = subscriber_app_name or ""

    @classmethod
    def from_config(cls, config: "EventBusConfig") -> "EventNameNormalizer":
        return cls(
            prefix=config.event_name_prefix,
            suffix=config.event_name_suffix,
            trim_mode=config.trim_mode,
            subscriber_app_name=config.subscriber_app_name,
        )

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def suffix(self) -> str:
        return self._suffix

    @property
    def trim_mode(self) -> TrimMode:
        return self._trim_mode

    def normalize(self, raw_name: str) -> str:
        """Return the canonical event key for a raw event or type name."""
        name = raw_name
        if self._trim_mode is TrimMode.LITERAL:
            if self._prefix:
                name = name.removeprefix(self._prefix)
            if self._suffix:
                name = name.removesuffix(self._suffix)
            return name
        if self._prefix:
            name = name.lstrip(self._prefix)
        if self._suffix:
            name = name.rstrip(self._suffix)
        return name

    __call__ = normalize

    def qualify(self, event_key: str) -> str:
        """Fully-qualified name: prefix + key + suffix."""
        return f"{self._prefix}{event_key}{self._suffix}"

    def subscription_name(self, raw_name: str) -> str:
        """Per-subscriber queue/subscription name used by transport backends."""
        return f"{self._subscriber_app_name}.{self.normalize(raw_name)}"
