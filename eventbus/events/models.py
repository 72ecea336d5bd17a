"""Integration event envelope shared by publishers and subscribers."""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["IntegrationEvent"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IntegrationEvent(BaseModel):
    """Immutable event passed between services.

    A new instance gets a fresh id and creation time. Reconstruction from a
    payload (``model_validate`` / ``model_validate_json``) keeps the original
    values. Subclasses add their own fields and stay frozen.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")

    @classmethod
    def event_name(cls) -> str:
        """Type name used for routing, before prefix/suffix stripping."""
        return cls.__name__
