"""Integration events published by the catalog."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID

from catalog_api.domain.base import IntegrationEvent


@dataclass(frozen=True)
class ProductPriceChangedIntegrationEvent(IntegrationEvent):
    """Event raised when a catalog item's price is changed."""

    event_type: ClassVar[str] = "catalog.product_price_changed"

    product_id: int = 0
    new_price: Decimal = Decimal("0")
    old_price: Decimal = Decimal("0")

    def _payload(self) -> dict[str, Any]:
        """Get event-specific payload."""
        return {
            "product_id": self.product_id,
            "new_price": str(self.new_price),
            "old_price": str(self.old_price),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProductPriceChangedIntegrationEvent":
        """Rebuild the event from its ``to_dict`` form."""
        payload = data["payload"]
        return cls(
            event_id=UUID(data["event_id"]),
            occurred_at=datetime.fromisoformat(data["occurred_at"]),
            product_id=payload["product_id"],
            new_price=Decimal(payload["new_price"]),
            old_price=Decimal(payload["old_price"]),
        )


# Event classes by event_type, for rebuilding events from the event log
EVENT_TYPES: dict[str, type[ProductPriceChangedIntegrationEvent]] = {
    ProductPriceChangedIntegrationEvent.event_type: ProductPriceChangedIntegrationEvent,
}


def event_from_dict(data: dict[str, Any]) -> IntegrationEvent:
    """Rebuild an integration event from its serialized form.

    Args:
        data: Output of ``IntegrationEvent.to_dict``.

    Returns:
        The event instance.

    Raises:
        KeyError: If the event type is unknown.
    """
    return EVENT_TYPES[data["event_type"]].from_dict(data)
