"""Event bus used to publish integration events.

Events go either to an HTTP endpoint (``EVENT_BUS_URL``) or, when none
is configured, to an in-process bus that records and logs them.
"""

import json
from typing import Protocol

import httpx
import structlog

from catalog_api.domain.base import IntegrationEvent
from catalog_api.infrastructure.config import settings

logger = structlog.get_logger()


class EventBusError(Exception):
    """Error delivering an event to the bus."""

    def __init__(self, event_id: str, message: str, status_code: int | None = None) -> None:
        self.event_id = event_id
        self.message = message
        self.status_code = status_code
        super().__init__(f"[{event_id}] {message}")


class EventBus(Protocol):
    """Publishes integration events."""

    async def publish(self, event: IntegrationEvent) -> None:
        """Publish an event. Raises on failure."""
        ...


class InMemoryEventBus:
    """In-process event bus.

    Keeps every published event in ``published`` and logs it.
    """

    def __init__(self) -> None:
        """Initialize event bus."""
        self.published: list[IntegrationEvent] = []

    async def publish(self, event: IntegrationEvent) -> None:
        """Record the event.

        Args:
            event: Event to publish.
        """
        self.published.append(event)
        logger.info(
            "Published integration event",
            event_id=str(event.event_id),
            event_type=event.event_type,
        )


class HttpEventBus:
    """Event bus that POSTs events as JSON to a single endpoint."""

    def __init__(self, url: str, timeout: float = 10.0) -> None:
        """Initialize HTTP event bus.

        Args:
            url: Endpoint receiving events.
            timeout: Request timeout in seconds.
        """
        self.url = url
        self._client = httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def publish(self, event: IntegrationEvent) -> None:
        """Send the event to the bus endpoint.

        Args:
            event: Event to publish.

        Raises:
            EventBusError: If the endpoint is unreachable or rejects the event.
        """
        event_id = str(event.event_id)
        headers = {
            "Content-Type": "application/json",
            "X-Event-Id": event_id,
            "X-Event-Type": event.event_type,
        }

        try:
            response = await self._client.post(
                self.url,
                content=json.dumps(event.to_dict()),
                headers=headers,
            )
        except httpx.RequestError as e:
            logger.error(
                "Event delivery error",
                event_id=event_id,
                event_type=event.event_type,
                error=str(e),
            )
            raise EventBusError(event_id, f"Request failed: {str(e)}") from e

        if not response.is_success:
            logger.warning(
                "Event delivery failed",
                event_id=event_id,
                event_type=event.event_type,
                status_code=response.status_code,
                response_body=response.text[:200],
            )
            raise EventBusError(
                event_id,
                f"Event bus rejected event: {response.status_code}",
                response.status_code,
            )

        logger.info(
            "Event delivered successfully",
            event_id=event_id,
            event_type=event.event_type,
            status_code=response.status_code,
        )


# Global event bus instance
_event_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Get the event bus singleton.

    Returns:
        HttpEventBus when ``event_bus_url`` is set, InMemoryEventBus otherwise.
    """
    global _event_bus
    if _event_bus is None:
        if settings.event_bus_url:
            _event_bus = HttpEventBus(settings.event_bus_url, settings.event_bus_timeout)
        else:
            _event_bus = InMemoryEventBus()
    return _event_bus
