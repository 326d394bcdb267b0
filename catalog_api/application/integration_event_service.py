"""Integration event log and publishing service.

Implements the transactional outbox for catalog events:
- Saving an event log entry in the same transaction as the catalog change
- Publishing the event through the event bus
- Tracking publication state (in progress, published, failed)
- Re-publishing entries that were never delivered
"""

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import structlog
from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.domain.base import IntegrationEvent
from catalog_api.domain.events import event_from_dict
from catalog_api.infrastructure.config import settings
from catalog_api.infrastructure.event_bus import EventBus
from catalog_api.infrastructure.models import EventState, IntegrationEventLogEntry

logger = structlog.get_logger()

PENDING_STATES = (EventState.NOT_PUBLISHED.value, EventState.PUBLISH_FAILED.value)


class IntegrationEventLogService:
    """Reads and writes the integration event log.

    Changes are added to the session but never committed here; the
    caller owns the transaction.
    """

    def __init__(self, session: AsyncSession, stale_after: float | None = None) -> None:
        """Initialize log service with database session.

        Args:
            session: Async SQLAlchemy session.
            stale_after: Seconds after which an in-progress entry counts as
                interrupted and becomes pending again.
        """
        self.session = session
        self.stale_after = (
            settings.event_publish_stale_after if stale_after is None else stale_after
        )

    async def save_event(
        self,
        event: IntegrationEvent,
        transaction_id: str,
    ) -> IntegrationEventLogEntry:
        """Add a log entry for an event.

        Args:
            event: Event to log.
            transaction_id: Identifier of the transaction the entry belongs to.

        Returns:
            The new log entry.
        """
        entry = IntegrationEventLogEntry(
            event_id=str(event.event_id),
            event_type_name=event.event_type,
            content=event.to_dict(),
            state=EventState.NOT_PUBLISHED.value,
            times_sent=0,
            creation_time=event.occurred_at,
            transaction_id=transaction_id,
        )
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def get(self, event_id: str) -> IntegrationEventLogEntry | None:
        """Get a log entry by event ID."""
        result = await self.session.execute(
            select(IntegrationEventLogEntry).where(
                IntegrationEventLogEntry.event_id == event_id
            )
        )
        return result.scalar_one_or_none()

    async def retrieve_event_logs_pending_to_publish(
        self,
        transaction_id: str | None = None,
    ) -> Sequence[IntegrationEventLogEntry]:
        """Get entries that are not yet published, oldest first.

        Entries stuck in progress for longer than ``stale_after`` are
        included so that an interrupted delivery is retried.

        Args:
            transaction_id: Restrict to entries written by this transaction.

        Returns:
            Pending log entries.
        """
        stale_before = datetime.now(timezone.utc) - timedelta(seconds=self.stale_after)
        query = select(IntegrationEventLogEntry).where(
            or_(
                IntegrationEventLogEntry.state.in_(PENDING_STATES),
                and_(
                    IntegrationEventLogEntry.state == EventState.IN_PROGRESS.value,
                    IntegrationEventLogEntry.last_sent_time < stale_before,
                ),
            )
        )
        if transaction_id is not None:
            query = query.where(IntegrationEventLogEntry.transaction_id == transaction_id)
        query = query.order_by(IntegrationEventLogEntry.creation_time)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def mark_event_as_in_progress(self, event_id: str) -> None:
        """Mark an entry in progress and count the delivery attempt."""
        await self._update_state(event_id, EventState.IN_PROGRESS)

    async def mark_event_as_published(self, event_id: str) -> None:
        """Mark an entry published."""
        await self._update_state(event_id, EventState.PUBLISHED)

    async def mark_event_as_failed(self, event_id: str) -> None:
        """Mark an entry as failed to publish."""
        await self._update_state(event_id, EventState.PUBLISH_FAILED)

    async def _update_state(self, event_id: str, state: EventState) -> None:
        """Update an entry's state.

        Args:
            event_id: Event identifier.
            state: New state.

        Raises:
            LookupError: If no entry exists for ``event_id``.
        """
        entry = await self.get(event_id)
        if entry is None:
            raise LookupError(f"No integration event log entry for {event_id}")

        entry.state = state.value
        if state == EventState.IN_PROGRESS:
            entry.times_sent += 1
            entry.last_sent_time = datetime.now(timezone.utc)
        await self.session.flush()


class CatalogIntegrationEventService:
    """Saves catalog changes together with integration events and publishes them.

    Saving is atomic: the catalog changes pending in the session and the
    event log entry are committed in one transaction. Publishing is a
    separate step; a failed publish is logged and recorded on the entry
    and never undoes the saved changes.
    """

    def __init__(self, session: AsyncSession, event_bus: EventBus) -> None:
        """Initialize event service.

        Args:
            session: Async SQLAlchemy session shared with the catalog.
            event_bus: Bus events are published to.
        """
        self.session = session
        self.event_bus = event_bus
        self.event_log = IntegrationEventLogService(session)

    async def save_event_and_catalog_changes(self, event: IntegrationEvent) -> str:
        """Commit pending catalog changes and the event log entry together.

        Args:
            event: Event raised by the pending changes.

        Returns:
            The transaction identifier recorded on the entry.
        """
        transaction_id = str(uuid4())

        logger.info(
            "Saving catalog changes with integration event",
            event_id=str(event.event_id),
            event_type=event.event_type,
            transaction_id=transaction_id,
        )

        try:
            await self.event_log.save_event(event, transaction_id)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        return transaction_id

    async def publish_through_event_bus(self, event: IntegrationEvent) -> bool:
        """Publish a saved event and record the outcome on its log entry.

        Args:
            event: Event previously saved with ``save_event_and_catalog_changes``.

        Returns:
            True if the bus accepted the event.
        """
        event_id = str(event.event_id)

        logger.info(
            "Publishing integration event",
            event_id=event_id,
            event_type=event.event_type,
        )

        await self.event_log.mark_event_as_in_progress(event_id)
        await self.session.commit()

        try:
            await self.event_bus.publish(event)
        except Exception as e:
            logger.exception(
                "Error publishing integration event",
                event_id=event_id,
                event_type=event.event_type,
                error=str(e),
            )
            await self.event_log.mark_event_as_failed(event_id)
            await self.session.commit()
            return False

        await self.event_log.mark_event_as_published(event_id)
        await self.session.commit()
        return True

    async def publish_pending_events(self, transaction_id: str | None = None) -> int:
        """Publish every logged event that is not yet published.

        No retry or backoff is applied; callers that own redelivery
        invoke this as often as they need.

        Args:
            transaction_id: Restrict to entries written by this transaction.

        Returns:
            Number of events the bus accepted.
        """
        entries = await self.event_log.retrieve_event_logs_pending_to_publish(transaction_id)

        events = [event_from_dict(entry.content) for entry in entries]

        published = 0
        for event in events:
            if await self.publish_through_event_bus(event):
                published += 1

        logger.info(
            "Published pending integration events",
            pending=len(entries),
            published=published,
        )
        return published
