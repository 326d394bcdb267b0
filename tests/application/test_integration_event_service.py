"""Tests for the integration event log and publishing service."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from catalog_api.application.integration_event_service import (
    CatalogIntegrationEventService,
    IntegrationEventLogService,
)
from catalog_api.domain.events import ProductPriceChangedIntegrationEvent
from catalog_api.infrastructure.event_bus import InMemoryEventBus
from catalog_api.infrastructure.models import EventState


def price_changed(product_id: int = 1) -> ProductPriceChangedIntegrationEvent:
    return ProductPriceChangedIntegrationEvent(
        product_id=product_id,
        new_price=Decimal("12.00"),
        old_price=Decimal("15.00"),
    )


class TestIntegrationEventLogService:
    """Tests for IntegrationEventLogService."""

    @pytest.mark.asyncio
    async def test_save_event(self, session: AsyncSession) -> None:
        """Should store the serialized event as not published."""
        log = IntegrationEventLogService(session)
        event = price_changed()

        entry = await log.save_event(event, "tx-1")

        assert entry.event_id == str(event.event_id)
        assert entry.event_type_name == "catalog.product_price_changed"
        assert entry.content == event.to_dict()
        assert entry.state == EventState.NOT_PUBLISHED.value
        assert entry.times_sent == 0
        assert entry.transaction_id == "tx-1"

    @pytest.mark.asyncio
    async def test_state_transitions(self, session: AsyncSession) -> None:
        """In-progress should count an attempt; published should not."""
        log = IntegrationEventLogService(session)
        event = price_changed()
        await log.save_event(event, "tx-1")
        event_id = str(event.event_id)

        await log.mark_event_as_in_progress(event_id)
        entry = await log.get(event_id)
        assert entry.state == EventState.IN_PROGRESS.value
        assert entry.times_sent == 1

        await log.mark_event_as_published(event_id)
        entry = await log.get(event_id)
        assert entry.state == EventState.PUBLISHED.value
        assert entry.times_sent == 1

    @pytest.mark.asyncio
    async def test_mark_unknown_event(self, session: AsyncSession) -> None:
        """Should raise when no entry exists."""
        log = IntegrationEventLogService(session)
        with pytest.raises(LookupError):
            await log.mark_event_as_failed("missing")

    @pytest.mark.asyncio
    async def test_pending_entries(self, session: AsyncSession) -> None:
        """Should return not-published and failed entries only."""
        log = IntegrationEventLogService(session)
        pending, failed, published = price_changed(1), price_changed(2), price_changed(3)
        await log.save_event(pending, "tx-a")
        await log.save_event(failed, "tx-b")
        await log.save_event(published, "tx-b")
        await log.mark_event_as_failed(str(failed.event_id))
        await log.mark_event_as_published(str(published.event_id))

        entries = await log.retrieve_event_logs_pending_to_publish()
        assert {e.event_id for e in entries} == {str(pending.event_id), str(failed.event_id)}

        entries = await log.retrieve_event_logs_pending_to_publish("tx-b")
        assert [e.event_id for e in entries] == [str(failed.event_id)]

    @pytest.mark.asyncio
    async def test_interrupted_delivery_becomes_pending(self, session: AsyncSession) -> None:
        """In-progress entries count as pending once they go stale."""
        log = IntegrationEventLogService(session, stale_after=300)
        fresh, interrupted = price_changed(1), price_changed(2)
        for event in (fresh, interrupted):
            await log.save_event(event, "tx-a")
            await log.mark_event_as_in_progress(str(event.event_id))

        entry = await log.get(str(interrupted.event_id))
        entry.last_sent_time = datetime.now(timezone.utc) - timedelta(hours=1)
        await session.flush()

        entries = await log.retrieve_event_logs_pending_to_publish()
        assert [e.event_id for e in entries] == [str(interrupted.event_id)]


class TestCatalogIntegrationEventService:
    """Tests for CatalogIntegrationEventService."""

    @pytest.mark.asyncio
    async def test_save_and_publish(
        self, session: AsyncSession, event_bus: InMemoryEventBus
    ) -> None:
        """Should commit the entry and mark it published after delivery."""
        service = CatalogIntegrationEventService(session, event_bus)
        event = price_changed()

        transaction_id = await service.save_event_and_catalog_changes(event)
        assert await service.publish_through_event_bus(event) is True

        entry = await service.event_log.get(str(event.event_id))
        assert entry.transaction_id == transaction_id
        assert entry.state == EventState.PUBLISHED.value
        assert event_bus.published == [event]

    @pytest.mark.asyncio
    async def test_publish_failure_is_recorded(
        self, session: AsyncSession, failing_event_bus
    ) -> None:
        """Should mark the entry failed and report False."""
        service = CatalogIntegrationEventService(session, failing_event_bus)
        event = price_changed()

        await service.save_event_and_catalog_changes(event)
        assert await service.publish_through_event_bus(event) is False

        entry = await service.event_log.get(str(event.event_id))
        assert entry.state == EventState.PUBLISH_FAILED.value
        assert entry.times_sent == 1

    @pytest.mark.asyncio
    async def test_publish_pending_redelivers_failed_events(
        self, session: AsyncSession, failing_event_bus, event_bus: InMemoryEventBus
    ) -> None:
        """Events that failed earlier should be delivered by a later pass."""
        failing = CatalogIntegrationEventService(session, failing_event_bus)
        event = price_changed(7)
        await failing.save_event_and_catalog_changes(event)
        await failing.publish_through_event_bus(event)

        service = CatalogIntegrationEventService(session, event_bus)
        published = await service.publish_pending_events()

        assert published == 1
        assert len(event_bus.published) == 1
        redelivered = event_bus.published[0]
        assert redelivered.event_id == event.event_id
        assert redelivered.product_id == 7
        assert redelivered.new_price == Decimal("12.00")

        entry = await service.event_log.get(str(event.event_id))
        assert entry.state == EventState.PUBLISHED.value
        assert entry.times_sent == 2

        assert await service.publish_pending_events() == 0

    @pytest.mark.asyncio
    async def test_publish_pending_redelivers_interrupted_events(
        self, session: AsyncSession, event_bus: InMemoryEventBus
    ) -> None:
        """An entry left in progress by a crashed publish should be sent again."""
        service = CatalogIntegrationEventService(session, event_bus)
        event = price_changed(9)
        await service.save_event_and_catalog_changes(event)
        await service.event_log.mark_event_as_in_progress(str(event.event_id))
        await session.commit()

        assert await service.publish_pending_events() == 0

        entry = await service.event_log.get(str(event.event_id))
        entry.last_sent_time = datetime.now(timezone.utc) - timedelta(hours=1)
        await session.commit()

        assert await service.publish_pending_events() == 1
        assert [e.event_id for e in event_bus.published] == [event.event_id]

        entry = await service.event_log.get(str(event.event_id))
        assert entry.state == EventState.PUBLISHED.value
        assert entry.times_sent == 2
