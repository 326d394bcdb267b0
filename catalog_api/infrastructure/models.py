"""SQLAlchemy models for infrastructure tables.

Provides the ORM model for the integration event log (transactional outbox).
"""

from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.dialects.postgresql import JSONB

from catalog_api.infrastructure.database import Base


class EventState(str, Enum):
    """Publication state of a logged integration event."""

    NOT_PUBLISHED = "not_published"
    IN_PROGRESS = "in_progress"
    PUBLISHED = "published"
    PUBLISH_FAILED = "publish_failed"


# ============================================================================
# Event Log Models
# ============================================================================


class IntegrationEventLogEntry(Base):
    """Integration event log model.

    Each row is written in the same transaction as the catalog change
    that raised the event, and then tracks publication to the bus.
    """

    __tablename__ = "integration_event_log"

    event_id = Column(String(36), primary_key=True)
    event_type_name = Column(String(200), nullable=False, index=True)
    content = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    state = Column(
        String(20),
        nullable=False,
        default=EventState.NOT_PUBLISHED.value,
        index=True,
    )
    times_sent = Column(Integer, nullable=False, default=0)
    creation_time = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    transaction_id = Column(String(36), nullable=True, index=True)
    # Set when a delivery attempt starts
    last_sent_time = Column(DateTime(timezone=True), nullable=True)
