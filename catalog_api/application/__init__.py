"""Application layer module.

Contains application services that orchestrate domain logic
and infrastructure.
"""

from catalog_api.application.integration_event_service import (
    CatalogIntegrationEventService,
    IntegrationEventLogService,
)

__all__ = [
    "CatalogIntegrationEventService",
    "IntegrationEventLogService",
]
