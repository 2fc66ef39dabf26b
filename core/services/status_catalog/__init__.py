from core.services.status_catalog.catalog import StatusCatalog
from core.services.status_catalog.service import DEFAULT_STATUSES, StatusCatalogService

__all__ = ["StatusCatalog", "StatusCatalogService", "DEFAULT_STATUSES"]
