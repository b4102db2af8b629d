from application.catalog.catalog_service import CatalogService

__all__ = ["CatalogService"]
