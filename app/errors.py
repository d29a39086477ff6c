"""Exception taxonomy for the catalog data-access layer."""


class CatalogError(Exception):
    """Base class for catalog errors."""


class StoreUnavailable(CatalogError):
    """The document store could not be reached or rejected the request."""


class WebsiteNotFound(CatalogError):
    """No record exists for the requested id."""

    def __init__(self, website_id: str):
        super().__init__(f"Website not found: {website_id}")
        self.website_id = website_id


class WebsiteLookupFailed(CatalogError):
    """A detail lookup failed for a reason other than a missing record."""


class InvalidCursor(CatalogError, ValueError):
    """A page cursor is malformed or belongs to a different sort/filter."""
