# app/services/errors.py - error taxonomy for the dashboard operations
from typing import Optional


class GatewayError(Exception):
    """Any failed call against the data gateway (tables, storage, auth)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class DashboardError(Exception):
    """Base for failures that end up in the status notification."""

    title = "Operation Failed"

    def __init__(self, message: str, title: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if title:
            self.title = title


class ValidationError(DashboardError):
    title = "Invalid Listing"


class UploadError(DashboardError):
    pass


class PersistenceError(DashboardError):
    pass


class FetchError(DashboardError):
    title = "Inventory Unavailable"
