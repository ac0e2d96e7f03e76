"""Exceptions raised by the orchestrator and its data sources."""
from typing import Optional


class OrchestratorError(Exception):
    """Base class for orchestrator failures."""
    pass


class DataSourceError(OrchestratorError):
    """Raised when a data source call fails (transport error or bad status)."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ResourceNotFoundError(DataSourceError):
    """Raised when the backend answers 404."""
    pass
