# Data sources for the orchestrator: mock (canned data) or remote (backend API)

import logging
from typing import Optional

from config.settings import settings

from .base import DataSource
from .mock import MockDataSource
from .remote import RemoteDataSource
from ..storage import LocalStorage, get_local_storage

logger = logging.getLogger(__name__)

__all__ = ["DataSource", "MockDataSource", "RemoteDataSource", "create_data_source"]


def create_data_source(storage: Optional[LocalStorage] = None) -> DataSource:
    """
    Build the data source selected by configuration.

    MockDataSource when settings.mock_mode is on (explicit MOCK_API, or any
    APP_ENV other than production), otherwise RemoteDataSource pointed at
    API_BASE_URL.
    """
    storage = storage or get_local_storage()
    if settings.mock_mode:
        logger.info("Using mock data source")
        return MockDataSource(
            storage=storage,
            latency_scale=settings.mock_latency_scale,
            seed=settings.mock_seed,
        )

    logger.info(f"Using remote data source at {settings.api_base_url}")
    return RemoteDataSource(
        base_url=settings.api_base_url,
        storage=storage,
        timeout=settings.request_timeout,
    )
