from functools import lru_cache
from typing import Callable

from fastapi import Depends

from backend.config import Settings, load_settings
from backend.services.backfill_service import BackfillJob
from backend.services.search_request_handler import SearchRequestHandler


@lru_cache
def get_settings() -> Settings:
    return load_settings()


@lru_cache
def _search_handler_for(settings: Settings) -> SearchRequestHandler:
    # One handler per settings so the search pipeline graph is compiled once
    return SearchRequestHandler(settings)


def get_search_handler(settings: Settings = Depends(get_settings)) -> SearchRequestHandler:
    return _search_handler_for(settings)


def get_backfill_job_factory(settings: Settings = Depends(get_settings)) -> Callable[[], BackfillJob]:
    """
    Return a factory rather than a job so credentials are only checked
    after the request method has been validated
    """
    return lambda: BackfillJob.from_settings(settings)
