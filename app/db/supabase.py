"""Supabase client construction and injection.

``create_supabase()`` builds the backend once at startup: a real Supabase
``Client`` when credentials are present, otherwise an explicit
``UnconfiguredSupabase`` whose every operation raises
``BackendNotConfiguredError``.  Handlers receive the client through
``Depends(get_supabase)``.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from fastapi import Request
from supabase import Client, create_client

from app.core.config import Settings, settings
from app.core.exceptions import BackendNotConfiguredError

logger = logging.getLogger(__name__)


class UnconfiguredSupabase:
    """Stand-in backend used when Supabase credentials are absent."""

    configured = False

    def _fail(self, *_: Any, **__: Any) -> Any:
        raise BackendNotConfiguredError(
            "Supabase is not configured (set SUPABASE_URL and SUPABASE_KEY)"
        )

    table = _fail
    rpc = _fail

    @property
    def storage(self) -> Any:
        return self._fail()


SupabaseBackend = Union[Client, UnconfiguredSupabase]


def create_supabase(config: Settings = settings) -> SupabaseBackend:
    """Build the backend client for *config*."""
    if not config.supabase_configured:
        logger.warning("supabase_not_configured")
        return UnconfiguredSupabase()
    client = create_client(config.SUPABASE_URL, config.SUPABASE_KEY)
    logger.info("supabase_client_initialized")
    return client


def get_supabase(request: Request) -> SupabaseBackend:
    """FastAPI dependency returning the client stored on ``app.state``."""
    client = getattr(request.app.state, "supabase", None)
    if client is None:
        client = create_supabase()
        request.app.state.supabase = client
    return client
