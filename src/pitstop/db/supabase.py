"""Supabase client shared by the account stores."""

import logging
from functools import lru_cache
from typing import Optional

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Optional[Client]:
    """Return the cached client, or None when credentials are missing or rejected.

    No query is issued here; network failures surface on first use.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase credentials not configured (PITSTOP_SUPABASE_URL / PITSTOP_SUPABASE_KEY)")
        return None

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client for {settings.supabase_url}: {e}")
        return None
    logger.info(f"Supabase client created for {settings.supabase_url}")
    return client
