"""Supabase client singleton for database operations."""

from functools import lru_cache
from typing import Any

from supabase import Client, create_client

from src.core.config import Settings, get_settings


@lru_cache
def get_supabase_client() -> Client:
    """Get cached Supabase client singleton for database operations.

    Uses the secret key for backend operations, which bypasses RLS at the
    PostgREST level. Ownership checks happen in the profile service before
    any write reaches this client.

    Returns:
        Client: Supabase client instance.
    """
    settings = get_settings()
    return create_client(
        settings.supabase_url,
        settings.supabase_secret_key,
    )


async def check_database_connection(settings: Settings | None = None) -> dict[str, Any]:
    """Check if database connection is healthy.

    Performs a one-row select on the profiles table.

    Returns:
        dict: Connection status with 'healthy' boolean and optional 'error' message.
    """
    settings = settings or get_settings()
    try:
        client = get_supabase_client()
        client.table(settings.profiles_table).select("id").limit(1).execute()
        return {"healthy": True}
    except Exception as e:
        return {"healthy": False, "error": str(e)}
