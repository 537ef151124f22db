from __future__ import annotations

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from aether.config import settings
from aether.utils.logging import get_logger

logger = get_logger(__name__)


def create_request_supabase_client(bearer_token: str | None = None) -> Client:
    """Create a request-scoped Supabase client using the anon key.

    If a JWT is provided, set it as the PostgREST bearer so that RLS policies
    restrict every table operation to the signed-in user's notes.
    """
    logger.debug("Creating request-scoped Supabase client")
    if not settings.cloud_enabled:
        raise RuntimeError("supabase_url and supabase_anon_key are required for the cloud vault")

    client = create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
    if bearer_token:
        client.postgrest.auth(bearer_token)
    return client
