from postgrest import AsyncPostgrestClient
from .settings import Settings, get_settings
from talentmatch.exceptions import ConfigurationError

def get_supabase_client(settings: Settings = None) -> AsyncPostgrestClient:
    """Get a configured PostgREST client for the Supabase project.
    Uses the service role key if available, otherwise falls back to the anon key.
    """
    settings = settings or get_settings()

    if not settings.supabase_url or not (settings.supabase_service_role_key or settings.supabase_key):
        raise ConfigurationError("Missing required Supabase configuration. Check SUPABASE_URL and SUPABASE_KEY environment variables.")

    api_key = settings.supabase_service_role_key or settings.supabase_key

    return AsyncPostgrestClient(
        base_url=f"{settings.supabase_url}/rest/v1",
        headers={
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}"
        },
        timeout=settings.request_timeout_seconds
    )
