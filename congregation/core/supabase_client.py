from supabase import Client, create_client

from congregation.core.config import Settings


def create_supabase_client(settings: Settings) -> Client:
    """
    Build a new client. Each browser session needs its own: the client
    holds the signed-in session, so sharing one would share the login.
    """
    return create_client(settings.supabase_url, settings.supabase_anon_key)
