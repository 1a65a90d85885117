"""
Centralized Supabase client initialization.

This module provides a single point of initialization for the Supabase client
using a singleton pattern to avoid duplicate client creation.
"""
from typing import Optional

from supabase import Client, create_client

from lingobot.settings import get_settings

# Global client instance
_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get or create the Supabase client instance.

    Returns:
        Client: The initialized Supabase client instance

    Raises:
        RuntimeError: If the Supabase credentials are not configured
    """
    global _supabase_client

    if _supabase_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_key:
            raise RuntimeError("supabaseUrl and supabaseKey environment variables must be set")
        _supabase_client = create_client(settings.supabase_url, settings.supabase_key)

    return _supabase_client
