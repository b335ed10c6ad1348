from supabase import create_client, Client
from access_control.config import settings
from typing import Dict, Optional


class SupabaseClient:
    """Lazily created clients, one per key.

    The anon client serves authorization reads and session lookups. The
    service-role client bypasses RLS and is reserved for provisioning writes;
    it falls back to the anon client when no service-role key is configured.
    """

    _clients: Dict[str, Client] = {}

    @classmethod
    def _client_for(cls, key: str) -> Client:
        if key not in cls._clients:
            cls._clients[key] = create_client(settings.supabase_url, key)
        return cls._clients[key]

    @classmethod
    def get_client(cls) -> Client:
        return cls._client_for(settings.supabase_key)

    @classmethod
    def get_service_client(cls) -> Client:
        service_key: Optional[str] = settings.supabase_service_role_key
        return cls._client_for(service_key) if service_key else cls.get_client()

    @classmethod
    def reset_client(cls):
        cls._clients.clear()


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_supabase_service() -> Client:
    return SupabaseClient.get_service_client()
