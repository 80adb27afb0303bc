from supabase import AsyncClient, acreate_client

from ..config import SupabaseConfig
from .developers import DeveloperStore

_client: AsyncClient | None = None


async def get_supabase(config: SupabaseConfig) -> AsyncClient:
    global _client
    if _client is None:
        _client = await acreate_client(config.url, config.secret_key)
    return _client


__all__ = ["DeveloperStore", "get_supabase"]
