"""Request conventions shared by the hosted store's REST and storage APIs."""

from __future__ import annotations


def supabase_headers(anon_key: str) -> dict[str, str]:
    """Auth headers the hosted store expects on every request.

    Example:
        >>> supabase_headers("anon")
        {'apikey': 'anon', 'Authorization': 'Bearer anon'}
    """
    return {"apikey": anon_key, "Authorization": f"Bearer {anon_key}"}
