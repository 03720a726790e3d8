"""Supabase storage helpers for stored interview transcripts."""

from __future__ import annotations

from supabase import Client, create_client

from src.config import settings


def get_supabase_client(url: str | None = None, key: str | None = None) -> Client:
    """Create and return a Supabase client (settings are used for missing values)."""
    return create_client(
        url or settings.supabase_url,
        key or settings.supabase_key,
    )


def fetch_interview_content(
    client: Client,
    interview_id: str,
    table: str = "interviews",
    content_column: str = "content",
) -> str | None:
    """Return the raw transcript stored for an interview, or None if there is no such row."""
    result = client.table(table).select(content_column).eq("id", interview_id).execute()
    if not result.data:
        return None
    return str(result.data[0].get(content_column) or "")
