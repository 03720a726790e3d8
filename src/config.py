from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # Where parse-by-identifier looks up raw transcripts: "filesystem" or "supabase"
    transcript_source: str = "filesystem"

    # Transcripts archive (filesystem source)
    transcripts_dir: str = "transcripts"
    transcript_extensions: list[str] = [".txt"]

    # Supabase (stored interviews)
    supabase_url: str = ""
    supabase_key: str = ""
    interviews_table: str = "interviews"
    interviews_content_column: str = "content"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
