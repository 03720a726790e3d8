"""Source configuration: backend enum and SourceConfig dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from src.config import Settings, get_settings


class SourceBackend(str, Enum):
    """Where raw transcripts are looked up by identifier."""

    FILESYSTEM = "filesystem"
    SUPABASE = "supabase"


@dataclass(frozen=True)
class SourceConfig:
    """Immutable configuration for transcript lookup.

    Passed explicitly to :func:`src.ingestion.sources.get_transcript_source`
    so the parsing code never reads global settings.
    """

    backend: SourceBackend = SourceBackend.FILESYSTEM
    transcripts_dir: Path = Path("transcripts")
    extensions: tuple[str, ...] = (".txt",)
    supabase_url: str = ""
    supabase_key: str = ""
    interviews_table: str = "interviews"
    content_column: str = "content"

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> SourceConfig:
        """Build a config from application settings (cached settings by default)."""
        s = settings or get_settings()
        return cls(
            backend=SourceBackend(s.transcript_source),
            transcripts_dir=Path(s.transcripts_dir),
            extensions=tuple(s.transcript_extensions),
            supabase_url=s.supabase_url,
            supabase_key=s.supabase_key,
            interviews_table=s.interviews_table,
            content_column=s.interviews_content_column,
        )
