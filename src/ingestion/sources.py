"""Transcript sources: resolve an identifier to raw content, then parse it."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol
from urllib.parse import unquote

from src.ingestion.models import Transcript
from src.ingestion.parsers import parse_transcript
from src.ingestion.storage import fetch_interview_content, get_supabase_client
from src.pipeline_config import SourceBackend, SourceConfig

if TYPE_CHECKING:
    from supabase import Client

logger = logging.getLogger(__name__)


class TranscriptSource(Protocol):
    """Anything that can look up raw transcript text by identifier."""

    def read(self, identifier: str) -> str | None:
        """Return the raw content, or None when the identifier is unknown."""
        ...


class FileSystemTranscriptSource:
    """Transcripts archive directory of plain-text files."""

    def __init__(self, root: Path | str, extensions: tuple[str, ...] = (".txt",)) -> None:
        self.root = Path(root)
        self.extensions = tuple(ext.lower() for ext in extensions)

    def list_identifiers(self) -> list[str]:
        """List transcript file names in the archive, sorted."""
        try:
            entries = list(self.root.iterdir())
        except (FileNotFoundError, NotADirectoryError) as exc:
            logger.warning("Transcripts directory %s is not available: %s", self.root, exc)
            return []
        return sorted(p.name for p in entries if p.is_file() and p.suffix.lower() in self.extensions)

    def _resolve(self, identifier: str) -> Path | None:
        root = self.root.resolve()
        for candidate in dict.fromkeys((identifier, unquote(identifier))):
            path = (root / candidate).resolve()
            if not path.is_relative_to(root):
                logger.warning("Refusing transcript path outside %s: %r", root, identifier)
                return None
            if path.is_file():
                return path
        return None

    def read(self, identifier: str) -> str | None:
        if not identifier:
            return None
        path = self._resolve(identifier)
        if path is None:
            return None
        return path.read_text(encoding="utf-8", errors="replace")


class SupabaseTranscriptSource:
    """Interview transcripts stored in a Supabase table."""

    def __init__(
        self,
        client: Client,
        table: str = "interviews",
        content_column: str = "content",
    ) -> None:
        self.client = client
        self.table = table
        self.content_column = content_column

    def read(self, identifier: str) -> str | None:
        if not identifier:
            return None
        return fetch_interview_content(self.client, identifier, self.table, self.content_column)


def get_transcript_source(config: SourceConfig | None = None) -> TranscriptSource:
    """Build the transcript source described by *config* (settings by default)."""
    config = config or SourceConfig.from_settings()

    if config.backend is SourceBackend.SUPABASE:
        client = get_supabase_client(config.supabase_url, config.supabase_key)
        return SupabaseTranscriptSource(client, config.interviews_table, config.content_column)

    return FileSystemTranscriptSource(config.transcripts_dir, config.extensions)


def parse_from_source(identifier: str, source: TranscriptSource | None = None) -> Transcript | None:
    """Resolve *identifier* to raw content and parse it.

    Args:
        identifier: File name or record ID understood by the source.
        source: Where to look; the configured source by default.

    Returns:
        The parsed transcript, or ``None`` if the source has no such entry.
        Failures of the source itself (I/O, network) propagate.
    """
    source = source or get_transcript_source()
    raw_content = source.read(identifier)
    if raw_content is None:
        logger.info("Transcript %r not found", identifier)
        return None
    return parse_transcript(identifier, raw_content)
