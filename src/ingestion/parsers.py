"""Transcript parsers: chat-style text dialects and structured JSON."""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any

from src.ingestion.dialects import is_metadata, match_line
from src.ingestion.models import Dialect, NewSegment, Segment, Transcript
from src.ingestion.titles import derive_title

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


@dataclass
class _OpenSegment:
    """Accumulator for the segment currently being assembled."""

    speaker: str
    timestamp: str
    dialect: Dialect
    lines: list[str] = field(default_factory=list)

    def close(self) -> Segment:
        return Segment(
            speaker=self.speaker,
            timestamp=self.timestamp,
            text="\n".join(self.lines).strip(),
        )


def parse_segments(content: str) -> list[Segment]:
    """Split raw chat-style transcript text into ordered segments.

    Single pass over the lines. A header line closes the open segment and
    opens a new one; any other line is appended to the open segment with a
    newline. Lines before the first header open a headerless segment with
    empty speaker and timestamp, so no text is lost. Blank lines are skipped.

    Args:
        content: Raw transcript text.

    Returns:
        Segments in source order. Empty only for blank input.
    """
    segments: list[Segment] = []
    current: _OpenSegment | None = None

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        result = match_line(line, current.dialect if current else None)
        if isinstance(result, NewSegment):
            if current is not None:
                segments.append(current.close())
            logger.debug(
                "New %s segment: speaker=%r timestamp=%r",
                result.dialect.value,
                result.speaker,
                result.timestamp,
            )
            current = _OpenSegment(
                speaker=result.speaker,
                timestamp=result.timestamp,
                dialect=result.dialect,
                lines=[result.lead_text] if result.lead_text else [],
            )
        elif current is None:
            current = _OpenSegment(speaker="", timestamp="", dialect=Dialect.HEADERLESS, lines=[result.text])
        else:
            current.lines.append(result.text)

    if current is not None:
        segments.append(current.close())

    return segments


def format_clock(seconds: float | int) -> str:
    """Render a number of seconds as ``m:ss`` or ``h:mm:ss``."""
    total = max(0, int(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def _first(item: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = item.get(key)
        if value not in (None, ""):
            return value
    return None


def _json_items(data: Any) -> tuple[list[Any], int]:
    """Return the segment array of a JSON transcript and its time scale."""
    if isinstance(data, list):
        return data, 1
    if not isinstance(data, dict):
        return [], 1
    if isinstance(data.get("utterances"), list):
        # AssemblyAI format — times in milliseconds
        return data["utterances"], 1000
    for key in ("segments", "transcript", "transcription"):
        if isinstance(data.get(key), list):
            return data[key], 1
    return [], 1


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number {name} in JSON transcript")


def _clock_from_number(value: int | float, scale: int) -> str:
    """Render a numeric JSON time; non-finite values have no clock reading."""
    if isinstance(value, int):
        return format_clock(value // scale)
    if not math.isfinite(value):
        return ""
    return format_clock(value / scale)


def parse_json_segments(content: str) -> list[Segment] | None:
    """Parse a structured JSON transcript, tolerating Markdown code fences.

    Supported shapes::

        [{"speaker": "...", "timestamp": "0:05", "text": "..."}]
        {"segments": [...]} / {"transcript": [...]}
        {"utterances": [{"speaker": "A", "text": "...", "start": ms}]}
        {"transcription": [{"speaker_id": "...", "text": "...", "start_time": s}]}

    Returns:
        Segments, or ``None`` when the content is not a usable JSON transcript.
    """
    cleaned = _FENCE_RE.sub("", content).strip()
    if not cleaned.startswith(("[", "{")):
        return None

    try:
        data = json.loads(cleaned, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        logger.debug("Content looks like JSON but does not parse: %s", exc)
        return None

    items, scale = _json_items(data)
    segments: list[Segment] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            continue
        text = _first(item, "text", "message", "content")
        if not isinstance(text, str) or not text.strip():
            continue

        speaker = _first(item, "speaker", "role", "speaker_id")
        timestamp = _first(item, "timestamp", "time", "start", "start_time")
        if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
            timestamp = _clock_from_number(timestamp, scale)

        segments.append(
            Segment(
                speaker=str(speaker) if speaker is not None else f"Speaker {index + 1}",
                timestamp=str(timestamp) if timestamp is not None else "",
                text=text.strip(),
            )
        )

    return segments or None


def parse_transcript(filename_or_id: str, raw_content: str, title: str | None = None) -> Transcript:
    """Parse raw transcript text into a :class:`Transcript`.

    JSON transcripts are recognised first; everything else goes through the
    chat-style line dialects. Never raises for malformed content.

    Args:
        filename_or_id: Caller-assigned identifier, usually the source filename.
        raw_content: Raw transcript text, kept verbatim on the result.
        title: Optional caller-supplied title; derived from the filename otherwise.

    Returns:
        A new :class:`Transcript`.
    """
    segments = parse_json_segments(raw_content)
    if segments is not None:
        logger.debug(
            "Parsed %d segments from %s transcript %r", len(segments), Dialect.JSON.value, filename_or_id
        )
    else:
        segments = parse_segments(raw_content)

    headers = [line.strip() for line in raw_content.splitlines() if is_metadata(line)]

    transcript = Transcript(
        id=filename_or_id,
        title=derive_title(filename_or_id, title),
        segments=segments,
        raw_content=raw_content,
        headers=headers,
    )
    _log_summary(transcript)
    return transcript


def _log_summary(transcript: Transcript) -> None:
    if not transcript.segments:
        return

    speakers = transcript.speakers
    if not speakers:
        logger.warning(
            "No speaker pattern detected in transcript %r; kept %d characters as a fallback segment",
            transcript.id,
            len(transcript.raw_content),
        )
    elif len(speakers) == 1 and len(transcript.segments) > 1:
        logger.warning(
            "All %d segments of transcript %r belong to a single speaker (%s)",
            len(transcript.segments),
            transcript.id,
            speakers[0],
        )
    else:
        logger.info(
            "Parsed transcript %r: %d segments, %d speakers",
            transcript.id,
            len(transcript.segments),
            len(speakers),
        )


def format_segments(segments: list[Segment]) -> str:
    """Render segments back to chat-style text, one block per segment."""
    blocks: list[str] = []
    for seg in segments:
        if seg.speaker and seg.timestamp:
            header = f"{seg.speaker} {seg.timestamp}:"
        elif seg.speaker:
            header = f"{seg.speaker}:"
        else:
            blocks.append(seg.text)
            continue
        blocks.append(f"{header} {seg.text}".rstrip())
    return "\n\n".join(blocks)
