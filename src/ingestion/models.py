"""Data models for transcript parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Dialect(str, Enum):
    """Line-formatting conventions a raw transcript may use."""

    SPACED = "spaced"
    GLUED = "glued"
    LABELLED = "labelled"
    HEADERLESS = "headerless"
    JSON = "json"


@dataclass(frozen=True)
class Segment:
    """One recovered (speaker, timestamp, utterance) unit.

    ``timestamp`` is the clock reading exactly as it appeared in the source
    (``"3:30"``, ``"01:02:03"``); it is never converted to seconds.
    """

    speaker: str
    timestamp: str
    text: str


@dataclass(frozen=True)
class Transcript:
    """A parsed transcript. Built fresh on every parse call."""

    id: str
    title: str
    segments: list[Segment]
    raw_content: str
    headers: list[str] = field(default_factory=list)

    @property
    def speakers(self) -> list[str]:
        """Unique speaker labels in first-seen order."""
        seen: dict[str, None] = {}
        for seg in self.segments:
            if seg.speaker:
                seen.setdefault(seg.speaker)
        return list(seen)


@dataclass(frozen=True)
class NewSegment:
    """A line that opens a new segment."""

    speaker: str
    timestamp: str
    lead_text: str
    dialect: Dialect


@dataclass(frozen=True)
class Continuation:
    """A line that carries on the currently open segment."""

    text: str


LineMatch = NewSegment | Continuation
