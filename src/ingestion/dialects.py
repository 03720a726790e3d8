"""Line classification for chat-style transcripts.

Each physical line is either the start of a new segment (speaker label plus a
clock reading, or a short ``Name:`` label) or a continuation of the segment
that is currently open. Matchers are tried in a fixed order:

1. Metadata guard: recording dates, durations and bare clock readings never
   open a segment.
2. ``spaced``: ``Alice 3:30 hello`` / ``Lenny (00:00:36): hello``. Whitespace,
   a colon, a comma or a dash (or the end of the line) must follow the
   timestamp.
3. ``glued``: ``나리 3:30예.네 감사합니다.`` The utterance starts right after
   the timestamp digits.
4. ``labelled``: ``Speaker 1: hello`` without a timestamp. Only tried while no
   timed segment is open.

The spaced matcher runs first so that delimiters after the timestamp
(``3:30 - hi``, ``3:30: hi``) are consumed instead of leaking into the
utterance. When both would match, the spaced split wins.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from src.ingestion.models import Continuation, Dialect, LineMatch, NewSegment

_CLOCK = r"\d{1,2}:\d{2}(?::\d{2})?"

# Speaker: must not start with a digit and must not contain a colon or a clock
# reading, so the first clock on the line is always the timestamp. It ends on a
# non-space character so that whitespace runs belong to the separator alone.
_SPEAKER = r"(?P<speaker>[^\d\s:](?:(?:(?!\d{1,2}:\d{2})[^:])*?(?!\d{1,2}:\d{2})[^\s:])?)"

# Between speaker and timestamp: whitespace, a colon or a comma, optionally
# followed by an opening bracket; or an opening bracket on its own.
_SEPARATOR = r"(?:(?:\s+|[:,]\s*)[(\[]?|\s*[(\[])"

_SPACED_RE = re.compile(
    rf"^{_SPEAKER}{_SEPARATOR}(?P<timestamp>{_CLOCK})[)\]]?(?:\s*[:,\-](?!\d)\s*|\s+|$)(?P<text>.*)$"
)

_GLUED_RE = re.compile(rf"^{_SPEAKER}{_SEPARATOR}(?P<timestamp>{_CLOCK})[)\]]?(?P<text>.*)$")

# Labels longer than this are more likely a sentence containing a colon.
MAX_LABEL_LENGTH = 20

_LABELLED_RE = re.compile(r"^(?P<speaker>[^\d\s:][^:]*):(?:\s+(?P<text>.*)|$)")

_METADATA_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\d{4}년"),  # 2026년 1월 15일
    re.compile(r"^\d{2}\.\d{2}\.\d{2}"),  # 24.01.15
    re.compile(r"^\d+분 \d+초"),  # 31분 43초
    re.compile(r"^\d+시간"),  # 1시간 2분
    re.compile(rf"^{_CLOCK}$"),
    re.compile(r"^녹음녹화"),
    re.compile(r"^recording", re.IGNORECASE),
)

_ROLE_LABEL_RE = re.compile(r"^(화자|참여자|인터뷰어|면접관|응답자|질문자)\s*(\d+)$")


def is_metadata(line: str) -> bool:
    """Return True for recording metadata lines (dates, durations, labels)."""
    stripped = line.strip()
    return any(p.match(stripped) for p in _METADATA_PATTERNS)


def normalize_speaker(raw: str) -> str:
    """Clean a captured speaker label.

    Trailing delimiters are removed and numbered Korean role labels are
    collapsed (``화자 1`` -> ``화자1``).
    """
    speaker = raw.strip().rstrip(":,([").strip()
    role = _ROLE_LABEL_RE.match(speaker)
    if role:
        return role.group(1) + role.group(2)
    return speaker


def _new_segment(match: re.Match[str], dialect: Dialect) -> NewSegment | None:
    speaker = normalize_speaker(match.group("speaker"))
    if not speaker:
        return None
    timestamp = match.groupdict().get("timestamp") or ""
    text = (match.group("text") or "").strip()
    return NewSegment(speaker=speaker, timestamp=timestamp, lead_text=text, dialect=dialect)


def match_spaced(line: str) -> NewSegment | None:
    """Match ``SPEAKER TIMESTAMP UTTERANCE`` with a delimiter after the timestamp."""
    match = _SPACED_RE.match(line.strip())
    return _new_segment(match, Dialect.SPACED) if match else None


def match_glued(line: str) -> NewSegment | None:
    """Match ``SPEAKER TIMESTAMPUTTERANCE`` where no whitespace follows the timestamp."""
    match = _GLUED_RE.match(line.strip())
    return _new_segment(match, Dialect.GLUED) if match else None


def match_labelled(line: str) -> NewSegment | None:
    """Match a short ``Name: utterance`` label without a timestamp."""
    match = _LABELLED_RE.match(line.strip())
    if not match or len(match.group("speaker").strip()) >= MAX_LABEL_LENGTH:
        return None
    return _new_segment(match, Dialect.LABELLED)


# Order matters: the first matcher that accepts a line decides the split.
TIMED_MATCHERS: tuple[Callable[[str], NewSegment | None], ...] = (match_spaced, match_glued)

# Open-segment dialects under which an untimed ``Name:`` label may start a turn.
_LABEL_FRIENDLY: frozenset[Dialect | None] = frozenset({None, Dialect.LABELLED, Dialect.HEADERLESS})


def match_line(line: str, open_dialect: Dialect | None = None) -> LineMatch:
    """Classify one physical line.

    Args:
        line: A single line of transcript text.
        open_dialect: Dialect of the currently open segment, or ``None`` when
            no segment has been opened yet.

    Returns:
        :class:`NewSegment` when the line starts a speaker turn, otherwise
        :class:`Continuation` carrying the stripped line.
    """
    stripped = line.strip()
    if is_metadata(stripped):
        return Continuation(text=stripped)

    for matcher in TIMED_MATCHERS:
        result = matcher(stripped)
        if result is not None:
            return result

    if open_dialect in _LABEL_FRIENDLY:
        labelled = match_labelled(stripped)
        if labelled is not None:
            return labelled

    return Continuation(text=stripped)
