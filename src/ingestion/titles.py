"""Title derivation for uploaded or archived transcripts."""

from __future__ import annotations

from urllib.parse import unquote

DEFAULT_TITLE = "Untitled"

# Extensions of files the document extraction step turns into plain text.
KNOWN_EXTENSIONS = (".txt", ".docx", ".pdf")


def derive_title(filename_or_id: str, title: str | None = None) -> str:
    """Derive a human-readable title from a filename or caller-supplied title.

    URL escaping is decoded and a known extension is stripped, so
    ``"Interview%20With%20User.txt"`` becomes ``"Interview With User"``.
    Always returns a non-empty string.
    """
    candidate = title if title and title.strip() else filename_or_id or ""
    name = unquote(candidate).strip()

    lowered = name.lower()
    for ext in KNOWN_EXTENSIONS:
        if lowered.endswith(ext):
            name = name[: -len(ext)].strip()
            break

    return name or DEFAULT_TITLE
