from __future__ import annotations
import dataclasses
import re
from typing import Optional

from .message import Metadata

# an existing numeric reference, or one character outside [word . space].
# references already present are kept so sanitize(sanitize(s)) == sanitize(s)
_UNSAFE = re.compile(r"&#\d+;|[^\w. ]", re.ASCII)


def _escape(match: "re.Match[str]") -> str:
    text = match.group(0)
    if len(text) > 1:
        return text
    return f"&#{ord(text)};"


def sanitize(s: Optional[str]) -> Optional[str]:
    """
    Replace every character outside [A-Za-z0-9_. ] with its numeric HTML
    reference. Existing numeric references are kept, so the result is a
    fixed point: sanitize(sanitize(s)) == sanitize(s).
    """
    if s is None:
        return None
    return _UNSAFE.sub(_escape, s)


def sanitize_metadata(metadata: Metadata) -> Metadata:
    """Copy of `metadata` with its free-text fields sanitized. Keys and icon are untouched."""
    return dataclasses.replace(
        metadata,
        name=sanitize(metadata.name),
        description=sanitize(metadata.description),
        url=sanitize(metadata.url),
    )
