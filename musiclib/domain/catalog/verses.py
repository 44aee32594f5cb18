"""Split stored lyric text into verse lines."""

from __future__ import annotations

import re
from typing import List, Optional

# Lyrics imported from the lookup sometimes carry escaped line breaks
ESCAPED_NEWLINE = "\\n"
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def segment(raw_text: Optional[str]) -> List[str]:
    """Return the non-empty, trimmed lines of ``raw_text`` in order.

    Each physical line is one verse; blank lines are dropped rather than
    treated as stanza separators.
    """
    if not raw_text:
        return []
    text = raw_text.replace(ESCAPED_NEWLINE, "\n")
    verses = []
    for line in _LINE_BREAK.split(text):
        line = line.strip()
        if line:
            verses.append(line)
    return verses


__all__ = ["segment"]
