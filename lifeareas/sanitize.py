"""HTML sanitization boundary.

User text is untrusted. Anything handed to a rendering surface goes
through ``sanitize_text`` first.
"""

from __future__ import annotations

from markupsafe import escape


def sanitize_text(text: str | None) -> str:
    """Escape HTML-unsafe characters (& < > " ')."""
    if not text:
        return ""
    return str(escape(text))


def sanitize_multiline(text: str | None) -> str:
    """Escape text and turn newlines into <br> for card bodies."""
    return sanitize_text(text).replace("\n", "<br>")
