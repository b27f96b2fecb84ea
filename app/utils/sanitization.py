import html
import re
from typing import Any, Optional

TAG_PATTERN = re.compile(r"<[^>]*>")
CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]+")


def sanitize_string(value: Any) -> Optional[str]:
    """
    Escape HTML special characters to prevent markup injection.
    Returns None if input is None; non-strings are converted first.
    """
    if value is None:
        return None
    return html.escape(str(value), quote=True)


def sanitize_multiline(value: Any) -> str:
    """Escape a free-text value and keep its line breaks as <br>"""
    if value is None:
        return ""
    escaped = html.escape(str(value), quote=True)
    return escaped.replace("\r\n", "\n").replace("\n", "<br>")


def strip_tags(markup: Optional[str]) -> str:
    """Remove HTML tags and collapse whitespace, for plain-text previews"""
    if not markup:
        return ""
    text = TAG_PATTERN.sub(" ", markup)
    return re.sub(r"\s+", " ", html.unescape(text)).strip()


def header_safe(value: Any) -> str:
    """Single-line form of a value for mail headers; control characters become spaces"""
    if value is None:
        return ""
    text = CONTROL_CHARS.sub(" ", str(value))
    return re.sub(r" {2,}", " ", text).strip()
