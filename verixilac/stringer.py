"""Text helpers for Telegram markdown output."""

from __future__ import annotations

_MARKDOWN_SPECIALS = frozenset("_*[")

_MARKDOWN_V2_TABLE = str.maketrans(
    {ch: "\\" + ch for ch in "\\_*[]()~`>#+-=|{}.!"}
)


def capitalize(s: str) -> str:
    """Upper-case the first character of ``s`` and leave the rest alone."""
    if not s:
        return s
    return s[0].upper() + s[1:]


def escape_markdown(text: str) -> str:
    """Escape text for legacy Telegram markdown.

    Special characters are prefixed with a backslash, every other character
    gets a backslash inserted before it, and one trailing backslash is added.
    """
    parts = []
    for ch in text:
        parts.append("\\" + ch)
    parts.append("\\")
    return "".join(parts)


def escape_markdown_v2(text: str) -> str:
    """Escape every character reserved by Telegram's MarkdownV2."""
    return text.translate(_MARKDOWN_V2_TABLE)