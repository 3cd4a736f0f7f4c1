"""Text helpers shared by prompt construction and record validation."""

from typing import Iterable, List, Optional

TRUNCATION_MARKER = "... [truncated]"


def truncate_text(text: Optional[str], budget: int, marker: str = TRUNCATION_MARKER) -> str:
    """
    Cut text to at most ``budget`` characters, appending ``marker`` when cut.

    The returned string is never longer than ``budget + len(marker)``.
    """
    if not text:
        return ""
    if len(text) <= budget:
        return text
    return text[:budget] + marker


def clean_names(names: Optional[Iterable[str]]) -> List[str]:
    """Strip names, drop blanks and duplicates while keeping first-seen order."""
    if not names:
        return []

    seen = set()
    cleaned = []
    for name in names:
        if name is None:
            continue
        stripped = str(name).strip()
        if stripped and stripped.lower() not in seen:
            seen.add(stripped.lower())
            cleaned.append(stripped)
    return cleaned


def format_names(names: Optional[Iterable[str]], default: str = "Not specified") -> str:
    """Join names into a comma-separated display string."""
    cleaned = clean_names(names)
    return ", ".join(cleaned) if cleaned else default
