"""SWOT query construction and best-effort parsing of SWOT Markdown."""

import re
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Sequence
from consultant_hub.errors import ValidationError
from consultant_hub.utils.text_utils import clean_names

MIN_MANUAL_COMPETITORS = 3

# Header tokens per category, English and German
SWOT_HEADER_TOKENS = {
    "strengths": ("strengths", "stärken", "staerken"),
    "weaknesses": ("weaknesses", "schwächen", "schwaechen"),
    "opportunities": ("opportunities", "chancen"),
    "threats": ("threats", "risiken"),
}

_TOKEN_TO_CATEGORY = {
    token: category
    for category, tokens in SWOT_HEADER_TOKENS.items()
    for token in tokens
}

# Text after a category header is an inline item only when set off by a colon
_HEADER_RE = re.compile(
    r"^\s*(?:#{1,6}\s*)?(?:\*\*|__)?\s*"
    r"(" + "|".join(sorted(_TOKEN_TO_CATEGORY, key=len, reverse=True)) + r")\b"
    r"\s*(?:\([^)]*\))?\s*(?:\*\*|__)?\s*(?::\s*(?:\*\*|__)?\s*(.*?))?\s*$",
    re.IGNORECASE,
)
_HEADING_RE = re.compile(r"^\s*#{1,6}\s")
_BULLET_RE = re.compile(r"^\s*(?:[-*•+]|\d+[.)])\s+")
_BARE_MARKERS = ("-", "*", "•", "+")
_RULE_RE = re.compile(r"^\s*(?:-{3,}|\*{3,}|_{3,})\s*$")


@dataclass
class SwotSections:
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    opportunities: List[str] = field(default_factory=list)
    threats: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.strengths or self.weaknesses or self.opportunities or self.threats)

    def to_dict(self) -> Dict[str, List[str]]:
        return asdict(self)


def _clean_item(line: str) -> Optional[str]:
    """Strip bullet markers and emphasis; None for lines that carry no item."""
    if not line.strip() or _RULE_RE.match(line) or _HEADING_RE.match(line):
        return None
    stripped = line.strip()
    if stripped.startswith("|") or stripped in _BARE_MARKERS:
        return None
    stripped = _BULLET_RE.sub("", stripped, count=1).strip()
    if stripped.startswith("**") and stripped.endswith("**") and len(stripped) > 4:
        stripped = stripped[2:-2].strip()
    return stripped or None


def parse_swot(markdown_text: Optional[str]) -> Optional[SwotSections]:
    """
    Extract the four SWOT categories from free-text or Markdown.

    A category region starts at a line naming the category (English or
    German, as a heading, bold label or "Label:" line) and runs until the
    next category line or the next Markdown heading. Items from repeated
    regions (one per company) are concatenated.

    This is a heuristic: headers quoted inside content will mis-split.

    Args:
        markdown_text: Completion output

    Returns:
        SwotSections, or None when no category has any item (callers then
        render the raw Markdown)
    """
    if not markdown_text:
        return None

    sections = SwotSections()
    current: Optional[List[str]] = None

    for line in markdown_text.splitlines():
        header = _HEADER_RE.match(line)
        if header:
            category = _TOKEN_TO_CATEGORY[header.group(1).lower()]
            current = getattr(sections, category)
            inline = _clean_item(header.group(2) or "")
            if inline:
                current.append(inline)
            continue

        if _HEADING_RE.match(line):
            current = None
            continue

        if current is None:
            continue
        item = _clean_item(line)
        if item:
            current.append(item)

    return None if sections.is_empty else sections


def build_swot_query(
    mode: str,
    industry: Optional[str] = None,
    competitors: Optional[Sequence[str]] = None
) -> str:
    """
    Build the research query for a SWOT run.

    Args:
        mode: "auto" (model picks the top 5 competitors of ``industry``) or
            "manual" (explicit ``competitors``)
        industry: Industry or market segment, required in auto mode
        competitors: Company names, at least three non-blank in manual mode

    Returns:
        Query text for the research tool

    Raises:
        ValidationError: unknown mode or missing inputs for the mode
    """
    if mode == "auto":
        if not industry or not industry.strip():
            raise ValidationError(
                "Please enter an industry for automatic competitor generation",
                details={"industry": "required"}
            )
        return (
            "Generate a comprehensive SWOT analysis and market gap identification "
            f"for the top 5 competitors in the {industry.strip()} industry."
        )

    if mode == "manual":
        filled = clean_names(competitors)
        if not filled:
            raise ValidationError("Please enter at least one competitor", details={"competitors": "required"})
        if len(filled) < MIN_MANUAL_COMPETITORS:
            raise ValidationError(
                f"Please enter at least {MIN_MANUAL_COMPETITORS} competitors for meaningful analysis",
                details={"competitors": "too few"}
            )
        return (
            "Generate a comprehensive SWOT analysis and market gap identification "
            f"for these companies: {', '.join(filled)}. "
            "Compare them side by side and identify market gaps."
        )

    raise ValidationError(f"Unknown SWOT mode: {mode}", details={"mode": "must be auto or manual"})
