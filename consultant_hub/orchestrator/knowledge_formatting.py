"""Formatting of stored project records into prompt context sections."""

from typing import Iterable, List, Optional
from consultant_hub.utils.date_utils import format_date_display
from consultant_hub.utils.text_utils import format_names, truncate_text

SECTION_MEETINGS = "Meetings"
SECTION_MEETING_ANALYSES = "Meeting Analyses"
SECTION_PREVIOUS_RESEARCH = "Previous Research"
SECTION_MARKET_ANALYSES = "Market Analyses"
SECTION_SWOT_ANALYSES = "SWOT Analyses"


def format_section(title: str, entries: Iterable[str]) -> str:
    """
    Render a labeled section, or an empty string when there are no entries.

    Args:
        title: Section name, rendered as an upper-case header
        entries: Pre-formatted entry blocks

    Returns:
        Section text ending with a blank line, or "" for no entries
    """
    entries = [entry for entry in entries if entry]
    if not entries:
        return ""
    return f"=== {title.upper()} ===\n" + "\n\n".join(entries) + "\n"


def format_meeting(meeting, transcript_budget: int) -> str:
    lines = [
        f"- Meeting: {meeting.topic} ({format_date_display(meeting.date)})",
        f"  Attendees: {format_names(meeting.attendees)}",
    ]
    if meeting.transcript:
        lines.append(f"  Transcript: {truncate_text(meeting.transcript, transcript_budget)}")
    return "\n".join(lines)


def format_meeting_analysis(analysis, result_budget: int) -> str:
    return (
        f"- Meeting analysis ({format_date_display(analysis.created_at)}):\n"
        f"{truncate_text(analysis.analysis, result_budget)}"
    )


def format_research_result(result, result_budget: int, label: str = "Research") -> str:
    return (
        f"- {label} ({format_date_display(result.created_at)}) - Query: {result.query}\n"
        f"  Result: {truncate_text(result.result, result_budget)}"
    )


def format_swot_analysis(analysis, result_budget: int) -> str:
    subject = analysis.industry or format_names(analysis.competitors, default="unspecified companies")
    return (
        f"- SWOT ({format_date_display(analysis.created_at)}, mode: {analysis.analysis_mode}) - {subject}\n"
        f"  Result: {truncate_text(analysis.result, result_budget)}"
    )


def format_project_header(project_name: Optional[str], client_company: Optional[str] = None) -> str:
    """Header line naming the project the knowledge belongs to."""
    if not project_name:
        return ""
    header = f"PROJECT KNOWLEDGE BASE: {project_name}"
    if client_company:
        header += f" (Client: {client_company})"
    return header + "\n"


def join_sections(header: str, sections: List[str]) -> str:
    """Concatenate non-empty sections under the header."""
    body = "\n".join(section for section in sections if section)
    if not body:
        return header + "No stored project knowledge is available yet.\n" if header else ""
    return f"{header}\n{body}" if header else body
