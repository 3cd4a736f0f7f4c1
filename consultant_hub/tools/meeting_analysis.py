"""Action-item extraction from meeting transcripts."""

import re
from typing import Dict, List, Optional
from consultant_hub.errors import ValidationError
from consultant_hub.llm.gateway_client import CompletionGateway
from consultant_hub.llm.prompts import MEETING_ANALYSIS_PROMPT
from consultant_hub.records.repo import RecordRepository
from consultant_hub.records.schemas import MeetingAnalysisCreate
from consultant_hub.utils.logging_utils import StructuredLogger

NO_ANALYSIS_TEXT = "No analysis generated."
ACTION_ITEM_COLUMNS = ("Task", "Owner", "Deadline", "Context")

_SEPARATOR_CELL_RE = re.compile(r"^:?-{3,}:?$")

logger = StructuredLogger("consultant_hub.meeting_analysis")


def _split_row(line: str) -> List[str]:
    cells = line.strip().strip("|").split("|")
    return [cell.strip() for cell in cells]


def parse_action_items(table_markdown: Optional[str]) -> List[Dict[str, str]]:
    """
    Parse the Markdown action-item table into row dictionaries.

    The first table row is the header; the ``|---|`` separator row is skipped.
    Lines outside the table (including code fences) are ignored.

    Args:
        table_markdown: Completion output

    Returns:
        One dict per data row keyed by header name; [] when no table is found
    """
    if not table_markdown:
        return []

    header: Optional[List[str]] = None
    rows: List[Dict[str, str]] = []
    for line in table_markdown.splitlines():
        if not line.strip().startswith("|"):
            continue
        cells = _split_row(line)
        if header is None:
            header = cells
            continue
        if all(_SEPARATOR_CELL_RE.match(cell) for cell in cells if cell):
            continue
        padded = cells + [""] * (len(header) - len(cells))
        rows.append(dict(zip(header, padded)))
    return rows


class MeetingAnalysisTool:
    """Tool for turning a transcript into a Task / Owner / Deadline / Context table."""

    def __init__(self, gateway: CompletionGateway, repo: Optional[RecordRepository] = None):
        self.gateway = gateway
        self.repo = repo

    async def analyze(
        self,
        transcript: Optional[str],
        meeting_id: Optional[str] = None,
        correlation_id: Optional[str] = None
    ) -> str:
        """
        Extract action items from a transcript.

        Args:
            transcript: Meeting transcript text
            meeting_id: When given (and a repository is configured) the result
                is appended to that meeting's analysis history
            correlation_id: Optional id for log correlation

        Returns:
            Markdown table with columns Task, Owner, Deadline, Context

        Raises:
            ValidationError: transcript is empty or the meeting is unknown
            DispatchError: the completion gateway failed
        """
        if not transcript or not transcript.strip():
            raise ValidationError("Transcript is required", details={"transcript": "required"})

        meeting = None
        if meeting_id and self.repo:
            meeting = self.repo.get_meeting(meeting_id)
            if not meeting:
                raise ValidationError(f"Meeting {meeting_id} does not exist", details={"meeting_id": "unknown meeting"})

        logger.info(
            "Analyzing meeting transcript",
            correlation_id=correlation_id,
            meeting_id=meeting_id,
            transcript_chars=len(transcript)
        )
        analysis = await self.gateway.complete(
            MEETING_ANALYSIS_PROMPT,
            transcript,
            placeholder=NO_ANALYSIS_TEXT,
            correlation_id=correlation_id
        )

        if meeting is not None and analysis != NO_ANALYSIS_TEXT:
            self.repo.create_meeting_analysis(
                meeting.project_id,
                MeetingAnalysisCreate(meeting_id=meeting.id, transcript=transcript, analysis=analysis)
            )
        return analysis
