"""Project knowledge aggregation for research prompts."""

from dataclasses import dataclass, field
from typing import Callable, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from consultant_hub.config import settings
from consultant_hub.records.repo import RecordRepository
from consultant_hub.orchestrator.knowledge_formatting import (
    SECTION_MEETINGS,
    SECTION_MEETING_ANALYSES,
    SECTION_PREVIOUS_RESEARCH,
    SECTION_MARKET_ANALYSES,
    SECTION_SWOT_ANALYSES,
    format_section,
    format_meeting,
    format_meeting_analysis,
    format_research_result,
    format_swot_analysis,
    format_project_header,
    join_sections
)
from consultant_hub.utils.logging_utils import StructuredLogger, log_pipeline_step

logger = StructuredLogger("consultant_hub.aggregation")


@dataclass
class KnowledgeContext:
    """Aggregated project knowledge ready to be sent as prompt grounding."""
    project_id: str
    text: str
    sections: List[str] = field(default_factory=list)
    failed_sections: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.sections


class KnowledgeAggregator:
    """Collects a project's stored records into one bounded text block."""

    def __init__(
        self,
        repo: RecordRepository,
        transcript_budget: Optional[int] = None,
        result_budget: Optional[int] = None
    ):
        self.repo = repo
        self.transcript_budget = settings.transcript_char_budget if transcript_budget is None else transcript_budget
        self.result_budget = settings.prior_result_char_budget if result_budget is None else result_budget

    def _fetch(self, section: str, fetcher: Callable[[], list], project_id: str, failed: List[str]) -> list:
        """Run one read; a database failure degrades to an empty collection."""
        try:
            return list(fetcher())
        except SQLAlchemyError as e:
            logger.error(
                "Knowledge sub-fetch failed; section omitted",
                project_id=project_id,
                section=section,
                error=str(e),
                error_type=type(e).__name__
            )
            failed.append(section)
            self.repo.rollback()
            return []

    def _header(self, project_id: str) -> str:
        try:
            project = self.repo.get_project(project_id)
        except SQLAlchemyError as e:
            logger.error("Project lookup failed; header omitted", project_id=project_id, error=str(e))
            self.repo.rollback()
            return ""
        if not project:
            return ""
        client_company = project.client.company if project.client else None
        return format_project_header(project.name, client_company)

    @log_pipeline_step
    def aggregate(self, project_id: str, correlation_id: Optional[str] = None) -> KnowledgeContext:
        """
        Build the knowledge context for a project.

        Sections appear in a fixed order (meetings, meeting analyses, previous
        research, market analyses, SWOT analyses); empty ones are left out.
        Transcripts and prior results are truncated to their budgets.

        Args:
            project_id: Project to aggregate
            correlation_id: Optional id for log correlation

        Returns:
            KnowledgeContext with the text and the names of emitted sections
        """
        failed: List[str] = []
        header = self._header(project_id)

        meetings = self._fetch(SECTION_MEETINGS, lambda: self.repo.list_meetings(project_id), project_id, failed)
        meeting_analyses = self._fetch(
            SECTION_MEETING_ANALYSES, lambda: self.repo.list_meeting_analyses(project_id), project_id, failed
        )
        research = self._fetch(
            SECTION_PREVIOUS_RESEARCH, lambda: self.repo.list_research_results(project_id), project_id, failed
        )
        market = self._fetch(
            SECTION_MARKET_ANALYSES, lambda: self.repo.list_market_analyses(project_id), project_id, failed
        )
        swot = self._fetch(
            SECTION_SWOT_ANALYSES, lambda: self.repo.list_swot_analyses(project_id), project_id, failed
        )

        rendered = [
            (SECTION_MEETINGS, format_section(
                SECTION_MEETINGS, [format_meeting(m, self.transcript_budget) for m in meetings])),
            (SECTION_MEETING_ANALYSES, format_section(
                SECTION_MEETING_ANALYSES, [format_meeting_analysis(a, self.result_budget) for a in meeting_analyses])),
            (SECTION_PREVIOUS_RESEARCH, format_section(
                SECTION_PREVIOUS_RESEARCH, [format_research_result(r, self.result_budget) for r in research])),
            (SECTION_MARKET_ANALYSES, format_section(
                SECTION_MARKET_ANALYSES,
                [format_research_result(r, self.result_budget, label="Market analysis") for r in market])),
            (SECTION_SWOT_ANALYSES, format_section(
                SECTION_SWOT_ANALYSES, [format_swot_analysis(s, self.result_budget) for s in swot])),
        ]

        emitted = [name for name, text in rendered if text]
        text = join_sections(header, [text for _, text in rendered])

        logger.info(
            "Knowledge aggregated",
            correlation_id=correlation_id,
            project_id=project_id,
            sections=emitted,
            failed_sections=failed,
            context_chars=len(text)
        )
        return KnowledgeContext(project_id=project_id, text=text, sections=emitted, failed_sections=failed)
