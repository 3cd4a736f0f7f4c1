"""Project research: knowledge aggregation, prompt selection and dispatch."""

from typing import Optional, Sequence
from consultant_hub.errors import NotFoundError, ValidationError
from consultant_hub.llm.gateway_client import CompletionGateway, build_user_prompt
from consultant_hub.llm.prompts import normalize_analysis_type, select_prompt
from consultant_hub.orchestrator.knowledge_aggregation import KnowledgeAggregator
from consultant_hub.records.repo import RecordRepository
from consultant_hub.records.schemas import (
    MarketAnalysisCreate,
    ResearchResultCreate,
    SwotAnalysisCreate
)
from consultant_hub.utils.logging_utils import StructuredLogger, generate_correlation_id

NO_RESEARCH_TEXT = "No research results generated."

logger = StructuredLogger("consultant_hub.research")


class ResearchTool:
    """Answers research, market and SWOT queries grounded in a project's records."""

    def __init__(
        self,
        repo: RecordRepository,
        gateway: CompletionGateway,
        aggregator: Optional[KnowledgeAggregator] = None
    ):
        self.repo = repo
        self.gateway = gateway
        self.aggregator = aggregator or KnowledgeAggregator(repo)

    async def run(
        self,
        query: Optional[str],
        project_id: Optional[str],
        analysis_type: Optional[str] = None,
        industry: Optional[str] = None,
        competitors: Optional[Sequence[str]] = None,
        analysis_mode: Optional[str] = None,
        record_history: bool = True,
        correlation_id: Optional[str] = None
    ) -> str:
        """
        Run one research request.

        Args:
            query: The user's question or analysis request
            project_id: Project whose knowledge grounds the answer
            analysis_type: "general", "market" or "swot" (anything else is general)
            industry: SWOT only, stored with the history entry
            competitors: SWOT only, stored with the history entry
            analysis_mode: SWOT only ("auto" or "manual")
            record_history: Append the result to the matching history table
            correlation_id: Optional id for log correlation

        Returns:
            Markdown answer

        Raises:
            ValidationError: blank query or missing project id
            NotFoundError: project does not exist
            DispatchError: the completion gateway failed
        """
        correlation_id = correlation_id or generate_correlation_id()

        if not query or not query.strip():
            raise ValidationError("Research query is required", details={"query": "required"})
        if not project_id:
            raise ValidationError("Project ID is required", details={"projectId": "required"})
        if not self.repo.get_project(project_id):
            raise NotFoundError("Project", project_id)

        effective_type = normalize_analysis_type(analysis_type)
        logger.info(
            "Research request",
            correlation_id=correlation_id,
            project_id=project_id,
            analysis_type=effective_type,
            query_chars=len(query)
        )

        context = self.aggregator.aggregate(project_id, correlation_id=correlation_id)
        user_prompt = build_user_prompt(context.text, query.strip())
        result = await self.gateway.complete(
            select_prompt(effective_type),
            user_prompt,
            placeholder=NO_RESEARCH_TEXT,
            correlation_id=correlation_id
        )

        if record_history and result != NO_RESEARCH_TEXT:
            self._record(effective_type, project_id, query.strip(), result, industry, competitors, analysis_mode)

        logger.info("Research completed", correlation_id=correlation_id, result_chars=len(result))
        return result

    def _record(
        self,
        analysis_type: str,
        project_id: str,
        query: str,
        result: str,
        industry: Optional[str],
        competitors: Optional[Sequence[str]],
        analysis_mode: Optional[str]
    ) -> None:
        if analysis_type == "market":
            self.repo.create_market_analysis(project_id, MarketAnalysisCreate(query=query, result=result))
        elif analysis_type == "swot":
            self.repo.create_swot_analysis(
                project_id,
                SwotAnalysisCreate(
                    result=result,
                    analysis_mode=analysis_mode or ("manual" if competitors else "auto"),
                    industry=industry,
                    competitors=list(competitors) if competitors else None
                )
            )
        else:
            self.repo.create_research_result(project_id, ResearchResultCreate(query=query, result=result))
