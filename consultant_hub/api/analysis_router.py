"""AI analysis API router: meeting action items, research, market and SWOT."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from consultant_hub.api.dependencies import get_repo
from consultant_hub.llm.gateway_client import CompletionGateway, get_completion_gateway
from consultant_hub.records.repo import RecordRepository
from consultant_hub.records.schemas import SwotMode
from consultant_hub.tools.meeting_analysis import MeetingAnalysisTool
from consultant_hub.tools.research import ResearchTool
from consultant_hub.tools.swot import build_swot_query, parse_swot
from consultant_hub.utils.logging_utils import generate_correlation_id


router = APIRouter(prefix="/api", tags=["analysis"])


class AnalyzeMeetingRequest(BaseModel):
    """Analyze-meeting request model."""
    transcript: Optional[str] = None
    meeting_id: Optional[str] = Field(default=None, alias="meetingId")

    class Config:
        populate_by_name = True


class AnalyzeMeetingResponse(BaseModel):
    analysis: str


class ResearchRequest(BaseModel):
    """Research request model (camelCase keys as sent by the browser)."""
    query: Optional[str] = None
    project_id: Optional[str] = Field(default=None, alias="projectId")
    analysis_type: Optional[str] = Field(default=None, alias="analysisType")
    industry: Optional[str] = None
    competitors: Optional[List[str]] = None
    analysis_mode: Optional[SwotMode] = Field(default=None, alias="analysisMode")

    class Config:
        populate_by_name = True


class ResearchResponse(BaseModel):
    result: str


class SwotRequest(BaseModel):
    """SWOT request: either an industry (auto) or a competitor list (manual)."""
    project_id: Optional[str] = Field(default=None, alias="projectId")
    mode: SwotMode = "auto"
    industry: Optional[str] = None
    competitors: Optional[List[str]] = None

    class Config:
        populate_by_name = True


class SwotResponse(BaseModel):
    result: str
    sections: Optional[Dict[str, List[str]]] = None


@router.post("/analyze-meeting", response_model=AnalyzeMeetingResponse)
async def analyze_meeting(
    request: AnalyzeMeetingRequest,
    repo: RecordRepository = Depends(get_repo),
    gateway: CompletionGateway = Depends(get_completion_gateway)
):
    """Extract a Task / Owner / Deadline / Context table from a transcript."""
    tool = MeetingAnalysisTool(gateway, repo)
    analysis = await tool.analyze(
        request.transcript,
        meeting_id=request.meeting_id,
        correlation_id=generate_correlation_id()
    )
    return AnalyzeMeetingResponse(analysis=analysis)


@router.post("/research", response_model=ResearchResponse)
async def research(
    request: ResearchRequest,
    repo: RecordRepository = Depends(get_repo),
    gateway: CompletionGateway = Depends(get_completion_gateway)
):
    """Answer a query grounded in the project's stored knowledge."""
    tool = ResearchTool(repo, gateway)
    result = await tool.run(
        request.query,
        request.project_id,
        analysis_type=request.analysis_type,
        industry=request.industry,
        competitors=request.competitors,
        analysis_mode=request.analysis_mode,
        correlation_id=generate_correlation_id()
    )
    return ResearchResponse(result=result)


@router.post("/swot", response_model=SwotResponse)
async def swot(
    request: SwotRequest,
    repo: RecordRepository = Depends(get_repo),
    gateway: CompletionGateway = Depends(get_completion_gateway)
):
    """
    Run a competitor SWOT and gap analysis.

    ``sections`` is null when the result could not be split into the four
    categories; the raw Markdown in ``result`` is always returned.
    """
    query = build_swot_query(request.mode, request.industry, request.competitors)
    tool = ResearchTool(repo, gateway)
    result = await tool.run(
        query,
        request.project_id,
        analysis_type="swot",
        industry=request.industry if request.mode == "auto" else None,
        competitors=request.competitors if request.mode == "manual" else None,
        analysis_mode=request.mode,
        correlation_id=generate_correlation_id()
    )
    sections = parse_swot(result)
    return SwotResponse(result=result, sections=sections.to_dict() if sections else None)
