"""Tests for KnowledgeAggregator."""

import pytest
from datetime import datetime, timezone
from unittest.mock import patch
from sqlalchemy.exc import SQLAlchemyError
from consultant_hub.config import settings
from consultant_hub.orchestrator.knowledge_aggregation import KnowledgeAggregator
from consultant_hub.orchestrator.knowledge_formatting import (
    SECTION_MEETINGS,
    SECTION_PREVIOUS_RESEARCH,
    SECTION_SWOT_ANALYSES,
    format_section,
    join_sections
)
from consultant_hub.records.schemas import (
    MarketAnalysisCreate,
    MeetingCreate,
    ResearchResultCreate,
    SwotAnalysisCreate
)
from consultant_hub.utils.text_utils import TRUNCATION_MARKER


class TestAggregate:
    """Tests for KnowledgeAggregator.aggregate()."""

    @pytest.fixture
    def aggregator(self, repo):
        return KnowledgeAggregator(repo, transcript_budget=50, result_budget=40)

    def test_empty_project_has_header_only(self, aggregator, project):
        context = aggregator.aggregate(project.id)

        assert context.is_empty
        assert context.text.startswith("PROJECT KNOWLEDGE BASE: Supply Chain Redesign (Client: Nordwind Logistics)")
        assert "No stored project knowledge is available yet." in context.text
        assert "===" not in context.text

    def test_sections_follow_fixed_order_and_skip_empty(self, aggregator, repo, project):
        """Test that present sections appear in order and empty ones are omitted."""
        repo.create_swot_analysis(project.id, SwotAnalysisCreate(result="Strengths: scale", industry="Logistics"))
        repo.create_research_result(project.id, ResearchResultCreate(query="Warehouse costs?", result="High"))
        repo.create_meeting(project.id, MeetingCreate(
            topic="Kickoff",
            date=datetime(2025, 1, 10, tzinfo=timezone.utc),
            attendees=["Max", "Anna"],
            transcript="Max: I will draft the plan."
        ))

        context = aggregator.aggregate(project.id)

        assert context.sections == [SECTION_MEETINGS, SECTION_PREVIOUS_RESEARCH, SECTION_SWOT_ANALYSES]
        meetings_at = context.text.index("=== MEETINGS ===")
        research_at = context.text.index("=== PREVIOUS RESEARCH ===")
        swot_at = context.text.index("=== SWOT ANALYSES ===")
        assert meetings_at < research_at < swot_at
        assert "=== MARKET ANALYSES ===" not in context.text
        assert "=== MEETING ANALYSES ===" not in context.text
        assert "- Meeting: Kickoff (2025-01-10)" in context.text
        assert "Attendees: Max, Anna" in context.text

    def test_long_transcript_is_truncated_to_budget(self, aggregator, repo, project):
        transcript = "x" * 500
        repo.create_meeting(project.id, MeetingCreate(topic="Long call", transcript=transcript))

        context = aggregator.aggregate(project.id)

        transcript_line = next(line for line in context.text.splitlines() if "Transcript:" in line)
        rendered = transcript_line.split("Transcript: ", 1)[1]
        assert rendered == "x" * 50 + TRUNCATION_MARKER
        assert len(rendered) <= 50 + len(TRUNCATION_MARKER)

    def test_long_prior_result_is_truncated_to_budget(self, aggregator, repo, project):
        repo.create_market_analysis(project.id, MarketAnalysisCreate(query="EV market", result="r" * 300))

        context = aggregator.aggregate(project.id)

        assert "r" * 40 + TRUNCATION_MARKER in context.text
        assert "r" * 41 not in context.text

    def test_zero_budget_is_respected(self, repo, project):
        """Test that an explicit budget of zero keeps only the truncation marker."""
        aggregator = KnowledgeAggregator(repo, transcript_budget=0, result_budget=0)
        repo.create_meeting(project.id, MeetingCreate(topic="Kickoff", transcript="Max: I will draft the plan."))

        context = aggregator.aggregate(project.id)

        assert aggregator.transcript_budget == 0
        assert aggregator.result_budget == 0
        assert f"Transcript: {TRUNCATION_MARKER}" in context.text
        assert "draft the plan" not in context.text

    def test_budgets_default_to_settings(self, repo):
        aggregator = KnowledgeAggregator(repo)

        assert aggregator.transcript_budget == settings.transcript_char_budget
        assert aggregator.result_budget == settings.prior_result_char_budget

    def test_failed_fetch_omits_only_that_section(self, aggregator, repo, project):
        """Test partial degradation when one sub-fetch raises."""
        repo.create_research_result(project.id, ResearchResultCreate(query="Q", result="A"))
        repo.create_meeting(project.id, MeetingCreate(topic="Kickoff"))

        with patch.object(repo, "list_research_results", side_effect=SQLAlchemyError("db down")):
            context = aggregator.aggregate(project.id)

        assert context.failed_sections == [SECTION_PREVIOUS_RESEARCH]
        assert context.sections == [SECTION_MEETINGS]
        assert "=== PREVIOUS RESEARCH ===" not in context.text

    def test_unknown_project_yields_empty_text(self, aggregator):
        context = aggregator.aggregate("missing-project")

        assert context.is_empty
        assert context.text == ""

    def test_other_projects_are_not_included(self, aggregator, repo, project, other_project):
        repo.create_research_result(other_project.id, ResearchResultCreate(query="Pricing", result="Secret"))

        context = aggregator.aggregate(project.id)

        assert "Secret" not in context.text


class TestFormatting:
    """Tests for section formatting helpers."""

    def test_format_section_empty(self):
        assert format_section("Meetings", []) == ""
        assert format_section("Meetings", ["", None]) == ""

    def test_format_section_with_entries(self):
        assert format_section("Meetings", ["a", "b"]) == "=== MEETINGS ===\na\n\nb\n"

    def test_join_sections_without_header(self):
        assert join_sections("", ["", "=== X ===\na\n"]) == "=== X ===\na\n"
        assert join_sections("", []) == ""
