"""Tests for RecordRepository."""

import pytest
from datetime import date, datetime, timedelta, timezone
from consultant_hub.errors import ValidationError
from consultant_hub.records.schemas import (
    ClientCreate,
    ClientPersonaUpsert,
    MeetingAnalysisCreate,
    MeetingCreate,
    MeetingFileCreate,
    MeetingUpdate,
    ProjectCreate,
    ReadmeUpsert,
    ResearchResultCreate,
    SwotAnalysisCreate
)


def _readme(**overrides):
    data = {
        "title": "Supply chain redesign",
        "description": "Reduce warehouse count from 9 to 5.",
        "purpose": "Cut logistics cost",
        "scope": "DACH region",
        "status": "In Progress",
        "start_date": date(2025, 1, 1),
        "end_date": date(2025, 6, 30),
    }
    data.update(overrides)
    return ReadmeUpsert(**data)


class TestReadmeUpsert:
    """Tests for readme validation and upsert_readme_by_project()."""

    def test_creates_then_reads_back_with_owner(self, repo, project):
        """Test that a new readme round-trips with its owner joined."""
        owner = repo.list_team_members(project.id)[0]
        user = repo.get_or_create_user("anna@consulting.eu", "Anna")

        readme = repo.upsert_readme_by_project(project.id, _readme(owner_id=owner.id), updated_by=user.id)

        stored = repo.get_readme_by_project(project.id)
        assert stored.id == readme.id
        assert stored.title == "Supply chain redesign"
        assert stored.status == "In Progress"
        assert stored.owner.id == owner.id
        assert stored.updated_by_user.email == "anna@consulting.eu"

    def test_update_keeps_readme_id(self, repo, project):
        """Test that a second upsert updates in place."""
        first = repo.upsert_readme_by_project(project.id, _readme())
        second = repo.upsert_readme_by_project(project.id, _readme(title="Renamed", status="Completed"))

        assert second.id == first.id
        assert repo.get_readme_by_project(project.id).title == "Renamed"
        assert repo.get_readme_by_project(project.id).status == "Completed"

    def test_title_of_80_characters_is_accepted(self, repo, project):
        readme = repo.upsert_readme_by_project(project.id, _readme(title="T" * 80))
        assert len(readme.title) == 80

    def test_title_of_81_characters_is_rejected(self, repo, project):
        """Test that an over-long title is rejected before anything is written."""
        with pytest.raises(ValidationError) as exc_info:
            repo.upsert_readme_by_project(project.id, _readme(title="T" * 81))

        assert exc_info.value.message == "Title must be 80 characters or less"
        assert repo.get_readme_by_project(project.id) is None

    def test_blank_title_is_rejected(self, repo, project):
        with pytest.raises(ValidationError) as exc_info:
            repo.upsert_readme_by_project(project.id, _readme(title="   "))
        assert exc_info.value.message == "Title is required"

    def test_description_over_limit_is_rejected(self, repo, project):
        with pytest.raises(ValidationError) as exc_info:
            repo.upsert_readme_by_project(project.id, _readme(description="d" * 2001))
        assert exc_info.value.message == "Description must be 2000 characters or less"

    def test_start_after_end_is_rejected(self, repo, project):
        with pytest.raises(ValidationError) as exc_info:
            repo.upsert_readme_by_project(
                project.id, _readme(start_date=date(2025, 7, 1), end_date=date(2025, 6, 30))
            )
        assert exc_info.value.message == "Start date must be before or equal to end date"

    def test_same_start_and_end_date_is_accepted(self, repo, project):
        readme = repo.upsert_readme_by_project(
            project.id, _readme(start_date=date(2025, 3, 1), end_date=date(2025, 3, 1))
        )
        assert readme.start_date == readme.end_date

    def test_owner_from_another_project_is_rejected(self, repo, project, other_project):
        """Test that the owner must be on this project's team."""
        outsider = repo.list_team_members(other_project.id)[0]

        with pytest.raises(ValidationError) as exc_info:
            repo.upsert_readme_by_project(project.id, _readme(owner_id=outsider.id))

        assert exc_info.value.message == "Owner must be a member of the project team"

    def test_unknown_project_is_rejected(self, repo):
        with pytest.raises(ValidationError):
            repo.upsert_readme_by_project("missing-project", _readme())


class TestClientPersona:
    """Tests for upsert_client_persona()."""

    def test_upsert_keeps_one_row_per_client(self, repo, project):
        client_id = project.client_id

        first = repo.upsert_client_persona(client_id, ClientPersonaUpsert(formality="high"))
        second = repo.upsert_client_persona(client_id, ClientPersonaUpsert(formality="low", notes="Prefers calls"))

        assert second.id == first.id
        persona = repo.get_client_persona(client_id)
        assert persona.formality == "low"
        assert persona.notes == "Prefers calls"

    def test_unknown_client_is_rejected(self, repo):
        with pytest.raises(ValidationError):
            repo.upsert_client_persona("missing-client", ClientPersonaUpsert())


class TestProjectsAndMeetings:
    """Tests for project, meeting and file operations."""

    def test_list_projects_by_client(self, repo, project, other_project):
        projects = repo.list_projects(client_id=project.client_id)
        assert [p.id for p in projects] == [project.id]
        assert len(repo.list_projects()) == 2

    def test_create_project_with_unknown_client_is_rejected(self, repo):
        with pytest.raises(ValidationError):
            repo.create_project(ProjectCreate(name="Orphan", client_id="missing-client"))

    def test_create_client_requires_company(self, repo):
        with pytest.raises(ValidationError) as exc_info:
            repo.create_client(ClientCreate(company=" ", contact_person="Jonas", email="j@example.com"))
        assert exc_info.value.message == "Company is required"

    def test_meetings_are_listed_newest_first(self, repo, project):
        repo.create_meeting(project.id, MeetingCreate(topic="Kickoff", date=datetime(2025, 1, 10, tzinfo=timezone.utc)))
        repo.create_meeting(project.id, MeetingCreate(topic="Review", date=datetime(2025, 2, 10, tzinfo=timezone.utc)))

        topics = [m.topic for m in repo.list_meetings(project.id)]

        assert topics == ["Review", "Kickoff"]

    def test_create_meeting_with_files_and_cleaned_attendees(self, repo, project):
        """Test that attendees are de-duplicated and files are attached."""
        meeting = repo.create_meeting(project.id, MeetingCreate(
            topic="Kickoff",
            attendees=["Max", " max ", "", "Anna"],
            transcript="Max: I will send the deck.",
            files=[MeetingFileCreate(name="kickoff.mp3", type="audio", size=2048)]
        ))

        assert meeting.attendees == ["Max", "Anna"]
        files = repo.list_meeting_files(meeting.id)
        assert [f.name for f in files] == ["kickoff.mp3"]

    def test_update_meeting_ignores_none_fields(self, repo, project):
        meeting = repo.create_meeting(project.id, MeetingCreate(topic="Kickoff", transcript="Hello"))

        updated = repo.update_meeting(meeting.id, MeetingUpdate(topic="Kickoff v2", transcript=None))

        assert updated.topic == "Kickoff v2"
        assert updated.transcript == "Hello"

    def test_add_file_to_unknown_meeting_is_rejected(self, repo):
        with pytest.raises(ValidationError):
            repo.add_meeting_file("missing-meeting", MeetingFileCreate(name="a.txt", type="text", size=1))


class TestHistory:
    """Tests for the append-only analysis history."""

    def test_history_is_newest_first(self, repo, project, db_session):
        older = repo.create_research_result(project.id, ResearchResultCreate(query="Q1", result="A1"))
        newer = repo.create_research_result(project.id, ResearchResultCreate(query="Q2", result="A2"))
        now = datetime.now(timezone.utc)
        older.created_at = now - timedelta(days=1)
        newer.created_at = now
        db_session.commit()

        history = repo.get_history(project.id)

        assert [r.query for r in history["research"]] == ["Q2", "Q1"]
        assert history["meeting_analyses"] == []
        assert history["market_analyses"] == []
        assert history["swot_analyses"] == []

    def test_history_is_scoped_to_project(self, repo, project, other_project):
        repo.create_research_result(project.id, ResearchResultCreate(query="Mine", result="A"))
        repo.create_research_result(other_project.id, ResearchResultCreate(query="Theirs", result="B"))

        assert [r.query for r in repo.list_research_results(project.id)] == ["Mine"]
        assert len(repo.get_history()["research"]) == 2

    def test_swot_competitors_are_cleaned(self, repo, project):
        swot = repo.create_swot_analysis(project.id, SwotAnalysisCreate(
            result="## Strengths", analysis_mode="manual", competitors=["SAP", " sap", "Oracle", ""]
        ))
        assert swot.competitors == ["SAP", "Oracle"]

    def test_meeting_analysis_requires_meeting_in_project(self, repo, project, other_project):
        meeting = repo.create_meeting(other_project.id, MeetingCreate(topic="Elsewhere"))

        with pytest.raises(ValidationError) as exc_info:
            repo.create_meeting_analysis(
                project.id,
                MeetingAnalysisCreate(meeting_id=meeting.id, transcript="t", analysis="a")
            )

        assert exc_info.value.message == "Meeting must belong to the project"

    def test_history_requires_project_id(self, repo):
        with pytest.raises(ValidationError) as exc_info:
            repo.create_research_result(None, ResearchResultCreate(query="Q", result="A"))
        assert exc_info.value.message == "Project ID is required"

    def test_history_records_can_be_fetched_by_id(self, repo, project):
        research = repo.create_research_result(project.id, ResearchResultCreate(query="Q", result="A"))
        swot = repo.create_swot_analysis(project.id, SwotAnalysisCreate(result="S", industry="Retail"))
        analysis = repo.create_meeting_analysis(project.id, MeetingAnalysisCreate(transcript="t", analysis="a"))

        assert repo.get_research_result(research.id).query == "Q"
        assert repo.get_swot_analysis(swot.id).industry == "Retail"
        assert repo.get_meeting_analysis(analysis.id).analysis == "a"
        assert repo.get_market_analysis("missing") is None
