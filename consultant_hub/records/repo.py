"""Record repository for database operations."""

from typing import Optional, List, Dict, Any, Iterable, TypeVar
from sqlalchemy.orm import Session
from sqlalchemy import desc
from datetime import datetime, timezone
from consultant_hub.errors import ValidationError
from consultant_hub.records.models import (
    User, Client, ClientPersona, Project, TeamMember, Meeting, MeetingFile,
    MeetingAnalysis, AIResearchResult, MarketAnalysis, SwotAnalysis, ProjectReadme
)
from consultant_hub.records.schemas import (
    ClientCreate,
    ClientUpdate,
    ClientPersonaUpsert,
    ProjectCreate,
    ProjectUpdate,
    TeamMemberCreate,
    TeamMemberUpdate,
    MeetingCreate,
    MeetingUpdate,
    MeetingFileCreate,
    MeetingAnalysisCreate,
    ResearchResultCreate,
    MarketAnalysisCreate,
    SwotAnalysisCreate,
    ReadmeUpsert
)
from consultant_hub.utils.text_utils import clean_names

README_TITLE_MAX = 80
README_DESCRIPTION_MAX = 2000

Row = TypeVar("Row")


def _unique_by_id(rows: Iterable[Row]) -> List[Row]:
    """Drop rows whose primary key was already seen, keeping order."""
    seen = set()
    unique = []
    for row in rows:
        if row.id not in seen:
            seen.add(row.id)
            unique.append(row)
    return unique


def _require_text(value: Optional[str], label: str) -> None:
    if value is None or not str(value).strip():
        raise ValidationError(f"{label} is required", details={label.lower(): "required"})


class RecordRepository:
    """Repository for project, meeting and analysis-history records."""

    def __init__(self, db: Session):
        self.db = db

    def rollback(self) -> None:
        """Discard a failed transaction so later reads on this session work."""
        self.db.rollback()

    def _save(self, row):
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def _apply_update(self, row, changes: Dict[str, Any]):
        for field, value in changes.items():
            setattr(row, field, value)
        return self._save(row)

    def _require_project(self, project_id: Optional[str]) -> Project:
        if not project_id:
            raise ValidationError("Project ID is required", details={"project_id": "required"})
        project = self.get_project(project_id)
        if not project:
            raise ValidationError(
                f"Project {project_id} does not exist",
                details={"project_id": "unknown project"}
            )
        return project

    # User operations
    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_or_create_user(self, email: str, name: Optional[str] = None) -> User:
        """Return the user with this email, creating it on first sight."""
        user = self.get_user_by_email(email)
        if user:
            return user
        return self._save(User(email=email, name=name))

    # Client operations
    def list_clients(self) -> List[Client]:
        return self.db.query(Client).order_by(Client.company).all()

    def get_client(self, client_id: str) -> Optional[Client]:
        return self.db.query(Client).filter(Client.id == client_id).first()

    def create_client(self, client_data: ClientCreate) -> Client:
        _require_text(client_data.company, "Company")
        _require_text(client_data.contact_person, "Contact person")
        _require_text(client_data.email, "Email")
        return self._save(Client(**client_data.model_dump()))

    def update_client(self, client_id: str, update_data: ClientUpdate) -> Optional[Client]:
        client = self.get_client(client_id)
        if not client:
            return None
        changes = update_data.model_dump(exclude_unset=True)
        for field in ("company", "contact_person", "email"):
            if field in changes:
                _require_text(changes[field], field.replace("_", " ").capitalize())
        return self._apply_update(client, changes)

    def get_client_persona(self, client_id: str) -> Optional[ClientPersona]:
        return self.db.query(ClientPersona).filter(ClientPersona.client_id == client_id).first()

    def upsert_client_persona(self, client_id: str, persona_data: ClientPersonaUpsert) -> ClientPersona:
        """Create or update the persona for a client (one row per client)."""
        if not self.get_client(client_id):
            raise ValidationError(f"Client {client_id} does not exist", details={"client_id": "unknown client"})

        existing = self.get_client_persona(client_id)
        if existing:
            return self._apply_update(existing, persona_data.model_dump())
        return self._save(ClientPersona(client_id=client_id, **persona_data.model_dump()))

    # Project operations
    def list_projects(self, client_id: Optional[str] = None) -> List[Project]:
        """List projects ordered by name, de-duplicated by id."""
        query = self.db.query(Project)
        if client_id is not None:
            query = query.filter(Project.client_id == client_id)
        return _unique_by_id(query.order_by(Project.name).all())

    def get_project(self, project_id: str) -> Optional[Project]:
        return self.db.query(Project).filter(Project.id == project_id).first()

    def create_project(self, project_data: ProjectCreate) -> Project:
        _require_text(project_data.name, "Name")
        if project_data.client_id and not self.get_client(project_data.client_id):
            raise ValidationError(
                f"Client {project_data.client_id} does not exist",
                details={"client_id": "unknown client"}
            )
        return self._save(Project(name=project_data.name.strip(), client_id=project_data.client_id))

    def update_project(self, project_id: str, update_data: ProjectUpdate) -> Optional[Project]:
        project = self.get_project(project_id)
        if not project:
            return None
        changes = update_data.model_dump(exclude_unset=True)
        if "name" in changes:
            _require_text(changes["name"], "Name")
        if changes.get("client_id") and not self.get_client(changes["client_id"]):
            raise ValidationError(
                f"Client {changes['client_id']} does not exist",
                details={"client_id": "unknown client"}
            )
        return self._apply_update(project, changes)

    # Team member operations
    def list_team_members(self, project_id: str) -> List[TeamMember]:
        query = self.db.query(TeamMember).filter(TeamMember.project_id == project_id)
        return _unique_by_id(query.order_by(TeamMember.name).all())

    def get_team_member(self, member_id: str) -> Optional[TeamMember]:
        return self.db.query(TeamMember).filter(TeamMember.id == member_id).first()

    def get_project_team_member(self, project_id: str, member_id: str) -> Optional[TeamMember]:
        """Get a team member only if it belongs to the given project."""
        return self.db.query(TeamMember).filter(
            TeamMember.id == member_id,
            TeamMember.project_id == project_id
        ).first()

    def create_team_member(self, project_id: str, member_data: TeamMemberCreate) -> TeamMember:
        self._require_project(project_id)
        _require_text(member_data.name, "Name")
        _require_text(member_data.role, "Role")
        _require_text(member_data.email, "Email")
        if member_data.user_id and not self.get_user(member_data.user_id):
            raise ValidationError(
                f"User {member_data.user_id} does not exist",
                details={"user_id": "unknown user"}
            )
        return self._save(TeamMember(project_id=project_id, **member_data.model_dump()))

    def update_team_member(self, member_id: str, update_data: TeamMemberUpdate) -> Optional[TeamMember]:
        member = self.get_team_member(member_id)
        if not member:
            return None
        changes = update_data.model_dump(exclude_unset=True)
        for field in ("name", "role", "email"):
            if field in changes:
                _require_text(changes[field], field.capitalize())
        if changes.get("user_id") and not self.get_user(changes["user_id"]):
            raise ValidationError(
                f"User {changes['user_id']} does not exist",
                details={"user_id": "unknown user"}
            )
        return self._apply_update(member, changes)

    # Meeting operations
    def list_meetings(self, project_id: Optional[str] = None, limit: Optional[int] = None) -> List[Meeting]:
        """List meetings, newest first."""
        query = self.db.query(Meeting)
        if project_id is not None:
            query = query.filter(Meeting.project_id == project_id)
        query = query.order_by(desc(Meeting.date), desc(Meeting.created_at))
        if limit:
            query = query.limit(limit)
        return query.all()

    def get_meeting(self, meeting_id: str) -> Optional[Meeting]:
        return self.db.query(Meeting).filter(Meeting.id == meeting_id).first()

    def create_meeting(self, project_id: str, meeting_data: MeetingCreate) -> Meeting:
        """Create a meeting together with its attached-file descriptors."""
        self._require_project(project_id)
        _require_text(meeting_data.topic, "Topic")

        meeting = Meeting(
            project_id=project_id,
            topic=meeting_data.topic.strip(),
            date=meeting_data.date or datetime.now(timezone.utc),
            attendees=clean_names(meeting_data.attendees),
            transcript=meeting_data.transcript or ""
        )
        for file_data in meeting_data.files:
            meeting.files.append(MeetingFile(**file_data.model_dump()))
        return self._save(meeting)

    def update_meeting(self, meeting_id: str, update_data: MeetingUpdate) -> Optional[Meeting]:
        meeting = self.get_meeting(meeting_id)
        if not meeting:
            return None

        changes = update_data.model_dump(exclude_unset=True)
        if "topic" in changes:
            _require_text(changes["topic"], "Topic")
        if changes.get("attendees") is not None:
            changes["attendees"] = clean_names(changes["attendees"])
        # None means "leave unchanged" for the non-nullable columns
        changes = {k: v for k, v in changes.items() if v is not None}
        return self._apply_update(meeting, changes)

    def list_meeting_files(self, meeting_id: str) -> List[MeetingFile]:
        return self.db.query(MeetingFile).filter(
            MeetingFile.meeting_id == meeting_id
        ).order_by(MeetingFile.created_at).all()

    def add_meeting_file(self, meeting_id: str, file_data: MeetingFileCreate) -> MeetingFile:
        if not self.get_meeting(meeting_id):
            raise ValidationError(f"Meeting {meeting_id} does not exist", details={"meeting_id": "unknown meeting"})
        _require_text(file_data.name, "Name")
        return self._save(MeetingFile(meeting_id=meeting_id, **file_data.model_dump()))

    # Analysis history operations (append-only)
    def _list_history(self, model, project_id: Optional[str], limit: Optional[int]) -> list:
        query = self.db.query(model)
        if project_id is not None:
            query = query.filter(model.project_id == project_id)
        query = query.order_by(desc(model.created_at))
        if limit:
            query = query.limit(limit)
        return query.all()

    def list_meeting_analyses(self, project_id: Optional[str] = None, limit: Optional[int] = None) -> List[MeetingAnalysis]:
        return self._list_history(MeetingAnalysis, project_id, limit)

    def get_meeting_analysis(self, analysis_id: str) -> Optional[MeetingAnalysis]:
        return self.db.query(MeetingAnalysis).filter(MeetingAnalysis.id == analysis_id).first()

    def create_meeting_analysis(self, project_id: str, analysis_data: MeetingAnalysisCreate) -> MeetingAnalysis:
        self._require_project(project_id)
        if analysis_data.meeting_id:
            meeting = self.get_meeting(analysis_data.meeting_id)
            if not meeting or meeting.project_id != project_id:
                raise ValidationError(
                    "Meeting must belong to the project",
                    details={"meeting_id": "not in project"}
                )
        return self._save(MeetingAnalysis(project_id=project_id, **analysis_data.model_dump()))

    def list_research_results(self, project_id: Optional[str] = None, limit: Optional[int] = None) -> List[AIResearchResult]:
        return self._list_history(AIResearchResult, project_id, limit)

    def get_research_result(self, result_id: str) -> Optional[AIResearchResult]:
        return self.db.query(AIResearchResult).filter(AIResearchResult.id == result_id).first()

    def create_research_result(self, project_id: str, result_data: ResearchResultCreate) -> AIResearchResult:
        self._require_project(project_id)
        return self._save(AIResearchResult(project_id=project_id, **result_data.model_dump()))

    def list_market_analyses(self, project_id: Optional[str] = None, limit: Optional[int] = None) -> List[MarketAnalysis]:
        return self._list_history(MarketAnalysis, project_id, limit)

    def get_market_analysis(self, analysis_id: str) -> Optional[MarketAnalysis]:
        return self.db.query(MarketAnalysis).filter(MarketAnalysis.id == analysis_id).first()

    def create_market_analysis(self, project_id: str, analysis_data: MarketAnalysisCreate) -> MarketAnalysis:
        self._require_project(project_id)
        return self._save(MarketAnalysis(project_id=project_id, **analysis_data.model_dump()))

    def list_swot_analyses(self, project_id: Optional[str] = None, limit: Optional[int] = None) -> List[SwotAnalysis]:
        return self._list_history(SwotAnalysis, project_id, limit)

    def get_swot_analysis(self, analysis_id: str) -> Optional[SwotAnalysis]:
        return self.db.query(SwotAnalysis).filter(SwotAnalysis.id == analysis_id).first()

    def create_swot_analysis(self, project_id: str, analysis_data: SwotAnalysisCreate) -> SwotAnalysis:
        self._require_project(project_id)
        data = analysis_data.model_dump()
        if data["competitors"] is not None:
            data["competitors"] = clean_names(data["competitors"])
        return self._save(SwotAnalysis(project_id=project_id, **data))

    def get_history(self, project_id: Optional[str] = None) -> Dict[str, list]:
        """
        Get all four analysis history logs, newest first.

        Args:
            project_id: Optional project filter; all projects when omitted

        Returns:
            Dictionary keyed by history kind
        """
        return {
            "meeting_analyses": self.list_meeting_analyses(project_id),
            "research": self.list_research_results(project_id),
            "market_analyses": self.list_market_analyses(project_id),
            "swot_analyses": self.list_swot_analyses(project_id),
        }

    # Project readme operations
    def get_readme_by_project(self, project_id: str) -> Optional[ProjectReadme]:
        return self.db.query(ProjectReadme).filter(ProjectReadme.project_id == project_id).first()

    def validate_readme(self, project_id: str, readme_data: ReadmeUpsert) -> None:
        """
        Enforce readme invariants before any write.

        Raises:
            ValidationError: blank or over-long title, over-long description,
                start date after end date, or an owner outside the project team
        """
        self._require_project(project_id)

        if not readme_data.title or not readme_data.title.strip():
            raise ValidationError("Title is required", details={"title": "required"})
        if len(readme_data.title) > README_TITLE_MAX:
            raise ValidationError(
                f"Title must be {README_TITLE_MAX} characters or less",
                details={"title": "too long"}
            )
        if readme_data.description and len(readme_data.description) > README_DESCRIPTION_MAX:
            raise ValidationError(
                f"Description must be {README_DESCRIPTION_MAX} characters or less",
                details={"description": "too long"}
            )
        if readme_data.start_date and readme_data.end_date and readme_data.start_date > readme_data.end_date:
            raise ValidationError(
                "Start date must be before or equal to end date",
                details={"start_date": "after end_date"}
            )
        if readme_data.owner_id and not self.get_project_team_member(project_id, readme_data.owner_id):
            raise ValidationError(
                "Owner must be a member of the project team",
                details={"owner_id": "not on project team"}
            )

    def upsert_readme_by_project(
        self,
        project_id: str,
        readme_data: ReadmeUpsert,
        updated_by: Optional[str] = None
    ) -> ProjectReadme:
        """
        Create the project's readme if absent, otherwise update it in place.

        The readme id is preserved across updates.

        Args:
            project_id: Owning project
            readme_data: Fields to write
            updated_by: Id of the user making the change

        Returns:
            The persisted readme
        """
        self.validate_readme(project_id, readme_data)

        fields = readme_data.model_dump()
        fields["updated_by"] = updated_by

        existing = self.get_readme_by_project(project_id)
        if existing:
            fields["updated_at"] = datetime.now(timezone.utc)
            return self._apply_update(existing, fields)
        return self._save(ProjectReadme(project_id=project_id, **fields))
