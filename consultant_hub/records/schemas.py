"""Pydantic schemas for records crossing the API and repository boundary."""

from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import date, datetime

ReadmeStatus = Literal["Proposed", "In Progress", "On Hold", "Completed"]
SwotMode = Literal["auto", "manual"]
MeetingFileKind = Literal["audio", "text"]


class RecordRead(BaseModel):
    """Base for schemas built from ORM rows."""

    class Config:
        from_attributes = True


# Users
class UserSummary(RecordRead):
    id: str
    email: str


# Clients
class ClientCreate(BaseModel):
    company: str
    contact_person: str
    email: str
    phone: Optional[str] = None


class ClientUpdate(BaseModel):
    company: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ClientRead(RecordRead):
    id: str
    company: str
    contact_person: str
    email: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None


class ClientPersonaUpsert(BaseModel):
    formality: Literal["low", "medium", "high"] = "medium"
    data_density: Literal["low", "medium", "high"] = "medium"
    urgency: Literal["normal", "high"] = "normal"
    length: Literal["short", "medium", "long"] = "medium"
    cta_style: Literal["meeting", "proposal", "feedback", "decision"] = "meeting"
    notes: Optional[str] = ""


class ClientPersonaRead(RecordRead):
    id: str
    client_id: str
    formality: str
    data_density: str
    urgency: str
    length: str
    cta_style: str
    notes: Optional[str] = None


# Team members
class TeamMemberCreate(BaseModel):
    name: str
    role: str
    email: str
    user_id: Optional[str] = None


class TeamMemberUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None
    user_id: Optional[str] = None


class TeamMemberRead(RecordRead):
    id: str
    project_id: str
    name: str
    role: str
    email: str
    user_id: Optional[str] = None


class TeamMemberSummary(RecordRead):
    id: str
    name: str
    email: str
    role: str


# Projects
class ProjectCreate(BaseModel):
    name: str
    client_id: Optional[str] = None


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    client_id: Optional[str] = None


class ProjectRead(RecordRead):
    id: str
    name: str
    client_id: Optional[str] = None
    created_at: Optional[datetime] = None


class ProjectDetail(ProjectRead):
    client: Optional[ClientRead] = None
    team_members: List[TeamMemberRead] = Field(default_factory=list)


# Meetings
class MeetingFileCreate(BaseModel):
    name: str
    type: MeetingFileKind
    size: int = Field(ge=0)


class MeetingFileRead(RecordRead):
    id: str
    meeting_id: str
    name: str
    type: str
    size: int


class MeetingCreate(BaseModel):
    topic: str
    date: Optional[datetime] = None
    attendees: List[str] = Field(default_factory=list)
    transcript: str = ""
    files: List[MeetingFileCreate] = Field(default_factory=list)


class MeetingUpdate(BaseModel):
    topic: Optional[str] = None
    date: Optional[datetime] = None
    attendees: Optional[List[str]] = None
    transcript: Optional[str] = None


class MeetingRead(RecordRead):
    id: str
    project_id: str
    date: datetime
    topic: str
    attendees: List[str] = Field(default_factory=list)
    transcript: str
    files: List[MeetingFileRead] = Field(default_factory=list)


# Analysis history
class MeetingAnalysisCreate(BaseModel):
    transcript: str
    analysis: str
    meeting_id: Optional[str] = None


class MeetingAnalysisRead(RecordRead):
    id: str
    project_id: str
    meeting_id: Optional[str] = None
    transcript: str
    analysis: str
    created_at: datetime


class ResearchResultCreate(BaseModel):
    query: str
    result: str


class ResearchResultRead(RecordRead):
    id: str
    project_id: str
    query: str
    result: str
    created_at: datetime


class MarketAnalysisCreate(ResearchResultCreate):
    pass


class MarketAnalysisRead(ResearchResultRead):
    pass


class SwotAnalysisCreate(BaseModel):
    result: str
    analysis_mode: SwotMode = "auto"
    industry: Optional[str] = None
    competitors: Optional[List[str]] = None


class SwotAnalysisRead(RecordRead):
    id: str
    project_id: str
    industry: Optional[str] = None
    competitors: Optional[List[str]] = None
    analysis_mode: str
    result: str
    created_at: datetime


class HistoryRead(BaseModel):
    meeting_analyses: List[MeetingAnalysisRead] = Field(default_factory=list)
    research: List[ResearchResultRead] = Field(default_factory=list)
    market_analyses: List[MarketAnalysisRead] = Field(default_factory=list)
    swot_analyses: List[SwotAnalysisRead] = Field(default_factory=list)


# Project readme
class ReadmeUpsert(BaseModel):
    """Readme fields accepted on write.

    Length, date-order and ownership rules are enforced by the repository so
    that every write path reports them the same way.
    """
    title: str
    description: Optional[str] = None
    purpose: Optional[str] = None
    scope: Optional[str] = None
    status: ReadmeStatus = "Proposed"
    owner_id: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ReadmeRead(BaseModel):
    id: str
    project_id: str
    title: str
    description: Optional[str] = None
    purpose: Optional[str] = None
    scope: Optional[str] = None
    status: ReadmeStatus
    owner: Optional[TeamMemberSummary] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    updated_by: Optional[UserSummary] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, readme) -> "ReadmeRead":
        """Build the joined view (owner and last editor) from an ORM row."""
        return cls(
            id=readme.id,
            project_id=readme.project_id,
            title=readme.title,
            description=readme.description,
            purpose=readme.purpose,
            scope=readme.scope,
            status=readme.status,
            owner=TeamMemberSummary.model_validate(readme.owner) if readme.owner else None,
            start_date=readme.start_date,
            end_date=readme.end_date,
            updated_by=UserSummary.model_validate(readme.updated_by_user) if readme.updated_by_user else None,
            updated_at=readme.updated_at,
        )
