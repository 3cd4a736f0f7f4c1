"""Database models for projects, meetings and analysis history."""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Date, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from consultant_hub.db.session import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Authenticated identity (mocked login)."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class Client(Base):
    """Client company attached to a project."""
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=_new_id)
    company = Column(String, nullable=False)
    contact_person = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    persona = relationship("ClientPersona", back_populates="client", uselist=False)


class ClientPersona(Base):
    """Communication preferences for a client (one per client)."""
    __tablename__ = "client_personas"

    id = Column(String(36), primary_key=True, default=_new_id)
    client_id = Column(String(36), ForeignKey("clients.id"), unique=True, nullable=False)
    formality = Column(String, nullable=False, default="medium")
    data_density = Column(String, nullable=False, default="medium")
    urgency = Column(String, nullable=False, default="normal")
    length = Column(String, nullable=False, default="medium")
    cta_style = Column(String, nullable=False, default="meeting")
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    client = relationship("Client", back_populates="persona")


class Project(Base):
    """Consulting project; every meeting and analysis hangs off one."""
    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    client = relationship("Client")
    team_members = relationship("TeamMember", back_populates="project", order_by="TeamMember.name")


class TeamMember(Base):
    """Project-scoped team member."""
    __tablename__ = "project_team_members"

    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    email = Column(String, nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    project = relationship("Project", back_populates="team_members")


class Meeting(Base):
    """Meeting model."""
    __tablename__ = "meetings"

    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    topic = Column(String, nullable=False)
    attendees = Column(JSON, nullable=False, default=list)
    transcript = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    files = relationship("MeetingFile", back_populates="meeting", order_by="MeetingFile.created_at")


class MeetingFile(Base):
    """Descriptor of a file attached to a meeting (content is not stored)."""
    __tablename__ = "meeting_files"

    id = Column(String(36), primary_key=True, default=_new_id)
    meeting_id = Column(String(36), ForeignKey("meetings.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    size = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    meeting = relationship("Meeting", back_populates="files")


class MeetingAnalysis(Base):
    """Action-item table extracted from a meeting transcript (append-only)."""
    __tablename__ = "meeting_analyses"

    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    meeting_id = Column(String(36), ForeignKey("meetings.id"), nullable=True)
    transcript = Column(Text, nullable=False)
    analysis = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class AIResearchResult(Base):
    """General research query and result (append-only)."""
    __tablename__ = "ai_research_results"

    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    query = Column(Text, nullable=False)
    result = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class MarketAnalysis(Base):
    """Market analysis query and result (append-only)."""
    __tablename__ = "market_analyses"

    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    query = Column(Text, nullable=False)
    result = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class SwotAnalysis(Base):
    """SWOT analysis parameters and result (append-only)."""
    __tablename__ = "swot_analyses"

    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), nullable=False, index=True)
    industry = Column(String, nullable=True)
    competitors = Column(JSON, nullable=True)
    analysis_mode = Column(String, nullable=False, default="auto")
    result = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)


class ProjectReadme(Base):
    """Structured project summary, at most one per project."""
    __tablename__ = "project_readmes"

    id = Column(String(36), primary_key=True, default=_new_id)
    project_id = Column(String(36), ForeignKey("projects.id"), unique=True, nullable=False)
    title = Column(String(80), nullable=False)
    description = Column(Text, nullable=True)
    purpose = Column(Text, nullable=True)
    scope = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="Proposed")
    owner_id = Column(String(36), ForeignKey("project_team_members.id"), nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    updated_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    owner = relationship("TeamMember")
    updated_by_user = relationship("User")
