"""CRUD API router for clients, projects, team members and meetings."""

from fastapi import APIRouter, Depends, Query
from typing import Optional, List
from consultant_hub.api.dependencies import get_repo
from consultant_hub.errors import NotFoundError
from consultant_hub.records.repo import RecordRepository
from consultant_hub.records.schemas import (
    ClientCreate,
    ClientUpdate,
    ClientRead,
    ClientPersonaUpsert,
    ClientPersonaRead,
    ProjectCreate,
    ProjectUpdate,
    ProjectRead,
    ProjectDetail,
    TeamMemberCreate,
    TeamMemberUpdate,
    TeamMemberRead,
    MeetingCreate,
    MeetingUpdate,
    MeetingRead,
    MeetingFileCreate,
    MeetingFileRead,
    MeetingAnalysisRead,
    ResearchResultRead,
    MarketAnalysisRead,
    SwotAnalysisRead,
    HistoryRead
)


router = APIRouter(prefix="/api", tags=["records"])


def _found(record, resource: str, record_id: str):
    if record is None:
        raise NotFoundError(resource, record_id)
    return record


# Clients
@router.get("/clients", response_model=List[ClientRead])
async def list_clients(repo: RecordRepository = Depends(get_repo)):
    return [ClientRead.model_validate(c) for c in repo.list_clients()]


@router.post("/clients", response_model=ClientRead, status_code=201)
async def create_client(client_data: ClientCreate, repo: RecordRepository = Depends(get_repo)):
    return ClientRead.model_validate(repo.create_client(client_data))


@router.get("/clients/{client_id}", response_model=ClientRead)
async def get_client(client_id: str, repo: RecordRepository = Depends(get_repo)):
    return ClientRead.model_validate(_found(repo.get_client(client_id), "Client", client_id))


@router.patch("/clients/{client_id}", response_model=ClientRead)
async def update_client(client_id: str, update_data: ClientUpdate, repo: RecordRepository = Depends(get_repo)):
    return ClientRead.model_validate(_found(repo.update_client(client_id, update_data), "Client", client_id))


@router.get("/clients/{client_id}/persona", response_model=ClientPersonaRead)
async def get_client_persona(client_id: str, repo: RecordRepository = Depends(get_repo)):
    persona = _found(repo.get_client_persona(client_id), "Client persona", client_id)
    return ClientPersonaRead.model_validate(persona)


@router.put("/clients/{client_id}/persona", response_model=ClientPersonaRead)
async def upsert_client_persona(
    client_id: str,
    persona_data: ClientPersonaUpsert,
    repo: RecordRepository = Depends(get_repo)
):
    return ClientPersonaRead.model_validate(repo.upsert_client_persona(client_id, persona_data))


# Projects
@router.get("/projects", response_model=List[ProjectRead])
async def list_projects(
    client_id: Optional[str] = Query(None),
    repo: RecordRepository = Depends(get_repo)
):
    return [ProjectRead.model_validate(p) for p in repo.list_projects(client_id)]


@router.post("/projects", response_model=ProjectRead, status_code=201)
async def create_project(project_data: ProjectCreate, repo: RecordRepository = Depends(get_repo)):
    return ProjectRead.model_validate(repo.create_project(project_data))


@router.get("/projects/{project_id}", response_model=ProjectDetail)
async def get_project(project_id: str, repo: RecordRepository = Depends(get_repo)):
    """Project with its client and team."""
    return ProjectDetail.model_validate(_found(repo.get_project(project_id), "Project", project_id))


@router.patch("/projects/{project_id}", response_model=ProjectRead)
async def update_project(project_id: str, update_data: ProjectUpdate, repo: RecordRepository = Depends(get_repo)):
    return ProjectRead.model_validate(_found(repo.update_project(project_id, update_data), "Project", project_id))


# Team members
@router.get("/projects/{project_id}/team", response_model=List[TeamMemberRead])
async def list_team_members(project_id: str, repo: RecordRepository = Depends(get_repo)):
    _found(repo.get_project(project_id), "Project", project_id)
    return [TeamMemberRead.model_validate(m) for m in repo.list_team_members(project_id)]


@router.post("/projects/{project_id}/team", response_model=TeamMemberRead, status_code=201)
async def create_team_member(
    project_id: str,
    member_data: TeamMemberCreate,
    repo: RecordRepository = Depends(get_repo)
):
    return TeamMemberRead.model_validate(repo.create_team_member(project_id, member_data))


@router.patch("/team/{member_id}", response_model=TeamMemberRead)
async def update_team_member(member_id: str, update_data: TeamMemberUpdate, repo: RecordRepository = Depends(get_repo)):
    member = _found(repo.update_team_member(member_id, update_data), "Team member", member_id)
    return TeamMemberRead.model_validate(member)


# Meetings
@router.get("/projects/{project_id}/meetings", response_model=List[MeetingRead])
async def list_meetings(project_id: str, repo: RecordRepository = Depends(get_repo)):
    """Meetings of a project, newest first."""
    _found(repo.get_project(project_id), "Project", project_id)
    return [MeetingRead.model_validate(m) for m in repo.list_meetings(project_id)]


@router.post("/projects/{project_id}/meetings", response_model=MeetingRead, status_code=201)
async def create_meeting(project_id: str, meeting_data: MeetingCreate, repo: RecordRepository = Depends(get_repo)):
    return MeetingRead.model_validate(repo.create_meeting(project_id, meeting_data))


@router.get("/meetings/{meeting_id}", response_model=MeetingRead)
async def get_meeting(meeting_id: str, repo: RecordRepository = Depends(get_repo)):
    return MeetingRead.model_validate(_found(repo.get_meeting(meeting_id), "Meeting", meeting_id))


@router.patch("/meetings/{meeting_id}", response_model=MeetingRead)
async def update_meeting(meeting_id: str, update_data: MeetingUpdate, repo: RecordRepository = Depends(get_repo)):
    return MeetingRead.model_validate(_found(repo.update_meeting(meeting_id, update_data), "Meeting", meeting_id))


@router.get("/meetings/{meeting_id}/files", response_model=List[MeetingFileRead])
async def list_meeting_files(meeting_id: str, repo: RecordRepository = Depends(get_repo)):
    _found(repo.get_meeting(meeting_id), "Meeting", meeting_id)
    return [MeetingFileRead.model_validate(f) for f in repo.list_meeting_files(meeting_id)]


@router.post("/meetings/{meeting_id}/files", response_model=MeetingFileRead, status_code=201)
async def add_meeting_file(meeting_id: str, file_data: MeetingFileCreate, repo: RecordRepository = Depends(get_repo)):
    return MeetingFileRead.model_validate(repo.add_meeting_file(meeting_id, file_data))


# Analysis history
@router.get("/history", response_model=HistoryRead)
async def get_history(
    project_id: Optional[str] = Query(None, description="Limit to one project; all projects when omitted"),
    repo: RecordRepository = Depends(get_repo)
):
    history = repo.get_history(project_id)
    return HistoryRead(
        meeting_analyses=[MeetingAnalysisRead.model_validate(r) for r in history["meeting_analyses"]],
        research=[ResearchResultRead.model_validate(r) for r in history["research"]],
        market_analyses=[MarketAnalysisRead.model_validate(r) for r in history["market_analyses"]],
        swot_analyses=[SwotAnalysisRead.model_validate(r) for r in history["swot_analyses"]]
    )
