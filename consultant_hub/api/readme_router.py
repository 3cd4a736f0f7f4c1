"""Project readme API router."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from consultant_hub.api.dependencies import get_repo
from consultant_hub.auth.session import SessionContext, get_session_context
from consultant_hub.errors import NotFoundError
from consultant_hub.records.repo import RecordRepository
from consultant_hub.records.schemas import ReadmeRead, ReadmeUpsert
from consultant_hub.utils.logging_utils import StructuredLogger


router = APIRouter(prefix="/api/projects", tags=["readme"])

logger = StructuredLogger("consultant_hub.readme")


@router.get("/{project_id}/readme", response_model=ReadmeRead)
async def get_readme(project_id: str, repo: RecordRepository = Depends(get_repo)):
    """
    Return the project's readme joined with owner and last editor.

    A missing readme is a normal state: 404 with ``exists: false``.
    """
    readme = repo.get_readme_by_project(project_id)
    if not readme:
        return JSONResponse(status_code=404, content={"error": "Readme not found", "exists": False})
    return ReadmeRead.from_record(readme)


@router.post("/{project_id}/readme", response_model=ReadmeRead)
async def upsert_readme(
    project_id: str,
    readme_data: ReadmeUpsert,
    repo: RecordRepository = Depends(get_repo),
    session: SessionContext = Depends(get_session_context)
):
    """Create or update the project's readme; the caller becomes the last editor."""
    if not repo.get_project(project_id):
        raise NotFoundError("Project", project_id)

    readme = repo.upsert_readme_by_project(project_id, readme_data, updated_by=session.user_id)
    logger.info("Readme saved", project_id=project_id, readme_id=readme.id, user_id=session.user_id)
    return ReadmeRead.from_record(readme)
