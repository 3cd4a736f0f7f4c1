"""Shared FastAPI dependencies."""

from fastapi import Depends
from sqlalchemy.orm import Session
from consultant_hub.db.session import get_db
from consultant_hub.records.repo import RecordRepository


def get_repo(db: Session = Depends(get_db)) -> RecordRepository:
    """Repository bound to the request's database session."""
    return RecordRepository(db)
