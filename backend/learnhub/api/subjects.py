"""
Subjects API: content grouped by challenge subject, across topics.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from learnhub.config import settings
from learnhub.database import get_db
from learnhub.schemas.hierarchy import SubjectGroupsResponse
from learnhub.services.entity_store import fetch_content
from learnhub.services.subjects import group_by_subject

router = APIRouter(prefix="/subjects", tags=["subjects"])


@router.get("/groups", response_model=SubjectGroupsResponse)
def get_subject_groups(subject: list[str] | None = Query(None), db: Session = Depends(get_db)):
    """Pass ?subject=Art&subject=Music to choose subjects and their order; default is the configured list."""
    subjects = subject or settings.challenge_subject_list
    return SubjectGroupsResponse(groups=group_by_subject(fetch_content(db), subjects))
