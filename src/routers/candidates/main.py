from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.database import get_db
from src.utils.responses import success_response
from . import controllers

# Defining the router
router = APIRouter(
    prefix="/api/candidates",
    tags=["Candidates"],
    responses={404: {"description": "Not found"}},
)


@router.get("/{candidate_id}")
def get_candidate(candidate_id: str, db: Session = Depends(get_db)):
    return success_response(controllers.get_candidate(db, candidate_id))


@router.get("/{candidate_id}/performance")
def get_candidate_performance(
    candidate_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    data = controllers.get_candidate_performance(db, candidate_id, election_id=election_id, year=year)
    return success_response(data)
