from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.database import get_db
from src.utils.responses import success_response
from . import controllers

# Defining the router
router = APIRouter(
    prefix="/api/elections",
    tags=["Elections"],
    responses={404: {"description": "Not found"}},
)


@router.get("")
def list_elections(db: Session = Depends(get_db)):
    elections = controllers.list_elections(db)
    return success_response(elections, count=len(elections))


@router.get("/results")
def election_results(
    constituency_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    election_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Candidate results of a constituency for one election, ranked by votes.
    """
    data = controllers.get_results(db, constituency_id, election_id=election_id, year=year)
    return success_response(data["results"], election=data["election"])


@router.get("/vote-share-trend")
def vote_share_trend(constituency_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    data = controllers.get_vote_share_trend(db, constituency_id)
    return success_response(data["trend"], parties=data["parties"])


@router.get("/turnout-trend")
def turnout_trend(constituency_id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    return success_response(controllers.get_turnout_trend(db, constituency_id))
