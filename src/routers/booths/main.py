from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.database import get_db
from src.routers.booth_analysis import controllers as booth_analysis
from src.utils.responses import success_response
from . import controllers

# Defining the router
router = APIRouter(
    prefix="/api/booths",
    tags=["Booths"],
    responses={404: {"description": "Not found"}},
)


@router.get("/constituency/{ac_id}")
def get_constituency_booths(
    ac_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    booths = controllers.list_constituency_booths(db, ac_id, election_id=election_id, year=year)
    return success_response(booths, count=len(booths))


@router.get("/{booth_id}/results")
def get_booth_results(
    booth_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Candidate results of a booth, ranked, with vote share of votes cast.
    """
    return success_response(booth_analysis.get_booth_results(db, booth_id, election_id=election_id, year=year))


@router.get("/{booth_id}")
def get_booth(
    booth_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Booth details: constituency context, voter density, ranked results and
    a summary with winner and margin.
    """
    return success_response(booth_analysis.get_booth_details(db, booth_id, election_id=election_id, year=year))
