from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.database import get_db
from src.routers.booth_analysis import controllers as booth_analysis
from src.utils.responses import paginated_response, success_response
from . import controllers

# Defining the router
router = APIRouter(
    prefix="/api/constituencies",
    tags=["Constituencies"],
    responses={404: {"description": "Not found"}},
)


@router.get("")
def list_constituencies(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    state_id: Optional[str] = Query(None),
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Paginated list of assembly constituencies (default 50 per page).
    """
    data = controllers.list_constituencies(
        db, page=page, limit=limit, state_id=state_id, election_id=election_id, year=year
    )
    return paginated_response(data["items"], data["page"], data["limit"], data["total"])


@router.get("/{ac_id}")
def get_constituency(
    ac_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return success_response(controllers.get_constituency_details(db, ac_id, election_id=election_id, year=year))


@router.get("/{ac_id}/stats")
def get_constituency_stats(
    ac_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return success_response(controllers.get_constituency_stats(db, ac_id, election_id=election_id, year=year))


@router.get("/{ac_id}/booths")
def get_constituency_booths(
    ac_id: str,
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Paginated booths of a constituency in booth-number order (default 100 per page).
    """
    data = controllers.list_constituency_booths(
        db, ac_id, page=page, limit=limit, election_id=election_id, year=year
    )
    return paginated_response(data["items"], data["page"], data["limit"], data["total"])


@router.get("/{ac_id}/demographics")
def get_constituency_demographics(
    ac_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return success_response(
        controllers.get_constituency_demographics(db, ac_id, election_id=election_id, year=year)
    )


@router.get("/{ac_id}/historical-mlas")
def get_historical_mlas(ac_id: str, db: Session = Depends(get_db)):
    return success_response(controllers.get_historical_mlas(db, ac_id))


@router.get("/{ac_id}/booth-analysis")
def get_booth_analysis(
    ac_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    data = booth_analysis.get_constituency_booth_analysis(db, ac_id, election_id=election_id, year=year)
    return success_response(data)
