from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from loguru import logger
from sqlalchemy.orm import Session

from src.database import get_db
from src.utils.responses import success_response
from . import controllers
from . import schemas

# Defining the router
router = APIRouter(
    prefix="/api/booth-analysis",
    tags=["Booth Analysis"],
    responses={404: {"description": "Not found"}},
)


@router.get("/constituency/{ac_id}/booth-analysis")
def constituency_booth_analysis(
    ac_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Booth-wise analysis of a constituency: metrics and winner per booth,
    party dominance, summary and insights.
    """
    data = controllers.get_constituency_booth_analysis(db, ac_id, election_id=election_id, year=year)
    return success_response(data)


@router.get("/party-performance/{ac_id}/{party_name}")
def party_performance(
    ac_id: str,
    party_name: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Booth-wise performance of one party in a constituency (exact party name)."""
    data = controllers.get_party_performance(db, ac_id, party_name, election_id=election_id, year=year)
    return success_response(data)


@router.get("/clusters/{ac_id}")
def booth_clusters(
    ac_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    data = controllers.get_booth_clusters(db, ac_id, election_id=election_id, year=year)
    return success_response(data)


@router.post("/compare")
def compare_booths(
    payload: Optional[schemas.CompareBoothsRequest] = Body(None),
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Compare several booths side by side.
    Body: `{"boothIds": [1, 2, 3]}`
    """
    booth_ids = payload.boothIds if payload else None
    logger.info(f"Comparing booths {booth_ids}")
    data = controllers.compare_booths(db, booth_ids, election_id=election_id, year=year)
    return success_response(data)


@router.get("/trends/{booth_id}")
def booth_trends(booth_id: str, db: Session = Depends(get_db)):
    """Turnout and party vote share of a booth across elections."""
    data = controllers.get_booth_trends(db, booth_id)
    return success_response(data)


@router.get("/recommendations/{ac_id}")
def recommendations(
    ac_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Strategic category per booth (HighlyCompetitive, LowTurnoutOpportunity,
    HighDensityStrategic, Stronghold, Standard), highest priority first.
    """
    data = controllers.get_recommendations(db, ac_id, election_id=election_id, year=year)
    return success_response(data)


@router.get("/demographics/{ac_id}")
def demographics(
    ac_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    data = controllers.get_demographics(db, ac_id, election_id=election_id, year=year)
    return success_response(data)


@router.get("/heatmap/{ac_id}")
def heatmap(
    ac_id: str,
    metric: Optional[str] = Query("turnout", description="turnout | voters"),
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    data = controllers.get_heatmap(db, ac_id, metric=metric, election_id=election_id, year=year)
    return success_response(data)
