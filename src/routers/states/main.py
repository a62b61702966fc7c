from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.database import get_db
from src.utils.responses import success_response
from . import controllers

# Defining the router
router = APIRouter(
    prefix="/api/states",
    tags=["States"],
    responses={404: {"description": "Not found"}},
)


@router.get("")
def list_states(db: Session = Depends(get_db)):
    states = controllers.list_states(db)
    return success_response(states, count=len(states))


@router.get("/{state_id}")
def get_state(state_id: str, db: Session = Depends(get_db)):
    return success_response(controllers.get_state(db, state_id))


@router.get("/{state_id}/assemblies")
def get_state_assemblies(
    state_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Assembly constituencies of a state, ordered by AC number.
    """
    assemblies = controllers.get_state_assemblies(db, state_id, election_id=election_id, year=year)
    return success_response(assemblies, count=len(assemblies))


@router.get("/{state_id}/stats")
def get_state_stats(
    state_id: str,
    election_id: Optional[str] = Query(None),
    year: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    return success_response(controllers.get_state_stats(db, state_id, election_id=election_id, year=year))
