# src/routers/states/controllers.py
from typing import Any, Dict, List

from loguru import logger
from sqlalchemy.orm import Session

from src.routers.booth_analysis.aggregation import constituency_category
from src.routers.election_data.accessor import ElectionDataAccessor
from src.routers.election_data.schemas import StateRow
from src.routers.election_data.utilities import election_info, parse_positive_id, resolve_election
from src.utils.exceptions import NotFound


def _require_state(data: ElectionDataAccessor, state_id: Any) -> StateRow:
    state = data.get_state(parse_positive_id(state_id, "state ID"))
    if not state:
        raise NotFound("State not found")
    return state


def list_states(db: Session) -> List[Dict[str, Any]]:
    return [s.model_dump() for s in ElectionDataAccessor(db).list_states()]


def get_state(db: Session, state_id: Any) -> Dict[str, Any]:
    return _require_state(ElectionDataAccessor(db), state_id).model_dump()


def get_state_assemblies(db: Session, state_id: Any, election_id: Any = None, year: Any = None) -> List[Dict[str, Any]]:
    """Assembly constituencies of a state with electors, booth count and reservation category."""
    data = ElectionDataAccessor(db)
    state = _require_state(data, state_id)
    election = resolve_election(data, election_id, year)

    assemblies = []
    for ac in data.list_constituencies(election.election_id, state_id=state.state_id):
        category = constituency_category(ac.ac_name)
        assemblies.append({
            "constituency_id": ac.ac_id,
            "constituency_name": ac.ac_name,
            "ac_number": ac.ac_number,
            "district": ac.district_name,
            "district_id": ac.district_id,
            "state_id": state.state_id,
            "state_name": state.state_name,
            "total_voters": ac.total_electors,
            "polling_booths": ac.total_booths,
            "category": category,
            "reserved_for": category if category != "GEN" else None,
        })
    logger.info(f"{len(assemblies)} assemblies found for state {state.state_id}")
    return assemblies


def get_state_stats(db: Session, state_id: Any, election_id: Any = None, year: Any = None) -> Dict[str, Any]:
    data = ElectionDataAccessor(db)
    state = _require_state(data, state_id)
    election = resolve_election(data, election_id, year)
    stats = data.get_state_stats(state.state_id, election.election_id)
    return {
        "state_id": state.state_id,
        "state_name": state.state_name,
        **stats.model_dump(),
        "election": election_info(election),
    }
