# src/routers/booths/controllers.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from src.routers.election_data.accessor import ElectionDataAccessor
from src.routers.election_data.utilities import (
    booth_metrics,
    parse_positive_id,
    require_constituency,
    resolve_election,
)


def list_constituency_booths(db: Session, ac_id: Any, election_id: Any = None, year: Any = None) -> List[Dict[str, Any]]:
    """All booths of a constituency with turnout, in booth-number order."""
    ac_id = parse_positive_id(ac_id, "constituency ID")
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    require_constituency(data, ac_id)
    return [
        {
            "booth_id": booth.booth_id,
            "booth_number": booth.booth_number,
            "booth_name": booth.booth_name,
            "total_electors": booth.total_electors,
            "total_votes_cast": booth.total_votes_cast,
            "turnout_percentage": booth_metrics(booth)["turnout_percentage"],
        }
        for booth in data.list_booths(ac_id, election.election_id)
    ]
