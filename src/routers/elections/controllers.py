# src/routers/elections/controllers.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from src.routers.booth_analysis import aggregation as agg
from src.routers.election_data.accessor import ElectionDataAccessor
from src.routers.election_data.utilities import (
    election_info,
    parse_positive_id,
    require_constituency,
    resolve_election,
)
from src.utils.exceptions import InvalidArgument


def _constituency_id(value: Any) -> int:
    if value is None or value == "":
        raise InvalidArgument("Constituency ID is required")
    return parse_positive_id(value, "constituency ID")


def ranked_candidates(data: ElectionDataAccessor, ac_id: int, election_id: int) -> List[Dict[str, Any]]:
    """Constituency-level candidate totals, ranked, with vote share of all votes secured."""
    totals = agg.candidate_totals(data.list_booth_results(election_id, ac_id=ac_id))
    all_votes = sum(c["votes"] for c in totals)
    return [
        {
            "rank": index + 1,
            **candidate,
            "percentage": agg.vote_share_percentage(candidate["votes"], all_votes),
        }
        for index, candidate in enumerate(totals)
    ]


def list_elections(db: Session) -> List[Dict[str, Any]]:
    return [e.model_dump() for e in ElectionDataAccessor(db).list_elections()]


def get_results(db: Session, constituency_id: Any, election_id: Any = None, year: Any = None) -> Dict[str, Any]:
    ac_id = _constituency_id(constituency_id)
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    require_constituency(data, ac_id)
    return {
        "results": ranked_candidates(data, ac_id, election.election_id),
        "election": election_info(election),
    }


def get_vote_share_trend(db: Session, constituency_id: Any) -> Dict[str, Any]:
    """
    Party vote share per election year, newest first. Parties are keyed by
    symbol (falling back to the party name) so charts can line them up.
    """
    ac_id = _constituency_id(constituency_id)
    data = ElectionDataAccessor(db)
    require_constituency(data, ac_id)

    by_election: Dict[int, list] = {}
    for r in data.list_constituency_results_history(ac_id):
        by_election.setdefault(r.election_id, []).append(r)

    trend = []
    symbols: List[str] = []
    for results in sorted(by_election.values(), key=lambda rows: -(rows[0].election_year or 0)):
        all_votes = sum(r.votes_secured for r in results)
        parties: Dict[str, Dict[str, Any]] = {}
        for r in results:
            key = r.party_symbol or r.party_name or "Independent"
            party = parties.setdefault(key, {"name": r.party_name or "Independent", "votes": 0})
            party["votes"] += r.votes_secured
        ordered = sorted(parties.items(), key=lambda item: (-item[1]["votes"], item[0]))
        for key, party in ordered:
            party["percentage"] = agg.vote_share_percentage(party["votes"], all_votes)
            if key not in symbols:
                symbols.append(key)
        trend.append({
            "year": results[0].election_year,
            "election_id": results[0].election_id,
            "parties": dict(ordered),
        })

    return {"trend": trend, "parties": symbols}


def get_turnout_trend(db: Session, constituency_id: Any) -> List[Dict[str, Any]]:
    ac_id = _constituency_id(constituency_id)
    data = ElectionDataAccessor(db)
    require_constituency(data, ac_id)
    return [
        {
            "election_id": row.election_id,
            "election_year": row.election_year,
            "total_votes": row.total_votes_cast,
            "total_electors": row.total_electors,
            "turnout_percentage": agg.turnout_percentage(row.total_votes_cast, row.total_electors),
        }
        for row in data.list_constituency_turnout_history(ac_id)
    ]
