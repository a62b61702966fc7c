# src/routers/candidates/controllers.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from src.routers.booth_analysis import aggregation as agg
from src.routers.election_data.accessor import ElectionDataAccessor
from src.routers.election_data.schemas import CandidateRow
from src.routers.election_data.utilities import election_info, parse_positive_id, resolve_election
from src.utils.exceptions import NotFound


def _require_candidate(data: ElectionDataAccessor, candidate_id: Any) -> CandidateRow:
    candidate = data.get_candidate(parse_positive_id(candidate_id, "candidate ID"))
    if not candidate:
        raise NotFound("Candidate not found")
    return candidate


def get_candidate(db: Session, candidate_id: Any) -> Dict[str, Any]:
    return _require_candidate(ElectionDataAccessor(db), candidate_id).model_dump()


def get_candidate_performance(db: Session, candidate_id: Any, election_id: Any = None, year: Any = None) -> Dict[str, Any]:
    """
    Votes of a candidate per constituency, with the share of all votes
    secured there and the candidate's rank among that constituency's field.
    """
    data = ElectionDataAccessor(db)
    candidate = _require_candidate(data, candidate_id)
    election = resolve_election(data, election_id, year)

    rows = data.list_candidate_results(candidate.candidate_id, election.election_id)
    all_votes = data.get_constituency_vote_totals([row.ac_id for row in rows], election.election_id)

    performance = []
    for row in rows:
        field = agg.candidate_totals(data.list_booth_results(election.election_id, ac_id=row.ac_id))
        ranks = [c["candidate_id"] for c in field]
        performance.append({
            "ac_id": row.ac_id,
            "ac_name": row.ac_name,
            "total_votes": row.votes,
            "vote_percentage": agg.vote_share_percentage(row.votes, all_votes.get(row.ac_id, 0)),
            "rank_in_constituency": ranks.index(candidate.candidate_id) + 1,
        })
    performance.sort(key=lambda p: (-p["total_votes"], p["ac_id"]))

    return {
        "candidate": {
            "candidate_id": candidate.candidate_id,
            "candidate_name": candidate.candidate_name,
            "party_name": candidate.party_name,
            "party_symbol": candidate.party_symbol,
        },
        "performance": performance,
        "election": election_info(election),
    }
