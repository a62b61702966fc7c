# src/routers/election_data/utilities.py
from typing import Any, Dict, Iterable, List, Optional

from src.config import DEFAULT_ELECTION_ID
from src.utils.exceptions import InvalidArgument, NotFound
from src.routers.booth_analysis.aggregation import rank_results, turnout_percentage, winning_entry
from .accessor import ElectionDataAccessor
from .schemas import BoothResultRow, BoothTurnoutRow, ConstituencyRow, ElectionRow


def parse_positive_id(value: Any, label: str = "ID") -> int:
    """Accept ints or numeric strings greater than zero."""
    if isinstance(value, bool):
        raise InvalidArgument(f"Invalid {label}. Must be a positive number.")
    try:
        parsed = int(str(value).strip()) if value is not None else None
    except (TypeError, ValueError):
        parsed = None
    if parsed is None or parsed <= 0:
        raise InvalidArgument(f"Invalid {label}. Must be a positive number.")
    return parsed


def parse_page(value: Any, default: int, maximum: Optional[int] = None) -> int:
    if value is None or value == "":
        return default
    parsed = parse_positive_id(value, "pagination parameter")
    if maximum is not None:
        parsed = min(parsed, maximum)
    return parsed


def resolve_election(
    data: ElectionDataAccessor,
    election_id: Any = None,
    year: Any = None,
) -> ElectionRow:
    """Pick the election a request is scoped to: explicit year, explicit id, or the default."""
    if year is not None and year != "":
        election_year = parse_positive_id(year, "election year")
        election = data.get_election_by_year(election_year)
        if not election:
            raise NotFound(f"No election found for year {election_year}")
        return election

    if election_id is not None and election_id != "":
        selected = parse_positive_id(election_id, "election ID")
    else:
        selected = DEFAULT_ELECTION_ID
    election = data.get_election(selected)
    if not election:
        raise NotFound("Election not found")
    return election


def require_constituency(data: ElectionDataAccessor, ac_id: int) -> ConstituencyRow:
    constituency = data.get_constituency(ac_id)
    if not constituency:
        raise NotFound("Constituency not found")
    return constituency


def election_info(election: ElectionRow) -> Dict[str, int]:
    return {"election_id": election.election_id, "election_year": election.election_year}


def group_results_by_booth(results: Iterable[BoothResultRow]) -> Dict[int, List[BoothResultRow]]:
    """Results per booth, each list ranked (votes desc, lowest candidate id first)."""
    grouped: Dict[int, List[BoothResultRow]] = {}
    for r in results:
        grouped.setdefault(r.booth_id, []).append(r)
    return {booth_id: rank_results(rows) for booth_id, rows in grouped.items()}


def booth_metrics(booth: BoothTurnoutRow) -> Dict[str, Any]:
    return {
        "booth_id": booth.booth_id,
        "booth_number": booth.booth_number,
        "booth_name": booth.booth_name,
        "ac_id": booth.ac_id,
        "total_electors": booth.total_electors,
        "total_votes_cast": booth.total_votes_cast,
        "male_voters": booth.male_voters,
        "female_voters": booth.female_voters,
        "other_voters": booth.other_voters,
        "turnout_percentage": turnout_percentage(booth.total_votes_cast, booth.total_electors),
    }


def winner_fields(results: List[BoothResultRow]) -> Dict[str, Any]:
    entry = winning_entry((r.candidate_id, r.votes_secured) for r in results)
    winner = next(r for r in results if r.candidate_id == entry[0]) if entry else None
    return {
        "winning_party": winner.party_name if winner else None,
        "winning_candidate": winner.candidate_name if winner else None,
        "winning_votes": winner.votes_secured if winner else 0,
    }
