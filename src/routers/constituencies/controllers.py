# src/routers/constituencies/controllers.py
from typing import Any, Dict, List, Tuple

from loguru import logger
from sqlalchemy.orm import Session

from src.config import BOOTH_PAGE_LIMIT, CONSTITUENCY_PAGE_LIMIT, MAX_PAGE_LIMIT
from src.routers.booth_analysis import aggregation as agg
from src.routers.elections.controllers import ranked_candidates
from src.routers.election_data.accessor import ElectionDataAccessor
from src.routers.election_data.schemas import ConstituencyRow
from src.routers.election_data.utilities import (
    booth_metrics,
    election_info,
    group_results_by_booth,
    parse_page,
    parse_positive_id,
    require_constituency,
    resolve_election,
)


def _constituency_block(ac: ConstituencyRow, total_electors: int, total_booths: int) -> Dict[str, Any]:
    return {
        "constituency_id": ac.ac_id,
        "constituency_name": ac.ac_name,
        "ac_number": ac.ac_number,
        "district": ac.district_name,
        "district_id": ac.district_id,
        "state_id": ac.state_id,
        "state_name": ac.state_name,
        "total_voters": total_electors,
        "polling_booths": total_booths,
        "category": agg.constituency_category(ac.ac_name),
    }


def _winner_and_margin(candidates: List[Dict[str, Any]]) -> Tuple[Any, int, float]:
    winner = candidates[0] if candidates else None
    runner_up = candidates[1] if len(candidates) > 1 else None
    margin = agg.victory_margin([c["votes"] for c in candidates])
    margin_percentage = round(winner["percentage"] - runner_up["percentage"], 2) if runner_up else 0
    return winner, margin, margin_percentage


def list_constituencies(
    db: Session,
    page: Any = None,
    limit: Any = None,
    state_id: Any = None,
    election_id: Any = None,
    year: Any = None,
) -> Dict[str, Any]:
    """One page of constituencies (by state name, then AC number) with the total count."""
    page = parse_page(page, 1)
    limit = parse_page(limit, CONSTITUENCY_PAGE_LIMIT, MAX_PAGE_LIMIT)
    state = parse_positive_id(state_id, "state ID") if state_id not in (None, "") else None

    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    rows = data.list_constituencies(election.election_id, state_id=state, limit=limit, offset=(page - 1) * limit)
    total = data.count_constituencies(state_id=state)

    return {
        "items": [_constituency_block(ac, ac.total_electors, ac.total_booths) for ac in rows],
        "page": page,
        "limit": limit,
        "total": total,
    }


def get_constituency_details(db: Session, ac_id: Any, election_id: Any = None, year: Any = None) -> Dict[str, Any]:
    ac_id = parse_positive_id(ac_id, "constituency ID")
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    constituency = require_constituency(data, ac_id)

    totals = data.get_constituency_totals(ac_id, election.election_id)
    candidates = ranked_candidates(data, ac_id, election.election_id)
    winner, margin, margin_percentage = _winner_and_margin(candidates)

    return {
        "constituency": _constituency_block(constituency, totals.total_electors, totals.total_booths),
        "election_results": candidates,
        "turnout": {
            "total_booths": totals.total_booths,
            "total_votes_cast": totals.total_votes_cast,
            "total_electors": totals.total_electors,
            "turnout_percentage": agg.turnout_percentage(totals.total_votes_cast, totals.total_electors),
        },
        "winning_candidate": winner,
        "victory_margin": margin,
        "victory_percentage": margin_percentage,
        "election": election_info(election),
    }


def get_constituency_stats(db: Session, ac_id: Any, election_id: Any = None, year: Any = None) -> Dict[str, Any]:
    ac_id = parse_positive_id(ac_id, "constituency ID")
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    require_constituency(data, ac_id)

    totals = data.get_constituency_totals(ac_id, election.election_id)
    winner, margin, margin_percentage = _winner_and_margin(ranked_candidates(data, ac_id, election.election_id))

    return {
        "constituency_id": ac_id,
        "total_voters": totals.total_electors,
        "polling_booths": totals.total_booths,
        "male_voters": totals.male_voters,
        "female_voters": totals.female_voters,
        "other_voters": totals.other_voters,
        "total_votes_cast": totals.total_votes_cast,
        "turnout": agg.turnout_percentage(totals.total_votes_cast, totals.total_electors),
        "winner": winner,
        "margin": margin,
        "margin_percentage": margin_percentage,
        "election": election_info(election),
    }


def list_constituency_booths(
    db: Session,
    ac_id: Any,
    page: Any = None,
    limit: Any = None,
    election_id: Any = None,
    year: Any = None,
) -> Dict[str, Any]:
    ac_id = parse_positive_id(ac_id, "constituency ID")
    page = parse_page(page, 1)
    limit = parse_page(limit, BOOTH_PAGE_LIMIT, MAX_PAGE_LIMIT)
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    require_constituency(data, ac_id)

    # booth numbers are text, so numeric ordering and paging happen here
    booths = data.list_booths(ac_id, election.election_id)
    page_rows = booths[(page - 1) * limit: page * limit]
    results = group_results_by_booth(
        data.list_booth_results(election.election_id, booth_ids=[b.booth_id for b in page_rows])
    )

    items = []
    for booth in page_rows:
        metrics = booth_metrics(booth)
        metrics["booth_turnout"] = metrics.pop("turnout_percentage")
        metrics["candidate_count"] = len(results.get(booth.booth_id, []))
        items.append(metrics)

    return {"items": items, "page": page, "limit": limit, "total": data.count_booths(ac_id)}


def get_constituency_demographics(db: Session, ac_id: Any, election_id: Any = None, year: Any = None) -> Dict[str, Any]:
    ac_id = parse_positive_id(ac_id, "constituency ID")
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    require_constituency(data, ac_id)

    totals = data.get_constituency_totals(ac_id, election.election_id)
    shares = agg.demographic_percentages(
        totals.male_voters, totals.female_voters, totals.other_voters, totals.total_electors
    )
    return {
        "gender_distribution": {
            "male": agg.round_half_up(shares["male_percentage"]),
            "female": agg.round_half_up(shares["female_percentage"]),
            "other": agg.round_half_up(shares["other_percentage"]),
        },
        "total_electors": totals.total_electors,
        "male_voters": totals.male_voters,
        "female_voters": totals.female_voters,
        "other_voters": totals.other_voters,
        "election": election_info(election),
    }


def get_historical_mlas(db: Session, ac_id: Any) -> List[Dict[str, Any]]:
    """Winner of the constituency in every election with results, newest first."""
    ac_id = parse_positive_id(ac_id, "constituency ID")
    data = ElectionDataAccessor(db)
    require_constituency(data, ac_id)

    by_election: Dict[int, list] = {}
    for r in data.list_constituency_results_history(ac_id):
        by_election.setdefault(r.election_id, []).append(r)

    winners = []
    for election_id, results in by_election.items():
        candidates = agg.candidate_totals(results)
        winner = candidates[0]
        all_votes = sum(c["votes"] for c in candidates)
        winners.append({
            "election_id": election_id,
            "election_year": results[0].election_year,
            "candidate_id": winner["candidate_id"],
            "candidate_name": winner["candidate_name"],
            "party_name": winner["party_name"],
            "votes": winner["votes"],
            "vote_percentage": agg.vote_share_percentage(winner["votes"], all_votes),
            "margin": agg.victory_margin([c["votes"] for c in candidates]),
            "rank": 1,
            "is_winner": True,
        })

    winners.sort(key=lambda w: (-(w["election_year"] or 0), w["election_id"]))
    logger.info(f"{len(winners)} historical winners found for constituency {ac_id}")
    return winners
