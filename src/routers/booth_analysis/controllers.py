# src/routers/booth_analysis/controllers.py
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger
from sqlalchemy.orm import Session

from src.routers.election_data.accessor import ElectionDataAccessor, booth_number_key
from src.routers.election_data.utilities import (
    booth_metrics,
    election_info,
    group_results_by_booth,
    parse_positive_id,
    require_constituency,
    resolve_election,
    winner_fields,
)
from src.utils.exceptions import InvalidArgument, NotFound
from . import aggregation as agg
from .aggregation import AnalyticsThresholds, DEFAULT_THRESHOLDS

HEATMAP_METRICS = ("turnout", "voters")


# -------------------------
# Booth details
# -------------------------
def get_booth_details(
    db: Session,
    booth_id: Any,
    election_id: Any = None,
    year: Any = None,
    thresholds: AnalyticsThresholds = DEFAULT_THRESHOLDS,
) -> Dict[str, Any]:
    """
    Booth info with its constituency, ranked candidate results and a summary
    (winner, winning share and margin over the runner-up).
    """
    booth_id = parse_positive_id(booth_id, "booth ID")
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)

    booth = data.get_booth(booth_id, election.election_id)
    if not booth:
        raise NotFound("Booth not found")

    constituency = data.get_constituency(booth.ac_id)
    ranked = agg.rank_results(data.list_booth_results(election.election_id, booth_ids=[booth_id]))

    # turnout row total, or the sum of results when the turnout row is missing
    total_votes = booth.total_votes_cast or sum(r.votes_secured for r in ranked)
    results = [
        {
            "candidate_id": r.candidate_id,
            "candidate_name": r.candidate_name,
            "party_name": r.party_name,
            "party_symbol": r.party_symbol,
            "votes_secured": r.votes_secured,
            "vote_percentage": agg.vote_share_percentage(r.votes_secured, total_votes),
            "rank": index + 1,
        }
        for index, r in enumerate(ranked)
    ]

    constituency_booths = data.list_booths(booth.ac_id, election.election_id)
    metrics = booth_metrics(booth)
    booth_info = {
        **metrics,
        "location_lat": 0,
        "location_long": 0,
        "ac_name": constituency.ac_name if constituency else "Unknown",
        "ac_number": constituency.ac_number if constituency else 0,
        "district_name": (constituency.district_name if constituency else None) or "Unknown",
        "state_name": (constituency.state_name if constituency else None) or "Unknown",
        "constituency_avg_voters": agg.average((b.total_electors for b in constituency_booths), digits=0),
        "constituency_turnout": agg.average(
            agg.turnout_percentage(b.total_votes_cast, b.total_electors)
            for b in constituency_booths
            if b.total_electors > 0
        ),
        "total_booths_in_constituency": len(constituency_booths),
        "voter_density": agg.voter_density(booth.total_electors, thresholds),
    }

    votes_desc = [r.votes_secured for r in ranked]
    winner = results[0] if results else None
    summary = {
        "total_candidates": len(results),
        "total_votes": total_votes,
        "winning_candidate": winner["candidate_name"] if winner else None,
        "winning_party": winner["party_name"] if winner else None,
        "winning_votes": winner["votes_secured"] if winner else 0,
        "winning_percentage": winner["vote_percentage"] if winner else 0,
        "margin_votes": agg.victory_margin(votes_desc),
    }

    logger.info(f"Booth details prepared for booth {booth_id} ({len(results)} candidates)")
    return {
        "booth": booth_info,
        "results": results,
        "summary": summary,
        "election": election_info(election),
    }


def get_booth_results(db: Session, booth_id: Any, election_id: Any = None, year: Any = None) -> List[Dict[str, Any]]:
    details = get_booth_details(db, booth_id, election_id=election_id, year=year)
    return details["results"]


# -------------------------
# Constituency booth analysis
# -------------------------
def get_constituency_booth_analysis(
    db: Session,
    ac_id: Any,
    election_id: Any = None,
    year: Any = None,
    thresholds: AnalyticsThresholds = DEFAULT_THRESHOLDS,
) -> Dict[str, Any]:
    ac_id = parse_positive_id(ac_id, "constituency ID")
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    constituency = require_constituency(data, ac_id)
    logger.info(f"Analyzing booths for constituency {ac_id} (election {election.election_id})")

    booth_rows = data.list_booths(ac_id, election.election_id)
    results = group_results_by_booth(data.list_booth_results(election.election_id, ac_id=ac_id))

    booths = []
    dominance: Dict[str, Dict[str, Any]] = {}
    for booth in booth_rows:
        ranked = results.get(booth.booth_id, [])
        entry = {**booth_metrics(booth), **winner_fields(ranked)}
        entry["victory_margin"] = agg.victory_margin([r.votes_secured for r in ranked])
        entry["top_parties"] = [
            {**party, "percentage": agg.vote_share_percentage(party["votes"], booth.total_votes_cast)}
            for party in agg.party_totals(ranked)[:3]
        ]
        booths.append(entry)

        if ranked:
            party = entry["winning_party"] or "Independent"
            bucket = dominance.setdefault(party, {"party_name": party, "booths_won": 0, "total_votes": 0})
            bucket["booths_won"] += 1
            bucket["total_votes"] += entry["winning_votes"]

    party_dominance = sorted(
        dominance.values(), key=lambda p: (-p["booths_won"], -p["total_votes"], p["party_name"])
    )

    total_electors = sum(b["total_electors"] for b in booths)
    total_votes_cast = sum(b["total_votes_cast"] for b in booths)
    summary = {
        "ac_id": constituency.ac_id,
        "ac_name": constituency.ac_name,
        "total_booths": len(booths),
        "total_electors": total_electors,
        "total_votes_cast": total_votes_cast,
        "avg_turnout": agg.average(b["turnout_percentage"] for b in booths),
        "overall_turnout": agg.turnout_percentage(total_votes_cast, total_electors),
    }

    insights = {
        "high_turnout_booths": sum(1 for b in booths if b["turnout_percentage"] >= thresholds.high_turnout),
        "low_turnout_booths": sum(1 for b in booths if b["turnout_percentage"] < thresholds.medium_turnout),
        "large_booths": sum(1 for b in booths if b["total_electors"] > thresholds.high_density_electors),
        "leading_party": party_dominance[0]["party_name"] if party_dominance else "None",
        "total_booths_analyzed": len(booths),
    }

    return {
        "booths": booths,
        "party_dominance": party_dominance,
        "summary": summary,
        "insights": insights,
        "election": election_info(election),
    }


# -------------------------
# Party performance
# -------------------------
def get_party_performance(
    db: Session,
    ac_id: Any,
    party_name: Optional[str],
    election_id: Any = None,
    year: Any = None,
) -> Dict[str, Any]:
    """Booth-wise performance of one party; the name must match exactly."""
    ac_id = parse_positive_id(ac_id, "constituency ID")
    if not party_name or not party_name.strip():
        raise InvalidArgument("Party name is required")
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    require_constituency(data, ac_id)

    booth_rows = {b.booth_id: b for b in data.list_booths(ac_id, election.election_id)}
    results = group_results_by_booth(data.list_booth_results(election.election_id, ac_id=ac_id))

    performance = []
    for booth_id, ranked in results.items():
        party_rows = [r for r in ranked if r.party_name == party_name]
        booth = booth_rows.get(booth_id)
        if not party_rows or booth is None:
            continue
        party_votes = sum(r.votes_secured for r in party_rows)
        performance.append({
            "booth_id": booth.booth_id,
            "booth_number": booth.booth_number,
            "booth_name": booth.booth_name,
            "party_votes": party_votes,
            "total_votes_cast": booth.total_votes_cast,
            "vote_share": agg.vote_share_percentage(party_votes, booth.total_votes_cast),
            "booth_turnout": agg.turnout_percentage(booth.total_votes_cast, booth.total_electors),
            "is_winner": ranked[0].party_name == party_name,
        })

    performance.sort(key=lambda p: (-p["party_votes"], booth_number_key(p["booth_number"])))

    return {
        "party_name": party_name,
        "booths_contested": len(performance),
        "booths_won": sum(1 for p in performance if p["is_winner"]),
        "total_votes": sum(p["party_votes"] for p in performance),
        "avg_vote_share": agg.average(p["vote_share"] for p in performance),
        "performance": performance,
        "election": election_info(election),
    }


# -------------------------
# Clusters
# -------------------------
def get_booth_clusters(
    db: Session,
    ac_id: Any,
    election_id: Any = None,
    year: Any = None,
    thresholds: AnalyticsThresholds = DEFAULT_THRESHOLDS,
) -> Dict[str, Any]:
    ac_id = parse_positive_id(ac_id, "constituency ID")
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    require_constituency(data, ac_id)

    booths = [booth_metrics(b) for b in data.list_booths(ac_id, election.election_id)]
    clusters = agg.group_clusters(booths, thresholds)

    return {
        "clusters": clusters,
        "total_clusters": len(clusters),
        "total_booths": sum(c["booth_count"] for c in clusters),
        "election": election_info(election),
    }


# -------------------------
# Comparison
# -------------------------
def compare_booths(
    db: Session,
    booth_ids: Optional[Sequence[Any]],
    election_id: Any = None,
    year: Any = None,
) -> Dict[str, Any]:
    if not booth_ids or not isinstance(booth_ids, (list, tuple)):
        raise InvalidArgument("Please provide booth IDs array")

    requested: List[int] = []
    for value in booth_ids:
        parsed = parse_positive_id(value, "booth ID")
        if parsed not in requested:
            requested.append(parsed)

    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)

    rows = data.list_booths_by_ids(requested, election.election_id)
    results = group_results_by_booth(data.list_booth_results(election.election_id, booth_ids=requested))

    booths = []
    for booth in rows:
        ranked = results.get(booth.booth_id, [])
        winner = winner_fields(ranked)
        booths.append({
            **booth_metrics(booth),
            "winning_party": winner["winning_party"],
            "winning_votes": winner["winning_votes"],
        })

    found = {b["booth_id"] for b in booths}
    return {
        "booths": booths,
        "summary": {
            "total_booths": len(booths),
            "avg_turnout": agg.average(b["turnout_percentage"] for b in booths),
            "total_electors": sum(b["total_electors"] for b in booths),
            "total_votes": sum(b["total_votes_cast"] for b in booths),
            "missing_booth_ids": [booth_id for booth_id in requested if booth_id not in found],
        },
        "election": election_info(election),
    }


# -------------------------
# Trends
# -------------------------
def get_booth_trends(db: Session, booth_id: Any) -> Dict[str, Any]:
    """Turnout and party vote share of one booth across every election on record."""
    booth_id = parse_positive_id(booth_id, "booth ID")
    data = ElectionDataAccessor(db)

    history = data.list_booth_turnout_history(booth_id)
    booth = data.get_booth(booth_id, history[0].election_id if history else 0)
    if not booth:
        raise NotFound("Booth not found")

    results_by_election: Dict[int, list] = {}
    for r in data.list_booth_results(None, booth_ids=[booth_id]):
        results_by_election.setdefault(r.election_id, []).append(r)

    trends = []
    for row in history:
        election_results = results_by_election.get(row.election_id, [])
        total_votes = row.total_votes_cast or sum(r.votes_secured for r in election_results)
        trends.append({
            "election_id": row.election_id,
            "election_year": row.election_year,
            "total_electors": row.total_electors,
            "total_votes_cast": row.total_votes_cast,
            "turnout_percentage": agg.turnout_percentage(row.total_votes_cast, row.total_electors),
            "vote_share": [
                {**party, "percentage": agg.vote_share_percentage(party["votes"], total_votes)}
                for party in agg.party_totals(election_results)
            ],
        })

    return {
        "booth_id": booth_id,
        "booth_number": booth.booth_number,
        "booth_name": booth.booth_name,
        "trends": trends,
        "message": "Multiple election data available" if len(trends) > 1 else "Single election data available",
    }


# -------------------------
# Recommendations
# -------------------------
def get_recommendations(
    db: Session,
    ac_id: Any,
    election_id: Any = None,
    year: Any = None,
    thresholds: AnalyticsThresholds = DEFAULT_THRESHOLDS,
) -> Dict[str, Any]:
    ac_id = parse_positive_id(ac_id, "constituency ID")
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    require_constituency(data, ac_id)

    booth_rows = data.list_booths(ac_id, election.election_id)
    results = group_results_by_booth(data.list_booth_results(election.election_id, ac_id=ac_id))

    recommendations = []
    for booth in booth_rows:
        metrics = booth_metrics(booth)
        winner = winner_fields(results.get(booth.booth_id, []))
        winning_percentage = agg.vote_share_percentage(winner["winning_votes"], booth.total_votes_cast)
        category = agg.competitiveness_category(
            winning_percentage, metrics["turnout_percentage"], booth.total_electors, thresholds
        )
        recommendations.append({
            "booth_id": booth.booth_id,
            "booth_number": booth.booth_number,
            "booth_name": booth.booth_name,
            "total_electors": booth.total_electors,
            "total_votes_cast": booth.total_votes_cast,
            "turnout": metrics["turnout_percentage"],
            "winning_party": winner["winning_party"],
            "winning_votes": winner["winning_votes"],
            "winning_percentage": winning_percentage,
            "recommendation_category": category,
        })

    recommendations.sort(
        key=lambda r: (agg.category_priority(r["recommendation_category"]), booth_number_key(r["booth_number"]))
    )

    def count(category: str) -> int:
        return sum(1 for r in recommendations if r["recommendation_category"] == category)

    return {
        "recommendations": recommendations,
        "summary": {
            "total_booths": len(recommendations),
            "highly_competitive": count(agg.HIGHLY_COMPETITIVE),
            "low_turnout_opportunities": count(agg.LOW_TURNOUT_OPPORTUNITY),
            "high_density_strategic": count(agg.HIGH_DENSITY_STRATEGIC),
            "strongholds": count(agg.STRONGHOLD),
            "standard": count(agg.STANDARD),
        },
        "election": election_info(election),
    }


# -------------------------
# Demographics
# -------------------------
def get_demographics(db: Session, ac_id: Any, election_id: Any = None, year: Any = None) -> Dict[str, Any]:
    ac_id = parse_positive_id(ac_id, "constituency ID")
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    require_constituency(data, ac_id)

    demographics = []
    for booth in data.list_booths(ac_id, election.election_id):
        metrics = booth_metrics(booth)
        demographics.append({
            "booth_id": booth.booth_id,
            "booth_number": booth.booth_number,
            "booth_name": booth.booth_name,
            "total_electors": booth.total_electors,
            "male_voters": booth.male_voters,
            "female_voters": booth.female_voters,
            "other_voters": booth.other_voters,
            **agg.demographic_percentages(
                booth.male_voters, booth.female_voters, booth.other_voters, booth.total_electors
            ),
            "total_votes_cast": booth.total_votes_cast,
            "turnout_percentage": metrics["turnout_percentage"],
        })

    insights = {
        "total_electors": sum(d["total_electors"] for d in demographics),
        "male_electors": sum(d["male_voters"] for d in demographics),
        "female_electors": sum(d["female_voters"] for d in demographics),
        "other_electors": sum(d["other_voters"] for d in demographics),
        "avg_male_percentage": agg.average(d["male_percentage"] for d in demographics),
        "avg_female_percentage": agg.average(d["female_percentage"] for d in demographics),
        "avg_other_percentage": agg.average(d["other_percentage"] for d in demographics),
    }

    return {"demographics": demographics, "insights": insights, "election": election_info(election)}


# -------------------------
# Heatmap
# -------------------------
def get_heatmap(
    db: Session,
    ac_id: Any,
    metric: Optional[str] = "turnout",
    election_id: Any = None,
    year: Any = None,
) -> Dict[str, Any]:
    """
    Per-booth intensity for a map layer. ``turnout`` uses turnout percentage;
    ``voters`` and anything else use the elector count. Booth coordinates are
    not stored, so every point sits at (0, 0).
    """
    ac_id = parse_positive_id(ac_id, "constituency ID")
    metric = (metric or "turnout").strip().lower()
    data = ElectionDataAccessor(db)
    election = resolve_election(data, election_id, year)
    require_constituency(data, ac_id)

    booth_rows = data.list_booths(ac_id, election.election_id)
    results = group_results_by_booth(data.list_booth_results(election.election_id, ac_id=ac_id))

    points = []
    for booth in booth_rows:
        metrics = booth_metrics(booth)
        intensity = metrics["turnout_percentage"] if metric == "turnout" else booth.total_electors
        points.append({
            "booth_id": booth.booth_id,
            "booth_number": booth.booth_number,
            "booth_name": booth.booth_name,
            "location_lat": 0,
            "location_long": 0,
            "total_electors": booth.total_electors,
            "total_votes_cast": booth.total_votes_cast,
            "turnout_percentage": metrics["turnout_percentage"],
            "winning_party": winner_fields(results.get(booth.booth_id, []))["winning_party"],
            "intensity": intensity,
        })

    intensities = [p["intensity"] for p in points]
    for point, normalized in zip(points, agg.heatmap_normalize(intensities)):
        point["normalized_intensity"] = normalized

    return {
        "heatmap": points,
        "metadata": {
            "metric": metric if metric in HEATMAP_METRICS else "voters",
            "total_points": len(points),
            "intensity_range": {
                "min": min(intensities) if intensities else 0,
                "max": max(intensities) if intensities else 0,
            },
        },
        "election": election_info(election),
    }
