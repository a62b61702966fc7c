# src/routers/booth_analysis/aggregation.py
"""
Derived booth metrics.

Pure functions over values and rows already fetched by the data accessor:
percentages, winner/margin, cluster and competitiveness classification,
heatmap normalisation and demographic shares. Nothing here touches the
database, so the rules can be exercised directly in tests.

Percentages are rounded to 2 decimals; heatmap intensity to a whole number.
"""
import math
from operator import attrgetter, itemgetter
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel

from src.config import (
    COMPETITIVE_WIN_PERCENTAGE,
    HIGH_DENSITY_ELECTORS,
    HIGH_TURNOUT_THRESHOLD,
    LARGE_BOOTH_ELECTORS,
    MEDIUM_TURNOUT_THRESHOLD,
)

T = TypeVar("T")

# Competitiveness categories, in evaluation order
HIGHLY_COMPETITIVE = "HighlyCompetitive"
LOW_TURNOUT_OPPORTUNITY = "LowTurnoutOpportunity"
HIGH_DENSITY_STRATEGIC = "HighDensityStrategic"
STRONGHOLD = "Stronghold"
STANDARD = "Standard"

_CATEGORY_PRIORITY = {
    HIGHLY_COMPETITIVE: 1,
    LOW_TURNOUT_OPPORTUNITY: 2,
    HIGH_DENSITY_STRATEGIC: 3,
}


class AnalyticsThresholds(BaseModel):
    high_turnout: float = HIGH_TURNOUT_THRESHOLD
    medium_turnout: float = MEDIUM_TURNOUT_THRESHOLD
    large_booth_electors: int = LARGE_BOOTH_ELECTORS
    high_density_electors: int = HIGH_DENSITY_ELECTORS
    competitive_win_percentage: float = COMPETITIVE_WIN_PERCENTAGE


DEFAULT_THRESHOLDS = AnalyticsThresholds()


# ----------------------
# Percentages
# ----------------------
def _percentage(part, whole, digits: int = 2) -> float:
    if not whole or whole <= 0:
        return 0
    return round(part * 100 / whole, digits)


def turnout_percentage(votes_cast, electors) -> float:
    return _percentage(votes_cast or 0, electors)


def vote_share_percentage(candidate_votes, total_votes) -> float:
    return _percentage(candidate_votes or 0, total_votes)


def demographic_percentages(male, female, other, total) -> Dict[str, float]:
    return {
        "male_percentage": _percentage(male or 0, total),
        "female_percentage": _percentage(female or 0, total),
        "other_percentage": _percentage(other or 0, total),
    }


def average(values: Iterable[float], digits: Optional[int] = 2) -> float:
    values = list(values)
    if not values:
        return 0
    mean = sum(values) / len(values)
    if digits is None:
        return mean
    if digits == 0:
        return int(round_half_up(mean))
    return round(mean, digits)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# ----------------------
# Winners and margins
# ----------------------
def rank_results(
    results: Iterable[T],
    votes_of: Callable[[T], Any] = attrgetter("votes_secured"),
    id_of: Callable[[T], Any] = attrgetter("candidate_id"),
) -> List[T]:
    """Order results by votes (desc); equal votes fall back to the lowest candidate id."""
    return sorted(results, key=lambda r: (-(votes_of(r) or 0), id_of(r)))


def winning_entry(results: Iterable[Tuple[int, int]]) -> Optional[Tuple[int, int]]:
    """The (candidate_id, votes) pair with the most votes, ``None`` when empty."""
    ranked = rank_results(results, votes_of=itemgetter(1), id_of=itemgetter(0))
    return ranked[0] if ranked else None


def victory_margin(votes_desc: Sequence[int]) -> int:
    if len(votes_desc) < 2:
        return 0
    return (votes_desc[0] or 0) - (votes_desc[1] or 0)


def party_totals(results: Iterable[Any]) -> List[Dict[str, Any]]:
    """Sum votes per party, highest first (ties by party name)."""
    totals: Dict[str, int] = {}
    for r in results:
        name = r.party_name or "Independent"
        totals[name] = totals.get(name, 0) + (r.votes_secured or 0)
    ordered = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return [{"party_name": name, "votes": votes} for name, votes in ordered]


def candidate_totals(results: Iterable[Any]) -> List[Dict[str, Any]]:
    """Sum booth results per candidate and rank them (constituency-level view)."""
    totals: Dict[int, Dict[str, Any]] = {}
    for r in results:
        entry = totals.setdefault(r.candidate_id, {
            "candidate_id": r.candidate_id,
            "candidate_name": r.candidate_name,
            "party_name": r.party_name,
            "party_symbol": r.party_symbol,
            "votes": 0,
        })
        entry["votes"] += r.votes_secured or 0
    return rank_results(totals.values(), votes_of=itemgetter("votes"), id_of=itemgetter("candidate_id"))


# ----------------------
# Classification
# ----------------------
def cluster_label(turnout, electors, thresholds: AnalyticsThresholds = DEFAULT_THRESHOLDS) -> str:
    if turnout >= thresholds.high_turnout:
        band = "High"
    elif turnout >= thresholds.medium_turnout:
        band = "Medium"
    else:
        band = "Low"
    size = "Large" if electors > thresholds.large_booth_electors else "Small"
    return f"{band}_Turnout_{size}"


def competitiveness_category(
    winning_percentage,
    turnout,
    electors,
    thresholds: AnalyticsThresholds = DEFAULT_THRESHOLDS,
) -> str:
    # first matching rule wins
    if winning_percentage < thresholds.competitive_win_percentage:
        return HIGHLY_COMPETITIVE
    if turnout < thresholds.medium_turnout:
        return LOW_TURNOUT_OPPORTUNITY
    if electors > thresholds.high_density_electors:
        return HIGH_DENSITY_STRATEGIC
    if winning_percentage >= thresholds.competitive_win_percentage:
        return STRONGHOLD
    return STANDARD


def category_priority(category: str) -> int:
    return _CATEGORY_PRIORITY.get(category, 4)


def voter_density(electors, thresholds: AnalyticsThresholds = DEFAULT_THRESHOLDS) -> str:
    if electors > thresholds.high_density_electors:
        return "Very High"
    if electors > thresholds.large_booth_electors:
        return "High"
    if electors > 500:
        return "Medium"
    return "Low"


def constituency_category(ac_name: Optional[str]) -> str:
    name = (ac_name or "").upper()
    if "(SC)" in name:
        return "SC"
    if "(ST)" in name:
        return "ST"
    return "GEN"


def group_clusters(booths: Iterable[Dict[str, Any]], thresholds: AnalyticsThresholds = DEFAULT_THRESHOLDS) -> List[Dict[str, Any]]:
    """Group booth metrics (``turnout_percentage``, ``total_electors``) by cluster label."""
    groups: Dict[str, List[Dict[str, Any]]] = {}
    for booth in booths:
        label = cluster_label(booth["turnout_percentage"], booth["total_electors"], thresholds)
        groups.setdefault(label, []).append(booth)

    clusters = [
        {
            "cluster_type": label,
            "booth_count": len(members),
            "avg_electors": average((m["total_electors"] for m in members), digits=0),
            "avg_turnout": average(m["turnout_percentage"] for m in members),
            "booth_ids": [m["booth_id"] for m in members],
        }
        for label, members in groups.items()
    ]
    clusters.sort(key=lambda c: (-c["booth_count"], c["cluster_type"]))
    return clusters


# ----------------------
# Heatmap
# ----------------------
def heatmap_normalize(values: Sequence[float]) -> List[int]:
    """Rescale to 0..100; a flat series maps every point to 50."""
    if not values:
        return []
    low, high = min(values), max(values)
    if high == low:
        return [50 for _ in values]
    return [round_half_up((v - low) / (high - low) * 100) for v in values]
