import pytest

from src.routers.booth_analysis import controllers
from src.routers.booth_analysis.aggregation import AnalyticsThresholds
from src.routers.election_data.accessor import ElectionDataAccessor
from src.utils.exceptions import InvalidArgument, NotFound


def test_booth_details_scenario(db):
    details = controllers.get_booth_details(db, 1)

    booth = details["booth"]
    assert booth["booth_number"] == "1"
    assert booth["turnout_percentage"] == 65.0
    assert booth["ac_name"] == "Lucknow Central"
    assert booth["district_name"] == "Lucknow"
    assert booth["state_name"] == "Uttar Pradesh"
    assert booth["voter_density"] == "High"
    assert booth["total_booths_in_constituency"] == 5
    assert booth["constituency_avg_voters"] == 660
    assert booth["constituency_turnout"] == 66.25

    assert [(r["candidate_name"], r["vote_percentage"], r["rank"]) for r in details["results"]] == [
        ("Candidate A", 61.54, 1),
        ("Candidate B", 38.46, 2),
    ]
    assert details["summary"] == {
        "total_candidates": 2,
        "total_votes": 650,
        "winning_candidate": "Candidate A",
        "winning_party": "BJP",
        "winning_votes": 400,
        "winning_percentage": 61.54,
        "margin_votes": 150,
    }
    assert details["election"] == {"election_id": 1, "election_year": 2022}


def test_booth_details_for_another_year(db):
    details = controllers.get_booth_details(db, 1, year=2017)
    assert details["booth"]["turnout_percentage"] == 60.0
    assert details["summary"]["winning_party"] == "SP"
    assert details["summary"]["margin_votes"] == 170


def test_booth_without_turnout_or_results(db):
    details = controllers.get_booth_details(db, 5)
    assert details["booth"]["turnout_percentage"] == 0
    assert details["results"] == []
    assert details["summary"]["winning_candidate"] is None
    assert details["summary"]["margin_votes"] == 0


@pytest.mark.parametrize("booth_id", ["abc", "0", "-3", "", None, "1.5"])
def test_booth_details_rejects_bad_ids(db, booth_id):
    with pytest.raises(InvalidArgument):
        controllers.get_booth_details(db, booth_id)


def test_booth_details_unknown_booth(db):
    with pytest.raises(NotFound):
        controllers.get_booth_details(db, 9999)


def test_unknown_election_is_not_found(db):
    with pytest.raises(NotFound):
        controllers.get_booth_details(db, 1, election_id=42)
    with pytest.raises(NotFound):
        controllers.get_booth_details(db, 1, year=1990)


def test_constituency_analysis(db):
    analysis = controllers.get_constituency_booth_analysis(db, 1)

    assert [b["booth_id"] for b in analysis["booths"]] == [1, 3, 4, 5, 2]
    first = analysis["booths"][0]
    assert first["winning_party"] == "BJP"
    assert first["victory_margin"] == 150
    assert first["top_parties"] == [
        {"party_name": "BJP", "votes": 400, "percentage": 61.54},
        {"party_name": "SP", "votes": 250, "percentage": 38.46},
    ]

    assert analysis["party_dominance"] == [
        {"party_name": "BJP", "booths_won": 3, "total_votes": 1180},
        {"party_name": "SP", "booths_won": 1, "total_votes": 150},
    ]
    assert analysis["insights"] == {
        "high_turnout_booths": 2,
        "low_turnout_booths": 2,
        "large_booths": 1,
        "leading_party": "BJP",
        "total_booths_analyzed": 5,
    }


def test_constituency_analysis_totals_match_constituency_totals(db):
    summary = controllers.get_constituency_booth_analysis(db, 1)["summary"]
    totals = ElectionDataAccessor(db).get_constituency_totals(1, 1)
    assert summary["total_booths"] == totals.total_booths
    assert summary["total_electors"] == totals.total_electors
    assert summary["total_votes_cast"] == totals.total_votes_cast


def test_constituency_analysis_unknown_constituency(db):
    with pytest.raises(NotFound):
        controllers.get_constituency_booth_analysis(db, 999)


def test_party_performance(db):
    performance = controllers.get_party_performance(db, 1, "BJP")
    assert performance["booths_contested"] == 4
    assert performance["booths_won"] == 3
    assert performance["total_votes"] == 1280
    assert [(p["booth_id"], p["vote_share"], p["is_winner"]) for p in performance["performance"]] == [
        (3, 53.33, True),
        (1, 61.54, True),
        (4, 75.0, True),
        (2, 37.04, False),
    ]


def test_party_performance_is_exact_match(db):
    performance = controllers.get_party_performance(db, 1, "bjp")
    assert performance["booths_contested"] == 0
    assert performance["performance"] == []
    with pytest.raises(InvalidArgument):
        controllers.get_party_performance(db, 1, "  ")


def test_clusters_cover_every_booth(db):
    clusters = controllers.get_booth_clusters(db, 1)
    assert clusters["total_booths"] == 5
    assert clusters["total_clusters"] == 4
    assert clusters["clusters"][0] == {
        "cluster_type": "Low_Turnout_Small",
        "booth_count": 2,
        "avg_electors": 300,
        "avg_turnout": 22.5,
        "booth_ids": [5, 2],
    }
    booth_ids = [b for c in clusters["clusters"] for b in c["booth_ids"]]
    assert sorted(booth_ids) == [1, 2, 3, 4, 5]


def test_compare_booths(db):
    comparison = controllers.compare_booths(db, [3, "1", 999, 3])
    assert [b["booth_id"] for b in comparison["booths"]] == [1, 3]
    assert comparison["booths"][1]["winning_party"] == "BJP"
    assert comparison["booths"][1]["winning_votes"] == 480
    assert comparison["summary"] == {
        "total_booths": 2,
        "avg_turnout": 70.0,
        "total_electors": 2200,
        "total_votes": 1550,
        "missing_booth_ids": [999],
    }


@pytest.mark.parametrize("booth_ids", [None, [], "1,2"])
def test_compare_booths_requires_a_list(db, booth_ids):
    with pytest.raises(InvalidArgument, match="Please provide booth IDs array"):
        controllers.compare_booths(db, booth_ids)


def test_compare_booths_rejects_bad_entries(db):
    with pytest.raises(InvalidArgument):
        controllers.compare_booths(db, [1, "x"])


def test_booth_trends(db):
    trends = controllers.get_booth_trends(db, 1)
    assert [(t["election_year"], t["turnout_percentage"]) for t in trends["trends"]] == [
        (2017, 60.0),
        (2022, 65.0),
    ]
    assert trends["trends"][0]["vote_share"][0] == {"party_name": "SP", "votes": 370, "percentage": 64.91}


def test_recommendations(db):
    recommendations = controllers.get_recommendations(db, 1)
    assert [(r["booth_id"], r["recommendation_category"]) for r in recommendations["recommendations"]] == [
        (3, "HighlyCompetitive"),
        (5, "HighlyCompetitive"),
        (2, "LowTurnoutOpportunity"),
        (1, "Stronghold"),
        (4, "Stronghold"),
    ]
    assert recommendations["summary"] == {
        "total_booths": 5,
        "highly_competitive": 2,
        "low_turnout_opportunities": 1,
        "high_density_strategic": 0,
        "strongholds": 2,
        "standard": 0,
    }


def test_recommendations_with_custom_thresholds(db):
    strict = AnalyticsThresholds(competitive_win_percentage=65)
    recommendations = controllers.get_recommendations(db, 1, thresholds=strict)
    assert recommendations["summary"]["highly_competitive"] == 4


def test_demographics(db):
    demographics = controllers.get_demographics(db, 1)
    first = demographics["demographics"][0]
    assert first["booth_id"] == 1
    assert (first["male_percentage"], first["female_percentage"], first["other_percentage"]) == (52.0, 47.0, 1.0)
    assert demographics["insights"]["total_electors"] == 3300
    assert demographics["insights"]["male_electors"] == 1680


def test_heatmap_turnout(db):
    heatmap = controllers.get_heatmap(db, 1, metric="turnout")
    assert [(p["booth_id"], p["intensity"], p["normalized_intensity"]) for p in heatmap["heatmap"]] == [
        (1, 65.0, 81),
        (3, 75.0, 94),
        (4, 80.0, 100),
        (5, 0, 0),
        (2, 45.0, 56),
    ]
    assert heatmap["metadata"] == {
        "metric": "turnout",
        "total_points": 5,
        "intensity_range": {"min": 0, "max": 80.0},
    }


@pytest.mark.parametrize("metric", ["voters", "unknown", "VOTERS"])
def test_heatmap_falls_back_to_electors(db, metric):
    heatmap = controllers.get_heatmap(db, 1, metric=metric)
    assert [p["intensity"] for p in heatmap["heatmap"]] == [1000, 1200, 500, 0, 600]
    assert [p["normalized_intensity"] for p in heatmap["heatmap"]] == [83, 100, 42, 0, 50]
