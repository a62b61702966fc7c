import pytest

from src.routers.election_data.accessor import ElectionDataAccessor
from src.utils.exceptions import DataUnavailable, Timeout


def test_root_redirects_to_docs(client):
    response = client.get("/", follow_redirects=False)
    assert response.status_code in (302, 307)
    assert response.headers["location"] == "/docs/"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["connected"] is True


def test_api_index_lists_endpoints(client):
    body = client.get("/api").json()
    assert body["success"] is True
    assert body["data"]["endpoints"]["booth_analysis"] == "/api/booth-analysis"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Route not found"}


# -------------------------
# States
# -------------------------
def test_list_states(client):
    body = client.get("/api/states").json()
    assert body["count"] == 2
    assert body["data"][0] == {"state_id": 1, "state_name": "Uttar Pradesh"}


def test_state_assemblies(client):
    body = client.get("/api/states/1/assemblies").json()
    assert body["count"] == 2
    central, reserved = body["data"]
    assert central["constituency_name"] == "Lucknow Central"
    assert central["total_voters"] == 3300
    assert central["polling_booths"] == 5
    assert central["reserved_for"] is None
    assert reserved["category"] == "SC"
    assert reserved["reserved_for"] == "SC"


def test_state_without_assemblies(client):
    body = client.get("/api/states/2/assemblies").json()
    assert body == {"success": True, "data": [], "count": 0}


def test_state_stats(client):
    data = client.get("/api/states/1/stats").json()["data"]
    assert data["state_name"] == "Uttar Pradesh"
    assert data["total_booths"] == 6
    assert data["total_voters"] == 4100


def test_unknown_state(client):
    response = client.get("/api/states/99")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "State not found"}


# -------------------------
# Constituencies
# -------------------------
def test_constituencies_are_paginated(client):
    body = client.get("/api/constituencies", params={"limit": 1}).json()
    assert body["meta"] == {"page": 1, "limit": 1, "total": 2, "totalPages": 2}
    assert [c["constituency_name"] for c in body["data"]] == ["Lucknow Central"]


def test_constituency_details(client):
    data = client.get("/api/constituencies/1").json()["data"]
    assert [(c["candidate_name"], c["votes"], c["percentage"]) for c in data["election_results"]] == [
        ("Candidate A", 1280, 58.18),
        ("Candidate B", 920, 41.82),
    ]
    assert data["winning_candidate"]["candidate_name"] == "Candidate A"
    assert data["victory_margin"] == 360
    assert data["victory_percentage"] == 16.36
    assert data["turnout"]["turnout_percentage"] == 67.27


def test_constituency_booths_page(client):
    body = client.get("/api/constituencies/1/booths", params={"page": 2, "limit": 2}).json()
    assert [b["booth_number"] for b in body["data"]] == ["3", "4"]
    assert [b["candidate_count"] for b in body["data"]] == [2, 0]
    assert body["meta"] == {"page": 2, "limit": 2, "total": 5, "totalPages": 3}


def test_constituency_demographics(client):
    data = client.get("/api/constituencies/1/demographics").json()["data"]
    assert data["gender_distribution"] == {"male": 51, "female": 48, "other": 1}


def test_historical_mlas(client):
    data = client.get("/api/constituencies/1/historical-mlas").json()["data"]
    assert [(w["election_year"], w["candidate_name"], w["votes"]) for w in data] == [
        (2022, "Candidate A", 1280),
        (2017, "Candidate B", 370),
    ]


def test_constituency_booth_analysis_route(client):
    data = client.get("/api/constituencies/1/booth-analysis").json()["data"]
    assert data["insights"]["leading_party"] == "BJP"


def test_unknown_constituency(client):
    response = client.get("/api/constituencies/999/stats")
    assert response.status_code == 404
    assert response.json()["error"] == "Constituency not found"


# -------------------------
# Elections
# -------------------------
def test_election_results(client):
    body = client.get("/api/elections/results", params={"constituency_id": 1, "year": 2022}).json()
    assert body["election"] == {"election_id": 1, "election_year": 2022}
    assert body["data"][0]["rank"] == 1
    assert body["data"][0]["party_symbol"] == "Lotus"


def test_election_results_require_constituency(client):
    response = client.get("/api/elections/results")
    assert response.status_code == 400
    assert response.json()["error"] == "Constituency ID is required"


def test_vote_share_trend(client):
    body = client.get("/api/elections/vote-share-trend", params={"constituency_id": 1}).json()
    assert [entry["year"] for entry in body["data"]] == [2022, 2017]
    assert body["data"][1]["parties"]["Cycle"] == {"name": "SP", "votes": 370, "percentage": 64.91}
    assert body["parties"] == ["Lotus", "Cycle"]


def test_turnout_trend(client):
    data = client.get("/api/elections/turnout-trend", params={"constituency_id": 1}).json()["data"]
    assert [(t["election_year"], t["turnout_percentage"]) for t in data] == [(2017, 60.0), (2022, 67.27)]


# -------------------------
# Candidates
# -------------------------
def test_candidate(client):
    data = client.get("/api/candidates/1").json()["data"]
    assert data["candidate_name"] == "Candidate A"
    assert data["party_name"] == "BJP"


def test_candidate_performance(client):
    data = client.get("/api/candidates/2/performance").json()["data"]
    assert data["performance"] == [
        {"ac_id": 1, "ac_name": "Lucknow Central", "total_votes": 920, "vote_percentage": 41.82,
         "rank_in_constituency": 2},
    ]


# -------------------------
# Booths and booth analysis
# -------------------------
def test_constituency_booth_list(client):
    body = client.get("/api/booths/constituency/1").json()
    assert body["count"] == 5
    assert [b["booth_number"] for b in body["data"]] == ["1", "2", "3", "4", "10"]


def test_booth_results(client):
    data = client.get("/api/booths/1/results").json()["data"]
    assert [r["votes_secured"] for r in data] == [400, 250]


def test_booth_details_route(client):
    body = client.get("/api/booths/1").json()
    assert body["success"] is True
    assert body["data"]["summary"]["margin_votes"] == 150


def test_booth_details_route_for_year(client):
    body = client.get("/api/booths/1", params={"year": 2017}).json()
    assert body["data"]["election"] == {"election_id": 2, "election_year": 2017}


@pytest.mark.parametrize("path", ["/api/booths/abc", "/api/booths/0", "/api/booth-analysis/clusters/-1"])
def test_invalid_ids_are_bad_requests(client, path):
    response = client.get(path)
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "Must be a positive number" in response.json()["error"]


def test_unknown_booth(client):
    response = client.get("/api/booths/9999")
    assert response.status_code == 404
    assert response.json()["error"] == "Booth not found"


def test_compare_route(client):
    response = client.post("/api/booth-analysis/compare", json={"boothIds": [1, 3]})
    assert response.status_code == 200
    assert response.json()["data"]["summary"]["total_booths"] == 2


@pytest.mark.parametrize("payload", [{}, {"boothIds": []}, None])
def test_compare_route_requires_ids(client, payload):
    response = client.post("/api/booth-analysis/compare", json=payload)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Please provide booth IDs array"}


def test_malformed_body_is_a_bad_request(client):
    response = client.post("/api/booth-analysis/compare", json={"boothIds": "1,2"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request parameters"


@pytest.mark.parametrize("path", [
    "/api/booth-analysis/constituency/1/booth-analysis",
    "/api/booth-analysis/party-performance/1/BJP",
    "/api/booth-analysis/clusters/1",
    "/api/booth-analysis/trends/1",
    "/api/booth-analysis/recommendations/1",
    "/api/booth-analysis/demographics/1",
    "/api/booth-analysis/heatmap/1?metric=voters",
])
def test_booth_analysis_routes(client, path):
    response = client.get(path)
    assert response.status_code == 200
    assert response.json()["success"] is True


# -------------------------
# Failures
# -------------------------
def _raise(error):
    def fetch_rows(self, statement, params=None):
        raise error
    return fetch_rows


@pytest.mark.parametrize("error, message", [
    (DataUnavailable(), "Database connection error"),
    (Timeout(), "Database request timed out"),
])
def test_store_failures_are_service_unavailable(client, monkeypatch, error, message):
    monkeypatch.setattr(ElectionDataAccessor, "fetch_rows", _raise(error))
    response = client.get("/api/booth-analysis/clusters/1")
    assert response.status_code == 503
    assert response.json() == {"success": False, "error": message}


def test_unexpected_errors_are_generic(client, monkeypatch):
    monkeypatch.setattr(ElectionDataAccessor, "fetch_rows", _raise(RuntimeError("boom")))
    response = client.get("/api/states")
    assert response.status_code == 500
    assert response.json()["error"] == "Server Error"


def test_error_detail_is_hidden_by_default(client, monkeypatch):
    monkeypatch.setattr("main.DEBUG", False)
    error = DataUnavailable(detail="could not connect to server: password authentication failed for user postgres")
    monkeypatch.setattr(ElectionDataAccessor, "fetch_rows", _raise(error))
    response = client.get("/api/booth-analysis/clusters/1")
    assert response.status_code == 503
    assert response.json() == {"success": False, "error": "Database connection error"}


def test_unexpected_error_text_is_hidden_by_default(client, monkeypatch):
    monkeypatch.setattr("main.DEBUG", False)
    monkeypatch.setattr(ElectionDataAccessor, "fetch_rows", _raise(RuntimeError("SELECT secret FROM pg_shadow")))
    response = client.get("/api/states")
    assert response.status_code == 500
    assert "detail" not in response.json()


def test_error_detail_is_returned_in_debug_mode(client, monkeypatch):
    monkeypatch.setattr("main.DEBUG", True)
    monkeypatch.setattr(ElectionDataAccessor, "fetch_rows", _raise(DataUnavailable(detail="connection refused")))
    response = client.get("/api/booth-analysis/clusters/1")
    assert response.json()["detail"] == "connection refused"


@pytest.mark.parametrize("booth_ids", [[True], [1, False]])
def test_compare_route_rejects_booleans(client, booth_ids):
    response = client.post("/api/booth-analysis/compare", json={"boothIds": booth_ids})
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_compare_route_accepts_numeric_strings(client):
    response = client.post("/api/booth-analysis/compare", json={"boothIds": ["1", 3]})
    assert response.status_code == 200
    assert [b["booth_id"] for b in response.json()["data"]["booths"]] == [1, 3]


def test_disconnected_client_stops_querying(client, monkeypatch):
    calls = []
    original = ElectionDataAccessor.fetch_rows

    def counting_fetch_rows(self, statement, params=None):
        calls.append(statement)
        return original(self, statement, params)

    monkeypatch.setattr(ElectionDataAccessor, "fetch_rows", counting_fetch_rows)
    monkeypatch.setattr("src.database.db_session.client_disconnected", lambda request: True)
    response = client.get("/api/booth-analysis/clusters/1")
    assert response.status_code == 499
    assert response.json() == {"success": False, "error": "Client closed request"}
    assert len(calls) == 1


def test_connected_client_is_not_cancelled(client):
    response = client.get("/api/booth-analysis/clusters/1")
    assert response.status_code == 200
