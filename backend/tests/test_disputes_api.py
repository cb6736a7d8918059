"""
HTTP tests for match recording and the dispute endpoints.

Status mapping under test: 201 created, 403 not allowed, 404 missing,
409 state conflict, 422 bad input.
"""

import pytest
from fastapi.testclient import TestClient


def as_user(player_id):
    return {"X-User-Id": str(player_id)}


@pytest.fixture(name="api_match")
def api_match_fixture(client: TestClient):
    """Three players in a league; P1 beat P2 10-5 via the API. Returns (match, p1, p2, p3)."""
    p1, p2, p3 = (client.post("/api/players", json={"display_name": name}).json()["id"] for name in ("Ann", "Ben", "Cat"))

    league = client.post("/api/leagues", json={"name": "Tuesday Pool", "game_type": "pool"}, headers=as_user(p1))
    assert league.status_code == 201
    league_id = league.json()["id"]
    for player_id in (p2, p3):
        assert client.post(f"/api/leagues/{league_id}/members", json={"player_id": player_id}).status_code == 201

    response = client.post(
        f"/api/leagues/{league_id}/matches",
        json={
            "match_date": "2026-03-05T19:00:00",
            "participants": [{"player_id": p1, "score": 10}, {"player_id": p2, "score": 5}],
        },
        headers=as_user(p1),
    )
    assert response.status_code == 201
    return response.json(), p1, p2, p3


def test_record_match_response(api_match):
    match, p1, p2, _ = api_match

    assert match["is_disputed"] is False
    results = {p["player_id"]: (p["score"], p["result"]) for p in match["participants"]}
    assert results == {p1: (10, "win"), p2: (5, "loss")}


def test_dispute_accept_flow(client: TestClient, api_match):
    match, p1, p2, _ = api_match

    created = client.post(
        f"/api/matches/{match['id']}/disputes",
        json={"reason": "It was 8-10", "proposed_scores": {str(p1): 8, str(p2): 10}},
        headers=as_user(p2),
    )
    assert created.status_code == 201
    dispute = created.json()
    assert dispute["status"] == "open"
    assert dispute["proposed_scores"] == {str(p1): 8, str(p2): 10}

    flagged = client.get(f"/api/matches/{match['id']}").json()
    assert flagged["is_disputed"] is True
    assert flagged["disputed_by"] == p2

    resolved = client.post(
        f"/api/disputes/{dispute['id']}/resolve",
        json={"resolution": "accepted", "resolution_notes": "My mistake"},
        headers=as_user(p1),
    )
    assert resolved.status_code == 200
    assert resolved.json()["status"] == "resolved"
    assert resolved.json()["resolved_by"] == p1

    after = client.get(f"/api/matches/{match['id']}").json()
    assert after["is_disputed"] is False
    results = {p["player_id"]: (p["score"], p["result"]) for p in after["participants"]}
    assert results == {p1: (8, "loss"), p2: (10, "win")}

    again = client.post(
        f"/api/disputes/{dispute['id']}/resolve", json={"resolution": "rejected"}, headers=as_user(p1)
    )
    assert again.status_code == 409
    assert again.json()["detail"].startswith("DISPUTE_NOT_OPEN")


def test_duplicate_open_dispute_is_409(client: TestClient, api_match):
    match, p1, p2, _ = api_match
    url = f"/api/matches/{match['id']}/disputes"

    assert client.post(url, json={"reason": "wrong"}, headers=as_user(p2)).status_code == 201
    duplicate = client.post(url, json={"reason": "also wrong"}, headers=as_user(p1))

    assert duplicate.status_code == 409
    assert duplicate.json()["detail"].startswith("DUPLICATE_OPEN_DISPUTE")


def test_non_participant_is_403(client: TestClient, api_match):
    match, _, p2, p3 = api_match

    response = client.post(f"/api/matches/{match['id']}/disputes", json={"reason": "x"}, headers=as_user(p3))
    assert response.status_code == 403
    assert response.json()["detail"].startswith("NOT_PARTICIPANT")

    dispute = client.post(f"/api/matches/{match['id']}/disputes", json={"reason": "x"}, headers=as_user(p2)).json()
    assert client.get(f"/api/disputes/{dispute['id']}", headers=as_user(p3)).status_code == 403
    assert client.get(f"/api/matches/{match['id']}/disputes", headers=as_user(p3)).json() == []
    assert client.post(
        f"/api/disputes/{dispute['id']}/resolve", json={"resolution": "accepted"}, headers=as_user(p3)
    ).status_code == 403


def test_bad_input_is_422(client: TestClient, api_match):
    match, p1, p2, p3 = api_match
    url = f"/api/matches/{match['id']}/disputes"

    blank = client.post(url, json={"reason": "   "}, headers=as_user(p2))
    assert blank.status_code == 422
    assert blank.json()["detail"].startswith("INVALID_REASON")

    outsider_scores = client.post(url, json={"reason": "x", "proposed_scores": {str(p3): 1}}, headers=as_user(p2))
    assert outsider_scores.status_code == 422
    assert outsider_scores.json()["detail"].startswith("INVALID_SCORES")

    dispute = client.post(url, json={"reason": "x"}, headers=as_user(p2)).json()
    unknown = client.post(f"/api/disputes/{dispute['id']}/resolve", json={"resolution": "maybe"}, headers=as_user(p1))
    assert unknown.status_code == 422
    assert unknown.json()["detail"].startswith("INVALID_RESOLUTION")


def test_missing_user_header_is_422(client: TestClient, api_match):
    match, _, _, _ = api_match

    assert client.post(f"/api/matches/{match['id']}/disputes", json={"reason": "x"}).status_code == 422


def test_unknown_ids_are_404(client: TestClient, api_match):
    _, p1, _, _ = api_match

    assert client.post("/api/matches/9999/disputes", json={"reason": "x"}, headers=as_user(p1)).status_code == 404
    assert client.get("/api/disputes/9999", headers=as_user(p1)).status_code == 404
    assert client.post("/api/disputes/9999/withdraw", headers=as_user(p1)).status_code == 404
    assert client.get("/api/matches/9999").status_code == 404


def test_withdraw_flow(client: TestClient, api_match):
    match, p1, p2, _ = api_match
    dispute = client.post(
        f"/api/matches/{match['id']}/disputes", json={"reason": "x"}, headers=as_user(p2)
    ).json()

    not_owner = client.post(f"/api/disputes/{dispute['id']}/withdraw", headers=as_user(p1))
    assert not_owner.status_code == 403
    assert not_owner.json()["detail"].startswith("NOT_DISPUTE_OWNER")

    withdrawn = client.post(f"/api/disputes/{dispute['id']}/withdraw", headers=as_user(p2))
    assert withdrawn.status_code == 200
    assert withdrawn.json()["status"] == "withdrawn"
    assert client.get(f"/api/matches/{match['id']}").json()["is_disputed"] is False


def test_modified_resolution(client: TestClient, api_match):
    match, p1, p2, _ = api_match
    dispute = client.post(
        f"/api/matches/{match['id']}/disputes", json={"reason": "x"}, headers=as_user(p2)
    ).json()

    response = client.post(
        f"/api/disputes/{dispute['id']}/resolve",
        json={"resolution": "modified", "new_scores": {str(p1): 7, str(p2): 7}},
        headers=as_user(p1),
    )

    assert response.status_code == 200
    assert response.json()["resolution_scores"] == {str(p1): 7, str(p2): 7}
    results = {p["result"] for p in client.get(f"/api/matches/{match['id']}").json()["participants"]}
    assert results == {"draw"}


def test_score_edit_blocked_while_disputed(client: TestClient, api_match):
    match, p1, p2, _ = api_match
    client.post(f"/api/matches/{match['id']}/disputes", json={"reason": "x"}, headers=as_user(p2))

    response = client.patch(
        f"/api/matches/{match['id']}/scores", json={"scores": {str(p1): 11}}, headers=as_user(p1)
    )
    assert response.status_code == 409
    assert response.json()["detail"].startswith("MATCH_UNDER_DISPUTE")


def test_league_open_disputes_listing(client: TestClient, api_match):
    match, p1, p2, p3 = api_match
    client.post(f"/api/matches/{match['id']}/disputes", json={"reason": "x"}, headers=as_user(p2))

    visible = client.get(f"/api/leagues/{match['league_id']}/disputes", headers=as_user(p1)).json()
    assert [d["match_id"] for d in visible] == [match["id"]]
    assert client.get(f"/api/leagues/{match['league_id']}/disputes", headers=as_user(p3)).json() == []
