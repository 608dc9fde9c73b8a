"""
Endpoint tests for the stateless standings / playoffs / scoring API.
"""
from fastapi.testclient import TestClient


def _match(home, away, hg=None, ag=None):
    outcome = {"home_goals": hg, "away_goals": ag} if hg is not None else None
    return {"home_team_id": home, "away_team_id": away, "outcome": outcome}


TEAM_IDS = ["team1", "team2", "team3", "team4"]

# team1/team4 level on 6; team4 won the meeting, team1 has the better GD
MATCHES = [
    _match("team1", "team2", 3, 0),
    _match("team3", "team4", 1, 2),
    _match("team1", "team3", 2, 0),
    _match("team2", "team4", 3, 0),
    _match("team1", "team4", 1, 2),
    _match("team2", "team3", 0, 0),
]


def test_health(client: TestClient):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestStandingsEndpoint:
    def test_aggregate_order(self, client: TestClient):
        response = client.post(
            "/api/standings",
            json={"team_ids": TEAM_IDS, "matches": MATCHES, "head_to_head_first": False},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["complete"] is True
        assert [r["team_id"] for r in data["standings"]] == ["team1", "team4", "team2", "team3"]
        first = data["standings"][0]
        assert first["position"] == 1
        assert first["points"] == 6
        assert first["goal_difference"] == 4

    def test_head_to_head_order(self, client: TestClient):
        response = client.post(
            "/api/standings",
            json={"team_ids": TEAM_IDS, "matches": MATCHES, "head_to_head_first": True},
        )
        assert response.status_code == 200
        assert [r["team_id"] for r in response.json()["standings"]][:2] == ["team4", "team1"]

    def test_incomplete_group(self, client: TestClient):
        response = client.post(
            "/api/standings",
            json={"team_ids": TEAM_IDS, "matches": MATCHES[:5] + [_match("team2", "team3")]},
        )
        assert response.status_code == 200
        assert response.json()["complete"] is False

    def test_negative_goals_rejected(self, client: TestClient):
        response = client.post(
            "/api/standings",
            json={"team_ids": ["x", "y"], "matches": [_match("x", "y", -2, 0)]},
        )
        assert response.status_code == 422
        assert "Invalid score" in response.json()["detail"]

    def test_duplicate_team_rejected(self, client: TestClient):
        response = client.post("/api/standings", json={"team_ids": ["x", "x"]})
        assert response.status_code == 422

    def test_empty_team_ids_rejected(self, client: TestClient):
        response = client.post("/api/standings", json={"team_ids": []})
        assert response.status_code == 422


class TestPlayoffsEndpoint:
    def test_resolve_group_positions(self, client: TestClient):
        other = ["b1", "b2"]
        response = client.post(
            "/api/playoffs/resolve",
            json={
                "groups": [
                    {"group_letter": "a", "team_ids": TEAM_IDS, "matches": MATCHES},
                    {"group_letter": "B", "team_ids": other, "matches": [_match("b2", "b1", 1, 0)]},
                ],
                "slots": [
                    {
                        "slot_id": "qf1",
                        "home_rule": {"group": "A", "position": 1},
                        "away_rule": {"group": "B", "position": 2},
                    }
                ],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["slots"] == [{"slot_id": "qf1", "home_team_id": "team1", "away_team_id": "b1"}]
        assert data["third_place_combination"] is None

    def test_invalid_position_rejected(self, client: TestClient):
        response = client.post(
            "/api/playoffs/resolve",
            json={
                "groups": [],
                "slots": [
                    {
                        "slot_id": "qf1",
                        "home_rule": {"group": "A", "position": 0},
                        "away_rule": {"group": "B", "position": 2},
                    }
                ],
            },
        )
        assert response.status_code == 422

    def test_best_third_placed_team(self, client: TestClient):
        # a2/a3 level on 1 point, a3 third by input order; b3 has no points
        group_a = [_match("a1", "a2", 1, 0), _match("a2", "a3", 1, 1), _match("a1", "a3", 1, 0)]
        group_b = [_match("b1", "b2", 2, 0), _match("b2", "b3", 1, 0), _match("b1", "b3", 2, 0)]
        response = client.post(
            "/api/playoffs/resolve",
            json={
                "groups": [
                    {"group_letter": "A", "team_ids": ["a1", "a2", "a3"], "matches": group_a},
                    {"group_letter": "B", "team_ids": ["b1", "b2", "b3"], "matches": group_b},
                ],
                "slots": [
                    {
                        "slot_id": "r16",
                        "home_rule": {"group": "B", "position": 1},
                        "away_rule": {"group": "A/B", "position": 3},
                    }
                ],
                "third_place_rules": {"A": {"A/B": "A"}},
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["third_place_combination"] == "A"
        assert data["slots"] == [{"slot_id": "r16", "home_team_id": "b1", "away_team_id": "a3"}]

    def test_fixtures_with_guesses(self, client: TestClient):
        group = {
            "group_letter": "A",
            "team_ids": ["x", "y"],
            "fixtures": [{"fixture_id": "f1", "home_team_id": "x", "away_team_id": "y"}],
            "results": [{"fixture_id": "f1"}],
            "guesses": [{"fixture_id": "f1", "home_score": 0, "away_score": 2}],
        }
        slot = {
            "slot_id": "final",
            "home_rule": {"group": "A", "position": 1},
            "away_rule": {"group": "A", "position": 2},
        }
        response = client.post("/api/playoffs/resolve", json={"groups": [group], "slots": [slot]})
        assert response.status_code == 200
        assert response.json()["slots"] == [{"slot_id": "final", "home_team_id": "y", "away_team_id": "x"}]

        group["guesses"] = []
        response = client.post("/api/playoffs/resolve", json={"groups": [group], "slots": [slot]})
        assert response.status_code == 200
        assert response.json()["slots"] == [{"slot_id": "final", "home_team_id": None, "away_team_id": None}]


class TestScoringEndpoint:
    def test_score_group(self, client: TestClient):
        response = client.post(
            "/api/qualifiers/score",
            json={
                "team_ids": TEAM_IDS,
                "actual_matches": MATCHES,
                "guessed_matches": MATCHES,
                "qualifying_positions": 2,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total_points"] == 4
        assert [t["team_id"] for t in data["teams"]] == ["team1", "team4", "team2", "team3"]

    def test_custom_points(self, client: TestClient):
        response = client.post(
            "/api/qualifiers/score",
            json={
                "team_ids": TEAM_IDS,
                "actual_matches": MATCHES,
                "guessed_matches": MATCHES,
                "qualified_team_points": 2,
                "exact_position_qualified_points": 3,
            },
        )
        assert response.status_code == 200
        assert response.json()["total_points"] == 10

    def test_invalid_guess_rejected(self, client: TestClient):
        response = client.post(
            "/api/qualifiers/score",
            json={
                "team_ids": ["x", "y"],
                "actual_matches": [],
                "guessed_matches": [_match("x", "y", 1, -1)],
            },
        )
        assert response.status_code == 422
