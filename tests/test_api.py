import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from backend.api.transformers.report_transformer import _to_camel_case, transform_report_to_frontend
from backend.main import app

FIXTURE = Path(__file__).parent / "fixtures" / "matches_sample.json"


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("WINCON_DATA_PATH", str(FIXTURE))
    with TestClient(app) as c:
        yield c


def test_to_camel_case() -> None:
    assert _to_camel_case("prob_delta_gt") == "probDeltaGt"
    assert _to_camel_case("map_name") == "mapName"
    assert _to_camel_case("lift") == "lift"


def test_transform_camelizes_nested_sections() -> None:
    raw = {
        "meta": {"team_id": "t1", "team_name": "Sentinels", "matches_analyzed": 1},
        "side_identity": [{"map_name": "Ascent", "attack": {"ci_low": 0.1}}],
        "closing_ability": {
            "conversion_rate": None,
            "model": {
                "coefficients": (0.1, 0.5),
                "feature_names": ("leadSize",),
                "lam": 1.0,
                "iterations": 4000,
                "converged": True,
            },
        },
    }
    out = transform_report_to_frontend(raw, {"matches_available": 3})
    assert out["reportInfo"]["teamName"] == "Sentinels"
    assert out["reportInfo"]["matchesAvailable"] == 3
    assert out["sideIdentity"][0]["attack"]["ciLow"] == 0.1
    assert out["closingAbility"]["conversionRate"] is None
    assert out["closingAbility"]["model"]["coefficients"] == {"leadSize": 0.5}
    assert out["playerDependence"] == []


def test_root_lists_endpoints(client) -> None:
    body = client.get("/").json()
    assert body["endpoints"]["wincon"] == "GET /api/teams/{team_id}/wincon"


def test_health_reports_data_file(client) -> None:
    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["data_available"] is True


def test_get_team_wincon(client) -> None:
    resp = client.get("/api/teams/t1/wincon", params={"window": 5})
    assert resp.status_code == 200
    body = resp.json()
    assert body["reportInfo"]["teamName"] == "Sentinels"
    assert body["reportInfo"]["mapsAnalyzed"] == 3
    assert [r["mapName"] for r in body["sideIdentity"]] == ["Ascent", "Bind"]
    assert len(body["closingAbility"]["predictedStates"]) == 4


def test_get_team_wincon_map_filter(client) -> None:
    body = client.get("/api/teams/t1/wincon", params={"map": "ascent"}).json()
    assert body["reportInfo"]["mapsAnalyzed"] == 1
    assert body["filters"]["map"] == "ascent"


def test_unknown_team_is_404(client) -> None:
    resp = client.get("/api/teams/nobody/wincon")
    assert resp.status_code == 404
    assert resp.json()["detail"]["error"]["code"] == "NO_DATA"


def test_missing_data_file_is_404(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("WINCON_DATA_PATH", str(tmp_path / "missing.json"))
    with TestClient(app) as c:
        resp = c.get("/api/teams/t1/wincon")
    assert resp.status_code == 404


def test_invalid_window_is_rejected(client) -> None:
    assert client.get("/api/teams/t1/wincon", params={"window": 0}).status_code == 422
    assert client.get("/api/teams/t1/wincon", params={"side": "left"}).status_code == 422


def test_generate_from_posted_matches(client) -> None:
    matches = json.loads(FIXTURE.read_text(encoding="utf-8"))["matches"]
    resp = client.post(
        "/api/wincon/generate",
        json={"teamId": "t1", "teamName": "SEN", "matches": matches, "window": 1, "side": "attack"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["reportInfo"]["teamName"] == "SEN"
    assert body["reportInfo"]["matchesAnalyzed"] == 1
    assert body["filters"]["side"] == "attack"
    assert all(r["identity"] == "N/A" for r in body["sideIdentity"])


def test_generate_rejects_bad_body(client) -> None:
    resp = client.post("/api/wincon/generate", json={"teamId": "t1", "matches": [], "window": 99})
    assert resp.status_code == 422


def test_generate_without_team_matches_is_404(client) -> None:
    resp = client.post("/api/wincon/generate", json={"teamId": "t1", "matches": []})
    assert resp.status_code == 404


@pytest.mark.parametrize(
    "maps",
    [
        ["Ascent"],
        [{"mapName": "Ascent", "rounds": [{"side": ["t1", "attacker"]}]}],
    ],
)
def test_generate_rejects_malformed_matches(client, maps) -> None:
    resp = client.post("/api/wincon/generate", json={"teamId": "t1", "matches": [{"id": "m", "maps": maps}]})
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"]["code"] == "INVALID_REQUEST"


def test_generate_ignores_matches_without_the_team(client) -> None:
    foreign = {
        "id": "other",
        "maps": [
            {
                "mapName": "Bind",
                "teamStats": [{"teamId": "t8", "score": 13}, {"teamId": "t9", "score": 5}],
                "rounds": [],
            }
        ],
    }
    matches = [foreign] + json.loads(FIXTURE.read_text(encoding="utf-8"))["matches"]
    resp = client.post("/api/wincon/generate", json={"teamId": "t1", "matches": matches, "window": 1})
    assert resp.status_code == 200
    body = resp.json()
    assert body["reportInfo"]["matchesAvailable"] == 2
    assert body["reportInfo"]["mapsAnalyzed"] == 1
    assert [r["mapName"] for r in body["sideIdentity"]] == ["Ascent"]
