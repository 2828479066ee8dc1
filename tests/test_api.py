"""API-level tests for the Flask app."""

import pytest

from app import app


@pytest.fixture
def client():
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def setup_profile(client, weight_kg=70, gender="male"):
    res = client.post("/api/setup", json={"weight_kg": weight_kg, "gender": gender})
    assert res.status_code == 200
    return res.get_json()


def test_healthz(client):
    res = client.get("/healthz")
    assert res.status_code == 200
    assert res.get_json() == {"ok": True}


def test_state_unconfigured(client):
    res = client.get("/api/state")
    assert res.status_code == 200
    data = res.get_json()
    assert data["configured"] is False
    assert data["status"]["tier"] == "incomplete_profile"
    assert data["status"]["current_bac"] == 0
    assert data["status"]["sober_at_ms"] is None


def test_setup_clamps_and_parses(client):
    data = setup_profile(client, weight_kg="999", gender="Female")
    assert data["profile"]["weightKg"] == 300.0
    assert data["profile"]["gender"] == "female"


def test_setup_rejects_unknown_gender(client):
    res = client.post("/api/setup", json={"weight_kg": 70, "gender": "other"})
    assert res.status_code == 400
    assert "error" in res.get_json()


def test_drink_requires_setup(client):
    res = client.post("/api/drink", json={"volume_ml": 500, "abv": 5, "minutes_ago": 0})
    assert res.status_code == 400
    assert "error" in res.get_json()


@pytest.mark.parametrize(
    "payload",
    [
        {"abv": 5},
        {"volume_ml": 0, "abv": 5},
        {"volume_ml": 500, "abv": 120},
        {"volume_ml": "lots", "abv": 5},
        {"volume_ml": 50, "abv": 400, "mixer_ml": 150},
        {"volume_ml": 50, "abv": -5, "mixer_ml": 150},
    ],
)
def test_drink_validation(client, payload):
    setup_profile(client)
    res = client.post("/api/drink", json=payload)
    assert res.status_code == 400


def test_drink_and_state_roundtrip(client):
    setup_profile(client)
    add = client.post("/api/drink", json={"volume_ml": 500, "abv": 5, "minutes_ago": 120, "name": "Pint"})
    assert add.status_code == 200
    assert add.get_json()["drink_count"] == 1

    data = client.get("/api/state").get_json()
    assert data["configured"] is True
    assert data["drink_count"] == 1
    assert data["status"]["current_bac"] == 0.011
    assert data["status"]["tier"] == "buzzed"
    assert data["status"]["sober_at_ms"] is not None

    gl = client.get("/api/state?unit=gl").get_json()
    assert gl["display_bac"] == 0.11


def test_state_rejects_unknown_unit(client):
    assert client.get("/api/state?unit=ppm").status_code == 400


def test_mixed_drink(client):
    setup_profile(client)
    res = client.post("/api/drink", json={"volume_ml": 50, "abv": 40, "mixer_ml": 150, "name": "Rum", "mixer_name": "Cola"})
    assert res.status_code == 200
    drink = res.get_json()["drink"]
    assert drink["volumeMl"] == 200
    assert drink["abv"] == 10.0
    assert drink["category"] == "cocktail"


def test_delete_and_reset(client):
    setup_profile(client)
    first = client.post("/api/drink", json={"volume_ml": 330, "abv": 5}).get_json()["drink"]
    client.post("/api/drink", json={"volume_ml": 125, "abv": 12})
    assert len(client.get("/api/drinks").get_json()["items"]) == 2

    assert client.delete("/api/drink/nope").status_code == 404
    res = client.delete(f"/api/drink/{first['id']}")
    assert res.status_code == 200
    assert res.get_json()["drink_count"] == 1

    client.post("/api/reset")
    assert client.get("/api/drinks").get_json()["items"] == []
    # Profile survives a reset.
    assert client.get("/api/state").get_json()["configured"] is True


def test_setup_keeps_logged_drinks(client):
    setup_profile(client)
    client.post("/api/drink", json={"volume_ml": 330, "abv": 5})
    setup_profile(client, weight_kg=80)
    assert len(client.get("/api/drinks").get_json()["items"]) == 1


def test_trend(client):
    setup_profile(client)
    client.post("/api/drink", json={"volume_ml": 500, "abv": 5, "minutes_ago": 60})
    data = client.get("/api/trend").get_json()
    points = data["points"]
    assert len(points) == 85
    assert points[-1]["t"] - points[0]["t"] == pytest.approx(14 * 3_600_000)
    assert [p["t"] for p in points] == sorted(p["t"] for p in points)
    assert points[-1]["projected"] is True
    assert points[0]["projected"] is False
    assert data["peak"]["bac"] > 0
    assert data["limit"] == 0.05


def test_trend_pan_and_unit(client):
    setup_profile(client)
    center = 1_700_000_000_000
    data = client.get(f"/api/trend?center={center}&pan=-1&unit=gl").get_json()
    assert data["center"] == center - 4 * 3_600_000
    assert data["limit"] == 0.5
    assert all(p["bac"] == 0 for p in data["points"])


def test_trend_requires_setup(client):
    assert client.get("/api/trend").status_code == 400


def test_references(client):
    items = client.get("/api/references?category=wine").get_json()["items"]
    assert items and all(i["category"] == "wine" for i in items)


def test_graph_png(client):
    pytest.importorskip("matplotlib")
    setup_profile(client)
    client.post("/api/drink", json={"volume_ml": 500, "abv": 5, "minutes_ago": 30})
    res = client.get("/api/graph.png")
    assert res.status_code == 200
    assert res.mimetype == "image/png"
    assert res.data[:8] == b"\x89PNG\r\n\x1a\n"


@pytest.mark.parametrize("center", ["nan", "inf", "-inf", "soon"])
def test_trend_rejects_non_finite_center(client, center):
    setup_profile(client)
    res = client.get(f"/api/trend?center={center}")
    assert res.status_code == 400
    assert "error" in res.get_json()


def test_trend_points_match_curve_data(client):
    setup_profile(client)
    client.post("/api/drink", json={"volume_ml": 500, "abv": 5, "minutes_ago": 60})
    data = client.get("/api/trend?unit=gl").get_json()
    assert set(data["points"][0]) == {"t", "bac", "projected"}
    best = max(p["bac"] for p in data["points"])
    assert data["peak"]["bac"] == best
    assert data["peak"]["t"] == min(p["t"] for p in data["points"] if p["bac"] == best)


def test_references_include_presets(client):
    presets = client.get("/api/references").get_json()["presets"]
    assert presets["beer"]["pint"] == 500
    assert presets["shot"]["standard"] == 40
    assert presets["wine"]["glass"] == 125


def test_drink_reports_minutes_at_profile_pace(client):
    res = client.post("/api/setup", json={"weight_kg": 70, "gender": "male", "pace": "fast"})
    assert res.get_json()["profile"]["pace"] == "fast"
    drink = client.post("/api/drink", json={"volume_ml": 250, "abv": 5, "category": "beer"}).get_json()
    assert drink["drinking_minutes"] == 10.0


def test_setup_rejects_unknown_pace(client):
    res = client.post("/api/setup", json={"weight_kg": 70, "gender": "male", "pace": "chug"})
    assert res.status_code == 400
