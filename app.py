"""BAC estimator Flask app.

Run from project root:
    python app.py
"""

import io
import logging
import math
import os
from datetime import timedelta
from typing import Any

from flask import Flask, Response, jsonify, request, session as flask_session

from bac_estimator.drinks import DrinkEvent, Pace, drinking_minutes, list_references, mixed_drink, new_drink_id, serving_presets
from bac_estimator.profile import BiologicalSex, UserProfile
from bac_estimator.session import MS_PER_MINUTE, Session, now_ms
from bac_estimator.trend import DEFAULT_CONFIG, pan
from bac_estimator.units import BacUnit, legal_limit, to_display
from bac_estimator.graph import curve_data, save_bac_graph

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config["SECRET_KEY"] = os.environ.get("APP_SECRET_KEY", "dev-only-change-me")
app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
app.config["SESSION_COOKIE_HTTPONLY"] = True
app.config["SESSION_COOKIE_SECURE"] = os.environ.get("SESSION_COOKIE_SECURE", "0") == "1"
app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=30)

MIN_WEIGHT_KG = 30.0
MAX_WEIGHT_KG = 300.0
MAX_VOLUME_ML = 5000.0
MAX_MINUTES_AGO = 24 * 60.0
SESSION_KEY = "bac_session"


def _clamp_float(value: Any, default: float, min_value: float, max_value: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        parsed = default
    return max(min_value, min(max_value, parsed))


def _required_float(data: dict, key: str) -> float:
    try:
        return float(data[key])
    except (KeyError, TypeError, ValueError):
        raise ValueError(f"{key} is required and must be a number") from None


def _parse_unit(value: Any) -> BacUnit:
    try:
        return BacUnit(str(value or BacUnit.PERCENT.value).lower())
    except ValueError:
        raise ValueError("unit must be percent or gl") from None


def get_session() -> Session | None:
    return Session.from_dict(flask_session.get(SESSION_KEY))


def set_session(model: Session | None):
    if model is None:
        flask_session.pop(SESSION_KEY, None)
        return
    flask_session[SESSION_KEY] = model.to_dict()


def _error(message: str, status: int = 400):
    return jsonify({"error": message}), status


def _setup_required_error():
    return _error("Set up your profile first")


@app.route("/healthz")
def healthz():
    return jsonify({"ok": True})


@app.route("/api/references")
def api_references():
    category = request.args.get("category") or None
    return jsonify({"items": list_references(category), "presets": serving_presets()})


@app.route("/api/setup", methods=["POST"])
def api_setup():
    data = request.get_json() or {}
    weight = _clamp_float(data.get("weight_kg"), 70.0, MIN_WEIGHT_KG, MAX_WEIGHT_KG)
    gender = str(data.get("gender", "male")).strip().lower()
    try:
        sex = BiologicalSex(gender)
    except ValueError:
        return _error("Gender must be male or female")
    try:
        pace = Pace(str(data.get("pace", Pace.AVERAGE.value)).strip().lower())
    except ValueError:
        return _error("Pace must be slow, average or fast")

    existing = get_session()
    profile = UserProfile(weight_kg=weight, biological_sex=sex, pace=pace)
    model = Session(profile=profile)
    if existing is not None:
        for drink in existing.drinks:
            model.add(drink)
    set_session(model)
    flask_session.permanent = True
    logger.info("profile set up: %.1f kg %s", weight, sex.value)
    return jsonify({"ok": True, "profile": profile.to_dict()})


@app.route("/api/drink", methods=["POST"])
def api_drink():
    model = get_session()
    if model is None:
        return _setup_required_error()
    data = request.get_json() or {}

    now = now_ms()
    if "timestamp_ms" in data:
        ts = _clamp_float(data.get("timestamp_ms"), now, now - MAX_MINUTES_AGO * MS_PER_MINUTE, now)
    else:
        minutes_ago = _clamp_float(data.get("minutes_ago"), 0.0, 0.0, MAX_MINUTES_AGO)
        ts = now - minutes_ago * MS_PER_MINUTE

    try:
        volume = _required_float(data, "volume_ml")
        abv = _required_float(data, "abv")
        if not (0 < volume <= MAX_VOLUME_ML):
            raise ValueError(f"volume_ml must be between 0 and {MAX_VOLUME_ML:.0f}")
        name = data.get("name")
        if "mixer_ml" in data:
            mixer = _clamp_float(data.get("mixer_ml"), 0.0, 0.0, MAX_VOLUME_ML)
            drink = mixed_drink(volume, abv, mixer, ts, name=name, mixer_name=data.get("mixer_name"))
        else:
            drink = DrinkEvent.from_dict(
                {
                    "id": new_drink_id(),
                    "volumeMl": volume,
                    "abv": abv,
                    "timestampMs": ts,
                    "name": name,
                    "icon": data.get("icon"),
                    "category": data.get("category"),
                }
            )
        if not drink.is_valid():
            raise ValueError("abv must be within 0-100")
    except ValueError as exc:
        return _error(str(exc))

    model.add(drink)
    set_session(model)
    return jsonify(
        {
            "ok": True,
            "drink": drink.to_dict(),
            "drink_count": len(model.drinks),
            "drinking_minutes": drinking_minutes(drink.volume_ml, drink.category, model.profile.pace),
        }
    )


@app.route("/api/drink/<drink_id>", methods=["DELETE"])
def api_drink_delete(drink_id: str):
    model = get_session()
    if model is None:
        return _setup_required_error()
    if not model.remove_drink(drink_id):
        return _error("Drink not found", 404)
    set_session(model)
    return jsonify({"ok": True, "drink_count": len(model.drinks)})


@app.route("/api/drinks")
def api_drinks():
    model = get_session()
    drinks = model.drinks if model else ()
    return jsonify({"items": [d.to_dict() for d in reversed(drinks)]})


@app.route("/api/reset", methods=["POST"])
def api_reset():
    model = get_session()
    if model is not None:
        model.clear()
        set_session(model)
    return jsonify({"ok": True})


@app.route("/api/state")
def api_state():
    model = get_session()
    now = now_ms()
    try:
        unit = _parse_unit(request.args.get("unit"))
    except ValueError as exc:
        return _error(str(exc))
    if model is None:
        profile = UserProfile(weight_kg=0.0, is_profile_complete=False)
        status = Session(profile=profile).status(now)
        return jsonify({"configured": False, "status": status.to_dict(), "display_bac": 0.0, "drink_count": 0})

    status = model.status(now)
    return jsonify(
        {
            "configured": True,
            "profile": model.profile.to_dict(),
            "status": status.to_dict(),
            "display_bac": to_display(status.current_bac, unit),
            "unit": unit.value,
            "drink_count": len(model.drinks),
        }
    )


@app.route("/api/trend")
def api_trend():
    model = get_session()
    if model is None:
        return _setup_required_error()
    now = now_ms()
    try:
        unit = _parse_unit(request.args.get("unit"))
    except ValueError as exc:
        return _error(str(exc))
    try:
        center = pan(float(request.args.get("center", now)), int(request.args.get("pan", 0)), DEFAULT_CONFIG)
    except (ValueError, OverflowError):
        return _error("center and pan must be numbers")
    if not math.isfinite(center):
        return _error("center and pan must be numbers")

    points = curve_data(model, center, DEFAULT_CONFIG, unit=unit, now=now)
    peak = max(points, key=lambda p: p["bac"])
    return jsonify(
        {
            "center": center,
            "now": now,
            "unit": unit.value,
            "limit": legal_limit(unit),
            "points": points,
            "peak": {"t": peak["t"], "bac": peak["bac"]},
        }
    )


@app.route("/api/graph.png")
def api_graph():
    model = get_session()
    if model is None:
        return _setup_required_error()
    try:
        unit = _parse_unit(request.args.get("unit"))
    except ValueError as exc:
        return _error(str(exc))
    buf = io.BytesIO()
    try:
        save_bac_graph(model, output_path=buf, unit=unit)
    except ImportError as exc:
        logger.error("graph unavailable: %s", exc)
        return _error("Graph rendering is unavailable", 503)
    return Response(buf.getvalue(), mimetype="image/png")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=os.environ.get("FLASK_DEBUG", "0") == "1")
