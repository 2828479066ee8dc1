"""Trend sampler tests."""
import pytest

from bac_estimator.calculations import MS_PER_HOUR
from bac_estimator.drinks import DrinkEvent
from bac_estimator.profile import UserProfile
from bac_estimator.status import estimate
from bac_estimator.trend import (
    DEFAULT_CONFIG,
    TrendConfig,
    TrendPoint,
    nearest_point,
    pan,
    peak_point,
    sample_times,
    sample_trend,
)

NOW = 1_700_000_000_000
PROFILE = UserProfile(weight_kg=70)


def beer(hours_ago, id="b"):
    return DrinkEvent(id=id, volume_ml=500, abv=5.0, timestamp_ms=NOW - hours_ago * MS_PER_HOUR)


def test_default_window_shape():
    points = sample_trend([beer(1)], PROFILE, NOW)
    assert len(points) == DEFAULT_CONFIG.sample_count == 85
    assert points[0].timestamp_ms == NOW - 7 * MS_PER_HOUR
    assert points[-1].timestamp_ms == NOW + 7 * MS_PER_HOUR
    gaps = {b.timestamp_ms - a.timestamp_ms for a, b in zip(points, points[1:])}
    assert gaps == {10 * 60_000}


def test_empty_log_gives_flat_baseline():
    points = sample_trend([], PROFILE, NOW)
    assert len(points) == 85
    assert all(p.bac == 0 for p in points)


def test_incomplete_profile_gives_flat_baseline():
    points = sample_trend([beer(1)], UserProfile(weight_kg=0), NOW)
    assert len(points) == 85
    assert all(p.bac == 0 for p in points)


def test_no_effect_before_drink():
    points = sample_trend([beer(-2)], PROFILE, NOW)  # drink two hours in the future
    before = [p for p in points if p.timestamp_ms < NOW + 2 * MS_PER_HOUR]
    assert before and all(p.bac == 0 for p in before)
    at_drink = nearest_point(points, NOW + 2 * MS_PER_HOUR)
    assert at_drink.bac == 0.041


def test_sample_at_now_matches_estimator():
    log = [beer(2, "a"), beer(0.5, "b")]
    point = nearest_point(sample_trend(log, PROFILE, NOW), NOW)
    assert point.timestamp_ms == NOW
    assert point.bac == estimate(log, PROFILE, NOW).current_bac


def test_peak_point():
    points = sample_trend([beer(2)], PROFILE, NOW)
    peak = peak_point(points)
    assert peak.timestamp_ms == NOW - 2 * MS_PER_HOUR
    assert peak.bac == 0.041
    assert peak_point([]) is None
    flat = [TrendPoint(1, 0.0), TrendPoint(2, 0.0)]
    assert peak_point(flat).timestamp_ms == 1


def test_estimate_reports_peak():
    status = estimate([beer(2)], PROFILE, NOW)
    assert status.peak_bac == 0.041
    assert status.peak_at_ms == NOW - 2 * MS_PER_HOUR


def test_projected_points():
    points = sample_trend([beer(0)], PROFILE, NOW)
    projected = [p for p in points if p.is_projected(NOW)]
    assert len(projected) == 42
    assert projected[0].bac < 0.041


def test_idempotent():
    log = [beer(3, "a"), beer(1, "b")]
    assert sample_trend(log, PROFILE, NOW) == sample_trend(log, PROFILE, NOW)


def test_custom_config():
    config = TrendConfig(half_width_hours=1.0, step_minutes=15.0)
    assert config.sample_count == 9
    times = sample_times(NOW, config)
    assert times[0] == NOW - MS_PER_HOUR and times[-1] == NOW + MS_PER_HOUR


@pytest.mark.parametrize("kwargs", [{"step_minutes": 0}, {"step_minutes": -5}, {"half_width_hours": 1.0, "step_minutes": 7}, {"half_width_hours": -1}])
def test_invalid_config(kwargs):
    with pytest.raises(ValueError):
        TrendConfig(**kwargs)


def test_pan():
    assert pan(NOW, -1) == NOW - 4 * MS_PER_HOUR
    assert pan(NOW, 2) == NOW + 8 * MS_PER_HOUR
    assert pan(NOW, 0) == NOW
