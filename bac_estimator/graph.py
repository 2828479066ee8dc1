"""
BAC trend graph. Produces image file or returns data for web/mobile.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from bac_estimator.session import Session, now_ms
from bac_estimator.trend import DEFAULT_CONFIG, TrendConfig, peak_point
from bac_estimator.units import BacUnit, legal_limit, to_display


def curve_data(
    session: Session,
    center: Optional[float] = None,
    config: TrendConfig = DEFAULT_CONFIG,
    unit: BacUnit = BacUnit.PERCENT,
    now: Optional[float] = None,
) -> List[dict]:
    """{t, bac, projected} samples for use in any frontend."""
    now = now_ms() if now is None else now
    center = now if center is None else center
    return [
        {"t": p.timestamp_ms, "bac": to_display(p.bac, unit), "projected": p.is_projected(now)}
        for p in session.trend(center, config)
    ]


def save_bac_graph(
    session: Session,
    output_path: str = "bac_graph.png",
    center: Optional[float] = None,
    config: TrendConfig = DEFAULT_CONFIG,
    unit: BacUnit = BacUnit.PERCENT,
    now: Optional[float] = None,
    title: str = "BAC trend",
) -> str:
    """
    Plot the BAC trend with matplotlib and save to file.
    ``output_path`` may also be a binary file object.
    Returns output_path. Requires: pip install matplotlib
    """
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        raise ImportError("matplotlib is required for save_bac_graph. pip install matplotlib")

    now = now_ms() if now is None else now
    center = now if center is None else center
    points = session.trend(center, config)
    times = [datetime.fromtimestamp(p.timestamp_ms / 1000.0) for p in points]
    bacs = [to_display(p.bac, unit) for p in points]
    projected = [p.is_projected(now) for p in points]
    limit = legal_limit(unit)
    suffix = "%" if BacUnit(unit) is BacUnit.PERCENT else "g/L"

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(times, bacs, color="#d946ef", linewidth=2, label="BAC")
    ax.fill_between(times, bacs, where=[not f for f in projected], alpha=0.25, color="#d946ef", label="Estimated")
    ax.fill_between(times, bacs, where=projected, alpha=0.12, color="#6366f1", label="Projected")
    ax.axhline(y=limit, color="#dc2626", linestyle="--", linewidth=1, label=f"Limit ({limit} {suffix})")
    if times[0] <= datetime.fromtimestamp(now / 1000.0) <= times[-1]:
        ax.axvline(x=datetime.fromtimestamp(now / 1000.0), color="#60a5fa", linewidth=1, label="Now")
    peak = peak_point(points)
    if peak is not None and peak.bac > 0:
        ax.annotate(
            f"peak {to_display(peak.bac, unit)}",
            xy=(datetime.fromtimestamp(peak.timestamp_ms / 1000.0), to_display(peak.bac, unit)),
            xytext=(0, 8),
            textcoords="offset points",
            ha="center",
        )
    ax.set_xlabel("Time")
    ax.set_ylabel(f"BAC ({suffix})")
    ax.set_title(title)
    ax.legend(loc="upper right")
    ax.set_ylim(bottom=0, top=max(limit * 1.5, max(bacs) * 1.2))
    ax.grid(True, alpha=0.3)
    fig.autofmt_xdate()
    fig.tight_layout()
    if isinstance(output_path, (str, Path)):
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=150, format="png")
    plt.close(fig)
    return output_path
