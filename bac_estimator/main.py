"""
BAC estimator CLI. Run from project root: python -m bac_estimator
Logs drinks given on the command line (or a demo set), prints the current
status and trend summary, and optionally saves a graph.
"""

import argparse
import logging
import sys
from datetime import datetime

from bac_estimator.drinks import get_reference
from bac_estimator.graph import save_bac_graph
from bac_estimator.profile import BiologicalSex, UserProfile
from bac_estimator.session import Session, now_ms
from bac_estimator.trend import peak_point
from bac_estimator.units import BacUnit, format_bac

logger = logging.getLogger(__name__)


def _parse_drink(value: str):
    """VOLUME_ML:ABV:MINUTES_AGO -> (volume, abv, minutes_ago)."""
    parts = value.split(":")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError("drink must be VOLUME_ML:ABV:MINUTES_AGO")
    try:
        volume, abv, minutes_ago = (float(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number in {value!r}") from None
    if volume <= 0 or not 0 <= abv <= 100:
        raise argparse.ArgumentTypeError("volume must be > 0 and abv within 0-100")
    return volume, abv, minutes_ago


def _fmt_time(ms: float) -> str:
    return datetime.fromtimestamp(ms / 1000.0).strftime("%H:%M")


def main(argv=None):
    parser = argparse.ArgumentParser(description="BAC estimator: log drinks and view BAC over time")
    parser.add_argument("--weight", type=float, default=70.0, help="Body weight (kg)")
    parser.add_argument("--female", action="store_true", help="Use the female distribution ratio")
    parser.add_argument("--drink", type=_parse_drink, action="append", default=[], metavar="ML:ABV:MIN_AGO", help="Log a drink (repeatable)")
    parser.add_argument("--demo", action="store_true", help="Run with demo drinks (pint of lager 2h ago, red wine 1h ago)")
    parser.add_argument("--unit", choices=[u.value for u in BacUnit], default=BacUnit.PERCENT.value, help="Display unit")
    parser.add_argument("--graph", type=str, metavar="FILE", help="Save BAC graph to FILE (e.g. bac_graph.png)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    sex = BiologicalSex.FEMALE if args.female else BiologicalSex.MALE
    session = Session(profile=UserProfile(weight_kg=args.weight, biological_sex=sex))
    now = now_ms()
    unit = BacUnit(args.unit)

    for volume, abv, minutes_ago in args.drink:
        session.add_drink_ago(minutes_ago, volume, abv, now=now)
    if args.demo or not args.drink:
        lager = get_reference("lager")
        wine = get_reference("red-wine")
        session.add(lager.as_drink(now - 120 * 60_000, volume_ml=500))
        session.add(wine.as_drink(now - 60 * 60_000))
        print("Demo session: pint of lager 2h ago, glass of red wine 1h ago")

    status = session.status(now)
    print(f"Weight: {args.weight} kg ({sex.value}), drinks logged: {len(session.drinks)}")
    print(f"BAC now: {format_bac(status.current_bac, unit)} [{status.tier.value}]")
    if status.sober_at_ms is not None:
        print(f"Sober at about {_fmt_time(status.sober_at_ms)} ({status.hours_until_sober():.1f}h)")

    points = session.trend(now)
    peak = peak_point(points)
    print(f"Trend points: {len(points)} from {_fmt_time(points[0].timestamp_ms)} to {_fmt_time(points[-1].timestamp_ms)}")
    if peak is not None and peak.bac > 0:
        print(f"Peak in window: {format_bac(peak.bac, unit)} at {_fmt_time(peak.timestamp_ms)}")

    if args.graph:
        try:
            path = save_bac_graph(session, output_path=args.graph, now=now, unit=unit)
            print(f"Graph saved: {path}")
        except ImportError:
            logger.error("matplotlib not installed. pip install matplotlib")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
