#!/usr/bin/env python3
"""Terminal view of recent ingest runs.

Shows each run with its duration and status, plus the change files that
produced block errors.

Usage:
    python scripts/log_dashboard.py             # last 20 runs
    python scripts/log_dashboard.py --tail 50
"""

from __future__ import annotations

import argparse
import sys
from datetime import datetime
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))

from sobi_ingest.run_log import get_log_path, load_recent_runs  # noqa: E402

# ANSI (strip if not TTY for pipes)
G = "\033[92m"  # green
Y = "\033[33m"  # amber
R = "\033[91m"  # red
D = "\033[90m"  # dim
B = "\033[1m"  # bold
X = "\033[0m"  # reset


def _t(s: str) -> str:
    """Shorten timestamp to month/day hour:minute."""
    try:
        dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
        return dt.strftime("%m/%d %H:%M")
    except ValueError:
        return s[:16]


def _fmt_dur(s: float | None) -> str:
    if s is None:
        return "-"
    if s >= 60:
        return f"{s / 60:.1f}m"
    return f"{s:.1f}s"


def main() -> int:
    parser = argparse.ArgumentParser(description="View recent SOBI ingest runs.")
    parser.add_argument(
        "--tail",
        "-n",
        type=int,
        default=20,
        help="Number of recent runs to show (default: 20).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI color.")
    args = parser.parse_args()

    if args.no_color or not sys.stdout.isatty():
        global G, Y, R, D, B, X
        G = Y = R = D = B = X = ""

    path = get_log_path()
    runs = load_recent_runs(n=args.tail, task="ingest")
    if not runs:
        print(f"{D}No ingest runs in {path}{X}")
        return 0

    print(f"{B}{G}== INGEST RUNS  tail={len(runs)} =={X}")
    for r in runs:
        status_color = G if r.status == "ok" else R
        blocks = r.meta.get("blocks", 0)
        errors = r.meta.get("errors", 0)
        print(
            f"  {D}{_t(r.started_at)}{X}  {_fmt_dur(r.duration_s):>6}  "
            f"{status_color}{r.status}{X}  {r.meta.get('files', 0)} files  "
            f"{blocks} blocks  {Y if errors else D}{errors} errors{X}  {D}#{r.run_id}{X}"
        )
        if r.error:
            print(f"       {R}{r.error}{X}")
        for p in r.phases:
            if p.get("errors"):
                print(f"       {D}└ {p.get('name', '?')}: {Y}{p['errors']} errors{X}")
    print(f"{D}Log file: {path}{X}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
