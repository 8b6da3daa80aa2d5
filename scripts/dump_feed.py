#!/usr/bin/env python3
"""Dump everything pymetra can fetch from the Metra GTFS API.

Prints parsed positions, stations, shapes and (optionally) one trip's stop
times with their derived time labels, so decoding gaps are easy to spot.

Usage
-----
Set environment variables and run::

    export METRA_API_USERNAME="your-api-key"
    export METRA_API_PASSWORD="your-api-secret"
    python scripts/dump_feed.py

Options::

    --line UP-W          Only show trains/stations/shapes of this line
    --trip TRIP_ID       Also dump the stop times of this trip
    --watch N            Keep polling positions N times at the configured interval
    --json               Output as machine-readable JSON
    --output FILE        Write JSON output to FILE
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import traceback
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pymetra import MetraClient, MetraConfig, MetraLine, ResourceKind, SnapshotUpdate, line_color  # noqa: E402
from pymetra.models import filter_positions, filter_shapes, filter_stations, group_shapes, sort_stop_times  # noqa: E402
from pymetra.tracker import MetraTracker  # noqa: E402

# ── helpers ──────────────────────────────────────────────────


def _section(title: str) -> str:
    line = "=" * 60
    return f"\n{line}\n  {title}\n{line}"


async def dump_once(client: MetraClient, *, line: MetraLine, trip: str | None, out: list[str]) -> dict[str, Any]:
    result: dict[str, Any] = {}

    # ── Positions ──
    out.append(_section(f"POSITIONS  line={line}"))
    try:
        positions = filter_positions(await client.get_positions(), line)
        for p in positions:
            out.append(
                f"  {p.id:>8}  {p.route_id or '?':<6} trip={p.trip_id}  "
                f"({p.latitude:.5f}, {p.longitude:.5f})  bearing={p.bearing}"
            )
        result["positions"] = [p.model_dump(exclude={"raw"}) for p in positions]
    except Exception as exc:
        out.append(f"  !! positions failed: {exc}")
        result["positions"] = {"error": str(exc), "traceback": traceback.format_exc()}

    # ── Stations ──
    out.append(_section(f"STATIONS  line={line}"))
    try:
        stations = filter_stations(await client.get_stations(), line)
        for s in stations:
            owner = s.line.value if s.line else "*"
            out.append(f"  {s.stop_id:<12} {owner:<6} {s.stop_name}")
        result["stations"] = [s.model_dump(exclude={"raw"}) for s in stations]
    except Exception as exc:
        out.append(f"  !! stations failed: {exc}")
        result["stations"] = {"error": str(exc), "traceback": traceback.format_exc()}

    # ── Shapes ──
    out.append(_section(f"SHAPES  line={line}"))
    try:
        shapes = filter_shapes(group_shapes(await client.get_shapes()), line)
        for shape_id, coords in sorted(shapes.items()):
            out.append(f"  {shape_id:<16} {len(coords):>5} points")
        result["shapes"] = {shape_id: len(coords) for shape_id, coords in shapes.items()}
    except Exception as exc:
        out.append(f"  !! shapes failed: {exc}")
        result["shapes"] = {"error": str(exc), "traceback": traceback.format_exc()}

    # ── Stop times ──
    if trip:
        out.append(_section(f"STOP TIMES  trip={trip}"))
        try:
            rows = sort_stop_times(await client.get_stop_times(trip))
            tz = client.config.time_zone
            for row in rows:
                past = "x" if row.is_past(tz=tz) else " "
                out.append(
                    f"  [{past}] {row.stop_sequence:>3} {row.stop_id:<12} "
                    f"{row.display_time():>12}  {row.relative_label(tz=tz)}"
                )
            result["stop_times"] = [row.model_dump(exclude={"raw"}) for row in rows]
        except Exception as exc:
            out.append(f"  !! stop times failed: {exc}")
            result["stop_times"] = {"error": str(exc), "traceback": traceback.format_exc()}

    return result


async def watch(config: MetraConfig, *, line: MetraLine, count: int) -> None:
    """Run the tracker and print every positions snapshot it applies."""
    seen = 0
    done = asyncio.Event()

    async with MetraTracker(config) as tracker:
        tracker.selection.set_line(line)

        def _on_update(update: SnapshotUpdate) -> None:
            nonlocal seen
            if update.resource is not ResourceKind.POSITIONS:
                return
            seen += 1
            visible = tracker.selection.visible_positions()
            print(f"[{update.applied_at:%H:%M:%S}] {len(visible)} trains on {line} ({line_color(line)})")
            if seen >= count:
                done.set()

        tracker.scheduler.add_listener(_on_update)
        await done.wait()


# ── main ─────────────────────────────────────────────────────


async def main() -> None:
    parser = argparse.ArgumentParser(description="Dump Metra GTFS API data for debugging / development.")
    parser.add_argument("--line", default=MetraLine.ALL.value, help="Line code filter (default: All)")
    parser.add_argument("--trip", help="Also dump stop times for this trip id")
    parser.add_argument("--watch", type=int, default=0, metavar="N", help="Poll positions N times and exit")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--output", "-o", help="Write JSON output to FILE")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    line = MetraLine.parse(args.line)
    if line is None:
        parser.error(f"unknown line {args.line!r}; choose from {', '.join(m.value for m in MetraLine)}")

    config = MetraConfig.from_env()

    if args.watch > 0:
        await watch(config, line=line, count=args.watch)
        return

    out: list[str] = [_section("pymetra dump_feed"), f"  time      : {datetime.now(UTC).isoformat()}"]
    out.append(f"  base_url  : {config.base_url}")

    async with MetraClient(config) as client:
        result = await dump_once(client, line=line, trip=args.trip, out=out)
    result["timestamp"] = datetime.now(UTC).isoformat()

    if args.json_mode:
        payload = json.dumps(result, indent=2, default=str, ensure_ascii=False)
        if args.output:
            Path(args.output).write_text(payload, encoding="utf-8")
            print(f"JSON written to {args.output}", file=sys.stderr)
        else:
            print(payload)
    else:
        print("\n".join(out))
        if args.output:
            Path(args.output).write_text(
                json.dumps(result, indent=2, default=str, ensure_ascii=False),
                encoding="utf-8",
            )
            print(f"JSON written to {args.output}")


if __name__ == "__main__":
    asyncio.run(main())
