"""Listen to an F1 2020 session and report the human driver's race line.

Start the script, then drive a session with UDP telemetry enabled.  The script
stops when the session ends (or on Ctrl+C) and prints a summary of the race
line driven by the first human-controlled participant.

Usage:
    uv run python scripts/listen.py
    uv run python scripts/listen.py --port 20778 --log-level DEBUG
"""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from race_telemetry.config import Settings  # noqa: E402
from race_telemetry.ingest import IngestionPipeline, TransportError, UdpDatagramSource  # noqa: E402
from race_telemetry.race import Race  # noqa: E402


def _summarise(race: Race) -> int:
    humans = race.human_participants()
    if not humans:
        print("No human-controlled participant found.", file=sys.stderr)
        return 1

    driver = humans[0].driver_id
    line = race.race_lines_by_driver(driver)
    print(f"Status: {race.status.value}")
    print(f"Driver: {driver.name} ({len(line)} samples)")
    if line:
        xs = [loc.coords[0] for loc in line]
        zs = [loc.coords[1] for loc in line]
        print(f"  x range: {min(xs):.1f} .. {max(xs):.1f}")
        print(f"  z range: {min(zs):.1f} .. {max(zs):.1f}")
        print(f"  time:    {line[0].timestamp:.1f}s .. {line[-1].timestamp:.1f}s")
    return 0


def main() -> int:
    settings = Settings.from_env()

    ap = argparse.ArgumentParser(description="Record race lines from F1 2020 UDP telemetry")
    ap.add_argument("--host", default=settings.host, help="Address to bind")
    ap.add_argument("--port", type=int, default=settings.port, help="UDP port to listen on")
    ap.add_argument(
        "--log-level",
        default=settings.log_level,
        type=str.upper,
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging level",
    )
    args = ap.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    source = UdpDatagramSource(args.host, args.port, settings.buffer_size)
    try:
        source.open()
    except TransportError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    pipeline = IngestionPipeline(source)
    frames = pipeline.frames()
    pipeline.start_in_background()
    print(f"Listening on {args.host}:{args.port}. Press Ctrl+C to stop.", flush=True)

    race = Race()
    try:
        race.consume(frames, stop_when_finished=True)
    except KeyboardInterrupt:
        pass
    finally:
        pipeline.stop()
        frames.close()

    if pipeline.error is not None:
        print(f"Ingestion stopped: {pipeline.error}", file=sys.stderr)
    return _summarise(race)


if __name__ == "__main__":
    sys.exit(main())
