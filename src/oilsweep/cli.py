"""Command-line entry point.

Usage:
    oilsweep run [--profile single_boat] [--max-ticks 2000] [--delay 0] [--json]
    oilsweep serve [--host 127.0.0.1] [--port 8000]

``run`` drives a simulation headless on its background thread until the
spill is cleaned up or ``--max-ticks`` ticks have elapsed, then prints a
report.  ``serve`` exposes the same controls over HTTP.
"""

from __future__ import annotations

import argparse
import json
import sys
import threading
import time

from loguru import logger

from oilsweep.config import Settings, settings as default_settings
from oilsweep.simulation import (
    PROFILES,
    STATE_EVENT,
    CleanupSimulation,
    ConfigurationError,
    create_simulation,
    load_profile,
)


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oilsweep",
        description="Autonomous boats cleaning up a wind-driven oil spill",
    )
    parser.add_argument("--log-level", default=None, help="loguru level (default: settings)")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run a profile headless and print a report")
    run.add_argument("--profile", choices=sorted(PROFILES), default=None)
    run.add_argument("--profile-file", default=None, help="JSON profile definition")
    run.add_argument("--delay", type=int, default=0, help="Inter-tick delay in ms")
    run.add_argument("--max-ticks", type=int, default=2000)
    run.add_argument("--seed", type=int, default=None)
    run.add_argument("--json", action="store_true", help="Print the final snapshot as JSON")

    serve = sub.add_parser("serve", help="Serve the HTTP control API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    return parser


def run_headless(sim: CleanupSimulation, max_ticks: int, timeout: float | None = None) -> int:
    """Start *sim*, stop it after *max_ticks* ticks, and wait for the loop to end.

    Returns the number of ticks completed.
    """
    limit_hit = threading.Event()

    def _limit(msg: dict) -> None:
        if msg["type"] != STATE_EVENT or msg["data"]["reason"] != "tick":
            return
        if max_ticks > 0 and sim.tick_count >= max_ticks and not limit_hit.is_set():
            limit_hit.set()
            sim.stop()

    sim.add_observer(_limit)
    try:
        sim.start()
        sim.wait(timeout)
    finally:
        sim.remove_observer(_limit)
    return sim.tick_count


def _print_report(sim: CleanupSimulation, ticks: int, elapsed: float) -> None:
    remaining = len(sim.oil_cells)
    outcome = "spill cleaned up" if remaining == 0 else f"{remaining} oil cells left"
    print(f"\n{'=' * 60}")
    print(f"  PROFILE: {sim.profile.key} - {sim.profile.name}")
    print(f"{'=' * 60}")
    print(f"  Ticks: {ticks}")
    print(f"  Wall time: {elapsed:.2f}s")
    print(f"  Outcome: {outcome}")
    print()
    for line in sim.describe():
        print(f"  {line}")


def _cmd_run(args: argparse.Namespace, cfg: Settings) -> int:
    try:
        profile = load_profile(args.profile_file) if args.profile_file else (args.profile or cfg.profile)
        cfg = cfg.model_copy(update={"tick_delay_ms": max(0, args.delay)})
        sim = create_simulation(profile, settings=cfg, seed=args.seed)
    except (ConfigurationError, OSError, json.JSONDecodeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    t0 = time.time()
    ticks = run_headless(sim, args.max_ticks)
    elapsed = time.time() - t0

    if args.json:
        print(json.dumps(sim.snapshot(), indent=2))
    else:
        _print_report(sim, ticks, elapsed)
    return 0


def _cmd_serve(args: argparse.Namespace, cfg: Settings) -> int:
    from oilsweep.app.main import serve

    update = {}
    if args.host:
        update["host"] = args.host
    if args.port:
        update["port"] = args.port
    serve(cfg.model_copy(update=update))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    cfg = default_settings
    configure_logging(args.log_level or cfg.log_level)

    if args.command == "run":
        return _cmd_run(args, cfg)
    return _cmd_serve(args, cfg)


if __name__ == "__main__":
    sys.exit(main())
