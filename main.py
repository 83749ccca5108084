"""CLI entrypoint for the Green Wave simulation engine."""

from __future__ import annotations

import argparse
import logging
import sys

from greenwave import __version__
from greenwave.config import load_levels, load_physics
from greenwave.core.physics import PedalInput
from greenwave.core.runner import AttemptStatus, SimulationContext, Snapshot
from greenwave.core.scoring import format_time

FRAME_RATE: int = 60
MAX_SECONDS: float = 120.0


def _pedals(policy: str, snapshot: Snapshot, target_speed: float) -> PedalInput:
    """Scripted driver: pick pedal input from the latest snapshot."""
    if policy == "throttle":
        return PedalInput(throttle=True)
    if policy == "coast":
        return PedalInput()
    # cruise: hold throttle below the target, coast above it.
    return PedalInput(throttle=snapshot.speed < target_speed)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drive a Green Wave level headlessly.")
    parser.add_argument("--level", type=int, default=1, help="1-based level id")
    parser.add_argument(
        "--policy",
        choices=("throttle", "coast", "cruise"),
        default="cruise",
        help="scripted pedal policy",
    )
    parser.add_argument(
        "--target-speed", type=float, default=60.0, help="cruise target in km/h"
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run one level with a scripted driver and print the outcome."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print(f"Green Wave Simulation Engine v{__version__}")
    print("=" * 56)

    # -- Load catalog ---------------------------------------------------------
    catalog = load_levels()
    physics = load_physics()
    print(f"\n{len(catalog)} levels loaded")
    for level_id, level in zip(catalog.ids(), catalog):
        print(f"  L{level_id}: {level.name} ({len(level.lights)} lights)")

    ctx = SimulationContext(catalog, physics=physics)
    ctx.start_level(args.level)
    snapshot = ctx.snapshot()
    print(f"\nLevel  : {snapshot.level_name}")
    print(f"Policy : {args.policy}")
    print("-" * 56)
    print(f"  {'Time':>5}  {'Speed':>6}  {'Position':>8}  {'Lights':>6}")

    # -- Frame loop -----------------------------------------------------------
    next_report = 0.0
    frame = 0
    while snapshot.status is AttemptStatus.PLAYING and frame < FRAME_RATE * MAX_SECONDS:
        pedals = _pedals(args.policy, snapshot, args.target_speed)
        snapshot = ctx.advance_frame(frame / FRAME_RATE, pedals)
        frame += 1
        if snapshot.elapsed_time >= next_report:
            print(
                f"  {format_time(snapshot.elapsed_time):>5}  "
                f"{snapshot.speed:6.1f}  {snapshot.position:8.1f}  "
                f"{snapshot.lights_passed:>3}/{snapshot.total_lights}"
            )
            next_report += 1.0

    # -- Outcome --------------------------------------------------------------
    print()
    if snapshot.status is AttemptStatus.WON and ctx.last_win is not None:
        win = ctx.last_win
        print(f"Level complete! {win.star_glyphs}")
        print(f"Time: {format_time(win.finish_time)} s")
    elif snapshot.status is AttemptStatus.LOST and snapshot.loss_reason is not None:
        print(f"Wave broken! {snapshot.loss_reason.message}")
    else:
        print("Time limit reached.")
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
