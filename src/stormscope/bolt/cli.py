"""
CLI entry point for the bolt generator.

Usage:
    stormscope-bolt [options]
"""

import argparse
import sys
import time
from pathlib import Path

from stormscope.bolt.config import BoltConfig
from stormscope.bolt.worker import BoltWorker
from stormscope.io.exporter import ResultExporter


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  strike {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        print(f"{pct:5.1f}%  strike {current}/{total}", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stormscope-bolt",
        description="Procedural lightning bolt generator",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path("bolt.png"),
        help="Output PNG path; numbered when --count > 1 (default: bolt.png)",
    )
    parser.add_argument("--width", type=int, default=800, help="Canvas width (default: 800)")
    parser.add_argument("--height", type=int, default=600, help="Canvas height (default: 600)")
    parser.add_argument("-n", "--count", type=int, default=1, help="Number of strikes (default: 1)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible strikes")

    # Branching
    parser.add_argument(
        "--branch-chance", type=float, default=0.03,
        help="Per-step branch probability at the top of the canvas (default: 0.03)",
    )
    parser.add_argument(
        "--decay-chance", type=float, default=0.02,
        help="Per-step branch thinning probability (default: 0.02)",
    )
    parser.add_argument(
        "--rebranch-chance", type=float, default=0.12,
        help="Chance a thinned branch forks again (default: 0.12)",
    )

    # Rendering
    parser.add_argument("--glow-blur", type=float, default=12.0, help="Glow blur radius (default: 12)")
    parser.add_argument(
        "--sky", action="store_true",
        help="Composite the bolt over a storm sky instead of a transparent background",
    )
    parser.add_argument("--json", action="store_true", help="Write a JSON sidecar next to each PNG")

    return parser


def _output_for(base: Path, index: int, count: int) -> Path:
    if count == 1:
        return base
    return base.with_name(f"{base.stem}_{index:03d}{base.suffix or '.png'}")


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.width <= 0 or args.height <= 0:
        print(f"Error: Canvas must be non-empty, got {args.width}x{args.height}", file=sys.stderr)
        sys.exit(1)
    if args.count < 1:
        print(f"Error: --count must be at least 1, got {args.count}", file=sys.stderr)
        sys.exit(1)

    config = BoltConfig(
        width=args.width,
        height=args.height,
        branch_chance=args.branch_chance,
        decay_chance=args.decay_chance,
        rebranch_chance=args.rebranch_chance,
        glow_blur=args.glow_blur,
    )
    exporter = ResultExporter()

    print(f"Generating {args.count} strike(s) at {args.width}x{args.height}")
    t0 = time.time()

    failures = 0
    with BoltWorker(config) as worker:
        futures = []
        for i in range(args.count):
            seed = None if args.seed is None else args.seed + i
            futures.append(worker.submit({"width": args.width, "height": args.height, "seed": seed}))

        for i, future in enumerate(futures):
            response = future.result()
            if response.get("error"):
                failures += 1
                print(f"\n  strike {i}: failed: {response['error']}", file=sys.stderr)
            else:
                out = _output_for(args.output, i, args.count)
                exporter.save(response, out, sidecar=args.json, preview=args.sky)
                if args.count == 1:
                    print(f"  didStrike: {response['didStrike']}")
                    print(f"  shakeIntensity: {response['shakeIntensity']:.3f}")
                    print(f"  Output: {out}")
            _progress_bar(i + 1, args.count)

    elapsed = time.time() - t0
    print(f"\nDone in {elapsed:.2f}s ({args.count / max(elapsed, 0.01):.1f} strikes/s)")

    if failures:
        sys.exit(1)


if __name__ == "__main__":
    main()
