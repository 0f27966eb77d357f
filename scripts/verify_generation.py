#!/usr/bin/env python3
"""
Simulated generation audit across rating bands.

Checks (deterministic with --seed, no network):
1. No decimal text in any flow item
2. No duplicate multiple-choice options
3. No negative subtraction answers in the low bands
4. No trivial shapes in Hard+ bands
5. No one-step equation labeled Hard+
6. Every sampled puzzle passes the kid-safety rules

Usage:
    python scripts/verify_generation.py          # full run (20000 picks per band)
    python scripts/verify_generation.py --ci     # short run for CI
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import argparse
import logging
import random

from practiceflow.services.generation_report import DEFAULT_RATING_BANDS, run_report

FULL_SAMPLES = 20000
CI_SAMPLES = 2000
FAILURE_PRINT_LIMIT = 40


def print_distribution(title, counts, total, limit=999):
    print(f"\n  {title}")
    for key, count in sorted(counts.items(), key=lambda kv: -kv[1])[:limit]:
        print(f"    {key:<22} {count / total * 100:6.2f}%  ({count})")


def main():
    parser = argparse.ArgumentParser(description="Audit practice item generation across rating bands")
    parser.add_argument("--ci", action="store_true", help=f"short run ({CI_SAMPLES} picks per band)")
    parser.add_argument("--samples", type=int, default=None, help="override picks per band")
    parser.add_argument("--seed", type=int, default=None, help="seed for a reproducible run")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)
    samples = args.samples or (CI_SAMPLES if args.ci else FULL_SAMPLES)
    rng = random.Random(args.seed)

    print(f"=== Flow selection audit ({samples:,} picks per band) ===")
    report = run_report(samples, DEFAULT_RATING_BANDS, rng, puzzle_samples=100 if args.ci else 500)

    for band in report.bands:
        print(f"\n--- {band.name} @ rating {band.rating} ---")
        print_distribution("% chosen by label", band.label_counts, band.selections)
        print_distribution("% chosen by template", band.template_counts, band.selections, limit=10)
        print(f"\n  Hard+ trivial: {band.trivial_hard_plus}  decimal leaks: {band.decimal_leaks}  "
              f"duplicate choices: {band.duplicate_choices}  negative subtractions: {band.negative_subtractions}")

    print(f"\n=== Puzzle sanity ({report.puzzles_checked} puzzles) ===")
    print(f"  Unsafe puzzles: {report.unsafe_puzzles}")

    if report.failures:
        print(f"\nFAILED: {len(report.failures)} check(s)")
        for i, failure in enumerate(report.failures[:FAILURE_PRINT_LIMIT], 1):
            print(f"  {i}. {failure}")
        if len(report.failures) > FAILURE_PRINT_LIMIT:
            print(f"  ...and {len(report.failures) - FAILURE_PRINT_LIMIT} more")
        sys.exit(1)

    print("\nAll generation checks passed.")


if __name__ == "__main__":
    main()
