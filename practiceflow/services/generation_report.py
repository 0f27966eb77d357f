"""
Generation report: simulates learner runs per rating band and audits the output.

For each band the simulator feeds `select_next_flow_item` its own history
(previous difficulty, recent templates/shapes/pattern tags, a pseudo streak)
and tallies what comes back. Failures are collected as plain strings so the
verify script can print and count them.

Checks per band:
  - decimal text anywhere in an item
  - duplicate multiple-choice options
  - negative subtraction answers in the low bands
  - trivial shapes in Hard+ bands
  - one-step equations labeled Hard+ (without the negative-rhs tag)

Puzzle sanity runs the same kid-safety rules the puzzle generator enforces.
"""
from __future__ import annotations

import logging
import random
from collections import Counter
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from practiceflow.core.config import EngineConfig
from practiceflow.core.deps import get_engine_config, get_rng
from practiceflow.models.items import HARD_PLUS_LABELS, FlowHistory, FlowItem
from practiceflow.services.difficulty_analyzer import parse_binary_prompt
from practiceflow.services.flow_generator import HARD_PLUS_RATING, assert_integer_safe, is_trivial_for_hard_plus
from practiceflow.services.puzzle_generator import is_kid_safe_puzzle, select_next_puzzle_item
from practiceflow.services.selection import select_next_flow_item
from practiceflow.services.telemetry import instrument

logger = logging.getLogger("practiceflow.generation_report")

DEFAULT_RATING_BANDS: tuple[tuple[str, int], ...] = (
    ("Rookie", 810),
    ("Easy", 850),
    ("Medium", 975),
    ("Hard", 1125),
    ("Expert", 1275),
    ("Master", 1425),
)

LOW_BAND_RATING = 900
USED_RESET_EVERY = 10
MAX_STREAK = 8
EXAMPLE_LIMIT = 3


class BandReport(BaseModel):
    name: str
    rating: int
    selections: int
    label_counts: dict[str, int] = Field(default_factory=dict)
    template_counts: dict[str, int] = Field(default_factory=dict)
    trivial_hard_plus: int = 0
    decimal_leaks: int = 0
    duplicate_choices: int = 0
    negative_subtractions: int = 0
    one_step_hard_plus: int = 0
    examples: list[str] = Field(default_factory=list)
    failures: list[str] = Field(default_factory=list)

    def label_share(self, label: str) -> float:
        return self.label_counts.get(label, 0) / self.selections if self.selections else 0.0


class GenerationReport(BaseModel):
    bands: list[BandReport] = Field(default_factory=list)
    puzzles_checked: int = 0
    unsafe_puzzles: int = 0
    failures: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _has_duplicate_choices(item: FlowItem) -> bool:
    return bool(item.choices) and len(set(item.choices)) != len(item.choices)


def _is_one_step_hard_plus(item: FlowItem) -> bool:
    return (
        item.template == "equation_1"
        and "eq:one-step" in item.tags
        and "sub:negative" not in item.tags
        and item.label in HARD_PLUS_LABELS
    )


def simulate_band(
    name: str,
    rating: int,
    samples: int,
    *,
    rng: Optional[random.Random] = None,
    config: Optional[EngineConfig] = None,
) -> BandReport:
    rng = get_rng(rng)
    config = get_engine_config(config)
    report = BandReport(name=name, rating=rating, selections=samples)
    labels: Counter = Counter()
    templates: Counter = Counter()
    history = FlowHistory(window=config.selection.recent_history_size)
    used: set[str] = set()
    streak = 0

    for i in range(samples):
        item = select_next_flow_item(
            rating,
            used,
            history.prev_difficulty,
            history.recent_templates,
            history.recent_shapes,
            history.recent_pattern_tags,
            streak,
            rng=rng,
            config=config,
        )
        labels[item.label.value if item.label else "?"] += 1
        templates[item.template] += 1

        if not assert_integer_safe(item):
            report.decimal_leaks += 1
            if len(report.examples) < EXAMPLE_LIMIT:
                report.examples.append(f"{item.id} :: {item.prompt} => {item.answer}")
        if _has_duplicate_choices(item):
            report.duplicate_choices += 1
        parsed = parse_binary_prompt(item.prompt, "-")
        if parsed and rating < LOW_BAND_RATING and parsed[0] < parsed[1]:
            report.negative_subtractions += 1
        if rating >= HARD_PLUS_RATING and is_trivial_for_hard_plus(item):
            report.trivial_hard_plus += 1
        if _is_one_step_hard_plus(item):
            report.one_step_hard_plus += 1

        history = history.record(item)
        used.add(item.id)
        if i % USED_RESET_EVERY == 0:
            used.clear()
        # pseudo-feedback so streak-driven target shifts get exercised
        streak = min(streak + 1, MAX_STREAK) if item.difficulty <= rating + 25 else 0

    report.label_counts = dict(labels)
    report.template_counts = dict(templates)

    if report.decimal_leaks:
        report.failures.append(f"{name}: {report.decimal_leaks} items with decimal text, e.g. {report.examples[0]}")
    if report.duplicate_choices:
        report.failures.append(f"{name}: {report.duplicate_choices} items with duplicate choices")
    if report.negative_subtractions:
        report.failures.append(f"{name}: {report.negative_subtractions} negative subtraction answers")
    if report.trivial_hard_plus:
        report.failures.append(f"{name}: {report.trivial_hard_plus} trivial items in a Hard+ band")
    if report.one_step_hard_plus:
        report.failures.append(f"{name}: {report.one_step_hard_plus} one-step equations labeled Hard+")
    return report


@instrument("run_report")
def run_report(
    samples: int,
    rating_bands: Optional[Sequence[tuple[str, int]]] = None,
    rng: Optional[random.Random] = None,
    *,
    puzzle_samples: int = 100,
    config: Optional[EngineConfig] = None,
) -> GenerationReport:
    """Simulate `samples` flow selections per band, plus a puzzle kid-safety sweep."""
    rng = get_rng(rng)
    config = get_engine_config(config)
    report = GenerationReport()

    for name, rating in rating_bands or DEFAULT_RATING_BANDS:
        band = simulate_band(name, rating, samples, rng=rng, config=config)
        report.bands.append(band)
        report.failures.extend(band.failures)

    bands = [rating for _, rating in rating_bands or DEFAULT_RATING_BANDS]
    used: set[str] = set()
    for i in range(puzzle_samples):
        puzzle = select_next_puzzle_item(bands[i % len(bands)], used, rng=rng, config=config)
        used.add(puzzle.id)
        report.puzzles_checked += 1
        if not is_kid_safe_puzzle(puzzle):
            report.unsafe_puzzles += 1
            report.failures.append(f"Unsafe puzzle: {puzzle.id} :: {puzzle.core_prompt}")

    logger.info("Generation report: %d bands, %d failures", len(report.bands), len(report.failures))
    return report
