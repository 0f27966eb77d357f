"""
Bonus Target Calculator and bonus challenge builder.

A bonus challenge is always harder than the run that earned it:

  run_median   = median(run difficulties), 950 for an empty run
  bonus_target = clamp(max(rating + 120, run_median + 150), 980, 1600)

Every flavor requires a Hard-plus label and a flavor-specific minimum
difficulty; each has a bounded search and a fixed hard fallback.
"""
from __future__ import annotations

import logging
import math
import random
from typing import Literal, Optional, Sequence

from practiceflow.core.config import EngineConfig
from practiceflow.core.deps import get_engine_config, get_rng
from practiceflow.models.items import HARD_PLUS_LABELS, BonusChallenge, FlowItem, PuzzleItem
from practiceflow.puzzles.strategy import build_nim
from practiceflow.services.difficulty_analyzer import difficulty_label_from_score
from practiceflow.services.flow_generator import annotate, is_trivial_for_hard_plus
from practiceflow.services.puzzle_generator import select_next_puzzle_item
from practiceflow.services.selection import select_next_flow_item
from practiceflow.utils.arithmetic import clamp, lcm, round_half_up

logger = logging.getLogger("practiceflow.bonus")

BonusMode = Literal["sprint", "puzzle", "mixed"]
LastSegment = Literal["flow", "puzzle"]
BONUS_MODES = ("sprint", "puzzle", "mixed")

EMPTY_RUN_MEDIAN = 950
FRACTION_DENOMINATORS = tuple(range(11, 26))

FAST_MATH_TRIES = 180
FRACTION_TRIES = 160
PUZZLE_TRIES = 120
BONUS_STREAK = 6


def median(values: Sequence[float]) -> int:
    if not values:
        return EMPTY_RUN_MEDIAN
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 1:
        return round_half_up(ordered[mid])
    return round_half_up((ordered[mid - 1] + ordered[mid]) / 2)


def build_bonus_target(rating: float, run_difficulties: Sequence[float]) -> tuple[int, int]:
    """Return (run_median, bonus_target)."""
    run_median = median(run_difficulties)
    bonus_target = int(clamp(round_half_up(max(rating + 120, run_median + 150)), 980, 1600))
    return run_median, bonus_target


def _min_difficulty(floor: int, ceiling: int, bonus_target: int, run_median: int, median_lift: int) -> int:
    return max(floor, min(ceiling, bonus_target), min(run_median + median_lift, ceiling))


# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------

def _from_flow(item: FlowItem, title: str, flavor: str, run_median: int, bonus_target: int) -> BonusChallenge:
    return BonusChallenge(
        id=f"bonus-{item.id}",
        title=title,
        prompt=item.prompt,
        choices=item.choices or (),
        answer=item.answer,
        hint=item.hints[0] if item.hints else "Take it one step at a time.",
        flavor=flavor,
        difficulty=item.difficulty,
        label=item.label or difficulty_label_from_score(item.difficulty),
        template=item.template,
        shape_signature=item.shape_signature,
        run_median_difficulty=run_median,
        bonus_target_difficulty=bonus_target,
    )


def _explicit_choices(puzzle: PuzzleItem) -> tuple[str, ...]:
    if puzzle.choices:
        return puzzle.choices
    answer = puzzle.core_answer.strip().lower()
    if answer in ("yes", "no"):
        return ("Yes", "No")
    if answer in ("always", "sometimes", "never"):
        return ("Always", "Sometimes", "Never")
    return ()


def _from_puzzle(puzzle: PuzzleItem, run_median: int, bonus_target: int) -> BonusChallenge:
    return BonusChallenge(
        id=f"bonus-{puzzle.id}",
        title=puzzle.title.strip() or "Puzzle Nova",
        prompt=puzzle.core_prompt,
        choices=_explicit_choices(puzzle),
        answer=puzzle.core_answer,
        hint=puzzle.hint_ladder[0] if puzzle.hint_ladder else "Try a smaller example first.",
        flavor="puzzle",
        difficulty=puzzle.difficulty,
        label=difficulty_label_from_score(puzzle.difficulty),
        template=puzzle.template,
        shape_signature=puzzle.id,
        run_median_difficulty=run_median,
        bonus_target_difficulty=bonus_target,
    )


# ---------------------------------------------------------------------------
# Fraction flavor
# ---------------------------------------------------------------------------

def _fraction_item(n1: int, d1: int, n2: int, d2: int, item_id: str) -> FlowItem:
    left, right = f"{n1}/{d1}", f"{n2}/{d2}"
    left_cross, right_cross = n1 * d2, n2 * d1
    answer = left if left_cross > right_cross else right
    raw = FlowItem(
        id=item_id,
        difficulty=0,
        template="fraction_compare",
        shape_signature="frac_compare_bonus_pair",
        tags=("fractions", "bonus"),
        format="multiple_choice",
        prompt=f"Which fraction is greater? {left} or {right}",
        answer=answer,
        choices=(left, right),
        hints=(
            "Both fractions are near 1. Compare how far each is from 1.",
            f"Cross-multiply: {n1}×{d2} and {n2}×{d1}.",
            "The fraction with the larger cross-product is greater.",
        ),
        solution_steps=(
            f"Compare {left} and {right} by cross-multiplying.",
            f"{n1}×{d2} = {left_cross} and {n2}×{d1} = {right_cross}.",
            f"{answer} is greater.",
        ),
    )
    return annotate(raw)


def make_strict_fraction_candidate(
    run_median: int,
    bonus_target: int,
    rng: Optional[random.Random] = None,
) -> Optional[BonusChallenge]:
    """Near-1 fraction pair with awkward denominators, or None when the search runs dry."""
    rng = get_rng(rng)
    minimum = _min_difficulty(1050, 1200, bonus_target, run_median, 90)
    for _ in range(FRACTION_TRIES):
        d1 = rng.choice(FRACTION_DENOMINATORS)
        d2 = rng.choice(FRACTION_DENOMINATORS)
        while d2 == d1:
            d2 = rng.choice(FRACTION_DENOMINATORS)

        if lcm(d1, d2) <= 24:
            continue
        if d1 % d2 == 0 or d2 % d1 == 0:
            continue
        if math.gcd(d1, d2) > 3:
            continue

        n1 = d1 - rng.randint(1, 4)
        n2 = d2 - rng.randint(1, 4)
        if math.gcd(n1, d1) != 1 or math.gcd(n2, d2) != 1:
            continue
        gap = abs(n1 / d1 - n2 / d2)
        if gap < 0.02 or gap > 0.14:
            continue

        item = _fraction_item(n1, d1, n2, d2, f"fraction_bonus-{d1}-{d2}-{n1}-{n2}")
        if item.label not in HARD_PLUS_LABELS or item.difficulty < minimum:
            continue
        return _from_flow(item, "Fraction Fox", "fraction", run_median, bonus_target)
    return None


def hard_fraction_fallback(run_median: int, bonus_target: int) -> BonusChallenge:
    item = _fraction_item(23, 25, 18, 19, "fraction_bonus-fallback-23-25-18-19")
    return _from_flow(item, "Fraction Fox", "fraction", run_median, bonus_target)


# ---------------------------------------------------------------------------
# Fast-math flavor
# ---------------------------------------------------------------------------

def fast_math_fallback(run_median: int, bonus_target: int) -> BonusChallenge:
    a, b, c, d = 54, 17, 13, 29
    product = b * c
    answer = a + product - d
    raw = FlowItem(
        id=f"fast_bonus-fallback-{a}-{b}-{c}-{d}",
        difficulty=0,
        template="order_ops",
        shape_signature="order_ops_mix",
        tags=("order_ops", "bonus"),
        format="numeric_input",
        prompt=f"{a} + {b} × {c} - {d} = ?",
        answer=str(answer),
        hints=(
            "Do multiplication before adding or subtracting.",
            f"{b} × {c} = {product}.",
            f"Now solve {a} + {product} - {d}.",
        ),
        solution_steps=(
            f"Multiply first: {b} × {c} = {product}.",
            f"Then compute {a} + {product} - {d}.",
            f"Answer: {answer}.",
        ),
    )
    return _from_flow(annotate(raw), "Turbo Burst", "fast_math", run_median, bonus_target)


def create_fast_math_bonus(
    rating: float,
    run_median: int,
    bonus_target: int,
    *,
    rng: Optional[random.Random] = None,
    config: Optional[EngineConfig] = None,
) -> BonusChallenge:
    rng = get_rng(rng)
    at = clamp(max(rating, bonus_target), 900, 1700)
    minimum = _min_difficulty(1080, 1380, bonus_target, run_median, 75)
    for _ in range(FAST_MATH_TRIES):
        candidate = select_next_flow_item(at, (), correct_streak=BONUS_STREAK, rng=rng, config=config)
        if candidate.template == "fraction_compare":
            continue
        if is_trivial_for_hard_plus(candidate):
            continue
        if candidate.label not in HARD_PLUS_LABELS or candidate.difficulty < minimum:
            continue
        return _from_flow(candidate, "Turbo Burst", "fast_math", run_median, bonus_target)

    logger.info("Fast-math bonus search exhausted at %.0f; using fallback", at)
    return fast_math_fallback(run_median, bonus_target)


# ---------------------------------------------------------------------------
# Puzzle flavor
# ---------------------------------------------------------------------------

def puzzle_fallback(run_median: int, bonus_target: int) -> BonusChallenge:
    built = build_nim(16, 3)
    built.pop("difficulty_hint")
    signature = built.pop("signature")
    built["title"] = "Puzzle Nova"
    puzzle = PuzzleItem(
        id=f"strategy_nim-{signature}-bonus-fallback",
        template="strategy_nim",
        difficulty=1110,
        label=difficulty_label_from_score(1110),
        puzzle_type="strategy",
        **built,
    )
    return _from_puzzle(puzzle, run_median, bonus_target)


def create_puzzle_bonus(
    rating: float,
    run_median: int,
    bonus_target: int,
    *,
    rng: Optional[random.Random] = None,
    config: Optional[EngineConfig] = None,
) -> BonusChallenge:
    rng = get_rng(rng)
    at = clamp(max(rating, bonus_target), 950, 1700)
    minimum = _min_difficulty(1030, 1340, bonus_target, run_median, 60)
    for _ in range(PUZZLE_TRIES):
        candidate = select_next_puzzle_item(at, (), rng=rng, config=config)
        if difficulty_label_from_score(candidate.difficulty) not in HARD_PLUS_LABELS:
            continue
        if candidate.difficulty < minimum:
            continue
        return _from_puzzle(candidate, run_median, bonus_target)

    logger.info("Puzzle bonus search exhausted at %.0f; using fallback", at)
    return puzzle_fallback(run_median, bonus_target)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_bonus_challenge(
    mode: BonusMode,
    last_segment: LastSegment,
    rating: float,
    run_difficulties: Sequence[float],
    *,
    rng: Optional[random.Random] = None,
    config: Optional[EngineConfig] = None,
) -> BonusChallenge:
    if mode not in BONUS_MODES:
        raise ValueError(f"Unknown bonus mode: {mode!r}")
    rng = get_rng(rng)
    config = get_engine_config(config)
    run_median, bonus_target = build_bonus_target(rating, run_difficulties)

    if mode == "sprint" or (mode == "mixed" and last_segment == "flow"):
        return create_fast_math_bonus(rating, run_median, bonus_target, rng=rng, config=config)
    if mode == "puzzle":
        return create_puzzle_bonus(rating, run_median, bonus_target, rng=rng, config=config)
    return (
        make_strict_fraction_candidate(run_median, bonus_target, rng)
        or hard_fraction_fallback(run_median, bonus_target)
    )


def bonus_points_target(challenge: BonusChallenge, mode: BonusMode) -> Literal["fast_math", "puzzle"]:
    """Which points bucket a solved bonus feeds."""
    if challenge.flavor == "fast_math":
        return "fast_math"
    if challenge.flavor in ("puzzle", "fraction"):
        return "puzzle"
    return "fast_math" if mode == "sprint" else "puzzle"
