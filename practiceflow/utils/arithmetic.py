"""Shared arithmetic helpers for the flow builders.

Everything here is integer-only. Builders must never surface a decimal in a
prompt, answer, choice, hint or solution step.
"""
from __future__ import annotations

import math
import random
import re
from dataclasses import dataclass
from typing import Iterable, Literal

DifficultyBand = Literal["rookie", "easy", "medium", "hard", "expert", "master"]

HARD_BANDS: frozenset[str] = frozenset({"hard", "expert", "master"})

# Distractor offsets tried on either side of the correct value
CHOICE_OFFSETS = (2, 3, 4, 5, 6, 8, 10, 12, 15, 18, 21, 24, 30)

_DECIMAL_TOKEN = re.compile(r"\d+\.\d+")
_INTEGER_STRING = re.compile(r"^-?\d+$")


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def round_half_up(value: float) -> int:
    """Round .5 away from zero on the positive side (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def lcm(a: int, b: int) -> int:
    return a * b // math.gcd(a, b)


def to_band(difficulty: float) -> DifficultyBand:
    if difficulty >= 1400:
        return "master"
    if difficulty >= 1250:
        return "expert"
    if difficulty >= 1080:
        return "hard"
    if difficulty >= 920:
        return "medium"
    if difficulty >= 860:
        return "easy"
    return "rookie"


def has_carry(a: int, b: int) -> bool:
    """Check if a + b carries out of the ones column."""
    return (a % 10) + (b % 10) >= 10


def has_borrow(a: int, b: int) -> bool:
    """Check if a - b borrows in the ones column."""
    return (a % 10) < (b % 10)


def has_decimal_token(text: str) -> bool:
    return bool(_DECIMAL_TOKEN.search(text))


def is_integer_string(value: str) -> bool:
    return bool(_INTEGER_STRING.match(value.strip()))


# ---------------------------------------------------------------------------
# Break-apart (distributive) plan
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BreakApartPlan:
    """a×b rewritten as a×p + a×q (or p×b + q×b) with friendly parts."""

    split_target: Literal["left", "right"]
    original: int
    part_a: int
    part_b: int
    rewrite_line: str
    part_line_a: str
    part_line_b: str
    value_a: int
    value_b: int


def split_into_friendly_parts(value: int) -> tuple[int, int]:
    """Split into tens + ones, or halves for round numbers, or n-2 + 2 for small ones."""
    if value >= 12:
        tens = value // 10 * 10
        ones = value - tens
        if ones > 0:
            return tens, ones
        half = value // 2
        return half, value - half
    if value >= 4:
        return value - 2, 2
    return value - 1, 1


def build_break_apart_plan(left: int, right: int) -> BreakApartPlan:
    split_right = (right >= 10 and right % 10 != 0) or left < 10 or right >= left
    original = right if split_right else left
    part_a, part_b = split_into_friendly_parts(original)

    if split_right:
        return BreakApartPlan(
            split_target="right",
            original=original,
            part_a=part_a,
            part_b=part_b,
            rewrite_line=f"{left}×{right} = {left}×{part_a} + {left}×{part_b}",
            part_line_a=f"{left}×{part_a}",
            part_line_b=f"{left}×{part_b}",
            value_a=left * part_a,
            value_b=left * part_b,
        )

    return BreakApartPlan(
        split_target="left",
        original=original,
        part_a=part_a,
        part_b=part_b,
        rewrite_line=f"{left}×{right} = {part_a}×{right} + {part_b}×{right}",
        part_line_a=f"{part_a}×{right}",
        part_line_b=f"{part_b}×{right}",
        value_a=part_a * right,
        value_b=part_b * right,
    )


# ---------------------------------------------------------------------------
# Multiple-choice options
# ---------------------------------------------------------------------------

def make_unique_choices(
    correct: int,
    candidates: Iterable[float],
    count: int,
    rng: random.Random,
) -> list[int]:
    """Return `count` distinct positive options (at least 2) containing `correct` once.

    Distractor candidates are tried in shuffled order first. When they run
    out, offsets from CHOICE_OFFSETS are tried above and below the correct
    value. If even those are exhausted, fresh values are manufactured
    deterministically above the correct value, so the loop always ends.
    """
    target_count = max(2, count)
    seen = {correct}
    ordered = [correct]

    shuffled = list(candidates)
    rng.shuffle(shuffled)
    for candidate in shuffled:
        if not math.isfinite(candidate):
            continue
        normalized = round_half_up(candidate)
        if normalized <= 0 or normalized in seen:
            continue
        seen.add(normalized)
        ordered.append(normalized)
        if len(ordered) >= target_count:
            break

    step = 2
    while len(ordered) < target_count:
        pivot = CHOICE_OFFSETS[(len(ordered) + step) % len(CHOICE_OFFSETS)]
        for value in (correct + pivot, correct - pivot):
            if len(ordered) >= target_count:
                break
            if value > 0 and value not in seen:
                seen.add(value)
                ordered.append(value)

        step += 1
        if step > 60 and len(ordered) < target_count:
            fresh = correct + len(ordered) + 7
            if fresh in seen:
                fresh = correct + step
            if fresh not in seen:
                seen.add(fresh)
                ordered.append(fresh)

    options = ordered[:target_count]
    rng.shuffle(options)
    return options
