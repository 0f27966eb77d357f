"""Percent of a number: FlowTemplate implementation."""

import math
import random

from .base import FlowTemplate
from practiceflow.utils.arithmetic import to_band

_PERCENT_POOLS = {
    "easy": (10, 20, 25, 50),
    "medium": (10, 15, 20, 25, 30, 50),
}
_HARD_PERCENT_POOL = (12, 15, 18, 20, 24, 25, 30, 35)

_BASE_POOLS = {
    "easy": (20, 40, 50, 60, 80, 100, 120, 160, 200),
    "medium": (40, 60, 80, 100, 120, 160, 200, 240, 300, 400),
}
_HARD_BASE_POOL = (120, 160, 180, 200, 240, 300, 360, 400, 480, 500, 600, 800)

_INTEGER_RETRIES = 24


def _hints(percent: int, base: int, result: int) -> list[str]:
    if percent == 10:
        return [
            "10% is easy: move one place to the left.",
            f"Rewrite: 10% of {base} = {base} ÷ 10.",
            f"So {base} ÷ 10 = {result}.",
        ]
    if percent == 20 and base % 10 == 0:
        return [
            "10% is easy, and 20% is double 10%.",
            f"Rewrite: 20% of {base} = ({base} ÷ 10) × 2.",
            f"So ({base // 10}) × 2 = {result}.",
        ]
    if percent == 25:
        return [
            "25% means one quarter.",
            f"Rewrite: 25% of {base} = {base} ÷ 4.",
            f"So {base} ÷ 4 = {result}.",
        ]
    if percent == 50:
        return [
            "50% means half.",
            f"Rewrite: 50% of {base} = {base} ÷ 2.",
            f"So {base} ÷ 2 = {result}.",
        ]
    return [
        "Percent means out of 100.",
        f"Rewrite: {percent}% of {base} = ({percent} × {base}) ÷ 100.",
        f"Compute the product, then divide by 100 to get {result}.",
    ]


class PercentTemplate(FlowTemplate):
    key = "percent"
    label = "Percent of Number"
    min_difficulty = 1020
    max_difficulty = 1320

    def build(self, difficulty: int, rng: random.Random, **options) -> dict:
        band = to_band(difficulty)
        percent = rng.choice(_PERCENT_POOLS.get(band, _HARD_PERCENT_POOL))
        base_pool = _BASE_POOLS.get(band, _HARD_BASE_POOL)

        base = rng.choice(base_pool)
        for _ in range(_INTEGER_RETRIES):
            if (percent * base) % 100 == 0:
                break
            base = rng.choice(base_pool)
        if (percent * base) % 100 != 0:
            base = (100 // math.gcd(percent, 100)) * rng.randint(4, 20)
        result = percent * base // 100

        return {
            "signature": f"percent-{percent}-{base}",
            "shape_signature": "pct_of_number",
            "tags": ["percents"],
            "format": "numeric_input",
            "prompt": f"{percent}% of {base} = ?",
            "answer": str(result),
            "hints": _hints(percent, base, result),
            "solution_steps": [
                f"{percent}% of {base} = ({percent} ÷ 100) × {base}.",
                f"Answer: {result}.",
            ],
        }
