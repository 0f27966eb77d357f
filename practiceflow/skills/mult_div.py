"""Multiplication and division: FlowTemplate implementation."""

import random

from .base import FlowTemplate
from practiceflow.utils.arithmetic import build_break_apart_plan, to_band

# (a_min, a_max, b_min, b_max) factor ranges per band
_FACTOR_RANGES = {
    "rookie": (2, 5, 2, 5),
    "easy": (3, 12, 3, 12),
    "medium": (12, 44, 3, 9),
    "hard": (12, 48, 11, 29),
    "expert": (18, 64, 12, 39),
    "master": (22, 76, 14, 45),
}

# (divisor_min, divisor_max, quotient_min, quotient_max) per band
_DIVISION_RANGES = {
    "rookie": (2, 5, 1, 5),
    "easy": (3, 12, 1, 12),
    "medium": (4, 12, 12, 36),
    "hard": (7, 19, 15, 48),
    "expert": (8, 24, 18, 55),
    "master": (10, 28, 22, 68),
}


class MultDivTemplate(FlowTemplate):
    key = "mult_div"
    label = "Multiplication + Division"
    min_difficulty = 860
    max_difficulty = 1320

    def build(self, difficulty: int, rng: random.Random, **options) -> dict:
        band = to_band(difficulty)
        if rng.random() < 0.55:
            return self._multiply(band, rng)
        return self._divide(band, rng)

    def _multiply(self, band: str, rng: random.Random) -> dict:
        a_min, a_max, b_min, b_max = _FACTOR_RANGES[band]
        a = rng.randint(a_min, a_max)
        b = rng.randint(b_min, b_max)
        if band == "medium" and (a % 10) * b < 10 and rng.random() < 0.5:
            a += rng.randint(2, 5)
        result = a * b

        if a <= 12 and b <= 12:
            hints = [
                "Use a times-table fact you know.",
                f"{a}×{b} = ?",
                f"Count by {min(a, b)} to check your answer.",
            ]
            steps = [f"{a} × {b} = {result}.", f"Answer: {result}."]
        else:
            plan = build_break_apart_plan(a, b)
            hints = [
                f"Break {plan.original} into {plan.part_a} and {plan.part_b}.",
                f"Rewrite: {plan.rewrite_line}.",
                f"Compute: {plan.part_line_a}={plan.value_a}, {plan.part_line_b}={plan.value_b}, "
                f"then add to get {result}.",
            ]
            steps = [
                plan.rewrite_line,
                f"{plan.part_line_a} = {plan.value_a}, {plan.part_line_b} = {plan.value_b}.",
                f"{plan.value_a} + {plan.value_b} = {result}.",
            ]

        return {
            "signature": f"mult-{a}-{b}",
            "shape_signature": "mul_basic",
            "tags": ["mult_div"],
            "format": "numeric_input",
            "prompt": f"{a} × {b} = ?",
            "answer": str(result),
            "hints": hints,
            "solution_steps": steps,
        }

    def _divide(self, band: str, rng: random.Random) -> dict:
        d_min, d_max, q_min, q_max = _DIVISION_RANGES[band]
        divisor = rng.randint(d_min, d_max)
        quotient = rng.randint(q_min, q_max)
        dividend = divisor * quotient
        return {
            "signature": f"div-{dividend}-{divisor}",
            "shape_signature": "div_basic",
            "tags": ["mult_div"],
            "format": "numeric_input",
            "prompt": f"{dividend} ÷ {divisor} = ?",
            "answer": str(quotient),
            "hints": [
                "Turn division into multiplication.",
                f"{divisor} × ? = {dividend}",
                "That missing number is the answer.",
            ],
            "solution_steps": [
                f"{divisor} × {quotient} = {dividend}.",
                f"So {dividend} ÷ {divisor} = {quotient}.",
            ],
        }
