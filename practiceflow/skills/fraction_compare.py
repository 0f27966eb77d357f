"""Fraction comparison: FlowTemplate implementation.

Comparison is done by cross-multiplying so no decimal ever appears.
"""

import random

from .base import FlowTemplate
from practiceflow.utils.arithmetic import to_band


class FractionCompareTemplate(FlowTemplate):
    key = "fraction_compare"
    label = "Fraction Compare"
    min_difficulty = 860
    max_difficulty = 1220

    def build(self, difficulty: int, rng: random.Random, **options) -> dict:
        band = to_band(difficulty)
        easy_mode = band == "easy" or (band == "medium" and rng.random() < 0.35)

        d1 = rng.randint(3, 12)
        d2 = rng.randint(3, 12)
        n1 = rng.randint(1, d1 - 1)
        n2 = rng.randint(1, d2 - 1)
        while n1 == n2 and d1 == d2:
            d2 = rng.randint(3, 12)
            n2 = rng.randint(1, d2 - 1)

        shape = "frac_compare_pair"
        extra_tags: list[str] = []
        if easy_mode and rng.random() < 0.5:
            d2 = d1
            n2 = rng.randint(1, d2 - 1)
            while n2 == n1:
                n2 = rng.randint(1, d2 - 1)
            shape = "frac_compare_same_denominator"
            extra_tags.append("frac:same-denominator")
        elif easy_mode:
            n2 = n1
            d2 = rng.randint(3, 12)
            while d2 == d1:
                d2 = rng.randint(3, 12)
            shape = "frac_compare_same_numerator"
            extra_tags.append("frac:same-numerator")

        left_cross = n1 * d2
        right_cross = n2 * d1
        if left_cross == right_cross:
            answer = "same"
        elif left_cross > right_cross:
            answer = f"{n1}/{d1}"
        else:
            answer = f"{n2}/{d2}"

        if shape == "frac_compare_same_denominator":
            first_hint = "Same bottom number? Bigger top number is bigger."
        elif shape == "frac_compare_same_numerator":
            first_hint = "Same top number? Smaller bottom number is bigger."
        else:
            first_hint = "Cross-multiply to compare without decimals."
        second_hint = (
            f"{n1}×{d2} vs {n2}×{d1}" if shape == "frac_compare_pair" else f"Compare {n1}/{d1} and {n2}/{d2}."
        )

        return {
            "signature": f"frac-{n1}-{d1}-{n2}-{d2}",
            "shape_signature": shape,
            "tags": ["fractions", *extra_tags],
            "format": "multiple_choice",
            "prompt": f"{n1}/{d1} or {n2}/{d2}: larger?",
            "choices": [f"{n1}/{d1}", f"{n2}/{d2}", "same"],
            "answer": answer,
            "hints": [first_hint, second_hint, "Pick the larger fraction (or same if equal)."],
            "solution_steps": [
                f"{n1}×{d2} = {left_cross}, {n2}×{d1} = {right_cross}.",
                f"Larger: {answer}.",
            ],
        }
