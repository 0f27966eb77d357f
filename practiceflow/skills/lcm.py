"""Smallest shared multiple (LCM), multiple choice: FlowTemplate implementation."""

import random

from .base import FlowTemplate
from practiceflow.utils.arithmetic import lcm, make_unique_choices

_LEFT_POOL = (6, 8, 9, 10, 12, 14, 15, 16, 18)
_RIGHT_POOL = (9, 10, 12, 14, 15, 18, 20, 21, 24)


class LcmTemplate(FlowTemplate):
    key = "lcm"
    label = "Smallest Shared Multiple"
    min_difficulty = 1320
    max_difficulty = 1700

    def build(self, difficulty: int, rng: random.Random, **options) -> dict:
        a = rng.choice(_LEFT_POOL)
        b = rng.choice(_RIGHT_POOL)
        while b == a:
            b = rng.choice(_RIGHT_POOL)
        smallest = lcm(a, b)

        distractors = [
            smallest + rng.choice((2, 4, 6, 8, 10, 12)),
            max(2, smallest - rng.choice((2, 4, 6, 8, 10))),
            a * b,
            max(a, b) * rng.choice((2, 3, 4)),
            a + b,
        ]
        choices = [str(value) for value in make_unique_choices(smallest, distractors, 4, rng)]

        return {
            "signature": f"smallest-common-multiple-{a}-{b}",
            "shape_signature": "common_multiple_smallest",
            "tags": ["factors_multiples"],
            "format": "multiple_choice",
            "prompt": f"Smallest shared multiple: {a} and {b}",
            "choices": choices,
            "answer": str(smallest),
            "hints": [
                f"List multiples of {a}: {a}, {a * 2}, {a * 3}, ...",
                f"List multiples of {b}: {b}, {b * 2}, {b * 3}, ...",
                "The first shared match is the smallest shared multiple.",
            ],
            "solution_steps": [
                f"First shared match: {smallest}.",
                "This is also called the least common multiple.",
            ],
        }
