"""Ratios and proportions: FlowTemplate implementation."""

import random

from .base import FlowTemplate
from practiceflow.utils.arithmetic import to_band


class RatioTemplate(FlowTemplate):
    key = "ratio"
    label = "Ratios + Proportions"
    min_difficulty = 1080
    max_difficulty = 1380

    def build(self, difficulty: int, rng: random.Random, **options) -> dict:
        band = to_band(difficulty)
        if band == "easy":
            a, b, scale = rng.randint(1, 8), rng.randint(2, 10), rng.randint(2, 6)
        elif band == "medium":
            a, b, scale = rng.randint(2, 10), rng.randint(3, 13), rng.randint(3, 9)
        else:
            a, b, scale = rng.randint(4, 16), rng.randint(6, 20), rng.randint(4, 12)
        right = b * scale
        answer = a * scale
        return {
            "signature": f"ratio-{a}-{b}-{scale}",
            "shape_signature": "ratio_a_to_b_eq_x_to_d",
            "tags": ["ratios_rates"],
            "format": "numeric_input",
            "prompt": f"{a}:{b} = x:{right}",
            "answer": str(answer),
            "hints": [
                f"How did {b} change to {right}?",
                f"Show it: {b} × {scale} = {right}.",
                f"Do the same to {a}: {a} × {scale} = {answer}.",
            ],
            "solution_steps": [f"Scale by {scale}.", f"x = {a} × {scale} = {answer}."],
        }
