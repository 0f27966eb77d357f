"""One-step and two-step linear equations: FlowTemplate implementations."""

import random

from .base import FlowTemplate
from practiceflow.utils.arithmetic import HARD_BANDS, to_band

_ONE_STEP_STYLES = {
    "easy": ("x_plus_c", "x_minus_c", "ax_eq_b"),
    "medium": ("x_plus_c", "x_minus_c", "ax_eq_b", "x_over_c"),
}
_ONE_STEP_HARD_STYLES = ("x_minus_c", "ax_eq_b", "x_over_c")


def _by_band(band: str, rng: random.Random, easy: tuple[int, int], medium: tuple[int, int],
             other: tuple[int, int]) -> int:
    low, high = easy if band == "easy" else medium if band == "medium" else other
    return rng.randint(low, high)


def _equation(signature: str, shape: str, prompt: str, x: int, hints: list[str], steps: list[str]) -> dict:
    return {
        "signature": signature,
        "shape_signature": shape,
        "tags": ["equations", "prealgebra"],
        "format": "numeric_input",
        "prompt": prompt,
        "answer": str(x),
        "hints": hints,
        "solution_steps": steps,
    }


class OneStepEquationTemplate(FlowTemplate):
    key = "equation_1"
    label = "One-Step Equations"
    min_difficulty = 980
    max_difficulty = 1180

    def build(self, difficulty: int, rng: random.Random, **options) -> dict:
        band = to_band(difficulty)
        style = rng.choice(_ONE_STEP_STYLES.get(band, _ONE_STEP_HARD_STYLES))

        if style == "x_plus_c":
            x = _by_band(band, rng, (6, 45), (14, 95), (26, 180))
            c = _by_band(band, rng, (5, 18), (8, 30), (16, 60))
            rhs = x + c
            return _equation(
                f"eq-plus-{x}-{c}", "eq_x_plus_c", f"x + {c} = {rhs}", x,
                [f"Undo +{c}.", f"{rhs} - {c}", "That result is x."],
                [f"x = {rhs} - {c}.", f"x = {x}."],
            )

        if style == "x_minus_c":
            x = _by_band(band, rng, (8, 50), (16, 100), (35, 210))
            c = _by_band(band, rng, (3, 16), (6, 24), (14, 70))
            rhs = x - c
            return _equation(
                f"eq-minus-{x}-{c}", "eq_x_minus_c", f"x - {c} = {rhs}", x,
                [f"Undo -{c}.", f"{rhs} + {c}", "That result is x."],
                [f"x = {rhs} + {c}.", f"x = {x}."],
            )

        if style == "ax_eq_b":
            x = _by_band(band, rng, (3, 16), (5, 24), (10, 36))
            factor = _by_band(band, rng, (2, 10), (3, 12), (6, 18))
            rhs = x * factor
            return _equation(
                f"eq-mult-{x}-{factor}", "eq_ax_eq_b", f"{factor}x = {rhs}", x,
                [f"Undo ×{factor}.", f"{rhs} ÷ {factor}", "That quotient is x."],
                [f"x = {rhs} ÷ {factor}.", f"x = {x}."],
            )

        c = _by_band(band, rng, (2, 8), (3, 12), (7, 18))
        rhs = _by_band(band, rng, (3, 15), (6, 24), (12, 34))
        x = c * rhs
        return _equation(
            f"eq-div-{x}-{c}", "eq_x_over_c", f"x/{c} = {rhs}", x,
            [f"Undo ÷{c}.", f"{rhs} × {c}", "That product is x."],
            [f"x = {rhs} × {c}.", f"x = {x}."],
        )


class TwoStepEquationTemplate(FlowTemplate):
    key = "equation_2"
    label = "Two-Step Equations"
    min_difficulty = 1120
    max_difficulty = 1700

    def build(self, difficulty: int, rng: random.Random, **options) -> dict:
        harder = to_band(difficulty) in HARD_BANDS

        if rng.random() < 0.55:
            x = rng.randint(10, 44) if harder else rng.randint(4, 18)
            shift = rng.randint(4, 16) if harder else rng.randint(2, 9)
            factor = rng.randint(3, 11) if harder else rng.randint(2, 6)
            inner = x - shift
            rhs = factor * inner
            return _equation(
                f"eq-2step-paren-{x}-{shift}-{factor}", "eq_a_paren_x_minus_c",
                f"{factor}(x - {shift}) = {rhs}", x,
                [f"First divide by {factor}.", f"Then add {shift}.", "That result is x."],
                [f"x - {shift} = {inner}.", f"x = {x}."],
            )

        factor = rng.randint(3, 13) if harder else rng.randint(2, 7)
        c = rng.randint(8, 36) if harder else rng.randint(3, 14)
        x = rng.randint(10, 42) if harder else rng.randint(4, 18)
        rhs = factor * x + c
        return _equation(
            f"eq-2step-axplusc-{factor}-{x}-{c}", "eq_ax_plus_c",
            f"{factor}x + {c} = {rhs}", x,
            [f"First subtract {c}.", f"Then divide by {factor}.", "That quotient is x."],
            [f"{factor}x = {rhs - c}.", f"x = {rhs - c} ÷ {factor} = {x}."],
        )
