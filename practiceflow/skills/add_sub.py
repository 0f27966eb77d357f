"""Addition and subtraction: FlowTemplate implementation."""

import random

from .base import FlowTemplate
from practiceflow.utils.arithmetic import HARD_BANDS, has_borrow, has_carry, to_band

# (a_min, a_max, b_min, b_max) per band
_NUMBER_RANGES = {
    "easy": (18, 95, 6, 28),
    "medium": (40, 160, 8, 70),
    "hard": (90, 360, 30, 180),
}
_WIDE_RANGE = (140, 980, 60, 420)


def _item(signature: str, shape: str, prompt: str, answer: int, hints: list[str], steps: list[str]) -> dict:
    return {
        "signature": signature,
        "shape_signature": shape,
        "tags": ["add_sub"],
        "format": "numeric_input",
        "prompt": prompt,
        "answer": str(answer),
        "hints": hints,
        "solution_steps": steps,
    }


class AddSubTemplate(FlowTemplate):
    key = "add_sub"
    label = "Addition + Subtraction"
    min_difficulty = 800
    max_difficulty = 980

    def build(self, difficulty: int, rng: random.Random, *, single_digit_only: bool = False, **options) -> dict:
        if single_digit_only:
            return self._single_digit(rng)

        band = to_band(difficulty)
        is_add = rng.random() < 0.5
        allow_negative = difficulty >= 980 and rng.random() < 0.2
        if band == "rookie":
            return self._rookie(rng, is_add)

        a_min, a_max, b_min, b_max = _NUMBER_RANGES.get(band, _WIDE_RANGE)
        a = rng.randint(a_min, a_max)
        b = rng.randint(b_min, b_max)
        harder = band in HARD_BANDS

        if is_add:
            # Harder tiers always carry
            if harder and not has_carry(a, b):
                b += 10 - ((a % 10) + (b % 10))
            result = a + b
            tens = b // 10 * 10
            ones = b - tens
            return _item(
                f"addsub-add-{a}-{b}",
                "addsub_add",
                f"{a} + {b} = ?",
                result,
                [
                    f"Split {b} into tens and ones: {tens} and {ones}.",
                    f"Rewrite: {a}+{b} = ({a}+{tens}) + {ones}.",
                    f"Do each part, then add: {a}+{tens} first, then +{ones} to get {result}.",
                ],
                [f"{a} + {b} = {result}.", f"Answer: {result}."],
            )

        left, right = a, b
        if harder:
            if not has_borrow(left, right):
                right += (left % 10) - (right % 10) + 1
            if not allow_negative and left <= right:
                left = right + rng.randint(20, 120)
        if not allow_negative and left < right:
            left, right = right, left
        if harder and abs(left - right) < 8:
            left += rng.randint(12, 40)
        result = left - right
        tens = right // 10 * 10
        ones = right - tens
        return _item(
            f"addsub-sub-{left}-{right}",
            "addsub_sub_neg" if result < 0 else "addsub_sub_pos",
            f"{left} - {right} = ?",
            result,
            [
                f"Break {right} into tens and ones: {tens} and {ones}.",
                f"Rewrite: {left}-{right} = ({left}-{tens})-{ones}.",
                f"Do each part, then check with addition: {result}+{right} = {left}.",
            ],
            [f"{left} - {right} = {result}.", f"Answer: {result}."],
        )

    def _single_digit(self, rng: random.Random) -> dict:
        if rng.random() < 0.5:
            a = rng.randint(0, 9)
            b = rng.randint(0, 9)
            result = a + b
            return _item(
                f"addsub-sd-add-{a}-{b}",
                "addsub_add_single_digit",
                f"{a} + {b} = ?",
                result,
                [
                    f"Start with {a}, then count up {b} more.",
                    "If it helps, use fingers or a number line to count each step.",
                    f"Check: {a} + {b} = {result}.",
                ],
                [f"{a} + {b} = {result}.", f"Answer: {result}."],
            )

        left = rng.randint(1, 9)
        right = rng.randint(0, left)
        result = left - right
        return _item(
            f"addsub-sd-sub-{left}-{right}",
            "addsub_sub_single_digit",
            f"{left} - {right} = ?",
            result,
            [
                f"Start at {left} and take away {right}.",
                f"Count backward {right} steps from {left}.",
                f"Check: {result} + {right} = {left}.",
            ],
            [f"{left} - {right} = {result}.", f"Answer: {result}."],
        )

    def _rookie(self, rng: random.Random, is_add: bool) -> dict:
        teen_starter = rng.random() < 0.2
        if is_add:
            a = rng.randint(10, 19) if teen_starter else rng.randint(0, 9)
            b = rng.randint(0, 9)
            result = a + b
            return _item(
                f"addsub-rookie-add-{a}-{b}",
                "addsub_add_rookie_teen_plus_one_digit" if teen_starter else "addsub_add_single_digit",
                f"{a} + {b} = ?",
                result,
                [
                    f"Start at {a}, then count up {b} more.",
                    f"Count one step at a time until you add all {b}.",
                    f"Check: {a} + {b} = {result}.",
                ],
                [f"{a} + {b} = {result}.", f"Answer: {result}."],
            )

        left = rng.randint(10, 19) if teen_starter else rng.randint(1, 9)
        right = rng.randint(0, min(left, 9))
        result = left - right
        return _item(
            f"addsub-rookie-sub-{left}-{right}",
            "addsub_sub_rookie_teen_minus_one_digit" if teen_starter else "addsub_sub_single_digit",
            f"{left} - {right} = ?",
            result,
            [
                f"Start at {left} and take away {right}.",
                f"Count back {right} steps.",
                f"Check: {result} + {right} = {left}.",
            ],
            [f"{left} - {right} = {result}.", f"Answer: {result}."],
        )
