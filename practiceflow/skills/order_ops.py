"""Order of operations: FlowTemplate implementation.

Expressions are `a + b × c [- d]` or `(a + b) × c [- d]`. The answer is
computed from the parts, never by evaluating the prompt string.
"""

import random

from .base import FlowTemplate
from practiceflow.utils.arithmetic import HARD_BANDS, build_break_apart_plan, to_band


def _draw(band: str, rng: random.Random, easy: tuple[int, int], medium: tuple[int, int],
          other: tuple[int, int]) -> int:
    low, high = easy if band == "easy" else medium if band == "medium" else other
    return rng.randint(low, high)


class OrderOfOpsTemplate(FlowTemplate):
    key = "order_ops"
    label = "Order of Operations"
    min_difficulty = 960
    max_difficulty = 1500

    def build(self, difficulty: int, rng: random.Random, **options) -> dict:
        band = to_band(difficulty)
        with_parens = band != "easy" and rng.random() < (0.25 if band == "medium" else 0.55)
        a = _draw(band, rng, (3, 9), (4, 12), (6, 18))
        b = _draw(band, rng, (2, 8), (3, 11), (4, 14))
        c = _draw(band, rng, (2, 8), (3, 12), (5, 17))
        d = rng.randint(2, 11) if band in HARD_BANDS else rng.randint(2, 8)
        include_tail = band != "easy" and rng.random() < 0.45

        tail = f" - {d}" if include_tail else ""
        tail_value = d if include_tail else 0
        multiplied = b * c
        paren_value = a + b

        if with_parens:
            expression = f"({a} + {b}) × {c}{tail}"
            answer = paren_value * c - tail_value
            plugged = f"{paren_value} × {c}{tail}"
        else:
            expression = f"{a} + {b} × {c}{tail}"
            answer = a + multiplied - tail_value
            plugged = f"{a} + {multiplied}{tail}"

        plan = build_break_apart_plan(b, c)
        if with_parens:
            hints = [
                f"Find the chunk first: ({a} + {b}).",
                f"Rewrite: ({a} + {b}) × {c}{tail} = {paren_value} × {c}{tail}.",
                f"Plug back in: {plugged} = {answer}.",
            ]
            first_step = f"({a} + {b}) = {paren_value}, so {expression} becomes {paren_value} × {c}{tail}."
        else:
            hints = [
                f"Do multiplication first. Circle {b}×{c}.",
                f"Break it: {plan.rewrite_line}.",
                f"Plug back in: {plugged} = {answer}.",
            ]
            first_step = (
                f"{plan.rewrite_line}; {plan.part_line_a}={plan.value_a}, "
                f"{plan.part_line_b}={plan.value_b}, so {b}×{c}={multiplied}."
            )

        tags = ["order_ops", "expr:order-of-ops"]
        if with_parens:
            tags.append("expr:has-parens")

        return {
            "signature": "order-" + expression.replace(" ", ""),
            "shape_signature": "expr_order_ops_parens" if with_parens else "expr_order_ops",
            "tags": tags,
            "format": "numeric_input",
            "prompt": f"{expression} = ?",
            "answer": str(answer),
            "hints": hints,
            "solution_steps": [first_step, f"Now solve {plugged}.", f"Answer: {answer}."],
        }
