"""Spatial puzzles: square-to-rectangle area swaps and border tile counts."""

import random

from .base import PuzzleTemplate, extensions, with_three_step_scaffold


def factor_pairs(value: int) -> list[tuple[int, int]]:
    """Factor pairs (a, b) with 2 <= a <= b."""
    pairs = []
    a = 2
    while a * a <= value:
        if value % a == 0:
            pairs.append((a, value // a))
        a += 1
    return pairs


def _non_square_pairs(side: int) -> list[tuple[int, int]]:
    return [(a, b) for a, b in factor_pairs(side * side) if not (a == side and b == side)]


class ShapeSwapTemplate(PuzzleTemplate):
    key = "spatial_area"
    puzzle_type = "spatial"
    min_difficulty = 930
    max_difficulty = 1600
    base_difficulty = 1130
    weight = 8

    def build(self, difficulty: int, rng: random.Random) -> dict:
        side = rng.randint(4, 18)
        pairs = _non_square_pairs(side)
        for _ in range(20):
            if pairs:
                break
            side = rng.randint(4, 18)
            pairs = _non_square_pairs(side)
        if not pairs:
            side = 12
            pairs = _non_square_pairs(side)
        area = side * side

        if rng.random() < 0.55:
            rect_a, rect_b = rng.choice(pairs)
        else:
            window = max(18, area // 4)
            near_misses = [
                (a, b)
                for a in range(2, 25)
                for b in range(2, 25)
                if a * b != area and abs(a * b - area) <= window
            ]
            rect_a, rect_b = rng.choice(near_misses) if near_misses else (side + 1, side)

        rect_area = rect_a * rect_b
        answer = "Yes" if rect_area == area else "No"
        return with_three_step_scaffold({
            "signature": f"shape-{side}-{rect_a}-{rect_b}-{answer.lower()}",
            "difficulty_hint": 20 if answer == "No" else 0,
            "title": "Shape Swap",
            "tags": ["spatial", "reasoning", "geometry_area"],
            "answer_type": "choice",
            "choices": ["Yes", "No"],
            "core_prompt": f"Can a {side}×{side} square become a {rect_a}×{rect_b} rectangle with no stretching?",
            "core_answer": answer,
            "hint_ladder": [
                f"Find the square area first: {side}×{side}.",
                f"Now find the rectangle area: {rect_a}×{rect_b}.",
                "If both areas match, answer Yes. If not, answer No.",
            ],
            "solution_steps": [
                f"Square area = {side}×{side} = {area}.",
                f"Rectangle area = {rect_a}×{rect_b} = {rect_area}.",
                "Areas match, so the answer is Yes." if answer == "Yes"
                else "Areas do not match, so the answer is No.",
            ],
            "extensions": extensions(
                "Make your own Yes example with different dimensions.",
                "Make your own No example with close numbers.",
            ),
        })


class BorderTilesTemplate(PuzzleTemplate):
    key = "spatial_border"
    puzzle_type = "spatial"
    min_difficulty = 980
    max_difficulty = 1650
    base_difficulty = 1220
    weight = 7

    def build(self, difficulty: int, rng: random.Random) -> dict:
        width = rng.randint(4, 12)
        height = rng.randint(4, 12)
        walk = 2 * (width + height)
        border = walk - 4
        return with_three_step_scaffold({
            "signature": f"border-{width}-{height}",
            "difficulty_hint": 25 if border > 30 else 5,
            "title": "Border Tiles",
            "tags": ["spatial", "geometry_area", "perimeter"],
            "answer_type": "short_text",
            "choices": None,
            "core_prompt": f"A launch pad is {width} by {height} tiles. How many tiles touch the outer edge?",
            "core_answer": str(border),
            "hint_ladder": [
                "Count around the edge, not the inside.",
                f"Use 2×({width}+{height}) for the border walk.",
                "Corner tiles get counted twice, so subtract 4.",
            ],
            "solution_steps": [
                f"Start with 2×({width}+{height}) = {walk}.",
                f"Subtract 4 corner repeats: {walk} - 4 = {border}.",
                f"So {border} tiles touch the edge.",
            ],
            "extensions": extensions("Try a 10 by 10 pad.", "How does the border change if you add one row?"),
        })
