"""Rectangle area/perimeter and triangle area: FlowTemplate implementation."""

import random

from .base import FlowTemplate
from practiceflow.utils.arithmetic import build_break_apart_plan, to_band

# (a_min, a_max, b_min, b_max) for rectangle sides; rookie shares the easy row
_RECT_RANGES = {
    "rookie": (4, 11, 3, 10),
    "easy": (4, 11, 3, 10),
    "medium": (5, 14, 4, 13),
    "hard": (8, 20, 7, 18),
    "expert": (11, 24, 8, 20),
    "master": (16, 32, 12, 26),
}

# (base_min, base_max, height_min, height_max) for triangles
_TRIANGLE_RANGES = {
    "rookie": (6, 14, 4, 10),
    "easy": (6, 14, 4, 10),
    "medium": (7, 17, 5, 14),
    "hard": (9, 24, 7, 18),
    "expert": (12, 28, 8, 20),
    "master": (16, 34, 12, 24),
}


class GeometryTemplate(FlowTemplate):
    key = "geometry"
    label = "Geometry"
    min_difficulty = 1120
    max_difficulty = 1500

    def build(self, difficulty: int, rng: random.Random, **options) -> dict:
        band = to_band(difficulty)
        mode = rng.choice(("rect_area", "rect_perim", "tri_area"))
        if mode == "tri_area":
            return self._triangle_area(band, rng)

        a_min, a_max, b_min, b_max = _RECT_RANGES[band]
        a = rng.randint(a_min, a_max)
        b = rng.randint(b_min, b_max)
        if mode == "rect_perim":
            perimeter = 2 * (a + b)
            return {
                "signature": f"geo-rect-perim-{a}-{b}",
                "shape_signature": "geom_rect_perim",
                "tags": ["geometry_area"],
                "format": "numeric_input",
                "prompt": f"Rectangle: {a} by {b}. Perimeter = ?",
                "answer": str(perimeter),
                "hints": [
                    "Perimeter means walk around the edge.",
                    f"Add all sides: {a}+{b}+{a}+{b}.",
                    f"Or do 2×({a}+{b}).",
                ],
                "solution_steps": [f"Perimeter = {a}+{b}+{a}+{b}.", f"Perimeter = {perimeter}."],
            }

        area = a * b
        plan = build_break_apart_plan(a, b)
        return {
            "signature": f"geo-rect-area-{a}-{b}",
            "shape_signature": "geom_rect_area",
            "tags": ["geometry_area"],
            "format": "numeric_input",
            "prompt": f"Rectangle: {a} by {b}. Area = ?",
            "answer": str(area),
            "hints": [
                "Area means how many squares fit inside.",
                f"Rewrite: {plan.rewrite_line}.",
                f"Compute: {plan.part_line_a}={plan.value_a}, {plan.part_line_b}={plan.value_b}, "
                f"so area = {area}.",
            ],
            "solution_steps": [
                f"Area = {a} × {b}.",
                plan.rewrite_line,
                f"{plan.part_line_a} = {plan.value_a}, {plan.part_line_b} = {plan.value_b}.",
                f"{plan.value_a} + {plan.value_b} = {area}.",
            ],
        }

    def _triangle_area(self, band: str, rng: random.Random) -> dict:
        base_min, base_max, h_min, h_max = _TRIANGLE_RANGES[band]
        base = rng.randint(base_min, base_max)
        height = rng.randint(h_min, h_max)
        # Keep the area whole
        if (base * height) % 2:
            height += 1
        product = base * height
        area = product // 2
        return {
            "signature": f"geo-tri-area-{base}-{height}",
            "shape_signature": "geom_tri_area",
            "tags": ["geometry_area"],
            "format": "numeric_input",
            "prompt": f"Triangle: base {base}, height {height}. Area = ?",
            "answer": str(area),
            "hints": [
                "Triangle area is half of a rectangle.",
                f"{base}×{height} = ?",
                f"Half of that gives the area: {product} ÷ 2 = {area}.",
            ],
            "solution_steps": [f"{base}×{height} = {product}.", f"{product} ÷ 2 = {area}."],
        }
