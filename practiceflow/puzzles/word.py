"""Space story word problems."""

import random

from .base import PuzzleTemplate, extensions, with_three_step_scaffold

WORD_PROBLEM_VARIANTS = [
    {
        "slug": "fuel-cells",
        "title": "Space Story: Fuel Cells",
        "prompt": "A shuttle uses 7 fuel cells per hop. It makes 6 hops. How many fuel cells are used?",
        "answer": 42,
        "steps": ["Each hop uses 7 cells.", "Multiply hops by cells per hop: 6×7.", "6×7 = 42 cells total."],
        "hints": [
            "Find the number used in one hop.",
            "Count how many hops there are.",
            "Multiply to get the total used.",
        ],
        "difficulty_hint": -5,
    },
    {
        "slug": "crystal-crates",
        "title": "Space Story: Crystal Crates",
        "prompt": "Nova collected 54 crystals and packs 6 per crate. How many full crates can she pack?",
        "answer": 9,
        "steps": ["This is a grouping problem.", "Compute 54 ÷ 6.", "54 ÷ 6 = 9 crates."],
        "hints": [
            "Think: how many groups of 6 fit in 54?",
            "Use a multiplication check: 6×?=54.",
            "The missing number is the crate count.",
        ],
        "difficulty_hint": 20,
    },
    {
        "slug": "snack-balance",
        "title": "Space Story: Snack Supply",
        "prompt": "A station has 36 snacks. Crew eats 8, then supply ship brings 14 more. How many snacks now?",
        "answer": 42,
        "steps": [
            "Start with 36 snacks and subtract what was eaten.",
            "36 - 8 = 28, then add the new 14.",
            "28 + 14 = 42 snacks now.",
        ],
        "hints": [
            "Do the story in order: subtract then add.",
            "After eating, find what remains.",
            "Then add the new shipment.",
        ],
        "difficulty_hint": 35,
    },
    {
        "slug": "distance-legs",
        "title": "Space Story: Route Distance",
        "prompt": "A rover travels 18 km to Beacon A, then 27 km to Beacon B. How far total?",
        "answer": 45,
        "steps": [
            "Add the two trip legs.",
            "18 + 27 can be split as (18 + 20) + 7.",
            "38 + 7 = 45 km total.",
        ],
        "hints": [
            "This asks for a total distance.",
            "Add the two parts of the trip.",
            "Use tens first if that feels easier.",
        ],
        "difficulty_hint": 5,
    },
]


class WordStoryTemplate(PuzzleTemplate):
    key = "word_story"
    puzzle_type = "word"
    min_difficulty = 900
    max_difficulty = 1650
    base_difficulty = 1160
    weight = 30

    def build(self, difficulty: int, rng: random.Random) -> dict:
        variant = rng.choice(WORD_PROBLEM_VARIANTS)
        return with_three_step_scaffold({
            "signature": f"word-{variant['slug']}",
            "difficulty_hint": variant["difficulty_hint"],
            "title": variant["title"],
            "tags": ["word_problem", "reasoning"],
            "answer_type": "short_text",
            "choices": None,
            "core_prompt": variant["prompt"],
            "core_answer": str(variant["answer"]),
            "hint_ladder": list(variant["hints"]),
            "solution_steps": list(variant["steps"]),
            "extensions": extensions("Change one number and solve again.", "Write this story as an equation."),
        })
