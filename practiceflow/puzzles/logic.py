"""Logic puzzles: always/sometimes/never, who is lying, and dock deduction."""

import random

from .base import PuzzleTemplate, extensions, with_three_step_scaffold

_ASN_CHOICES = ["Always", "Sometimes", "Never"]

ALWAYS_SOMETIMES_NEVER_VARIANTS = [
    {
        "slug": "odd-plus-odd",
        "prompt": "Odd number + odd number is even.",
        "answer": "Always",
        "hints": [
            "Test a small example like 3 + 5.",
            "Try another one like 7 + 9.",
            "If every test is even, it is Always.",
        ],
        "steps": ["3 + 5 = 8, which is even.", "7 + 9 = 16, also even.", "Odd + odd is always even."],
        "difficulty_hint": -30,
    },
    {
        "slug": "odd-times-odd",
        "prompt": "Odd number × odd number is even.",
        "answer": "Never",
        "hints": [
            "Try 3 × 5 first.",
            "Try 7 × 9 next.",
            "If all results are odd, the statement is Never.",
        ],
        "steps": ["3 × 5 = 15, which is odd.", "7 × 9 = 63, also odd.", "Odd × odd is never even."],
        "difficulty_hint": -15,
    },
    {
        "slug": "number-times-itself",
        "prompt": "A number times itself is even.",
        "answer": "Sometimes",
        "hints": [
            "Try an even number first: 4 × 4.",
            "Now try an odd number: 3 × 3.",
            "If one example is even and one is odd, the answer is Sometimes.",
        ],
        "steps": ["4 × 4 = 16, which is even.", "3 × 3 = 9, which is odd.", "So this is true only sometimes."],
        "difficulty_hint": 10,
    },
]

WHO_IS_LYING_VARIANTS = [
    {
        "slug": "nova-comet-luna",
        "prompt": (
            "Nova says “Comet did it.” Comet says “Luna did it.” Luna says “Comet is lying.” "
            "Exactly one is lying. Who is lying?"
        ),
        "choices": ["Nova", "Comet", "Luna"],
        "answer": "Nova",
        "hints": [
            "Test each person as the only liar.",
            "If Nova lies, then Comet did not do it.",
            "Check whether that makes the other two statements true.",
        ],
        "steps": [
            "Assume Nova lies, so “Comet did it” is false.",
            "Then Comet saying “Luna did it” can be true, and Luna saying “Comet is lying” can also be true.",
            "That gives exactly one liar: Nova.",
        ],
        "difficulty_hint": 40,
    },
    {
        "slug": "astro-jelly-cosmo",
        "prompt": (
            "Astro says “Jelly found the map.” Jelly says “Cosmo found the map.” Cosmo says “Jelly is truthful.” "
            "Exactly one statement is false. Who is lying?"
        ),
        "choices": ["Astro", "Jelly", "Cosmo"],
        "answer": "Astro",
        "hints": [
            "Try making Astro the liar first.",
            "If Astro lies, Jelly did not find the map.",
            "Check if Jelly and Cosmo can both stay true.",
        ],
        "steps": [
            "Astro lying means Jelly did not find the map.",
            "Jelly saying Cosmo found the map can be true, and Cosmo saying Jelly is truthful can be true.",
            "So Astro is the only liar.",
        ],
        "difficulty_hint": 55,
    },
]


class AlwaysSometimesNeverTemplate(PuzzleTemplate):
    key = "logic_asn"
    puzzle_type = "logic"
    min_difficulty = 900
    max_difficulty = 1450
    base_difficulty = 1080
    weight = 9

    def build(self, difficulty: int, rng: random.Random) -> dict:
        variant = rng.choice(ALWAYS_SOMETIMES_NEVER_VARIANTS)
        return with_three_step_scaffold({
            "signature": f"asn-{variant['slug']}",
            "difficulty_hint": variant["difficulty_hint"],
            "title": "Always / Sometimes / Never",
            "tags": ["logic", "reasoning"],
            "answer_type": "choice",
            "choices": list(_ASN_CHOICES),
            "core_prompt": variant["prompt"],
            "core_answer": variant["answer"],
            "hint_ladder": list(variant["hints"]),
            "solution_steps": list(variant["steps"]),
            "extensions": extensions(
                "Write your own Always/Sometimes/Never statement.", "Test your statement with two examples."
            ),
        })


class WhoIsLyingTemplate(PuzzleTemplate):
    key = "logic_lying"
    puzzle_type = "logic"
    min_difficulty = 980
    max_difficulty = 1650
    base_difficulty = 1210
    weight = 8

    def build(self, difficulty: int, rng: random.Random) -> dict:
        variant = rng.choice(WHO_IS_LYING_VARIANTS)
        return with_three_step_scaffold({
            "signature": f"liar-{variant['slug']}",
            "difficulty_hint": variant["difficulty_hint"],
            "title": "Who Is Lying?",
            "tags": ["logic", "deduction"],
            "answer_type": "choice",
            "choices": list(variant["choices"]),
            "core_prompt": variant["prompt"],
            "core_answer": variant["answer"],
            "hint_ladder": list(variant["hints"]),
            "solution_steps": list(variant["steps"]),
            "extensions": extensions("Change one clue and solve again.", "Make a version with four players."),
        })


class DockDeductionTemplate(PuzzleTemplate):
    key = "logic_deduction"
    puzzle_type = "logic"
    min_difficulty = 920
    max_difficulty = 1500
    base_difficulty = 1110
    weight = 8

    def build(self, difficulty: int, rng: random.Random) -> dict:
        return with_three_step_scaffold({
            "signature": "deduction-map",
            "difficulty_hint": 0,
            "title": "Dock Deduction",
            "tags": ["logic", "deduction"],
            "answer_type": "choice",
            "choices": ["Sun Dock", "Moon Dock", "Star Dock"],
            "core_prompt": "The map is not at Sun Dock. Star Dock is closed for repairs. Which dock has the map?",
            "core_answer": "Moon Dock",
            "hint_ladder": [
                "Cross out places that are impossible.",
                "Sun Dock is ruled out by the first clue.",
                "Star Dock is ruled out by the second clue, so one dock remains.",
            ],
            "solution_steps": [
                "Not at Sun Dock removes one choice.",
                "Star Dock closed removes another choice.",
                "Only Moon Dock is left, so that is the answer.",
            ],
            "extensions": extensions(
                "Write a new clue that keeps Moon Dock as the answer.", "Make a four-dock version."
            ),
        })
