"""Pattern puzzles: next in sequence, odd one out, symbol cycles."""

import random

from .base import PuzzleTemplate, extensions, with_three_step_scaffold

SEQUENCE_VARIANTS = [
    {
        "slug": "plus-3",
        "sequence": "4, 7, 10, 13, ?",
        "choices": ["14", "15", "16", "17"],
        "answer": "16",
        "strategy": "Each number goes up by 3.",
        "difficulty_hint": -35,
    },
    {
        "slug": "double-minus-1",
        "sequence": "3, 5, 9, 17, ?",
        "choices": ["25", "31", "33", "35"],
        "answer": "33",
        "strategy": "Double then subtract 1 each time.",
        "difficulty_hint": 25,
    },
    {
        "slug": "square-ish",
        "sequence": "2, 6, 12, 20, ?",
        "choices": ["28", "30", "32", "34"],
        "answer": "30",
        "strategy": "The jumps are +4, +6, +8, so next is +10.",
        "difficulty_hint": 40,
    },
]

ODD_ONE_OUT_VARIANTS = [
    {
        "slug": "prime-mix",
        "prompt": "Which one does not belong: 11, 13, 15, 17?",
        "choices": ["11", "13", "15", "17"],
        "answer": "15",
        "reason": "15 is not prime while the others are prime.",
        "difficulty_hint": -10,
    },
    {
        "slug": "shapes-sides",
        "prompt": "Which one does not belong: triangle, square, pentagon, circle?",
        "choices": ["triangle", "square", "pentagon", "circle"],
        "answer": "circle",
        "reason": "A circle has no straight sides, but the others do.",
        "difficulty_hint": -20,
    },
    {
        "slug": "number-forms",
        "prompt": "Which one does not belong: 8, 16, 24, 25?",
        "choices": ["8", "16", "24", "25"],
        "answer": "25",
        "reason": "The others are multiples of 8; 25 is not.",
        "difficulty_hint": 15,
    },
]

_ORBIT_CYCLE = ("🪐", "🌙", "⭐")


class NextInSequenceTemplate(PuzzleTemplate):
    key = "pattern_next"
    puzzle_type = "pattern"
    min_difficulty = 900
    max_difficulty = 1600
    base_difficulty = 1080
    weight = 8

    def build(self, difficulty: int, rng: random.Random) -> dict:
        variant = rng.choice(SEQUENCE_VARIANTS)
        return with_three_step_scaffold({
            "signature": f"next-{variant['slug']}",
            "difficulty_hint": variant["difficulty_hint"],
            "title": "What Comes Next?",
            "tags": ["pattern", "reasoning"],
            "answer_type": "choice",
            "choices": list(variant["choices"]),
            "core_prompt": f"Find the next number: {variant['sequence']}",
            "core_answer": variant["answer"],
            "hint_ladder": [
                "Look at how each step changes.",
                variant["strategy"],
                "Use that same change one more time.",
            ],
            "solution_steps": [
                variant["strategy"],
                "Apply the pattern to the last shown number.",
                f"The next number is {variant['answer']}.",
            ],
            "extensions": extensions(
                "Build your own sequence with a hidden rule.", "Challenge a friend with your sequence."
            ),
        })


class OddOneOutTemplate(PuzzleTemplate):
    key = "pattern_odd"
    puzzle_type = "pattern"
    min_difficulty = 900
    max_difficulty = 1500
    base_difficulty = 1030
    weight = 6

    def build(self, difficulty: int, rng: random.Random) -> dict:
        variant = rng.choice(ODD_ONE_OUT_VARIANTS)
        return with_three_step_scaffold({
            "signature": f"odd-{variant['slug']}",
            "difficulty_hint": variant["difficulty_hint"],
            "title": "Odd One Out",
            "tags": ["pattern", "logic"],
            "answer_type": "choice",
            "choices": list(variant["choices"]),
            "core_prompt": variant["prompt"],
            "core_answer": variant["answer"],
            "hint_ladder": [
                "Find a rule that fits most choices.",
                "Test each option against that rule.",
                "Pick the one that breaks the rule.",
            ],
            "solution_steps": [
                "Check what three choices have in common.",
                variant["reason"],
                f"So the odd one out is {variant['answer']}.",
            ],
            "extensions": extensions("Create your own odd-one-out set.", "Explain your rule in one sentence."),
        })


class OrbitSymbolsTemplate(PuzzleTemplate):
    key = "pattern_symbols"
    puzzle_type = "pattern"
    min_difficulty = 900
    max_difficulty = 1480
    base_difficulty = 990
    weight = 6

    def build(self, difficulty: int, rng: random.Random) -> dict:
        shown = [*_ORBIT_CYCLE, *_ORBIT_CYCLE, _ORBIT_CYCLE[0]]
        answer = _ORBIT_CYCLE[1]
        return with_three_step_scaffold({
            "signature": "symbols-orbit-cycle",
            "difficulty_hint": -15,
            "title": "Orbit Symbols",
            "tags": ["pattern", "reasoning"],
            "answer_type": "choice",
            "choices": ["🪐", "🌙", "⭐", "☄️"],
            "core_prompt": f"Which symbol comes next? {' '.join(shown)}",
            "core_answer": answer,
            "hint_ladder": [
                "Look for the repeating chunk.",
                "The cycle is 🪐 then 🌙 then ⭐.",
                "After 🪐, the next symbol in that cycle is 🌙.",
            ],
            "solution_steps": [
                "Identify the repeating cycle: 🪐 → 🌙 → ⭐.",
                f"The shown line ends on {shown[-1]}.",
                "So the next symbol is 🌙.",
            ],
            "extensions": extensions("Make a 4-symbol cycle.", "Write a cycle that starts with ⭐."),
        })
