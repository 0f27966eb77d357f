"""One-chance constraint puzzles: lamp switches, airlock guards, heavy rock."""

import random

from .base import PuzzleTemplate, extensions, with_three_step_scaffold


class SwitchMissionTemplate(PuzzleTemplate):
    key = "constraint_switch"
    puzzle_type = "constraint"
    min_difficulty = 1160
    max_difficulty = 1700
    base_difficulty = 1370
    weight = 3.5

    def build(self, difficulty: int, rng: random.Random) -> dict:
        best_plan = "Turn one on for a while, switch it off, turn a second on, then check heat and light."
        return with_three_step_scaffold({
            "signature": "switches-one-trip",
            "difficulty_hint": 120,
            "title": "Switch Mission",
            "tags": ["constraint", "logic", "one_chance"],
            "answer_type": "choice",
            "choices": [
                best_plan,
                "Turn all three on, wait, then check only brightness.",
                "Turn one on and immediately run upstairs.",
                "Flip random switches quickly and guess.",
            ],
            "core_prompt": (
                "Three switches control three lamps in another room. "
                "You only get one visit upstairs. What plan works?"
            ),
            "core_answer": best_plan,
            "hint_ladder": [
                "Use more than just on or off.",
                "Warm bulbs give extra information after a switch is off.",
                "Make three different lamp states: on, warm-off, and cold-off.",
            ],
            "solution_steps": [
                "Turn Switch A on and wait so that lamp gets warm.",
                "Turn A off, turn B on, and keep C off before your one trip.",
                "Upstairs: glowing lamp is B, warm dark lamp is A, cold dark lamp is C.",
            ],
            "extensions": extensions("How could you do this with four lamps?", "Why does heat make this puzzle possible?"),
        })


class AirlockQuestionTemplate(PuzzleTemplate):
    key = "constraint_airlock"
    puzzle_type = "constraint"
    min_difficulty = 1140
    max_difficulty = 1700
    base_difficulty = 1340
    weight = 3.3

    def build(self, difficulty: int, rng: random.Random) -> dict:
        best_question = (
            "Ask either guard: “If I asked the other guard which door is safe, what would they say?” "
            "then choose the opposite door."
        )
        return with_three_step_scaffold({
            "signature": "airlocks-one-question",
            "difficulty_hint": 105,
            "title": "Two Airlocks, One Question",
            "tags": ["constraint", "logic", "one_chance"],
            "answer_type": "choice",
            "choices": [
                best_question,
                "Ask Guard A directly which door is safe and trust the answer.",
                "Ask both guards the same question and pick the matching door.",
                "Pick a random door and run.",
            ],
            "core_prompt": (
                "One guard lies and one tells truth. You can ask ONE yes/no question to ONE guard. "
                "What is the best strategy?"
            ),
            "core_answer": best_question,
            "hint_ladder": [
                "You need a question that works on both the liar and truth-teller.",
                "Asking what the other guard would say flips truth twice.",
                "After that question, take the opposite door from the answer.",
            ],
            "solution_steps": [
                "Ask either guard what the other guard would point to.",
                "Both guards will point to the wrong door with that question.",
                "Choose the opposite door to reach safety.",
            ],
            "extensions": extensions("Write your own one-question strategy.", "How would this change with three doors?"),
        })


class HeavyRockTemplate(PuzzleTemplate):
    key = "constraint_rocks"
    puzzle_type = "constraint"
    min_difficulty = 1080
    max_difficulty = 1680
    base_difficulty = 1300
    weight = 3.2

    def build(self, difficulty: int, rng: random.Random) -> dict:
        best_move = "Weigh 3 rocks against 3 rocks."
        return with_three_step_scaffold({
            "signature": "rocks-9-one-weigh",
            "difficulty_hint": 90,
            "title": "Heavy Rock Check",
            "tags": ["constraint", "strategy", "one_chance"],
            "answer_type": "choice",
            "choices": [
                best_move,
                "Weigh 4 rocks against 4 rocks.",
                "Weigh 1 rock against 1 rock.",
                "Weigh all 9 rocks at once.",
            ],
            "core_prompt": (
                "You have 9 space rocks and one is heavier. You get one balance weighing. "
                "What first move gives the best clue?"
            ),
            "core_answer": best_move,
            "hint_ladder": [
                "One weighing should split the possibilities into equal groups.",
                "Try dividing 9 into three groups of 3.",
                "A 3-vs-3 weighing tells you which group to focus on next.",
            ],
            "solution_steps": [
                "Split rocks into groups: 3, 3, and 3.",
                "Weigh one group of 3 against another group of 3.",
                "If balanced, heavy rock is in the third group; if not, it is in the heavier side.",
            ],
            "extensions": extensions("How would you solve it with one more weighing?", "Try the same idea with 12 rocks."),
        })
