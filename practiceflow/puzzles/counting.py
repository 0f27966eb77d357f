"""Counting puzzle: every crew member high-fives every other crew member once."""

import random

from .base import PuzzleTemplate, extensions, with_three_step_scaffold


def handshake_count(people: int) -> int:
    return people * (people - 1) // 2


class HighFivesTemplate(PuzzleTemplate):
    key = "counting_high_fives"
    puzzle_type = "counting"
    min_difficulty = 960
    max_difficulty = 1600
    base_difficulty = 1150
    weight = 6

    def build(self, difficulty: int, rng: random.Random) -> dict:
        crew = rng.randint(4, 9) if difficulty < 1200 else rng.randint(6, 12)
        total = handshake_count(crew)
        chain = " + ".join(str(k) for k in range(crew - 1, 0, -1))
        return with_three_step_scaffold({
            "signature": f"high-fives-{crew}",
            "difficulty_hint": (crew - 6) * 10,
            "title": "Crew High Fives",
            "tags": ["counting", "reasoning"],
            "answer_type": "short_text",
            "choices": None,
            "core_prompt": (
                f"A crew of {crew} astronauts lands on Mars. Every astronaut high-fives every other "
                "astronaut exactly once. How many high fives happen?"
            ),
            "core_answer": str(total),
            "hint_ladder": [
                f"The first astronaut high-fives {crew - 1} others.",
                f"The next astronaut already did one, so only {crew - 2} new high fives are left.",
                "Keep going down by one each time and add them all up.",
            ],
            "solution_steps": [
                f"New high fives per astronaut: {chain}.",
                f"Add them: {chain} = {total}.",
                f"So {total} high fives happen.",
            ],
            "extensions": extensions("What if one more astronaut joins?", "Draw dots and lines to check your count."),
        })
