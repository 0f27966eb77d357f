"""Take-away game (Nim): can the first player force a win?"""

import random

from .base import PuzzleTemplate, extensions, with_three_step_scaffold


def first_player_wins(pile: int, max_take: int) -> bool:
    return pile % (max_take + 1) != 0


def build_nim(pile: int, max_take: int) -> dict:
    """Build the star-pile puzzle for a fixed pile size and take limit."""
    cycle = max_take + 1
    wins = first_player_wins(pile, max_take)
    answer = "Yes" if wins else "No"
    if wins:
        last_step = (
            f"{pile} is not a multiple of {cycle}: take {pile % cycle} first, then make every round "
            f"add up to {cycle}. Answer: Yes."
        )
    else:
        last_step = f"{pile} is a multiple of {cycle}, so a careful opponent can always win. Answer: No."

    return with_three_step_scaffold({
        "signature": f"nim-{pile}-{max_take}",
        "difficulty_hint": 30 if not wins else 10,
        "title": "Star Pile Duel",
        "tags": ["strategy", "reasoning", "game"],
        "answer_type": "choice",
        "choices": ["Yes", "No"],
        "core_prompt": (
            f"There are {pile} stars in a pile. Two players take turns removing 1 to {max_take} stars. "
            "Whoever takes the last star wins. You go first. Can you always win, "
            "no matter how your opponent plays?"
        ),
        "core_answer": answer,
        "hint_ladder": [
            f"Start from the end: with 1 to {max_take} stars left, you can take them all.",
            f"Now think about facing exactly {cycle} stars. What happens after any move you make?",
            f"Piles that are multiples of {cycle} are bad to face. Is {pile} one of them?",
        ],
        "solution_steps": [
            f"With 1 to {max_take} stars on your turn, you win right away.",
            f"With {cycle} stars on your turn, every move leaves 1 to {max_take}, so you lose; "
            f"the same is true for every multiple of {cycle}.",
            last_step,
        ],
        "extensions": extensions(
            "Change the rule to taking 1 or 2 stars. Which piles are bad now?",
            "Play the game with a friend and test your strategy.",
        ),
    })


class NimTemplate(PuzzleTemplate):
    key = "strategy_nim"
    puzzle_type = "strategy"
    min_difficulty = 1040
    max_difficulty = 1700
    base_difficulty = 1260
    weight = 5

    def build(self, difficulty: int, rng: random.Random) -> dict:
        max_take = rng.choice((2, 3))
        pile = rng.randint(10, 24)
        return build_nim(pile, max_take)
