"""Base template contract for puzzle generation.

Every puzzle family (e.g. WordStoryTemplate, NimTemplate) subclasses
PuzzleTemplate and overrides build(). Candidate difficulty is centered
between the requested target and `base_difficulty`, then nudged by the
build's `difficulty_hint`.
"""

import random


class PuzzleTemplate:
    key: str = ""
    puzzle_type: str = ""
    min_difficulty: int = 900
    max_difficulty: int = 1700
    base_difficulty: int = 1100
    weight: float = 1.0

    def build(self, difficulty: int, rng: random.Random) -> dict:
        """
        Returns:
        {
            "signature": str,
            "difficulty_hint": int,
            "title": str,
            "tags": [str, ...],
            "answer_type": "choice" | "short_text" | "long_text",
            "choices": [str, ...] | None,
            "core_prompt": str,
            "core_answer": str,
            "hint_ladder": [str, str, str],
            "solution_steps": [str, str, str],
            "extensions": [{"label", "prompt", "answer"}, ...],
        }
        """
        raise NotImplementedError

    def eligible(self, difficulty: float, tolerance: int = 0) -> bool:
        return self.min_difficulty - tolerance <= difficulty <= self.max_difficulty + tolerance


def extensions(one: str, two: str) -> list[dict]:
    return [
        {"label": "Bonus 1", "prompt": one, "answer": "varies"},
        {"label": "Bonus 2", "prompt": two, "answer": "varies"},
    ]


def ensure_three_steps(steps: list[str], filler: str) -> list[str]:
    normalized = [step.strip() for step in steps if step and step.strip()][:3]
    while len(normalized) < 3:
        normalized.append(filler)
    return normalized


def with_three_step_scaffold(built: dict) -> dict:
    """Pad or trim the hint ladder and solution steps to exactly three rungs."""
    built["hint_ladder"] = ensure_three_steps(built.get("hint_ladder", []), "Try a smaller version first.")
    built["solution_steps"] = ensure_three_steps(
        built.get("solution_steps", []), "Now use that same idea on this puzzle."
    )
    return built
