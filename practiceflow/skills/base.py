"""Base template contract for flow item generation.

Every topic builder (e.g. AddSubTemplate, PercentTemplate) subclasses
FlowTemplate and overrides build().
"""

import random


class FlowTemplate:
    key: str = ""
    label: str = ""
    min_difficulty: int = 800
    max_difficulty: int = 1700

    def build(self, difficulty: int, rng: random.Random, **options) -> dict:
        """
        Build one raw item near `difficulty`.
        Returns:
        {
            "signature": str,        # unique per number choice, used for the item id
            "shape_signature": str,
            "tags": [str, ...],
            "format": "numeric_input" | "multiple_choice" | "text_input",
            "prompt": str,
            "answer": str,
            "choices": [str, ...],   # multiple_choice only
            "hints": [str, ...],
            "solution_steps": [str, ...],
        }
        The analyzer, not the builder, decides the final difficulty.
        """
        raise NotImplementedError

    def eligible(self, difficulty: float, tolerance: int = 0) -> bool:
        return self.min_difficulty - tolerance <= difficulty <= self.max_difficulty + tolerance
