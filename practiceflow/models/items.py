from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DifficultyLabel(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    EXPERT = "Expert"
    MASTER = "Master"

    @property
    def rank(self) -> int:
        return LABEL_ORDER.index(self)

    def at_least(self, other: "DifficultyLabel") -> bool:
        return self.rank >= other.rank


LABEL_ORDER: list[DifficultyLabel] = [
    DifficultyLabel.EASY,
    DifficultyLabel.MEDIUM,
    DifficultyLabel.HARD,
    DifficultyLabel.EXPERT,
    DifficultyLabel.MASTER,
]

HARD_PLUS_LABELS: frozenset[DifficultyLabel] = frozenset({
    DifficultyLabel.HARD,
    DifficultyLabel.EXPERT,
    DifficultyLabel.MASTER,
})

FlowFormat = Literal["multiple_choice", "numeric_input", "text_input"]
PuzzleType = Literal["constraint", "logic", "pattern", "word", "spatial", "strategy", "counting"]
AnswerType = Literal["choice", "short_text", "long_text"]


class FlowItem(BaseModel):
    """One fast-answer practice question.

    Frozen once built; the generator attaches analyzer output with
    model_copy(update=...) before handing the item to the caller.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    kind: Literal["flow"] = "flow"
    difficulty: int
    label: Optional[DifficultyLabel] = None
    template: str
    shape_signature: str
    tags: tuple[str, ...] = ()
    breakdown: dict[str, int] = Field(default_factory=dict)
    format: FlowFormat
    prompt: str
    answer: str
    choices: Optional[tuple[str, ...]] = None
    accept_answers: Optional[tuple[str, ...]] = None
    unit: Optional[str] = None
    hints: tuple[str, ...] = Field(min_length=1, max_length=4)
    solution_steps: tuple[str, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_choices(self) -> "FlowItem":
        if self.format == "multiple_choice":
            if not self.choices:
                raise ValueError("multiple_choice item has no choices")
            if len(set(self.choices)) != len(self.choices):
                raise ValueError(f"duplicate choices: {self.choices}")
            if self.choices.count(self.answer) != 1:
                raise ValueError(f"answer {self.answer!r} must appear exactly once in {self.choices}")
        return self

    @property
    def pattern_tags(self) -> list[str]:
        return [tag for tag in self.tags if tag.startswith("pattern:")]


class PuzzleExtension(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    prompt: str
    answer: str


class PuzzleItem(BaseModel):
    """A multi-step reasoning challenge with a three-rung hint ladder."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: Literal["puzzle"] = "puzzle"
    template: str
    difficulty: int
    label: Optional[DifficultyLabel] = None
    puzzle_type: PuzzleType
    tags: tuple[str, ...] = ()
    title: str
    answer_type: AnswerType = "short_text"
    core_prompt: str
    core_answer: str
    choices: Optional[tuple[str, ...]] = None
    accept_answers: Optional[tuple[str, ...]] = None
    extensions: tuple[PuzzleExtension, ...] = ()
    hint_ladder: tuple[str, ...]
    solution_steps: tuple[str, ...]

    @model_validator(mode="after")
    def _check_choices(self) -> "PuzzleItem":
        if self.answer_type == "choice" and self.choices:
            if len(set(self.choices)) != len(self.choices):
                raise ValueError(f"duplicate choices: {self.choices}")
            if self.choices.count(self.core_answer) != 1:
                raise ValueError(f"answer {self.core_answer!r} must appear exactly once in {self.choices}")
        return self


class BonusChallenge(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    prompt: str
    choices: tuple[str, ...] = ()
    answer: str
    hint: str
    flavor: Literal["fraction", "fast_math", "puzzle"]
    difficulty: int
    label: DifficultyLabel
    template: str
    shape_signature: str
    run_median_difficulty: int
    bonus_target_difficulty: int


class FlowSelectionOptions(BaseModel):
    """Constraints used by onboarding and training mode."""

    model_config = ConfigDict(frozen=True)

    target_profile: str = "default"
    max_jump_from_prev: Optional[int] = None
    allowed_templates: Optional[tuple[str, ...]] = None
    force_single_digit_add_sub: bool = False


class FlowHistory(BaseModel):
    """Rolling selection context the caller carries between picks."""

    model_config = ConfigDict(frozen=True)

    prev_difficulty: Optional[int] = None
    recent_templates: tuple[str, ...] = ()
    recent_shapes: tuple[str, ...] = ()
    recent_pattern_tags: tuple[str, ...] = ()
    window: int = 6

    def record(self, item: FlowItem) -> "FlowHistory":
        return self.model_copy(update={
            "prev_difficulty": item.difficulty,
            "recent_templates": (self.recent_templates + (item.template,))[-self.window:],
            "recent_shapes": (self.recent_shapes + (item.shape_signature,))[-self.window:],
            "recent_pattern_tags": (self.recent_pattern_tags + tuple(item.pattern_tags))[-self.window:],
        })
