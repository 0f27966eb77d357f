"""Adaptive practice-item engine: rating, difficulty analysis, generation and selection."""

from practiceflow.core.config import DEFAULT_ENGINE_CONFIG, EngineConfig, Settings, get_settings
from practiceflow.models.items import (
    BonusChallenge,
    DifficultyLabel,
    FlowHistory,
    FlowItem,
    FlowSelectionOptions,
    PuzzleItem,
)
from practiceflow.services.bonus import bonus_points_target, build_bonus_target, create_bonus_challenge
from practiceflow.services.difficulty_analyzer import analyze_item, difficulty_label_from_score
from practiceflow.services.puzzle_generator import generate_puzzle_choices, select_next_puzzle_item
from practiceflow.services.rating import (
    choose_target_difficulty,
    expected_probability,
    update_rating,
    update_training_rating,
)
from practiceflow.services.selection import select_next_flow_item

__all__ = [
    "DEFAULT_ENGINE_CONFIG",
    "EngineConfig",
    "Settings",
    "get_settings",
    "BonusChallenge",
    "DifficultyLabel",
    "FlowHistory",
    "FlowItem",
    "FlowSelectionOptions",
    "PuzzleItem",
    "analyze_item",
    "difficulty_label_from_score",
    "bonus_points_target",
    "build_bonus_target",
    "create_bonus_challenge",
    "choose_target_difficulty",
    "expected_probability",
    "update_rating",
    "update_training_rating",
    "select_next_flow_item",
    "select_next_puzzle_item",
    "generate_puzzle_choices",
]
