"""
Rating model: Elo-style skill estimate and next-target sampler.

The caller owns the rating; everything here returns new values.

  expected_probability()      logistic win chance of rating vs difficulty
  update_rating()             streak-scaled K, delta clamped to +/-max_delta
  update_training_rating()    same step, result clamped to [floor, cap]
  choose_target_difficulty()  near/above/below mixture for the next pick
"""
from __future__ import annotations

import logging
import random
from typing import Optional

from practiceflow.core.config import EngineConfig, RatingSettings, TrainingSettings
from practiceflow.core.deps import get_engine_config, get_rng

logger = logging.getLogger("practiceflow.rating")


def _clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def expected_probability(rating: float, difficulty: float) -> float:
    return 1 / (1 + 10 ** ((difficulty - rating) / 400))


def _k_factor(k_factors: tuple[tuple[int, float], ...], correct_streak: int) -> float:
    for threshold, k in k_factors:
        if correct_streak >= threshold:
            return k
    return k_factors[-1][1]


def _elo_delta(
    rating: float,
    difficulty: float,
    correct: bool,
    correct_streak: int,
    settings: RatingSettings | TrainingSettings,
) -> float:
    p = expected_probability(rating, difficulty)
    k = _k_factor(settings.k_factors, correct_streak)
    raw_delta = k * ((1 if correct else 0) - p)
    return _clamp(raw_delta, -settings.max_delta, settings.max_delta)


def update_rating(
    rating: float,
    difficulty: float,
    correct: bool,
    correct_streak: int = 0,
    *,
    config: Optional[EngineConfig] = None,
) -> float:
    """Return the rating after one answer. The scale itself is open (no clamp)."""
    config = get_engine_config(config)
    return rating + _elo_delta(rating, difficulty, correct, correct_streak, config.rating)


# ---------------------------------------------------------------------------
# Training rating
# ---------------------------------------------------------------------------

def training_rating_cap(
    questions_answered: int,
    skill_rating: float,
    *,
    config: Optional[EngineConfig] = None,
) -> float:
    training = get_engine_config(config).training
    cap = max(training.floor, skill_rating + training.headroom)
    if questions_answered < training.early_question_cap:
        cap = min(cap, training.early_rating_cap)
    return max(training.floor, cap)


def clamp_training_rating(
    rating: float,
    skill_rating: float,
    questions_answered: int,
    *,
    config: Optional[EngineConfig] = None,
) -> float:
    training = get_engine_config(config).training
    cap = training_rating_cap(questions_answered, skill_rating, config=config)
    return _clamp(rating, training.floor, cap)


def training_start_rating(skill_rating: float, *, config: Optional[EngineConfig] = None) -> float:
    training = get_engine_config(config).training
    return clamp_training_rating(min(skill_rating, training.start_rating), skill_rating, 0, config=config)


def update_training_rating(
    training_rating: float,
    skill_rating: float,
    questions_answered: int,
    correct: bool,
    correct_streak: int = 0,
    difficulty: Optional[float] = None,
    *,
    config: Optional[EngineConfig] = None,
) -> float:
    """Step the training rating and clamp the result into [floor, cap].

    When no item difficulty is given the step is taken against the training
    rating itself (p = 0.5), so every answer moves the rating.
    """
    config = get_engine_config(config)
    against = training_rating if difficulty is None else difficulty
    delta = _elo_delta(training_rating, against, correct, correct_streak, config.training)
    return clamp_training_rating(training_rating + delta, skill_rating, questions_answered, config=config)


# ---------------------------------------------------------------------------
# Target sampling
# ---------------------------------------------------------------------------

def choose_target_difficulty(
    rating: float,
    correct_streak: int = 0,
    profile: str = "default",
    *,
    rng: Optional[random.Random] = None,
    config: Optional[EngineConfig] = None,
) -> float:
    rng = get_rng(rng)
    dist = get_engine_config(config).profile(profile).distribution_for(correct_streak)
    center = rating + dist.center_shift
    roll = rng.random()
    if roll < dist.near:
        return rng.gauss(center, dist.near_sd)
    if roll < dist.near + dist.above:
        return rng.uniform(center + dist.above_range[0], center + dist.above_range[1])
    return rng.uniform(center + dist.below_range[0], center + dist.below_range[1])
