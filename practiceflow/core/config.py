"""
Engine configuration.

Two layers:
  - Settings: process-level switches read from the environment
    (PRACTICEFLOW_DEBUG_FLOW, PRACTICEFLOW_AUDIT_SELECTIONS, PRACTICEFLOW_RNG_SEED).
  - EngineConfig: the tuning tables (target profiles, rating K-factors,
    selection penalties, retry budgets). Frozen; pass a different instance to
    run an alternate profile through the same call sites.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "practiceflow"

    # Log every analyzed candidate at DEBUG level
    debug_flow: bool = False
    # Emit one JSON audit line per selection
    audit_selections: bool = False
    # Seed for the RNG created at the outermost call when the caller passes none
    rng_seed: Optional[int] = None

    model_config = SettingsConfigDict(
        env_prefix="PRACTICEFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


# ---------------------------------------------------------------------------
# Target distribution profiles
# ---------------------------------------------------------------------------

class TargetDistribution(BaseModel):
    """Three-branch mixture: Gaussian near the center, uniform above, uniform below."""

    model_config = ConfigDict(frozen=True)

    near: float
    above: float
    below: float
    center_shift: float = 0
    near_sd: float
    above_range: tuple[float, float]
    below_range: tuple[float, float]


class TargetProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    base: TargetDistribution
    streak: Optional[TargetDistribution] = None
    trigger: int = 4

    def distribution_for(self, correct_streak: int) -> TargetDistribution:
        if self.streak is not None and correct_streak >= self.trigger:
            return self.streak
        return self.base


_BASE_FLOW = TargetDistribution(
    near=0.6, above=0.25, below=0.15, center_shift=0, near_sd=50,
    above_range=(50, 140), below_range=(-120, -50),
)
_STREAK_FLOW = TargetDistribution(
    near=0.45, above=0.45, below=0.1, center_shift=40, near_sd=45,
    above_range=(50, 140), below_range=(-120, -50),
)
_TRAINING_FLOW = TargetDistribution(
    near=0.75, above=0.15, below=0.1, center_shift=0, near_sd=35,
    above_range=(30, 90), below_range=(-90, -30),
)
_TRAINING_PUZZLE = TargetDistribution(
    near=0.7, above=0.2, below=0.1, center_shift=0, near_sd=40,
    above_range=(40, 110), below_range=(-100, -40),
)


def _default_profiles() -> dict[str, TargetProfile]:
    return {
        "default": TargetProfile(base=_BASE_FLOW, streak=_STREAK_FLOW, trigger=4),
        "streak_boosted": TargetProfile(base=_STREAK_FLOW),
        "training_flow": TargetProfile(
            base=_TRAINING_FLOW,
            streak=_TRAINING_FLOW.model_copy(update={"center_shift": 20}),
            trigger=4,
        ),
        "training_puzzle": TargetProfile(
            base=_TRAINING_PUZZLE,
            streak=_TRAINING_PUZZLE.model_copy(update={"center_shift": 20}),
            trigger=4,
        ),
    }


# ---------------------------------------------------------------------------
# Rating settings
# ---------------------------------------------------------------------------

class RatingSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    # (streak threshold, K) checked from the top down; the last entry is the floor
    k_factors: tuple[tuple[int, float], ...] = ((5, 18), (3, 12), (0, 8))
    max_delta: float = 26


class TrainingSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_rating: float = 880
    floor: float = 820
    headroom: float = 60
    early_question_cap: int = 10
    early_rating_cap: float = 1000
    k_factors: tuple[tuple[int, float], ...] = ((5, 40), (3, 32), (0, 24))
    max_delta: float = 26


# ---------------------------------------------------------------------------
# Selection / generation budgets
# ---------------------------------------------------------------------------

class JumpPenalty(BaseModel):
    model_config = ConfigDict(frozen=True)

    free_window: float
    multiplier: float


class DiversityPenalty(BaseModel):
    model_config = ConfigDict(frozen=True)

    template_last2: float = 40
    template_last4: float = 20
    shape_last2: float = 30
    pattern_last3: float = 25


class FlowSelectionSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    candidate_count: int = 24
    top_pool_size: int = 5
    recent_history_size: int = 6
    jump_penalty: JumpPenalty = JumpPenalty(free_window=90, multiplier=3)
    diversity_penalty: DiversityPenalty = DiversityPenalty()
    # Rookie on-ramp for the default profile
    rookie_rating: float = 830
    rookie_single_digit_rating: float = 820
    rookie_max_difficulty: int = 840
    # Retry multipliers (x candidate_count)
    empty_pool_retry_factor: int = 40
    violation_retry_factor: int = 20
    violation_fresh_factor: int = 18
    jump_retry_factor: int = 30
    allowed_build_factor: int = 10


class PuzzleSelectionSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    candidate_count: int = 24
    top_pool_size: int = 6
    jump_penalty: JumpPenalty = JumpPenalty(free_window=110, multiplier=2.8)
    repeat_penalty: float = 5
    repeat_penalty_cap: float = 25


class GenerationSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    min_difficulty: int = 800
    max_difficulty: int = 1700
    template_tolerance: int = 80
    target_jitter: int = 45
    primary_attempts: int = 12
    fallback_attempts: int = 20
    emergency_floor: int = 900
    # Puzzles
    puzzle_min_difficulty: int = 900
    puzzle_target_jitter: int = 60
    puzzle_difficulty_jitter: int = 35
    puzzle_attempts: int = 20


class EngineConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    profiles: dict[str, TargetProfile] = Field(default_factory=_default_profiles)
    rating: RatingSettings = RatingSettings()
    training: TrainingSettings = TrainingSettings()
    selection: FlowSelectionSettings = FlowSelectionSettings()
    puzzle_selection: PuzzleSelectionSettings = PuzzleSelectionSettings()
    generation: GenerationSettings = GenerationSettings()

    def profile(self, name: str) -> TargetProfile:
        try:
            return self.profiles[name]
        except KeyError:
            raise ValueError(f"Unknown target profile: {name!r}") from None


DEFAULT_ENGINE_CONFIG = EngineConfig()
