"""
Tests for the rating model and the target sampler.

Statistical checks use seeded generators and generous tolerances.
"""
import random

import pytest

from practiceflow.core.config import EngineConfig, RatingSettings
from practiceflow.services.rating import (
    choose_target_difficulty,
    clamp_training_rating,
    expected_probability,
    training_rating_cap,
    training_start_rating,
    update_rating,
    update_training_rating,
)


# ---------------------------------------------------------------------------
# expected_probability
# ---------------------------------------------------------------------------

class TestExpectedProbability:
    def test_even_match_is_half(self):
        assert expected_probability(1000, 1000) == pytest.approx(0.5)

    def test_stronger_learner_more_likely(self):
        assert expected_probability(1200, 1000) > 0.7
        assert expected_probability(1200, 1000) == pytest.approx(1 / (1 + 10 ** -0.5))
        assert expected_probability(800, 1000) < 0.3

    def test_400_point_gap(self):
        assert expected_probability(1000, 1400) == pytest.approx(1 / 11)


# ---------------------------------------------------------------------------
# update_rating
# ---------------------------------------------------------------------------

class TestUpdateRating:
    def test_correct_answer_raises_rating(self):
        assert update_rating(1000, 1000, True) > 1000

    def test_wrong_answer_lowers_rating(self):
        assert update_rating(1000, 1000, False) < 1000

    def test_k_factor_grows_with_streak(self):
        assert update_rating(1000, 1000, True, 0) == pytest.approx(1004)
        assert update_rating(1000, 1000, True, 3) == pytest.approx(1006)
        assert update_rating(1000, 1000, True, 5) == pytest.approx(1009)

    def test_delta_is_clamped(self):
        config = EngineConfig(rating=RatingSettings(k_factors=((0, 100),), max_delta=26))
        assert update_rating(1000, 1000, True, config=config) == pytest.approx(1026)
        assert update_rating(1000, 1000, False, config=config) == pytest.approx(974)

    def test_beating_hard_item_moves_more_than_easy_item(self):
        hard_gain = update_rating(1000, 1300, True) - 1000
        easy_gain = update_rating(1000, 800, True) - 1000
        assert hard_gain > easy_gain > 0

    def test_scale_is_open(self):
        assert update_rating(1695, 1700, True, 6) > 1700


# ---------------------------------------------------------------------------
# Training rating
# ---------------------------------------------------------------------------

class TestTrainingRating:
    def test_early_cap(self):
        assert training_rating_cap(3, 1200) == 1000
        assert training_rating_cap(12, 1200) == 1260

    def test_cap_never_below_floor(self):
        assert training_rating_cap(20, 600) == 820

    def test_clamp_into_bounds(self):
        assert clamp_training_rating(700, 1000, 20) == 820
        assert clamp_training_rating(1500, 1000, 20) == 1060

    def test_start_rating(self):
        assert training_start_rating(1000) == 880
        assert training_start_rating(850) == 850
        assert training_start_rating(700) == 820

    def test_step_without_difficulty_is_half_k(self):
        assert update_training_rating(900, 1000, 3, True) == pytest.approx(912)
        assert update_training_rating(900, 1000, 3, False) == pytest.approx(888)

    def test_stays_inside_bounds_over_a_run(self, rng):
        rating = training_start_rating(1100)
        for q in range(40):
            correct = rng.random() < 0.7
            rating = update_training_rating(rating, 1100, q, correct, correct_streak=q % 6)
            assert 820 <= rating <= training_rating_cap(q, 1100)

    def test_wrong_answers_decrease(self):
        rating = 950
        after = update_training_rating(rating, 1100, 12, False, difficulty=950)
        assert after < rating


# ---------------------------------------------------------------------------
# choose_target_difficulty
# ---------------------------------------------------------------------------

class TestChooseTargetDifficulty:
    DRAWS = 20000

    def _draws(self, rating, streak=0, profile="default", seed=7):
        rng = random.Random(seed)
        return [choose_target_difficulty(rating, streak, profile, rng=rng) for _ in range(self.DRAWS)]

    def test_centered_on_rating(self):
        draws = self._draws(1000)
        near = sum(1 for d in draws if abs(d - 1000) <= 50)
        above = sum(1 for d in draws if d > 1050)
        below = sum(1 for d in draws if d < 950)
        assert near > above
        assert near > below
        assert near / self.DRAWS >= 0.38

    def test_most_targets_within_100(self):
        draws = self._draws(1000)
        within = sum(1 for d in draws if abs(d - 1000) <= 100)
        assert within / self.DRAWS >= 0.6

    def test_streak_shifts_targets_up(self):
        calm = sum(self._draws(1000, streak=0)) / self.DRAWS
        hot = sum(self._draws(1000, streak=5)) / self.DRAWS
        assert hot - calm > 30

    def test_training_profile_is_tighter(self):
        default = self._draws(1000)
        training = self._draws(1000, profile="training_flow")
        wide_default = sum(1 for d in default if abs(d - 1000) > 100)
        wide_training = sum(1 for d in training if abs(d - 1000) > 100)
        assert wide_training < wide_default

    def test_unknown_profile_raises(self, rng):
        with pytest.raises(ValueError):
            choose_target_difficulty(1000, 0, "warp_speed", rng=rng)

    def test_seeded_draws_repeat(self):
        assert self._draws(1100, seed=3)[:50] == self._draws(1100, seed=3)[:50]
