"""
Tests for the item models, settings and engine config.
"""
import pytest
from pydantic import ValidationError

from practiceflow.core.config import DEFAULT_ENGINE_CONFIG, EngineConfig, get_settings
from practiceflow.core.deps import get_rng
from practiceflow.models.items import FlowItem, PuzzleItem


def _choice_item(**overrides):
    defaults = dict(
        id="fraction_compare-t",
        difficulty=1000,
        template="fraction_compare",
        shape_signature="frac",
        format="multiple_choice",
        prompt="Which fraction is greater? 1/2 or 3/8",
        answer="1/2",
        choices=("1/2", "3/8"),
        hints=("hint",),
        solution_steps=("step",),
    )
    defaults.update(overrides)
    return FlowItem(**defaults)


class TestFlowItem:
    def test_valid_item(self):
        assert _choice_item().choices == ("1/2", "3/8")

    def test_duplicate_choices_rejected(self):
        with pytest.raises(ValidationError):
            _choice_item(choices=("1/2", "1/2"))

    def test_answer_must_be_a_choice(self):
        with pytest.raises(ValidationError):
            _choice_item(answer="5/8")

    def test_multiple_choice_needs_choices(self):
        with pytest.raises(ValidationError):
            _choice_item(choices=None)

    def test_hint_count_bounded(self):
        with pytest.raises(ValidationError):
            _choice_item(hints=())
        with pytest.raises(ValidationError):
            _choice_item(hints=("a", "b", "c", "d", "e"))

    def test_frozen(self):
        item = _choice_item()
        with pytest.raises(ValidationError):
            item.answer = "3/8"

    def test_pattern_tags(self):
        item = _choice_item(tags=("form:x", "pattern:×10", "pattern:+10"))
        assert item.pattern_tags == ["pattern:×10", "pattern:+10"]


class TestPuzzleItem:
    def test_choice_answer_checked(self):
        with pytest.raises(ValidationError):
            PuzzleItem(
                id="strategy_nim-x", template="strategy_nim", difficulty=1200, puzzle_type="strategy",
                title="Duel", answer_type="choice", core_prompt="Can you win?", core_answer="Maybe",
                choices=("Yes", "No"), hint_ladder=("a", "b", "c"), solution_steps=("a", "b", "c"),
            )


class TestConfig:
    def test_profiles_present(self):
        assert set(DEFAULT_ENGINE_CONFIG.profiles) >= {"default", "streak_boosted", "training_flow", "training_puzzle"}

    def test_unknown_profile(self):
        with pytest.raises(ValueError):
            EngineConfig().profile("missing")

    def test_streak_switches_distribution(self):
        profile = DEFAULT_ENGINE_CONFIG.profile("default")
        assert profile.distribution_for(3) is profile.base
        assert profile.distribution_for(4) is profile.streak

    def test_distributions_sum_to_one(self):
        for profile in DEFAULT_ENGINE_CONFIG.profiles.values():
            for dist in filter(None, (profile.base, profile.streak)):
                assert dist.near + dist.above + dist.below == pytest.approx(1)


class TestSettings:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("PRACTICEFLOW_RNG_SEED", "42")
        get_settings.cache_clear()
        try:
            assert get_settings().rng_seed == 42
            assert get_rng().random() == get_rng().random()
        finally:
            get_settings.cache_clear()

    def test_caller_rng_wins(self, rng):
        assert get_rng(rng) is rng
