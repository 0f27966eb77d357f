"""
Tests for puzzle templates, the kid-safety filter and puzzle selection.
"""
import pytest

from practiceflow.core.config import EngineConfig, GenerationSettings
from practiceflow.models.items import PuzzleItem
from practiceflow.puzzles.counting import handshake_count
from practiceflow.puzzles.registry import PUZZLE_REGISTRY
from practiceflow.puzzles.strategy import build_nim, first_player_wins
from practiceflow.services.difficulty_analyzer import difficulty_label_from_score
from practiceflow.services.puzzle_generator import (
    build_puzzle_candidate,
    generate_puzzle_choices,
    is_fast_math_like,
    is_kid_safe_puzzle,
    pick_puzzle_template,
    repetition_penalty,
    select_next_puzzle_item,
)


# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------

def _puzzle(**overrides) -> PuzzleItem:
    defaults = dict(
        id="word_story-test",
        template="word_story",
        difficulty=1100,
        puzzle_type="word",
        title="Test",
        core_prompt="A rover drives 12 km each day. How far does it go in 3 days?",
        core_answer="36",
        hint_ladder=("one", "two", "three"),
        solution_steps=("one", "two", "three"),
    )
    defaults.update(overrides)
    return PuzzleItem(**defaults)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:
    def test_fourteen_templates(self):
        assert len(PUZZLE_REGISTRY) == 14

    def test_weights_favor_word_stories(self):
        weights = {key: t.weight for key, t in PUZZLE_REGISTRY.items()}
        assert weights["word_story"] == max(weights.values())
        assert weights["constraint_switch"] == 3.5

    @pytest.mark.parametrize("key", sorted(PUZZLE_REGISTRY))
    def test_templates_build_three_step_puzzles(self, key, rng):
        template = PUZZLE_REGISTRY[key]
        assert template.key == key
        for _ in range(10):
            built = template.build(template.base_difficulty, rng)
            assert len(built["hint_ladder"]) == 3
            assert len(built["solution_steps"]) == 3
            assert built["core_answer"]


class TestPickTemplate:
    def test_low_difficulty_skips_constraint_and_strategy(self, rng):
        for _ in range(300):
            template = pick_puzzle_template(950, rng)
            assert template.puzzle_type not in ("constraint", "strategy")


# ---------------------------------------------------------------------------
# Pure puzzle logic
# ---------------------------------------------------------------------------

class TestNim:
    def test_multiples_of_cycle_lose(self):
        assert not first_player_wins(16, 3)
        assert not first_player_wins(12, 2)
        assert first_player_wins(10, 2)

    def test_build_nim_answer(self):
        assert build_nim(16, 3)["core_answer"] == "No"
        assert build_nim(17, 3)["core_answer"] == "Yes"
        assert build_nim(16, 3)["choices"] == ["Yes", "No"]


class TestCounting:
    @pytest.mark.parametrize("people,expected", [(2, 1), (4, 6), (5, 10), (12, 66)])
    def test_handshakes(self, people, expected):
        assert handshake_count(people) == expected


# ---------------------------------------------------------------------------
# Kid safety
# ---------------------------------------------------------------------------

class TestKidSafety:
    def test_plain_word_story_is_safe(self):
        assert is_kid_safe_puzzle(_puzzle())

    def test_algebra_notation_rejected(self):
        assert not is_kid_safe_puzzle(_puzzle(core_answer="n(n+1)"))
        assert not is_kid_safe_puzzle(_puzzle(solution_steps=("Let n be the count.", "two", "three")))

    def test_fast_math_prompt_rejected(self):
        item = _puzzle(core_prompt="Solve: 12 + 30")
        assert is_fast_math_like(item)
        assert not is_kid_safe_puzzle(item)

    def test_fraction_comparison_rejected(self):
        assert not is_kid_safe_puzzle(_puzzle(core_prompt="Which fraction is greater, 3/4 or 5/8?"))

    def test_spatial_decimals_rejected(self):
        item = _puzzle(template="spatial_area", puzzle_type="spatial", core_answer="12.5")
        assert not is_kid_safe_puzzle(item)

    def test_needs_three_hints(self):
        assert not is_kid_safe_puzzle(_puzzle(hint_ladder=("one", "two")))


# ---------------------------------------------------------------------------
# Generation and selection
# ---------------------------------------------------------------------------

class TestBuildPuzzleCandidate:
    def test_candidates_are_safe_and_in_range(self, rng):
        for target in (900, 1100, 1400, 1700):
            for _ in range(30):
                puzzle = build_puzzle_candidate(target, rng)
                assert is_kid_safe_puzzle(puzzle)
                assert 900 <= puzzle.difficulty <= 1700
                assert puzzle.label == difficulty_label_from_score(puzzle.difficulty)
                assert puzzle.id.startswith(f"{puzzle.template}-")

    def test_fallback_word_story(self, rng):
        config = EngineConfig(generation=GenerationSettings(puzzle_attempts=0))
        puzzle = build_puzzle_candidate(1300, rng, config=config)
        assert puzzle.template == "word_story"


class TestRepetitionPenalty:
    def test_counts_same_template(self):
        item = _puzzle()
        assert repetition_penalty(item, ["word_story-a", "word_story-b", "logic_asn-c"]) == 10

    def test_capped(self):
        used = [f"word_story-{i}" for i in range(10)]
        assert repetition_penalty(_puzzle(), used) == 25


class TestSelectNextPuzzle:
    def test_returns_safe_puzzle(self, rng):
        for rating in (950, 1150, 1400):
            puzzle = select_next_puzzle_item(rating, [], prev_difficulty=rating, rng=rng)
            assert is_kid_safe_puzzle(puzzle)

    def test_tracks_rating(self, rng):
        low = [select_next_puzzle_item(950, [], rng=rng).difficulty for _ in range(40)]
        high = [select_next_puzzle_item(1500, [], rng=rng).difficulty for _ in range(40)]
        assert sum(high) / len(high) > sum(low) / len(low) + 150

    def test_choices_are_distinct(self, rng):
        choices = generate_puzzle_choices(1100, [], 3, rng=rng)
        assert len(choices) == 3
        assert len({p.id for p in choices}) == 3

    def test_unknown_profile_raises(self, rng):
        with pytest.raises(ValueError):
            select_next_puzzle_item(1100, [], profile="nope", rng=rng)
