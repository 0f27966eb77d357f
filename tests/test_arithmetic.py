"""
Tests for the integer-only arithmetic helpers shared by the flow builders.
"""
import math

import pytest

from practiceflow.utils.arithmetic import (
    build_break_apart_plan,
    clamp,
    has_borrow,
    has_carry,
    has_decimal_token,
    is_integer_string,
    lcm,
    make_unique_choices,
    round_half_up,
    split_into_friendly_parts,
    to_band,
)


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

class TestScalars:
    def test_clamp(self):
        assert clamp(5, 0, 10) == 5
        assert clamp(-3, 0, 10) == 0
        assert clamp(42, 0, 10) == 10

    @pytest.mark.parametrize("value, expected", [
        (0.5, 1), (1.5, 2), (2.5, 3), (2.4, 2), (-2.5, -2), (-2.6, -3), (950.5, 951),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_lcm(self):
        assert lcm(4, 6) == 12
        assert lcm(7, 5) == 35

    @pytest.mark.parametrize("difficulty, band", [
        (800, "rookie"), (860, "easy"), (919, "easy"), (920, "medium"),
        (1080, "hard"), (1250, "expert"), (1400, "master"), (1700, "master"),
    ])
    def test_to_band(self, difficulty, band):
        assert to_band(difficulty) == band

    def test_carry_and_borrow(self):
        assert has_carry(27, 15)
        assert not has_carry(21, 15)
        assert has_borrow(42, 17)
        assert not has_borrow(47, 12)

    def test_decimal_and_integer_strings(self):
        assert has_decimal_token("15% of 30 is 4.5")
        assert not has_decimal_token("Round 45 to the nearest 10.")
        assert is_integer_string(" -12 ")
        assert not is_integer_string("3/4")


# ---------------------------------------------------------------------------
# Break-apart plans
# ---------------------------------------------------------------------------

class TestBreakApart:
    def test_friendly_parts(self):
        assert split_into_friendly_parts(14) == (10, 4)
        assert split_into_friendly_parts(20) == (10, 10)
        assert split_into_friendly_parts(7) == (5, 2)
        assert split_into_friendly_parts(3) == (2, 1)

    def test_splits_right_factor(self):
        plan = build_break_apart_plan(7, 14)
        assert plan.split_target == "right"
        assert plan.rewrite_line == "7×14 = 7×10 + 7×4"
        assert (plan.value_a, plan.value_b) == (70, 28)

    def test_splits_left_factor(self):
        plan = build_break_apart_plan(23, 6)
        assert plan.split_target == "left"
        assert plan.original == 23
        assert plan.rewrite_line == "23×6 = 20×6 + 3×6"
        assert plan.value_a + plan.value_b == 23 * 6

    @pytest.mark.parametrize("left, right", [(6, 7), (12, 15), (48, 9), (30, 30), (11, 19)])
    def test_parts_always_sum_to_product(self, left, right):
        plan = build_break_apart_plan(left, right)
        assert plan.part_a + plan.part_b == plan.original
        assert plan.value_a + plan.value_b == left * right


# ---------------------------------------------------------------------------
# Multiple-choice options
# ---------------------------------------------------------------------------

class TestMakeUniqueChoices:
    def test_uses_candidates_and_drops_bad_ones(self, rng):
        options = make_unique_choices(12, [10, 12, 14, -3, 10.6, math.nan], 4, rng)
        assert sorted(options) == [10, 11, 12, 14]

    def test_fills_from_offsets_when_candidates_run_out(self, rng):
        options = make_unique_choices(1, [], 4, rng)
        assert len(options) == 4
        assert len(set(options)) == 4
        assert options.count(1) == 1
        assert all(value > 0 for value in options)

    def test_at_least_two_options(self, rng):
        options = make_unique_choices(9, [9], 1, rng)
        assert len(options) == 2
        assert 9 in options
