"""
Tests for the difficulty analyzer.

Scores are computed by hand from the rule tables so a change to any weight
shows up here.
"""
import pytest

from practiceflow.models.items import DifficultyLabel, FlowItem
from practiceflow.services.difficulty_analyzer import (
    ONE_STEP_SCORE_CAP,
    analyze_item,
    difficulty_label_from_score,
    parse_binary_prompt,
    parse_one_step,
    parse_order_ops_prompt,
)


# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------

def _item(template, prompt, shape="shape", answer="0", **kw) -> FlowItem:
    defaults = dict(
        id=f"{template}-test",
        difficulty=0,
        template=template,
        shape_signature=shape,
        format="numeric_input",
        prompt=prompt,
        answer=answer,
        hints=("hint",),
        solution_steps=("step",),
    )
    defaults.update(kw)
    return FlowItem(**defaults)


def _fraction(prompt, answer):
    left, right = prompt.split("? ")[1].split(" or ")
    return _item("fraction_compare", prompt, format="multiple_choice", answer=answer, choices=(left, right))


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------

class TestLabels:
    @pytest.mark.parametrize("score,label", [
        (800, DifficultyLabel.EASY),
        (899, DifficultyLabel.EASY),
        (900, DifficultyLabel.MEDIUM),
        (1049, DifficultyLabel.MEDIUM),
        (1050, DifficultyLabel.HARD),
        (1199, DifficultyLabel.HARD),
        (1200, DifficultyLabel.EXPERT),
        (1349, DifficultyLabel.EXPERT),
        (1350, DifficultyLabel.MASTER),
        (1700, DifficultyLabel.MASTER),
    ])
    def test_thresholds(self, score, label):
        assert difficulty_label_from_score(score) == label

    def test_label_order(self):
        assert DifficultyLabel.EXPERT.at_least(DifficultyLabel.HARD)
        assert not DifficultyLabel.MEDIUM.at_least(DifficultyLabel.HARD)


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------

class TestParsers:
    def test_binary(self):
        assert parse_binary_prompt("18 - 10 = ?", "-") == (18, 10)
        assert parse_binary_prompt("18 - 10 = ?", "+") is None

    def test_one_step(self):
        assert parse_one_step("x + 15 = 40") == ("eq_one_step_add", 15, 40)
        assert parse_one_step("6x = 42") == ("eq_one_step_mul", 6, 42)
        assert parse_one_step("x + 15 = -4") == ("eq_one_step_add", 15, -4)
        assert parse_one_step("2x + 3 = 11") is None

    def test_order_ops(self):
        expr, has_parens, terms = parse_order_ops_prompt("(4 + 5) × 3 = ?")
        assert expr == "(4 + 5) × 3"
        assert has_parens
        assert terms == [4, 5, 3]

    def test_order_ops_needs_product_and_sum(self):
        assert parse_order_ops_prompt("4 + 5 = ?") is None
        assert parse_order_ops_prompt("4 × 5 = ?") is None


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

class TestAddSubScoring:
    def test_minus_ten_is_easy(self):
        result = analyze_item(_item("add_sub", "18 - 10 = ?", answer="8"))
        assert result.difficulty_score == 825
        assert result.difficulty_label == DifficultyLabel.EASY
        assert "pattern:-10" in result.tags
        assert "pattern:-1/-2/-10" in result.tags

    def test_breakdown_sums_to_score(self):
        result = analyze_item(_item("add_sub", "18 - 10 = ?", answer="8"))
        assert sum(result.breakdown.values()) == result.difficulty_score

    def test_carry_is_tagged(self):
        result = analyze_item(_item("add_sub", "27 + 15 = ?", answer="42"))
        assert "requires:carry" in result.tags
        assert result.difficulty_score == 1070

    def test_negative_result(self):
        result = analyze_item(_item("add_sub", "5 - 9 = ?", answer="-4"))
        assert "sub:negative" in result.tags
        assert "requires:borrow" in result.tags

    def test_score_clamped_to_floor(self):
        result = analyze_item(_item("add_sub", "2 - 1 = ?", answer="1"))
        assert result.difficulty_score == 800


class TestOtherTemplates:
    def test_order_ops_worked_example(self):
        result = analyze_item(_item("order_ops", "8 + 3 × 4 = ?", answer="20"))
        assert result.difficulty_score == 1120
        assert result.difficulty_label == DifficultyLabel.HARD
        assert "expr:order-of-ops" in result.tags

    def test_parens_bonus(self):
        plain = analyze_item(_item("order_ops", "4 + 5 × 3 = ?", answer="19"))
        grouped = analyze_item(_item("order_ops", "(4 + 5) × 3 = ?", answer="27"))
        assert "expr:has-parens" in grouped.tags
        assert grouped.difficulty_score > plain.difficulty_score

    def test_times_table_is_easy(self):
        result = analyze_item(_item("mult_div", "7 × 8 = ?", answer="56"))
        assert "pattern:times-table" in result.tags
        assert result.difficulty_label == DifficultyLabel.EASY

    def test_benchmark_fraction_stays_medium(self):
        result = analyze_item(_fraction("Which fraction is greater? 1/2 or 3/8", "1/2"))
        assert result.difficulty_score == 995
        assert result.difficulty_label == DifficultyLabel.MEDIUM

    def test_same_denominator_is_easier(self):
        result = analyze_item(_fraction("Which fraction is greater? 3/7 or 5/7", "5/7"))
        assert "frac:same-denominator" in result.tags
        assert result.difficulty_label == DifficultyLabel.EASY

    def test_unknown_template_keeps_builder_difficulty(self):
        result = analyze_item(_item("custom", "anything", difficulty=1234))
        assert result.difficulty_score == 1234


class TestOneStepCap:
    def test_large_one_step_is_capped(self):
        result = analyze_item(_item("equation_1", "x + 95 = 180", answer="85"))
        assert result.difficulty_score == ONE_STEP_SCORE_CAP
        assert result.difficulty_label == DifficultyLabel.MEDIUM

    def test_negative_rhs_escapes_cap(self):
        result = analyze_item(_item("equation_1", "x + 15 = -4", answer="-19"))
        assert "sub:negative" in result.tags
        assert result.difficulty_score == 1125
        assert result.difficulty_label == DifficultyLabel.HARD


class TestTagMerge:
    def test_builder_tags_kept_first_without_duplicates(self):
        item = _item("add_sub", "27 + 15 = ?", answer="42", tags=("add_sub", "form:add_sub"))
        tags = analyze_item(item).tags
        assert tags[:2] == ("add_sub", "form:add_sub")
        assert tags.count("form:add_sub") == 1

    def test_deterministic(self):
        item = _item("order_ops", "(12 - 4) × 6 + 3 = ?", answer="51")
        assert analyze_item(item) == analyze_item(item)
