"""
Difficulty Analyzer: deterministic score + tags for a flow item.

The generator's numbers are never trusted directly. Each item is re-parsed
from its prompt (the prompt grammar is fixed per template) and scored by a
set of additive rules. The sum becomes the item's difficulty:

  score  = clamp(round_half_up(sum(breakdown)), 800, 1700)
  label  = difficulty_label_from_score(score)

One business rule applies after the clamp: a one-step equation without a
negative right-hand side never scores above 1045, so it can never be Hard.

Tags are merged with whatever the builder already attached (order kept,
duplicates dropped). Pattern tags ("pattern:...") feed the selection
engine's diversity penalty and the triviality filters.
"""
from __future__ import annotations

import logging
import re
from typing import NamedTuple, Optional

from practiceflow.models.items import DifficultyLabel, FlowItem
from practiceflow.utils.arithmetic import round_half_up

logger = logging.getLogger("practiceflow.difficulty_analyzer")

MIN_SCORE = 800
MAX_SCORE = 1700
ONE_STEP_SCORE_CAP = 1045


class Analysis(NamedTuple):
    tags: tuple[str, ...]
    difficulty_score: int
    difficulty_label: DifficultyLabel
    breakdown: dict[str, int]


def difficulty_label_from_score(score: float) -> DifficultyLabel:
    if score >= 1350:
        return DifficultyLabel.MASTER
    if score >= 1200:
        return DifficultyLabel.EXPERT
    if score >= 1050:
        return DifficultyLabel.HARD
    if score >= 900:
        return DifficultyLabel.MEDIUM
    return DifficultyLabel.EASY


# ---------------------------------------------------------------------------
# Prompt parsers
# ---------------------------------------------------------------------------

_BINARY_RE = {
    op: re.compile(r"^\s*(\d+)\s*" + re.escape(op) + r"\s*(\d+)\s*=\s*\?\s*$")
    for op in ("+", "-", "×", "÷")
}

_ONE_STEP_PATTERNS = (
    (re.compile(r"^x\s*\+\s*(\d+)\s*=\s*(-?\d+)$"), "eq_one_step_add"),
    (re.compile(r"^x\s*-\s*(\d+)\s*=\s*(-?\d+)$"), "eq_one_step_add"),
    (re.compile(r"^(\d+)x\s*=\s*(-?\d+)$"), "eq_one_step_mul"),
    (re.compile(r"^x/(\d+)\s*=\s*(-?\d+)$"), "eq_one_step_mul"),
)

_FRACTION_RE = re.compile(r"(\d+)/(\d+)\s+or\s+(\d+)/(\d+)", re.IGNORECASE)
_PERCENT_RE = re.compile(r"^(\d+)%\s+of\s+(\d+)\s*=\s*\?$", re.IGNORECASE)
_RATIO_RE = re.compile(r"^(\d+):(\d+)\s*=\s*x:(\d+)$")
_NEGATIVE_RHS_RE = re.compile(r"=\s*-\d+")
_ORDER_OPS_EXPR_RE = re.compile(r"^[\d+\-×() ]+$")
_NUMBER_RE = re.compile(r"\d+")


def parse_binary_prompt(prompt: str, operator: str) -> Optional[tuple[int, int]]:
    match = _BINARY_RE[operator].match(prompt)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def parse_one_step(prompt: str) -> Optional[tuple[str, int, int]]:
    """Return (form, constant, rhs) for a one-step equation prompt."""
    for pattern, form in _ONE_STEP_PATTERNS:
        match = pattern.match(prompt.strip())
        if match:
            return form, int(match.group(1)), int(match.group(2))
    return None


def parse_order_ops_prompt(prompt: str) -> Optional[tuple[str, bool, list[int]]]:
    """Return (expr, has_parens, terms), or None when the prompt is not an
    order-of-operations expression with a product and a sum/difference."""
    trimmed = prompt.strip()
    if not trimmed.endswith("= ?"):
        return None
    expr = trimmed[:-3].strip()
    if not _ORDER_OPS_EXPR_RE.match(expr):
        return None
    if "×" not in expr:
        return None
    if "+" not in expr and "-" not in expr:
        return None
    has_parens = "(" in expr or ")" in expr
    terms = [int(m) for m in _NUMBER_RE.findall(expr)]
    return expr, has_parens, terms


def _digits(value: int) -> int:
    return len(str(abs(value)))


# ---------------------------------------------------------------------------
# Per-template rules
# ---------------------------------------------------------------------------

class _Scorer:
    """Accumulates tags and breakdown points for one analysis."""

    def __init__(self, tags: tuple[str, ...]):
        self.tags: list[str] = []
        self.breakdown: dict[str, int] = {}
        for tag in tags:
            self.tag(tag)

    def tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)

    def add(self, key: str, amount: float) -> None:
        self.breakdown[key] = self.breakdown.get(key, 0) + amount


def _score_add_sub(item: FlowItem, s: _Scorer) -> None:
    s.add("base", 840)
    s.tag("form:add_sub")
    add = parse_binary_prompt(item.prompt, "+")
    sub = parse_binary_prompt(item.prompt, "-")

    if add:
        left, right = add
        result = left + right
        s.add("digits", max(_digits(left), _digits(right), _digits(result)) * 55)
        if (left % 10) + (right % 10) >= 10:
            s.tag("requires:carry")
            s.add("carry", 120)
        else:
            s.add("no_carry", 30)
        if left == 10 or right == 10:
            s.tag("pattern:+10")
            s.add("easy:+10", -170)
    elif sub:
        left, right = sub
        result = left - right
        s.add("digits", max(_digits(left), _digits(right), _digits(result)) * 60)
        if (left % 10) < (right % 10):
            s.tag("requires:borrow")
            s.add("borrow", 130)
        else:
            s.add("no_borrow", 35)
        if right in (1, 2, 10):
            s.tag(f"pattern:-{right}")
            s.tag("pattern:-1/-2/-10")
            s.add("easy:-small", -170)
        if result < 0:
            s.tag("sub:negative")
            s.add("negative_result", 95)


def _score_mult_div(item: FlowItem, s: _Scorer) -> None:
    s.add("base", 840)
    mult = parse_binary_prompt(item.prompt, "×")
    div = parse_binary_prompt(item.prompt, "÷")

    if mult:
        left, right = mult
        s.tag("form:multiply")
        s.add("digits", (_digits(left) + _digits(right)) * 35)
        is_times_table = 3 <= left <= 12 and 3 <= right <= 12
        is_ten_variant = (left == 10 and 3 <= right <= 12) or (right == 10 and 3 <= left <= 12)
        if is_times_table or is_ten_variant:
            s.tag("pattern:times-table")
            s.add("easy:times-table", -220)
        if left == 10 or right == 10:
            s.tag("pattern:×10")
            s.add("easy:×10", -150)
        if left % 10 == 0 or right % 10 == 0:
            s.tag("pattern:trailing-zero")
            s.add("easy:trailing-zero", -60)
        if left >= 10 and right >= 10:
            s.add("two_digit_by_two_digit", 120)
        if (left % 10) * (right % 10) >= 10:
            s.tag("requires:carry")
            s.add("carry", 55)
    elif div:
        dividend, divisor = div
        quotient = 0 if divisor == 0 else dividend / divisor
        s.tag("form:divide")
        s.add("digits", (_digits(dividend) + _digits(divisor)) * 30)
        if (
            3 <= divisor <= 12
            and float(quotient).is_integer()
            and 1 <= quotient <= 12
            and dividend == divisor * quotient
        ):
            s.tag("div:times-table")
            s.tag("pattern:times-table")
            s.add("easy:table-div", -220)
        if divisor == 10:
            s.tag("pattern:÷10")
            s.add("easy:÷10", -150)
        if divisor in (2, 5):
            s.tag("pattern:÷2/÷5")
            s.add("easy:÷2/÷5", -100)
        if dividend % 10 == 0 and (divisor % 10 == 0 or divisor in (2, 5)):
            s.tag("pattern:trailing-zero")
            s.add("easy:trailing-zero", -60)
        if dividend >= 200:
            s.add("larger_dividend", 70)
        if divisor >= 8:
            s.add("larger_divisor", 50)
        if quotient >= 20:
            s.add("larger_quotient", 40)


def _score_fraction_compare(item: FlowItem, s: _Scorer) -> None:
    s.add("base", 960)
    s.tag("form:fraction_compare")
    match = _FRACTION_RE.search(item.prompt)
    if not match:
        return
    n1, d1, n2, d2 = (int(g) for g in match.groups())
    s.add("denominator_size", round_half_up((d1 + d2) / 2 * 7))
    if abs(n1 / d1 - n2 / d2) < 0.1:
        s.add("close_values", 90)
    if d1 == d2:
        s.tag("frac:same-denominator")
        s.add("easy:same-denominator", -170)
    if n1 == n2:
        s.tag("frac:same-numerator")
        s.add("easy:same-numerator", -170)


def _score_equation_1(item: FlowItem, s: _Scorer) -> None:
    s.add("base", 885)
    parsed = parse_one_step(item.prompt)
    if not parsed:
        return
    form, a, b = parsed
    size = _digits(a) + _digits(b)
    s.tag("eq:one-step")
    s.tag(f"form:{form}")
    if form == "eq_one_step_add":
        s.add("one_step_add", 30)
        s.add("size", size * 30)
        if a <= 12 and b <= 35:
            s.add("easy_tiny_add_eq", -120)
        if a >= 20 or b >= 80:
            s.add("larger_constants", 35)
    else:
        s.add("one_step_mul", 60)
        s.add("size", size * 26)
        if a <= 5 and b <= 12:
            s.add("easy_tiny_mul_eq", -120)
        if a >= 10 or b >= 40:
            s.add("larger_constants", 45)
    if _NEGATIVE_RHS_RE.search(item.prompt):
        s.tag("sub:negative")
        s.add("negative_rhs", 120)


def _score_equation_2(item: FlowItem, s: _Scorer) -> None:
    s.add("base", 1220)
    if item.shape_signature == "eq_a_paren_x_minus_c":
        s.tag("form:eq_parens")
        s.tag("form:eq_two_step")
        s.add("paren_form", 150)
    else:
        s.tag("form:eq_two_step")
        s.add("two_step_form", 125)


def _score_percent(item: FlowItem, s: _Scorer) -> None:
    s.add("base", 930)
    match = _PERCENT_RE.match(item.prompt)
    if not match:
        return
    percent, base = int(match.group(1)), int(match.group(2))
    s.tag("form:percent")
    if percent in (10, 20, 25, 50):
        s.tag(f"pattern:{percent}%")
        s.add("easy_percent", -150)
    elif percent in (15, 30):
        s.add("medium_percent", -40)
    else:
        s.tag("pattern:awkward-percent")
        s.add("awkward_percent", 120)
    if base >= 400:
        s.add("larger_base", 50)


def _score_ratio(item: FlowItem, s: _Scorer) -> None:
    s.add("base", 1070)
    s.tag("form:ratio")
    match = _RATIO_RE.match(item.prompt)
    if not match:
        return
    a, b, right = (int(g) for g in match.groups())
    scale = right / max(1, b)
    if scale.is_integer():
        s.add("scale", round_half_up(scale) * 18)
    if a <= 6 and b <= 6 and scale <= 3:
        s.add("easy_small_ratio", -90)


def _score_geometry(item: FlowItem, s: _Scorer) -> None:
    s.add("base", 930)
    if item.shape_signature == "geom_rect_perim":
        s.tag("form:geometry_perimeter")
        s.add("perimeter", 90)
    elif item.shape_signature == "geom_tri_area":
        s.tag("form:geometry_triangle_area")
        s.add("triangle_area", 120)
    else:
        s.tag("form:geometry_rect_area")
        s.add("rect_area", 95)
    numbers = [int(m) for m in _NUMBER_RE.findall(item.prompt)]
    if numbers:
        average = sum(numbers) / len(numbers)
        s.add("dimension_scale", min(60, round_half_up(average * 2)))


def _score_lcm(item: FlowItem, s: _Scorer) -> None:
    s.add("base", 1250)
    s.tag("form:common_multiple")


def _score_order_ops(item: FlowItem, s: _Scorer) -> None:
    s.add("base", 980)
    s.tag("expr:order-of-ops")
    parsed = parse_order_ops_prompt(item.prompt)
    if not parsed:
        s.add("order_ops_default", 120)
        return
    _, has_parens, terms = parsed
    s.add("term_count", len(terms) * 32)
    if has_parens:
        s.tag("expr:has-parens")
        s.add("parens_bonus", 140)
    else:
        s.add("no_parens", 20)
    s.add("operand_scale", round_half_up(max(terms, default=0) * 3))


_RULES = {
    "add_sub": _score_add_sub,
    "mult_div": _score_mult_div,
    "fraction_compare": _score_fraction_compare,
    "equation_1": _score_equation_1,
    "equation_2": _score_equation_2,
    "percent": _score_percent,
    "ratio": _score_ratio,
    "geometry": _score_geometry,
    "lcm": _score_lcm,
    "order_ops": _score_order_ops,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def analyze_item(item: FlowItem) -> Analysis:
    scorer = _Scorer(item.tags)
    rule = _RULES.get(item.template)
    if rule is not None:
        rule(item, scorer)
    else:
        scorer.add("base", item.difficulty or 900)

    score = min(MAX_SCORE, max(MIN_SCORE, round_half_up(sum(scorer.breakdown.values()))))
    if item.template == "equation_1" and "sub:negative" not in scorer.tags:
        score = min(score, ONE_STEP_SCORE_CAP)

    return Analysis(
        tags=tuple(scorer.tags),
        difficulty_score=score,
        difficulty_label=difficulty_label_from_score(score),
        breakdown={key: round_half_up(value) for key, value in scorer.breakdown.items()},
    )
