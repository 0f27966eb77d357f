"""
Template Candidate Generator: one analyzed flow item near a target difficulty.

  pick_template()            uniform among templates whose range (±tolerance) covers d
  build_item()               builder dict -> validated FlowItem -> analyzer annotation
  passes_constraints()       rating-aware legality filter (probabilistic for easy patterns)
  assert_integer_safe()      no decimals anywhere, integer numeric answers
  is_trivial_for_hard_plus() items too easy to show a Hard-plus learner
  build_candidate()          three tiers; always returns an item

Tier 1: primary_attempts at target ± target_jitter, all filters.
Tier 2: fallback_attempts at the clamped target, integer safety + triviality.
Tier 3: emergency add/sub item at max(emergency_floor, target).
"""
from __future__ import annotations

import logging
import random
import re
from typing import Optional

from pydantic import ValidationError

from practiceflow.core.config import EngineConfig, get_settings
from practiceflow.core.deps import get_engine_config, get_rng
from practiceflow.models.items import FlowItem
from practiceflow.services.difficulty_analyzer import analyze_item
from practiceflow.skills.base import FlowTemplate
from practiceflow.skills.registry import TEMPLATE_REGISTRY
from practiceflow.utils.arithmetic import clamp, has_decimal_token, is_integer_string, round_half_up

logger = logging.getLogger("practiceflow.flow_generator")

# Ratings at which easy patterns start being filtered
EASY_PATTERN_RATING = 975
TEN_PATTERN_RATING = 1050
HARD_PLUS_RATING = 1125
# Analyzer score below which an item counts as trivial for a Hard-plus learner
TRIVIAL_SCORE = 1040

_MULT_RE = re.compile(r"^(\d+)\s*[×x]\s*(\d+)\s*=\s*\?$")
_DIV_RE = re.compile(r"^(\d+)\s*÷\s*(\d+)\s*=\s*\?$")
_EQ_ADD_RE = re.compile(r"^x\s*\+\s*(\d+)\s*=\s*(\d+)$")
_EQ_MUL_RE = re.compile(r"^(\d+)x\s*=\s*(\d+)$")


def pick_template(
    difficulty: float,
    rng: Optional[random.Random] = None,
    *,
    config: Optional[EngineConfig] = None,
) -> FlowTemplate:
    rng = get_rng(rng)
    tolerance = get_engine_config(config).generation.template_tolerance
    eligible = [t for t in TEMPLATE_REGISTRY.values() if t.eligible(difficulty, tolerance)]
    if not eligible:
        return TEMPLATE_REGISTRY["add_sub"]
    return rng.choice(eligible)


def annotate(item: FlowItem) -> FlowItem:
    """Attach analyzer output: difficulty, label, merged tags and breakdown."""
    analysis = analyze_item(item)
    annotated = item.model_copy(update={
        "difficulty": analysis.difficulty_score,
        "label": analysis.difficulty_label,
        "tags": analysis.tags,
        "breakdown": analysis.breakdown,
    })
    if get_settings().debug_flow:
        logger.debug(
            "analyzed template=%s shape=%s score=%d label=%s",
            annotated.template, annotated.shape_signature, annotated.difficulty, annotated.label.value,
        )
    return annotated


def build_item(
    template: FlowTemplate,
    difficulty: int,
    rng: random.Random,
    *,
    single_digit_only: bool = False,
) -> Optional[FlowItem]:
    """Build, validate and annotate one item. Returns None when validation fails."""
    built = template.build(difficulty, rng, single_digit_only=single_digit_only)
    signature = built.pop("signature")
    try:
        raw = FlowItem(id=f"{template.key}-{signature}", template=template.key, difficulty=difficulty, **built)
    except ValidationError as e:
        logger.debug("Rejected %s candidate %s: %s", template.key, signature, e.errors()[0]["msg"])
        return None
    return annotate(raw)


def _has_tag(item: FlowItem, tag: str) -> bool:
    return tag in item.tags


def passes_constraints(item: FlowItem, rating: float, rng: Optional[random.Random] = None) -> bool:
    rng = get_rng(rng)
    if rating < EASY_PATTERN_RATING:
        return not (item.template == "add_sub" and int(item.answer) < 0)

    if item.template == "mult_div":
        if _has_tag(item, "pattern:times-table") and rng.random() < 0.7:
            return False
        if rating >= TEN_PATTERN_RATING and (
            _has_tag(item, "pattern:×10") or _has_tag(item, "pattern:÷10")
        ) and rng.random() < 0.9:
            return False
        if rating >= HARD_PLUS_RATING and (
            _has_tag(item, "pattern:times-table") or _has_tag(item, "pattern:÷2/÷5")
        ) and rng.random() < 0.95:
            return False

    if item.template == "equation_1":
        if _is_tiny_one_step(item.prompt):
            return False
        if rating >= HARD_PLUS_RATING and item.difficulty < TRIVIAL_SCORE and rng.random() < 0.9:
            return False

    if item.template == "add_sub" and rating >= HARD_PLUS_RATING:
        regroups = _has_tag(item, "requires:borrow") or _has_tag(item, "requires:carry")
        if not regroups and item.difficulty < TRIVIAL_SCORE and rng.random() < 0.9:
            return False

    return True


def _is_tiny_one_step(prompt: str) -> bool:
    match = _EQ_ADD_RE.match(prompt)
    if match:
        return int(match.group(1)) <= 12 and int(match.group(2)) <= 30
    match = _EQ_MUL_RE.match(prompt)
    if match:
        return int(match.group(1)) <= 4 and int(match.group(2)) <= 40
    return False


def assert_integer_safe(item: FlowItem) -> bool:
    fields = [item.prompt, item.answer, *(item.choices or ()), *item.hints, *item.solution_steps]
    if any(has_decimal_token(field) for field in fields):
        return False
    if item.format == "numeric_input" and not is_integer_string(item.answer):
        return False
    return True


def is_trivial_for_hard_plus(item: FlowItem) -> bool:
    if item.difficulty < TRIVIAL_SCORE:
        return True
    if any(tag in ("pattern:times-table", "pattern:×10", "pattern:÷10") for tag in item.tags):
        return True

    prompt = item.prompt
    match = _MULT_RE.match(prompt)
    if match:
        return int(match.group(1)) <= 9 and int(match.group(2)) <= 9
    match = _DIV_RE.match(prompt)
    if match:
        return int(match.group(1)) <= 100 and int(match.group(2)) <= 12
    return _is_tiny_one_step(prompt)


def build_emergency_item(
    difficulty: float,
    rng: random.Random,
    *,
    single_digit_only: bool = False,
    low: int = 800,
    high: int = 1700,
) -> FlowItem:
    """Integer-safe add/sub item, built at `difficulty` clamped to [low, high]."""
    base = int(clamp(round_half_up(difficulty), low, high))
    item = build_item(TEMPLATE_REGISTRY["add_sub"], base, rng, single_digit_only=single_digit_only)
    if item is None:  # add/sub items carry no choices, so validation cannot fail
        raise RuntimeError("add_sub builder produced an invalid item")
    return item


def build_candidate(
    target_difficulty: float,
    rating: float,
    *,
    allow_trivial_for_high_rating: bool = False,
    force_single_digit_add_sub: bool = False,
    rng: Optional[random.Random] = None,
    config: Optional[EngineConfig] = None,
) -> FlowItem:
    rng = get_rng(rng)
    generation = get_engine_config(config).generation
    suppress_trivial = rating >= HARD_PLUS_RATING and not allow_trivial_for_high_rating

    def acceptable(item: Optional[FlowItem], *, legality: bool) -> bool:
        if item is None:
            return False
        if legality and not passes_constraints(item, rating, rng):
            return False
        if not assert_integer_safe(item):
            return False
        return not (suppress_trivial and is_trivial_for_hard_plus(item))

    # ── Tier 1: jittered target, all filters ──
    for _ in range(generation.primary_attempts):
        jitter = rng.randint(-generation.target_jitter, generation.target_jitter)
        difficulty = int(clamp(round_half_up(target_difficulty + jitter),
                               generation.min_difficulty, generation.max_difficulty))
        template = pick_template(difficulty, rng, config=config)
        candidate = build_item(template, difficulty, rng, single_digit_only=force_single_digit_add_sub)
        if acceptable(candidate, legality=True):
            return candidate

    # ── Tier 2: clamped target, no legality filter ──
    fallback_difficulty = int(clamp(round_half_up(target_difficulty),
                                    generation.min_difficulty, generation.max_difficulty))
    for _ in range(generation.fallback_attempts):
        template = pick_template(fallback_difficulty, rng, config=config)
        candidate = build_item(template, fallback_difficulty, rng, single_digit_only=force_single_digit_add_sub)
        if acceptable(candidate, legality=False):
            return candidate

    # ── Tier 3: emergency add/sub ──
    logger.info(
        "build_candidate exhausted %d+%d attempts at target=%.0f rating=%.0f; using emergency add_sub",
        generation.primary_attempts, generation.fallback_attempts, target_difficulty, rating,
    )
    return build_emergency_item(
        max(generation.emergency_floor, fallback_difficulty),
        rng,
        single_digit_only=force_single_digit_add_sub,
    )
