"""
Selection Engine: picks the next flow item for a learner.

Runs four deterministic stages over a freshly generated batch:

  STEP 0  Resolve constraints. The default profile adds a rookie on-ramp
          (add_sub only, difficulty cap, single-digit mode for the lowest
          ratings) unless the caller already passed an allow-list.

  STEP 1  Sample a target from the rating and streak, then build
          `candidate_count` candidates around it.

  STEP 2  Filter: unused ids -> difficulty cap -> template allow-list ->
          jump cap. When a stage empties the pool the previous stage is
          used instead; the allow-list itself is never relaxed.

  STEP 3  Score (distance to target + jump penalty + diversity penalty),
          then pick at random among the `top_pool_size` lowest scores.

If the pick still breaks a constraint, bounded retry loops follow. Caller
constraints are then given up one at a time, in a fixed order:

  1. jump cap        (items are still built from the allow-list, under the cap)
  2. difficulty cap  (an emergency add_sub comes first when add_sub is allowed)
  3. allow-list      (only when no allowed template can build an item at all)

Every relaxation that drops a caller constraint logs a WARNING.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from practiceflow.core.config import EngineConfig, JumpPenalty
from practiceflow.core.deps import get_engine_config, get_rng
from practiceflow.models.items import FlowItem, FlowSelectionOptions
from practiceflow.services.flow_generator import (
    HARD_PLUS_RATING,
    assert_integer_safe,
    build_candidate,
    build_emergency_item,
    build_item,
    is_trivial_for_hard_plus,
    passes_constraints,
)
from practiceflow.services.rating import choose_target_difficulty
from practiceflow.services.telemetry import emit_event
from practiceflow.skills.registry import TEMPLATE_REGISTRY
from practiceflow.utils.arithmetic import clamp, round_half_up

logger = logging.getLogger("practiceflow.selection")


# ---------------------------------------------------------------------------
# Penalties
# ---------------------------------------------------------------------------

def jump_penalty(difficulty: float, prev_difficulty: Optional[float], penalty: JumpPenalty) -> float:
    if prev_difficulty is None:
        return 0
    return max(0, abs(difficulty - prev_difficulty) - penalty.free_window) * penalty.multiplier


def flow_diversity_penalty(
    item: FlowItem,
    recent_templates: Sequence[str],
    recent_shapes: Sequence[str],
    recent_pattern_tags: Sequence[str] = (),
    *,
    config: Optional[EngineConfig] = None,
) -> float:
    weights = get_engine_config(config).selection.diversity_penalty
    penalty = 0.0
    if item.template in recent_templates[-2:]:
        penalty += weights.template_last2
    elif item.template in recent_templates[-4:]:
        penalty += weights.template_last4
    if item.shape_signature in recent_shapes[-2:]:
        penalty += weights.shape_last2
    last_patterns = recent_pattern_tags[-3:]
    if any(tag in last_patterns for tag in item.pattern_tags):
        penalty += weights.pattern_last3
    return penalty


def trim_recent_history(history: Sequence[str], max_size: Optional[int] = None, *,
                        config: Optional[EngineConfig] = None) -> list[str]:
    if max_size is None:
        max_size = get_engine_config(config).selection.recent_history_size
    return list(history[-max_size:]) if max_size > 0 else []


# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Constraints:
    allowed_templates: Optional[tuple[str, ...]]
    max_difficulty: Optional[int]
    max_jump: Optional[int]
    prev_difficulty: Optional[int]
    single_digit: bool

    def template_ok(self, item: FlowItem) -> bool:
        return not self.allowed_templates or item.template in self.allowed_templates

    def cap_ok(self, item: FlowItem) -> bool:
        return self.max_difficulty is None or item.difficulty <= self.max_difficulty

    def jump_active(self) -> bool:
        return self.max_jump is not None and self.prev_difficulty is not None

    def jump_ok(self, item: FlowItem) -> bool:
        return not self.jump_active() or abs(item.difficulty - self.prev_difficulty) <= self.max_jump

    def all_ok(self, item: FlowItem) -> bool:
        return self.template_ok(item) and self.cap_ok(item) and self.jump_ok(item)

    def permits_add_sub(self) -> bool:
        return not self.allowed_templates or "add_sub" in self.allowed_templates


def _resolve_constraints(
    rating: float,
    prev_difficulty: Optional[int],
    max_difficulty: Optional[int],
    options: FlowSelectionOptions,
    config: EngineConfig,
) -> _Constraints:
    sel = config.selection
    rookie = options.target_profile == "default" and rating <= sel.rookie_rating
    allowed = options.allowed_templates or None
    cap = max_difficulty
    if rookie:
        if not allowed:
            allowed = ("add_sub",)
        cap = min(cap if cap is not None else sel.rookie_max_difficulty, sel.rookie_max_difficulty)
    single_digit = options.force_single_digit_add_sub or (rookie and rating <= sel.rookie_single_digit_rating)
    return _Constraints(
        allowed_templates=allowed,
        max_difficulty=cap,
        max_jump=options.max_jump_from_prev,
        prev_difficulty=prev_difficulty,
        single_digit=single_digit,
    )


def _scoring_pool(pool: list[FlowItem], c: _Constraints) -> list[FlowItem]:
    capped = [item for item in pool if c.cap_ok(item)]
    template_capped = [item for item in capped if c.template_ok(item)]
    jump_capped = [item for item in template_capped if c.jump_ok(item)]

    if jump_capped:
        return jump_capped
    if c.jump_active() and template_capped:
        logger.warning("No candidate within jump %s of %s; relaxing jump cap", c.max_jump, c.prev_difficulty)
    if c.allowed_templates:
        return template_capped
    if template_capped:
        return template_capped
    if capped:
        return capped
    if c.max_difficulty is not None and pool:
        logger.warning("No candidate under max difficulty %s; relaxing cap", c.max_difficulty)
    return pool


def _build_from_allowed(
    c: _Constraints,
    at: float,
    rating: float,
    attempts: int,
    rng: random.Random,
    *,
    honor_jump: bool = True,
    honor_cap: bool = True,
    allow_trivial: bool = False,
) -> Optional[FlowItem]:
    """Build straight from the allow-list, aiming `at` into each template's range.

    With both caps honored the usual legality and Hard-plus triviality filters
    apply too. Returns None when nothing acceptable comes out of `attempts`.
    """
    templates = [TEMPLATE_REGISTRY[key] for key in c.allowed_templates or () if key in TEMPLATE_REGISTRY]
    if not templates:
        return None
    strict = honor_jump and honor_cap
    for _ in range(attempts):
        template = rng.choice(templates)
        difficulty = int(clamp(round_half_up(at), template.min_difficulty, template.max_difficulty))
        item = build_item(template, difficulty, rng, single_digit_only=c.single_digit)
        if item is None or not assert_integer_safe(item):
            continue
        if honor_cap and not c.cap_ok(item):
            continue
        if honor_jump and not c.jump_ok(item):
            continue
        if strict and not passes_constraints(item, rating, rng):
            continue
        if strict and not allow_trivial and rating >= HARD_PLUS_RATING and is_trivial_for_hard_plus(item):
            continue
        return item
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def select_next_flow_item(
    rating: float,
    used_ids: Iterable[str],
    prev_difficulty: Optional[int] = None,
    recent_templates: Sequence[str] = (),
    recent_shapes: Sequence[str] = (),
    recent_pattern_tags: Sequence[str] = (),
    correct_streak: int = 0,
    max_difficulty: Optional[int] = None,
    options: Optional[FlowSelectionOptions] = None,
    *,
    rng: Optional[random.Random] = None,
    config: Optional[EngineConfig] = None,
) -> FlowItem:
    rng = get_rng(rng)
    config = get_engine_config(config)
    options = options or FlowSelectionOptions()
    sel = config.selection
    used = set(used_ids)
    recent_templates = list(recent_templates)
    recent_shapes = list(recent_shapes)
    recent_pattern_tags = list(recent_pattern_tags)

    c = _resolve_constraints(rating, prev_difficulty, max_difficulty, options, config)
    target = choose_target_difficulty(rating, correct_streak, options.target_profile, rng=rng, config=config)
    allow_trivial = options.target_profile == "training_flow"

    def candidate(at: float, against: float, trivial_ok: bool) -> FlowItem:
        return build_candidate(
            at, against,
            allow_trivial_for_high_rating=trivial_ok,
            force_single_digit_add_sub=c.single_digit,
            rng=rng,
            config=config,
        )

    def done(item: FlowItem, fallback: Optional[str] = None) -> FlowItem:
        emit_event("flow_selected", operation="select_next_flow_item", template=item.template,
                   difficulty=item.difficulty, target=target, fallback=fallback, ok=c.all_ok(item))
        return item

    candidates = [candidate(target, rating, allow_trivial) for _ in range(sel.candidate_count)]
    fresh = [item for item in candidates if item.id not in used]
    pool = fresh or candidates
    scoring = _scoring_pool(pool, c)

    # ── Empty pool: targeted retries, then relax jump, then cap; allow-list last ──
    if not scoring:
        baseline = prev_difficulty if prev_difficulty is not None else target
        constraint_rating = min(rating, prev_difficulty) if prev_difficulty is not None else rating
        direct_attempts = sel.candidate_count * sel.allowed_build_factor
        if c.allowed_templates:
            direct = _build_from_allowed(c, baseline, constraint_rating, direct_attempts, rng,
                                         allow_trivial=allow_trivial)
            if direct is not None:
                return done(direct, "allowed_template_build")
        for _ in range(sel.candidate_count * sel.empty_pool_retry_factor):
            retry = candidate(baseline, constraint_rating, True)
            if c.all_ok(retry):
                return done(retry, "empty_pool_retry")
        if c.allowed_templates:
            direct = _build_from_allowed(c, baseline, constraint_rating, direct_attempts, rng, honor_jump=False)
            if direct is not None:
                if c.jump_active():
                    logger.warning("No %s item within jump %s of %s; relaxing jump cap",
                                   "/".join(c.allowed_templates), c.max_jump, c.prev_difficulty)
                return done(direct, "jump_relaxed")
        if c.permits_add_sub():
            emergency = build_emergency_item(baseline, rng, single_digit_only=c.single_digit, low=800, high=940)
            if c.cap_ok(emergency):
                logger.info("Empty candidate pool; serving emergency add_sub at %d", emergency.difficulty)
                return done(emergency, "empty_pool_emergency")
        if c.allowed_templates:
            direct = _build_from_allowed(c, baseline, constraint_rating, direct_attempts, rng,
                                         honor_jump=False, honor_cap=False)
            if direct is not None:
                logger.warning("No %s item under max difficulty %s; relaxing cap",
                               "/".join(c.allowed_templates), c.max_difficulty)
                return done(direct, "cap_relaxed")
            logger.warning("No template in allow-list %s can be built; dropping allow-list", c.allowed_templates)
        scoring = pool

    # ── Score and pick ──
    scored = sorted(
        (
            abs(item.difficulty - target)
            + jump_penalty(item.difficulty, prev_difficulty, sel.jump_penalty)
            + flow_diversity_penalty(item, recent_templates, recent_shapes, recent_pattern_tags, config=config),
            index,
            item,
        )
        for index, item in enumerate(scoring)
    )
    top = scored[: min(sel.top_pool_size, len(scored))]
    chosen = rng.choice(top)[2]

    if c.all_ok(chosen):
        return done(chosen)

    # ── Constraint violation: retry against all constraints ──
    baseline = prev_difficulty if prev_difficulty is not None else target
    for attempt in range(sel.candidate_count * sel.violation_retry_factor):
        retry = candidate(baseline, rating, allow_trivial)
        if not c.all_ok(retry):
            continue
        if retry.id in used and attempt < sel.candidate_count * sel.violation_fresh_factor:
            continue
        return done(retry, "violation_retry")

    # ── Jump still violated: retries at prev_difficulty, then emergency ──
    if c.jump_active() and not c.jump_ok(chosen):
        for _ in range(sel.candidate_count * sel.jump_retry_factor):
            retry = candidate(prev_difficulty, min(rating, prev_difficulty), True)
            if c.template_ok(retry) and c.cap_ok(retry) and c.jump_ok(retry):
                return done(retry, "jump_retry")
        if c.allowed_templates:
            direct = _build_from_allowed(c, prev_difficulty, min(rating, prev_difficulty),
                                         sel.candidate_count * sel.allowed_build_factor, rng, allow_trivial=True)
            if direct is not None:
                return done(direct, "jump_retry")
        if c.permits_add_sub():
            emergency = build_emergency_item(prev_difficulty, rng, single_digit_only=c.single_digit,
                                             low=800, high=980)
            if c.cap_ok(emergency) and c.jump_ok(emergency):
                logger.info("Jump cap unreachable; serving emergency add_sub at %d", emergency.difficulty)
                return done(emergency, "jump_emergency")

    logger.warning(
        "Returning %s at %d despite constraints (allowed=%s cap=%s jump=%s prev=%s)",
        chosen.template, chosen.difficulty, c.allowed_templates, c.max_difficulty, c.max_jump, prev_difficulty,
    )
    return done(chosen, "constraint_violation")
