"""
Puzzle generator and selector.

Same shape as the flow stack, with puzzle-specific rules:
  - template pick is weighted (word stories dominate, constraint puzzles are rare)
  - candidate difficulty is centered between the target and the template's
    base difficulty, plus the build's hint and a small jitter
  - candidates must be kid-safe: no algebra notation, no fast-math-shaped
    prompts, exactly three hints and three solution steps
  - selection adds an anti-repetition penalty per already-used id of the
    same template
"""
from __future__ import annotations

import logging
import random
import re
from typing import Iterable, Optional

from pydantic import ValidationError

from practiceflow.core.config import EngineConfig
from practiceflow.core.deps import get_engine_config, get_rng
from practiceflow.models.items import PuzzleItem
from practiceflow.puzzles.base import PuzzleTemplate
from practiceflow.puzzles.registry import PUZZLE_REGISTRY
from practiceflow.services.difficulty_analyzer import difficulty_label_from_score
from practiceflow.services.rating import choose_target_difficulty
from practiceflow.services.telemetry import emit_event
from practiceflow.utils.arithmetic import clamp, has_decimal_token, round_half_up

logger = logging.getLogger("practiceflow.puzzle_generator")

FALLBACK_TEMPLATE = "word_story"
FALLBACK_BASE_DIFFICULTY = 1080

_BANNED_ALGEBRA = re.compile(
    r"\bn\b|n\^2|n²|n\(\s*n\s*[+\-]\s*1\s*\)",
    re.IGNORECASE,
)

_FAST_MATH_SHAPES = (
    re.compile(r"which fraction is (bigger|greater)", re.IGNORECASE),
    re.compile(r"\b\d+\s*/\s*\d+\s*(or|vs)\s*\d+\s*/\s*\d+", re.IGNORECASE),
    re.compile(r"\bx\s*[+\-*/÷×]\s*\d+\s*=\s*-?\d+", re.IGNORECASE),
    re.compile(r"^\s*(solve|what is)\s*:?\s*\d+\s*[+\-×x÷/*]\s*\d+", re.IGNORECASE),
    re.compile(r"^\s*\d+\s*[+\-×x÷/*]\s*\d+\s*=\s*\?\s*$", re.IGNORECASE),
)


def pick_puzzle_template(
    difficulty: float,
    rng: Optional[random.Random] = None,
    *,
    config: Optional[EngineConfig] = None,
) -> PuzzleTemplate:
    """Weighted draw among templates eligible within ±tolerance (all templates when none are)."""
    rng = get_rng(rng)
    tolerance = get_engine_config(config).generation.template_tolerance
    templates = list(PUZZLE_REGISTRY.values())
    pool = [t for t in templates if t.eligible(difficulty, tolerance)] or templates
    return rng.choices(pool, weights=[t.weight for t in pool], k=1)[0]


def is_fast_math_like(item: PuzzleItem) -> bool:
    prompt = item.core_prompt.strip()
    return any(pattern.search(prompt) for pattern in _FAST_MATH_SHAPES)


def is_kid_safe_puzzle(item: PuzzleItem) -> bool:
    fields = [item.title, item.core_prompt, item.core_answer, *item.hint_ladder, *item.solution_steps]
    if any(_BANNED_ALGEBRA.search(text) for text in fields):
        return False
    if item.template == "spatial_area" and any(has_decimal_token(text) for text in fields):
        return False
    if is_fast_math_like(item):
        return False
    return len(item.hint_ladder) == 3 and len(item.solution_steps) == 3


def _materialize(template: PuzzleTemplate, built: dict, difficulty: int) -> PuzzleItem:
    signature = built.pop("signature")
    built.pop("difficulty_hint", None)
    return PuzzleItem(
        id=f"{template.key}-{signature}",
        template=template.key,
        difficulty=difficulty,
        label=difficulty_label_from_score(difficulty),
        puzzle_type=built.pop("puzzle_type", template.puzzle_type),
        **built,
    )


def build_puzzle_candidate(
    target_difficulty: float,
    rng: Optional[random.Random] = None,
    *,
    config: Optional[EngineConfig] = None,
) -> PuzzleItem:
    rng = get_rng(rng)
    gen = get_engine_config(config).generation
    low, high = gen.puzzle_min_difficulty, gen.max_difficulty

    for _ in range(gen.puzzle_attempts):
        jitter = rng.randint(-gen.puzzle_target_jitter, gen.puzzle_target_jitter)
        target = int(clamp(round_half_up(target_difficulty + jitter), low, high))
        template = pick_puzzle_template(target, rng, config=config)
        built = template.build(target, rng)
        hint = built.get("difficulty_hint", 0)
        centered = round_half_up((target + template.base_difficulty) / 2 + hint
                                 + rng.randint(-gen.puzzle_difficulty_jitter, gen.puzzle_difficulty_jitter))
        try:
            candidate = _materialize(template, built, int(clamp(centered, low, high)))
        except ValidationError as e:
            logger.debug("Rejected %s puzzle: %s", template.key, e.errors()[0]["msg"])
            continue
        if is_kid_safe_puzzle(candidate):
            return candidate

    logger.info("build_puzzle_candidate exhausted %d attempts; using word story", gen.puzzle_attempts)
    fallback = PUZZLE_REGISTRY[FALLBACK_TEMPLATE]
    built = fallback.build(FALLBACK_BASE_DIFFICULTY, rng)
    difficulty = int(clamp(FALLBACK_BASE_DIFFICULTY + built.get("difficulty_hint", 0), low, high))
    return _materialize(fallback, built, difficulty)


def repetition_penalty(item: PuzzleItem, used_ids: Iterable[str], *, config: Optional[EngineConfig] = None) -> float:
    sel = get_engine_config(config).puzzle_selection
    prefix = f"{item.template}-"
    repeats = sum(1 for used in used_ids if used.startswith(prefix))
    return min(repeats * sel.repeat_penalty, sel.repeat_penalty_cap)


def select_next_puzzle_item(
    rating: float,
    used_ids: Iterable[str],
    prev_difficulty: Optional[int] = None,
    *,
    profile: str = "default",
    rng: Optional[random.Random] = None,
    config: Optional[EngineConfig] = None,
) -> PuzzleItem:
    rng = get_rng(rng)
    config = get_engine_config(config)
    sel = config.puzzle_selection
    used = set(used_ids)

    target = choose_target_difficulty(rating, 0, profile, rng=rng, config=config)
    candidates = [build_puzzle_candidate(target, rng, config=config) for _ in range(sel.candidate_count)]
    pool = [item for item in candidates if item.id not in used] or candidates

    def score(item: PuzzleItem) -> float:
        jump = 0.0
        if prev_difficulty is not None:
            jump = max(0, abs(item.difficulty - prev_difficulty) - sel.jump_penalty.free_window) \
                * sel.jump_penalty.multiplier
        return abs(item.difficulty - target) + jump + repetition_penalty(item, used, config=config)

    scored = sorted((score(item), index, item) for index, item in enumerate(pool))
    chosen = rng.choice(scored[: min(sel.top_pool_size, len(scored))])[2]
    emit_event("puzzle_selected", operation="select_next_puzzle_item", template=chosen.template,
               difficulty=chosen.difficulty, target=target, ok=True)
    return chosen


def generate_puzzle_choices(
    rating: float,
    used_ids: Iterable[str],
    count: int = 2,
    *,
    profile: str = "default",
    rng: Optional[random.Random] = None,
    config: Optional[EngineConfig] = None,
) -> list[PuzzleItem]:
    """Pick `count` distinct puzzles, chaining each pick's difficulty as the next previous."""
    rng = get_rng(rng)
    seen = set(used_ids)
    choices: list[PuzzleItem] = []
    while len(choices) < count:
        prev = choices[-1].difficulty if choices else None
        nxt = select_next_puzzle_item(rating, seen, prev, profile=profile, rng=rng, config=config)
        seen.add(nxt.id)
        choices.append(nxt)
    return choices
