"""Read-only weighted puzzle registry: maps template key to builder instance."""

from .constraint import AirlockQuestionTemplate, HeavyRockTemplate, SwitchMissionTemplate
from .counting import HighFivesTemplate
from .logic import AlwaysSometimesNeverTemplate, DockDeductionTemplate, WhoIsLyingTemplate
from .pattern import NextInSequenceTemplate, OddOneOutTemplate, OrbitSymbolsTemplate
from .spatial import BorderTilesTemplate, ShapeSwapTemplate
from .strategy import NimTemplate
from .word import WordStoryTemplate

PUZZLE_REGISTRY = {
    "word_story": WordStoryTemplate(),
    "logic_asn": AlwaysSometimesNeverTemplate(),
    "logic_lying": WhoIsLyingTemplate(),
    "logic_deduction": DockDeductionTemplate(),
    "pattern_next": NextInSequenceTemplate(),
    "pattern_odd": OddOneOutTemplate(),
    "pattern_symbols": OrbitSymbolsTemplate(),
    "spatial_area": ShapeSwapTemplate(),
    "spatial_border": BorderTilesTemplate(),
    "counting_high_fives": HighFivesTemplate(),
    "strategy_nim": NimTemplate(),
    "constraint_switch": SwitchMissionTemplate(),
    "constraint_airlock": AirlockQuestionTemplate(),
    "constraint_rocks": HeavyRockTemplate(),
}
