"""Read-only template registry: maps template key to builder instance.

Order matters: the first entry (add_sub) is the fallback when no template
range covers a difficulty.
"""

from .add_sub import AddSubTemplate
from .equations import OneStepEquationTemplate, TwoStepEquationTemplate
from .fraction_compare import FractionCompareTemplate
from .geometry import GeometryTemplate
from .lcm import LcmTemplate
from .mult_div import MultDivTemplate
from .order_ops import OrderOfOpsTemplate
from .percent import PercentTemplate
from .ratio import RatioTemplate

TEMPLATE_REGISTRY = {
    "add_sub": AddSubTemplate(),
    "mult_div": MultDivTemplate(),
    "fraction_compare": FractionCompareTemplate(),
    "order_ops": OrderOfOpsTemplate(),
    "equation_1": OneStepEquationTemplate(),
    "percent": PercentTemplate(),
    "ratio": RatioTemplate(),
    "geometry": GeometryTemplate(),
    "equation_2": TwoStepEquationTemplate(),
    "lcm": LcmTemplate(),
}


def get_template(key: str):
    """Look up a template by key. Unknown keys raise KeyError."""
    return TEMPLATE_REGISTRY[key]
