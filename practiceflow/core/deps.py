import logging
import random
from typing import Optional

from practiceflow.core.config import DEFAULT_ENGINE_CONFIG, EngineConfig, get_settings

logger = logging.getLogger("practiceflow.deps")


def get_rng(rng: Optional[random.Random] = None) -> random.Random:
    """Return the caller's RNG, or a fresh one for the outermost call.

    A fresh RNG is seeded from PRACTICEFLOW_RNG_SEED when it is set so a whole
    run can be replayed.
    """
    if rng is not None:
        return rng
    seed = get_settings().rng_seed
    if seed is not None:
        logger.debug("Creating seeded RNG (seed=%d)", seed)
        return random.Random(seed)
    return random.Random()


def get_engine_config(config: Optional[EngineConfig] = None) -> EngineConfig:
    return config if config is not None else DEFAULT_ENGINE_CONFIG
