import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import random

import pytest

from practiceflow.core.config import get_settings


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_rng():
    """Factory for independent seeded generators inside one test."""
    return lambda seed: random.Random(seed)


@pytest.fixture
def audit_on(monkeypatch):
    monkeypatch.setenv("PRACTICEFLOW_AUDIT_SELECTIONS", "true")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def debug_flow_on(monkeypatch):
    monkeypatch.setenv("PRACTICEFLOW_DEBUG_FLOW", "true")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
