"""Pytest fixtures for wordtyper tests."""

import random
from pathlib import Path

import pytest

from corpus import UsageCategory, WordRecord


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


def make_word(word, category=UsageCategory.CORE, deprecated=False, **optional) -> WordRecord:
    defaults = dict(
        ku_data={word: 100},
        pu_verbatim={"en": word.upper()},
        commentary=f"about {word}",
        definitions=f"meaning of {word}",
    )
    defaults.update(optional)
    return WordRecord(id=word, usage_category=category, word=word, deprecated=deprecated, **defaults)


@pytest.fixture
def project_root() -> Path:
    return Path(__file__).parent.parent


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def corpus() -> tuple:
    """Ten words spread over every tier, with gaps in the optional fields."""
    return (
        make_word("toki"),
        make_word("pona"),
        make_word("jan", ku_data=None),
        make_word("moku", commentary=None),
        make_word("kin", UsageCategory.COMMON),
        make_word("namako", UsageCategory.COMMON, pu_verbatim=None),
        make_word("tonsi", UsageCategory.UNCOMMON),
        make_word("pake", UsageCategory.OBSCURE, deprecated=True),
        make_word("apeja", UsageCategory.OBSCURE, definitions=None),
        make_word("kapesi", UsageCategory.SANDBOX, deprecated=True),
    )
