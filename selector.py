from __future__ import annotations

import enum
import logging
import random
from dataclasses import dataclass
from typing import Sequence

from corpus import UsageCategory, WordRecord


class Deprecation(enum.Enum):
    IN_USE = "in-use"
    DEPRECATED = "deprecated"
    BOTH = "both"

    def admits(self, deprecated: bool) -> bool:
        if self is Deprecation.BOTH:
            return True
        return deprecated == (self is Deprecation.DEPRECATED)


@dataclass(frozen=True)
class SelectionCriteria:
    """Which corpus words a session samples.

    Every default excludes everything: a tier flag must be set, a
    deprecation choice made and a positive sample size given before any
    word is selected. An ``allow_missing_*`` flag lets records without
    that optional field through; left False, the field is required.
    """
    core: bool = False
    common: bool = False
    uncommon: bool = False
    obscure: bool = False
    sandbox: bool = False
    deprecation: Deprecation | None = None
    allow_missing_ku: bool = False
    allow_missing_pu: bool = False
    allow_missing_commentary: bool = False
    allow_missing_definitions: bool = False
    sample_size: int = 0

    def allows_tier(self, category: UsageCategory) -> bool:
        return getattr(self, category.label)

    def matches(self, record: WordRecord) -> bool:
        if not self.allows_tier(record.usage_category):
            return False
        if self.deprecation is None or not self.deprecation.admits(record.deprecated):
            return False
        if not self.allow_missing_ku and record.ku_data is None:
            return False
        if not self.allow_missing_pu and record.pu_verbatim is None:
            return False
        if not self.allow_missing_commentary and record.commentary is None:
            return False
        if not self.allow_missing_definitions and record.definitions is None:
            return False
        return True


def select(
    criteria: SelectionCriteria,
    corpus: Sequence[WordRecord],
    rng: random.Random | None = None,
) -> list[WordRecord]:
    """Sample the corpus: filter, keep the first ``sample_size`` matches, shuffle them."""
    matches = [record for record in corpus if criteria.matches(record)]
    picked = matches[:max(criteria.sample_size, 0)]
    (rng or random).shuffle(picked)
    logging.debug("Selected %d of %d matching words", len(picked), len(matches))
    return picked
