"""
Rule evaluation: which range rules a score falls into.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence

from eligibility.domain.models import RangeRule


def matched_rules(score: float, rules: Iterable[RangeRule]) -> List[RangeRule]:
    """
    Return every rule whose [min_score, max_score) interval contains `score`,
    in configured order.

    Overlapping or gapped rule sets are accepted as-is and may yield zero or
    several matches.
    """
    return [rule for rule in rules if rule.matches(score)]


def sort_key(rules: Sequence[RangeRule]) -> int:
    """Highest priority among `rules`, or 0 when nothing matched."""
    return max((rule.priority for rule in rules), default=0)


__all__ = ["matched_rules", "sort_key"]
