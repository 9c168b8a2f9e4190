"""Depth-first include/skip enumeration with branch-and-bound pruning.

This module provides a reusable search engine used by the timetable planner:
- exhaustive generation (every item must be placed)
- size-targeted generation (exactly `target_size` items placed, others skipped)

The engine is problem-agnostic: it only knows about items (a key plus an ordered
list of options) and an `accept` predicate that decides whether a complete
candidate is kept.

Search order
------------
Items are visited in the given order. For each item the include branches are
tried first, one per option in the given order, followed by the skip branch
(when skipping is enabled). The first solutions found win when the output limit
is reached, so identical inputs always give identical outputs.

Pruning
-------
`required` keys must appear in every accepted candidate. A branch is abandoned
as soon as the number of required keys still missing exceeds the number of
items that can still be placed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Generic, Iterable, List, Optional, Protocol, Sequence, Tuple, TypeVar


TOption = TypeVar("TOption")


class AcceptFn(Protocol[TOption]):
    def __call__(self, candidate: Dict[str, TOption]) -> bool:  # pragma: no cover
        """Return True if the complete candidate is a solution."""


@dataclass(frozen=True)
class SearchConfig:
    """Configuration for one enumeration run.

    Attributes:
        limit: Stop once this many solutions were collected (None = no cap).
        target_size: If set, a candidate is complete when exactly this many
            items are placed. If None, it is complete once every item was visited.
        allow_skip: Whether an item may be left out of a candidate.
    """

    limit: Optional[int] = 50
    target_size: Optional[int] = None
    allow_skip: bool = True


@dataclass
class SearchResult(Generic[TOption]):
    solutions: List[Dict[str, TOption]] = field(default_factory=list)
    nodes_visited: int = 0
    candidates_checked: int = 0
    hit_limit: bool = False


def enumerate_assignments(
    items: Sequence[Tuple[str, Sequence[TOption]]],
    accept: AcceptFn[TOption],
    *,
    required: Iterable[str] = (),
    config: SearchConfig = SearchConfig(),
) -> SearchResult[TOption]:
    """Enumerate candidates `{key: option}` in deterministic depth-first order.

    Contract:
    - `accept` is only called on complete candidates
    - accepted candidates are copied; the working candidate is restored on
      every branch exit

    Returns:
        SearchResult with solutions (in discovery order) and counters.
    """

    n = len(items)
    required_keys = frozenset(required)
    target = config.target_size
    limit = config.limit
    result: SearchResult[TOption] = SearchResult()

    if limit is not None and limit <= 0:
        result.hit_limit = True
        return result
    if target is not None and (target <= 0 or target > n):
        return result

    candidate: Dict[str, TOption] = {}

    def check_leaf() -> bool:
        result.candidates_checked += 1
        if accept(candidate):
            result.solutions.append(dict(candidate))
        if limit is not None and len(result.solutions) >= limit:
            result.hit_limit = True
            return True
        return False

    def backtrack(index: int, missing_required: int) -> bool:
        """Return True when the search must stop (output limit reached)."""

        result.nodes_visited += 1

        remaining_items = n - index
        if target is None:
            capacity = remaining_items
        else:
            capacity = min(remaining_items, target - len(candidate))
            # not enough items left to ever reach the target size
            if len(candidate) + remaining_items < target:
                return False
        if missing_required > capacity:
            return False

        if target is not None and len(candidate) == target:
            return check_leaf()
        if index == n:
            if target is not None:
                return False
            return check_leaf()

        key, options = items[index]
        still_missing = missing_required - (1 if key in required_keys else 0)
        for option in options:
            candidate[key] = option
            stop = backtrack(index + 1, still_missing)
            del candidate[key]
            if stop:
                return True

        if config.allow_skip:
            return backtrack(index + 1, missing_required)
        return False

    missing = sum(1 for key, _ in items if key in required_keys)
    backtrack(0, missing)
    return result
