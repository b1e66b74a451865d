from __future__ import annotations

import random
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Sequence, Set

from loguru import logger

from giftdraw.services.errors import SearchBudgetExceeded

_EXHAUSTED = object()


class Ordering(Protocol):
    def arrange(self, items: Iterable[str]) -> List[str]:
        ...


class RandomOrdering:
    """Uniformly shuffles givers and candidates with its own ``random.Random``."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random(seed)

    def arrange(self, items: Iterable[str]) -> List[str]:
        arranged = list(items)
        self.rng.shuffle(arranged)
        return arranged


class FixedOrdering:
    """Keeps the incoming order, so the first solution in list order wins."""

    def arrange(self, items: Iterable[str]) -> List[str]:
        return list(items)


def find_obstruction(giver_ids: Sequence[str], candidates: Mapping[str, Set[str]]) -> Optional[str]:
    """Return a reason when the candidate graph is trivially unsatisfiable."""
    if len(giver_ids) < 2:
        return "At least 2 participants are required."

    stuck = [giver for giver in giver_ids if not candidates.get(giver)]
    if stuck:
        return "No valid receiver left for: " + ", ".join(map(str, stuck))

    reachable: Set[str] = set()
    for giver in giver_ids:
        reachable |= candidates[giver]
    unreachable = [receiver for receiver in giver_ids if receiver not in reachable]
    if unreachable:
        return "Nobody is allowed to give to: " + ", ".join(map(str, unreachable))
    return None


def solve(
    giver_ids: Sequence[str],
    candidates: Mapping[str, Set[str]],
    ordering: Optional[Ordering] = None,
    max_steps: Optional[int] = None,
) -> Optional[Dict[str, str]]:
    """Find one complete giver -> receiver pairing, or ``None`` if none exists.

    The search is exhaustive depth-first backtracking over an explicit stack
    of candidate iterators, one per assigned giver. ``ordering`` only decides
    the visiting order of givers and of each giver's remaining candidates, so
    a solution is found whenever one exists, whatever the ordering.

    Raises ``SearchBudgetExceeded`` when ``max_steps`` tentative commits
    were made without settling the search.
    """
    if len(giver_ids) < 2:
        return None

    ordering = ordering or RandomOrdering()
    position = {giver: index for index, giver in enumerate(giver_ids)}
    givers = ordering.arrange(giver_ids)
    pairing: Dict[str, str] = {}
    used: Set[str] = set()
    steps = 0

    def options(giver: str) -> Iterator[str]:
        # Sorted by list position first so a seeded ordering never depends on set iteration order.
        available = sorted(candidates[giver] - used, key=position.__getitem__)
        return iter(ordering.arrange(available))

    stack: List[Iterator[str]] = [options(givers[0])]
    while stack:
        giver = givers[len(stack) - 1]
        if giver in pairing:
            used.discard(pairing.pop(giver))

        receiver = next(stack[-1], _EXHAUSTED)
        if receiver is _EXHAUSTED:
            stack.pop()
            continue

        steps += 1
        if max_steps is not None and steps > max_steps:
            raise SearchBudgetExceeded(f"Search gave up after {max_steps} steps.")

        pairing[giver] = receiver
        used.add(receiver)
        if len(pairing) == len(givers):
            logger.bind(steps=steps).debug("Pairing found")
            return pairing
        stack.append(options(givers[len(stack)]))

    logger.bind(steps=steps).debug("Search space exhausted")
    return None
