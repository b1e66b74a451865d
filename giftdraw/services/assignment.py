from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional, Sequence, Union

from loguru import logger

from giftdraw.domain import Assignment, Exclusion, Infeasible, Participant
from giftdraw.services.candidates import build_candidates
from giftdraw.services.errors import PreconditionViolation
from giftdraw.services.materializer import materialize
from giftdraw.services.solver import Ordering, RandomOrdering, find_obstruction, solve

DrawOutcome = Union[List[Assignment], Infeasible]


def _check_preconditions(participants: Sequence[Participant], exclusions: Sequence[Exclusion]) -> None:
    if len(participants) < 2:
        raise PreconditionViolation("At least 2 participants are required.")

    counts = Counter(participant.id for participant in participants)
    duplicates = sorted(str(participant_id) for participant_id, count in counts.items() if count > 1)
    if duplicates:
        raise PreconditionViolation("Duplicate participant ids: " + ", ".join(duplicates))

    unknown = [
        exclusion
        for exclusion in exclusions
        if exclusion.from_id not in counts or exclusion.to_id not in counts
    ]
    if unknown:
        raise PreconditionViolation(
            "Exclusions reference unknown participants: "
            + ", ".join(str(exclusion.id) for exclusion in unknown)
        )


def generate_assignment(
    participants: Sequence[Participant],
    exclusions: Optional[Iterable[Exclusion]] = None,
    seed: Optional[int] = None,
    ordering: Optional[Ordering] = None,
    max_steps: Optional[int] = None,
) -> DrawOutcome:
    """Draw a complete gift-exchange assignment.

    Returns the assignments in participant list order, or ``Infeasible``
    when the exclusions leave no valid draw. Malformed input raises
    ``PreconditionViolation``. ``ordering`` overrides ``seed``.
    """
    participants = list(participants)
    exclusions = list(exclusions or [])
    _check_preconditions(participants, exclusions)

    log = logger.bind(participants=len(participants), exclusions=len(exclusions))
    giver_ids = [participant.id for participant in participants]
    candidates = build_candidates(participants, exclusions)

    reason = find_obstruction(giver_ids, candidates)
    if reason:
        log.info("Draw infeasible: {reason}", reason=reason)
        return Infeasible(reason)

    pairing = solve(giver_ids, candidates, ordering or RandomOrdering(seed), max_steps=max_steps)
    if pairing is None:
        log.info("Draw infeasible after exhaustive search")
        return Infeasible("No assignment satisfies the current exclusions.")

    log.info("Assignments generated")
    return materialize(pairing, participants)
