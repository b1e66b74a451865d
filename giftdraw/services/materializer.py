from __future__ import annotations

from typing import List, Mapping, Sequence

from giftdraw.domain import Assignment, Participant


def materialize(pairing: Mapping[str, str], participants: Sequence[Participant]) -> List[Assignment]:
    """Expand an id-level pairing into assignments.

    Assignments follow the order of ``participants`` (by giver), never the
    order the solver happened to visit givers in.
    """
    by_id = {participant.id: participant for participant in participants}
    if set(pairing) != set(by_id):
        raise ValueError("Pairing does not cover every participant exactly once as giver.")
    return [
        Assignment(giver=participant, receiver=by_id[pairing[participant.id]])
        for participant in participants
    ]
