from __future__ import annotations

from typing import Dict, Iterable, Sequence, Set, Tuple

from giftdraw.domain import Exclusion, Participant


def exclusion_pairs(exclusions: Iterable[Exclusion]) -> Set[Tuple[str, str]]:
    return {exclusion.pair for exclusion in exclusions}


def build_candidates(
    participants: Sequence[Participant],
    exclusions: Iterable[Exclusion] = (),
) -> Dict[str, Set[str]]:
    """Map every giver id to the receiver ids it may legally draw.

    A receiver is legal when it is not the giver itself and the
    ``(giver, receiver)`` pair is not excluded. Exclusion endpoints are
    expected to reference ids present in ``participants``.
    """
    forbidden = exclusion_pairs(exclusions)
    participant_ids = [participant.id for participant in participants]
    return {
        giver: {
            receiver
            for receiver in participant_ids
            if receiver != giver and (giver, receiver) not in forbidden
        }
        for giver in participant_ids
    }
