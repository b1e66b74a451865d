from giftdraw.domain.models import Assignment, Exclusion, Infeasible, Participant

__all__ = [
    "Assignment",
    "Exclusion",
    "Infeasible",
    "Participant",
]
