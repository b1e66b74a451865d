from giftdraw.services.assignment import generate_assignment
from giftdraw.services.errors import (
    AssignmentError,
    DispatchError,
    PreconditionViolation,
    SearchBudgetExceeded,
)
from giftdraw.services.solver import FixedOrdering, RandomOrdering

__all__ = [
    "AssignmentError",
    "DispatchError",
    "FixedOrdering",
    "PreconditionViolation",
    "RandomOrdering",
    "SearchBudgetExceeded",
    "generate_assignment",
]
