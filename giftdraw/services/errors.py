from __future__ import annotations


class AssignmentError(RuntimeError):
    pass


class PreconditionViolation(AssignmentError):
    pass


class SearchBudgetExceeded(AssignmentError):
    pass


class DispatchError(RuntimeError):
    pass
