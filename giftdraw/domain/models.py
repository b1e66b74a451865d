from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Participant:
    id: str
    name: str
    email: str

    def __repr__(self) -> str:
        return f"<Participant(id={self.id}, name={self.name})>"


@dataclass(frozen=True)
class Exclusion:
    id: str
    from_id: str
    to_id: str

    @property
    def pair(self) -> tuple[str, str]:
        return (self.from_id, self.to_id)


@dataclass(frozen=True)
class Assignment:
    giver: Participant
    receiver: Participant

    @property
    def giver_id(self) -> str:
        return self.giver.id

    @property
    def receiver_id(self) -> str:
        return self.receiver.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "giver": {"id": self.giver.id, "name": self.giver.name, "email": self.giver.email},
            "receiver": {
                "id": self.receiver.id,
                "name": self.receiver.name,
                "email": self.receiver.email,
            },
        }


@dataclass(frozen=True)
class Infeasible:
    """No complete assignment exists for the given participants and exclusions."""

    reason: str

    def __bool__(self) -> bool:
        return False
