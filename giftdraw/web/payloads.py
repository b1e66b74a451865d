from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple

from giftdraw.domain import Exclusion, Participant
from giftdraw.services.notifications import NotificationPayload


class PayloadError(ValueError):
    pass


def _require_list(body: Mapping[str, Any], key: str, required: bool = True) -> List[Any]:
    value = body.get(key)
    if value is None and not required:
        return []
    if not isinstance(value, list):
        raise PayloadError(f"'{key}' must be a list.")
    return value


def _require_text(item: Any, key: str, owner: str) -> str:
    if not isinstance(item, Mapping):
        raise PayloadError(f"Each {owner} must be an object.")
    value = item.get(key)
    if value is None or isinstance(value, (dict, list, bool)):
        raise PayloadError(f"Each {owner} needs a '{key}'.")
    text = str(value).strip()
    if not text:
        raise PayloadError(f"Each {owner} needs a non-empty '{key}'.")
    return text


def parse_draw_request(body: Any) -> Tuple[List[Participant], List[Exclusion], Optional[int]]:
    if not isinstance(body, Mapping):
        raise PayloadError("Request body must be a JSON object.")

    participants = [
        Participant(
            id=_require_text(item, "id", "participant"),
            name=_require_text(item, "name", "participant"),
            email=_require_text(item, "email", "participant"),
        )
        for item in _require_list(body, "participants")
    ]
    exclusions = [
        Exclusion(
            id=_require_text(item, "id", "exclusion"),
            from_id=_require_text(item, "fromId", "exclusion"),
            to_id=_require_text(item, "toId", "exclusion"),
        )
        for item in _require_list(body, "exclusions", required=False)
    ]

    seed = body.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise PayloadError("'seed' must be an integer.")
    return participants, exclusions, seed


def parse_notify_request(body: Any) -> Tuple[List[NotificationPayload], Optional[str], Optional[str]]:
    if not isinstance(body, Mapping):
        raise PayloadError("Request body must be a JSON object.")

    items = _require_list(body, "assignments")
    if not items:
        raise PayloadError("'assignments' must not be empty.")
    try:
        payloads = [NotificationPayload.from_dict(item) for item in items]
    except ValueError as exc:
        raise PayloadError(str(exc)) from exc

    event_name = body.get("eventName")
    deadline = body.get("deadline")
    for key, value in (("eventName", event_name), ("deadline", deadline)):
        if value is not None and not isinstance(value, str):
            raise PayloadError(f"'{key}' must be a string.")
    return payloads, event_name or None, deadline or None
