from giftdraw.services.candidates import build_candidates

from factories import make_exclusions, make_participants


def test_candidates_exclude_self():
    candidates = build_candidates(make_participants("A", "B", "C"))
    assert candidates == {"A": {"B", "C"}, "B": {"A", "C"}, "C": {"A", "B"}}


def test_candidates_drop_excluded_targets_in_one_direction():
    participants = make_participants("A", "B", "C")
    candidates = build_candidates(participants, make_exclusions(("A", "B")))
    assert candidates["A"] == {"C"}
    assert candidates["B"] == {"A", "C"}


def test_candidates_ignore_duplicate_exclusions():
    participants = make_participants("A", "B", "C")
    once = build_candidates(participants, make_exclusions(("A", "B")))
    twice = build_candidates(participants, make_exclusions(("A", "B"), ("A", "B")))
    assert once == twice


def test_candidates_can_be_empty():
    participants = make_participants("A", "B")
    assert build_candidates(participants, make_exclusions(("A", "B")))["A"] == set()
