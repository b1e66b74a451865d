import itertools

import pytest

from giftdraw.domain import Infeasible
from giftdraw.services import FixedOrdering, PreconditionViolation, generate_assignment

from factories import make_exclusions, make_participants


def assert_valid(assignments, participants, exclusions=()):
    ids = [p.id for p in participants]
    forbidden = {e.pair for e in exclusions}
    assert sorted(a.giver_id for a in assignments) == sorted(ids)
    assert sorted(a.receiver_id for a in assignments) == sorted(ids)
    assert all(a.giver_id != a.receiver_id for a in assignments)
    assert not any((a.giver_id, a.receiver_id) in forbidden for a in assignments)


def has_solution(participants, exclusions):
    ids = [p.id for p in participants]
    forbidden = {e.pair for e in exclusions}
    return any(
        all(giver != receiver and (giver, receiver) not in forbidden for giver, receiver in zip(ids, perm))
        for perm in itertools.permutations(ids)
    )


def test_assignment_basic_bijection():
    participants = make_participants("A", "B", "C", "D")
    assignments = generate_assignment(participants, seed=42)
    assert_valid(assignments, participants)


def test_assignment_two_people():
    participants = make_participants("A", "B")
    assignments = generate_assignment(participants, seed=1)
    pairs = {(a.giver_id, a.receiver_id) for a in assignments}
    assert pairs == {("A", "B"), ("B", "A")}


@pytest.mark.parametrize("size", range(2, 9))
def test_assignment_always_found_without_exclusions(size):
    participants = make_participants(*[f"P{i}" for i in range(size)])
    for seed in range(25):
        assert_valid(generate_assignment(participants, seed=seed), participants)


def test_assignment_deterministic_seed():
    participants = make_participants("A", "B", "C", "D", "E")
    exclusions = make_exclusions(("A", "B"), ("C", "D"))
    first = generate_assignment(participants, exclusions, seed=123)
    second = generate_assignment(participants, exclusions, seed=123)
    assert first == second


def test_assignment_seeds_vary_the_draw():
    participants = make_participants("A", "B", "C", "D", "E", "F")
    draws = {
        tuple(a.receiver_id for a in generate_assignment(participants, seed=seed))
        for seed in range(50)
    }
    assert len(draws) > 1


def test_assignment_scenario_with_single_exclusion():
    participants = make_participants("A", "B", "C", "D")
    exclusions = make_exclusions(("A", "B"))
    for seed in range(100):
        assignments = generate_assignment(participants, exclusions, seed=seed)
        assert_valid(assignments, participants, exclusions)
        assert dict((a.giver_id, a.receiver_id) for a in assignments)["A"] != "B"


def test_assignment_ordered_like_participants():
    participants = make_participants("D", "A", "C", "B")
    assignments = generate_assignment(participants, seed=7)
    assert [a.giver_id for a in assignments] == ["D", "A", "C", "B"]


def test_assignment_fixed_ordering_is_exact():
    participants = make_participants("A", "B", "C")
    assignments = generate_assignment(participants, ordering=FixedOrdering())
    assert [(a.giver_id, a.receiver_id) for a in assignments] == [("A", "B"), ("B", "C"), ("C", "A")]


def test_assignment_two_people_blocked_is_infeasible():
    participants = make_participants("A", "B")
    outcome = generate_assignment(participants, make_exclusions(("A", "B")), seed=7)
    assert isinstance(outcome, Infeasible)
    assert not outcome


def test_assignment_infeasible_after_search():
    # Every giver keeps a candidate and every receiver stays reachable, yet no draw exists.
    participants = make_participants("A", "B", "C")
    exclusions = make_exclusions(("A", "B"), ("B", "A"))
    outcome = generate_assignment(participants, exclusions, seed=3)
    assert isinstance(outcome, Infeasible)


def test_assignment_infeasible_when_nobody_can_give_to_someone():
    participants = make_participants("A", "B", "C")
    exclusions = make_exclusions(("B", "A"), ("C", "A"))
    outcome = generate_assignment(participants, exclusions)
    assert isinstance(outcome, Infeasible)
    assert "A" in outcome.reason


def test_assignment_duplicate_exclusions_are_harmless():
    participants = make_participants("A", "B", "C")
    exclusions = make_exclusions(("A", "B"), ("A", "B"), ("A", "B"))
    assignments = generate_assignment(participants, exclusions, seed=11)
    assert_valid(assignments, participants, exclusions)


def test_assignment_never_misses_an_existing_solution():
    participants = make_participants("A", "B", "C", "D", "E")
    exclusions = make_exclusions(("A", "B"), ("B", "A"), ("C", "D"), ("D", "C"), ("E", "A"), ("A", "C"))
    assert has_solution(participants, exclusions)
    for seed in range(1000):
        outcome = generate_assignment(participants, exclusions, seed=seed)
        assert not isinstance(outcome, Infeasible)
        assert_valid(outcome, participants, exclusions)


def test_assignment_fails_for_too_few_participants():
    with pytest.raises(PreconditionViolation):
        generate_assignment(make_participants("A"))


def test_assignment_rejects_duplicate_ids():
    with pytest.raises(PreconditionViolation):
        generate_assignment(make_participants("A", "B", "A"))


def test_assignment_rejects_unknown_exclusion_endpoints():
    participants = make_participants("A", "B", "C")
    with pytest.raises(PreconditionViolation):
        generate_assignment(participants, make_exclusions(("A", "Z")))
