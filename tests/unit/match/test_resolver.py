"""Unit tests for AssignmentResolver conflict repair."""

import logging

import pytest

from lnp.errors import ConvergenceLimitError, InsufficientPoolError, ResolutionExhaustedError
from lnp.match.resolver import AssignmentResolver


def _pairs(assignment):
    return [(c.slnb_id, c.elnd_id) for c in assignment]


def test_no_conflict_keeps_greedy_seed(make_candidate_stub):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.1), c(1, 11, 0.2)],
        2: [c(2, 11, 0.0), c(2, 10, 0.3)],
    }
    resolver = AssignmentResolver(ranked)
    assert _pairs(resolver.resolve()) == [(1, 10), (2, 11)]
    assert resolver.iterations == 0


def test_two_member_band_picks_cheapest_trial(make_candidate_stub):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.5), c(1, 11, 1.0), c(1, 12, 2.0)],
        2: [c(2, 10, 0.5), c(2, 12, 0.7), c(2, 11, 1.5)],
    }
    resolver = AssignmentResolver(ranked)
    # 1 keeps (0.5 + 0.7 = 1.2) beats 2 keeps (0.5 + 1.0 = 1.5)
    assert _pairs(resolver.resolve()) == [(1, 10), (2, 12)]
    assert resolver.iterations == 1


def test_tie_goes_to_lowest_band_index(make_candidate_stub):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.5), c(1, 11, 1.0)],
        2: [c(2, 10, 0.5), c(2, 11, 1.0)],
    }
    assert _pairs(AssignmentResolver(ranked).resolve()) == [(1, 10), (2, 11)]


def test_infeasible_trial_is_skipped(make_candidate_stub):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.0)],
        2: [c(2, 10, 0.0), c(2, 11, 3.0)],
    }
    # Only "1 keeps" is feasible even though it costs more
    assert _pairs(AssignmentResolver(ranked).resolve()) == [(1, 10), (2, 11)]


def test_three_member_band_resolved_in_one_pass(make_candidate_stub):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.0), c(1, 11, 1.0), c(1, 12, 5.0)],
        2: [c(2, 10, 0.0), c(2, 11, 0.5), c(2, 12, 2.0)],
        3: [c(3, 10, 0.0), c(3, 12, 0.2), c(3, 11, 3.0)],
    }
    resolver = AssignmentResolver(ranked)
    assert _pairs(resolver.resolve()) == [(1, 10), (2, 11), (3, 12)]
    assert resolver.iterations == 1


def test_repair_can_cascade_into_new_band(make_candidate_stub):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.0), c(1, 11, 0.1), c(1, 12, 1.0)],
        2: [c(2, 11, 0.0), c(2, 12, 0.5), c(2, 10, 2.0)],
        3: [c(3, 10, 0.0), c(3, 11, 0.2), c(3, 12, 0.3)],
    }
    resolver = AssignmentResolver(ranked)
    # Pass 1: band on 10 -> 3 keeps, 1 moves to 11 (0.1 < 0.2)
    # Pass 2: band on 11 -> 1 keeps, 2 moves to 12 (0.6 < 1.0)
    assert _pairs(resolver.resolve()) == [(1, 11), (2, 12), (3, 10)]
    assert resolver.iterations == 2


def test_exhausted_band_raises(make_candidate_stub):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.5)],
        2: [c(2, 10, 0.5)],
    }
    with pytest.raises(ResolutionExhaustedError) as exc_info:
        AssignmentResolver(ranked).resolve()
    assert exc_info.value.elnd_id == 10
    assert exc_info.value.slnb_ids == (1, 2)


def test_iteration_budget_exceeded_carries_last_state(make_candidate_stub):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.0), c(1, 11, 0.1), c(1, 12, 1.0)],
        2: [c(2, 11, 0.0), c(2, 12, 0.5), c(2, 10, 2.0)],
        3: [c(3, 10, 0.0), c(3, 11, 0.2), c(3, 12, 0.3)],
    }
    with pytest.raises(ConvergenceLimitError) as exc_info:
        AssignmentResolver(ranked, max_iterations=1).resolve()
    err = exc_info.value
    assert err.iterations == 1
    assert _pairs(err.last_assignment) == [(1, 11), (2, 11), (3, 10)]


def test_zero_budget_with_conflicts_raises_immediately(make_candidate_stub):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.5), c(1, 11, 1.0)],
        2: [c(2, 10, 0.5), c(2, 11, 1.0)],
    }
    with pytest.raises(ConvergenceLimitError) as exc_info:
        AssignmentResolver(ranked, max_iterations=0).resolve()
    assert exc_info.value.iterations == 0
    assert _pairs(exc_info.value.last_assignment) == [(1, 10), (2, 10)]


def test_zero_budget_without_conflicts_succeeds(make_candidate_stub):
    c = make_candidate_stub
    ranked = {1: [c(1, 10, 0.5)], 2: [c(2, 11, 0.5)]}
    assert _pairs(AssignmentResolver(ranked, max_iterations=0).resolve()) == [(1, 10), (2, 11)]


def test_empty_ranked_list_is_insufficient_pool(make_candidate_stub):
    with pytest.raises(InsufficientPoolError):
        AssignmentResolver({1: []})


def test_conflicts_and_next_alternative(make_candidate_stub):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.5), c(1, 11, 1.0)],
        2: [c(2, 10, 0.5), c(2, 11, 1.0)],
        3: [c(3, 12, 0.0)],
    }
    resolver = AssignmentResolver(ranked)
    assert [x.slnb_id for x in resolver.conflicts()] == [1, 2]
    first = resolver.snapshot()[0]
    assert resolver.next_alternative(first).elnd_id == 11
    assert resolver.next_alternative(ranked[1][1]) is None


def test_step_reports_whether_work_was_done(make_candidate_stub):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.5), c(1, 11, 1.0)],
        2: [c(2, 10, 0.5), c(2, 11, 1.0)],
    }
    resolver = AssignmentResolver(ranked)
    assert resolver.step() is True
    assert resolver.step() is False
    assert resolver.iterations == 1


def test_step_respects_iteration_budget(make_candidate_stub):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.0), c(1, 11, 0.1), c(1, 12, 1.0)],
        2: [c(2, 11, 0.0), c(2, 12, 0.5), c(2, 10, 2.0)],
        3: [c(3, 10, 0.0), c(3, 11, 0.2), c(3, 12, 0.3)],
    }
    resolver = AssignmentResolver(ranked, max_iterations=1)
    assert resolver.step() is True
    with pytest.raises(ConvergenceLimitError) as exc_info:
        resolver.step()
    assert exc_info.value.iterations == 1
    assert resolver.iterations == 1


def test_progress_logged_every_interval(make_candidate_stub, caplog):
    c = make_candidate_stub
    ranked = {
        1: [c(1, 10, 0.0), c(1, 11, 0.1), c(1, 12, 1.0)],
        2: [c(2, 11, 0.0), c(2, 12, 0.5), c(2, 10, 2.0)],
        3: [c(3, 10, 0.0), c(3, 11, 0.2), c(3, 12, 0.3)],
    }
    caplog.set_level(logging.INFO, logger="lnp.utils.logging_helpers")
    resolver = AssignmentResolver(ranked, progress_interval=1)
    resolver.resolve()
    assert any("passes processed" in rec.getMessage() for rec in caplog.records)
