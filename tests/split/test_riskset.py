"""
Tests for risk-set accumulation.
"""

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from pysplitstats.split import (
    LEFT,
    RIGHT,
    accumulate_competing_risk_sets,
    accumulate_risk_sets,
)


def _brute_force(membership, time, event, event_time):
    """Direct definition: at risk at t_k means time >= t_k."""
    is_left = membership == LEFT
    parent_at_risk = np.array([(time >= t).sum() for t in event_time])
    left_at_risk = np.array([((time >= t) & is_left).sum() for t in event_time])
    parent_event = np.array([((time == t) & (event > 0)).sum() for t in event_time])
    left_event = np.array(
        [((time == t) & (event > 0) & is_left).sum() for t in event_time]
    )
    return parent_at_risk, left_at_risk, parent_event, left_event


class TestRiskSets:

    def test_four_subject_tables(self, four_subject_node):
        node = four_subject_node
        tables = accumulate_risk_sets(
            node["n"], node["membership"], node["time"], node["event"],
            node["event_time"],
        )
        assert_array_equal(tables.parent_at_risk, [4, 2, 1])
        assert_array_equal(tables.left_at_risk, [2, 1, 0])
        assert_array_equal(tables.parent_event, [1, 1, 1])
        assert_array_equal(tables.left_event, [1, 1, 0])
        assert_array_equal(tables.right_at_risk, [2, 1, 1])
        assert_array_equal(tables.right_event, [0, 0, 1])

    def test_matches_direct_definition(self, competing_node):
        node = competing_node
        tables = accumulate_risk_sets(
            node["n"], node["membership"], node["time"], node["event"],
            node["event_time"],
        )
        expected = _brute_force(
            node["membership"], node["time"], node["event"], node["event_time"],
        )
        assert_array_equal(tables.parent_at_risk, expected[0])
        assert_array_equal(tables.left_at_risk, expected[1])
        assert_array_equal(tables.parent_event, expected[2])
        assert_array_equal(tables.left_event, expected[3])

    def test_step_function_monotone(self, competing_node):
        node = competing_node
        tables = accumulate_risk_sets(
            node["n"], node["membership"], node["time"], node["event"],
            node["event_time"],
        )
        assert np.all(np.diff(tables.parent_at_risk) <= 0)
        assert np.all(tables.parent_at_risk >= tables.left_at_risk)
        assert np.all(tables.left_at_risk >= 0)

    def test_subjects_before_first_event_not_counted(self):
        membership = np.array([LEFT, RIGHT, LEFT])
        time = np.array([0.5, 2.0, 3.0])
        event = np.array([0.0, 1.0, 0.0])
        tables = accumulate_risk_sets(3, membership, time, event, np.array([2.0]))
        assert_array_equal(tables.parent_at_risk, [2])
        assert_array_equal(tables.left_at_risk, [1])

    def test_censored_at_event_time_still_at_risk(self):
        membership = np.array([LEFT, RIGHT])
        time = np.array([2.0, 2.0])
        event = np.array([0.0, 1.0])
        tables = accumulate_risk_sets(2, membership, time, event, np.array([2.0]))
        assert_array_equal(tables.parent_at_risk, [2])
        assert_array_equal(tables.parent_event, [1])
        assert_array_equal(tables.left_event, [0])

    def test_empty_grid(self):
        membership = np.array([LEFT, RIGHT])
        tables = accumulate_risk_sets(
            2, membership, np.array([1.0, 2.0]), np.array([0.0, 0.0]),
            np.array([]),
        )
        assert tables.parent_at_risk.shape == (0,)


class TestCompetingRiskSets:

    def test_cause_tables_sum_to_all_cause(self, competing_node):
        node = competing_node
        tables = accumulate_competing_risk_sets(
            node["n"], node["membership"], node["time"], node["event"],
            node["event_type_size"], node["event_time"],
        )
        assert tables.event_type_size == 2
        assert_array_equal(tables.parent_event_cr.sum(axis=0), tables.risk.parent_event)
        assert_array_equal(tables.left_event_cr.sum(axis=0), tables.risk.left_event)

    def test_inclusive_at_risk_definition(self, competing_node):
        node = competing_node
        tables = accumulate_competing_risk_sets(
            node["n"], node["membership"], node["time"], node["event"],
            node["event_type_size"], node["event_time"],
        )
        J, m = tables.parent_event_cr.shape
        for j in range(J):
            for k in range(m):
                expected = tables.risk.parent_at_risk[k]
                expected_left = tables.risk.left_at_risk[k]
                for s in range(k):
                    for r in range(J):
                        if r != j:
                            expected += tables.parent_event_cr[r, s]
                            expected_left += tables.left_event_cr[r, s]
                assert tables.parent_inclusive_at_risk[j, k] == expected
                assert tables.left_inclusive_at_risk[j, k] == expected_left

    def test_single_cause_inclusive_equals_ordinary(self, four_subject_node):
        node = four_subject_node
        tables = accumulate_competing_risk_sets(
            node["n"], node["membership"], node["time"], node["event"],
            1, node["event_time"],
        )
        assert_array_equal(tables.parent_inclusive_at_risk[0], tables.risk.parent_at_risk)
        assert_array_equal(tables.left_inclusive_at_risk[0], tables.risk.left_at_risk)

    def test_other_cause_credited_back(self):
        """Cause-2 failure at t=1 stays in cause 1's risk set at t=2."""
        membership = np.array([LEFT, RIGHT, RIGHT])
        time = np.array([1.0, 2.0, 3.0])
        event = np.array([2.0, 1.0, 0.0])
        tables = accumulate_competing_risk_sets(
            3, membership, time, event, 2, np.array([1.0, 2.0]),
        )
        assert_array_equal(tables.risk.parent_at_risk, [3, 2])
        assert_array_equal(tables.parent_inclusive_at_risk[0], [3, 3])
        assert_array_equal(tables.parent_inclusive_at_risk[1], [3, 2])
        assert_array_equal(tables.left_inclusive_at_risk[0], [1, 1])
        assert_array_equal(tables.left_inclusive_at_risk[1], [1, 0])
