# -*- coding: utf-8

"""Module for testing the multi-root search and the feasibility backoff.

This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location tests/test_tools/test_root_finding.py

SPDX-License-Identifier: MIT
"""
import numpy as np
import pytest

from turbomap.tools.helpers import TurboMapDomainError
from turbomap.tools.root_finding import bracket_bisect_roots
from turbomap.tools.root_finding import feasibility_backoff


class TestBracketBisectRoots:

    def test_two_roots_ascending(self):
        """Test a parabola with a surge and a choke side root."""
        roots = bracket_bisect_roots(lambda x: 2.2 - (x - 1) ** 2 - 2, (0, 2))
        expected = [1 - np.sqrt(0.2), 1 + np.sqrt(0.2)]
        msg = f'The roots must be {expected}, but are {roots}.'
        assert len(roots) == 2, msg
        assert roots == pytest.approx(expected, abs=1e-7), msg

    def test_no_root(self):
        roots = bracket_bisect_roots(lambda x: x ** 2 + 1, (-1, 1))
        msg = f'There must be no roots, found {roots}.'
        assert roots == [], msg

    def test_exact_zero_on_scan_point(self):
        roots = bracket_bisect_roots(lambda x: x, (-1, 1), n_scan=5)
        msg = f'The exact zero at x=0 must be found once, found {roots}.'
        assert roots == [0.0], msg

    def test_root_at_range_end(self):
        roots = bracket_bisect_roots(lambda x: x - 2, (0, 2), n_scan=7)
        msg = f'The root at the upper range end must be found, got {roots}.'
        assert roots == [2.0], msg

    def test_prior_root_resolves_close_pair(self):
        """Two roots within one coarse scan cell are found via a prior."""
        def f(x):
            return (x - 0.41) * (x - 0.412)

        coarse = bracket_bisect_roots(f, (0, 1), n_scan=5)
        msg = f'The coarse scan must miss the root pair, got {coarse}.'
        assert coarse == [], msg

        roots = bracket_bisect_roots(
            f, (0, 1), n_scan=5, prior_roots=[0.411],
            continuation_band_fraction=0.01
        )
        msg = f'The prior root must reveal both roots, got {roots}.'
        assert roots == pytest.approx([0.41, 0.412], abs=1e-5), msg

    def test_invalid_input(self):
        with pytest.raises(ValueError):
            bracket_bisect_roots(lambda x: x, (0, 1), n_scan=4)
        with pytest.raises(ValueError):
            bracket_bisect_roots(lambda x: x, (1, 1))
        with pytest.raises(ValueError):
            bracket_bisect_roots(lambda x: x, (0, 1), root_tol=0)


class TestFeasibilityBackoff:

    def setup_method(self):
        self.calls = []

    def evaluate_at(self, value):
        self.calls += [value]
        # feasible up to 7.3
        return [value] if value <= 7.3 else []

    def test_feasible_target(self):
        res = feasibility_backoff(self.evaluate_at, 5, bool, min_value=0)
        msg = 'A feasible target must be accepted without backoff.'
        assert res.converged and not res.used_backoff, msg
        assert res.value == 5, msg
        assert self.calls == [5], msg

    def test_backoff_below_target(self):
        res = feasibility_backoff(
            self.evaluate_at, 10, bool, min_value=0, value_tol=1e-3
        )
        msg = (
            'An infeasible target must be relaxed to a feasible value below '
            f'the target, got {res}.'
        )
        assert res.converged and res.used_backoff, msg
        assert res.value < 10, msg
        assert res.value <= 7.3, msg
        assert res.value == pytest.approx(7.3, abs=1e-3), msg
        assert res.result == [res.value], msg

    def test_backoff_disabled(self):
        res = feasibility_backoff(
            self.evaluate_at, 10, bool, min_value=0, enabled=False
        )
        msg = 'With disabled backoff an infeasible target must fail.'
        assert not res.converged and res.result is None, msg
        assert np.isnan(res.value), msg

    def test_clamped_target(self):
        res = feasibility_backoff(
            self.evaluate_at, 10, bool, min_value=0, max_value=6
        )
        msg = 'A target clamped to a feasible maximum counts as backoff.'
        assert res.converged and res.used_backoff and res.value == 6, msg

    def test_nothing_feasible(self):
        res = feasibility_backoff(
            lambda value: [], 10, bool, min_value=0, n_probe=5
        )
        msg = 'Without feasible values the backoff must not converge.'
        assert not res.converged, msg

    def test_empty_range(self):
        with pytest.raises(TurboMapDomainError):
            feasibility_backoff(self.evaluate_at, 10, bool, min_value=10)
        with pytest.raises(TurboMapDomainError):
            feasibility_backoff(
                self.evaluate_at, 10, bool, min_value=5, max_value=4
            )

    def test_invalid_tolerance(self):
        with pytest.raises(ValueError):
            feasibility_backoff(
                self.evaluate_at, 10, bool, min_value=0, value_tol=0
            )
