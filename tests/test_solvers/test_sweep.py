# -*- coding: utf-8

"""Module for testing the compressor speed sweep.

This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location tests/test_solvers/test_sweep.py

SPDX-License-Identifier: MIT
"""
import numpy as np
import pandas as pd
import pytest

from turbomap.maps import AnalyticCompressorMap
from turbomap.maps import TabulatedCompressorMap
from turbomap.maps import demo_analytic_compressor_map
from turbomap.solvers import compressor_pr_roots
from turbomap.solvers import solve_sweep
from turbomap.solvers.sweep import Root
from turbomap.solvers.sweep import relative_flow_distance
from turbomap.tools.fluid_properties import IdealGasEOS


def two_root_map():
    """Speed lines with a pressure ratio peak of 2.4 at 20 kg/s."""
    pr_line = [1.5, 2.0, 2.4, 2.0, 1.5]
    return TabulatedCompressorMap(
        288.15, 101325, [0.5, 1.0], [10, 15, 20, 25, 30],
        [pr_line, pr_line], [[0.8] * 5, [0.8] * 5]
    )


def test_relative_flow_distance():
    a = Root(10.0, 2.0, 0.8)
    b = Root(12.5, 2.0, 0.8)
    msg = 'The distance must be relative to the larger corrected flow.'
    assert relative_flow_distance(a, b) == pytest.approx(0.2), msg
    assert relative_flow_distance(a, b) == relative_flow_distance(b, a), msg


class TestPressureRatioRoots:

    def setup_method(self):
        self.map = two_root_map()

    def test_two_roots(self):
        roots = compressor_pr_roots(self.map, 0.8, 288.15, 2.2)
        flows = [root.mdot_corr for root in roots]
        msg = f'The roots must be at 17.5 and 22.5, got {flows}.'
        assert flows == pytest.approx([17.5, 22.5], abs=1e-6), msg
        for root in roots:
            msg = f'The root must match the target, got {root.pr}.'
            assert root.pr == pytest.approx(2.2, abs=1e-7), msg
            assert root.eta == pytest.approx(0.8), msg

    def test_no_root(self):
        msg = 'A target above the peak must not have any root.'
        assert compressor_pr_roots(self.map, 0.8, 288.15, 2.6) == [], msg

    def test_invalid_target(self):
        with pytest.raises(ValueError):
            compressor_pr_roots(self.map, 0.8, 288.15, 0)


class TestSingleBranchSweep:

    def setup_method(self):
        self.map = two_root_map()
        self.eos = IdealGasEOS.air()
        self.kwargs = {
            'omega_min': 0.6, 'omega_max': 0.9, 'n_points': 4,
            'target_pressure_ratio': 2.2
        }

    def test_high_branch(self):
        res = solve_sweep(self.map, self.eos, **self.kwargs)
        msg = f'One row per speed expected, got {len(res)}.'
        assert len(res) == 4 and res.mode == 'single', msg
        msg = 'All speeds must converge.'
        assert res.converged.all(), msg
        for row in res.rows:
            msg = f'The high branch must be at 22.5, got {row.mdot_corr}.'
            assert row.mdot_corr == pytest.approx(22.5, abs=1e-6), msg
            msg = 'At reference inlet conditions physical equals corrected flow.'
            assert row.mdot == pytest.approx(row.mdot_corr), msg
            msg = 'No backoff must be used for a feasible target.'
            assert not row.backoff_used and row.branch_id is None, msg

    def test_low_branch(self):
        res = solve_sweep(self.map, self.eos, branch='low', **self.kwargs)
        flows = [row.mdot_corr for row in res.rows]
        msg = f'The low branch must be at 17.5, got {flows}.'
        assert flows == pytest.approx([17.5] * 4, abs=1e-6), msg

    def test_energy_balance(self):
        res = solve_sweep(self.map, self.eos, **self.kwargs)
        row = res.rows[0]
        ht_in = self.eos.enthalpy_from_temperature(288.15)
        h2s = self.eos.isentropic_enthalpy(101325, ht_in, row.pt_out)
        ht_out = ht_in + (h2s - ht_in) / 0.8
        msg = f'The outlet enthalpy must be {ht_out}, got {row.ht_out}.'
        assert row.ht_out == pytest.approx(ht_out), msg
        msg = 'Torque times speed must equal the power.'
        assert row.tau * row.omega == pytest.approx(row.power), msg
        assert row.power == pytest.approx(row.mdot * (ht_out - ht_in)), msg
        msg = f'The outlet pressure must be 2.2 bar, got {row.pt_out}.'
        assert row.pt_out == pytest.approx(2.2 * 101325, rel=1e-7), msg

    def test_backoff(self):
        kwargs = dict(self.kwargs, target_pressure_ratio=2.6)
        res = solve_sweep(self.map, self.eos, **kwargs)
        msg = 'The backoff must find the peak pressure ratio.'
        assert res.converged.all(), msg
        for row in res.rows:
            assert row.backoff_used, msg
            assert row.pr == pytest.approx(2.4, abs=1e-3), msg

    def test_backoff_disabled(self):
        kwargs = dict(
            self.kwargs, target_pressure_ratio=2.6, backoff_enabled=False)
        res = solve_sweep(self.map, self.eos, **kwargs)
        msg = 'Without backoff an infeasible target must fail at every speed.'
        assert not res.converged.any(), msg
        assert len(res) == 4, msg
        assert all(np.isnan(row.mdot) for row in res.rows), msg

    def test_result_table(self, tmp_path, capsys):
        res = solve_sweep(self.map, self.eos, **self.kwargs)
        df = res.to_dataframe()
        msg = 'The DataFrame must carry one column per row field.'
        assert list(df.columns) == res.columns, msg
        assert str(df['branch_id'].dtype) == 'Int64', msg

        path = tmp_path / 'sweep.csv'
        res.save(str(path))
        loaded = pd.read_csv(path)
        msg = 'The csv file must reproduce the mass flows.'
        assert np.allclose(loaded['mdot'], df['mdot']), msg

        res.print_results()
        out = capsys.readouterr().out
        msg = 'The printed table must name the branch policy.'
        assert 'branch: high' in out and 'mdot_corr' in out, msg


class TestAllBranchesSweep:

    def setup_method(self):
        self.map = two_root_map()
        self.eos = IdealGasEOS.air()

    def test_tracked_branches(self):
        res = solve_sweep(
            self.map, self.eos, omega_min=0.6, omega_max=0.9, n_points=4,
            target_pressure_ratio=2.2, branch='all'
        )
        msg = f'Two rows per speed expected, got {len(res)}.'
        assert len(res) == 8 and res.mode == 'all', msg
        ids = {row.branch_id for row in res.rows}
        msg = f'Two branches must be tracked, got {ids}.'
        assert ids == {1, 2}, msg
        msg = 'Continuous branches must not produce events.'
        assert res.tracking.events == [], msg
        for row in res.rows:
            expected = 17.5 if row.branch_id == 1 else 22.5
            msg = f'Branch {row.branch_id} must stay at {expected}.'
            assert row.mdot_corr == pytest.approx(expected, abs=1e-6), msg

    def test_infeasible_middle_speed(self):
        pr_line = [1.5, 2.0, 2.4, 2.0, 1.5]
        low_line = [1.4, 1.7, 2.0, 1.7, 1.4]
        cmp_map = TabulatedCompressorMap(
            288.15, 101325, [0.6, 0.75, 0.9], [10, 15, 20, 25, 30],
            [pr_line, low_line, pr_line], [[0.8] * 5] * 3
        )
        res = solve_sweep(
            cmp_map, self.eos, omega_min=0.6, omega_max=0.9, n_points=3,
            target_pressure_ratio=2.2, branch='all', backoff_enabled=False
        )
        msg = f'Two roots at the outer speeds and one gap row, got {len(res)}.'
        assert len(res) == 5, msg
        omegas = sorted({row.omega for row in res.rows})
        msg = f'Every speed must keep a row, got {omegas}.'
        assert omegas == pytest.approx([0.6, 0.75, 0.9]), msg

        gap = [row for row in res.rows if row.omega == pytest.approx(0.75)]
        msg = 'The speed without root must give one non-converged row.'
        assert len(gap) == 1 and not gap[0].converged, msg
        assert gap[0].branch_id is None and np.isnan(gap[0].mdot), msg
        df = res.to_dataframe()
        assert df['branch_id'].isna().sum() == 1, msg

        events = [
            (event.kind, event.condition_idx, event.branch_id)
            for event in res.tracking.events
        ]
        expected = [
            ('death', 1, 1), ('death', 1, 2),
            ('birth', 2, 3), ('birth', 2, 4)
        ]
        msg = f'Both branches must die at the gap and restart, got {events}.'
        assert events == expected, msg
        ids = [row.branch_id for row in res.rows if row.omega == 0.9]
        msg = f'New branch ids must follow the gap, got {ids}.'
        assert ids == [3, 4], msg


class TestSweepValidation:

    def setup_method(self):
        self.map = two_root_map()
        self.eos = IdealGasEOS.air()

    @pytest.mark.parametrize('kwargs', [
        {'target_pressure_ratio': 1.0},
        {'branch': 'middle'},
        {'n_points': 0},
        {'inlet_pressure': -1},
        {'backoff_tolerance': 0},
        {'backoff_max_iters': 0},
        {'max_match_cost': -0.1},
        {'backoff_bounds': (3e5, 2e5)},
    ])
    def test_invalid_input(self, kwargs):
        with pytest.raises(ValueError):
            solve_sweep(self.map, self.eos, **kwargs)


def test_analytic_sweep():
    res = solve_sweep(
        demo_analytic_compressor_map(), IdealGasEOS.air(), omega_min=800,
        omega_max=1000, n_points=5
    )
    msg = 'The backoff must make every speed of the demo map feasible.'
    assert res.converged.all(), msg
    msg = 'The design speed must reach the target without backoff.'
    assert not res.rows[-1].backoff_used, msg
    assert res.rows[-1].pr == pytest.approx(2.0, abs=1e-6), msg


class TestDegenerateSpeedLine:
    """Surge and choke line of this map cross at a shaft speed of 900."""

    def setup_method(self):
        self.map = AnalyticCompressorMap(ms0=1.0, ms1=-1.0, mc0=1.1, mc1=0.0)

    def test_no_roots(self, caplog):
        roots = compressor_pr_roots(self.map, 900.0, 288.15, 1.5)
        msg = 'A speed line without flow range must not have any root.'
        assert roots == [], msg
        assert 'no flow range' in caplog.text, msg

    def test_sweep_keeps_all_rows(self):
        res = solve_sweep(
            self.map, IdealGasEOS.air(), omega_min=800, omega_max=1000,
            n_points=3, target_pressure_ratio=1.5
        )
        msg = f'The sweep must keep one row per speed, got {len(res)}.'
        assert len(res) == 3, msg
        msg = 'The speed without flow range must not converge.'
        assert res.rows[1].omega == 900 and not res.rows[1].converged, msg
