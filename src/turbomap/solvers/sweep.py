# -*- coding: utf-8

"""Module for compressor operating sweeps across shaft speed.

At every speed of the sweep the corrected flows matching a target pressure
ratio are searched on the map, relaxing the target with a feasibility
backoff where it is out of reach. The selected roots are converted to
physical mass flow, outlet enthalpy, torque and power by closing the energy
balance with the isentropic enthalpy of the working fluid.


This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/solvers/sweep.py

SPDX-License-Identifier: MIT
"""

from collections import namedtuple

import numpy as np
import pandas as pd
from tabulate import tabulate

from turbomap.tools import logger
from turbomap.tools.branch_tracking import track_branches
from turbomap.tools.global_vars import ETA_SAFETY_FLOOR
from turbomap.tools.global_vars import OMEGA_SAFETY_FLOOR
from turbomap.tools.global_vars import backoff_defaults
from turbomap.tools.global_vars import branch_policies
from turbomap.tools.root_finding import bracket_bisect_roots
from turbomap.tools.root_finding import feasibility_backoff

Root = namedtuple('Root', ['mdot_corr', 'pr', 'eta'])
Root.__doc__ = 'Map point at fixed speed matching a target pressure ratio.'

SweepRow = namedtuple(
    'SweepRow', [
        'omega', 'branch_id', 'pr', 'eta', 'mdot_corr', 'mdot', 'pt_out',
        'ht_out', 'tau', 'power', 'converged', 'backoff_used'
    ]
)

RootSearch = namedtuple(
    'RootSearch', ['converged', 'roots', 'pr', 'backoff_used']
)

DEFAULT_MAX_MATCH_COST = 0.25


def relative_flow_distance(root_a, root_b):
    """Return the relative corrected flow difference of two roots."""
    reference = max(abs(root_a.mdot_corr), abs(root_b.mdot_corr), 1e-12)
    return abs(root_a.mdot_corr - root_b.mdot_corr) / reference


def compressor_pr_roots(
        cmp_map, omega, Tt_in, target_pr, n_scan=None, root_tol=None,
        prior_roots=()):
    r"""
    Find all corrected flows at fixed speed matching a pressure ratio.

    Parameters
    ----------
    cmp_map : turbomap.maps.compressor.CompressorMap
        Compressor map.

    omega : float
        Physical shaft speed.

    Tt_in : float
        Inlet total temperature in K.

    target_pr : float
        Target total pressure ratio, must be positive.

    n_scan : int
        Number of scan points across the flow range of the speed line.

    root_tol : float
        Pressure ratio tolerance of the roots.

    prior_roots : iterable
        Corrected flows of a neighbouring speed injected into the scan.

    Returns
    -------
    roots : list
        :code:`Root` tuples in ascending corrected flow. A speed line
        without flow range, e.g. where surge and choke line cross, has no
        roots.

    Example
    -------
    >>> from turbomap.maps import AnalyticCompressorMap
    >>> from turbomap.solvers.sweep import compressor_pr_roots
    >>> roots = compressor_pr_roots(AnalyticCompressorMap(), 1000, 288.15, 2)
    >>> len(roots)
    2
    >>> bool(roots[0].mdot_corr < roots[1].mdot_corr)
    True
    """
    if not target_pr > 0:
        msg = f'The target pressure ratio must be > 0, got {target_pr}.'
        logger.error(msg)
        raise ValueError(msg)

    omega_corr = cmp_map.corrected_speed(omega, Tt_in)
    flow_range = cmp_map.domain().bounds(omega_corr)
    if not flow_range[1] > flow_range[0]:
        logger.warning(
            'The speed line at corrected speed %.4g has no flow range between '
            'surge and choke: %s.', omega_corr, flow_range
        )
        return []

    def pr_residual(mdot_corr):
        return cmp_map.evaluate(omega_corr, mdot_corr)[0] - target_pr

    roots = []
    for mdot_corr in bracket_bisect_roots(
            pr_residual, flow_range, n_scan=n_scan, root_tol=root_tol,
            prior_roots=prior_roots):
        pr, eta = cmp_map.evaluate(omega_corr, mdot_corr)
        roots += [Root(mdot_corr, float(pr), float(eta))]
    return roots


def _pr_roots_with_backoff(
        cmp_map, omega, Tt_in, pt_in, target_pr, pt_out_bounds, enabled,
        pt_out_tol, max_iters, prior_roots):
    """Search the roots at the target or the closest feasible pressure."""

    def evaluate_at(pt_out):
        return compressor_pr_roots(
            cmp_map, omega, Tt_in, pt_out / pt_in, prior_roots=prior_roots)

    backoff = feasibility_backoff(
        evaluate_at, pt_in * target_pr, lambda roots: len(roots) > 0,
        min_value=pt_out_bounds[0], enabled=enabled,
        max_value=pt_out_bounds[1], value_tol=pt_out_tol,
        max_iters=max_iters, n_probe=backoff_defaults['n_probe']
    )
    if not backoff.converged:
        return RootSearch(False, [], np.nan, False)
    return RootSearch(
        True, backoff.result, backoff.value / pt_in, backoff.used_backoff)


def root_outputs(
        root, cmp_map, eos, omega, pt_in, ht_in, Tt_in, branch_id=None,
        backoff_used=False):
    r"""
    Convert a map root to a physical operating point.

    .. math::

        \dot{m} = \dot{m}_{corr} \cdot
        \frac{p_{t,in} / p_{t,ref}}{\sqrt{T_{t,in} / T_{t,ref}}}\\
        h_{t,out} = h_{t,in} + \frac{h_{2s} - h_{t,in}}{\max(\eta, 10^{-6})}\\
        \tau = \frac{\dot{m} \cdot (h_{t,out} - h_{t,in})}
        {\max(\omega, 10^{-12})}
    """
    mdot = cmp_map.physical_flow(root.mdot_corr, Tt_in, pt_in)
    pt_out = pt_in * root.pr
    h2s = eos.isentropic_enthalpy(pt_in, ht_in, pt_out)
    ht_out = ht_in + (h2s - ht_in) / max(root.eta, ETA_SAFETY_FLOOR)
    tau = mdot * (ht_out - ht_in) / max(omega, OMEGA_SAFETY_FLOOR)
    return SweepRow(
        float(omega), branch_id, root.pr, root.eta, float(root.mdot_corr),
        float(mdot), float(pt_out), float(ht_out), float(tau),
        float(tau * omega), True, backoff_used
    )


def _missing_row(omega):
    return SweepRow(
        float(omega), None, np.nan, np.nan, np.nan, np.nan, np.nan, np.nan,
        np.nan, np.nan, False, False
    )


class SweepResult:
    r"""
    Result of a compressor operating sweep.

    Parameters
    ----------
    mode : str
        :code:`'single'` for one row per speed, :code:`'all'` for one row per
        root and speed.

    branch : str
        Branch policy of the sweep.

    omegas : ndarray
        Swept shaft speeds.

    rows : list
        :code:`SweepRow` tuples. A speed without feasible root is kept as
        row with :code:`converged=False`.

    tracking : turbomap.tools.branch_tracking.TrackingResult
        Branch tracking result of the all-branches mode, else :code:`None`.
    """

    columns = list(SweepRow._fields)

    def __init__(self, mode, branch, omegas, rows, tracking=None):
        self.mode = mode
        self.branch = branch
        self.omegas = np.array(omegas, dtype=float)
        self.rows = list(rows)
        self.tracking = tracking

    def __len__(self):
        return len(self.rows)

    @property
    def converged(self):
        return np.array([row.converged for row in self.rows], dtype=bool)

    def to_dataframe(self):
        """Return the rows as pandas DataFrame."""
        df = pd.DataFrame(self.rows, columns=self.columns)
        df['branch_id'] = df['branch_id'].astype('Int64')
        return df

    def save(self, path):
        """Write the rows to a csv file."""
        self.to_dataframe().to_csv(path, index=False)
        logger.debug('Saved sweep results to %s.', path)

    def print_results(self, print_results=True):
        """Log and print the sweep rows in a table."""
        df = self.to_dataframe()
        result = f'\n##### RESULTS (sweep, branch: {self.branch}) #####\n'
        result += tabulate(
            df, headers='keys', tablefmt='psql', floatfmt='.3e',
            showindex=False
        )
        logger.result(result)
        if print_results:
            print(result)


def _check_sweep_input(
        target_pressure_ratio, branch, n_points, inlet_pressure,
        inlet_temperature, backoff_tolerance, backoff_max_iters,
        max_match_cost):
    msg = None
    if not target_pressure_ratio > 1:
        msg = (
            'The target pressure ratio of a compressor sweep must be > 1, got '
            f'{target_pressure_ratio}.'
        )
    elif branch not in branch_policies:
        msg = (
            f'Unknown branch policy "{branch}", available policies are '
            f'{", ".join(branch_policies)}.'
        )
    elif n_points < 1:
        msg = f'The number of sweep points must be >= 1, got {n_points}.'
    elif not inlet_pressure > 0 or not inlet_temperature > 0:
        msg = (
            'Inlet pressure and temperature must be positive, got '
            f'{inlet_pressure} and {inlet_temperature}.'
        )
    elif not backoff_tolerance > 0:
        msg = f'The backoff tolerance must be > 0, got {backoff_tolerance}.'
    elif backoff_max_iters < 1:
        msg = (
            f'The backoff iteration limit must be >= 1, got '
            f'{backoff_max_iters}.'
        )
    elif max_match_cost is not None and not max_match_cost >= 0:
        msg = f'The maximum match cost must be >= 0, got {max_match_cost}.'
    if msg is not None:
        logger.error(msg)
        raise ValueError(msg)


def solve_sweep(
        cmp_map, eos, omega_min=0.6, omega_max=1.0, n_points=25,
        inlet_pressure=101325.0, inlet_temperature=288.15,
        target_pressure_ratio=2.0, branch='high', backoff_enabled=True,
        backoff_bounds=None, backoff_tolerance=None, backoff_max_iters=None,
        distance=None, max_match_cost=None):
    r"""
    Sweep compressor operating points across shaft speed.

    Parameters
    ----------
    cmp_map : turbomap.maps.compressor.CompressorMap
        Compressor map.

    eos : turbomap.tools.fluid_properties.EquationOfState
        Equation of state of the working fluid.

    omega_min, omega_max : float
        Range of the physical shaft speed.

    n_points : int
        Number of evenly spaced speeds.

    inlet_pressure : float
        Inlet total pressure in Pa.

    inlet_temperature : float
        Inlet total temperature in K.

    target_pressure_ratio : float
        Target total pressure ratio, must be > 1.

    branch : str
        :code:`'low'` (surge side root), :code:`'high'` (choke side root,
        default) or :code:`'all'` (every root with tracked branch id).

    backoff_enabled : boolean
        Relax infeasible targets towards lower outlet pressure.

    backoff_bounds : tuple
        Outlet pressure range :code:`(min_pt_out, max_pt_out)` of the
        backoff, each entry may be :code:`None`. Default: inlet pressure
        and target outlet pressure.

    backoff_tolerance : float
        Outlet pressure tolerance of the backoff in Pa. Default: 50.

    backoff_max_iters : int
        Bisection steps of the backoff. Default: 24.

    distance : function
        Matching cost of two :code:`Root` tuples in the all-branches mode,
        default is the relative corrected flow difference.

    max_match_cost : float
        Maximum accepted matching cost. Default: 0.25.

    Returns
    -------
    result : SweepResult
        Result with one row per speed in single-branch mode or one row per
        root and speed in all-branches mode.

    Note
    ----
    In single-branch mode the accepted root of the previous speed is passed
    to the root search of the next speed as continuity hint, in the
    all-branches mode all roots of the previous speed are. Speeds without
    feasible root never update the hint.

    Example
    -------
    >>> from turbomap.maps import demo_analytic_compressor_map
    >>> from turbomap.solvers import solve_sweep
    >>> from turbomap.tools.fluid_properties import IdealGasEOS
    >>> res = solve_sweep(
    ...     demo_analytic_compressor_map(), IdealGasEOS.air(),
    ...     omega_min=800, omega_max=1000, n_points=5, branch='low')
    >>> len(res.rows), res.mode
    (5, 'single')
    """
    if backoff_tolerance is None:
        backoff_tolerance = backoff_defaults['pressure_tol']
    if backoff_max_iters is None:
        backoff_max_iters = backoff_defaults['max_iters']
    _check_sweep_input(
        target_pressure_ratio, branch, n_points, inlet_pressure,
        inlet_temperature, backoff_tolerance, backoff_max_iters,
        max_match_cost
    )

    pt_in = float(inlet_pressure)
    Tt_in = float(inlet_temperature)
    target_pr = float(target_pressure_ratio)

    min_pt_out, max_pt_out = (None, None) if backoff_bounds is None else (
        backoff_bounds)
    min_pt_out = pt_in if min_pt_out is None else float(min_pt_out)
    max_pt_out = pt_in * target_pr if max_pt_out is None else float(max_pt_out)
    pt_out_bounds = (max(min_pt_out, pt_in), min(max_pt_out, pt_in * target_pr))
    if not pt_out_bounds[0] < pt_out_bounds[1]:
        msg = (
            f'The backoff outlet pressure range {pt_out_bounds} is empty for '
            f'inlet pressure {pt_in} and target pressure ratio {target_pr}.'
        )
        logger.error(msg)
        raise ValueError(msg)

    ht_in = eos.enthalpy_from_temperature(Tt_in)
    omegas = np.linspace(omega_min, omega_max, n_points)

    searches = []
    prior_roots = []
    for i, omega in enumerate(omegas):
        found = _pr_roots_with_backoff(
            cmp_map, omega, Tt_in, pt_in, target_pr, pt_out_bounds,
            backoff_enabled, backoff_tolerance, backoff_max_iters,
            prior_roots
        )
        if found.converged and found.roots:
            if branch == 'low':
                prior_roots = [found.roots[0].mdot_corr]
            elif branch == 'high':
                prior_roots = [found.roots[-1].mdot_corr]
            else:
                prior_roots = [root.mdot_corr for root in found.roots]
        else:
            logger.warning(
                'No feasible root at shaft speed %s for pressure ratio %s.',
                omega, target_pr
            )
        searches += [found]
        logger.progress(
            int(100 * (i + 1) / n_points),
            'Sweep point %d of %d at shaft speed %.4g: %d root(s).',
            i + 1, n_points, omega, len(found.roots)
        )

    if branch != 'all':
        rows = []
        for omega, found in zip(omegas, searches):
            if not found.converged or not found.roots:
                rows += [_missing_row(omega)]
                continue
            root = found.roots[0] if branch == 'low' else found.roots[-1]
            rows += [root_outputs(
                root, cmp_map, eos, omega, pt_in, ht_in, Tt_in,
                backoff_used=found.backoff_used
            )]
        result = SweepResult('single', branch, omegas, rows)

    else:
        if distance is None:
            distance = relative_flow_distance
        if max_match_cost is None:
            max_match_cost = DEFAULT_MAX_MATCH_COST
        tracking = track_branches(
            list(omegas), [found.roots for found in searches], distance,
            max_match_cost
        )
        rows = []
        for omega, found, assigned in zip(
                omegas, searches, tracking.assignments):
            if not found.converged or not found.roots:
                rows += [_missing_row(omega)]
                continue
            for root, branch_id in zip(found.roots, assigned):
                rows += [root_outputs(
                    root, cmp_map, eos, omega, pt_in, ht_in, Tt_in,
                    branch_id=branch_id, backoff_used=found.backoff_used
                )]
        result = SweepResult('all', branch, omegas, rows, tracking)

    logger.result(
        'Sweep finished: %d of %d speed point(s) feasible.',
        sum(1 for found in searches if found.converged and found.roots),
        n_points
    )
    return result
