# -*- coding: utf-8

"""Module for the operating point solver.

The solver closes the three residual equations of
:py:mod:`turbomap.solvers.residuals` for mass flow, outlet total enthalpy
and shaft torque with a Newton method. The jacobian is calculated by central
differences of the residual function.


This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/solvers/operating_point.py

SPDX-License-Identifier: MIT
"""

from collections import namedtuple

import numpy as np
from numpy.linalg import norm

from turbomap.solvers.residuals import residual_scales
from turbomap.solvers.residuals import turbomachine_residuals
from turbomap.solvers.residuals import turbomachine_residuals_scaled
from turbomap.tools import logger
from turbomap.tools.global_vars import solver_defaults
from turbomap.tools.helpers import numeric_jacobian

OperatingPointResult = namedtuple(
    'OperatingPointResult', [
        'mdot', 'ht_out', 'tau', 'pr', 'mdot_corr', 'eta', 'residuals',
        'converged', 'status', 'iterations'
    ]
)
OperatingPointResult.__doc__ = (
    'Solved unknowns, map outputs at the solution, raw residuals, '
    'convergence flag, status tag and number of Newton steps.'
)

solver_status = ['success', 'max_iterations', 'singular_jacobian', 'non_finite']


def _map_outputs(perf_map, eos, pt_in, ht_in, pt_out, omega, mdot):
    """Return pressure ratio, corrected flow and efficiency of the map."""
    Tt_in = eos.temperature(pt_in, ht_in)
    if perf_map.family == 'turbine':
        point = perf_map.evaluate_from_stagnation(omega, pt_in, pt_out, Tt_in)
        return point.pr_turb, point.mdot_corr, point.eta
    point = perf_map.evaluate_from_stagnation(omega, mdot, Tt_in, pt_in)
    return point.pr, point.mdot_corr, point.eta


def _check_tolerance(name, value):
    if not value > 0:
        msg = f'The solver parameter {name} must be positive, got {value}.'
        logger.error(msg)
        raise ValueError(msg)


def solve_operating_point(
        perf_map, eos, pt_in, ht_in, pt_out, omega, mdot_guess, ht_out_guess,
        tau_guess, abstol=None, reltol=None, maxiters=None,
        scaled_residuals=True, first_scale=None, enthalpy_scale=None,
        power_scale=None):
    r"""
    Solve a turbomachine operating point.

    Parameters
    ----------
    perf_map : turbomap.maps.base.PerformanceMap
        Compressor or turbine map.

    eos : turbomap.tools.fluid_properties.EquationOfState
        Equation of state of the working fluid.

    pt_in : float
        Inlet total pressure in Pa.

    ht_in : float
        Inlet total enthalpy in J/kg.

    pt_out : float
        Outlet total pressure in Pa.

    omega : float
        Shaft speed.

    mdot_guess : float
        Starting value of the mass flow.

    ht_out_guess : float
        Starting value of the outlet total enthalpy.

    tau_guess : float
        Starting value of the shaft torque.

    abstol : float
        Absolute tolerance of the residual norm. Default: 1e-10.

    reltol : float
        Relative tolerance of the Newton increment. Default: 1e-8.

    maxiters : int
        Maximum number of Newton steps. Default: 100.

    scaled_residuals : boolean
        Solve the scaled residuals (default) or the raw residuals.

    first_scale, enthalpy_scale, power_scale : float
        Overrides of the residual scales, see
        :py:func:`turbomap.solvers.residuals.residual_scales`.

    Returns
    -------
    result : OperatingPointResult
        The result carries the raw residuals at the last iterate. A failed
        solve is reported with :code:`converged=False` and one of the status
        tags :code:`'max_iterations'`, :code:`'singular_jacobian'` or
        :code:`'non_finite'`, it never raises.

    Note
    ----
    Missing residual scales are calculated once from the starting values and
    kept fixed during the iteration. The iteration stops successfully if

    .. math::

        \max |f| \leq tol_{abs} \; \lor \;
        \left(|\Delta x_j| \leq tol_{rel} \cdot \max(|x_j|, 1) \;\forall j
        \land \max |f| \leq \sqrt{tol_{abs}}\right)

    Domain errors of the map or the equation of state, e.g. a non-positive
    efficiency, are not caught. A converged point outside of the map domain
    is reported by a warning.
    """
    if abstol is None:
        abstol = solver_defaults['abstol']
    if reltol is None:
        reltol = solver_defaults['reltol']
    if maxiters is None:
        maxiters = solver_defaults['maxiters']
    _check_tolerance('abstol', abstol)
    _check_tolerance('reltol', reltol)
    if maxiters < 1:
        msg = f'The solver parameter maxiters must be >= 1, got {maxiters}.'
        logger.error(msg)
        raise ValueError(msg)

    x = np.array([mdot_guess, ht_out_guess, tau_guess], dtype=float)

    if scaled_residuals:
        scales = residual_scales(
            pt_in, ht_in, pt_out, x[1], x[0], omega, x[2],
            family=perf_map.family, first_scale=first_scale,
            enthalpy_scale=enthalpy_scale, power_scale=power_scale
        )

        def residual(u):
            return np.array(turbomachine_residuals_scaled(
                perf_map, eos, pt_in, ht_in, pt_out, u[1], u[0], omega, u[2],
                first_scale=scales.first, enthalpy_scale=scales.enthalpy,
                power_scale=scales.power
            ))
    else:
        def residual(u):
            return np.array(turbomachine_residuals(
                perf_map, eos, pt_in, ht_in, pt_out, u[1], u[0], omega, u[2]
            ))

    status = 'max_iterations'
    iterations = 0
    f = residual(x)
    for iterations in range(maxiters + 1):
        if not np.isfinite(f).all() or not np.isfinite(x).all():
            status = 'non_finite'
            break

        residual_max = np.abs(f).max()
        logger.debug(
            'Operating point iteration %d: residual %.2e, mdot %.6e, '
            'ht_out %.6e, tau %.6e.', iterations, residual_max, *x
        )
        if residual_max <= abstol:
            status = 'success'
            break
        if iterations == maxiters:
            break

        jacobian = numeric_jacobian(residual, x)
        try:
            increment = np.linalg.solve(jacobian, -f)
        except np.linalg.LinAlgError:
            status = 'singular_jacobian'
            break

        x = x + increment
        f = residual(x)
        if (
                np.isfinite(f).all()
                and (np.abs(increment) <= reltol * np.maximum(np.abs(x), 1)).all()
                and np.abs(f).max() <= abstol ** 0.5):
            iterations += 1
            status = 'success'
            break

    converged = status == 'success'
    if converged:
        raw = tuple(turbomachine_residuals(
            perf_map, eos, pt_in, ht_in, pt_out, x[1], x[0], omega, x[2]))
        pr, mdot_corr, eta = _map_outputs(
            perf_map, eos, pt_in, ht_in, pt_out, omega, x[0])
        perf_map.get_domain_errors(
            perf_map.corrected_speed(omega, eos.temperature(pt_in, ht_in)),
            pr if perf_map.family == 'turbine' else mdot_corr,
            'converged operating point'
        )
        logger.debug(
            'Operating point converged after %d iteration(s), residual norm '
            '%.2e.', iterations, norm(raw)
        )
    else:
        raw = (np.nan,) * 3
        pr, mdot_corr, eta = np.nan, np.nan, np.nan
        if np.isfinite(x).all():
            raw = tuple(turbomachine_residuals(
                perf_map, eos, pt_in, ht_in, pt_out, x[1], x[0], omega, x[2]))
            pr, mdot_corr, eta = _map_outputs(
                perf_map, eos, pt_in, ht_in, pt_out, omega, x[0])
        msg = (
            f'Operating point solve stopped with status "{status}" after '
            f'{iterations} iteration(s), residual norm {norm(f):.2e}.'
        )
        logger.warning(msg)

    return OperatingPointResult(
        float(x[0]), float(x[1]), float(x[2]), float(pr), float(mdot_corr),
        float(eta), raw, converged, status, iterations
    )
