# -*- coding: utf-8

"""Module for scalar multi-root search and feasibility backoff.

A compressor's pressure ratio at fixed speed rises and falls between surge
and choke, so one target pressure ratio may belong to none, one or several
flows. :py:func:`bracket_bisect_roots` finds all of them by scanning for sign
changes and bisecting every bracket. :py:func:`feasibility_backoff` relaxes a
target that has no solution towards the nearest feasible one.


This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/tools/root_finding.py

SPDX-License-Identifier: MIT
"""

from collections import namedtuple

import numpy as np

from turbomap.tools import logger
from turbomap.tools.global_vars import backoff_defaults
from turbomap.tools.global_vars import root_finding_defaults
from turbomap.tools.helpers import domain_error

BackoffResult = namedtuple(
    'BackoffResult', ['converged', 'value', 'result', 'used_backoff']
)
BackoffResult.__doc__ = (
    'Outcome of a feasibility backoff: convergence flag, accepted value, '
    'the evaluation result at that value and whether the target was relaxed.'
)

_NOT_CONVERGED = BackoffResult(False, np.nan, None, False)


def _dedupe_sorted(values, atol):
    values = sorted(values)
    if not values:
        return values
    out = [values[0]]
    for value in values[1:]:
        if abs(value - out[-1]) > atol:
            out += [value]
    return out


def _bisect_zero(f, a, b, tol, max_iters):
    fa = f(a)
    fb = f(b)
    if fa * fb > 0:
        msg = (
            f'Invalid bisection bracket [{a}, {b}], the function values {fa} '
            f'and {fb} have the same sign.'
        )
        logger.error(msg)
        raise ValueError(msg)

    lo, hi = a, b
    flo = fa
    mid = 0.5 * (lo + hi)
    for _ in range(max_iters):
        mid = 0.5 * (lo + hi)
        fmid = f(mid)
        if abs(fmid) <= tol or abs(hi - lo) <= 1e-12:
            break
        if flo * fmid <= 0:
            hi = mid
        else:
            lo = mid
            flo = fmid
    return mid


def bracket_bisect_roots(
        f, x_range, n_scan=None, root_tol=None, prior_roots=(),
        continuation_band_fraction=None, max_bisect_iters=None):
    r"""
    Find all zeros of a scalar function within a range.

    Parameters
    ----------
    f : function
        Residual :math:`f(x)` whose zeros are sought.

    x_range : tuple
        Search range :code:`(x_lo, x_hi)` with :code:`x_hi > x_lo`.

    n_scan : int
        Number of evenly spaced scan points, at least 5. Default: 401.

    root_tol : float
        Residual tolerance for accepting a root. Default: 1e-8.

    prior_roots : iterable
        Roots of a nearby condition. Each prior root inside the range is
        injected into the scan grid together with two neighbours at
        :math:`\pm` the continuation band.

    continuation_band_fraction : float
        Width of the continuation band relative to the range. Default: 0.02.

    max_bisect_iters : int
        Maximum number of bisection steps per bracket. Default: 60.

    Returns
    -------
    roots : list
        Deduplicated roots in ascending order.

    Example
    -------
    >>> from turbomap.tools.root_finding import bracket_bisect_roots
    >>> roots = bracket_bisect_roots(lambda x: (x - 1) * (x - 3), (0, 4))
    >>> [round(r, 6) for r in roots]
    [1.0, 3.0]
    """
    if n_scan is None:
        n_scan = root_finding_defaults['n_scan']
    if root_tol is None:
        root_tol = root_finding_defaults['root_tol']
    if continuation_band_fraction is None:
        continuation_band_fraction = (
            root_finding_defaults['continuation_band_fraction'])
    if max_bisect_iters is None:
        max_bisect_iters = root_finding_defaults['max_bisect_iters']

    if n_scan < 5:
        msg = f'The number of scan points must be at least 5, got {n_scan}.'
        logger.error(msg)
        raise ValueError(msg)
    if root_tol <= 0:
        msg = f'The root tolerance must be positive, got {root_tol}.'
        logger.error(msg)
        raise ValueError(msg)

    x_lo, x_hi = float(x_range[0]), float(x_range[1])
    if not x_hi > x_lo:
        msg = (
            f'The search range must satisfy x_hi > x_lo, got ({x_lo}, {x_hi}).'
        )
        logger.error(msg)
        raise ValueError(msg)

    grid = list(np.linspace(x_lo, x_hi, n_scan))
    band = continuation_band_fraction * (x_hi - x_lo)
    for root in prior_roots:
        root = float(root)
        if x_lo <= root <= x_hi:
            grid += [
                root,
                min(max(root - band, x_lo), x_hi),
                min(max(root + band, x_lo), x_hi)
            ]
    grid = np.unique(grid)
    f_vals = [f(x) for x in grid]

    roots = []
    for i in range(len(grid) - 1):
        f1, f2 = f_vals[i], f_vals[i + 1]
        if abs(f1) <= root_tol:
            roots += [float(grid[i])]
        elif f1 * f2 < 0:
            roots += [float(_bisect_zero(
                f, grid[i], grid[i + 1], root_tol, max_bisect_iters
            ))]
    if abs(f_vals[-1]) <= root_tol:
        roots += [float(grid[-1])]

    roots = _dedupe_sorted(roots, max((x_hi - x_lo) / 1e6, 1e-10))
    logger.debug(
        'Found %d root(s) in range [%s, %s] on %d scan points.',
        len(roots), x_lo, x_hi, len(grid)
    )
    return roots


def feasibility_backoff(
        evaluate_at, target_value, is_feasible, min_value, enabled=True,
        max_value=None, value_tol=None, max_iters=None, n_probe=None):
    r"""
    Search the highest feasible value not exceeding a target.

    Parameters
    ----------
    evaluate_at : function
        Returns an arbitrary result object for a value.

    target_value : float
        Requested value.

    is_feasible : function
        Predicate on the result object of :code:`evaluate_at`.

    min_value : float
        Lower end of the search range.

    enabled : boolean
        If :code:`False`, only the clamped target is tried.

    max_value : float
        Upper clamp of the target, defaults to the target itself.

    value_tol : float
        Width of the final bracket between feasible and infeasible value.
        Default: 1e-6.

    max_iters : int
        Maximum number of bisection steps. Default: 24.

    n_probe : int
        Number of coarse probe values between clamped target and
        :code:`min_value`. Default: 33.

    Returns
    -------
    result : BackoffResult
        If nothing feasible is found, :code:`converged` is :code:`False`,
        the value is :code:`nan` and the result is :code:`None`.

    Note
    ----
    The clamped target :math:`v_{hi} = \min(v_{max}, v_{target})` is tried
    first. If it is infeasible, values from :math:`v_{hi}` down to
    :math:`v_{min}` are probed until one is feasible, then the gap to the
    last infeasible value above it is bisected keeping the best feasible
    value. A search range without width raises a
    :py:class:`turbomap.tools.helpers.TurboMapDomainError`.

    Example
    -------
    >>> from turbomap.tools.root_finding import feasibility_backoff
    >>> res = feasibility_backoff(
    ...     lambda v: v, 10, lambda r: r <= 7.5, min_value=0, value_tol=1e-3)
    >>> res.converged, res.used_backoff, round(res.value, 2)
    (True, True, 7.5)
    """
    if value_tol is None:
        value_tol = backoff_defaults['value_tol']
    if max_iters is None:
        max_iters = backoff_defaults['max_iters']
    if n_probe is None:
        n_probe = backoff_defaults['n_probe']

    if value_tol <= 0:
        msg = f'The backoff value tolerance must be positive, got {value_tol}.'
        logger.error(msg)
        raise ValueError(msg)
    if max_iters < 1:
        msg = f'The backoff iteration limit must be at least 1, got {max_iters}.'
        logger.error(msg)
        raise ValueError(msg)
    if n_probe < 3:
        msg = f'The number of backoff probes must be at least 3, got {n_probe}.'
        logger.error(msg)
        raise ValueError(msg)

    if max_value is None:
        max_value = target_value
    lo = float(min_value)
    hi = float(min(max_value, target_value))
    if not lo < hi:
        msg = (
            f'The backoff search range [{lo}, {hi}] has no width, check the '
            'minimum and maximum values against the target.'
        )
        raise domain_error(msg)

    result_hi = evaluate_at(hi)
    if is_feasible(result_hi):
        return BackoffResult(True, hi, result_hi, hi < target_value)

    if not enabled:
        logger.debug('Target value %s is infeasible, backoff disabled.', hi)
        return _NOT_CONVERGED

    feasible_value = None
    infeasible_above = hi
    for value in np.linspace(hi, lo, n_probe)[1:]:
        result = evaluate_at(value)
        if is_feasible(result):
            feasible_value = float(value)
            feasible_result = result
            break
        infeasible_above = float(value)

    if feasible_value is None:
        logger.debug(
            'No feasible value found between %s and %s after %d probes.',
            hi, lo, n_probe
        )
        return _NOT_CONVERGED

    for _ in range(max_iters):
        if infeasible_above - feasible_value <= value_tol:
            break
        mid = 0.5 * (feasible_value + infeasible_above)
        result = evaluate_at(mid)
        if is_feasible(result):
            feasible_value = mid
            feasible_result = result
        else:
            infeasible_above = mid

    logger.debug(
        'Backed off target value %s to feasible value %s.',
        target_value, feasible_value
    )
    return BackoffResult(True, feasible_value, feasible_result, True)
