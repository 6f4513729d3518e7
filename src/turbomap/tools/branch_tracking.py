# -*- coding: utf-8

"""Module for tracking solution branches across ordered conditions.

This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/tools/branch_tracking.py

SPDX-License-Identifier: MIT
"""

from collections import namedtuple

import numpy as np
from scipy.optimize import linear_sum_assignment

from turbomap.tools import logger

BranchPoint = namedtuple(
    'BranchPoint', ['x', 'condition_idx', 'local_idx', 'root', 'match_cost']
)
BranchEvent = namedtuple(
    'BranchEvent',
    ['kind', 'condition_idx', 'branch_id', 'local_idx', 'x', 'root']
)
TrackingResult = namedtuple(
    'TrackingResult', ['assignments', 'branches', 'branch_ids', 'events']
)

matching_methods = ['greedy', 'optimal']


def _greedy_pairs(costs, max_cost):
    """Repeatedly pick the globally cheapest admissible pair."""
    costs = np.array(costs, dtype=float)
    pairs = []
    while costs.size:
        admissible = np.isfinite(costs) & (costs <= max_cost)
        if not admissible.any():
            break
        masked = np.where(admissible, costs, np.inf)
        row, col = np.unravel_index(np.argmin(masked), masked.shape)
        pairs += [(int(row), int(col), float(costs[row, col]))]
        costs[row, :] = np.inf
        costs[:, col] = np.inf
    return pairs


def _optimal_pairs(costs, max_cost):
    """Minimum total cost matching of the admissible pairs."""
    costs = np.array(costs, dtype=float)
    admissible = np.isfinite(costs) & (costs <= max_cost)
    penalty = 1.0 + max_cost * (min(costs.shape) + 1)
    rows, cols = linear_sum_assignment(np.where(admissible, costs, penalty))
    pairs = [
        (int(r), int(c), float(costs[r, c]))
        for r, c in zip(rows, cols) if admissible[r, c]
    ]
    return sorted(pairs, key=lambda pair: pair[2])


def track_branches(
        x, roots_by_condition, distance, max_match_cost, allow_birth=True,
        allow_death=True, method='greedy'):
    r"""
    Assign persistent branch identities to roots of ordered conditions.

    Parameters
    ----------
    x : list
        Ordered condition values, e.g. the shaft speeds of a sweep.

    roots_by_condition : list
        :code:`roots_by_condition[i]` is the list of roots found at
        :code:`x[i]`.

    distance : function
        Nonnegative matching cost :code:`distance(previous_root, root)`.

    max_match_cost : float
        Maximum cost of an accepted match.

    allow_birth : boolean
        Start a new branch for roots without match, otherwise these are
        recorded as :code:`'unassigned'` events.

    allow_death : boolean
        Deactivate branches without match, otherwise they stay active with
        their last root.

    method : str
        :code:`'greedy'` (default) commits the globally cheapest admissible
        pair until none is left, :code:`'optimal'` uses a minimum total cost
        assignment of the admissible pairs.

    Returns
    -------
    result : TrackingResult
        - :code:`assignments[i][j]`: branch id of root j at condition i or
          :code:`None` if unassigned.
        - :code:`branches`: dict of branch id to list of
          :code:`BranchPoint`.
        - :code:`branch_ids`: sorted branch ids.
        - :code:`events`: list of :code:`BranchEvent` of kind
          :code:`'birth'`, :code:`'death'` or :code:`'unassigned'`.

    Note
    ----
    All roots of the first condition start branches without a birth event.
    A dead branch is never reactivated. Branch ids count up from 1 and are
    never reused.

    Example
    -------
    >>> from turbomap.tools.branch_tracking import track_branches
    >>> res = track_branches(
    ...     [0, 1, 2], [[1.0], [1.1, 5.0], [1.2]],
    ...     distance=lambda a, b: abs(a - b), max_match_cost=0.5)
    >>> res.assignments
    [[1], [1, 2], [1]]
    >>> [(e.kind, e.condition_idx, e.branch_id) for e in res.events]
    [('birth', 1, 2), ('death', 2, 2)]
    """
    if len(x) != len(roots_by_condition):
        msg = (
            'The number of condition values and root sets must be identical, '
            f'got {len(x)} and {len(roots_by_condition)}.'
        )
        logger.error(msg)
        raise ValueError(msg)
    if not max_match_cost >= 0:
        msg = f'The maximum match cost must be >= 0, got {max_match_cost}.'
        logger.error(msg)
        raise ValueError(msg)
    if method == 'greedy':
        match = _greedy_pairs
    elif method == 'optimal':
        match = _optimal_pairs
    else:
        msg = (
            f'Unknown matching method "{method}", available methods are '
            f'{", ".join(matching_methods)}.'
        )
        logger.error(msg)
        raise ValueError(msg)

    assignments = []
    branches = {}
    active = {}
    events = []
    next_id = 1

    for i, (xi, roots) in enumerate(zip(x, roots_by_condition)):
        roots = list(roots)
        assigned = [None] * len(roots)
        active_ids = sorted(active)

        matched_rows = set()
        matched_cols = set()
        if i > 0 and active_ids and roots:
            costs = [
                [float(distance(active[bid], root)) for root in roots]
                for bid in active_ids
            ]
            for row, col, cost in match(costs, float(max_match_cost)):
                bid = active_ids[row]
                assigned[col] = bid
                branches[bid] += [BranchPoint(xi, i, col, roots[col], cost)]
                active[bid] = roots[col]
                matched_rows.add(row)
                matched_cols.add(col)

        if allow_death:
            for row, bid in enumerate(active_ids):
                if row not in matched_rows:
                    events += [
                        BranchEvent('death', i, bid, None, xi, active[bid])
                    ]
                    del active[bid]

        for col, root in enumerate(roots):
            if col in matched_cols:
                continue
            if allow_birth or i == 0:
                bid = next_id
                next_id += 1
                assigned[col] = bid
                branches[bid] = [BranchPoint(xi, i, col, root, np.nan)]
                active[bid] = root
                if i > 0:
                    events += [BranchEvent('birth', i, bid, col, xi, root)]
            else:
                events += [BranchEvent('unassigned', i, None, col, xi, root)]

        assignments += [assigned]

    logger.debug(
        'Tracked %d branch(es) across %d condition(s) with %d event(s).',
        len(branches), len(assignments), len(events)
    )
    return TrackingResult(assignments, branches, sorted(branches), events)
