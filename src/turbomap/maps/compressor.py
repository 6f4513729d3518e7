# -*- coding: utf-8

"""Module of class CompressorMap.


This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/maps/compressor.py

SPDX-License-Identifier: MIT
"""

from collections import namedtuple

import numpy as np

from turbomap.maps.base import MapDomain
from turbomap.maps.base import PerformanceMap
from turbomap.tools import logger
from turbomap.tools.characteristics import TableMap
from turbomap.tools.characteristics import interpolation_map
from turbomap.tools.helpers import construction_error

CompressorMapPoint = namedtuple(
    'CompressorMapPoint', ['omega_corr', 'mdot_corr', 'pr', 'eta']
)


class CompressorMap(PerformanceMap):
    r"""
    Base class of compressor performance maps.

    A compressor map returns the total pressure ratio
    :math:`\Pi = p_{t,out} / p_{t,in}` and the isentropic efficiency
    :math:`\eta` as functions of corrected speed and corrected flow.
    """

    family = 'compressor'
    y_label = 'corrected flow'

    def evaluate(self, speed_corr, flow_corr):
        """Return pressure ratio and efficiency at corrected coordinates."""
        self._not_implemented()

    def evaluate_from_stagnation(self, omega, mdot, Tt_in, Pt_in):
        r"""
        Evaluate the map from physical shaft speed and mass flow.

        Parameters
        ----------
        omega : float
            Shaft speed.

        mdot : float
            Mass flow in kg/s.

        Tt_in : float
            Inlet total temperature in K.

        Pt_in : float
            Inlet total pressure in Pa.

        Returns
        -------
        point : CompressorMapPoint
            Corrected speed, corrected flow, pressure ratio and efficiency.
        """
        omega_corr = self.corrected_speed(omega, Tt_in)
        mdot_corr = self.corrected_flow(mdot, Tt_in, Pt_in)
        pr, eta = self.evaluate(omega_corr, mdot_corr)
        return CompressorMapPoint(omega_corr, mdot_corr, pr, eta)


class TabulatedCompressorMap(CompressorMap):
    r"""
    Compressor map from tables on a corrected speed and flow grid.

    Parameters
    ----------
    Tt_ref : float
        Reference total temperature in K.

    Pt_ref : float
        Reference total pressure in Pa.

    speed_grid : ndarray
        Strictly increasing corrected speed values.

    flow_grid : ndarray
        Strictly increasing corrected flow values.

    pr_table : ndarray
        Pressure ratio table of shape :code:`(len(speed_grid),
        len(flow_grid))`.

    eta_table : ndarray
        Efficiency table of the same shape.

    interpolation : str
        :code:`'bilinear'` (default) or :code:`'bicubic'`.

    Example
    -------
    >>> from turbomap.maps import TabulatedCompressorMap
    >>> cmp_map = TabulatedCompressorMap(
    ...     288.15, 101325, [0.6, 1.0], [12, 20],
    ...     [[1.35, 1.70], [1.70, 2.25]], [[0.74, 0.75], [0.76, 0.79]])
    >>> [round(float(v), 4) for v in cmp_map.evaluate(0.8, 16)]
    [1.75, 0.76]
    """

    format = 'compressor_performance_map'

    def __init__(
            self, Tt_ref, Pt_ref, speed_grid, flow_grid, pr_table, eta_table,
            interpolation='bilinear'):
        super().__init__(Tt_ref, Pt_ref)
        self.pr_map = interpolation_map(
            interpolation, speed_grid, flow_grid, pr_table)
        self.eta_map = interpolation_map(
            interpolation, speed_grid, flow_grid, eta_table)
        logger.debug(
            'Created tabulated compressor map on %dx%d %s grid.',
            len(self.speed_grid), len(self.flow_grid), interpolation
        )

    @classmethod
    def from_tables(cls, Tt_ref, Pt_ref, pr_map, eta_map):
        """Create the map from two lookup tables on identical grids."""
        _check_table_pair(pr_map, eta_map, 'pr_map', 'eta_map')
        return cls(
            Tt_ref, Pt_ref, pr_map.xgrid, pr_map.ygrid, pr_map.table,
            eta_map.table, interpolation=pr_map.interpolation
        )

    @property
    def speed_grid(self):
        return self.pr_map.xgrid

    @property
    def flow_grid(self):
        return self.pr_map.ygrid

    @property
    def pr_table(self):
        return self.pr_map.table

    @property
    def eta_table(self):
        return self.eta_map.table

    @property
    def interpolation(self):
        return self.pr_map.interpolation

    def evaluate(self, speed_corr, flow_corr):
        return (
            self.pr_map.evaluate(speed_corr, flow_corr),
            self.eta_map.evaluate(speed_corr, flow_corr)
        )

    def domain(self):
        flow_min = float(self.flow_grid[0])
        flow_max = float(self.flow_grid[-1])
        return MapDomain(
            (self.speed_grid[0], self.speed_grid[-1]),
            (flow_min, flow_max),
            lambda speed: flow_min,
            lambda speed: flow_max
        )


def _check_table_pair(first, second, first_name, second_name):
    for table, name in [(first, first_name), (second, second_name)]:
        if not isinstance(table, TableMap):
            msg = f'The {name} must be a lookup table, got {type(table)}.'
            raise construction_error(msg)
    if (
            not np.array_equal(first.xgrid, second.xgrid)
            or not np.array_equal(first.ygrid, second.ygrid)):
        msg = f'The grids of {first_name} and {second_name} must match.'
        raise construction_error(msg)
    if first.interpolation != second.interpolation:
        msg = (
            f'The interpolation of {first_name} ({first.interpolation}) and '
            f'{second_name} ({second.interpolation}) must match.'
        )
        raise construction_error(msg)
