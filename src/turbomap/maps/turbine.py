# -*- coding: utf-8

"""Module of class TurbineMap.


This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/maps/turbine.py

SPDX-License-Identifier: MIT
"""

from collections import namedtuple

from turbomap.maps.base import MapDomain
from turbomap.maps.base import PerformanceMap
from turbomap.maps.compressor import _check_table_pair
from turbomap.tools import logger
from turbomap.tools.characteristics import interpolation_map
from turbomap.tools.helpers import domain_error

TurbineMapPoint = namedtuple(
    'TurbineMapPoint', ['omega_corr', 'pr_turb', 'mdot_corr', 'mdot', 'eta']
)


class TurbineMap(PerformanceMap):
    r"""
    Base class of turbine performance maps.

    A turbine map returns the corrected flow and the isentropic efficiency
    as functions of corrected speed and the expansion ratio
    :math:`\Pi_{turb} = p_{t,in} / p_{t,out}`.
    """

    family = 'turbine'
    y_label = 'pressure ratio'

    def evaluate(self, speed_corr, pr_turb):
        """Return corrected flow and efficiency at corrected coordinates."""
        self._not_implemented()

    def evaluate_from_stagnation(self, omega, Pt_in, Pt_out, Tt_in):
        r"""
        Evaluate the map from physical shaft speed and total pressures.

        Parameters
        ----------
        omega : float
            Shaft speed.

        Pt_in : float
            Inlet total pressure in Pa.

        Pt_out : float
            Outlet total pressure in Pa, must be positive.

        Tt_in : float
            Inlet total temperature in K.

        Returns
        -------
        point : TurbineMapPoint
            Corrected speed, expansion ratio, corrected and physical flow
            and efficiency.
        """
        if not Pt_out > 0:
            msg = (
                'The outlet total pressure of a turbine must be positive, got '
                f'{Pt_out}.'
            )
            raise domain_error(msg)
        pr_turb = Pt_in / Pt_out
        omega_corr = self.corrected_speed(omega, Tt_in)
        mdot_corr, eta = self.evaluate(omega_corr, pr_turb)
        mdot = self.physical_flow(mdot_corr, Tt_in, Pt_in)
        return TurbineMapPoint(omega_corr, pr_turb, mdot_corr, mdot, eta)


class TabulatedTurbineMap(TurbineMap):
    r"""
    Turbine map from tables on a corrected speed and expansion ratio grid.

    Parameters
    ----------
    Tt_ref : float
        Reference total temperature in K.

    Pt_ref : float
        Reference total pressure in Pa.

    speed_grid : ndarray
        Strictly increasing corrected speed values.

    pr_grid : ndarray
        Strictly increasing expansion ratio values
        :math:`p_{t,in} / p_{t,out}`.

    flow_table : ndarray
        Corrected flow table of shape :code:`(len(speed_grid),
        len(pr_grid))`.

    eta_table : ndarray
        Efficiency table of the same shape.

    interpolation : str
        :code:`'bilinear'` (default) or :code:`'bicubic'`.
    """

    format = 'turbine_performance_map'

    def __init__(
            self, Tt_ref, Pt_ref, speed_grid, pr_grid, flow_table, eta_table,
            interpolation='bilinear'):
        super().__init__(Tt_ref, Pt_ref)
        self.mdot_corr_map = interpolation_map(
            interpolation, speed_grid, pr_grid, flow_table)
        self.eta_map = interpolation_map(
            interpolation, speed_grid, pr_grid, eta_table)
        logger.debug(
            'Created tabulated turbine map on %dx%d %s grid.',
            len(self.speed_grid), len(self.pr_grid), interpolation
        )

    @classmethod
    def from_tables(cls, Tt_ref, Pt_ref, mdot_corr_map, eta_map):
        """Create the map from two lookup tables on identical grids."""
        _check_table_pair(mdot_corr_map, eta_map, 'mdot_corr_map', 'eta_map')
        return cls(
            Tt_ref, Pt_ref, mdot_corr_map.xgrid, mdot_corr_map.ygrid,
            mdot_corr_map.table, eta_map.table,
            interpolation=mdot_corr_map.interpolation
        )

    @property
    def speed_grid(self):
        return self.mdot_corr_map.xgrid

    @property
    def pr_grid(self):
        return self.mdot_corr_map.ygrid

    @property
    def flow_table(self):
        return self.mdot_corr_map.table

    @property
    def eta_table(self):
        return self.eta_map.table

    @property
    def interpolation(self):
        return self.mdot_corr_map.interpolation

    def evaluate(self, speed_corr, pr_turb):
        return (
            self.mdot_corr_map.evaluate(speed_corr, pr_turb),
            self.eta_map.evaluate(speed_corr, pr_turb)
        )

    def domain(self):
        pr_min = float(self.pr_grid[0])
        pr_max = float(self.pr_grid[-1])
        return MapDomain(
            (self.speed_grid[0], self.speed_grid[-1]),
            (pr_min, pr_max),
            lambda speed: pr_min,
            lambda speed: pr_max
        )
