# -*- coding: utf-8

"""Module of class PerformanceMap.

The performance maps of compressors and turbines are evaluated on corrected
coordinates. Corrected speed and corrected flow non-dimensionalise the shaft
speed and the mass flow with the inlet stagnation state and a reference
state owned by the map.


This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/maps/base.py

SPDX-License-Identifier: MIT
"""

import numpy as np

from turbomap.tools import logger
from turbomap.tools.helpers import check_positive


def corrected_speed(omega, Tt_in, Tt_ref):
    r"""
    Return the corrected shaft speed.

    .. math::

        \omega_{corr} = \frac{\omega}{\sqrt{T_{t,in} / T_{t,ref}}}
    """
    return omega / np.sqrt(Tt_in / Tt_ref)


def corrected_flow(mdot, Tt_in, Pt_in, Tt_ref, Pt_ref):
    r"""
    Return the corrected mass flow.

    .. math::

        \dot{m}_{corr} = \dot{m} \cdot \frac{\sqrt{T_{t,in} / T_{t,ref}}}
        {p_{t,in} / p_{t,ref}}
    """
    return mdot * np.sqrt(Tt_in / Tt_ref) / (Pt_in / Pt_ref)


def physical_flow(mdot_corr, Tt_in, Pt_in, Tt_ref, Pt_ref):
    r"""
    Return the physical mass flow of a corrected mass flow.

    .. math::

        \dot{m} = \dot{m}_{corr} \cdot \frac{p_{t,in} / p_{t,ref}}
        {\sqrt{T_{t,in} / T_{t,ref}}}
    """
    return mdot_corr * (Pt_in / Pt_ref) / np.sqrt(Tt_in / Tt_ref)


class ReferenceState:
    r"""
    Reference stagnation state of a performance map.

    Parameters
    ----------
    total_temperature : float
        Reference total temperature in K, must be positive.

    total_pressure : float
        Reference total pressure in Pa, must be positive.
    """

    def __init__(self, total_temperature, total_pressure):
        self._total_temperature = check_positive(
            'Tt_ref', total_temperature)
        self._total_pressure = check_positive('Pt_ref', total_pressure)

    @property
    def total_temperature(self):
        return self._total_temperature

    @property
    def total_pressure(self):
        return self._total_pressure

    def __eq__(self, other):
        return (
            isinstance(other, ReferenceState)
            and self.total_temperature == other.total_temperature
            and self.total_pressure == other.total_pressure
        )

    def __repr__(self):
        return (
            f'ReferenceState(total_temperature={self.total_temperature}, '
            f'total_pressure={self.total_pressure})'
        )


class MapDomain:
    r"""
    Valid corrected coordinates of a performance map.

    Parameters
    ----------
    speed_range : tuple
        Range of corrected speed :code:`(min, max)`.

    y_range : tuple
        Overall range of the second map coordinate (corrected flow for
        compressors, pressure ratio for turbines).

    lower : function
        Speed dependent lower bound of the second coordinate (surge line of
        a compressor).

    upper : function
        Speed dependent upper bound of the second coordinate (choke line of
        a compressor).
    """

    def __init__(self, speed_range, y_range, lower, upper):
        self.speed_range = (float(speed_range[0]), float(speed_range[1]))
        self.y_range = (float(y_range[0]), float(y_range[1]))
        self.lower = lower
        self.upper = upper

    def bounds(self, speed):
        """Return the ordered bounds of the second coordinate at speed."""
        low = float(self.lower(speed))
        high = float(self.upper(speed))
        return min(low, high), max(low, high)


class PerformanceMap:
    r"""
    Base class of all performance maps.

    Parameters
    ----------
    Tt_ref : float
        Reference total temperature in K.

    Pt_ref : float
        Reference total pressure in Pa.

    Note
    ----
    Maps are read-only after construction and can be evaluated from several
    threads concurrently.
    """

    family = None
    y_label = None
    format = None

    def __init__(self, Tt_ref, Pt_ref):
        self.reference = ReferenceState(Tt_ref, Pt_ref)

    @property
    def Tt_ref(self):
        return self.reference.total_temperature

    @property
    def Pt_ref(self):
        return self.reference.total_pressure

    def _not_implemented(self):
        msg = f'Method is not implemented for {self.__class__.__name__}.'
        logger.error(msg)
        raise NotImplementedError(msg)

    def corrected_speed(self, omega, Tt_in):
        return corrected_speed(omega, Tt_in, self.Tt_ref)

    def corrected_flow(self, mdot, Tt_in, Pt_in):
        return corrected_flow(mdot, Tt_in, Pt_in, self.Tt_ref, self.Pt_ref)

    def physical_flow(self, mdot_corr, Tt_in, Pt_in):
        return physical_flow(mdot_corr, Tt_in, Pt_in, self.Tt_ref, self.Pt_ref)

    def evaluate(self, speed_corr, y):
        self._not_implemented()

    def domain(self):
        self._not_implemented()

    def get_domain_errors(self, speed_corr, y, c):
        r"""
        Prompt warning messages, if a point is outside of the map domain.

        Parameters
        ----------
        speed_corr : float
            Corrected speed.

        y : float
            Second map coordinate, corrected flow or pressure ratio.

        c : str
            Label of the point.

        Returns
        -------
        inside : boolean
            :code:`True` if the point lies within the domain.
        """
        domain = self.domain()
        inside = True
        for value, (low, high), name in [
                (speed_corr, domain.speed_range, 'speed'),
                (y, domain.bounds(speed_corr), self.y_label)]:
            if value > high:
                logger.warning(
                    'Point above map domain: %s=%.4g with maximum of %.4g '
                    'at %s.', name, value, high, c
                )
                inside = False
            elif value < low:
                logger.warning(
                    'Point below map domain: %s=%.4g with minimum of %.4g '
                    'at %s.', name, value, low, c
                )
                inside = False
        return inside

    def get_attr(self, key):
        r"""
        Get the value of an attribute.

        Parameters
        ----------
        key : str
            Object attribute to get value of.

        Returns
        -------
        value : object
            Value of object attribute key.
        """
        if hasattr(self, key):
            return getattr(self, key)
        else:
            msg = f'{self.__class__.__name__} has no attribute "{key}".'
            logger.error(msg)
            raise KeyError(msg)
