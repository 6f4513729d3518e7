# -*- coding: utf-8

"""Module for the residual equations of a turbomachine operating point.

An operating point is described by the fixed boundary values inlet total
pressure, inlet total enthalpy, outlet total pressure and shaft speed and by
the unknowns mass flow, outlet total enthalpy and shaft torque. Three
residuals close the system: the map relation, the efficiency definition and
the power balance.


This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/solvers/residuals.py

SPDX-License-Identifier: MIT
"""

from collections import namedtuple

from turbomap.tools import logger
from turbomap.tools.helpers import domain_error

ResidualScales = namedtuple('ResidualScales', ['first', 'enthalpy', 'power'])
ResidualScales.__doc__ = (
    'Positive normalisers of the map (pressure or mass flow), efficiency '
    '(enthalpy) and power residual.'
)


def _override(name, value, default):
    if value is None:
        return default
    if not value > 0:
        msg = f'The residual scale {name} must be > 0, got {value}.'
        logger.error(msg)
        raise ValueError(msg)
    return value


def residual_scales(
        pt_in, ht_in, pt_out, ht_out, mdot, omega, tau, family='compressor',
        first_scale=None, enthalpy_scale=None, power_scale=None):
    r"""
    Return the residual scales of an operating point.

    Parameters
    ----------
    family : str
        :code:`'compressor'` or :code:`'turbine'`, selects the default of
        the first scale.

    first_scale : float
        Override of the pressure scale (compressor) or mass flow scale
        (turbine).

    enthalpy_scale : float
        Override of the enthalpy scale.

    power_scale : float
        Override of the power scale.

    Returns
    -------
    scales : ResidualScales
        The scales, every override must be positive.

    Note
    ----
    The defaults are

    .. math::

        s_p = \max\left(|p_{t,in}|, |p_{t,out}|, 1\right)\\
        s_{\dot{m}} = \max\left(|\dot{m}|, 1\right)\\
        s_h = \max\left(|h_{t,in}|, |h_{t,out}|, 1\right)\\
        s_P = \max\left(|\tau \cdot \omega|,
        |\dot{m} \cdot (h_{t,out} - h_{t,in})|, 1\right)

    Example
    -------
    >>> from turbomap.solvers.residuals import residual_scales
    >>> residual_scales(1e5, 3e5, 2e5, 3.5e5, 15, 12000, 600)
    ResidualScales(first=200000.0, enthalpy=350000.0, power=7200000.0)
    """
    if family == 'compressor':
        first = max(abs(pt_in), abs(pt_out), 1.0)
    elif family == 'turbine':
        first = max(abs(mdot), 1.0)
    else:
        msg = (
            f'Unknown machine family "{family}", available families are '
            'compressor, turbine.'
        )
        logger.error(msg)
        raise ValueError(msg)

    enthalpy = max(abs(ht_in), abs(ht_out), 1.0)
    power = max(abs(tau * omega), abs(mdot * (ht_out - ht_in)), 1.0)
    return ResidualScales(
        float(_override('first_scale', first_scale, first)),
        float(_override('enthalpy_scale', enthalpy_scale, enthalpy)),
        float(_override('power_scale', power_scale, power))
    )


def _check_eta(eta, family):
    if not eta > 0:
        msg = (
            f'The {family} map efficiency must be > 0 for the residual '
            f'evaluation, got {eta}.'
        )
        raise domain_error(msg)


def compressor_residuals(
        cmp_map, eos, pt_in, ht_in, pt_out, ht_out, mdot, omega, tau):
    r"""
    Return the raw residuals of a compressor operating point.

    .. math::

        R_p = p_{t,out} - \Pi \cdot p_{t,in}\\
        R_\eta = \eta \cdot (h_{t,out} - h_{t,in}) - (h_{2s} - h_{t,in})\\
        R_P = \tau \cdot \omega - \dot{m} \cdot (h_{t,out} - h_{t,in})

    The map is evaluated at the corrected coordinates of the inlet state,
    :math:`h_{2s}` is the isentropic enthalpy at the outlet pressure.
    """
    Tt_in = eos.temperature(pt_in, ht_in)
    point = cmp_map.evaluate_from_stagnation(omega, mdot, Tt_in, pt_in)
    _check_eta(point.eta, 'compressor')
    h2s = eos.isentropic_enthalpy(pt_in, ht_in, pt_out)
    return (
        pt_out - point.pr * pt_in,
        point.eta * (ht_out - ht_in) - (h2s - ht_in),
        tau * omega - mdot * (ht_out - ht_in)
    )


def turbine_residuals(
        trb_map, eos, pt_in, ht_in, pt_out, ht_out, mdot, omega, tau):
    r"""
    Return the raw residuals of a turbine operating point.

    .. math::

        R_{\dot{m}} = \dot{m} - \dot{m}_{map}\\
        R_\eta = (h_{t,in} - h_{t,out}) - \eta \cdot (h_{t,in} - h_{2s})\\
        R_P = \tau \cdot \omega - \dot{m} \cdot (h_{t,out} - h_{t,in})

    :math:`\dot{m}_{map}` is the physical mass flow of the corrected flow
    predicted by the map at the expansion ratio :math:`p_{t,in}/p_{t,out}`.
    """
    Tt_in = eos.temperature(pt_in, ht_in)
    point = trb_map.evaluate_from_stagnation(omega, pt_in, pt_out, Tt_in)
    _check_eta(point.eta, 'turbine')
    h2s = eos.isentropic_enthalpy(pt_in, ht_in, pt_out)
    return (
        mdot - point.mdot,
        (ht_in - ht_out) - point.eta * (ht_in - h2s),
        tau * omega - mdot * (ht_out - ht_in)
    )


def _scaled(residuals, scales):
    return (
        residuals[0] / scales.first,
        residuals[1] / scales.enthalpy,
        residuals[2] / scales.power
    )


def compressor_residuals_scaled(
        cmp_map, eos, pt_in, ht_in, pt_out, ht_out, mdot, omega, tau,
        pressure_scale=None, enthalpy_scale=None, power_scale=None):
    """Return the compressor residuals divided by their scales."""
    scales = residual_scales(
        pt_in, ht_in, pt_out, ht_out, mdot, omega, tau, family='compressor',
        first_scale=pressure_scale, enthalpy_scale=enthalpy_scale,
        power_scale=power_scale
    )
    return _scaled(
        compressor_residuals(
            cmp_map, eos, pt_in, ht_in, pt_out, ht_out, mdot, omega, tau),
        scales
    )


def turbine_residuals_scaled(
        trb_map, eos, pt_in, ht_in, pt_out, ht_out, mdot, omega, tau,
        massflow_scale=None, enthalpy_scale=None, power_scale=None):
    """Return the turbine residuals divided by their scales."""
    scales = residual_scales(
        pt_in, ht_in, pt_out, ht_out, mdot, omega, tau, family='turbine',
        first_scale=massflow_scale, enthalpy_scale=enthalpy_scale,
        power_scale=power_scale
    )
    return _scaled(
        turbine_residuals(
            trb_map, eos, pt_in, ht_in, pt_out, ht_out, mdot, omega, tau),
        scales
    )


_residual_functions = {
    'compressor': compressor_residuals,
    'turbine': turbine_residuals
}


def turbomachine_residuals(
        perf_map, eos, pt_in, ht_in, pt_out, ht_out, mdot, omega, tau):
    """Return the raw residuals for the family of the map."""
    if perf_map.family not in _residual_functions:
        msg = (
            f'No residual equations available for maps of type '
            f'{type(perf_map).__name__}.'
        )
        logger.error(msg)
        raise TypeError(msg)
    return _residual_functions[perf_map.family](
        perf_map, eos, pt_in, ht_in, pt_out, ht_out, mdot, omega, tau)


def turbomachine_residuals_scaled(
        perf_map, eos, pt_in, ht_in, pt_out, ht_out, mdot, omega, tau,
        first_scale=None, enthalpy_scale=None, power_scale=None):
    """Return the scaled residuals for the family of the map."""
    residuals = turbomachine_residuals(
        perf_map, eos, pt_in, ht_in, pt_out, ht_out, mdot, omega, tau)
    scales = residual_scales(
        pt_in, ht_in, pt_out, ht_out, mdot, omega, tau,
        family=perf_map.family, first_scale=first_scale,
        enthalpy_scale=enthalpy_scale, power_scale=power_scale
    )
    return _scaled(residuals, scales)
