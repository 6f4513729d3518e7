# -*- coding: utf-8

"""Module of class AnalyticCompressorMap.

The analytic compressor map is a smooth, closed form alternative to a
tabulated map. The corrected flow is normalised between a surge and a choke
line, the pressure ratio follows a beta distribution shaped bump with
boundary penalties and the efficiency a downward parabola.


This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/maps/analytic.py

SPDX-License-Identifier: MIT
"""

import numpy as np

from turbomap.maps.base import MapDomain
from turbomap.maps.compressor import CompressorMap
from turbomap.tools import logger
from turbomap.tools.helpers import check_finite
from turbomap.tools.helpers import check_positive
from turbomap.tools.helpers import construction_error

default_parameters = {
    # surge line: ms0 + ms1 * (N - 1) + ms2 * (N - 1) ** 2
    'ms0': 0.55, 'ms1': 0.10, 'ms2': 0.0,
    # choke line: mc0 + mc1 * (N - 1) + mc2 * (N - 1) ** 2
    'mc0': 1.10, 'mc1': 0.12, 'mc2': 0.0,
    'sat_k': 40.0,
    # pressure ratio: 1 + Pi_max * N ** pr_speed_exp * shape(u)
    'Pi_max': 1.6, 'pr_speed_exp': 2.0,
    'alpha': 2.2, 'beta': 2.6,
    'eps_s_pr': 0.35, 'del_s_pr': 0.10,
    'eps_c_pr': 0.18, 'del_c_pr': 0.12,
    # efficiency
    'eta_max': 0.88, 'eta_speed_quad': 0.08,
    'u0': 0.52, 'u1': 0.05,
    'A0': 0.18, 'A_speed': 0.40,
    'Ds_eta': 0.05, 'del_s_eta': 0.12,
    'Dc_eta': 0.03, 'del_c_eta': 0.10,
    'eta_min': 0.50, 'eta_max_clip': 0.92,
    # reference state and speed normalisation
    'Tt_ref': 288.15, 'Pt_ref': 101325.0,
    'omega_ref': 1000.0, 'omega_norm_min': 0.6, 'omega_norm_max': 1.0
}

_positive_parameters = [
    'sat_k', 'del_s_pr', 'del_c_pr', 'del_s_eta', 'del_c_eta', 'omega_ref'
]


def softplus(x, k):
    r"""
    Return the smooth approximation of :math:`\max(x, 0)`.

    .. math::

        \text{softplus}(x, k) = \frac{\ln\left(1 + e^{k x}\right)}{k}
    """
    z = k * x
    if z > 40:
        return x
    elif z < -40:
        return 0.0
    return np.log1p(np.exp(z)) / k


def smooth_saturate(x, k):
    """Smoothly clamp x to the unit interval."""
    return x - softplus(x - 1, k) + softplus(-x, k)


def beta_bump(u, alpha, beta):
    u = min(max(u, 1e-12), 1 - 1e-12)
    return u ** (alpha - 1) * (1 - u) ** (beta - 1)


class AnalyticCompressorMap(CompressorMap):
    r"""
    Parametric compressor map on physical shaft speed and corrected flow.

    Parameters
    ----------
    **kwargs
        Shape parameters overriding :code:`default_parameters`.

    Note
    ----
    The shaft speed is normalised with the reference speed,
    :math:`N = \omega / \omega_{ref}`, the corrected flow with the surge and
    choke lines :math:`\dot{m}_s(N)` and :math:`\dot{m}_c(N)`:

    .. math::

        x = \frac{\dot{m}_{corr} - \dot{m}_s}{\dot{m}_c - \dot{m}_s}\\
        u = x - \text{softplus}(x - 1, k) + \text{softplus}(-x, k)

    Pressure ratio and efficiency are

    .. math::

        \Pi = 1 + \Pi_{max} \cdot N^{n} \cdot
        \frac{B(u)}{B(u^*)} \cdot
        \left(1 - \varepsilon_s e^{-u / \delta_s}\right) \cdot
        \left(1 - \varepsilon_c e^{-(1 - u) / \delta_c}\right)\\
        \eta = \eta_{max} - c_{\eta} (N-1)^2 -
        A_0 \left(1 + A_N (N-1)^2\right)\left(u - u_0 - u_1 (N-1)\right)^2
        - D_s e^{-u / \delta_{s,\eta}} - D_c e^{-(1-u) / \delta_{c,\eta}}

    with :math:`B(u) = u^{\alpha - 1} (1 - u)^{\beta - 1}`. The efficiency
    is clamped to :code:`(eta_min, eta_max_clip)`. Analytic maps use the
    physical shaft speed as corrected speed.

    Example
    -------
    >>> from turbomap.maps import AnalyticCompressorMap
    >>> cmp_map = AnalyticCompressorMap()
    >>> pr, eta = cmp_map.evaluate(1000, 0.8)
    >>> bool(1 < pr < 2.6 and 0.5 <= eta <= 0.92)
    True
    >>> AnalyticCompressorMap(Pi_max=2.0).Pi_max
    2.0
    """

    format = 'compressor_analytic_performance_map'

    def __init__(self, **kwargs):
        unknown = [key for key in kwargs if key not in default_parameters]
        if unknown:
            msg = (
                'Unknown parameter(s) for AnalyticCompressorMap: '
                f'{", ".join(unknown)}. Available parameters are '
                f'{", ".join(default_parameters)}.'
            )
            raise construction_error(msg)

        parameters = default_parameters.copy()
        parameters.update(kwargs)
        super().__init__(parameters['Tt_ref'], parameters['Pt_ref'])

        for key, value in parameters.items():
            if key in ['Tt_ref', 'Pt_ref']:
                continue
            if key in _positive_parameters:
                value = check_positive(key, value)
            else:
                value = check_finite(key, value)
            setattr(self, key, value)

        if self.eta_min > self.eta_max_clip:
            msg = (
                f'The efficiency clamp eta_min={self.eta_min} must not exceed '
                f'eta_max_clip={self.eta_max_clip}.'
            )
            raise construction_error(msg)

        self._bump_norm = max(self._beta_bump_norm(), np.finfo(float).eps)
        logger.debug('Created analytic compressor map.')

    def parameters(self):
        """Return all shape parameters as dictionary."""
        data = {
            key: getattr(self, key) for key in default_parameters
            if key not in ['Tt_ref', 'Pt_ref']
        }
        data['Tt_ref'] = self.Tt_ref
        data['Pt_ref'] = self.Pt_ref
        return data

    def corrected_speed(self, omega, Tt_in):
        return omega

    def _omega_norm(self, omega):
        return omega / self.omega_ref

    def mdot_surge(self, omega):
        d = self._omega_norm(omega) - 1
        return self.ms0 + self.ms1 * d + self.ms2 * d * d

    def mdot_choke(self, omega):
        d = self._omega_norm(omega) - 1
        return self.mc0 + self.mc1 * d + self.mc2 * d * d

    def normalized_flow(self, omega, mdot_corr):
        """Return the saturated flow coordinate between surge and choke."""
        ms = self.mdot_surge(omega)
        delta = self.mdot_choke(omega) - ms
        if abs(delta) <= 1e-12:
            delta = 1e-12
        return smooth_saturate((mdot_corr - ms) / delta, self.sat_k)

    def _beta_bump_norm(self):
        if self.alpha > 1 and self.beta > 1:
            u_star = (self.alpha - 1) / (self.alpha + self.beta - 2)
            return beta_bump(u_star, self.alpha, self.beta)
        return max(
            beta_bump(u, self.alpha, self.beta)
            for u in np.linspace(1e-6, 1 - 1e-6, 1001)
        )

    def _pr_shape(self, u):
        bump = beta_bump(u, self.alpha, self.beta) / self._bump_norm
        p_surge = 1 - self.eps_s_pr * np.exp(-u / self.del_s_pr)
        p_choke = 1 - self.eps_c_pr * np.exp(-(1 - u) / self.del_c_pr)
        return bump * p_surge * p_choke

    def evaluate(self, speed_corr, flow_corr):
        N = self._omega_norm(speed_corr)
        d = N - 1
        u = self.normalized_flow(speed_corr, flow_corr)

        pr = 1 + self.Pi_max * max(N, 0) ** self.pr_speed_exp * (
            self._pr_shape(u))

        eta_peak = self.eta_max - self.eta_speed_quad * d ** 2
        u_star = self.u0 + self.u1 * d
        A = self.A0 * (1 + self.A_speed * d ** 2)
        eta = eta_peak - A * (u - u_star) ** 2
        eta -= self.Ds_eta * np.exp(-u / self.del_s_eta)
        eta -= self.Dc_eta * np.exp(-(1 - u) / self.del_c_eta)
        eta = min(max(eta, self.eta_min), self.eta_max_clip)
        return pr, eta

    def domain(self):
        omega_min = min(self.omega_norm_min, self.omega_norm_max)
        omega_max = max(self.omega_norm_min, self.omega_norm_max)
        omega_min *= self.omega_ref
        omega_max *= self.omega_ref
        flow_min = min(self.mdot_surge(omega_min), self.mdot_surge(omega_max))
        flow_max = max(self.mdot_choke(omega_min), self.mdot_choke(omega_max))
        return MapDomain(
            (omega_min, omega_max), (flow_min, flow_max),
            self.mdot_surge, self.mdot_choke
        )
