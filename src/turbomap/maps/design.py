# -*- coding: utf-8

"""Module for compiling compressor design descriptions to analytic maps.

Two levels of description are available. A :py:class:`CompressorSpec`
describes the behaviour of the map (design pressure ratio and efficiency,
flow range, surge and choke behaviour, speed sensitivity). A
:py:class:`CompressorDesign` describes the machine with design knobs (stage
count and loading, tip Mach number, clearance, ...) and is compiled to a
spec first.


This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/maps/design.py

SPDX-License-Identifier: MIT
"""

import numpy as np

from turbomap.maps.analytic import AnalyticCompressorMap
from turbomap.tools import logger
from turbomap.tools.helpers import check_finite
from turbomap.tools.helpers import construction_error

compressor_kinds = ['axial', 'centrifugal']


def _clamp01(x):
    return min(max(x, 0.0), 1.0)


def _lerp(a, b, t):
    return a + (b - a) * t


def _check_kind(kind):
    if kind not in compressor_kinds:
        msg = (
            f'Unknown compressor kind "{kind}", available kinds are '
            f'{", ".join(compressor_kinds)}.'
        )
        raise construction_error(msg)
    return kind


class _ParameterSet:

    format = None
    defaults = {}

    def __init__(self, **kwargs):
        unknown = [key for key in kwargs if key not in self.defaults]
        if unknown:
            msg = (
                f'Unknown parameter(s) for {self.__class__.__name__}: '
                f'{", ".join(unknown)}. Available parameters are '
                f'{", ".join(self.defaults)}.'
            )
            raise construction_error(msg)
        parameters = self.defaults.copy()
        parameters.update(kwargs)
        for key, value in parameters.items():
            setattr(self, key, self._convert(key, value))

    def _convert(self, key, value):
        return check_finite(key, value)

    def parameters(self):
        """Return all parameters as dictionary."""
        return {key: getattr(self, key) for key in self.defaults}

    def __eq__(self, other):
        return (
            type(self) is type(other)
            and self.parameters() == other.parameters()
        )

    def __repr__(self):
        values = ', '.join(f'{k}={v!r}' for k, v in self.parameters().items())
        return f'{self.__class__.__name__}({values})'


class CompressorSpec(_ParameterSet):
    r"""
    Behavioural envelope of a compressor.

    Parameters
    ----------
    pr_design : float
        Design total pressure ratio, default 3.0.

    eta_design : float
        Design isentropic efficiency, default 0.88.

    flow_range : float
        Corrected flow span between surge and choke around design speed,
        default 0.55.

    surge_margin : float
        Standoff from surge at design operation, default 0.60. Higher values
        soften the surge side penalties.

    choke_sharpness : float
        Rate of degradation near choke, default 0.40.

    speed_sensitivity : float
        Strength of the speed dependence of the map, default 0.50.

    omega_ref : float
        Reference shaft speed of the compiled map, default 1000.
    """

    format = 'compressor_spec'
    defaults = {
        'pr_design': 3.0,
        'eta_design': 0.88,
        'flow_range': 0.55,
        'surge_margin': 0.60,
        'choke_sharpness': 0.40,
        'speed_sensitivity': 0.50,
        'omega_ref': 1000.0
    }


class CompressorDesign(_ParameterSet):
    r"""
    Design knobs of a compressor.

    Parameters
    ----------
    kind : str
        :code:`'axial'` (default) or :code:`'centrifugal'`.

    stage_count : int
        Number of stages of an axial machine, default 8.

    stage_loading : float
        Stage loading coefficient in [0, 1], default 0.55.

    tip_mach_design : float
        Design tip Mach number in [0, 1], default 0.50.

    diffusion_aggressiveness : float
        Default 0.50.

    clearance_fraction : float
        Default 0.20.

    diffuser_quality : float
        Default 0.60.

    variable_geometry : float
        Default 0.30.

    reynolds_quality : float
        Default 0.80.
    """

    format = 'compressor_design'
    defaults = {
        'kind': 'axial',
        'stage_count': 8,
        'stage_loading': 0.55,
        'tip_mach_design': 0.50,
        'diffusion_aggressiveness': 0.50,
        'clearance_fraction': 0.20,
        'diffuser_quality': 0.60,
        'variable_geometry': 0.30,
        'reynolds_quality': 0.80
    }

    def _convert(self, key, value):
        if key == 'kind':
            return _check_kind(value)
        elif key == 'stage_count':
            if int(value) != value:
                msg = f'The stage_count must be an integer, got {value}.'
                raise construction_error(msg)
            return int(value)
        return super()._convert(key, value)


def compile_compressor_map(spec, kind='axial'):
    r"""
    Compile a behavioural envelope to analytic map coefficients.

    Parameters
    ----------
    spec : CompressorSpec
        Behavioural envelope.

    kind : str
        :code:`'axial'` (default) or :code:`'centrifugal'`.

    Returns
    -------
    cmp_map : AnalyticCompressorMap
        The compiled map.

    Example
    -------
    >>> from turbomap.maps import CompressorSpec, compile_compressor_map
    >>> cmp_map = compile_compressor_map(CompressorSpec(pr_design=2.5))
    >>> cmp_map.Pi_max, round(cmp_map.ms0, 6), round(cmp_map.mc0, 6)
    (1.5, 0.725, 1.275)
    """
    _check_kind(kind)
    axial = kind == 'axial'

    pr_design = max(spec.pr_design, 1.05)
    eta_design = min(max(spec.eta_design, 0.65), 0.92)
    flow_range = min(max(spec.flow_range, 0.15), 0.85)
    surge_margin = _clamp01(spec.surge_margin)
    choke_sharpness = _clamp01(spec.choke_sharpness)
    speed_sensitivity = _clamp01(spec.speed_sensitivity)
    omega_ref = max(spec.omega_ref, np.finfo(float).eps)

    if axial:
        ms1 = _lerp(0.06, 0.14, 1 - surge_margin)
        mc1 = _lerp(0.08, 0.16, choke_sharpness)
        pr_speed_exp = _lerp(1.8, 2.2, speed_sensitivity)
        peak_u = _lerp(0.55, 0.48, choke_sharpness)
        kappa_base = 6.0
        eps_s_pr = _lerp(0.50, 0.20, surge_margin)
        del_s_pr = _lerp(0.06, 0.14, surge_margin)
        eps_c_pr = _lerp(0.12, 0.35, choke_sharpness)
        del_c_pr = _lerp(0.14, 0.06, choke_sharpness)
        eta_speed_quad = 0.06 + 0.04 * speed_sensitivity
        u0 = 0.52
        u1 = _lerp(0.02, 0.08, speed_sensitivity)
        width_base = 0.18
        A_speed = 0.35
        Ds_eta = _lerp(0.07, 0.03, surge_margin)
        del_s_eta = _lerp(0.08, 0.14, surge_margin)
        Dc_eta = _lerp(0.02, 0.06, choke_sharpness)
        del_c_eta = _lerp(0.12, 0.07, choke_sharpness)
        sat_k = 50.0
    else:
        ms1 = _lerp(0.05, 0.12, 1 - surge_margin)
        mc1 = _lerp(0.10, 0.20, choke_sharpness)
        pr_speed_exp = _lerp(2.4, 3.0, speed_sensitivity)
        peak_u = _lerp(0.52, 0.44, choke_sharpness)
        kappa_base = 8.0
        eps_s_pr = _lerp(0.60, 0.25, surge_margin)
        del_s_pr = _lerp(0.05, 0.12, surge_margin)
        eps_c_pr = _lerp(0.20, 0.45, choke_sharpness)
        del_c_pr = _lerp(0.10, 0.05, choke_sharpness)
        eta_speed_quad = 0.08 + 0.06 * speed_sensitivity
        u0 = 0.48
        u1 = _lerp(0.05, 0.12, speed_sensitivity)
        width_base = 0.26
        A_speed = 0.55
        Ds_eta = _lerp(0.09, 0.04, surge_margin)
        del_s_eta = _lerp(0.07, 0.12, surge_margin)
        Dc_eta = _lerp(0.03, 0.08, choke_sharpness)
        del_c_eta = _lerp(0.10, 0.05, choke_sharpness)
        sat_k = 40.0

    kappa = (
        kappa_base + _lerp(0.0, 6.0, 1 - surge_margin)
        + _lerp(0.0, 4.0, choke_sharpness)
    )

    cmp_map = AnalyticCompressorMap(
        ms0=1 - flow_range / 2, ms1=ms1, ms2=0.0,
        mc0=1 + flow_range / 2, mc1=mc1, mc2=0.0,
        sat_k=sat_k,
        Pi_max=pr_design - 1, pr_speed_exp=pr_speed_exp,
        alpha=peak_u * (kappa - 2) + 1,
        beta=(1 - peak_u) * (kappa - 2) + 1,
        eps_s_pr=eps_s_pr, del_s_pr=del_s_pr,
        eps_c_pr=eps_c_pr, del_c_pr=del_c_pr,
        eta_max=eta_design, eta_speed_quad=eta_speed_quad,
        u0=u0, u1=u1,
        A0=min(max(width_base * (0.55 / flow_range), 0.10), 0.40),
        A_speed=A_speed,
        Ds_eta=Ds_eta, del_s_eta=del_s_eta,
        Dc_eta=Dc_eta, del_c_eta=del_c_eta,
        eta_min=0.50, eta_max_clip=0.92,
        Tt_ref=288.15, Pt_ref=101325.0,
        omega_ref=omega_ref
    )
    logger.debug('Compiled %s compressor map from %s.', kind, spec)
    return cmp_map


def compile_compressor_spec(design):
    r"""
    Compile design knobs to a behavioural envelope.

    Parameters
    ----------
    design : CompressorDesign
        Design knobs of the compressor.

    Returns
    -------
    spec : CompressorSpec
        The compiled envelope, :code:`omega_ref` keeps its default.
    """
    axial = _check_kind(design.kind) == 'axial'
    centrifugal = not axial

    psi = _clamp01(design.stage_loading)
    M = _clamp01(design.tip_mach_design)
    D = _clamp01(design.diffusion_aggressiveness)
    C = _clamp01(design.clearance_fraction)
    Qd = _clamp01(design.diffuser_quality)
    VG = _clamp01(design.variable_geometry)
    Rq = _clamp01(design.reynolds_quality)

    n_stages = max(design.stage_count, 1) if axial else 1

    base_pr = 2.0 if axial else 2.4
    stage_gain = 0.12 * np.log(n_stages) if axial else 0.0
    pr_design = max(
        base_pr + stage_gain + _lerp(0.3, 2.0, psi) + _lerp(0.0, 0.6, D)
        - _lerp(0.0, 0.6, C),
        1.1
    )

    eta_design = 0.89 if axial else 0.85
    eta_design += (
        _lerp(-0.03, 0.03, Qd) if centrifugal else _lerp(-0.01, 0.01, Qd))
    eta_design += _lerp(-0.04, 0.02, Rq)
    eta_design -= _lerp(0.0, 0.06, C)
    eta_design -= _lerp(0.0, 0.03, D)
    eta_design += _lerp(0.0, 0.015, VG) if axial else _lerp(0.0, 0.005, VG)
    eta_design = min(max(eta_design, 0.70), 0.92)

    flow_range = 0.60 if axial else 0.38
    flow_range -= _lerp(0.0, 0.25, psi)
    flow_range -= _lerp(0.0, 0.15, D)
    flow_range -= _lerp(0.0, 0.10, M) if centrifugal else _lerp(0.0, 0.05, M)
    flow_range += _lerp(0.0, 0.15, VG) if axial else _lerp(0.0, 0.05, VG)
    flow_range -= _lerp(0.0, 0.05, C)
    flow_range = min(max(flow_range, 0.15), 0.85)

    surge_margin = 0.55
    surge_margin += _lerp(0.0, 0.30, VG) if axial else _lerp(0.0, 0.15, VG)
    surge_margin -= _lerp(0.0, 0.25, psi)
    surge_margin -= _lerp(0.0, 0.20, D)
    surge_margin -= 0.05 if centrifugal else 0.0
    surge_margin = _clamp01(surge_margin)

    choke_sharpness = 0.45
    choke_sharpness += (
        _lerp(0.0, 0.35, M) if centrifugal else _lerp(0.0, 0.20, M))
    choke_sharpness += (
        _lerp(0.0, 0.25, 1 - Qd) if centrifugal
        else _lerp(0.0, 0.10, 1 - Qd)
    )
    choke_sharpness += _lerp(0.0, 0.10, psi)
    choke_sharpness = _clamp01(choke_sharpness)

    speed_sensitivity = 0.45 if axial else 0.65
    speed_sensitivity += _lerp(-0.10, 0.25, M)
    speed_sensitivity += _lerp(0.0, 0.05, psi)
    speed_sensitivity = _clamp01(speed_sensitivity)

    return CompressorSpec(
        pr_design=pr_design,
        eta_design=eta_design,
        flow_range=flow_range,
        surge_margin=surge_margin,
        choke_sharpness=choke_sharpness,
        speed_sensitivity=speed_sensitivity
    )


def compile_design_map(design):
    """Compile design knobs directly to an analytic compressor map."""
    return compile_compressor_map(
        compile_compressor_spec(design), kind=design.kind)
