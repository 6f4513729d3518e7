# -*- coding: utf-8

"""Module for testing the operating point residuals.

This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location tests/test_solvers/test_residuals.py

SPDX-License-Identifier: MIT
"""
import pytest

from turbomap.maps import TabulatedCompressorMap
from turbomap.maps import TabulatedTurbineMap
from turbomap.maps import demo_turbine_map
from turbomap.solvers.residuals import compressor_residuals
from turbomap.solvers.residuals import compressor_residuals_scaled
from turbomap.solvers.residuals import residual_scales
from turbomap.solvers.residuals import turbine_residuals
from turbomap.solvers.residuals import turbine_residuals_scaled
from turbomap.solvers.residuals import turbomachine_residuals
from turbomap.solvers.residuals import turbomachine_residuals_scaled
from turbomap.tools.fluid_properties import IdealGasEOS
from turbomap.tools.helpers import TurboMapDomainError


def constant_compressor_map(pr=2.0, eta=0.8):
    return TabulatedCompressorMap(
        288.15, 101325, [0, 1e5], [0, 100], [[pr, pr], [pr, pr]],
        [[eta, eta], [eta, eta]]
    )


class TestCompressorResiduals:

    def setup_method(self):
        self.map = constant_compressor_map()
        self.eos = IdealGasEOS.air()
        self.pt_in = 1e5
        self.ht_in = 3e5
        self.pt_out = 2e5
        self.mdot = 15.0
        self.omega = 12000.0
        h2s = self.eos.isentropic_enthalpy(self.pt_in, self.ht_in, self.pt_out)
        self.ht_out = self.ht_in + (h2s - self.ht_in) / 0.8
        self.tau = self.mdot * (self.ht_out - self.ht_in) / self.omega

    def args(self, **kwargs):
        values = {
            'pt_in': self.pt_in, 'ht_in': self.ht_in, 'pt_out': self.pt_out,
            'ht_out': self.ht_out, 'mdot': self.mdot, 'omega': self.omega,
            'tau': self.tau
        }
        values.update(kwargs)
        return values

    def test_zero_at_solution(self):
        residuals = compressor_residuals(self.map, self.eos, **self.args())
        msg = f'All residuals must vanish at the solution, got {residuals}.'
        assert residuals == pytest.approx((0, 0, 0), abs=1e-8), msg

    def test_dispatch(self):
        residuals = turbomachine_residuals(self.map, self.eos, **self.args())
        expected = compressor_residuals(self.map, self.eos, **self.args())
        msg = 'The dispatch must use the compressor residuals.'
        assert residuals == expected, msg

    def test_residual_signs(self):
        r_p, r_e, r_P = compressor_residuals(
            self.map, self.eos, **self.args(pt_out=2.1e5, tau=self.tau * 2))
        msg = 'A higher outlet pressure must give a positive pressure residual.'
        assert r_p == pytest.approx(1e4), msg
        msg = 'A higher torque must give a positive power residual.'
        assert r_P == pytest.approx(self.tau * self.omega), msg

    def test_scaled_default(self):
        values = self.args(ht_out=self.ht_out + 1e3, tau=self.tau * 1.1)
        raw = compressor_residuals(self.map, self.eos, **values)
        scaled = compressor_residuals_scaled(self.map, self.eos, **values)
        scales = residual_scales(**values)
        msg = f'The default scales are wrong, got {scales}.'
        assert scales.first == 2e5, msg
        assert scales.enthalpy == values['ht_out'], msg
        assert scales.power == pytest.approx(
            max(values['tau'] * self.omega,
                self.mdot * (values['ht_out'] - self.ht_in))), msg
        for r, s, scale in zip(raw, scaled, scales):
            msg = f'The scaled residual must be {r / scale}, got {s}.'
            assert s == r / scale, msg

    def test_scaled_override(self):
        values = self.args(ht_out=self.ht_out + 1e3, tau=self.tau * 1.1)
        raw = compressor_residuals(self.map, self.eos, **values)
        scaled = compressor_residuals_scaled(
            self.map, self.eos, pressure_scale=2e5, enthalpy_scale=5e5,
            power_scale=3e6, **values
        )
        for r, s, scale in zip(raw, scaled, [2e5, 5e5, 3e6]):
            msg = f'The scaled residual must be {r / scale}, got {s}.'
            assert s == r / scale, msg

        generic = turbomachine_residuals_scaled(
            self.map, self.eos, first_scale=2e5, enthalpy_scale=5e5,
            power_scale=3e6, **values
        )
        msg = 'The dispatched scaled residuals must be identical.'
        assert generic == scaled, msg

    def test_invalid_scale(self):
        with pytest.raises(ValueError):
            compressor_residuals_scaled(
                self.map, self.eos, pressure_scale=0, **self.args())
        with pytest.raises(ValueError):
            residual_scales(**self.args(), power_scale=-1)

    def test_non_positive_efficiency(self):
        cmp_map = constant_compressor_map(eta=0.0)
        with pytest.raises(TurboMapDomainError):
            compressor_residuals(cmp_map, self.eos, **self.args())


class TestTurbineResiduals:

    def setup_method(self):
        self.map = demo_turbine_map()
        self.eos = IdealGasEOS.air()
        self.pt_out = 101325.0
        self.pt_in = 1.8 * self.pt_out
        self.ht_in = self.eos.enthalpy_from_temperature(288.15)
        self.omega = 0.8
        self.mdot = 14.5 * 1.8
        h2s = self.eos.isentropic_enthalpy(self.pt_in, self.ht_in, self.pt_out)
        self.ht_out = self.ht_in - 0.87 * (self.ht_in - h2s)
        self.tau = self.mdot * (self.ht_out - self.ht_in) / self.omega

    def args(self, **kwargs):
        values = {
            'pt_in': self.pt_in, 'ht_in': self.ht_in, 'pt_out': self.pt_out,
            'ht_out': self.ht_out, 'mdot': self.mdot, 'omega': self.omega,
            'tau': self.tau
        }
        values.update(kwargs)
        return values

    def test_zero_at_solution(self):
        r_m, r_e, r_P = turbine_residuals(self.map, self.eos, **self.args())
        msg = f'The mass flow residual must vanish, got {r_m}.'
        assert r_m == pytest.approx(0, abs=1e-9), msg
        msg = f'The efficiency residual must vanish, got {r_e}.'
        assert r_e == pytest.approx(0, abs=1e-6), msg
        msg = f'The power residual must vanish, got {r_P}.'
        assert r_P == pytest.approx(0, abs=1e-6), msg

    def test_torque_sign(self):
        msg = 'A turbine must deliver negative torque in this convention.'
        assert self.tau < 0, msg

    def test_scaled(self):
        values = self.args(mdot=20.0)
        raw = turbine_residuals(self.map, self.eos, **values)
        scaled = turbine_residuals_scaled(self.map, self.eos, **values)
        scales = residual_scales(**values, family='turbine')
        msg = f'The mass flow scale must be 20, got {scales.first}.'
        assert scales.first == 20.0, msg
        for r, s, scale in zip(raw, scaled, scales):
            assert s == r / scale

        dispatched = turbomachine_residuals_scaled(self.map, self.eos, **values)
        msg = 'The dispatch must use the turbine residuals for turbine maps.'
        assert dispatched == scaled, msg

    def test_unknown_family(self):
        with pytest.raises(ValueError):
            residual_scales(**self.args(), family='fan')


def test_turbine_map_family():
    msg = 'Turbine and compressor maps must belong to different families.'
    assert TabulatedTurbineMap.family != TabulatedCompressorMap.family, msg


def test_scales_are_float():
    scales = residual_scales(100000, 300000, 200000, 350000, 15, 12000, 600)
    msg = f'Integer inputs must still give float scales, got {scales}.'
    assert all(isinstance(scale, float) for scale in scales), msg
    assert scales.power == 7.2e6, msg
    scales = residual_scales(1, 1, 1, 1, 1, 1, 1, power_scale=5)
    assert isinstance(scales.power, float) and scales.power == 5.0, msg
