# -*- coding: utf-8

"""Module for equation of state wrappers.

The performance map solvers access the working fluid through four
functions only: temperature and entropy from pressure and enthalpy, the
isentropic enthalpy at a new pressure and the enthalpy from temperature.


This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location
turbomap/tools/fluid_properties/wrappers.py

SPDX-License-Identifier: MIT
"""

import CoolProp as CP
import numpy as np

from turbomap.tools import logger
from turbomap.tools.global_vars import ideal_gas_data
from turbomap.tools.helpers import check_positive
from turbomap.tools.helpers import construction_error
from turbomap.tools.helpers import domain_error


class SerializableAbstractState(CP.AbstractState):

    def __init__(self, back_end, fluid_name):
        self.back_end = back_end
        self.fluid_name = fluid_name

    def __reduce__(self):
        return (self.__class__, (self.back_end, self.fluid_name))


class EquationOfState:
    """Base class for equation of state collaborators."""

    def _not_implemented(self) -> None:
        raise NotImplementedError(
            f"Method is not implemented for {self.__class__.__name__}."
        )

    def temperature(self, p, h):
        self._not_implemented()

    def entropy(self, p, h):
        self._not_implemented()

    def isentropic_enthalpy(self, p_1, h_1, p_2):
        self._not_implemented()

    def enthalpy_from_temperature(self, T):
        self._not_implemented()


class IdealGasEOS(EquationOfState):
    r"""
    Calorically perfect ideal gas.

    Parameters
    ----------
    gas_constant : float
        Specific gas constant :math:`R` in J/(kgK).

    gamma : float
        Heat capacity ratio :math:`\gamma > 1`.

    pressure_reference : float
        Reference pressure of the entropy in Pa, default 101325.

    temperature_reference : float
        Reference temperature of the entropy in K, default 300.

    entropy_reference : float
        Entropy at the reference state in J/(kgK), default 0.

    Note
    ----
    .. math::

        c_p = \frac{\gamma R}{\gamma - 1}\\
        h = c_p \cdot T\\
        s = s_{ref} + c_p \ln \frac{T}{T_{ref}} - R \ln \frac{p}{p_{ref}}

    Example
    -------
    >>> from turbomap.tools.fluid_properties import IdealGasEOS
    >>> air = IdealGasEOS.air()
    >>> round(air.cp, 3)
    1004.675
    >>> round(air.temperature(1e5, air.enthalpy_from_temperature(300)), 6)
    300.0
    """

    def __init__(
            self, gas_constant, gamma, pressure_reference=101325.0,
            temperature_reference=300.0, entropy_reference=0.0):
        self.gas_constant = check_positive('gas_constant', gas_constant)
        self.gamma = check_positive('gamma', gamma)
        if self.gamma <= 1:
            msg = f'The heat capacity ratio gamma must be > 1, got {gamma}.'
            raise construction_error(msg)
        self.pressure_reference = check_positive(
            'pressure_reference', pressure_reference)
        self.temperature_reference = check_positive(
            'temperature_reference', temperature_reference)
        self.entropy_reference = float(entropy_reference)

        self.cv = self.gas_constant / (self.gamma - 1)
        self.cp = self.gamma * self.cv

    @classmethod
    def air(cls):
        return cls(**ideal_gas_data['air'])

    @classmethod
    def steam(cls):
        return cls(**ideal_gas_data['steam'])

    def _check_state(self, p=None, T=None):
        if p is not None and not p > 0:
            raise domain_error(
                f'Pressure must be positive for {self.__class__.__name__}, '
                f'got {p}.'
            )
        if T is not None and not T > 0:
            raise domain_error(
                f'Temperature must be positive for {self.__class__.__name__}, '
                f'got {T}.'
            )

    def temperature(self, p, h):
        T = h / self.cp
        self._check_state(T=T)
        return T

    def enthalpy_from_temperature(self, T):
        self._check_state(T=T)
        return self.cp * T

    def entropy(self, p, h):
        T = self.temperature(p, h)
        self._check_state(p=p)
        return (
            self.entropy_reference
            + self.cp * np.log(T / self.temperature_reference)
            - self.gas_constant * np.log(p / self.pressure_reference)
        )

    def T_ps(self, p, s):
        self._check_state(p=p)
        return self.temperature_reference * np.exp(
            (
                s - self.entropy_reference
                + self.gas_constant * np.log(p / self.pressure_reference)
            ) / self.cp
        )

    def isentropic_enthalpy(self, p_1, h_1, p_2):
        return self.cp * self.T_ps(p_2, self.entropy(p_1, h_1))


class CoolPropEOS(EquationOfState):

    def __init__(self, fluid, back_end=None, reference_pressure=101325.0):
        """Wrapper for CoolProp.CoolProp.AbstractState instance calls

        Parameters
        ----------
        fluid : str
            Name of the fluid
        back_end : str, optional
            CoolProp back end for the AbstractState object, by default "HEOS"
        reference_pressure : float, optional
            Pressure used to convert temperature to enthalpy, by default
            101325 Pa.
        """
        if back_end is None:
            back_end = "HEOS"

        self.fluid = fluid
        self.back_end = back_end
        self.reference_pressure = check_positive(
            'reference_pressure', reference_pressure)
        try:
            self.AS = SerializableAbstractState(self.back_end, self.fluid)
        except ValueError as e:
            msg = (
                f'Could not create CoolProp state for fluid {fluid} with '
                f'back end {back_end}: {e}'
            )
            raise construction_error(msg)
        logger.debug(
            'Created CoolProp equation of state for %s (%s).', fluid, back_end
        )

    def temperature(self, p, h):
        self.AS.update(CP.HmassP_INPUTS, h, p)
        return self.AS.T()

    def entropy(self, p, h):
        self.AS.update(CP.HmassP_INPUTS, h, p)
        return self.AS.smass()

    def h_ps(self, p, s):
        self.AS.update(CP.PSmass_INPUTS, p, s)
        return self.AS.hmass()

    def isentropic_enthalpy(self, p_1, h_1, p_2):
        return self.h_ps(p_2, self.entropy(p_1, h_1))

    def enthalpy_from_temperature(self, T):
        self.AS.update(CP.PT_INPUTS, self.reference_pressure, T)
        return self.AS.hmass()
