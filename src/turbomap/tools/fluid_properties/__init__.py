# -*- coding: utf-8

from .wrappers import CoolPropEOS  # noqa: F401
from .wrappers import EquationOfState  # noqa: F401
from .wrappers import IdealGasEOS  # noqa: F401
