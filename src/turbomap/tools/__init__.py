# -*- coding: utf-8

from .branch_tracking import track_branches  # noqa: F401
from .characteristics import BicubicMap  # noqa: F401
from .characteristics import BilinearMap  # noqa: F401
from .characteristics import TableMap  # noqa: F401
from .characteristics import interpolation_map  # noqa: F401
from .fluid_properties import CoolPropEOS  # noqa: F401
from .fluid_properties import EquationOfState  # noqa: F401
from .fluid_properties import IdealGasEOS  # noqa: F401
from .root_finding import bracket_bisect_roots  # noqa: F401
from .root_finding import feasibility_backoff  # noqa: F401
