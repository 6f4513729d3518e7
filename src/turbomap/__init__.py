# -*- coding: utf-8
import importlib.resources
import os

__datapath__ = os.path.join(importlib.resources.files("turbomap"), "data")
__version__ = '0.3.0 - Surge Line'

# turbomap maps imports
from .maps import analytic  # noqa: F401
from .maps import base  # noqa: F401
from .maps import compressor  # noqa: F401
from .maps import design  # noqa: F401
from .maps import map_reader  # noqa: F401
from .maps import turbine  # noqa: F401
# turbomap solvers imports
from .solvers import operating_point  # noqa: F401
from .solvers import residuals  # noqa: F401
from .solvers import sweep  # noqa: F401
# turbomap tools imports
from .tools import branch_tracking  # noqa: F401
from .tools import characteristics  # noqa: F401
from .tools import fluid_properties  # noqa: F401
from .tools import global_vars  # noqa: F401
from .tools import helpers  # noqa: F401
from .tools import logger  # noqa: F401
from .tools import root_finding  # noqa: F401
