# -*- coding: utf-8

from .operating_point import OperatingPointResult  # noqa: F401
from .operating_point import solve_operating_point  # noqa: F401
from .residuals import ResidualScales  # noqa: F401
from .residuals import compressor_residuals  # noqa: F401
from .residuals import compressor_residuals_scaled  # noqa: F401
from .residuals import residual_scales  # noqa: F401
from .residuals import turbine_residuals  # noqa: F401
from .residuals import turbine_residuals_scaled  # noqa: F401
from .residuals import turbomachine_residuals  # noqa: F401
from .residuals import turbomachine_residuals_scaled  # noqa: F401
from .sweep import Root  # noqa: F401
from .sweep import SweepResult  # noqa: F401
from .sweep import SweepRow  # noqa: F401
from .sweep import compressor_pr_roots  # noqa: F401
from .sweep import solve_sweep  # noqa: F401
