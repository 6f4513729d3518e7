# -*- coding: utf-8

from .analytic import AnalyticCompressorMap  # noqa: F401
from .base import MapDomain  # noqa: F401
from .base import PerformanceMap  # noqa: F401
from .base import ReferenceState  # noqa: F401
from .base import corrected_flow  # noqa: F401
from .base import corrected_speed  # noqa: F401
from .base import physical_flow  # noqa: F401
from .compressor import CompressorMap  # noqa: F401
from .compressor import TabulatedCompressorMap  # noqa: F401
from .design import CompressorDesign  # noqa: F401
from .design import CompressorSpec  # noqa: F401
from .design import compile_compressor_map  # noqa: F401
from .design import compile_compressor_spec  # noqa: F401
from .design import compile_design_map  # noqa: F401
from .map_reader import demo_analytic_compressor_map  # noqa: F401
from .map_reader import demo_compressor_map  # noqa: F401
from .map_reader import demo_turbine_map  # noqa: F401
from .map_reader import load_default_map  # noqa: F401
from .map_reader import load_map  # noqa: F401
from .map_reader import map_from_dict  # noqa: F401
from .map_reader import map_to_dict  # noqa: F401
from .map_reader import save_map  # noqa: F401
from .turbine import TabulatedTurbineMap  # noqa: F401
from .turbine import TurbineMap  # noqa: F401
