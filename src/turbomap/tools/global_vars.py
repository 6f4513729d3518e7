# -*- coding: utf-8

"""Module for global variables used by other modules of the turbomap package.

This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/tools/global_vars.py

SPDX-License-Identifier: MIT
"""

# operating point solver
solver_defaults = {
    'abstol': 1e-10,
    'reltol': 1e-8,
    'maxiters': 100,
    'fd_step': 1e-7
}

# multi-root search and feasibility backoff
root_finding_defaults = {
    'n_scan': 401,
    'root_tol': 1e-8,
    'max_bisect_iters': 60,
    'continuation_band_fraction': 0.02
}

backoff_defaults = {
    'value_tol': 1e-6,
    'max_iters': 24,
    'n_probe': 33,
    'pressure_tol': 50.0
}

# floors for the power back-out of a map root
ETA_SAFETY_FLOOR = 1e-6
OMEGA_SAFETY_FLOOR = 1e-12

interpolation_kinds = ['bilinear', 'bicubic']
branch_policies = ['low', 'high', 'all']

map_formats = {
    'compressor_performance_map': 1,
    'turbine_performance_map': 1,
    'compressor_analytic_performance_map': 1,
    'compressor_spec': 1,
    'compressor_design': 1,
    'table_map': 1
}

ideal_gas_data = {
    'air': {'gas_constant': 287.05, 'gamma': 1.4},
    'steam': {'gas_constant': 461.5, 'gamma': 1.33}
}
