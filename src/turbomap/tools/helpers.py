# -*- coding: utf-8

"""Module for helper functions used by several other modules.

This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/tools/helpers.py

SPDX-License-Identifier: MIT
"""

import os

import numpy as np

from turbomap.tools import logger
from turbomap.tools.global_vars import solver_defaults


class TurboMapConstructionError(ValueError):
    """Custom message for invalid map, table or model construction input."""

    pass


class TurboMapDomainError(ValueError):
    """Custom message for inputs outside the physically valid domain."""

    pass


class TurboMapFormatError(ValueError):
    """Custom message for errors reading or writing stored map data."""

    pass


def construction_error(msg):
    """Log the message and return the matching exception to raise."""
    logger.error(msg)
    return TurboMapConstructionError(msg)


def domain_error(msg):
    """Log the message and return the matching exception to raise."""
    logger.error(msg)
    return TurboMapDomainError(msg)


def check_finite(name, value):
    """Raise a construction error if value is not a finite number."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise construction_error(
            f"The parameter {name} must be a real number, got {value!r}."
        )
    if not np.isfinite(value):
        raise construction_error(
            f"The parameter {name} must be finite, got {value}."
        )
    return value


def check_positive(name, value):
    """Raise a construction error if value is not finite and > 0."""
    value = check_finite(name, value)
    if value <= 0:
        raise construction_error(
            f"The parameter {name} must be positive, got {value}."
        )
    return value


def numeric_jacobian(func, x, d=None):
    r"""
    Calculate the jacobian of a vector valued function by central differences.

    Parameters
    ----------
    func : function
        Function :math:`\vec{f}(\vec{x})` returning a 1-d array.

    x : ndarray
        Point to evaluate the jacobian at.

    d : float
        Relative step width, the absolute step of variable :math:`x_j` is
        :math:`d \cdot \max(|x_j|, 1)`.

    Returns
    -------
    jacobian : ndarray
        Matrix of partial derivatives.

        .. math::

            J_{ij} = \frac{f_i(x + d_j) - f_i(x - d_j)}{2 d_j}
    """
    if d is None:
        d = solver_defaults['fd_step']
    x = np.asarray(x, dtype=float)
    f0 = np.asarray(func(x), dtype=float)
    jacobian = np.zeros((len(f0), len(x)))
    for j in range(len(x)):
        step = d * max(abs(x[j]), 1.0)
        upper = x.copy()
        upper[j] += step
        lower = x.copy()
        lower[j] -= step
        jacobian[:, j] = (
            np.asarray(func(upper)) - np.asarray(func(lower))
        ) / (2 * step)
    return jacobian


def get_basic_path():
    """
    Return the basic turbomap path and creates it if necessary.

    The basic path is the '.turbomap' folder in the $HOME directory.
    """
    basicpath = os.path.join(os.path.expanduser('~'), '.turbomap')
    if not os.path.isdir(basicpath):
        os.mkdir(basicpath)
    return basicpath


def extend_basic_path(subfolder):
    """
    Return a path based on the basic turbomap path and creates it if necessary.

    The subfolder is the name of the path extension.
    """
    extended_path = os.path.join(get_basic_path(), subfolder)
    if not os.path.isdir(extended_path):
        os.mkdir(extended_path)
    return extended_path
