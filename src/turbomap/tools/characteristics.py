# -*- coding: utf-8

"""Module for two dimensional lookup tables.

The characteristics module provides the interpolation layer of the
performance maps. A table is defined on a rectilinear grid and evaluated
either by bilinear interpolation or by a monotone, tensor product cubic
Hermite patch. Both variants reproduce the stored values at every grid node
and continue linearly outside of the grid.


This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/tools/characteristics.py

SPDX-License-Identifier: MIT
"""

import numpy as np

from turbomap.tools import logger
from turbomap.tools.global_vars import interpolation_kinds
from turbomap.tools.helpers import construction_error


def monotone_slopes(x, y):
    r"""
    Estimate monotonicity preserving first derivatives of 1-d data.

    Parameters
    ----------
    x : ndarray
        Strictly increasing abscissa values.

    y : ndarray
        Ordinate values at x.

    Returns
    -------
    m : ndarray
        Slope estimate at every node.

    Note
    ----
    Interior slopes are the weighted harmonic mean of the adjacent secant
    slopes :math:`\delta_{i-1}` and :math:`\delta_i`,

    .. math::

        m_i = \frac{w_1 + w_2}{\frac{w_1}{\delta_{i-1}} +
        \frac{w_2}{\delta_i}}\\
        w_1 = 2 h_i + h_{i-1}\\
        w_2 = h_i + 2 h_{i-1}

    and zero where the secants change sign or vanish. End slopes use the one
    sided three point estimate, limited to zero on sign mismatch and to
    :math:`3 \delta` if the secants change sign.

    Example
    -------
    >>> import numpy as np
    >>> from turbomap.tools.characteristics import monotone_slopes
    >>> monotone_slopes(np.array([0, 1]), np.array([1, 3]))
    array([2., 2.])
    >>> float(monotone_slopes(np.array([0, 1, 2]), np.array([0, 1, 0]))[1])
    0.0
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    n = len(x)
    h = np.diff(x)
    delta = np.diff(y) / h

    if n == 2:
        return np.array([delta[0], delta[0]])

    m = np.zeros(n)
    for i in range(1, n - 1):
        d0, d1 = delta[i - 1], delta[i]
        if d0 == 0 or d1 == 0 or np.sign(d0) != np.sign(d1):
            continue
        w1 = 2 * h[i] + h[i - 1]
        w2 = h[i] + 2 * h[i - 1]
        m[i] = (w1 + w2) / (w1 / d0 + w2 / d1)

    m[0] = _end_slope(h[0], h[1], delta[0], delta[1])
    m[-1] = _end_slope(h[-1], h[-2], delta[-1], delta[-2])
    return m


def _end_slope(h0, h1, d0, d1):
    m = ((2 * h0 + h1) * d0 - h0 * d1) / (h0 + h1)
    if np.sign(m) != np.sign(d0):
        return 0.0
    elif np.sign(d0) != np.sign(d1) and abs(m) > 3 * abs(d0):
        return 3 * d0
    return m


def _cell(axis, value):
    """Return the index of the cell enclosing value and the local fraction.

    Values outside of the axis range are assigned to the edge cell, the
    fraction is not clamped.
    """
    i = int(np.searchsorted(axis, value, side='right')) - 1
    i = min(max(i, 0), len(axis) - 2)
    return i, (value - axis[i]) / (axis[i + 1] - axis[i])


def _hermite(t, p0, p1, m0, m1):
    t2 = t * t
    t3 = t2 * t
    return (
        (2 * t3 - 3 * t2 + 1) * p0 + (t3 - 2 * t2 + t) * m0 +
        (-2 * t3 + 3 * t2) * p1 + (t3 - t2) * m1
    )


def _hermite_deriv(t, p0, p1, m0, m1):
    t2 = t * t
    return (
        (6 * t2 - 6 * t) * p0 + (3 * t2 - 4 * t + 1) * m0 +
        (-6 * t2 + 6 * t) * p1 + (3 * t2 - 2 * t) * m1
    )


def _read_only(array):
    array.flags.writeable = False
    return array


class TableMap:
    r"""
    Base class for two dimensional lookup tables.

    Parameters
    ----------
    x : ndarray
        Strictly increasing first axis, at least two values.

    y : ndarray
        Strictly increasing second axis, at least two values.

    z : ndarray
        Table values of shape :code:`(len(x), len(y))`, :code:`z[i, j]` is
        the value at :code:`(x[i], y[j])`.

    Note
    ----
    The grid is copied into read-only arrays on construction. Malformed
    input raises a
    :py:class:`turbomap.tools.helpers.TurboMapConstructionError`.
    """

    interpolation = None

    def __init__(self, x, y, z):
        self.xgrid = _read_only(self._check_axis(x, 'x'))
        self.ygrid = _read_only(self._check_axis(y, 'y'))

        z = np.array(z, dtype=float)
        shape = (len(self.xgrid), len(self.ygrid))
        if z.shape != shape:
            msg = (
                f'The table of a {self.__class__.__name__} must have the shape '
                f'{shape} of its axes, got {z.shape}.'
            )
            raise construction_error(msg)
        if not np.all(np.isfinite(z)):
            msg = f'The table of a {self.__class__.__name__} must be finite.'
            raise construction_error(msg)
        self.table = _read_only(z)

        logger.debug(
            'Created %s lookup table of shape %s.', self.interpolation, shape
        )

    def _check_axis(self, values, name):
        values = np.array(values, dtype=float)
        if values.ndim != 1 or len(values) < 2:
            msg = (
                f'The {name}-axis of a {self.__class__.__name__} needs at least '
                'two values.'
            )
            raise construction_error(msg)
        if not np.all(np.isfinite(values)):
            msg = (
                f'The {name}-axis of a {self.__class__.__name__} must be '
                'finite.'
            )
            raise construction_error(msg)
        if np.any(np.diff(values) <= 0):
            msg = (
                f'The {name}-axis of a {self.__class__.__name__} must be '
                f'strictly increasing, got {values.tolist()}.'
            )
            raise construction_error(msg)
        return values

    def evaluate(self, x, y):
        raise NotImplementedError

    def get_domain_errors(self, x, y, c):
        r"""
        Prompt warning messages, if the query point is outside of the grid.

        Parameters
        ----------
        x : float
            Input for first dimension of the table.

        y : float
            Input for second dimension of the table.

        c : str
            Label of the map, the table is applied on.

        Returns
        -------
        inside : boolean
            :code:`True` if the point lies within the grid.
        """
        inside = True
        for value, axis, name in [(x, self.xgrid, 'X'), (y, self.ygrid, 'Y')]:
            if value > axis[-1]:
                msg = (
                    f'Operating point above map range: {name}={round(value, 3)} '
                    f'with maximum of {axis[-1]} at {c}.'
                )
                logger.warning(msg)
                inside = False
            elif value < axis[0]:
                msg = (
                    f'Operating point below map range: {name}={round(value, 3)} '
                    f'with minimum of {axis[0]} at {c}.'
                )
                logger.warning(msg)
                inside = False
        return inside

    def get_attr(self, key):
        r"""
        Get the value of an attribute.

        Parameters
        ----------
        key : str
            Object attribute to get value of.

        Returns
        -------
        value : object
            Value of object attribute key.
        """
        if key in self.__dict__:
            return self.__dict__[key]
        else:
            msg = f'{self.__class__.__name__} has no attribute "{key}".'
            logger.error(msg)
            raise KeyError(msg)


class BilinearMap(TableMap):
    r"""
    Lookup table with bilinear interpolation.

    Example
    -------
    >>> from turbomap.tools.characteristics import BilinearMap
    >>> table = BilinearMap([0, 1], [0, 2], [[0, 2], [1, 3]])
    >>> float(table.evaluate(0.5, 1))
    1.5
    >>> float(table.evaluate(2, 0))
    2.0
    """

    interpolation = 'bilinear'

    def evaluate(self, x, y):
        r"""
        Return the table evaluation at (x, y).

        .. math::

            z = (1 - t_x)(1 - t_y) z_{00} + t_x (1 - t_y) z_{10} +
            (1 - t_x) t_y z_{01} + t_x t_y z_{11}

        Outside of the grid the fractions :math:`t_x, t_y` of the edge cell
        are used unclamped, which yields linear continuation.
        """
        i, tx = _cell(self.xgrid, x)
        j, ty = _cell(self.ygrid, y)
        z = self.table
        return (
            (1 - tx) * (1 - ty) * z[i, j] + tx * (1 - ty) * z[i + 1, j] +
            (1 - tx) * ty * z[i, j + 1] + tx * ty * z[i + 1, j + 1]
        )


class BicubicMap(TableMap):
    r"""
    Lookup table with monotone bicubic Hermite interpolation.

    The first derivatives along each axis are estimated with
    :py:func:`monotone_slopes` for every grid line, the cross derivative is
    the mean of both orders of applying the estimator. Monotone data along a
    grid line yields a monotone surface along that line.

    Example
    -------
    >>> from turbomap.tools.characteristics import BicubicMap
    >>> table = BicubicMap([0, 1, 2], [0, 1], [[0, 0], [1, 1], [4, 4]])
    >>> float(table.evaluate(1, 0.5))
    1.0
    """

    interpolation = 'bicubic'

    def __init__(self, x, y, z):
        super().__init__(x, y, z)
        nx, ny = self.table.shape

        fx = np.zeros((nx, ny))
        for j in range(ny):
            fx[:, j] = monotone_slopes(self.xgrid, self.table[:, j])

        fy = np.zeros((nx, ny))
        for i in range(nx):
            fy[i, :] = monotone_slopes(self.ygrid, self.table[i, :])

        fxy_y = np.zeros((nx, ny))
        for i in range(nx):
            fxy_y[i, :] = monotone_slopes(self.ygrid, fx[i, :])
        fxy_x = np.zeros((nx, ny))
        for j in range(ny):
            fxy_x[:, j] = monotone_slopes(self.xgrid, fy[:, j])

        self.fx = _read_only(fx)
        self.fy = _read_only(fy)
        self.fxy = _read_only(0.5 * (fxy_y + fxy_x))

    def _patch(self, x, y):
        """Return value and gradient of the Hermite patch at (x, y)."""
        i, tx = _cell(self.xgrid, x)
        j, ty = _cell(self.ygrid, y)
        dx = self.xgrid[i + 1] - self.xgrid[i]
        dy = self.ygrid[j + 1] - self.ygrid[j]
        f, fx, fy, fxy = self.table, self.fx, self.fy, self.fxy

        rows = []
        for basis in [_hermite, _hermite_deriv]:
            g0 = basis(tx, f[i, j], f[i + 1, j], fx[i, j] * dx,
                       fx[i + 1, j] * dx)
            g1 = basis(tx, f[i, j + 1], f[i + 1, j + 1], fx[i, j + 1] * dx,
                       fx[i + 1, j + 1] * dx)
            gy0 = basis(tx, fy[i, j], fy[i + 1, j], fxy[i, j] * dx,
                        fxy[i + 1, j] * dx)
            gy1 = basis(tx, fy[i, j + 1], fy[i + 1, j + 1],
                        fxy[i, j + 1] * dx, fxy[i + 1, j + 1] * dx)
            rows += [(g0, g1, gy0 * dy, gy1 * dy)]

        value = _hermite(ty, *rows[0])
        deriv_x = _hermite(ty, *rows[1]) / dx
        deriv_y = _hermite_deriv(ty, *rows[0]) / dy
        return value, deriv_x, deriv_y

    def evaluate(self, x, y):
        r"""
        Return the table evaluation at (x, y).

        Outside of the grid the patch is evaluated at the nearest boundary
        point and continued linearly with the patch gradient there.
        """
        xc = min(max(x, self.xgrid[0]), self.xgrid[-1])
        yc = min(max(y, self.ygrid[0]), self.ygrid[-1])
        value, deriv_x, deriv_y = self._patch(xc, yc)
        if xc != x:
            value += deriv_x * (x - xc)
        if yc != y:
            value += deriv_y * (y - yc)
        return value


def interpolation_map(kind, x, y, z):
    r"""
    Create a lookup table of the specified interpolation kind.

    Parameters
    ----------
    kind : str
        Interpolation kind, :code:`'bilinear'` or :code:`'bicubic'`.

    Returns
    -------
    obj : TableMap
        The lookup table object.
    """
    if kind == 'bilinear':
        return BilinearMap(x, y, z)
    elif kind == 'bicubic':
        return BicubicMap(x, y, z)
    msg = (
        f'Unknown interpolation kind "{kind}", available kinds are '
        f'{", ".join(interpolation_kinds)}.'
    )
    raise construction_error(msg)
