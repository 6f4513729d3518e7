# -*- coding: utf-8

"""Module for saving and loading performance maps.

Maps are stored in JSON documents. Every map occupies one group of the
document, nested groups are addressed with dotted paths, e.g.
:code:`'engine.lpc'`. A group holds the :code:`format` and
:code:`format_version` tags of the stored object and its data. Tabulated
maps store one sub-table per output quantity with the keys
:code:`interpolation`, :code:`xgrid`, :code:`ygrid` and :code:`table` (list
of rows), analytic maps and design descriptions store one key per
parameter.


This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location turbomap/maps/map_reader.py

SPDX-License-Identifier: MIT
"""

import json
import os

from turbomap import __datapath__
from turbomap.maps.analytic import AnalyticCompressorMap
from turbomap.maps.analytic import default_parameters
from turbomap.maps.compressor import TabulatedCompressorMap
from turbomap.maps.design import CompressorDesign
from turbomap.maps.design import CompressorSpec
from turbomap.maps.turbine import TabulatedTurbineMap
from turbomap.tools import logger
from turbomap.tools.characteristics import TableMap
from turbomap.tools.characteristics import interpolation_map
from turbomap.tools.global_vars import map_formats
from turbomap.tools.helpers import TurboMapFormatError

default_groups = {
    'compressor_performance_map': 'compressor_map',
    'turbine_performance_map': 'turbine_map',
    'compressor_analytic_performance_map': 'compressor_analytic_map',
    'compressor_spec': 'compressor_spec',
    'compressor_design': 'compressor_design',
    'table_map': 'table_map'
}


def _format_error(msg):
    logger.error(msg)
    return TurboMapFormatError(msg)


def _require(node, key, group):
    if key not in node:
        msg = f'Missing key "{key}" in map group "{group}".'
        raise _format_error(msg)
    return node[key]


def _find_or_create_group(data, group):
    node = data
    if not group:
        return node
    for key in group.split('.'):
        if key not in node:
            node[key] = {}
        if not isinstance(node[key], dict):
            msg = (
                f'The group path "{group}" conflicts with the non-table key '
                f'"{key}".'
            )
            raise _format_error(msg)
        node = node[key]
    return node


def _is_group(node):
    """Check if a JSON node is a stored object or holds stored objects."""
    if not isinstance(node, dict):
        return False
    return 'format' in node or any(_is_group(v) for v in node.values())


def _find_group(data, group):
    node = data
    if not group:
        return node
    for key in group.split('.'):
        if key not in node:
            msg = f'Missing map group "{group}".'
            raise _format_error(msg)
        if not isinstance(node[key], dict):
            msg = f'The map group "{group}" is not a table.'
            raise _format_error(msg)
        node = node[key]
    return node


def table_to_dict(table):
    """Return the JSON representation of a lookup table."""
    return {
        'interpolation': table.interpolation,
        'xgrid': table.xgrid.tolist(),
        'ygrid': table.ygrid.tolist(),
        'table': table.table.tolist()
    }


def table_from_dict(node, group=''):
    """Create a lookup table from its JSON representation."""
    interpolation = _require(node, 'interpolation', group)
    xgrid = _require(node, 'xgrid', group)
    ygrid = _require(node, 'ygrid', group)
    rows = _require(node, 'table', group)
    if not rows or any(len(row) != len(rows[0]) for row in rows):
        msg = f'The table rows of map group "{group}" must have equal length.'
        raise _format_error(msg)
    return interpolation_map(interpolation, xgrid, ygrid, rows)


def map_to_dict(obj):
    r"""
    Return the JSON representation of a map or design description.

    Parameters
    ----------
    obj : object
        TabulatedCompressorMap, TabulatedTurbineMap, AnalyticCompressorMap,
        CompressorSpec, CompressorDesign or TableMap.

    Returns
    -------
    data : dict
        Group content including the format tags.
    """
    if isinstance(obj, TableMap):
        data = {'format': 'table_map'}
        data.update(table_to_dict(obj))
    elif isinstance(obj, TabulatedCompressorMap):
        data = {
            'format': obj.format,
            'Tt_ref': obj.Tt_ref,
            'Pt_ref': obj.Pt_ref,
            'pr_map': table_to_dict(obj.pr_map),
            'eta_map': table_to_dict(obj.eta_map)
        }
    elif isinstance(obj, TabulatedTurbineMap):
        data = {
            'format': obj.format,
            'Tt_ref': obj.Tt_ref,
            'Pt_ref': obj.Pt_ref,
            'mdot_corr_map': table_to_dict(obj.mdot_corr_map),
            'eta_map': table_to_dict(obj.eta_map)
        }
    elif isinstance(
            obj, (AnalyticCompressorMap, CompressorSpec, CompressorDesign)):
        data = {'format': obj.format}
        data.update(obj.parameters())
    else:
        msg = f'Objects of type {type(obj).__name__} cannot be stored.'
        raise _format_error(msg)

    data['format_version'] = map_formats[data['format']]
    return data


def map_from_dict(node, group=''):
    r"""
    Create a map or design description from its JSON representation.

    Parameters
    ----------
    node : dict
        Group content including the format tags.

    group : str
        Group name used in error messages.

    Returns
    -------
    obj : object
        The object matching the :code:`format` tag.
    """
    fmt = _require(node, 'format', group)
    version = _require(node, 'format_version', group)
    if fmt not in map_formats:
        msg = (
            f'Unknown map format "{fmt}" in group "{group}", available '
            f'formats are {", ".join(map_formats)}.'
        )
        raise _format_error(msg)
    if version != map_formats[fmt]:
        msg = (
            f'Unsupported format_version {version} of format "{fmt}" in group '
            f'"{group}", expected {map_formats[fmt]}.'
        )
        raise _format_error(msg)

    if fmt == 'table_map':
        return table_from_dict(node, group)

    elif fmt == 'compressor_performance_map':
        return TabulatedCompressorMap.from_tables(
            _require(node, 'Tt_ref', group),
            _require(node, 'Pt_ref', group),
            table_from_dict(_require(node, 'pr_map', group), group),
            table_from_dict(_require(node, 'eta_map', group), group)
        )

    elif fmt == 'turbine_performance_map':
        return TabulatedTurbineMap.from_tables(
            _require(node, 'Tt_ref', group),
            _require(node, 'Pt_ref', group),
            table_from_dict(_require(node, 'mdot_corr_map', group), group),
            table_from_dict(_require(node, 'eta_map', group), group)
        )

    elif fmt == 'compressor_analytic_performance_map':
        # missing shape parameters fall back to the defaults
        return AnalyticCompressorMap(
            **{k: v for k, v in node.items() if k in default_parameters}
        )

    cls = CompressorSpec if fmt == 'compressor_spec' else CompressorDesign
    return cls(**{key: _require(node, key, group) for key in cls.defaults})


def save_map(obj, path, group=None):
    r"""
    Save a map or design description to a JSON document.

    Parameters
    ----------
    obj : object
        Object to store, see :py:func:`map_to_dict`.

    path : str
        Path of the JSON document. An existing document keeps all other
        groups. The content of an existing group is replaced, its nested
        groups are kept.

    group : str
        Dotted group path, by default the group name of the object type.

    Returns
    -------
    path : str
        Path of the JSON document.
    """
    node_data = map_to_dict(obj)
    if group is None:
        group = default_groups[node_data['format']]

    data = {}
    if os.path.isfile(path):
        with open(path, 'r') as f:
            data = json.load(f)

    node = _find_or_create_group(data, group)
    children = {
        key: value for key, value in node.items() if _is_group(value)
    }
    node.clear()
    node.update(children)
    node.update(node_data)

    with open(path, 'w') as f:
        json.dump(data, f, indent=2, sort_keys=True)

    logger.debug('Saved %s to group "%s" of %s.', node_data['format'], group, path)
    return path


def load_map(path, group):
    r"""
    Load a map or design description from a JSON document.

    Parameters
    ----------
    path : str
        Path of the JSON document.

    group : str
        Dotted group path of the stored object.

    Returns
    -------
    obj : object
        The object matching the stored :code:`format` tag.

    Example
    -------
    >>> import os, tempfile
    >>> from turbomap.maps import demo_compressor_map, load_map, save_map
    >>> path = os.path.join(tempfile.mkdtemp(), 'maps.json')
    >>> _ = save_map(demo_compressor_map(), path, group='engine.lpc')
    >>> cmp_map = load_map(path, 'engine.lpc')
    >>> cmp_map.flow_grid.tolist()
    [12.0, 16.0, 20.0]
    """
    with open(path, 'r') as f:
        data = json.load(f)
    obj = map_from_dict(_find_group(data, group), group)
    logger.debug('Loaded %s from group "%s" of %s.', obj.format, group, path)
    return obj


def load_default_map(name):
    r"""
    Load a map shipped with the package.

    Parameters
    ----------
    name : str
        Group name in the package data file :code:`performance_maps.json`.

    Returns
    -------
    obj : object
        The stored map.
    """
    return load_map(os.path.join(__datapath__, 'performance_maps.json'), name)


def _with_interpolation(cmp_map, interpolation):
    if interpolation is None or interpolation == cmp_map.interpolation:
        return cmp_map
    tables = [cmp_map.pr_map, cmp_map.eta_map] if cmp_map.family == (
        'compressor') else [cmp_map.mdot_corr_map, cmp_map.eta_map]
    return cmp_map.__class__(
        cmp_map.Tt_ref, cmp_map.Pt_ref, tables[0].xgrid, tables[0].ygrid,
        tables[0].table, tables[1].table, interpolation=interpolation
    )


def demo_compressor_map(interpolation=None):
    """Return the tabulated demo compressor map."""
    return _with_interpolation(
        load_default_map('demo_compressor_map'), interpolation)


def demo_turbine_map(interpolation=None):
    """Return the tabulated demo turbine map."""
    return _with_interpolation(
        load_default_map('demo_turbine_map'), interpolation)


def demo_analytic_compressor_map():
    """Return the analytic demo compressor map."""
    return load_default_map('demo_analytic_compressor_map')
