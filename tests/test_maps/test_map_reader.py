# -*- coding: utf-8

"""Module for testing saving and loading of performance maps.

This file is part of project TurboMap. It's copyrighted by the contributors
recorded in the version control history of the file, available from its
original location tests/test_maps/test_map_reader.py

SPDX-License-Identifier: MIT
"""
import json

import numpy as np
import pytest

from turbomap.maps import AnalyticCompressorMap
from turbomap.maps import CompressorDesign
from turbomap.maps import CompressorSpec
from turbomap.maps import TabulatedCompressorMap
from turbomap.maps import TabulatedTurbineMap
from turbomap.maps import demo_compressor_map
from turbomap.maps import demo_turbine_map
from turbomap.maps import load_map
from turbomap.maps import map_from_dict
from turbomap.maps import map_to_dict
from turbomap.maps import save_map
from turbomap.tools.characteristics import BicubicMap
from turbomap.tools.helpers import TurboMapFormatError


class TestRoundTrip:

    def setup_method(self):
        self.queries = [(0.6, 12.0), (0.73, 14.2), (0.95, 19.1), (1.1, 21.0)]

    @pytest.mark.parametrize('kind', ['bilinear', 'bicubic'])
    def test_compressor_map(self, tmp_path, kind):
        path = str(tmp_path / 'maps.json')
        cmp_map = demo_compressor_map(interpolation=kind)
        save_map(cmp_map, path, group='engine.lpc')
        loaded = load_map(path, 'engine.lpc')

        msg = 'The loaded map must be a TabulatedCompressorMap.'
        assert isinstance(loaded, TabulatedCompressorMap), msg
        for key in ['speed_grid', 'flow_grid', 'pr_table', 'eta_table']:
            msg = f'The {key} must be identical after the round trip.'
            assert np.array_equal(
                loaded.get_attr(key), cmp_map.get_attr(key)), msg
        msg = 'The interpolation kind must be identical after the round trip.'
        assert loaded.interpolation == kind, msg
        msg = 'The reference state must be identical after the round trip.'
        assert loaded.reference == cmp_map.reference, msg

        for query in self.queries:
            msg = f'The evaluation at {query} must be reproduced.'
            assert loaded.evaluate(*query) == pytest.approx(
                cmp_map.evaluate(*query), rel=1e-14), msg

    def test_turbine_map(self, tmp_path):
        path = str(tmp_path / 'maps.json')
        trb_map = demo_turbine_map()
        save_map(trb_map, path)
        loaded = load_map(path, 'turbine_map')
        msg = 'The turbine tables must be identical after the round trip.'
        assert np.array_equal(loaded.flow_table, trb_map.flow_table), msg
        assert np.array_equal(loaded.pr_grid, trb_map.pr_grid), msg

    def test_analytic_map(self, tmp_path):
        path = str(tmp_path / 'maps.json')
        cmp_map = AnalyticCompressorMap(Pi_max=2.1, alpha=2.5)
        save_map(cmp_map, path, group='analytic')
        loaded = load_map(path, 'analytic')
        msg = 'The analytic parameters must be identical after the round trip.'
        assert loaded.parameters() == cmp_map.parameters(), msg

    def test_design_descriptions(self, tmp_path):
        path = str(tmp_path / 'design.json')
        spec = CompressorSpec(pr_design=4.0)
        design = CompressorDesign(kind='centrifugal', stage_loading=0.7)
        save_map(spec, path)
        save_map(design, path)
        msg = 'Spec and design must be restored from one file.'
        assert load_map(path, 'compressor_spec') == spec, msg
        assert load_map(path, 'compressor_design') == design, msg

    def test_table(self):
        table = BicubicMap([0, 1, 2], [0, 1], [[0, 1], [1, 2], [4, 5]])
        loaded = map_from_dict(map_to_dict(table))
        msg = 'A single lookup table must keep its interpolation kind.'
        assert isinstance(loaded, BicubicMap), msg
        assert np.array_equal(loaded.table, table.table), msg


class TestDocument:

    def test_merge_into_existing_file(self, tmp_path):
        path = str(tmp_path / 'maps.json')
        save_map(demo_compressor_map(), path, group='engine.lpc')
        save_map(demo_turbine_map(), path, group='engine.lpt')
        save_map(demo_compressor_map(), path, group='engine.hpc')
        with open(path) as f:
            data = json.load(f)
        msg = f'All groups must be kept, got {sorted(data["engine"])}.'
        assert sorted(data['engine']) == ['hpc', 'lpc', 'lpt'], msg
        assert data['engine']['lpt']['format'] == 'turbine_performance_map'

    def test_overwrite_group(self, tmp_path):
        path = str(tmp_path / 'maps.json')
        save_map(demo_turbine_map(), path, group='machine')
        save_map(AnalyticCompressorMap(), path, group='machine')
        loaded = load_map(path, 'machine')
        msg = 'Saving to an existing group must replace its content.'
        assert isinstance(loaded, AnalyticCompressorMap), msg
        with open(path) as f:
            data = json.load(f)
        msg = 'The tables of the replaced turbine map must be removed.'
        assert 'mdot_corr_map' not in data['machine'], msg

    def test_nested_groups_kept(self, tmp_path):
        path = str(tmp_path / 'maps.json')
        save_map(demo_compressor_map(), path, group='engine.lpc')
        save_map(demo_turbine_map(), path, group='engine.stages.lpt')
        save_map(AnalyticCompressorMap(), path, group='engine')
        save_map(AnalyticCompressorMap(Pi_max=2.0), path, group='engine')

        msg = 'Saving to a parent group must keep its nested groups.'
        assert isinstance(load_map(path, 'engine.lpc'),
                          TabulatedCompressorMap), msg
        assert isinstance(load_map(path, 'engine.stages.lpt'),
                          TabulatedTurbineMap), msg
        msg = 'The parent group must hold the last saved map.'
        assert load_map(path, 'engine').Pi_max == 2.0, msg

    def test_group_collision(self, tmp_path):
        path = str(tmp_path / 'maps.json')
        with open(path, 'w') as f:
            json.dump({'engine': 3}, f)
        with pytest.raises(TurboMapFormatError):
            save_map(demo_compressor_map(), path, group='engine.lpc')

    def test_missing_group(self, tmp_path):
        path = str(tmp_path / 'maps.json')
        save_map(demo_compressor_map(), path, group='engine.lpc')
        with pytest.raises(TurboMapFormatError):
            load_map(path, 'engine.hpc')


class TestMissingKeys:

    def setup_method(self):
        self.data = map_to_dict(demo_compressor_map())

    @pytest.mark.parametrize('key', ['format', 'format_version', 'Tt_ref'])
    def test_top_level_key(self, key):
        del self.data[key]
        with pytest.raises(TurboMapFormatError, match=key):
            map_from_dict(self.data, 'lpc')

    @pytest.mark.parametrize('key', ['interpolation', 'xgrid', 'table'])
    def test_table_key(self, key):
        del self.data['pr_map'][key]
        with pytest.raises(TurboMapFormatError, match=key):
            map_from_dict(self.data, 'lpc')

    def test_unknown_format(self):
        self.data['format'] = 'fan_map'
        with pytest.raises(TurboMapFormatError):
            map_from_dict(self.data)

    def test_wrong_version(self):
        self.data['format_version'] = 2
        with pytest.raises(TurboMapFormatError):
            map_from_dict(self.data)

    def test_spec_requires_all_keys(self):
        data = map_to_dict(CompressorSpec())
        del data['flow_range']
        with pytest.raises(TurboMapFormatError, match='flow_range'):
            map_from_dict(data)

    def test_analytic_defaults(self):
        data = map_to_dict(AnalyticCompressorMap(Pi_max=2.0))
        del data['beta']
        loaded = map_from_dict(data)
        msg = 'Missing analytic parameters must fall back to the defaults.'
        assert loaded.beta == AnalyticCompressorMap().beta, msg
        assert loaded.Pi_max == 2.0, msg
