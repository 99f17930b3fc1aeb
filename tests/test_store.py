"""
Tests for data_ops.store — CurveSample parsing and CurveSampleStore.

Run with: python -m pytest tests/test_store.py
"""

import math

import numpy as np
import pytest

from data_ops.store import (
    CurveDescriptor,
    CurveSample,
    CurveSampleStore,
    WellInfo,
    coerce_number,
    parse_sample_batch,
)


def _make_store(rows=None):
    """Helper to create a store from a raw payload."""
    if rows is None:
        rows = [
            {"depth": 100, "values": {"GR": 45.0, "RHOB": 2.31}},
            {"depth": 100.5, "values": {"GR": 52.5}},
            {"depth": 101, "values": {"GR": None, "RHOB": 2.40}},
        ]
    return CurveSampleStore.from_records(rows)


class TestCoerceNumber:
    def test_int_and_float(self):
        assert coerce_number(3) == 3.0
        assert coerce_number(2.5) == 2.5

    def test_rejects_non_numeric(self):
        assert coerce_number(None) is None
        assert coerce_number("12.3") is None
        assert coerce_number(True) is None

    def test_rejects_non_finite(self):
        assert coerce_number(float("nan")) is None
        assert coerce_number(math.inf) is None

    def test_rejects_int_beyond_float_range(self):
        assert coerce_number(10 ** 400) is None

    def test_huge_int_in_payload_is_a_gap(self):
        store = CurveSampleStore.from_records([
            {"depth": 1, "values": {"GR": 10 ** 400}},
            {"depth": 2, "values": {"GR": 7}},
        ])
        assert len(store) == 2
        assert np.isnan(store.curve_values("GR")[0])


class TestParsing:
    def test_curve_sample_from_dict(self):
        s = CurveSample.from_dict({"depth": 10, "values": {"GR": 5, "NPHI": "bad"}})
        assert s.depth == 10.0
        assert s.values == {"GR": 5.0, "NPHI": None}

    def test_curve_sample_without_depth(self):
        assert CurveSample.from_dict({"values": {"GR": 1}}) is None
        assert CurveSample.from_dict("not a row") is None

    def test_missing_values_mapping(self):
        s = CurveSample.from_dict({"depth": 3})
        assert s.values == {}

    def test_batch_keeps_order_and_duplicates(self):
        batch = parse_sample_batch([
            {"depth": 5, "values": {"GR": 1}},
            {"depth": 5, "values": {"GR": 2}},
            {"depth": 4, "values": {"GR": 3}},
        ])
        assert [s.depth for s in batch] == [5.0, 5.0, 4.0]

    def test_batch_drops_rows_without_depth(self):
        batch = parse_sample_batch([{"depth": 1, "values": {}}, {"values": {"GR": 2}}, None])
        assert len(batch) == 1

    def test_batch_requires_list(self):
        with pytest.raises(ValueError):
            parse_sample_batch({"depth": 1})

    def test_well_info_defaults(self):
        w = WellInfo.from_dict({"id": "W-1"})
        assert w.name == ""
        assert w.display_name == "W-1"
        assert w.start_depth == 0.0
        assert w.stop_depth == 0.0

    def test_well_info_depths(self):
        w = WellInfo.from_dict({"id": 7, "name": "Alpha", "start_depth": 1200, "stop_depth": 3400.5})
        assert w.id == "7"
        assert w.display_name == "Alpha"
        assert (w.start_depth, w.stop_depth) == (1200.0, 3400.5)

    def test_curve_descriptor(self):
        assert CurveDescriptor.from_dict({"name": "GR"}) == CurveDescriptor("GR")
        assert CurveDescriptor.from_dict({"name": ""}) is None
        assert CurveDescriptor.from_dict({}) is None


class TestCurveSampleStore:
    def test_empty_store(self):
        store = CurveSampleStore()
        assert len(store) == 0
        assert store.depths() == []
        assert store.curve_names() == []
        s = store.summary()
        assert s["num_points"] == 0
        assert s["depth_min"] is None

    def test_depths_in_store_order(self):
        store = _make_store()
        assert store.depths() == [100.0, 100.5, 101.0]

    def test_curve_values_with_gaps(self):
        store = _make_store()
        rhob = store.curve_values("RHOB")
        assert rhob[0] == 2.31
        assert np.isnan(rhob[1])
        assert rhob[2] == 2.40

    def test_unknown_curve_is_all_nan(self):
        store = _make_store()
        vals = store.curve_values("NPHI")
        assert len(vals) == 3
        assert np.isnan(vals).all()

    def test_numeric_values_skips_gaps(self):
        store = _make_store()
        assert store.numeric_values("GR").tolist() == [45.0, 52.5]

    def test_rows_at_depths_exact_match(self):
        store = _make_store()
        hits = store.rows_at_depths({100.5, 101.0001})
        assert hits.index.tolist() == [100.5]

    def test_rows_at_depths_keeps_duplicates(self):
        store = CurveSampleStore.from_records([
            {"depth": 1, "values": {"GR": 1}},
            {"depth": 2, "values": {"GR": 2}},
            {"depth": 2, "values": {"GR": 3}},
        ])
        hits = store.rows_at_depths({2})
        assert hits["GR"].tolist() == [2.0, 3.0]

    def test_all_values_missing(self):
        store = CurveSampleStore.from_records([
            {"depth": 1, "values": {}},
            {"depth": 2, "values": {}},
        ])
        assert len(store) == 2
        assert store.numeric_values("GR").size == 0

    def test_put_batch_replaces(self):
        store = _make_store()
        store.put_batch(parse_sample_batch([{"depth": 9, "values": {"GR": 1}}]))
        assert store.depths() == [9.0]
        assert store.curve_names() == ["GR"]

    def test_clear(self):
        store = _make_store()
        store.clear()
        assert len(store) == 0

    def test_summary(self):
        s = _make_store().summary()
        assert s["num_points"] == 3
        assert s["depth_min"] == 100.0
        assert s["depth_max"] == 101.0
        assert set(s["curves"]) == {"GR", "RHOB"}
