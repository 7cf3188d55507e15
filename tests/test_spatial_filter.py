import pytest
import numpy as np
import pyarrow as pa
from hypothesis import given, strategies as st

from algorithms.spatial_filter import (
    batch_columns, circle_mask, points_to_table, rect_mask, select, table_to_points
)
from data_structures.shapes import Point, Rect


class TestSpatialFilter:
    @given(st.lists(st.tuples(st.floats(-50, 50), st.floats(-50, 50))))
    def test_rect_mask_matches_contains(self, points):
        region = Rect(5, -5, 20, 10)
        xs = [x for x, _ in points]
        ys = [y for _, y in points]
        mask = rect_mask(xs, ys, region)
        assert mask.to_pylist() == [region.contains(x, y) for x, y in points]

    def test_rect_mask_nulls(self):
        mask = rect_mask(pa.array([1.0, None]), pa.array([1.0, 1.0]), Rect(0, 0, 5, 5))
        assert mask.to_pylist() == [True, False]

    def test_circle_mask(self):
        rng = np.random.default_rng(11)
        xy = rng.uniform(-10, 10, size=(200, 2))
        mask = circle_mask(xy[:, 0].tolist(), xy[:, 1].tolist(), 1.5, -2.0, 4.0)
        dx, dy = xy[:, 0] - 1.5, xy[:, 1] + 2.0
        assert mask.to_pylist() == (dx * dx + dy * dy <= 16.0).tolist()

    def test_circle_mask_negative_radius(self):
        assert circle_mask([0.0, 1.0], [0.0, 1.0], 0, 0, -1).to_pylist() == [False, False]

    def test_select(self):
        mask = pa.array([True, False, True])
        assert select(["a", "b", "c"], mask) == ["a", "c"]

    def test_points_to_table(self):
        table = points_to_table([Point(1, 2, "a"), Point(3.5, -1, "b")])
        assert table.column_names == ['x', 'y', 'data']
        assert table.column('x').to_pylist() == [1.0, 3.5]
        assert table.column('data').to_pylist() == ["a", "b"]

    def test_points_to_table_explicit_type(self):
        table = points_to_table([Point(0, 0, 1)], data_type=pa.int16())
        assert table.schema.field('data').type == pa.int16()

    def test_points_to_table_unsupported_payload(self):
        with pytest.raises((pa.ArrowInvalid, pa.ArrowTypeError)):
            points_to_table([Point(0, 0, object())])

    def test_table_round_trip(self):
        points = [Point(1.0, 2.0, "a"), Point(-3.0, 4.0, None)]
        assert table_to_points(points_to_table(points)) == points

    def test_batch_columns_record_batch(self):
        batch = pa.RecordBatch.from_pydict({'x': [1, 2], 'y': [3, 4]})
        xs, ys, data = batch_columns(batch)
        assert xs.type == pa.float64()
        assert ys.to_pylist() == [3.0, 4.0]
        assert data == [None, None]


# --------------------------
# Running Tests
# --------------------------
#if __name__ == "__main__":
#    pytest.main([
#        "-v",
#        "--hypothesis-show-statistics",
#        "--cov=spatial-filter",
#        "--cov-report=html:coverage"
#    ])
# --------------------------
