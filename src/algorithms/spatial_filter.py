import pyarrow as pa
import pyarrow.compute as pc

from data_structures.shapes import Point, Rect

COORD_TYPE = pa.float64()


def coords(values) -> pa.DoubleArray:
    """Coerce a sequence of coordinates to a float64 Arrow array"""
    if isinstance(values, pa.ChunkedArray):
        values = values.combine_chunks()
    if isinstance(values, pa.Array):
        return values if values.type == COORD_TYPE else values.cast(COORD_TYPE)
    return pa.array(values, type=COORD_TYPE)


def rect_mask(xs, ys, region: Rect) -> pa.BooleanArray:
    """Arrow-vectorized closed-interval containment check

    Null coordinates never match.
    """
    xs, ys = coords(xs), coords(ys)
    mask = pc.and_(
        pc.and_(
            pc.greater_equal(xs, region.left),
            pc.less_equal(xs, region.right)
        ),
        pc.and_(
            pc.greater_equal(ys, region.bottom),
            pc.less_equal(ys, region.top)
        )
    )
    return pc.fill_null(mask, False)


def circle_mask(xs, ys, cx: float, cy: float, radius: float) -> pa.BooleanArray:
    """Arrow-vectorized squared-distance check against a circle"""
    xs, ys = coords(xs), coords(ys)
    if radius < 0:
        return pa.array([False] * len(xs), type=pa.bool_())
    dx = pc.subtract(xs, cx)
    dy = pc.subtract(ys, cy)
    dist = pc.add(pc.multiply(dx, dx), pc.multiply(dy, dy))
    return pc.fill_null(pc.less_equal(dist, radius * radius), False)


def select(items: list, mask: pa.BooleanArray) -> list:
    """Keep the items whose mask slot is true"""
    return [item for item, keep in zip(items, mask.to_pylist()) if keep]


def batch_columns(batch):
    """Split a point batch into (xs, ys, payloads)

    Accepts a pyarrow Table, RecordBatch or StructArray with `x` and `y`
    fields and an optional `data` field, or any iterable of Point.
    """
    if isinstance(batch, (pa.Table, pa.RecordBatch)):
        names = batch.schema.names
        xs, ys = batch.column('x'), batch.column('y')
        data = batch.column('data').to_pylist() if 'data' in names else [None] * batch.num_rows
        return coords(xs), coords(ys), data

    if isinstance(batch, pa.StructArray):
        has_data = batch.type.get_field_index('data') != -1
        data = batch.field('data').to_pylist() if has_data else [None] * len(batch)
        return coords(batch.field('x')), coords(batch.field('y')), data

    points = list(batch)
    return (
        coords([p.x for p in points]),
        coords([p.y for p in points]),
        [p.data for p in points],
    )


def points_to_table(points, data_type: pa.DataType = None) -> pa.Table:
    """Columnar view of query results

    Args:
    points: Iterable of Point
    data_type: Arrow type for the payload column, inferred when omitted
    Returns:
    Table with columns x, y, data
    """
    points = list(points)
    return pa.table({
        'x': coords([p.x for p in points]),
        'y': coords([p.y for p in points]),
        'data': pa.array([p.data for p in points], type=data_type),
    })


def table_to_points(batch) -> list:
    """Materialize a point batch as Point objects"""
    xs, ys, data = batch_columns(batch)
    return [Point(x, y, d) for x, y, d in zip(xs.to_pylist(), ys.to_pylist(), data)]
