import logging
from typing import List

import pyarrow as pa

from algorithms.spatial_filter import batch_columns, circle_mask, coords, rect_mask, select
from data_structures.shapes import Point, Rect

logger = logging.getLogger(__name__)


class InvalidCapacityError(ValueError):
    """Raised when a tree is built with a leaf capacity below 1"""


class _Leaf:
    """Node holding points directly, in insertion order.

    Coordinates are mirrored into flat `xs`/`ys` columns so a leaf scan is a
    single vectorized Arrow filter. The Arrow copies are built on first scan
    and reused until the next append.
    """
    __slots__ = ('boundary', 'depth', 'points', 'xs', 'ys', '_columns')

    def __init__(self, boundary: Rect, depth: int):
        self.boundary = boundary
        self.depth = depth
        self.points: List[Point] = []
        self.xs: List[float] = []
        self.ys: List[float] = []
        self._columns = None

    def append(self, point: Point):
        self.points.append(point)
        self.xs.append(point.x)
        self.ys.append(point.y)
        self._columns = None

    def columns(self):
        if self._columns is None:
            self._columns = (coords(self.xs), coords(self.ys))
        return self._columns


class _Internal:
    """Node split into exactly four children: nw, ne, sw, se"""
    __slots__ = ('boundary', 'depth', 'children')

    def __init__(self, boundary: Rect, depth: int, children: list):
        self.boundary = boundary
        self.depth = depth
        self.children = children

    def route(self, x: float, y: float) -> int:
        # Split lines belong to the north/east side
        east = x >= self.boundary.x
        north = y >= self.boundary.y
        return (0 if north else 2) + (1 if east else 0)


class QuadTree:
    """Point-region quad tree with rectangle and circle queries.

    The tree partitions a fixed rectangle recursively. A leaf stores up to
    `capacity` points; inserting one more splits it into four equal
    quadrants, redistributes its points and routes the new point into the
    matching child. Queries walk down from the root and skip every subtree
    whose bounds cannot overlap the query shape.

    Leaves at `max_depth` never split and may exceed `capacity`, which keeps
    insertion finite when more than `capacity` points share coordinates.

    All edges are closed: a point on the root boundary is inside, and a
    point on a split line goes to the north (upper) and east (right) child.

    Attributes:
        boundary (Rect): Root bounds, fixed for the tree's lifetime.
        capacity (int): Max points per leaf before subdivision.
        max_depth (int): Depth at which leaves stop subdividing.

    Example:
        >>> qt = QuadTree(Rect(0, 0, 50, 50), capacity=4)
        >>> qt.insert(Point(25, 25, "a"))
        True
        >>> qt.insert(Point(80, 0, "far"))
        False
        >>> [p.data for p in qt.query_circle(25, 25, 5)]
        ['a']

    """
    CAPACITY = 4
    MAX_DEPTH = 32

    def __init__(self, boundary: Rect, capacity: int = CAPACITY, max_depth: int = MAX_DEPTH):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise InvalidCapacityError(f"Capacity must be an integer >= 1, got {capacity!r}")
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
            raise ValueError(f"max_depth must be an integer >= 0, got {max_depth!r}")
        self.boundary = boundary
        self.capacity = capacity
        self.max_depth = max_depth
        self._root = _Leaf(boundary, 0)
        self._count = 0

    def __len__(self) -> int:
        return self._count

    @property
    def depth(self) -> int:
        """Depth of the deepest node, the root being 0"""
        deepest = 0
        stack = [self._root]
        while stack:
            node = stack.pop()
            deepest = max(deepest, node.depth)
            if isinstance(node, _Internal):
                stack.extend(node.children)
        return deepest

    def insert(self, point: Point) -> bool:
        """Insert point into spatial index

        Returns:
        False when the point lies outside the root bounds; nothing is stored.
        """
        if not self.boundary.contains(point.x, point.y):
            logger.debug("Rejected point (%s, %s) outside %s", point.x, point.y, self.boundary)
            return False
        self._insert(point)
        self._count += 1
        return True

    def insert_batch(self, points) -> pa.BooleanArray:
        """Insert many points, checking root containment in one Arrow pass

        Args:
        points: Table, RecordBatch or StructArray with x, y and optional data
                fields, or an iterable of Point
        Returns:
        Per-row acceptance mask
        """
        xs, ys, data = batch_columns(points)
        accepted = rect_mask(xs, ys, self.boundary)
        rows = zip(xs.to_pylist(), ys.to_pylist(), data, accepted.to_pylist())
        stored = 0
        for x, y, payload, ok in rows:
            if ok:
                self._insert(Point(x, y, payload))
                stored += 1
        self._count += stored
        if stored < len(accepted):
            logger.debug("Batch insert rejected %d of %d points", len(accepted) - stored, len(accepted))
        return accepted

    def _insert(self, point: Point):
        """Walk down to the leaf owning point, splitting full leaves on the way"""
        parent, slot, node = None, None, self._root
        while True:
            if isinstance(node, _Leaf):
                if len(node.points) < self.capacity:
                    node.append(point)
                    return
                if node.depth >= self.max_depth:
                    logger.debug("Leaf at max depth %d holds %d points", node.depth, len(node.points) + 1)
                    node.append(point)
                    return
                node = self._subdivide(node)
                if parent is None:
                    self._root = node
                else:
                    parent.children[slot] = node

            slot = node.route(point.x, point.y)
            parent, node = node, node.children[slot]

    def _subdivide(self, leaf: _Leaf) -> _Internal:
        """Replace a full leaf by an internal node with four child leaves"""
        children = [_Leaf(q, leaf.depth + 1) for q in leaf.boundary.quadrants()]
        node = _Internal(leaf.boundary, leaf.depth, children)
        # A full leaf holds exactly `capacity` points, so no child can overflow here
        for p in leaf.points:
            children[node.route(p.x, p.y)].append(p)
        logger.debug("Subdivided %s at depth %d, redistributed %d points",
                     leaf.boundary, leaf.depth, len(leaf.points))
        return node

    def _leaves(self, overlaps):
        """Leaves reachable through nodes accepted by `overlaps`"""
        stack = [self._root]
        while stack:
            node = stack.pop()
            if not overlaps(node.boundary):
                continue
            if isinstance(node, _Leaf):
                if node.points:
                    yield node
            else:
                stack.extend(node.children)

    def query_rect(self, region: Rect) -> List[Point]:
        """Query points within rectangular region (edges inclusive)"""
        found = []
        for leaf in self._leaves(lambda bounds: bounds.intersects(region)):
            xs, ys = leaf.columns()
            found.extend(select(leaf.points, rect_mask(xs, ys, region)))
        return found

    def query_circle(self, x: float, y: float, radius: float) -> List[Point]:
        """Query points within `radius` of (x, y), boundary inclusive

        A negative radius matches nothing.
        """
        found = []
        for leaf in self._leaves(lambda bounds: bounds.intersects_circle(x, y, radius)):
            xs, ys = leaf.columns()
            found.extend(select(leaf.points, circle_mask(xs, ys, x, y, radius)))
        return found

    def collect(self) -> List[Point]:
        """Every stored point"""
        return self.query_rect(self.boundary)

    def get_rects(self) -> List[Rect]:
        """Bounds of every node in pre-order, root first"""
        rects = []
        stack = [self._root]
        while stack:
            node = stack.pop()
            rects.append(node.boundary)
            if isinstance(node, _Internal):
                stack.extend(reversed(node.children))
        return rects

    def clear(self):
        """Drop all points and nodes, keeping bounds and capacity"""
        self._root = _Leaf(self.boundary, 0)
        self._count = 0
