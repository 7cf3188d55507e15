from dataclasses import dataclass, field
from typing import Any, Tuple


@dataclass(frozen=True)
class Point:
    """A point in 2D space holding an opaque payload.

    Attributes:
        x (float): Horizontal coordinate.
        y (float): Vertical coordinate.
        data (Any): Caller-owned payload. Never inspected or compared by the tree.

    Example:
        >>> p = Point(25.0, 25.0, "a")
        >>> p.x, p.data
        (25.0, 'a')

    """
    x: float
    y: float
    data: Any = None


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle anchored on its center.

    The rectangle covers the closed box [x - w, x + w] x [y - h, y + h], so
    `w` and `h` are half-extents, not full sizes. The same type is used for
    tree partition bounds and for query regions.

    Edges are stored, not derived on every test. Rectangles built with
    `from_edges` keep the given edges exactly, so quadrants produced by
    `quadrants()` share their split lines bit for bit with the parent's
    center even when halving the extents rounds.

    Attributes:
        x (float): Center x.
        y (float): Center y.
        w (float): Half-width, >= 0.
        h (float): Half-height, >= 0.
        left, right, bottom, top (float): Closed edges.

    Example:
        >>> r = Rect(0, 0, 50, 50)
        >>> r.contains(50, -50)
        True
        >>> r.intersects(Rect.range(60, 0, 10))
        True

    """
    x: float
    y: float
    w: float
    h: float
    left: float = field(init=False, repr=False, compare=False)
    right: float = field(init=False, repr=False, compare=False)
    bottom: float = field(init=False, repr=False, compare=False)
    top: float = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not (self.w >= 0 and self.h >= 0):
            raise ValueError(f"Half-extents must be >= 0, got w={self.w}, h={self.h}")
        self._set_edges(self.x - self.w, self.y - self.h, self.x + self.w, self.y + self.h)

    def _set_edges(self, left: float, bottom: float, right: float, top: float):
        object.__setattr__(self, 'left', left)
        object.__setattr__(self, 'bottom', bottom)
        object.__setattr__(self, 'right', right)
        object.__setattr__(self, 'top', top)

    @classmethod
    def from_edges(cls, left: float, bottom: float, right: float, top: float) -> "Rect":
        """Rectangle with exactly these edges; center and extents may round"""
        rect = cls((left + right) / 2, (bottom + top) / 2, (right - left) / 2, (top - bottom) / 2)
        rect._set_edges(left, bottom, right, top)
        return rect

    @classmethod
    def range(cls, x: float, y: float, r: float) -> "Rect":
        """Square with half-extent r around (x, y)"""
        return cls(x, y, r, r)

    @classmethod
    def corners(cls, a: Tuple[float, float], b: Tuple[float, float]) -> "Rect":
        """Rectangle spanning two opposite corners, given in any order"""
        return cls.from_edges(min(a[0], b[0]), min(a[1], b[1]), max(a[0], b[0]), max(a[1], b[1]))

    @classmethod
    def screen_size(cls, width: float, height: float) -> "Rect":
        """Rectangle covering [0, width] x [0, height]"""
        return cls.from_edges(0.0, 0.0, width, height)

    def contains(self, x: float, y: float) -> bool:
        """Closed-interval containment check on both axes"""
        return self.left <= x <= self.right and self.bottom <= y <= self.top

    def intersects(self, other: "Rect") -> bool:
        """Rectangle overlap; touching edges count as intersecting"""
        return not (other.left > self.right or
                    other.right < self.left or
                    other.bottom > self.top or
                    other.top < self.bottom)

    def intersects_circle(self, cx: float, cy: float, r: float) -> bool:
        """Clamp the circle center onto the rectangle and compare distances"""
        if r < 0:
            return False
        nx = min(max(cx, self.left), self.right)
        ny = min(max(cy, self.bottom), self.top)
        dx, dy = nx - cx, ny - cy
        return dx * dx + dy * dy <= r * r

    def quadrants(self) -> Tuple["Rect", "Rect", "Rect", "Rect"]:
        """Split at the center into (nw, ne, sw, se); y grows upward"""
        x, y = self.x, self.y
        return (
            Rect.from_edges(self.left, y, x, self.top),
            Rect.from_edges(x, y, self.right, self.top),
            Rect.from_edges(self.left, self.bottom, x, y),
            Rect.from_edges(x, self.bottom, self.right, y),
        )
