"""Geometric primitives used throughout the kernel.

All lengths are millimetres and all angles radians. Coordinates use a
y-up convention: a polygon with negative signed area is clockwise.
"""

from __future__ import annotations
import math
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, GetCoreSchemaHandler
from pydantic_core import core_schema


EPSILON = 1e-9          # Parallel / zero-length threshold for unit vectors
LENGTH_TOLERANCE = 1e-3  # Millimetre tolerance for comparing measured lengths


# ============================================================
# Units
# ============================================================

class _Quantity(float):
    """A float tagged with a unit.

    Same-unit addition and subtraction keep the unit, scaling by a plain
    number keeps the unit, and combining two different units raises
    ``TypeError``.
    """

    symbol: str = ""

    def __new__(cls, value: float = 0.0) -> Any:
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({float(self)!r})"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_after_validator_function(
            cls,
            core_schema.float_schema(),
            serialization=core_schema.plain_serializer_function_ser_schema(float),
        )

    def _require_same_unit(self, other: object) -> None:
        if isinstance(other, _Quantity) and type(other) is not type(self):
            raise TypeError(
                f"Cannot combine {type(self).__name__} with {type(other).__name__}"
            )

    def __add__(self, other: object) -> Any:
        self._require_same_unit(other)
        if not isinstance(other, (int, float)):
            return NotImplemented
        return type(self)(float(self) + float(other))

    __radd__ = __add__

    def __sub__(self, other: object) -> Any:
        self._require_same_unit(other)
        if not isinstance(other, (int, float)):
            return NotImplemented
        return type(self)(float(self) - float(other))

    def __rsub__(self, other: object) -> Any:
        self._require_same_unit(other)
        if not isinstance(other, (int, float)):
            return NotImplemented
        return type(self)(float(other) - float(self))

    def __mul__(self, other: object) -> Any:
        if isinstance(other, _Quantity):
            raise TypeError(
                f"Cannot multiply {type(self).__name__} by {type(other).__name__}"
            )
        if not isinstance(other, (int, float)):
            return NotImplemented
        return type(self)(float(self) * float(other))

    __rmul__ = __mul__

    def __truediv__(self, other: object) -> Any:
        if isinstance(other, _Quantity):
            self._require_same_unit(other)
            return float(self) / float(other)
        if not isinstance(other, (int, float)):
            return NotImplemented
        return type(self)(float(self) / float(other))

    def __neg__(self) -> Any:
        return type(self)(-float(self))

    def __pos__(self) -> Any:
        return self

    def __abs__(self) -> Any:
        return type(self)(abs(float(self)))


class Length(_Quantity):
    """Millimetres."""
    symbol = "mm"

    def __mul__(self, other: object) -> Any:
        if isinstance(other, Length):
            return Area(float(self) * float(other))
        return super().__mul__(other)

    __rmul__ = __mul__


class Area(_Quantity):
    """Square millimetres."""
    symbol = "mm²"

    def __truediv__(self, other: object) -> Any:
        if isinstance(other, Length):
            return Length(float(self) / float(other))
        return super().__truediv__(other)


class Angle(_Quantity):
    """Radians."""
    symbol = "rad"

    @property
    def degrees(self) -> float:
        return math.degrees(self)


def meters(value: float) -> Length:
    return Length(value * 1000)


def degrees(value: float) -> Angle:
    return Angle(math.radians(value))


def format_length(value: float) -> str:
    """Format a millimetre length for messages, e.g. ``3300mm`` or ``12.5mm``."""
    rounded = round(float(value), 3)
    if rounded == int(rounded):
        return f"{int(rounded)}mm"
    return f"{rounded:g}mm"


# ============================================================
# Vectors
# ============================================================

class Vec2(BaseModel):
    """2D vector / point on the floor plane."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(x=self.x - other.x, y=self.y - other.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(x=self.x * scalar, y=self.y * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vec2:
        return Vec2(x=self.x / scalar, y=self.y / scalar)

    def __neg__(self) -> Vec2:
        return Vec2(x=-self.x, y=-self.y)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def dot(self, other: Vec2) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Vec2) -> float:
        """Z component of the 3D cross product."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def length_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    def normalized(self) -> Vec2:
        ln = self.length()
        if ln < EPSILON:
            return Vec2(x=0.0, y=0.0)
        return Vec2(x=self.x / ln, y=self.y / ln)

    def perpendicular(self) -> Vec2:
        """90-degree counterclockwise rotation."""
        return Vec2(x=-self.y, y=self.x)

    def perpendicular_cw(self) -> Vec2:
        return Vec2(x=self.y, y=-self.x)

    def distance_to(self, other: Vec2) -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def distance_squared_to(self, other: Vec2) -> float:
        dx = self.x - other.x
        dy = self.y - other.y
        return dx * dx + dy * dy

    def lerp(self, other: Vec2, t: float) -> Vec2:
        return Vec2(
            x=self.x + (other.x - self.x) * t,
            y=self.y + (other.y - self.y) * t,
        )

    def scale_add(self, direction: Vec2, distance: float) -> Vec2:
        """``self + direction * distance``."""
        return Vec2(x=self.x + direction.x * distance, y=self.y + direction.y * distance)

    def is_close(self, other: Vec2, tolerance: float = LENGTH_TOLERANCE) -> bool:
        return self.distance_squared_to(other) <= tolerance * tolerance


class Vec3(BaseModel):
    """3D vector. In wall construction space x runs along the wall, y from
    the inside face towards the outside face, z upwards."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(x=self.x + other.x, y=self.y + other.y, z=self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(x=self.x * scalar, y=self.y * scalar, z=self.z * scalar)

    __rmul__ = __mul__

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def volume(self) -> float:
        """Product of the components, for size vectors."""
        return self.x * self.y * self.z


def vec2(x: float, y: float) -> Vec2:
    return Vec2(x=x, y=y)


def vec3(x: float, y: float, z: float) -> Vec3:
    return Vec3(x=x, y=y, z=z)


ZERO_VEC2 = Vec2(x=0.0, y=0.0)


def direction(source: Vec2, target: Vec2) -> Vec2:
    """Unit vector from source to target (zero vector if they coincide)."""
    return (target - source).normalized()


def midpoint(a: Vec2, b: Vec2) -> Vec2:
    return a.lerp(b, 0.5)


# ============================================================
# Lines and segments
# ============================================================

class Line2D(BaseModel):
    """Infinite line through ``point`` along unit ``direction``."""
    model_config = ConfigDict(frozen=True)

    point: Vec2
    direction: Vec2

    @classmethod
    def from_points(cls, start: Vec2, end: Vec2) -> Line2D | None:
        d = end - start
        if d.length() < EPSILON:
            return None
        return cls(point=start, direction=d.normalized())

    def project(self, point: Vec2) -> Vec2:
        t = (point - self.point).dot(self.direction)
        return self.point.scale_add(self.direction, t)

    def distance_to(self, point: Vec2) -> float:
        return abs((point - self.point).cross(self.direction))


class LineSegment2D(BaseModel):
    """Bounded segment from ``start`` to ``end``."""
    model_config = ConfigDict(frozen=True)

    start: Vec2
    end: Vec2

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)

    @property
    def direction(self) -> Vec2:
        return direction(self.start, self.end)

    @property
    def midpoint(self) -> Vec2:
        return midpoint(self.start, self.end)

    def to_line(self) -> Line2D | None:
        return Line2D.from_points(self.start, self.end)

    def distance_to(self, point: Vec2) -> float:
        d = self.end - self.start
        len_sq = d.length_squared()
        if len_sq < EPSILON:
            return point.distance_to(self.start)
        t = max(0.0, min(1.0, (point - self.start).dot(d) / len_sq))
        return point.distance_to(self.start.scale_add(d, t))


def line_intersection(l1: Line2D, l2: Line2D) -> Vec2 | None:
    """Intersection of two infinite lines; None if they are parallel."""
    det = l1.direction.cross(l2.direction)
    if abs(det) < EPSILON:
        return None
    t = (l2.point - l1.point).cross(l2.direction) / det
    return l1.point.scale_add(l1.direction, t)


# ============================================================
# Polygons
# ============================================================

class Polygon2D(BaseModel):
    """Closed polygon; the closing point is not repeated."""
    model_config = ConfigDict(frozen=True)

    points: list[Vec2]

    def __len__(self) -> int:
        return len(self.points)

    def signed_area(self) -> float:
        return polygon_signed_area(self.points)

    def area(self) -> float:
        return abs(self.signed_area())

    def is_clockwise(self) -> bool:
        return self.signed_area() < 0

    def ensure_clockwise(self) -> Polygon2D:
        if self.signed_area() > 0:
            return Polygon2D(points=list(reversed(self.points)))
        return self

    def ensure_counter_clockwise(self) -> Polygon2D:
        if self.signed_area() < 0:
            return Polygon2D(points=list(reversed(self.points)))
        return self

    def bounds(self) -> tuple[Vec2, Vec2]:
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return Vec2(x=min(xs), y=min(ys)), Vec2(x=max(xs), y=max(ys))


def polygon_signed_area(points: Sequence[Vec2]) -> float:
    """Shoelace formula; negative for clockwise winding."""
    n = len(points)
    a = 0.0
    for i in range(n):
        j = (i + 1) % n
        a += points[i].x * points[j].y - points[j].x * points[i].y
    return a / 2


def canonical_polygon_key(points: Sequence[Vec2], precision: int = 0) -> str:
    """Shape signature of a polygon, independent of placement.

    Encodes the cyclic sequence of (edge length, turn angle) pairs and
    picks the lexicographically smallest rotation over both traversal
    directions, so translated, rotated, mirrored or re-indexed copies of the
    same polygon share a key.
    """
    pts = [p for i, p in enumerate(points) if not p.is_close(points[i - 1])] if points else []
    n = len(pts)
    if n < 3:
        return "|".join(f"{round(p.x, precision):g},{round(p.y, precision):g}" for p in pts)

    def encode(seq: list[Vec2]) -> list[str]:
        edges = []
        turns = []
        for i in range(n):
            prev_pt, pt, next_pt = seq[i - 1], seq[i], seq[(i + 1) % n]
            d_in = direction(prev_pt, pt)
            d_out = direction(pt, next_pt)
            edges.append(pt.distance_to(next_pt))
            turns.append(math.degrees(math.atan2(d_in.cross(d_out), d_in.dot(d_out))))
        # Convex turns positive regardless of winding
        sign = -1 if sum(turns) < 0 else 1
        return [
            f"{round(edge, precision):g}@{round(sign * turn):d}"
            for edge, turn in zip(edges, turns)
        ]

    candidates = []
    for seq in (list(pts), list(reversed(pts))):
        tokens = encode(seq)
        for k in range(n):
            candidates.append(",".join(tokens[k:] + tokens[:k]))
    return min(candidates)
