"""Curve and ControlPoint: piecewise cubic Bézier scalar functions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from .values import Vector2

CMP_EPSILON = 0.00001


@dataclass(frozen=True, slots=True)
class ControlPoint:
    pos: Vector2
    left_tangent: float = 0.0
    right_tangent: float = 0.0

    @classmethod
    def at(cls, x: float, y: float, left_tangent: float = 0.0, right_tangent: float = 0.0) -> ControlPoint:
        return cls(Vector2(x, y), left_tangent, right_tangent)


def bezier_interp(t: float, start: float, control1: float, control2: float, end: float) -> float:
    """Evaluate a one-dimensional cubic Bézier at *t* in ``[0, 1]``."""
    omt = 1.0 - t
    omt2 = omt * omt
    omt3 = omt2 * omt
    t2 = t * t
    t3 = t2 * t
    return start * omt3 + control1 * omt2 * t * 3.0 + control2 * omt * t2 * 3.0 + end * t3


@dataclass(slots=True)
class Curve:
    """Ordered control points, sorted by ``pos.x`` in well-formed input.

    Usage::

        curve = Curve()
        curve.add_point(ControlPoint.at(0, 0))
        curve.add_point(ControlPoint.at(1, 1))
        curve.interpolate(0.5)   # → 0.5
    """

    points: list[ControlPoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[ControlPoint]:
        return iter(self.points)

    def add_point(self, point: ControlPoint) -> None:
        self.points.append(point)

    def get_index(self, offset: float) -> int:
        """Index of the point starting the segment that brackets *offset*."""
        imin = 0
        imax = len(self.points) - 1

        while imax - imin > 1:
            m = (imin + imax) // 2
            a = self.points[m].pos.x
            b = self.points[m + 1].pos.x

            if a < offset and b < offset:
                imin = m
            elif a > offset:
                imax = m
            else:
                return m

        if offset > self.points[imax].pos.x:
            return imax
        return imin

    def interpolate(self, offset: float) -> float:
        if not self.points:
            return 0.0
        if len(self.points) == 1:
            return self.points[0].pos.y

        i = self.get_index(offset)
        if i == len(self.points) - 1:
            return self.points[i].pos.y

        local = offset - self.points[i].pos.x
        if i == 0 and local <= 0.0:
            return self.points[0].pos.y

        return self._interpolate_local(i, local)

    def _interpolate_local(self, index: int, offset: float) -> float:
        a = self.points[index]
        b = self.points[index + 1]

        d = b.pos.x - a.pos.x
        if abs(d) <= CMP_EPSILON:
            return b.pos.y

        local_offset = offset / d
        d /= 3.0

        yac = a.pos.y + d * a.right_tangent
        ybc = b.pos.y - d * b.left_tangent

        return bezier_interp(local_offset, a.pos.y, yac, ybc, b.pos.y)
