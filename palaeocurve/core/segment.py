from typing import Iterator

import numpy as np

from .control_point import ControlPoint, PointRole, HIT_ORDER, contains
from .math import Point, Op, SamplingMode, reflect, sample_parameters


class SegmentArena:
    """
    Owns the segments of one chain. Segments refer to each other (and control
    points to their segment) through the integer handles handed out here.
    """

    def __init__(self, first_handle: int = 0):
        self._segments: dict[int, "Segment"] = {}
        self._next_handle = first_handle

    @property
    def next_handle(self) -> int:
        return self._next_handle

    def new(self, p0: Point, p1: Point, p2: Point, p3: Point) -> "Segment":
        handle = self._next_handle
        self._next_handle += 1
        segment = Segment(handle, p0, p1, p2, p3)
        self._segments[handle] = segment
        return segment

    def discard(self, handle: int) -> None:
        self._segments.pop(handle, None)

    def get(self, handle: int | None) -> "Segment | None":
        if handle is None:
            return None
        return self._segments.get(handle)

    def __getitem__(self, handle: int) -> "Segment":
        return self._segments[handle]

    def __contains__(self, handle: int) -> bool:
        return handle in self._segments

    def __len__(self) -> int:
        return len(self._segments)

    def __iter__(self) -> Iterator["Segment"]:
        return iter(self._segments.values())


def _params(t) -> np.ndarray:
    # trailing axis so coefficients broadcast against (x, y) pairs
    return np.clip(np.asarray(t, dtype=float), 0.0, 1.0)[..., None]


class Segment:
    """
    One cubic Bezier segment:
      - p0 / p3: start and end anchors, shared with neighbouring segments
      - p1 / p2: handles controlling the tangent at p0 / p3
      - prev / next: arena handles of the neighbours (None at the chain ends)
    """

    def __init__(self, handle: int, p0: Point, p1: Point, p2: Point, p3: Point):
        self.handle = handle
        self.prev: int | None = None
        self.next: int | None = None
        self.p0 = ControlPoint(float(p0[0]), float(p0[1]), PointRole.START, handle)
        self.p1 = ControlPoint(float(p1[0]), float(p1[1]), PointRole.CONTROL_1, handle)
        self.p2 = ControlPoint(float(p2[0]), float(p2[1]), PointRole.CONTROL_2, handle)
        self.p3 = ControlPoint(float(p3[0]), float(p3[1]), PointRole.END, handle)

    def __repr__(self):
        return (f"Segment({self.handle}, {self.p0.coords}, {self.p1.coords}, "
                f"{self.p2.coords}, {self.p3.coords})")

    # ---- accessors ----------------------------------------------------------
    @property
    def points(self) -> tuple[ControlPoint, ControlPoint, ControlPoint, ControlPoint]:
        return self.p0, self.p1, self.p2, self.p3

    def point(self, role: PointRole) -> ControlPoint:
        match role:
            case PointRole.START:
                return self.p0
            case PointRole.CONTROL_1:
                return self.p1
            case PointRole.CONTROL_2:
                return self.p2
            case PointRole.END:
                return self.p3
            case _:
                raise ValueError(role)

    def point_coordinates(self) -> list[Point]:
        """Rendering order: (start, control 1), (end, control 2)."""
        return [self.p0.coords, self.p1.coords, self.p3.coords, self.p2.coords]

    def path_ops(self) -> list[Op]:
        return [("M", self.p0.coords), ("C", (self.p1.coords, self.p2.coords, self.p3.coords))]

    def copy(self, handle: int | None = None) -> "Segment":
        """Detached duplicate: same coordinates, no neighbour links."""
        return Segment(self.handle if handle is None else handle,
                       self.p0.coords, self.p1.coords, self.p2.coords, self.p3.coords)

    # ---- linking ------------------------------------------------------------
    def insert_as_next(self, segment: "Segment", arena: SegmentArena) -> None:
        segment.next = self.next
        segment.prev = self.handle
        following = arena.get(self.next)
        if following is not None:
            following.prev = segment.handle
        self.next = segment.handle

    def insert_as_previous(self, segment: "Segment", arena: SegmentArena) -> None:
        segment.next = self.handle
        segment.prev = self.prev
        preceding = arena.get(self.prev)
        if preceding is not None:
            preceding.next = segment.handle
        self.prev = segment.handle

    # ---- continuity-preserving mutation ------------------------------------
    def move_point(self, role: PointRole, x: float, y: float, arena: SegmentArena) -> None:
        """
        Apply the continuity rule for moving `role` to (x, y). The target point
        itself is left untouched; see `set_point`.
        """
        match role:
            case PointRole.START:
                self.p1.translate(x - self.p0.x, y - self.p0.y)
            case PointRole.CONTROL_1:
                preceding = arena.get(self.prev)
                if preceding is not None:
                    preceding.p2.move(*reflect(self.p0.coords, (x, y)))
            case PointRole.CONTROL_2:
                following = arena.get(self.next)
                if following is not None:
                    following.p1.move(*reflect(self.p3.coords, (x, y)))
            case PointRole.END:
                self.p2.translate(x - self.p3.x, y - self.p3.y)
                following = arena.get(self.next)
                if following is not None:
                    following._set(PointRole.START, x, y, arena)

    def set_point(self, role: PointRole, x: float, y: float, arena: SegmentArena) -> None:
        """Move `role` to (x, y) and propagate continuity along the chain."""
        if role is PointRole.START and self.prev is not None:
            # shared anchor: moving it from either side is an END move on prev
            arena[self.prev].set_point(PointRole.END, x, y, arena)
            return
        self._set(role, float(x), float(y), arena)

    def _set(self, role: PointRole, x: float, y: float, arena: SegmentArena) -> None:
        self.move_point(role, x, y, arena)
        self.point(role).move(x, y)

    def translate(self, dx: float, dy: float) -> None:
        for p in self.points:
            p.translate(dx, dy)

    # ---- hit testing --------------------------------------------------------
    def inside_control_point(self, x: float, y: float, width: int) -> ControlPoint | None:
        for role in HIT_ORDER:
            candidate = self.point(role)
            if contains(candidate, x, y, width):
                return candidate
        return None

    def is_inside_control_point(self, x: float, y: float, width: int) -> bool:
        return self.inside_control_point(x, y, width) is not None

    # ---- geometry -----------------------------------------------------------
    def _controls(self) -> np.ndarray:
        return np.array([p.coords for p in self.points], dtype=float)

    def position(self, t) -> np.ndarray:
        t = _params(t)
        u = 1.0 - t
        p0, p1, p2, p3 = self._controls()
        return u ** 3 * p0 + 3.0 * u ** 2 * t * p1 + 3.0 * u * t ** 2 * p2 + t ** 3 * p3

    def first_derivative(self, t) -> np.ndarray:
        t = _params(t)
        u = 1.0 - t
        p0, p1, p2, p3 = self._controls()
        return 3.0 * u ** 2 * (p1 - p0) + 6.0 * u * t * (p2 - p1) + 3.0 * t ** 2 * (p3 - p2)

    def second_derivative(self, t) -> np.ndarray:
        t = _params(t)
        u = 1.0 - t
        p0, p1, p2, p3 = self._controls()
        return 6.0 * u * (p2 - 2.0 * p1 + p0) + 6.0 * t * (p3 - 2.0 * p2 + p1)

    def tangent(self, t) -> np.ndarray:
        """Unit first derivative; NaN where the derivative vanishes."""
        d = self.first_derivative(t)
        length = np.hypot(d[..., 0], d[..., 1])[..., None]
        with np.errstate(divide="ignore", invalid="ignore"):
            return d / length

    def normal(self, t) -> np.ndarray:
        tangent = self.tangent(t)
        return np.stack([-tangent[..., 1], tangent[..., 0]], axis=-1)

    def kappa(self, t, legacy: bool = False):
        """
        Signed curvature (dx*ddy - ddx*dy) / (dx^2 + dy^2)^(3/2).

        `legacy` uses exponent 1, as the original curve tool did through
        integer division, to reproduce its numbers.
        """
        d = self.first_derivative(t)
        dd = self.second_derivative(t)
        numerator = d[..., 0] * dd[..., 1] - dd[..., 0] * d[..., 1]
        exponent = 1.0 if legacy else 1.5
        denominator = (d[..., 0] ** 2 + d[..., 1] ** 2) ** exponent
        with np.errstate(divide="ignore", invalid="ignore"):
            return np.where(denominator == 0.0, np.nan, numerator / denominator)

    def radius(self, t, legacy: bool = False):
        """Radius of the osculating circle, 1 / kappa."""
        with np.errstate(divide="ignore", invalid="ignore"):
            return 1.0 / self.kappa(t, legacy=legacy)

    # ---- sampled ------------------------------------------------------------
    def curve_t_values(self, n: int, mode: SamplingMode = SamplingMode.LEGACY) -> np.ndarray:
        return sample_parameters(n, mode)

    def curve_coordinates(self, n: int, mode: SamplingMode = SamplingMode.LEGACY) -> np.ndarray:
        return self.position(sample_parameters(n, mode))

    def curve_tangents(self, n: int, mode: SamplingMode = SamplingMode.LEGACY) -> np.ndarray:
        return self.tangent(sample_parameters(n, mode))

    def curve_normals(self, n: int, mode: SamplingMode = SamplingMode.LEGACY) -> np.ndarray:
        return self.normal(sample_parameters(n, mode))

    def curve_kappas(self, n: int, mode: SamplingMode = SamplingMode.LEGACY,
                     legacy: bool = False) -> np.ndarray:
        return self.kappa(sample_parameters(n, mode), legacy=legacy)

    def curve_radii(self, n: int, mode: SamplingMode = SamplingMode.LEGACY,
                    legacy: bool = False) -> np.ndarray:
        return self.radius(sample_parameters(n, mode), legacy=legacy)
