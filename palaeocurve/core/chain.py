import logging
from copy import deepcopy
from typing import Callable, Iterator

import numpy as np

from .construction import ConstructionState
from .control_point import ControlPoint, PointRole
from .math import Point, Op, SamplingMode, reflect
from .segment import Segment, SegmentArena

logger = logging.getLogger(__name__)


class SegmentChain:
    """
    Ordered, doubly-linked chain of cubic segments sharing their anchors.

    The first segment is built click by click (`place_point`); the chain then
    grows by cloning an anchor and shrinks by removing one. Every edit keeps
    the handles on both sides of a shared anchor mirrored (C1 continuity).
    """

    def __init__(self):
        self._arena = SegmentArena()
        self._head: int | None = None
        self._tail: int | None = None
        self._construction = ConstructionState.empty()
        self.cursor: Point = (0.0, 0.0)

    # ---- read-only views ----------------------------------------------------
    @property
    def head(self) -> Segment | None:
        return self._arena.get(self._head)

    @property
    def tail(self) -> Segment | None:
        return self._arena.get(self._tail)

    @property
    def construction(self) -> ConstructionState:
        return self._construction

    def is_empty(self) -> bool:
        return self._head is None

    def only_one_segment(self) -> bool:
        return self._head == self._tail

    def segments(self) -> Iterator[Segment]:
        current = self.head
        while current is not None:
            yield current
            current = self._arena.get(current.next)

    def number_segments(self) -> int:
        return sum(1 for _ in self.segments())

    def __len__(self) -> int:
        return self.number_segments()

    def __iter__(self) -> Iterator[Segment]:
        return self.segments()

    def segment_of(self, point: ControlPoint) -> Segment | None:
        """The live segment owning `point`, or None for a point of another chain."""
        segment = self._arena.get(point.segment)
        if segment is None or segment.point(point.role) is not point:
            return None
        return segment

    # ---- construction -------------------------------------------------------
    def cursor_pos(self, x: float, y: float) -> None:
        self.cursor = (float(x), float(y))

    def place_point(self, x: float, y: float) -> bool:
        """
        Feed one click of the construction sequence (start, control 1, end,
        control 2). Returns False once the chain already holds segments.
        """
        if not self.is_empty():
            return False
        role = self._construction.expecting
        self._construction, built = self._construction.step(x, y)
        if role in (PointRole.START, PointRole.END):
            self.cursor_pos(x, y)
        if built is not None:
            segment = self._arena.new(*built)
            self._head = self._tail = segment.handle
            logger.debug("Built first segment %r", segment)
        return True

    # ---- point edits --------------------------------------------------------
    def set_point(self, point: ControlPoint, x: float, y: float) -> None:
        segment = self.segment_of(point)
        if segment is None:
            logger.debug("Ignoring move of detached point %r", point)
            return
        segment.set_point(point.role, x, y, self._arena)

    def drag_to(self, x: float, y: float) -> None:
        """Translate the whole chain by the cursor movement."""
        dx = float(x) - self.cursor[0]
        dy = float(y) - self.cursor[1]
        for segment in self.segments():
            segment.translate(dx, dy)
        self.cursor_pos(x, y)

    def inside_control_point(self, x: float, y: float, width: int) -> ControlPoint | None:
        for segment in self.segments():
            hit = segment.inside_control_point(x, y, width)
            if hit is not None:
                return hit
        return None

    # ---- structural edits ---------------------------------------------------
    def insert_segment(self, handle: int, points: tuple[Point, Point, Point, Point],
                       after: bool = True) -> Segment:
        """
        Splice a new segment next to `handle`. The caller supplies handles
        that are already consistent; no continuity rule is applied.
        """
        anchor = self._arena[handle]
        segment = self._arena.new(*points)
        if after:
            anchor.insert_as_next(segment, self._arena)
            if handle == self._tail:
                self._tail = segment.handle
        else:
            anchor.insert_as_previous(segment, self._arena)
            if handle == self._head:
                self._head = segment.handle
        return segment

    def clone_point(self, point: ControlPoint) -> ControlPoint | None:
        """
        Grow the chain at an anchor. The new segment starts collapsed onto the
        anchor with its inner handle mirrored, and its outer anchor is returned
        so the caller can drag it out.
        """
        segment = self.segment_of(point)
        if segment is None:
            return None
        p0, p1, p2, p3 = (p.coords for p in segment.points)
        if point.role is PointRole.END:
            new = self.insert_segment(segment.handle, (p3, reflect(p3, p2), p2, p3), after=True)
            logger.debug("Cloned end of segment %d into %d", segment.handle, new.handle)
            return new.p3
        if point.role is PointRole.START:
            new = self.insert_segment(segment.handle, (p0, p1, reflect(p0, p1), p0), after=False)
            logger.debug("Cloned start of segment %d into %d", segment.handle, new.handle)
            return new.p0
        logger.debug("Refusing to clone handle %s", point.role)
        return None

    def remove_point(self, point: ControlPoint) -> bool:
        """
        Remove the anchor `point` together with its segment. Handles cannot be
        removed, and neither can the last remaining segment.
        """
        current = self.segment_of(point)
        if current is None or not point.role.is_anchor:
            logger.debug("Refusing to remove %r", point)
            return False
        if self.only_one_segment():
            logger.debug("Refusing to remove the only segment")
            return False

        if point.role is PointRole.START and current.handle != self._head:
            # same anchor as the previous segment's end
            return self.remove_point(self._arena[current.prev].p3)

        arena = self._arena
        if point.role is PointRole.START:
            head = arena[current.next]
            head.prev = None
            self._head = head.handle
            head.move_point(PointRole.START, head.p0.x, head.p0.y, arena)
        elif current.handle == self._head:
            head = arena[current.next]
            head.prev = None
            self._head = head.handle
            head.p0.move(*current.p0.coords)
            head.p1.move(*current.p1.coords)
        elif current.handle == self._tail:
            tail = arena[current.prev]
            tail.next = None
            self._tail = tail.handle
            tail.move_point(PointRole.END, tail.p3.x, tail.p3.y, arena)
        else:
            preceding = arena[current.prev]
            following = arena[current.next]
            preceding.next = following.handle
            following.prev = preceding.handle
            preceding.move_point(PointRole.END, preceding.p3.x, preceding.p3.y, arena)
            preceding.move_point(PointRole.CONTROL_2, preceding.p2.x, preceding.p2.y, arena)

        arena.discard(current.handle)
        logger.debug("Removed segment %d (%s)", current.handle, point.role.value)
        return True

    def clear(self) -> None:
        # handles keep counting up so points of the old curve never resolve
        self._arena = SegmentArena(self._arena.next_handle)
        self._head = None
        self._tail = None
        self._construction = ConstructionState.empty()
        self.cursor = (0.0, 0.0)

    def copy(self) -> "SegmentChain":
        return deepcopy(self)

    # ---- aggregate queries --------------------------------------------------
    def _collect(self, per_segment: Callable[[Segment], np.ndarray]) -> np.ndarray | None:
        if self.is_empty():
            return None
        return np.stack([per_segment(segment) for segment in self.segments()])

    def curve_coordinates(self, n: int, mode: SamplingMode = SamplingMode.LEGACY) -> np.ndarray | None:
        """Sampled positions, shape (segments, n, 2)."""
        return self._collect(lambda s: s.curve_coordinates(n, mode))

    def curve_tangents(self, n: int, mode: SamplingMode = SamplingMode.LEGACY) -> np.ndarray | None:
        return self._collect(lambda s: s.curve_tangents(n, mode))

    def curve_normals(self, n: int, mode: SamplingMode = SamplingMode.LEGACY) -> np.ndarray | None:
        return self._collect(lambda s: s.curve_normals(n, mode))

    def curve_kappas(self, n: int, mode: SamplingMode = SamplingMode.LEGACY,
                     legacy: bool = False) -> np.ndarray | None:
        """Sampled signed curvature, shape (segments, n)."""
        return self._collect(lambda s: s.curve_kappas(n, mode, legacy=legacy))

    def curve_radii(self, n: int, mode: SamplingMode = SamplingMode.LEGACY,
                    legacy: bool = False) -> np.ndarray | None:
        return self._collect(lambda s: s.curve_radii(n, mode, legacy=legacy))

    def curve_t_values(self, n: int, mode: SamplingMode = SamplingMode.LEGACY) -> np.ndarray | None:
        return self._collect(lambda s: s.curve_t_values(n, mode))

    def control_point_coordinates(self) -> list[Point]:
        """
        Flattened (anchor, handle) pairs for rendering. While the first
        segment is still being placed, returns the construction preview.
        """
        if self.is_empty():
            return self._construction.preview(self.cursor)
        coordinates: list[Point] = []
        for segment in self.segments():
            coordinates.extend(segment.point_coordinates())
        return coordinates

    def path_ops(self) -> list[Op]:
        ops: list[Op] = []
        for segment in self.segments():
            ops.extend(segment.path_ops())
        return ops
