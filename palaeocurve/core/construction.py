from dataclasses import dataclass, replace

from .control_point import PointRole
from .math import Point

# Click order while building the first segment.
_NEXT_ROLE: dict[PointRole, PointRole | None] = {
    PointRole.START: PointRole.CONTROL_1,
    PointRole.CONTROL_1: PointRole.END,
    PointRole.END: PointRole.CONTROL_2,
    PointRole.CONTROL_2: None,
}


@dataclass(frozen=True)
class ConstructionState:
    """
    Progress of the point-by-point construction of the first segment.

      - points: coordinates placed so far, in click order
      - expecting: role the next click fills; None once the segment is built
    """
    points: tuple[Point, ...] = ()
    expecting: PointRole | None = PointRole.START

    @classmethod
    def empty(cls) -> "ConstructionState":
        return cls()

    @property
    def built(self) -> bool:
        return self.expecting is None

    def step(self, x: float, y: float) -> tuple["ConstructionState", tuple[Point, Point, Point, Point] | None]:
        """
        Place the next point. Returns the new state and, on the fourth click,
        the finished (p0, p1, p2, p3).
        """
        if self.built:
            return self, None
        points = self.points + ((float(x), float(y)),)
        following = _NEXT_ROLE[self.expecting]
        if following is None:
            # click order is start, control 1, end, control 2
            start, control1, end, control2 = points
            return ConstructionState((), None), (start, control1, control2, end)
        return replace(self, points=points, expecting=following), None

    def preview(self, cursor: Point) -> list[Point]:
        """Partial control-point list for rendering while nothing is built."""
        match self.expecting:
            case PointRole.CONTROL_1:
                return [self.points[0], cursor]
            case PointRole.END:
                return [self.points[0], self.points[1]]
            case PointRole.CONTROL_2:
                return [self.points[0], self.points[1], self.points[2], cursor]
            case _:
                return []
