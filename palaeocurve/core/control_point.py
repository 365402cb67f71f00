from dataclasses import dataclass
from enum import Enum

from .math import Point


class PointRole(Enum):
    START = "start"
    CONTROL_1 = "control_1"
    CONTROL_2 = "control_2"
    END = "end"

    @property
    def is_anchor(self) -> bool:
        return self in (PointRole.START, PointRole.END)


# Load-bearing: overlapping hit regions resolve to the first role listed here.
HIT_ORDER: tuple[PointRole, ...] = (
    PointRole.CONTROL_1,
    PointRole.START,
    PointRole.CONTROL_2,
    PointRole.END,
)


@dataclass(eq=False)
class ControlPoint:
    """
    One of the four points of a segment.

      - role: which slot of the segment it fills
      - segment: arena handle of the owning segment
    Plain data: continuity updates are written by the segment layer.
    """
    x: float
    y: float
    role: PointRole
    segment: int

    @property
    def coords(self) -> Point:
        return self.x, self.y

    def move(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def translate(self, dx: float, dy: float) -> None:
        self.x += dx
        self.y += dy


def contains(point: ControlPoint, x: float, y: float, width: int) -> bool:
    """
    Integer square of side 4*width centred on the point, half-open like an
    image ROI: [int(px) - 2w, int(px) + 2w).
    """
    left = int(point.x) - 2 * width
    top = int(point.y) - 2 * width
    tx = int(x)
    ty = int(y)
    return left <= tx < left + 4 * width and top <= ty < top + 4 * width
