import logging

from .analysis import CurveSnapshot, take_snapshot
from .chain import SegmentChain
from .control_point import ControlPoint
from .options import CurveOptions

logger = logging.getLogger(__name__)


class CurveEditor:
    """
    GUI-agnostic controller for the curve tool.

    Hosts reduce their mouse events to image-space (x, y) plus modifier flags:
      - press / release while empty: place the construction points
      - press on an anchor with shift: clone it and drag the clone
      - press on an anchor with ctrl: remove it (never the last segment)
      - drag: move the active point, or the whole chain if none is active
      - click with alt outside every point: discard the chain
    """

    def __init__(self, options: CurveOptions | None = None):
        self._options = options or CurveOptions()
        self._chain = SegmentChain()
        self._active: ControlPoint | None = None
        self._snapshot: CurveSnapshot | None = None

    # ---- accessors ----------------------------------------------------------
    @property
    def chain(self) -> SegmentChain:
        return self._chain

    @property
    def options(self) -> CurveOptions:
        return self._options

    @property
    def active_point(self) -> ControlPoint | None:
        return self._active

    @property
    def snapshot(self) -> CurveSnapshot:
        if self._snapshot is None:
            self._snapshot = take_snapshot(self._chain, self._options)
        return self._snapshot

    def set_options(self, options: CurveOptions) -> None:
        self._options = options
        self.invalidate()

    def invalidate(self) -> None:
        self._snapshot = None

    def clear(self) -> None:
        self._chain = SegmentChain()
        self._active = None
        self.invalidate()

    def hit(self, x: float, y: float) -> ControlPoint | None:
        return self._chain.inside_control_point(x, y, self._options.control_point_width)

    # ---- pointer events -----------------------------------------------------
    def press(self, x: float, y: float, shift: bool = False, ctrl: bool = False) -> None:
        if self._chain.is_empty():
            self._chain.place_point(x, y)
            self.invalidate()
            return

        self._active = self.hit(x, y)
        if self._active is None:
            self._chain.cursor_pos(x, y)
            return

        if shift:
            if self._active.role.is_anchor:
                self._active = self._chain.clone_point(self._active)
            self.invalidate()
            return

        if ctrl:
            if self._chain.only_one_segment():
                logger.debug("Cannot remove the last segment")
                return
            if self._active.role.is_anchor:
                self._chain.remove_point(self._active)
                self._active = None
                self._chain.cursor_pos(x, y)
                self.invalidate()

    def drag(self, x: float, y: float) -> None:
        if self._chain.is_empty():
            self._chain.cursor_pos(x, y)
        elif self._active is None:
            self._chain.drag_to(x, y)
        else:
            self._chain.set_point(self._active, x, y)
        self.invalidate()

    def release(self, x: float, y: float) -> None:
        if self._chain.is_empty():
            self._chain.place_point(x, y)
            self.invalidate()
            return
        if self._active is None:
            self._chain.cursor_pos(x, y)
        self._active = None

    def click(self, x: float, y: float, alt: bool = False) -> None:
        if self._chain.is_empty():
            return
        self._active = self.hit(x, y)
        if self._active is None and alt:
            logger.debug("Clearing curve")
            self.clear()
