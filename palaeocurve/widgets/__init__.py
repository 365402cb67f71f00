from .curve_overlay import CurveOverlayWidget
from .bar import Bar

__all__ = [
    "CurveOverlayWidget",
    "Bar",
]
