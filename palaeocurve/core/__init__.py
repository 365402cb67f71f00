from .math import Point, Op, SamplingMode
from .control_point import ControlPoint, PointRole
from .segment import Segment, SegmentArena
from .construction import ConstructionState
from .chain import SegmentChain
from .options import CurveOptions, load_options, save_options
from .analysis import CurvaturePeak, CurveSnapshot, find_maximum_curvature, take_snapshot
from .editor import CurveEditor
