"""
Curve tool options.

Numeric parameters read by the core (sample count, hit radius, curvature
settings) plus the display settings the overlay uses. Stored as JSON.
"""

import json
import logging
import os
from dataclasses import dataclass, fields, asdict

from .math import SamplingMode

logger = logging.getLogger(__name__)


@dataclass
class CurveOptions:
    # Drawn control-point diameter; the hit region is 4x this, centred.
    control_point_width: int = 8
    # Parameter values evaluated per segment.
    probe_number: int = 256
    # Tangent/normal lines are for checking the maths; lower probe_number
    # below ~50 when showing them.
    show_tangents: bool = False
    show_normals: bool = False
    tangent_scale: float = 15.0
    normal_scale: float = 15.0
    # There may be more than one maximum-curvature point.
    show_maximum_curvature_points: bool = True
    maximum_curvature_stroke: str = "#ff0000"
    maximum_curvature_fill: str = "#ff0000"
    sampling: SamplingMode = SamplingMode.LEGACY
    legacy_curvature: bool = False
    # Label maximum-curvature points with t / segments, as the original tool
    # did, instead of their position along the whole chain.
    legacy_fraction: bool = False
    curvature_threshold: float = 0.01

    def __post_init__(self):
        self.sampling = SamplingMode(self.sampling)
        self.validate()

    def validate(self) -> None:
        if int(self.probe_number) < 1:
            raise ValueError(f"probe_number must be >= 1, got {self.probe_number}")
        if int(self.control_point_width) < 1:
            raise ValueError(f"control_point_width must be >= 1, got {self.control_point_width}")
        if self.tangent_scale < 0 or self.normal_scale < 0:
            raise ValueError("scale factors must be non-negative")

    def to_dict(self) -> dict:
        data = asdict(self)
        data["sampling"] = self.sampling.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CurveOptions":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning("Ignoring unknown option(s): %s", ", ".join(sorted(unknown)))
        return cls(**{k: v for k, v in data.items() if k in known})


def load_options(filepath: str) -> CurveOptions:
    """
    Read options from a JSON file. A missing or unreadable file gives the
    defaults; invalid values still raise ValueError.
    """
    if not os.path.exists(filepath):
        logger.info("No options file at %s, using defaults", filepath)
        return CurveOptions()
    try:
        with open(filepath, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Error loading options from %s: %s", filepath, e)
        return CurveOptions()
    if not isinstance(data, dict):
        logger.warning("Options file %s does not hold an object, using defaults", filepath)
        return CurveOptions()
    return CurveOptions.from_dict(data)


def save_options(options: CurveOptions, filepath: str) -> None:
    directory = os.path.dirname(os.path.abspath(filepath))
    os.makedirs(directory, exist_ok=True)
    with open(filepath, "w") as f:
        json.dump(options.to_dict(), f, indent=2)
