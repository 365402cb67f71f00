import logging
from dataclasses import dataclass, field

import numpy as np

from .chain import SegmentChain
from .math import Point, Op
from .options import CurveOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurvaturePeak:
    """
    A sample of maximal |kappa|.
      - segment, sample: indices into the [segment][sample] arrays
      - fraction: label value, (segment + t) / segments along the whole
        chain, or t / segments as the original tool printed it
    """
    x: float
    y: float
    kappa: float
    segment: int
    sample: int
    fraction: float


def find_maximum_curvature(coordinates: np.ndarray | None,
                           kappas: np.ndarray | None,
                           t_values: np.ndarray | None,
                           threshold: float = 0.01,
                           legacy_fraction: bool = False) -> list[CurvaturePeak]:
    """
    Samples whose |kappa| is the chain-wide maximum, provided it exceeds
    `threshold`. Exact ties are all returned in chain order; NaN samples
    never qualify.

    `legacy_fraction` labels peaks with t / segments, dropping the segment
    index, so percentages match those recorded with the original tool.
    """
    if coordinates is None or kappas is None or t_values is None:
        return []
    magnitude = np.abs(kappas)
    valid = np.isfinite(magnitude) & (magnitude > threshold)
    if not valid.any():
        return []
    highest = magnitude[valid].max()
    n_segments = kappas.shape[0]
    peaks: list[CurvaturePeak] = []
    for j, k in zip(*np.nonzero(valid & (magnitude == highest))):
        x, y = coordinates[j, k]
        t = t_values[j, k]
        peaks.append(CurvaturePeak(
            x=float(x), y=float(y), kappa=float(kappas[j, k]),
            segment=int(j), sample=int(k),
            fraction=float(t / n_segments if legacy_fraction else (j + t) / n_segments),
        ))
    return peaks


@dataclass(frozen=True)
class CurveSnapshot:
    coordinates: np.ndarray | None = None
    tangents: np.ndarray | None = None
    normals: np.ndarray | None = None
    kappas: np.ndarray | None = None
    radii: np.ndarray | None = None
    t_values: np.ndarray | None = None
    control_points: list[Point] = field(default_factory=list)
    path_ops: list[Op] = field(default_factory=list)
    peaks: list[CurvaturePeak] = field(default_factory=list)

    @property
    def has_curve(self) -> bool:
        return self.coordinates is not None


def take_snapshot(chain: SegmentChain, options: CurveOptions) -> CurveSnapshot:
    """Evaluate everything the overlay draws, in one pass over the chain."""
    control_points = chain.control_point_coordinates()
    if chain.is_empty():
        return CurveSnapshot(control_points=control_points)

    n = options.probe_number
    mode = options.sampling
    coordinates = chain.curve_coordinates(n, mode)
    kappas = chain.curve_kappas(n, mode, legacy=options.legacy_curvature)
    t_values = chain.curve_t_values(n, mode)
    peaks = find_maximum_curvature(coordinates, kappas, t_values, options.curvature_threshold,
                                   legacy_fraction=options.legacy_fraction)
    logger.debug("Snapshot: %d segment(s), %d maximum-curvature point(s)",
                 coordinates.shape[0], len(peaks))
    return CurveSnapshot(
        coordinates=coordinates,
        tangents=chain.curve_tangents(n, mode),
        normals=chain.curve_normals(n, mode),
        kappas=kappas,
        radii=chain.curve_radii(n, mode, legacy=options.legacy_curvature),
        t_values=t_values,
        control_points=control_points,
        path_ops=chain.path_ops(),
        peaks=peaks,
    )
