"""Shared fixtures for the palaeocurve test suite."""

import pytest

from palaeocurve.core import CurveOptions, SegmentChain

# start, control 1, control 2, end
SCENARIO = ((0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (20.0, 10.0))
# control polygon turning one way only
CONVEX = ((0.0, 0.0), (10.0, 0.0), (20.0, 10.0), (20.0, 20.0))
# spread out so that default hit regions (32px squares) do not overlap
WIDE = ((0.0, 0.0), (100.0, 0.0), (100.0, 100.0), (200.0, 100.0))


def build_chain(points) -> SegmentChain:
    """Build a one-segment chain through the click protocol."""
    start, control1, control2, end = points
    chain = SegmentChain()
    for p in (start, control1, end, control2):
        chain.place_point(*p)
    return chain


def assert_continuous(chain: SegmentChain):
    segments = list(chain)
    for a, b in zip(segments, segments[1:]):
        assert a.p3.coords == b.p0.coords
        assert b.p1.x == pytest.approx(2 * b.p0.x - a.p2.x)
        assert b.p1.y == pytest.approx(2 * b.p0.y - a.p2.y)


def coordinates(chain: SegmentChain):
    return [[p.coords for p in segment.points] for segment in chain]


@pytest.fixture
def options():
    return CurveOptions(probe_number=4)


@pytest.fixture
def scenario_chain():
    return build_chain(SCENARIO)


@pytest.fixture
def wide_chain():
    return build_chain(WIDE)


@pytest.fixture
def three_segment_chain():
    """WIDE grown twice from its end, with each new end dragged out."""
    chain = build_chain(WIDE)
    end = chain.clone_point(chain.tail.p3)
    chain.set_point(end, 300.0, 0.0)
    end = chain.clone_point(chain.tail.p3)
    chain.set_point(end, 400.0, 200.0)
    return chain
