"""Tests for SegmentChain construction, edits and aggregate queries."""

import numpy as np
import pytest

from palaeocurve.core import PointRole, SegmentChain

from tests.conftest import SCENARIO, WIDE, build_chain, assert_continuous, coordinates


# ---- construction ----------------------------------------------------------------

def test_new_chain_is_empty():
    chain = SegmentChain()
    assert chain.is_empty()
    assert len(chain) == 0
    assert chain.control_point_coordinates() == []
    assert chain.curve_coordinates(4) is None
    assert chain.curve_kappas(4) is None
    assert chain.path_ops() == []
    assert chain.inside_control_point(0.0, 0.0, 8) is None


def test_four_clicks_build_one_segment(scenario_chain):
    assert not scenario_chain.is_empty()
    assert scenario_chain.only_one_segment()
    assert scenario_chain.head is scenario_chain.tail
    assert coordinates(scenario_chain) == [list(SCENARIO)]
    assert scenario_chain.head.prev is None and scenario_chain.tail.next is None


def test_preview_follows_construction_progress():
    chain = SegmentChain()
    chain.place_point(0.0, 0.0)
    chain.cursor_pos(3.0, 4.0)
    assert chain.control_point_coordinates() == [(0.0, 0.0), (3.0, 4.0)]
    chain.place_point(10.0, 0.0)
    assert chain.control_point_coordinates() == [(0.0, 0.0), (10.0, 0.0)]
    chain.place_point(20.0, 10.0)
    assert chain.control_point_coordinates() == [(0.0, 0.0), (10.0, 0.0), (20.0, 10.0), (20.0, 10.0)]
    chain.cursor_pos(12.0, 9.0)
    assert chain.control_point_coordinates()[-1] == (12.0, 9.0)
    assert chain.is_empty()


def test_place_point_ignored_once_built(scenario_chain):
    assert not scenario_chain.place_point(99.0, 99.0)
    assert len(scenario_chain) == 1


def test_control_point_coordinates_pairs(scenario_chain):
    assert scenario_chain.control_point_coordinates() == [SCENARIO[0], SCENARIO[1], SCENARIO[3], SCENARIO[2]]


# ---- aggregate queries -----------------------------------------------------------

def test_sample_count_per_segment(three_segment_chain):
    n = 9
    assert three_segment_chain.curve_coordinates(n).shape == (3, n, 2)
    assert three_segment_chain.curve_tangents(n).shape == (3, n, 2)
    assert three_segment_chain.curve_normals(n).shape == (3, n, 2)
    assert three_segment_chain.curve_kappas(n).shape == (3, n)
    assert three_segment_chain.curve_radii(n).shape == (3, n)
    assert three_segment_chain.curve_t_values(n).shape == (3, n)


def test_aggregates_are_in_chain_order(three_segment_chain):
    coords = three_segment_chain.curve_coordinates(4)
    for row, segment in zip(coords, three_segment_chain):
        assert np.array_equal(row, segment.curve_coordinates(4))


def test_path_ops(scenario_chain):
    assert scenario_chain.path_ops() == [("M", SCENARIO[0]), ("C", SCENARIO[1:])]


# ---- clone -----------------------------------------------------------------------

def test_clone_end_grows_tail(wide_chain):
    original_end = wide_chain.tail.p3.coords
    new_point = wide_chain.clone_point(wide_chain.tail.p3)
    assert not wide_chain.only_one_segment()
    assert len(wide_chain) == 2
    assert new_point.role is PointRole.END
    assert wide_chain.tail.p3 is new_point
    assert wide_chain.tail.p0.coords == original_end
    assert_continuous(wide_chain)


def test_clone_start_grows_head(wide_chain):
    original_start = wide_chain.head.p0.coords
    new_point = wide_chain.clone_point(wide_chain.head.p0)
    assert new_point.role is PointRole.START
    assert wide_chain.head.p0 is new_point
    assert wide_chain.head.p3.coords == original_start
    assert wide_chain.head.prev is None
    assert_continuous(wide_chain)


def test_clone_handle_returns_none(wide_chain):
    assert wide_chain.clone_point(wide_chain.head.p1) is None
    assert wide_chain.clone_point(wide_chain.head.p2) is None
    assert len(wide_chain) == 1


def test_clone_interior_end_keeps_continuity(three_segment_chain):
    middle = list(three_segment_chain)[1]
    three_segment_chain.clone_point(middle.p3)
    assert len(three_segment_chain) == 4
    assert_continuous(three_segment_chain)


# ---- remove ----------------------------------------------------------------------

def test_remove_undoes_clone_at_end(wide_chain):
    before = coordinates(wide_chain)
    new_point = wide_chain.clone_point(wide_chain.tail.p3)
    wide_chain.set_point(new_point, 250.0, 300.0)
    assert wide_chain.remove_point(new_point)
    assert wide_chain.only_one_segment()
    assert coordinates(wide_chain) == before
    assert wide_chain.tail.next is None


def test_remove_undoes_clone_at_start(wide_chain):
    before = coordinates(wide_chain)
    new_point = wide_chain.clone_point(wide_chain.head.p0)
    assert wide_chain.remove_point(new_point)
    assert wide_chain.only_one_segment()
    assert coordinates(wide_chain) == before
    assert wide_chain.head.prev is None


def test_remove_head_end_keeps_visual_start(three_segment_chain):
    head = three_segment_chain.head
    start, control1 = head.p0.coords, head.p1.coords
    assert three_segment_chain.remove_point(head.p3)
    assert len(three_segment_chain) == 2
    assert three_segment_chain.head.p0.coords == start
    assert three_segment_chain.head.p1.coords == control1
    assert three_segment_chain.head.prev is None
    assert_continuous(three_segment_chain)


def test_remove_interior_end_splices_neighbours(three_segment_chain):
    first, middle, last = list(three_segment_chain)
    assert three_segment_chain.remove_point(middle.p3)
    assert list(three_segment_chain) == [first, last]
    assert first.next == last.handle and last.prev == first.handle
    assert_continuous(three_segment_chain)


def test_remove_start_of_non_head_removes_shared_anchor(three_segment_chain):
    first, middle, last = list(three_segment_chain)
    assert three_segment_chain.remove_point(last.p0)
    assert list(three_segment_chain) == [first, last]
    assert_continuous(three_segment_chain)


def test_remove_handle_rejected(three_segment_chain):
    assert not three_segment_chain.remove_point(three_segment_chain.head.p1)
    assert not three_segment_chain.remove_point(three_segment_chain.tail.p2)
    assert len(three_segment_chain) == 3


def test_remove_last_segment_rejected(wide_chain):
    assert not wide_chain.remove_point(wide_chain.head.p3)
    assert not wide_chain.remove_point(wide_chain.head.p0)
    assert len(wide_chain) == 1


def test_removed_point_is_detached(three_segment_chain):
    tail_end = three_segment_chain.tail.p3
    three_segment_chain.remove_point(tail_end)
    assert three_segment_chain.segment_of(tail_end) is None
    assert not three_segment_chain.remove_point(tail_end)


# ---- continuity across edits -----------------------------------------------------

def test_continuity_after_mixed_edits(three_segment_chain):
    chain = three_segment_chain
    first, middle, last = list(chain)
    chain.set_point(first.p3, 210.0, 130.0)
    assert_continuous(chain)
    chain.set_point(middle.p1, 260.0, 190.0)
    assert_continuous(chain)
    chain.set_point(middle.p2, 280.0, -40.0)
    assert_continuous(chain)
    chain.set_point(last.p0, 310.0, 5.0)
    assert_continuous(chain)
    chain.set_point(first.p0, -20.0, -20.0)
    chain.clone_point(chain.tail.p3)
    chain.set_point(chain.tail.p3, 500.0, 500.0)
    assert_continuous(chain)
    chain.remove_point(middle.p3)
    assert_continuous(chain)


def test_end_move_propagates_to_next_start(three_segment_chain):
    first, middle, _ = list(three_segment_chain)
    three_segment_chain.set_point(first.p3, 0.0, 0.0)
    assert middle.p0.coords == (0.0, 0.0)


def test_set_point_on_detached_point_is_ignored(three_segment_chain):
    tail_end = three_segment_chain.tail.p3
    three_segment_chain.remove_point(tail_end)
    before = coordinates(three_segment_chain)
    three_segment_chain.set_point(tail_end, 1.0, 1.0)
    assert coordinates(three_segment_chain) == before


# ---- hit testing -----------------------------------------------------------------

def test_chain_hit_scans_in_chain_order(three_segment_chain):
    first = three_segment_chain.head
    x, y = first.p3.coords
    # first.p3 and the next segment's p0 coincide; the earlier segment wins
    assert three_segment_chain.inside_control_point(x, y, 8) is first.p3


def test_chain_hit_uses_role_precedence():
    chain = build_chain(((0.0, 0.0), (4.0, 0.0), (300.0, 300.0), (400.0, 400.0)))
    assert chain.inside_control_point(0.0, 0.0, 8) is chain.head.p1


# ---- whole-chain edits -----------------------------------------------------------

def test_drag_translates_everything(three_segment_chain):
    before = coordinates(three_segment_chain)
    three_segment_chain.cursor_pos(10.0, 10.0)
    three_segment_chain.drag_to(15.0, 7.0)
    after = coordinates(three_segment_chain)
    assert after == [[(x + 5.0, y - 3.0) for x, y in seg] for seg in before]
    assert three_segment_chain.cursor == (15.0, 7.0)
    assert_continuous(three_segment_chain)


def test_insert_segment_before_head_updates_head(wide_chain):
    old_head = wide_chain.head
    start, control1 = old_head.p0.coords, old_head.p1.coords
    new = wide_chain.insert_segment(old_head.handle, ((-100.0, 0.0), (-50.0, 0.0), (-100.0, 0.0), start),
                                    after=False)
    assert wide_chain.head is new
    assert new.next == old_head.handle
    assert old_head.p1.coords == control1
    assert len(wide_chain) == 2


def test_copy_is_independent(three_segment_chain):
    clone = three_segment_chain.copy()
    three_segment_chain.set_point(three_segment_chain.head.p0, 999.0, 999.0)
    assert clone.head.p0.coords != (999.0, 999.0)
    assert len(clone) == 3
    assert_continuous(clone)


def test_clear_resets_construction(three_segment_chain):
    three_segment_chain.clear()
    assert three_segment_chain.is_empty()
    assert three_segment_chain.place_point(1.0, 2.0)
    assert three_segment_chain.control_point_coordinates() == [(1.0, 2.0), (1.0, 2.0)]


def test_points_of_a_cleared_curve_are_detached(wide_chain):
    stale = wide_chain.head.p3
    old_handle = wide_chain.head.handle
    wide_chain.clear()
    for p in ((0.0, 0.0), (1.0, 0.0), (3.0, 0.0), (2.0, 1.0)):
        wide_chain.place_point(*p)
    before = coordinates(wide_chain)
    assert wide_chain.head.handle != old_handle
    assert wide_chain.segment_of(stale) is None
    wide_chain.set_point(stale, 50.0, 50.0)
    assert wide_chain.clone_point(stale) is None
    assert not wide_chain.remove_point(stale)
    assert coordinates(wide_chain) == before


def test_points_of_the_source_do_not_edit_a_copy(three_segment_chain):
    clone = three_segment_chain.copy()
    before = coordinates(clone)
    assert clone.segment_of(three_segment_chain.head.p3) is None
    assert three_segment_chain.segment_of(clone.head.p3) is None
    assert clone.segment_of(clone.head.p3) is clone.head
    clone.set_point(three_segment_chain.head.p3, 1.0, 1.0)
    assert not clone.remove_point(three_segment_chain.tail.p3)
    assert coordinates(clone) == before
    assert len(clone) == 3


def test_clone_interior_start_then_drag(three_segment_chain):
    first, middle, last = list(three_segment_chain)
    anchor = middle.p0.coords
    new_point = three_segment_chain.clone_point(middle.p0)
    assert len(three_segment_chain) == 4
    assert_continuous(three_segment_chain)

    three_segment_chain.set_point(new_point, 250.0, 150.0)
    segments = list(three_segment_chain)
    assert segments[0] is first and segments[2:] == [middle, last]
    new = segments[1]
    assert new_point is new.p0
    assert new.p0.coords == (250.0, 150.0) == first.p3.coords
    assert new.p3.coords == anchor == middle.p0.coords
    assert_continuous(three_segment_chain)
