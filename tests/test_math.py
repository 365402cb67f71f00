"""Tests for sample parameters and point helpers."""

import numpy as np
import pytest

from palaeocurve.core.math import SamplingMode, reflect, sample_parameters


def test_legacy_parameters_match_original_spacing():
    ts = sample_parameters(4)
    assert ts.tolist() == pytest.approx([0.25, 0.1875, 0.375, 0.5625])


def test_legacy_parameters_are_not_monotonic():
    ts = sample_parameters(8)
    assert ts[1] < ts[0]
    assert np.all(np.diff(ts[1:]) > 0)


def test_legacy_single_sample_is_one():
    assert sample_parameters(1).tolist() == [1.0]


def test_uniform_parameters_cover_both_ends():
    ts = sample_parameters(5, SamplingMode.UNIFORM)
    assert ts.tolist() == pytest.approx([0.0, 0.25, 0.5, 0.75, 1.0])


def test_mode_accepts_string_value():
    assert sample_parameters(3, "uniform").tolist() == pytest.approx([0.0, 0.5, 1.0])


def test_zero_samples_rejected():
    with pytest.raises(ValueError):
        sample_parameters(0)


def test_reflect_through_anchor():
    assert reflect((10.0, 10.0), (15.0, 7.0)) == (5.0, 13.0)
