"""Tests for stepheight.utils.profile: the Profile value type and its filters."""

import numpy as np
import pytest

from stepheight.core.errors import IndexOutOfRangeError, InvalidArgumentError
from stepheight.utils.profile import (
    Profile,
    gaussian_derivative_kernel,
    gaussian_kernel,
    gaussian_sigma,
)


def _profile(values, spacing: float = 1.0) -> Profile:
    return Profile.from_samples(values, np.arange(len(values)) * spacing)


def _random_profile(seed: int, n: int = 200) -> Profile:
    rng = np.random.default_rng(seed)
    return _profile(rng.normal(0.0, 1.0, n))


class TestConstruction:
    def test_from_samples(self):
        p = Profile.from_samples([1.0, 2.0, 3.0], [0.0, 0.5, 1.0])
        assert p.size == 3
        assert len(p) == 3
        np.testing.assert_array_equal(p.values, [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(p.positions, [0.0, 0.5, 1.0])

    def test_length_mismatch(self):
        with pytest.raises(InvalidArgumentError):
            Profile.from_samples([1.0, 2.0], [0.0, 1.0, 2.0])

    def test_invalid_argument_is_value_error(self):
        with pytest.raises(ValueError):
            Profile.from_samples([1.0], [0.0, 1.0])

    def test_empty(self):
        with pytest.raises(InvalidArgumentError):
            Profile.from_samples([], [])

    def test_positions_must_increase(self):
        with pytest.raises(InvalidArgumentError):
            Profile.from_samples([1.0, 2.0, 3.0], [0.0, 1.0, 1.0])
        with pytest.raises(InvalidArgumentError):
            Profile.from_samples([1.0, 2.0], [1.0, 0.0])

    def test_non_finite(self):
        with pytest.raises(InvalidArgumentError):
            Profile.from_samples([1.0, np.nan], [0.0, 1.0])

    def test_arrays_read_only(self):
        p = _profile([1.0, 2.0, 3.0])
        with pytest.raises(ValueError):
            p.values[0] = 10.0

    def test_does_not_alias_caller_array(self):
        values = np.array([1.0, 2.0, 3.0])
        p = _profile(values)
        values[0] = 99.0
        assert p.get_value(0) == 1.0

    def test_equality(self):
        assert _profile([1.0, 2.0]) == _profile([1.0, 2.0])
        assert _profile([1.0, 2.0]) != _profile([1.0, 2.5])


class TestAccessors:
    def test_get_value(self):
        p = _profile([4.0, 5.0, 6.0])
        assert p.get_value(1) == 5.0
        assert p.get_value(np.int64(2)) == 6.0

    @pytest.mark.parametrize("index", [-1, 3, 100])
    def test_get_value_out_of_range(self, index):
        p = _profile([4.0, 5.0, 6.0])
        with pytest.raises(IndexOutOfRangeError):
            p.get_value(index)

    def test_index_error_subclass(self):
        with pytest.raises(IndexError):
            _profile([1.0]).get_value(1)

    def test_get_coordinate_single_and_many(self):
        p = _profile([4.0, 5.0, 6.0], spacing=0.25)
        assert p.get_coordinate(2) == 0.5
        assert p.get_coordinate([0, 2]) == [0.0, 0.5]

    def test_get_coordinate_out_of_range(self):
        p = _profile([4.0, 5.0, 6.0])
        with pytest.raises(IndexOutOfRangeError):
            p.get_coordinate([0, 3])

    def test_median_odd(self):
        assert _profile([3.0, 1.0, 2.0]).get_median() == 2.0

    def test_median_even_averages_middle_pair(self):
        assert _profile([4.0, 1.0, 3.0, 2.0]).get_median() == 2.5


class TestCrop:
    def test_inclusive_range(self):
        p = _profile([0.0, 1.0, 2.0, 3.0, 4.0])
        c = p.crop(1, 3)
        np.testing.assert_array_equal(c.values, [1.0, 2.0, 3.0])
        np.testing.assert_array_equal(c.positions, [1.0, 2.0, 3.0])

    def test_single_sample(self):
        assert _profile([0.0, 1.0, 2.0]).crop(2, 2).size == 1

    @pytest.mark.parametrize("start,end", [(-1, 2), (0, 5), (3, 1)])
    def test_invalid_range(self, start, end):
        with pytest.raises(IndexOutOfRangeError):
            _profile([0.0, 1.0, 2.0, 3.0, 4.0]).crop(start, end)

    def test_constant_crop_median_exact(self):
        p = _profile([7.25] * 30)
        assert p.crop(4, 21).get_median() == 7.25


class TestResample:
    def test_exact_count_and_endpoints(self):
        p = Profile.from_samples([0.0, 10.0, 0.0], [0.0, 3.0, 10.0])
        r = p.resample(101)
        assert r.size == 101
        assert r.positions[0] == 0.0
        assert r.positions[-1] == 10.0
        np.testing.assert_allclose(np.diff(r.positions), 0.1)

    def test_linear_interpolation(self):
        p = Profile.from_samples([0.0, 10.0], [0.0, 10.0])
        r = p.resample(11)
        np.testing.assert_allclose(r.values, np.arange(11.0))

    def test_too_few_samples(self):
        with pytest.raises(InvalidArgumentError):
            _profile([0.0, 1.0]).resample(1)
        with pytest.raises(InvalidArgumentError):
            _profile([0.0]).resample(10)


class TestNoise:
    def test_seeded_reproducible(self):
        p = _profile(np.zeros(100))
        a = p.add_noise("uniform", -0.1, 0.1, seed=7)
        b = p.add_noise("uniform", -0.1, 0.1, seed=7)
        assert a == b

    def test_different_seeds_differ(self):
        p = _profile(np.zeros(100))
        assert p.add_noise("uniform", -0.1, 0.1, seed=1) != p.add_noise("uniform", -0.1, 0.1, seed=2)

    def test_uniform_bounds(self):
        p = _profile(np.full(1000, 5.0))
        noisy = p.add_noise("UNIFORM", -0.1, 0.1, seed=3)
        delta = noisy.values - 5.0
        assert delta.min() >= -0.1 - 1e-9
        assert delta.max() <= 0.1 + 1e-9
        assert delta.std() > 0.01

    def test_original_untouched(self):
        p = _profile(np.zeros(10))
        p.add_noise("uniform", -1.0, 1.0, seed=0)
        assert np.all(p.values == 0.0)

    def test_gaussian(self):
        p = _profile(np.zeros(5000))
        noisy = p.add_noise("gaussian", 1.0, 0.5, seed=11)
        assert abs(noisy.values.mean() - 1.0) < 0.05
        assert abs(noisy.values.std() - 0.5) < 0.05

    def test_invalid(self):
        p = _profile(np.zeros(10))
        with pytest.raises(InvalidArgumentError):
            p.add_noise("uniform", 0.1, -0.1)
        with pytest.raises(InvalidArgumentError):
            p.add_noise("poisson", 0.0, 1.0)


class TestKernels:
    @pytest.mark.parametrize("size", [1, 3, 9, 25])
    def test_gaussian_kernel_normalized(self, size):
        k = gaussian_kernel(size)
        assert len(k) == size
        assert k.sum() == pytest.approx(1.0)
        np.testing.assert_allclose(k, k[::-1])

    def test_sigma_convention(self):
        assert gaussian_sigma(25) == pytest.approx(4.1)
        assert gaussian_sigma(3) == pytest.approx(0.8)

    @pytest.mark.parametrize("size", [0, 2, 24, -3])
    def test_bad_kernel_size(self, size):
        with pytest.raises(InvalidArgumentError):
            gaussian_kernel(size)

    def test_first_derivative_kernel_on_ramp(self):
        w = gaussian_derivative_kernel(25, "first")
        t = np.arange(-12, 13, dtype=float)
        assert np.dot(w, t) == pytest.approx(1.0)
        assert w.sum() == pytest.approx(0.0, abs=1e-12)

    def test_second_derivative_kernel(self):
        w = gaussian_derivative_kernel(25, "SECOND")
        t = np.arange(-12, 13, dtype=float)
        assert w.sum() == pytest.approx(0.0, abs=1e-12)
        assert np.dot(w, t) == pytest.approx(0.0, abs=1e-12)
        assert np.dot(w, t**2 / 2) == pytest.approx(1.0)

    def test_three_tap_second_derivative(self):
        np.testing.assert_allclose(gaussian_derivative_kernel(3, "second"), [1.0, -2.0, 1.0])

    def test_derivative_kernel_too_small(self):
        with pytest.raises(InvalidArgumentError):
            gaussian_derivative_kernel(1, "first")

    def test_unknown_order(self):
        with pytest.raises(InvalidArgumentError):
            gaussian_derivative_kernel(5, "third")


class TestFilters:
    @pytest.mark.parametrize("seed", [0, 1, 2])
    def test_shape_preserving(self, seed):
        p = _random_profile(seed)
        assert p.gaussian_smooth(9).size == p.size
        assert p.gaussian_derivative(25, "first").size == p.size
        assert p.gaussian_derivative(25, "second").size == p.size
        assert p.binarize(-0.5, 0.5, 10).size == p.size
        assert p.clamp(-1.0, 1.0).size == p.size
        assert p.multiply_constant(3.0).size == p.size

    def test_transforms_keep_positions(self):
        p = _random_profile(4)
        np.testing.assert_array_equal(p.gaussian_smooth(9).positions, p.positions)

    def test_smooth_constant(self):
        p = _profile(np.full(50, 3.0))
        np.testing.assert_allclose(p.gaussian_smooth(9).values, 3.0)

    def test_smooth_even_kernel(self):
        with pytest.raises(InvalidArgumentError):
            _profile(np.zeros(10)).gaussian_smooth(4)

    def test_first_derivative_of_ramp(self):
        p = _profile(2.0 * np.arange(100.0))
        d = p.gaussian_derivative(25, "first")
        np.testing.assert_allclose(d.values[12:-12], 2.0)

    def test_second_derivative_of_parabola(self):
        i = np.arange(100.0)
        p = _profile(1.5 * i**2)
        d = p.gaussian_derivative(25, "second")
        np.testing.assert_allclose(d.values[12:-12], 3.0)

    def test_derivative_of_constant_is_zero_at_edges(self):
        p = _profile(np.full(40, 8.0))
        d = p.gaussian_derivative(25, "first")
        np.testing.assert_allclose(d.values, 0.0, atol=1e-12)

    def test_multiply_constant(self):
        np.testing.assert_array_equal(_profile([1.0, -2.0]).multiply_constant(10).values, [10.0, -20.0])

    def test_binarize_inclusive_bounds(self):
        p = _profile([-0.25, 0.25, 0.3, 0.0, -0.26])
        np.testing.assert_array_equal(p.binarize(-0.25, 0.25, 10).values, [10.0, 10.0, 0.0, 10.0, 0.0])

    def test_clamp(self):
        p = _profile([-5.0, 0.5, 20000.0])
        np.testing.assert_array_equal(p.clamp(0, 10000).values, [0.0, 0.5, 10000.0])

    @pytest.mark.parametrize("seed", [0, 5, 9])
    def test_clamp_idempotent(self, seed):
        once = _random_profile(seed).clamp(-0.5, 0.7)
        assert once.clamp(-0.5, 0.7) == once

    def test_clamp_reversed_bounds(self):
        with pytest.raises(InvalidArgumentError):
            _profile([0.0]).clamp(1.0, 0.0)


class TestLocalExtrema:
    def test_maxima(self):
        p = _profile([0, 3, 0, 4, 0, 0, 0, 0, 0, 5, 0])
        assert p.find_local_extrema("max", 1, 1.0) == [1, 3, 9]

    def test_separation_suppresses_weaker(self):
        p = _profile([0, 3, 0, 4, 0, 0, 0, 0, 0, 5, 0])
        assert p.find_local_extrema("max", 3, 1.0) == [3, 9]

    def test_equal_peaks_keep_earliest(self):
        p = _profile([0, 5, 5, 0, 0, 0, 0, 0])
        assert p.find_local_extrema("max", 2, 1.0) == [1]

    def test_minima(self):
        p = _profile([0, -3, 0, -4, 0, 0, 0, 0, 0, -5, 0])
        assert p.find_local_extrema("min", 3, 1.0) == [3, 9]

    def test_prominence_filter(self):
        p = _profile([0, 1, 0, 0, 0, 0, 6, 0, 0, 0])
        assert p.find_local_extrema("max", 2, 2.0) == [6]

    def test_flat_signal_has_no_extrema(self):
        assert _profile(np.zeros(30)).find_local_extrema("max", 5, 2.0) == []

    def test_peak_at_boundary(self):
        p = _profile([9, 1, 0, 0, 0, 0])
        assert p.find_local_extrema("max", 2, 2.0) == [0]

    @pytest.mark.parametrize("seed", range(5))
    @pytest.mark.parametrize("min_separation", [1, 3, 5, 10])
    def test_never_closer_than_min_separation(self, seed, min_separation):
        p = _random_profile(seed, n=300)
        idx = p.find_local_extrema("max", min_separation, 0.0)
        assert idx == sorted(idx)
        assert all(b - a >= min_separation for a, b in zip(idx, idx[1:]))

    def test_deterministic(self):
        p = _random_profile(12)
        assert p.find_local_extrema("min", 4, 0.5) == p.find_local_extrema("min", 4, 0.5)

    def test_invalid_arguments(self):
        p = _profile(np.zeros(10))
        with pytest.raises(InvalidArgumentError):
            p.find_local_extrema("max", 0, 1.0)
        with pytest.raises(InvalidArgumentError):
            p.find_local_extrema("max", 2, -1.0)
        with pytest.raises(InvalidArgumentError):
            p.find_local_extrema("saddle", 2, 1.0)
