"""1-D height profile: ordered ``(position, value)`` samples plus the filters
the step detector is built from.

Derivatives are taken per sample index rather than per millimetre. Profiles
produced by the builder sit on a uniform grid, so a derivative threshold keeps
the same meaning as long as the sample spacing does.

Every operation returns a new ``Profile``; the sample arrays are read-only.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Sequence
from typing import Literal, overload

import numpy as np
from scipy.ndimage import correlate1d, maximum_filter1d, minimum_filter1d

from stepheight.core.errors import IndexOutOfRangeError, InvalidArgumentError

logger = logging.getLogger(__name__)

DerivativeOrder = Literal["first", "second"]
ExtremumKind = Literal["max", "min"]
NoiseDistribution = Literal["uniform", "gaussian"]


def _choice(value: str, allowed: tuple[str, ...], what: str) -> str:
    """Case-insensitive match of ``value`` against ``allowed``."""
    normalized = str(value).lower()
    if normalized not in allowed:
        raise InvalidArgumentError(f"Unknown {what} {value!r}, expected one of {allowed}")
    return normalized


def _check_kernel_size(kernel_size: int, minimum: int = 1) -> int:
    if isinstance(kernel_size, bool) or int(kernel_size) != kernel_size:
        raise InvalidArgumentError(f"Kernel size must be an integer, got {kernel_size!r}")
    kernel_size = int(kernel_size)
    if kernel_size < minimum or kernel_size % 2 == 0:
        raise InvalidArgumentError(
            f"Kernel size must be an odd integer >= {minimum}, got {kernel_size}"
        )
    return kernel_size


def gaussian_sigma(kernel_size: int) -> float:
    """Standard deviation paired with a kernel size (OpenCV ``getGaussianKernel`` rule)."""
    return 0.3 * ((kernel_size - 1) * 0.5 - 1) + 0.8


def _kernel_offsets(kernel_size: int) -> np.ndarray:
    radius = kernel_size // 2
    return np.arange(-radius, radius + 1, dtype=float)


def gaussian_kernel(kernel_size: int) -> np.ndarray:
    """Normalized (sum = 1) Gaussian kernel of odd length ``kernel_size``."""
    kernel_size = _check_kernel_size(kernel_size)
    t = _kernel_offsets(kernel_size)
    g = np.exp(-0.5 * (t / gaussian_sigma(kernel_size)) ** 2)
    return g / g.sum()


def gaussian_derivative_kernel(kernel_size: int, order: DerivativeOrder) -> np.ndarray:
    """Correlation weights of a sampled Gaussian derivative.

    The first-order kernel maps a unit-slope ramp to 1. The second-order
    kernel sums to 0 and maps the parabola ``i**2 / 2`` to 1.
    """
    order = _choice(order, ("first", "second"), "derivative order")
    kernel_size = _check_kernel_size(kernel_size, minimum=3)
    t = _kernel_offsets(kernel_size)
    g = gaussian_kernel(kernel_size)

    if order == "first":
        w = t * g
        return w / np.sum(t * w)

    w = (t**2 - np.sum(t**2 * g)) * g
    return w / (0.5 * np.sum(t**2 * w))


class Profile:
    """Immutable sequence of ``(position, value)`` samples.

    Positions are strictly increasing. Values and positions are exposed as
    read-only numpy arrays.
    """

    __slots__ = ("_values", "_positions")

    def __init__(self, values: Sequence[float] | np.ndarray, positions: Sequence[float] | np.ndarray):
        values = np.array(values, dtype=float)
        positions = np.array(positions, dtype=float)

        if values.ndim != 1 or positions.ndim != 1:
            raise InvalidArgumentError("Profile values and positions must be 1-D sequences")
        if len(values) != len(positions):
            raise InvalidArgumentError(
                f"Got {len(values)} values but {len(positions)} positions"
            )
        if len(values) == 0:
            raise InvalidArgumentError("Profile needs at least one sample")
        if not (np.all(np.isfinite(values)) and np.all(np.isfinite(positions))):
            raise InvalidArgumentError("Profile samples must be finite")
        if np.any(np.diff(positions) <= 0):
            raise InvalidArgumentError("Profile positions must be strictly increasing")

        values.setflags(write=False)
        positions.setflags(write=False)
        self._values = values
        self._positions = positions

    @classmethod
    def from_samples(
        cls,
        values: Sequence[float] | np.ndarray,
        positions: Sequence[float] | np.ndarray,
    ) -> Profile:
        """Create a profile from explicit values and their coordinates."""
        return cls(values, positions)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def positions(self) -> np.ndarray:
        return self._positions

    @property
    def size(self) -> int:
        return len(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Profile):
            return NotImplemented
        return np.array_equal(self._values, other._values) and np.array_equal(
            self._positions, other._positions
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"Profile(size={self.size}, "
            f"range=[{self._positions[0]:g}, {self._positions[-1]:g}])"
        )

    def _check_index(self, index: int) -> int:
        try:
            index = operator.index(index)
        except TypeError:
            raise IndexOutOfRangeError(f"Sample index must be an integer, got {index!r}") from None
        if not 0 <= index < self.size:
            raise IndexOutOfRangeError(
                f"Sample index {index} outside [0, {self.size - 1}]"
            )
        return index

    def get_value(self, index: int) -> float:
        return float(self._values[self._check_index(index)])

    @overload
    def get_coordinate(self, index: int) -> float: ...

    @overload
    def get_coordinate(self, index: Sequence[int]) -> list[float]: ...

    def get_coordinate(self, index):
        """Position of one sample, or of each sample in a sequence of indices."""
        if isinstance(index, (Sequence, np.ndarray)):
            return [float(self._positions[self._check_index(i)]) for i in index]
        return float(self._positions[self._check_index(index)])

    def get_median(self) -> float:
        """Median sample value (mean of the middle pair for even sizes)."""
        return float(np.median(self._values))

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def _with_values(self, values: np.ndarray) -> Profile:
        return Profile(values, self._positions)

    def resample(self, target_sample_count: int) -> Profile:
        """Linearly re-sample onto ``target_sample_count`` evenly spaced positions."""
        if target_sample_count < 2:
            raise InvalidArgumentError(
                f"Resampling needs at least 2 samples, got {target_sample_count}"
            )
        if self.size < 2:
            raise InvalidArgumentError("Cannot resample a single-sample profile")
        positions = np.linspace(self._positions[0], self._positions[-1], int(target_sample_count))
        return Profile(np.interp(positions, self._positions, self._values), positions)

    def add_noise(
        self,
        distribution: NoiseDistribution = "uniform",
        low: float = -0.1,
        high: float = 0.1,
        seed: int | np.random.Generator | None = None,
    ) -> Profile:
        """Add an independent random perturbation to every sample.

        ``uniform`` draws from ``[low, high]``; ``gaussian`` uses ``low`` as the
        mean and ``high`` as the standard deviation.
        """
        distribution = _choice(distribution, ("uniform", "gaussian"), "noise distribution")
        rng = np.random.default_rng(seed)

        if distribution == "uniform":
            if low > high:
                raise InvalidArgumentError(f"Noise range is empty: [{low}, {high}]")
            noise = rng.uniform(low, high, self.size)
        else:
            if high < 0:
                raise InvalidArgumentError(f"Noise standard deviation must be >= 0, got {high}")
            noise = rng.normal(low, high, self.size)

        return self._with_values(self._values + noise)

    def gaussian_smooth(self, kernel_size: int) -> Profile:
        """Gaussian blur; edge samples are replicated past the profile ends."""
        kernel = gaussian_kernel(kernel_size)
        return self._with_values(correlate1d(self._values, kernel, mode="nearest"))

    def gaussian_derivative(self, kernel_size: int, order: DerivativeOrder) -> Profile:
        """First or second Gaussian derivative per sample, same length as the input."""
        kernel = gaussian_derivative_kernel(kernel_size, order)
        return self._with_values(correlate1d(self._values, kernel, mode="nearest"))

    def multiply_constant(self, factor: float) -> Profile:
        return self._with_values(self._values * factor)

    def binarize(self, low: float, high: float, high_value: float) -> Profile:
        """``high_value`` where ``low <= value <= high``, 0 elsewhere.

        The band is inclusive. Applied to a derivative this marks the flat
        stretches of the original profile.
        """
        inside = (self._values >= low) & (self._values <= high)
        return self._with_values(np.where(inside, float(high_value), 0.0))

    def clamp(self, lo: float, hi: float) -> Profile:
        if lo > hi:
            raise InvalidArgumentError(f"Clamp bounds reversed: [{lo}, {hi}]")
        return self._with_values(np.clip(self._values, lo, hi))

    def crop(self, start_index: int, end_index: int) -> Profile:
        """Samples ``start_index`` through ``end_index``, both inclusive."""
        start = self._check_index(start_index)
        end = self._check_index(end_index)
        if start > end:
            raise IndexOutOfRangeError(f"Crop start {start} is after crop end {end}")
        return Profile(self._values[start:end + 1], self._positions[start:end + 1])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_local_extrema(
        self,
        kind: ExtremumKind,
        min_separation: int,
        min_prominence: float,
    ) -> list[int]:
        """Indices of local maxima (or minima), ascending.

        A sample qualifies when it is the extreme of the window spanning
        ``min_separation`` samples on each side and stands at least
        ``min_prominence`` above (below) the opposite extreme of that window.
        Qualifying samples are then taken strongest first, ties by lowest
        index, skipping any closer than ``min_separation`` to one already taken.
        """
        kind = _choice(kind, ("max", "min"), "extremum kind")
        if min_separation < 1:
            raise InvalidArgumentError(f"min_separation must be >= 1, got {min_separation}")
        if min_prominence < 0:
            raise InvalidArgumentError(f"min_prominence must be >= 0, got {min_prominence}")

        signal = self._values if kind == "max" else -self._values
        window = 2 * int(min_separation) + 1
        peak = maximum_filter1d(signal, size=window, mode="nearest")
        floor = minimum_filter1d(signal, size=window, mode="nearest")

        candidates = np.flatnonzero((signal == peak) & (signal - floor >= min_prominence))
        # stable sort keeps equal values in index order
        order = candidates[np.argsort(-signal[candidates], kind="stable")]

        accepted: list[int] = []
        for idx in order:
            if all(abs(int(idx) - other) >= min_separation for other in accepted):
                accepted.append(int(idx))

        logger.debug(
            f"find_local_extrema({kind}): {len(candidates)} candidates -> {len(accepted)} kept"
        )
        return sorted(accepted)
