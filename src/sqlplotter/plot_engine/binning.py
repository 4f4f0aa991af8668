"""Quantiles and adaptive bin widths for histogram plots.

Bin widths follow the Freedman–Diaconis rule (``2 * IQR / n**(1/3)``) and are
then snapped to a "nice" value in ``{1, 2, 5, 10} * 10**k`` so bin boundaries
stay human readable.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np

DEFAULT_BIN_WIDTH: float = 1.0
DEFAULT_BIN_COUNT: int = 10
# Upper bound on bins per axis; wider bins are used when a sample would need more.
MAX_BIN_COUNT: int = 10_000

# (upper threshold on the mantissa, nice base); the last entry catches the rest
_NICE_STEPS: tuple[tuple[float, float], ...] = (
    (1.5, 1.0),
    (3.0, 2.0),
    (7.0, 5.0),
)
_NICE_TOP: float = 10.0
_NICE_CEIL_BASES: tuple[float, ...] = (1.0, 2.0, 5.0)

SampleLike = Union[Sequence[float], np.ndarray]


def quantile(sample: SampleLike, q: float) -> float:
    """Linearly interpolated quantile of ``sample`` (type 7).

    Sorts a copy, so the caller's sample is left untouched.

    Args:
        sample: Numeric values, in any order.
        q: Quantile in [0, 1].

    Returns:
        The interpolated quantile, or 0.0 for an empty sample.
    """
    data = np.sort(np.asarray(sample, dtype=float))
    n = data.size
    if n == 0:
        return 0.0

    idx = q * (n - 1)
    lo = int(math.floor(idx))
    hi = int(math.ceil(idx))
    if lo == hi:
        return float(data[lo])
    frac = idx - lo
    return float(data[lo] * (1.0 - frac) + data[hi] * frac)


def interquartile_range(sample: SampleLike) -> float:
    """Q3 - Q1 of ``sample``."""
    return quantile(sample, 0.75) - quantile(sample, 0.25)


def freedman_diaconis_width(sample: SampleLike) -> float:
    """Raw (unrounded) Freedman–Diaconis bin width.

    Returns 0.0 for an empty sample; ``nice_round`` maps that to the default width.
    """
    n = len(sample)
    if n == 0:
        return 0.0
    return float(2.0 * interquartile_range(sample) / np.cbrt(n))


def _decompose(value: float) -> Optional[tuple[float, float]]:
    """``(mantissa, 10**k)`` with ``value == mantissa * 10**k``, or None if unusable."""
    if not math.isfinite(value) or value <= 0:
        return None
    scale = 10.0 ** math.floor(math.log10(value))
    if scale == 0.0:
        return None
    return value / scale, scale


def _finite_or_default(width: float) -> float:
    return width if math.isfinite(width) and width > 0 else DEFAULT_BIN_WIDTH


def nice_round(value: float) -> float:
    """Snap ``value`` to the nearest of ``{1, 2, 5, 10} * 10**k``.

    Non-positive and non-finite values (and results beyond the float range)
    map to 1.0.
    """
    parts = _decompose(value)
    if parts is None:
        return DEFAULT_BIN_WIDTH
    base, scale = parts

    nice_base = _NICE_TOP
    for threshold, candidate in _NICE_STEPS:
        if base < threshold:
            nice_base = candidate
            break
    return _finite_or_default(nice_base * scale)


def nice_ceil(value: float) -> float:
    """Smallest value of ``{1, 2, 5, 10} * 10**k`` that is >= ``value``.

    Non-positive and non-finite values map to 1.0.
    """
    parts = _decompose(value)
    if parts is None:
        return DEFAULT_BIN_WIDTH
    base, scale = parts

    nice_base = _NICE_TOP
    for candidate in _NICE_CEIL_BASES:
        # tolerance absorbs log10/pow rounding for exact powers of ten
        if base <= candidate * (1.0 + 1e-9):
            nice_base = candidate
            break
    return _finite_or_default(nice_base * scale)


def bin_width(sample: SampleLike) -> float:
    """Nice-rounded Freedman–Diaconis width, never <= 0."""
    width = nice_round(freedman_diaconis_width(sample))
    if width <= 0:
        width = DEFAULT_BIN_WIDTH
    return width


@dataclass(frozen=True)
class BinSpec:
    """Uniform binning of one histogram axis.

    Attributes:
        width: Nice-rounded bin width (> 0).
        lower_bound: Sample minimum.
        upper_bound: Sample maximum.
        count: Number of bins (>= 1).
    """
    width: float
    lower_bound: float
    upper_bound: float
    count: int

    @property
    def span(self) -> float:
        return self.upper_bound - self.lower_bound

    def edges(self) -> np.ndarray:
        """``count + 1`` equally spaced bin edges over the bounds.

        A zero-width range is widened by 0.5 on each side so every value
        still lands in a bin.
        """
        lo, hi = self.lower_bound, self.upper_bound
        if hi <= lo:
            lo, hi = lo - 0.5, hi + 0.5
        # spaced on the halved range, which stays finite for any finite bounds
        return 2.0 * np.linspace(lo / 2.0, hi / 2.0, self.count + 1)

    def centers(self) -> np.ndarray:
        edges = self.edges()
        return edges[:-1] / 2.0 + edges[1:] / 2.0


def _half_span(lower_bound: float, upper_bound: float) -> float:
    return upper_bound / 2.0 - lower_bound / 2.0


def _bins_needed(lower_bound: float, upper_bound: float, width: float) -> float:
    """``span / width`` without overflowing for spans beyond the float range."""
    return _half_span(lower_bound, upper_bound) / (width / 2.0)


def bin_count(lower_bound: float, upper_bound: float, width: float) -> int:
    """``floor(span / width)``, in ``[1, MAX_BIN_COUNT]``.

    Falls back to DEFAULT_BIN_COUNT below one bin.
    """
    needed = _bins_needed(lower_bound, upper_bound, width)
    if not math.isfinite(needed) or needed >= MAX_BIN_COUNT + 1:
        return MAX_BIN_COUNT
    n_bins = int(math.floor(needed))
    if n_bins < 1:
        n_bins = DEFAULT_BIN_COUNT
    return n_bins


def capped_bin_width(lower_bound: float, upper_bound: float, width: float) -> float:
    """``width``, widened to the next nice value when the range needs too many bins.

    A sample with a far outlier can make ``span / width`` huge; the width is then
    raised to ``nice_ceil(span / MAX_BIN_COUNT)``.
    """
    needed = _bins_needed(lower_bound, upper_bound, width)
    if math.isfinite(needed) and needed < MAX_BIN_COUNT + 1:
        return width
    return nice_ceil(_half_span(lower_bound, upper_bound) / MAX_BIN_COUNT * 2.0)


def compute_bin_spec(sample: SampleLike) -> BinSpec:
    """Full binning for ``sample``: range, nice width and bin count."""
    data = np.asarray(sample, dtype=float)
    if data.size == 0:
        lower = upper = 0.0
    else:
        lower = float(np.min(data))
        upper = float(np.max(data))
    width = capped_bin_width(lower, upper, bin_width(data))
    return BinSpec(
        width=width,
        lower_bound=lower,
        upper_bound=upper,
        count=bin_count(lower, upper, width),
    )
