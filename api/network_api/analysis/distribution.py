"""Degree distribution: linear histogram and log-log power-law fit."""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from api.network_api.errors import InsufficientRegressionDataError

Point = Tuple[float, float]

HISTOGRAM_BINS = "sturges"


@dataclass
class HistogramBin:
    lower: float
    upper: float
    count: int

    def to_dict(self) -> dict:
        return {"lower": self.lower, "upper": self.upper, "count": self.count}


@dataclass
class LineFit:
    slope: float
    intercept: float
    start: Point
    end: Point

    @property
    def exponent(self) -> float:
        # P(k) ~ k^-gamma, so gamma is the negated log-log slope
        return -self.slope


@dataclass
class DegreeDistribution:
    histogram: List[HistogramBin] = field(default_factory=list)
    frequencies: Dict[int, int] = field(default_factory=dict)
    loglog: List[Point] = field(default_factory=list)
    fit: Optional[LineFit] = None
    undefined: Dict[str, str] = field(default_factory=dict)

    @property
    def exponent(self) -> Optional[float]:
        return self.fit.exponent if self.fit else None

    @property
    def fit_line(self) -> Optional[Tuple[Point, Point]]:
        return (self.fit.start, self.fit.end) if self.fit else None

    def to_dict(self) -> dict:
        return {
            "histogram": [b.to_dict() for b in self.histogram],
            "frequencies": [{"degree": k, "count": c} for k, c in self.frequencies.items()],
            "loglog": [{"x": x, "y": y} for x, y in self.loglog],
            "fit_line": [{"x": x, "y": y} for x, y in self.fit_line] if self.fit else None,
            "slope": self.fit.slope if self.fit else None,
            "intercept": self.fit.intercept if self.fit else None,
            "exponent": self.exponent,
            "exponent_display": format_exponent(self.exponent),
            "undefined": dict(self.undefined),
        }


def histogram(degrees: Sequence[int], bins=HISTOGRAM_BINS) -> List[HistogramBin]:
    """Equal-width bins over ``[0, max(degrees)]``.

    Bins are half-open ``[lower, upper)`` except the last, which also
    includes its upper edge. Counts add up to ``len(degrees)``.
    """
    if len(degrees) == 0:
        return []

    top = max(degrees)
    if top == 0:
        # numpy widens a zero-width range to [-0.5, 0.5]; keep it at [0, 0]
        return [HistogramBin(lower=0.0, upper=0.0, count=len(degrees))]

    counts, edges = np.histogram(np.asarray(degrees, dtype=float), bins=bins, range=(0, top))
    return [
        HistogramBin(lower=float(edges[i]), upper=float(edges[i + 1]), count=int(counts[i]))
        for i in range(len(counts))
    ]


def degree_frequencies(degrees: Sequence[int]) -> Dict[int, int]:
    return dict(sorted(Counter(degrees).items()))


def loglog_points(frequencies: Dict[int, int]) -> List[Point]:
    # Degree 0 has no logarithm
    return [
        (math.log10(k), math.log10(c))
        for k, c in sorted(frequencies.items())
        if k > 0 and c > 0
    ]


def fit_line(points: Sequence[Point]) -> LineFit:
    """Ordinary least squares of y on x, closed form."""
    n = len(points)
    if n < 2:
        raise InsufficientRegressionDataError(
            f"Need at least 2 positive-degree points for a log-log fit, got {n}.",
            points=n,
        )

    sum_x = sum(x for x, _ in points)
    sum_y = sum(y for _, y in points)
    sum_xy = sum(x * y for x, y in points)
    sum_xx = sum(x * x for x, _ in points)

    denominator = n * sum_xx - sum_x ** 2
    if denominator == 0:
        raise InsufficientRegressionDataError(
            "All log-log points share the same degree; the slope is undefined.",
            points=n,
        )

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    x_min = min(x for x, _ in points)
    x_max = max(x for x, _ in points)
    return LineFit(
        slope=slope,
        intercept=intercept,
        start=(x_min, intercept + slope * x_min),
        end=(x_max, intercept + slope * x_max),
    )


def format_exponent(exponent: Optional[float]) -> str:
    if exponent is None:
        return "γ undefined"
    return f"γ ≈ {exponent:.2f}"


def analyze(degrees: Sequence[int], bins=HISTOGRAM_BINS) -> DegreeDistribution:
    distribution = DegreeDistribution(
        histogram=histogram(degrees, bins=bins),
        frequencies=degree_frequencies(degrees),
    )
    distribution.loglog = loglog_points(distribution.frequencies)

    try:
        distribution.fit = fit_line(distribution.loglog)
    except InsufficientRegressionDataError as exc:
        distribution.undefined["exponent"] = f"{exc.code}: {exc}"

    return distribution
