"""Network analysis core: degrees, summary statistics, degree distribution."""

from .degree import Annotation, annotate
from .metrics import Metrics, summarize, format_metric
from .distribution import (
    DegreeDistribution,
    HistogramBin,
    LineFit,
    analyze,
    fit_line,
    format_exponent,
)

__all__ = [
    "Annotation",
    "annotate",
    "Metrics",
    "summarize",
    "format_metric",
    "DegreeDistribution",
    "HistogramBin",
    "LineFit",
    "analyze",
    "fit_line",
    "format_exponent",
]
