import math
import typing as t
from enum import Enum

from xyztree.exceptions import InvalidMetricError

MetricFunc = t.Callable[[t.Sequence[float], t.Sequence[float]], float]


class Metric(str, Enum):
    EUCLIDEAN = "Euclidean"
    MANHATTAN = "Manhattan"
    MAX = "Max"


def euclidean_distance(a: t.Sequence[float], b: t.Sequence[float]) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1], a[2] - b[2])


def manhattan_distance(a: t.Sequence[float], b: t.Sequence[float]) -> float:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) + abs(a[2] - b[2])


def max_distance(a: t.Sequence[float], b: t.Sequence[float]) -> float:
    """Chebyshev distance: the largest per-axis difference."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]), abs(a[2] - b[2]))


METRICS: t.Dict[Metric, MetricFunc] = {
    Metric.EUCLIDEAN: euclidean_distance,
    Metric.MANHATTAN: manhattan_distance,
    Metric.MAX: max_distance,
}


def make_metric(name: t.Union[Metric, str]) -> MetricFunc:
    """Returns the distance function registered under `name`.

    Names are matched exactly ('Euclidean', 'Manhattan' or 'Max'); there is no default.
    """
    try:
        metric = Metric(name)
    except ValueError:
        raise InvalidMetricError(name) from None
    return METRICS[metric]
