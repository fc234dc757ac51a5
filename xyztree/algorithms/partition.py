"""
Binary space partition of a 3-d point set.

The split axis is the one along which the points are most spread out, which
keeps the resulting cells closer to cubes than cycling through the axes would.
The median point along that axis becomes the node and the remaining points are
divided on either side of it.
"""

import typing as t

import numpy as np

from xyztree.data_models import DataSet, Point


class Partition(t.NamedTuple):
    axis: int
    key: str
    point: Point
    left: t.Dict[str, Point]
    right: t.Dict[str, Point]


def axis_spans(points: DataSet) -> np.ndarray:
    coords = np.array(list(points.values()), dtype=np.float64)
    return coords.max(axis=0) - coords.min(axis=0)


def split_axis(points: DataSet) -> int:
    # argmax returns the first maximum, so span ties go to the lowest axis index
    return int(np.argmax(axis_spans(points)))


def sort_along_axis(points: DataSet, axis: int) -> t.List[t.Tuple[str, Point]]:
    entries = [(key, tuple_point(point)) for key, point in points.items()]
    return sorted(entries, key=lambda entry: (entry[1][axis], entry[0]))


def partition(points: DataSet) -> Partition:
    """Splits a point set of at least two points around its median along the longest axis."""
    if len(points) < 2:
        raise ValueError("Partitioning requires at least two points")

    axis = split_axis(points)
    entries = sort_along_axis(points, axis)
    median = len(entries) // 2
    key, point = entries[median]
    return Partition(
        axis=axis,
        key=key,
        point=point,
        left=dict(entries[:median]),
        right=dict(entries[median + 1 :]),
    )


def tuple_point(point: t.Sequence[float]) -> Point:
    return (float(point[0]), float(point[1]), float(point[2]))
