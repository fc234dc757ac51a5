"""
Static 3-d tree stored as a pre-order list of nodes.

The root sits at index 0, every child is stored after its parent and a node's
whole left subtree is stored before any node of its right subtree. Nodes link
to their children by list index, so the tree needs no parent pointers and maps
directly onto the exported JSON format.
"""

import math
import typing as t
from dataclasses import dataclass

from xyztree.algorithms.metrics import Metric, MetricFunc, make_metric
from xyztree.algorithms.partition import partition, tuple_point
from xyztree.data_models import DataSet, Point
from xyztree.exceptions import EmptyInputError, EmptyTreeError
from xyztree.utils.utils import XyzTreeLogger

DIMENSIONS = 3


@dataclass(frozen=True)
class Node:
    axis: t.Optional[int]
    """Hyperplane axis in [0, 2], or None for a leaf"""

    key: str
    point: Point
    left: t.Optional[int] = None
    right: t.Optional[int] = None

    @property
    def is_leaf(self) -> bool:
        return self.axis is None


class XYZTree(t.Sequence[Node]):
    def __init__(self, nodes: t.Iterable[Node] = ()):
        self._nodes: t.Tuple[Node, ...] = tuple(nodes)

    @classmethod
    def make(
        cls, points: DataSet, logger: t.Optional[XyzTreeLogger] = None
    ) -> "XYZTree":
        return build_tree(points, logger=logger)

    def nn(
        self,
        point: t.Sequence[float],
        metric: t.Union[Metric, str] = Metric.EUCLIDEAN,
        logger: t.Optional[XyzTreeLogger] = None,
    ) -> Node:
        """Find the nearest neighbor of `point` under the named metric."""
        return nearest_neighbor(self, point, metric, logger=logger)

    @property
    def root(self) -> Node:
        if not self._nodes:
            raise EmptyTreeError()
        return self._nodes[0]

    def keys(self) -> t.List[str]:
        return [node.key for node in self._nodes]

    def height(self) -> int:
        """Number of nodes on the longest root-to-leaf path."""
        if not self._nodes:
            return 0
        height = 0
        stack = [(0, 1)]
        while stack:
            index, depth = stack.pop()
            height = max(height, depth)
            node = self._nodes[index]
            for child in (node.left, node.right):
                if child is not None:
                    stack.append((child, depth + 1))
        return height

    @t.overload
    def __getitem__(self, index: int) -> Node: ...

    @t.overload
    def __getitem__(self, index: slice) -> t.Tuple[Node, ...]: ...

    def __getitem__(self, index):
        return self._nodes[index]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> t.Iterator[Node]:
        return iter(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, XYZTree):
            return NotImplemented
        return self._nodes == other._nodes

    def __repr__(self) -> str:
        return f"XYZTree(size={len(self._nodes)})"


def build_tree(points: DataSet, logger: t.Optional[XyzTreeLogger] = None) -> XYZTree:
    """Creates a 3-d tree from a mapping of identifiers to [x, y, z] coordinates."""
    if len(points) == 0:
        raise EmptyInputError()
    for key, point in points.items():
        if len(point) != DIMENSIONS:
            raise ValueError(
                f"Point '{key}' dimension does not match tree dimensions"
            )

    nodes: t.List[t.Optional[Node]] = []
    _build_recursive(points, nodes, 0, logger)
    return XYZTree(t.cast(t.List[Node], nodes))


def _build_recursive(
    points: DataSet,
    nodes: t.List[t.Optional[Node]],
    depth: int,
    logger: t.Optional[XyzTreeLogger],
) -> int:
    # Reserve this node's slot before the children claim theirs
    index = len(nodes)
    nodes.append(None)

    if len(points) == 1:
        key, point = next(iter(points.items()))
        nodes[index] = Node(axis=None, key=key, point=tuple_point(point))
        if logger is not None:
            logger.log(f"NODE #{index}: leaf, key = {key}", depth)
        return index

    split = partition(points)
    if logger is not None:
        logger.log(
            f"NODE #{index}: numPts = {len(points)}, median key = {split.key}, "
            f"median pt = {list(split.point)}, hyperplane = {split.axis}",
            depth,
        )

    left = None
    right = None
    if split.left:
        left = _build_recursive(split.left, nodes, depth + 1, logger)
    if split.right:
        right = _build_recursive(split.right, nodes, depth + 1, logger)

    nodes[index] = Node(
        axis=split.axis, key=split.key, point=split.point, left=left, right=right
    )
    return index


@dataclass
class SearchContext:
    """Best match so far of a single nearest-neighbor query."""

    query: Point
    metric: MetricFunc
    logger: t.Optional[XyzTreeLogger] = None
    # The root stands in until a finite distance is found
    best_index: int = 0
    best_distance: float = math.inf


def nearest_neighbor(
    tree: XYZTree,
    point: t.Sequence[float],
    metric: t.Union[Metric, str] = Metric.EUCLIDEAN,
    logger: t.Optional[XyzTreeLogger] = None,
) -> Node:
    """Finds the tree node closest to `point` under the named metric.

    When several points are equally close, the one returned is whichever the
    traversal reached first; no particular choice among ties is guaranteed.
    """
    node, _distance = nearest_neighbor_distance(tree, point, metric, logger=logger)
    return node


def nearest_neighbor_distance(
    tree: XYZTree,
    point: t.Sequence[float],
    metric: t.Union[Metric, str] = Metric.EUCLIDEAN,
    logger: t.Optional[XyzTreeLogger] = None,
) -> t.Tuple[Node, float]:
    if len(tree) == 0:
        raise EmptyTreeError()
    distance_func = make_metric(metric)
    if len(point) != DIMENSIONS:
        raise ValueError("Query point dimension does not match tree dimensions")

    context = SearchContext(query=tuple_point(point), metric=distance_func, logger=logger)
    if logger is not None:
        logger.log(f"test pt: {list(context.query)}")
    _search_recursive(tree, 0, context, 0)

    best = tree[context.best_index]
    if logger is not None:
        logger.log(f"Nearest Neighbor key: {best.key}")
    return best, context.best_distance


def _search_recursive(
    tree: XYZTree, index: int, context: SearchContext, depth: int
) -> None:
    node = tree[index]
    query = context.query

    dist = context.metric(query, node.point)
    if dist < context.best_distance:
        context.best_index = index
        context.best_distance = dist
    if context.logger is not None:
        context.logger.log(
            f"NODE #{index}: key = {node.key}, distance = {dist}", depth
        )

    if context.best_distance == 0.0 or node.axis is None:
        return
    if node.left is None:
        if node.right is not None:
            _search_recursive(tree, node.right, context, depth + 1)
        return
    if node.right is None:
        _search_recursive(tree, node.left, context, depth + 1)
        return

    axis = node.axis
    diff = query[axis] - node.point[axis]

    # Search closer subtree first
    near, far = (node.left, node.right) if diff < 0 else (node.right, node.left)
    _search_recursive(tree, near, context, depth + 1)

    # The far side is at least |diff| away along the hyperplane axis
    if abs(diff) < context.best_distance:
        _search_recursive(tree, far, context, depth + 1)
