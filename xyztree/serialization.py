"""
JSON export and import of 3-d trees, and loading of point sets.

Trees are written as ``{"size": N, "xyztree": [node, ...]}`` where each node
carries its ``id`` (list position), ``hyperplane`` (-1 for a leaf), ``key``,
``coords``, ``leftchild`` and ``rightchild``. Absent children are written as
``null``. Files written by older releases omitted absent children or stored
them as 0 (the root can never be a child), both of which are still accepted.
"""

import json
import os
import typing as t

import yaml
from pydantic import ValidationError

from xyztree.algorithms.xyz_tree import Node, XYZTree
from xyztree.data_models import (
    LEAF_HYPERPLANE,
    DataSetModel,
    NodeRecordModel,
    Point,
    TreeRecordModel,
)
from xyztree.exceptions import DataSetFormatError, EmptyTreeError, TreeFormatError


def tree_to_model(tree: XYZTree) -> TreeRecordModel:
    records = []
    for i, node in enumerate(tree):
        records.append(
            NodeRecordModel(
                id=i,
                hyperplane=LEAF_HYPERPLANE if node.axis is None else node.axis,
                key=node.key,
                coords=node.point,
                leftchild=node.left,
                rightchild=node.right,
            )
        )
    return TreeRecordModel(size=len(tree), xyztree=records)


def tree_from_model(model: TreeRecordModel) -> XYZTree:
    if model.size != len(model.xyztree):
        raise TreeFormatError(
            f"tree size {model.size} does not match its {len(model.xyztree)} nodes"
        )

    slots: t.List[t.Optional[Node]] = [None] * model.size
    for record in model.xyztree:
        if record.id >= model.size or slots[record.id] is not None:
            raise TreeFormatError(f"invalid or duplicate node id {record.id}")
        slots[record.id] = _node_from_record(record)

    nodes = t.cast(t.List[Node], slots)
    _check_links(nodes)
    return XYZTree(nodes)


def _absent_child(child: t.Optional[int]) -> t.Optional[int]:
    # 0 is the root and -1 the old end-of-recursion marker: neither is a real child
    if child is None or child in (0, -1):
        return None
    if child < -1:
        raise TreeFormatError(f"invalid child link {child}")
    return child


def _node_from_record(record: NodeRecordModel) -> Node:
    if record.hyperplane == LEAF_HYPERPLANE:
        return Node(axis=None, key=record.key, point=record.coords)
    return Node(
        axis=record.hyperplane,
        key=record.key,
        point=record.coords,
        left=_absent_child(record.leftchild),
        right=_absent_child(record.rightchild),
    )


def _check_links(nodes: t.List[Node]) -> None:
    parents: t.Dict[int, int] = {}
    for i, node in enumerate(nodes):
        if node.axis is not None and node.left is None and node.right is None:
            raise TreeFormatError(f"node #{i} is not a leaf but has no children")
        for child in (node.left, node.right):
            if child is None:
                continue
            if child <= i or child >= len(nodes):
                raise TreeFormatError(f"node #{i} links to invalid child #{child}")
            if child in parents:
                raise TreeFormatError(
                    f"node #{child} is a child of both #{parents[child]} and #{i}"
                )
            parents[child] = i
    if len(parents) != max(len(nodes) - 1, 0):
        raise TreeFormatError("some nodes are not reachable from the root")


def tree_to_json(tree: XYZTree, compact: bool = False) -> str:
    if len(tree) == 0:
        raise EmptyTreeError()
    model = tree_to_model(tree)
    if compact:
        return model.model_dump_json()
    return model.model_dump_json(indent=1)


def tree_from_json(data: t.Union[str, bytes]) -> XYZTree:
    try:
        model = TreeRecordModel.model_validate_json(data)
    except ValidationError as e:
        raise TreeFormatError(f"invalid 3-d tree JSON: {e}") from e
    return tree_from_model(model)


def export_tree(tree: XYZTree, file: str, compact: bool = False) -> None:
    """Exports the 3-d tree to `file` as JSON, on a single line when `compact`."""
    output = tree_to_json(tree, compact=compact)
    with open(file, "w") as f:
        f.write(output)


def import_tree(file: str) -> XYZTree:
    """Imports a 3-d tree from a JSON file written by `export_tree`."""
    if not os.path.isfile(file) or os.path.getsize(file) == 0:
        raise TreeFormatError("the input file cannot be located or is empty")
    with open(file, "r") as f:
        return tree_from_json(f.read())


def load_points(file: str) -> t.Dict[str, Point]:
    """Reads a point set, a mapping of identifiers to [x, y, z], from a JSON or YAML file."""
    try:
        with open(file, "r") as stream:
            if file.strip().lower().endswith((".yaml", ".yml")):
                data = yaml.safe_load(stream)
            else:
                data = json.load(stream)
    except OSError as e:
        raise DataSetFormatError(f"cannot read point set file: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DataSetFormatError(f"cannot parse point set file: {e}") from e

    if data is None:
        data = {}
    try:
        return DataSetModel(points=data).points
    except ValidationError as e:
        raise DataSetFormatError(f"invalid point set: {e}") from e
