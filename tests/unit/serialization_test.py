import json

import numpy as np
import pytest

from xyztree.algorithms.xyz_tree import XYZTree, build_tree
from xyztree.exceptions import DataSetFormatError, EmptyTreeError, TreeFormatError
from xyztree.serialization import (
    export_tree,
    import_tree,
    load_points,
    tree_from_json,
    tree_to_json,
)

POINTS = {"A": [0, 0, 0], "B": [1, 1, 1], "C": [5, 5, 5]}


def legacy_record(**nodes):
    return json.dumps({"size": len(nodes), "xyztree": list(nodes.values())})


class TestTreeJson:
    def setup_method(self):
        self.tree = build_tree(POINTS)

    def test_record_layout(self):
        data = json.loads(tree_to_json(self.tree))
        assert data["size"] == 3
        assert data["xyztree"][0] == {
            "id": 0,
            "hyperplane": 0,
            "key": "B",
            "coords": [1.0, 1.0, 1.0],
            "leftchild": 1,
            "rightchild": 2,
        }
        assert data["xyztree"][1] == {
            "id": 1,
            "hyperplane": -1,
            "key": "A",
            "coords": [0.0, 0.0, 0.0],
            "leftchild": None,
            "rightchild": None,
        }

    def test_compact(self):
        assert "\n" not in tree_to_json(self.tree, compact=True)
        assert "\n" in tree_to_json(self.tree)

    def test_round_trip(self):
        rng = np.random.default_rng(42)
        points = {f"P{i}": p for i, p in enumerate(rng.normal(0, 10, (150, 3)).tolist())}
        tree = build_tree(points)
        assert tree_from_json(tree_to_json(tree)) == tree
        assert tree_from_json(tree_to_json(tree, compact=True)) == tree

    def test_round_trip_single_leaf(self):
        tree = build_tree({"Only": [2, 2, 2]})
        assert tree_from_json(tree_to_json(tree)) == tree

    def test_legacy_omitted_children(self):
        data = legacy_record(
            a={"id": 0, "hyperplane": 0, "key": "B", "coords": [1, 1, 1], "leftchild": 1, "rightchild": 2},
            b={"id": 1, "hyperplane": -1, "key": "A", "coords": [0, 0, 0]},
            c={"id": 2, "hyperplane": -1, "key": "C", "coords": [5, 5, 5]},
        )
        assert tree_from_json(data) == self.tree

    def test_legacy_zero_children(self):
        data = legacy_record(
            a={"id": 0, "hyperplane": 0, "key": "q", "coords": [1, 1, 0], "leftchild": 1, "rightchild": 0},
            b={"id": 1, "hyperplane": -1, "key": "p", "coords": [0, 0, 0], "leftchild": 0, "rightchild": 0},
        )
        tree = tree_from_json(data)
        assert tree == build_tree({"p": [0, 0, 0], "q": [1, 1, 0]})
        assert tree[0].right is None

    def test_records_in_any_order(self):
        data = json.loads(tree_to_json(self.tree))
        data["xyztree"].reverse()
        assert tree_from_json(json.dumps(data)) == self.tree

    def test_size_mismatch(self):
        data = json.loads(tree_to_json(self.tree))
        data["size"] = 4
        with pytest.raises(TreeFormatError):
            tree_from_json(json.dumps(data))

    @pytest.mark.parametrize(
        "field, value",
        [("leftchild", 5), ("rightchild", 1), ("hyperplane", 3), ("coords", [1, 1])],
    )
    def test_bad_root_record(self, field, value):
        data = json.loads(tree_to_json(self.tree))
        data["xyztree"][0][field] = value
        with pytest.raises(TreeFormatError):
            tree_from_json(json.dumps(data))

    @pytest.mark.parametrize("value", [-2, -7])
    def test_negative_child_link(self, value):
        data = json.loads(tree_to_json(self.tree))
        data["xyztree"][0]["rightchild"] = value
        with pytest.raises(TreeFormatError):
            tree_from_json(json.dumps(data))

    def test_minus_one_child_is_absent(self):
        data = legacy_record(
            a={"id": 0, "hyperplane": 0, "key": "q", "coords": [1, 1, 0], "leftchild": 1, "rightchild": -1},
            b={"id": 1, "hyperplane": -1, "key": "p", "coords": [0, 0, 0], "leftchild": -1, "rightchild": -1},
        )
        assert tree_from_json(data) == build_tree({"p": [0, 0, 0], "q": [1, 1, 0]})

    def test_backward_link(self):
        data = json.loads(tree_to_json(build_tree({"a": [0, 0, 0], "b": [1, 0, 0], "c": [2, 0, 0], "d": [3, 0, 0]})))
        data["xyztree"][1]["leftchild"] = 1
        with pytest.raises(TreeFormatError):
            tree_from_json(json.dumps(data))

    def test_duplicate_ids(self):
        data = json.loads(tree_to_json(self.tree))
        data["xyztree"][2]["id"] = 1
        with pytest.raises(TreeFormatError):
            tree_from_json(json.dumps(data))

    def test_not_json(self):
        with pytest.raises(TreeFormatError):
            tree_from_json("{not json")

    def test_empty_tree(self):
        with pytest.raises(EmptyTreeError):
            tree_to_json(XYZTree())


class TestFiles:
    def test_export_import(self, tmp_path):
        tree = build_tree(POINTS)
        file = str(tmp_path / "tree.json")
        export_tree(tree, file, compact=True)
        assert import_tree(file) == tree

    def test_missing_or_empty_file(self, tmp_path):
        with pytest.raises(TreeFormatError):
            import_tree(str(tmp_path / "missing.json"))
        empty = tmp_path / "empty.json"
        empty.write_text("")
        with pytest.raises(TreeFormatError):
            import_tree(str(empty))

    def test_load_points_json(self, tmp_path):
        file = tmp_path / "points.json"
        file.write_text(json.dumps(POINTS))
        assert load_points(str(file)) == {
            "A": (0.0, 0.0, 0.0),
            "B": (1.0, 1.0, 1.0),
            "C": (5.0, 5.0, 5.0),
        }

    def test_load_points_yaml(self, tmp_path):
        file = tmp_path / "points.yaml"
        file.write_text("Pt1: [1.0, 2.0, 3.0]\nPt2: [4, 5, 6]\n")
        assert load_points(str(file)) == {"Pt1": (1.0, 2.0, 3.0), "Pt2": (4.0, 5.0, 6.0)}

    def test_load_missing_points_file(self, tmp_path):
        with pytest.raises(DataSetFormatError):
            load_points(str(tmp_path / "missing.json"))

    def test_load_empty_yaml(self, tmp_path):
        file = tmp_path / "points.yml"
        file.write_text("")
        assert load_points(str(file)) == {}

    @pytest.mark.parametrize(
        "content", ['{"A": [1, 2]}', '[[1, 2, 3]]', '{"A": ["x", 0, 0]}', "{oops"]
    )
    def test_bad_points(self, tmp_path, content):
        file = tmp_path / "points.json"
        file.write_text(content)
        with pytest.raises(DataSetFormatError):
            load_points(str(file))
