from xyztree.algorithms.xyz_tree import XYZTree
from xyztree.utils.utils import XyzTreeLogger


points = {"A": [0, 0, 0], "B": [1, 1, 1], "C": [5, 5, 5], "D": [2, -3, 4]}
logger = XyzTreeLogger()
tree = XYZTree.make(points, logger=logger)
assert len(tree) == 4
node = tree.nn([0.1, 0.1, 0.1], metric="Euclidean", logger=logger)
assert node.key == "A"
assert tree.nn([4, 4, 6], metric="Max").key == "C"
