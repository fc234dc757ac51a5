import os
import typing as t

import typer

from xyztree.algorithms.metrics import Metric
from xyztree.algorithms.xyz_tree import XYZTree, nearest_neighbor_distance
from xyztree.data_models import query_config_from_yaml
from xyztree.exceptions import XyzTreeError
from xyztree.serialization import export_tree, import_tree, load_points
from xyztree.utils.utils import XyzTreeLogger

app = typer.Typer()


def fail(error: Exception) -> t.NoReturn:
    typer.echo(f"xyztree: {error}", err=True)
    raise typer.Exit(code=1)


@app.command()
def make(
    *,
    points_file: t.Annotated[str, typer.Option("--points", help="JSON or YAML point set")],
    out: t.Annotated[str, typer.Option("--out")] = "xyztree.json",
    compact: t.Annotated[bool, typer.Option("--compact")] = False,
    verbose: t.Annotated[bool, typer.Option("--verbose")] = False,
):
    logger = XyzTreeLogger() if verbose else None
    try:
        points = load_points(points_file)
        tree = XYZTree.make(points, logger=logger)
        export_tree(tree, out, compact=compact)
    except (XyzTreeError, OSError) as e:
        fail(e)
    typer.echo(f"Exported a 3-d tree of {len(tree)} nodes to {out}")


@app.command()
def nn(
    *,
    tree_file: t.Annotated[str, typer.Option("--tree")],
    point: t.Annotated[t.Tuple[float, float, float], typer.Option("--point")],
    metric: t.Annotated[Metric, typer.Option("--metric")] = Metric.EUCLIDEAN,
    verbose: t.Annotated[bool, typer.Option("--verbose")] = False,
):
    logger = XyzTreeLogger() if verbose else None
    try:
        tree = import_tree(tree_file)
        node, distance = nearest_neighbor_distance(tree, point, metric, logger=logger)
    except XyzTreeError as e:
        fail(e)
    typer.echo(f"{node.key} {list(node.point)} {distance}")


@app.command()
def batch(config: t.Annotated[str, typer.Option("--config")]):
    try:
        query_config = query_config_from_yaml(config)
        tree_file = query_config.tree_file
        if not os.path.isabs(tree_file):
            tree_file = os.path.join(os.path.dirname(os.path.abspath(config)), tree_file)
        tree = import_tree(tree_file)
        for name, point in query_config.queries.items():
            node, distance = nearest_neighbor_distance(
                tree, point, query_config.metric
            )
            typer.echo(f"{name}: {node.key} {list(node.point)} {distance}")
    except XyzTreeError as e:
        fail(e)


if __name__ == "__main__":
    app()
