import typing as t

import yaml
from pydantic import BaseModel, Field, ValidationError

from xyztree.algorithms.metrics import Metric
from xyztree.exceptions import ConfigFormatError

Point = t.Tuple[float, float, float]
PointLike = t.Sequence[float]
DataSet = t.Mapping[str, PointLike]

LEAF_HYPERPLANE = -1
"""Hyperplane value marking a leaf node in exported trees."""


class NodeRecordModel(BaseModel):
    id: int = Field(ge=0)
    hyperplane: int = Field(ge=-1, le=2)
    key: str
    coords: t.Tuple[float, float, float]
    leftchild: t.Optional[int] = None
    rightchild: t.Optional[int] = None


class TreeRecordModel(BaseModel):
    size: int = Field(ge=0)
    xyztree: t.List[NodeRecordModel] = []


class DataSetModel(BaseModel):
    points: t.Dict[str, t.Tuple[float, float, float]]


# YAML MODELS


class QueryConfigYamlModel(BaseModel):
    tree_file: str
    metric: Metric = Metric.EUCLIDEAN
    queries: t.Dict[str, t.Tuple[float, float, float]] = {}


def query_config_from_yaml(file_path: str) -> QueryConfigYamlModel:
    try:
        with open(file_path, "r") as stream:
            config = yaml.safe_load(stream)
    except OSError as e:
        raise ConfigFormatError(f"cannot read query config: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigFormatError(f"cannot parse query config: {e}") from e

    if not isinstance(config, dict):
        raise ConfigFormatError("query config must be a mapping")
    try:
        return QueryConfigYamlModel(**config)
    except ValidationError as e:
        raise ConfigFormatError(f"invalid query config: {e}") from e
