import typing as t


class XyzTreeError(Exception):
    pass


class EmptyInputError(XyzTreeError):
    def __init__(self, *args: object):
        super().__init__("there are no points to process", *args)


class EmptyTreeError(XyzTreeError):
    def __init__(self, *args: object):
        super().__init__("there's no 3-d tree to search", *args)


class InvalidMetricError(XyzTreeError):
    def __init__(self, metric_name: t.Any, *args: object):
        super().__init__(f"unrecognized metric name '{metric_name}'", *args)
        self.metric_name = metric_name


class TreeFormatError(XyzTreeError):
    pass


class DataSetFormatError(XyzTreeError):
    pass


class ConfigFormatError(XyzTreeError):
    pass
