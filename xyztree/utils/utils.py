import json
import typing as t
from datetime import datetime


def timestamp_string():
    return datetime.now().strftime("%Y-%m-%d-%Hh%Mm%Ss_%f")


class XyzTreeLog:
    def __init__(self, message: str, depth: int = 0, timestamp: str | None = None):
        self.message = message
        self.depth = depth
        self.timestamp = timestamp if timestamp is not None else timestamp_string()

    def __str__(self):
        return " " * self.depth + self.message

    def toJSON(self):
        return json.dumps(self, default=lambda o: o.__dict__, sort_keys=True, indent=4)


class XyzTreeLogger(list[XyzTreeLog]):
    """Collects trace records of tree builds and searches, echoing them to stdout when `printout` is set."""

    def __init__(self, printout: bool = True):
        super(XyzTreeLogger, self).__init__()
        self.printout = printout

    def append(self, log: XyzTreeLog):
        super(XyzTreeLogger, self).append(log)
        if self.printout:
            print(log)

    def log(self, message: str, depth: int = 0):
        self.append(XyzTreeLog(message, depth))

    @property
    def messages(self) -> t.List[str]:
        return [x.message for x in self]
