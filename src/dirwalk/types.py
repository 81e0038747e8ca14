from os import PathLike
from pathlib import Path
from typing import Callable, Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]

# A visitor receives each visited path; its return value is ignored
Visitor = Callable[[Path], None]
