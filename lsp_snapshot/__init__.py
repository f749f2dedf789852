"""Minimal text diffs and line-indexed document snapshots, for keeping a language server in sync with an editor."""

from .diff import *
from .errors import *
from .snapshot import *
from .structs import *
from .utils import *

__version__ = "0.1.0"
