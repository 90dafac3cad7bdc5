"""gobook: a Go notebook kernel.

Cells are reassembled into one Go program on every execution; only the
output of the executed cell is returned.
"""

__all__ = [
    "Cell",
    "CellStore",
    "CellKind",
    "classify",
    "assemble",
    "extract",
    "Session",
]

__version__ = "0.1.0"

from .model import Cell  # noqa: E402
from .store import CellStore  # noqa: E402
from .classify import CellKind, classify  # noqa: E402
from .assemble import assemble  # noqa: E402
from .extract import extract  # noqa: E402
from .session import Session  # noqa: E402
