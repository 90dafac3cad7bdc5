from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .model import Cell

# Prefix the editor extension recognises as a failed execution.
REJECT_PREFIX = "exit status 3\n"


@dataclass
class PrecheckIssue:
    code: str  # "main" | "import" | "package"
    message: str


_RULES: List[Tuple[str, "re.Pattern[str]", str]] = [
    (
        "main",
        re.compile(r"^\s*func\s+main\s*\(\s*\)\s*\{", re.MULTILINE),
        "Main function is generated automatically. Please remove func main()",
    ),
    (
        "import",
        re.compile(r"^\s*import\s+[(\"`\w.]", re.MULTILINE),
        "Imports are done automatically. Please remove import statement",
    ),
    (
        "package",
        re.compile(r"^\s*package\s+\w+", re.MULTILINE),
        "Package is generated automatically. Please remove package statement",
    ),
]


def check_cell(cell: Cell) -> Optional[PrecheckIssue]:
    """Return the first reason ``cell`` cannot be assembled, or None."""
    for code, rx, message in _RULES:
        if rx.search(cell.content):
            return PrecheckIssue(code, REJECT_PREFIX + message)
    return None
