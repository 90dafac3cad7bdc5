"""Declaration vs statement placement of Go cells.

This is a textual heuristic, not a parser. Only the start of the cell is
inspected, so a cell holding a function followed by statements is placed as
a declaration as a whole.
"""

from __future__ import annotations

import enum
import re


class CellKind(enum.Enum):
    DECLARATION = "declaration"
    STATEMENT = "statement"


_TYPE_PARAMS = r"(?:\[[^\]]*\])?"

_FUNC_RE = re.compile(r"func\s+\w+\s*" + _TYPE_PARAMS + r"\s*\(.*\).*\{", re.DOTALL)
# gofmt writes "func (r T) M()" with a space and literals as "func(", which
# keeps func literals out of the method form.
_METHOD_RE = re.compile(
    r"func\s+\([^)]*\)\s*\w+\s*" + _TYPE_PARAMS + r"\s*\(.*\).*\{", re.DOTALL
)
_TYPE_RE = re.compile(r"type\s+(?:\w+\s*" + _TYPE_PARAMS + r"\s+\S|\()")

_DECLARATION_RES = (_FUNC_RE, _METHOD_RE, _TYPE_RE)

_LEADING_COMMENTS_RE = re.compile(r"(?:\s+|//[^\n]*|/\*.*?\*/)*", re.DOTALL)


def classify(content: str) -> CellKind:
    # Doc comments above a definition do not change its placement.
    text = content[_LEADING_COMMENTS_RE.match(content).end() :]
    for rx in _DECLARATION_RES:
        if rx.match(text):
            return CellKind.DECLARATION
    return CellKind.STATEMENT
