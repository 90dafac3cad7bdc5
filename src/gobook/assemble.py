from __future__ import annotations

from typing import List, Optional

from .classify import CellKind, classify
from .extract import CLOSE_MARKER, OPEN_MARKER, marker_statement
from .model import Cell
from .store import CellStore

PROGRAM_HEADER = "package main\n"


def ordered_cells(store: CellStore) -> List[Cell]:
    """Cells in editor order; equal positions fall back to fragment order."""
    return sorted(store.snapshot(), key=lambda c: (c.position, c.fragment))


def assemble(store: CellStore, executing_fragment: Optional[int]) -> str:
    """Build the whole Go program for the current store.

    Declarations (functions, methods, types) go to package level, every other
    cell runs inside ``main`` in editor order. Only the statement cell whose
    fragment is ``executing_fragment`` is wrapped in output markers.

    Declarations are rebuilt from the snapshot on every call, so re-running
    an edited function never duplicates it. The only side effect is on the
    ``executing`` flags: declarations are cleared while placing them and the
    executing cell is cleared once the program text is built.
    """
    decls: List[str] = []
    body: List[str] = []

    for cell in ordered_cells(store):
        if classify(cell.content) is CellKind.DECLARATION:
            cell.executing = False
            decls.append(cell.content.strip("\n"))
            continue
        wrap = cell.fragment == executing_fragment
        if not wrap and not cell.content.strip():
            continue
        if wrap:
            body.append(marker_statement(OPEN_MARKER))
        if cell.content.strip():
            body.append(cell.content.strip("\n"))
        if wrap:
            body.append(marker_statement(CLOSE_MARKER))

    if executing_fragment is not None:
        executed = store.get(executing_fragment)
        if executed is not None:
            executed.executing = False

    parts = [PROGRAM_HEADER]
    for d in decls:
        parts.append(d + "\n")
    main = "func main() {\n" + "".join(line + "\n" for line in body) + "}\n"
    parts.append(main)
    return "\n".join(parts)
