from __future__ import annotations

from typing import Dict, List, Optional

from .model import Cell


class CellStore:
    """Cells of the current document keyed by fragment.

    There is no delete: cells live until the document changes and the whole
    store is reset.
    """

    def __init__(self) -> None:
        self._cells: Dict[int, Cell] = {}

    def put(self, cell: Cell) -> None:
        # Replaces content, position and flags of an existing fragment at once.
        self._cells[cell.fragment] = cell

    def get(self, fragment: int) -> Optional[Cell]:
        return self._cells.get(fragment)

    def reset(self) -> None:
        self._cells = {}

    def snapshot(self) -> List[Cell]:
        return list(self._cells.values())

    def clear_content(self, fragment: int) -> None:
        cell = self._cells.get(fragment)
        if cell is not None:
            cell.content = ""

    def clear_executing(self) -> None:
        for cell in self._cells.values():
            cell.executing = False

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, fragment: object) -> bool:
        return fragment in self._cells
