from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import nbformat
from nbformat import NotebookNode
from nbformat.v4 import new_output

from .assemble import assemble
from .config import KernelConfig
from .model import Cell
from .session import Session
from .store import CellStore
from .toolchain import GoToolchain, Toolchain

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    failed_cells: List[int]
    total_cells: int
    sidecar_path: Path


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _append_sidecar(sidecar: Path, record: dict) -> None:
    with sidecar.open("a", encoding="utf-8") as f:
        f.write(json.dumps(record, ensure_ascii=False) + "\n")


def _source(cell: NotebookNode) -> str:
    src = cell.get("source", "")
    if isinstance(src, list):
        return "".join(src)
    return str(src)


def notebook_cells(nb: NotebookNode, document_id: str) -> List[Cell]:
    """Code cells of ``nb`` as submissions; the cell index is both fragment and position."""
    cells: List[Cell] = []
    for idx, c in enumerate(nb.cells):
        if c.get("cell_type") != "code":
            continue
        cells.append(Cell(fragment=idx, position=idx, content=_source(c), owner_file=document_id))
    return cells


def assemble_notebook(nb: NotebookNode, document_id: str = "") -> str:
    store = CellStore()
    for cell in notebook_cells(nb, document_id):
        store.put(cell)
    return assemble(store, None)


def run_notebook(
    nb: NotebookNode,
    session: Session,
    *,
    document_id: str,
    sidecar_path: Path,
) -> RunResult:
    """Submit every code cell in order, the way the editor would, one at a time.

    Outputs replace the cells' previous outputs and are also appended to the
    JSON-lines sidecar.
    """
    sidecar_path.write_text("", encoding="utf-8")
    failed: List[int] = []
    cells = notebook_cells(nb, document_id)

    for cell in cells:
        timestamp = _now_iso()
        reply = session.submit(cell)
        text = reply.body.decode("utf-8", "replace")

        nb_cell = nb.cells[cell.fragment]
        if reply.ok:
            nb_cell["outputs"] = [new_output("stream", name="stdout", text=text)] if text else []
        else:
            failed.append(cell.fragment)
            nb_cell["outputs"] = [
                new_output(
                    "error",
                    ename="GoError",
                    evalue=text.splitlines()[0] if text else "",
                    traceback=text.splitlines(),
                )
            ]
        _append_sidecar(
            sidecar_path,
            {
                "cell": nb_cell.get("id") or cell.fragment,
                "fragment": cell.fragment,
                "timestamp": timestamp,
                "ok": reply.ok,
                "output": text,
            },
        )

    return RunResult(failed_cells=failed, total_cells=len(cells), sidecar_path=sidecar_path)


def run_file(
    path: str,
    *,
    config: Optional[KernelConfig] = None,
    toolchain: Optional[Toolchain] = None,
    output: Optional[str] = None,
    sidecar_path: Optional[str] = None,
) -> int:
    config = config or KernelConfig()
    if toolchain is None:
        toolchain = GoToolchain.from_config(config.toolchain)
    nb = nbformat.read(path, as_version=4)
    session = Session(toolchain, config.program_path)
    base = Path(path)
    sidecar = Path(sidecar_path) if sidecar_path else base.with_suffix(base.suffix + ".out")

    res = run_notebook(nb, session, document_id=str(base.resolve()), sidecar_path=sidecar)
    if config.toolchain.format and res.total_cells:
        session.reformat()
    if output:
        nbformat.write(nb, output)
    if res.failed_cells:
        logger.warning("%d of %d cells failed", len(res.failed_cells), res.total_cells)
        return 1
    return 0
