from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .assemble import assemble
from .extract import extract
from .model import Cell
from .precheck import REJECT_PREFIX, check_cell
from .store import CellStore
from .toolchain import Toolchain, ToolchainUnavailable, ToolResult

logger = logging.getLogger(__name__)

_PERSIST_HINT = "Make sure the directory exists and you have permission to write there"


class Phase(enum.Enum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    ASSEMBLING = "assembling"
    EXECUTING = "executing"
    EXTRACTING = "extracting"
    FAILED = "failed"


@dataclass
class Reply:
    body: bytes
    ok: bool = True
    persisted: bool = False  # program file was written; a reformat may follow


class Session:
    """Cell state of one editor connection and the submit flow around it.

    Callers submit one cell at a time and wait for the reply; nothing here
    locks.
    """

    def __init__(self, toolchain: Toolchain, program_path: Union[str, Path]) -> None:
        self.toolchain = toolchain
        self.program_path = Path(program_path)
        self.store = CellStore()
        self.document_id: Optional[str] = None
        self.phase = Phase.IDLE

    def submit_payload(self, data: Union[bytes, str]) -> Reply:
        return self.submit(Cell.from_payload(data))

    def submit(self, cell: Cell) -> Reply:
        self._switch_document(cell.owner_file)

        self._set_phase(Phase.CLASSIFYING)
        issue = check_cell(cell)
        if issue is not None:
            self._set_phase(Phase.IDLE)
            return Reply(issue.message.encode("utf-8"), ok=False)

        self._set_phase(Phase.ASSEMBLING)
        self.store.clear_executing()
        cell.executing = True
        self.store.put(cell)
        program = assemble(self.store, cell.fragment)

        try:
            self.program_path.write_text(program, encoding="utf-8")
        except UnicodeError as e:
            # Drop the text so it is not re-assembled into every later program.
            self.store.clear_content(cell.fragment)
            self._set_phase(Phase.IDLE)
            msg = f"{REJECT_PREFIX}cell is not valid UTF-8: {e}"
            return Reply(msg.encode("utf-8"), ok=False)
        except OSError as e:
            self._set_phase(Phase.IDLE)
            msg = f"{REJECT_PREFIX}{e}\n{_PERSIST_HINT}"
            return Reply(msg.encode("utf-8"), ok=False)

        self._set_phase(Phase.EXECUTING)
        try:
            res = self.execute()
        except ToolchainUnavailable as e:
            # Not the cell's fault: keep its content for the next attempt.
            logger.error("Toolchain unavailable: %s", e)
            return self._failed(str(e).encode("utf-8"), persisted=False)
        if not res.ok:
            self.store.clear_content(cell.fragment)
            return self._failed(_failure_body(res))

        self._set_phase(Phase.EXTRACTING)
        out, found = extract(res.output)
        if not found:
            logger.debug("No marked output for fragment %d", cell.fragment)
        self._set_phase(Phase.IDLE)
        return Reply(out, ok=True, persisted=True)

    def execute(self) -> ToolResult:
        """Fix imports of the persisted program, then run it."""
        res = self.toolchain.fix_imports(self.program_path)
        if not res.ok:
            return res
        return self.toolchain.run(self.program_path)

    def reformat(self) -> None:
        """Run ``go fmt`` on the program file; failures are only logged."""
        try:
            res = self.toolchain.format(self.program_path)
        except ToolchainUnavailable as e:
            logger.error("Reformat skipped: %s", e)
            return
        if not res.ok:
            logger.error(
                "Reformat of %s failed: %s",
                self.program_path,
                res.output.decode("utf-8", "replace").strip(),
            )

    def _switch_document(self, document_id: str) -> None:
        # Cells without a document id belong to whatever document was last seen.
        if not document_id:
            return
        if self.document_id and document_id != self.document_id:
            logger.info("New document %r detected, resetting cells", document_id)
            self.store.reset()
        self.document_id = document_id

    def _set_phase(self, phase: Phase) -> None:
        logger.debug("%s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def _failed(self, body: bytes, persisted: bool = True) -> Reply:
        self._set_phase(Phase.FAILED)
        self._set_phase(Phase.IDLE)
        return Reply(body, ok=False, persisted=persisted)


def _failure_body(res: ToolResult) -> bytes:
    status = f"exit status {res.returncode}\n".encode("utf-8")
    return status + res.output
