from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config import ToolchainConfig

logger = logging.getLogger(__name__)


class ToolchainUnavailable(RuntimeError):
    """The Go environment itself is broken (missing binaries, bad GOPATH)."""


@dataclass
class ToolResult:
    output: bytes  # stdout and stderr, interleaved as written
    returncode: int
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out


class Toolchain:
    """Operations the session needs on the persisted program file.

    Implementations raise ToolchainUnavailable for environment problems and
    report source problems through a non-zero ToolResult.
    """

    def fix_imports(self, path: Path) -> ToolResult:
        raise NotImplementedError

    def run(self, path: Path) -> ToolResult:
        raise NotImplementedError

    def format(self, path: Path) -> ToolResult:
        raise NotImplementedError


class GoToolchain(Toolchain):
    def __init__(
        self,
        go: str = "go",
        gopls: Optional[str] = None,
        run_timeout: Optional[int] = None,
    ) -> None:
        self.go = go
        self.run_timeout = run_timeout
        self._gopls = gopls

    @classmethod
    def from_config(cls, cfg: ToolchainConfig) -> "GoToolchain":
        return cls(go=cfg.go, gopls=cfg.gopls, run_timeout=cfg.run_timeout)

    def gopls(self) -> str:
        if self._gopls:
            return self._gopls
        found = shutil.which("gopls")
        if not found:
            res = self._call([self.go, "env", "GOPATH"])
            if not res.ok:
                raise ToolchainUnavailable(res.output.decode("utf-8", "replace").strip())
            gopath = res.output.decode("utf-8", "replace").strip().split(os.pathsep)[0]
            candidate = Path(gopath) / "bin" / "gopls"
            if not candidate.exists():
                raise ToolchainUnavailable(
                    f"gopls not found on PATH or in {candidate.parent}; "
                    "install it with: go install golang.org/x/tools/gopls@latest"
                )
            found = str(candidate)
        self._gopls = found
        return found

    def fix_imports(self, path: Path) -> ToolResult:
        return self._call([self.gopls(), "imports", "-w", str(path)])

    def run(self, path: Path) -> ToolResult:
        return self._call([self.go, "run", str(path)], timeout=self.run_timeout)

    def format(self, path: Path) -> ToolResult:
        return self._call([self.go, "fmt", str(path)])

    def _call(self, argv: List[str], timeout: Optional[int] = None) -> ToolResult:
        logger.debug("Running %s", " ".join(argv))
        try:
            proc = subprocess.run(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            partial = e.output or b""
            note = f"\nexecution timed out after {timeout}s\n".encode("utf-8")
            return ToolResult(output=partial + note, returncode=-1, timed_out=True)
        except OSError as e:
            raise ToolchainUnavailable(f"{argv[0]}: {e}") from e
        return ToolResult(output=proc.stdout or b"", returncode=proc.returncode)
