from __future__ import annotations

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 5250
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _default_program_path() -> str:
    return str(Path(tempfile.gettempdir()) / "main.go")


@dataclass
class ToolchainConfig:
    go: str = "go"
    gopls: Optional[str] = None
    run_timeout: Optional[int] = None
    format: bool = True


@dataclass
class KernelConfig:
    """Kernel settings, read from an optional YAML file.

    Example::

        host: 127.0.0.1
        port: 5250
        program_path: /tmp/main.go
        log_level: INFO
        toolchain:
          go: go
          gopls: ~/go/bin/gopls
          run_timeout: 30
          format: true
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    program_path: str = field(default_factory=_default_program_path)
    log_level: str = "INFO"
    toolchain: ToolchainConfig = field(default_factory=ToolchainConfig)


def _opt_int(value: object, key: str) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValueError(f"config: {key} must be an integer, got {value!r}")


def config_from_mapping(data: dict) -> KernelConfig:
    cfg = KernelConfig()
    if "host" in data:
        cfg.host = str(data["host"])
    if "port" in data:
        cfg.port = _opt_int(data["port"], "port") or DEFAULT_PORT
    if data.get("program_path"):
        cfg.program_path = str(Path(str(data["program_path"])).expanduser())
    if data.get("log_level"):
        cfg.log_level = str(data["log_level"]).upper()
        if cfg.log_level not in _LOG_LEVELS:
            raise ValueError(f"config: unknown log_level {data['log_level']!r}")

    tc = data.get("toolchain", {}) or {}
    if not isinstance(tc, dict):
        raise ValueError("config: toolchain must be a mapping")
    if tc.get("go"):
        cfg.toolchain.go = str(tc["go"])
    if tc.get("gopls"):
        cfg.toolchain.gopls = str(Path(str(tc["gopls"])).expanduser())
    cfg.toolchain.run_timeout = _opt_int(tc.get("run_timeout"), "toolchain.run_timeout")
    if "format" in tc:
        cfg.toolchain.format = bool(tc["format"])
    return cfg


def load_config(path: Optional[str] = None) -> KernelConfig:
    if not path:
        return KernelConfig()
    p = Path(path)
    try:
        yaml = YAML(typ="safe")
        data = yaml.load(p.read_text(encoding="utf-8"))
    except (OSError, YAMLError) as e:
        raise ValueError(f"config: cannot read {p}: {e}") from e
    if data is None:
        return KernelConfig()
    if not isinstance(data, dict):
        raise ValueError(f"config: {p} must contain a mapping")
    return config_from_mapping(data)
