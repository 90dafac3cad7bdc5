from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import nbformat

from .config import KernelConfig, load_config
from .runner import assemble_notebook, run_file
from .server import serve
from .session import Session
from .toolchain import GoToolchain

_LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def _cmd_serve(cfg: KernelConfig) -> int:
    session = Session(GoToolchain.from_config(cfg.toolchain), cfg.program_path)
    print("ctrl + click to view generated go code:", cfg.program_path)
    serve(
        session,
        cfg.host,
        cfg.port,
        reformat=cfg.toolchain.format,
        log_level=cfg.log_level,
    )
    return 0


def _cmd_run(path: Path, cfg: KernelConfig, output: str | None) -> int:
    return run_file(str(path), config=cfg, output=output)


def _cmd_assemble(path: Path) -> int:
    nb = nbformat.read(str(path), as_version=4)
    print(assemble_notebook(nb, str(path.resolve())), end="")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="gobook", description="Go notebook kernel")
    parser.add_argument("--config", help="YAML config file")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_serve = sub.add_parser("serve", help="Serve cell submissions over HTTP")
    p_serve.add_argument("--host")
    p_serve.add_argument("--port", type=int)
    p_serve.add_argument("--program", help="Where the generated main.go is written")

    p_run = sub.add_parser("run", help="Execute the Go cells of an .ipynb notebook")
    p_run.add_argument("file")
    p_run.add_argument("-o", "--output", help="Write the executed notebook here")
    p_run.add_argument("--program", help="Where the generated main.go is written")

    p_asm = sub.add_parser("assemble", help="Print the program a notebook assembles to")
    p_asm.add_argument("file")

    args = parser.parse_args(argv)
    try:
        cfg = load_config(args.config)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    if getattr(args, "host", None):
        cfg.host = args.host
    if getattr(args, "port", None):
        cfg.port = args.port
    if getattr(args, "program", None):
        cfg.program_path = args.program

    logging.basicConfig(level=cfg.log_level, format=_LOG_FORMAT)

    if args.cmd == "serve":
        return _cmd_serve(cfg)
    if args.cmd == "run":
        return _cmd_run(Path(args.file), cfg, args.output)
    if args.cmd == "assemble":
        return _cmd_assemble(Path(args.file))
    return 2


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
