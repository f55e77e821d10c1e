"""Command-line entry point: print the Python that would be selected."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import PySelectConfig
from .runtime import PythonSelectionError, RuntimeResolver

MINICONDA_DEFAULT = "__default__"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pyselect",
        description="Resolve which Python installation to use",
    )
    parser.add_argument("--python", help="Path to a Python binary")
    parser.add_argument("--virtualenv", help="Virtualenv directory or name")
    parser.add_argument("--condaenv", help="Conda environment name or path")
    parser.add_argument("--conda", default="auto", help="Conda executable (default: auto)")
    parser.add_argument(
        "--miniconda",
        nargs="?",
        const=MINICONDA_DEFAULT,
        metavar="ENV",
        help="Use an environment from the managed Miniconda installation",
    )
    parser.add_argument(
        "--required",
        action="store_true",
        help="Fail instead of falling back when a hint cannot be used",
    )
    parser.add_argument(
        "--project",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "--no-config",
        action="store_true",
        help="Ignore .pyselect.toml, .env and PYSELECT_* variables",
    )
    parser.add_argument("--hints", action="store_true", help="Also list registered hints")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def run(args: argparse.Namespace) -> int:
    if args.no_config:
        resolver = RuntimeResolver(args.project, config=PySelectConfig(project_root=args.project))
    else:
        resolver = RuntimeResolver.from_project(args.project)
        resolver.apply_config()

    if args.python:
        resolver.use_python(args.python, required=args.required)
    if args.virtualenv:
        resolver.use_virtualenv(args.virtualenv, required=args.required)
    if args.condaenv:
        resolver.use_condaenv(args.condaenv, conda=args.conda, required=args.required)
    if args.miniconda:
        env = None if args.miniconda == MINICONDA_DEFAULT else args.miniconda
        resolver.use_miniconda(env, required=args.required)

    runtime = resolver.resolve_runtime()

    print(runtime.path)
    if args.verbose:
        print(f"  source:  {runtime.source}")
        print(f"  version: {runtime.version or 'unknown'}")
        if runtime.is_symlink:
            print(f"  target:  {runtime.real_path}")

    if args.hints:
        required = resolver.registry.get_required()
        print(f"required: {required or '-'}")
        for hint in resolver.registry.get_hints():
            print(f"hint:     {hint}")

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return run(args)
    except PythonSelectionError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
