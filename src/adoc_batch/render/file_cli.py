"""CLI entry point for rendering a single document."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from adoc_batch.core.config import TomlConfigError, parse_assignment

from .engine import build_asciidoc_engine
from .errors import DependencyError, RenderError
from .options import DEFAULT_BACKEND, RenderOptions, SafeMode
from .renderer import render_document


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adoc-batch render-file",
        description=(
            "Render one AsciiDoc document. Output is printed unless "
            "--in-place or --to-file is given."
        ),
    )
    parser.add_argument(
        "input",
        help="Document to render, or '-' to read from stdin.",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument(
        "--in-place",
        action="store_true",
        help="Write the output next to the input file.",
    )
    target.add_argument(
        "--to-file",
        type=Path,
        help="Output file, or an existing directory to write into.",
    )
    parser.add_argument(
        "-b",
        "--backend",
        default=DEFAULT_BACKEND,
        help="Output backend (defaults to html5).",
    )
    parser.add_argument(
        "-a",
        "--attribute",
        dest="attributes",
        action="append",
        metavar="NAME=VALUE",
        help="Document attribute (repeatable).",
    )
    header = parser.add_mutually_exclusive_group()
    header.add_argument(
        "--header-footer",
        dest="header_footer",
        action="store_true",
        default=None,
        help="Render a full standalone document.",
    )
    header.add_argument(
        "--no-header-footer",
        dest="header_footer",
        action="store_false",
        help="Render only the embeddable document body.",
    )
    parser.add_argument(
        "--safe-mode",
        choices=[member.name.lower() for member in SafeMode],
        default="secure",
        help="Engine safe mode (defaults to secure).",
    )
    parser.add_argument(
        "--base-dir",
        type=Path,
        help="Directory relative includes resolve from.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.input == "-" and args.in_place:
        parser.error("--in-place requires an input file.")

    try:
        attributes = dict(
            parse_assignment(value) for value in args.attributes or ()
        )
    except TomlConfigError as exc:
        parser.error(str(exc))

    source: object
    if args.input == "-":
        source = sys.stdin
    else:
        source = Path(args.input)
        if not source.is_file():
            parser.error(f"Input file not found: {source}")

    options = RenderOptions(
        attributes=attributes,
        header_footer=args.header_footer,
        in_place=args.in_place,
        to_file=args.to_file,
        backend=args.backend,
        safe=SafeMode.from_value(args.safe_mode),
        base_dir=args.base_dir,
    )

    try:
        engine = build_asciidoc_engine()
        result = render_document(source, options, engine=engine)
    except DependencyError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1
    except (RenderError, OSError) as exc:
        sys.stderr.write(f"Rendering failed: {exc}\n")
        return 1

    if result is not None:
        sys.stdout.write(result)
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
