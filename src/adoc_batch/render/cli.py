"""CLI entry point for batch rendering a source tree."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from adoc_batch.core import config_templates
from adoc_batch.core import workspace as workspace_mod
from adoc_batch.core.config import TomlConfigError, parse_assignment
from adoc_batch.core.config_templates import ConfigTemplateError
from adoc_batch.core.logging import close_logger, configure_logger
from adoc_batch.core.workspace import WorkspaceError

from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    RenderConfigError,
    load_config,
)
from .dispatcher import BatchSummary, run_batch
from .engine import build_asciidoc_engine
from .errors import DependencyError, RenderError
from .options import SafeMode

LOGGER_NAME = "adoc_batch.render"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adoc-batch render",
        description=(
            "Render every AsciiDoc file (.adoc, .asciidoc, .ad, .asc) under a "
            "source directory into an output directory."
        ),
        epilog=(
            "Run `adoc-batch render config init` to scaffold the default "
            "render.toml template."
        ),
    )
    parser.add_argument(
        "source_dir",
        nargs="?",
        type=Path,
        help="Directory to walk for AsciiDoc sources.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=(
            "Path to a TOML config file (defaults to the workspace config "
            "directory)."
        ),
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root used for config, logs and output.",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        help="Directory receiving the rendered files.",
    )
    parser.add_argument(
        "-b",
        "--backend",
        dest="backends",
        action="append",
        help="Output backend (repeatable, e.g. -b html5 -b docbook).",
    )
    parser.add_argument(
        "-a",
        "--attribute",
        dest="attributes",
        action="append",
        metavar="NAME=VALUE",
        help="Document attribute passed to every render (repeatable).",
    )
    parser.add_argument(
        "--safe-mode",
        choices=[member.name.lower() for member in SafeMode],
        help="Engine safe mode (defaults to unsafe).",
    )
    parser.add_argument(
        "--sources",
        nargs="+",
        metavar="PATTERN",
        help="Only render files matching these globs (relative paths).",
    )
    parser.add_argument(
        "-l",
        "--language",
        dest="languages",
        action="append",
        help=(
            "Render SOURCE_DIR/<language> into OUTPUT_DIR/<language> "
            "(repeatable)."
        ),
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue after a document fails instead of stopping.",
    )
    parser.add_argument(
        "--log-documents",
        action="store_true",
        help="Print each document name as it is rendered.",
    )
    parser.add_argument(
        "--log-level",
        help="Set the logging level for the run (defaults to INFO).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Mirror log output to stderr.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args_list = list(argv) if argv is not None else list(sys.argv[1:])

    if args_list[:1] == ["config"]:
        return _handle_config(args_list[1:])

    parser = _build_parser()
    args = parser.parse_args(args_list)

    try:
        overrides = ConfigOverrides(
            source_dir=args.source_dir,
            output_dir=args.output_dir,
            backends=args.backends,
            attributes=_parse_attributes(args.attributes),
            safe_mode=(
                SafeMode.from_value(args.safe_mode) if args.safe_mode else None
            ),
            sources=args.sources,
            languages=args.languages,
            fail_fast=False if args.keep_going else None,
            log_documents=True if args.log_documents else None,
            log_level=args.log_level,
        )
        load_result = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except (RenderConfigError, TomlConfigError) as exc:
        parser.error(str(exc))

    try:
        engine = build_asciidoc_engine()
    except DependencyError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    config = load_result.config
    logger, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=load_result.layout.path_for("logs"),
        level=config.log_level,
        verbose=args.verbose,
    )
    logger.debug("render CLI invoked")

    try:
        summary = run_batch(
            config,
            engine=engine,
            logger=logger,
            echo=_echo,
        )
    except (RenderError, OSError) as exc:
        sys.stderr.write(f"Rendering failed: {exc}\n")
        sys.stderr.write(f"See {log_path} for details.\n")
        return 1
    finally:
        close_logger(logger)

    _print_summary(summary, log_path, config.output_dir)
    return summary.exit_code


def _parse_attributes(values: Sequence[str] | None) -> dict[str, str] | None:
    if not values:
        return None
    return dict(parse_assignment(value) for value in values)


def _echo(text: str) -> None:
    sys.stdout.write(text.rstrip("\n") + "\n")


def _print_summary(
    summary: BatchSummary, log_path: Path, output_dir: Path
) -> None:
    lines = [
        "render summary:",
        "  rendered:  {0}".format(summary.rendered_count),
        "  skipped:   {0}".format(summary.skipped_count),
        "  failed:    {0}".format(summary.failure_count),
        "  resources: {0}".format(len(summary.resources)),
        "  output dir: {0}".format(output_dir),
        "  log file:   {0}".format(log_path),
    ]
    sys.stdout.write("\n".join(lines) + "\n")


def _handle_config(argv: Sequence[str]) -> int:
    parser = _build_config_parser()
    args = parser.parse_args(argv)

    try:
        target = _resolve_config_target(args)
    except WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    template = config_templates.get_template("render")
    try:
        written = template.write(target, overwrite=args.force)
    except ConfigTemplateError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote render config to {written}\n")
    return 0


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adoc-batch render config",
        description="Manage configuration files for batch rendering.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help="Write the default render.toml template.",
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Destination for the config TOML (defaults to the workspace "
            "config directory)."
        ),
    )
    init_parser.add_argument(
        "--workspace",
        type=Path,
        help="Workspace root used when resolving the default config path.",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if a config already exists.",
    )
    return parser


def _resolve_config_target(args: argparse.Namespace) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate

    layout = workspace_mod.ensure_workspace(path=args.workspace)
    return layout.path_for("config") / CONFIG_FILENAME


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
