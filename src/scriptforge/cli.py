"""Command line interface for sectioned screenplay generation."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv

from .config import ConfigurationError, ScriptForgeConfig, ServiceConfig
from .io import load_brief
from .llm.providers import build_backend
from .llm.usage import UsageTracker
from .screenplay import (
    SECTION_SPECS,
    DocumentAssemblyError,
    GenerationOrchestrator,
    RetryPolicy,
    ScriptExporter,
    SectionEvent,
    SectionGenerator,
    SectionStatus,
    classify_script,
)

__all__ = ["main"]

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scriptforge",
        description="Generate a five-section screenplay from a short brief.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default="WARNING",
        choices=LOG_LEVELS,
        help="Logging verbosity.",
    )
    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser(
        "generate",
        help="Run all five sections and export the screenplay.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        allow_abbrev=False,
    )
    _register_generate_arguments(generate)

    classify = subparsers.add_parser(
        "classify",
        help="Show how a raw screenplay text file is laid out.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        allow_abbrev=False,
    )
    classify.add_argument("--input", required=True, help="Path to a plain-text screenplay section.")
    return parser


def _register_generate_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--brief",
        required=True,
        help="Path to the brief (.json or .toml).",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Directory where the screenplay and run.json are written.",
    )
    parser.add_argument(
        "--provider",
        default=None,
        help="Generation backend (gemini, openai, mock). Defaults to SCRIPTFORGE_PROVIDER or gemini.",
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Model identifier for the selected backend.",
    )
    parser.add_argument(
        "--base-url",
        dest="base_url",
        default=None,
        help="Optional base URL for the generation service.",
    )
    parser.add_argument(
        "--retry-failed",
        dest="retry_failed",
        type=_non_negative_int,
        default=0,
        help="How many extra passes to make over sections that ended in error.",
    )
    parser.add_argument(
        "--no-docx",
        dest="no_docx",
        action="store_true",
        help="Skip the Word document export.",
    )


def _non_negative_int(token: str) -> int:
    try:
        value = int(token)
    except ValueError as exc:  # pragma: no cover - argparse formatting
        raise argparse.ArgumentTypeError(f"Invalid integer value: {token}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError("Value must not be negative")
    return value


def _build_config(args: argparse.Namespace) -> ScriptForgeConfig:
    service = ServiceConfig()
    if args.provider:
        service.provider = args.provider
    if args.model:
        service.model = args.model
    if args.base_url:
        service.base_url = args.base_url
    config = ScriptForgeConfig(service=service)
    if args.output:
        config = config.with_output(Path(args.output))
    return config


def _print_event(event: SectionEvent) -> None:
    line = f"[section {event.ordinal}] {event.previous_status.value} -> {event.status.value}"
    if event.error:
        line += f" ({event.error})"
    print(line, file=sys.stderr)


def _run_generate(args: argparse.Namespace) -> int:
    brief = load_brief(args.brief)
    config = _build_config(args)
    credentials = config.resolve_credentials(len(SECTION_SPECS))
    generator = SectionGenerator(
        build_backend(config.service),
        credentials=credentials,
        retry_policy=RetryPolicy.from_config(config.retry),
        usage=UsageTracker(),
    )
    orchestrator = GenerationOrchestrator(generator, listeners=[_print_event])

    sections = orchestrator.run(brief)
    for _ in range(args.retry_failed):
        if all(section.status is SectionStatus.COMPLETED for section in sections):
            break
        sections = orchestrator.retry_failed()

    exporter = ScriptExporter(config.output_path)
    artefacts = {"text": str(exporter.write_text(brief, sections))}
    if not args.no_docx:
        artefacts["docx"] = str(exporter.write_docx(brief, sections))
    exporter.write_run_summary(brief, sections, usage=orchestrator.usage, artefacts=artefacts)

    for section in sections:
        print(f"{section.ordinal}. {section.title} (pages {section.page_range.label}): {section.status.value}")
    for kind, path in artefacts.items():
        print(f"{kind}: {path}")
    return 0 if all(section.status is SectionStatus.COMPLETED for section in sections) else 1


def _run_classify(args: argparse.Namespace) -> int:
    source = Path(args.input).expanduser()
    if not source.exists():
        raise FileNotFoundError(f"Input file not found: {source}")
    for block in classify_script(source.read_text(encoding="utf-8")):
        print(f"{block.kind.value:<14} {block.text}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    # Credentials may live in a local .env; real environment variables win.
    load_dotenv(override=False)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    runner = _run_classify if args.command == "classify" else _run_generate
    try:
        return runner(args)
    except (FileNotFoundError, ValueError, ConfigurationError, DocumentAssemblyError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
