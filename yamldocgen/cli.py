"""CLI entrypoints for yamldocgen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import SUPPORTED_FORMATS
from .errors import GenerationError
from .generator import GenerateRequest, Generator
from .logging import configure_logging


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--path",
        required=True,
        help="Root path of the Go package to generate documentation from.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yamldocgen",
        description="Generate YAML configuration documentation from annotated Go structs.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write a DEBUG-level log of the run to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate documentation for a struct and every type it references.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_path_option(generate_parser)
    generate_parser.add_argument(
        "--structure",
        required=True,
        help="Name of the root struct to generate documentation from.",
    )
    generate_parser.add_argument(
        "--output",
        default=None,
        help="File to write the generated documentation to.",
    )
    generate_parser.add_argument(
        "--package",
        default=None,
        help="Package name for the generated Go code (defaults to main).",
    )
    generate_parser.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        default=None,
        help="Output format (defaults to go).",
    )

    types_parser = subparsers.add_parser(
        "types",
        help="List the struct types that can be documented in a package.",
    )
    _add_verbose_option(types_parser, suppress_default=True)
    _add_path_option(types_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for yamldocgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    generator = Generator()

    if args.command == "generate":
        request = GenerateRequest(
            path=Path(args.path),
            structure=args.structure,
            output=Path(args.output) if args.output else None,
            package=args.package,
            format=args.format,
        )
        try:
            result = generator.run(request)
        except GenerationError as exc:
            parser.exit(1, f"FAIL: {exc}\n")
        print(f"Documentation for {len(result.document.structs)} types written to {_relativize(result.path)}")
    elif args.command == "types":
        try:
            names = generator.list_types(Path(args.path))
        except GenerationError as exc:
            parser.exit(1, f"FAIL: {exc}\n")
        for name in names:
            print(name)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
