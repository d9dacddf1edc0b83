"""Command line interface for pseudoconv."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pydantic import ValidationError
from pygments.lexers import PythonLexer

from ..core.config import get_settings
from ..core.errors import format_source_context
from ..core.logging import get_logger, setup_logging
from ..parser.parser import SyntaxParser
from .converter import PseudoCodeConverter
from .models import ConversionOptions, ConversionResult

logger = get_logger(__name__)


def _indent_size(value: str) -> int:
    try:
        size = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid indent size: {value!r}") from None
    if size < 0:
        raise argparse.ArgumentTypeError(f"indent size must not be negative: {size}")
    return size


def _build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Convert exam pseudo-code into Python."
    )
    parser.add_argument(
        "source",
        help="Path to the pseudo-code file to convert ('-' reads standard input).",
    )
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        help="Optional destination for the generated Python (defaults to standard output).",
    )
    parser.add_argument(
        "--method",
        choices=["pattern", "tree", "hybrid"],
        default=settings.DEFAULT_METHOD,
        help=f"Conversion strategy (default: {settings.DEFAULT_METHOD}).",
    )
    parser.add_argument(
        "--indent-size",
        type=_indent_size,
        default=settings.INDENT_SIZE,
        help=f"Spaces per indentation level (default: {settings.INDENT_SIZE}).",
    )
    parser.add_argument(
        "--comments",
        action="store_true",
        default=settings.INCLUDE_COMMENTS,
        help="Emit header comments, procedure docstrings and error placeholders.",
    )
    parser.add_argument(
        "--steps",
        action="store_true",
        help="Print the conversion steps to standard error.",
    )
    parser.add_argument(
        "--no-validate",
        dest="validate_output",
        action="store_false",
        default=settings.VALIDATE_OUTPUT,
        help="Skip the post-conversion consistency check.",
    )
    parser.add_argument(
        "--nest-blocks",
        action="store_true",
        default=settings.NEST_BLOCKS,
        help="Use indentation to nest statements inside if/loop/procedure bodies.",
    )
    parser.add_argument(
        "--ast",
        action="store_true",
        help="Print the parsed program tree as JSON instead of Python code.",
    )
    parser.add_argument(
        "--highlight",
        action="store_true",
        help="Syntax-highlight Python written to the terminal.",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Allow overwriting an existing output file.",
    )
    parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Encoding to use when reading and writing files (default: utf-8).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress informational output and warnings.",
    )
    return parser


def read_source(source: str, encoding: str = "utf-8") -> str:
    """Read pseudo-code from a path, or from standard input for ``-``."""
    if source == "-":
        return sys.stdin.read()

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Pseudo-code source file not found: {path}")
    return path.read_text(encoding=encoding)


def write_output(code: str, output_path: Path, *, overwrite: bool = False, encoding: str = "utf-8") -> Path:
    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Refusing to overwrite existing file: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(code + "\n", encoding=encoding)
    return output_path


def _report(result: ConversionResult, source: str, quiet: bool) -> None:
    for error in result.errors:
        print(f"Error: line {error.line}: {error.message}", file=sys.stderr)
        context = format_source_context(source, error.line)
        if context:
            print(context, file=sys.stderr)

    if quiet:
        return
    for warning in result.warnings:
        print(f"Warning ({warning.type}): line {warning.line}: {warning.message}", file=sys.stderr)


def _print_steps(result: ConversionResult) -> None:
    for step in result.steps:
        print(f"--- step {step.step_number}: {step.rule_applied} ({step.description})", file=sys.stderr)
        print(step.output_text, file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging()

    try:
        source = read_source(args.source, encoding=args.encoding)
    except (FileNotFoundError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        options = ConversionOptions(
            method=args.method,
            include_comments=args.comments,
            indent_size=args.indent_size,
            include_debug_info=args.steps,
            validate_output=args.validate_output,
            nest_blocks=args.nest_blocks,
        )
    except ValidationError as exc:
        # Defaults from the environment bypass argparse checks
        print(f"Error: invalid options: {exc}", file=sys.stderr)
        return 1

    result = PseudoCodeConverter().convert(source, options)
    logger.info(
        f"Converted {args.source} with method={result.metadata.method} "
        f"in {result.metadata.conversion_time:.1f} ms"
    )

    if args.steps:
        _print_steps(result)

    if args.ast:
        program = result.metadata.ast or SyntaxParser(nest_blocks=args.nest_blocks).parse(source)
        print(SyntaxParser.print_ast(program))
    elif args.output is not None:
        try:
            written_path = write_output(
                result.code, args.output, overwrite=args.overwrite, encoding=args.encoding
            )
        except (FileExistsError, OSError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        if not args.quiet:
            print(f"Wrote {written_path}", file=sys.stderr)
    elif args.highlight:
        sys.stdout.write(highlight(result.code, PythonLexer(), TerminalFormatter()))
    else:
        print(result.code)

    _report(result, source, args.quiet)
    return 0 if result.success else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
