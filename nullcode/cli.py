#!/usr/bin/env python3
"""
nullcode command line.

Runs the completion post-processor outside an editor, against a file on
disk and an explicit cursor position.

Usage:
    nullcode format app.py --line 12 --column 8 --completion "calculate_sum(a, b):"
    nullcode context app.py --line 12
    nullcode complete app.py --line 12 --column 8 --config config.yaml
    nullcode --help
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

from loguru import logger

from . import __version__
from .modules.completion_client import CompletionClient
from .modules.config import ConfigError, Settings, load_settings
from .modules.context.document import TextDocument
from .modules.post_processor import CompletionPostProcessor
from .modules.schemas import CompletionResult, CursorPosition


_CONSOLE_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Send logs to stderr so stdout carries only JSON results."""
    logger.remove()
    logger.add(sys.stderr, format=_CONSOLE_FORMAT, level="DEBUG" if verbose else "INFO", colorize=True)

    if log_file:
        # Full debug trace of rule and strategy hits, independent of --verbose
        logger.add(log_file, format=_FILE_FORMAT, level="DEBUG", rotation="10 MB", retention="7 days")


def _bind(settings: Settings, args: argparse.Namespace):
    document = TextDocument.from_path(args.file, language_id=args.language)
    cursor = CursorPosition(line=args.line, column=args.column)
    processor = CompletionPostProcessor.from_settings(settings)
    processor.context_manager.on_active_editor_changed(document, cursor)
    return document, cursor, processor


def _print_result(result: Optional[CompletionResult]) -> None:
    if result is None:
        print(json.dumps({"discarded": True}))
        return
    print(json.dumps(result.model_dump(mode="json"), indent=2))


def run_format(settings: Settings, args: argparse.Namespace) -> int:
    document, cursor, processor = _bind(settings, args)
    completion = args.completion if args.completion is not None else sys.stdin.read()
    result = processor.process(
        document,
        cursor,
        completion,
        language_id=document.language_id,
        indent_settings=settings.formatting.indent,
    )
    _print_result(result)
    return 0


def run_context(settings: Settings, args: argparse.Namespace) -> int:
    _document, _cursor, processor = _bind(settings, args)
    bundle = processor.build_context()
    print(json.dumps(bundle.to_dict(), indent=2))
    return 0


def run_complete(settings: Settings, args: argparse.Namespace) -> int:
    document, cursor, processor = _bind(settings, args)
    client = CompletionClient(settings.provider)
    result = asyncio.run(
        processor.complete(
            document,
            cursor,
            client,
            language_id=document.language_id,
            indent_settings=settings.formatting.indent,
        )
    )
    _print_result(result)
    return 0 if result is not None and not result.is_empty else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nullcode",
        description="Completion post-processing and context assembly for code suggestions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  API_KEY            - Provider API key (overrides per-provider keys)
  PROVIDER           - openai | anthropic
  MODEL_NAME         - Model to request completions from
  OPENAI_API_KEY     - Fallback key for the openai provider
  ANTHROPIC_API_KEY  - Fallback key for the anthropic provider
""",
    )

    parser.add_argument(
        "--config", "-c", type=str, default="config.yaml", help="Path to configuration file (default: config.yaml)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose/debug output")
    parser.add_argument("--log-file", type=str, help="Path to log file (optional)")
    parser.add_argument("--version", action="version", version=f"nullcode v{__version__}")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def _document_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("file", type=str, help="Source file to read")
        sub.add_argument("--line", "-l", type=int, required=True, help="Cursor line (0-indexed)")
        sub.add_argument("--column", type=int, default=0, help="Cursor column (0-indexed)")
        sub.add_argument("--language", type=str, help="Language id (default: inferred from extension)")

    format_parser = subparsers.add_parser("format", help="De-duplicate and place a completion")
    _document_args(format_parser)
    format_parser.add_argument("--completion", type=str, help="Raw completion text (default: read stdin)")

    context_parser = subparsers.add_parser("context", help="Print the context bundle for a cursor")
    _document_args(context_parser)

    complete_parser = subparsers.add_parser("complete", help="Request a completion from the model")
    _document_args(complete_parser)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.log_file)

    if not args.command:
        parser.print_help()
        return 2

    handlers = {
        "format": run_format,
        "context": run_context,
        "complete": run_complete,
    }

    try:
        settings = load_settings(args.config)
        return handlers[args.command](settings, args)
    except KeyboardInterrupt:
        logger.info("\nInterrupted by user")
        return 130
    except ConfigError as e:
        logger.error(str(e))
        return 2
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
