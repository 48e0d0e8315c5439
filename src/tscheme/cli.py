"""tscheme command-line interface."""

from __future__ import annotations

import argparse
import logging
import logging.config
import sys
from pathlib import Path
from typing import Any, Sequence

from .compiler.dsl.parser import parse_exp_text, parse_program
from .compiler.dsl.result import Failure, bind
from .compiler.dsl import ir_types as irT
from .compiler.passes import Context, PassManager
from .compiler.passes.analyses import AstPrinterPass, PrintedAST
from .compiler.typecheck import typeof_exp

logger = logging.getLogger("tscheme")

_LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(levelname)s | %(name)s | %(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
            "formatter": "standard",
        }
    },
    "loggers": {
        "tscheme": {
            "level": "INFO",
            "handlers": ["console"],
            "propagate": False,
        }
    },
}


def configure_logging(verbose: bool = False) -> None:
    config = dict(_LOGGING_CONFIG)
    config["loggers"] = {"tscheme": {**_LOGGING_CONFIG["loggers"]["tscheme"], "level": "DEBUG" if verbose else "INFO"}}
    logging.config.dictConfig(config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tscheme", description="Type check fully annotated Scheme programs")
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="Program file to check (reads stdin when omitted).",
    )
    parser.add_argument(
        "-e",
        "--expr",
        help="Type a single expression instead of a program.",
    )
    parser.add_argument(
        "--ast",
        action="store_true",
        help="Print the parsed tree before checking.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    configure_logging(args.verbose)

    if args.expr is not None:
        parsed = parse_exp_text(args.expr)
    else:
        try:
            text = args.file.read_text(encoding="utf-8") if args.file else sys.stdin.read()
        except OSError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        parsed = parse_program(text)

    if args.ast and not isinstance(parsed, Failure):
        ctx = PassManager(AstPrinterPass(), verbose=args.verbose).run(parsed.value, Context())
        print(ctx.get(PrintedAST).text)

    result = bind(parsed, lambda node:
             bind(typeof_exp(node, verbose=args.verbose), irT.unparse_texp))
    if isinstance(result, Failure):
        logger.debug("type checking failed")
        print(result.message, file=sys.stderr)
        return 1
    print(result.value)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
