"""gotoscript entrypoint module exposing the public API and CLI."""

import argparse
import logging
import sys

from gotoscript_lang import (
    GOTOSCRIPT_GRAMMAR,
    ChunkInvariantError,
    ChunkManager,
    CompileOptions,
    ConfigError,
    Emitter,
    GotoscriptError,
    ScriptParser,
    ScriptSyntaxError,
    compile_source,
    load_options,
    parse_source,
)

__all__ = [
    "GOTOSCRIPT_GRAMMAR",
    "GotoscriptError",
    "ScriptSyntaxError",
    "ConfigError",
    "ChunkInvariantError",
    "CompileOptions",
    "ChunkManager",
    "Emitter",
    "ScriptParser",
    "compile_source",
    "load_options",
    "parse_source",
    "main",
]

logger = logging.getLogger("gotoscript")


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Lower branching scripts into linear goto-based bytecode text"
    )
    parser.add_argument("script", help="Path to the script source file")
    parser.add_argument(
        "-o", "--output", help="Write the assembled text here instead of stdout"
    )
    parser.add_argument(
        "--line-markers",
        action="store_true",
        default=None,
        help='Emit \'# <line> "<file>"\' before every command',
    )
    parser.add_argument("--config", help="TOML file with a [gotoscript] table")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log the split pass at DEBUG level"
    )
    return parser


def main(argv=None):
    args = _build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        options = load_options(
            args.config, line_markers=args.line_markers, source_name=args.script
        )
        with open(args.script, "r", encoding="utf-8") as f:
            source = f.read()
        output = compile_source(source, options)
        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(output)
            logger.info("Wrote %s", args.output)
        else:
            sys.stdout.write(output)
    except Exception as e:
        logger.debug("Compilation failed", exc_info=True)
        print(f"FATAL ERROR\n{e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
