#!/usr/bin/env python3
"""cmatch command line entry point.

Reads lines from stdin, highlights every regex match with its palette slot's
colors and writes each line back to stdout. All diagnostics go to stderr.

Exit codes:
  0   end of input reached (or output pipe closed)
  1   config error or input read error
  130 interrupted
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import TextIO

import yaml

from .config.loader import DEFAULT_CONFIG_PATH
from .config.palette import build_palette_config
from .highlight.render import COLOR_MODES, LineRenderer, resolve_color_system
from .utils.exceptions import CmatchError, InputError
from .utils.logging_utils import LEVEL_CHOICES, setup_logging
from .version import get_version

logger = logging.getLogger(__name__)


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='cmatch',
        description='Highlight regular expression matches in a stream of lines.',
    )
    parser.add_argument('-c', '--config', default=DEFAULT_CONFIG_PATH,
                        help=f'Path to YAML palette config (default: {DEFAULT_CONFIG_PATH})')
    parser.add_argument('-r', '--regexp', action='append', default=[], metavar='PATTERN',
                        help='Extra pattern to highlight; repeatable (-r regexp1 -r regexp2)')
    parser.add_argument('--color', choices=COLOR_MODES, default=None,
                        help='When to emit color codes (default: CMATCH_COLOR env or auto)')
    parser.add_argument('--log-level', choices=LEVEL_CHOICES, default=None,
                        help='Diagnostic log level (default: CMATCH_LOG_LEVEL env or WARNING)')
    parser.add_argument('--print-config', action='store_true',
                        help='Print the effective palette as YAML and exit')
    parser.add_argument('--version', action='version', version=f'cmatch {get_version()}')
    return parser.parse_args(argv)


def process_stream(instream: TextIO, outstream: TextIO, renderer: LineRenderer) -> int:
    """Highlight every record of instream onto outstream; returns the line count."""
    count = 0
    while True:
        try:
            record = instream.readline()
        except OSError as e:
            raise InputError(f"failed reading input after {count} lines: {e}") from e
        if not record:
            break
        if record.endswith('\n'):
            record = record[:-1]
        outstream.write(renderer.render_line(record))
        outstream.write('\n')
        outstream.flush()
        count += 1
    return count


def _passthrough_stream(stream: TextIO) -> TextIO:
    # Undecodable bytes survive the round trip as lone surrogates
    reconfigure = getattr(stream, 'reconfigure', None)
    if reconfigure is not None:
        reconfigure(errors='surrogateescape')
    return stream


def main(argv: Sequence[str] | None = None, stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    args = parse_arguments(argv)
    setup_logging(args.log_level)
    instream = stdin if stdin is not None else _passthrough_stream(sys.stdin)
    outstream = stdout if stdout is not None else _passthrough_stream(sys.stdout)

    try:
        config = build_palette_config(args.config, args.regexp)
    except CmatchError as e:
        logger.error("[config] %s", e)
        return 1

    if args.print_config:
        yaml.safe_dump(config.to_document(), outstream, sort_keys=False, allow_unicode=True)
        outstream.flush()
        return 0

    renderer = LineRenderer(config, resolve_color_system(args.color, outstream))
    try:
        count = process_stream(instream, outstream, renderer)
    except InputError as e:
        logger.error("[stream] %s", e)
        return 1
    except BrokenPipeError:
        logger.debug("[stream] output closed")
        return 0
    except KeyboardInterrupt:
        return 130
    logger.info("[stream] processed %d lines", count)
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
