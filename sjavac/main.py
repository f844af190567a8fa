#!/usr/bin/env python3
"""sjavac/main.py — CLI entry-point for the s-Java verifier.

Usage examples
--------------
    # Verify one source file
    python -m sjavac program.sjava

    # Same, logging pass boundaries (-v) or every line decision (-vv)
    sjavac -vv program.sjava

    # Show version and exit
    sjavac --version

Output
------
Exactly one status line is written to stdout:

    0   The file is a valid s-Java program.
    1   Syntax or semantic error (details on stderr).
    2   I/O or usage error: wrong argument count, bad extension, missing or
        unreadable file (details on stderr).

The status line is the result; the process exit code is 0 whenever it was
printed. The module doubles as ``python -m sjavac`` via the companion
``sjavac/__main__.py``.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from sjavac import __version__
from sjavac.config import DEFAULT_CONFIG, VerifierConfig
from sjavac.errors import (
    STATUS_IO_ERROR,
    STATUS_VALID,
    SjavaError,
    SjavaErrorCodes,
    SjavaIOError,
    SourceSpan,
    UsageError,
    exit_status_for,
)
from sjavac.validator import verify_file

_log = logging.getLogger("sjavac")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the root ``sjavac`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("sjavac")
    root.setLevel(level)
    for old in [h for h in root.handlers if getattr(h, "_sjavac_cli", False)]:
        root.removeHandler(old)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    handler._sjavac_cli = True  # type: ignore[attr-defined]
    root.addHandler(handler)


def _check_source_path(raw: str, config: VerifierConfig) -> Path:
    """Resolve *raw* to a readable source file or raise ``SjavaIOError``."""
    if not raw.endswith(config.source_extension):
        raise SjavaIOError(
            f"Source file must have a {config.source_extension} extension: {raw}",
            path=raw,
            code=SjavaErrorCodes.BAD_EXTENSION,
        )
    p = Path(raw).expanduser()
    if not p.exists():
        raise SjavaIOError(
            f"File not found: {raw}", path=raw, code=SjavaErrorCodes.FILE_NOT_FOUND
        )
    if not p.is_file():
        raise SjavaIOError(
            f"Not a regular file: {raw}", path=raw, code=SjavaErrorCodes.NOT_A_FILE
        )
    if not os.access(p, os.R_OK):
        raise SjavaIOError(
            f"File is not readable: {raw}",
            path=raw,
            code=SjavaErrorCodes.FILE_NOT_READABLE,
        )
    return p


def _report(exc: SjavaError, source: str, stream: TextIO) -> None:
    """Write *exc* to *stream* in GCC style, tagged with the source path."""
    message = exc.error_message
    if source and not message.span.file:
        message.span = SourceSpan(file=source, line=message.span.line)
    print(exc.to_gcc_format(), file=stream)


def _emit_status(status: int) -> int:
    print(status, file=sys.stdout)
    sys.stdout.flush()
    return EXIT_OK


# ===========================================================================
# Argument parser construction
# ===========================================================================

class _ArgumentParser(argparse.ArgumentParser):
    """``ArgumentParser`` whose usage errors raise instead of exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise UsageError(f"{self.prog}: {message}")


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="sjavac",
        description="Static verifier for s-Java source files.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "source",
        help="Path to the .sjava file to verify.",
    )
    return parser


# ===========================================================================
# Verification
# ===========================================================================

def run(source: str, config: Optional[VerifierConfig] = None) -> int:
    """Verify *source* and return its status (0, 1 or 2).

    Diagnostics go to stderr; nothing is written to stdout.
    """
    config = config or DEFAULT_CONFIG
    problems = config.validate()
    if problems:
        raise UsageError("Invalid configuration: " + "; ".join(problems))

    try:
        path = _check_source_path(source, config)
        result = verify_file(path, config)
    except SjavaError as exc:
        _log.info("Verification of %s failed: %s", source, exc)
        _report(exc, source, sys.stderr)
        return exit_status_for(exc)
    except OSError as exc:
        _log.info("Cannot access %s: %s", source, exc)
        print(f"{source}: io error: {exc}", file=sys.stderr)
        return STATUS_IO_ERROR

    _log.info(
        "%s is valid (%d line(s), methods: %s)",
        source,
        result.line_count,
        ", ".join(result.method_names) or "none",
    )
    return STATUS_VALID


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the sjavac CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code; always 0 once a status line has been printed.
    """
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        parser.print_usage(sys.stderr)
        print(exc.message, file=sys.stderr)
        return _emit_status(STATUS_IO_ERROR)
    except SystemExit as exc:
        # --help / --version
        return exc.code if isinstance(exc.code, int) else EXIT_OK

    _configure_logging(args.verbose)

    try:
        status = run(args.source)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        status = STATUS_IO_ERROR
    except UsageError as exc:
        print(exc.message, file=sys.stderr)
        status = exit_status_for(exc)
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        status = STATUS_IO_ERROR
    return _emit_status(status)


# ---------------------------------------------------------------------------
# Module execution support
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    raise SystemExit(main())
