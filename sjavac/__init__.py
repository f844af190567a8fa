"""sjavac — static verifier for s-Java source files.

This package decides whether a single s-Java file is a legal program and
reports ``0`` (valid), ``1`` (syntax or semantic error) or ``2`` (I/O or
usage error).

Submodules
----------
regex_bank
    The compiled regular expressions describing every line shape, token
    and literal of the language, plus the identifier rules.

classifier
    Line-by-line syntactic classification: ``LineKind`` and the frozen
    ``ClassifiedLine`` records handed to the validator.

model
    ``TypeTag`` with its widening rules, ``Variable``, ``Method`` and the
    lexical ``Scope`` tree.

conditions
    Parsimonious grammar for ``if``/``while`` conditions and operand
    checking.

validator
    Two-pass semantic validation (global collection, then method bodies).

errors
    Error hierarchy, ``SJAVA-XXXX`` codes, ``SourceSpan`` and the mapping
    from exceptions to status lines.

config
    ``VerifierConfig`` tuning knobs.

main
    CLI entry-point.

Usage
-----
Command-line::

    sjavac program.sjava
    python -m sjavac -v program.sjava

Programmatic::

    from sjavac.validator import verify_file
    from sjavac.errors import SjavaError, exit_status_for

    try:
        verify_file("program.sjava")
        status = 0
    except SjavaError as exc:
        status = exit_status_for(exc)
"""

from __future__ import annotations

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "classifier",
    "conditions",
    "config",
    "errors",
    "model",
    "regex_bank",
    "validator",
    "main",
]
