"""Verifier configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class VerifierConfig:
    """Tuning knobs for a single verification run."""
    source_extension: str = ".sjava"
    encoding: str = "utf-8"
    allow_global_assignments: bool = True
    reject_reserved_words: bool = True

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty if valid)."""
        problems: List[str] = []
        if not self.source_extension.startswith("."):
            problems.append("source_extension must start with '.'")
        if not self.encoding:
            problems.append("encoding must not be empty")
        return problems


DEFAULT_CONFIG = VerifierConfig()
