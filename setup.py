#!/usr/bin/env python3
# =============================================================================
#  sjavac — setup.py
#
#  Installs the `sjavac` package and its console script.
#
#      pip install -e ".[dev]"
#      python -m pytest
# =============================================================================

from __future__ import annotations

import re
from pathlib import Path

from setuptools import setup, find_packages

# ---------------------------------------------------------------------------
#  Read version from the package so we have a single source of truth.
# ---------------------------------------------------------------------------
_HERE = Path(__file__).resolve().parent


def _read_version() -> str:
    """Extract ``__version__`` from sjavac/__init__.py."""
    init = _HERE / "sjavac" / "__init__.py"
    text = init.read_text(encoding="utf-8")
    match = re.search(r'^__version__(?::\s*str)?\s*=\s*"([^"]+)"', text, re.MULTILINE)
    if match:
        return match.group(1)
    return "0.0.0"


def _read_requirements() -> list[str]:
    """Read requirements.txt if it exists."""
    req_file = _HERE / "requirements.txt"
    if req_file.exists():
        lines = req_file.read_text(encoding="utf-8").splitlines()
        return [
            ln.strip()
            for ln in lines
            if ln.strip() and not ln.strip().startswith("#")
        ]
    return []


setup(
    name="sjavac",
    version=_read_version(),
    description="Static verifier for s-Java, a small subset of Java.",
    license="MIT",
    author="sjavac contributors",
    python_requires=">=3.10",
    packages=find_packages(
        include=[
            "sjavac",
            "sjavac.*",
        ],
        exclude=[
            "tests",
            "tests.*",
        ],
    ),
    install_requires=_read_requirements(),
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
        ],
    },

    # ── console script ────────────────────────────────────────────────
    entry_points={
        "console_scripts": [
            "sjavac=sjavac.main:main",
        ],
    },

    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Software Development :: Compilers",
        "Topic :: Software Development :: Quality Assurance",
    ],
    keywords=[
        "s-java",
        "static-analysis",
        "verifier",
        "type-checking",
    ],
    zip_safe=False,
)
