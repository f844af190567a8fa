# tests/conftest.py
"""
Shared fixtures and sample s-Java programs for the sjavac test-suite.
"""

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from sjavac.model import Scope, TypeTag, Variable


def src(text: str) -> str:
    """Dedent a triple-quoted program and drop the leading newline."""
    return textwrap.dedent(text).lstrip("\n")


# ---------------------------------------------------------------------------
#  Sample programs
# ---------------------------------------------------------------------------

EMPTY_METHOD_SJAVA = src("""
    void f() {
        return;
    }
""")

FINAL_REASSIGNED_SJAVA = src("""
    final int x = 5;
    void f() {
        x = 7;
        return;
    }
""")

FORWARD_CALL_SJAVA = src("""
    void a() {
        b();
        return;
    }
    void b() {
        return;
    }
""")

UNINITIALIZED_CONDITION_SJAVA = src("""
    int x;
    void f() {
        if (x) {
        }
        return;
    }
""")

FINAL_PARAMETER_WIDENING_SJAVA = src("""
    void f(final int n) {
        double d = n;
        return;
    }
""")

RETURN_WITHOUT_SEMICOLON_SJAVA = src("""
    void f() {
        return
    }
""")

FULL_PROGRAM_SJAVA = src("""
    // globals
    int counter = 0;
    final double RATE = 1.5;
    String greeting = "hello";
    char c = 'a';
    boolean done;
    done = false;

    void main(int n, final String label) {
        int i = n, j;
        j = i;
        boolean flag = true;
        while (flag && i || RATE) {
            double local = i;
            if (done || false) {
                counter = 3;
            }
            flag = false;
        }
        helper(label, 2, 'z');
        return;
    }

    void helper(String s, double d, char ch) {
    // inner blocks may shadow outer names
        if (d) {
            int counter = 1;
            int s2 = counter;
            while (s2) {
                s2 = 0;
            }
        }
        return;
    }
""")


# ---------------------------------------------------------------------------
#  Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def write_source(tmp_path) -> Callable[..., Path]:
    """Write *text* to ``tmp_path/<name>`` and return the path."""
    def _write(text: str, name: str = "program.sjava") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def global_scope() -> Scope:
    """A global scope holding one variable of each flavour."""
    scope = Scope(None)
    scope.define(Variable("i", TypeTag.INT, is_initialized=True))
    scope.define(Variable("d", TypeTag.DOUBLE, is_initialized=True))
    scope.define(Variable("b", TypeTag.BOOLEAN, is_initialized=True))
    scope.define(Variable("s", TypeTag.STRING, is_initialized=True))
    scope.define(Variable("c", TypeTag.CHAR, is_initialized=True))
    scope.define(Variable("k", TypeTag.INT, is_final=True, is_initialized=True))
    scope.define(Variable("u", TypeTag.BOOLEAN))
    return scope
