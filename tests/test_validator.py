# tests/test_validator.py
"""
Tests for the two-pass semantic validator.
"""

import pytest

from sjavac.classifier import classify_source
from sjavac.config import VerifierConfig
from sjavac.errors import (
    ArityMismatchError,
    FinalAssignmentError,
    InvalidConditionError,
    InvalidIdentifierError,
    InvalidValueError,
    MisplacedStatementError,
    MissingInitializerError,
    MissingReturnError,
    NestedMethodError,
    RedefinedSymbolError,
    SemanticError,
    SjavaError,
    SjavaSyntaxError,
    TypeMismatchError,
    UnbalancedBraceError,
    UndefinedSymbolError,
    UninitializedVariableError,
    exit_status_for,
)
from sjavac.model import Scope, TypeTag, Variable
from sjavac.validator import Validator, resolve_value_type, verify_source
from tests.conftest import (
    EMPTY_METHOD_SJAVA,
    FINAL_PARAMETER_WIDENING_SJAVA,
    FINAL_REASSIGNED_SJAVA,
    FORWARD_CALL_SJAVA,
    FULL_PROGRAM_SJAVA,
    RETURN_WITHOUT_SEMICOLON_SJAVA,
    UNINITIALIZED_CONDITION_SJAVA,
    src,
)


def verify(text: str, **config):
    return verify_source(src(text), VerifierConfig(**config))


def status_of(text: str) -> int:
    try:
        verify_source(text)
    except SjavaError as exc:
        return exit_status_for(exc)
    return 0


class TestEndToEnd:

    @pytest.mark.parametrize("program, status", [
        (EMPTY_METHOD_SJAVA, 0),
        (FINAL_REASSIGNED_SJAVA, 1),
        (FORWARD_CALL_SJAVA, 0),
        (UNINITIALIZED_CONDITION_SJAVA, 1),
        (FINAL_PARAMETER_WIDENING_SJAVA, 0),
        (RETURN_WITHOUT_SEMICOLON_SJAVA, 1),
    ])
    def test_scenario(self, program, status):
        assert status_of(program) == status

    def test_full_program(self):
        result = verify_source(FULL_PROGRAM_SJAVA)
        assert result.method_names == ["helper", "main"]
        assert result.global_scope.lookup_local("done").is_initialized
        assert result.methods["helper"].parameter_types == (
            TypeTag.STRING, TypeTag.DOUBLE, TypeTag.CHAR,
        )

    def test_running_twice_gives_same_status(self):
        assert status_of(FINAL_REASSIGNED_SJAVA) == status_of(FINAL_REASSIGNED_SJAVA)
        assert status_of(FULL_PROGRAM_SJAVA) == status_of(FULL_PROGRAM_SJAVA) == 0


class TestGlobals:

    def test_only_comments_and_blanks(self):
        result = verify("""
            // just a comment

            // another
        """)
        assert result.methods == {}
        assert len(result.global_scope) == 0

    def test_empty_file(self):
        assert verify_source("").line_count == 0

    def test_final_without_initializer(self):
        with pytest.raises(MissingInitializerError):
            verify("final int x;")

    def test_final_with_initializer(self):
        result = verify("final int x = 5;")
        x = result.global_scope.lookup_local("x")
        assert x.is_final and x.is_initialized

    @pytest.mark.parametrize("line", [
        "double d = 3;",
        "boolean b = 0;",
        "boolean b = 1.5;",
        "String s = \"hi\";",
        "char c = 'q';",
        "int a = -3, b, c = a;",
    ])
    def test_compatible_initializers(self, line):
        verify(line)

    @pytest.mark.parametrize("line", [
        "int i = 3.0;",
        "int i = true;",
        "String s = 'c';",
        "char c = \"c\";",
        "double d = false;",
    ])
    def test_incompatible_initializers(self, line):
        with pytest.raises(TypeMismatchError):
            verify(line)

    def test_redeclared_global(self):
        with pytest.raises(RedefinedSymbolError) as exc_info:
            verify("""
                int a;
                double a;
            """)
        assert exc_info.value.line_number == 2

    def test_redeclared_in_one_line(self):
        with pytest.raises(RedefinedSymbolError):
            verify("int a, a;")

    def test_initializer_from_uninitialized(self):
        with pytest.raises(UninitializedVariableError):
            verify("""
                int a;
                int b = a;
            """)

    def test_initializer_from_undeclared(self):
        with pytest.raises(UndefinedSymbolError):
            verify("int b = a;")

    @pytest.mark.parametrize("line", ["int _ = 1;", "int __a = 1;", "int if = 1;"])
    def test_invalid_names(self, line):
        with pytest.raises(InvalidIdentifierError):
            verify(line)

    def test_reserved_names_allowed_when_configured(self):
        verify("int while = 1;", reject_reserved_words=False)

    def test_invalid_value(self):
        with pytest.raises(InvalidValueError):
            verify("int a = 1 + 2;")

    def test_empty_declarator(self):
        with pytest.raises(SemanticError):
            verify("int a, ;")

    def test_global_assignment(self):
        result = verify("""
            int a;
            a = 4;
        """)
        assert result.global_scope.lookup_local("a").is_initialized

    def test_global_assignment_disabled(self):
        with pytest.raises(MisplacedStatementError):
            verify("""
                int a;
                a = 4;
            """, allow_global_assignments=False)

    def test_global_assignment_to_undeclared(self):
        with pytest.raises(UndefinedSymbolError):
            verify("a = 4;")

    @pytest.mark.parametrize("line, error", [
        ("foo();", MisplacedStatementError),
        ("return;", MisplacedStatementError),
        ("if (true) {", MisplacedStatementError),
        ("}", UnbalancedBraceError),
    ])
    def test_statements_outside_methods(self, line, error):
        with pytest.raises(error):
            verify(line)


class TestMethodSignatures:

    def test_duplicate_method(self):
        with pytest.raises(RedefinedSymbolError) as exc_info:
            verify("""
                void f() {
                    return;
                }
                void f(int a) {
                    return;
                }
            """)
        assert exc_info.value.line_number == 4
        assert "Method f" in exc_info.value.message

    def test_duplicate_parameter(self):
        with pytest.raises(RedefinedSymbolError):
            verify("""
                void f(int a, double a) {
                    return;
                }
            """)

    def test_bad_parameter(self):
        with pytest.raises(SemanticError):
            verify("""
                void f(int) {
                    return;
                }
            """)

    def test_trailing_comma_in_parameters(self):
        with pytest.raises(SemanticError):
            verify("""
                void f(int a,) {
                    return;
                }
            """)

    def test_reserved_method_name(self):
        with pytest.raises(InvalidIdentifierError):
            verify("""
                void while() {
                    return;
                }
            """)

    def test_unterminated_method(self):
        with pytest.raises(UnbalancedBraceError) as exc_info:
            verify("""
                void f() {
                    if (true) {
                    return;
                }
            """)
        assert exc_info.value.line_number == 1

    def test_parameters_are_initialized(self):
        verify("""
            void f(int a, final boolean b) {
                int c = a;
                if (b) {
                }
                return;
            }
        """)


class TestMethodBodies:

    def test_missing_return(self):
        with pytest.raises(MissingReturnError) as exc_info:
            verify("""
                void f() {
                    int a = 1;
                }
            """)
        assert exc_info.value.line_number == 3

    def test_empty_body(self):
        with pytest.raises(MissingReturnError):
            verify("""
                void f() {
                }
            """)

    def test_return_not_last(self):
        with pytest.raises(MissingReturnError):
            verify("""
                void f() {
                    return;
                    int a = 1;
                }
            """)

    def test_return_followed_by_comment_and_blank(self):
        verify("""
            void f() {
                return;
            // done

            }
        """)

    def test_return_inside_last_block_counts(self):
        verify("""
            void f(boolean b) {
                if (b) {
                    return;
                }
            }
        """)

    def test_early_return_then_final_return(self):
        verify("""
            void f(boolean b) {
                if (b) {
                    return;
                }
                return;
            }
        """)

    def test_nested_method(self):
        with pytest.raises(NestedMethodError):
            verify("""
                void f() {
                    void g() {
                        return;
                    }
                    return;
                }
            """)

    def test_final_reassignment(self):
        with pytest.raises(FinalAssignmentError) as exc_info:
            verify(FINAL_REASSIGNED_SJAVA)
        assert exc_info.value.line_number == 3

    def test_final_parameter_reassignment(self):
        with pytest.raises(FinalAssignmentError):
            verify("""
                void f(final int n) {
                    n = 2;
                    return;
                }
            """)

    def test_local_redeclaration(self):
        with pytest.raises(RedefinedSymbolError):
            verify("""
                void f() {
                    int a;
                    int a;
                    return;
                }
            """)

    def test_local_redeclares_parameter(self):
        with pytest.raises(RedefinedSymbolError):
            verify("""
                void f(int a) {
                    double a = 1.0;
                    return;
                }
            """)

    def test_local_shadows_global(self):
        verify("""
            int a = 1;
            void f() {
                String a = "x";
                return;
            }
        """)

    def test_block_shadows_local(self):
        verify("""
            void f() {
                int a = 1;
                if (a) {
                    String a = "x";
                }
                return;
            }
        """)

    def test_block_variable_out_of_scope(self):
        with pytest.raises(UndefinedSymbolError):
            verify("""
                void f() {
                    if (true) {
                        int inner = 1;
                    }
                    inner = 2;
                    return;
                }
            """)

    def test_assignment_initializes(self):
        verify("""
            void f() {
                int a;
                a = 3;
                int b = a;
                return;
            }
        """)

    def test_assignment_in_block_initializes_outer(self):
        verify("""
            void f() {
                boolean x;
                if (true) {
                    x = true;
                }
                while (x) {
                }
                return;
            }
        """)

    def test_assignment_type_mismatch(self):
        with pytest.raises(TypeMismatchError):
            verify("""
                void f() {
                    int a;
                    a = "s";
                    return;
                }
            """)

    def test_assignment_from_uninitialized(self):
        with pytest.raises(UninitializedVariableError):
            verify("""
                void f() {
                    int a;
                    int b;
                    a = b;
                    return;
                }
            """)

    def test_multiple_assignments(self):
        verify("""
            void f() {
                int a;
                double b;
                a = 1, b = a;
                return;
            }
        """)

    def test_method_assigns_global(self):
        verify("""
            int g;
            void f() {
                g = 1;
                return;
            }
            void h() {
                int x = g;
                return;
            }
        """)


class TestConditions:

    def test_uninitialized_condition(self):
        with pytest.raises(UninitializedVariableError):
            verify("""
                void f() {
                    boolean x;
                    while (x) {
                    }
                    return;
                }
            """)

    def test_string_condition(self):
        with pytest.raises(InvalidConditionError):
            verify("""
                void f(String s) {
                    if (s) {
                    }
                    return;
                }
            """)

    def test_empty_condition(self):
        with pytest.raises(InvalidConditionError):
            verify("""
                void f() {
                    if () {
                    }
                    return;
                }
            """)

    def test_compound_condition(self):
        verify("""
            void f(int a, double b, boolean c) {
                while (a && b || c && true || 3) {
                }
                return;
            }
        """)


class TestCalls:

    def test_undeclared_method(self):
        with pytest.raises(UndefinedSymbolError) as exc_info:
            verify("""
                void f() {
                    g();
                    return;
                }
            """)
        assert "Method g" in exc_info.value.message

    def test_arity(self):
        with pytest.raises(ArityMismatchError):
            verify("""
                void f(int a) {
                    return;
                }
                void g() {
                    f();
                    return;
                }
            """)

    def test_argument_type(self):
        with pytest.raises(ArityMismatchError):
            verify("""
                void f(int a) {
                    return;
                }
                void g() {
                    f(1.5);
                    return;
                }
            """)

    def test_argument_widening(self):
        verify("""
            void f(double d, boolean b) {
                return;
            }
            void g() {
                f(1, 2.5);
                return;
            }
        """)

    def test_argument_from_uninitialized_variable(self):
        with pytest.raises(UninitializedVariableError):
            verify("""
                void f(int a) {
                    return;
                }
                void g() {
                    int x;
                    f(x);
                    return;
                }
            """)

    def test_recursive_call(self):
        verify("""
            void f(int n) {
                f(n);
                return;
            }
        """)

    def test_empty_argument(self):
        with pytest.raises(InvalidValueError):
            verify("""
                void f(int a, int b) {
                    return;
                }
                void g() {
                    f(1, );
                    return;
                }
            """)


class TestResolveValueType:

    @pytest.fixture
    def scope(self):
        scope = Scope(None)
        scope.define(Variable("n", TypeTag.INT, is_initialized=True))
        scope.define(Variable("u", TypeTag.CHAR))
        return scope

    @pytest.mark.parametrize("value, expected", [
        ("5", TypeTag.INT),
        ("-5", TypeTag.INT),
        ("5.0", TypeTag.DOUBLE),
        (".5", TypeTag.DOUBLE),
        ("true", TypeTag.BOOLEAN),
        ("'x'", TypeTag.CHAR),
        ('"x y"', TypeTag.STRING),
        (" n ", TypeTag.INT),
    ])
    def test_types(self, scope, value, expected):
        assert resolve_value_type(value, scope, 1) is expected

    def test_uninitialized(self, scope):
        with pytest.raises(UninitializedVariableError):
            resolve_value_type("u", scope, 1)

    def test_undeclared(self, scope):
        with pytest.raises(UndefinedSymbolError):
            resolve_value_type("zz", scope, 1)

    @pytest.mark.parametrize("value", ["", "1 2", "'ab'", "f()"])
    def test_invalid(self, scope, value):
        with pytest.raises(InvalidValueError):
            resolve_value_type(value, scope, 1)


class TestValidatorObject:

    def test_errors_carry_source_line(self):
        lines = classify_source(src("""
            void f() {
                int a = "s";
                return;
            }
        """))
        with pytest.raises(TypeMismatchError) as exc_info:
            Validator(lines).validate()
        assert exc_info.value.error_message.source_line.strip() == 'int a = "s";'
        assert exc_info.value.line_number == 2

    def test_syntax_errors_stop_before_validation(self):
        with pytest.raises(SjavaSyntaxError):
            verify_source("int a\n")

    def test_fresh_state_per_validator(self):
        lines = classify_source("int a = 1;\n")
        Validator(lines).validate()
        Validator(lines).validate()


class TestNonAsciiSource:

    @pytest.mark.parametrize("text", [
        "int x = ٣;\n",
        "double d = １.５;\n",
        "int\u2003x = 1;\n",
        "int x = 1,\u2003y = 2;\n",
    ])
    def test_rejected(self, text):
        assert status_of(text) == 1

    def test_em_space_around_value(self):
        with pytest.raises(InvalidValueError):
            verify_source("int x =\u20031;\n")
