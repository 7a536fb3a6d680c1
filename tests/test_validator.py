import numpy as np
import pytest

from core import (
    Notation, Token, ErrorKind, BracketIssue, ExpressionValidator, tokenize
)


def check(text, notation):
    return ExpressionValidator.validate(tokenize(text, notation), notation)


# ================== infix ==================

@pytest.mark.parametrize("text", [
    "A",
    "A + B",
    "(A + B) * (C - D)",
    "{[a + b] * c} / d",
    "((x))",
    "alpha ^ beta - 3",
])
def test_valid_infix(text):
    assert check(text, Notation.INFIX).valid


@pytest.mark.parametrize("text, issue", [
    ("(A + B", BracketIssue.MISSING_CLOSER),
    ("A + B)", BracketIssue.EXTRA_CLOSER),
    ("(A + B]", BracketIssue.MISMATCHED),
    ("{[A + B}]", BracketIssue.MISMATCHED),
])
def test_infix_bracket_errors(text, issue):
    result = check(text, Notation.INFIX)
    assert not result.valid
    assert result.kind == ErrorKind.UNBALANCED_BRACKETS
    assert result.error.issue == issue


@pytest.mark.parametrize("text", [
    "A + + B",
    "A B",
    "A +",
    "+ A",
    "A + ()",
    "(A +)",
    "A (B)",
    "(A) B",
])
def test_infix_sequence_errors(text):
    result = check(text, Notation.INFIX)
    assert not result.valid
    assert result.kind == ErrorKind.MALFORMED_SEQUENCE


def test_operator_where_operand_expected_reports_position():
    result = check("A + * B", Notation.INFIX)
    assert result.error.position == 2
    assert "expected operand" in result.reason


def test_brackets_are_checked_before_sequencing():
    result = check("A + + (B", Notation.INFIX)
    assert result.kind == ErrorKind.UNBALANCED_BRACKETS


@pytest.mark.parametrize("notation", list(Notation))
def test_empty_sequence_is_rejected(notation):
    result = ExpressionValidator.validate([], notation)
    assert result.kind == ErrorKind.EMPTY_INPUT


# ================== postfix / prefix ==================

@pytest.mark.parametrize("text", ["AB+", "AB+CD-*", "ABC*+D-", "ab c + d *", "A"])
def test_valid_postfix(text):
    assert check(text, Notation.POSTFIX).valid


@pytest.mark.parametrize("text", ["+AB", "*+AB-CD", "-+A*BCD", "^A+BC", "A"])
def test_valid_prefix(text):
    assert check(text, Notation.PREFIX).valid


def test_count_imbalance_is_malformed():
    result = check("AB", Notation.POSTFIX)
    assert result.kind == ErrorKind.MALFORMED_SEQUENCE
    assert result.reason == "Invalid: operands=2, operators=0"


def test_unary_prefix_is_rejected_by_the_count_rule():
    result = check("-A", Notation.PREFIX)
    assert result.kind == ErrorKind.MALFORMED_SEQUENCE


def test_postfix_operator_without_two_operands():
    result = check("A+B", Notation.POSTFIX)
    assert result.kind == ErrorKind.INSUFFICIENT_OPERANDS
    assert result.error.position == 1


def test_prefix_is_scanned_right_to_left():
    result = check("AB+", Notation.PREFIX)
    assert result.kind == ErrorKind.INSUFFICIENT_OPERANDS
    assert result.error.position == 2


def test_brackets_in_postfix_tokens_are_rejected():
    tokens = [Token("("), Token("A"), Token("B"), Token("+"), Token(")")]
    result = ExpressionValidator.validate(tokens, Notation.POSTFIX)
    assert result.kind == ErrorKind.MALFORMED_SEQUENCE


def test_validate_accepts_plain_strings():
    assert ExpressionValidator.validate(["A", "B", "+"], Notation.POSTFIX).valid


def test_revalidation_gives_the_same_reason():
    tokens = tokenize("A+B", Notation.POSTFIX)
    first = ExpressionValidator.validate(tokens, Notation.POSTFIX)
    second = ExpressionValidator.validate(tokens, Notation.POSTFIX)
    assert not first.valid
    assert first == second
    assert first.reason == second.reason


# ================== properties ==================

def _reference_postfix(values):
    depth = 0
    for v in values:
        if v in "+-*/^":
            if depth < 2:
                return False
            depth -= 1
        else:
            depth += 1
    return depth == 1


@pytest.mark.parametrize("n_operators", [1, 2, 3, 5])
def test_front_loaded_operators_are_rejected(n_operators):
    operands = [chr(ord("A") + i) for i in range(n_operators + 1)]
    operators = ["+"] * n_operators
    # count rule holds, but every operator appears before enough operands
    postfix = [Token(v) for v in operators + operands]
    prefix = [Token(v) for v in operands + operators]
    assert not ExpressionValidator.validate(postfix, Notation.POSTFIX).valid
    assert not ExpressionValidator.validate(prefix, Notation.PREFIX).valid


def test_postfix_validation_matches_reference_on_random_sequences():
    rng = np.random.default_rng(7)
    for _ in range(300):
        n_operators = int(rng.integers(1, 6))
        values = ["x"] * (n_operators + 1) + [str(rng.choice(list("+-*/^"))) for _ in range(n_operators)]
        rng.shuffle(values)
        tokens = [Token(v) for v in values]
        expected = _reference_postfix(values)
        assert ExpressionValidator.validate(tokens, Notation.POSTFIX).valid == expected
        # prefix read right-to-left is postfix read left-to-right
        reversed_tokens = list(reversed(tokens))
        assert ExpressionValidator.validate(reversed_tokens, Notation.PREFIX).valid == expected
