"""
When-clause parser and evaluator.

Reads the flat grammar produced by backends.when_clause back into the
expression AST, and evaluates it against a truth table keyed by atom text.

Grammar (no parentheses; `&&` binds tighter than `||`):
    clause   := conjunct ( "||" conjunct )*
    conjunct := unary ( "&&" unary )*
    unary    := "!"* atom
    atom     := key | key "==" value | key "~=" pattern | "true" | "false"

Values and patterns are raw text running to the next `&&` / `||`, so they
may contain spaces and regex punctuation but not the operators themselves.

Uses:
    - Menu validates hand-written clauses with parse_when_clause()
    - Tests check compiled clauses against the original function with evaluate()
"""

import re
from typing import Callable, List, Mapping, Tuple, Union

from contributions.errors import WhenClauseSyntaxError
from contributions.expressions import (
    BinaryExpression,
    BinaryOperator,
    ContextKeyReference,
    Expression,
    Literal,
    UnaryExpression,
    UnaryOperator,
)

_SPLIT_RE = re.compile(r"(&&|\|\|)")
_COMPARISON_RE = re.compile(r"^([^\s=~!&|]+)\s*(==|~=)\s*(.*)$", re.DOTALL)
_KEY_RE = re.compile(r"^[^\s=~!&|]+$")

TruthTable = Union[Mapping[str, bool], Callable[[str], bool]]


def _tokenize(clause: str) -> List[str]:
    """Split into operand texts and operator tokens, dropping surrounding whitespace."""
    tokens = [part.strip() for part in _SPLIT_RE.split(clause)]
    return tokens


def parse_when_clause(clause: str) -> Expression:
    """
    Parse a when-clause into an Expression.

    Args:
        clause: Clause text, e.g. "b && a == 1 || !b && a == 2"

    Returns:
        Expression AST. The empty clause parses to Literal(False), which is
        what the compiler emits for a function that never returns True.

    Raises:
        WhenClauseSyntaxError: If the text is not in the grammar
    """
    if clause is None or not clause.strip():
        return Literal(False)

    tokens = _tokenize(clause)
    expr, pos = _parse_or_expression(tokens, 0, clause)

    if pos < len(tokens):
        raise WhenClauseSyntaxError(
            f"Unexpected tokens after parsing: {tokens[pos:]}",
            details={"clause": clause},
        )
    return expr


def _parse_or_expression(tokens: List[str], pos: int, clause: str) -> Tuple[Expression, int]:
    """Parse OR expression (lowest precedence)."""
    left, pos = _parse_and_expression(tokens, pos, clause)

    while pos < len(tokens) and tokens[pos] == "||":
        right, pos = _parse_and_expression(tokens, pos + 1, clause)
        left = BinaryExpression(BinaryOperator.OR, left, right)

    return left, pos


def _parse_and_expression(tokens: List[str], pos: int, clause: str) -> Tuple[Expression, int]:
    """Parse AND expression."""
    left, pos = _parse_unary_expression(tokens, pos, clause)

    while pos < len(tokens) and tokens[pos] == "&&":
        right, pos = _parse_unary_expression(tokens, pos + 1, clause)
        left = BinaryExpression(BinaryOperator.AND, left, right)

    return left, pos


def _parse_unary_expression(tokens: List[str], pos: int, clause: str) -> Tuple[Expression, int]:
    """Parse one operand with any leading negations."""
    if pos >= len(tokens):
        raise WhenClauseSyntaxError("Unexpected end of clause", details={"clause": clause})

    text = tokens[pos]
    if text in ("&&", "||"):
        raise WhenClauseSyntaxError(f"Missing operand before {text!r}", details={"clause": clause})

    negations = 0
    while text.startswith("!"):
        negations += 1
        text = text[1:].lstrip()

    expr = _parse_atom(text, clause)
    for _ in range(negations):
        expr = UnaryExpression(UnaryOperator.NOT, expr)
    return expr, pos + 1


def _parse_atom(text: str, clause: str) -> Expression:
    if not text:
        raise WhenClauseSyntaxError("Empty operand", details={"clause": clause})

    if text == "true":
        return Literal(True)
    if text == "false":
        return Literal(False)

    m = _COMPARISON_RE.match(text)
    if m:
        key, op, value = m.group(1), m.group(2), m.group(3).strip()
        if not value:
            raise WhenClauseSyntaxError(f"Missing operand after {op!r} in {text!r}", details={"clause": clause})
        operator = BinaryOperator.EQUALS if op == "==" else BinaryOperator.MATCHES
        return BinaryExpression(operator, ContextKeyReference(key), Literal(value))

    if _KEY_RE.match(text):
        return ContextKeyReference(text)

    raise WhenClauseSyntaxError(f"Unrecognized operand: {text!r}", details={"clause": clause})


def atom_text(expr: Expression) -> str:
    """Canonical text of an atom expression, as used for truth-table lookups."""
    if isinstance(expr, ContextKeyReference):
        return expr.name
    if (
        isinstance(expr, BinaryExpression)
        and expr.operator in (BinaryOperator.EQUALS, BinaryOperator.MATCHES)
        and isinstance(expr.left, ContextKeyReference)
        and isinstance(expr.right, Literal)
    ):
        return f"{expr.left.name} {expr.operator.value} {expr.right.value}"
    raise TypeError(f"Not an atom: {expr!r}")


def evaluate(expr: Expression, truth: TruthTable) -> bool:
    """
    Evaluate a parsed clause.

    Args:
        expr: Expression from parse_when_clause()
        truth: Mapping from atom text ("a == 1", "b") to its value, or a
            callable taking the atom text. Atoms missing from a mapping
            are False, like unset context keys on the host.
    """
    lookup = truth if callable(truth) else (lambda text: bool(truth.get(text, False)))

    # explicit stack keeps deep conjunctions off the recursion limit
    stack: List[Tuple[Expression, bool]] = [(expr, False)]
    values: List[bool] = []
    while stack:
        node, expanded = stack.pop()
        if isinstance(node, Literal):
            values.append(bool(node.value))
        elif isinstance(node, ContextKeyReference):
            values.append(bool(lookup(node.name)))
        elif isinstance(node, UnaryExpression):
            if expanded:
                values.append(not values.pop())
            else:
                stack.append((node, True))
                stack.append((node.operand, False))
        elif isinstance(node, BinaryExpression):
            if node.operator in (BinaryOperator.EQUALS, BinaryOperator.MATCHES):
                values.append(bool(lookup(atom_text(node))))
            elif expanded:
                right = values.pop()
                left = values.pop()
                values.append(left and right if node.operator == BinaryOperator.AND else left or right)
            else:
                stack.append((node, True))
                stack.append((node.right, False))
                stack.append((node.left, False))
        else:
            raise TypeError(f"Unsupported Expression type: {type(node)}")

    return values.pop()


def evaluate_clause(clause: str, truth: TruthTable) -> bool:
    """Parse and evaluate in one step."""
    return evaluate(parse_when_clause(clause), truth)
