"""
Expression AST for when-clauses

A when-clause string (compiled or hand-written) can be parsed into this
tree so it can be validated, inspected and evaluated without the host.

The grammar is deliberately tiny:
    - context key references (`editorFocus`)
    - literals (`explorer`, `42`, `true`)
    - equality `==` and pattern match `~=`
    - negation `!`, conjunction `&&`, disjunction `||`

ARCHITECTURAL RULE:
    These classes are structure only. Parsing lives in parser,
    rendering lives in backends.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Union


class Expression(ABC):
    """
    Base class for all when-clause expressions.

    It exists to provide type-safety for the expression hierarchy.
    """
    pass


class BinaryOperator(Enum):
    """Binary operators of the host grammar, valued by their source token."""

    AND = "&&"
    OR = "||"
    EQUALS = "=="
    MATCHES = "~="


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    A logical combination or a comparison.

    Example:
        view == explorer && !inputFocus

    Becomes:
        BinaryExpression(
            operator=BinaryOperator.AND,
            left=BinaryExpression(
                operator=BinaryOperator.EQUALS,
                left=ContextKeyReference("view"),
                right=Literal("explorer"),
            ),
            right=UnaryExpression(
                operator=UnaryOperator.NOT,
                operand=ContextKeyReference("inputFocus"),
            ),
        )

    For EQUALS and MATCHES the left side is always a ContextKeyReference
    and the right side a Literal holding the operand's source text.
    """

    operator: BinaryOperator
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class ContextKeyReference(Expression):
    """
    References a context key by name.

    On its own it is a truthiness test.
    """

    name: str


@dataclass(frozen=True)
class Literal(Expression):
    """
    A comparison operand, kept as the source text the host will see.

    Examples:
        - 42
        - explorer
        - ^file\\.py$
    """

    value: Union[str, int, float, bool]


class UnaryOperator(Enum):
    NOT = "!"


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """A negated expression, e.g. `!editorFocus`."""

    operator: UnaryOperator
    operand: Expression
