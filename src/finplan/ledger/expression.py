"""Account expressions used by derived accounts.

A derived account stores a tiny formula over account paths instead of a
balance::

    net_worth: {expression: "assets - liabilities"}

Grammar (right associative, left operand is always a bare identifier)::

    expr := id '+' expr | id '-' expr | id
    id   := (letter | ':')+

Whitespace after any token is skipped. An identifier evaluates to the sum of
every leaf under that path, so ``assets`` covers the whole subtree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from finplan.core.exceptions import ExpressionParseError

from .money import Money

if TYPE_CHECKING:
    from .accounts import Accounts


@dataclass(frozen=True)
class Id:
    path: str

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class Add:
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"{self.left} + {self.right}"


@dataclass(frozen=True)
class Sub:
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"{self.left} - {self.right}"


Expr = Union[Id, Add, Sub]

_OPERATORS = {"+": Add, "-": Sub}


class _Parser:
    """Recursive-descent parser over a single expression string."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def error(self, message: str) -> ExpressionParseError:
        return ExpressionParseError(self.text, self.pos, message)

    def skip_spaces(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def parse(self) -> Expr:
        self.skip_spaces()
        expr = self.expr()
        if self.pos != len(self.text):
            raise self.error(f"unexpected {self.text[self.pos]!r}")
        return expr

    def expr(self) -> Expr:
        left = self.identifier()
        if self.pos < len(self.text) and self.text[self.pos] in _OPERATORS:
            node = _OPERATORS[self.text[self.pos]]
            self.pos += 1
            self.skip_spaces()
            return node(left, self.expr())
        return left

    def identifier(self) -> Id:
        start = self.pos
        while self.pos < len(self.text) and (self.text[self.pos].isalpha() or self.text[self.pos] == ":"):
            self.pos += 1
        if self.pos == start:
            found = repr(self.text[self.pos]) if self.pos < len(self.text) else "end of input"
            raise self.error(f"expected an account name, found {found}")
        name = self.text[start : self.pos]
        self.skip_spaces()
        return Id(name)


def parse_expression(text: str) -> Expr:
    """Parse *text* into an expression tree.

    Raises:
        ExpressionParseError: If the text does not match the grammar.
    """
    if not isinstance(text, str):
        raise ExpressionParseError(str(text), 0, "any math expression referencing accounts expected")
    return _Parser(text).parse()


def evaluate(expr: Expr, accounts: Accounts) -> Money:
    """Evaluate *expr* against the tree rooted at *accounts*.

    Pure: reads balances, never mutates. An unknown identifier raises
    ``InvalidAccountName``.
    """
    if isinstance(expr, Id):
        return accounts.get(expr.path).sum()
    if isinstance(expr, Add):
        return evaluate(expr.left, accounts) + evaluate(expr.right, accounts)
    if isinstance(expr, Sub):
        return evaluate(expr.left, accounts) - evaluate(expr.right, accounts)
    raise TypeError(f"not an expression: {expr!r}")


def references(expr: Expr) -> list[str]:
    """Account paths referenced by *expr*, left to right."""
    if isinstance(expr, Id):
        return [expr.path]
    return references(expr.left) + references(expr.right)
