"""Hierarchical, path-addressed account tree.

Accounts are addressed by colon-separated paths (``assets:cash``). A tree
node maps segment names to children; a leaf is either a ``SimpleAccount``
holding a balance or a ``DerivedAccount`` whose balance is computed from an
expression over other accounts.

Two views of value exist and are deliberately different:

- ``sum()`` adds the stored balances under a node; derived leaves count as zero.
- ``eval()`` maps every leaf path to its current value, evaluating derived
  leaves through their expression.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, Union

from loguru import logger

from finplan.core.exceptions import AlreadyExists, InvalidAccountName, InvalidDeposit, UnwrapNode

from .expression import Expr, evaluate, parse_expression
from .money import Money
from .transactions import Transaction

SEPARATOR = ":"


@dataclass
class SimpleAccount:
    """Leaf account with a stored balance."""

    amount: Money = field(default_factory=Money.zero)

    def __post_init__(self):
        if not isinstance(self.amount, Money):
            self.amount = Money(self.amount)

    def sum(self) -> Money:
        return self.amount


@dataclass
class DerivedAccount:
    """Leaf account whose balance is an expression over other accounts."""

    expression: Expr

    def __post_init__(self):
        if isinstance(self.expression, str):
            self.expression = parse_expression(self.expression)

    def sum(self) -> Money:
        # Derived accounts store nothing; see Accounts.eval for their value.
        return Money.zero()


Account = Union[SimpleAccount, DerivedAccount]
Node = Union["Accounts", SimpleAccount, DerivedAccount]


def _split(path: str) -> tuple[str, str | None]:
    """Split on the first separator: ``a:b:c`` -> ``("a", "b:c")``, ``a`` -> ``("a", None)``."""
    head, sep, rest = path.partition(SEPARATOR)
    return head, (rest if sep else None)


def _join(prefix: str, name: str) -> str:
    return f"{prefix}{SEPARATOR}{name}" if prefix else name


class Accounts:
    """A tree node: named children that are subtrees or leaf accounts."""

    def __init__(self, children: dict[str, Node] | None = None):
        self.children: dict[str, Node] = dict(children or {})

    @classmethod
    def root(cls) -> Accounts:
        return cls()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, path: str) -> Node:
        """Resolve *path* to a subtree or leaf.

        Raises:
            InvalidAccountName: If any segment is unknown, or the path
                continues past a leaf.
        """
        head, rest = _split(path)
        if head not in self.children:
            raise InvalidAccountName(path)
        child = self.children[head]
        if rest is None:
            return child
        if isinstance(child, Accounts):
            return child.get(rest)
        if rest == "":
            return child
        raise InvalidAccountName(rest)

    def leaf(self, path: str) -> Account:
        """Resolve *path* and require a leaf account."""
        node = self.get(path)
        if isinstance(node, Accounts):
            raise UnwrapNode(path)
        return node

    def __contains__(self, path: str) -> bool:
        try:
            self.get(path)
        except InvalidAccountName:
            return False
        return True

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def sum(self) -> Money:
        """Sum of stored balances under this node (derived leaves add zero)."""
        return sum((child.sum() for child in self.children.values()), Money.zero())

    def items(self, prefix: str = "") -> Iterator[tuple[str, Account]]:
        """Yield ``(path, account)`` for every leaf, depth first."""
        for name, child in self.children.items():
            path = _join(prefix, name)
            if isinstance(child, Accounts):
                yield from child.items(path)
            else:
                yield path, child

    def paths(self) -> list[str]:
        """Every leaf path exactly once, depth first, in insertion order."""
        return [path for path, _ in self.items()]

    def balance(self, path: str) -> Money:
        """Current value of the leaf at *path*, evaluating derived accounts."""
        account = self.leaf(path)
        if isinstance(account, DerivedAccount):
            return evaluate(account.expression, self)
        return account.amount

    def eval(self) -> dict[str, Money]:
        """Map every leaf path to its current value."""
        result = {}
        for path, account in self.items():
            if isinstance(account, DerivedAccount):
                result[path] = evaluate(account.expression, self)
            else:
                result[path] = account.amount
        return result

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def create_account(self, path: str, account: Account) -> None:
        """Create a leaf at *path*, adding intermediate tree nodes as needed.

        Raises:
            AlreadyExists: If something already occupies the terminal path.
            InvalidAccountName: If the path runs through an existing leaf.
        """
        head, rest = _split(path)
        if rest is None:
            if head in self.children:
                raise AlreadyExists(path)
            self.children[head] = account
            return
        child = self.children.setdefault(head, Accounts())
        if isinstance(child, Accounts):
            child.create_account(rest, account)
        elif rest:
            raise InvalidAccountName(rest)

    def deposit(self, path: str, amount: Money) -> None:
        """Add *amount* (possibly negative) to the simple account at *path*.

        Raises:
            InvalidAccountName: If the path does not exist.
            UnwrapNode: If the path names a subtree.
            InvalidDeposit: If the path names a derived account.
        """
        account = self.leaf(path)
        if isinstance(account, DerivedAccount):
            raise InvalidDeposit(path, str(amount))
        account.amount = account.amount + amount

    def withdraw(self, path: str, amount: Money) -> None:
        self.deposit(path, -amount)

    def _require_simple(self, path: str) -> SimpleAccount:
        account = self.leaf(path)
        if isinstance(account, DerivedAccount):
            raise InvalidDeposit(path, "a transfer")
        return account

    def apply(self, transaction: Transaction) -> Money:
        """Move money for *transaction* and return the amount moved.

        Missing endpoints are created as empty simple accounts. Both ends are
        checked and the amount resolved before anything is mutated, so a
        failure leaves the tree as it was, including any accounts it would
        have created.
        """
        target = self
        missing = [p for p in (transaction.source, transaction.destination) if p not in self]
        if missing:
            # new accounts live on a copy until the transfer is known to succeed
            target = self.copy()
            for path in dict.fromkeys(missing):
                logger.debug("creating account {} for {}", path, transaction)
                target.create_account(path, SimpleAccount())

        source = target._require_simple(transaction.source)
        destination = target._require_simple(transaction.destination)
        amount = transaction.resolve(target)

        logger.trace("apply: {}", transaction)
        source.amount = source.amount - amount
        destination.amount = destination.amount + amount
        if target is not self:
            self.children = target.children
        return amount

    def validate(self) -> None:
        """Check that no tree key contains the path separator.

        Structural only: derived expressions are not checked here.
        """
        for name, child in self.children.items():
            if SEPARATOR in name:
                raise InvalidAccountName(name)
            if isinstance(child, Accounts):
                child.validate()

    def copy(self) -> Accounts:
        """Independent deep copy, safe to keep while this tree keeps changing."""
        return copy.deepcopy(self)

    # ------------------------------------------------------------------
    # Plain data conversion
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Accounts:
        """Build a tree from nested mappings.

        ``{"amount": n}`` is a simple account, ``{"expression": "a + b"}`` a
        derived one; any other mapping is a subtree. A bare number is accepted
        as shorthand for a simple account.
        """
        tree = cls()
        for name, value in (data or {}).items():
            tree.children[str(name)] = _node_from_value(value)
        return tree

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for name, child in self.children.items():
            if isinstance(child, Accounts):
                result[name] = child.to_dict()
            elif isinstance(child, DerivedAccount):
                result[name] = {"expression": str(child.expression)}
            else:
                result[name] = {"amount": str(child.amount.value)}
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Accounts):
            return NotImplemented
        return self.children == other.children

    def __repr__(self) -> str:
        return f"Accounts({self.children!r})"


def _node_from_value(value: Any) -> Node:
    if isinstance(value, (Accounts, SimpleAccount, DerivedAccount)):
        return value
    if isinstance(value, dict):
        if set(value) == {"amount"}:
            return SimpleAccount(Money(value["amount"]))
        if set(value) == {"expression"}:
            return DerivedAccount(value["expression"])
        return Accounts.from_dict(value)
    if value is None:
        return SimpleAccount()
    return SimpleAccount(Money(value))
