"""Dated ledger events: transfers between accounts and interest accruals."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Union

from .money import Money, to_decimal

if TYPE_CHECKING:
    from .accounts import Accounts


@dataclass(frozen=True)
class Percent:
    """A share of the source account's balance at the moment of transfer.

    ``rate`` is a fraction: ``Percent(Decimal("0.1"))`` moves ten percent.
    """

    rate: Decimal

    def __post_init__(self):
        object.__setattr__(self, "rate", to_decimal(self.rate))

    def __str__(self) -> str:
        return f"{self.rate * 100:f}%"


Amount = Union[Money, Percent]


def parse_amount(value: Amount | Decimal | int | float | str) -> Amount:
    """Interpret a plan value as an Amount.

    ``"10%"`` becomes ``Percent(0.1)``; numbers and numeric strings become Money.
    """
    if isinstance(value, (Money, Percent)):
        return value
    if isinstance(value, str):
        text = value.strip().replace(",", "").lstrip("$")
        try:
            if text.endswith("%"):
                return Percent(Decimal(text[:-1].strip()) / 100)
            return Money(Decimal(text))
        except InvalidOperation as e:
            raise ValueError(f"not an amount: {value!r}") from e
    return Money(value)


@dataclass(frozen=True)
class Transaction:
    """Move ``amount`` from ``source`` to ``destination`` on ``txn_date``."""

    amount: Amount
    source: str
    destination: str
    txn_date: date

    @property
    def date(self) -> date:
        return self.txn_date

    def resolve(self, accounts: Accounts) -> Money:
        """Money this transaction moves given the current state of *accounts*.

        Percentages are taken of the evaluated source balance right now, so call
        this before mutating either side.
        """
        if isinstance(self.amount, Percent):
            return accounts.balance(self.source).mul_percent(self.amount.rate)
        return self.amount

    def __str__(self) -> str:
        return f"[{self.source}] sending ({self.amount}) to [{self.destination}] on {{{self.txn_date}}}"


@dataclass(frozen=True)
class CompoundedInterest:
    """Accrue ``rate`` (per period, fractional) on ``account`` on ``event_date``."""

    event_date: date
    rate: Decimal
    account: str

    def __post_init__(self):
        object.__setattr__(self, "rate", to_decimal(self.rate))

    @property
    def date(self) -> date:
        return self.event_date

    def __str__(self) -> str:
        return f"{self.rate * 100:.2f}% for [{self.account}] on ({self.event_date})"


def event_date(event: Transaction | CompoundedInterest) -> date:
    """Sort key shared by both event kinds."""
    return event.date
