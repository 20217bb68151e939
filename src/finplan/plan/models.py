"""Plan — a starting ledger plus the recurring rules that drive it forward."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from loguru import logger

from finplan.ledger.accounts import Accounts, DerivedAccount
from finplan.ledger.expression import references
from finplan.ledger.history import History
from finplan.ledger.merge import SortedMerge
from finplan.ledger.streams import DateStream, Frequency, InterestStream, RepeatingTransaction
from finplan.ledger.transactions import Amount, CompoundedInterest, Transaction, event_date

INCOME_PREFIX = "income"


@dataclass(frozen=True)
class TransferRule:
    """Move ``amount`` from ``source`` to ``destination`` on a schedule.

    Income is a transfer whose source is an ``income:<name>`` account.
    """

    name: str
    amount: Amount
    source: str
    destination: str
    frequency: Frequency = Frequency.MONTHLY
    start: date | None = None
    end: date | None = None

    def events(self, today: date) -> RepeatingTransaction:
        dates = DateStream(self.start or today, self.frequency, self.end)
        return RepeatingTransaction(self.amount, self.source, self.destination, dates)


@dataclass(frozen=True)
class InterestRule:
    """Compound ``rate`` (annual equivalent, fractional) into ``account``."""

    name: str
    account: str
    rate: Decimal
    frequency: Frequency = Frequency.ANNUALLY
    start: date | None = None
    end: date | None = None

    def events(self, today: date) -> InterestStream:
        dates = DateStream(self.start or today, self.frequency, self.end)
        return InterestStream(self.rate, self.account, dates, self.frequency)


Rule = TransferRule | InterestRule


@dataclass
class Plan:
    """Starting accounts and named rules.

    Rules are read once and never change during a run. ``today`` is always
    passed in by the caller: it is the default start for rules without one.
    """

    accounts: Accounts = field(default_factory=Accounts)
    rules: dict[str, Rule] = field(default_factory=dict)

    @property
    def transfer_rules(self) -> list[TransferRule]:
        return [r for r in self.rules.values() if isinstance(r, TransferRule)]

    @property
    def interest_rules(self) -> list[InterestRule]:
        return [r for r in self.rules.values() if isinstance(r, InterestRule)]

    def validate(self) -> None:
        """Structural check of the account tree (see ``Accounts.validate``)."""
        self.accounts.validate()

    def unresolved_references(self) -> dict[str, list[str]]:
        """Derived accounts whose expressions name paths that do not exist yet.

        Not an error: rules may create those accounts once the run starts.
        """
        missing: dict[str, list[str]] = {}
        for path, account in self.accounts.items():
            if isinstance(account, DerivedAccount):
                unknown = [ref for ref in references(account.expression) if ref not in self.accounts]
                if unknown:
                    missing[path] = unknown
        return missing

    def transactions(self, today: date) -> SortedMerge[Transaction]:
        return SortedMerge((rule.events(today) for rule in self.transfer_rules), key=event_date)

    def interest(self, today: date) -> SortedMerge[CompoundedInterest]:
        return SortedMerge((rule.events(today) for rule in self.interest_rules), key=event_date)

    def history(self, dates: Iterable[date], today: date) -> History:
        """Simulate from a copy of the starting accounts over *dates*."""
        logger.debug(
            "simulating {} accounts under {} transfer and {} interest rules",
            len(self.accounts.paths()),
            len(self.transfer_rules),
            len(self.interest_rules),
        )
        return History(
            self.accounts.copy(),
            self.transactions(today),
            self.interest(today),
            dates,
            start_date=today,
        )
