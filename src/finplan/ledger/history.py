"""Time-stepped simulation driver.

``History`` walks a caller-supplied sequence of checkpoint dates. At each
checkpoint it applies every transaction due on or before that date, then every
interest accrual due on or before it, and yields a snapshot of the ledger.

Events sharing a date are resolved one at a time against the ledger as it
stands after the events merged ahead of them; a percentage transfer sees
every transfer applied before it in merge order. Transactions always go
before interest at the same checkpoint.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date

from loguru import logger

from .accounts import Accounts
from .merge import Peekable
from .money import Money
from .transactions import CompoundedInterest, Transaction

INTEREST_SOURCE_PREFIX = "equity:interest"


def interest_source(account: str) -> str:
    """Synthetic account that pays interest into *account*."""
    return f"{INTEREST_SOURCE_PREFIX}:{account}"


class History:
    """Pull-based sequence of ``(checkpoint, Accounts snapshot)`` pairs.

    Assumes the plan was validated up front. Any error while applying an
    event propagates to the caller and ends the run: nothing further is
    yielded.
    """

    def __init__(
        self,
        accounts: Accounts,
        transactions: Iterable[Transaction],
        interest: Iterable[CompoundedInterest],
        dates: Iterable[date],
        start_date: date | None = None,
    ):
        self._accounts = accounts
        self._current: date | None = start_date
        self._transactions = Peekable(transactions)
        self._interest = Peekable(interest)
        self._dates = iter(dates)
        self._failed = False

    @property
    def state(self) -> tuple[date | None, Accounts]:
        """Current ``(date, accounts)``; the tree is live, copy it to keep it."""
        return self._current, self._accounts

    def __iter__(self) -> Iterator[tuple[date, Accounts]]:
        return self

    def __next__(self) -> tuple[date, Accounts]:
        if self._failed:
            raise StopIteration
        checkpoint = next(self._dates)
        self._current = checkpoint
        try:
            applied = self._apply_transactions(checkpoint)
            accrued = self._apply_interest(checkpoint)
        except Exception:
            self._failed = True
            raise
        logger.debug("checkpoint {}: {} transactions, {} interest events", checkpoint, applied, accrued)
        return checkpoint, self._accounts.copy()

    def _apply_transactions(self, checkpoint: date) -> int:
        count = 0
        while (txn := self._transactions.peek(None)) is not None and txn.date <= checkpoint:
            next(self._transactions)
            self._accounts.apply(txn)
            count += 1
        return count

    def _apply_interest(self, checkpoint: date) -> int:
        count = 0
        while (event := self._interest.peek(None)) is not None and event.date <= checkpoint:
            next(self._interest)
            self._accounts.apply(self.interest_transaction(event))
            count += 1
        return count

    def interest_transaction(self, event: CompoundedInterest) -> Transaction:
        """Turn an accrual into a transfer from the account's interest source."""
        if event.account in self._accounts:
            earned = self._accounts.balance(event.account).mul_percent(event.rate)
        else:
            logger.debug("interest on missing account {}, accruing nothing", event.account)
            earned = Money.zero()
        logger.trace("interest: {} -> {}", event, earned)
        return Transaction(earned, interest_source(event.account), event.account, event.date)
