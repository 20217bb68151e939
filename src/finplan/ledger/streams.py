"""Lazy event streams that expand recurring rules into dated events.

Streams may be unbounded (a monthly rule with no end date never runs out), so
they are plain iterators: nothing is materialized until pulled, and a stream
cannot be rewound; build a new one instead.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum

from .money import to_decimal
from .transactions import Amount, CompoundedInterest, Transaction, parse_amount


class Frequency(str, Enum):
    """How often a rule repeats."""

    ANNUALLY = "annually"
    MONTHLY = "monthly"  # every 4 weeks
    BIWEEKLY = "biweekly"
    ONCE = "once"

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]

    def advance(self, current: date) -> date | None:
        """Next occurrence after *current*, or None for one-off rules."""
        if self is Frequency.ANNUALLY:
            return add_years(current, 1)
        if self is Frequency.MONTHLY:
            return current + timedelta(weeks=4)
        if self is Frequency.BIWEEKLY:
            return current + timedelta(weeks=2)
        return None

    @classmethod
    def parse(cls, value: Frequency | str) -> Frequency:
        if isinstance(value, Frequency):
            return value
        normalized = str(value).strip().lower().replace("-", "").replace("_", "")
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"unknown frequency: {value!r} (expected one of {[m.value for m in cls]})")


_PERIODS_PER_YEAR = {
    Frequency.ANNUALLY: 1,
    Frequency.MONTHLY: 13,
    Frequency.BIWEEKLY: 26,
    Frequency.ONCE: 1,
}


def add_years(current: date, years: int) -> date:
    """Same month and day *years* later; Feb 29 falls back to Feb 28."""
    try:
        return current.replace(year=current.year + years)
    except ValueError:
        return current.replace(year=current.year + years, day=28)


class DateStream:
    """Dates from *start* stepping by *frequency*, stopping before *end*.

    ``end`` is exclusive. A ``ONCE`` stream yields *start* and nothing else.
    """

    def __init__(self, start: date, frequency: Frequency, end: date | None = None):
        self.frequency = Frequency.parse(frequency)
        self.end = end
        self._next: date | None = start

    def __iter__(self) -> Iterator[date]:
        return self

    def __next__(self) -> date:
        current = self._next
        if current is None or (self.end is not None and current >= self.end):
            self._next = None
            raise StopIteration
        self._next = self.frequency.advance(current)
        return current


class RepeatingTransaction:
    """One ``Transaction`` per date of a date stream."""

    def __init__(self, amount: Amount, source: str, destination: str, dates: Iterable[date]):
        self.amount = amount
        self.source = source
        self.destination = destination
        self._dates = iter(dates)

    def __iter__(self) -> Iterator[Transaction]:
        return self

    def __next__(self) -> Transaction:
        return Transaction(self.amount, self.source, self.destination, next(self._dates))


class InterestStream:
    """One ``CompoundedInterest`` per date, at the per-period share of an annual rate."""

    def __init__(
        self,
        annual_rate: Decimal | float | str,
        account: str,
        dates: Iterable[date],
        frequency: Frequency = Frequency.ANNUALLY,
    ):
        self.account = account
        self.rate = to_decimal(annual_rate) / Frequency.parse(frequency).periods_per_year
        self._dates = iter(dates)

    def __iter__(self) -> Iterator[CompoundedInterest]:
        return self

    def __next__(self) -> CompoundedInterest:
        return CompoundedInterest(next(self._dates), self.rate, self.account)


def transfer_stream(
    amount: Amount,
    source: str,
    destination: str,
    start: date,
    frequency: Frequency,
    end: date | None = None,
) -> RepeatingTransaction:
    """Convenience: a ``RepeatingTransaction`` over a fresh ``DateStream``."""
    return RepeatingTransaction(parse_amount(amount), source, destination, DateStream(start, frequency, end))


def interest_stream(
    annual_rate: Decimal | float | str,
    account: str,
    start: date,
    frequency: Frequency,
    end: date | None = None,
) -> InterestStream:
    """Convenience: an ``InterestStream`` over a fresh ``DateStream``."""
    return InterestStream(annual_rate, account, DateStream(start, frequency, end), frequency)
