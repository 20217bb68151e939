"""Checkpoint date sequences for driving a ``History``."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date
from itertools import islice

from finplan.ledger.streams import DateStream, Frequency, add_years


def yearly_checkpoints(start_year: int, count: int) -> Iterator[date]:
    """January 1st of *count* consecutive years starting at *start_year*."""
    start = date(start_year, 1, 1)
    for offset in range(count):
        yield add_years(start, offset)


def stepped_checkpoints(start: date, frequency: Frequency | str, count: int) -> Iterator[date]:
    """*count* dates from *start* stepping by *frequency* (a one-off yields one date)."""
    return islice(DateStream(start, Frequency.parse(frequency)), count)
