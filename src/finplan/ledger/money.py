"""Money — a Decimal backed quantity for all ledger arithmetic.

Balances are compounded over hundreds of simulated periods, so they never
touch native floats. Floats handed in at the edges (YAML numbers) are
converted through ``str`` to keep their shortest decimal spelling.
"""

from __future__ import annotations

import re
from decimal import Decimal
from functools import total_ordering
from typing import Union

MoneyLike = Union["Money", Decimal, int, float, str]

# [[fill]align][sign][0][width][rest], rest being grouping, precision and type
_FORMAT_SPEC = re.compile(r"(?P<align>.?[<>^])?(?P<sign>[+\- ])?(?P<zero>0)?(?P<width>\d+)?(?P<rest>.*)", re.DOTALL)


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Convert *value* to a Decimal without going through binary floating point."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a monetary value")
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@total_ordering
class Money:
    """Immutable monetary amount."""

    __slots__ = ("_value",)

    def __init__(self, value: MoneyLike = 0):
        if isinstance(value, Money):
            value = value._value
        self._value = to_decimal(value)

    @classmethod
    def zero(cls) -> Money:
        return cls(0)

    @property
    def value(self) -> Decimal:
        return self._value

    def mul_percent(self, rate: Decimal | int | float | str) -> Money:
        """Scale by a fractional rate (``Decimal("0.1")`` is ten percent)."""
        return Money(self._value * to_decimal(rate))

    def to_float(self) -> float:
        """Float view for presentation only."""
        return float(self._value)

    def __copy__(self) -> Money:
        return self

    def __deepcopy__(self, memo: dict) -> Money:
        return self

    # --- arithmetic -----------------------------------------------------

    def __add__(self, other: object) -> Money:
        if isinstance(other, Money):
            return Money(self._value + other._value)
        if isinstance(other, int) and not isinstance(other, bool):
            return Money(self._value + other)
        return NotImplemented

    # sum() starts from int 0
    __radd__ = __add__

    def __sub__(self, other: object) -> Money:
        if isinstance(other, Money):
            return Money(self._value - other._value)
        if isinstance(other, int) and not isinstance(other, bool):
            return Money(self._value - other)
        return NotImplemented

    def __neg__(self) -> Money:
        return Money(-self._value)

    def __abs__(self) -> Money:
        return Money(abs(self._value))

    # --- comparison -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Money):
            return self._value == other._value
        if isinstance(other, (int, Decimal)) and not isinstance(other, bool):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        if isinstance(other, Money):
            return self._value < other._value
        if isinstance(other, (int, Decimal)) and not isinstance(other, bool):
            return self._value < other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __bool__(self) -> bool:
        return bool(self._value)

    # --- display --------------------------------------------------------

    def __format__(self, spec: str) -> str:
        """Format as ``$`` followed by the amount.

        Fill, alignment and width pad the whole text, so ``f"{m:>10}"`` gives
        ``"     $1.00"``. Sign, grouping, precision and type apply to the
        amount, which keeps two decimals unless told otherwise. A zero-padded
        width pads the digits after the ``$``.
        """
        if not spec:
            return str(self)
        m = _FORMAT_SPEC.fullmatch(spec)
        rest = m["rest"]
        if not rest.strip(",_"):
            rest += ".2f"
        sign = m["sign"] or ""
        if m["zero"] and m["width"] and not m["align"]:
            return f"${self._value:{sign}0{max(int(m['width']) - 1, 1)}{rest}}"
        text = f"${self._value:{sign}{rest}}"
        return format(text, (m["align"] or "") + (m["width"] or ""))

    def __str__(self) -> str:
        return f"${self._value:.2f}"

    def __repr__(self) -> str:
        return f"Money('{self._value}')"
