"""Ledger simulation engine — accounts, expressions, event streams, history."""

from .accounts import Account, Accounts, DerivedAccount, SimpleAccount
from .expression import Add, Expr, Id, Sub, evaluate, parse_expression
from .history import History, interest_source
from .merge import Peekable, SortedMerge
from .money import Money
from .streams import DateStream, Frequency, InterestStream, RepeatingTransaction
from .transactions import Amount, CompoundedInterest, Percent, Transaction, event_date, parse_amount

__all__ = [
    "Account",
    "Accounts",
    "Add",
    "Amount",
    "CompoundedInterest",
    "DateStream",
    "DerivedAccount",
    "Expr",
    "Frequency",
    "History",
    "Id",
    "InterestStream",
    "Money",
    "Peekable",
    "Percent",
    "RepeatingTransaction",
    "SimpleAccount",
    "SortedMerge",
    "Sub",
    "Transaction",
    "evaluate",
    "event_date",
    "interest_source",
    "parse_amount",
    "parse_expression",
]
