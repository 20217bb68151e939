"""
Finplan exception hierarchy.

All finplan exceptions inherit from FinplanError, making it easy for consumers
to catch library-level errors while still distinguishing specific failure modes.
Ledger errors are unrecoverable at the point they occur: they propagate up
through whatever triggered them (tree construction, deposit, transaction
application or a simulation step) and are never retried.
"""


class FinplanError(Exception):
    """Base exception class for all finplan errors."""


class ConfigurationError(FinplanError):
    """Raised for configuration errors (missing keys, invalid values)."""


class PlanError(ConfigurationError):
    """Raised when a plan document cannot be read or does not validate."""


class LedgerError(FinplanError):
    """Base class for account tree and simulation errors."""


class InvalidAccountName(LedgerError):
    """A path does not resolve, or a segment contains ':'."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"invalid account name: '{path}'")


class AlreadyExists(LedgerError):
    """An account already exists at the requested path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"an account already exists at the path {path}")


class InvalidDeposit(LedgerError):
    """Deposit or withdrawal attempted against a derived account."""

    def __init__(self, path: str, amount: str):
        self.path = path
        self.amount = amount
        super().__init__(f"invalid deposit of {amount} to {path}, {path} is a derived account")


class UnwrapNode(LedgerError):
    """A tree node was used where a leaf account was required."""

    def __init__(self, path: str = ""):
        self.path = path
        super().__init__(f"'{path}' is a group of accounts, not an account" if path else "expected a leaf account")


class ExpressionParseError(LedgerError, ValueError):
    """Expression text does not conform to the grammar."""

    def __init__(self, text: str, position: int, message: str):
        self.text = text
        self.position = position
        super().__init__(f"cannot parse expression {text!r} at position {position}: {message}")
