"""finplan — project a ledger of accounts forward under recurring rules."""

__version__ = "0.1.0"
