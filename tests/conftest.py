"""Shared test fixtures for finplan."""

import os
import tempfile
from datetime import date

import pytest
import yaml

from finplan.ledger import Accounts, DerivedAccount, Money, SimpleAccount


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def ledger():
    """A small tree: two asset leaves, one liability and a derived net worth."""
    tree = Accounts.root()
    tree.create_account("assets:cash", SimpleAccount(Money(100)))
    tree.create_account("assets:bank", SimpleAccount(Money(400)))
    tree.create_account("liabilities:card", SimpleAccount(Money(-50)))
    tree.create_account("net", DerivedAccount("assets + liabilities"))
    return tree


@pytest.fixture
def plan_data():
    """Plan document matching the README example, with fixed start dates."""
    return {
        "accounts": {
            "assets": {"bank": {"amount": 5000}, "savings": {"amount": 0}},
            "liabilities": {"card": {"amount": 0}},
            "net_worth": {"expression": "assets + liabilities"},
        },
        "rules": {
            "salary": {
                "type": "income",
                "amount": 3000,
                "to": "assets:bank",
                "frequency": "biweekly",
                "start_date": date(2025, 1, 3),
            },
            "save": {
                "type": "transfer",
                "amount": "10%",
                "from": "assets:bank",
                "to": "assets:savings",
                "frequency": "monthly",
                "start_date": date(2025, 1, 10),
            },
            "savings interest": {
                "type": "interest",
                "account": "assets:savings",
                "rate": 0.04,
                "frequency": "monthly",
                "start_date": date(2025, 1, 31),
            },
        },
    }


@pytest.fixture
def plan_file(tmp_dir, plan_data):
    """Write plan_data to a YAML file and return its path."""
    path = os.path.join(tmp_dir, "input.yaml")
    with open(path, "w") as f:
        yaml.safe_dump(plan_data, f)
    return path
