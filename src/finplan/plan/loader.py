"""Read plan documents (YAML or JSON) into ``Plan`` values."""

from __future__ import annotations

import json
import os
from typing import Any

import yaml
from loguru import logger
from pydantic import ValidationError

from finplan.core.exceptions import LedgerError, PlanError
from finplan.core.types import PathLike
from finplan.ledger.accounts import Accounts, SimpleAccount
from finplan.ledger.money import Money
from finplan.ledger.streams import Frequency
from finplan.ledger.transactions import parse_amount

from .models import INCOME_PREFIX, InterestRule, Plan, Rule, TransferRule
from .schema import IncomeRuleModel, InterestRuleModel, PlanDocument, TransferRuleModel


def load_plan(path: PathLike) -> Plan:
    """Load and validate the plan at *path*.

    Raises:
        PlanError: If the file is missing, unreadable, or does not describe
            a valid plan.
    """
    path = os.fspath(path)
    if not os.path.exists(path):
        raise PlanError(f"plan file not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    try:
        with open(path) as f:
            data = json.load(f) if ext == ".json" else yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise PlanError(f"cannot read plan {path}: {e}") from e

    plan = parse_plan(data or {})
    logger.info("loaded plan {}: {} accounts, {} rules", path, len(plan.accounts.paths()), len(plan.rules))
    return plan


def parse_plan(data: dict[str, Any]) -> Plan:
    """Build a validated ``Plan`` from already-parsed document data."""
    if not isinstance(data, dict):
        raise PlanError(f"a plan must be a mapping, got {type(data).__name__}")
    try:
        document = PlanDocument.model_validate(data)
    except ValidationError as e:
        raise PlanError(f"invalid plan: {e}") from e

    try:
        accounts = Accounts.from_dict(document.accounts)
        rules = {name: _rule_from_model(name, model) for name, model in document.rules.items()}
        _merge_legacy_sections(document, accounts, rules)
        accounts.validate()
    except (LedgerError, ValueError, TypeError, ArithmeticError) as e:
        raise PlanError(f"invalid plan: {e}") from e

    return Plan(accounts=accounts, rules=rules)


def _rule_from_model(name: str, model: TransferRuleModel | IncomeRuleModel | InterestRuleModel) -> Rule:
    if isinstance(model, InterestRuleModel):
        return InterestRule(
            name=name,
            account=model.account,
            rate=model.rate,
            frequency=model.frequency,
            start=model.start_date,
            end=model.end_date,
        )
    source = model.source or f"{INCOME_PREFIX}:{name}"
    return TransferRule(
        name=name,
        amount=parse_amount(model.amount),
        source=source,
        destination=model.destination,
        frequency=model.frequency,
        start=model.start_date,
        end=model.end_date,
    )


def _merge_legacy_sections(document: PlanDocument, accounts: Accounts, rules: dict[str, Rule]) -> None:
    """Fold the older plan sections into accounts and rules.

    Assets and liabilities become balances with annual interest rules. Each
    ``Deposit`` drawing on an ``income`` source becomes a transfer on that
    source's schedule from ``income:<name>``.
    """
    for name, asset in document.assets.items():
        path = f"assets:{name}"
        accounts.create_account(path, SimpleAccount(Money(asset.amount)))
        if asset.roi:
            rules[f"{name} roi"] = InterestRule(f"{name} roi", path, asset.roi, Frequency.ANNUALLY)

    for name, liability in document.liabilities.items():
        path = f"liabilities:{name}"
        accounts.create_account(path, SimpleAccount(-Money(liability.loan.amount)))
        if liability.loan.interest:
            rules[f"{name} interest"] = InterestRule(
                f"{name} interest", path, liability.loan.interest, Frequency.ANNUALLY
            )

    deposited = set()
    for name, deposit in document.deposits.items():
        amount = Money(deposit.amount)
        income_name = deposit.source.removeprefix(f"{INCOME_PREFIX}:")
        income = document.income.get(income_name)
        if income is None:
            rules[name] = TransferRule(name, amount, deposit.source, deposit.destination)
            continue
        terms = income.terms
        if amount > Money(terms.amount):
            raise ValueError(f"deposit {name!r} of {amount} exceeds income {income_name!r} of {Money(terms.amount)}")
        deposited.add(income_name)
        rules[name] = TransferRule(
            name,
            amount,
            f"{INCOME_PREFIX}:{income_name}",
            deposit.destination,
            income.frequency,
            start=terms.on_date or terms.start_date,
            end=terms.end_date,
        )

    for name in sorted(document.income.keys() - deposited):
        logger.warning("income {!r} is never deposited into an account", name)
