"""Pydantic models for plan documents.

A plan document is a mapping with an ``accounts`` tree and named ``rules``::

    accounts:
      assets:
        bank: {amount: 5000}
      net_worth: {expression: "assets - liabilities"}
    rules:
      salary:   {type: income, amount: 3000, to: "assets:bank", frequency: biweekly}
      savings:  {type: transfer, amount: "10%", from: "assets:bank", to: "assets:savings"}
      interest: {type: interest, account: "assets:savings", rate: 0.04, frequency: monthly}

The older ``assets`` / ``liabilities`` / ``income`` sections are still
understood: each asset is ``{amount, roi}``, each liability
``{Loan: {amount, interest}}`` and each income source one of
``{Monthly: ...}``, ``{BiWeekly: ...}`` or ``{Once: {amount, date}}``.
Rules written as ``{Deposit: {amount, from, to}}`` route an income source
into an account.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from finplan.ledger.money import to_decimal
from finplan.ledger.streams import Frequency
from finplan.ledger.transactions import parse_amount


def _decimal(v: Any) -> Any:
    if isinstance(v, (int, float, str)) and not isinstance(v, bool):
        return to_decimal(v)
    return v


def _amount(v: Any) -> Any:
    try:
        parse_amount(v)
    except TypeError as e:
        raise ValueError(str(e)) from e
    return v


# YAML floats go through str so 0.04 stays 0.04
DecimalValue = Annotated[Decimal, BeforeValidator(_decimal)]
AmountValue = Annotated[Union[int, float, str], BeforeValidator(_amount)]


class _RuleModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    frequency: Frequency = Frequency.MONTHLY
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    on_date: dt.date | None = Field(default=None, alias="date")

    @field_validator("frequency", mode="before")
    @classmethod
    def _parse_frequency(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Frequency.parse(v)
        return v

    @model_validator(mode="after")
    def _check_dates(self):
        if self.on_date is not None:
            if self.start_date is not None and self.start_date != self.on_date:
                raise ValueError("give either 'date' or 'start_date', not both")
            self.start_date = self.on_date
        if self.frequency is Frequency.ONCE and self.start_date is None:
            raise ValueError("a one-off rule needs a 'date'")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(f"end_date {self.end_date} is before start_date {self.start_date}")
        return self


class TransferRuleModel(_RuleModel):
    type: Literal["transfer"]
    amount: AmountValue
    source: str = Field(alias="from")
    destination: str = Field(alias="to")


class IncomeRuleModel(_RuleModel):
    type: Literal["income"]
    amount: AmountValue
    destination: str = Field(alias="to")
    source: str | None = Field(default=None, alias="from")


class InterestRuleModel(_RuleModel):
    type: Literal["interest"]
    account: str
    rate: DecimalValue
    frequency: Frequency = Frequency.ANNUALLY


RuleModel = Annotated[
    Union[TransferRuleModel, IncomeRuleModel, InterestRuleModel],
    Field(discriminator="type"),
]


class LoanModel(BaseModel):
    amount: DecimalValue
    interest: DecimalValue


class LegacyAsset(BaseModel):
    """``assets: {house: {amount: 300000, roi: 0.03}}``"""

    amount: DecimalValue
    roi: DecimalValue = Decimal(0)


class LegacyLiability(BaseModel):
    """``liabilities: {mortgage: {Loan: {amount: 200000, interest: 0.04}}}``"""

    model_config = ConfigDict(populate_by_name=True)

    loan: LoanModel = Field(alias="Loan")


class LegacyIncomeTerms(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    amount: DecimalValue
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    on_date: dt.date | None = Field(default=None, alias="date")


class LegacyIncome(BaseModel):
    """``income: {job: {Monthly: {amount: 3000, start_date: 2025-01-01}}}``

    Exactly one of ``Monthly``, ``BiWeekly`` or ``Once`` is given.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    monthly: LegacyIncomeTerms | None = Field(default=None, alias="Monthly")
    biweekly: LegacyIncomeTerms | None = Field(default=None, alias="BiWeekly")
    once: LegacyIncomeTerms | None = Field(default=None, alias="Once")

    @model_validator(mode="after")
    def _one_schedule(self):
        given = [f for f in ("monthly", "biweekly", "once") if getattr(self, f) is not None]
        if len(given) != 1:
            raise ValueError("an income source needs exactly one of Monthly, BiWeekly or Once")
        if self.once is not None and self.once.on_date is None:
            raise ValueError("a Once income needs a 'date'")
        return self

    @property
    def frequency(self) -> Frequency:
        if self.monthly is not None:
            return Frequency.MONTHLY
        if self.biweekly is not None:
            return Frequency.BIWEEKLY
        return Frequency.ONCE

    @property
    def terms(self) -> LegacyIncomeTerms:
        return self.monthly or self.biweekly or self.once


class LegacyDeposit(BaseModel):
    """``rules: {save: {Deposit: {amount: 500, from: job, to: "assets:bank"}}}``"""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    amount: DecimalValue
    source: str = Field(alias="from")
    destination: str = Field(alias="to")


class PlanDocument(BaseModel):
    """Root of a plan file."""

    model_config = ConfigDict(extra="forbid")

    accounts: dict[str, Any] = {}
    rules: dict[str, RuleModel] = {}
    assets: dict[str, LegacyAsset] = {}
    liabilities: dict[str, LegacyLiability] = {}
    income: dict[str, LegacyIncome] = {}
    deposits: dict[str, LegacyDeposit] = {}

    @model_validator(mode="before")
    @classmethod
    def _split_deposit_rules(cls, data: Any) -> Any:
        # Older files tag rules by variant name (``{Deposit: {...}}``) instead of ``type``
        if not isinstance(data, dict) or not isinstance(data.get("rules"), dict):
            return data
        rules, deposits = {}, dict(data.get("deposits") or {})
        for name, rule in data["rules"].items():
            if isinstance(rule, dict) and "type" not in rule and set(rule) == {"Deposit"}:
                deposits[name] = rule["Deposit"]
            else:
                rules[name] = rule
        return {**data, "rules": rules, "deposits": deposits}

    @field_validator("accounts", "rules", "assets", "liabilities", "income", "deposits", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v
