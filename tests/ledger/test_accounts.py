"""Tests for finplan.ledger.accounts."""

from datetime import date

import pytest

from finplan.core.exceptions import AlreadyExists, InvalidAccountName, InvalidDeposit, UnwrapNode
from finplan.ledger import Accounts, DerivedAccount, Money, Percent, SimpleAccount, Transaction
from finplan.ledger.expression import Add, Id

DAY = date(2017, 1, 1)


class TestGet:
    def test_leaf(self, ledger):
        assert ledger.get("assets:cash") == SimpleAccount(Money(100))

    def test_subtree(self, ledger):
        node = ledger.get("assets")
        assert isinstance(node, Accounts)
        assert set(node.paths()) == {"cash", "bank"}

    def test_unknown_segment(self, ledger):
        with pytest.raises(InvalidAccountName):
            ledger.get("assets:gold")
        with pytest.raises(InvalidAccountName):
            ledger.get("equity")

    def test_path_past_leaf(self, ledger):
        with pytest.raises(InvalidAccountName):
            ledger.get("assets:cash:coins")

    def test_trailing_separator_on_leaf(self, ledger):
        assert ledger.get("assets:cash:") is ledger.get("assets:cash")

    def test_leaf_rejects_tree(self, ledger):
        with pytest.raises(UnwrapNode):
            ledger.leaf("assets")

    def test_contains(self, ledger):
        assert "assets:bank" in ledger
        assert "assets" in ledger
        assert "assets:gold" not in ledger


class TestSum:
    def test_root_sum(self, ledger):
        assert ledger.sum() == Money(450)

    def test_derived_counts_as_zero(self):
        tree = Accounts.root()
        tree.create_account("a", SimpleAccount(Money(5)))
        tree.create_account("b", DerivedAccount(Id("a")))
        assert tree.sum() == Money(5)
        assert tree.eval()["b"] == Money(5)

    def test_empty_root(self):
        assert Accounts.root().sum() == Money(0)
        assert Accounts.root().paths() == []

    def test_sum_matches_eval_for_simple_trees(self):
        tree = Accounts.root()
        for path, amount in [("a:b:c", 3), ("a:d", "4.25"), ("e", -10), ("a:b:f", 100)]:
            tree.create_account(path, SimpleAccount(Money(amount)))
        assert tree.sum() == sum(tree.eval().values())


class TestCreateAccount:
    def test_creates_intermediate_nodes(self):
        tree = Accounts.root()
        tree.create_account("assets:retirement:ira", SimpleAccount(Money(1)))
        assert isinstance(tree.get("assets:retirement"), Accounts)
        assert tree.paths() == ["assets:retirement:ira"]

    def test_already_exists(self, ledger):
        with pytest.raises(AlreadyExists):
            ledger.create_account("assets:cash", SimpleAccount())

    def test_through_leaf(self, ledger):
        with pytest.raises(InvalidAccountName):
            ledger.create_account("assets:cash:coins", SimpleAccount())


class TestDeposit:
    def test_deposit_and_withdraw_roundtrip(self, ledger):
        for amount in [Money(0), Money("12.34"), Money(-80), Money(10**9)]:
            before = ledger.balance("assets:bank")
            ledger.deposit("assets:bank", amount)
            ledger.withdraw("assets:bank", amount)
            assert ledger.balance("assets:bank") == before

    def test_negative_deposit_withdraws(self, ledger):
        ledger.deposit("assets:cash", Money(-30))
        assert ledger.balance("assets:cash") == Money(70)

    def test_derived_rejected(self, ledger):
        with pytest.raises(InvalidDeposit) as exc_info:
            ledger.deposit("net", Money(1))
        assert exc_info.value.path == "net"

    def test_tree_rejected(self, ledger):
        with pytest.raises(UnwrapNode):
            ledger.deposit("assets", Money(1))

    def test_missing_rejected(self, ledger):
        with pytest.raises(InvalidAccountName):
            ledger.deposit("assets:gold", Money(1))


class TestValidate:
    def test_valid(self, ledger):
        ledger.validate()

    def test_separator_in_key(self):
        tree = Accounts({"assets": Accounts({"bad:name": SimpleAccount()})})
        with pytest.raises(InvalidAccountName) as exc_info:
            tree.validate()
        assert exc_info.value.path == "bad:name"


class TestApply:
    def test_moves_money(self, ledger):
        ledger.apply(Transaction(Money(25), "assets:bank", "assets:cash", DAY))
        assert ledger.balance("assets:bank") == Money(375)
        assert ledger.balance("assets:cash") == Money(125)

    def test_conserves_common_ancestor(self, ledger):
        before = ledger.get("assets").sum()
        ledger.apply(Transaction(Money("33.33"), "assets:cash", "assets:bank", DAY))
        assert ledger.get("assets").sum() == before
        assert ledger.sum() == Money(450)

    def test_creates_missing_accounts(self, ledger):
        ledger.apply(Transaction(Money(1000), "income:salary", "assets:bank", DAY))
        assert ledger.balance("income:salary") == Money(-1000)
        assert ledger.balance("assets:bank") == Money(1400)

    def test_percent_of_current_balance(self):
        tree = Accounts.root()
        tree.create_account("a", SimpleAccount(Money(200)))
        moved = tree.apply(Transaction(Percent("0.1"), "a", "b", DAY))
        assert moved == Money(20)
        assert tree.balance("a") == Money(180)
        assert tree.balance("b") == Money(20)

    def test_percent_of_derived_source_fails_without_mutation(self, ledger):
        before = ledger.copy()
        with pytest.raises(InvalidDeposit):
            ledger.apply(Transaction(Percent("0.5"), "net", "assets:cash", DAY))
        assert ledger == before

    def test_derived_destination_is_atomic(self, ledger):
        before = ledger.copy()
        with pytest.raises(InvalidDeposit):
            ledger.apply(Transaction(Money(10), "assets:cash", "net", DAY))
        assert ledger == before

    def test_failed_apply_creates_no_accounts(self, ledger):
        before = ledger.copy()
        with pytest.raises(InvalidDeposit):
            ledger.apply(Transaction(Money(10), "income:job", "net", DAY))
        assert "income:job" not in ledger
        assert ledger == before

    def test_unreachable_destination_creates_no_source(self, ledger):
        before = ledger.copy()
        with pytest.raises(InvalidAccountName):
            ledger.apply(Transaction(Money(10), "income:job", "assets:cash:sub", DAY))
        assert ledger.paths() == before.paths()

    def test_created_accounts_kept_on_success(self, ledger):
        ledger.apply(Transaction(Money(10), "income:job", "assets:cash", DAY))
        assert ledger.balance("income:job") == Money(-10)
        assert ledger.balance("assets:cash") == Money(110)


class TestEval:
    def test_every_leaf(self, ledger):
        assert ledger.eval() == {
            "assets:cash": Money(100),
            "assets:bank": Money(400),
            "liabilities:card": Money(-50),
            "net": Money(450),
        }

    def test_paths_every_leaf_once(self, ledger):
        assert sorted(ledger.paths()) == sorted(["assets:cash", "assets:bank", "liabilities:card", "net"])

    def test_derived_unknown_reference(self):
        tree = Accounts.root()
        tree.create_account("total", DerivedAccount(Add(Id("a"), Id("b"))))
        with pytest.raises(InvalidAccountName):
            tree.eval()


class TestCopyAndConversion:
    def test_copy_is_independent(self, ledger):
        snapshot = ledger.copy()
        ledger.deposit("assets:cash", Money(1))
        assert snapshot.balance("assets:cash") == Money(100)
        assert ledger.balance("assets:cash") == Money(101)

    def test_from_dict(self):
        tree = Accounts.from_dict(
            {
                "assets": {"cash": {"amount": 10}, "bank": 20},
                "net": {"expression": "assets"},
                "empty": None,
            }
        )
        assert tree.eval() == {
            "assets:cash": Money(10),
            "assets:bank": Money(20),
            "net": Money(30),
            "empty": Money(0),
        }

    def test_to_dict_roundtrip(self, ledger):
        assert Accounts.from_dict(ledger.to_dict()) == ledger
