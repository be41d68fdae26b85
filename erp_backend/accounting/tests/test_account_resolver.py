# accounting/tests/test_account_resolver.py

from __future__ import annotations

from django.test import TestCase

from accounting.models.account import Account
from accounting.services.account_resolver import resolve
from accounting.services.exceptions import AccountNotFound
from accounting.tests.helpers import create_account, create_active_chart, map_key


class AccountResolverTests(TestCase):
    def setUp(self):
        self.chart = create_active_chart()
        self.salaries = create_account(self.chart, "6210", "Sueldos y Salarios", Account.EXPENSE)
        self.equipment = create_account(self.chart, "1510", "Mobiliario y Equipo", Account.ASSET)

    def test_literal_code_resolves(self):
        self.assertEqual(resolve("1510"), self.equipment)

    def test_builtin_semantic_key_resolves_to_default_code(self):
        self.assertEqual(resolve("SALARIES_EXPENSE"), self.salaries)
        self.assertEqual(resolve("salaries expense"), self.salaries)

    def test_chart_mapping_wins_over_builtin_default(self):
        other = create_account(self.chart, "6220", "Sueldos Administrativos", Account.EXPENSE)
        map_key(self.chart, "SALARIES_EXPENSE", other)

        self.assertEqual(resolve("SALARIES_EXPENSE"), other)

    def test_normal_balance_derived_from_type(self):
        self.assertEqual(resolve("6210").normal_balance, Account.DEBIT)
        payable = create_account(self.chart, "2105", "Nómina por Pagar", Account.LIABILITY)
        self.assertEqual(resolve("2105"), payable)
        self.assertEqual(payable.normal_balance, Account.CREDIT)

    def test_unknown_code_raises_account_not_found(self):
        with self.assertRaises(AccountNotFound):
            resolve("9999")
        with self.assertRaises(AccountNotFound):
            resolve("")

    def test_inactive_account_raises_account_not_found(self):
        self.equipment.is_active = False
        self.equipment.save()

        with self.assertRaises(AccountNotFound):
            resolve("1510")

    def test_only_active_chart_is_searched(self):
        create_active_chart()  # deactivates self.chart

        with self.assertRaises(AccountNotFound):
            resolve("1510")
