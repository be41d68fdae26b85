# accounting/management/commands/seed_chart.py

from django.core.management.base import BaseCommand
from django.db import transaction

from accounting.models.account import Account
from accounting.models.account_mapping import AccountMapping
from accounting.models.chart import ChartOfAccounts

CHART_CODE = "erp_standard"
CHART_NAME = "ERP Standard Chart"

# (code, name, type, normal balance or None for the type default)
ACCOUNTS = [
    # ASSETS
    ("1000", "Caja General", Account.ASSET, None),
    ("1010", "Banco", Account.ASSET, None),
    ("1100", "Cuentas por Cobrar", Account.ASSET, None),
    ("1510", "Mobiliario y Equipo", Account.ASSET, None),
    ("1520", "Vehículos", Account.ASSET, None),
    ("1530", "Maquinaria", Account.ASSET, None),
    ("1590", "Depreciación Acumulada", Account.ASSET, Account.CREDIT),  # contra-asset
    # LIABILITIES
    ("2105", "Nómina por Pagar", Account.LIABILITY, None),
    ("2310", "Retenciones TSS por Pagar", Account.LIABILITY, None),
    # EQUITY
    ("3000", "Capital Social", Account.EQUITY, None),
    # INCOME
    ("4910", "Ganancia por Revaluación de Activos", Account.INCOME, None),
    # EXPENSES
    ("6210", "Sueldos y Salarios", Account.EXPENSE, None),
    ("6310", "Gasto de Depreciación", Account.EXPENSE, None),
    ("6910", "Pérdida por Revaluación de Activos", Account.EXPENSE, None),
]

MAPPINGS = {
    "SALARIES_EXPENSE": "6210",
    "PAYROLL_WITHHOLDINGS_PAYABLE": "2310",
    "PAYROLL_PAYABLE": "2105",
    "DEPRECIATION_EXPENSE": "6310",
    "ACCUMULATED_DEPRECIATION": "1590",
    "REVALUATION_GAIN": "4910",
    "REVALUATION_LOSS": "6910",
}


class Command(BaseCommand):
    help = "Seed the active Chart of Accounts with the accounts and mappings the ledger calculators use"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding ERP Chart of Accounts...")

        chart, created = ChartOfAccounts.objects.get_or_create(
            code=CHART_CODE,
            defaults={"name": CHART_NAME, "is_active": True},
        )
        if not chart.is_active:
            chart.is_active = True
            chart.save()

        self.stdout.write("Created chart" if created else "Chart already exists")

        created_count = 0
        updated_count = 0

        for code, name, account_type, normal_balance in ACCOUNTS:
            normal_balance = normal_balance or Account.DEFAULT_NORMAL_BALANCE[account_type]
            acc, acc_created = Account.objects.get_or_create(
                chart=chart,
                code=code,
                defaults={
                    "name": name,
                    "account_type": account_type,
                    "normal_balance": normal_balance,
                    "is_active": True,
                },
            )

            if acc_created:
                created_count += 1
                continue

            if acc.name != name or not acc.is_active:
                acc.name = name
                acc.is_active = True
                acc.save(update_fields=["name", "is_active", "updated_at"])
                updated_count += 1

        for key, code in MAPPINGS.items():
            account = Account.objects.get(chart=chart, code=code)
            mapping = AccountMapping.objects.filter(chart=chart, key=key).first()
            if mapping is None:
                AccountMapping.objects.create(chart=chart, key=key, account=account)
            elif mapping.account_id != account.id:
                mapping.account = account
                mapping.save()

        self.stdout.write(
            self.style.SUCCESS(
                f"✔ Chart seeded ({created_count} new accounts, {updated_count} updated, "
                f"{len(MAPPINGS)} mappings)."
            )
        )
