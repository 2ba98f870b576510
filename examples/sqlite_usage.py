#!/usr/bin/env python3
"""
Example: Chart of accounts and financial reports on SQLite

Seeds a tenant's default chart, adds a sub-account, stores a few posted
journal entries and prints the four standard reports.
"""

import os
import sys
import uuid
from decimal import Decimal
from datetime import datetime, timezone, date

# Add the project root to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from core_accounting.config import AccountingConfig
from core_accounting.storage import create_storage
from core_accounting.logging_config import setup_logging_from_config
from core_accounting.accounts import ChartOfAccountsManager, StorageAccountRepository
from core_accounting.ledger import GeneralLedger, JournalEntry, JournalEntryLine, JournalEntryStatus
from core_accounting.reporting import FinancialReportingEngine
from core_accounting.errors import AccountingError


TENANT = "demo-company"


def post(ledger, number, entry_date, description, lines):
    now = datetime.now(timezone.utc)
    ledger.save_entry(JournalEntry(
        id=str(uuid.uuid4()),
        created_at=now,
        updated_at=now,
        tenant_id=TENANT,
        entry_number=number,
        entry_date=entry_date,
        description=description,
        status=JournalEntryStatus.POSTED,
        lines=[
            JournalEntryLine(account_id=account_id, debit=Decimal(debit), credit=Decimal(credit))
            for account_id, debit, credit in lines
        ]
    ))


def main():
    print("Core Accounting - SQLite Example")
    print("=" * 60)

    # 1. Configuration
    print("\n1. Configuration")
    config = AccountingConfig()
    setup_logging_from_config(config)
    print(f"   Database URL: {config.database_url}")
    print(f"   Max hierarchy depth: {config.max_hierarchy_depth}")

    # 2. Storage and services
    print("\n2. Storage and services")
    storage = create_storage(config)
    repository = StorageAccountRepository(storage)
    manager = ChartOfAccountsManager(repository, config)
    ledger = GeneralLedger(storage, account_lookup=repository)
    engine = FinancialReportingEngine(repository, ledger, config)

    # 3. Default chart
    print("\n3. Default chart")
    created = manager.seed_default_accounts(TENANT)
    print(f"   Seeded {created} default accounts")

    by_number = {row['account_number']: row for row in manager.list_accounts(TENANT)}
    checking = by_number["1010"]
    equity = by_number["3100"]
    sales = by_number["4000"]
    rent = by_number["6060"]

    try:
        payroll = manager.create_account(TENANT, {
            "name": "Payroll Sub-account",
            "account_type": "Bank",
            "detail_type": "Checking",
            "parent_account_id": checking['id'],
        })
        print(f"   Created {payroll.full_path}")
    except AccountingError as e:
        print(f"   Could not create sub-account: {e}")

    # 4. Posted journal entries
    print("\n4. Posted journal entries")
    post(ledger, "JE-0001", date(2025, 1, 1), "Owner investment",
         [(checking['id'], "10000", "0"), (equity['id'], "0", "10000")])
    post(ledger, "JE-0002", date(2025, 1, 10), "Product sales",
         [(checking['id'], "2500", "0"), (sales['id'], "0", "2500")])
    post(ledger, "JE-0003", date(2025, 1, 15), "January rent",
         [(rent['id'], "1200", "0"), (checking['id'], "0", "1200")])
    print("   Stored 3 entries")

    # 5. Reports
    print("\n5. Reports")
    trial_balance = engine.trial_balance(TENANT, as_of_date="2025-01-31")
    print(f"   Trial balance: debits {trial_balance.totals.total_debits}, "
          f"credits {trial_balance.totals.total_credits}, "
          f"balanced={trial_balance.is_balanced}")

    account_ledger = engine.account_ledger(TENANT, checking['id'], start_date="2025-01-05")
    print(f"   Checking ledger: opening {account_ledger.opening_balance}, "
          f"closing {account_ledger.closing_balance}")
    for row in account_ledger.lines:
        print(f"     {row.date.date()} {row.entry_number} {row.description}: {row.balance}")

    income = engine.income_statement(TENANT, "2025-01-01", "2025-01-31")
    print(f"   Income statement: gross profit {income.gross_profit}, net income {income.net_income}")

    sheet = engine.balance_sheet(TENANT, as_of_date="2025-01-31")
    print(f"   Balance sheet: assets {sheet.totals.total_assets}, "
          f"liabilities and equity {sheet.totals.total_liabilities_and_equity}, "
          f"balanced={sheet.is_balanced}")

    # 6. Cleanup
    print("\n6. Cleanup")
    storage.close()
    print("   Storage connection closed")
    print("=" * 60)


if __name__ == "__main__":
    main()
