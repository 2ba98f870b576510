"""
Financial Reporting Engine Module

Aggregates posted journal lines into the four standard double-entry
reports: trial balance, account ledger, income statement and balance
sheet. The engine only reads; balances are always re-summed from the
ledger (or taken from current_balance for an undated trial balance).

Sign rule used everywhere: a line against a DEBIT-normal account
contributes debit - credit, against a CREDIT-normal account credit - debit.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Iterable, List, Optional
import logging

from .accounts import Account, AccountRepository
from .config import AccountingConfig, get_config
from .dates import (
    DateInput, end_of_day, parse_date_range, parse_report_date, start_of_day, today
)
from .errors import NotFoundError
from .ledger import LedgerLineReader, PostedLine
from .taxonomy import (
    COGS_TYPES, EXPENSE_TYPES, PROFIT_AND_LOSS_TYPES, REVENUE_TYPES,
    AccountType, AccountTypeGroup, NormalBalance
)


logger = logging.getLogger(__name__)

ZERO = Decimal('0')

BALANCE_SHEET_GROUPS = (
    AccountTypeGroup.ASSETS, AccountTypeGroup.LIABILITIES, AccountTypeGroup.EQUITY
)


def signed_amount(normal_balance: NormalBalance, debit: Decimal, credit: Decimal) -> Decimal:
    """Contribution of a debit/credit pair in the account's normal direction"""
    if normal_balance == NormalBalance.DEBIT:
        return debit - credit
    return credit - debit


def split_balance(normal_balance: NormalBalance, balance: Decimal) -> tuple:
    """
    Split a signed balance into (debit column, credit column)

    A non-negative balance sits on the account's normal side, a negative
    one on the opposite side with its magnitude.
    """
    if normal_balance == NormalBalance.DEBIT:
        return (balance, ZERO) if balance >= 0 else (ZERO, abs(balance))
    return (ZERO, balance) if balance >= 0 else (abs(balance), ZERO)


# ============================================================
# REPORT VALUE OBJECTS
# ============================================================


@dataclass(frozen=True)
class ReportPeriod:
    start_date: Optional[str] = None
    end_date: Optional[str] = None


@dataclass(frozen=True)
class TrialBalanceRow:
    account_id: str
    account_number: Optional[str]
    name: str
    account_type: str
    normal_balance: str
    balance: Decimal
    debit_balance: Decimal
    credit_balance: Decimal


@dataclass(frozen=True)
class TrialBalanceTotals:
    total_debits: Decimal
    total_credits: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class TrialBalance:
    """Every active account's balance split into debit and credit columns"""
    as_of_date: str
    accounts: List[TrialBalanceRow]
    totals: TrialBalanceTotals

    @property
    def grouped(self) -> Dict[str, List[TrialBalanceRow]]:
        """Rows keyed by account type, in row order"""
        groups: Dict[str, List[TrialBalanceRow]] = {}
        for row in self.accounts:
            groups.setdefault(row.account_type, []).append(row)
        return groups

    @property
    def is_balanced(self) -> bool:
        return self.totals.is_balanced

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result['grouped'] = {
            account_type: [asdict(row) for row in rows]
            for account_type, rows in self.grouped.items()
        }
        return result


@dataclass(frozen=True)
class LedgerAccount:
    id: str
    account_number: Optional[str]
    name: str
    account_type: str
    normal_balance: str


@dataclass(frozen=True)
class LedgerRow:
    date: datetime
    entry_id: str
    entry_number: str
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal


@dataclass(frozen=True)
class AccountLedger:
    """One account's posted lines with a running balance"""
    account: LedgerAccount
    period: ReportPeriod
    opening_balance: Decimal
    lines: List[LedgerRow]
    closing_balance: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class StatementLine:
    id: str
    account_number: Optional[str]
    name: str
    account_type: str
    normal_balance: str
    amount: Decimal


@dataclass(frozen=True)
class StatementSection:
    accounts: List[StatementLine] = field(default_factory=list)
    total: Decimal = ZERO


@dataclass(frozen=True)
class IncomeStatement:
    """Revenue, cost of goods sold and expenses moved within a period"""
    period: ReportPeriod
    revenue: StatementSection
    cost_of_goods_sold: StatementSection
    gross_profit: Decimal
    expenses: StatementSection
    net_income: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class BalanceLine:
    id: str
    account_number: Optional[str]
    name: str
    account_type: str
    normal_balance: str
    balance: Decimal


@dataclass(frozen=True)
class BalanceSection:
    accounts: List[BalanceLine] = field(default_factory=list)
    total: Decimal = ZERO


@dataclass(frozen=True)
class EquitySection:
    accounts: List[BalanceLine]
    total: Decimal
    net_income: Decimal
    total_including_net_income: Decimal


@dataclass(frozen=True)
class BalanceSheetTotals:
    total_assets: Decimal
    total_liabilities_and_equity: Decimal
    is_balanced: bool


@dataclass(frozen=True)
class BalanceSheet:
    """Point-in-time assets against liabilities, equity and net income"""
    as_of_date: str
    assets: BalanceSection
    liabilities: BalanceSection
    equity: EquitySection
    totals: BalanceSheetTotals

    @property
    def is_balanced(self) -> bool:
        return self.totals.is_balanced

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ============================================================
# ENGINE
# ============================================================


class FinancialReportingEngine:
    """
    Builds financial reports for one tenant at a time

    Holds no mutable state, so one instance may serve concurrent requests.
    """

    def __init__(
        self,
        accounts: AccountRepository,
        ledger: LedgerLineReader,
        config: Optional[AccountingConfig] = None
    ):
        self.accounts = accounts
        self.ledger = ledger
        self.config = config or get_config()

    @property
    def tolerance(self) -> Decimal:
        return self.config.tolerance

    def trial_balance(self, tenant_id: str, as_of_date: DateInput = None) -> TrialBalance:
        """
        Trial balance of every active account

        Without as_of_date each account's current_balance is used; with it,
        posted lines dated on or before the end of that day are summed.
        """
        as_of = parse_report_date(as_of_date, "as_of_date")

        accounts = [a for a in self.accounts.list_for_tenant(tenant_id) if a.is_active]
        accounts.sort(key=lambda a: (a.account_type.value, a.account_number or ""))

        if as_of is None:
            balances = {a.id: a.current_balance for a in accounts}
        else:
            balances = self._balances(
                tenant_id, accounts, date_to=end_of_day(as_of)
            )

        rows = []
        total_debits = ZERO
        total_credits = ZERO
        for account in accounts:
            balance = balances.get(account.id, ZERO)
            debit_balance, credit_balance = split_balance(account.normal_balance, balance)
            total_debits += debit_balance
            total_credits += credit_balance
            rows.append(TrialBalanceRow(
                account_id=account.id,
                account_number=account.account_number,
                name=account.name,
                account_type=account.account_type.value,
                normal_balance=account.normal_balance.value,
                balance=balance,
                debit_balance=debit_balance,
                credit_balance=credit_balance
            ))

        is_balanced = abs(total_debits - total_credits) < self.tolerance
        report = TrialBalance(
            as_of_date=(as_of or today()).isoformat(),
            accounts=rows,
            totals=TrialBalanceTotals(
                total_debits=total_debits,
                total_credits=total_credits,
                is_balanced=is_balanced
            )
        )

        if not is_balanced:
            logger.warning(
                f"Trial balance out of balance for tenant {tenant_id}: "
                f"debits {total_debits}, credits {total_credits}"
            )
        logger.debug(f"Trial balance for tenant {tenant_id}: {len(rows)} accounts")
        return report

    def account_ledger(
        self,
        tenant_id: str,
        account_id: str,
        start_date: DateInput = None,
        end_date: DateInput = None
    ) -> AccountLedger:
        """
        Posted lines of one account with opening, running and closing balances

        Raises:
            InvalidArgumentError: malformed or inverted dates
            NotFoundError: account missing, inactive or in another tenant
        """
        start, end = parse_date_range(start_date, end_date)

        account = self.accounts.get(tenant_id, account_id)
        if account is None or not account.is_active:
            raise NotFoundError("Account not found", entity="account", entity_id=account_id)
        normal_balance = account.normal_balance

        opening_balance = ZERO
        if start is not None:
            for line in self.ledger.list_posted_lines(
                tenant_id, account_ids=[account.id], date_before=start_of_day(start)
            ):
                opening_balance += signed_amount(normal_balance, line.debit, line.credit)

        lines = self.ledger.list_posted_lines(
            tenant_id,
            account_ids=[account.id],
            date_from=start_of_day(start) if start else None,
            date_to=end_of_day(end) if end else None
        )
        # Running balance depends on this order
        lines = sorted(lines, key=lambda line: line.sort_key)

        running = opening_balance
        rows = []
        for line in lines:
            running += signed_amount(normal_balance, line.debit, line.credit)
            rows.append(LedgerRow(
                date=line.entry_date,
                entry_id=line.entry_id,
                entry_number=line.entry_number,
                description=line.line_description or line.description,
                debit=line.debit,
                credit=line.credit,
                balance=running
            ))

        logger.debug(f"Account ledger for {account.id}: {len(rows)} lines")
        return AccountLedger(
            account=LedgerAccount(
                id=account.id,
                account_number=account.account_number,
                name=account.name,
                account_type=account.account_type.value,
                normal_balance=normal_balance.value
            ),
            period=ReportPeriod(
                start_date=start.isoformat() if start else None,
                end_date=end.isoformat() if end else None
            ),
            opening_balance=opening_balance,
            lines=rows,
            closing_balance=running
        )

    def income_statement(
        self,
        tenant_id: str,
        start_date: DateInput = None,
        end_date: DateInput = None
    ) -> IncomeStatement:
        """
        Revenue, cost of goods sold and expenses within a period

        Only movement inside the window counts; accounts without posted
        lines in the window are left out.
        """
        start, end = parse_date_range(start_date, end_date)

        accounts = self._accounts_of_types(tenant_id, PROFIT_AND_LOSS_TYPES)
        amounts = self._balances(
            tenant_id,
            accounts,
            date_from=start_of_day(start) if start else None,
            date_to=end_of_day(end) if end else None,
            moved_only=True
        )

        revenue = self._statement_section(accounts, amounts, REVENUE_TYPES)
        cogs = self._statement_section(accounts, amounts, COGS_TYPES)
        expenses = self._statement_section(accounts, amounts, EXPENSE_TYPES)
        gross_profit = revenue.total - cogs.total

        logger.debug(f"Income statement for tenant {tenant_id}: {len(amounts)} accounts moved")
        return IncomeStatement(
            period=ReportPeriod(
                start_date=start.isoformat() if start else None,
                end_date=end.isoformat() if end else None
            ),
            revenue=revenue,
            cost_of_goods_sold=cogs,
            gross_profit=gross_profit,
            expenses=expenses,
            net_income=gross_profit - expenses.total
        )

    def balance_sheet(self, tenant_id: str, as_of_date: DateInput = None) -> BalanceSheet:
        """
        Assets, liabilities and equity as of the end of a day (or now)

        Net income from inception to the cutoff is added to equity so that
        assets = liabilities + equity holds for a balanced ledger.
        """
        as_of = parse_report_date(as_of_date, "as_of_date")
        cutoff = end_of_day(as_of) if as_of else datetime.now(timezone.utc)

        sheet_accounts = [
            a for a in self.accounts.list_for_tenant(tenant_id)
            if a.is_active and a.group in BALANCE_SHEET_GROUPS
        ]
        sheet_accounts.sort(key=lambda a: (a.account_type.value, a.account_number or ""))
        balances = self._balances(tenant_id, sheet_accounts, date_to=cutoff)

        assets = self._balance_section(sheet_accounts, balances, AccountTypeGroup.ASSETS)
        liabilities = self._balance_section(sheet_accounts, balances, AccountTypeGroup.LIABILITIES)
        equity = self._balance_section(sheet_accounts, balances, AccountTypeGroup.EQUITY)

        pnl_accounts = self._accounts_of_types(tenant_id, PROFIT_AND_LOSS_TYPES)
        pnl_balances = self._balances(tenant_id, pnl_accounts, date_to=cutoff)
        net_income = ZERO
        for account in pnl_accounts:
            amount = pnl_balances.get(account.id, ZERO)
            if account.account_type in REVENUE_TYPES:
                net_income += amount
            else:
                net_income -= amount

        total_liabilities_and_equity = liabilities.total + equity.total + net_income
        is_balanced = abs(assets.total - total_liabilities_and_equity) < self.tolerance
        if not is_balanced:
            logger.warning(
                f"Balance sheet out of balance for tenant {tenant_id}: "
                f"assets {assets.total}, liabilities and equity {total_liabilities_and_equity}"
            )

        return BalanceSheet(
            as_of_date=(as_of or cutoff.date()).isoformat(),
            assets=assets,
            liabilities=liabilities,
            equity=EquitySection(
                accounts=equity.accounts,
                total=equity.total,
                net_income=net_income,
                total_including_net_income=equity.total + net_income
            ),
            totals=BalanceSheetTotals(
                total_assets=assets.total,
                total_liabilities_and_equity=total_liabilities_and_equity,
                is_balanced=is_balanced
            )
        )

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    def _accounts_of_types(self, tenant_id: str, types: Iterable[AccountType]) -> List[Account]:
        wanted = set(types)
        accounts = [a for a in self.accounts.list_for_tenant(tenant_id) if a.account_type in wanted]
        accounts.sort(key=lambda a: (a.account_type.value, a.account_number or ""))
        return accounts

    def _balances(
        self,
        tenant_id: str,
        accounts: List[Account],
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        moved_only: bool = False
    ) -> Dict[str, Decimal]:
        """
        Signed sums of posted lines per account

        With moved_only, accounts without lines are absent from the result
        instead of mapping to zero.
        """
        by_id = {a.id: a for a in accounts}
        balances: Dict[str, Decimal] = {} if moved_only else {a.id: ZERO for a in accounts}
        if not by_id:
            return balances

        lines: List[PostedLine] = self.ledger.list_posted_lines(
            tenant_id, account_ids=list(by_id), date_from=date_from, date_to=date_to
        )
        for line in lines:
            account = by_id.get(line.account_id)
            if account is None:
                continue
            balances[account.id] = balances.get(account.id, ZERO) + signed_amount(
                account.normal_balance, line.debit, line.credit
            )
        return balances

    @staticmethod
    def _statement_section(accounts: List[Account], amounts: Dict[str, Decimal],
                           types: Iterable[AccountType]) -> StatementSection:
        wanted = set(types)
        rows = [
            StatementLine(
                id=account.id,
                account_number=account.account_number,
                name=account.name,
                account_type=account.account_type.value,
                normal_balance=account.normal_balance.value,
                amount=amounts[account.id]
            )
            for account in accounts
            if account.account_type in wanted and account.id in amounts
        ]
        return StatementSection(accounts=rows, total=sum((r.amount for r in rows), ZERO))

    @staticmethod
    def _balance_section(accounts: List[Account], balances: Dict[str, Decimal],
                         group: AccountTypeGroup) -> BalanceSection:
        rows = [
            BalanceLine(
                id=account.id,
                account_number=account.account_number,
                name=account.name,
                account_type=account.account_type.value,
                normal_balance=account.normal_balance.value,
                balance=balances.get(account.id, ZERO)
            )
            for account in accounts
            if account.group == group
        ]
        return BalanceSection(accounts=rows, total=sum((r.balance for r in rows), ZERO))
