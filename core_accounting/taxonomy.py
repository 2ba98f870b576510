"""
Account Taxonomy

Static reference data for the chart of accounts: the closed set of account
types, the detail types allowed under each, and the type -> normal balance
and type -> group mappings. Lookups never raise; an unknown type yields
None or an empty result and the caller decides whether that is an error.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class AccountTypeGroup(Enum):
    """Top-level statement groups"""
    ASSETS = "Assets"
    LIABILITIES = "Liabilities"
    EQUITY = "Equity"
    INCOME = "Income"
    EXPENSES = "Expenses"


class AccountType(Enum):
    """Account types (15) in five groups"""
    # Assets
    BANK = "Bank"
    ACCOUNTS_RECEIVABLE = "Accounts Receivable"
    OTHER_CURRENT_ASSETS = "Other Current Assets"
    FIXED_ASSETS = "Fixed Assets"
    OTHER_ASSETS = "Other Assets"

    # Liabilities
    ACCOUNTS_PAYABLE = "Accounts Payable"
    CREDIT_CARD = "Credit Card"
    OTHER_CURRENT_LIABILITIES = "Other Current Liabilities"
    LONG_TERM_LIABILITIES = "Long Term Liabilities"

    # Equity
    EQUITY = "Equity"

    # Income
    INCOME = "Income"
    OTHER_INCOME = "Other Income"

    # Expenses
    COST_OF_GOODS_SOLD = "Cost of Goods Sold"
    EXPENSES = "Expenses"
    OTHER_EXPENSE = "Other Expense"


class NormalBalance(Enum):
    """Side on which an account's balance increases"""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


@dataclass(frozen=True)
class AccountTypeInfo:
    """Metadata for one account type"""
    account_type: AccountType
    group: AccountTypeGroup
    normal_balance: NormalBalance
    number_range_start: int
    number_range_end: int
    is_balance_sheet: bool
    description: str

    @property
    def number_range(self) -> str:
        return f"{self.number_range_start}-{self.number_range_end}"


def _info(account_type, group, normal_balance, start, end, is_balance_sheet, description):
    return AccountTypeInfo(
        account_type=account_type,
        group=group,
        normal_balance=normal_balance,
        number_range_start=start,
        number_range_end=end,
        is_balance_sheet=is_balance_sheet,
        description=description
    )


_DEBIT = NormalBalance.DEBIT
_CREDIT = NormalBalance.CREDIT

ACCOUNT_TYPE_INFO: Dict[AccountType, AccountTypeInfo] = {
    info.account_type: info for info in [
        _info(AccountType.BANK, AccountTypeGroup.ASSETS, _DEBIT, 1000, 1099, True,
              "Bank and cash accounts"),
        _info(AccountType.ACCOUNTS_RECEIVABLE, AccountTypeGroup.ASSETS, _DEBIT, 1100, 1199, True,
              "Money owed by customers"),
        _info(AccountType.OTHER_CURRENT_ASSETS, AccountTypeGroup.ASSETS, _DEBIT, 1200, 1499, True,
              "Short-term assets like inventory and prepaid expenses"),
        _info(AccountType.FIXED_ASSETS, AccountTypeGroup.ASSETS, _DEBIT, 1500, 1799, True,
              "Long-term physical assets like equipment and buildings"),
        _info(AccountType.OTHER_ASSETS, AccountTypeGroup.ASSETS, _DEBIT, 1800, 1999, True,
              "Long-term non-physical assets"),
        _info(AccountType.ACCOUNTS_PAYABLE, AccountTypeGroup.LIABILITIES, _CREDIT, 2000, 2099, True,
              "Money owed to vendors"),
        _info(AccountType.CREDIT_CARD, AccountTypeGroup.LIABILITIES, _CREDIT, 2100, 2199, True,
              "Credit card accounts"),
        _info(AccountType.OTHER_CURRENT_LIABILITIES, AccountTypeGroup.LIABILITIES, _CREDIT, 2200, 2499, True,
              "Short-term obligations like taxes and payroll"),
        _info(AccountType.LONG_TERM_LIABILITIES, AccountTypeGroup.LIABILITIES, _CREDIT, 2500, 2999, True,
              "Long-term debts like loans and mortgages"),
        _info(AccountType.EQUITY, AccountTypeGroup.EQUITY, _CREDIT, 3000, 3999, True,
              "Owner equity, retained earnings, and capital"),
        _info(AccountType.INCOME, AccountTypeGroup.INCOME, _CREDIT, 4000, 4499, False,
              "Primary business revenue"),
        _info(AccountType.OTHER_INCOME, AccountTypeGroup.INCOME, _CREDIT, 4500, 4999, False,
              "Non-primary income like interest and dividends"),
        _info(AccountType.COST_OF_GOODS_SOLD, AccountTypeGroup.EXPENSES, _DEBIT, 5000, 5999, False,
              "Direct costs of products or services sold"),
        _info(AccountType.EXPENSES, AccountTypeGroup.EXPENSES, _DEBIT, 6000, 6999, False,
              "Operating expenses"),
        _info(AccountType.OTHER_EXPENSE, AccountTypeGroup.EXPENSES, _DEBIT, 7000, 7999, False,
              "Non-operating expenses"),
    ]
}


DETAIL_TYPES: Dict[AccountType, List[str]] = {
    AccountType.BANK: [
        "Cash on Hand",
        "Checking",
        "Money Market",
        "Savings",
        "Trust Accounts",
        "Rents Held in Trust",
    ],
    AccountType.ACCOUNTS_RECEIVABLE: [
        "Accounts Receivable",
    ],
    AccountType.OTHER_CURRENT_ASSETS: [
        "Allowance for Bad Debts",
        "Development Costs",
        "Employee Cash Advances",
        "Inventory",
        "Investment - Mortgage/Real Estate Loans",
        "Investment - Tax-Exempt Securities",
        "Investment - U.S. Government Obligations",
        "Investments - Other",
        "Loans to Officers",
        "Loans to Others",
        "Loans to Stockholders",
        "Other Current Assets",
        "Prepaid Expenses",
        "Retainage",
        "Undeposited Funds",
    ],
    AccountType.FIXED_ASSETS: [
        "Accumulated Depreciation",
        "Buildings",
        "Depletable Assets",
        "Furniture and Fixtures",
        "Intangible Assets",
        "Land",
        "Leasehold Improvements",
        "Machinery and Equipment",
        "Other Fixed Assets",
        "Vehicles",
    ],
    AccountType.OTHER_ASSETS: [
        "Accumulated Amortization of Other Assets",
        "Goodwill",
        "Lease Buyout",
        "Licenses",
        "Organizational Costs",
        "Other Long-term Assets",
        "Security Deposits",
    ],
    AccountType.ACCOUNTS_PAYABLE: [
        "Accounts Payable",
    ],
    AccountType.CREDIT_CARD: [
        "Credit Card",
    ],
    AccountType.OTHER_CURRENT_LIABILITIES: [
        "Current Portion of Obligations under Finance Leases",
        "Current Tax Liability",
        "Dividends Payable",
        "Income Tax Payable",
        "Insurance Premium",
        "Line of Credit",
        "Loan Payable",
        "Other Current Liabilities",
        "Payroll Clearing",
        "Payroll Tax Payable",
        "Prepaid Revenue",
        "Sales Tax Payable",
        "Trust Accounts - Liabilities",
    ],
    AccountType.LONG_TERM_LIABILITIES: [
        "Notes Payable",
        "Other Long-term Liabilities",
        "Shareholder Notes Payable",
    ],
    AccountType.EQUITY: [
        "Accumulated Adjustment",
        "Common Stock",
        "Estimated Taxes",
        "Healthcare",
        "Opening Balance Equity",
        "Owner's Equity",
        "Paid-in Capital or Surplus",
        "Partner Contributions",
        "Partner Distributions",
        "Partner's Equity",
        "Personal Expense",
        "Personal Income",
        "Preferred Stock",
        "Retained Earnings",
        "Treasury Stock",
    ],
    AccountType.INCOME: [
        "Discounts/Refunds Given",
        "Non-Profit Income",
        "Other Primary Income",
        "Sales of Product Income",
        "Service/Fee Income",
        "Unapplied Cash Payment Income",
    ],
    AccountType.OTHER_INCOME: [
        "Dividend Income",
        "Interest Earned",
        "Other Investment Income",
        "Other Miscellaneous Income",
        "Tax-Exempt Interest",
        "Unrealized Loss on Securities",
    ],
    AccountType.COST_OF_GOODS_SOLD: [
        "Cost of Labor - COGS",
        "Equipment Rental - COGS",
        "Freight and Delivery - COGS",
        "Other Costs of Services - COGS",
        "Supplies and Materials - COGS",
    ],
    AccountType.EXPENSES: [
        "Advertising/Promotional",
        "Auto",
        "Bad Debts",
        "Bank Charges",
        "Charitable Contributions",
        "Commissions and Fees",
        "Cost of Labor",
        "Dues and Subscriptions",
        "Entertainment",
        "Entertainment Meals",
        "Equipment Rental",
        "Finance Costs",
        "Insurance",
        "Interest Paid",
        "Legal and Professional Fees",
        "Office/General Administrative",
        "Other Business Expenses",
        "Other Miscellaneous Service Cost",
        "Payroll Expenses",
        "Rent or Lease of Buildings",
        "Repair and Maintenance",
        "Shipping, Freight and Delivery",
        "Stationery and Printing",
        "Supplies",
        "Taxes Paid",
        "Travel",
        "Travel Meals",
        "Unapplied Cash Bill Payment Expense",
        "Utilities",
    ],
    AccountType.OTHER_EXPENSE: [
        "Amortization",
        "Depreciation",
        "Exchange Gain or Loss",
        "Gas and Fuel",
        "Home Office",
        "Homeowner Rental Insurance",
        "Mortgage Interest",
        "Other Home Office Expenses",
        "Other Miscellaneous Expense",
        "Other Vehicle Expenses",
        "Parking and Tolls",
        "Penalties and Settlements",
        "Taxes - Other",
        "Vehicle",
        "Vehicle Insurance",
        "Vehicle Lease",
        "Vehicle Loan",
        "Vehicle Loan Interest",
        "Vehicle Registration",
        "Vehicle Repairs",
        "Wash and Road Services",
    ],
}


# Report sections
REVENUE_TYPES = (AccountType.INCOME, AccountType.OTHER_INCOME)
COGS_TYPES = (AccountType.COST_OF_GOODS_SOLD,)
EXPENSE_TYPES = (AccountType.EXPENSES, AccountType.OTHER_EXPENSE)
PROFIT_AND_LOSS_TYPES = REVENUE_TYPES + COGS_TYPES + EXPENSE_TYPES


def lookup_account_type(value: Union[str, AccountType, None]) -> Optional[AccountType]:
    """Resolve an account type by its value ("Bank") or member name ("BANK")"""
    if isinstance(value, AccountType):
        return value
    if not value:
        return None
    try:
        return AccountType(value)
    except ValueError:
        return AccountType.__members__.get(value)


def get_all_account_types() -> List[AccountType]:
    """All valid account types, in declaration order"""
    return list(AccountType)


def get_detail_types(account_type) -> List[str]:
    """Detail type whitelist for a type; empty for an unknown type"""
    resolved = lookup_account_type(account_type)
    if resolved is None:
        return []
    return list(DETAIL_TYPES.get(resolved, []))


def is_valid_detail_type(account_type, detail_type: str) -> bool:
    """Check if a detail type is valid for an account type"""
    return detail_type in get_detail_types(account_type)


def get_normal_balance(account_type) -> Optional[NormalBalance]:
    """Normal balance for an account type, None when the type is unknown"""
    resolved = lookup_account_type(account_type)
    if resolved is None:
        return None
    return ACCOUNT_TYPE_INFO[resolved].normal_balance


def get_account_type_group(account_type) -> Optional[AccountTypeGroup]:
    """Statement group for an account type, None when the type is unknown"""
    resolved = lookup_account_type(account_type)
    if resolved is None:
        return None
    return ACCOUNT_TYPE_INFO[resolved].group


def get_account_types_by_group(group: AccountTypeGroup) -> List[AccountType]:
    """All account types in a group"""
    return [info.account_type for info in ACCOUNT_TYPE_INFO.values() if info.group == group]


def account_types_catalog() -> Dict[str, Any]:
    """
    Account types and detail types for pickers

    Returns:
        {"all": [...], "grouped": {group -> [...]}, "groups": [...]}
    """
    types = []
    for account_type in AccountType:
        info = ACCOUNT_TYPE_INFO[account_type]
        types.append({
            'value': account_type.value,
            'label': account_type.value,
            'group': info.group.value,
            'normal_balance': info.normal_balance.value,
            'number_range': info.number_range,
            'is_balance_sheet': info.is_balance_sheet,
            'description': info.description,
            'detail_types': list(DETAIL_TYPES.get(account_type, []))
        })

    grouped: Dict[str, List[Dict[str, Any]]] = {}
    for entry in types:
        grouped.setdefault(entry['group'], []).append(entry)

    return {
        'all': types,
        'grouped': grouped,
        'groups': [group.value for group in AccountTypeGroup]
    }
