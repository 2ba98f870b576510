"""
Default Accounts

Starter chart seeded for every new tenant. Each entry becomes a depth-0
system account; its normal balance comes from the taxonomy.
"""

from dataclasses import dataclass
from typing import List

from .taxonomy import AccountType


@dataclass(frozen=True)
class DefaultAccount:
    account_number: str
    name: str
    account_type: AccountType
    detail_type: str
    description: str


DEFAULT_ACCOUNTS: List[DefaultAccount] = [DefaultAccount(*row) for row in [
    # Assets
    ("1000", "Cash on Hand", AccountType.BANK, "Cash on Hand",
     "Physical cash and petty cash"),
    ("1010", "Business Checking", AccountType.BANK, "Checking",
     "Primary business checking account"),
    ("1020", "Business Savings", AccountType.BANK, "Savings",
     "Business savings account"),
    ("1100", "Accounts Receivable", AccountType.ACCOUNTS_RECEIVABLE, "Accounts Receivable",
     "Money owed by customers"),
    ("1200", "Inventory Asset", AccountType.OTHER_CURRENT_ASSETS, "Inventory",
     "Value of products held for sale"),
    ("1300", "Prepaid Expenses", AccountType.OTHER_CURRENT_ASSETS, "Prepaid Expenses",
     "Expenses paid in advance"),
    ("1400", "Undeposited Funds", AccountType.OTHER_CURRENT_ASSETS, "Undeposited Funds",
     "Payments received but not yet deposited"),
    ("1500", "Furniture and Equipment", AccountType.FIXED_ASSETS, "Furniture and Fixtures",
     "Office furniture and equipment"),
    ("1510", "Accumulated Depreciation", AccountType.FIXED_ASSETS, "Accumulated Depreciation",
     "Total depreciation on fixed assets"),

    # Liabilities
    ("2000", "Accounts Payable", AccountType.ACCOUNTS_PAYABLE, "Accounts Payable",
     "Money owed to vendors and suppliers"),
    ("2100", "Sales Tax Payable", AccountType.OTHER_CURRENT_LIABILITIES, "Sales Tax Payable",
     "Sales tax collected and owed to government"),
    ("2200", "Payroll Liabilities", AccountType.OTHER_CURRENT_LIABILITIES, "Payroll Tax Payable",
     "Payroll taxes and withholdings owed"),
    ("2300", "Income Tax Payable", AccountType.OTHER_CURRENT_LIABILITIES, "Income Tax Payable",
     "Income taxes owed"),

    # Equity
    ("3000", "Opening Balance Equity", AccountType.EQUITY, "Opening Balance Equity",
     "Used to offset opening balance entries"),
    ("3100", "Owner's Equity", AccountType.EQUITY, "Owner's Equity",
     "Owner's investment in the business"),
    ("3200", "Owner's Draw", AccountType.EQUITY, "Partner Distributions",
     "Owner's withdrawals from the business"),
    ("3300", "Retained Earnings", AccountType.EQUITY, "Retained Earnings",
     "Cumulative net income retained in the business"),

    # Income
    ("4000", "Sales Income", AccountType.INCOME, "Sales of Product Income",
     "Revenue from product sales"),
    ("4100", "Service Income", AccountType.INCOME, "Service/Fee Income",
     "Revenue from services rendered"),
    ("4200", "Discounts Given", AccountType.INCOME, "Discounts/Refunds Given",
     "Discounts and refunds given to customers"),
    ("4500", "Interest Income", AccountType.OTHER_INCOME, "Interest Earned",
     "Interest earned on bank accounts and investments"),
    ("4600", "Other Income", AccountType.OTHER_INCOME, "Other Miscellaneous Income",
     "Miscellaneous non-operating income"),

    # Cost of goods sold
    ("5000", "Cost of Goods Sold", AccountType.COST_OF_GOODS_SOLD, "Supplies and Materials - COGS",
     "Direct cost of products sold"),
    ("5100", "Cost of Labor", AccountType.COST_OF_GOODS_SOLD, "Cost of Labor - COGS",
     "Direct labor costs for products/services"),
    ("5200", "Shipping and Delivery", AccountType.COST_OF_GOODS_SOLD, "Freight and Delivery - COGS",
     "Shipping costs for goods sold"),

    # Expenses
    ("6000", "Advertising & Marketing", AccountType.EXPENSES, "Advertising/Promotional",
     "Marketing and advertising expenses"),
    ("6010", "Bank Charges & Fees", AccountType.EXPENSES, "Bank Charges",
     "Bank service charges and fees"),
    ("6020", "Insurance", AccountType.EXPENSES, "Insurance",
     "Business insurance premiums"),
    ("6030", "Office Supplies", AccountType.EXPENSES, "Supplies",
     "Office supplies and consumables"),
    ("6040", "Payroll Expenses", AccountType.EXPENSES, "Payroll Expenses",
     "Salaries, wages, and payroll costs"),
    ("6050", "Professional Fees", AccountType.EXPENSES, "Legal and Professional Fees",
     "Legal, accounting, and consulting fees"),
    ("6060", "Rent Expense", AccountType.EXPENSES, "Rent or Lease of Buildings",
     "Office and building rent"),
    ("6070", "Repairs & Maintenance", AccountType.EXPENSES, "Repair and Maintenance",
     "Repairs and maintenance costs"),
    ("6080", "Travel Expense", AccountType.EXPENSES, "Travel",
     "Business travel expenses"),
    ("6090", "Utilities", AccountType.EXPENSES, "Utilities",
     "Electricity, water, internet, and phone"),
    ("6100", "Meals & Entertainment", AccountType.EXPENSES, "Entertainment Meals",
     "Business meals and entertainment"),
    ("6110", "Dues & Subscriptions", AccountType.EXPENSES, "Dues and Subscriptions",
     "Memberships and subscriptions"),
    ("6120", "Auto Expense", AccountType.EXPENSES, "Auto",
     "Vehicle expenses for business"),

    # Other expenses
    ("7000", "Depreciation Expense", AccountType.OTHER_EXPENSE, "Depreciation",
     "Periodic depreciation of fixed assets"),
    ("7010", "Penalties & Settlements", AccountType.OTHER_EXPENSE, "Penalties and Settlements",
     "Fines, penalties, and legal settlements"),
]]
