"""
Core Accounting

Multi-tenant chart of accounts with hierarchy enforcement and a read-only
financial reporting engine (trial balance, account ledger, income
statement, balance sheet) under double-entry sign conventions. All
monetary math uses Decimal.
"""

__version__ = "1.0.0"
