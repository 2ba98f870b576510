"""
Journal Ledger Module

Read side of the double-entry journal. Journal entries are authored,
approved and posted elsewhere; this module defines the shape they are
stored in and the narrow reader the reporting engine queries. Only lines
of POSTED entries are ever returned.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from enum import Enum

from .dates import parse_iso_datetime
from .storage import StorageInterface, StorageRecord
from .taxonomy import NormalBalance


class JournalEntryStatus(Enum):
    """States of a journal entry"""
    DRAFT = "DRAFT"    # Being edited, excluded from every report
    POSTED = "POSTED"  # Finalized and immutable
    VOID = "VOID"      # Cancelled, excluded from every report


def as_utc_datetime(value) -> datetime:
    """Normalize a date, naive datetime or ISO string to an aware UTC datetime"""
    if isinstance(value, str):
        value = parse_iso_datetime(value)
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class JournalEntryLine:
    """
    One side of a journal entry against a single account

    debit and credit are non-negative magnitudes. Normally exactly one is
    non-zero, but both may be set; consumers net them.
    """
    account_id: str
    debit: Decimal = Decimal('0')
    credit: Decimal = Decimal('0')
    description: Optional[str] = None

    def __post_init__(self):
        self.debit = Decimal(str(self.debit))
        self.credit = Decimal(str(self.credit))
        if self.debit < 0 or self.credit < 0:
            raise ValueError("Journal entry line amounts must be non-negative")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'account_id': self.account_id,
            'debit': str(self.debit),
            'credit': str(self.credit),
            'description': self.description
        }


@dataclass
class JournalEntry(StorageRecord):
    """
    Journal entry as stored by the posting workflow

    created_at doubles as the entry creation order used to break ties
    between entries sharing an entry_date.
    """
    tenant_id: str
    entry_number: str
    entry_date: datetime
    description: str
    status: JournalEntryStatus = JournalEntryStatus.DRAFT
    lines: List[JournalEntryLine] = field(default_factory=list)

    def __post_init__(self):
        self.entry_date = as_utc_datetime(self.entry_date)
        self.created_at = as_utc_datetime(self.created_at)
        self.updated_at = as_utc_datetime(self.updated_at)
        if isinstance(self.status, str):
            self.status = JournalEntryStatus(self.status)
        self.lines = [
            line if isinstance(line, JournalEntryLine) else JournalEntryLine(**line)
            for line in self.lines
        ]

    @property
    def total_debits(self) -> Decimal:
        return sum((line.debit for line in self.lines), Decimal('0'))

    @property
    def total_credits(self) -> Decimal:
        return sum((line.credit for line in self.lines), Decimal('0'))

    def is_balanced(self) -> bool:
        """Debits equal credits; the ledger is only trustworthy when this holds"""
        return self.total_debits == self.total_credits

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['lines'] = [line.to_dict() for line in self.lines]
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'JournalEntry':
        data = dict(data)
        data['lines'] = [JournalEntryLine(**line) for line in data.get('lines', [])]
        return super().from_dict(data)


@dataclass(frozen=True)
class PostedLine:
    """A journal line of a POSTED entry, flattened with its entry's header"""
    account_id: str
    debit: Decimal
    credit: Decimal
    entry_date: datetime
    entry_id: str
    entry_number: str
    description: str
    line_description: Optional[str] = None
    normal_balance: Optional[NormalBalance] = None
    entry_created_at: Optional[datetime] = None
    line_number: int = 0

    @property
    def sort_key(self) -> tuple:
        """(entry date, entry creation order, position in entry)"""
        return (self.entry_date, self.entry_created_at or self.entry_date, self.line_number)


class LedgerLineReader(ABC):
    """Read-only access to posted journal lines"""

    @abstractmethod
    def list_posted_lines(
        self,
        tenant_id: str,
        account_ids: Optional[Iterable[str]] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        date_before: Optional[datetime] = None
    ) -> List[PostedLine]:
        """
        Lines of POSTED entries for a tenant

        Args:
            tenant_id: Owning tenant
            account_ids: Restrict to these accounts (None for all)
            date_from: entry_date >= date_from
            date_to: entry_date <= date_to
            date_before: entry_date < date_before

        Returns:
            Lines ordered by entry date, entry creation order, line position
        """


class GeneralLedger(LedgerLineReader):
    """
    Journal entries kept in a StorageInterface table

    save_entry is the write hook for the posting workflow; everything the
    reporting engine calls is read-only.
    """

    def __init__(self, storage: StorageInterface, account_lookup=None,
                 table_name: str = "journal_entries"):
        self.storage = storage
        self.account_lookup = account_lookup  # optional AccountRepository
        self.table_name = table_name

    def save_entry(self, entry: JournalEntry) -> None:
        """Persist a journal entry as authored by the posting workflow"""
        self.storage.save(self.table_name, entry.id, entry.to_dict())

    def get_entry(self, tenant_id: str, entry_id: str) -> Optional[JournalEntry]:
        data = self.storage.load(self.table_name, entry_id)
        if not data or data.get('tenant_id') != tenant_id:
            return None
        return JournalEntry.from_dict(data)

    def list_posted_lines(
        self,
        tenant_id: str,
        account_ids: Optional[Iterable[str]] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        date_before: Optional[datetime] = None
    ) -> List[PostedLine]:
        wanted = set(account_ids) if account_ids is not None else None
        normal_balances = self._normal_balances(tenant_id)

        lines = []
        stored = self.storage.find(
            self.table_name,
            {'tenant_id': tenant_id, 'status': JournalEntryStatus.POSTED.value}
        )
        for data in stored:
            entry = JournalEntry.from_dict(data)
            if date_from is not None and entry.entry_date < date_from:
                continue
            if date_to is not None and entry.entry_date > date_to:
                continue
            if date_before is not None and entry.entry_date >= date_before:
                continue

            for position, line in enumerate(entry.lines):
                if wanted is not None and line.account_id not in wanted:
                    continue
                lines.append(PostedLine(
                    account_id=line.account_id,
                    debit=line.debit,
                    credit=line.credit,
                    entry_date=entry.entry_date,
                    entry_id=entry.id,
                    entry_number=entry.entry_number,
                    description=entry.description,
                    line_description=line.description,
                    normal_balance=normal_balances.get(line.account_id),
                    entry_created_at=entry.created_at,
                    line_number=position
                ))

        lines.sort(key=lambda posted: posted.sort_key)
        return lines

    def _normal_balances(self, tenant_id: str) -> Dict[str, NormalBalance]:
        if self.account_lookup is None:
            return {}
        return {
            account.id: account.normal_balance
            for account in self.account_lookup.list_for_tenant(tenant_id)
        }
