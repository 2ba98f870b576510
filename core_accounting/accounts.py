"""
Chart of Accounts Module

Owns each tenant's account records: creation with taxonomy and hierarchy
validation, updates with cascading full-path rebuilds, guarded deletion,
tree assembly for display and seeding of the default chart.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
import logging
import uuid

from .config import AccountingConfig, get_config
from .defaults import DEFAULT_ACCOUNTS
from .errors import (
    AccountDeletionError, DepthExceededError, DuplicateAccountNumberError,
    DuplicateNameError, InvalidArgumentError, InvalidTaxonomyError,
    NotFoundError, TypeMismatchError
)
from .hierarchy import AccountTree, join_path, sibling_sort_key
from .logging_config import log_action
from .schemas import AccountDraft, AccountPatch, AccountQuery, parse_request
from .storage import StorageInterface, StorageRecord
from .taxonomy import (
    ACCOUNT_TYPE_INFO, AccountType, AccountTypeGroup, NormalBalance,
    account_types_catalog, get_detail_types, get_normal_balance,
    lookup_account_type
)


logger = logging.getLogger(__name__)


@dataclass
class Account(StorageRecord):
    """
    Chart of accounts entry

    normal_balance is derived from account_type and cannot be set.
    current_balance is maintained by journal posting, outside this module.
    """
    tenant_id: str
    name: str
    account_type: AccountType
    detail_type: str
    account_number: Optional[str] = None
    description: Optional[str] = None
    parent_account_id: Optional[str] = None
    is_sub_account: bool = False
    depth: int = 0
    full_path: str = ""
    current_balance: Decimal = Decimal('0')
    is_system_account: bool = False
    is_active: bool = True
    display_order: int = 0

    def __post_init__(self):
        if isinstance(self.account_type, str):
            self.account_type = AccountType(self.account_type)
        if not isinstance(self.current_balance, Decimal):
            self.current_balance = Decimal(str(self.current_balance))
        if not self.full_path:
            self.full_path = self.name

    @property
    def normal_balance(self) -> NormalBalance:
        return get_normal_balance(self.account_type)

    @property
    def group(self) -> AccountTypeGroup:
        return ACCOUNT_TYPE_INFO[self.account_type].group

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result['normal_balance'] = self.normal_balance.value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        data = dict(data)
        data.pop('normal_balance', None)
        return super().from_dict(data)


# ============================================================
# REPOSITORY
# ============================================================


class AccountRepository(ABC):
    """Narrow persistence interface for accounts, always tenant-scoped"""

    @abstractmethod
    def get(self, tenant_id: str, account_id: str) -> Optional[Account]:
        """Account by id, None if missing or owned by another tenant"""

    @abstractmethod
    def list_for_tenant(self, tenant_id: str) -> List[Account]:
        """Every account of a tenant, active or not"""

    @abstractmethod
    def save(self, account: Account) -> None:
        """Insert or replace one account"""

    @abstractmethod
    def delete(self, tenant_id: str, account_id: str) -> bool:
        """Hard-delete one account"""

    def save_many(self, accounts: List[Account]) -> None:
        for account in accounts:
            self.save(account)

    @contextmanager
    def atomic(self):
        """Group reads and writes; default implementation has no rollback or isolation"""
        yield


class StorageAccountRepository(AccountRepository):
    """AccountRepository backed by a StorageInterface table"""

    def __init__(self, storage: StorageInterface, table_name: str = "accounts"):
        self.storage = storage
        self.table_name = table_name

    def get(self, tenant_id: str, account_id: str) -> Optional[Account]:
        data = self.storage.load(self.table_name, account_id)
        if not data or data.get('tenant_id') != tenant_id:
            return None
        return Account.from_dict(data)

    def list_for_tenant(self, tenant_id: str) -> List[Account]:
        return [
            Account.from_dict(data)
            for data in self.storage.find(self.table_name, {'tenant_id': tenant_id})
        ]

    def save(self, account: Account) -> None:
        self.storage.save(self.table_name, account.id, account.to_dict())

    def delete(self, tenant_id: str, account_id: str) -> bool:
        if self.get(tenant_id, account_id) is None:
            return False
        return self.storage.delete(self.table_name, account_id)

    @contextmanager
    def atomic(self):
        with self.storage.atomic():
            yield


# ============================================================
# MANAGER
# ============================================================


AccountDraftInput = Union[AccountDraft, Dict[str, Any]]
AccountPatchInput = Union[AccountPatch, Dict[str, Any]]


class ChartOfAccountsManager:
    """
    Manages account creation, updates, deletion and tree views per tenant

    Each mutation reads, validates and writes inside one repository
    transaction. The storage backends hold their lock for the whole
    transaction, so managers sharing a repository are serialized too.
    """

    def __init__(self, repository: AccountRepository, config: Optional[AccountingConfig] = None):
        self.repository = repository
        self.config = config or get_config()

    @property
    def max_depth(self) -> int:
        return self.config.max_hierarchy_depth

    def _tree(self, tenant_id: str) -> AccountTree:
        return AccountTree(self.repository.list_for_tenant(tenant_id), self.config.path_separator)

    # --------------------------------------------------------
    # Create
    # --------------------------------------------------------

    def create_account(self, tenant_id: str, draft: AccountDraftInput) -> Account:
        """
        Create a new account

        Args:
            tenant_id: Owning tenant (company)
            draft: AccountDraft or equivalent dict

        Returns:
            Created Account

        Raises:
            InvalidArgumentError: malformed draft
            InvalidTaxonomyError: unknown account type or detail type
            DuplicateAccountNumberError: account number already used in tenant
            NotFoundError: parent account not in tenant
            TypeMismatchError: parent has a different account type
            DepthExceededError: parent already at the deepest level
            DuplicateNameError: sibling with the same name exists
        """
        draft = parse_request(AccountDraft, draft)
        account_type = self._validate_taxonomy(draft.account_type, draft.detail_type)

        with self.repository.atomic():
            tenant_accounts = self.repository.list_for_tenant(tenant_id)

            if draft.account_number:
                self._check_account_number(tenant_accounts, draft.account_number)

            parent = None
            depth = 0
            if draft.parent_account_id:
                parent = next(
                    (a for a in tenant_accounts if a.id == draft.parent_account_id), None
                )
                if parent is None:
                    raise NotFoundError(
                        "Parent account not found",
                        entity="account",
                        entity_id=draft.parent_account_id
                    )
                if parent.account_type != account_type:
                    raise TypeMismatchError(
                        f'Sub-account must be the same account type as parent. '
                        f'Parent is "{parent.account_type.value}"'
                    )
                depth = parent.depth + 1
                if depth >= self.max_depth:
                    raise DepthExceededError(
                        f"Maximum account hierarchy depth of {self.max_depth} levels exceeded",
                        max_depth=self.max_depth
                    )

            self._check_sibling_name(tenant_accounts, draft.name, draft.parent_account_id)

            now = datetime.now(timezone.utc)
            account = Account(
                id=str(uuid.uuid4()),
                created_at=now,
                updated_at=now,
                tenant_id=tenant_id,
                name=draft.name,
                account_type=account_type,
                detail_type=draft.detail_type,
                account_number=draft.account_number or None,
                description=draft.description,
                parent_account_id=draft.parent_account_id,
                is_sub_account=bool(draft.parent_account_id) or bool(draft.is_sub_account),
                depth=depth,
                full_path=join_path(parent, draft.name, self.config.path_separator),
                display_order=self._next_display_order(tenant_accounts)
            )

            self.repository.save(account)

        log_action(
            logger, "info", f"Account created: {account.full_path}",
            tenant_id=tenant_id, action="account_created", resource=account.id,
            extra={"account_type": account_type.value, "depth": depth}
        )
        return account

    # --------------------------------------------------------
    # Read
    # --------------------------------------------------------

    def get_account(self, tenant_id: str, account_id: str) -> Account:
        """Get an account, raising NotFoundError when absent from the tenant"""
        account = self.repository.get(tenant_id, account_id)
        if account is None:
            raise NotFoundError("Account not found", entity="account", entity_id=account_id)
        return account

    def get_account_detail(self, tenant_id: str, account_id: str) -> Dict[str, Any]:
        """Account with its parent summary and active sub-accounts"""
        tree = self._tree(tenant_id)
        account = tree.get(account_id)
        if account is None:
            raise NotFoundError("Account not found", entity="account", entity_id=account_id)

        result = self._format_account(account, tree)
        result['sub_accounts'] = [
            {
                'id': sub.id,
                'account_number': sub.account_number,
                'name': sub.name,
                'account_type': sub.account_type.value,
                'detail_type': sub.detail_type,
                'current_balance': sub.current_balance,
                'is_active': sub.is_active
            }
            for sub in tree.children(account.id, active_only=True)
        ]
        return result

    def list_accounts(self, tenant_id: str,
                      query: Union[AccountQuery, Dict[str, Any], None] = None) -> List[Dict[str, Any]]:
        """Filtered, sorted account list; each row carries sub_accounts_count"""
        query = parse_request(AccountQuery, query)
        tree = self._tree(tenant_id)
        accounts = tree.accounts()

        if query.account_type:
            accounts = [a for a in accounts if a.account_type.value == query.account_type]
        if query.detail_type:
            accounts = [a for a in accounts if a.detail_type == query.detail_type]
        if query.is_active is not None:
            accounts = [a for a in accounts if a.is_active == query.is_active]
        if query.is_sub_account is not None:
            accounts = [a for a in accounts if a.is_sub_account == query.is_sub_account]
        if query.parent_account_id:
            accounts = [a for a in accounts if a.parent_account_id == query.parent_account_id]
        if query.search:
            needle = query.search.lower()
            accounts = [
                a for a in accounts
                if any(needle in (value or "").lower()
                       for value in (a.name, a.account_number, a.description))
            ]

        if query.sort_by:
            accounts.sort(
                key=lambda a: self._sort_value(a, query.sort_by),
                reverse=query.sort_order == "desc"
            )
        else:
            accounts.sort(key=self._default_sort_key)

        rows = []
        for account in accounts:
            row = self._format_account(account, tree)
            row['sub_accounts_count'] = tree.child_count(account.id)
            rows.append(row)
        return rows

    def get_account_tree(self, tenant_id: str,
                         account_type: Optional[str] = None) -> Dict[str, List[Dict[str, Any]]]:
        """
        Active root accounts with active descendants nested, grouped by
        statement group (Assets, Liabilities, Equity, Income, Expenses)
        """
        type_filter = None
        if account_type:
            type_filter = lookup_account_type(account_type)
            if type_filter is None:
                raise InvalidTaxonomyError(
                    f'Invalid account type: "{account_type}"', account_type=account_type
                )

        tree = self._tree(tenant_id)
        roots = tree.roots(active_only=True)
        if type_filter:
            roots = [root for root in roots if root.account_type == type_filter]
        roots.sort(key=self._default_sort_key)

        grouped: Dict[str, List[Dict[str, Any]]] = {}
        for group in AccountTypeGroup:
            group_roots = [root for root in roots if root.group == group]
            if group_roots:
                grouped[group.value] = tree.build_nodes(
                    group_roots, self._format_tree_node, self.max_depth
                )
        return grouped

    def get_account_types(self) -> Dict[str, Any]:
        """Account type catalog for pickers"""
        return account_types_catalog()

    # --------------------------------------------------------
    # Update
    # --------------------------------------------------------

    def update_account(self, tenant_id: str, account_id: str, patch: AccountPatchInput) -> Account:
        """
        Update an account; a name change rebuilds the full path of the
        account and every descendant in the same transaction

        Raises:
            NotFoundError, InvalidArgumentError, InvalidTaxonomyError,
            DuplicateAccountNumberError, DuplicateNameError
        """
        changes = parse_request(AccountPatch, patch).changes()
        for required in ('name', 'detail_type', 'is_active'):
            if required in changes and changes[required] is None:
                raise InvalidArgumentError(f"{required} cannot be null", field=required)

        with self.repository.atomic():
            tree = self._tree(tenant_id)
            account = tree.get(account_id)
            if account is None:
                raise NotFoundError("Account not found", entity="account", entity_id=account_id)

            new_number = changes.get('account_number')
            if new_number and new_number != account.account_number:
                others = [a for a in tree.accounts() if a.id != account_id]
                self._check_account_number(others, new_number)

            new_name = changes.get('name')
            renamed = new_name is not None and new_name != account.name
            if renamed:
                siblings = [a for a in tree.accounts() if a.id != account_id]
                self._check_sibling_name(siblings, new_name, account.parent_account_id)

            if 'detail_type' in changes:
                self._validate_taxonomy(account.account_type, changes['detail_type'])

            if 'account_number' in changes:
                account.account_number = changes['account_number'] or None
            for key in ('description', 'detail_type', 'is_active'):
                if key in changes:
                    setattr(account, key, changes[key])

            to_save = tree.rename(account_id, new_name) if renamed else [account]
            now = datetime.now(timezone.utc)
            for changed in to_save:
                changed.updated_at = now

            self.repository.save_many(to_save)

        log_action(
            logger, "info", f"Account updated: {account.full_path}",
            tenant_id=tenant_id, action="account_updated", resource=account_id,
            extra={"fields": sorted(changes), "paths_rebuilt": len(to_save) - 1 if renamed else 0}
        )
        return account

    # --------------------------------------------------------
    # Delete
    # --------------------------------------------------------

    def delete_account(self, tenant_id: str, account_id: str) -> None:
        """
        Hard-delete a leaf, zero-balance, non-system account

        Raises:
            NotFoundError: account not in tenant
            AccountDeletionError: system account, has sub-accounts, or non-zero balance
        """
        with self.repository.atomic():
            tree = self._tree(tenant_id)
            account = tree.get(account_id)
            if account is None:
                raise NotFoundError("Account not found", entity="account", entity_id=account_id)

            if account.is_system_account:
                raise AccountDeletionError(
                    "System accounts cannot be deleted", reason="system_account"
                )

            sub_accounts = tree.child_count(account_id)
            if sub_accounts > 0:
                raise AccountDeletionError(
                    f"Cannot delete account with {sub_accounts} sub-account(s). "
                    f"Delete sub-accounts first.",
                    reason="has_sub_accounts"
                )

            if abs(account.current_balance) >= self.config.tolerance:
                raise AccountDeletionError(
                    "Cannot delete account with a non-zero balance. Transfer the balance first.",
                    reason="non_zero_balance"
                )

            self.repository.delete(tenant_id, account_id)

        log_action(
            logger, "info", f"Account deleted: {account.full_path}",
            tenant_id=tenant_id, action="account_deleted", resource=account_id
        )

    # --------------------------------------------------------
    # Seeding
    # --------------------------------------------------------

    def seed_default_accounts(self, tenant_id: str) -> int:
        """
        Insert the default starter chart as depth-0 system accounts

        Defaults whose account number is already used in the tenant, or
        whose name is already taken by a root account, are skipped, so a
        repeated call adds nothing.

        Returns:
            Number of accounts created
        """
        if not self.config.default_accounts_enabled:
            return 0

        with self.repository.atomic():
            existing = self.repository.list_for_tenant(tenant_id)
            taken = {a.account_number for a in existing if a.account_number}
            root_names = {a.name for a in existing if a.parent_account_id is None}
            offset = self._next_display_order(existing)

            logger.info(f"Seeding {len(DEFAULT_ACCOUNTS)} default accounts for tenant {tenant_id}")

            now = datetime.now(timezone.utc)
            accounts = [
                Account(
                    id=str(uuid.uuid4()),
                    created_at=now,
                    updated_at=now,
                    tenant_id=tenant_id,
                    name=definition.name,
                    account_type=definition.account_type,
                    detail_type=definition.detail_type,
                    account_number=definition.account_number,
                    description=definition.description,
                    full_path=definition.name,
                    is_system_account=True,
                    display_order=offset + index
                )
                for index, definition in enumerate(DEFAULT_ACCOUNTS)
                if definition.account_number not in taken
                and definition.name not in root_names
            ]

            self.repository.save_many(accounts)

        log_action(
            logger, "info", f"Successfully seeded {len(accounts)} default accounts",
            tenant_id=tenant_id, action="default_accounts_seeded",
            extra={"count": len(accounts)}
        )
        return len(accounts)

    # --------------------------------------------------------
    # Helpers
    # --------------------------------------------------------

    @staticmethod
    def _validate_taxonomy(account_type_value, detail_type: str) -> AccountType:
        account_type = lookup_account_type(account_type_value)
        if account_type is None:
            raise InvalidTaxonomyError(
                f'Invalid account type: "{account_type_value}". '
                f'Valid types: {", ".join(t.value for t in AccountType)}',
                account_type=str(account_type_value),
                detail_type=detail_type
            )
        valid = get_detail_types(account_type)
        if detail_type not in valid:
            raise InvalidTaxonomyError(
                f'Invalid detail type "{detail_type}" for account type '
                f'"{account_type.value}". Valid types: {", ".join(valid)}',
                account_type=account_type.value,
                detail_type=detail_type
            )
        return account_type

    @staticmethod
    def _check_account_number(accounts: List[Account], account_number: str) -> None:
        if any(a.account_number == account_number for a in accounts):
            raise DuplicateAccountNumberError(
                f'Account number "{account_number}" already exists', value=account_number
            )

    @staticmethod
    def _check_sibling_name(accounts: List[Account], name: str,
                            parent_account_id: Optional[str]) -> None:
        for account in accounts:
            if account.name == name and account.parent_account_id == parent_account_id:
                suffix = " under this parent account" if parent_account_id else ""
                raise DuplicateNameError(
                    f'Account name "{name}" already exists{suffix}', value=name
                )

    @staticmethod
    def _next_display_order(accounts: List[Account]) -> int:
        if not accounts:
            return 0
        return max(a.display_order for a in accounts) + 1

    @staticmethod
    def _default_sort_key(account: Account) -> tuple:
        return (account.account_type.value,) + sibling_sort_key(account)

    @staticmethod
    def _sort_value(account: Account, sort_by: str):
        value = getattr(account, sort_by)
        if isinstance(value, AccountType):
            return value.value
        if value is None:
            return ""
        return value

    @staticmethod
    def _format_account(account: Account, tree: AccountTree) -> Dict[str, Any]:
        result = account.to_dict()
        result['current_balance'] = account.current_balance
        parent = tree.get(account.parent_account_id) if account.parent_account_id else None
        result['parent_account'] = (
            {'id': parent.id, 'name': parent.name, 'account_number': parent.account_number}
            if parent else None
        )
        return result

    @staticmethod
    def _format_tree_node(account: Account) -> Dict[str, Any]:
        return {
            'id': account.id,
            'account_number': account.account_number,
            'name': account.name,
            'account_type': account.account_type.value,
            'detail_type': account.detail_type,
            'normal_balance': account.normal_balance.value,
            'current_balance': account.current_balance,
            'is_system_account': account.is_system_account,
            'depth': account.depth,
            'full_path': account.full_path
        }
