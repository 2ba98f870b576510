"""
Account Hierarchy

Id-indexed arena over one tenant's accounts. Parent/child links are ids,
never object references, so a cascade (rename -> full path rebuild) is a
plain traversal that produces the list of rows to persist and can be
applied inside a single storage transaction.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, List, Optional


DEFAULT_SEPARATOR = " > "


def sibling_sort_key(account) -> tuple:
    """Stable display ordering among siblings"""
    return (account.display_order, account.account_number or "")


def join_path(parent, name: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """Full path of a child named `name` under `parent` (None for a root)"""
    if parent is None:
        return name
    parent_path = parent.full_path or parent.name
    return f"{parent_path}{separator}{name}"


class AccountTree:
    """
    Arena of accounts keyed by id with a parent -> children index

    Accounts are held by reference; mutating methods change the held
    records and return the ones that must be written back.
    """

    def __init__(self, accounts: Iterable[Any], separator: str = DEFAULT_SEPARATOR):
        self.separator = separator
        self._nodes: Dict[str, Any] = {}
        self._children: Dict[Optional[str], List[str]] = defaultdict(list)
        for account in accounts:
            self._nodes[account.id] = account
        for account in self._nodes.values():
            self._children[account.parent_account_id].append(account.id)

    def __contains__(self, account_id: str) -> bool:
        return account_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def get(self, account_id: str):
        return self._nodes.get(account_id)

    def accounts(self) -> List[Any]:
        """Every account held, in load order"""
        return list(self._nodes.values())

    def children(self, account_id: Optional[str], active_only: bool = False) -> List[Any]:
        """Direct children in display order; account_id=None gives the roots"""
        kids = [self._nodes[child_id] for child_id in self._children.get(account_id, [])]
        if active_only:
            kids = [kid for kid in kids if kid.is_active]
        return sorted(kids, key=sibling_sort_key)

    def roots(self, active_only: bool = False) -> List[Any]:
        return self.children(None, active_only=active_only)

    def child_count(self, account_id: str) -> int:
        return len(self._children.get(account_id, []))

    def descendants(self, account_id: str) -> List[Any]:
        """All descendants in pre-order (each parent before its children)"""
        result = []
        seen = {account_id}
        stack = list(reversed(self.children(account_id)))
        while stack:
            node = stack.pop()
            if node.id in seen:
                continue
            seen.add(node.id)
            result.append(node)
            stack.extend(reversed(self.children(node.id)))
        return result

    def ancestors(self, account_id: str) -> List[Any]:
        """Ancestors from the root down to the direct parent"""
        chain = []
        seen = {account_id}
        node = self._nodes.get(account_id)
        while node is not None and node.parent_account_id is not None:
            parent = self._nodes.get(node.parent_account_id)
            if parent is None or parent.id in seen:
                break
            seen.add(parent.id)
            chain.append(parent)
            node = parent
        chain.reverse()
        return chain

    def expected_path(self, account_id: str) -> str:
        """Full path derived from the ancestor chain's names"""
        node = self._nodes[account_id]
        names = [ancestor.name for ancestor in self.ancestors(account_id)] + [node.name]
        return self.separator.join(names)

    def rename(self, account_id: str, new_name: str) -> List[Any]:
        """
        Rename an account and rebuild full paths below it

        Returns the renamed account followed by every descendant in
        pre-order, each with its new full path.
        """
        node = self._nodes[account_id]
        node.name = new_name
        parent = self._nodes.get(node.parent_account_id) if node.parent_account_id else None
        node.full_path = join_path(parent, new_name, self.separator)
        return [node] + self.rebuild_paths(account_id)

    def rebuild_paths(self, account_id: str) -> List[Any]:
        """Recompute full paths of every descendant from this account's current path"""
        changed = []
        for descendant in self.descendants(account_id):
            parent = self._nodes[descendant.parent_account_id]
            descendant.full_path = join_path(parent, descendant.name, self.separator)
            changed.append(descendant)
        return changed

    def build_nodes(
        self,
        parents: List[Any],
        format_node: Callable[[Any], Dict[str, Any]],
        max_depth: int,
        active_only: bool = True
    ) -> List[Dict[str, Any]]:
        """Nested display nodes for `parents`, children under a "children" key"""
        nodes = []
        for account in parents:
            node = format_node(account)
            if account.depth + 1 < max_depth:
                kids = self.children(account.id, active_only=active_only)
                node['children'] = self.build_nodes(kids, format_node, max_depth, active_only)
            else:
                node['children'] = []
            nodes.append(node)
        return nodes
