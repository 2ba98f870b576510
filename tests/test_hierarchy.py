"""
Tests for the id-indexed account tree
"""

from datetime import datetime, timezone

from core_accounting.accounts import Account
from core_accounting.hierarchy import AccountTree, join_path
from core_accounting.taxonomy import AccountType


def make_account(account_id, name, parent=None, display_order=0, is_active=True,
                 account_number=None):
    now = datetime.now(timezone.utc)
    return Account(
        id=account_id,
        created_at=now,
        updated_at=now,
        tenant_id="t1",
        name=name,
        account_type=AccountType.BANK,
        detail_type="Checking",
        account_number=account_number,
        parent_account_id=parent.id if parent else None,
        is_sub_account=parent is not None,
        depth=parent.depth + 1 if parent else 0,
        full_path=join_path(parent, name),
        display_order=display_order,
        is_active=is_active
    )


def build_chain():
    """root > mid > leaf, plus a second root"""
    root = make_account("root", "Operating", display_order=0)
    mid = make_account("mid", "Payroll", parent=root, display_order=1)
    leaf = make_account("leaf", "Bonuses", parent=mid, display_order=2)
    other = make_account("other", "Reserve", display_order=3)
    return [root, mid, leaf, other]


class TestJoinPath:

    def test_root_path_is_its_name(self):
        """Test root path is its name"""
        assert join_path(None, "Operating") == "Operating"

    def test_child_path_extends_parent_path(self):
        """Test child path extends parent path"""
        root = make_account("root", "Operating")
        assert join_path(root, "Payroll") == "Operating > Payroll"

    def test_custom_separator(self):
        """Test paths joined with a custom separator"""
        root = make_account("root", "Operating")
        assert join_path(root, "Payroll", separator="/") == "Operating/Payroll"


class TestAccountTree:
    """Test traversal over the arena"""

    def test_roots_and_children_in_display_order(self):
        """Test roots and children in display order"""
        root = make_account("root", "Operating")
        b = make_account("b", "B", parent=root, display_order=5)
        a = make_account("a", "A", parent=root, display_order=2)
        tree = AccountTree([root, b, a])

        assert [r.id for r in tree.roots()] == ["root"]
        assert [c.id for c in tree.children("root")] == ["a", "b"]
        assert tree.child_count("root") == 2
        assert tree.child_count("a") == 0

    def test_children_active_only(self):
        """Test children active only"""
        root = make_account("root", "Operating")
        active = make_account("c1", "Active", parent=root)
        inactive = make_account("c2", "Closed", parent=root, is_active=False)
        tree = AccountTree([root, active, inactive])

        assert [c.id for c in tree.children("root", active_only=True)] == ["c1"]
        # Inactive children still count for deletion guards
        assert tree.child_count("root") == 2

    def test_descendants_pre_order(self):
        """Test descendants pre order"""
        root = make_account("root", "Operating")
        a = make_account("a", "A", parent=root, display_order=1)
        a1 = make_account("a1", "A1", parent=a, display_order=2)
        b = make_account("b", "B", parent=root, display_order=3)
        tree = AccountTree([b, a1, a, root])

        assert [d.id for d in tree.descendants("root")] == ["a", "a1", "b"]

    def test_ancestors_from_root_down(self):
        """Test ancestors from root down"""
        tree = AccountTree(build_chain())

        assert [a.id for a in tree.ancestors("leaf")] == ["root", "mid"]
        assert tree.ancestors("root") == []

    def test_expected_path_matches_stored_path(self):
        """Test expected path matches stored path"""
        tree = AccountTree(build_chain())

        for account in tree.accounts():
            assert account.full_path == tree.expected_path(account.id)

    def test_accounts_includes_orphans(self):
        """Test accounts includes orphans"""
        orphan = make_account("orphan", "Orphan")
        orphan.parent_account_id = "missing"
        tree = AccountTree(build_chain() + [orphan])

        assert len(tree) == 5
        assert "orphan" in tree
        assert orphan in tree.accounts()


class TestRenameCascade:
    """Test full path rebuild on rename"""

    def test_rename_root_rebuilds_every_descendant(self):
        """Test rename root rebuilds every descendant"""
        tree = AccountTree(build_chain())

        changed = tree.rename("root", "Main Operating")

        assert [a.id for a in changed] == ["root", "mid", "leaf"]
        assert tree.get("root").full_path == "Main Operating"
        assert tree.get("mid").full_path == "Main Operating > Payroll"
        assert tree.get("leaf").full_path == "Main Operating > Payroll > Bonuses"
        assert tree.get("other").full_path == "Reserve"

    def test_rename_middle_keeps_ancestor_prefix(self):
        """Test rename middle keeps ancestor prefix"""
        tree = AccountTree(build_chain())

        changed = tree.rename("mid", "Wages")

        assert [a.id for a in changed] == ["mid", "leaf"]
        assert tree.get("leaf").full_path == "Operating > Wages > Bonuses"
        assert tree.get("root").full_path == "Operating"

    def test_rename_leaf_changes_only_itself(self):
        """Test rename leaf changes only itself"""
        tree = AccountTree(build_chain())

        changed = tree.rename("leaf", "Commissions")

        assert [a.id for a in changed] == ["leaf"]
        assert tree.get("leaf").full_path == "Operating > Payroll > Commissions"


class TestBuildNodes:
    """Test nested display nodes"""

    @staticmethod
    def _format(account):
        return {'id': account.id, 'full_path': account.full_path}

    def test_nested_children(self):
        """Test display nodes nest children"""
        tree = AccountTree(build_chain())

        nodes = tree.build_nodes(tree.roots(), self._format, max_depth=4)

        assert [n['id'] for n in nodes] == ["root", "other"]
        assert nodes[0]['children'][0]['id'] == "mid"
        assert nodes[0]['children'][0]['children'][0]['id'] == "leaf"
        assert nodes[0]['children'][0]['children'][0]['children'] == []

    def test_depth_limit_stops_nesting(self):
        """Test depth limit stops nesting"""
        tree = AccountTree(build_chain())

        nodes = tree.build_nodes(tree.roots(), self._format, max_depth=2)

        assert nodes[0]['children'][0]['id'] == "mid"
        assert nodes[0]['children'][0]['children'] == []

    def test_inactive_children_hidden(self):
        """Test inactive children hidden"""
        accounts = build_chain()
        accounts[1].is_active = False
        tree = AccountTree(accounts)

        nodes = tree.build_nodes(tree.roots(), self._format, max_depth=4)

        assert nodes[0]['children'] == []
