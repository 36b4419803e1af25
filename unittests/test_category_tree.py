"""Unit tests for utils/category_tree.py on an in-memory SQLite database."""

import pytest
from sqlalchemy import func, select

from models.category_node import CategoryNodeORM
from utils.category_tree import CategoryTree, children_of, resolve_path, split_breadcrumb


def count_nodes(session_maker):
    with session_maker() as session:
        return session.scalar(select(func.count()).select_from(CategoryNodeORM))


class TestSplitBreadcrumb:

    def test_common_delimiters(self):
        assert split_breadcrumb("Home > Kitchen > Mugs") == ["Home", "Kitchen", "Mugs"]
        assert split_breadcrumb("Home &gt; Kitchen") == ["Home", "Kitchen"]
        assert split_breadcrumb("Home › Kitchen » Mugs | Tall") == ["Home", "Kitchen", "Mugs", "Tall"]

    def test_empty_segments_are_dropped(self):
        assert split_breadcrumb(" > Home >> Mugs > ") == ["Home", "Mugs"]

    def test_empty_and_lists(self):
        assert split_breadcrumb("") == []
        assert split_breadcrumb(None) == []
        assert split_breadcrumb(["Home", " Mugs ", ""]) == ["Home", "Mugs"]


def test_resolve_path_creates_chain(session_maker):
    leaf_id = resolve_path("A > B > C", session_maker=session_maker)
    with session_maker() as session:
        leaf = session.get(CategoryNodeORM, leaf_id)
        parent = session.get(CategoryNodeORM, leaf.parent_id)
        root = session.get(CategoryNodeORM, parent.parent_id)
        assert (root.name, parent.name, leaf.name) == ("A", "B", "C")
        assert (root.level, parent.level, leaf.level) == (0, 1, 2)
        assert root.parent_id is None


def test_resolve_path_is_idempotent(session_maker):
    first = resolve_path("A > B > C", session_maker=session_maker)
    second = resolve_path("A > B > C", session_maker=session_maker)
    assert first == second
    assert count_nodes(session_maker) == 3


def test_shared_prefix_reuses_nodes(session_maker):
    resolve_path("A > B > C", session_maker=session_maker)
    resolve_path("A > B > D", session_maker=session_maker)
    assert count_nodes(session_maker) == 4


def test_same_name_under_different_parents(session_maker):
    left = resolve_path("A > B", session_maker=session_maker)
    right = resolve_path("C > B", session_maker=session_maker)
    assert left != right
    assert count_nodes(session_maker) == 4


def test_empty_breadcrumb_is_a_no_op(session_maker):
    assert resolve_path("", session_maker=session_maker) is None
    assert resolve_path(" > ", session_maker=session_maker) is None
    assert count_nodes(session_maker) == 0


def test_children_are_ordered_by_name(session_maker):
    for breadcrumb in ("Toys > Puzzles", "Art > Prints", "Toys > Dolls", "Art > Paintings"):
        resolve_path(breadcrumb, session_maker=session_maker)

    roots = children_of(session_maker=session_maker)
    assert [node.name for node in roots] == ["Art", "Toys"]
    assert all(node.parent_id is None and node.level == 0 for node in roots)

    toys = roots[1]
    assert [node.name for node in children_of(toys.id, session_maker=session_maker)] == ["Dolls", "Puzzles"]


def test_children_of_unknown_node(session_maker):
    assert children_of(12345, session_maker=session_maker) == []


def test_insert_or_ignore_reports_existing_node(session_maker):
    with session_maker() as session:
        tree = CategoryTree(session)
        node_id = tree._insert_or_ignore("Home", None, 0)
        assert node_id is not None
        assert tree._insert_or_ignore("Home", None, 0) is None
        assert tree.get_or_create("Home", None, 0) == node_id
        session.commit()


def test_get(session_maker):
    leaf_id = resolve_path("Home > Mugs", session_maker=session_maker)
    with session_maker() as session:
        node = CategoryTree(session).get(leaf_id)
    assert node.name == "Mugs"
    assert node.level == 1
