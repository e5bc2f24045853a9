"""
Tests for tree nodes and directory operations.

Tests focus on behavior:
- Children keep insertion order
- Sibling names are unique after normalization
- Removal rules (type, emptiness, root, current directory)
- Disposal detaches whole subtrees
"""

import pytest

from treefs.vfs.base import DirectoryNode, FileNode, NodeType, dispose_subtree
from treefs.vfs.errors import (
    AlreadyExistsError,
    InvalidNameError,
    IsCurrentDirectoryError,
    IsRootError,
    NotADirectoryError,
    NotAFileError,
    NotEmptyError,
    NotFoundError,
)


@pytest.fixture
def root():
    """Create a small tree.

    Structure:
        /
        ├── home/
        │   └── user/
        │       └── readme
        ├── tmp/
        └── notes
    """
    root = DirectoryNode.create_root()
    home = root.create_child("home", is_directory=True)
    user = home.create_child("user", is_directory=True)
    user.create_child("readme", is_directory=False)
    root.create_child("tmp", is_directory=True)
    root.create_child("notes", is_directory=False)
    return root


class TestRoot:
    def test_root_is_named_slash(self):
        root = DirectoryNode.create_root()

        assert root.name == "/"
        assert root.parent is None
        assert root.is_directory
        assert root.get_path() == "/"

    def test_new_root_is_empty(self):
        assert DirectoryNode.create_root().list_children() == []


class TestCreateChild:
    def test_create_directory(self):
        root = DirectoryNode.create_root()
        docs = root.create_child("docs", is_directory=True)

        assert isinstance(docs, DirectoryNode)
        assert docs.node_type == NodeType.DIRECTORY
        assert docs.parent is root
        assert docs.get_path() == "/docs"

    def test_create_file(self):
        root = DirectoryNode.create_root()
        notes = root.create_child("notes", is_directory=False)

        assert isinstance(notes, FileNode)
        assert not notes.is_directory
        assert notes.parent is root

    def test_children_keep_insertion_order(self):
        root = DirectoryNode.create_root()
        for name in ["c", "a", "b"]:
            root.create_child(name, is_directory=False)

        assert [child.name for child in root.list_children()] == ["c", "a", "b"]

    def test_name_is_normalized(self):
        root = DirectoryNode.create_root()
        node = root.create_child("//docs/", is_directory=True)

        assert node.name == "docs"

    def test_duplicate_name_rejected(self):
        root = DirectoryNode.create_root()
        root.create_child("a", is_directory=True)

        with pytest.raises(AlreadyExistsError):
            root.create_child("a", is_directory=True)

        assert [child.name for child in root.list_children()] == ["a"]

    def test_duplicate_after_normalization_rejected(self):
        root = DirectoryNode.create_root()
        root.create_child("a", is_directory=True)

        with pytest.raises(AlreadyExistsError):
            root.create_child("a/", is_directory=False)

    def test_file_and_directory_share_namespace(self):
        root = DirectoryNode.create_root()
        root.create_child("a", is_directory=False)

        with pytest.raises(AlreadyExistsError):
            root.create_child("a", is_directory=True)

    def test_names_are_case_sensitive(self):
        root = DirectoryNode.create_root()
        root.create_child("a", is_directory=True)
        root.create_child("A", is_directory=True)

        assert root.list_entries() == [("a", True), ("A", True)]

    @pytest.mark.parametrize("name", ["", "///", "/", "a/b", ".", "..", "../"])
    def test_invalid_names_rejected(self, name):
        root = DirectoryNode.create_root()

        with pytest.raises(InvalidNameError):
            root.create_child(name, is_directory=True)

        assert root.is_empty()


class TestLookup:
    def test_get_child(self, root):
        assert root.get_child("tmp").name == "tmp"

    def test_get_missing_child_returns_none(self, root):
        assert root.get_child("missing") is None

    def test_find_missing_child_raises(self, root):
        with pytest.raises(NotFoundError):
            root.find_child("missing")

    def test_list_entries(self, root):
        assert root.list_entries() == [("home", True), ("tmp", True), ("notes", False)]

    def test_list_is_a_snapshot(self, root):
        children = root.list_children()
        root.create_child("extra", is_directory=False)

        assert len(children) == 3

    def test_get_info(self, root):
        info = root.get_child("home").get_info()

        assert info["type"] == "directory"
        assert info["children_count"] == 1
        assert info["path"] == "/home"

    def test_walk_is_preorder(self, root):
        visited = [(node.get_path(), depth) for node, depth in root.walk()]

        assert visited == [
            ("/", 0),
            ("/home", 1),
            ("/home/user", 2),
            ("/home/user/readme", 3),
            ("/tmp", 1),
            ("/notes", 1),
        ]


class TestRemoveChild:
    def test_remove_empty_directory(self, root):
        root.remove_child("tmp", expect_directory=True)

        assert root.get_child("tmp") is None

    def test_remove_preserves_sibling_order(self):
        root = DirectoryNode.create_root()
        for name in ["a", "b", "c", "d"]:
            root.create_child(name, is_directory=False)

        root.remove_child("b", expect_directory=False)

        assert [child.name for child in root.list_children()] == ["a", "c", "d"]

    def test_remove_file(self, root):
        root.remove_child("notes", expect_directory=False)

        assert root.list_entries() == [("home", True), ("tmp", True)]

    def test_removed_node_is_detached(self, root):
        tmp = root.get_child("tmp")
        root.remove_child("tmp", expect_directory=True)

        assert tmp.parent is None

    def test_remove_non_empty_directory_fails(self, root):
        with pytest.raises(NotEmptyError):
            root.remove_child("home", expect_directory=True)

        assert root.get_child("home") is not None

    def test_remove_missing_fails(self, root):
        with pytest.raises(NotFoundError):
            root.remove_child("missing", expect_directory=True)

    def test_rmdir_on_file_fails(self, root):
        with pytest.raises(NotADirectoryError):
            root.remove_child("notes", expect_directory=True)

    def test_rm_on_directory_fails(self, root):
        with pytest.raises(NotAFileError):
            root.remove_child("tmp", expect_directory=False)

    def test_remove_root_fails(self, root):
        with pytest.raises(IsRootError):
            root.remove_child("/", expect_directory=True)

    def test_remove_current_directory_fails(self, root):
        tmp = root.get_child("tmp")

        with pytest.raises(IsCurrentDirectoryError):
            root.remove_child("tmp", expect_directory=True, current=tmp)

        assert root.get_child("tmp") is tmp

    def test_removal_rule(self):
        """A directory is removable iff empty, not root and not current."""
        root = DirectoryNode.create_root()
        empty = root.create_child("empty", is_directory=True)
        full = root.create_child("full", is_directory=True)
        full.create_child("x", is_directory=False)
        current = root.create_child("current", is_directory=True)

        outcomes = {}
        for name in ["empty", "full", "current", "/"]:
            try:
                root.remove_child(name, expect_directory=True, current=current)
                outcomes[name] = True
            except (NotEmptyError, IsCurrentDirectoryError, IsRootError):
                outcomes[name] = False

        assert outcomes == {"empty": True, "full": False, "current": False, "/": False}
        assert empty.parent is None


class TestDispose:
    def test_dispose_detaches_everything(self, root):
        home = root.get_child("home")
        user = home.get_child("user")
        readme = user.get_child("readme")

        dispose_subtree(root)

        assert root.list_children() == []
        assert home.parent is None
        assert home.list_children() == []
        assert user.parent is None
        assert readme.parent is None

    def test_dispose_deep_tree(self):
        root = DirectoryNode.create_root()
        node = root
        for i in range(5000):
            node = node.create_child(f"d{i}", is_directory=True)

        dispose_subtree(root)

        assert node.parent is None
