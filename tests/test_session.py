"""
Tests for Session.

Covers navigation, mutation through paths, and the save/reload cycle
including the fallback behavior when a saved tree is broken.
"""

import logging

import pytest

from treefs.session import Session
from treefs.vfs.errors import (
    AlreadyExistsError,
    InvalidIndentationError,
    InvalidNameError,
    IsCurrentDirectoryError,
    IsRootError,
    NotEmptyError,
    NotFoundError,
    StorageError,
)


@pytest.fixture
def session():
    """Create a session with a few entries.

    Structure:
        /
        ├── docs/
        │   ├── notes
        │   └── drafts/
        └── readme
    """
    session = Session()
    session.mkdir("docs")
    session.create("docs/notes")
    session.mkdir("docs/drafts")
    session.create("readme")
    return session


def all_listings(session):
    """Map every directory path to its ls output."""
    listings = {}
    for node, _ in session.root.walk():
        if node.is_directory:
            listings[node.get_path()] = node.list_entries()
    return listings


class TestNavigation:
    def test_starts_at_root(self):
        session = Session()

        assert session.pwd() == "/"
        assert session.cwd is session.root

    def test_cd_relative_and_back(self, session):
        session.cd("docs")
        assert session.pwd() == "/docs"

        session.cd("drafts")
        assert session.pwd() == "/docs/drafts"

        session.cd("..")
        assert session.pwd() == "/docs"

    def test_cd_without_path_goes_to_root(self, session):
        session.cd("docs/drafts")

        session.cd()

        assert session.pwd() == "/"

    def test_cd_absolute(self, session):
        session.cd("docs/drafts")

        session.cd("/docs")

        assert session.pwd() == "/docs"

    def test_cd_to_file_fails(self, session):
        with pytest.raises(NotFoundError):
            session.cd("readme")

        assert session.pwd() == "/"

    def test_cd_missing_leaves_cwd(self, session):
        session.cd("docs")

        with pytest.raises(NotFoundError):
            session.cd("nowhere")

        assert session.pwd() == "/docs"

    def test_ls_current_and_path(self, session):
        assert session.ls() == [("docs", True), ("readme", False)]
        assert session.ls("docs") == [("notes", False), ("drafts", True)]
        assert session.ls("/docs/drafts") == []

    def test_ls_missing(self, session):
        with pytest.raises(NotFoundError, match="No such directory: nope."):
            session.ls("nope")

    def test_tree_without_path_uses_cwd(self, session):
        session.cd("docs")

        assert session.tree().get_path() == "/docs"
        assert session.tree("/").get_path() == "/"

    def test_tree_relative_path_starts_at_root(self):
        """
        Given: The cwd is a sibling of the target directory
        When: Asking for the tree of a relative path
        Then: The path is resolved from the root, not the cwd
        """
        session = Session()
        session.mkdir("docs")
        session.mkdir("x")
        session.cd("x")

        assert session.tree("docs").get_path() == "/docs"

    def test_tree_relative_path_ignores_cwd_children(self, session):
        session.cd("docs")

        with pytest.raises(NotFoundError):
            session.tree("drafts")

        assert session.tree("docs/drafts").get_path() == "/docs/drafts"


class TestMutation:
    def test_walkthrough(self):
        """
        Given: A fresh session
        When: Building and tearing down a small tree
        Then: Each step behaves like a shell would
        """
        session = Session()

        session.mkdir("docs")
        assert session.pwd() == "/"
        assert session.ls() == [("docs", True)]

        session.cd("docs")
        session.create("notes")
        assert session.ls() == [("notes", False)]

        session.cd("..")
        assert session.pwd() == "/"
        with pytest.raises(NotEmptyError):
            session.rmdir("docs")

        session.cd("docs")
        session.rm("notes")
        session.cd("..")
        session.rmdir("docs")
        assert session.ls() == []

    def test_duplicate_mkdir(self):
        session = Session()
        session.mkdir("a")

        with pytest.raises(AlreadyExistsError):
            session.mkdir("a")

        assert session.ls() == [("a", True)]

    def test_dot_names_rejected(self, session):
        """
        Given: A directory inside the tree
        When: Creating entries named '.' or '..'
        Then: Both are refused and 'cd ..' still means the parent
        """
        session.cd("docs")

        with pytest.raises(InvalidNameError):
            session.mkdir("..")
        with pytest.raises(InvalidNameError):
            session.create(".")

        session.cd("..")
        assert session.pwd() == "/"

    def test_create_with_absolute_path(self, session):
        session.cd("docs/drafts")

        node = session.create("/docs/todo")

        assert node.get_path() == "/docs/todo"

    def test_mkdir_in_missing_parent(self, session):
        with pytest.raises(NotFoundError):
            session.mkdir("nowhere/new")

    def test_rmdir_root(self, session):
        with pytest.raises(IsRootError):
            session.rmdir("/")

    def test_rmdir_current(self, session):
        session.cd("docs/drafts")

        with pytest.raises(IsCurrentDirectoryError):
            session.rmdir("/docs/drafts")

    def test_rm_with_path(self, session):
        session.rm("docs/notes")

        assert session.ls("docs") == [("drafts", True)]


class TestPersistence:
    def test_save_and_reload_preserves_listings(self, session, tmp_path):
        """
        Given: A saved tree
        When: Reloading it
        Then: Every directory lists the same entries as before
        """
        path = str(tmp_path / "out.txt")
        before = all_listings(session)

        session.save(path)
        result = session.reload(path)

        assert all_listings(session) == before
        assert result.entries == 5

    def test_reload_moves_cwd_to_new_root(self, session, tmp_path):
        path = str(tmp_path / "out.txt")
        session.save(path)
        session.cd("docs")

        session.reload(path)

        assert session.pwd() == "/"
        assert session.cwd is session.root

    def test_reload_with_odd_indentation_resets(self, session, tmp_path):
        """
        Given: A file whose first line has odd indentation
        When: Reloading it
        Then: The load aborts and the tree is root-only
        """
        path = tmp_path / "bad.txt"
        path.write_text(" / 1\n  docs 1\n")

        with pytest.raises(InvalidIndentationError):
            session.reload(str(path))

        assert session.ls() == []
        assert session.pwd() == "/"

    def test_reload_missing_file_keeps_tree(self, session, tmp_path):
        session.cd("docs")

        with pytest.raises(StorageError):
            session.reload(str(tmp_path / "missing.txt"))

        assert session.pwd() == "/docs"
        assert session.ls("/") == [("docs", True), ("readme", False)]

    def test_reload_empty_file_gives_bare_root(self, session, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("")

        result = session.reload(str(path))

        assert result.entries == 0
        assert session.ls() == []

    def test_save_empty_filename(self, session):
        with pytest.raises(StorageError, match="Filename is empty"):
            session.save("")

    def test_rmsave(self, session, tmp_path):
        path = tmp_path / "out.txt"
        session.save(str(path))

        session.rmsave(str(path))

        assert not path.exists()

    def test_rmsave_missing(self, session, tmp_path):
        with pytest.raises(StorageError, match="does not exist"):
            session.rmsave(str(tmp_path / "missing.txt"))


class TestLifecycle:
    def test_reset(self, session):
        session.cd("docs")

        session.reset()

        assert session.pwd() == "/"
        assert session.ls() == []

    def test_close_detaches_tree(self, session):
        docs = session.root.get_child("docs")

        session.close()

        assert docs.parent is None

    def test_verbose_sets_package_log_level(self):
        session = Session(verbose=True)
        assert logging.getLogger("treefs").level == logging.DEBUG

        session.verbose = False
        assert logging.getLogger("treefs").level == logging.INFO
