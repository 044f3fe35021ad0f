"""Tests for FolderTree state transitions, display tree and serialization."""

import copy

import pytest
from models.folder import FolderData, FolderOperationError, FolderTree


@pytest.fixture
def tree():
    """Adders/ (f1) containing Fast/ (f2); Memory/ (f3) at top level."""
    return FolderTree(
        folders=[
            FolderData("f1", "Adders"),
            FolderData("f2", "Fast", "f1"),
            FolderData("f3", "Memory"),
        ],
        subcircuit_map={"half": "f1", "cla": "f2"},
    )


SUBCIRCUITS = {"half": "Half adder", "cla": "Carry lookahead", "ram": "RAM block"}


class TestCreateFolder:
    def test_create_top_level(self):
        tree = FolderTree()
        folder_id = tree.create_folder("Adders")
        assert tree.get_folder(folder_id) == FolderData(folder_id, "Adders", None)
        assert len(folder_id) == 20

    def test_create_nested(self, tree):
        folder_id = tree.create_folder("Ripple", "f1")
        assert tree.get_folder(folder_id).parent_id == "f1"
        assert tree.folders[-1].folder_id == folder_id

    def test_name_trimmed(self):
        tree = FolderTree()
        folder_id = tree.create_folder("  Gates  ")
        assert tree.get_folder(folder_id).name == "Gates"

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name_rejected(self, tree, name):
        before = copy.deepcopy(tree)
        with pytest.raises(FolderOperationError, match="empty"):
            tree.create_folder(name)
        assert tree == before

    def test_missing_parent_rejected(self, tree):
        before = copy.deepcopy(tree)
        with pytest.raises(FolderOperationError):
            tree.create_folder("Orphan", "nope")
        assert tree == before

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            FolderTree().create_folder("")


class TestRenameFolder:
    def test_rename(self, tree):
        assert tree.rename_folder("f1", " Arithmetic ") is True
        assert tree.get_folder("f1").name == "Arithmetic"

    def test_same_name_is_no_change(self, tree):
        assert tree.rename_folder("f1", "Adders") is False

    def test_empty_name_rejected(self, tree):
        with pytest.raises(FolderOperationError):
            tree.rename_folder("f1", "  ")
        assert tree.get_folder("f1").name == "Adders"

    def test_missing_folder_rejected(self, tree):
        with pytest.raises(FolderOperationError):
            tree.rename_folder("nope", "Name")


class TestDeleteFolder:
    def test_subcircuits_return_to_root(self, tree):
        released = tree.delete_folder("f2")
        assert released == ["cla"]
        assert tree.folder_of("cla") is None
        assert not tree.has_folder("f2")

    def test_children_promoted_to_parent(self, tree):
        tree.delete_folder("f1")
        assert tree.get_folder("f2").parent_id is None
        assert tree.folder_of("half") is None
        assert tree.folder_of("cla") == "f2"

    def test_grandchildren_promoted_one_level(self, tree):
        tree.create_folder("Deep", "f2")
        tree.delete_folder("f2")
        deep = tree.folders[-1]
        assert deep.parent_id == "f1"

    def test_missing_folder_rejected(self, tree):
        before = copy.deepcopy(tree)
        with pytest.raises(FolderOperationError):
            tree.delete_folder("nope")
        assert tree == before


class TestMoveSubcircuit:
    def test_move_into_folder(self, tree):
        assert tree.move_subcircuit("ram", "f3") is True
        assert tree.folder_of("ram") == "f3"

    def test_move_to_root_removes_entry(self, tree):
        assert tree.move_subcircuit("half", None) is True
        assert "half" not in tree.subcircuit_map

    def test_move_to_current_folder_is_no_op(self, tree):
        before = copy.deepcopy(tree)
        assert tree.move_subcircuit("half", "f1") is False
        assert tree.move_subcircuit("ram", None) is False
        assert tree == before

    def test_missing_target_rejected(self, tree):
        with pytest.raises(FolderOperationError):
            tree.move_subcircuit("half", "nope")
        assert tree.folder_of("half") == "f1"

    def test_subcircuit_in_exactly_one_container(self, tree):
        tree.move_subcircuit("half", "f2")
        tree.move_subcircuit("half", "f3")
        assert [sub for sub, folder in tree.subcircuit_map.items() if sub == "half"] == ["half"]
        assert tree.folder_of("half") == "f3"


class TestMoveFolder:
    def test_reparent(self, tree):
        assert tree.move_folder("f3", "f1") is True
        assert tree.get_folder("f3").parent_id == "f1"

    def test_move_to_top_level(self, tree):
        assert tree.move_folder("f2", None) is True
        assert tree.get_folder("f2").parent_id is None

    def test_no_op(self, tree):
        assert tree.move_folder("f2", "f1") is False

    def test_into_itself_rejected(self, tree):
        with pytest.raises(FolderOperationError, match="into itself"):
            tree.move_folder("f1", "f1")

    def test_into_descendant_rejected(self, tree):
        before = copy.deepcopy(tree)
        with pytest.raises(FolderOperationError):
            tree.move_folder("f1", "f2")
        assert tree == before

    def test_missing_folders_rejected(self, tree):
        with pytest.raises(FolderOperationError):
            tree.move_folder("nope", None)
        with pytest.raises(FolderOperationError):
            tree.move_folder("f1", "nope")


class TestBuildTree:
    def test_structure(self, tree):
        root = tree.build_tree(SUBCIRCUITS)
        assert root.is_root
        assert [f.name for f in root.folders] == ["Adders", "Memory"]
        adders = root.find("f1")
        assert [f.name for f in adders.folders] == ["Fast"]
        assert [s.subcircuit_id for s in adders.subcircuits] == ["half"]
        assert [s.name for s in root.find("f2").subcircuits] == ["Carry lookahead"]
        assert [s.subcircuit_id for s in root.subcircuits] == ["ram"]

    def test_every_subcircuit_shown_once(self, tree):
        root = tree.build_tree(SUBCIRCUITS)
        assert sorted(root.subcircuit_ids()) == sorted(SUBCIRCUITS)

    def test_stale_map_entries_not_shown(self, tree):
        tree.subcircuit_map["deleted-circuit"] = "f3"
        root = tree.build_tree(SUBCIRCUITS)
        assert "deleted-circuit" not in root.subcircuit_ids()

    def test_entry_for_missing_folder_shown_at_root(self, tree):
        tree.subcircuit_map["ram"] = "gone"
        root = tree.build_tree(SUBCIRCUITS)
        assert "ram" in [s.subcircuit_id for s in root.subcircuits]

    def test_folder_with_missing_parent_shown_at_root(self):
        tree = FolderTree(folders=[FolderData("a", "Lost", "gone")])
        root = tree.build_tree({})
        assert [f.folder_id for f in root.folders] == ["a"]

    def test_parent_cycle_shown_at_root(self):
        tree = FolderTree(folders=[FolderData("a", "A", "b"), FolderData("b", "B", "a"), FolderData("c", "C", "c")])
        root = tree.build_tree({})
        assert sorted(node.folder_id for node in root.walk() if not node.is_root) == ["a", "b", "c"]
        assert {f.folder_id for f in root.folders} >= {"a", "c"}

    def test_empty_tree(self):
        root = FolderTree().build_tree({"x": "X"})
        assert root.folders == []
        assert [s.subcircuit_id for s in root.subcircuits] == ["x"]


class TestSerialization:
    def test_round_trip(self, tree):
        restored = FolderTree.from_dict(tree.to_dict())
        assert restored == tree

    def test_document_keys(self, tree):
        data = tree.to_dict()
        assert data["folders"][1] == {"id": "f2", "name": "Fast", "parentId": "f1"}
        assert "parentId" not in data["folders"][0]
        assert data["subcircuitMap"] == {"half": "f1", "cla": "f2"}

    def test_invalid_records_skipped(self):
        tree = FolderTree.from_dict(
            {"folders": [{"name": "no id"}, "junk", {"id": "ok", "name": "Ok"}], "subcircuitMap": {"x": None}}
        )
        assert [f.folder_id for f in tree.folders] == ["ok"]
        assert tree.subcircuit_map == {}
