"""
Tests for the in-memory version ledger.
"""

import pytest

from prompt_framework.exceptions import VersionNotFoundError
from prompt_framework.ledger import VersionLedger


@pytest.fixture
def ledger():
    return VersionLedger()


class TestVersionLedger:
    def test_versions_number_from_one(self, ledger):
        root = ledger.append("input", "v1")
        second = ledger.append("input", "v2", root_id=root.id)
        third = ledger.append("input", "v3", root_id=root.id)

        assert [root.version, second.version, third.version] == [1, 2, 3]
        assert second.parent_id == root.id
        assert root.is_root and not third.is_root

    def test_deleting_middle_version_does_not_renumber(self, ledger):
        root = ledger.append("input", "v1")
        second = ledger.append("input", "v2", root_id=root.id)
        ledger.append("input", "v3", root_id=root.id)

        ledger.delete(second.id)

        assert [v.version for v in ledger.list_family(root.id)] == [1, 3]
        assert ledger.append("input", "v4", root_id=root.id).version == 4

    def test_deleting_root_removes_family(self, ledger):
        root = ledger.append("input", "v1")
        child = ledger.append("input", "v2", root_id=root.id)
        other = ledger.append("other", "x")

        removed = ledger.delete(root.id)

        assert set(removed) == {root.id, child.id}
        assert len(ledger) == 1
        assert ledger.get(other.id).generated_text == "x"
        with pytest.raises(VersionNotFoundError):
            ledger.append("input", "v3", root_id=root.id)

    def test_unknown_id(self, ledger):
        with pytest.raises(VersionNotFoundError):
            ledger.get("missing")

    def test_latest(self, ledger):
        root = ledger.append("input", "v1")
        ledger.append("input", "v2", root_id=root.id)

        assert ledger.latest(root.id).generated_text == "v2"
        assert ledger.latest("missing") is None

    def test_snapshot_is_copied(self, ledger):
        answers = {"goal": "Inform"}
        version = ledger.append("input", "v1", questions_snapshot=answers)
        answers["goal"] = "Changed"

        assert version.to_dict()["questions_snapshot"] == {"goal": "Inform"}
