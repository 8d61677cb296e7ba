"""
Tests for PromptService: version numbering, families and history queries.
"""

import pytest
from sqlalchemy import update

from prompt_framework.exceptions import VersionNotFoundError
from src.web_backend.models.prompt import PromptRecord
from src.web_backend.services.prompt_service import PromptService


@pytest.fixture
def service(db_session) -> PromptService:
    return PromptService(db_session)


async def _family(service, user_id="user-1", texts=("v1", "v2", "v3"), original="write email"):
    root = await service.save(user_id, original, texts[0], mode="super_lazy")
    records = [root]
    for text in texts[1:]:
        records.append(await service.save(user_id, original, text, parent_id=root.id))
    return records


class TestSave:
    @pytest.mark.asyncio
    async def test_versions_increment_within_family(self, service):
        records = await _family(service)

        assert [r.version for r in records] == [1, 2, 3]
        assert all(r.parent_id == records[0].id for r in records[1:])

    @pytest.mark.asyncio
    async def test_parent_may_be_any_family_member(self, service):
        root, second, _ = await _family(service)

        fourth = await service.save("user-1", "write email", "v4", parent_id=second.id)

        assert fourth.parent_id == root.id
        assert fourth.version == 4

    @pytest.mark.asyncio
    async def test_version_counter_read_from_database(self, service, db_session):
        root, _ = await _family(service, texts=("v1", "v2"))
        # Another writer moves the counter on behind this session's loaded root
        await db_session.execute(
            update(PromptRecord)
            .where(PromptRecord.id == root.id)
            .values(latest_version=5)
            .execution_options(synchronize_session=False)
        )
        await db_session.commit()

        record = await service.save("user-1", "write email", "v6", parent_id=root.id)

        assert record.version == 6
        assert root.latest_version == 6

    @pytest.mark.asyncio
    async def test_snapshot_is_stored(self, service):
        record = await service.save(
            "user-1", "write email", "v1",
            mode="guided_five_question",
            questions_snapshot={"guided_goal": "Deep analysis"},
        )

        loaded = await service.get(record.id, "user-1")
        assert loaded.questions_snapshot == {"guided_goal": "Deep analysis"}
        assert loaded.mode == "guided_five_question"

    @pytest.mark.asyncio
    async def test_unknown_parent(self, service):
        with pytest.raises(VersionNotFoundError):
            await service.save("user-1", "write email", "v2", parent_id="missing")


class TestDelete:
    @pytest.mark.asyncio
    async def test_deleting_middle_version_keeps_numbers(self, service):
        root, second, third = await _family(service)

        deleted = await service.delete(second.id, "user-1")

        assert deleted == [second.id]
        versions = await service.list_versions(root.id, "user-1")
        assert [v.version for v in versions] == [1, 3]

        fourth = await service.save("user-1", "write email", "v4", parent_id=root.id)
        assert fourth.version == 4

    @pytest.mark.asyncio
    async def test_deleting_root_removes_family(self, service):
        root, second, third = await _family(service)

        deleted = await service.delete(root.id, "user-1")

        assert set(deleted) == {root.id, second.id, third.id}
        assert await service.count("user-1") == 0
        with pytest.raises(VersionNotFoundError):
            await service.get(third.id, "user-1")

    @pytest.mark.asyncio
    async def test_other_users_cannot_delete(self, service):
        root, _, _ = await _family(service)

        with pytest.raises(VersionNotFoundError):
            await service.delete(root.id, "someone-else")


class TestHistory:
    @pytest.mark.asyncio
    async def test_list_latest_shows_one_entry_per_family(self, service):
        await _family(service, texts=("a1", "a2"))
        await _family(service, texts=("b1",), original="plan trip")
        await _family(service, user_id="user-2", texts=("c1",))

        latest = await service.list_latest("user-1")

        assert sorted(r.generated_prompt for r in latest) == ["a2", "b1"]
        assert await service.count("user-1") == 2
        assert await service.count("user-2") == 1

    @pytest.mark.asyncio
    async def test_pagination(self, service):
        for i in range(3):
            await service.save("user-1", f"input {i}", f"prompt {i}")

        first_page = await service.list_latest("user-1", limit=2, offset=0)
        second_page = await service.list_latest("user-1", limit=2, offset=2)

        assert len(first_page) == 2
        assert len(second_page) == 1
        assert {r.id for r in first_page}.isdisjoint({r.id for r in second_page})

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, service):
        await _family(service, texts=("Formal EMAIL to the board",), original="board email")
        await _family(service, texts=("Packing list",), original="plan trip")

        results = await service.search("user-1", "email")

        assert [r.generated_prompt for r in results] == ["Formal EMAIL to the board"]

    @pytest.mark.asyncio
    async def test_search_matches_latest_version_only(self, service):
        await _family(service, texts=("old banana text", "new apple text"), original="fruit")

        assert await service.search("user-1", "banana") == []
        assert len(await service.search("user-1", "apple")) == 1

    @pytest.mark.asyncio
    async def test_blank_search_lists_latest(self, service):
        await _family(service, texts=("x",))
        assert len(await service.search("user-1", "  ")) == 1
