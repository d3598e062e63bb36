"""Tests for the SQLite db_client: filters, record CRUD and unit-of-work control."""

import pytest

from src.core import db_client
from src.services import task_service


@pytest.mark.unit
class TestParseFilter:
    """Tests for parse_filter function."""

    def test_empty_filter(self):
        assert db_client.parse_filter("") == ("", [])

    def test_single_comparison(self):
        assert db_client.parse_filter('title = "Laundry"') == ("title = ?", ["Laundry"])

    def test_numeric_and_boolean_values(self):
        clause, params = db_client.parse_filter('subtask_order >= "2" && is_completed = "true"')

        assert clause == "subtask_order >= ? AND is_completed = ?"
        assert params == [2, True]

    def test_or_group(self):
        clause, params = db_client.parse_filter('(priority = "high" || priority = "medium") && parent_id = "4"')

        assert clause == "(priority = ? OR priority = ?) AND parent_id = ?"
        assert params == ["high", "medium", 4]

    def test_like_escapes_wildcards(self):
        clause, params = db_client.parse_filter('title ~ "50%_off"')

        assert clause == "title LIKE ? ESCAPE '\\'"
        assert params == ["%50\\%\\_off%"]

    def test_invalid_syntax_raises(self):
        with pytest.raises(ValueError, match="Invalid filter syntax"):
            db_client.parse_filter("title == Laundry")


@pytest.mark.unit
class TestRecords:
    """Tests for record CRUD against a real SQLite file."""

    async def test_create_and_get_record(self, sqlite_db):
        created = await db_client.create_record(collection="tags", data={"name": "Home"})

        fetched = await db_client.get_record(collection="tags", record_id=created["id"])

        assert isinstance(created["id"], str)
        assert fetched == {"id": created["id"], "name": "Home"}

    async def test_get_missing_record_raises_key_error(self, sqlite_db):
        with pytest.raises(KeyError, match="Record not found"):
            await db_client.get_record(collection="tags", record_id="999")

    async def test_update_missing_record_raises_key_error(self, sqlite_db):
        with pytest.raises(KeyError):
            await db_client.update_record(collection="tags", record_id="999", data={"name": "Nope"})

    async def test_delete_missing_record_raises_key_error(self, sqlite_db):
        with pytest.raises(KeyError):
            await db_client.delete_record(collection="tags", record_id="999")

    async def test_invalid_collection_name(self, sqlite_db):
        with pytest.raises(RuntimeError, match="Invalid collection name"):
            await db_client.get_record(collection="tags; DROP TABLE tasks", record_id="1")

    async def test_get_full_list_pages_through_everything(self, sqlite_db):
        for name in ("a", "b", "c", "d", "e"):
            await db_client.create_record(collection="tags", data={"name": name})

        records = await db_client.get_full_list(collection="tags", batch_size=2)

        assert [record["name"] for record in records] == ["a", "b", "c", "d", "e"]

    async def test_get_first_record(self, sqlite_db):
        await db_client.create_record(collection="tags", data={"name": "Work"})

        assert (await db_client.get_first_record(collection="tags", filter_query='name = "Work"'))["name"] == "Work"
        assert await db_client.get_first_record(collection="tags", filter_query='name = "Play"') is None


@pytest.mark.unit
class TestUnitOfWork:
    """Tests for deferred commits via save() and rollback()."""

    async def test_rollback_discards_uncommitted_writes(self, sqlite_db):
        record = await db_client.create_record(collection="tags", data={"name": "Temp"}, commit=False)

        await db_client.rollback()

        with pytest.raises(KeyError):
            await db_client.get_record(collection="tags", record_id=record["id"])

    async def test_save_commits_pending_writes(self, sqlite_db):
        kept = await db_client.create_record(collection="tags", data={"name": "Kept"})
        await db_client.delete_record(collection="tags", record_id=kept["id"], commit=False)

        await db_client.save()
        await db_client.rollback()

        assert await db_client.get_full_list(collection="tags") == []

    async def test_rollback_restores_deleted_record(self, sqlite_db):
        kept = await db_client.create_record(collection="tags", data={"name": "Kept"})
        await db_client.delete_record(collection="tags", record_id=kept["id"], commit=False)

        await db_client.rollback()

        assert (await db_client.get_record(collection="tags", record_id=kept["id"]))["name"] == "Kept"


@pytest.mark.unit
class TestCascades:
    """Deleting a task removes what it owns and nothing else."""

    async def test_delete_task_cascades_to_owned_rows(self, sqlite_db):
        parent = await task_service.create_task(title="Parent")
        child = await task_service.create_task(title="Child", parent_id=parent.id)
        await task_service.create_task(title="Grandchild", parent_id=child.id)
        await task_service.tag_task(task_id=parent.id, tag_name="Home")
        await task_service.add_attachment(task_id=child.id, file_name="receipt.pdf", content=b"%PDF")

        await task_service.delete_task(task_id=parent.id)

        assert await db_client.get_full_list(collection="tasks") == []
        assert await db_client.get_full_list(collection="task_tags") == []
        assert await task_service.list_attachments() == []
        assert [tag.name for tag in await task_service.list_tags()] == ["Home"]

    async def test_delete_tag_keeps_task(self, sqlite_db):
        task = await task_service.create_task(title="Tagged")
        tag = await task_service.tag_task(task_id=task.id, tag_name="Errand")

        await task_service.delete_tag(tag_id=tag.id)

        assert (await task_service.get_task(task_id=task.id)).tags == []
