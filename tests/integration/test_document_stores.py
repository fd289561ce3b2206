"""
Integration tests for DocumentStatusStore and ChunkStore.

Runs against in-memory SQLite through aiosqlite.

System role: Verification of document lifecycle and chunk persistence
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update

from finance_docs.boundary.db.models import DocumentModel
from finance_docs.core.document_processing.models import ChunkRecord, DocumentStatus, NewDocument
from finance_docs.core.exceptions import ChunkPersistenceError


def new_document(name: str = "statement") -> NewDocument:
    return NewDocument(name=name, file_path=f"documents/u/1_{name}.pdf", file_size=100)


def chunk_records(document_id: uuid.UUID, owner_id: uuid.UUID, indices: list[int]) -> list[ChunkRecord]:
    return [
        ChunkRecord(
            document_id=document_id,
            owner_id=owner_id,
            content=f"chunk {index}",
            page_number=1,
            chunk_index=index,
            embedding=[0.1, 0.2, 0.3],
        )
        for index in indices
    ]


async def set_created_at(session_factory, document_id: uuid.UUID, created_at: datetime) -> None:
    async with session_factory() as session:
        await session.execute(
            update(DocumentModel).where(DocumentModel.id == document_id).values(created_at=created_at)
        )
        await session.commit()


class TestDocumentStatusStoreLifecycle:
    """Test suite for create/get and guarded transitions."""

    @pytest.mark.asyncio
    async def test_create_should_start_processing_with_zero_pages(self, document_store, owner_id) -> None:
        document_id = await document_store.create(owner_id, new_document())

        document = await document_store.get(document_id)

        assert document.status is DocumentStatus.PROCESSING
        assert document.page_count == 0
        assert document.owner_id == owner_id
        assert document.file_size == 100
        assert document.error_message is None

    @pytest.mark.asyncio
    async def test_get_should_return_none_for_unknown_document(self, document_store) -> None:
        assert await document_store.get(uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_mark_ready_should_record_page_count(self, document_store, owner_id) -> None:
        document_id = await document_store.create(owner_id, new_document())

        assert await document_store.mark_ready(document_id, page_count=7) is True

        document = await document_store.get(document_id)
        assert document.status is DocumentStatus.READY
        assert document.page_count == 7

    @pytest.mark.asyncio
    async def test_transition_from_terminal_state_should_be_refused(self, document_store, owner_id) -> None:
        """Test ready never flips to error and error never flips to ready."""
        # Arrange
        ready_id = await document_store.create(owner_id, new_document("a"))
        error_id = await document_store.create(owner_id, new_document("b"))
        await document_store.mark_ready(ready_id, page_count=2)
        await document_store.mark_error(error_id, "Failed to parse PDF")

        # Act
        late_error = await document_store.mark_error(ready_id, "late failure")
        late_ready = await document_store.mark_ready(error_id, page_count=9)

        # Assert
        assert late_error is False
        assert late_ready is False
        ready = await document_store.get(ready_id)
        errored = await document_store.get(error_id)
        assert ready.status is DocumentStatus.READY
        assert ready.error_message is None
        assert errored.status is DocumentStatus.ERROR
        assert errored.page_count == 0

    @pytest.mark.asyncio
    async def test_update_status_should_reject_processing_target(self, document_store, owner_id) -> None:
        document_id = await document_store.create(owner_id, new_document())

        with pytest.raises(ValueError):
            await document_store.update_status(document_id, DocumentStatus.PROCESSING)

    @pytest.mark.asyncio
    async def test_update_status_should_reject_unknown_fields(self, document_store, owner_id) -> None:
        document_id = await document_store.create(owner_id, new_document())

        with pytest.raises(ValueError):
            await document_store.update_status(document_id, DocumentStatus.READY, {"name": "x"})

    @pytest.mark.asyncio
    async def test_mark_error_should_truncate_long_messages(self, document_store, owner_id) -> None:
        document_id = await document_store.create(owner_id, new_document())

        await document_store.mark_error(document_id, "x" * 5000)

        document = await document_store.get(document_id)
        assert len(document.error_message) == 2000

    @pytest.mark.asyncio
    async def test_mark_ready_should_return_false_for_unknown_document(self, document_store) -> None:
        assert await document_store.mark_ready(uuid.uuid4(), page_count=1) is False


class TestDocumentStatusStoreQueries:
    """Test suite for listing, rename, delete and the stale sweep."""

    @pytest.mark.asyncio
    async def test_list_for_owner_should_return_newest_first_with_chunk_counts(
        self, document_store, chunk_store, session_factory, owner_id,
    ) -> None:
        # Arrange
        older = await document_store.create(owner_id, new_document("older"))
        newer = await document_store.create(owner_id, new_document("newer"))
        await document_store.create(uuid.uuid4(), new_document("someone else"))
        now = datetime.now(timezone.utc)
        await set_created_at(session_factory, older, now - timedelta(days=2))
        await set_created_at(session_factory, newer, now - timedelta(days=1))
        await chunk_store.insert_batch(chunk_records(newer, owner_id, [0, 1, 2]))

        # Act
        documents = await document_store.list_for_owner(owner_id)

        # Assert
        assert [d.id for d in documents] == [newer, older]
        assert [d.chunk_count for d in documents] == [3, 0]

    @pytest.mark.asyncio
    async def test_rename_should_update_name_only(self, document_store, owner_id) -> None:
        document_id = await document_store.create(owner_id, new_document())
        await document_store.mark_ready(document_id, page_count=3)

        renamed = await document_store.rename(document_id, "Tax return 2025")

        assert renamed.name == "Tax return 2025"
        assert renamed.status is DocumentStatus.READY
        assert renamed.page_count == 3

    @pytest.mark.asyncio
    async def test_rename_should_return_none_for_unknown_document(self, document_store) -> None:
        assert await document_store.rename(uuid.uuid4(), "x") is None

    @pytest.mark.asyncio
    async def test_delete_should_remove_document_and_chunks(
        self, document_store, chunk_store, owner_id,
    ) -> None:
        document_id = await document_store.create(owner_id, new_document())
        await chunk_store.insert_batch(chunk_records(document_id, owner_id, [0, 1]))

        assert await document_store.delete(document_id) is True

        assert await document_store.get(document_id) is None
        assert await chunk_store.count_by_document(document_id) == 0
        assert await document_store.delete(document_id) is False

    @pytest.mark.asyncio
    async def test_fail_stale_should_only_touch_old_processing_documents(
        self, document_store, session_factory, owner_id,
    ) -> None:
        """Test the sweep fails old processing rows and leaves the rest."""
        # Arrange
        old_time = datetime.now(timezone.utc) - timedelta(hours=2)
        stale = await document_store.create(owner_id, new_document("stale"))
        fresh = await document_store.create(owner_id, new_document("fresh"))
        old_ready = await document_store.create(owner_id, new_document("done"))
        await document_store.mark_ready(old_ready, page_count=1)
        await set_created_at(session_factory, stale, old_time)
        await set_created_at(session_factory, old_ready, old_time)

        # Act
        swept = await document_store.fail_stale(timedelta(minutes=30))

        # Assert
        assert swept == [stale]
        stale_doc = await document_store.get(stale)
        assert stale_doc.status is DocumentStatus.ERROR
        assert stale_doc.error_message == "Ingestion interrupted before completion"
        assert (await document_store.get(fresh)).status is DocumentStatus.PROCESSING
        assert (await document_store.get(old_ready)).status is DocumentStatus.READY


class TestChunkStore:
    """Test suite for ChunkStore."""

    @pytest.mark.asyncio
    async def test_insert_batch_should_store_records_in_index_order(
        self, document_store, chunk_store, owner_id,
    ) -> None:
        document_id = await document_store.create(owner_id, new_document())

        inserted = await chunk_store.insert_batch(chunk_records(document_id, owner_id, [0, 2, 3]))

        stored = await chunk_store.list_by_document(document_id)
        assert inserted == 3
        assert [c.chunk_index for c in stored] == [0, 2, 3]
        assert stored[0].embedding == [0.1, 0.2, 0.3]

    @pytest.mark.asyncio
    async def test_insert_batch_should_replace_rows_from_earlier_attempt(
        self, document_store, chunk_store, owner_id,
    ) -> None:
        document_id = await document_store.create(owner_id, new_document())
        await chunk_store.insert_batch(chunk_records(document_id, owner_id, [0, 1, 2, 3]))

        await chunk_store.insert_batch(chunk_records(document_id, owner_id, [0, 1]))

        assert await chunk_store.count_by_document(document_id) == 2

    @pytest.mark.asyncio
    async def test_insert_batch_should_write_nothing_when_any_row_fails(
        self, document_store, chunk_store, owner_id,
    ) -> None:
        """Test a duplicate index rolls back the whole batch."""
        # Arrange
        document_id = await document_store.create(owner_id, new_document())
        records = chunk_records(document_id, owner_id, [0, 1, 1])

        # Act / Assert
        with pytest.raises(ChunkPersistenceError):
            await chunk_store.insert_batch(records)
        assert await chunk_store.count_by_document(document_id) == 0

    @pytest.mark.asyncio
    async def test_insert_batch_should_ignore_empty_input(self, chunk_store) -> None:
        assert await chunk_store.insert_batch([]) == 0

    @pytest.mark.asyncio
    async def test_delete_by_document_should_report_removed_rows(
        self, document_store, chunk_store, owner_id,
    ) -> None:
        document_id = await document_store.create(owner_id, new_document())
        other_id = await document_store.create(owner_id, new_document("other"))
        await chunk_store.insert_batch(chunk_records(document_id, owner_id, [0, 1]))
        await chunk_store.insert_batch(chunk_records(other_id, owner_id, [0]))

        removed = await chunk_store.delete_by_document(document_id)

        assert removed == 2
        assert await chunk_store.count_by_document(other_id) == 1
