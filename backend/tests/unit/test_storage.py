"""Tests for the storage backends (in-memory and SQLite via SQLAlchemy)."""

from datetime import timedelta

import pytest

from models import ActionMetadata, ChatMessageCreate, MessageAction, ThinkingMetadata, UnknownMetadata
from storage import MemoryStorage, SqlStorage
from storage.base import DEFAULT_DOCUMENT_CONTENT, DEFAULT_DOCUMENT_TITLE, WELCOME_MESSAGE


@pytest.fixture(params=["memory", "sql"])
async def backend(request):
    if request.param == "memory":
        yield MemoryStorage()
    else:
        store = SqlStorage("sqlite+aiosqlite://")
        await store.initialize()
        yield store
        await store.dispose()


class TestChatMessages:
    async def test_seeded_with_welcome_message(self, backend):
        messages = await backend.get_chat_messages()
        assert len(messages) == 1
        assert messages[0].role == "assistant"
        assert messages[0].content == WELCOME_MESSAGE

    async def test_messages_listed_in_insertion_order(self, backend):
        for i in range(5):
            await backend.add_chat_message(ChatMessageCreate(content=f"m{i}", role="user"))
        contents = [m.content for m in await backend.get_chat_messages()]
        assert contents == [WELCOME_MESSAGE, "m0", "m1", "m2", "m3", "m4"]

    async def test_add_assigns_id_and_timestamp(self, backend):
        first = await backend.add_chat_message(ChatMessageCreate(content="a", role="user"))
        second = await backend.add_chat_message(ChatMessageCreate(content="b", role="user"))
        assert first.id and second.id and first.id != second.id
        assert first.timestamp <= second.timestamp

    async def test_timestamps_are_utc(self, backend):
        added = await backend.add_chat_message(ChatMessageCreate(content="a", role="user"))
        listed = await backend.get_chat_messages()
        edit = await backend.create_ai_edit("t", "s", "edit")
        doc = await backend.get_default_document()

        assert added.timestamp.utcoffset() == timedelta(0)
        assert all(m.timestamp.utcoffset() == timedelta(0) for m in listed)
        assert listed[-1].timestamp == added.timestamp
        assert (await backend.get_ai_edit(edit.id)).timestamp.utcoffset() == timedelta(0)
        assert doc.last_modified.utcoffset() == timedelta(0)

    async def test_metadata_variants_survive_storage(self, backend):
        await backend.add_chat_message(ChatMessageCreate(
            content="searching", role="assistant",
            metadata=ThinkingMetadata(status="searching", query="tides"),
        ))
        await backend.add_chat_message(ChatMessageCreate(
            content="reply", role="assistant",
            metadata=ActionMetadata(actions=[MessageAction(label="L", type="insert", content="c")]),
        ))
        await backend.add_chat_message(ChatMessageCreate.model_validate({
            "content": "future", "role": "assistant", "metadata": {"kind": "poll", "options": [1]},
        }))

        stored = (await backend.get_chat_messages())[1:]
        assert isinstance(stored[0].metadata, ThinkingMetadata)
        assert stored[0].metadata.query == "tides"
        assert isinstance(stored[1].metadata, ActionMetadata)
        assert stored[1].metadata.actions[0].content == "c"
        assert isinstance(stored[2].metadata, UnknownMetadata)
        assert stored[2].metadata.kind == "poll"

    async def test_clear_history(self, backend):
        await backend.add_chat_message(ChatMessageCreate(content="x", role="user"))
        await backend.clear_chat_history()
        assert await backend.get_chat_messages() == []


class TestDocuments:
    async def test_default_document_is_seeded(self, backend):
        doc = await backend.get_default_document()
        assert doc.title == DEFAULT_DOCUMENT_TITLE
        assert doc.content == DEFAULT_DOCUMENT_CONTENT

    async def test_update_stores_content_as_given(self, backend):
        doc = await backend.get_default_document()
        content = {"type": "doc", "content": [{"type": "paragraph", "attrs": {"custom": [1, None, "x"]}}]}

        updated = await backend.update_document(doc.id, content)

        assert updated.content == content
        assert (await backend.get_default_document()).content == content

    async def test_update_missing_document(self, backend):
        assert await backend.update_document("no-such-id", {"type": "doc"}) is None

    async def test_create_and_get(self, backend):
        created = await backend.create_document("Notes", "plain text body")
        fetched = await backend.get_document(created.id)
        assert fetched.title == "Notes"
        assert fetched.content == "plain text body"
        assert await backend.get_document("no-such-id") is None


class TestAiEdits:
    async def test_created_pending(self, backend):
        edit = await backend.create_ai_edit("long text", "short", "shorten")
        assert edit.applied == "pending"
        fetched = await backend.get_ai_edit(edit.id)
        assert fetched.suggested_text == "short"
        assert fetched.operation == "shorten"

    @pytest.mark.parametrize("status", ["applied", "rejected"])
    async def test_status_update(self, backend, status):
        edit = await backend.create_ai_edit("text", "better text", "edit")
        updated = await backend.update_ai_edit_status(edit.id, status)
        assert updated.applied == status
        assert (await backend.get_ai_edit(edit.id)).applied == status

    async def test_update_missing_edit(self, backend):
        assert await backend.update_ai_edit_status("no-such-id", "rejected") is None
        assert await backend.get_ai_edit("no-such-id") is None
