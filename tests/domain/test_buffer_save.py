from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING

import pytest

from changebuffer import Change, ChangeBuffer
from tests.helpers.records import (
    GatedRecord,
    Person,
    SavingPerson,
    SyncSavingPerson,
    last_name_min_length,
)

if TYPE_CHECKING:
    from changebuffer.config import BufferConfig


def test_save_success_clears_changes_but_keeps_errors() -> None:
    person = SavingPerson(first_name="Michael", last_name="Bolton")
    buffer = ChangeBuffer(person, last_name_min_length)
    buffer.first_name = "Mike"
    buffer.last_name = "B"

    result = asyncio.run(buffer.save())

    assert result == "saved"
    assert buffer.changes == []
    assert [error.key for error in buffer.errors] == ["last_name"]
    # save alone does not apply pending changes
    assert person.saved == [("Michael", "Bolton")]


def test_save_failure_propagates_and_keeps_state() -> None:
    person = SavingPerson(
        first_name="Michael",
        last_name="Bolton",
        fail_with=ConnectionError("database unavailable"),
    )
    buffer = ChangeBuffer(person, last_name_min_length)
    buffer.first_name = "Mike"
    buffer.last_name = "B"

    with pytest.raises(ConnectionError, match="database unavailable"):
        asyncio.run(buffer.save())

    assert buffer.changes == [Change(key="first_name", value="Mike")]
    assert [error.key for error in buffer.errors] == ["last_name"]


def test_save_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    person = SavingPerson(first_name="Michael", last_name="Bolton", fail_with=OSError("disk full"))
    buffer = ChangeBuffer(person)
    buffer.first_name = "Mike"

    with (
        caplog.at_level(logging.WARNING, logger="changebuffer.domain.buffer"),
        pytest.raises(OSError, match="disk full"),
    ):
        asyncio.run(buffer.save())

    assert "keeping 1 pending change(s)" in caplog.text


def test_save_can_be_retried_after_failure() -> None:
    person = SavingPerson(first_name="Michael", last_name="Bolton", fail_with=TimeoutError())
    buffer = ChangeBuffer(person)
    buffer.first_name = "Mike"

    with pytest.raises(TimeoutError):
        asyncio.run(buffer.persist())

    person.fail_with = None
    asyncio.run(buffer.persist())

    assert person.saved == [("Mike", "Bolton")]
    assert buffer.is_pristine


def test_save_without_capability_is_successful_noop() -> None:
    person = Person(first_name="Michael", last_name="Bolton")
    buffer = ChangeBuffer(person)
    buffer.first_name = "Mike"

    result = asyncio.run(buffer.save())

    assert result is None
    assert buffer.changes == [Change(key="first_name", value="Mike")]
    assert person.first_name == "Michael"


def test_save_accepts_synchronous_save_operation() -> None:
    person = SyncSavingPerson(first_name="Michael", last_name="Bolton")
    buffer = ChangeBuffer(person)
    buffer.first_name = "Mike"

    result = asyncio.run(buffer.save())

    assert result == 1
    assert buffer.changes == []


class _ThreadRecordingPerson(Person):
    save_thread: int | None = None
    save_loop: asyncio.AbstractEventLoop | None = None

    def save(self) -> None:
        self.save_thread = threading.get_ident()
        self.save_loop = asyncio.get_running_loop()


def test_synchronous_save_runs_on_the_event_loop_thread() -> None:
    person = _ThreadRecordingPerson(first_name="Michael", last_name="Bolton")
    buffer = ChangeBuffer(person)
    buffer.first_name = "Mike"

    async def scenario() -> asyncio.AbstractEventLoop:
        await buffer.save()
        return asyncio.get_running_loop()

    loop = asyncio.run(scenario())

    assert person.save_thread == threading.get_ident()
    assert person.save_loop is loop


def test_persist_executes_then_saves() -> None:
    person = SavingPerson(first_name="Michael", last_name="Bolton")
    buffer = ChangeBuffer(person, last_name_min_length)
    buffer.last_name = "Bob"

    result = asyncio.run(buffer.persist())

    assert result == "saved"
    assert person.saved == [("Michael", "Bob")]
    assert buffer.changes == []
    assert buffer.last_name == "Bob"


def test_state_is_kept_while_save_is_in_flight() -> None:
    async def scenario() -> None:
        record = GatedRecord(title="Draft")
        buffer = ChangeBuffer(record)
        buffer.set("title", "Final")

        pending = asyncio.create_task(buffer.persist())
        await record.started.wait()
        assert buffer.changes == [Change(key="title", value="Final")]

        record.release.set()
        await pending
        assert buffer.changes == []

    asyncio.run(scenario())


def test_default_policy_clears_changes_proposed_during_save() -> None:
    async def scenario() -> None:
        record = GatedRecord(title="Draft", body="")
        buffer = ChangeBuffer(record)
        buffer.set("title", "Final")

        pending = asyncio.create_task(buffer.persist())
        await record.started.wait()
        buffer.set("body", "Written while saving")
        record.release.set()
        saved = await pending

        assert saved == {"title": "Final", "body": ""}
        assert buffer.changes == []
        assert record.fields["body"] == ""

    asyncio.run(scenario())


def test_saved_policy_keeps_changes_proposed_during_save(saved_only_config: BufferConfig) -> None:
    async def scenario() -> None:
        record = GatedRecord(title="Draft", body="")
        buffer = ChangeBuffer(record, config=saved_only_config)
        buffer.set("title", "Final")
        buffer.set("body", "First pass")

        pending = asyncio.create_task(buffer.persist())
        await record.started.wait()
        buffer.set("body", "Second pass")
        buffer.set("summary", "New field")
        record.release.set()
        await pending

        assert buffer.changes == [
            Change(key="body", value="Second pass"),
            Change(key="summary", value="New field"),
        ]

    asyncio.run(scenario())


def test_policy_is_read_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHANGEBUFFER_SAVE_CLEAR_POLICY", "saved")

    async def scenario() -> None:
        record = GatedRecord(title="Draft")
        buffer = ChangeBuffer(record)
        buffer.set("title", "Final")

        pending = asyncio.create_task(buffer.save())
        await record.started.wait()
        buffer.set("title", "Final, really")
        record.release.set()
        await pending

        assert buffer.changes == [Change(key="title", value="Final, really")]

    asyncio.run(scenario())
