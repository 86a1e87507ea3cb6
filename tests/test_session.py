"""Tests for the form session: validation triggers, gating and resets."""

import pytest

from collector.errors.exceptions import NotFoundError
from collector.models.enums import SubmissionStatus
from collector.services.record_store import RecordStore
from collector.services.session import FormSession, ValidationState
from collector.services.submission import HttpxTransport, SubmissionPipeline
from collector.services.validator import resource_key

from fakes import ENDPOINT, VALID_FIELDS, FailingTransport, RecordingTransport


@pytest.fixture
def empty_session(store):
    return FormSession(store, SubmissionPipeline(store, ENDPOINT, transport=RecordingTransport()))


class TestTriggers:
    def test_change_before_first_blur_does_not_validate(self, empty_session):
        empty_session.change("whatsapp", "123")
        assert empty_session.validation.get("whatsapp") is None

    def test_blur_validates(self, empty_session):
        empty_session.change("whatsapp", "123")
        assert empty_session.blur("whatsapp") == "Please enter a 10-digit number"
        assert empty_session.validation.get("whatsapp") == "Please enter a 10-digit number"

    def test_change_after_blur_revalidates_live(self, empty_session):
        empty_session.change("email", "jane@")
        empty_session.blur("email")
        empty_session.change("email", "jane@example")
        assert empty_session.validation.get("email") is not None
        empty_session.change("email", "jane@example.com")
        assert empty_session.validation.get("email") is None

    def test_required_field_error_appears_while_typing_after_touch(self, empty_session):
        empty_session.change("title", "Orbit")
        empty_session.blur("title")
        empty_session.change("title", "")
        assert empty_session.validation.get("title") is not None

    def test_resource_link_blur_and_live(self, empty_session):
        item_id = empty_session.store.get().resources[0].id
        empty_session.change_resource(item_id, "link", "docs")
        assert empty_session.validation.get(resource_key(item_id)) is None
        assert empty_session.blur_resource(item_id) is not None
        empty_session.change_resource(item_id, "link", "docs.python.org")
        assert empty_session.validation.get(resource_key(item_id)) is None

    def test_blur_unknown_resource(self, empty_session):
        with pytest.raises(NotFoundError):
            empty_session.blur_resource("res_missing")

    def test_removing_resource_drops_its_errors(self, empty_session):
        item_id = empty_session.store.get().resources[0].id
        empty_session.change_resource(item_id, "link", "bad")
        empty_session.blur_resource(item_id)
        empty_session.remove_resource(item_id)
        assert empty_session.store.get().resources == ()
        assert empty_session.validation.errors == {}


class TestSnapshot:
    def test_reflects_record_and_state(self, session):
        session.change("whatsapp", "1")
        session.blur("whatsapp")
        snap = session.snapshot()
        assert snap.record.name == "Jane Doe"
        assert snap.validation_state == {"whatsapp": "Please enter a 10-digit number"}
        assert snap.progress == 90
        assert snap.is_submitting is False
        assert snap.submission_result is None


class TestSubmit:
    @pytest.mark.asyncio
    async def test_blocked_when_required_field_empty(self, empty_session):
        result = await empty_session.submit()
        assert result.status == SubmissionStatus.BLOCKED
        assert "name" in result.field_errors
        assert empty_session.snapshot().submission_result is result

    @pytest.mark.asyncio
    async def test_blocked_by_recorded_field_error(self, session, transport):
        session.change("whatsapp", "12345")
        session.blur("whatsapp")
        assert not session.can_submit()

        result = await session.submit()

        assert result.status == SubmissionStatus.BLOCKED
        assert result.field_errors == {"whatsapp": "Please enter a 10-digit number"}
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_blocked_by_bad_resource_link(self, session, transport):
        item_id = session.store.get().resources[0].id
        session.change_resource(item_id, "link", "not a url")
        result = await session.submit()
        assert result.status == SubmissionStatus.BLOCKED
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_success_clears_project_and_validation(self, session, transport):
        session.blur("title")
        result = await session.submit()

        assert result.ok
        assert len(transport.calls) == 1
        record = session.store.get()
        assert record.name == VALID_FIELDS["name"]
        assert record.title == ""
        assert session.validation.errors == {}
        assert session.snapshot().submission_result is result

    @pytest.mark.asyncio
    async def test_failure_keeps_everything(self, filled_store):
        session = FormSession(filled_store, SubmissionPipeline(filled_store, ENDPOINT, transport=FailingTransport()))
        before = filled_store.get()
        result = await session.submit()
        assert result.status == SubmissionStatus.FAILED
        assert filled_store.get() == before
        assert session.can_submit()


class TestResets:
    def test_reset_all(self, session):
        session.change("whatsapp", "1")
        session.blur("whatsapp")
        record = session.reset_all()
        assert record.name == ""
        assert session.validation.errors == {}
        session.change("whatsapp", "1")
        assert session.validation.get("whatsapp") is None

    def test_reset_project_fields(self, session):
        session.blur("title")
        session.change("title", "")
        record = session.reset_project_fields()
        assert record.email == VALID_FIELDS["email"]
        assert record.title == ""
        assert session.validation.errors == {}


def test_state_survives_reload(persistence):
    store = RecordStore.open(persistence)
    item = store.add_resource()
    store.update_resource(item.id, "remark", "Docs")

    reloaded = RecordStore.open(persistence)
    session = FormSession(reloaded, SubmissionPipeline(reloaded, ENDPOINT, transport=RecordingTransport()))
    session.change_resource(item.id, "link", "x.com")
    assert reloaded.get().resources[1].link == "x.com"
    assert reloaded.get().resources[1].remark == "Docs"


def test_validation_state_empty_message_means_no_error():
    state = ValidationState()
    state.record("email", "bad")
    state.record("email", None)
    assert state.get("email") is None
    assert not state.has_errors()


@pytest.mark.asyncio
async def test_bad_endpoint_is_reported_as_failed_result(filled_store):
    pipeline = SubmissionPipeline(filled_store, "https://exa\x00mple.com/", transport=HttpxTransport())
    session = FormSession(filled_store, pipeline)

    result = await session.submit()

    assert result.status == SubmissionStatus.FAILED
    assert session.snapshot().submission_result is result
    assert session.store.get().title == VALID_FIELDS["title"]
