"""Shared test fixtures."""

import pytest

from collector.services.record_store import RecordStore
from collector.services.session import FormSession
from collector.services.submission import SubmissionPipeline
from collector.storage.local_slot import LocalSlotPersistence

from fakes import ENDPOINT, VALID_FIELDS, RecordingTransport


@pytest.fixture
def persistence(tmp_path):
    return LocalSlotPersistence(tmp_path / ".collector", "projectCollectorFormData")


@pytest.fixture
def store(persistence):
    return RecordStore.open(persistence)


@pytest.fixture
def filled_store(store):
    for name, value in VALID_FIELDS.items():
        store.set_field(name, value)
    return store


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def session(filled_store, transport):
    pipeline = SubmissionPipeline(filled_store, ENDPOINT, transport=transport, timeout=1.0)
    return FormSession(filled_store, pipeline)
