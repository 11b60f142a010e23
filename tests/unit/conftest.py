"""Shared fixtures for unit tests."""

import uuid
from typing import Callable, List

import httpx
import pytest

from formhook.config import reset_config
from formhook.domain.models import DispatchResult
from formhook.domain.protocols import ResultCallback
from formhook.domain.submission import (
    FieldSubmission,
    SimpleForm,
    StaticField,
    SubmissionContext,
    TextField,
)
from formhook.plugins import CallbackRegistry, reset_registry

EMAIL_ID = uuid.UUID("0b0e3c1f-6a41-4d6a-9a55-2f8f1c2b7a01")
NAME_ID = uuid.UUID("5d7c2b9e-1e44-4c0b-8f3d-7a9e6b1c4d02")
SOURCE_ID = uuid.UUID("9e8d7c6b-5a49-4382-9170-f1e2d3c4b503")
MISSING_ID = uuid.UUID("11111111-2222-3333-4444-555555555555")

RECORDING_CALLBACK_ID = "tests.recording"


class RecordingCallback(ResultCallback):
    """Stores every result it receives."""

    results: List[DispatchResult] = []

    def handle_result(self, result: DispatchResult) -> None:
        RecordingCallback.results.append(result)


@pytest.fixture(autouse=True)
def reset_global_state(monkeypatch):
    """Give every test fresh configuration and registry state."""
    for name in (
        "FORMHOOK_REQUEST_TIMEOUT",
        "FORMHOOK_MERGE_URL_QUERY_INTO_BODY",
        "FORMHOOK_PLUGIN_DIRS",
        "FORMHOOK_LOG_LEVEL",
        "FORMHOOK_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    reset_registry()
    yield
    reset_config()
    reset_registry()


@pytest.fixture
def recorded_results() -> List[DispatchResult]:
    """Results delivered to RecordingCallback during the test."""
    RecordingCallback.results = []
    return RecordingCallback.results


@pytest.fixture
def registry(recorded_results) -> CallbackRegistry:
    """Registry containing only the recording callback."""
    return CallbackRegistry.from_declarations({RECORDING_CALLBACK_ID: RecordingCallback})


@pytest.fixture
def form() -> SimpleForm:
    return SimpleForm(
        fields=(
            TextField(id=EMAIL_ID, alias="email"),
            TextField(id=NAME_ID, alias="name"),
            StaticField(id=SOURCE_ID, value="website", alias="source"),
        ),
        name="Contact",
    )


@pytest.fixture
def context(form) -> SubmissionContext:
    return SubmissionContext(
        form=form,
        data=[FieldSubmission(EMAIL_ID, ("a@b.com",))],
        submission_id="submission-1",
    )


@pytest.fixture
def sent_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_transport(sent_requests) -> Callable[..., httpx.MockTransport]:
    """Build a MockTransport that records requests and answers with a fixed response."""

    def factory(status_code: int = 200, text: str = "ok", headers=None) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            request.read()
            sent_requests.append(request)
            return httpx.Response(status_code, text=text, headers=headers)

        return httpx.MockTransport(handler)

    return factory


@pytest.fixture
def transport(make_transport) -> httpx.MockTransport:
    return make_transport()
