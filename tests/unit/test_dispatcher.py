"""Tests for the dispatcher and the send data handler."""

import uuid
from unittest.mock import Mock

import httpx
import pytest
import structlog

from formhook.core.dispatcher import Dispatcher, dispatch
from formhook.core.handler import FormHandlerType, SendDataHandler
from formhook.domain.enums import TransmissionFormat
from formhook.domain.models import DispatchConfiguration, FieldMapping
from formhook.domain.protocols import ResultCallback
from formhook.domain.submission import FieldSubmission, SubmissionContext

from .conftest import EMAIL_ID, MISSING_ID, NAME_ID, RECORDING_CALLBACK_ID, SOURCE_ID


def make_config(transmission_format="Query String", fields=None, **kwargs):
    if fields is None:
        fields = [FieldMapping(field_id=EMAIL_ID, field_name="email")]
    return DispatchConfiguration(
        url=kwargs.pop("url", "https://example.test/hook"),
        method=kwargs.pop("method", "POST"),
        transmission_format=transmission_format,
        fields=tuple(fields),
        **kwargs,
    )


class TestTransmissionFormat:
    """Test matching of configured transmission format names."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Query String", TransmissionFormat.QUERY_STRING),
            ("QUERY STRING", TransmissionFormat.QUERY_STRING),
            ("form body", TransmissionFormat.FORM_BODY),
        ],
    )
    def test_parse(self, value, expected):
        assert TransmissionFormat.parse(value) is expected

    @pytest.mark.parametrize("value", [None, "", " Form Body ", "Query String ", "FormBody"])
    def test_parse_requires_exact_name(self, value):
        assert TransmissionFormat.parse(value) is None


class TestCollectPairs:
    """Test mapping submission data to outgoing pairs."""

    def test_unknown_fields_dropped(self, context):
        config = make_config(
            fields=[
                FieldMapping(field_id=MISSING_ID, field_name="ghost"),
                FieldMapping(field_id=EMAIL_ID, field_name="email"),
            ]
        )

        pairs = Dispatcher().collect_pairs(config, context)

        assert pairs == [("email", "a@b.com")]
        assert len(pairs) <= len(config.fields)

    def test_unsubmitted_field_dropped_server_side_kept(self, context):
        config = make_config(
            fields=[
                FieldMapping(field_id=NAME_ID, field_name="name"),
                FieldMapping(field_id=SOURCE_ID, field_name="source"),
                FieldMapping(field_id=EMAIL_ID, field_name="email"),
            ]
        )

        assert Dispatcher().collect_pairs(config, context) == [
            ("source", "website"),
            ("email", "a@b.com"),
        ]

    def test_values_grouped_across_submissions(self, form):
        context = SubmissionContext(
            form=form,
            data=[
                FieldSubmission(EMAIL_ID, ("a@b.com",)),
                FieldSubmission(EMAIL_ID, ("c@d.com",)),
            ],
        )

        assert Dispatcher().collect_pairs(make_config(), context) == [
            ("email", "a@b.com, c@d.com")
        ]


class TestHandle:
    """Test Dispatcher.handle."""

    def test_query_string_example(self, context, transport, sent_requests):
        Dispatcher(transport=transport).handle(make_config("Query String"), context)

        request = sent_requests[0]
        assert str(request.url) == "https://example.test/hook?email=a%40b.com"
        assert request.method == "POST"
        assert request.content == b""

    def test_form_body_example(self, context, transport, sent_requests):
        Dispatcher(transport=transport).handle(make_config("Form Body"), context)

        request = sent_requests[0]
        assert str(request.url) == "https://example.test/hook"
        assert request.method == "POST"
        assert request.content == b"email=a%40b.com"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"

    @pytest.mark.parametrize("fmt", ["query string", "FORM BODY", "form body"])
    def test_format_is_case_insensitive(self, context, transport, sent_requests, fmt):
        Dispatcher(transport=transport).handle(make_config(fmt), context)

        assert len(sent_requests) == 1

    @pytest.mark.parametrize("fmt", ["Unknown", "", "Json", " Form Body ", " Query String"])
    def test_unknown_format_is_a_no_op(self, context, transport, sent_requests, fmt):
        callback = Mock(spec=ResultCallback)

        Dispatcher(transport=transport).handle(make_config(fmt, callback=callback), context)

        assert sent_requests == []
        callback.handle_result.assert_not_called()

    def test_callback_receives_result_with_context(self, context, transport):
        callback = Mock(spec=ResultCallback)

        Dispatcher(transport=transport).handle(make_config(callback=callback), context)

        result = callback.handle_result.call_args.args[0]
        assert result.success is True
        assert result.response_text == "ok"
        assert result.context is context

    def test_duplicate_names_last_mapping_wins(self, form, transport, sent_requests):
        context = SubmissionContext(
            form=form,
            data=[
                FieldSubmission(EMAIL_ID, ("a@b.com",)),
                FieldSubmission(NAME_ID, ("Ada",)),
            ],
        )
        config = make_config(
            fields=[
                FieldMapping(field_id=EMAIL_ID, field_name="contact"),
                FieldMapping(field_id=NAME_ID, field_name="contact"),
            ]
        )

        Dispatcher(transport=transport).handle(config, context)

        assert str(sent_requests[0].url) == "https://example.test/hook?contact=Ada"

    def test_transport_failure_reaches_callback(self, context):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        callback = Mock(spec=ResultCallback)

        Dispatcher(transport=httpx.MockTransport(handler)).handle(
            make_config(callback=callback), context
        )

        result = callback.handle_result.call_args.args[0]
        assert result.success is False
        assert isinstance(result.error, httpx.ConnectError)
        assert result.response_text is None
        assert result.context is context

    def test_failure_without_callback_does_not_raise(self, context, make_transport):
        Dispatcher(transport=make_transport(503)).handle(make_config(), context)

    def test_log_context_bound_during_dispatch(self, context, transport):
        seen = {}

        class ContextCallback(ResultCallback):
            def handle_result(self, result):
                seen.update(structlog.contextvars.get_contextvars())

        Dispatcher(transport=transport).handle(
            make_config("form body", callback=ContextCallback()), context
        )

        assert seen == {"submission_id": "submission-1", "transmission_format": "Form Body"}
        assert structlog.contextvars.get_contextvars() == {}

    def test_callback_errors_propagate(self, context, transport):
        callback = Mock(spec=ResultCallback)
        callback.handle_result.side_effect = RuntimeError("callback bug")

        with pytest.raises(RuntimeError, match="callback bug"):
            Dispatcher(transport=transport).handle(make_config(callback=callback), context)

    def test_dispatch_helper(self, context, transport, sent_requests):
        dispatch(make_config(), context, transport=transport)

        assert len(sent_requests) == 1


class TestSendDataHandler:
    """Test the handler type wiring decode and dispatch together."""

    def test_type_metadata(self):
        handler = SendDataHandler(registry=Mock())

        assert isinstance(handler, FormHandlerType)
        assert handler.type_id == uuid.UUID("C76E8D1D5DF244CB8FA285C32312D688")
        assert handler.type_label == "Send Data"
        assert handler.directive == "formulate-send-data-handler"

    def test_stored_configuration_end_to_end(
        self, registry, recorded_results, context, transport, sent_requests
    ):
        handler = SendDataHandler(registry=registry, transport=transport)
        config = handler.deserialize_configuration(
            {
                "url": "https://example.test/hook",
                "method": "POST",
                "transmissionFormat": "Query String",
                "fields": [{"id": str(EMAIL_ID), "name": "email"}],
                "resultHandler": RECORDING_CALLBACK_ID,
            }
        )

        handler.prepare_handle_form(context, config)
        assert sent_requests == []

        handler.handle_form(context, config)

        assert str(sent_requests[0].url) == "https://example.test/hook?email=a%40b.com"
        assert len(recorded_results) == 1
        assert recorded_results[0].context is context

    def test_uninstalled_callback_is_fire_and_forget(
        self, registry, recorded_results, context, transport, sent_requests
    ):
        handler = SendDataHandler(registry=registry, transport=transport)
        config = handler.deserialize_configuration(
            {
                "url": "https://example.test/hook",
                "method": "GET",
                "transmissionFormat": "Query String",
                "resultHandler": "plugins.Uninstalled",
            }
        )

        handler.handle_form(context, config)

        assert config.callback is None
        assert len(sent_requests) == 1
        assert recorded_results == []

    def test_missing_fields_sends_no_data(self, registry, context, transport, sent_requests):
        handler = SendDataHandler(registry=registry, transport=transport)
        config = handler.deserialize_configuration(
            {"url": "https://example.test/hook", "method": "GET", "transmissionFormat": "Query String"}
        )

        handler.handle_form(context, config)

        assert str(sent_requests[0].url) == "https://example.test/hook"

    def test_default_registry(self):
        handler = SendDataHandler()

        assert "formhook.builtin_callbacks.log_result.LogResultCallback" in handler.registry
